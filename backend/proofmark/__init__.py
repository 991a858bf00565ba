"""Inline proofreading core: span location, correction reconciliation and highlight channels."""

__version__ = "0.1.0"
