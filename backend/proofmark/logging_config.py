"""Logging setup shared by every entry point."""

import logging

from proofmark.config import Settings, settings

_JSON_FORMAT = '{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}'
_DEV_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(config: Settings | None = None) -> None:
    """Configure the root logger from settings.

    Structured one-line JSON records outside dev mode, readable lines otherwise.
    """
    cfg = config or settings
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format=_DEV_FORMAT if cfg.dev_mode else _JSON_FORMAT,
    )
