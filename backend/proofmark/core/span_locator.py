"""Locate model-reported error snippets inside the proofread text.

The model answers with text snippets rather than offsets, so each snippet
is searched for in the original text. A single forward-only cursor keeps
the located spans disjoint and in ascending order:

  * no-op entries (original == corrected) are skipped without moving the cursor
  * a hit at ``s`` yields ``[s, s + len(original))`` and moves the cursor to its end
  * a miss is dropped and logged; the cursor stays where it was

A snippet that occurs twice can only be placed twice if the model lists
the occurrences left to right. Unlocatable snippets are never guessed.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from proofmark.models.correction import Correction, RawCorrection

logger = logging.getLogger(__name__)


@dataclass
class LocateReport:
    """Located corrections plus the raw entries that were dropped."""

    located: list[Correction] = field(default_factory=list)
    unlocatable: list[RawCorrection] = field(default_factory=list)
    noops: list[RawCorrection] = field(default_factory=list)


def locate_report(text: str, raw_corrections: Iterable[RawCorrection]) -> LocateReport:
    """Run the cursor search and keep track of everything that was dropped."""
    report = LocateReport()
    search_from = 0

    for raw in raw_corrections:
        if raw.is_noop:
            logger.debug("Skipping no-op correction %r", raw.original_text)
            report.noops.append(raw)
            continue

        # An empty snippet would give a zero-width span
        start = text.find(raw.original_text, search_from) if raw.original_text else -1
        if start == -1:
            logger.warning(
                "Could not locate %r (%s) in text from offset %d, dropped",
                raw.original_text, raw.error_type.value, search_from,
            )
            report.unlocatable.append(raw)
            continue

        correction = Correction.from_raw(raw, start)
        report.located.append(correction)
        search_from = correction.end_index
        logger.debug(
            "Located %r at %d-%d", raw.original_text, correction.start_index, correction.end_index,
        )

    if report.unlocatable:
        logger.info(
            "Located %d correction(s), %d unlocatable",
            len(report.located), len(report.unlocatable),
        )
    return report


def locate(text: str, raw_corrections: Iterable[RawCorrection]) -> list[Correction]:
    """Return located corrections, ascending by start_index and pairwise disjoint."""
    return locate_report(text, raw_corrections).located
