"""Correction Store: the live Correction Set for one text buffer."""

import logging
from collections.abc import Iterable, Iterator

from proofmark.models.correction import Correction

logger = logging.getLogger(__name__)


class CorrectionSetError(ValueError):
    """Raised when a Correction Set is unsorted, overlapping or out of bounds."""


def _check_ordered_disjoint(corrections: list[Correction]) -> None:
    for prev, nxt in zip(corrections, corrections[1:]):
        if nxt.start_index < prev.end_index:
            raise CorrectionSetError(
                f"Corrections overlap or are out of order: "
                f"{prev.start_index}-{prev.end_index} then {nxt.start_index}-{nxt.end_index}"
            )


class CorrectionStore:
    """Ordered, pairwise-disjoint set of located corrections."""

    def __init__(self, corrections: Iterable[Correction] = ()) -> None:
        self._corrections: list[Correction] = []
        self.replace(corrections)

    def __len__(self) -> int:
        return len(self._corrections)

    def __iter__(self) -> Iterator[Correction]:
        return iter(tuple(self._corrections))

    def __bool__(self) -> bool:
        return bool(self._corrections)

    @property
    def corrections(self) -> tuple[Correction, ...]:
        return tuple(self._corrections)

    def replace(self, corrections: Iterable[Correction]) -> None:
        """Install a new Correction Set, discarding the previous one."""
        items = list(corrections)
        _check_ordered_disjoint(items)
        self._corrections = items

    def clear(self) -> None:
        self._corrections = []

    def check_bounds(self, buffer_length: int) -> None:
        for c in self._corrections:
            if c.end_index > buffer_length:
                raise CorrectionSetError(
                    f"Correction {c.start_index}-{c.end_index} exceeds buffer length {buffer_length}"
                )

    def find_at(self, offset: int) -> Correction | None:
        """Return the correction whose span contains *offset*, boundaries included.

        Disjointness means at most one can match; if that were ever violated
        the first one in order wins.
        """
        for c in self._corrections:
            if c.covers(offset):
                return c
        return None

    def reindex_after_accept(
        self,
        accepted: Correction,
        length_delta: int | None = None,
    ) -> list[Correction]:
        """Compute the next Correction Set after *accepted* was applied.

        Corrections ending at or before the accepted start are kept as is,
        those starting strictly after its end are shifted by *length_delta*,
        everything else (including the accepted one) is dropped. The store
        itself is left untouched.
        """
        delta = accepted.length_delta if length_delta is None else length_delta
        updated: list[Correction] = []

        for c in self._corrections:
            if c is accepted:
                continue
            if c.start_index > accepted.end_index:
                updated.append(c.shifted(delta))
            elif c.end_index <= accepted.start_index:
                updated.append(c)
            else:
                logger.debug(
                    "Dropping correction %r at %d-%d (overlaps accepted %d-%d)",
                    c.original_text, c.start_index, c.end_index,
                    accepted.start_index, accepted.end_index,
                )

        return updated

    def apply_accept(self, accepted: Correction) -> list[Correction]:
        updated = self.reindex_after_accept(accepted)
        self.replace(updated)
        return updated
