"""Highlight Overlay: one independent highlight channel per error category.

Each channel may own a permanent label range (the category's word in the
legend). ``clear`` only ever removes the dynamically added ranges, so the
legend stays painted across every proofread and every accepted correction.
Ranges in different channels may overlap freely.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Literal

from proofmark.models.correction import Correction, ErrorType

logger = logging.getLogger(__name__)

RangeTarget = Literal["buffer", "legend", "popover"]


class HighlightError(ValueError):
    """Raised when a range would overlap another range of the same channel."""


@dataclass(frozen=True)
class HighlightRange:
    start: int
    end: int
    target: RangeTarget = "buffer"

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise HighlightError(f"Invalid highlight range {self.start}-{self.end}")

    def overlaps(self, other: "HighlightRange") -> bool:
        return (
            self.target == other.target
            and self.start < other.end
            and other.start < self.end
        )


class HighlightChannel:
    """Ranges currently painted for a single error category."""

    def __init__(self, error_type: ErrorType, label: HighlightRange | None = None) -> None:
        self.error_type = error_type
        self.label = label
        self._dynamic: list[HighlightRange] = []

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self) -> Iterator[HighlightRange]:
        return iter(self.ranges)

    @property
    def ranges(self) -> list[HighlightRange]:
        """Label first (if any), then dynamic ranges in insertion order."""
        head = [self.label] if self.label is not None else []
        return head + list(self._dynamic)

    @property
    def dynamic_ranges(self) -> list[HighlightRange]:
        return list(self._dynamic)

    def add(self, highlight: HighlightRange) -> None:
        for existing in self._dynamic:
            if existing.overlaps(highlight):
                raise HighlightError(
                    f"{self.error_type.value}: {highlight.start}-{highlight.end} overlaps "
                    f"{existing.start}-{existing.end}"
                )
        self._dynamic.append(highlight)

    def clear(self) -> None:
        self._dynamic.clear()

    def discard_target(self, target: RangeTarget) -> None:
        self._dynamic = [r for r in self._dynamic if r.target != target]


class HighlightOverlay:
    """All six channels, rendered over the editable text."""

    def __init__(self, labels: dict[ErrorType, HighlightRange] | None = None) -> None:
        labels = labels or {}
        self._channels: dict[ErrorType, HighlightChannel] = {
            error_type: HighlightChannel(error_type, labels.get(error_type))
            for error_type in ErrorType
        }

    @classmethod
    def from_legend(cls, legend_text: str) -> "HighlightOverlay":
        """Build the overlay with one label range per word of *legend_text*.

        Leading whitespace is skipped; words are single-space separated and
        map onto the categories in declaration order. Surplus words are ignored.
        """
        offset = len(legend_text) - len(legend_text.lstrip())
        labels: dict[ErrorType, HighlightRange] = {}
        for error_type, word in zip(ErrorType, legend_text.lstrip().split(" ")):
            if word:
                labels[error_type] = HighlightRange(offset, offset + len(word), "legend")
            offset += len(word) + 1
        return cls(labels)

    def channel(self, error_type: ErrorType) -> HighlightChannel:
        return self._channels[error_type]

    def channels(self) -> Iterable[HighlightChannel]:
        return self._channels.values()

    def render(self, corrections: Iterable[Correction]) -> None:
        count = 0
        for c in corrections:
            self._channels[c.error_type].add(HighlightRange(c.start_index, c.end_index))
            count += 1
        logger.debug("Rendered %d highlight(s)", count)

    def clear_all(self) -> None:
        for channel in self._channels.values():
            channel.clear()

    def mark_heading(self, error_type: ErrorType, heading: str) -> None:
        """Paint the popover heading in its category's colour.

        Only one heading is painted at a time; a previous one is replaced.
        """
        self.clear_heading()
        if heading:
            self._channels[error_type].add(HighlightRange(0, len(heading), "popover"))

    def clear_heading(self) -> None:
        for channel in self._channels.values():
            channel.discard_target("popover")

    def snapshot(self) -> dict[str, list[tuple[int, int]]]:
        """Dynamic buffer ranges per category, as a UI would paint them."""
        return {
            error_type.value: [
                (r.start, r.end) for r in channel.dynamic_ranges if r.target == "buffer"
            ]
            for error_type, channel in self._channels.items()
        }
