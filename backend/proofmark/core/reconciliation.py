"""Reconciliation Engine: drives one editable text buffer through proofreading.

States:
  IDLE:               nothing to show (no request made, buffer edited, or no corrections left)
  PROOFREADING:       a request is in flight
  SHOWING_HIGHLIGHTS: corrections are located and painted
  SHOWING_POPOVER:    the caret sits on a correction and its details are shown

The engine is the only thing that mutates the (buffer, correction store,
highlight overlay) triple. Every proofread request gets a monotonic token
and records the buffer version it was made against; an answer arriving
after a newer request or after the buffer changed is discarded.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from proofmark.config import settings
from proofmark.core.correction_store import CorrectionStore
from proofmark.core.highlight_overlay import HighlightOverlay
from proofmark.core.span_locator import locate_report
from proofmark.models.correction import Correction, ErrorType, ProofreadResult, RawCorrection
from proofmark.services.exceptions import LanguageModelError
from proofmark.services.proofreader import Proofreader
from proofmark.services.report import describe_error

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    PROOFREADING = "proofreading"
    SHOWING_HIGHLIGHTS = "showing_highlights"
    SHOWING_POPOVER = "showing_popover"


@dataclass(frozen=True)
class Popover:
    """What the correction popover displays."""

    error_type: ErrorType
    heading: str
    corrected_text: str
    explanation: str
    offset: int


@dataclass
class ProofreadOutcome:
    token: int
    corrections: list[Correction] = field(default_factory=list)
    unlocatable: list[RawCorrection] = field(default_factory=list)
    result: ProofreadResult | None = None
    notice: str | None = None
    stale: bool = False

    @property
    def corrected_input(self) -> str | None:
        return self.result.corrected_input if self.result is not None else None


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class CaretMoved:
    offset: int


@dataclass(frozen=True)
class KeyReleased:
    key: str
    offset: int


@dataclass(frozen=True)
class AcceptRequested:
    pass


@dataclass(frozen=True)
class DismissRequested:
    pass


@dataclass(frozen=True)
class TextEdited:
    text: str


Event = SubmitRequested | CaretMoved | KeyReleased | AcceptRequested | DismissRequested | TextEdited


class ReconciliationEngine:
    """State object for one text buffer and its pending corrections."""

    def __init__(
        self,
        proofreader: Proofreader | None,
        text: str = "",
        overlay: HighlightOverlay | None = None,
    ) -> None:
        self.proofreader = proofreader
        self.store = CorrectionStore()
        self.overlay = overlay or HighlightOverlay.from_legend(settings.legend_text)
        self.state = EngineState.IDLE
        self.current_correction: Correction | None = None
        self.popover: Popover | None = None
        self.last_notice: str | None = None
        self._buffer = text
        self._buffer_version = 0
        self._request_counter = 0

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def buffer_version(self) -> int:
        return self._buffer_version

    @property
    def request_counter(self) -> int:
        return self._request_counter

    @property
    def corrections(self) -> tuple[Correction, ...]:
        return self.store.corrections

    # -- transitions ---------------------------------------------------------

    async def submit(self) -> ProofreadOutcome:
        """Proofread the current buffer and paint the located corrections."""
        self._request_counter += 1
        token = self._request_counter
        version = self._buffer_version
        text = self._buffer

        self.overlay.clear_all()
        self.store.clear()
        self._hide_popover()
        self.current_correction = None
        self.last_notice = None

        if not text.strip():
            logger.warning("No text to proofread")
            self.state = EngineState.IDLE
            return ProofreadOutcome(token=token)

        self.state = EngineState.PROOFREADING
        outcome = ProofreadOutcome(token=token)
        raw: list[RawCorrection] = []

        if self.proofreader is None:
            logger.warning("No language model configured, no corrections")
            outcome.notice = "Proofreading is not available - no corrections"
        else:
            logger.info("Proofread request #%d (%d chars)", token, len(text))
            try:
                result = await self.proofreader.proofread(text)
            except (LanguageModelError, TimeoutError) as exc:
                logger.error("Proofreading request #%d failed: %s", token, exc)
                outcome.notice = describe_error(exc)
            else:
                raw = result.corrections
                outcome.result = result

        if token != self._request_counter or version != self._buffer_version:
            logger.info(
                "Discarding stale proofread result #%d (latest #%d, buffer v%d -> v%d)",
                token, self._request_counter, version, self._buffer_version,
            )
            outcome.stale = True
            return outcome

        report = locate_report(text, raw)
        outcome.corrections = report.located
        outcome.unlocatable = report.unlocatable
        self.last_notice = outcome.notice

        self.store.replace(report.located)
        self.overlay.render(report.located)
        self.state = EngineState.SHOWING_HIGHLIGHTS if report.located else EngineState.IDLE
        logger.info("Request #%d: %d correction(s) highlighted", token, len(report.located))
        return outcome

    def query_at(self, offset: int) -> Correction | None:
        """Show the popover for the correction under the caret, or hide it."""
        correction = self.store.find_at(offset)
        self.current_correction = correction

        if correction is None:
            self._hide_popover()
            self._settle()
            return None

        heading = correction.error_type.heading
        self.popover = Popover(
            error_type=correction.error_type,
            heading=heading,
            corrected_text=correction.corrected_text,
            explanation=correction.explanation,
            offset=offset,
        )
        self.overlay.mark_heading(correction.error_type, heading)
        self.state = EngineState.SHOWING_POPOVER
        logger.debug(
            "Popover for %s at %d: %r", correction.error_type.value, offset, correction.corrected_text,
        )
        return correction

    def accept(self) -> bool:
        """Apply the current correction to the buffer and reconcile the rest."""
        accepted = self.current_correction
        if accepted is None:
            logger.warning("No correction to accept")
            return False

        start, end = accepted.span
        logger.info(
            "Accepting %s correction: %r -> %r",
            accepted.error_type.value, self._buffer[start:end], accepted.corrected_text,
        )
        self._buffer = self._buffer[:start] + accepted.corrected_text + self._buffer[end:]
        self._buffer_version += 1

        self.overlay.clear_all()
        remaining = self.store.apply_accept(accepted)
        if remaining:
            self.overlay.render(remaining)
            logger.debug("Re-applied highlights for %d remaining correction(s)", len(remaining))

        self.current_correction = None
        self._hide_popover()
        self._settle()
        return True

    def dismiss(self) -> None:
        self._hide_popover()
        self._settle()

    def edit(self, text: str) -> None:
        """User typing: every live correction is stale from here on."""
        if text == self._buffer:
            return
        self._buffer = text
        self._buffer_version += 1
        self.store.clear()
        self.overlay.clear_all()
        self.current_correction = None
        self._hide_popover()
        self.state = EngineState.IDLE

    async def handle(self, event: Event) -> None:
        if isinstance(event, SubmitRequested):
            await self.submit()
        elif isinstance(event, CaretMoved):
            self.query_at(event.offset)
        elif isinstance(event, KeyReleased):
            # Escape closes the popover and must not reopen it
            if event.key == "Escape":
                self.dismiss()
                return
            self.query_at(event.offset)
        elif isinstance(event, AcceptRequested):
            self.accept()
        elif isinstance(event, DismissRequested):
            self.dismiss()
        elif isinstance(event, TextEdited):
            self.edit(event.text)
        else:
            raise TypeError(f"Unknown event: {event!r}")

    # -- helpers -------------------------------------------------------------

    def _hide_popover(self) -> None:
        self.popover = None
        self.overlay.clear_heading()

    def _settle(self) -> None:
        if self.state == EngineState.PROOFREADING:
            return
        self.state = EngineState.SHOWING_HIGHLIGHTS if self.store else EngineState.IDLE
