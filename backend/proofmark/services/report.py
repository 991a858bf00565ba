"""Plain-text proofreading report and user-facing error notes."""

from collections.abc import Sequence

from proofmark.models.correction import Correction, ProofreadResult
from proofmark.services.exceptions import (
    CircuitBreakerOpen,
    LanguageModelError,
    ModelNetworkError,
    ModelOutputError,
    UnsupportedError,
)

_RULE = "=" * 60


def describe_error(exc: BaseException) -> str:
    """Short note shown to the user instead of corrections."""
    if isinstance(exc, CircuitBreakerOpen):
        return "The language model is temporarily unavailable - no corrections"
    if isinstance(exc, UnsupportedError):
        return "This feature might not be supported on your browser or system - no corrections"
    if isinstance(exc, ModelNetworkError):
        return "Network error while talking to the language model - no corrections"
    if isinstance(exc, ModelOutputError):
        return "The model couldn't generate valid JSON - this can happen with complex text - no corrections"
    if isinstance(exc, LanguageModelError):
        return f"Proofreading failed: {exc} - no corrections"
    return f"Unexpected error: {exc} - no corrections"


def format_report(
    text: str,
    result: ProofreadResult,
    located: Sequence[Correction],
) -> str:
    lines = [
        "PROOFREADING RESULTS:",
        _RULE,
        f"Original text: {text}",
        "",
        "CORRECTED TEXT:",
        result.corrected_input,
        "",
        "CORRECTIONS FOUND:",
    ]

    if not located:
        lines.append("No corrections found - text is already perfect!")
        return "\n".join(lines) + "\n"

    lines.append(f"Found {len(located)} corrections:")
    for i, c in enumerate(located, 1):
        lines.extend([
            "",
            f"--- Correction {i} ---",
            f"Original text: {text[c.start_index:c.end_index]}",
            f"Correction: {c.corrected_text}",
            f"Position: {c.start_index}-{c.end_index}",
            f"Error type: {c.error_type.value}",
            f"Explanation: {c.explanation}",
        ])

    dropped = sum(1 for r in result.corrections if not r.is_noop) - len(located)
    if dropped:
        lines.extend(["", f"{dropped} reported correction(s) could not be placed in the text"])
    return "\n".join(lines) + "\n"
