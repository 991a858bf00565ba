"""Parse the model's structured proofreading answer."""

import json
import logging
import re

from pydantic import ValidationError

from proofmark.models.correction import ProofreadResult
from proofmark.services.exceptions import ModelOutputError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*\})\s*```", re.DOTALL)


def parse_proofread_result(content: str | None) -> ProofreadResult:
    """Parse and validate a raw model answer.

    Accepts plain JSON or a single object wrapped in a markdown ```json fence.
    Anything else, and any schema violation, raises ModelOutputError.
    """
    if not content or not content.strip():
        raise ModelOutputError("Model returned an empty answer")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        match = _FENCE_RE.search(content)
        if match is None:
            logger.warning("Could not parse JSON from model answer: %s", content[:200])
            raise ModelOutputError(f"Model answer is not valid JSON: {exc}") from exc
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError as inner:
            logger.warning("Fenced block is not valid JSON: %s", match.group(1)[:200])
            raise ModelOutputError(f"Model answer is not valid JSON: {inner}") from inner

    if not isinstance(data, dict):
        raise ModelOutputError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        return ProofreadResult.model_validate(data)
    except ValidationError as exc:
        logger.warning("Model answer does not match the proofreading schema: %s", exc)
        raise ModelOutputError(f"Model answer does not match the schema: {exc}") from exc
