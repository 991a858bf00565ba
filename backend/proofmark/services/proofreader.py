"""Proofreading through the language model collaborator."""

import logging

from proofmark.core.proofread_prompts import PROOFREAD_SYSTEM_PROMPT, build_user_prompt
from proofmark.models.correction import ProofreadResult, proofreading_schema
from proofmark.services.exceptions import UnsupportedError
from proofmark.services.language_model import (
    Availability,
    LanguageModelService,
    ModelCapabilities,
    session_scope,
)
from proofmark.utils.json_parser import parse_proofread_result

logger = logging.getLogger(__name__)


class Proofreader:
    """Sends text to the model and returns its validated structured answer.

    Errors are raised as ``LanguageModelError`` subclasses; deciding how to
    degrade is left to the caller.
    """

    def __init__(
        self,
        service: LanguageModelService,
        capabilities: ModelCapabilities | None = None,
        system_prompt: str = PROOFREAD_SYSTEM_PROMPT,
    ) -> None:
        self.service = service
        self.capabilities = capabilities or ModelCapabilities()
        self.system_prompt = system_prompt

    async def availability(self) -> Availability:
        return await self.service.check_availability(self.capabilities)

    async def proofread(self, text: str) -> ProofreadResult:
        availability = await self.availability()
        logger.info("Language model availability: %s", availability.value)
        if availability == Availability.UNAVAILABLE:
            raise UnsupportedError("Language model is unavailable")
        if availability in (Availability.DOWNLOADABLE, Availability.DOWNLOADING):
            logger.info("Model download required before the first answer")

        async with session_scope(self.service, self.system_prompt, self.capabilities) as session:
            raw = await session.prompt(build_user_prompt(text), proofreading_schema())

        result = parse_proofread_result(raw)
        logger.info("Model reported %d correction(s)", len(result.corrections))
        for i, c in enumerate(result.corrections, 1):
            logger.debug(
                "  %d. %s: %r -> %r", i, c.error_type.value, c.original_text, c.corrected_text,
            )
        return result
