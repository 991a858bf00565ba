"""Shared test fixtures for Proofmark tests."""

import json

import pytest

from proofmark.config import Settings
from proofmark.core.reconciliation import ReconciliationEngine
from proofmark.models.correction import ErrorType, RawCorrection
from proofmark.services.exceptions import LanguageModelError
from proofmark.services.language_model import Availability, ModelCapabilities
from proofmark.services.proofreader import Proofreader


def raw(original: str, corrected: str, error_type: str = "spelling", explanation: str = "") -> RawCorrection:
    return RawCorrection(
        original_text=original,
        corrected_text=corrected,
        error_type=ErrorType(error_type),
        explanation=explanation,
    )


def answer(corrected_input: str, *corrections: dict) -> str:
    """Build a model answer in wire format."""
    return json.dumps({"correctedInput": corrected_input, "corrections": list(corrections)})


# ---------------------------------------------------------------------------
# Fake language model collaborator
# ---------------------------------------------------------------------------


class FakeSession:
    def __init__(self, service: "FakeService") -> None:
        self.service = service
        self.destroy_calls = 0

    async def prompt(self, user_text: str, output_schema: dict) -> str:
        self.service.prompts.append(user_text)
        if self.service.before_answer is not None:
            await self.service.before_answer()
        if self.service.prompt_error is not None:
            raise self.service.prompt_error
        return self.service.answers.pop(0)

    async def destroy(self) -> None:
        self.destroy_calls += 1


class FakeService:
    """Scripted LanguageModelService: answers are consumed in order."""

    def __init__(self, *answers: str, availability: Availability = Availability.AVAILABLE) -> None:
        self.answers = list(answers)
        self.availability = availability
        self.prompts: list[str] = []
        self.sessions: list[FakeSession] = []
        self.prompt_error: LanguageModelError | None = None
        self.create_error: LanguageModelError | None = None
        self.before_answer = None

    async def check_availability(self, capabilities: ModelCapabilities) -> Availability:
        return self.availability

    async def create_session(self, system_prompt: str, capabilities: ModelCapabilities) -> FakeSession:
        if self.create_error is not None:
            raise self.create_error
        session = FakeSession(self)
        self.sessions.append(session)
        return session


@pytest.fixture
def fake_service() -> FakeService:
    return FakeService()


@pytest.fixture
def make_engine():
    """Factory: engine over a FakeService scripted with *answers*."""

    def _make(text: str, *answers: str) -> tuple[ReconciliationEngine, FakeService]:
        service = FakeService(*answers)
        engine = ReconciliationEngine(Proofreader(service), text=text)
        return engine, service

    return _make


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        llm_base_url="http://model.test/v1",
        llm_model="proof-model",
        llm_api_key="test-key",
        llm_max_retries=1,
        circuit_breaker_failure_threshold=2,
        circuit_breaker_cooldown_seconds=30,
        _env_file=None,
    )
