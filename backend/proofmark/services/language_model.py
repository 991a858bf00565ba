"""Language model collaborator.

The proofreading core only ever sees the narrow interface below:
availability probing, session creation, ``prompt`` with an output schema
and ``destroy``. ``HttpLanguageModelService`` implements it over any
OpenAI-compatible ``/v1/chat/completions`` endpoint (Ollama, vLLM, NIM),
constraining the answer with ``response_format: json_schema``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from proofmark.config import Settings, settings
from proofmark.core.circuit_breaker import CircuitBreaker
from proofmark.services.exceptions import (
    LanguageModelError,
    ModelNetworkError,
    ModelOutputError,
    UnsupportedError,
)

logger = logging.getLogger(__name__)

# Statuses meaning "this endpoint/model cannot do that", not "try again later"
_UNSUPPORTED_STATUSES = {400, 404, 405, 422, 501}


class Availability(str, Enum):
    UNAVAILABLE = "unavailable"
    DOWNLOADABLE = "downloadable"
    DOWNLOADING = "downloading"
    AVAILABLE = "available"


@dataclass
class ModelCapabilities:
    """Expected input/output languages for a session."""

    input_languages: list[str] = field(default_factory=lambda: list(settings.expected_languages))
    output_languages: list[str] = field(default_factory=lambda: list(settings.expected_languages))


class LanguageModelSession(Protocol):
    async def prompt(self, user_text: str, output_schema: dict) -> str: ...

    async def destroy(self) -> None: ...


class LanguageModelService(Protocol):
    async def check_availability(self, capabilities: ModelCapabilities) -> Availability: ...

    async def create_session(
        self, system_prompt: str, capabilities: ModelCapabilities
    ) -> LanguageModelSession: ...


@asynccontextmanager
async def session_scope(
    service: LanguageModelService,
    system_prompt: str,
    capabilities: ModelCapabilities | None = None,
) -> AsyncIterator[LanguageModelSession]:
    """Create a session and destroy it exactly once, whatever happens inside."""
    session = await service.create_session(system_prompt, capabilities or ModelCapabilities())
    try:
        yield session
    finally:
        try:
            await session.destroy()
        except Exception:
            logger.warning("Failed to destroy language model session", exc_info=True)


# ---------------------------------------------------------------------------
# HTTP implementation
# ---------------------------------------------------------------------------


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    logger.error("Model endpoint error %d: %s", response.status_code, response.text[:500])
    if response.status_code in _UNSUPPORTED_STATUSES:
        raise UnsupportedError(f"Model endpoint rejected the request ({response.status_code})")
    raise ModelNetworkError(f"Model endpoint failed ({response.status_code})")


class HttpLanguageModelSession:
    """A session bound to one system prompt and one HTTP client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        system_prompt: str,
        capabilities: ModelCapabilities,
        breaker: CircuitBreaker,
        config: Settings,
    ) -> None:
        self._client = client
        self.system_prompt = system_prompt
        self.capabilities = capabilities
        self._breaker = breaker
        self._config = config
        self.destroyed = False

    async def prompt(self, user_text: str, output_schema: dict) -> str:
        if self.destroyed:
            raise LanguageModelError("Session has been destroyed")

        payload = {
            "model": self._config.llm_model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": user_text},
            ],
            "max_tokens": self._config.llm_max_tokens,
            "temperature": self._config.llm_temperature,
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": "proofreading", "strict": True, "schema": output_schema},
            },
        }
        logger.info(
            "POST /chat/completions  model=%s  prompt_len=%d",
            self._config.llm_model, len(user_text),
        )
        data = await self._breaker.call(lambda: self._post_chat(payload))
        return _extract_content(data)

    async def _post_chat(self, payload: dict) -> dict:
        try:
            response = await _post_with_retry(
                self._client, "/chat/completions", payload, self._config.llm_max_retries,
            )
        except httpx.TimeoutException as exc:
            raise ModelNetworkError(f"Model request timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise ModelNetworkError(f"Model endpoint unreachable: {exc}") from exc

        _raise_for_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise ModelOutputError("Model endpoint returned a non-JSON body") from exc

    async def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        await self._client.aclose()
        logger.debug("Language model session destroyed")


async def _post_with_retry(
    client: httpx.AsyncClient, path: str, payload: dict, attempts: int
) -> httpx.Response:
    """POST retrying on connection errors only."""

    @retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type((httpx.ConnectError,)),
        reraise=True,
    )
    async def _send() -> httpx.Response:
        return await client.post(path, json=payload)

    return await _send()


def _extract_content(response: dict) -> str:
    """Pull the assistant text out of a chat completion body."""
    try:
        choice = response["choices"][0]
        content = choice["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ModelOutputError(f"Unexpected completion body: {exc}") from exc

    if content is None:
        finish_reason = choice.get("finish_reason", "unknown")
        logger.warning("Model returned null content (finish_reason=%s)", finish_reason)
        raise ModelOutputError(f"Model returned no content (finish_reason={finish_reason})")

    logger.info("Model raw answer (%d chars): %s", len(content), content[:500])
    return content


class HttpLanguageModelService:
    """LanguageModelService backed by an OpenAI-compatible HTTP API."""

    def __init__(
        self,
        config: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self.config = config or settings
        self._transport = transport
        self.breaker = breaker or CircuitBreaker(
            "language_model",
            failure_threshold=self.config.circuit_breaker_failure_threshold,
            cooldown_seconds=self.config.circuit_breaker_cooldown_seconds,
        )

    def _new_client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self.config.llm_api_key:
            headers["Authorization"] = f"Bearer {self.config.llm_api_key}"
        return httpx.AsyncClient(
            base_url=self.config.llm_base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(
                self.config.llm_timeout_seconds, connect=self.config.llm_connect_timeout_seconds,
            ),
            transport=self._transport,
        )

    async def check_availability(self, capabilities: ModelCapabilities) -> Availability:
        unsupported = set(capabilities.output_languages) - set(self.config.expected_languages)
        if unsupported:
            logger.warning("Unsupported output language(s): %s", sorted(unsupported))
            return Availability.UNAVAILABLE

        async with self._new_client() as client:
            try:
                response = await client.get("/models")
            except httpx.RequestError as exc:
                logger.warning("Model endpoint unreachable: %s", exc)
                return Availability.UNAVAILABLE

        if response.status_code != 200:
            logger.warning("Model listing failed with status %d", response.status_code)
            return Availability.UNAVAILABLE

        try:
            models = {m.get("id") for m in response.json().get("data", [])}
        except (ValueError, AttributeError, TypeError):
            logger.warning("Model listing body unparseable")
            return Availability.UNAVAILABLE

        if self.config.llm_model in models:
            return Availability.AVAILABLE
        logger.info("Model %s not present on endpoint, needs pulling", self.config.llm_model)
        return Availability.DOWNLOADABLE

    async def create_session(
        self, system_prompt: str, capabilities: ModelCapabilities
    ) -> HttpLanguageModelSession:
        return HttpLanguageModelSession(
            self._new_client(), system_prompt, capabilities, self.breaker, self.config,
        )
