"""Circuit breaker guarding the language model endpoint.

Three states:
  CLOSED:    calls pass through, counted failures accumulate
  OPEN:      threshold reached, calls are rejected without touching the model
  HALF_OPEN: cooldown elapsed, the next call is let through as a probe

Only exceptions listed in ``counted`` trip the breaker; a malformed answer
from a healthy model is not an endpoint failure.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from proofmark.services.exceptions import CircuitBreakerOpen, ModelNetworkError, UnsupportedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Async-safe circuit breaker for model calls."""

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        cooldown_seconds: float = 60,
        counted: tuple[type[BaseException], ...] = (ModelNetworkError, UnsupportedError),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self.counted = counted
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        if (
            self._state == CircuitState.OPEN
            and self._clock() - self._opened_at >= self.cooldown_seconds
        ):
            return CircuitState.HALF_OPEN
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failures

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func()`` unless the circuit is open.

        Takes a factory rather than a coroutine so nothing is created when
        the call is rejected.
        """
        async with self._lock:
            current = self.state
            if current == CircuitState.OPEN:
                raise CircuitBreakerOpen(self.name)
            if current == CircuitState.HALF_OPEN:
                logger.info("Circuit '%s' HALF_OPEN, letting a probe through", self.name)

        try:
            result = await func()
        except self.counted:
            await self._record_failure()
            raise

        await self._record_success()
        return result

    async def _record_success(self) -> None:
        async with self._lock:
            if self._state != CircuitState.CLOSED:
                logger.info("Circuit '%s' recovered, CLOSED", self.name)
            self._state = CircuitState.CLOSED
            self._failures = 0

    async def _record_failure(self) -> None:
        async with self._lock:
            self._failures += 1
            probe_failed = self.state == CircuitState.HALF_OPEN
            if probe_failed or self._failures >= self.failure_threshold:
                self._state = CircuitState.OPEN
                self._opened_at = self._clock()
                logger.warning(
                    "Circuit '%s' OPEN after %d failure(s) (cooldown %ss)",
                    self.name, self._failures, self.cooldown_seconds,
                )

    def reset(self) -> None:
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
