"""Language model exceptions for Proofmark."""


class LanguageModelError(Exception):
    """Base exception for anything that goes wrong talking to the model."""

    pass


class UnsupportedError(LanguageModelError):
    """Raised when the model is unavailable or the host does not support it."""

    pass


class ModelNetworkError(LanguageModelError):
    """Raised when the model endpoint cannot be reached or times out."""

    pass


class ModelOutputError(LanguageModelError):
    """Raised when the model's answer is not valid JSON matching the schema."""

    pass


class CircuitBreakerOpen(LanguageModelError):
    """Raised when the circuit is open and calls are being rejected."""

    def __init__(self, name: str):
        super().__init__(f"Circuit breaker '{name}' is OPEN, call rejected")
        self.breaker_name = name
