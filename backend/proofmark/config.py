"""Application configuration."""

from pydantic import model_validator
from pydantic_settings import BaseSettings

# Legend shown above the editable region; one word per error category,
# in ErrorType declaration order.
DEFAULT_LEGEND = "spelling punctuation capitalization preposition missing-words grammar"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Development mode: switches the log format to human-readable lines
    dev_mode: bool = True

    # Language model endpoint (any OpenAI-compatible /v1 API)
    llm_base_url: str = "http://localhost:11434/v1"
    llm_model: str = "llama3.2"
    llm_api_key: str = ""
    llm_timeout_seconds: float = 60.0
    llm_connect_timeout_seconds: float = 10.0
    llm_temperature: float = 0.2
    llm_max_tokens: int = 4096
    llm_max_retries: int = 2

    # Languages the session is created for
    expected_languages: list[str] = ["en"]

    # Circuit Breaker (for the model endpoint)
    circuit_breaker_failure_threshold: int = 3
    circuit_breaker_cooldown_seconds: int = 60

    # Highlight legend
    legend_text: str = DEFAULT_LEGEND

    # Logging
    log_level: str = "info"

    @model_validator(mode="after")
    def _validate_limits(self) -> "Settings":
        if self.llm_max_retries < 1:
            raise ValueError("LLM_MAX_RETRIES must be at least 1")
        if self.circuit_breaker_failure_threshold < 1:
            raise ValueError("CIRCUIT_BREAKER_FAILURE_THRESHOLD must be at least 1")
        if not self.expected_languages:
            raise ValueError("EXPECTED_LANGUAGES must list at least one language")
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
