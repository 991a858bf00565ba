"""Correction models: raw model output and located spans."""

import copy
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ErrorType(str, Enum):
    """The six fixed correction categories, in legend order."""

    SPELLING = "spelling"
    PUNCTUATION = "punctuation"
    CAPITALIZATION = "capitalization"
    PREPOSITION = "preposition"
    MISSING_WORDS = "missing-words"
    GRAMMAR = "grammar"

    @property
    def heading(self) -> str:
        """Popover heading, e.g. ``missing-words`` -> ``Missing words``."""
        value = self.value
        return value[0].upper() + value[1:].replace("-", " ", 1)


class RawCorrection(BaseModel):
    """One correction exactly as the model reported it (no position yet)."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    original_text: str = Field(alias="originalText")
    corrected_text: str = Field(alias="correctedText")
    error_type: ErrorType = Field(alias="type")
    explanation: str

    @property
    def is_noop(self) -> bool:
        return self.original_text == self.corrected_text


class ProofreadResult(BaseModel):
    """Full structured answer of a proofreading prompt."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    corrected_input: str = Field(alias="correctedInput")
    corrections: list[RawCorrection]


class Correction(BaseModel):
    """A correction located to the half-open span ``[start_index, end_index)``."""

    model_config = ConfigDict(frozen=True)

    original_text: str
    corrected_text: str
    error_type: ErrorType
    explanation: str = ""
    start_index: int
    end_index: int

    @model_validator(mode="after")
    def _check_span(self) -> "Correction":
        if self.start_index < 0:
            raise ValueError(f"start_index must be >= 0, got {self.start_index}")
        if self.end_index <= self.start_index:
            raise ValueError(
                f"end_index ({self.end_index}) must be greater than start_index ({self.start_index})"
            )
        return self

    @property
    def span(self) -> tuple[int, int]:
        return (self.start_index, self.end_index)

    @property
    def length_delta(self) -> int:
        """How much the buffer grows (or shrinks) when this correction is applied."""
        return len(self.corrected_text) - len(self.original_text)

    def covers(self, offset: int) -> bool:
        """Inclusive on both ends so a caret sitting on either boundary matches."""
        return self.start_index <= offset <= self.end_index

    def shifted(self, delta: int) -> "Correction":
        if delta == 0:
            return self
        return self.model_copy(
            update={
                "start_index": self.start_index + delta,
                "end_index": self.end_index + delta,
            }
        )

    @classmethod
    def from_raw(cls, raw: RawCorrection, start_index: int) -> "Correction":
        return cls(
            original_text=raw.original_text,
            corrected_text=raw.corrected_text,
            error_type=raw.error_type,
            explanation=raw.explanation,
            start_index=start_index,
            end_index=start_index + len(raw.original_text),
        )


_PROOFREADING_SCHEMA: dict = {
    "type": "object",
    "required": ["correctedInput", "corrections"],
    "additionalProperties": False,
    "properties": {
        "correctedInput": {
            "type": "string",
            "description": "The corrected version of the input text",
        },
        "corrections": {
            "type": "array",
            "description": "Array of corrections made to the text",
            "items": {
                "type": "object",
                "required": ["originalText", "correctedText", "type", "explanation"],
                "additionalProperties": False,
                "properties": {
                    "originalText": {
                        "type": "string",
                        "description": "The original incorrect text that was found",
                    },
                    "correctedText": {
                        "type": "string",
                        "description": "The corrected version of the text",
                    },
                    "type": {
                        "type": "string",
                        "enum": [t.value for t in ErrorType],
                        "description": "Type of correction",
                    },
                    "explanation": {
                        "type": "string",
                        "description": "Explanation of why this correction was made",
                    },
                },
            },
        },
    },
}


def proofreading_schema() -> dict:
    """JSON schema the model's answer must satisfy (fresh copy per call)."""
    return copy.deepcopy(_PROOFREADING_SCHEMA)
