"""Tests for correction models and the proofreading schema."""

import pytest
from pydantic import ValidationError

from proofmark.models.correction import (
    Correction,
    ErrorType,
    ProofreadResult,
    RawCorrection,
    proofreading_schema,
)


class TestErrorType:

    def test_exactly_six_categories(self):
        assert [t.value for t in ErrorType] == [
            "spelling",
            "punctuation",
            "capitalization",
            "preposition",
            "missing-words",
            "grammar",
        ]

    def test_heading(self):
        assert ErrorType.MISSING_WORDS.heading == "Missing words"
        assert ErrorType.SPELLING.heading == "Spelling"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            RawCorrection.model_validate(
                {"originalText": "a", "correctedText": "b", "type": "style", "explanation": ""}
            )


class TestRawCorrection:

    def test_wire_names(self):
        c = RawCorrection.model_validate({
            "originalText": "recieve",
            "correctedText": "receive",
            "type": "spelling",
            "explanation": "i before e",
        })
        assert c.original_text == "recieve"
        assert c.error_type is ErrorType.SPELLING
        assert not c.is_noop

    def test_noop(self):
        c = RawCorrection(
            original_text="cat", corrected_text="cat", error_type=ErrorType.SPELLING, explanation="",
        )
        assert c.is_noop

    def test_extra_keys_forbidden(self):
        with pytest.raises(ValidationError):
            RawCorrection.model_validate({
                "originalText": "a", "correctedText": "b", "type": "grammar",
                "explanation": "", "startIndex": 0,
            })

    def test_result_extra_keys_forbidden(self):
        with pytest.raises(ValidationError):
            ProofreadResult.model_validate({"correctedInput": "x", "corrections": [], "score": 1})


class TestCorrection:

    def _make(self, start=2, end=6, original="seen", corrected="saw"):
        return Correction(
            original_text=original,
            corrected_text=corrected,
            error_type=ErrorType.GRAMMAR,
            start_index=start,
            end_index=end,
        )

    def test_empty_span_rejected(self):
        with pytest.raises(ValidationError):
            self._make(start=3, end=3)

    def test_negative_start_rejected(self):
        with pytest.raises(ValidationError):
            self._make(start=-1, end=2)

    def test_length_delta(self):
        assert self._make().length_delta == -1

    def test_shifted_returns_new_instance(self):
        c = self._make()
        moved = c.shifted(3)
        assert moved.span == (5, 9)
        assert c.span == (2, 6)

    def test_shifted_zero_is_identity(self):
        c = self._make()
        assert c.shifted(0) is c

    def test_frozen(self):
        with pytest.raises(ValidationError):
            self._make().start_index = 0

    def test_covers_inclusive(self):
        c = self._make()
        assert c.covers(2) and c.covers(6)
        assert not c.covers(1) and not c.covers(7)


class TestSchema:

    def test_required_keys(self):
        schema = proofreading_schema()
        assert schema["required"] == ["correctedInput", "corrections"]
        item = schema["properties"]["corrections"]["items"]
        assert item["required"] == ["originalText", "correctedText", "type", "explanation"]
        assert item["properties"]["type"]["enum"] == [t.value for t in ErrorType]

    def test_additional_properties_forbidden_everywhere(self):
        schema = proofreading_schema()
        assert schema["additionalProperties"] is False
        assert schema["properties"]["corrections"]["items"]["additionalProperties"] is False

    def test_returns_fresh_copy(self):
        proofreading_schema()["required"].append("oops")
        assert "oops" not in proofreading_schema()["required"]
