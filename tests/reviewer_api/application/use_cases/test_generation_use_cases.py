"""Unit tests for generation use cases."""
from unittest.mock import Mock

import pytest

from reviewer_api.application.commands.generate_cards_command import GenerateCardsCommand
from reviewer_api.application.commands.generate_reviewer_command import GenerateReviewerCommand
from reviewer_api.application.use_cases.generation_use_cases import generate_cards, generate_reviewer
from reviewer_api.domain.exceptions import (
    EmptyResponseError,
    MissingInputError,
    ProviderNotConfiguredError,
    QuotaExceededError,
    RateLimitError,
)
from reviewer_api.domain.value_objects.extraction_mode import ExtractionMode
from reviewer_api.domain.value_objects.model_payload import RawModelResponse
from reviewer_api.infrastructure.llm.prompts import build_cards_payload, build_reviewer_payload


def _reviewer_command(**overrides) -> GenerateReviewerCommand:
    values = {
        "user_id": "user-1",
        "document": None,
        "text_content": "Mitochondria: the powerhouse of the cell.",
        "extraction_mode": "sentence",
    }
    values.update(overrides)
    return GenerateReviewerCommand(**values)


@pytest.mark.unit
class TestGenerateReviewer:
    """Tests for generate_reviewer use case."""

    def test_sentence_mode_success(self, allowed_decision):
        raw = (
            '{"title": "Cells", "extractionMode": "sentence", "categories": [{"name": "Organelles", '
            '"color": "#E0F2FE", "terms": [{"term": "Mitochondria", '
            '"definition": "The powerhouse of the cell.", "examples": [], "keywords": []}]}]}'
        )
        generate = Mock(return_value=RawModelResponse(text=raw))
        build_payload = Mock(wraps=build_reviewer_payload)

        result = generate_reviewer(
            command=_reviewer_command(),
            key_count=lambda: 1,
            reserve_quota=Mock(return_value=allowed_decision),
            generate=generate,
            build_payload=build_payload,
            daily_limit=10,
        )

        assert result.remaining == allowed_decision.remaining
        terms = result.reviewer.categories[0].terms
        assert terms[0].definition == "The powerhouse of the cell."
        assert terms[0].definition.count(".") == 1
        normalized = build_payload.call_args[0][0]
        assert normalized.mode is ExtractionMode.SENTENCE
        generate.assert_called_once()

    def test_no_keys_checked_before_quota(self):
        reserve_quota = Mock()

        with pytest.raises(ProviderNotConfiguredError):
            generate_reviewer(
                command=_reviewer_command(),
                key_count=lambda: 0,
                reserve_quota=reserve_quota,
                generate=Mock(),
                build_payload=build_reviewer_payload,
                daily_limit=10,
            )

        reserve_quota.assert_not_called()

    def test_quota_exhausted(self, denied_decision):
        generate = Mock()

        with pytest.raises(QuotaExceededError) as exc_info:
            generate_reviewer(
                command=_reviewer_command(),
                key_count=lambda: 1,
                reserve_quota=Mock(return_value=denied_decision),
                generate=generate,
                build_payload=build_reviewer_payload,
                daily_limit=10,
            )

        assert exc_info.value.decision is denied_decision
        assert "10/day" in str(exc_info.value)
        generate.assert_not_called()

    def test_quota_consumed_before_input_validation(self, allowed_decision):
        reserve_quota = Mock(return_value=allowed_decision)
        generate = Mock()

        with pytest.raises(MissingInputError):
            generate_reviewer(
                command=_reviewer_command(text_content=None),
                key_count=lambda: 1,
                reserve_quota=reserve_quota,
                generate=generate,
                build_payload=build_reviewer_payload,
                daily_limit=10,
            )

        reserve_quota.assert_called_once_with("user-1")
        generate.assert_not_called()

    def test_empty_model_response_still_consumes_quota(self, allowed_decision):
        reserve_quota = Mock(return_value=allowed_decision)

        with pytest.raises(EmptyResponseError):
            generate_reviewer(
                command=_reviewer_command(),
                key_count=lambda: 1,
                reserve_quota=reserve_quota,
                generate=Mock(return_value=RawModelResponse(text="")),
                build_payload=build_reviewer_payload,
                daily_limit=10,
            )

        reserve_quota.assert_called_once()

    def test_provider_errors_propagate(self, allowed_decision):
        with pytest.raises(RateLimitError):
            generate_reviewer(
                command=_reviewer_command(),
                key_count=lambda: 2,
                reserve_quota=Mock(return_value=allowed_decision),
                generate=Mock(side_effect=RateLimitError("429")),
                build_payload=build_reviewer_payload,
                daily_limit=10,
            )

    def test_unknown_mode_runs_as_full(self, allowed_decision):
        build_payload = Mock(wraps=build_reviewer_payload)

        result = generate_reviewer(
            command=_reviewer_command(extraction_mode="summary"),
            key_count=lambda: 1,
            reserve_quota=Mock(return_value=allowed_decision),
            generate=Mock(return_value=RawModelResponse(text='{"title": "T"}')),
            build_payload=build_payload,
            daily_limit=10,
        )

        assert build_payload.call_args[0][0].mode is ExtractionMode.FULL
        assert result.reviewer.extraction_mode == "full"
        assert result.reviewer.categories == ()

    def test_file_input_passes_document_to_payload(self, allowed_decision, sample_pdf):
        generate = Mock(return_value=RawModelResponse(text='{"title": "T", "categories": []}'))

        generate_reviewer(
            command=_reviewer_command(document=sample_pdf, text_content=None),
            key_count=lambda: 1,
            reserve_quota=Mock(return_value=allowed_decision),
            generate=generate,
            build_payload=build_reviewer_payload,
            daily_limit=10,
        )

        payload = generate.call_args[0][0]
        assert payload.has_file is True
        assert payload.file_name == "notes.pdf"
        assert payload.mime_type == "application/pdf"


@pytest.mark.unit
class TestGenerateCards:
    """Tests for generate_cards use case."""

    def test_success(self, allowed_decision):
        generate = Mock(return_value=RawModelResponse(
            text='[{"term": "Photosynthesis", "definition": "Light to chemical energy"}]'
        ))

        result = generate_cards(
            command=GenerateCardsCommand(user_id="user-1", document=None, text_content="Photosynthesis is..."),
            key_count=lambda: 1,
            reserve_quota=Mock(return_value=allowed_decision),
            generate=generate,
            build_payload=build_cards_payload,
            daily_limit=10,
        )

        assert [c.term for c in result.cards] == ["Photosynthesis"]
        assert result.remaining == allowed_decision.remaining
        assert generate.call_args[0][0].params.json_response is False

    def test_quota_exhausted(self, denied_decision):
        with pytest.raises(QuotaExceededError):
            generate_cards(
                command=GenerateCardsCommand(user_id="user-1", document=None, text_content="text"),
                key_count=lambda: 1,
                reserve_quota=Mock(return_value=denied_decision),
                generate=Mock(),
                build_payload=build_cards_payload,
                daily_limit=10,
            )
