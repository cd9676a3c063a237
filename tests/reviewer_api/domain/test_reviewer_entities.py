"""Unit tests for reviewer and quota entities."""
from datetime import datetime, timezone

import pytest

from reviewer_api.domain.entities.quota import QuotaDecision
from reviewer_api.domain.entities.reviewer import (
    CardsResult,
    Category,
    ExtractedReviewer,
    ExtractionResult,
    Flashcard,
    Term,
)


@pytest.mark.unit
class TestExtractedReviewer:
    """Tests for ExtractedReviewer serialization."""

    def test_to_dict_uses_response_field_names(self):
        reviewer = ExtractedReviewer(
            title="T",
            extraction_mode="sentence",
            categories=(Category(name="C", color="#E0F2FE", terms=(Term(term="A", definition="B"),)),),
        )

        data = reviewer.to_dict()

        assert data == {
            "title": "T",
            "extractionMode": "sentence",
            "categories": [
                {
                    "name": "C",
                    "color": "#E0F2FE",
                    "terms": [{"term": "A", "definition": "B", "examples": [], "keywords": []}],
                }
            ],
        }

    def test_term_count(self):
        reviewer = ExtractedReviewer(
            title="T",
            extraction_mode="full",
            categories=(
                Category(name="C1", color="#E0F2FE", terms=(Term("a", "1"), Term("b", "2"))),
                Category(name="C2", color="#DCFCE7", terms=(Term("c", "3"),)),
            ),
        )
        assert reviewer.term_count() == 3

    def test_extraction_result_adds_remaining(self):
        result = ExtractionResult(reviewer=ExtractedReviewer(title="T", extraction_mode="full"), remaining=4)

        data = result.to_dict()

        assert data["remaining"] == 4
        assert data["categories"] == []

    def test_cards_result_to_dict(self):
        result = CardsResult(cards=(Flashcard(term="A", definition="B"),), remaining=2)
        assert result.to_dict() == {"cards": [{"term": "A", "definition": "B"}], "remaining": 2}


@pytest.mark.unit
class TestQuotaDecision:
    def test_negative_remaining_rejected(self):
        with pytest.raises(ValueError):
            QuotaDecision(allowed=False, remaining=-1, reset_at=datetime.now(timezone.utc))

    def test_is_immutable(self):
        decision = QuotaDecision(allowed=True, remaining=3, reset_at=datetime.now(timezone.utc))
        with pytest.raises(Exception):
            decision.remaining = 2
