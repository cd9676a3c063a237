"""Pytest configuration and shared fixtures."""
import json
import threading
from datetime import date, datetime, timezone
from typing import Any, Dict, Tuple

import pytest

from reviewer_api.domain.entities.quota import QuotaDecision
from reviewer_api.domain.value_objects.document import UploadedDocument


class InMemoryUsageStore:
    """Stand-in for the check_and_increment_ai_usage stored function."""

    def __init__(self) -> None:
        self.counts: Dict[Tuple[str, date], int] = {}
        self._lock = threading.Lock()

    def check_and_increment(self, user_id: str, usage_date: date, limit: int) -> Tuple[bool, int]:
        with self._lock:
            current = self.counts.get((user_id, usage_date), 0)
            if current >= limit:
                return False, current
            self.counts[(user_id, usage_date)] = current + 1
            return True, current + 1


@pytest.fixture
def sample_datetime() -> datetime:
    """Provide a fixed UTC datetime for testing."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def next_midnight() -> datetime:
    return datetime(2024, 6, 16, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def usage_store() -> InMemoryUsageStore:
    return InMemoryUsageStore()


@pytest.fixture
def allowed_decision(next_midnight: datetime) -> QuotaDecision:
    return QuotaDecision(allowed=True, remaining=7, reset_at=next_midnight, user_id="user-1")


@pytest.fixture
def denied_decision(next_midnight: datetime) -> QuotaDecision:
    return QuotaDecision(allowed=False, remaining=0, reset_at=next_midnight, user_id="user-1")


@pytest.fixture
def sample_reviewer_dict() -> Dict[str, Any]:
    """Provide a reviewer object in the shape the model is asked to return."""
    return {
        "title": "Cell Biology",
        "extractionMode": "full",
        "categories": [
            {
                "name": "Organelles",
                "color": "#E0F2FE",
                "terms": [
                    {
                        "term": "Mitochondria",
                        "definition": "The powerhouse of the cell.",
                        "examples": ["Muscle cells contain many mitochondria"],
                        "keywords": ["ATP", "respiration"],
                    },
                    {
                        "term": "Ribosome",
                        "definition": "Site of protein synthesis.",
                        "examples": [],
                        "keywords": [],
                    },
                ],
            },
            {
                "name": "Processes",
                "color": "#DCFCE7",
                "terms": [
                    {
                        "term": "Osmosis",
                        "definition": "Diffusion of water across a membrane.",
                        "examples": [],
                        "keywords": [],
                    }
                ],
            },
        ],
    }


@pytest.fixture
def sample_reviewer_json(sample_reviewer_dict: Dict[str, Any]) -> str:
    return json.dumps(sample_reviewer_dict)


@pytest.fixture
def sample_pdf() -> UploadedDocument:
    return UploadedDocument(content=b"%PDF-1.4 sample", filename="notes.pdf", content_type="application/pdf")


@pytest.fixture
def openai_keys(monkeypatch) -> None:
    """Configure two provider keys and clear cached clients."""
    from reviewer_api.infrastructure.llm import openai_client

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    for i in range(1, 6):
        monkeypatch.delenv(f"OPENAI_API_KEY_{i}", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY_1", "sk-test-1")
    monkeypatch.setenv("OPENAI_API_KEY_2", "sk-test-2")
    openai_client.reset_clients()
    openai_client.set_key_rotation_strategy(openai_client.FailoverKeyRotation())
    yield
    openai_client.reset_clients()
    openai_client.set_key_rotation_strategy(openai_client.FailoverKeyRotation())
