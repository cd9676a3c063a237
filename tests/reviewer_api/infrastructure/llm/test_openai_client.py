"""Unit tests for OpenAI client infrastructure."""
from unittest.mock import patch

import pytest

from reviewer_api.domain.exceptions import ProviderNotConfiguredError
from reviewer_api.infrastructure.llm import openai_client
from reviewer_api.infrastructure.llm.openai_client import (
    FailoverKeyRotation,
    RoundRobinKeyRotation,
    get_api_key_count,
    get_key_rotation_strategy,
    get_openai_client,
)


@pytest.mark.unit
class TestKeyRotation:
    """Tests for key rotation strategies."""

    def test_failover_always_starts_at_first_key(self):
        strategy = FailoverKeyRotation()
        assert strategy.order(3) == [0, 1, 2]
        assert strategy.order(3) == [0, 1, 2]

    def test_round_robin_advances(self):
        strategy = RoundRobinKeyRotation()
        assert strategy.order(3) == [0, 1, 2]
        assert strategy.order(3) == [1, 2, 0]
        assert strategy.order(3) == [2, 0, 1]
        assert strategy.order(3) == [0, 1, 2]

    def test_round_robin_no_keys(self):
        assert RoundRobinKeyRotation().order(0) == []

    def test_strategy_from_config(self, monkeypatch):
        monkeypatch.setenv("KEY_ROTATION_STRATEGY", "round_robin")
        monkeypatch.setattr(openai_client, "_strategy", None)

        assert isinstance(get_key_rotation_strategy(), RoundRobinKeyRotation)

    def test_unknown_strategy_falls_back(self, monkeypatch):
        monkeypatch.setenv("KEY_ROTATION_STRATEGY", "random")
        monkeypatch.setattr(openai_client, "_strategy", None)

        assert isinstance(get_key_rotation_strategy(), FailoverKeyRotation)


@pytest.mark.unit
class TestOpenAIClient:
    """Tests for client creation."""

    def test_key_count(self, openai_keys):
        assert get_api_key_count() == 2

    def test_no_keys(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        for i in range(1, 6):
            monkeypatch.delenv(f"OPENAI_API_KEY_{i}", raising=False)

        assert get_api_key_count() == 0
        with pytest.raises(ProviderNotConfiguredError):
            get_openai_client(0)

    def test_clients_cached_per_key_without_sdk_retries(self, openai_keys):
        with patch("reviewer_api.infrastructure.llm.openai_client.OpenAI") as mock_openai:
            first = get_openai_client(1)
            second = get_openai_client(1)

        assert first is second
        mock_openai.assert_called_once_with(api_key="sk-test-2", max_retries=0)

    def test_index_out_of_range(self, openai_keys):
        with pytest.raises(ProviderNotConfiguredError):
            get_openai_client(5)
