"""Unit tests for AI usage repository."""
from datetime import date
from unittest.mock import patch

import pytest

from reviewer_api.infrastructure.repositories.ai_usage_repository import (
    check_and_increment_ai_usage,
    is_unlimited_user,
)

MODULE = "reviewer_api.infrastructure.repositories.ai_usage_repository"


@pytest.mark.unit
class TestCheckAndIncrementAiUsage:
    """Tests for check_and_increment_ai_usage function."""

    @patch(f"{MODULE}.execute_mutation_returning")
    def test_allowed(self, mock_mutation):
        mock_mutation.return_value = [{"allowed": True, "new_count": 3}]

        result = check_and_increment_ai_usage("user-1", date(2024, 6, 15), 10)

        assert result == (True, 3)
        sql, params = mock_mutation.call_args[0]
        assert "check_and_increment_ai_usage" in sql
        assert params == ("user-1", date(2024, 6, 15), 10)

    @patch(f"{MODULE}.execute_mutation_returning")
    def test_denied(self, mock_mutation):
        mock_mutation.return_value = [{"allowed": False, "new_count": 10}]

        assert check_and_increment_ai_usage("user-1", date(2024, 6, 15), 10) == (False, 10)

    @patch(f"{MODULE}.execute_mutation_returning")
    def test_no_rows_treated_as_denied(self, mock_mutation):
        mock_mutation.return_value = []

        assert check_and_increment_ai_usage("user-1", date(2024, 6, 15), 10) == (False, 10)

    @patch(f"{MODULE}.execute_mutation_returning")
    def test_null_count_treated_as_limit(self, mock_mutation):
        mock_mutation.return_value = [{"allowed": False, "new_count": None}]

        assert check_and_increment_ai_usage("user-1", date(2024, 6, 15), 10) == (False, 10)


@pytest.mark.unit
class TestIsUnlimitedUser:
    @patch(f"{MODULE}.execute_query")
    def test_unlimited(self, mock_query):
        mock_query.return_value = [{"user_id": "admin"}]

        assert is_unlimited_user("admin") is True
        assert mock_query.call_args[0][1] == ("admin",)

    @patch(f"{MODULE}.execute_query")
    def test_regular_user(self, mock_query):
        mock_query.return_value = []

        assert is_unlimited_user("user-1") is False
