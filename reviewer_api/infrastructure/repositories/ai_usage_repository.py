"""AI usage repository - daily generation counters."""
import logging
from datetime import date
from typing import Tuple

from ..adapters.postgres import execute_mutation_returning, execute_query

logger = logging.getLogger(__name__)


def check_and_increment_ai_usage(user_id: str, usage_date: date, limit: int) -> Tuple[bool, int]:
    """
    Atomically check the daily counter and increment it when under limit.

    Delegates to the ``check_and_increment_ai_usage`` stored function, which
    performs the limit check and the increment in one statement.

    Args:
        user_id: User identity
        usage_date: UTC day the counter belongs to
        limit: Daily cap

    Returns:
        Tuple of (allowed, new_count). When the limit was already reached
        new_count is the unchanged counter.
    """
    sql = "SELECT allowed, new_count FROM check_and_increment_ai_usage(%s, %s, %s)"
    rows = execute_mutation_returning(sql, (user_id, usage_date, limit))

    if not rows:
        logger.warning("check_and_increment_ai_usage returned no rows for user %s", user_id)
        return False, limit

    row = rows[0]
    allowed = bool(row.get("allowed", False))
    new_count = row.get("new_count")
    if new_count is None:
        new_count = limit
    return allowed, int(new_count)


def is_unlimited_user(user_id: str) -> bool:
    """Check whether the user bypasses the daily limit."""
    sql = "SELECT user_id FROM unlimited_users WHERE user_id = %s"
    rows = execute_query(sql, (user_id,))
    return bool(rows)
