"""Quota gate - per-user daily allowance for AI generation."""
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional, Tuple

from ...domain.entities.quota import QuotaDecision
from ...infrastructure.adapters.postgres import DatabaseError
from ...infrastructure.repositories.ai_usage_repository import (
    check_and_increment_ai_usage,
    is_unlimited_user,
)

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 10
UNLIMITED_REMAINING = 999


def next_reset_at(now: datetime) -> datetime:
    """Start of the next UTC day."""
    today = now.astimezone(timezone.utc).date()
    return datetime.combine(today + timedelta(days=1), time.min, tzinfo=timezone.utc)


def check_and_reserve(
    user_id: Optional[str],
    limit: int = DEFAULT_DAILY_LIMIT,
    now: Optional[datetime] = None,
    increment_usage: Callable[[str, date, int], Tuple[bool, int]] = check_and_increment_ai_usage,
    is_unlimited: Callable[[str], bool] = is_unlimited_user,
) -> QuotaDecision:
    """
    Check and consume one unit of the caller's daily allowance.

    The limit check and the increment happen in a single datastore call.
    On success the unit is consumed before any downstream work, so a later
    failure does not give it back.

    Args:
        user_id: Caller identity; None is denied
        limit: Daily cap
        now: Clock override (UTC)
        increment_usage: Atomic check-and-increment operation
        is_unlimited: Lookup for users exempt from the cap

    Returns:
        QuotaDecision with allowed flag, remaining units and next UTC reset
    """
    now = now or datetime.now(timezone.utc)
    reset_at = next_reset_at(now)

    if not user_id:
        logger.warning("AI usage check without user identity, denying")
        return QuotaDecision(allowed=False, remaining=0, reset_at=reset_at)

    try:
        if is_unlimited(user_id):
            logger.info("User %s has unlimited AI usage", user_id)
            return QuotaDecision(allowed=True, remaining=UNLIMITED_REMAINING, reset_at=reset_at, user_id=user_id)

        if limit <= 0:
            logger.warning("AI daily limit is %s, denying user %s", limit, user_id)
            return QuotaDecision(allowed=False, remaining=0, reset_at=reset_at, user_id=user_id)

        today = now.astimezone(timezone.utc).date()
        allowed, new_count = increment_usage(user_id, today, limit)
    except DatabaseError as e:
        logger.error("Rate limit check error for user %s: %s", user_id, e)
        return QuotaDecision(allowed=False, remaining=0, reset_at=reset_at, user_id=user_id)

    remaining = max(0, limit - new_count)
    logger.info("AI usage for user %s: allowed=%s count=%s/%s", user_id, allowed, new_count, limit)
    return QuotaDecision(allowed=allowed, remaining=remaining, reset_at=reset_at, user_id=user_id)
