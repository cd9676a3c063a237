"""QuotaDecision entity - outcome of the daily usage gate."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class QuotaDecision:
    """QuotaDecision entity - immutable, produced once per request."""
    allowed: bool
    remaining: int
    reset_at: datetime
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.remaining < 0:
            raise ValueError("remaining must be >= 0")
