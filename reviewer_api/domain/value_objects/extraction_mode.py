"""ExtractionMode value object."""
from enum import Enum
from typing import Optional


class ExtractionMode(str, Enum):
    """How verbose the requested definitions are."""
    FULL = "full"
    SENTENCE = "sentence"
    KEYWORDS = "keywords"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "ExtractionMode":
        """
        Resolve a raw form value to a mode.

        Unknown, empty or missing values fall back to FULL instead of
        failing the request.
        """
        if not value:
            return cls.FULL
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.FULL
