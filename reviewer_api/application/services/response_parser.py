"""Response recovery parser - tolerant JSON parsing of model output.

Parsing runs an ordered repair chain and stops at the first stage that
yields the expected JSON container:

1. strict parse of the whole text
2. cut the outermost ``{...}`` (or ``[...]``) and drop trailing commas
3. additionally drop C0 control characters other than JSON whitespace
"""
import json
import logging
import re
from typing import Any, Optional, Tuple

from ...domain.entities.reviewer import ExtractedReviewer, Flashcard
from ...domain.exceptions import EmptyResponseError, NoJsonFoundError, UnparseableResponseError
from ...domain.value_objects.extraction_mode import ExtractionMode
from .result_assembler import cards_from_sequence, reviewer_from_mapping

logger = logging.getLogger(__name__)

LOG_PREVIEW_CHARS = 1000
LOG_FINAL_PREVIEW_CHARS = 500

OBJECT = ("{", "}")
ARRAY = ("[", "]")

_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def extract_outermost(text: str, delimiters: Tuple[str, str] = OBJECT) -> Optional[str]:
    """Return the substring from the first opening to the last closing delimiter."""
    opening, closing = delimiters
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def strip_control_characters(text: str) -> str:
    return _CONTROL_CHARS_RE.sub("", text)


def _matches(value: Any, delimiters: Tuple[str, str]) -> bool:
    return isinstance(value, dict) if delimiters == OBJECT else isinstance(value, list)


def recover_json(raw_text: Optional[str], delimiters: Tuple[str, str] = OBJECT) -> Any:
    """
    Parse model output into a JSON object (or array).

    Args:
        raw_text: Raw model text
        delimiters: OBJECT or ARRAY, the expected top-level container

    Returns:
        Parsed dict (OBJECT) or list (ARRAY)

    Raises:
        EmptyResponseError: Text is empty or whitespace
        NoJsonFoundError: No delimited container found after strict parse failed
        UnparseableResponseError: Every repair stage failed
    """
    if raw_text is None or not raw_text.strip():
        raise EmptyResponseError()

    try:
        parsed = json.loads(raw_text)
        if _matches(parsed, delimiters):
            return parsed
        logger.warning("Strict parse returned %s, looking for embedded JSON", type(parsed).__name__)
    except json.JSONDecodeError as e:
        logger.warning("Initial JSON parse failed: %s", e)
        logger.warning("Raw response length: %s", len(raw_text))
        logger.warning("Raw response (first %s chars): %s", LOG_PREVIEW_CHARS, raw_text[:LOG_PREVIEW_CHARS])

    candidate = extract_outermost(raw_text, delimiters)
    if candidate is None:
        logger.error("No JSON %s found in response", "object" if delimiters == OBJECT else "array")
        raise NoJsonFoundError()

    candidate = strip_trailing_commas(candidate)
    try:
        parsed = json.loads(candidate)
        if _matches(parsed, delimiters):
            logger.info("Recovered JSON after removing trailing commas")
            return parsed
    except json.JSONDecodeError:
        pass

    candidate = strip_control_characters(candidate)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error("All JSON parse attempts failed: %s", e)
        logger.error("Attempted to parse: %s", candidate[:LOG_FINAL_PREVIEW_CHARS])
        raise UnparseableResponseError(str(e)) from e

    if not _matches(parsed, delimiters):
        raise UnparseableResponseError(f"expected JSON {'object' if delimiters == OBJECT else 'array'}")
    logger.info("Recovered JSON after removing control characters")
    return parsed


def parse_reviewer(raw_text: Optional[str], mode: ExtractionMode = ExtractionMode.FULL) -> ExtractedReviewer:
    """Parse reviewer model output into an ExtractedReviewer."""
    data = recover_json(raw_text, OBJECT)
    reviewer = reviewer_from_mapping(data, mode)
    logger.info(
        "Parsed reviewer '%s' with %s categories and %s terms",
        reviewer.title,
        len(reviewer.categories),
        reviewer.term_count(),
    )
    return reviewer


def parse_cards(raw_text: Optional[str]) -> Tuple[Flashcard, ...]:
    """Parse card model output (a JSON array of term/definition objects)."""
    data = recover_json(raw_text, ARRAY)
    cards = cards_from_sequence(data)
    logger.info("Parsed %s flashcards", len(cards))
    return cards
