"""Result assembler - turns recovered JSON into entities and response contracts."""
import logging
from typing import Any, Iterable, Mapping, Tuple, Union

from ...domain.entities.reviewer import (
    CATEGORY_COLORS,
    CardsResult,
    Category,
    ExtractedReviewer,
    ExtractionResult,
    Flashcard,
    Term,
)
from ...domain.value_objects.extraction_mode import ExtractionMode

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_text_list(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Iterable):
        return (_as_text(value),)
    return tuple(_as_text(v) for v in value)


def _normalize_color(value: Any, index: int) -> str:
    color = _as_text(value).strip().upper()
    if color in CATEGORY_COLORS:
        return color
    return CATEGORY_COLORS[index % len(CATEGORY_COLORS)]


def _term_from_mapping(data: Mapping[str, Any]) -> Term:
    return Term(
        term=_as_text(data.get("term")),
        definition=_as_text(data.get("definition")),
        examples=_as_text_list(data.get("examples")),
        keywords=_as_text_list(data.get("keywords")),
    )


def _category_from_mapping(data: Mapping[str, Any], index: int) -> Category:
    raw_terms = data.get("terms")
    if not isinstance(raw_terms, list):
        if raw_terms is not None:
            logger.warning("terms is %s, not a list; using empty list", type(raw_terms).__name__)
        raw_terms = []
    terms = tuple(_term_from_mapping(t) for t in raw_terms if isinstance(t, Mapping))
    name = _as_text(data.get("name"))
    return Category(
        name=name if name.strip() else f"Category {index + 1}",
        color=_normalize_color(data.get("color"), index),
        terms=terms,
    )


def reviewer_from_mapping(data: Mapping[str, Any], fallback_mode: ExtractionMode) -> ExtractedReviewer:
    """
    Build an ExtractedReviewer from parsed model output.

    Missing or non-list ``categories`` and ``terms`` become empty tuples and
    non-object entries are skipped. Text is kept verbatim. Colors outside the
    palette are replaced deterministically by position.
    """
    raw_categories = data.get("categories")
    if not isinstance(raw_categories, list):
        if raw_categories is not None:
            logger.warning("categories is %s, not a list; using empty list", type(raw_categories).__name__)
        raw_categories = []

    categories = tuple(
        _category_from_mapping(c, i)
        for i, c in enumerate(c for c in raw_categories if isinstance(c, Mapping))
    )
    mode = _as_text(data.get("extractionMode")) or fallback_mode.value
    return ExtractedReviewer(
        title=_as_text(data.get("title")),
        extraction_mode=mode,
        categories=categories,
    )


def cards_from_sequence(items: Any) -> Tuple[Flashcard, ...]:
    """Build flashcards from a parsed JSON array, skipping malformed items."""
    if isinstance(items, Mapping):
        items = items.get("cards")
    if not isinstance(items, list):
        return ()
    return tuple(
        Flashcard(term=_as_text(item.get("term")), definition=_as_text(item.get("definition")))
        for item in items
        if isinstance(item, Mapping) and _as_text(item.get("term")).strip()
    )


def assemble_reviewer(
    parsed: Union[ExtractedReviewer, Mapping[str, Any]],
    quota_remaining: int,
    fallback_mode: ExtractionMode = ExtractionMode.FULL,
) -> ExtractionResult:
    """
    Merge the remaining allowance into the extracted reviewer.

    ``quota_remaining`` is the value decided when the request was admitted;
    no fresh quota check is made here.
    """
    if isinstance(parsed, ExtractedReviewer):
        reviewer = parsed
    else:
        reviewer = reviewer_from_mapping(parsed or {}, fallback_mode)
    return ExtractionResult(reviewer=reviewer, remaining=max(0, quota_remaining))


def assemble_cards(cards: Iterable[Flashcard], quota_remaining: int) -> CardsResult:
    return CardsResult(cards=tuple(cards), remaining=max(0, quota_remaining))
