"""Reviewer entities - categorized term/definition records."""
from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Term:
    """A single term and its definition."""
    term: str
    definition: str
    examples: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "term": self.term,
            "definition": self.definition,
            "examples": list(self.examples),
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class Category:
    """Named group of terms."""
    name: str
    color: str
    terms: Tuple[Term, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "terms": [t.to_dict() for t in self.terms],
        }


@dataclass(frozen=True)
class ExtractedReviewer:
    """ExtractedReviewer entity - immutable result of a reviewer extraction."""
    title: str
    extraction_mode: str
    categories: Tuple[Category, ...] = ()

    def term_count(self) -> int:
        return sum(len(c.terms) for c in self.categories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "extractionMode": self.extraction_mode,
            "categories": [c.to_dict() for c in self.categories],
        }


@dataclass(frozen=True)
class Flashcard:
    """Flat term/definition pair produced by card generation."""
    term: str
    definition: str

    def to_dict(self) -> Dict[str, str]:
        return {"term": self.term, "definition": self.definition}


@dataclass(frozen=True)
class ExtractionResult:
    """Reviewer plus the caller's remaining allowance."""
    reviewer: ExtractedReviewer
    remaining: int

    def to_dict(self) -> Dict[str, Any]:
        data = self.reviewer.to_dict()
        data["remaining"] = self.remaining
        return data


@dataclass(frozen=True)
class CardsResult:
    cards: Tuple[Flashcard, ...]
    remaining: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cards": [c.to_dict() for c in self.cards],
            "remaining": self.remaining,
        }


# Closed palette offered to the model for category colors.
CATEGORY_COLORS: Tuple[str, ...] = (
    "#E0F2FE",
    "#DCFCE7",
    "#FEF3C7",
    "#FCE7F3",
    "#E0E7FF",
    "#F3E8FF",
)
