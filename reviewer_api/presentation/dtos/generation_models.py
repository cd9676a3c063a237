"""Pydantic models for reviewer and flashcard generation responses."""
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ...domain.entities.reviewer import CardsResult, ExtractionResult


class TermModel(BaseModel):
    """A term and its definition."""

    term: str = Field(..., description="Term as written in the source")
    definition: str = Field(..., description="Definition in the requested extraction mode")
    examples: List[str] = Field(default_factory=list, description="Examples found in the source")
    keywords: List[str] = Field(default_factory=list, description="Keywords related to the term")


class CategoryModel(BaseModel):
    name: str = Field(..., description="Category name")
    color: str = Field(..., description="Category color from the fixed palette")
    terms: List[TermModel] = Field(default_factory=list)


class ReviewerResponse(BaseModel):
    """Response model for reviewer generation."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Document title")
    extraction_mode: str = Field(..., alias="extractionMode", description="full, sentence or keywords")
    categories: List[CategoryModel] = Field(
        default_factory=list, description="Categories in document order, empty when nothing was extracted"
    )
    remaining: int = Field(..., ge=0, description="AI generations left today")

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ReviewerResponse":
        return cls.model_validate(result.to_dict())


class CardModel(BaseModel):
    term: str
    definition: str


class CardsResponse(BaseModel):
    """Response model for flashcard generation."""

    cards: List[CardModel] = Field(default_factory=list)
    remaining: int = Field(..., ge=0, description="AI generations left today")

    @classmethod
    def from_result(cls, result: CardsResult) -> "CardsResponse":
        return cls.model_validate(result.to_dict())


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Sanitized error message")


class QuotaErrorResponse(ErrorResponse):
    model_config = ConfigDict(populate_by_name=True)

    remaining: int = Field(0, ge=0)
    reset_at: str = Field(..., alias="resetAt", description="ISO timestamp of the next UTC reset")
