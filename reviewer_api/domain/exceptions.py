"""Domain exceptions raised along the generation pipeline."""
from typing import Optional

from .entities.quota import QuotaDecision


class ReviewerError(Exception):
    """Base class for every error the generation pipeline raises."""


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class InputValidationError(ReviewerError):
    """Request input is missing, oversized or of an unsupported type."""


class MissingInputError(InputValidationError):
    def __init__(self) -> None:
        super().__init__("No file or text content provided")


class FileTooLargeError(InputValidationError):
    def __init__(self, limit_bytes: int) -> None:
        self.limit_bytes = limit_bytes
        limit_mib = limit_bytes // (1024 * 1024)
        super().__init__(f"File too large. Maximum size is {limit_mib}MB")


class TextTooLongError(InputValidationError):
    def __init__(self, limit_chars: int) -> None:
        self.limit_chars = limit_chars
        super().__init__(f"Text too long. Maximum length is {limit_chars} characters")


class UnsupportedFileTypeError(InputValidationError):
    def __init__(self, mime_type: Optional[str] = None) -> None:
        self.mime_type = mime_type
        super().__init__("Unsupported file type. Only PDF files are allowed.")


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------

class QuotaExceededError(ReviewerError):
    """Daily allowance is used up (or the caller has no identity)."""

    def __init__(self, decision: QuotaDecision, limit: int) -> None:
        self.decision = decision
        self.limit = limit
        super().__init__(f"Daily AI generation limit reached ({limit}/day)")


class ProviderNotConfiguredError(ReviewerError):
    def __init__(self) -> None:
        super().__init__("No OpenAI API keys configured")


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class ProviderError(ReviewerError):
    """The model provider rejected or failed a call."""


class RateLimitError(ProviderError):
    """Provider-side rate limit or quota exhaustion."""


class ProviderTimeoutError(ProviderError):
    """A provider call, or waiting on the provider, ran out of time."""


class FileProcessingTimeoutError(ProviderTimeoutError):
    def __init__(self, file_id: str, waited_seconds: float) -> None:
        self.file_id = file_id
        self.waited_seconds = waited_seconds
        super().__init__(f"File {file_id} still processing after {waited_seconds:.1f}s")


class FileProcessingError(ProviderError):
    def __init__(self, file_id: str, status: Optional[str] = None) -> None:
        self.file_id = file_id
        self.status = status
        super().__init__(f"File {file_id} processing failed (status={status})")


# ---------------------------------------------------------------------------
# Response recovery
# ---------------------------------------------------------------------------

class ResponseParseError(ReviewerError):
    """Model output could not be turned into the expected JSON structure."""


class EmptyResponseError(ResponseParseError):
    def __init__(self) -> None:
        super().__init__("Model returned an empty response")


class NoJsonFoundError(ResponseParseError):
    def __init__(self) -> None:
        super().__init__("No JSON found in model response")


class UnparseableResponseError(ResponseParseError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"All JSON repair attempts failed: {detail}")
