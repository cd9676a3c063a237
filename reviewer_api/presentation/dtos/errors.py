"""Error responses - maps pipeline exceptions to sanitized HTTP responses."""
import logging

from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ...domain.exceptions import (
    EmptyResponseError,
    FileProcessingError,
    InputValidationError,
    NoJsonFoundError,
    ProviderNotConfiguredError,
    ProviderTimeoutError,
    QuotaExceededError,
    RateLimitError,
    UnparseableResponseError,
)
from .generation_models import QuotaErrorResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "API rate limit exceeded. Please try again later."
TIMEOUT_MESSAGE = "Request timed out. Please try with a smaller file."
FILE_PROCESSING_MESSAGE = "File processing failed"
EMPTY_RESPONSE_MESSAGE = "AI returned empty response. Please try again."
NO_JSON_MESSAGE = "AI response was not in expected format. Please try again."
UNPARSEABLE_MESSAGE = "Failed to parse AI response. Please try again with different content."
REVIEWER_GENERIC_MESSAGE = "Failed to generate reviewer content. Please try again."
CARDS_GENERIC_MESSAGE = "Failed to generate cards. Please try again."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_quota_error_response(exc: QuotaExceededError) -> JSONResponse:
    body = QuotaErrorResponse(
        error=str(exc),
        remaining=exc.decision.remaining,
        reset_at=exc.decision.reset_at.isoformat().replace("+00:00", "Z"),
    )
    return JSONResponse(status_code=429, content=body.model_dump(by_alias=True))


def create_error_response(
    exc: Exception,
    generic_message: str = REVIEWER_GENERIC_MESSAGE,
    detailed_parse_errors: bool = True,
) -> JSONResponse:
    """
    Convert a pipeline exception into a sanitized error response.

    Input and precondition errors carry their own message. Provider and
    parse errors are replaced by fixed messages; details stay in the logs.

    Args:
        exc: Exception raised by the pipeline
        generic_message: Message for failures without a dedicated one
        detailed_parse_errors: Use dedicated messages for parse failures

    Returns:
        JSONResponse with ``{"error": ...}`` body
    """
    if isinstance(exc, InputValidationError):
        return _error(400, str(exc))
    if isinstance(exc, QuotaExceededError):
        return create_quota_error_response(exc)
    if isinstance(exc, ProviderNotConfiguredError):
        return _error(500, str(exc))
    if isinstance(exc, RateLimitError):
        return _error(429, RATE_LIMIT_MESSAGE)
    if isinstance(exc, ProviderTimeoutError):
        return _error(504, TIMEOUT_MESSAGE)
    if isinstance(exc, FileProcessingError):
        return _error(500, FILE_PROCESSING_MESSAGE)
    if detailed_parse_errors:
        if isinstance(exc, EmptyResponseError):
            return _error(500, EMPTY_RESPONSE_MESSAGE)
        if isinstance(exc, NoJsonFoundError):
            return _error(500, NO_JSON_MESSAGE)
        if isinstance(exc, UnparseableResponseError):
            return _error(500, UNPARSEABLE_MESSAGE)
    return _error(500, generic_message)


def create_validation_error_response(validation_error: ValidationError) -> JSONResponse:
    """Convert Pydantic validation error to standardized error response."""
    errors = []
    for error in validation_error.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append(f"{field}: {error['msg']}")
    logger.warning("Validation errors: %s", errors)
    return _error(400, "Invalid request")


def create_internal_error_response() -> JSONResponse:
    """Create standardized internal error response."""
    return _error(500, "Internal error")
