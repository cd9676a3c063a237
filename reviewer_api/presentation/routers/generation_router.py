"""Generation router - AI reviewer and flashcard endpoints."""
import logging
from typing import Optional, Union

from fastapi import APIRouter, File, Form, Header, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ...application.services.input_normalizer import CARDS_MAX_FILE_BYTES, REVIEWER_MAX_FILE_BYTES
from ...domain.exceptions import InputValidationError, QuotaExceededError, ReviewerError
from ...domain.value_objects.document import UploadedDocument
from ..controllers.generation_controller import handle_generate_cards, handle_generate_reviewer
from ..dtos.errors import CARDS_GENERIC_MESSAGE, REVIEWER_GENERIC_MESSAGE, create_error_response
from ..dtos.generation_models import CardsResponse, ErrorResponse, QuotaErrorResponse, ReviewerResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Generation"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing, oversized or unsupported input"},
    429: {"model": QuotaErrorResponse, "description": "Daily quota or provider rate limit reached"},
    500: {"model": ErrorResponse, "description": "Provider or parse failure"},
    504: {"model": ErrorResponse, "description": "Provider timed out"},
}


async def _read_upload(file: Optional[UploadFile], max_bytes: int) -> Optional[UploadedDocument]:
    """
    Read an uploaded form file; empty file parts count as no file.

    At most ``max_bytes + 1`` bytes are read, enough for the size check to
    reject an oversized upload without buffering all of it.
    """
    if file is None or not file.filename:
        return None
    content = await file.read(max_bytes + 1)
    return UploadedDocument(content=content, filename=file.filename, content_type=file.content_type)


def _log_failure(endpoint: str, exc: Exception) -> None:
    if isinstance(exc, (InputValidationError, QuotaExceededError)):
        logger.warning("%s rejected: %s", endpoint, exc)
    elif isinstance(exc, ReviewerError):
        logger.error("%s error: %s", endpoint, exc)
    else:
        logger.exception("%s unexpected error: %s", endpoint, exc)


@router.post("/generate-reviewer", response_model=ReviewerResponse, responses=ERROR_RESPONSES, status_code=200)
async def generate_reviewer_endpoint(
    file: Optional[UploadFile] = File(None),
    textContent: Optional[str] = Form(None),
    extractionMode: Optional[str] = Form(None),
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Union[ReviewerResponse, JSONResponse]:
    """Extract categorized terms and definitions from a PDF or pasted text."""
    try:
        document = await _read_upload(file, REVIEWER_MAX_FILE_BYTES)
        result = await run_in_threadpool(
            handle_generate_reviewer, user_id, document, textContent, extractionMode
        )
        return ReviewerResponse.from_result(result)
    except Exception as exc:
        _log_failure("Generate reviewer", exc)
        return create_error_response(exc, REVIEWER_GENERIC_MESSAGE)


@router.post("/generate-cards", response_model=CardsResponse, responses=ERROR_RESPONSES, status_code=200)
async def generate_cards_endpoint(
    file: Optional[UploadFile] = File(None),
    textContent: Optional[str] = Form(None),
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Union[CardsResponse, JSONResponse]:
    """Extract flat term/definition flashcards from a PDF or pasted text."""
    try:
        document = await _read_upload(file, CARDS_MAX_FILE_BYTES)
        result = await run_in_threadpool(handle_generate_cards, user_id, document, textContent)
        return CardsResponse.from_result(result)
    except Exception as exc:
        _log_failure("Generate cards", exc)
        return create_error_response(exc, CARDS_GENERIC_MESSAGE, detailed_parse_errors=False)
