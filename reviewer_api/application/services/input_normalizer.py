"""Input normalizer - validates and bounds pipeline input before any provider call."""
import logging
from pathlib import PurePath
from typing import Dict, Optional

from ...domain.exceptions import (
    FileTooLargeError,
    MissingInputError,
    TextTooLongError,
    UnsupportedFileTypeError,
)
from ...domain.value_objects.document import NormalizedInput, UploadedDocument
from ...domain.value_objects.extraction_mode import ExtractionMode

logger = logging.getLogger(__name__)

MIB = 1024 * 1024
REVIEWER_MAX_FILE_BYTES = 10 * MIB
CARDS_MAX_FILE_BYTES = 20 * MIB
MAX_TEXT_CHARS = 100_000

# Accepted upload families. Extend both maps together.
ALLOWED_MIME_TYPES = frozenset({"application/pdf"})
EXTENSION_MIME_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
}

_GENERIC_CONTENT_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})


def mime_type_from_filename(filename: Optional[str]) -> Optional[str]:
    """Guess MIME type from the filename extension, None if unknown."""
    if not filename:
        return None
    return EXTENSION_MIME_TYPES.get(PurePath(filename).suffix.lower())


def resolve_mime_type(document: UploadedDocument) -> Optional[str]:
    """
    Resolve the document MIME type.

    The declared content type wins unless it is missing or generic, in
    which case the filename extension decides.
    """
    declared = (document.content_type or "").split(";")[0].strip().lower()
    if declared not in _GENERIC_CONTENT_TYPES:
        return declared
    return mime_type_from_filename(document.filename)


def normalize_input(
    document: Optional[UploadedDocument],
    text: Optional[str],
    raw_mode: Optional[str] = None,
    max_file_bytes: int = REVIEWER_MAX_FILE_BYTES,
    max_text_chars: int = MAX_TEXT_CHARS,
) -> NormalizedInput:
    """
    Validate request input.

    Rules are applied in order: presence, file size, text length, file
    type. When both a document and text are present the document is used.

    Args:
        document: Uploaded file, if any
        text: Pasted text, if any
        raw_mode: Raw extraction mode value; unknown values become FULL
        max_file_bytes: File size ceiling
        max_text_chars: Text length ceiling

    Returns:
        NormalizedInput ready for prompt building

    Raises:
        MissingInputError: Neither document nor text supplied
        FileTooLargeError: Document exceeds max_file_bytes
        TextTooLongError: Text exceeds max_text_chars
        UnsupportedFileTypeError: Document type not on the allow-list
    """
    mode = ExtractionMode.from_raw(raw_mode)
    if raw_mode and mode.value != raw_mode.strip().lower():
        logger.info("Unknown extraction mode %r, using %s", raw_mode, mode.value)

    if document is None and not text:
        raise MissingInputError()

    if document is not None and document.size > max_file_bytes:
        logger.warning("Rejected file %s: %s bytes > %s", document.filename, document.size, max_file_bytes)
        raise FileTooLargeError(max_file_bytes)

    if text and len(text) > max_text_chars:
        logger.warning("Rejected text input: %s chars > %s", len(text), max_text_chars)
        raise TextTooLongError(max_text_chars)

    if document is not None:
        mime_type = resolve_mime_type(document)
        if mime_type not in ALLOWED_MIME_TYPES:
            logger.warning("Rejected file %s with type %s", document.filename, mime_type)
            raise UnsupportedFileTypeError(mime_type)
        return NormalizedInput(mode=mode, document=document, mime_type=mime_type)

    return NormalizedInput(mode=mode, text=text)
