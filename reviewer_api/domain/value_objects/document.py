"""Input value objects - raw upload and validated pipeline input."""
from dataclasses import dataclass
from typing import Optional

from .extraction_mode import ExtractionMode


@dataclass(frozen=True)
class UploadedDocument:
    """Raw uploaded file as received from the client."""
    content: bytes
    filename: str
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class NormalizedInput:
    """
    Validated pipeline input.

    Exactly one of ``document``/``text`` is set. ``mime_type`` is resolved
    for documents and None for text.
    """
    mode: ExtractionMode
    document: Optional[UploadedDocument] = None
    mime_type: Optional[str] = None
    text: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.document is not None
