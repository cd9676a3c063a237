"""Generate reviewer command."""
from dataclasses import dataclass
from typing import Optional

from ...domain.value_objects.document import UploadedDocument


@dataclass(frozen=True)
class GenerateReviewerCommand:
    """Command to extract a categorized reviewer from a document or text."""
    user_id: Optional[str]
    document: Optional[UploadedDocument]
    text_content: Optional[str]
    extraction_mode: Optional[str]
