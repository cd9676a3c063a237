"""Generate cards command."""
from dataclasses import dataclass
from typing import Optional

from ...domain.value_objects.document import UploadedDocument


@dataclass(frozen=True)
class GenerateCardsCommand:
    """Command to extract flat term/definition flashcards."""
    user_id: Optional[str]
    document: Optional[UploadedDocument]
    text_content: Optional[str]
