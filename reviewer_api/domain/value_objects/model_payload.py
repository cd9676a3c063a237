"""Model request payload value objects."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_output_tokens: int
    json_response: bool = True


@dataclass(frozen=True)
class ModelPayload:
    """
    Provider-agnostic request description.

    When ``file_name`` is set the document bytes are uploaded by the
    generation client and referenced alongside ``user_text``; otherwise
    ``user_text`` already carries the inlined study material.
    """
    system_instruction: str
    user_text: str
    params: GenerationParams
    file_content: Optional[bytes] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def has_file(self) -> bool:
        return self.file_content is not None


@dataclass(frozen=True)
class RawModelResponse:
    """Opaque model output, parsed later by the recovery parser."""
    text: str
    key_index: int = 0
