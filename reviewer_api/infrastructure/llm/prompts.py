"""Prompt builders for reviewer and flashcard extraction."""
import json
from typing import Optional

from ...domain.entities.reviewer import CATEGORY_COLORS
from ...domain.value_objects.document import NormalizedInput
from ...domain.value_objects.extraction_mode import ExtractionMode
from ...domain.value_objects.model_payload import GenerationParams, ModelPayload

REVIEWER_TEMPERATURE = 0.5
REVIEWER_MAX_OUTPUT_TOKENS = 65536
CARDS_TEMPERATURE = 0.3
CARDS_MAX_OUTPUT_TOKENS = 50000


def build_mode_guidance(mode: ExtractionMode) -> str:
    """
    Get definition-style instructions for an extraction mode.

    Args:
        mode: Requested extraction mode

    Returns:
        Instruction fragment inserted into the system message
    """
    if mode == ExtractionMode.SENTENCE:
        return (
            "For each term, provide ONLY ONE SENTENCE as the definition or explanation. "
            "Keep it brief and concise."
        )
    if mode == ExtractionMode.KEYWORDS:
        return (
            "For each term, extract ONLY the IMPORTANT KEY WORDS related to it. "
            "Start with a dash (-) and then list the keywords separated by commas. "
            "Do not include full sentences. Format example: '- keyword1, keyword2, keyword3'. "
            "IMPORTANT: EVERY term MUST have at least 3-5 keywords."
        )
    return (
        "For each term, provide the EXACT definition or explanation as it appears in the "
        "original text. Include examples if found.\n\n"
        "CRITICAL RULE FOR LISTS AND BULLET POINTS:\n"
        "When you encounter a section header followed by a list of items (like \"Advantages\", "
        "\"Disadvantages\", \"Types of X\", \"Characteristics of X\", \"Operations\", etc.):\n"
        "- The section header becomes the TERM (e.g., \"Advantages of Linked List\", "
        "\"Types of Stack Operations\")\n"
        "- ALL the bullet points/list items under it become the DEFINITION as a combined text\n"
        "- DO NOT create separate terms for each list item\n"
        "- Format the definition by joining all items with proper punctuation\n\n"
        "STANDALONE CONCEPTS:\n"
        "Concepts with their own full definitions (like \"Singly Linked List\", \"Stack\", "
        "\"Array\", \"Queue\") should remain as separate individual terms with their complete "
        "definitions."
    )


def _reviewer_output_example(mode: ExtractionMode) -> str:
    example = {
        "title": "Document title",
        "extractionMode": mode.value,
        "categories": [
            {
                "name": "Category Name",
                "color": CATEGORY_COLORS[0],
                "terms": [
                    {"term": "Term", "definition": "Definition", "examples": [], "keywords": []}
                ],
            }
        ],
    }
    return json.dumps(example, indent=2)


def get_reviewer_system_message(mode: ExtractionMode) -> str:
    """
    Get the system message for reviewer extraction.

    Args:
        mode: Requested extraction mode

    Returns:
        System message shared by all modes, with the mode guidance embedded
    """
    return (
        "You are an expert study material extractor. Extract EVERY term and definition "
        "from the document, then organize them into categories.\n\n"
        f"{build_mode_guidance(mode)}\n\n"
        "EXTRACTION RULES:\n"
        "1. Extract EVERY term that has a definition\n"
        "2. Extract ALL technical vocabulary, concepts, names, formulas\n"
        "3. Group into logical categories\n"
        "4. Terms and definitions should be VERBATIM from source\n\n"
        "OUTPUT FORMAT - Valid JSON:\n"
        f"{_reviewer_output_example(mode)}\n\n"
        f"COLOR OPTIONS: {', '.join(CATEGORY_COLORS)}"
    )


def build_reviewer_user_text(text: Optional[str] = None) -> str:
    """
    Build the user instruction for reviewer extraction.

    Args:
        text: Inlined study text, or None when a file is attached

    Returns:
        User message text
    """
    if text is None:
        return (
            "Extract and categorize ALL key terms and definitions from this ENTIRE document, "
            "paying special attention to the END sections. Return ONLY a JSON object."
        )
    return (
        "Extract and categorize ALL key terms and definitions from this ENTIRE text, "
        f"paying special attention to the END sections:\n\n{text}\n\nReturn ONLY a JSON object."
    )


def get_cards_system_message() -> str:
    """Get the system message for flat flashcard extraction."""
    return (
        "You are an expert study material creator. Extract ALL key terms and their "
        "definitions from the provided content.\n\n"
        "CRITICAL INSTRUCTION: You MUST process the ENTIRE text from beginning to END "
        "without skipping ANY content.\n"
        "Output ONLY a valid JSON array of objects with \"term\" and \"definition\" fields.\n"
        "1. ONLY Extract EVERY key term with DEFINITION that appears in the text (including "
        "subterms, technical terms, examples with meaning, important concepts, and defined phrases)\n"
        "2. Do NOT limit yourself to a small number - capture ALL educational terms and "
        "definition content\n"
        "3. Terms and definition should be VERBATIM from document/study material\n"
        "4. Do NOT include any other content in the JSON array.\n"
        "5. MANDATORY: Ensure that all sections until the end are ALWAYS extracted completely\n"
        "6. MANDATORY: The output format should be a valid JSON array of objects with "
        "\"term\" and \"definition\" fields.\n"
        "7. Term and Definition must be always verbatim.\n\n"
        "Example output format:\n"
        "[\n"
        "  {\"term\": \"Photosynthesis\", \"definition\": \"The process by which plants convert "
        "sunlight into energy\"},\n"
        "  {\"term\": \"Chlorophyll\", \"definition\": \"Green pigment in plants that absorbs "
        "light for photosynthesis\"}\n"
        "]"
    )


def build_cards_user_text(text: Optional[str] = None) -> str:
    if text is None:
        return "Extract key terms and definitions from this document. Return ONLY a JSON array."
    return f"Extract key terms and definitions from this text:\n\n{text}\n\nReturn ONLY a JSON array."


def _file_fields(normalized: NormalizedInput) -> dict:
    if not normalized.is_file:
        return {}
    return {
        "file_content": normalized.document.content,
        "file_name": normalized.document.filename,
        "mime_type": normalized.mime_type,
    }


def build_reviewer_payload(normalized: NormalizedInput) -> ModelPayload:
    """
    Build the reviewer extraction payload. Pure, no I/O.

    Args:
        normalized: Validated input

    Returns:
        ModelPayload with system instruction, user text and generation params
    """
    return ModelPayload(
        system_instruction=get_reviewer_system_message(normalized.mode),
        user_text=build_reviewer_user_text(None if normalized.is_file else normalized.text),
        params=GenerationParams(
            temperature=REVIEWER_TEMPERATURE,
            max_output_tokens=REVIEWER_MAX_OUTPUT_TOKENS,
            json_response=True,
        ),
        **_file_fields(normalized),
    )


def build_cards_payload(normalized: NormalizedInput) -> ModelPayload:
    """Build the flashcard extraction payload. Pure, no I/O."""
    return ModelPayload(
        system_instruction=get_cards_system_message(),
        user_text=build_cards_user_text(None if normalized.is_file else normalized.text),
        params=GenerationParams(
            temperature=CARDS_TEMPERATURE,
            max_output_tokens=CARDS_MAX_OUTPUT_TOKENS,
            json_response=False,
        ),
        **_file_fields(normalized),
    )
