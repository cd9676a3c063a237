"""Generation controller - wires pipeline collaborators for the HTTP layer."""
import logging
from functools import partial
from typing import Optional

from ...application.commands.generate_cards_command import GenerateCardsCommand
from ...application.commands.generate_reviewer_command import GenerateReviewerCommand
from ...application.services.quota_service import check_and_reserve
from ...application.use_cases.generation_use_cases import generate_cards, generate_reviewer
from ...config.config import get_ai_daily_limit
from ...domain.entities.reviewer import CardsResult, ExtractionResult
from ...domain.value_objects.document import UploadedDocument
from ...infrastructure.llm.generation_client import generate
from ...infrastructure.llm.openai_client import get_api_key_count
from ...infrastructure.llm.prompts import build_cards_payload, build_reviewer_payload

logger = logging.getLogger(__name__)


def handle_generate_reviewer(
    user_id: Optional[str],
    document: Optional[UploadedDocument],
    text_content: Optional[str],
    extraction_mode: Optional[str],
) -> ExtractionResult:
    """Handle reviewer generation request."""
    command = GenerateReviewerCommand(
        user_id=user_id,
        document=document,
        text_content=text_content,
        extraction_mode=extraction_mode,
    )
    daily_limit = get_ai_daily_limit()
    result = generate_reviewer(
        command=command,
        key_count=get_api_key_count,
        reserve_quota=partial(check_and_reserve, limit=daily_limit),
        generate=generate,
        build_payload=build_reviewer_payload,
        daily_limit=daily_limit,
    )
    logger.info(
        "Generated reviewer for user %s: %s categories, %s terms, %s remaining",
        user_id,
        len(result.reviewer.categories),
        result.reviewer.term_count(),
        result.remaining,
    )
    return result


def handle_generate_cards(
    user_id: Optional[str],
    document: Optional[UploadedDocument],
    text_content: Optional[str],
) -> CardsResult:
    """Handle flashcard generation request."""
    command = GenerateCardsCommand(user_id=user_id, document=document, text_content=text_content)
    daily_limit = get_ai_daily_limit()
    result = generate_cards(
        command=command,
        key_count=get_api_key_count,
        reserve_quota=partial(check_and_reserve, limit=daily_limit),
        generate=generate,
        build_payload=build_cards_payload,
        daily_limit=daily_limit,
    )
    logger.info("Generated %s flashcards for user %s, %s remaining", len(result.cards), user_id, result.remaining)
    return result
