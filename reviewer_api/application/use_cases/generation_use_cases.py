"""Generation use cases - reviewer and flashcard extraction pipelines.

Each pipeline runs strictly in order: provider precondition, quota gate,
input normalizer, prompt builder, generation client, recovery parser,
result assembler. Collaborators are passed in as callables.
"""
import logging
from typing import Callable, Optional

from ...domain.entities.quota import QuotaDecision
from ...domain.entities.reviewer import CardsResult, ExtractionResult
from ...domain.exceptions import ProviderNotConfiguredError, QuotaExceededError, ResponseParseError
from ...domain.value_objects.model_payload import ModelPayload, RawModelResponse
from ..commands.generate_cards_command import GenerateCardsCommand
from ..commands.generate_reviewer_command import GenerateReviewerCommand
from ..services.input_normalizer import CARDS_MAX_FILE_BYTES, REVIEWER_MAX_FILE_BYTES, normalize_input
from ..services.response_parser import parse_cards, parse_reviewer
from ..services.result_assembler import assemble_cards, assemble_reviewer

logger = logging.getLogger(__name__)


def _admit(
    user_id: Optional[str],
    key_count: Callable[[], int],
    reserve_quota: Callable[[Optional[str]], QuotaDecision],
    daily_limit: int,
) -> QuotaDecision:
    if key_count() == 0:
        logger.error("No OpenAI API keys configured")
        raise ProviderNotConfiguredError()

    decision = reserve_quota(user_id)
    if not decision.allowed:
        logger.info("Quota exhausted for user %s, resets at %s", user_id, decision.reset_at.isoformat())
        raise QuotaExceededError(decision, daily_limit)
    return decision


def generate_reviewer(
    command: GenerateReviewerCommand,
    key_count: Callable[[], int],
    reserve_quota: Callable[[Optional[str]], QuotaDecision],
    generate: Callable[[ModelPayload], RawModelResponse],
    build_payload: Callable,
    daily_limit: int,
) -> ExtractionResult:
    """
    Generate reviewer use case.

    Quota is consumed before input validation and is not refunded when a
    later stage fails.

    Returns:
        ExtractionResult with categories and remaining allowance
    """
    decision = _admit(command.user_id, key_count, reserve_quota, daily_limit)

    normalized = normalize_input(
        command.document,
        command.text_content,
        command.extraction_mode,
        max_file_bytes=REVIEWER_MAX_FILE_BYTES,
    )
    logger.info(
        "Generating reviewer for user %s from %s in %s mode",
        command.user_id,
        f"file {normalized.document.filename}" if normalized.is_file else f"{len(normalized.text)} chars of text",
        normalized.mode.value,
    )

    payload = build_payload(normalized)
    response = generate(payload)

    try:
        reviewer = parse_reviewer(response.text, normalized.mode)
    except ResponseParseError:
        logger.error("Reviewer parse failed for user %s (response length %s)", command.user_id, len(response.text or ""))
        raise

    return assemble_reviewer(reviewer, decision.remaining, normalized.mode)


def generate_cards(
    command: GenerateCardsCommand,
    key_count: Callable[[], int],
    reserve_quota: Callable[[Optional[str]], QuotaDecision],
    generate: Callable[[ModelPayload], RawModelResponse],
    build_payload: Callable,
    daily_limit: int,
) -> CardsResult:
    """
    Generate flashcards use case.

    Returns:
        CardsResult with flat term/definition cards and remaining allowance
    """
    decision = _admit(command.user_id, key_count, reserve_quota, daily_limit)

    normalized = normalize_input(
        command.document,
        command.text_content,
        max_file_bytes=CARDS_MAX_FILE_BYTES,
    )
    logger.info("Generating flashcards for user %s", command.user_id)

    payload = build_payload(normalized)
    response = generate(payload)
    cards = parse_cards(response.text)

    return assemble_cards(cards, decision.remaining)
