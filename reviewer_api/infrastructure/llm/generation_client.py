"""Generation client - uploads documents and runs completions against OpenAI."""
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import openai
from openai import OpenAI

from ...config.config import (
    get_file_poll_interval_seconds,
    get_file_poll_timeout_seconds,
    get_openai_max_output_tokens,
)
from ...domain.exceptions import (
    FileProcessingError,
    FileProcessingTimeoutError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderTimeoutError,
    RateLimitError,
)
from ...domain.value_objects.model_payload import ModelPayload, RawModelResponse
from .openai_client import (
    get_api_key_count,
    get_key_rotation_strategy,
    get_openai_client,
    get_openai_model,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FILE_PURPOSE = "user_data"
PROCESSING_STATUSES = frozenset({"uploaded", "processing"})
FAILED_STATUSES = frozenset({"error", "failed"})


def translate_provider_error(exc: Exception) -> ProviderError:
    """
    Map an SDK exception to the typed provider error hierarchy.

    Args:
        exc: Exception raised by the OpenAI SDK

    Returns:
        RateLimitError, ProviderTimeoutError or ProviderError
    """
    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, openai.APITimeoutError):
        return ProviderTimeoutError(str(exc))
    if isinstance(exc, openai.RateLimitError):
        return RateLimitError(str(exc))
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == 429:
            return RateLimitError(str(exc))
        if exc.status_code in (408, 504):
            return ProviderTimeoutError(str(exc))
    return ProviderError(str(exc))


def call_with_rotation(operation: Callable[[OpenAI], T], description: str) -> Tuple[T, int]:
    """
    Run an operation with pooled keys in rotation order.

    The next key is tried only when the current one is rate limited; any
    other error is raised at once.

    Args:
        operation: Callable receiving an OpenAI client
        description: Label used in logs

    Returns:
        Tuple of (operation result, key index that succeeded)

    Raises:
        ProviderNotConfiguredError: No keys configured
        RateLimitError: Every key was rate limited
        ProviderError: Non rate limit provider failure
    """
    key_count = get_api_key_count()
    if key_count == 0:
        raise ProviderNotConfiguredError()

    last_error: Optional[RateLimitError] = None
    for attempt, key_index in enumerate(get_key_rotation_strategy().order(key_count), start=1):
        logger.info("%s attempt %s/%s with key %s", description, attempt, key_count, key_index + 1)
        try:
            result = operation(get_openai_client(key_index))
        except openai.OpenAIError as exc:
            error = translate_provider_error(exc)
            logger.warning("%s with key %s failed: %s", description, key_index + 1, exc)
            if not isinstance(error, RateLimitError):
                raise error from exc
            last_error = error
            continue
        logger.info("%s succeeded with key %s", description, key_index + 1)
        return result, key_index

    raise last_error or RateLimitError(f"All API keys exhausted for {description}")


def wait_for_file_ready(
    client: OpenAI,
    file_id: str,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Any:
    """
    Poll an uploaded file until the provider has finished processing it.

    Args:
        client: Client bound to the key that uploaded the file
        file_id: Provider file id
        poll_interval: Seconds between status checks
        timeout: Maximum seconds to wait

    Returns:
        Provider file object in a ready state

    Raises:
        FileProcessingError: Provider reported a failed state
        FileProcessingTimeoutError: Still processing when the timeout elapsed
    """
    poll_interval = get_file_poll_interval_seconds() if poll_interval is None else poll_interval
    timeout = get_file_poll_timeout_seconds() if timeout is None else timeout
    started = clock()

    try:
        file_obj = client.files.retrieve(file_id)
        while file_obj.status in PROCESSING_STATUSES:
            waited = clock() - started
            if waited >= timeout:
                logger.error("File %s still processing after %.1fs", file_id, waited)
                raise FileProcessingTimeoutError(file_id, waited)
            sleep(poll_interval)
            file_obj = client.files.retrieve(file_id)
    except openai.OpenAIError as exc:
        raise translate_provider_error(exc) from exc

    if file_obj.status in FAILED_STATUSES:
        logger.error("File %s processing failed: %s", file_id, getattr(file_obj, "status_details", None))
        raise FileProcessingError(file_id, file_obj.status)

    logger.info("File %s ready after %.1fs", file_id, clock() - started)
    return file_obj


def build_messages(payload: ModelPayload, file_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """Build chat messages for a payload, referencing an uploaded file when given."""
    if file_id is not None:
        user_content: Any = [
            {"type": "file", "file": {"file_id": file_id}},
            {"type": "text", "text": payload.user_text},
        ]
    else:
        user_content = payload.user_text

    return [
        {"role": "system", "content": payload.system_instruction},
        {"role": "user", "content": user_content},
    ]


def _create_completion(client: OpenAI, payload: ModelPayload, file_id: Optional[str] = None) -> str:
    model_name = get_openai_model()
    max_tokens = min(payload.params.max_output_tokens, get_openai_max_output_tokens())

    request: Dict[str, Any] = {
        "model": model_name,
        "messages": build_messages(payload, file_id),
        "temperature": payload.params.temperature,
        "max_completion_tokens": max_tokens,
    }
    if payload.params.json_response:
        request["response_format"] = {"type": "json_object"}

    logger.info(
        "LLM Request - Model: %s, File: %s, Max tokens: %s",
        model_name,
        file_id is not None,
        max_tokens,
    )
    response = client.chat.completions.create(**request)

    usage = response.usage
    if usage is not None:
        logger.info(
            "LLM Response - Model: %s, Tokens: prompt=%s, completion=%s, total=%s",
            model_name,
            usage.prompt_tokens,
            usage.completion_tokens,
            usage.total_tokens,
        )

    choice = response.choices[0]
    if choice.finish_reason == "length":
        logger.warning("LLM response truncated at %s tokens", max_tokens)
    return choice.message.content or ""


def _delete_file(client: OpenAI, file_id: str) -> None:
    try:
        client.files.delete(file_id)
        logger.debug("Deleted provider file %s", file_id)
    except openai.OpenAIError as exc:
        logger.warning("Failed to delete provider file %s: %s", file_id, exc)


def generate(payload: ModelPayload) -> RawModelResponse:
    """
    Submit a payload to the model and return the raw text.

    For file payloads the document is uploaded first (with key rotation),
    polled until ready, and the completion runs on the same key. The
    uploaded file is deleted afterwards whatever the outcome.

    Args:
        payload: Request built by the prompt builder

    Returns:
        RawModelResponse with the unparsed model text

    Raises:
        ProviderNotConfiguredError, RateLimitError, ProviderTimeoutError,
        FileProcessingError, ProviderError
    """
    if not payload.has_file:
        text, key_index = call_with_rotation(
            lambda client: _create_completion(client, payload),
            "Content generation",
        )
        return RawModelResponse(text=text, key_index=key_index)

    uploaded, key_index = call_with_rotation(
        lambda client: client.files.create(
            file=(payload.file_name, payload.file_content, payload.mime_type),
            purpose=FILE_PURPOSE,
        ),
        "File upload",
    )
    client = get_openai_client(key_index)
    logger.info("Uploaded %s as provider file %s", payload.file_name, uploaded.id)

    try:
        wait_for_file_ready(client, uploaded.id)
        try:
            text = _create_completion(client, payload, file_id=uploaded.id)
        except openai.OpenAIError as exc:
            raise translate_provider_error(exc) from exc
    finally:
        _delete_file(client, uploaded.id)

    return RawModelResponse(text=text, key_index=key_index)
