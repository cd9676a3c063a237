"""OpenAI client infrastructure - key pool, rotation strategy and cached clients."""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from openai import OpenAI

from ...config.config import (
    get_key_rotation_strategy_name,
    get_openai_api_keys,
    get_openai_model_name,
)
from ...domain.exceptions import ProviderNotConfiguredError

logger = logging.getLogger(__name__)

_clients: Dict[int, OpenAI] = {}
_strategy: Optional["KeyRotationStrategy"] = None
_lock = threading.Lock()


class KeyRotationStrategy(ABC):
    """Decides the order in which pooled API keys are tried."""

    @abstractmethod
    def order(self, key_count: int) -> List[int]:
        """Return key indexes to try, first choice first."""


class FailoverKeyRotation(KeyRotationStrategy):
    """Always start from the first key and fall over to the next ones."""

    def order(self, key_count: int) -> List[int]:
        return list(range(key_count))


class RoundRobinKeyRotation(KeyRotationStrategy):
    """Start each call one key further than the previous call."""

    def __init__(self) -> None:
        self._next = 0
        self._lock = threading.Lock()

    def order(self, key_count: int) -> List[int]:
        if key_count <= 0:
            return []
        with self._lock:
            start = self._next % key_count
            self._next = start + 1
        return [(start + i) % key_count for i in range(key_count)]


_STRATEGIES = {
    "failover": FailoverKeyRotation,
    "round_robin": RoundRobinKeyRotation,
}


def get_key_rotation_strategy() -> KeyRotationStrategy:
    """
    Get the configured key rotation strategy (singleton).

    Unknown names fall back to failover.
    """
    global _strategy
    with _lock:
        if _strategy is None:
            name = get_key_rotation_strategy_name()
            strategy_cls = _STRATEGIES.get(name)
            if strategy_cls is None:
                logger.warning("Unknown KEY_ROTATION_STRATEGY %r, using failover", name)
                strategy_cls = FailoverKeyRotation
            _strategy = strategy_cls()
            logger.info("Using %s key rotation", type(_strategy).__name__)
        return _strategy


def set_key_rotation_strategy(strategy: KeyRotationStrategy) -> None:
    """Replace the key rotation strategy."""
    global _strategy
    with _lock:
        _strategy = strategy


def get_api_key_count() -> int:
    """Number of configured provider keys."""
    return len(get_openai_api_keys())


def get_openai_client(key_index: int) -> OpenAI:
    """
    Get or create the OpenAI client bound to one pooled key.

    Clients are created with SDK retries disabled; failing over to another
    key is the only retry made.

    Args:
        key_index: Index into the configured key pool

    Returns:
        Configured OpenAI client instance

    Raises:
        ProviderNotConfiguredError: If no key exists at that index
    """
    keys = get_openai_api_keys()
    if not keys or key_index >= len(keys):
        raise ProviderNotConfiguredError()

    with _lock:
        client = _clients.get(key_index)
        if client is None:
            client = OpenAI(api_key=keys[key_index], max_retries=0)
            _clients[key_index] = client
            logger.debug("Initialized OpenAI client for key %s", key_index + 1)
        return client


def reset_clients() -> None:
    """Drop cached clients so changed keys are picked up."""
    with _lock:
        _clients.clear()


def get_openai_model() -> str:
    """
    Get the configured OpenAI model name.

    Returns:
        Model name string (default: gpt-4o-mini)
    """
    return get_openai_model_name()
