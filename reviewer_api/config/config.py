"""Configuration module for reviewer-api."""
import os
from typing import List, Tuple
from urllib.parse import quote, quote_plus

MAX_PROVIDER_KEYS = 5


def _get_required_env(name: str) -> str:
    """Get required environment variable or raise error."""
    value = os.getenv(name)
    if value is None or value == "":
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _get_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number, got {value!r}") from exc


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {value!r}") from exc


def _get_database_settings() -> Tuple[str, str, str, str, str]:
    return (
        _get_required_env("REVIEWER_DB_HOST"),
        _get_required_env("REVIEWER_DB_PORT"),
        _get_required_env("REVIEWER_DB_USER"),
        _get_required_env("REVIEWER_DB_PASSWORD"),
        _get_required_env("REVIEWER_DB_NAME"),
    )


def get_postgres_dsn() -> str:
    """Get Postgres DSN from environment variables, credentials percent-encoded."""
    host, port, user, password, dbname = _get_database_settings()
    return f"postgresql://{quote(user, safe='')}:{quote(password, safe='')}@{host}:{port}/{quote(dbname, safe='')}"


def get_migration_database_url() -> str:
    """Get SQLAlchemy database URL for Alembic, credentials URL-quoted."""
    host, port, user, password, dbname = _get_database_settings()
    return f"postgresql+psycopg2://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}/{quote_plus(dbname)}"


def get_openai_api_keys() -> List[str]:
    """
    Get the pool of OpenAI API keys.

    Keys are read from OPENAI_API_KEY_1 .. OPENAI_API_KEY_5. A plain
    OPENAI_API_KEY, when set, is used as the first key of the pool.
    Duplicates are dropped, order is preserved.

    Returns:
        List of API keys (may be empty)
    """
    candidates = [os.getenv("OPENAI_API_KEY")]
    candidates.extend(os.getenv(f"OPENAI_API_KEY_{i}") for i in range(1, MAX_PROVIDER_KEYS + 1))

    keys: List[str] = []
    for key in candidates:
        if key and key not in keys:
            keys.append(key)
    return keys


def get_openai_model_name() -> str:
    """Get OpenAI model name from environment variables, with safe default."""
    return os.getenv("OPENAI_MODEL_NAME", "gpt-4o-mini")


def get_openai_max_output_tokens() -> int:
    """Upper bound the configured model accepts for completion tokens."""
    return _get_int_env("OPENAI_MAX_OUTPUT_TOKENS", 16384)


def get_key_rotation_strategy_name() -> str:
    """Get key rotation strategy name (failover or round_robin)."""
    return os.getenv("KEY_ROTATION_STRATEGY", "failover").strip().lower()


def get_ai_daily_limit() -> int:
    """Get the per-user daily AI generation allowance."""
    return _get_int_env("AI_DAILY_LIMIT", 10)


def get_file_poll_interval_seconds() -> float:
    """Seconds to wait between provider file status checks."""
    return _get_float_env("FILE_POLL_INTERVAL_SECONDS", 1.0)


def get_file_poll_timeout_seconds() -> float:
    """Maximum seconds to wait for an uploaded file to become ready."""
    return _get_float_env("FILE_POLL_TIMEOUT_SECONDS", 120.0)
