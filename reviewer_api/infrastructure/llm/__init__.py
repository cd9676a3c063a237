"""LLM infrastructure package."""
from .generation_client import generate
from .openai_client import get_api_key_count, get_openai_client, get_openai_model

__all__ = [
    "generate",
    "get_api_key_count",
    "get_openai_client",
    "get_openai_model",
]
