"""Upstream completion provider access.

Wraps agno's Agent around an OpenAI or Azure OpenAI chat model and exposes
plain text deltas to the relay. Keeps provider details away from the HTTP layer.
"""

from src.completion.config import CompletionConfig, get_completion_config
from src.completion.service import (
    CompletionError,
    CompletionService,
    get_completion_service,
)

__all__ = [
    "CompletionConfig",
    "CompletionError",
    "CompletionService",
    "get_completion_config",
    "get_completion_service",
]
