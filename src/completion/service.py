"""Agno-backed completion service with streaming support.

Wraps an agno Agent so the HTTP layer only sees plain text deltas.

Notes:

1. **No storage** - the Agent is created without a db, so every request is a
   single-turn exchange (system prompt + user prompt). Nothing is persisted.

2. **Singleton** - model client construction is reused across requests via
   get_completion_service().

3. **Errors propagate** - unlike a chat UI helper, stream_deltas() raises
   CompletionError instead of yielding error text. The stream producer decides
   how a failure is framed on the wire.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from agno.agent import Agent
from agno.models.azure import AzureOpenAI
from agno.models.openai import OpenAIChat

from src.completion.config import CompletionConfig, get_completion_config

logger = logging.getLogger(__name__)

# agno event names
_CONTENT_EVENT = "RunContent"
_ERROR_EVENT = "RunError"


class CompletionError(Exception):
    """Raised when the upstream provider fails or reports an error."""

    pass


class CompletionService:
    """Service for relaying prompts to the upstream chat model."""

    def __init__(self, config: CompletionConfig | None = None) -> None:
        """Initialize the completion service.

        Args:
            config: Optional provider configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_completion_config()
        self._agent = self._create_agent()

    def _create_model(self) -> Any:
        """Create the agno model client for the configured provider."""
        cfg = self._config
        if cfg.provider == "azure":
            return AzureOpenAI(
                id=cfg.model_name,
                api_key=cfg.api_key,
                azure_endpoint=cfg.azure_endpoint,
                azure_deployment=cfg.azure_deployment,
                api_version=cfg.api_version,
                temperature=cfg.temperature,
                top_p=cfg.top_p,
                max_tokens=cfg.max_tokens,
            )
        return OpenAIChat(
            id=cfg.model_name,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            temperature=cfg.temperature,
            top_p=cfg.top_p,
            max_tokens=cfg.max_tokens,
        )

    def _create_agent(self) -> Agent:
        """Create the agno agent instance.

        Returns:
            Agent with the configured model and system prompt, without storage.
        """
        return Agent(
            model=self._create_model(),
            system_message=self._config.system_prompt,
            markdown=False,
        )

    async def stream_deltas(self, message: str) -> AsyncGenerator[str]:
        """Stream response text deltas for a prompt.

        Args:
            message: The user's prompt.

        Yields:
            Text deltas in the order the provider produced them.

        Raises:
            CompletionError: If the provider fails or emits an error event.
        """
        try:
            async for chunk in self._agent.arun(message, stream=True):
                event = getattr(chunk, "event", _CONTENT_EVENT)
                if event == _ERROR_EVENT:
                    raise CompletionError(str(getattr(chunk, "content", "") or "run error"))
                if event != _CONTENT_EVENT:
                    continue
                content = getattr(chunk, "content", None)
                if isinstance(content, str) and content:
                    yield content
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(f"Upstream stream failed: {e}") from e

    async def complete(self, message: str) -> str:
        """Get the complete response for a prompt.

        Args:
            message: The user's prompt.

        Returns:
            Complete response text.

        Raises:
            CompletionError: If the provider fails.
        """
        try:
            response = await self._agent.arun(message)
        except Exception as e:
            raise CompletionError(f"Upstream request failed: {e}") from e
        return response.content or ""


# Module-level singleton instance
_completion_service: CompletionService | None = None


def get_completion_service() -> CompletionService:
    """Get or create the global completion service.

    Returns:
        The CompletionService instance.

    Raises:
        ValueError: If the provider configuration is invalid.
    """
    global _completion_service
    if _completion_service is None:
        _completion_service = CompletionService()
    return _completion_service
