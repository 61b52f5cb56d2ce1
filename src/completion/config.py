"""Completion provider configuration with environment variable loading.

Pydantic-based configuration for the upstream chat model.
Supports OpenAI, OpenAI-compatible APIs via custom base URL, and Azure OpenAI.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name) or default)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name) or default)


class CompletionConfig(BaseModel):
    """Configuration for the upstream completion provider.

    Attributes:
        provider: Which client to build ("openai" or "azure").
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        azure_endpoint: Azure OpenAI resource endpoint.
        azure_deployment: Azure OpenAI deployment name.
        api_version: Azure OpenAI API version.
        max_tokens: Maximum tokens in generated response.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        top_p: Nucleus sampling probability mass.
        system_prompt: Fixed system message sent before every prompt.
    """

    provider: Literal["openai", "azure"] = Field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "openai").lower(),
        validate_default=True,
        description="Upstream provider",
    )
    api_key: str = Field(
        default_factory=lambda: os.getenv(
            "LLM_API_KEY",
            os.getenv("OPENAI_API_KEY", os.getenv("AZURE_OPENAI_API_KEY", "")),
        ),
        validate_default=True,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv(
            "LLM_MODEL", os.getenv("AZURE_OPENAI_MODEL", "gpt-4o-mini")
        ),
        description="Model to use",
    )
    azure_endpoint: str | None = Field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_ENDPOINT") or None,
    )
    azure_deployment: str | None = Field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_DEPLOYMENT") or None,
    )
    api_version: str | None = Field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_API_VERSION") or None,
    )
    max_tokens: int = Field(
        default_factory=lambda: _env_int("MAX_TOKENS", 4096),
        validate_default=True,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    temperature: float = Field(
        default_factory=lambda: _env_float("TEMPERATURE", 1.0),
        validate_default=True,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    top_p: float = Field(
        default_factory=lambda: _env_float("TOP_P", 1.0),
        validate_default=True,
        ge=0.0,
        le=1.0,
        description="Nucleus sampling probability mass",
    )
    system_prompt: str = Field(
        default_factory=lambda: os.getenv("SYSTEM_PROMPT", "You are a helpful assistant."),
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()

    @model_validator(mode="after")
    def validate_azure_settings(self) -> "CompletionConfig":
        """Azure needs an endpoint, a deployment and an API version."""
        if self.provider != "azure":
            return self
        missing = [
            name
            for name, value in (
                ("AZURE_OPENAI_ENDPOINT", self.azure_endpoint),
                ("AZURE_OPENAI_DEPLOYMENT", self.azure_deployment),
                ("AZURE_OPENAI_API_VERSION", self.api_version),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Azure provider requires {', '.join(missing)}")
        return self


def get_completion_config() -> CompletionConfig:
    """Create completion configuration from environment.

    Returns:
        Configured CompletionConfig instance.

    Raises:
        ValueError: If no API key is set or Azure settings are incomplete.
    """
    return CompletionConfig()
