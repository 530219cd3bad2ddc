"""Factory functions for creating LLM adapters.

This module provides:
- Default model lookup for each provider
- Config assembly from a provider selection and settings
- Adapter instantiation based on provider
"""

from typing import Optional

from cardforge.config import Settings, get_settings
from cardforge.llm.adapters.base import BaseAdapter
from cardforge.llm.selector import ProviderSelection
from cardforge.llm.types import LLMConfig, LLMProvider


def get_default_model(provider: LLMProvider, settings: Optional[Settings] = None) -> str:
    """Get the configured model for a provider.

    Args:
        provider: The LLM provider
        settings: Settings to read from (defaults to the cached instance)

    Returns:
        Model name for the provider
    """
    settings = settings or get_settings()
    models = {
        LLMProvider.GEMINI: settings.gemini_model,
        LLMProvider.OPENAI: settings.openai_model,
        LLMProvider.ANTHROPIC: settings.anthropic_model,
    }
    return models[provider]


def build_config(selection: ProviderSelection, settings: Optional[Settings] = None) -> LLMConfig:
    """Assemble the adapter config for one selected provider."""
    settings = settings or get_settings()
    return LLMConfig(
        provider=selection.provider,
        model=get_default_model(selection.provider, settings),
        api_key=selection.api_key,
        timeout_seconds=settings.llm_timeout_seconds,
    )


def create_adapter(config: LLMConfig) -> BaseAdapter:
    """Create adapter instance for the specified provider.

    Args:
        config: LLM configuration with provider, model, and key

    Returns:
        Initialized adapter for the provider

    Raises:
        ValueError: If provider is unknown
    """
    if config.provider == LLMProvider.GEMINI:
        from cardforge.llm.adapters.gemini import GeminiAdapter
        return GeminiAdapter(config)
    elif config.provider == LLMProvider.OPENAI:
        from cardforge.llm.adapters.openai import OpenAIAdapter
        return OpenAIAdapter(config)
    elif config.provider == LLMProvider.ANTHROPIC:
        from cardforge.llm.adapters.anthropic import AnthropicAdapter
        return AnthropicAdapter(config)
    else:
        raise ValueError(f"Unknown provider: {config.provider}")
