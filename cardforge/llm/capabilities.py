"""Capability matrix for request shaping across LLM providers."""

from dataclasses import dataclass
from cardforge.llm.types import LLMProvider


@dataclass(frozen=True)
class ProviderCapabilities:
    """What a provider's chat API can do natively."""
    json_mode: bool = False  # Vendor-enforced JSON object responses
    system_message: bool = True  # Separate system instruction


# Capability matrix by provider
CAPABILITIES: dict[LLMProvider, ProviderCapabilities] = {
    LLMProvider.GEMINI: ProviderCapabilities(
        json_mode=False,
        system_message=False,
    ),
    LLMProvider.OPENAI: ProviderCapabilities(
        json_mode=True,
        system_message=True,
    ),
    LLMProvider.ANTHROPIC: ProviderCapabilities(
        json_mode=False,
        system_message=True,
    ),
}


def get_capabilities(provider: LLMProvider) -> ProviderCapabilities:
    """Get capabilities for a provider."""
    return CAPABILITIES.get(provider, ProviderCapabilities())


def supports_feature(provider: LLMProvider, feature: str) -> bool:
    """Check if provider supports a specific feature."""
    caps = get_capabilities(provider)
    return getattr(caps, feature, False)
