"""Provider selection policy.

Selection is a pure function of the caller's credentials and an optional
explicit override. Nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from cardforge.llm.credentials import Credentials
from cardforge.llm.errors import (
    NoCredentialsConfigured,
    RequestedProviderNotConfigured,
    UnknownProvider,
)
from cardforge.llm.types import LLMProvider

logger = logging.getLogger(__name__)

# Auto-selection order, first configured provider wins
PROVIDER_PRIORITY: tuple[LLMProvider, ...] = (
    LLMProvider.GEMINI,
    LLMProvider.OPENAI,
    LLMProvider.ANTHROPIC,
)

AUTO = "auto"


@dataclass(frozen=True)
class ProviderSelection:
    """The provider chosen for one call and the secret to call it with."""
    provider: LLMProvider
    api_key: str = field(repr=False)


def parse_provider(name: Union[str, LLMProvider, None]) -> Optional[LLMProvider]:
    """Turn an override string into a provider; ``None`` means auto-select.

    Raises:
        UnknownProvider: If the name is not one of the supported providers.
    """
    if name is None or isinstance(name, LLMProvider):
        return name
    normalized = name.strip().lower()
    if not normalized or normalized == AUTO:
        return None
    try:
        return LLMProvider(normalized)
    except ValueError:
        raise UnknownProvider(name) from None


def select_provider(
    credentials: Credentials,
    override: Union[str, LLMProvider, None] = None,
) -> ProviderSelection:
    """Pick exactly one provider for a call.

    Args:
        credentials: The caller's configured secrets.
        override: Explicit provider name, ``"auto"`` or ``None``.

    Raises:
        UnknownProvider: If the override names no supported provider.
        RequestedProviderNotConfigured: If the override has no matching secret.
        NoCredentialsConfigured: If auto-selecting and no secret exists.
    """
    requested = parse_provider(override)

    if requested is not None:
        api_key = credentials.get(requested)
        if not api_key:
            raise RequestedProviderNotConfigured(requested)
        return ProviderSelection(provider=requested, api_key=api_key)

    for provider in PROVIDER_PRIORITY:
        api_key = credentials.get(provider)
        if api_key:
            logger.debug(f"Auto-selected provider {provider.value}")
            return ProviderSelection(provider=provider, api_key=api_key)

    raise NoCredentialsConfigured()
