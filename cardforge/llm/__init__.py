"""Multi-provider AI layer for project cards.

This package runs the card tasks (analysis, clarification chat, PRD,
description, feature suggestions) against Gemini, OpenAI or Anthropic with
one set of prompts and one set of result types.

Usage:
    from cardforge.llm import CardAssistant, Credentials

    assistant = CardAssistant(Credentials.from_row(row))
    result = await assistant.analyze(project, card)

    # Check provider capabilities
    caps = get_capabilities(LLMProvider.OPENAI)
    if caps.json_mode:
        ...
"""

# Enums
from cardforge.llm.types import (
    LLMProvider,
    MessageRole,
    NextAction,
    TaskType,
)

# Core types
from cardforge.llm.types import (
    AnalysisResult,
    CardContext,
    ChatTurnResult,
    DocumentResult,
    ExistingCard,
    FeatureSuggestion,
    LLMConfig,
    LLMResult,
    Message,
    ProjectContext,
    SuggestionList,
    TokenUsage,
)

# Capabilities
from cardforge.llm.capabilities import (
    CAPABILITIES,
    ProviderCapabilities,
    get_capabilities,
    supports_feature,
)

# Errors
from cardforge.llm.errors import (
    AIServiceError,
    InvalidResponseShape,
    NoCredentialsConfigured,
    RequestedProviderNotConfigured,
    UnknownProvider,
    VendorAuthenticationFailed,
    VendorError,
    VendorRateLimited,
    VendorTransportFailure,
    translate_vendor_error,
)

# Credentials and selection
from cardforge.llm.credentials import (
    CredentialUpdate,
    Credentials,
    obfuscate_key,
)
from cardforge.llm.selector import (
    PROVIDER_PRIORITY,
    ProviderSelection,
    select_provider,
)

# Client and Factory
from cardforge.llm.client import (
    CardAssistant,
    get_assistant,
)
from cardforge.llm.factory import (
    build_config,
    create_adapter,
    get_default_model,
)

__all__ = [
    # Enums
    "LLMProvider",
    "MessageRole",
    "NextAction",
    "TaskType",
    # Core types
    "AnalysisResult",
    "CardContext",
    "ChatTurnResult",
    "DocumentResult",
    "ExistingCard",
    "FeatureSuggestion",
    "LLMConfig",
    "LLMResult",
    "Message",
    "ProjectContext",
    "SuggestionList",
    "TokenUsage",
    # Capabilities
    "ProviderCapabilities",
    "CAPABILITIES",
    "get_capabilities",
    "supports_feature",
    # Errors
    "AIServiceError",
    "InvalidResponseShape",
    "NoCredentialsConfigured",
    "RequestedProviderNotConfigured",
    "UnknownProvider",
    "VendorAuthenticationFailed",
    "VendorError",
    "VendorRateLimited",
    "VendorTransportFailure",
    "translate_vendor_error",
    # Credentials and selection
    "CredentialUpdate",
    "Credentials",
    "obfuscate_key",
    "PROVIDER_PRIORITY",
    "ProviderSelection",
    "select_provider",
    # Client
    "CardAssistant",
    "get_assistant",
    # Factory
    "build_config",
    "create_adapter",
    "get_default_model",
]
