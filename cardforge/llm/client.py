"""CardAssistant - provider-agnostic entry point for card AI tasks.

Every call selects a provider from the caller's credentials, builds a fresh
adapter and makes exactly one outbound request. Nothing is shared between
calls, so one assistant can safely serve concurrent requests.

Usage:
    from cardforge.llm import CardAssistant, Credentials

    assistant = CardAssistant(Credentials.from_row(row))
    analysis = await assistant.analyze(project, card)
    reply = await assistant.chat("It should use OAuth", project, card, history=turns)
    prd = await assistant.generate_prd(project, card, clarifications=turns)
"""

import logging
from typing import Optional, Sequence, Union

from cardforge.config import Settings, get_settings
from cardforge.llm.adapters.base import BaseAdapter
from cardforge.llm.credentials import Credentials
from cardforge.llm.factory import build_config, create_adapter
from cardforge.llm.selector import select_provider
from cardforge.llm.types import (
    AnalysisResult,
    CardContext,
    ChatTurnResult,
    DocumentResult,
    ExistingCard,
    LLMProvider,
    Message,
    MessageRole,
    ProjectContext,
    SuggestionList,
)

logger = logging.getLogger(__name__)

ProviderOverride = Union[str, LLMProvider, None]


class CardAssistant:
    """Runs the card tasks against whichever provider the caller has configured.

    Examples:
        # Server-level keys from the environment
        assistant = CardAssistant(Credentials.from_settings(get_settings()))

        # Force a vendor for one call
        result = await assistant.generate_description(project, card, provider="anthropic")
    """

    def __init__(self, credentials: Credentials, settings: Optional[Settings] = None):
        self.credentials = credentials
        self.settings = settings or get_settings()

    def adapter_for(self, provider: ProviderOverride = None) -> BaseAdapter:
        """Select a provider and build the adapter for one call.

        Raises:
            UnknownProvider, RequestedProviderNotConfigured, NoCredentialsConfigured
        """
        selection = select_provider(self.credentials, provider)
        config = build_config(selection, self.settings)
        logger.info(
            f"Using {config.provider.value} for card task",
            extra={"provider": config.provider.value, "model": config.model},
        )
        return create_adapter(config)

    async def analyze(
        self,
        project: ProjectContext,
        card: CardContext,
        provider: ProviderOverride = None,
    ) -> AnalysisResult:
        """Decide whether the card is ready for a PRD or needs questions answered."""
        return await self.adapter_for(provider).analyze_card(project, card)

    async def chat(
        self,
        message: str,
        project: ProjectContext,
        card: CardContext,
        history: Optional[Sequence[Message]] = None,
        provider: ProviderOverride = None,
    ) -> ChatTurnResult:
        """Answer one user message in the clarification conversation.

        The caller's history is not modified; the new message is appended to
        a copy that is sent in full.
        """
        turns = [*(history or []), Message(role=MessageRole.USER, content=message)]
        return await self.adapter_for(provider).chat(turns, project, card)

    async def generate_prd(
        self,
        project: ProjectContext,
        card: CardContext,
        clarifications: Optional[Sequence[Message]] = None,
        template: Optional[str] = None,
        provider: ProviderOverride = None,
    ) -> DocumentResult:
        """Write a PRD for the card."""
        return await self.adapter_for(provider).generate_prd(
            project, card, clarifications=clarifications, template=template
        )

    async def generate_description(
        self,
        project: ProjectContext,
        card: CardContext,
        provider: ProviderOverride = None,
    ) -> DocumentResult:
        """Write a structured description for the card."""
        return await self.adapter_for(provider).generate_description(project, card)

    async def suggest_features(
        self,
        project: ProjectContext,
        guidance: Optional[str] = None,
        count: Optional[int] = None,
        existing_cards: Optional[Sequence[ExistingCard]] = None,
        provider: ProviderOverride = None,
    ) -> SuggestionList:
        """Suggest new feature cards for the project.

        ``count`` falls back to ``settings.default_suggestion_count``.
        """
        if count is None:
            count = self.settings.default_suggestion_count
        if count < 1:
            raise ValueError("count must be at least 1")
        return await self.adapter_for(provider).suggest_features(
            project, guidance=guidance, count=count, existing_cards=existing_cards
        )


def get_assistant(
    credentials: Optional[Credentials] = None,
    settings: Optional[Settings] = None,
) -> CardAssistant:
    """Get a CardAssistant, defaulting to the server-level keys from settings."""
    settings = settings or get_settings()
    if credentials is None:
        credentials = Credentials.from_settings(settings)
    return CardAssistant(credentials, settings)
