"""Tests for the CardAssistant facade."""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cardforge.llm.adapters import AnthropicAdapter, GeminiAdapter, OpenAIAdapter
from cardforge.llm.client import CardAssistant, get_assistant
from cardforge.llm.credentials import Credentials
from cardforge.llm.errors import (
    NoCredentialsConfigured,
    RequestedProviderNotConfigured,
    UnknownProvider,
)
from cardforge.llm.factory import build_config, get_default_model
from cardforge.llm.selector import ProviderSelection
from cardforge.llm.types import (
    DocumentResult,
    ExistingCard,
    LLMProvider,
    Message,
    MessageRole,
)

CHAT_REPLY = '{"message": "Which IdP?", "isComplete": false, "nextAction": "continue_chat"}'


class TestFactoryConfig:
    """Tests for model and config resolution."""

    def test_default_models(self, settings):
        assert get_default_model(LLMProvider.OPENAI, settings) == "gpt-4o"
        assert get_default_model(LLMProvider.ANTHROPIC, settings) == "claude-3-5-sonnet-20241022"
        assert get_default_model(LLMProvider.GEMINI, settings) == "gemini-2.0-flash"

    def test_build_config_uses_selection_and_timeout(self, settings):
        settings.llm_timeout_seconds = 12.5
        config = build_config(ProviderSelection(LLMProvider.OPENAI, "sk-key"), settings)
        assert config.provider == LLMProvider.OPENAI
        assert config.api_key == "sk-key"
        assert config.model == "gpt-4o"
        assert config.timeout_seconds == 12.5


class TestCardAssistant:
    """Tests for provider routing and argument handling."""

    @pytest.mark.asyncio
    async def test_routes_to_priority_provider(self, all_credentials, settings, chat_model, project, card):
        """With every key configured the call goes to Gemini."""
        model = chat_model('{"needsClarification": false}')
        assistant = CardAssistant(all_credentials, settings)

        with patch.object(GeminiAdapter, "build_client", return_value=model):
            result = await assistant.analyze(project, card)

        assert result.needs_clarification is False
        model.ainvoke.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_override_routes_to_requested_provider(self, all_credentials, settings, chat_model, project, card):
        model = chat_model("# PRD body")
        assistant = CardAssistant(all_credentials, settings)

        with patch.object(AnthropicAdapter, "build_client", return_value=model):
            result = await assistant.generate_prd(project, card, provider="anthropic")

        assert result == DocumentResult(content="# PRD body", provider=LLMProvider.ANTHROPIC)

    @pytest.mark.asyncio
    async def test_adapter_gets_selected_key(self, settings, project, card):
        """The adapter is built with the key of the selected provider."""
        creds = Credentials(keys={LLMProvider.OPENAI: "sk-only-openai-key"})
        adapter = MagicMock()
        adapter.generate_description = AsyncMock(
            return_value=DocumentResult(content="d", provider=LLMProvider.OPENAI)
        )

        with patch("cardforge.llm.client.create_adapter", return_value=adapter) as create:
            await CardAssistant(creds, settings).generate_description(project, card)

        config = create.call_args.args[0]
        assert config.provider == LLMProvider.OPENAI
        assert config.api_key == "sk-only-openai-key"
        assert config.model == settings.openai_model

    def test_fresh_adapter_per_call(self, all_credentials, settings):
        """No adapter is reused between calls."""
        assistant = CardAssistant(all_credentials, settings)
        first = assistant.adapter_for()
        second = assistant.adapter_for()
        assert isinstance(first, GeminiAdapter)
        assert first is not second

    @pytest.mark.asyncio
    async def test_chat_appends_message_without_mutating_history(
        self, all_credentials, settings, chat_model, project, card
    ):
        """The new message is sent last and the caller's list is untouched."""
        history = [
            Message(role=MessageRole.USER, content="Add SSO"),
            Message(role=MessageRole.ASSISTANT, content="For which users?"),
        ]
        snapshot = list(history)
        model = chat_model(CHAT_REPLY)
        assistant = CardAssistant(all_credentials, settings)

        with patch.object(OpenAIAdapter, "build_client", return_value=model):
            result = await assistant.chat("Employees only", project, card, history=history, provider="openai")

        assert history == snapshot
        sent = model.ainvoke.call_args.args[0]
        assert [m.content for m in sent[1:]] == ["Add SSO", "For which users?", "Employees only"]
        assert result.content == "Which IdP?"

    @pytest.mark.asyncio
    async def test_chat_without_history(self, all_credentials, settings, chat_model, project, card):
        model = chat_model(CHAT_REPLY)
        assistant = CardAssistant(all_credentials, settings)

        with patch.object(OpenAIAdapter, "build_client", return_value=model):
            await assistant.chat("Start", project, card, provider="openai")

        sent = model.ainvoke.call_args.args[0]
        assert [m.content for m in sent[1:]] == ["Start"]

    @pytest.mark.asyncio
    async def test_suggestion_count_defaults_from_settings(self, all_credentials, settings, chat_model, project):
        settings.default_suggestion_count = 2
        reply = json.dumps({"suggestions": [
            {"title": f"F{i}", "description": "d", "priority": "Low"} for i in range(4)
        ]})
        model = chat_model(reply)
        assistant = CardAssistant(all_credentials, settings)

        with patch.object(GeminiAdapter, "build_client", return_value=model):
            result = await assistant.suggest_features(
                project, existing_cards=[ExistingCard(title="Login page")]
            )

        assert [s.title for s in result.suggestions] == ["F0", "F1"]
        assert "Generate 2 innovative feature suggestions" in model.ainvoke.call_args.args[0][0].content

    @pytest.mark.asyncio
    async def test_invalid_count_rejected(self, all_credentials, settings, project):
        with pytest.raises(ValueError):
            await CardAssistant(all_credentials, settings).suggest_features(project, count=0)


class TestSelectionErrors:
    """Selection errors surface before any vendor call."""

    @pytest.mark.asyncio
    async def test_no_credentials(self, settings, project, card):
        with patch("cardforge.llm.client.create_adapter") as create:
            with pytest.raises(NoCredentialsConfigured):
                await CardAssistant(Credentials(), settings).analyze(project, card)
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_requested_provider_missing(self, settings, project, card):
        creds = Credentials(keys={LLMProvider.GEMINI: "g-key"})
        with pytest.raises(RequestedProviderNotConfigured) as exc_info:
            await CardAssistant(creds, settings).generate_description(project, card, provider="openai")
        assert exc_info.value.provider == LLMProvider.OPENAI

    @pytest.mark.asyncio
    async def test_unknown_provider(self, all_credentials, settings, project, card):
        with pytest.raises(UnknownProvider):
            await CardAssistant(all_credentials, settings).analyze(project, card, provider="llama")


class TestGetAssistant:
    """Tests for the get_assistant helper."""

    def test_defaults_to_server_keys(self, settings):
        settings.anthropic_api_key = "sk-ant-server-key"
        assistant = get_assistant(settings=settings)
        assert assistant.credentials.get(LLMProvider.ANTHROPIC) == "sk-ant-server-key"

    def test_explicit_credentials(self, all_credentials, settings):
        assert get_assistant(all_credentials, settings).credentials is all_credentials
