"""
Pytest configuration and fixtures.

Vendor chat models are replaced with mocks so no test needs credentials
or network access.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage

from cardforge.config import Settings
from cardforge.llm.credentials import Credentials
from cardforge.llm.types import CardContext, LLMConfig, LLMProvider, ProjectContext


# =============================================================================
# Settings and credentials
# =============================================================================


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="",
        anthropic_api_key="",
        google_api_key="",
    )


@pytest.fixture
def all_credentials():
    """Credentials with a key for every provider."""
    return Credentials(keys={
        LLMProvider.GEMINI: "AIzaSyGeminiTestKey1234",
        LLMProvider.OPENAI: "sk-proj-openaitestkey5678",
        LLMProvider.ANTHROPIC: "sk-ant-REDACTED",
    })


# =============================================================================
# Contexts
# =============================================================================


@pytest.fixture
def project():
    """A fully described project."""
    return ProjectContext(
        project_id="p-1",
        project_name="Storefront",
        tech_stack="FastAPI, React, PostgreSQL",
        context_rules="Use type hints everywhere",
        file_structure="backend/\nfrontend/",
    )


@pytest.fixture
def bare_project():
    """A project with only a name."""
    return ProjectContext(project_id="p-2", project_name="Bare")


@pytest.fixture
def card():
    """A saved card with every field set."""
    return CardContext(
        card_id="c-1",
        title="Add OAuth login",
        description="Users sign in with Google",
        priority="High",
    )


@pytest.fixture
def new_card():
    """A card that has not been saved yet."""
    return CardContext(title="Dark mode")


# =============================================================================
# Mocked vendor chat models
# =============================================================================


def make_chat_model(reply="", side_effect=None):
    """Mock LangChain chat model whose ``ainvoke`` returns ``reply``."""
    model = MagicMock()
    if side_effect is not None:
        model.ainvoke = AsyncMock(side_effect=side_effect)
    else:
        model.ainvoke = AsyncMock(return_value=AIMessage(content=reply))
    model.bind.return_value = model
    return model


@pytest.fixture
def chat_model():
    """Factory fixture for mocked chat models."""
    return make_chat_model


@pytest.fixture
def llm_config():
    """Factory fixture for adapter configs."""
    def _config(provider: LLMProvider, model: str = "test-model") -> LLMConfig:
        return LLMConfig(provider=provider, model=model, api_key="test-key-123456")
    return _config
