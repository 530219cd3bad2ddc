"""Core type definitions for the card AI orchestration layer."""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator


NEW_CARD_ID = "new"

Priority = Literal["Low", "Medium", "High"]


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class MessageRole(str, Enum):
    """Canonical message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class TaskType(str, Enum):
    """The five AI tasks a card can be run through."""
    ANALYZE = "analyze"
    CHAT = "chat"
    PRD = "prd"
    DESCRIPTION = "description"
    SUGGEST_FEATURES = "suggest_features"


class NextAction(str, Enum):
    """What the clarification chat wants to happen next."""
    CONTINUE_CHAT = "continue_chat"
    GENERATE_PRD = "generate_prd"


class _WireModel(BaseModel):
    """Accepts both snake_case and the camelCase names used on the wire."""
    model_config = ConfigDict(populate_by_name=True)


class Message(BaseModel):
    """Canonical conversation turn."""
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str


class ProjectContext(_WireModel):
    """Snapshot of the project a card belongs to."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    project_id: str = Field(alias="projectId")
    project_name: str = Field(alias="projectName")
    tech_stack: Optional[str] = Field(default=None, alias="techStack")
    context_rules: Optional[str] = Field(default=None, alias="contextRules")
    file_structure: Optional[str] = Field(default=None, alias="fileStructure")


class CardContext(_WireModel):
    """Snapshot of a card; ``card_id`` is ``"new"`` for cards not saved yet."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    card_id: str = Field(default=NEW_CARD_ID, alias="cardId")
    title: str
    description: Optional[str] = None
    priority: Optional[Priority] = None


class ExistingCard(BaseModel):
    """A sibling card shown to the model so it does not suggest duplicates."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: Optional[str] = None


class AnalysisResult(_WireModel):
    """Whether a card needs clarification before a PRD can be written."""
    needs_clarification: bool = Field(alias="needsClarification")
    questions: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _questions_when_unclear(self) -> "AnalysisResult":
        if self.needs_clarification and not self.questions:
            raise ValueError("needsClarification is true but no questions were given")
        if not self.needs_clarification:
            self.questions = []
        return self


class ChatTurnResult(_WireModel):
    """One assistant turn of the clarification chat."""
    content: str
    is_complete: bool = Field(default=False, alias="isComplete")
    next_action: NextAction = Field(default=NextAction.CONTINUE_CHAT, alias="nextAction")


class DocumentResult(BaseModel):
    """Generated free text (PRD or description) and who wrote it."""
    content: str
    provider: LLMProvider


class FeatureSuggestion(BaseModel):
    """A single suggested feature card."""
    title: str
    description: str
    priority: Priority


class SuggestionList(BaseModel):
    """Ordered feature suggestions and who produced them."""
    suggestions: list[FeatureSuggestion]
    provider: LLMProvider


class TokenUsage(BaseModel):
    """Token usage tracking."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class LLMResult(BaseModel):
    """Raw text reply from any provider, before task-specific parsing."""
    text: str = ""

    # Metadata
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    provider: LLMProvider
    model: str

    # Observability
    latency_ms: float = 0
    usage: TokenUsage = Field(default_factory=TokenUsage)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LLMConfig(BaseModel):
    """Immutable configuration an adapter is built from."""
    model_config = ConfigDict(frozen=True)

    provider: LLMProvider
    model: str
    api_key: str
    timeout_seconds: float = 60.0
