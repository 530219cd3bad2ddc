"""Base adapter interface for LLM providers.

An adapter owns one vendor's call convention. The five card tasks are
implemented once here in terms of one vendor hook, ``build_client`` (the
LangChain chat model for a task). ``convert_messages`` lays out the system
prompt and conversation from the vendor's capabilities.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import Runnable

from cardforge.llm.capabilities import get_capabilities
from cardforge.llm.errors import InvalidResponseShape, translate_vendor_error
from cardforge.llm.parsing import (
    parse_analysis,
    parse_chat_reply,
    parse_suggestions,
)
from cardforge.llm.prompts import TASK_INSTRUCTIONS, get_prompt_builder
from cardforge.llm.prompts.templates import CHAT_PRIMER_REPLY
from cardforge.llm.types import (
    AnalysisResult,
    CardContext,
    ChatTurnResult,
    DocumentResult,
    ExistingCard,
    LLMConfig,
    LLMResult,
    Message,
    MessageRole,
    ProjectContext,
    SuggestionList,
    TaskType,
    TokenUsage,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskProfile:
    """Per-task generation budget."""
    max_tokens: int
    temperature: float
    json_output: bool = False


# Generation budget for each task
TASK_PROFILES: dict[TaskType, TaskProfile] = {
    TaskType.ANALYZE: TaskProfile(max_tokens=1024, temperature=0.1, json_output=True),
    TaskType.CHAT: TaskProfile(max_tokens=1000, temperature=0.7, json_output=True),
    TaskType.PRD: TaskProfile(max_tokens=4096, temperature=0.5),
    TaskType.DESCRIPTION: TaskProfile(max_tokens=2048, temperature=0.5),
    TaskType.SUGGEST_FEATURES: TaskProfile(max_tokens=2048, temperature=0.7, json_output=True),
}


def to_langchain_message(msg: Message, system_as_assistant: bool = False) -> BaseMessage:
    """Convert a canonical turn to its LangChain message type.

    Vendors that cannot take a system message in the middle of a
    conversation get it as an assistant turn instead.
    """
    if msg.role == MessageRole.USER:
        return HumanMessage(content=msg.content)
    if msg.role == MessageRole.SYSTEM and not system_as_assistant:
        return SystemMessage(content=msg.content)
    return AIMessage(content=msg.content)


class BaseAdapter(ABC):
    """Abstract base for LLM provider adapters."""

    # Vendors that reject system turns mid-conversation get them as assistant turns
    system_turns_as_assistant: bool = True

    def __init__(self, config: LLMConfig):
        if not config.api_key:
            raise ValueError(f"{config.provider.value} API key required")
        self.config = config
        self.capabilities = get_capabilities(config.provider)
        self.prompts = get_prompt_builder(config.provider)

    @property
    def provider(self):
        return self.config.provider

    # -------------------------------------------------------------------------
    # Vendor hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def build_client(self, profile: TaskProfile) -> Runnable:
        """Create the LangChain chat model for one call."""
        pass

    def convert_messages(
        self,
        system_prompt: str,
        turns: Sequence[Message],
        task: TaskType,
    ) -> list[BaseMessage]:
        """Lay out system prompt and turns the way the vendor expects.

        Vendors with a separate system instruction get it as a leading
        ``SystemMessage``. Others get it as user content: in front of the
        task instruction for single-shot tasks, or as an opening exchange the
        model acknowledges before the chat history.
        """
        history = [
            to_langchain_message(msg, system_as_assistant=self.system_turns_as_assistant)
            for msg in turns
        ]

        if self.capabilities.system_message:
            return [SystemMessage(content=system_prompt), *history]

        if task == TaskType.CHAT:
            return [
                HumanMessage(content=system_prompt),
                AIMessage(content=CHAT_PRIMER_REPLY),
                *history,
            ]

        first = turns[0] if turns else None
        if first is not None and first.role == MessageRole.USER:
            merged = HumanMessage(content=f"{system_prompt}\n\n{first.content}")
            return [merged, *history[1:]]
        return [HumanMessage(content=system_prompt), *history]

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def parse_response(self, response: Any, latency_ms: float) -> LLMResult:
        """Parse LangChain response to unified format."""
        text = ""
        content = getattr(response, "content", "")
        if isinstance(content, str):
            text = content
        elif isinstance(content, list):
            # Content blocks format: [{'type': 'text', 'text': '...'}]
            text_parts = []
            for block in content:
                if isinstance(block, dict) and block.get("type") == "text":
                    text_parts.append(block.get("text", ""))
                elif isinstance(block, str):
                    text_parts.append(block)
            text = "".join(text_parts)

        usage = TokenUsage()
        usage_metadata = getattr(response, "usage_metadata", None)
        if usage_metadata:
            usage = TokenUsage(
                prompt_tokens=usage_metadata.get("input_tokens", 0),
                completion_tokens=usage_metadata.get("output_tokens", 0),
                total_tokens=usage_metadata.get("total_tokens", 0),
            )

        return LLMResult(
            text=text,
            provider=self.provider,
            model=self.config.model,
            latency_ms=latency_ms,
            usage=usage,
        )

    async def invoke(self, messages: list[BaseMessage], task: TaskType) -> LLMResult:
        """Make the single outbound call for a task and return its text."""
        client = self.build_client(TASK_PROFILES[task])
        start_time = time.perf_counter()

        try:
            response = await client.ainvoke(messages)
        except Exception as e:
            latency_ms = (time.perf_counter() - start_time) * 1000
            error = translate_vendor_error(self.provider, e)
            logger.error(
                f"{self.provider.value} {task.value} request failed: {e}",
                extra={
                    "provider": self.provider.value,
                    "model": self.config.model,
                    "error_code": error.code,
                    "latency_ms": latency_ms,
                },
            )
            raise error from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        result = self.parse_response(response, latency_ms)

        logger.info(
            f"{self.provider.value} {task.value} request completed",
            extra={
                "request_id": result.request_id,
                "provider": result.provider.value,
                "model": result.model,
                "latency_ms": result.latency_ms,
            },
        )

        if not result.text.strip():
            raise InvalidResponseShape(f"No response from {self.provider.value}", self.provider)
        return result

    async def _complete(
        self,
        task: TaskType,
        system_prompt: str,
        turns: Optional[Sequence[Message]] = None,
    ) -> str:
        if turns is None:
            turns = [Message(role=MessageRole.USER, content=TASK_INSTRUCTIONS[task.value])]
        messages = self.convert_messages(system_prompt, turns, task)
        result = await self.invoke(messages, task)
        return result.text

    # -------------------------------------------------------------------------
    # Card tasks
    # -------------------------------------------------------------------------

    async def analyze_card(self, project: ProjectContext, card: CardContext) -> AnalysisResult:
        """Decide whether the card needs clarification before a PRD.

        Raises:
            InvalidResponseShape: If the reply is not the expected JSON object.
        """
        prompt = self.prompts.build_analysis_prompt(project, card)
        text = await self._complete(TaskType.ANALYZE, prompt)
        return parse_analysis(text, self.provider)

    async def chat(
        self,
        turns: Sequence[Message],
        project: ProjectContext,
        card: CardContext,
    ) -> ChatTurnResult:
        """Answer the latest user turn of a clarification conversation.

        The whole conversation is sent on every call. A reply that is not
        the requested JSON degrades to a plain-text continuation.
        """
        if not turns:
            raise ValueError("chat needs at least one conversation turn")
        prompt = self.prompts.build_chat_prompt(project, card)
        text = await self._complete(TaskType.CHAT, prompt, list(turns))
        return parse_chat_reply(text, self.provider)

    async def generate_prd(
        self,
        project: ProjectContext,
        card: CardContext,
        clarifications: Optional[Sequence[Message]] = None,
        template: Optional[str] = None,
    ) -> DocumentResult:
        """Write a PRD, optionally following a custom template."""
        prompt = self.prompts.build_prd_prompt(project, card, clarifications, template)
        text = await self._complete(TaskType.PRD, prompt)
        return DocumentResult(content=text, provider=self.provider)

    async def generate_description(self, project: ProjectContext, card: CardContext) -> DocumentResult:
        """Write a structured card description."""
        prompt = self.prompts.build_description_prompt(project, card)
        text = await self._complete(TaskType.DESCRIPTION, prompt)
        return DocumentResult(content=text, provider=self.provider)

    async def suggest_features(
        self,
        project: ProjectContext,
        guidance: Optional[str] = None,
        count: int = 3,
        existing_cards: Optional[Sequence[ExistingCard]] = None,
    ) -> SuggestionList:
        """Suggest new feature cards that do not duplicate existing ones.

        Raises:
            InvalidResponseShape: If the reply is not the expected JSON object.
        """
        prompt = self.prompts.build_feature_suggestion_prompt(
            project, count=count, guidance=guidance, existing_cards=existing_cards
        )
        text = await self._complete(TaskType.SUGGEST_FEATURES, prompt)
        return parse_suggestions(text, self.provider, count)
