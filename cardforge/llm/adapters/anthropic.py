"""Anthropic provider adapter using langchain-anthropic."""

from langchain_anthropic import ChatAnthropic
from langchain_core.runnables import Runnable

from cardforge.llm.adapters.base import BaseAdapter, TaskProfile


class AnthropicAdapter(BaseAdapter):
    """Anthropic provider adapter using langchain-anthropic.

    Note: Anthropic handles system messages differently - they are passed
    as a separate parameter rather than in the messages list. ChatAnthropic
    lifts a leading SystemMessage into that parameter, and the remaining
    turns may only be user or assistant.
    """

    def build_client(self, profile: TaskProfile) -> Runnable:
        return ChatAnthropic(
            model=self.config.model,
            api_key=self.config.api_key,
            temperature=profile.temperature,
            max_tokens=profile.max_tokens,
            timeout=self.config.timeout_seconds,
            max_retries=0,
        )
