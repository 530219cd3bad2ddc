"""LLM provider adapters package."""

from cardforge.llm.adapters.anthropic import AnthropicAdapter
from cardforge.llm.adapters.base import TASK_PROFILES, BaseAdapter, TaskProfile
from cardforge.llm.adapters.gemini import GeminiAdapter
from cardforge.llm.adapters.openai import OpenAIAdapter

__all__ = [
    "AnthropicAdapter",
    "BaseAdapter",
    "TASK_PROFILES",
    "TaskProfile",
    "GeminiAdapter",
    "OpenAIAdapter",
]
