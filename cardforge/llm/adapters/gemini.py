"""Gemini provider adapter using langchain-google-genai."""

from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI

from cardforge.llm.adapters.base import BaseAdapter, TaskProfile


class GeminiAdapter(BaseAdapter):
    """Gemini provider adapter using langchain-google-genai.

    Gemini has no system message capability, so the system prompt travels
    as user content (see ``BaseAdapter.convert_messages``).
    """

    def build_client(self, profile: TaskProfile) -> Runnable:
        return ChatGoogleGenerativeAI(
            model=self.config.model,
            google_api_key=self.config.api_key,
            temperature=profile.temperature,
            max_output_tokens=profile.max_tokens,
            timeout=self.config.timeout_seconds,
            max_retries=0,
        )
