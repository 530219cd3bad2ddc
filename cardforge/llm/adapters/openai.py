"""OpenAI provider adapter using langchain-openai."""

from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from cardforge.llm.adapters.base import BaseAdapter, TaskProfile


class OpenAIAdapter(BaseAdapter):
    """OpenAI provider adapter using langchain-openai.

    OpenAI takes a flat message list led by the system prompt, and can be
    told to return a JSON object natively.
    """

    # OpenAI accepts system messages anywhere in the list
    system_turns_as_assistant = False

    def build_client(self, profile: TaskProfile) -> Runnable:
        client = ChatOpenAI(
            model=self.config.model,
            api_key=self.config.api_key,
            temperature=profile.temperature,
            max_tokens=profile.max_tokens,
            timeout=self.config.timeout_seconds,
            max_retries=0,
        )
        if profile.json_output and self.capabilities.json_mode:
            return client.bind(response_format={"type": "json_object"})
        return client
