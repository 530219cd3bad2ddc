"""Provider-specific prompt overlays.

Different LLMs respond better to different instruction styles.
Overlays append output hints to the prompts of JSON tasks.
"""

from cardforge.llm.types import LLMProvider, TaskType

# Tasks whose replies are parsed as JSON
JSON_TASKS = frozenset({TaskType.ANALYZE, TaskType.CHAT, TaskType.SUGGEST_FEATURES})

# Provider-specific JSON output hints
JSON_OVERLAYS: dict[LLMProvider, str] = {
    LLMProvider.GEMINI: """
Respond with valid JSON only, no markdown formatting.""",

    LLMProvider.OPENAI: """
Return a single JSON object. Do not add extra fields.""",

    LLMProvider.ANTHROPIC: """
Return only the JSON object, without any text before or after it.""",
}


def get_json_overlay(provider: LLMProvider, task: TaskType) -> str:
    """Get JSON output overlay for provider, empty for free-text tasks."""
    if task not in JSON_TASKS:
        return ""
    return JSON_OVERLAYS.get(provider, "")


def apply_overlay(base_prompt: str, overlay: str) -> str:
    """Apply overlay to base prompt."""
    if not overlay:
        return base_prompt
    return f"{base_prompt}\n\n{overlay.strip()}"
