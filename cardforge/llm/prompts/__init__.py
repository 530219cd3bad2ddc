"""Prompt management system with base templates and provider-specific overlays.

Usage:
    from cardforge.llm.prompts import get_prompt_builder
    from cardforge.llm.types import LLMProvider

    builder = get_prompt_builder(LLMProvider.GEMINI)
    prompt = builder.build_prd_prompt(project, card, clarifications=turns)
"""

from cardforge.llm.prompts.templates import (
    NOT_PROVIDED,
    NOT_SET,
    NOT_SPECIFIED,
    TASK_INSTRUCTIONS,
)
from cardforge.llm.prompts.builder import (
    PromptBuilder,
    get_prompt_builder,
    render_card_context,
    render_existing_work,
    render_project_context,
)
from cardforge.llm.prompts.overlays import (
    apply_overlay,
    get_json_overlay,
)

__all__ = [
    # Templates
    "NOT_PROVIDED",
    "NOT_SET",
    "NOT_SPECIFIED",
    "TASK_INSTRUCTIONS",
    # Builder
    "PromptBuilder",
    "get_prompt_builder",
    "render_card_context",
    "render_existing_work",
    "render_project_context",
    # Overlays
    "apply_overlay",
    "get_json_overlay",
]
