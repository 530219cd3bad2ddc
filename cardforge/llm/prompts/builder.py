"""Prompt builder with provider overlays and logging.

Every prompt is a pure function of its inputs: the same contexts always
render to byte-identical text, and absent optional fields are rendered with
an explicit placeholder so the model knows they were left out on purpose.
"""

import hashlib
import logging
import re
from typing import Optional, Sequence

from cardforge.llm.prompts.overlays import apply_overlay, get_json_overlay
from cardforge.llm.prompts.templates import (
    ANALYSIS_ROLE,
    ANALYSIS_TASK,
    CARD_CONTEXT_TEMPLATE,
    CHAT_ROLE,
    CHAT_TASK,
    CLARIFICATIONS_HEADER,
    DESCRIPTION_ROLE,
    DESCRIPTION_TASK,
    EXISTING_CARD_DELIMITER,
    EXISTING_WORK_HEADER,
    GUIDANCE_TEMPLATE,
    NO_DUPLICATES_REMINDER,
    NOT_PROVIDED,
    NOT_SET,
    NOT_SPECIFIED,
    PRD_DEFAULT_STRUCTURE,
    PRD_ROLE,
    PROJECT_CONTEXT_TEMPLATE,
    SUGGESTION_FORMAT,
    SUGGESTION_ROLE,
    SUGGESTION_TASK,
)
from cardforge.llm.types import (
    CardContext,
    ExistingCard,
    LLMProvider,
    Message,
    MessageRole,
    ProjectContext,
    TaskType,
)

logger = logging.getLogger(__name__)

# Fields to redact in logs
REDACT_FIELDS = {"api_key", "token", "secret", "password", "credential"}


def _redact_secrets(text: str) -> str:
    """Redact potential secrets from text for logging."""
    for field in REDACT_FIELDS:
        if field in text.lower():
            pattern = rf'({field}["\']?\s*[:=]\s*["\']?)([^"\'\s]+)'
            text = re.sub(pattern, r'\1[REDACTED]', text, flags=re.IGNORECASE)
    return text


def _prompt_hash(text: str) -> str:
    """Generate short hash for prompt identification."""
    return hashlib.sha256(text.encode()).hexdigest()[:8]


def _or_placeholder(value: Optional[str], placeholder: str) -> str:
    if value is None or not value.strip():
        return placeholder
    return value


# =============================================================================
# Context sections
# =============================================================================


def render_project_context(project: ProjectContext) -> str:
    """Render the PROJECT CONTEXT block."""
    file_structure = _or_placeholder(project.file_structure, NOT_SPECIFIED)
    if file_structure != NOT_SPECIFIED:
        file_structure = f"\n{file_structure}"
    return PROJECT_CONTEXT_TEMPLATE.format(
        project_name=project.project_name,
        tech_stack=_or_placeholder(project.tech_stack, NOT_SPECIFIED),
        context_rules=_or_placeholder(project.context_rules, NOT_SPECIFIED),
        file_structure=file_structure,
    )


def render_card_context(card: CardContext, description_label: str = "Description") -> str:
    """Render the TASK CARD block."""
    return CARD_CONTEXT_TEMPLATE.format(
        title=card.title,
        description_label=description_label,
        description=_or_placeholder(card.description, NOT_PROVIDED),
        priority=card.priority or NOT_SET,
    )


def render_clarifications(clarifications: Optional[Sequence[Message]]) -> str:
    """Render a clarification transcript, empty when there is none."""
    if not clarifications:
        return ""
    lines = [CLARIFICATIONS_HEADER]
    for msg in clarifications:
        speaker = "User" if msg.role == MessageRole.USER else "Assistant"
        lines.append(f"{speaker}: {msg.content}")
    return "\n".join(lines)


def render_existing_work(existing_cards: Optional[Sequence[ExistingCard]]) -> str:
    """Render the duplicate-avoidance block listing cards that already exist."""
    if not existing_cards:
        return ""
    blocks = [EXISTING_WORK_HEADER]
    for index, card in enumerate(existing_cards, start=1):
        block = f"{EXISTING_CARD_DELIMITER}\n{index}. {card.title}"
        if card.description:
            block += f"\n   Description: {card.description}"
        blocks.append(block)
    return "\n\n".join(blocks)


def _join(*sections: str) -> str:
    return "\n\n".join(section for section in sections if section)


# =============================================================================
# Builder
# =============================================================================


class PromptBuilder:
    """Build system prompts with provider-specific overlays.

    Usage:
        builder = PromptBuilder(provider=LLMProvider.GEMINI)
        prompt = builder.build_analysis_prompt(project, card)
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    def _finish(self, task: TaskType, prompt: str) -> str:
        """Apply the provider overlay and log the assembled prompt."""
        prompt = apply_overlay(prompt, get_json_overlay(self.provider, task))
        redacted = _redact_secrets(prompt)
        logger.debug(
            f"Assembled {task.value} prompt",
            extra={
                "prompt_type": task.value,
                "prompt_hash": _prompt_hash(prompt),
                "provider": self.provider.value,
                "content_preview": redacted[:200] + "..." if len(redacted) > 200 else redacted,
            },
        )
        return prompt

    def build_analysis_prompt(self, project: ProjectContext, card: CardContext) -> str:
        """Prompt asking whether the card is detailed enough for a PRD."""
        prompt = _join(
            ANALYSIS_ROLE,
            render_project_context(project),
            render_card_context(card),
            ANALYSIS_TASK,
        )
        return self._finish(TaskType.ANALYZE, prompt)

    def build_chat_prompt(self, project: ProjectContext, card: CardContext) -> str:
        """Prompt for the clarification chat, demanding the three-field reply."""
        prompt = _join(
            CHAT_ROLE,
            render_project_context(project),
            render_card_context(card),
            CHAT_TASK,
        )
        return self._finish(TaskType.CHAT, prompt)

    def build_prd_prompt(
        self,
        project: ProjectContext,
        card: CardContext,
        clarifications: Optional[Sequence[Message]] = None,
        template: Optional[str] = None,
    ) -> str:
        """Prompt for PRD generation.

        A custom template replaces the default section structure. The
        context preamble and any clarification transcript always come first.
        """
        if template and template.strip():
            structure = template
        else:
            structure = PRD_DEFAULT_STRUCTURE.format(title=card.title)

        prompt = _join(
            PRD_ROLE,
            render_project_context(project),
            render_card_context(card),
            render_clarifications(clarifications),
            structure,
        )
        return self._finish(TaskType.PRD, prompt)

    def build_description_prompt(self, project: ProjectContext, card: CardContext) -> str:
        """Prompt for a structured card description."""
        prompt = _join(
            DESCRIPTION_ROLE,
            render_project_context(project),
            render_card_context(card, description_label="Current Description"),
            DESCRIPTION_TASK,
        )
        return self._finish(TaskType.DESCRIPTION, prompt)

    def build_feature_suggestion_prompt(
        self,
        project: ProjectContext,
        count: int,
        guidance: Optional[str] = None,
        existing_cards: Optional[Sequence[ExistingCard]] = None,
    ) -> str:
        """Prompt for feature suggestions that avoid duplicating existing cards."""
        guidance_section = ""
        if guidance and guidance.strip():
            guidance_section = GUIDANCE_TEMPLATE.format(guidance=guidance.strip())

        prompt = _join(
            SUGGESTION_ROLE,
            render_project_context(project),
            render_existing_work(existing_cards),
            SUGGESTION_TASK.format(count=count),
            guidance_section,
            NO_DUPLICATES_REMINDER if existing_cards else "",
            SUGGESTION_FORMAT,
        )
        return self._finish(TaskType.SUGGEST_FEATURES, prompt)


def get_prompt_builder(provider: LLMProvider) -> PromptBuilder:
    """Get a prompt builder for the specified provider."""
    return PromptBuilder(provider)
