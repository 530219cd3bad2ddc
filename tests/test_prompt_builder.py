"""Tests for prompt rendering."""
import pytest

from cardforge.llm.prompts import (
    NOT_PROVIDED,
    NOT_SET,
    NOT_SPECIFIED,
    get_prompt_builder,
    render_card_context,
    render_existing_work,
    render_project_context,
)
from cardforge.llm.prompts.builder import render_clarifications
from cardforge.llm.prompts.overlays import JSON_OVERLAYS, get_json_overlay
from cardforge.llm.types import (
    CardContext,
    ExistingCard,
    LLMProvider,
    Message,
    MessageRole,
    TaskType,
)


class TestContextRendering:
    """Tests for the project and card context blocks."""

    def test_unset_project_fields_get_placeholders(self, bare_project):
        """Every omitted project field is named explicitly."""
        text = render_project_context(bare_project)
        assert f"- Tech Stack: {NOT_SPECIFIED}" in text
        assert f"- Coding Standards: {NOT_SPECIFIED}" in text
        assert f"- File Structure: {NOT_SPECIFIED}" in text
        assert "- Name: Bare" in text

    def test_blank_project_fields_count_as_unset(self):
        """Whitespace-only values render as placeholders too."""
        from cardforge.llm.types import ProjectContext
        project = ProjectContext(project_id="p", project_name="X", tech_stack="   ")
        assert f"- Tech Stack: {NOT_SPECIFIED}" in render_project_context(project)

    def test_file_structure_starts_on_new_line(self, project):
        """A provided file tree is rendered below its label."""
        text = render_project_context(project)
        assert "- File Structure: \nbackend/\nfrontend/" in text

    def test_unset_card_fields_get_placeholders(self, new_card):
        """Missing description and priority are named explicitly."""
        text = render_card_context(new_card)
        assert f"- Description: {NOT_PROVIDED}" in text
        assert f"- Priority: {NOT_SET}" in text
        assert "- Title: Dark mode" in text

    def test_card_fields_rendered(self, card):
        """Provided card fields appear verbatim."""
        text = render_card_context(card)
        assert "- Description: Users sign in with Google" in text
        assert "- Priority: High" in text

    def test_custom_description_label(self, card):
        """Description prompts label the field as the current description."""
        text = render_card_context(card, description_label="Current Description")
        assert "- Current Description: Users sign in with Google" in text


class TestClarifications:
    """Tests for the clarification transcript."""

    def test_empty_transcript_renders_nothing(self):
        """No clarifications means no section at all."""
        assert render_clarifications(None) == ""
        assert render_clarifications([]) == ""

    def test_transcript_keeps_order_and_speakers(self):
        """Turns are rendered in order with their speaker."""
        turns = [
            Message(role=MessageRole.USER, content="Which provider?"),
            Message(role=MessageRole.ASSISTANT, content="Google only?"),
            Message(role=MessageRole.USER, content="Yes"),
        ]
        text = render_clarifications(turns)
        assert text.splitlines() == [
            "CLARIFICATIONS FROM USER:",
            "User: Which provider?",
            "Assistant: Google only?",
            "User: Yes",
        ]


class TestExistingWork:
    """Tests for the duplicate-avoidance block."""

    def test_no_cards_renders_nothing(self):
        """Without existing cards there is no block."""
        assert render_existing_work([]) == ""

    def test_cards_are_numbered_and_delimited(self):
        """Each card gets a delimiter line and its index."""
        text = render_existing_work([
            ExistingCard(title="Login page"),
            ExistingCard(title="Cart", description="Persisted cart"),
        ])
        assert "DO NOT suggest features that are similar" in text
        assert "---------\n1. Login page" in text
        assert "---------\n2. Cart\n   Description: Persisted cart" in text


class TestPromptBuilder:
    """Tests for the per-task system prompts."""

    @pytest.mark.parametrize("provider", list(LLMProvider))
    def test_prompts_are_deterministic(self, provider, project, card):
        """Identical inputs render byte-identical prompts."""
        builder = get_prompt_builder(provider)
        assert builder.build_analysis_prompt(project, card) == builder.build_analysis_prompt(project, card)
        assert builder.build_chat_prompt(project, card) == builder.build_chat_prompt(project, card)
        assert builder.build_prd_prompt(project, card) == builder.build_prd_prompt(project, card)
        assert builder.build_description_prompt(project, card) == builder.build_description_prompt(project, card)
        assert (
            builder.build_feature_suggestion_prompt(project, count=3)
            == builder.build_feature_suggestion_prompt(project, count=3)
        )

    def test_bare_contexts_never_silently_omitted(self, bare_project, new_card):
        """Every task prompt carries the placeholders for unset fields."""
        builder = get_prompt_builder(LLMProvider.OPENAI)
        for prompt in (
            builder.build_analysis_prompt(bare_project, new_card),
            builder.build_chat_prompt(bare_project, new_card),
            builder.build_prd_prompt(bare_project, new_card),
            builder.build_description_prompt(bare_project, new_card),
        ):
            assert prompt.count(NOT_SPECIFIED) == 3
            assert NOT_PROVIDED in prompt
            assert NOT_SET in prompt

    def test_default_prd_structure_uses_card_title(self, project, card):
        """The default PRD outline is headed with the card title."""
        prompt = get_prompt_builder(LLMProvider.ANTHROPIC).build_prd_prompt(project, card)
        assert "# Add OAuth login" in prompt
        assert "## Acceptance Criteria" in prompt

    def test_custom_template_replaces_structure_only(self, project, card):
        """A custom template swaps the outline but keeps the context preamble."""
        template = "# Custom\n## Only This Section"
        prompt = get_prompt_builder(LLMProvider.ANTHROPIC).build_prd_prompt(
            project, card, template=template
        )
        assert prompt.endswith(template)
        assert "## Technical Approach" not in prompt
        assert "PROJECT CONTEXT:" in prompt
        assert "TASK CARD:" in prompt

    def test_blank_template_falls_back_to_default(self, project, card):
        """An empty template is treated as no template."""
        builder = get_prompt_builder(LLMProvider.OPENAI)
        assert builder.build_prd_prompt(project, card, template="  ") == builder.build_prd_prompt(project, card)

    def test_clarifications_precede_structure(self, project, card):
        """The transcript sits between the card and the PRD outline."""
        turns = [Message(role=MessageRole.USER, content="Use PKCE")]
        prompt = get_prompt_builder(LLMProvider.OPENAI).build_prd_prompt(project, card, clarifications=turns)
        assert prompt.index("TASK CARD:") < prompt.index("User: Use PKCE") < prompt.index("YOUR TASK:")

    def test_suggestion_prompt_lists_existing_cards(self, project):
        """Existing card titles appear inside the duplicate-avoidance block."""
        prompt = get_prompt_builder(LLMProvider.GEMINI).build_feature_suggestion_prompt(
            project, count=2, existing_cards=[ExistingCard(title="Login page")]
        )
        block_start = prompt.index("WORK ALREADY DONE:")
        assert prompt.index("Login page") > block_start
        assert "Generate 2 innovative feature suggestions" in prompt
        assert "COMPLEMENTARY" in prompt

    def test_suggestion_prompt_without_cards_or_guidance(self, project):
        """No existing cards and no guidance leave both sections out."""
        prompt = get_prompt_builder(LLMProvider.OPENAI).build_feature_suggestion_prompt(project, count=3)
        assert "WORK ALREADY DONE" not in prompt
        assert "USER GUIDANCE" not in prompt
        assert "COMPLEMENTARY" not in prompt

    def test_suggestion_prompt_includes_guidance(self, project):
        """Caller guidance is passed through."""
        prompt = get_prompt_builder(LLMProvider.OPENAI).build_feature_suggestion_prompt(
            project, count=3, guidance="  focus on mobile  "
        )
        assert "USER GUIDANCE:\nfocus on mobile" in prompt

    def test_description_prompt_labels_current_description(self, project, card):
        """The description task sees the existing text as the current description."""
        prompt = get_prompt_builder(LLMProvider.GEMINI).build_description_prompt(project, card)
        assert "- Current Description: Users sign in with Google" in prompt


class TestOverlays:
    """Tests for provider JSON overlays."""

    @pytest.mark.parametrize("task", [TaskType.PRD, TaskType.DESCRIPTION])
    def test_free_text_tasks_have_no_overlay(self, task):
        """Only JSON tasks get an output hint."""
        for provider in LLMProvider:
            assert get_json_overlay(provider, task) == ""

    def test_gemini_json_prompt_ends_with_overlay(self, project, card):
        """JSON task prompts end with the provider's hint."""
        prompt = get_prompt_builder(LLMProvider.GEMINI).build_analysis_prompt(project, card)
        assert prompt.endswith(JSON_OVERLAYS[LLMProvider.GEMINI].strip())

    def test_overlay_differs_by_provider(self, project, card):
        """The same task renders differently per provider only in the overlay."""
        gemini = get_prompt_builder(LLMProvider.GEMINI).build_chat_prompt(project, card)
        openai = get_prompt_builder(LLMProvider.OPENAI).build_chat_prompt(project, card)
        assert gemini != openai
        base = gemini[: -len(JSON_OVERLAYS[LLMProvider.GEMINI].strip())]
        assert openai.startswith(base)
