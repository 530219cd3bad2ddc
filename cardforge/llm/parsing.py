"""Normalize raw vendor replies into the result types.

Two strategies live here:

- strict parsing (analysis, feature suggestions) raises
  ``InvalidResponseShape`` because the result is consumed as data;
- chat parsing never raises: a reply that is not the requested JSON is
  passed through as plain text that keeps the conversation going.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from cardforge.llm.errors import InvalidResponseShape
from cardforge.llm.types import (
    AnalysisResult,
    ChatTurnResult,
    FeatureSuggestion,
    LLMProvider,
    NextAction,
    SuggestionList,
)

logger = logging.getLogger(__name__)

_FENCE = "```"
_JSON_FENCE = "```json"


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around a reply.

    A leading ```` ```json ```` or ```` ``` ```` is removed, and a trailing
    ```` ``` ```` only when a leading fence was found. Unfenced text is
    returned stripped of surrounding whitespace and otherwise untouched.
    """
    text = text.strip()
    if text.startswith(_JSON_FENCE):
        text = text[len(_JSON_FENCE):]
    elif text.startswith(_FENCE):
        text = text[len(_FENCE):]
    else:
        return text
    if text.endswith(_FENCE):
        text = text[: -len(_FENCE)]
    return text.strip()


def parse_json_object(text: str, provider: LLMProvider) -> dict[str, Any]:
    """Parse a reply that must be a JSON object, fences allowed."""
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise InvalidResponseShape(
            f"{provider.value} reply is not valid JSON: {e.msg}", provider, raw=text
        ) from e
    if not isinstance(data, dict):
        raise InvalidResponseShape(
            f"{provider.value} reply is JSON but not an object", provider, raw=text
        )
    return data


def parse_analysis(text: str, provider: LLMProvider) -> AnalysisResult:
    """Strictly parse a card analysis reply."""
    data = parse_json_object(text, provider)
    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        raise InvalidResponseShape(
            f"{provider.value} analysis reply has the wrong shape: {e.error_count()} error(s)",
            provider,
            raw=text,
        ) from e


def parse_suggestions(text: str, provider: LLMProvider, count: int) -> SuggestionList:
    """Strictly parse a feature suggestion reply, keeping at most ``count`` entries."""
    data = parse_json_object(text, provider)
    raw_suggestions = data.get("suggestions")
    if not isinstance(raw_suggestions, list):
        raise InvalidResponseShape(
            f"{provider.value} reply has no suggestions list", provider, raw=text
        )
    try:
        suggestions = [FeatureSuggestion.model_validate(item) for item in raw_suggestions]
    except ValidationError as e:
        raise InvalidResponseShape(
            f"{provider.value} suggestion has the wrong shape: {e.error_count()} error(s)",
            provider,
            raw=text,
        ) from e

    if len(suggestions) > count:
        logger.info(
            f"Trimming {len(suggestions)} suggestions to the {count} requested",
            extra={"provider": provider.value},
        )
        suggestions = suggestions[:count]
    return SuggestionList(suggestions=suggestions, provider=provider)


def parse_chat_reply(text: str, provider: LLMProvider) -> ChatTurnResult:
    """Parse a chat reply, falling back to plain text when it is not the JSON asked for."""
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        data = None

    if not isinstance(data, dict):
        logger.warning(
            f"{provider.value} chat reply was not structured JSON, using raw text",
            extra={"provider": provider.value},
        )
        return ChatTurnResult(
            content=payload,
            is_complete=False,
            next_action=NextAction.CONTINUE_CHAT,
        )

    message = data.get("message")
    content = message if isinstance(message, str) and message else payload

    try:
        next_action = NextAction(data.get("nextAction", NextAction.CONTINUE_CHAT.value))
    except ValueError:
        next_action = NextAction.CONTINUE_CHAT

    return ChatTurnResult(
        content=content,
        is_complete=data.get("isComplete") is True,
        next_action=next_action,
    )
