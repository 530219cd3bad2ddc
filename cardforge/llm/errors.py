"""Error kinds raised by the AI orchestration layer.

Every error carries a stable ``code`` and an HTTP-equivalent ``status_code``
so callers can map it to a user-facing message without inspecting types.
"""

import asyncio
import logging
from typing import Optional

import anthropic
import httpx
import openai
from google.genai import errors as genai_errors

from cardforge.llm.types import LLMProvider

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class AIServiceError(Exception):
    """Base for all errors surfaced by the AI layer."""

    code = "AI_ERROR"
    status_code = 500

    def __init__(self, message: str, provider: Optional[LLMProvider] = None):
        self.message = message
        self.provider = provider
        super().__init__(message)


class NoCredentialsConfigured(AIServiceError):
    """The caller has no usable provider secret at all."""

    code = "NO_API_KEY"
    status_code = 400

    def __init__(self):
        super().__init__(
            "Please configure at least one AI provider (Gemini, OpenAI, or Anthropic) in Settings"
        )


class RequestedProviderNotConfigured(AIServiceError):
    """An explicit provider override has no matching secret."""

    code = "NO_API_KEY"
    status_code = 400

    def __init__(self, provider: LLMProvider):
        super().__init__(f"{provider.value.upper()} API key not configured", provider)


class UnknownProvider(AIServiceError):
    """An override named a provider this system does not know."""

    code = "UNKNOWN_PROVIDER"
    status_code = 400

    def __init__(self, name: str):
        self.name = name
        known = ", ".join(p.value for p in LLMProvider)
        super().__init__(f"Unknown AI provider: {name}. Available: {known}")


class VendorError(AIServiceError):
    """The vendor call failed for a reason with no more specific kind."""

    code = "UPSTREAM_ERROR"
    status_code = 502


class VendorAuthenticationFailed(VendorError):
    """The vendor rejected the secret. Retrying will not help."""

    code = "INVALID_API_KEY"
    status_code = 401


class VendorRateLimited(VendorError):
    """The vendor is throttling the caller."""

    code = "RATE_LIMIT"
    status_code = 429


class VendorTransportFailure(VendorError):
    """Network error or timeout while reaching the vendor."""

    code = "UPSTREAM_UNAVAILABLE"
    status_code = 504


class InvalidResponseShape(AIServiceError):
    """The vendor reply is not the JSON structure the task requires."""

    code = "INVALID_RESPONSE"
    status_code = 502

    def __init__(self, message: str, provider: Optional[LLMProvider] = None, raw: str = ""):
        self.raw = raw
        super().__init__(message, provider)


# =============================================================================
# Vendor error translation
# =============================================================================

_AUTH_STATUSES = {401, 403}
_RATE_LIMIT_STATUSES = {429}
_TIMEOUT_STATUSES = {408, 504}

_GOOGLE_AUTH_STATUSES = {"UNAUTHENTICATED", "PERMISSION_DENIED"}
_GOOGLE_AUTH_REASONS = {"API_KEY_INVALID", "API_KEY_EXPIRED"}

_AUTH_TYPES = (openai.AuthenticationError, openai.PermissionDeniedError,
               anthropic.AuthenticationError, anthropic.PermissionDeniedError)
_RATE_LIMIT_TYPES = (openai.RateLimitError, anthropic.RateLimitError)
_TRANSPORT_TYPES = (openai.APIConnectionError, anthropic.APIConnectionError,
                    httpx.TransportError, asyncio.TimeoutError, TimeoutError, ConnectionError)


def _exception_chain(exc: BaseException):
    """Yield ``exc`` and the exceptions it was raised from."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _detail_entries(payload) -> list:
    """The ``details`` list of a Google error payload, wrapped in ``error`` or not."""
    if isinstance(payload, dict):
        error = payload.get("error", payload)
        payload = error.get("details", []) if isinstance(error, dict) else []
    return payload if isinstance(payload, list) else []


def _google_key_rejected(exc: genai_errors.APIError) -> bool:
    """Google reports a bad key as 400 INVALID_ARGUMENT with reason API_KEY_INVALID."""
    if exc.status in _GOOGLE_AUTH_STATUSES:
        return True
    reasons = {
        entry.get("reason")
        for payload in (getattr(exc, "details", None), getattr(exc, "response_json", None))
        for entry in _detail_entries(payload)
        if isinstance(entry, dict)
    }
    return bool(reasons & _GOOGLE_AUTH_REASONS)


def _status_of(exc: BaseException) -> Optional[int]:
    """Find an HTTP status code on an SDK exception, if it carries one."""
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and 100 <= value < 600:
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int):
        return value
    return None


def translate_vendor_error(provider: LLMProvider, exc: BaseException) -> AIServiceError:
    """Map an exception from a vendor SDK to one of the error kinds above.

    The exception and its cause chain are inspected, since LangChain
    integrations sometimes wrap the SDK error in their own type.
    """
    if isinstance(exc, AIServiceError):
        return exc

    name = provider.value.capitalize()
    for err in _exception_chain(exc):
        if isinstance(err, _AUTH_TYPES):
            return VendorAuthenticationFailed(f"{name} rejected the API key: {err}", provider)
        if isinstance(err, _RATE_LIMIT_TYPES):
            return VendorRateLimited(
                "API rate limit exceeded. Please try again in a few moments.", provider
            )
        if isinstance(err, _TRANSPORT_TYPES):
            return VendorTransportFailure(f"Could not reach {name}: {err}", provider)
        if isinstance(err, genai_errors.ClientError) and _google_key_rejected(err):
            return VendorAuthenticationFailed(f"{name} rejected the API key: {err}", provider)

        status = _status_of(err)
        if status in _AUTH_STATUSES:
            return VendorAuthenticationFailed(f"{name} rejected the API key: {err}", provider)
        if status in _RATE_LIMIT_STATUSES:
            return VendorRateLimited(
                "API rate limit exceeded. Please try again in a few moments.", provider
            )
        if status in _TIMEOUT_STATUSES:
            return VendorTransportFailure(f"{name} timed out: {err}", provider)

    logger.debug(f"Unclassified {name} error: {type(exc).__name__}")
    return VendorError(f"{name} request failed: {exc}", provider)
