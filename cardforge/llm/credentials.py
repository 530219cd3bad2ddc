"""Per-caller provider credentials.

A caller holds at most one secret per provider. Blank secrets count as
absent, so "nothing configured" is simply an empty mapping.
"""

from typing import ClassVar, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cardforge.config import Settings
from cardforge.llm.types import LLMProvider

# Column names a stored settings row may use for each provider, preferred first
STORED_KEY_COLUMNS: dict[LLMProvider, tuple[str, ...]] = {
    LLMProvider.GEMINI: ("gemini_api_key",),
    LLMProvider.OPENAI: ("openai_api_key", "openai_key"),
    LLMProvider.ANTHROPIC: ("anthropic_api_key", "anthropic_key"),
}


def obfuscate_key(key: Optional[str]) -> str:
    """Obfuscate an API key for display.

    Shows the first 7 and last 4 characters, e.g. ``sk-proj-...wxyz``.
    Keys shorter than 12 characters are hidden entirely.
    """
    if not key or len(key) < 12:
        return ""
    return f"{key[:7]}...{key[-4:]}"


class Credentials(BaseModel):
    """Immutable provider -> secret mapping for one caller."""
    model_config = ConfigDict(frozen=True)

    keys: dict[LLMProvider, str] = Field(default_factory=dict)

    @field_validator("keys")
    @classmethod
    def _drop_blank(cls, value: dict[LLMProvider, str]) -> dict[LLMProvider, str]:
        return {provider: key.strip() for provider, key in value.items() if key and key.strip()}

    def get(self, provider: LLMProvider) -> Optional[str]:
        return self.keys.get(provider)

    def has(self, provider: LLMProvider) -> bool:
        return provider in self.keys

    @property
    def is_empty(self) -> bool:
        return not self.keys

    def obfuscated(self) -> dict[str, str]:
        """Display-safe view of every provider, empty string when unset."""
        return {provider.value: obfuscate_key(self.keys.get(provider)) for provider in LLMProvider}

    @classmethod
    def from_settings(cls, settings: Settings) -> "Credentials":
        """Server-level credentials from application settings."""
        return cls(keys={
            LLMProvider.GEMINI: settings.google_api_key,
            LLMProvider.OPENAI: settings.openai_api_key,
            LLMProvider.ANTHROPIC: settings.anthropic_api_key,
        })

    @classmethod
    def from_row(cls, row: Optional[Mapping[str, Optional[str]]]) -> "Credentials":
        """Credentials from a stored user-settings row; a missing row means none."""
        if not row:
            return cls()
        keys = {}
        for provider, columns in STORED_KEY_COLUMNS.items():
            for column in columns:
                value = row.get(column)
                if value and value.strip():
                    keys[provider] = value
                    break
        return cls(keys=keys)

    def __repr__(self) -> str:
        return f"Credentials(configured={[p.value for p in self.keys]})"

    __str__ = __repr__


class CredentialUpdate(BaseModel):
    """A partial update to a caller's stored keys.

    Each field is tri-state:
      - not sent: keep whatever was stored before
      - sent empty or null: clear the stored key
      - sent a value: replace the stored key
    "Sent" is read from pydantic's ``model_fields_set``, so ``None`` and
    "missing" stay distinguishable.
    """

    openai_key: Optional[str] = None
    anthropic_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    FIELD_PROVIDERS: ClassVar[dict[str, LLMProvider]] = {
        "openai_key": LLMProvider.OPENAI,
        "anthropic_key": LLMProvider.ANTHROPIC,
        "gemini_api_key": LLMProvider.GEMINI,
    }

    def changes(self) -> dict[LLMProvider, Optional[str]]:
        """Providers explicitly touched by this update; ``None`` means clear."""
        result: dict[LLMProvider, Optional[str]] = {}
        for field, provider in self.FIELD_PROVIDERS.items():
            if field not in self.model_fields_set:
                continue
            value = getattr(self, field)
            result[provider] = value if value and value.strip() else None
        return result

    def apply(self, existing: Credentials) -> Credentials:
        """Merge this update over previously stored credentials."""
        keys = dict(existing.keys)
        for provider, value in self.changes().items():
            if value is None:
                keys.pop(provider, None)
            else:
                keys[provider] = value
        return Credentials(keys=keys)

    def obfuscated(self) -> dict[str, str]:
        """Display-safe echo of the fields that were sent."""
        return {
            field: obfuscate_key(getattr(self, field))
            for field in self.FIELD_PROVIDERS
            if field in self.model_fields_set
        }
