"""Record types and validation for provider presets, profiles and documents.

Every record is a pydantic model whose attributes are snake_case and whose
JSON form uses the camelCase names found in the persisted documents. The
``validate_*`` functions are the trust boundary: they accept freshly parsed
JSON, user input or an in-memory model, and either return a guaranteed-valid
value or raise :class:`swixter.core.errors.ValidationError` listing every
violated constraint.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Literal, Optional, Type, TypeVar
from urllib.parse import urlparse

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from swixter.core.config import CONFIG_VERSION, EXPORT_VERSION, PROVIDERS_VERSION
from swixter.core.errors import FieldIssue, ValidationError


CUSTOM_PRESET_ID = "custom"

AuthType = Literal["bearer", "api-key", "custom"]
WireApi = Literal["chat", "responses"]

_PROVIDER_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_PROFILE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _camel(name: str, snake: str) -> Any:
    """Field options accepting both spellings and emitting the camelCase one."""
    return {
        "validation_alias": AliasChoices(name, snake),
        "serialization_alias": name,
    }


def is_absolute_url(value: str) -> bool:
    """True when ``value`` has both a scheme and a network location."""
    if not value or any(ch.isspace() for ch in value):
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def is_iso_timestamp(value: str) -> bool:
    candidate = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        return False
    return True


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


def _require_optional_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_absolute_url(value):
        raise ValueError("must be an absolute URL")
    return value


class RateLimit(BaseModel):
    """Advertised request/token budgets for a provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    requests_per_minute: Optional[int] = Field(
        default=None, ge=0, **_camel("requestsPerMinute", "requests_per_minute")
    )
    tokens_per_minute: Optional[int] = Field(
        default=None, ge=0, **_camel("tokensPerMinute", "tokens_per_minute")
    )


class ProviderPreset(BaseModel):
    """A provider identity: endpoint, auth scheme and suggested models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str
    name: str
    display_name: str = Field(**_camel("displayName", "display_name"))
    # Declared after ``id`` so the validator below can see it.
    base_url: str = Field(**_camel("baseURL", "base_url"))
    default_models: list[str] = Field(**_camel("defaultModels", "default_models"))
    auth_type: AuthType = Field(**_camel("authType", "auth_type"))
    headers: Optional[dict[str, str]] = None
    rate_limit: Optional[RateLimit] = Field(default=None, **_camel("rateLimit", "rate_limit"))
    docs: Optional[str] = None
    is_chinese: Optional[bool] = Field(default=None, **_camel("isChinese", "is_chinese"))
    # Wire protocol and key variable used by OpenAI-style coders.
    wire_api: Optional[WireApi] = Field(default=None, **_camel("wireApi", "wire_api"))
    env_key: Optional[str] = Field(default=None, **_camel("envKey", "env_key"))

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        if not _PROVIDER_ID_RE.match(value):
            raise ValueError("must be a slug of letters, digits, '.', '_' or '-'")
        return value

    @field_validator("name", "display_name")
    @classmethod
    def _check_text(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str, info: ValidationInfo) -> str:
        if value == "":
            if info.data.get("id") == CUSTOM_PRESET_ID:
                return value
            raise ValueError(f"must not be empty except for the '{CUSTOM_PRESET_ID}' template")
        if not is_absolute_url(value):
            raise ValueError("must be an absolute URL")
        return value

    @field_validator("default_models")
    @classmethod
    def _check_models(cls, value: list[str]) -> list[str]:
        if any(not model.strip() for model in value):
            raise ValueError("model identifiers must not be empty")
        return value

    @field_validator("docs")
    @classmethod
    def _check_docs(cls, value: Optional[str]) -> Optional[str]:
        return _require_optional_url(value)


class ClaudeCodeProfile(BaseModel):
    """A named binding of credentials, model and overrides to a provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    # Existence in the merged registry is only checked when the profile is used.
    provider_id: str = Field(**_camel("providerId", "provider_id"))
    api_key: str = Field(**_camel("apiKey", "api_key"))
    model: str
    auth_token: Optional[str] = Field(default=None, **_camel("authToken", "auth_token"))
    base_url: Optional[str] = Field(default=None, **_camel("baseURL", "base_url"))
    env_key: Optional[str] = Field(default=None, **_camel("envKey", "env_key"))
    headers: Optional[dict[str, str]] = None
    created_at: Optional[str] = Field(default=None, **_camel("createdAt", "created_at"))
    updated_at: Optional[str] = Field(default=None, **_camel("updatedAt", "updated_at"))

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _PROFILE_NAME_RE.match(value):
            raise ValueError("must be non-empty and use only letters, digits, '_' or '-'")
        return value

    @field_validator("provider_id", "api_key", "model")
    @classmethod
    def _check_text(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: Optional[str]) -> Optional[str]:
        return _require_optional_url(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _check_timestamp(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_iso_timestamp(value):
            raise ValueError("must be an ISO-8601 timestamp")
        return value


class UserProvidersDocument(BaseModel):
    """Root of ``providers.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: str = PROVIDERS_VERSION
    providers: list[ProviderPreset] = Field(default_factory=list)

    @field_validator("providers")
    @classmethod
    def _check_unique_ids(cls, value: list[ProviderPreset]) -> list[ProviderPreset]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for provider in value:
            if provider.id in seen and provider.id not in duplicates:
                duplicates.append(provider.id)
            seen.add(provider.id)
        if duplicates:
            raise ValueError(f"duplicate provider ids: {', '.join(duplicates)}")
        return value


class ConfigFile(BaseModel):
    """Root of the profile config document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    active_profile: str = Field(default="", **_camel("activeProfile", "active_profile"))
    profiles: dict[str, ClaudeCodeProfile] = Field(default_factory=dict)
    version: str = CONFIG_VERSION

    @model_validator(mode="before")
    @classmethod
    def _fold_coder_pointers(cls, data: Any) -> Any:
        """Read the multi-coder layout (``coders.claude.activeProfile``)."""
        if not isinstance(data, dict) or "coders" not in data:
            return data
        if "activeProfile" in data or "active_profile" in data:
            return data
        data = dict(data)
        coders = data.pop("coders")
        claude = coders.get("claude") if isinstance(coders, dict) else None
        if isinstance(claude, dict) and isinstance(claude.get("activeProfile"), str):
            data["activeProfile"] = claude["activeProfile"]
        return data

    @field_validator("profiles")
    @classmethod
    def _check_keys(cls, value: dict[str, ClaudeCodeProfile]) -> dict[str, ClaudeCodeProfile]:
        mismatched = [key for key, profile in value.items() if key != profile.name]
        if mismatched:
            raise ValueError(f"keys must match profile names: {', '.join(mismatched)}")
        return value

    def active(self) -> Optional[ClaudeCodeProfile]:
        """The active profile, or None when the pointer is empty or dangling."""
        if not self.active_profile:
            return None
        return self.profiles.get(self.active_profile)


class ExportConfig(BaseModel):
    """A point-in-time snapshot of some or all profiles."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    profiles: list[ClaudeCodeProfile]
    exported_at: str = Field(**_camel("exportedAt", "exported_at"))
    version: str = EXPORT_VERSION
    sanitized: bool = False

    @field_validator("exported_at")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        if not is_iso_timestamp(value):
            raise ValueError("must be an ISO-8601 timestamp")
        return value


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _format_loc(loc: tuple[Any, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def issues_from_pydantic(exc: PydanticValidationError) -> list[FieldIssue]:
    """Flatten pydantic's error list into field issues."""
    issues = []
    for error in exc.errors():
        reason = str(error.get("msg", "invalid value"))
        if reason.startswith("Value error, "):
            reason = reason[len("Value error, ") :]
        issues.append(FieldIssue(path=_format_loc(tuple(error.get("loc", ()))), reason=reason))
    return issues


def dump_record(record: BaseModel) -> dict[str, Any]:
    """Serialize a record to its JSON document form."""
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def _validate(model_cls: Type[_ModelT], data: Any, subject: str) -> _ModelT:
    if isinstance(data, BaseModel):
        # Re-check values built in memory, e.g. through model_copy(update=...).
        data = dump_record(data)
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(issues_from_pydantic(exc), subject=subject) from exc


def validate_provider_preset(data: Any) -> ProviderPreset:
    return _validate(ProviderPreset, data, "provider")


def validate_profile(data: Any) -> ClaudeCodeProfile:
    return _validate(ClaudeCodeProfile, data, "profile")


def validate_user_providers_document(data: Any) -> UserProvidersDocument:
    return _validate(UserProvidersDocument, data, "providers document")


def validate_config_file(data: Any) -> ConfigFile:
    return _validate(ConfigFile, data, "config document")


def validate_export_config(data: Any) -> ExportConfig:
    return _validate(ExportConfig, data, "export document")
