"""Merged view over built-in presets and user-defined providers.

User entries shadow built-ins with the same id. Nothing is cached: both
sources are small local documents, so every call recomputes the merge.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from swixter.core.presets import get_built_in_presets, get_preset_by_id, is_built_in
from swixter.core.schema import CUSTOM_PRESET_ID, AuthType, ClaudeCodeProfile, ProviderPreset
from swixter.core.user_providers import UserProviderStore
from swixter.utils.log import get_logger


logger = get_logger()

ProviderSource = Literal["built-in", "user", "override"]


class EffectiveConfig(BaseModel):
    """What a downstream tool should use for a profile."""

    model_config = ConfigDict(frozen=True)

    profile_name: str
    provider_id: str
    provider: Optional[ProviderPreset] = None
    base_url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    model: str
    api_key: str
    auth_token: Optional[str] = None
    auth_type: Optional[AuthType] = None

    @property
    def unknown_provider(self) -> bool:
        return self.provider is None

    @property
    def is_complete(self) -> bool:
        """False when no endpoint could be determined."""
        return bool(self.base_url)


class ProviderRegistry:
    """Read-only merge of the preset catalog and the user provider store."""

    def __init__(self, user_store: Optional[UserProviderStore] = None) -> None:
        self.user_store = user_store or UserProviderStore()

    def all_providers(self) -> list[ProviderPreset]:
        """Built-ins not overridden by the user, then user providers."""
        user_providers = self.user_store.load()
        user_ids = {provider.id for provider in user_providers}
        built_ins = [preset for preset in get_built_in_presets() if preset.id not in user_ids]
        return built_ins + user_providers

    def standard_providers(self) -> list[ProviderPreset]:
        return [p for p in self.all_providers() if p.id != CUSTOM_PRESET_ID]

    def get(self, provider_id: str) -> Optional[ProviderPreset]:
        user_provider = self.user_store.get(provider_id)
        if user_provider is not None:
            return user_provider
        return get_preset_by_id(provider_id)

    def exists(self, provider_id: str) -> bool:
        return self.get(provider_id) is not None

    def source_of(self, provider_id: str) -> Optional[ProviderSource]:
        """Where the merged entry for ``provider_id`` comes from."""
        built_in = is_built_in(provider_id)
        if self.user_store.exists(provider_id):
            return "override" if built_in else "user"
        return "built-in" if built_in else None

    def resolve_profile(self, profile: ClaudeCodeProfile) -> EffectiveConfig:
        """Apply a profile's overrides on top of its provider.

        ``baseURL`` is replaced by the profile's value when set; headers are
        merged with the profile's keys winning. An unknown provider id is not
        an error: the result carries ``provider=None``.
        """
        provider = self.get(profile.provider_id)
        if provider is None:
            logger.info(
                "[registry] Profile references unknown provider",
                extra={"profile": profile.name, "provider_id": profile.provider_id},
            )

        headers: dict[str, str] = {}
        if provider is not None and provider.headers:
            headers.update(provider.headers)
        if profile.headers:
            headers.update(profile.headers)

        base_url = profile.base_url or (provider.base_url if provider is not None else "")
        return EffectiveConfig(
            profile_name=profile.name,
            provider_id=profile.provider_id,
            provider=provider,
            base_url=base_url,
            headers=headers,
            model=profile.model,
            api_key=profile.api_key,
            auth_token=profile.auth_token,
            auth_type=provider.auth_type if provider is not None else None,
        )
