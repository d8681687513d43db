"""Provider registry and profile store."""

from swixter.core.errors import (
    ConfigParseError,
    FieldIssue,
    NotFoundError,
    ProfileConflictError,
    SwixterError,
    ValidationError,
)
from swixter.core.profiles import ConflictPolicy, ImportResult, ProfileStore
from swixter.core.registry import EffectiveConfig, ProviderRegistry
from swixter.core.schema import (
    ClaudeCodeProfile,
    ConfigFile,
    ExportConfig,
    ProviderPreset,
    validate_profile,
    validate_provider_preset,
)
from swixter.core.user_providers import UserProviderStore

__all__ = [
    "ClaudeCodeProfile",
    "ConfigFile",
    "ConfigParseError",
    "ConflictPolicy",
    "EffectiveConfig",
    "ExportConfig",
    "FieldIssue",
    "ImportResult",
    "NotFoundError",
    "ProfileConflictError",
    "ProfileStore",
    "ProviderPreset",
    "ProviderRegistry",
    "SwixterError",
    "UserProviderStore",
    "ValidationError",
    "validate_profile",
    "validate_provider_preset",
]
