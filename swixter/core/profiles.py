"""Profile persistence: create, switch, update, delete, export and import.

Every mutation loads the whole config document, changes it in memory and
writes it back. Unlike the user provider store, a malformed config document
is a hard error (:class:`ConfigParseError`): silently dropping every profile
is not an acceptable recovery. This module never logs; callers decide how
failures are shown.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from pydantic import BaseModel

from swixter.core.config import (
    EXPORT_VERSION,
    ConfigPathResolver,
    get_config_path,
    utc_now_iso,
    write_json_atomic,
)
from swixter.core.errors import (
    ConfigParseError,
    FieldIssue,
    NotFoundError,
    ProfileConflictError,
    SwixterError,
    ValidationError,
)
from swixter.core.schema import (
    ClaudeCodeProfile,
    ConfigFile,
    ExportConfig,
    dump_record,
    validate_config_file,
    validate_export_config,
    validate_profile,
)


REDACTED_MARKER = "<redacted>"

PathLike = Union[str, Path]


class ConflictPolicy(str, Enum):
    """How an imported profile whose name is already taken is handled."""

    SKIP = "skip"
    OVERWRITE = "overwrite"
    RENAME = "rename"


@dataclass
class ImportResult:
    """Outcome of an import, by profile name."""

    # Names written to the store, after any renaming.
    imported: list[str] = field(default_factory=list)
    overwritten: list[str] = field(default_factory=list)
    # (name in the export, name it was stored under)
    renamed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class ExportFileSummary:
    valid: bool
    error: Optional[str] = None
    profile_count: Optional[int] = None
    sanitized: Optional[bool] = None


def redact_profile(profile: ClaudeCodeProfile) -> ClaudeCodeProfile:
    """Copy of ``profile`` with its secrets replaced by ``REDACTED_MARKER``.

    Besides ``apiKey`` and ``authToken`` themselves, any header value that
    carries one of them is replaced whole, and occurrences inside the
    ``baseURL`` override (e.g. a ``?key=`` query) are masked in place.
    """
    secrets = [s for s in (profile.api_key, profile.auth_token) if s]

    headers = profile.headers
    if headers:
        headers = {
            key: REDACTED_MARKER if any(s in value for s in secrets) else value
            for key, value in headers.items()
        }

    base_url = profile.base_url
    if base_url:
        for secret in secrets:
            base_url = base_url.replace(secret, REDACTED_MARKER)

    return profile.model_copy(
        update={
            "api_key": REDACTED_MARKER,
            "auth_token": REDACTED_MARKER if profile.auth_token else None,
            "headers": headers,
            "base_url": base_url,
        }
    )


def _json_key(key: str) -> str:
    info = ClaudeCodeProfile.model_fields.get(key)
    if info is not None and info.serialization_alias:
        return info.serialization_alias
    return key


def _free_name(name: str, taken: Mapping[str, Any]) -> str:
    suffix = 2
    while f"{name}-{suffix}" in taken:
        suffix += 1
    return f"{name}-{suffix}"


def _read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigParseError(path, f"not valid UTF-8: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(path, f"invalid JSON: {exc}") from exc


class ProfileStore:
    """Manage the profile collection in the main config document."""

    def __init__(
        self,
        config_path: ConfigPathResolver = get_config_path,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._config_path = config_path
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._config_path()

    # -- document -----------------------------------------------------------

    def load(self) -> ConfigFile:
        """Read the config document; a missing file yields an empty collection.

        Raises:
            ConfigParseError: the document is not valid JSON or violates the schema.
            OSError: the file exists but cannot be read.
        """
        path = self.path
        if not path.exists():
            return ConfigFile()
        payload = _read_json(path)
        try:
            return validate_config_file(payload)
        except ValidationError as exc:
            raise ConfigParseError(path, str(exc)) from exc

    def save(self, config: ConfigFile) -> None:
        validated = validate_config_file(config)
        write_json_atomic(self.path, dump_record(validated))

    # -- reads --------------------------------------------------------------

    def list_profiles(self) -> list[ClaudeCodeProfile]:
        return list(self.load().profiles.values())

    def get(self, name: str) -> Optional[ClaudeCodeProfile]:
        return self.load().profiles.get(name)

    def exists(self, name: str) -> bool:
        return name in self.load().profiles

    def get_active(self) -> Optional[ClaudeCodeProfile]:
        return self.load().active()

    # -- mutations ----------------------------------------------------------

    def create(self, profile: Any, *, activate: bool = False) -> ClaudeCodeProfile:
        """Add a new profile; its name must not be taken.

        Missing timestamps are stamped with the current time. The provider id
        is not checked here; unknown providers surface when the profile is
        resolved against the registry.
        """
        validated = validate_profile(profile)
        config = self.load()
        if validated.name in config.profiles:
            raise ProfileConflictError(validated.name)

        now = self._clock()
        record = validated.model_copy(
            update={
                "created_at": validated.created_at or now,
                "updated_at": validated.updated_at or now,
            }
        )
        config.profiles[record.name] = record
        if activate:
            config.active_profile = record.name
        self.save(config)
        return record

    def switch(self, name: str) -> ClaudeCodeProfile:
        config = self.load()
        profile = config.profiles.get(name)
        if profile is None:
            raise NotFoundError("profile", name)
        config.active_profile = name
        self.save(config)
        return profile

    def update(self, name: str, changes: Union[Mapping[str, Any], BaseModel]) -> ClaudeCodeProfile:
        """Replace fields of an existing profile and bump ``updatedAt``.

        ``changes`` may use JSON or attribute names; a ``None`` value clears
        an optional field. Changing ``name`` renames the profile in place and
        moves the active pointer with it.
        """
        config = self.load()
        existing = config.profiles.get(name)
        if existing is None:
            raise NotFoundError("profile", name)

        if isinstance(changes, BaseModel):
            changes = dump_record(changes)

        merged = dump_record(existing)
        for key, value in changes.items():
            json_key = _json_key(key)
            if value is None:
                merged.pop(json_key, None)
            else:
                merged[json_key] = value
        now = self._clock()
        merged["createdAt"] = existing.created_at or now
        merged["updatedAt"] = now
        updated = validate_profile(merged)

        if updated.name == name:
            config.profiles[name] = updated
        else:
            if updated.name in config.profiles:
                raise ProfileConflictError(updated.name)
            config.profiles = {
                (updated.name if key == name else key): (updated if key == name else value)
                for key, value in config.profiles.items()
            }
            if config.active_profile == name:
                config.active_profile = updated.name

        self.save(config)
        return updated

    def delete(self, name: str) -> None:
        """Remove a profile. Deleting the active one leaves no active profile."""
        config = self.load()
        if name not in config.profiles:
            raise NotFoundError("profile", name)
        del config.profiles[name]
        if config.active_profile == name:
            config.active_profile = ""
        self.save(config)

    # -- export / import ----------------------------------------------------

    def export(
        self, names: Optional[Iterable[str]] = None, *, sanitize: bool = False
    ) -> ExportConfig:
        """Snapshot profiles without touching the stored document.

        With ``names`` the snapshot follows the requested order; otherwise it
        holds every profile in insertion order.
        """
        config = self.load()
        if names is None:
            selected = list(config.profiles.values())
        else:
            selected = []
            seen: set[str] = set()
            for name in names:
                if name in seen:
                    continue
                profile = config.profiles.get(name)
                if profile is None:
                    raise NotFoundError("profile", name)
                selected.append(profile)
                seen.add(name)

        if sanitize:
            selected = [redact_profile(profile) for profile in selected]

        return ExportConfig(
            profiles=selected,
            exported_at=self._clock(),
            version=EXPORT_VERSION,
            sanitized=sanitize,
        )

    def export_to_file(
        self,
        path: PathLike,
        names: Optional[Iterable[str]] = None,
        *,
        sanitize: bool = False,
    ) -> ExportConfig:
        snapshot = self.export(names, sanitize=sanitize)
        write_json_atomic(Path(path), dump_record(snapshot))
        return snapshot

    def import_profiles(
        self,
        data: Any,
        policy: Union[ConflictPolicy, str] = ConflictPolicy.SKIP,
        *,
        allow_sanitized: bool = False,
    ) -> ImportResult:
        """Merge an export snapshot into the collection.

        The whole snapshot is validated before anything is written. Each name
        collision is then settled by ``policy`` on its own.
        """
        policy = ConflictPolicy(policy)
        snapshot = validate_export_config(data)
        if snapshot.sanitized and not allow_sanitized:
            raise ValidationError(
                [FieldIssue("sanitized", "API keys in this export are redacted")],
                subject="export document",
            )

        config = self.load()
        stored_before = set(config.profiles)
        result = ImportResult()
        now = self._clock()
        for profile in snapshot.profiles:
            target = profile.name
            created_at = profile.created_at or now
            existing = config.profiles.get(target)
            if existing is not None:
                # Also reached when the snapshot repeats a name it already imported.
                if policy is ConflictPolicy.SKIP:
                    result.skipped.append(target)
                    continue
                if policy is ConflictPolicy.OVERWRITE:
                    created_at = existing.created_at or created_at
                    if target in stored_before and target not in result.overwritten:
                        result.overwritten.append(target)
                else:
                    target = _free_name(profile.name, config.profiles)
                    result.renamed.append((profile.name, target))

            config.profiles[target] = profile.model_copy(
                update={"name": target, "created_at": created_at, "updated_at": now}
            )
            if target not in result.imported:
                result.imported.append(target)

        if result.imported:
            self.save(config)
        return result

    def import_from_file(
        self,
        path: PathLike,
        policy: Union[ConflictPolicy, str] = ConflictPolicy.SKIP,
        *,
        allow_sanitized: bool = False,
    ) -> ImportResult:
        file_path = Path(path)
        if not file_path.exists():
            raise NotFoundError("export file", str(file_path))
        return self.import_profiles(
            _read_json(file_path), policy, allow_sanitized=allow_sanitized
        )

    def inspect_export_file(self, path: PathLike) -> ExportFileSummary:
        """Check an export file without importing it. Never raises."""
        file_path = Path(path)
        if not file_path.exists():
            return ExportFileSummary(valid=False, error=f"File not found: {file_path}")
        try:
            snapshot = validate_export_config(_read_json(file_path))
        except (SwixterError, OSError) as exc:
            return ExportFileSummary(valid=False, error=str(exc))
        return ExportFileSummary(
            valid=True,
            profile_count=len(snapshot.profiles),
            sanitized=snapshot.sanitized,
        )
