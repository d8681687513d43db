"""Persistence for user-defined providers (``providers.json``).

Reads are best-effort: a missing, unreadable or invalid document is treated
as "no user providers" and only logged, so a corrupt file never blocks the
rest of the tool. Writes validate first and let I/O errors propagate.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from swixter.core.config import (
    ConfigPathResolver,
    PROVIDERS_VERSION,
    get_config_path,
    user_providers_path,
    write_json_atomic,
)
from swixter.core.errors import ValidationError
from swixter.core.schema import (
    ProviderPreset,
    dump_record,
    validate_provider_preset,
    validate_user_providers_document,
)
from swixter.utils.log import get_logger


logger = get_logger()


class UserProviderStore:
    """Load, save and edit the user providers document."""

    def __init__(self, config_path: ConfigPathResolver = get_config_path) -> None:
        self._config_path = config_path

    @property
    def path(self) -> Path:
        return user_providers_path(self._config_path())

    def load(self) -> list[ProviderPreset]:
        """Return the stored providers in document order, or [] on any read problem."""
        path = self.path
        if not path.exists():
            logger.debug(
                "[user_providers] No providers document; using empty list",
                extra={"path": str(path)},
            )
            return []

        try:
            payload: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(
                "[user_providers] Failed to load user providers: %s: %s",
                type(exc).__name__,
                exc,
                extra={"path": str(path)},
            )
            return []

        try:
            document = validate_user_providers_document(payload)
        except ValidationError as exc:
            logger.warning(
                "[user_providers] Ignoring invalid providers document: %s",
                exc,
                extra={"path": str(path), "issues": len(exc.issues)},
            )
            return []

        logger.debug(
            "[user_providers] Loaded user providers",
            extra={"path": str(path), "provider_count": len(document.providers)},
        )
        return list(document.providers)

    def save(self, providers: Iterable[Any]) -> None:
        """Validate and overwrite the whole document."""
        document = validate_user_providers_document(
            {"version": PROVIDERS_VERSION, "providers": [_as_payload(p) for p in providers]}
        )
        path = self.path
        write_json_atomic(path, dump_record(document))
        logger.debug(
            "[user_providers] Saved user providers",
            extra={"path": str(path), "provider_count": len(document.providers)},
        )

    def upsert(self, provider: Any) -> ProviderPreset:
        """Insert ``provider`` or replace the stored entry with the same id."""
        validated = validate_provider_preset(provider)
        providers = self.load()
        for index, existing in enumerate(providers):
            if existing.id == validated.id:
                providers[index] = validated
                break
        else:
            providers.append(validated)
        self.save(providers)
        logger.info(
            "[user_providers] Upserted provider",
            extra={"provider_id": validated.id, "provider_count": len(providers)},
        )
        return validated

    def delete(self, provider_id: str) -> bool:
        """Remove ``provider_id``; returns False when nothing matched."""
        providers = self.load()
        remaining = [p for p in providers if p.id != provider_id]
        if len(remaining) == len(providers):
            return False
        self.save(remaining)
        logger.info("[user_providers] Deleted provider", extra={"provider_id": provider_id})
        return True

    def get(self, provider_id: str) -> Optional[ProviderPreset]:
        for provider in self.load():
            if provider.id == provider_id:
                return provider
        return None

    def exists(self, provider_id: str) -> bool:
        return self.get(provider_id) is not None


def _as_payload(provider: Any) -> Any:
    if isinstance(provider, ProviderPreset):
        return dump_record(provider)
    return provider
