"""Error types shared by the provider registry and the profile store."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union


class SwixterError(Exception):
    """Base class for every error raised by swixter."""


@dataclass(frozen=True)
class FieldIssue:
    """A single violated constraint, addressed by its JSON field path."""

    path: str
    reason: str

    def __str__(self) -> str:
        if not self.path:
            return self.reason
        return f"{self.path}: {self.reason}"


class ValidationError(SwixterError, ValueError):
    """One or more field-level constraint violations."""

    def __init__(self, issues: Iterable[FieldIssue], *, subject: str = "record") -> None:
        self.issues = list(issues)
        self.subject = subject
        details = "; ".join(str(issue) for issue in self.issues) or "unknown error"
        super().__init__(f"Invalid {subject}: {details}")

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]


class NotFoundError(SwixterError, LookupError):
    """A referenced profile or provider does not exist."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} '{key}' does not exist.")


class ProfileConflictError(SwixterError, ValueError):
    """A profile with the same name is already stored."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Profile '{name}' already exists.")


class ConfigParseError(SwixterError):
    """A persisted or imported document could not be read or parsed."""

    def __init__(self, path: Optional[Union[str, Path]], reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = reason
        location = f" at {self.path}" if self.path is not None else ""
        super().__init__(f"Malformed document{location}: {reason}")
