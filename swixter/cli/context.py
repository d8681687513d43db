"""Shared state and error handling for swixter subcommands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import click

from swixter.core.config import get_config_path
from swixter.core.errors import SwixterError, ValidationError
from swixter.core.profiles import ProfileStore
from swixter.core.registry import ProviderRegistry
from swixter.core.user_providers import UserProviderStore


@dataclass
class CliContext:
    """Stores shared by every subcommand of one invocation."""

    config_path: Path
    user_providers: UserProviderStore
    registry: ProviderRegistry
    profiles: ProfileStore


def build_context(config_path: Optional[Path] = None) -> CliContext:
    resolved = config_path or get_config_path()

    def resolver() -> Path:
        return resolved

    user_providers = UserProviderStore(resolver)
    return CliContext(
        config_path=resolved,
        user_providers=user_providers,
        registry=ProviderRegistry(user_providers),
        profiles=ProfileStore(resolver),
    )


pass_cli_context = click.make_pass_decorator(CliContext)


@contextmanager
def core_errors() -> Iterator[None]:
    """Report core failures as click errors instead of tracebacks."""
    try:
        yield
    except ValidationError as exc:
        lines = [f"Invalid {exc.subject}:"]
        lines.extend(f"  - {issue}" for issue in exc.issues)
        raise click.ClickException("\n".join(lines)) from exc
    except (SwixterError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


def parse_key_values(values: tuple[str, ...], option: str) -> Optional[dict[str, str]]:
    """Turn repeated ``KEY=VALUE`` options into a dict."""
    if not values:
        return None
    parsed: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{raw}'", param_hint=option)
        parsed[key.strip()] = value
    return parsed
