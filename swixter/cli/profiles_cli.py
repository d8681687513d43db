"""`swixter profiles` command group."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from swixter.cli.context import CliContext, core_errors, parse_key_values, pass_cli_context
from swixter.core.profiles import ConflictPolicy, redact_profile
from swixter.core.schema import dump_record

console = Console()


@click.group(name="profiles")
def profiles_group() -> None:
    """Create, switch and share provider profiles."""


@profiles_group.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print profiles as JSON (keys redacted).")
@pass_cli_context
def list_cmd(obj: CliContext, as_json: bool) -> None:
    with core_errors():
        config = obj.profiles.load()
    active = config.active()
    active_name = active.name if active is not None else ""

    if as_json:
        rows = [
            {**dump_record(redact_profile(p)), "active": p.name == active_name}
            for p in config.profiles.values()
        ]
        click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    if not config.profiles:
        click.echo("No profiles configured")
        return

    table = Table(title="Profiles")
    table.add_column("", width=1)
    table.add_column("Name", style="cyan")
    table.add_column("Provider")
    table.add_column("Model", style="yellow")
    for profile in config.profiles.values():
        provider = obj.registry.get(profile.provider_id)
        provider_label = provider.display_name if provider else f"{profile.provider_id} (unknown)"
        table.add_row(
            "●" if profile.name == active_name else "",
            escape(profile.name),
            escape(provider_label),
            escape(profile.model),
        )
    console.print(table)


@profiles_group.command(name="show")
@click.argument("name")
@pass_cli_context
def show_cmd(obj: CliContext, name: str) -> None:
    """Show the effective configuration of a profile."""
    with core_errors():
        profile = obj.profiles.get(name)
    if profile is None:
        raise click.ClickException(f"Profile '{name}' does not exist.")

    effective = obj.registry.resolve_profile(profile)
    click.echo(f"Profile:  {profile.name}")
    click.echo(f"Provider: {profile.provider_id}")
    click.echo(f"Model:    {effective.model}")
    click.echo(f"Base URL: {effective.base_url or 'Not set'}")
    for key, value in effective.headers.items():
        click.echo(f"Header:   {key}: {value}")
    if effective.unknown_provider:
        click.echo(f"Warning: provider '{profile.provider_id}' is not in the registry.")
    elif not effective.is_complete:
        click.echo("Warning: no base URL; set one with --base-url.")


@profiles_group.command(name="create")
@click.argument("name")
@click.option("--provider", "provider_id", required=True, help="Provider id from `providers list`.")
@click.option("--api-key", required=True)
@click.option("--model", required=True)
@click.option("--base-url", default=None, help="Override the provider's endpoint.")
@click.option("--auth-token", default=None)
@click.option("--header", "headers", multiple=True, help="Extra header KEY=VALUE (repeatable).")
@click.option("--use", "activate", is_flag=True, help="Make the new profile active.")
@pass_cli_context
def create_cmd(
    obj: CliContext,
    name: str,
    provider_id: str,
    api_key: str,
    model: str,
    base_url: Optional[str],
    auth_token: Optional[str],
    headers: tuple[str, ...],
    activate: bool,
) -> None:
    """Create a new profile."""
    record = {
        "name": name,
        "providerId": provider_id,
        "apiKey": api_key,
        "model": model,
        "baseURL": base_url,
        "authToken": auth_token,
        "headers": parse_key_values(headers, "--header"),
    }
    with core_errors():
        profile = obj.profiles.create(
            {k: v for k, v in record.items() if v is not None}, activate=activate
        )
    click.echo(f"Created profile '{profile.name}'")
    if not obj.registry.exists(provider_id):
        click.echo(f"Note: provider '{provider_id}' is not in the registry yet.")


@profiles_group.command(name="use")
@click.argument("name")
@pass_cli_context
def use_cmd(obj: CliContext, name: str) -> None:
    """Make a profile the active one."""
    with core_errors():
        obj.profiles.switch(name)
    click.echo(f"Active profile: {name}")


@profiles_group.command(name="delete")
@click.argument("name")
@pass_cli_context
def delete_cmd(obj: CliContext, name: str) -> None:
    with core_errors():
        obj.profiles.delete(name)
    click.echo(f"Deleted profile '{name}'")


@profiles_group.command(name="export")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--sanitize", is_flag=True, help="Redact API keys in the export.")
@click.option("--profile", "names", multiple=True, help="Only export this profile (repeatable).")
@pass_cli_context
def export_cmd(obj: CliContext, file: Path, sanitize: bool, names: tuple[str, ...]) -> None:
    """Write profiles to an export file."""
    with core_errors():
        snapshot = obj.profiles.export_to_file(file, names or None, sanitize=sanitize)
    suffix = " (keys redacted)" if snapshot.sanitized else ""
    click.echo(f"Exported {len(snapshot.profiles)} profiles to {file}{suffix}")


@profiles_group.command(name="import")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--on-conflict",
    type=click.Choice([policy.value for policy in ConflictPolicy]),
    default=ConflictPolicy.SKIP.value,
    show_default=True,
)
@click.option("--allow-sanitized", is_flag=True, help="Import even if keys were redacted.")
@pass_cli_context
def import_cmd(obj: CliContext, file: Path, on_conflict: str, allow_sanitized: bool) -> None:
    """Merge profiles from an export file."""
    with core_errors():
        result = obj.profiles.import_from_file(
            file, ConflictPolicy(on_conflict), allow_sanitized=allow_sanitized
        )
    click.echo(f"Imported {len(result.imported)} profiles, skipped {len(result.skipped)}")
    for original, renamed in result.renamed:
        click.echo(f"  {original} -> {renamed}")


__all__ = ["profiles_group"]
