"""`swixter providers` command group."""

from __future__ import annotations

import json
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from swixter.cli.context import CliContext, core_errors, parse_key_values, pass_cli_context
from swixter.core.schema import dump_record

console = Console()

_SOURCE_LABELS = {
    "built-in": "built-in",
    "user": "user",
    "override": "user (override)",
}


@click.group(name="providers")
def providers_group() -> None:
    """List and edit provider definitions."""


@providers_group.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print the merged registry as JSON.")
@pass_cli_context
def list_cmd(obj: CliContext, as_json: bool) -> None:
    """List built-in and user-defined providers."""
    providers = obj.registry.all_providers()

    if as_json:
        click.echo(json.dumps([dump_record(p) for p in providers], indent=2, ensure_ascii=False))
        return

    if not providers:
        click.echo("No providers configured")
        return

    table = Table(title="Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Base URL", style="yellow")
    table.add_column("Source", style="dim")
    for provider in providers:
        table.add_row(
            escape(provider.id),
            escape(provider.display_name),
            escape(provider.base_url or "N/A"),
            _SOURCE_LABELS.get(obj.registry.source_of(provider.id), ""),
        )
    console.print(table)
    click.echo(f"Total: {len(providers)} providers")


@providers_group.command(name="show")
@click.argument("provider_id")
@pass_cli_context
def show_cmd(obj: CliContext, provider_id: str) -> None:
    """Print one provider from the merged registry as JSON."""
    provider = obj.registry.get(provider_id)
    if provider is None:
        raise click.ClickException(f"Provider '{provider_id}' does not exist.")
    click.echo(json.dumps(dump_record(provider), indent=2, ensure_ascii=False))


@providers_group.command(name="add")
@click.option("--id", "provider_id", required=True, help="Unique provider id (slug).")
@click.option("--name", required=True)
@click.option("--display-name", default=None, help="Defaults to --name.")
@click.option("--base-url", required=True)
@click.option(
    "--auth-type",
    type=click.Choice(["bearer", "api-key", "custom"]),
    default="bearer",
    show_default=True,
)
@click.option("--model", "models", multiple=True, help="Default model (repeatable).")
@click.option("--header", "headers", multiple=True, help="Extra header KEY=VALUE (repeatable).")
@click.option("--docs", default=None, help="Documentation URL.")
@pass_cli_context
def add_cmd(
    obj: CliContext,
    provider_id: str,
    name: str,
    display_name: Optional[str],
    base_url: str,
    auth_type: str,
    models: tuple[str, ...],
    headers: tuple[str, ...],
    docs: Optional[str],
) -> None:
    """Add a user provider, or replace the one with the same id."""
    record = {
        "id": provider_id,
        "name": name,
        "displayName": display_name or name,
        "baseURL": base_url,
        "authType": auth_type,
        "defaultModels": list(models),
        "headers": parse_key_values(headers, "--header"),
        "docs": docs,
    }
    replacing = obj.user_providers.exists(provider_id)
    with core_errors():
        provider = obj.user_providers.upsert({k: v for k, v in record.items() if v is not None})
    verb = "Updated" if replacing else "Added"
    click.echo(f"{verb} provider '{provider.id}'")


@providers_group.command(name="remove")
@click.argument("provider_id")
@pass_cli_context
def remove_cmd(obj: CliContext, provider_id: str) -> None:
    """Remove a user provider (built-ins cannot be removed)."""
    with core_errors():
        removed = obj.user_providers.delete(provider_id)
    if not removed:
        raise click.ClickException(f"No user provider named '{provider_id}'.")
    click.echo(f"Removed provider '{provider_id}'")


__all__ = ["providers_group"]
