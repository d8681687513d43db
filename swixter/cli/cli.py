"""Main CLI entry point for swixter."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from swixter import __version__
from swixter.cli.context import build_context
from swixter.cli.profiles_cli import profiles_group
from swixter.cli.providers_cli import providers_group
from swixter.utils.log import enable_file_logging, get_logger


logger = get_logger()


@click.group()
@click.version_option(version=__version__, prog_name="swixter")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the main config file (providers.json is kept next to it).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write debug logs to this file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_file: Optional[Path]) -> None:
    """Manage AI provider profiles for coding CLIs."""
    if log_file is not None:
        enable_file_logging(log_file)
    ctx.obj = build_context(config_path)
    logger.debug(
        "[cli] Invocation started",
        extra={"config_path": str(ctx.obj.config_path), "command": ctx.invoked_subcommand},
    )


cli.add_command(providers_group)
cli.add_command(profiles_group)


def main() -> None:
    cli(prog_name="swixter")


if __name__ == "__main__":
    main()
