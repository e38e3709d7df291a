"""GameScout CLI: find, inspect and launch installed PC games.

Entry point for the ``gamescout`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    discover  List every installed game found across storefronts.
    info      Show details for games whose name contains a string.
    launch    Start a game by its exact name.
    sources   List the source adapters and whether they are enabled.

Usage::

    gamescout discover
    gamescout discover --format json
    gamescout info witcher
    gamescout launch "Hades"
    gamescout --config ~/.gamescout.yaml --verbose discover
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from gamescout import __version__
from gamescout.cli.discover_cmd import discover_command
from gamescout.cli.info_cmd import info_command
from gamescout.cli.launch_cmd import launch_command
from gamescout.cli.sources_cmd import sources_command
from gamescout.config import load_config
from gamescout.exceptions import ConfigError


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr so JSON on stdout stays clean."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML configuration file (default: $GAMESCOUT_CONFIG).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log discovery details to stderr.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """GameScout: one inventory of the games installed on this machine.

    Scans Steam, Epic Games, GOG, Xbox, Rockstar, Ubisoft Connect,
    Battle.net and EA installs, removes duplicates, and estimates how
    much and how recently each game was played.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = load_config(config_path)
        except ConfigError as exc:
            raise click.ClickException(str(exc)) from exc


# Register all subcommands
cli.add_command(discover_command)
cli.add_command(info_command)
cli.add_command(launch_command)
cli.add_command(sources_command)
