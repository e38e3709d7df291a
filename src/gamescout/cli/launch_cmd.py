"""``gamescout launch <name>`` -- Start a game.

NAME must equal a discovered game's name (ignoring case). The game is
started with its install folder as working directory and the command
returns immediately.

Exit Codes:
    0 -- The game process was started.
    1 -- The game could not be launched, or discovery failed.
    2 -- No game has that name.
"""

from __future__ import annotations

import json
import sys

import click

from gamescout.cli.context import get_service
from gamescout.exceptions import LaunchError, NoMatchError


@click.command("launch")
@click.argument("name")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_context
def launch_command(ctx: click.Context, name: str, output_format: str) -> None:
    """Launch the installed game called NAME."""
    service = get_service(ctx)
    try:
        record = service.launch(name)
    except NoMatchError as exc:
        _echo_error(str(exc), output_format)
        sys.exit(2)
    except LaunchError as exc:
        _echo_error(str(exc), output_format)
        sys.exit(1)
    except Exception as exc:
        _echo_error(f"Failed to launch game: {exc}", output_format)
        sys.exit(1)

    message = f"Launched '{record.name}' from {record.source.value}"
    if output_format == "json":
        click.echo(json.dumps({
            "success": True,
            "message": message,
            "executable": str(record.executable),
        }, indent=2))
    else:
        click.echo(message)
    sys.exit(0)


def _echo_error(message: str, output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}")
