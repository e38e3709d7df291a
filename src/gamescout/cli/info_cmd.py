"""``gamescout info <name>`` -- Show details for matching games.

Matches every discovered game whose name contains NAME, ignoring case.

Exit Codes:
    0 -- At least one game matched.
    1 -- Discovery failed.
    2 -- No game matched.
"""

from __future__ import annotations

import json
import sys

import click

from gamescout.cli.context import get_service
from gamescout.exceptions import NoMatchError
from gamescout.service import DATETIME_FORMAT, record_to_dict


@click.command("info")
@click.argument("name")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_context
def info_command(ctx: click.Context, name: str, output_format: str) -> None:
    """Show install details for games whose name contains NAME."""
    service = get_service(ctx)
    try:
        matches = service.find_games(name)
    except NoMatchError as exc:
        _echo_error(str(exc), output_format)
        sys.exit(2)
    except Exception as exc:
        _echo_error(f"Failed to get game info: {exc}", output_format)
        sys.exit(1)

    if output_format == "json":
        payload = [record_to_dict(record, DATETIME_FORMAT) for record in matches]
        click.echo(json.dumps(payload, indent=2))
    else:
        from gamescout.cli.output import print_record_detail
        for record in matches:
            print_record_detail(record)
    sys.exit(0)


def _echo_error(message: str, output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}")
