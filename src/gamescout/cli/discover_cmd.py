"""``gamescout discover`` -- List every installed game.

Runs a full discovery across all enabled sources and prints the merged
inventory, most-played first.

Exit Codes:
    0 -- Discovery ran (an empty inventory is still a success).
    1 -- Discovery failed.
"""

from __future__ import annotations

import json
import sys

import click

from gamescout.cli.context import get_service


@click.command("discover")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_context
def discover_command(ctx: click.Context, output_format: str) -> None:
    """Discover installed games across all enabled storefronts."""
    service = get_service(ctx)

    if output_format == "json":
        result = service.discover_games()
        click.echo(json.dumps(result, indent=2))
        sys.exit(1 if "error" in result else 0)

    try:
        catalog = service.catalog()
    except Exception as exc:
        click.echo(f"Error: Failed to discover games: {exc}", err=True)
        sys.exit(1)

    from gamescout.cli.output import print_catalog
    print_catalog(catalog)
    sys.exit(0)
