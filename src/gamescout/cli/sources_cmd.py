"""``gamescout sources`` -- List the source adapters.

Shows each adapter in deduplication priority order with its
configuration key and whether the active configuration enables it.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import json

import click

from gamescout.cli.context import get_config
from gamescout.sources.registry import SOURCE_PROFILES, is_enabled


@click.command("sources")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_context
def sources_command(ctx: click.Context, output_format: str) -> None:
    """List supported sources in priority order."""
    config = get_config(ctx)
    rows = [
        {
            "priority": index,
            "key": profile.key,
            "name": profile.source.value,
            "enabled": is_enabled(profile, config.sources),
            "description": profile.description,
        }
        for index, profile in enumerate(SOURCE_PROFILES, start=1)
    ]

    if output_format == "json":
        click.echo(json.dumps(rows, indent=2))
        return

    from gamescout.cli.output import print_sources
    print_sources(rows)
