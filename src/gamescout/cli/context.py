"""Shared access to the service from within a command."""

from __future__ import annotations

import click

from gamescout.config import GameScoutConfig
from gamescout.service import GameDiscoveryService


def get_config(ctx: click.Context) -> GameScoutConfig:
    obj = ctx.ensure_object(dict)
    return obj.get("config") or GameScoutConfig()


def get_service(ctx: click.Context) -> GameDiscoveryService:
    """Return the service stored on the context, building it on first use.

    Tests inject a ready-made service through ``obj={"service": ...}``.
    """
    obj = ctx.ensure_object(dict)
    if "service" not in obj:
        obj["service"] = GameDiscoveryService.from_config(get_config(ctx))
    return obj["service"]
