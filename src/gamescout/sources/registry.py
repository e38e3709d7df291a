"""Static table of source adapters in deduplication priority order.

When two adapters report the same install directory, the aggregator
keeps the record from the adapter listed first here. The order puts the
storefronts with the richest metadata first and the generic
installed-programs fallback last:

    Steam, Epic Games, GOG, Xbox Games, Rockstar Games, Ubisoft Connect,
    Battle.net, EA Games, Installed Program.

Each ``SourceProfile`` also declares whether its adapter runs when the
configuration does not mention it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

from gamescout.discovery.models import Source
from gamescout.sources.base import SourceAdapter
from gamescout.sources.battlenet import BattleNetAdapter
from gamescout.sources.ea import EAAdapter
from gamescout.sources.epic import EpicAdapter
from gamescout.sources.gog import GogAdapter
from gamescout.sources.programs import InstalledProgramsAdapter
from gamescout.sources.rockstar import RockstarAdapter
from gamescout.sources.steam import SteamAdapter
from gamescout.sources.ubisoft import UbisoftAdapter
from gamescout.sources.xbox import XboxAdapter


@dataclass(frozen=True)
class SourceProfile:
    """Describes one source adapter.

    Attributes:
        source: The ``Source`` tag the adapter produces.
        factory: Zero-argument callable building the adapter.
        enabled_by_default: Whether the adapter runs when not configured.
        description: One-line summary shown by ``gamescout sources``.
    """

    source: Source
    factory: Callable[[], SourceAdapter]
    enabled_by_default: bool = True
    description: str = ""

    @property
    def key(self) -> str:
        return self.source.key


def _build_profiles() -> list[SourceProfile]:
    """Build the ordered adapter table."""
    return [
        SourceProfile(
            source=Source.STEAM,
            factory=SteamAdapter,
            description="Steam libraries (libraryfolders.vdf, appmanifest_*.acf)",
        ),
        SourceProfile(
            source=Source.EPIC,
            factory=EpicAdapter,
            description="Epic Games Launcher manifests (*.item)",
        ),
        SourceProfile(
            source=Source.GOG,
            factory=GogAdapter,
            description="GOG Galaxy registry keys and GOG install folders",
        ),
        SourceProfile(
            source=Source.XBOX,
            factory=XboxAdapter,
            description="Xbox app / Microsoft Store packages and XboxGames folders",
        ),
        SourceProfile(
            source=Source.ROCKSTAR,
            factory=RockstarAdapter,
            description="Rockstar Games Launcher install root",
        ),
        SourceProfile(
            source=Source.UBISOFT,
            factory=UbisoftAdapter,
            description="Ubisoft Connect games folder and Ubisoft uninstall entries",
        ),
        SourceProfile(
            source=Source.BATTLENET,
            factory=BattleNetAdapter,
            description="Blizzard titles registered next to Battle.net",
        ),
        SourceProfile(
            source=Source.EA,
            factory=EAAdapter,
            description="EA app / Origin install roots and EA uninstall entries",
        ),
        SourceProfile(
            source=Source.INSTALLED_PROGRAMS,
            factory=InstalledProgramsAdapter,
            enabled_by_default=False,
            description="Any uninstall entry that looks like a game",
        ),
    ]


SOURCE_PROFILES: list[SourceProfile] = _build_profiles()


def is_enabled(profile: SourceProfile, enabled: Mapping[str, bool] | None) -> bool:
    if enabled is None or profile.key not in enabled:
        return profile.enabled_by_default
    return bool(enabled[profile.key])


def build_adapters(enabled: Mapping[str, bool] | None = None) -> list[SourceAdapter]:
    """Instantiate the enabled adapters in priority order.

    Args:
        enabled: Per-source-key switches. Keys not present fall back to
            each profile's ``enabled_by_default``.

    Returns:
        Adapter instances, highest dedup priority first.
    """
    return [
        profile.factory()
        for profile in SOURCE_PROFILES
        if is_enabled(profile, enabled)
    ]
