"""Data models for the discovery module.

Contains the canonical ``InstallRecord`` produced by every source adapter,
the ``Source`` tag identifying which adapter produced it, the
``UsageStats`` pair mined by the usage extractors, and the aggregate
``Catalog`` returned by one discovery run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from gamescout.discovery.filesystem import canonical_path

_BYTES_PER_MB = 1024 * 1024


class Source(Enum):
    """Closed set of install sources, declared in dedup priority order.

    The value is the display label used in output; ``key`` is the short
    identifier used in configuration files and on the command line.
    """

    STEAM = "Steam"
    EPIC = "Epic Games"
    GOG = "GOG"
    XBOX = "Xbox Games"
    ROCKSTAR = "Rockstar Games"
    UBISOFT = "Ubisoft Connect"
    BATTLENET = "Battle.net"
    EA = "EA Games"
    INSTALLED_PROGRAMS = "Installed Program"

    @property
    def key(self) -> str:
        return _SOURCE_KEYS[self]

    @classmethod
    def from_key(cls, key: str) -> Source:
        """Look up a source by its short configuration key.

        Raises:
            KeyError: If ``key`` names no known source.
        """
        for source, short in _SOURCE_KEYS.items():
            if short == key.lower():
                return source
        raise KeyError(key)


_SOURCE_KEYS: dict[Source, str] = {
    Source.STEAM: "steam",
    Source.EPIC: "epic",
    Source.GOG: "gog",
    Source.XBOX: "xbox",
    Source.ROCKSTAR: "rockstar",
    Source.UBISOFT: "ubisoft",
    Source.BATTLENET: "battlenet",
    Source.EA: "ea",
    Source.INSTALLED_PROGRAMS: "programs",
}


@dataclass(frozen=True)
class UsageStats:
    """Best-effort usage statistics for one install.

    Both fields are heuristic. ``None`` means "unknown", which is
    distinct from zero hours.

    Attributes:
        hours: Accumulated hours of use, normalized to hours.
        last_active: Most recent activity time, possibly a file-time proxy.
    """

    hours: float | None = None
    last_active: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return self.hours is None and self.last_active is None


# Shared "nothing known" result returned by extractors on any failure.
EMPTY_USAGE = UsageStats()


@dataclass(frozen=True)
class RawCandidate:
    """A possible install located by a source adapter, before enrichment.

    Attributes:
        name: Display name as the source reports it.
        install_path: Install directory.
        source: The adapter that located it.
        executable: Launch target declared by the source's own metadata,
            if any. When ``None`` the executable selector picks one.
        app_id: Vendor identifier (Steam app id) used by usage extractors.
        require_executable: Drop the candidate when no executable is found.
        min_size_bytes: Drop the candidate unless its directory is larger.
    """

    name: str
    install_path: Path
    source: Source
    executable: Path | None = None
    app_id: str | None = None
    require_executable: bool = False
    min_size_bytes: int = 0


@dataclass(frozen=True)
class InstallRecord:
    """A single installed game discovered on the system.

    Records are built complete by a source adapter and never mutated once
    they leave it.

    Attributes:
        name: Display name. Not guaranteed unique.
        source: The adapter that produced this record.
        install_path: Absolute install directory; identity for dedup.
        executable: Chosen launch target, or ``None`` if none was found.
        install_date: Directory creation time (best effort).
        size_bytes: Recursive size of the install directory, ``0`` when
            enumeration failed.
        last_active: Heuristic last-activity time.
        usage_hours: Heuristic hours of use.
    """

    name: str
    source: Source
    install_path: Path
    executable: Path | None = None
    install_date: datetime | None = None
    size_bytes: int = 0
    last_active: datetime | None = None
    usage_hours: float | None = None

    @property
    def size_mb(self) -> int:
        return self.size_bytes // _BYTES_PER_MB

    @property
    def canonical_path(self) -> str:
        return canonical_path(self.install_path)

    @property
    def is_launchable(self) -> bool:
        """True when the record names an executable that exists right now."""
        if self.executable is None:
            return False
        try:
            return self.executable.is_file()
        except OSError:
            return False


@dataclass(frozen=True)
class Catalog:
    """Immutable result of one discovery run.

    Attributes:
        records: Deduplicated install records, ordered by usage hours
            (descending, absent treated as zero) then by name.
        counts_by_source: Number of records per source display label,
            stored as a read-only mapping.
        cancelled: True when the run was cut short and the catalog only
            holds what had been accumulated at that point.
    """

    records: tuple[InstallRecord, ...] = ()
    counts_by_source: Mapping[str, int] = field(default_factory=dict)
    cancelled: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "counts_by_source", MappingProxyType(dict(self.counts_by_source)),
        )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
