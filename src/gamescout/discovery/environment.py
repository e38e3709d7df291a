"""Host environment consulted by source adapters.

Adapters never read ``os.environ`` or scan drive letters themselves.
They receive a ``HostEnvironment`` describing the well-known folders of
the machine being scanned, so tests can point every adapter at a
temporary directory tree and an in-memory registry.
"""

from __future__ import annotations

import os
import string
import sys
from dataclasses import dataclass, field
from pathlib import Path

from gamescout.discovery.registry import RegistryReader, default_registry


def _env_path(name: str, fallback: str | None = None) -> Path | None:
    value = os.environ.get(name) or fallback
    return Path(value) if value else None


def _fixed_drives() -> list[Path]:
    """Return existing drive roots on Windows, ``[]`` elsewhere."""
    if sys.platform != "win32":
        return []
    drives: list[Path] = []
    for letter in string.ascii_uppercase:
        root = Path(f"{letter}:\\")
        try:
            if root.exists():
                drives.append(root)
        except OSError:
            continue
    return drives


@dataclass
class HostEnvironment:
    """Well-known locations on the machine being scanned.

    Attributes:
        home: The user's home directory.
        program_files: ``%ProgramFiles%``.
        program_files_x86: ``%ProgramFiles(x86)%``.
        program_data: ``%ProgramData%`` (common application data).
        local_app_data: ``%LOCALAPPDATA%``.
        drives: Fixed drive roots searched for conventional game folders
            such as ``<drive>\\XboxGames``.
        registry: Registry reader for vendor install keys.
    """

    home: Path
    program_files: Path | None = None
    program_files_x86: Path | None = None
    program_data: Path | None = None
    local_app_data: Path | None = None
    drives: list[Path] = field(default_factory=list)
    registry: RegistryReader = field(default_factory=default_registry)

    @classmethod
    def detect(cls) -> HostEnvironment:
        """Build the environment for the current host."""
        return cls(
            home=Path.home(),
            program_files=_env_path("ProgramFiles"),
            program_files_x86=_env_path("ProgramFiles(x86)"),
            program_data=_env_path("ProgramData"),
            local_app_data=_env_path("LOCALAPPDATA"),
            drives=_fixed_drives(),
            registry=default_registry(),
        )

    def program_dirs(self) -> list[Path]:
        """Return the configured Program Files roots, 64-bit first."""
        return [p for p in (self.program_files, self.program_files_x86) if p is not None]

    def under_program_dirs(self, *parts: str) -> list[Path]:
        """Join ``parts`` under each Program Files root."""
        return [root.joinpath(*parts) for root in self.program_dirs()]

    def under_drives(self, *parts: str) -> list[Path]:
        """Join ``parts`` under each drive root."""
        return [drive.joinpath(*parts) for drive in self.drives]
