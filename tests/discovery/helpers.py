"""Shared test helpers for building fake storefront layouts.

Each helper creates a minimal but realistic directory structure (and,
where the storefront uses one, registry entries in a ``FakeRegistry``)
that simulates a vendor's install bookkeeping. Large files are created
sparse, so a "120 MB" executable costs no disk space.
"""

from __future__ import annotations

import json
import time
from pathlib import Path

from gamescout.discovery.environment import HostEnvironment
from gamescout.discovery.models import InstallRecord, RawCandidate, Source
from gamescout.discovery.registry import RegistryReader
from gamescout.sources.base import ScanContext, SourceAdapter

MB = 1024 * 1024


class FakeRegistry(RegistryReader):
    """In-memory registry: ``{key_path: {value_name: value}}``.

    Subkeys are derived from the key paths, so registering
    ``HKLM\\A\\B`` makes ``B`` a subkey of ``HKLM\\A``.
    """

    def __init__(self, values: dict[str, dict[str, str]] | None = None) -> None:
        self.values: dict[str, dict[str, str]] = {
            key: dict(entry) for key, entry in (values or {}).items()
        }

    def set(self, key_path: str, **values: str) -> None:
        self.values.setdefault(key_path, {}).update(values)

    def read_value(self, key_path: str, value_name: str) -> str | None:
        return self.values.get(key_path, {}).get(value_name)

    def subkeys(self, key_path: str) -> list[str]:
        prefix = key_path + "\\"
        names: list[str] = []
        for key in self.values:
            if key.startswith(prefix):
                child = key[len(prefix):].split("\\")[0]
                if child not in names:
                    names.append(child)
        return names


def make_env(root: Path, registry: RegistryReader | None = None) -> HostEnvironment:
    """Build a host environment rooted entirely under ``root``."""
    return HostEnvironment(
        home=root / "home",
        program_files=root / "ProgramFiles",
        program_files_x86=root / "ProgramFilesX86",
        program_data=root / "ProgramData",
        local_app_data=root / "LocalAppData",
        drives=[root / "D"],
        registry=registry if registry is not None else FakeRegistry(),
    )


def make_context(root: Path, registry: RegistryReader | None = None, **kwargs) -> ScanContext:
    """Build a scan context over ``make_env(root, registry)``."""
    return ScanContext(env=make_env(root, registry), **kwargs)


def write_file(path: Path, size: int = 0, text: str | None = None) -> Path:
    """Create ``path`` (and parents); sparse when ``size`` is given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if text is not None:
        path.write_text(text, encoding="utf-8")
    else:
        with open(path, "wb") as handle:
            handle.truncate(size)
    return path


def make_game_dir(path: Path, exe_name: str, exe_mb: int = 1) -> Path:
    """Create an install folder holding a single executable."""
    write_file(path / exe_name, size=exe_mb * MB)
    return path


# ---------------------------------------------------------------------------
# Steam
# ---------------------------------------------------------------------------

STEAM_ACCOUNT_ID = "12345678"
STEAM_ID64 = str(76561197960265728 + int(STEAM_ACCOUNT_ID))


def create_steam_library(
    steam_root: Path,
    games: dict[str, tuple[str, str]],
    exe_mb: int = 1,
) -> Path:
    """Create ``steamapps`` with one manifest and folder per game.

    Args:
        steam_root: Steam (or library) root directory.
        games: ``{install_dir: (app_id, display_name)}``.
        exe_mb: Size of each game's executable.
    """
    steamapps = steam_root / "steamapps"
    (steamapps / "common").mkdir(parents=True, exist_ok=True)
    for install_dir, (app_id, name) in games.items():
        (steamapps / f"appmanifest_{app_id}.acf").write_text(
            '"AppState"\n{\n'
            f'\t"appid"\t\t"{app_id}"\n'
            f'\t"name"\t\t"{name}"\n'
            f'\t"installdir"\t\t"{install_dir}"\n'
            "}\n",
            encoding="utf-8",
        )
        exe = install_dir.replace(" ", "") + ".exe"
        make_game_dir(steamapps / "common" / install_dir, exe, exe_mb)
    return steamapps


def write_library_folders(steam_root: Path, libraries: list[Path], legacy: bool = False) -> None:
    """Write ``libraryfolders.vdf`` in the current or legacy layout."""
    lines = ['"libraryfolders"' if not legacy else '"LibraryFolders"', "{"]
    if not legacy:
        lines += ['\t"0"', "\t{", f'\t\t"path"\t\t"{_vdf_escape(steam_root)}"', "\t}"]
    for index, library in enumerate(libraries, start=1):
        if legacy:
            lines.append(f'\t"{index}"\t\t"{_vdf_escape(library)}"')
        else:
            lines += [f'\t"{index}"', "\t{", f'\t\t"path"\t\t"{_vdf_escape(library)}"', "\t}"]
    lines.append("}")
    path = steam_root / "steamapps" / "libraryfolders.vdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _vdf_escape(path: Path) -> str:
    return str(path).replace("\\", "\\\\")


def write_steam_usage(
    steam_root: Path,
    app_id: str,
    playtime_minutes: int | None = None,
    last_played: int | None = None,
    shared_minutes: int | None = None,
    most_recent: bool = True,
) -> Path:
    """Write loginusers.vdf plus localconfig/sharedconfig for one app."""
    config = steam_root / "config"
    config.mkdir(parents=True, exist_ok=True)
    (config / "loginusers.vdf").write_text(
        '"users"\n{\n'
        f'\t"{STEAM_ID64}"\n\t{{\n'
        '\t\t"AccountName"\t\t"player"\n'
        f'\t\t"MostRecent"\t\t"{1 if most_recent else 0}"\n'
        "\t}\n}\n",
        encoding="utf-8",
    )
    user_dir = steam_root / "userdata" / STEAM_ACCOUNT_ID
    fields = []
    if playtime_minutes is not None:
        fields.append(f'\t\t\t\t\t\t"Playtime"\t\t"{playtime_minutes}"')
    if last_played is not None:
        fields.append(f'\t\t\t\t\t\t"LastPlayed"\t\t"{last_played}"')
    local = (
        '"UserLocalConfigStore"\n{\n\t"Software"\n\t{\n\t\t"Valve"\n\t\t{\n'
        '\t\t\t"Steam"\n\t\t\t{\n\t\t\t\t"apps"\n\t\t\t\t{\n'
        f'\t\t\t\t\t"{app_id}"\n\t\t\t\t\t{{\n'
        + "\n".join(fields)
        + "\n\t\t\t\t\t}\n\t\t\t\t}\n\t\t\t}\n\t\t}\n\t}\n}\n"
    )
    write_file(user_dir / "config" / "localconfig.vdf", text=local)
    if shared_minutes is not None:
        shared = (
            '"UserRoamingConfigStore"\n{\n\t"Software"\n\t{\n\t\t"Valve"\n\t\t{\n'
            '\t\t\t"Steam"\n\t\t\t{\n\t\t\t\t"Apps"\n\t\t\t\t{\n'
            f'\t\t\t\t\t"{app_id}"\n\t\t\t\t\t{{\n'
            f'\t\t\t\t\t\t"Playtime2wks"\t\t"{shared_minutes}"\n'
            "\t\t\t\t\t}\n\t\t\t\t}\n\t\t\t}\n\t\t}\n\t}\n}\n"
        )
        write_file(user_dir / "7" / "remote" / "sharedconfig.vdf", text=shared)
    return user_dir


# ---------------------------------------------------------------------------
# Epic / GOG
# ---------------------------------------------------------------------------


def create_epic_manifest(
    program_data: Path,
    name: str,
    install_path: Path,
    launch_executable: str | None = None,
    file_stem: str | None = None,
) -> Path:
    """Write one Epic ``*.item`` manifest."""
    manifests = program_data / "Epic" / "EpicGamesLauncher" / "Data" / "Manifests"
    manifests.mkdir(parents=True, exist_ok=True)
    data = {"DisplayName": name, "InstallLocation": str(install_path), "AppName": name.lower()}
    if launch_executable is not None:
        data["LaunchExecutable"] = launch_executable
    path = manifests / f"{file_stem or name.replace(' ', '')}.item"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def create_gog_info(game_dir: Path, game_id: str, name: str) -> Path:
    """Write a ``goggame-<id>.info`` title file."""
    return write_file(
        game_dir / f"goggame-{game_id}.info",
        text=json.dumps({"gameId": game_id, "name": name}),
    )


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


class StaticAdapter(SourceAdapter):
    """Adapter returning preset records, optionally after a delay."""

    def __init__(self, source: Source, records: list[InstallRecord], delay: float = 0.0) -> None:
        self.source = source
        super().__init__()
        self.records = records
        self.delay = delay

    def candidates(self, context: ScanContext) -> list[RawCandidate]:
        return []

    def scan(self, context: ScanContext) -> list[InstallRecord]:
        if self.delay:
            time.sleep(self.delay)
        return list(self.records)
