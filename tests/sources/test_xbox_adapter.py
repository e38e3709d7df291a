"""Tests for Xbox app / Microsoft Store discovery.

Covers the three lookup methods (registry, WindowsApps manifests,
user-selectable roots) and the name-based merge between them.
"""

from __future__ import annotations

from pathlib import Path

from gamescout.discovery.models import Source
from gamescout.sources.xbox import APPX_KEYS, XboxAdapter, manifest_display_name

from tests.discovery.helpers import FakeRegistry, make_context, make_game_dir, write_file

APPX = APPX_KEYS[0]


def _appx_entry(registry: FakeRegistry, key: str, name: str, publisher: str, path: Path) -> None:
    registry.set(
        f"{APPX}\\{key}", DisplayName=name, Publisher=publisher, InstallLocation=str(path),
    )


def _package(root: Path, folder: str, manifest: str, exe_mb: int = 60) -> Path:
    package = make_game_dir(root / "ProgramFiles" / "WindowsApps" / folder, "Game.exe", exe_mb)
    write_file(package / "AppxManifest.xml", text=manifest)
    return package


class TestManifestDisplayName:
    def test_element(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "AppxManifest.xml", text="<DisplayName>Space Racing</DisplayName>")
        assert manifest_display_name(path) == "Space Racing"

    def test_resource_reference_skipped(self, tmp_path: Path) -> None:
        path = write_file(
            tmp_path / "AppxManifest.xml",
            text='<VisualElements DisplayName="ms-resource:AppName"/>'
                 "<DisplayName>Space Racing</DisplayName>",
        )
        assert manifest_display_name(path) == "Space Racing"

    def test_only_resource_reference(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "AppxManifest.xml", text='<X DisplayName="ms-resource:Title"/>')
        assert manifest_display_name(path) is None

    def test_missing(self, tmp_path: Path) -> None:
        assert manifest_display_name(tmp_path / "AppxManifest.xml") is None


class TestXboxRegistry:
    def test_microsoft_published_game(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "Store" / "AsteroidRacing", "AsteroidRacing.exe")
        registry = FakeRegistry()
        _appx_entry(registry, "Microsoft.AsteroidRacing_1.0", "Asteroid Racing", "Microsoft Studios", game)
        records = XboxAdapter().scan(make_context(tmp_path, registry))
        assert [r.name for r in records] == ["Asteroid Racing"]
        assert records[0].source is Source.XBOX

    def test_other_publisher_skipped(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "Store" / "Portal", "Portal.exe")
        registry = FakeRegistry()
        _appx_entry(registry, "Portal", "Portal Adventure", "Valve", game)
        assert XboxAdapter().scan(make_context(tmp_path, registry)) == []

    def test_strict_classifier(self, tmp_path: Path) -> None:
        """Store entries need a game keyword; services are rejected."""
        game = make_game_dir(tmp_path / "Store" / "Identity", "Identity.exe")
        other = make_game_dir(tmp_path / "Store" / "Calc", "Calc.exe")
        registry = FakeRegistry()
        _appx_entry(registry, "Microsoft.XboxIdentityProvider", "Xbox Identity Provider Service", "Microsoft", game)
        _appx_entry(registry, "Microsoft.WindowsCalculator", "Windows Calculator", "Microsoft", other)
        assert XboxAdapter().scan(make_context(tmp_path, registry)) == []


class TestWindowsApps:
    def test_game_package(self, tmp_path: Path) -> None:
        _package(tmp_path, "Contoso.SpaceRacing_1.0_x64__abc", "<DisplayName>Space Racing</DisplayName>")
        records = XboxAdapter().scan(make_context(tmp_path))
        assert [r.name for r in records] == ["Space Racing"]

    def test_small_package_dropped(self, tmp_path: Path) -> None:
        _package(
            tmp_path, "Contoso.SpaceRacing_1.0_x64__abc",
            "<DisplayName>Space Racing</DisplayName>", exe_mb=1,
        )
        assert XboxAdapter().scan(make_context(tmp_path)) == []

    def test_framework_package_dropped(self, tmp_path: Path) -> None:
        _package(
            tmp_path, "Microsoft.VCLibs.140.00_x64__8wekyb3d8bbwe",
            "<DisplayName>Microsoft Visual C++ Game Runtime</DisplayName>",
        )
        assert XboxAdapter().scan(make_context(tmp_path)) == []

    def test_add_on_package_dropped(self, tmp_path: Path) -> None:
        _package(tmp_path, "Contoso.RacingDLC_1.0", "<DisplayName>Space Racing Season Pass</DisplayName>")
        assert XboxAdapter().scan(make_context(tmp_path)) == []


class TestAlternativeRoots:
    def test_xbox_games_folder(self, tmp_path: Path) -> None:
        make_game_dir(tmp_path / "D" / "XboxGames" / "Starfield" / "Content", "Starfield.exe", 60)
        make_game_dir(tmp_path / "D" / "XboxGames" / "GameSave", "GameSave.exe", 60)
        records = XboxAdapter().scan(make_context(tmp_path))
        assert [r.name for r in records] == ["Starfield"]
        assert records[0].executable.name == "Starfield.exe"

    def test_modifiable_windows_apps(self, tmp_path: Path) -> None:
        make_game_dir(
            tmp_path / "ProgramFiles" / "ModifiableWindowsApps" / "Forza Horizon 5",
            "ForzaHorizon5.exe", 60,
        )
        records = XboxAdapter().scan(make_context(tmp_path))
        assert [r.name for r in records] == ["Forza Horizon 5"]

    def test_folder_without_executable_dropped(self, tmp_path: Path) -> None:
        write_file(tmp_path / "D" / "XboxGames" / "Halo" / "data.pak", size=60 * 1024 * 1024)
        assert XboxAdapter().scan(make_context(tmp_path)) == []

    def test_registry_name_wins(self, tmp_path: Path) -> None:
        """A title found by the registry is not repeated from XboxGames."""
        game = make_game_dir(tmp_path / "Store" / "AsteroidRacing", "AsteroidRacing.exe")
        registry = FakeRegistry()
        _appx_entry(registry, "Microsoft.AsteroidRacing_1.0", "Asteroid Racing", "Microsoft Studios", game)
        make_game_dir(tmp_path / "D" / "XboxGames" / "Asteroid Racing", "Racing.exe", 60)
        records = XboxAdapter().scan(make_context(tmp_path, registry))
        assert len(records) == 1
        assert records[0].install_path == game

    def test_undersized_package_does_not_claim_name(self, tmp_path: Path) -> None:
        """A stub package dropped for size leaves its name to the real install."""
        _package(
            tmp_path, "Contoso.AsteroidRacing_1.0_x64__abc",
            "<DisplayName>Asteroid Racing</DisplayName>", exe_mb=1,
        )
        real = make_game_dir(tmp_path / "D" / "XboxGames" / "Asteroid Racing", "AsteroidRacing.exe", 60)
        records = XboxAdapter().scan(make_context(tmp_path))
        assert [r.name for r in records] == ["Asteroid Racing"]
        assert records[0].install_path == real
