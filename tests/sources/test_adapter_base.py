"""Tests for the shared ``SourceAdapter.scan`` pipeline.

A minimal adapter yields preset candidates so that deduplication,
filtering, executable resolution, enrichment and failure isolation can
be checked without any vendor layout.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gamescout.discovery.executables import ExecutableSelector
from gamescout.discovery.models import RawCandidate, Source, UsageStats
from gamescout.sources.base import SourceAdapter
from gamescout.usage.base import UsageExtractor

from tests.discovery.helpers import MB, make_context, make_game_dir, write_file


class ListAdapter(SourceAdapter):
    """Yields a fixed candidate list."""

    source = Source.GOG

    def __init__(self, items: list[RawCandidate], usage: UsageExtractor | None = None) -> None:
        super().__init__()
        self.items = items
        self.usage = usage

    def candidates(self, context):
        yield from self.items

    def usage_extractor(self, context):
        return self.usage


class NameKeyedAdapter(ListAdapter):
    """Treats candidates with the same name as one install."""

    def dedup_key(self, candidate: RawCandidate) -> str | None:
        return candidate.name.lower()


class HoursUsage(UsageExtractor):
    """Reports the executable it was given as two hours of play."""

    def __init__(self) -> None:
        self.seen: list[Path | None] = []

    def _extract(self, candidate: RawCandidate) -> UsageStats:
        self.seen.append(candidate.executable)
        return UsageStats(hours=2.0)


class ExplodingSelector(ExecutableSelector):
    def select(self, install_dir, name, source=None, cancel=None):
        if name == "Broken":
            raise RuntimeError("boom")
        return super().select(install_dir, name, source, cancel)


def _candidate(path: Path, name: str | None = None, **kwargs) -> RawCandidate:
    return RawCandidate(name or path.name, path, Source.GOG, **kwargs)


class TestScanPipeline:
    """Record production from raw candidates."""

    def test_enriches_record(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "games" / "Hollow Knight", "hollow_knight.exe", exe_mb=2)
        usage = HoursUsage()
        records = ListAdapter([_candidate(game)], usage).scan(make_context(tmp_path))
        assert len(records) == 1
        record = records[0]
        assert record.source is Source.GOG
        assert record.executable == game / "hollow_knight.exe"
        assert record.size_bytes == 2 * MB
        assert record.install_date is not None
        assert record.usage_hours == 2.0
        assert usage.seen == [game / "hollow_knight.exe"]

    def test_declared_executable_used(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "Game", "Other.exe")
        declared = write_file(game / "bin" / "Declared.exe")
        records = ListAdapter([_candidate(game, executable=declared)]).scan(make_context(tmp_path))
        assert records[0].executable == declared

    def test_missing_declared_executable_falls_back(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "Game", "Game.exe")
        candidate = _candidate(game, executable=game / "Gone.exe")
        records = ListAdapter([candidate]).scan(make_context(tmp_path))
        assert records[0].executable == game / "Game.exe"

    def test_duplicate_paths_collapsed(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "Game", "Game.exe")
        adapter = ListAdapter([_candidate(game, "First"), _candidate(game, "Second")])
        records = adapter.scan(make_context(tmp_path))
        assert [r.name for r in records] == ["First"]

    def test_launchers_dropped(self, tmp_path: Path) -> None:
        launcher = make_game_dir(tmp_path / "GalaxyClient", "GalaxyClient.exe")
        records = ListAdapter([_candidate(launcher, "GOG Galaxy")]).scan(make_context(tmp_path))
        assert records == []

    def test_record_without_executable_kept(self, tmp_path: Path) -> None:
        (tmp_path / "Empty").mkdir()
        records = ListAdapter([_candidate(tmp_path / "Empty")]).scan(make_context(tmp_path))
        assert len(records) == 1
        assert records[0].executable is None

    def test_required_executable(self, tmp_path: Path) -> None:
        (tmp_path / "Empty").mkdir()
        candidate = _candidate(tmp_path / "Empty", require_executable=True)
        assert ListAdapter([candidate]).scan(make_context(tmp_path)) == []

    def test_minimum_size(self, tmp_path: Path) -> None:
        small = make_game_dir(tmp_path / "Small", "Small.exe", exe_mb=1)
        large = make_game_dir(tmp_path / "Large", "Large.exe", exe_mb=3)
        adapter = ListAdapter([
            _candidate(small, min_size_bytes=2 * MB),
            _candidate(large, min_size_bytes=2 * MB),
        ])
        assert [r.name for r in adapter.scan(make_context(tmp_path))] == ["Large"]


class TestDedupKey:
    """Secondary identity declared by an adapter."""

    def test_same_name_collapsed(self, tmp_path: Path) -> None:
        first = make_game_dir(tmp_path / "a" / "Halo", "Halo.exe")
        second = make_game_dir(tmp_path / "b" / "Halo", "Halo.exe")
        adapter = NameKeyedAdapter([_candidate(first, "Halo"), _candidate(second, "HALO")])
        records = adapter.scan(make_context(tmp_path))
        assert [r.install_path for r in records] == [first]

    def test_rejected_candidate_leaves_key_free(self, tmp_path: Path) -> None:
        (tmp_path / "stub" / "Halo").mkdir(parents=True)
        real = make_game_dir(tmp_path / "real" / "Halo", "Halo.exe")
        adapter = NameKeyedAdapter([
            _candidate(tmp_path / "stub" / "Halo", require_executable=True),
            _candidate(real, require_executable=True),
        ])
        records = adapter.scan(make_context(tmp_path))
        assert [r.install_path for r in records] == [real]


class TestFailureIsolation:
    def test_failing_candidate_skipped(self, tmp_path: Path, caplog) -> None:
        broken = make_game_dir(tmp_path / "Broken", "Broken.exe")
        good = make_game_dir(tmp_path / "Good", "Good.exe")
        context = make_context(tmp_path, selector=ExplodingSelector())
        with caplog.at_level(logging.WARNING, logger="gamescout.sources.base"):
            records = ListAdapter([_candidate(broken), _candidate(good)]).scan(context)
        assert [r.name for r in records] == ["Good"]
        assert "Skipping GOG candidate" in caplog.text

    def test_cancelled_context_yields_nothing(self, tmp_path: Path) -> None:
        game = make_game_dir(tmp_path / "Game", "Game.exe")
        context = make_context(tmp_path)
        context.cancel.set()
        assert ListAdapter([_candidate(game)]).scan(context) == []


class TestAdapterName:
    def test_name_is_display_label(self) -> None:
        assert ListAdapter([]).name == "GOG"
