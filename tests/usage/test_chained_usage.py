"""Tests for the usage extractor contract and extractor chaining."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from gamescout.discovery.models import EMPTY_USAGE, RawCandidate, Source, UsageStats
from gamescout.usage.base import ChainedUsage, UsageExtractor

WHEN = datetime(2024, 3, 1)


class FixedUsage(UsageExtractor):
    """Returns preset stats and counts calls."""

    def __init__(self, stats: UsageStats) -> None:
        self.stats = stats
        self.calls = 0

    def _extract(self, candidate: RawCandidate) -> UsageStats:
        self.calls += 1
        return self.stats


class BrokenUsage(UsageExtractor):
    def _extract(self, candidate: RawCandidate) -> UsageStats:
        raise RuntimeError("corrupt file")


def _candidate() -> RawCandidate:
    return RawCandidate("Game", Path("/games/game"), Source.UBISOFT)


class TestExtractContract:
    def test_exception_becomes_empty(self) -> None:
        assert BrokenUsage().extract(_candidate()) is EMPTY_USAGE


class TestChainedUsage:
    def test_fields_filled_from_first_hit(self) -> None:
        first = FixedUsage(UsageStats(last_active=WHEN))
        second = FixedUsage(UsageStats(hours=2.0, last_active=datetime(2020, 1, 1)))
        stats = ChainedUsage(first, second).extract(_candidate())
        assert stats == UsageStats(hours=2.0, last_active=WHEN)

    def test_stops_when_complete(self) -> None:
        first = FixedUsage(UsageStats(hours=1.0, last_active=WHEN))
        second = FixedUsage(UsageStats(hours=2.0))
        ChainedUsage(first, second).extract(_candidate())
        assert second.calls == 0

    def test_broken_extractor_skipped(self) -> None:
        stats = ChainedUsage(BrokenUsage(), FixedUsage(UsageStats(hours=3.0))).extract(_candidate())
        assert stats.hours == 3.0
        assert stats.last_active is None
