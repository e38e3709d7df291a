"""Tests for ``gamescout discover``."""

from __future__ import annotations

import json
from pathlib import Path

from gamescout.cli.main import cli
from gamescout.discovery.models import Catalog, InstallRecord, Source

from tests.cli.stubs import StubService


class TestDiscoverJson:
    def test_inventory(self, runner, service) -> None:
        result = runner.invoke(cli, ["discover", "--format", "json"], obj={"service": service})
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_games"] == 3
        assert data["games_by_source"] == {"Steam": 1, "Epic Games": 1, "GOG": 1}
        assert data["games"][0]["name"] == "The Witcher 3"
        assert data["games"][0]["usage_hours"] == 120.5

    def test_failure(self, runner) -> None:
        stub = StubService(error=RuntimeError("boom"))
        result = runner.invoke(cli, ["discover", "--format", "json"], obj={"service": stub})
        assert result.exit_code == 1
        assert "Failed to discover games: boom" in result.output


class TestDiscoverText:
    def test_table(self, runner, service) -> None:
        result = runner.invoke(cli, ["discover"], obj={"service": service})
        assert result.exit_code == 0
        assert "Installed Games" in result.output
        assert "Hades" in result.output
        assert "3 games" in result.output

    def test_empty(self, runner) -> None:
        result = runner.invoke(cli, ["discover"], obj={"service": StubService()})
        assert result.exit_code == 0
        assert "No installed games found." in result.output

    def test_partial_warning(self, runner) -> None:
        catalog = Catalog(
            records=(InstallRecord("Hades", Source.EPIC, Path("/games/hades")),),
            counts_by_source={"Epic Games": 1},
            cancelled=True,
        )
        result = runner.invoke(cli, ["discover"], obj={"service": StubService(catalog)})
        assert result.exit_code == 0
        assert "results are partial" in result.output

    def test_failure(self, runner) -> None:
        stub = StubService(error=RuntimeError("boom"))
        result = runner.invoke(cli, ["discover"], obj={"service": stub})
        assert result.exit_code == 1
        assert "Failed to discover games: boom" in result.output
