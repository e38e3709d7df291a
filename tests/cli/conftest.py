"""Shared fixtures for CLI tests.

Commands receive a ready-made ``GameDiscoveryService`` through Click's
context object (``obj={"service": ...}``), built over static adapters so
no real storefront is scanned and no process is started.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from gamescout.discovery.aggregator import Aggregator
from gamescout.discovery.models import InstallRecord, Source
from gamescout.launcher import ProcessLauncher
from gamescout.service import GameDiscoveryService

from tests.cli.stubs import FakePopen
from tests.discovery.helpers import StaticAdapter, make_context, write_file


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def popen() -> FakePopen:
    return FakePopen()


@pytest.fixture
def service(tmp_path: Path, popen: FakePopen) -> GameDiscoveryService:
    """Three games: a launchable GOG title and two without executables."""
    exe = write_file(tmp_path / "Witcher3" / "bin" / "witcher3.exe")
    witcher = InstallRecord(
        name="The Witcher 3", source=Source.GOG, install_path=tmp_path / "Witcher3",
        executable=exe, install_date=datetime(2024, 1, 31, 9, 30),
        size_bytes=40 * 1024 * 1024 * 1024, last_active=datetime(2024, 3, 1, 20, 15, 5),
        usage_hours=120.5,
    )
    adapters = [
        StaticAdapter(Source.STEAM, [
            InstallRecord(name="Witcher 2", source=Source.STEAM, install_path=tmp_path / "Witcher2"),
        ]),
        StaticAdapter(Source.EPIC, [
            InstallRecord(name="Hades", source=Source.EPIC, install_path=tmp_path / "Hades"),
        ]),
        StaticAdapter(Source.GOG, [witcher]),
    ]
    aggregator = Aggregator(
        adapters, context=make_context(tmp_path), launcher=ProcessLauncher(popen=popen),
    )
    return GameDiscoveryService(aggregator)
