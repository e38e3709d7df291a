"""Shared fixtures for gamescout tests."""

import pytest

from gamescout.config import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's own configuration out of every test."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
