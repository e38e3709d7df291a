"""Test doubles shared by the CLI tests."""

from __future__ import annotations

from gamescout.discovery.models import Catalog


class FakePopen:
    """Records launch requests instead of starting processes."""

    def __init__(self) -> None:
        self.args: list[list[str]] = []

    def __call__(self, args, **kwargs):
        self.args.append(args)
        return object()


class StubService:
    """Service stand-in returning a fixed catalog or failing with ``error``."""

    def __init__(self, catalog: Catalog | None = None, error: Exception | None = None) -> None:
        self._catalog = catalog or Catalog()
        self.error = error

    def catalog(self) -> Catalog:
        if self.error is not None:
            raise self.error
        return self._catalog

    def discover_games(self) -> dict:
        if self.error is not None:
            return {"error": f"Failed to discover games: {self.error}"}
        return {"total_games": len(self._catalog), "games_by_source": {}, "games": []}

    def find_games(self, name: str) -> list:
        if self.error is not None:
            raise self.error
        return list(self._catalog)

    def launch(self, name: str):
        if self.error is not None:
            raise self.error
        raise NotImplementedError("StubService only reports failures for launch")
