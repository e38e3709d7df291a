"""Command-line interface for GameScout."""
