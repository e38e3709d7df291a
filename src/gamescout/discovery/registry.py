"""Read-only access to the Windows registry.

Source adapters look up vendor install roots in the registry before
falling back to conventional paths. They talk to a ``RegistryReader``
rather than to ``winreg`` directly so discovery runs (and is testable) on
hosts without a registry: ``default_registry()`` returns a
``WinRegistry`` on Windows and an always-empty ``NullRegistry`` elsewhere.

Key paths are written with their hive prefix, e.g.
``HKLM\\SOFTWARE\\WOW6432Node\\Valve\\Steam``. Every read is
failure-tolerant: a missing key, missing value or access error yields
``None`` / an empty list, never an exception.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)

# Uninstall locations for both registry views plus the per-user hive.
UNINSTALL_KEYS: tuple[str, ...] = (
    r"HKLM\SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall",
    r"HKLM\SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall",
    r"HKCU\SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall",
)

_INVALID_LOCATIONS = {"", "unknown", "n/a", "na", "none", "null"}


class RegistryReader(ABC):
    """Abstract read-only view of a hierarchical key/value store."""

    @abstractmethod
    def read_value(self, key_path: str, value_name: str) -> str | None:
        """Return a value as a string, or ``None`` if absent/unreadable."""

    @abstractmethod
    def subkeys(self, key_path: str) -> list[str]:
        """Return the names of the immediate subkeys of ``key_path``."""

    def first_value(self, key_paths: tuple[str, ...] | list[str], value_name: str) -> str | None:
        """Return ``value_name`` from the first key that has it."""
        for key_path in key_paths:
            value = self.read_value(key_path, value_name)
            if value:
                return value
        return None


class NullRegistry(RegistryReader):
    """Registry stand-in for hosts without one. Every lookup is empty."""

    def read_value(self, key_path: str, value_name: str) -> str | None:
        return None

    def subkeys(self, key_path: str) -> list[str]:
        return []


class WinRegistry(RegistryReader):
    """``winreg``-backed reader. Only constructed on Windows."""

    def __init__(self) -> None:
        import winreg

        self._winreg = winreg
        self._hives = {
            "HKLM": winreg.HKEY_LOCAL_MACHINE,
            "HKEY_LOCAL_MACHINE": winreg.HKEY_LOCAL_MACHINE,
            "HKCU": winreg.HKEY_CURRENT_USER,
            "HKEY_CURRENT_USER": winreg.HKEY_CURRENT_USER,
            "HKCR": winreg.HKEY_CLASSES_ROOT,
        }

    def _open(self, key_path: str):
        hive_name, _, sub_path = key_path.partition("\\")
        hive = self._hives.get(hive_name.upper())
        if hive is None:
            raise OSError(f"Unknown registry hive in {key_path!r}")
        return self._winreg.OpenKey(hive, sub_path, 0, self._winreg.KEY_READ)

    def read_value(self, key_path: str, value_name: str) -> str | None:
        try:
            with self._open(key_path) as key:
                value, _ = self._winreg.QueryValueEx(key, value_name)
        except OSError:
            return None
        if value is None:
            return None
        return str(value)

    def subkeys(self, key_path: str) -> list[str]:
        try:
            with self._open(key_path) as key:
                count = self._winreg.QueryInfoKey(key)[0]
                names: list[str] = []
                for idx in range(count):
                    try:
                        names.append(self._winreg.EnumKey(key, idx))
                    except OSError:
                        continue
                return names
        except OSError:
            return []


def default_registry() -> RegistryReader:
    """Return the registry reader appropriate for this host."""
    if sys.platform == "win32":
        return WinRegistry()
    return NullRegistry()


@dataclass(frozen=True)
class UninstallEntry:
    """One program entry from an Uninstall registry key.

    Attributes:
        key_name: Subkey name (often a GUID or package identifier).
        display_name: ``DisplayName`` value.
        publisher: ``Publisher`` value, empty when absent.
        install_location: ``InstallLocation`` value, cleaned of quotes.
    """

    key_name: str
    display_name: str
    publisher: str = ""
    install_location: str = ""


def clean_location(raw: str | None) -> str:
    """Strip quotes and whitespace; map placeholder values to ``""``."""
    text = (raw or "").strip().strip('"').strip()
    if text.lower() in _INVALID_LOCATIONS:
        return ""
    return text


def iter_uninstall_entries(
    registry: RegistryReader,
    key_paths: tuple[str, ...] = UNINSTALL_KEYS,
) -> Iterator[UninstallEntry]:
    """Yield every uninstall entry that has a display name.

    Entries that fail to read are logged and skipped.
    """
    for key_path in key_paths:
        for sub_name in registry.subkeys(key_path):
            full = f"{key_path}\\{sub_name}"
            try:
                display_name = (registry.read_value(full, "DisplayName") or "").strip()
                entry = UninstallEntry(
                    key_name=sub_name,
                    display_name=display_name,
                    publisher=(registry.read_value(full, "Publisher") or "").strip(),
                    install_location=clean_location(
                        registry.read_value(full, "InstallLocation")
                    ),
                )
            except Exception:
                logger.warning("Failed to read uninstall entry: %s", full, exc_info=True)
                continue
            if entry.display_name:
                yield entry
