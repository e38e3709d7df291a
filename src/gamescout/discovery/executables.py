"""Executable selection inside an install directory.

No single heuristic picks the main game binary reliably across vendors,
so ``ExecutableSelector`` applies ordered strategies, cheapest and most
specific first, and returns the first hit:

    1. Name tokens: an executable whose file name contains one of the
       candidate's whitespace-split name tokens (tokens of two characters
       or fewer are ignored).
    2. Naming rules: vendor- or franchise-specific prefixes from an
       injectable ``NamingRule`` table, consulted per source.
    3. Size: the largest executable, if it exceeds ``min_main_bytes``.
    4. Utility filter: the first executable whose name contains no
       generic utility word; failing that, the first executable.

Executables matching ``EXCLUDED_SUBSTRINGS`` (uninstallers, redistributable
installers, crash reporters, archivers) never take part in selection.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from gamescout.discovery.models import Source

logger = logging.getLogger(__name__)

EXECUTABLE_SUFFIXES: tuple[str, ...] = (".exe",)

EXCLUDED_PREFIXES: tuple[str, ...] = ("unins",)

EXCLUDED_SUBSTRINGS: tuple[str, ...] = (
    "redist", "vcredist", "crashreport", "unitycrashhandler", "bssndrpt",
    "7za",
)

UTILITY_WORDS: tuple[str, ...] = (
    "launcher", "updater", "patcher", "installer", "config", "setup",
    "guide", "tool",
)

DEFAULT_MIN_MAIN_BYTES = 50 * 1024 * 1024
DEFAULT_MAX_FILES = 5000
_MIN_TOKEN_LEN = 3


@dataclass(frozen=True)
class NamingRule:
    """A narrow naming convention for one franchise.

    When a candidate's name starts with ``title_prefix`` and its source is
    one of ``sources`` (or ``sources`` is empty, meaning any source), the
    first executable whose stem starts with ``executable_prefix`` wins.

    Attributes:
        title_prefix: Case-insensitive prefix of the candidate name.
        executable_prefix: Case-insensitive prefix of the executable stem.
        sources: Sources this rule applies to; empty applies to all.
    """

    title_prefix: str
    executable_prefix: str
    sources: frozenset[Source] = frozenset()

    def applies_to(self, name: str, source: Source | None) -> bool:
        if self.sources and source not in self.sources:
            return False
        return name.lower().startswith(self.title_prefix.lower())

    def pick(self, executables: Iterable[Path]) -> Path | None:
        prefix = self.executable_prefix.lower()
        for exe in executables:
            if exe.stem.lower().startswith(prefix):
                return exe
        return None


def default_naming_rules() -> list[NamingRule]:
    """Return the built-in naming rule table.

    Assassin's Creed titles ship their binary as ``AC<something>.exe``
    (``ACValhalla.exe``, ``ACMirage.exe``) on every storefront that
    distributes them.
    """
    from gamescout.discovery.models import Source

    return [
        NamingRule(
            title_prefix="Assassin's Creed",
            executable_prefix="AC",
            sources=frozenset({Source.UBISOFT, Source.STEAM, Source.EPIC}),
        ),
    ]


def is_excluded_executable(path: Path) -> bool:
    """True for uninstallers, redistributables and helper binaries."""
    name = path.name.lower()
    if name.startswith(EXCLUDED_PREFIXES):
        return True
    return any(sub in name for sub in EXCLUDED_SUBSTRINGS)


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


class ExecutableSelector:
    """Picks the most plausible launch target inside an install directory.

    Usage::

        selector = ExecutableSelector()
        exe = selector.select(Path("D:/Games/Game Core"), "Game Core")

    Attributes:
        rules: Naming rule table consulted as strategy 2.
        min_main_bytes: Size threshold for strategy 3.
        max_files: Upper bound on executables enumerated per directory.
    """

    def __init__(
        self,
        rules: list[NamingRule] | None = None,
        min_main_bytes: int = DEFAULT_MIN_MAIN_BYTES,
        max_files: int = DEFAULT_MAX_FILES,
    ) -> None:
        self.rules = default_naming_rules() if rules is None else list(rules)
        self.min_main_bytes = min_main_bytes
        self.max_files = max_files

    def find_executables(
        self, install_dir: Path, cancel: threading.Event | None = None,
    ) -> list[Path]:
        """Enumerate candidate executables below ``install_dir``.

        Walks the tree in sorted order so the result is deterministic,
        stops after ``max_files`` executables, and drops excluded names.
        Unreadable subdirectories are skipped.
        """
        found: list[Path] = []
        seen = 0
        for root, dirs, files in os.walk(install_dir):
            if cancel is not None and cancel.is_set():
                break
            dirs.sort()
            for name in sorted(files):
                if not name.lower().endswith(EXECUTABLE_SUFFIXES):
                    continue
                seen += 1
                if seen > self.max_files:
                    logger.debug("Executable limit reached under %s", install_dir)
                    return found
                path = Path(root) / name
                if not is_excluded_executable(path):
                    found.append(path)
        return found

    def select(
        self,
        install_dir: Path,
        name: str,
        source: Source | None = None,
        cancel: threading.Event | None = None,
    ) -> Path | None:
        """Select the main executable for the install named ``name``.

        Args:
            install_dir: Directory to search recursively.
            name: Candidate display name used for token matching.
            source: Source of the candidate; selects applicable rules.
            cancel: Optional cancellation event for the enumeration.

        Returns:
            Path to the chosen executable, or ``None`` if the directory
            holds no eligible executable.
        """
        try:
            executables = self.find_executables(install_dir, cancel)
        except OSError:
            logger.debug("Cannot enumerate executables in %s", install_dir, exc_info=True)
            return None
        return self.choose(executables, name, source)

    def choose(
        self, executables: list[Path], name: str, source: Source | None = None,
    ) -> Path | None:
        """Apply the ordered strategies to an already-enumerated list."""
        if not executables:
            return None

        tokens = [w.lower() for w in name.split() if len(w) >= _MIN_TOKEN_LEN]
        for exe in executables:
            stem = exe.stem.lower()
            if any(tok in stem for tok in tokens):
                return exe

        for rule in self.rules:
            if rule.applies_to(name, source):
                picked = rule.pick(executables)
                if picked is not None:
                    return picked

        largest = max(executables, key=_file_size)
        if _file_size(largest) > self.min_main_bytes:
            return largest

        for exe in executables:
            stem = exe.stem.lower()
            if not any(word in stem for word in UTILITY_WORDS):
                return exe
        return executables[0]
