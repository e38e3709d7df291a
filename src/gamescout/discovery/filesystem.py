"""Filesystem helpers shared by every source adapter.

Provides the canonical path form used as the dedup key, install-date
lookup from directory metadata, and the recursive directory-size
estimator. None of these raise on filesystem errors: failures degrade to
``None`` or ``0`` so a single unreadable install never aborts a scan.
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

_SEPARATORS = "/\\"


def canonical_path(path: str | os.PathLike[str]) -> str:
    """Return the dedup key for an install path.

    The key is absolute, symlink-resolved, stripped of trailing
    separators and case-folded, so ``C:\\Games\\Foo\\`` and ``c:/games/foo``
    compare equal on Windows.
    """
    raw = os.fspath(path).strip().strip('"')
    resolved = os.path.realpath(os.path.abspath(raw))
    stripped = resolved.rstrip(_SEPARATORS)
    # Keep filesystem and drive roots such as "/" and "C:\" intact.
    if stripped and not stripped.endswith(":"):
        resolved = stripped
    return os.path.normcase(resolved).casefold()


def creation_time(path: Path) -> datetime | None:
    """Return the directory's creation time, or ``None`` if unavailable.

    Uses ``st_birthtime`` where the platform records it; on Windows
    ``st_ctime`` is the creation time. Many filesystems do not preserve
    true install time, so the value is advisory.
    """
    try:
        stat = path.stat()
    except OSError:
        return None
    timestamp = getattr(stat, "st_birthtime", None)
    if timestamp is None:
        timestamp = stat.st_ctime
    try:
        return datetime.fromtimestamp(timestamp)
    except (OverflowError, OSError, ValueError):
        return None


def directory_size(path: Path, cancel: threading.Event | None = None) -> int:
    """Sum the sizes of all files below ``path``.

    Args:
        path: Install directory to measure.
        cancel: Optional event; when set, enumeration stops and the sum
            accumulated so far is returned.

    Returns:
        Total size in bytes, or ``0`` if any part of the tree could not
        be enumerated.
    """

    def _raise(exc: OSError) -> None:
        raise exc

    total = 0
    try:
        if not path.is_dir():
            return 0
        for root, _dirs, files in os.walk(path, onerror=_raise):
            if cancel is not None and cancel.is_set():
                break
            for name in files:
                full = os.path.join(root, name)
                if os.path.islink(full):
                    continue
                total += os.path.getsize(full)
    except OSError:
        logger.debug("Size enumeration failed for %s", path, exc_info=True)
        return 0
    return total


def is_dir(path: Path | None) -> bool:
    """``Path.is_dir`` that treats permission errors as "not a directory"."""
    if path is None:
        return False
    try:
        return path.is_dir()
    except OSError:
        return False


def list_subdirectories(path: Path) -> list[Path]:
    """Return the immediate subdirectories of ``path``, sorted by name.

    Returns an empty list when ``path`` is missing or unreadable.
    """
    try:
        entries = sorted(path.iterdir())
    except OSError:
        return []
    return [entry for entry in entries if is_dir(entry)]


def existing_directories(candidates: list[Path]) -> list[Path]:
    """Filter ``candidates`` to existing directories, dropping duplicates.

    Order is preserved; duplicates are detected by canonical path.
    """
    seen: set[str] = set()
    found: list[Path] = []
    for candidate in candidates:
        if not is_dir(candidate):
            continue
        key = canonical_path(candidate)
        if key in seen:
            continue
        seen.add(key)
        found.append(candidate)
    return found
