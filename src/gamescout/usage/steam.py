"""Steam usage statistics from the client's per-user config store.

Steam is the richest source: it records per-app playtime and last-played
time for every account that has logged in on the machine.

Lookup Algorithm:
    1. Read ``config/loginusers.vdf`` and pick the account flagged
       ``MostRecent "1"``. Its 64-bit SteamID is converted to the 32-bit
       account id used for the ``userdata/<id>`` directory name.
    2. In ``userdata/<id>/config/localconfig.vdf`` find the section keyed
       by the app id and read ``Playtime`` (minutes) and ``LastPlayed``
       (Unix seconds).
    3. If no playtime was found, fall back to
       ``userdata/<id>/7/remote/sharedconfig.vdf`` (``Playtime``, then the
       two-week ``Playtime2wks`` counter).
    4. If the most recent user yields nothing, try every user directory.

All files are parsed with the ``vdf`` library; sections are matched
case-insensitively because Steam has shipped both ``apps`` and ``Apps``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import vdf

from gamescout.discovery.filesystem import list_subdirectories
from gamescout.discovery.models import EMPTY_USAGE, RawCandidate, UsageStats
from gamescout.usage.base import UsageExtractor

logger = logging.getLogger(__name__)

# Offset between a 64-bit SteamID and the 32-bit account id.
STEAMID64_BASE = 76561197960265728

# localconfig.vdf grows with library size; refuse anything absurd.
MAX_CONFIG_BYTES = 64 * 1024 * 1024


def load_vdf(path: Path, max_bytes: int = MAX_CONFIG_BYTES) -> dict[str, Any] | None:
    """Parse a text VDF file, returning ``None`` if missing or malformed."""
    try:
        if not path.is_file() or path.stat().st_size > max_bytes:
            return None
        text = path.read_text(encoding="utf-8", errors="ignore")
        return vdf.loads(text)
    except (OSError, SyntaxError, ValueError):
        logger.debug("Unreadable VDF file: %s", path, exc_info=True)
        return None


def get_ci(mapping: Mapping[str, Any], key: str) -> Any:
    """Case-insensitive ``dict.get``."""
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for existing, value in mapping.items():
        if existing.lower() == lowered:
            return value
    return None


def find_section(tree: Mapping[str, Any], key: str, must_have: tuple[str, ...] = ()) -> Mapping[str, Any] | None:
    """Depth-first search for a nested section named ``key``.

    When ``must_have`` is given, only sections holding at least one of
    those fields qualify; app ids also appear as keys of unrelated
    sections (cloud sync, launch options).
    """
    stack: list[Mapping[str, Any]] = [tree]
    while stack:
        node = stack.pop()
        for name, value in node.items():
            if not isinstance(value, Mapping):
                continue
            if name == key and (
                not must_have or any(get_ci(value, f) is not None for f in must_have)
            ):
                return value
            stack.append(value)
    return None


def _positive_int(raw: Any) -> int | None:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def most_recent_user(steam_root: Path) -> str | None:
    """Return the userdata directory name of the most recent login."""
    data = load_vdf(steam_root / "config" / "loginusers.vdf")
    if not data:
        return None
    users = get_ci(data, "users")
    if not isinstance(users, Mapping):
        return None
    for steam_id, info in users.items():
        if isinstance(info, Mapping) and str(get_ci(info, "MostRecent")) == "1":
            return account_id(steam_id)
    return None


def account_id(steam_id: str) -> str:
    """Convert a 64-bit SteamID to the 32-bit account id, if it is one."""
    try:
        value = int(steam_id)
    except ValueError:
        return steam_id
    if value > STEAMID64_BASE:
        return str(value - STEAMID64_BASE)
    return steam_id


class SteamUsage(UsageExtractor):
    """Playtime and last-played from Steam's ``userdata`` tree.

    Attributes:
        steam_root: The Steam client installation directory.
    """

    def __init__(self, steam_root: Path) -> None:
        self.steam_root = steam_root

    def _extract(self, candidate: RawCandidate) -> UsageStats:
        app_id = candidate.app_id
        if not app_id:
            return EMPTY_USAGE
        userdata = self.steam_root / "userdata"
        user_dirs = list_subdirectories(userdata)
        if not user_dirs:
            return EMPTY_USAGE

        current = most_recent_user(self.steam_root)
        if current is not None:
            preferred = userdata / current
            user_dirs = [preferred] + [d for d in user_dirs if d.name != current]

        for user_dir in user_dirs:
            stats = self.from_user_dir(user_dir, app_id)
            if not stats.is_empty:
                return stats
        return EMPTY_USAGE

    def from_user_dir(self, user_dir: Path, app_id: str) -> UsageStats:
        """Read one account's usage for ``app_id``."""
        hours: float | None = None
        last_active: datetime | None = None

        local = load_vdf(user_dir / "config" / "localconfig.vdf")
        if local:
            section = find_section(local, app_id, ("Playtime", "LastPlayed"))
            if section is not None:
                minutes = _positive_int(get_ci(section, "Playtime"))
                if minutes is not None:
                    hours = minutes / 60.0
                stamp = _positive_int(get_ci(section, "LastPlayed"))
                if stamp is not None:
                    last_active = datetime.fromtimestamp(stamp)

        if hours is None:
            shared = load_vdf(user_dir / "7" / "remote" / "sharedconfig.vdf")
            if shared:
                section = find_section(shared, app_id, ("Playtime", "Playtime2wks"))
                if section is not None:
                    minutes = _positive_int(get_ci(section, "Playtime"))
                    if minutes is None:
                        minutes = _positive_int(get_ci(section, "Playtime2wks"))
                    if minutes is not None:
                        hours = minutes / 60.0

        return UsageStats(hours=hours, last_active=last_active)
