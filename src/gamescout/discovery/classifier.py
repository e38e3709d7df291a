"""Heuristic classification of install candidates.

Decides whether a candidate found by a source adapter is a game worth
reporting, as opposed to a runtime, driver, storefront launcher, or a
piece of auxiliary content (DLC, skins, soundtracks) installed next to
the game it belongs to.

All checks are lower-cased keyword matches against fixed catalogs. The
catalogs live at module level so they can be tested and reviewed
independently of the matching logic.

Matching Rules:
    * Reject keywords win over everything else.
    * Accept keywords or a known-publisher match accept.
    * Otherwise the classifier's ``default_accept`` decides. Directory
      adapters trust their vendor root and default to accept; the generic
      installed-programs fallback defaults to reject.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Keyword catalogs
# ---------------------------------------------------------------------------

REJECT_KEYWORDS: tuple[str, ...] = (
    "runtime", "redistributable", "driver", "framework", "service",
    "tool", "utility", "update", "patch", "launcher",
)

ACCEPT_KEYWORDS: tuple[str, ...] = (
    "game", "play", "adventure", "action", "rpg", "strategy",
    "simulation", "racing", "sports", "puzzle",
)

KNOWN_PUBLISHERS: tuple[str, ...] = (
    "valve", "epic", "ubisoft", "ea", "activision", "blizzard", "steam",
    "xbox", "microsoft games", "bethesda", "rockstar",
)

# Publisher entries this short are matched as whole words only, so "ea"
# does not match "Research Labs".
_SHORT_PUBLISHER_LEN = 3

AUXILIARY_PATTERNS: tuple[str, ...] = (
    " skin", " dlc", " pack", " addon", " add-on", " expansion",
    " soundtrack", " theme", " wallpaper", "content pack", "season pass",
    " bundle", "demo", "trailer", "preview", "cosmetic", "weapon pack",
    "character pack",
)

AUXILIARY_SUFFIXES: tuple[str, ...] = (" skin", " dlc", " pack", " addon")

LAUNCHER_NAMES: tuple[str, ...] = (
    "ea desktop", "ea app", "ubisoft connect", "steam controller configs",
    "steamworks shared", "steamworks common redistributables", "battle.net",
    "epic games launcher", "gog galaxy", "origin",
    "nvidia geforce experience", "nvidia shadowplay",
    "rockstar games launcher", "xbox app",
)

# Brand words that are also ordinary English. They only count as a
# launcher when they appear as a whole token and every other token is
# launcher filler, so "Origin" and "Origin Client" are rejected while
# "Aboriginal Quest" and "X Origin Story" are kept.
AMBIGUOUS_LAUNCHER_WORDS: frozenset[str] = frozenset({"origin"})

_LAUNCHER_FILLER: frozenset[str] = frozenset({
    "launcher", "client", "app", "desktop", "games", "platform",
})

NON_GAME_DIRECTORY_KEYWORDS: tuple[str, ...] = (
    "launcher", "social", "redistributable", "redist", "thirdparty",
    "third party", "connect", "client", "setup", "installer", "uninstall",
    "crash", "error", "support", "log", "temp", "cache", "data", "config",
    "settings", "nvidia", "shadowplay", "battle.net", "battlenet",
    "gamesave", "save", "skin", "dlc", "addon", "pack", "content pack",
    "soundtrack", "wallpaper", "theme", "demo", "trailer", "preview",
    "desktop", "controller", "shared", "steamworks",
)

_TOKEN_SPLIT = re.compile(r"[\s\-_.]+")


def tokenize(name: str) -> list[str]:
    """Split a lower-cased name on space, hyphen, underscore and dot."""
    return [tok for tok in _TOKEN_SPLIT.split(name.lower()) if tok]


def _contains_run(tokens: list[str], run: list[str]) -> bool:
    width = len(run)
    return any(tokens[i:i + width] == run for i in range(len(tokens) - width + 1))


def _publisher_matches(publisher: str) -> bool:
    lowered = publisher.lower()
    words = set(tokenize(lowered))
    for known in KNOWN_PUBLISHERS:
        if len(known) <= _SHORT_PUBLISHER_LEN:
            if known in words:
                return True
        elif known in lowered:
            return True
    return False


class Classifier:
    """Accept/reject filter for install candidates.

    Usage::

        classifier = Classifier(default_accept=False)
        classifier.accept("Adobe Acrobat Runtime")          # False
        classifier.accept("Half-Life 2", publisher="Valve")  # True

    Attributes:
        default_accept: Verdict when no keyword or publisher decides.
    """

    def __init__(self, default_accept: bool = True) -> None:
        self.default_accept = default_accept

    def accept(self, name: str, publisher: str | None = None) -> bool:
        """Decide whether ``name`` looks like a game.

        Args:
            name: Candidate display name.
            publisher: Optional publisher string from install metadata.

        Returns:
            False if any reject keyword matches; True on an accept keyword
            or known publisher; ``default_accept`` otherwise.
        """
        lowered = name.lower()
        if any(keyword in lowered for keyword in REJECT_KEYWORDS):
            return False
        if any(keyword in lowered for keyword in ACCEPT_KEYWORDS):
            return True
        if publisher and _publisher_matches(publisher):
            return True
        return self.default_accept

    def is_game(self, name: str, publisher: str | None = None) -> bool:
        """Full verdict: accepted, and neither add-on nor launcher."""
        if self.is_auxiliary_content(name) or self.is_launcher_or_utility(name):
            return False
        return self.accept(name, publisher)

    @staticmethod
    def is_auxiliary_content(name: str) -> bool:
        """True for DLC, skins, soundtracks, demos and similar add-ons."""
        lowered = name.lower()
        if any(pattern in lowered for pattern in AUXILIARY_PATTERNS):
            return True
        return len(lowered.split()) > 2 and lowered.endswith(AUXILIARY_SUFFIXES)

    @staticmethod
    def is_launcher_or_utility(name: str) -> bool:
        """True for storefront launchers and their companion utilities.

        Multi-word launcher names match exactly or as a run of whole
        tokens, so "EA app Helper" matches while "Sea Apprentice" does not.
        Single ambiguous brand words match only as whole tokens accompanied
        by nothing but launcher filler words.
        """
        lowered = name.lower().strip()
        if lowered in LAUNCHER_NAMES:
            return True
        tokens = tokenize(lowered)
        for launcher in LAUNCHER_NAMES:
            if " " in launcher and _contains_run(tokens, tokenize(launcher)):
                return True
        for word in AMBIGUOUS_LAUNCHER_WORDS:
            if word in tokens and all(
                tok == word or tok in _LAUNCHER_FILLER for tok in tokens
            ):
                return True
        return False

    @staticmethod
    def is_non_game_directory(name: str) -> bool:
        """True for vendor-root subdirectories that hold no game.

        Used by adapters that enumerate every folder under a vendor root
        (Rockstar, Ubisoft, EA, Xbox alternative locations).
        """
        lowered = name.lower()
        return any(keyword in lowered for keyword in NON_GAME_DIRECTORY_KEYWORDS)
