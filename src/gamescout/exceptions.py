"""GameScout exception hierarchy.

All public exceptions inherit from GameScoutError, giving callers a single
base class to catch when they want to handle any GameScout-specific failure
without swallowing unrelated errors.

Failures inside a single source adapter or a single install candidate are
never raised through this hierarchy; they are logged and skipped. These
exceptions only cross the boundary between the core and its callers.
"""


class GameScoutError(Exception):
    """Base exception for all GameScout errors."""


class ConfigError(GameScoutError):
    """Raised when a configuration file cannot be loaded or validated.

    Covers unreadable files, malformed YAML, unknown source keys and
    values of the wrong type.
    """


class NoMatchError(GameScoutError):
    """Raised when a name query matches no discovered install.

    Distinguishes "the scan ran and found nothing by that name" from a
    successful empty result.
    """


class LaunchError(GameScoutError):
    """Raised when a launch request cannot be honoured.

    Covers records without an executable, executables that no longer
    exist on disk, and failures reported by the operating system while
    starting the process.
    """
