"""Fire-and-forget process launcher.

Launching is a thin collaborator so the aggregator and the service can be
tested without starting real processes: pass any callable with the
``subprocess.Popen`` signature as ``popen``.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Any, Callable

from gamescout.discovery.models import InstallRecord
from gamescout.exceptions import LaunchError

logger = logging.getLogger(__name__)


def _detach_options() -> dict[str, Any]:
    """Keyword arguments that detach the child from the caller."""
    if sys.platform == "win32":
        flags = getattr(subprocess, "DETACHED_PROCESS", 0) | getattr(
            subprocess, "CREATE_NEW_PROCESS_GROUP", 0
        )
        return {"creationflags": flags}
    return {"start_new_session": True}


class ProcessLauncher:
    """Starts a record's executable with its folder as working directory.

    Attributes:
        popen: Process factory, ``subprocess.Popen`` by default.
    """

    def __init__(self, popen: Callable[..., Any] | None = None) -> None:
        self.popen = popen or subprocess.Popen

    def launch(self, record: InstallRecord) -> None:
        """Start ``record.executable`` and return without waiting.

        Raises:
            LaunchError: If the record has no executable, the executable
                no longer exists, or the OS refuses to start it.
        """
        if not record.is_launchable:
            raise LaunchError(
                f"Game '{record.name}' executable not found or invalid: "
                f"{record.executable or ''}"
            )

        executable = record.executable
        try:
            self.popen(
                [str(executable)],
                cwd=str(executable.parent),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
                **_detach_options(),
            )
        except OSError as exc:
            raise LaunchError(f"Failed to launch game: {exc}") from exc
        logger.info("Launched %s (%s)", record.name, executable)
