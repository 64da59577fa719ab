"""Error types raised by the launcher control core."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class LauncherError(Exception):
    """Base class for launcher control errors."""


class LaunchError(LauncherError):
    """The executable could not be spawned."""

    def __init__(self, executable: Union[str, Path], reason: object) -> None:
        self.executable = str(executable)
        self.reason = reason
        super().__init__(f"Failed to launch {self.executable}: {reason}")


class AlreadyRunningError(LauncherError):
    """A launch was requested while a child is active or a launch is pending."""

    def __init__(self, pid: Optional[int] = None) -> None:
        self.pid = pid
        if pid is None:
            message = "A launch is already in progress"
        else:
            message = f"A child process is already running (pid={pid})"
        super().__init__(message)


class KillError(LauncherError):
    """The termination request failed or the process is already gone."""


class EmptyCatalogError(LauncherError):
    """The catalog holds no entries; the launcher cannot start."""

    def __init__(self, message: str = "Catalog is empty; nothing to launch") -> None:
        super().__init__(message)
