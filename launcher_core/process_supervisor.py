"""Supervisor responsible for launching and reaping the single child program."""
from __future__ import annotations

import logging
import shlex
import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from launcher_core.controller_mode import AppMode
from launcher_core.errors import AlreadyRunningError, KillError, LaunchError

PopenFactory = Callable[..., "subprocess.Popen[bytes]"]

_LOGGER = logging.getLogger("ArcadeLauncher.Core")


class ChildHandle:
    """Reference to a launched child process."""

    def __init__(self, process: "subprocess.Popen[bytes]", executable: Path, command: Sequence[str]) -> None:
        self.process = process
        self.executable = executable
        self.command: List[str] = list(command)
        self.started_at = time.monotonic()
        self.returncode: Optional[int] = None
        self._exited = threading.Event()

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def exited(self) -> bool:
        return self._exited.is_set()

    def wait_exited(self, timeout: Optional[float] = None) -> bool:
        return self._exited.wait(timeout)

    def _mark_exited(self, returncode: Optional[int]) -> None:
        self.returncode = returncode
        self._exited.set()

    def __repr__(self) -> str:
        return f"ChildHandle(pid={self.pid}, executable={str(self.executable)!r})"


class ProcessSupervisor:
    """Launches one child at a time and clears it once it has exited.

    The handle is written by the thread that spawns the child and cleared by
    the wait thread, so every read and write goes through ``_lock``.
    """

    def __init__(
        self,
        popen_factory: Optional[PopenFactory] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._popen = popen_factory or subprocess.Popen
        self._logger = logger or _LOGGER
        self._lock = threading.Lock()
        self._handle: Optional[ChildHandle] = None
        self._pending = False
        self._idle = threading.Event()
        self._idle.set()
        self._wait_thread: Optional[threading.Thread] = None
        self._spawn_thread: Optional[threading.Thread] = None

    # State ----------------------------------------------------------------

    @property
    def handle(self) -> Optional[ChildHandle]:
        with self._lock:
            return self._handle

    @property
    def running(self) -> bool:
        with self._lock:
            return self._handle is not None

    @property
    def launch_pending(self) -> bool:
        with self._lock:
            return self._pending

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._pending or self._handle is not None

    @property
    def mode(self) -> AppMode:
        return AppMode.RUNNING if self.running else AppMode.BROWSING

    # Launching ------------------------------------------------------------

    def launch(self, executable_path: Union[str, Path]) -> ChildHandle:
        """Spawn ``executable_path`` and start waiting on it in the background."""
        self._reserve()
        return self._spawn(Path(executable_path))

    def launch_in_background(self, executable_path: Union[str, Path]) -> None:
        """Reserve the launch slot and spawn on a helper thread.

        Raises :class:`AlreadyRunningError` right away when busy. Spawn
        failures are logged and release the slot.
        """
        self._reserve()
        executable = Path(executable_path)
        thread = threading.Thread(
            target=self._spawn_in_background,
            args=(executable,),
            name="ArcadeLauncher-Spawn",
            daemon=True,
        )
        self._spawn_thread = thread
        try:
            thread.start()
        except RuntimeError as exc:
            self._release()
            raise LaunchError(executable, exc) from exc

    def _reserve(self) -> None:
        with self._lock:
            if self._handle is not None:
                raise AlreadyRunningError(self._handle.pid)
            if self._pending:
                raise AlreadyRunningError()
            self._pending = True
            self._idle.clear()

    def _release(self) -> None:
        with self._lock:
            self._pending = False
            if self._handle is None:
                self._idle.set()

    def _spawn_in_background(self, executable: Path) -> None:
        try:
            self._spawn(executable)
        except LaunchError as exc:
            self._logger.error("%s", exc)

    def _spawn(self, executable: Path) -> ChildHandle:
        command = [str(executable)]
        self._logger.info("Launching %s", _format_command(command))
        try:
            process = self._popen(command, cwd=str(executable.parent))
        except Exception as exc:
            self._release()
            raise LaunchError(executable, exc) from exc

        handle = ChildHandle(process, executable, command)
        with self._lock:
            self._handle = handle
            self._pending = False
        self._logger.debug("Child process started (pid=%s, cwd=%s)", handle.pid, executable.parent)

        thread = threading.Thread(
            target=self._wait_for_exit,
            args=(handle,),
            name="ArcadeLauncher-ChildWait",
            daemon=True,
        )
        self._wait_thread = thread
        try:
            thread.start()
        except RuntimeError as exc:
            # Without a wait thread nothing would ever clear the handle.
            try:
                process.kill()
            except OSError:
                pass
            self._clear(handle, None)
            raise LaunchError(executable, exc) from exc
        return handle

    # Completion -----------------------------------------------------------

    def _wait_for_exit(self, handle: ChildHandle) -> None:
        returncode: Optional[int] = None
        try:
            returncode = handle.process.wait()
        except Exception as exc:
            self._logger.warning(
                "Waiting on child process failed (pid=%s); treating it as exited: %s",
                handle.pid,
                exc,
            )
        finally:
            self._clear(handle, returncode)
        if returncode is not None:
            self._logger.info(
                "Child process exited (pid=%s, returncode=%s, runtime=%.1fs)",
                handle.pid,
                returncode,
                time.monotonic() - handle.started_at,
            )

    def _clear(self, handle: ChildHandle, returncode: Optional[int]) -> None:
        handle._mark_exited(returncode)
        with self._lock:
            if self._handle is handle:
                self._handle = None
                if not self._pending:
                    self._idle.set()

    # Termination ----------------------------------------------------------

    def request_kill(self, handle: Optional[ChildHandle] = None) -> None:
        """Force-kill ``handle`` (default: the running child).

        Only sends the signal; the wait thread observes the exit and clears
        the handle.
        """
        with self._lock:
            current = self._handle
        target = handle if handle is not None else current
        if target is None:
            raise KillError("No child process is running")
        if target is not current or target.exited:
            raise KillError(f"Child process has already exited (pid={target.pid})")
        # Exited but not yet reaped by the wait thread.
        if target.process.poll() is not None:
            raise KillError(f"Child process has already exited (pid={target.pid})")
        try:
            target.process.kill()
        except OSError as exc:
            raise KillError(f"Failed to kill child process (pid={target.pid}): {exc}") from exc
        self._logger.info("Kill requested for child process (pid=%s)", target.pid)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no child is running or pending. Never call from the tick loop."""
        return self._idle.wait(timeout)

    def shutdown(self, timeout: float = 5.0) -> bool:
        """Kill any running child and wait for it to be reaped."""
        spawn_thread = self._spawn_thread
        if spawn_thread is not None and spawn_thread.is_alive():
            spawn_thread.join(timeout=timeout)
        handle = self.handle
        if handle is not None and not handle.exited:
            self._logger.info("Stopping child process on shutdown (pid=%s)", handle.pid)
            try:
                handle.process.kill()
            except OSError as exc:
                self._logger.debug("Kill on shutdown failed (pid=%s): %s", handle.pid, exc)
        stopped = self.wait_idle(timeout)
        wait_thread = self._wait_thread
        if wait_thread is not None and wait_thread is not threading.current_thread():
            wait_thread.join(timeout=timeout)
        if not stopped:
            self._logger.warning("Supervisor shutdown incomplete; child still running")
        return stopped


def _format_command(command: Sequence[str]) -> str:
    try:
        return shlex.join(command)
    except Exception:
        return " ".join(command)
