"""Tick-driven state machine coordinating navigation and the child process."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from launcher_core.controller_mode import AppMode, TickInput
from launcher_core.errors import AlreadyRunningError, EmptyCatalogError, KillError, LaunchError
from launcher_core.input_debouncer import InputDebouncer, NavIntent
from launcher_core.selection import SelectionState

_LOGGER = logging.getLogger("ArcadeLauncher.Core")


class _Launchable(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def executable_path(self) -> Union[str, Path]: ...


class _SupervisorLike(Protocol):
    @property
    def mode(self) -> AppMode: ...

    @property
    def busy(self) -> bool: ...

    def launch_in_background(self, executable_path: Union[str, Path]) -> None: ...

    def request_kill(self) -> None: ...


class AppController:
    """Decides each tick whether input is live, a launch starts or a kill is sent.

    The mode is read from the supervisor at the start of every tick, so a
    transition made by the supervisor's wait thread shows up on the next tick.
    """

    def __init__(
        self,
        entries: Sequence[_Launchable],
        supervisor: _SupervisorLike,
        *,
        dead_zone: float = 0.5,
        repeat_ticks: int = 20,
        kill_hold_ticks: int = 60,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not entries:
            raise EmptyCatalogError()
        self._entries = tuple(entries)
        self._supervisor = supervisor
        self._debouncer = InputDebouncer(dead_zone, repeat_ticks)
        self._selection = SelectionState(len(self._entries))
        self._kill_hold_ticks = max(0, int(kill_hold_ticks))
        self._logger = logger or _LOGGER
        self._mode = AppMode.BROWSING
        self._tick_count = 0

    @property
    def mode(self) -> AppMode:
        return self._mode

    @property
    def entries(self) -> Sequence[_Launchable]:
        return self._entries

    @property
    def selected_index(self) -> int:
        return self._selection.index

    @property
    def selected_entry(self) -> _Launchable:
        return self._entries[self._selection.index]

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def kill_hold_ticks(self) -> int:
        return self._kill_hold_ticks

    def kill_combo_active(self, sample: TickInput) -> bool:
        threshold = self._kill_hold_ticks
        return sample.kill_hold_a > threshold and sample.kill_hold_b > threshold

    def tick(self, sample: TickInput) -> AppMode:
        self._tick_count += 1
        previous = self._mode
        self._mode = self._supervisor.mode
        if previous is not self._mode:
            self._logger.debug("Mode changed: %s -> %s (tick=%d)", previous.value, self._mode.value, self._tick_count)

        if self._mode is AppMode.BROWSING:
            self._browse(sample)
        else:
            self._supervise(sample)
        return self._mode

    def _browse(self, sample: TickInput) -> None:
        intent = self._debouncer.step(sample.axis)
        if intent is not NavIntent.NONE:
            index = self._selection.advance(intent)
            self._logger.debug("Navigation %s -> index %d", intent.name, index)
        if not sample.confirm_pressed:
            return
        if self._supervisor.busy:
            self._logger.debug("Confirm ignored; a launch is already in progress")
            return
        entry = self.selected_entry
        try:
            self._supervisor.launch_in_background(entry.executable_path)
        except (AlreadyRunningError, LaunchError) as exc:
            self._logger.warning("Could not launch '%s': %s", entry.name, exc)
            return
        self._logger.info("Launching '%s' (%s)", entry.name, entry.executable_path)

    def _supervise(self, sample: TickInput) -> None:
        if not self.kill_combo_active(sample):
            return
        try:
            self._supervisor.request_kill()
        except KillError as exc:
            self._logger.warning("Kill request failed: %s", exc)
