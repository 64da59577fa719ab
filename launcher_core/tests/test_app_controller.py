from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import pytest

from launcher_core.app_controller import AppController
from launcher_core.controller_mode import AppMode, TickInput
from launcher_core.errors import AlreadyRunningError, EmptyCatalogError, KillError, LaunchError
from launcher_core.process_supervisor import ProcessSupervisor


@dataclass(frozen=True)
class _Entry:
    name: str
    executable_path: str


class _StubSupervisor:
    """Records calls; mode flips only when the test says so."""

    def __init__(self) -> None:
        self.mode = AppMode.BROWSING
        self.busy = False
        self.launches: list[str] = []
        self.kills = 0
        self.launch_error: Exception | None = None
        self.kill_error: Exception | None = None

    def launch_in_background(self, executable_path) -> None:
        if self.launch_error is not None:
            raise self.launch_error
        self.launches.append(str(executable_path))
        self.busy = True

    def request_kill(self) -> None:
        self.kills += 1
        if self.kill_error is not None:
            raise self.kill_error

    def child_started(self) -> None:
        self.mode = AppMode.RUNNING
        self.busy = True

    def child_exited(self) -> None:
        self.mode = AppMode.BROWSING
        self.busy = False


def _test_logger() -> logging.Logger:
    return logging.getLogger("test.controller")


def _entries(count: int = 3) -> list[_Entry]:
    return [_Entry(name=f"Game {i}", executable_path=f"/opt/games/game{i}") for i in range(count)]


def _controller(supervisor, count: int = 3, **kwargs) -> AppController:
    kwargs.setdefault("dead_zone", 0.5)
    kwargs.setdefault("repeat_ticks", 20)
    kwargs.setdefault("kill_hold_ticks", 60)
    return AppController(_entries(count), supervisor, **kwargs)


def _hold_right(controller: AppController, ticks: int) -> None:
    for _ in range(ticks):
        controller.tick(TickInput(axis=1.0))


def test_empty_catalog_is_fatal_at_construction():
    with pytest.raises(EmptyCatalogError):
        AppController([], _StubSupervisor())


def test_single_entry_catalog_navigation_is_noop():
    controller = _controller(_StubSupervisor(), count=1, repeat_ticks=0)

    for axis in (1.0, -1.0, 1.0, 0.0, -1.0) * 5:
        controller.tick(TickInput(axis=axis))
        assert controller.selected_index == 0


def test_browsing_navigation_is_debounced():
    controller = _controller(_StubSupervisor())

    _hold_right(controller, 2)
    assert controller.selected_index == 1
    _hold_right(controller, 20)
    assert controller.selected_index == 1
    _hold_right(controller, 1)
    assert controller.selected_index == 2


def test_navigation_wraps_backwards():
    controller = _controller(_StubSupervisor())

    controller.tick(TickInput())
    controller.tick(TickInput(axis=-0.9))

    assert controller.selected_index == 2
    assert controller.selected_entry.name == "Game 2"


def test_confirm_launches_selected_entry():
    supervisor = _StubSupervisor()
    controller = _controller(supervisor)
    _hold_right(controller, 2)

    mode = controller.tick(TickInput(confirm_pressed=True))

    assert supervisor.launches == ["/opt/games/game1"]
    # The supervisor has not reported a running child yet.
    assert mode is AppMode.BROWSING


def test_confirm_ignored_while_launch_pending():
    supervisor = _StubSupervisor()
    controller = _controller(supervisor)

    controller.tick(TickInput(confirm_pressed=True))
    controller.tick(TickInput(confirm_pressed=True))

    assert len(supervisor.launches) == 1


@pytest.mark.parametrize("error", [LaunchError("/opt/games/game0", "No such file"), AlreadyRunningError()])
def test_launch_failures_are_logged_and_browsing_continues(error, caplog):
    supervisor = _StubSupervisor()
    supervisor.launch_error = error
    controller = _controller(supervisor, logger=_test_logger())

    with caplog.at_level("WARNING", logger="test.controller"):
        mode = controller.tick(TickInput(confirm_pressed=True))

    assert mode is AppMode.BROWSING
    assert any("Could not launch 'Game 0'" in r.getMessage() for r in caplog.records)
    controller.tick(TickInput())
    controller.tick(TickInput(axis=1.0))
    assert controller.selected_index == 1


def test_running_mode_freezes_selection():
    supervisor = _StubSupervisor()
    controller = _controller(supervisor, repeat_ticks=0)
    supervisor.child_started()

    for _ in range(30):
        assert controller.tick(TickInput(axis=1.0, confirm_pressed=True)) is AppMode.RUNNING

    assert controller.selected_index == 0
    assert supervisor.launches == []


def test_mode_restoration_resumes_navigation():
    supervisor = _StubSupervisor()
    controller = _controller(supervisor, repeat_ticks=0)
    supervisor.child_started()
    controller.tick(TickInput(axis=1.0))

    supervisor.child_exited()

    assert controller.mode is AppMode.RUNNING
    assert controller.tick(TickInput()) is AppMode.BROWSING
    controller.tick(TickInput(axis=1.0))
    assert controller.selected_index == 1


@pytest.mark.parametrize(
    "hold_a, hold_b, expected",
    [
        (61, 61, 1),
        (60, 61, 0),
        (61, 60, 0),
        (60, 60, 0),
        (500, 0, 0),
        (0, 500, 0),
        (30, 30, 0),
    ],
)
def test_kill_requires_both_holds_strictly_over_threshold(hold_a, hold_b, expected):
    supervisor = _StubSupervisor()
    controller = _controller(supervisor)
    supervisor.child_started()

    controller.tick(TickInput(kill_hold_a=hold_a, kill_hold_b=hold_b))

    assert supervisor.kills == expected


def test_kill_combo_ignored_while_browsing():
    supervisor = _StubSupervisor()
    controller = _controller(supervisor)

    controller.tick(TickInput(kill_hold_a=100, kill_hold_b=100))

    assert supervisor.kills == 0


def test_kill_failure_keeps_running_mode(caplog):
    supervisor = _StubSupervisor()
    supervisor.kill_error = KillError("already gone")
    controller = _controller(supervisor, logger=_test_logger())
    supervisor.child_started()

    with caplog.at_level("WARNING", logger="test.controller"):
        mode = controller.tick(TickInput(kill_hold_a=61, kill_hold_b=61))

    assert mode is AppMode.RUNNING
    assert supervisor.kills == 1
    assert any("Kill request failed" in r.getMessage() for r in caplog.records)


def test_full_cycle_with_real_supervisor():
    released = threading.Event()

    class _Proc:
        pid = 77
        returncode = None

        def __init__(self, command, **kwargs) -> None:
            self.command = command

        def wait(self):
            released.wait(5.0)
            return self.returncode

        def poll(self):
            return self.returncode

        def kill(self) -> None:
            self.returncode = -9
            released.set()

    spawned: list[_Proc] = []

    def factory(command, **kwargs):
        proc = _Proc(command, **kwargs)
        spawned.append(proc)
        return proc

    supervisor = ProcessSupervisor(factory)
    controller = _controller(supervisor)

    controller.tick(TickInput(confirm_pressed=True))
    supervisor._spawn_thread.join(2.0)  # type: ignore[union-attr]
    assert controller.tick(TickInput()) is AppMode.RUNNING
    assert spawned[0].command == ["/opt/games/game0"]

    controller.tick(TickInput(kill_hold_a=61, kill_hold_b=61))
    assert supervisor.wait_idle(2.0) is True

    assert controller.tick(TickInput()) is AppMode.BROWSING
    controller.tick(TickInput(axis=1.0))
    assert controller.selected_index == 1
