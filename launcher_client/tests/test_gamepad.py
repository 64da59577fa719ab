from __future__ import annotations

from launcher_client.gamepad import GamepadSampler, HoldTracker
from launcher_core.controller_mode import NEUTRAL_INPUT


class _FakeJoystick:
    def __init__(self, axes: int = 2, buttons: int = 8) -> None:
        self.axis_values = [0.0] * axes
        self.pressed: set[int] = set()
        self._buttons = buttons
        self.broken = False

    def get_numaxes(self) -> int:
        return len(self.axis_values)

    def get_numbuttons(self) -> int:
        return self._buttons

    def get_axis(self, index: int) -> float:
        if self.broken:
            raise RuntimeError("device unplugged")
        return self.axis_values[index]

    def get_button(self, index: int) -> int:
        return 1 if index in self.pressed else 0


def test_hold_tracker_counts_consecutive_ticks():
    tracker = HoldTracker([6, 7])

    tracker.update({6: True})
    tracker.update({6: True, 7: True})
    tracker.update({6: True, 7: True})

    assert tracker.duration(6) == 3
    assert tracker.duration(7) == 2
    assert tracker.just_pressed(7) is False

    tracker.update({7: True})
    assert tracker.duration(6) == 0
    assert tracker.duration(7) == 3
    assert tracker.duration(99) == 0


def test_sampler_reports_axis_and_confirm_edge():
    pad = _FakeJoystick()
    sampler = GamepadSampler(joystick=pad)

    pad.axis_values[0] = 0.75
    pad.pressed = {0}
    first = sampler.sample()
    second = sampler.sample()
    pad.pressed = set()
    sampler.sample()
    pad.pressed = {0}
    fourth = sampler.sample()

    assert first.axis == 0.75
    assert first.confirm_pressed is True
    assert second.confirm_pressed is False
    assert fourth.confirm_pressed is True


def test_sampler_reports_kill_hold_durations():
    pad = _FakeJoystick()
    sampler = GamepadSampler(joystick=pad, kill_buttons=(7, 6))
    pad.pressed = {6, 7}

    for _ in range(61):
        sample = sampler.sample()

    assert sample.kill_hold_a == 61
    assert sample.kill_hold_b == 61

    pad.pressed = {7}
    sample = sampler.sample()
    assert sample.kill_hold_a == 62
    assert sample.kill_hold_b == 0


def test_missing_axis_and_buttons_read_as_neutral():
    pad = _FakeJoystick(axes=0, buttons=2)
    sampler = GamepadSampler(joystick=pad, kill_buttons=(7, 6))
    pad.pressed = {6, 7}

    sample = sampler.sample()

    assert sample.axis == 0.0
    assert sample.kill_hold_a == 0
    assert sample.kill_hold_b == 0


def test_axis_values_are_clamped():
    pad = _FakeJoystick()
    pad.axis_values[0] = -1.3
    sampler = GamepadSampler(joystick=pad)

    assert sampler.sample().axis == -1.0


def test_read_failure_drops_joystick_and_returns_neutral():
    pad = _FakeJoystick()
    sampler = GamepadSampler(joystick=pad)
    pad.broken = True

    assert sampler.sample() is NEUTRAL_INPUT
    assert sampler.connected is False
    assert sampler.sample() is NEUTRAL_INPUT


def test_sampler_without_joystick_is_neutral():
    sampler = GamepadSampler()

    assert sampler.sample() is NEUTRAL_INPUT
