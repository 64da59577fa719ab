"""Pygame-backed gamepad sampler producing one TickInput per launcher tick."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

try:
    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    # The launcher has no SDL window, and the kill combo must work while a game has focus.
    os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")
    import pygame
except Exception:  # pragma: no cover - optional dependency
    pygame = None  # type: ignore

from launcher_core.controller_mode import NEUTRAL_INPUT, TickInput

LOGGER = logging.getLogger("ArcadeLauncher.Client")


class HoldTracker:
    """Counts consecutive ticks each tracked button has been held.

    A button pressed this tick has a duration of 1; released buttons read 0.
    """

    def __init__(self, buttons: Iterable[int]) -> None:
        self._held: Dict[int, int] = {int(button): 0 for button in buttons}

    @property
    def buttons(self) -> Tuple[int, ...]:
        return tuple(self._held)

    def update(self, states: Mapping[int, bool]) -> None:
        for button in self._held:
            self._held[button] = self._held[button] + 1 if states.get(button, False) else 0

    def duration(self, button: int) -> int:
        return self._held.get(button, 0)

    def just_pressed(self, button: int) -> bool:
        return self._held.get(button, 0) == 1

    def reset(self) -> None:
        for button in self._held:
            self._held[button] = 0


class GamepadSampler:
    """Reads one joystick synchronously each tick.

    Without pygame or a connected pad the sampler returns neutral input, and a
    pad plugged in later is picked up from the device-added event.
    """

    def __init__(
        self,
        *,
        joystick_index: int = 0,
        nav_axis: int = 0,
        confirm_button: int = 0,
        kill_buttons: Tuple[int, int] = (7, 6),
        joystick: Any = None,
    ) -> None:
        self.joystick_index = joystick_index
        self.nav_axis = nav_axis
        self.confirm_button = confirm_button
        self.kill_buttons = kill_buttons
        self._holds = HoldTracker((confirm_button, *kill_buttons))
        self._joystick = joystick
        self._pump_events = False

    @property
    def connected(self) -> bool:
        return self._joystick is not None

    def start(self) -> bool:
        if self._joystick is not None:
            return True
        if pygame is None:
            LOGGER.info("Gamepad input disabled: pygame not available")
            return False
        try:
            pygame.display.init()
            pygame.joystick.init()
        except Exception as exc:
            LOGGER.info("Gamepad input disabled: pygame init failed (%s)", exc)
            return False
        self._pump_events = True
        self._open_joystick()
        return True

    def stop(self) -> None:
        self._joystick = None
        self._holds.reset()
        if self._pump_events and pygame is not None:
            self._pump_events = False
            try:
                pygame.joystick.quit()
                pygame.display.quit()
            except Exception as exc:
                LOGGER.debug("Gamepad shutdown failed: %s", exc)

    def sample(self) -> TickInput:
        if self._pump_events:
            self._process_events()
        joystick = self._joystick
        if joystick is None:
            self._holds.reset()
            return NEUTRAL_INPUT
        try:
            axis = self._read_axis(joystick)
            states = {button: self._read_button(joystick, button) for button in self._holds.buttons}
        except Exception as exc:
            LOGGER.info("Gamepad read failed; waiting for reconnect (%s)", exc)
            self._joystick = None
            self._holds.reset()
            return NEUTRAL_INPUT
        self._holds.update(states)
        first, second = self.kill_buttons
        return TickInput(
            axis=axis,
            confirm_pressed=self._holds.just_pressed(self.confirm_button),
            kill_hold_a=self._holds.duration(first),
            kill_hold_b=self._holds.duration(second),
        )

    def _open_joystick(self) -> None:
        if pygame.joystick.get_count() <= self.joystick_index:
            LOGGER.info("No joystick at index %d; navigation input idle", self.joystick_index)
            return
        try:
            joystick = pygame.joystick.Joystick(self.joystick_index)
            joystick.init()
        except Exception as exc:
            LOGGER.info("Joystick init failed (%s)", exc)
            return
        self._joystick = joystick
        LOGGER.info(
            "Gamepad active with '%s' (axes=%d buttons=%d)",
            joystick.get_name(),
            joystick.get_numaxes(),
            joystick.get_numbuttons(),
        )

    def _process_events(self) -> None:
        try:
            events = pygame.event.get()  # type: ignore[union-attr]
        except Exception as exc:
            LOGGER.debug("Gamepad event pump failed: %s", exc)
            return
        for event in events:
            etype = getattr(event, "type", None)
            if etype == getattr(pygame, "JOYDEVICEADDED", None) and self._joystick is None:
                self._open_joystick()
            elif etype == getattr(pygame, "JOYDEVICEREMOVED", None) and self._joystick is not None:
                if getattr(event, "instance_id", None) == self._instance_id(self._joystick):
                    LOGGER.info("Gamepad disconnected")
                    self._joystick = None
                    self._holds.reset()

    def _read_axis(self, joystick: Any) -> float:
        if joystick.get_numaxes() <= self.nav_axis:
            return 0.0
        value = float(joystick.get_axis(self.nav_axis))
        return max(-1.0, min(1.0, value))

    @staticmethod
    def _read_button(joystick: Any, button: int) -> bool:
        if joystick.get_numbuttons() <= button:
            return False
        return bool(joystick.get_button(button))

    @staticmethod
    def _instance_id(joystick: Any) -> Optional[int]:
        getter = getattr(joystick, "get_instance_id", None)
        if getter is None:
            return None
        try:
            return getter()
        except Exception:
            return None


def build_sampler(settings: Any) -> GamepadSampler:
    return GamepadSampler(
        joystick_index=settings.joystick_index,
        nav_axis=settings.nav_axis,
        confirm_button=settings.confirm_button,
        kill_buttons=settings.kill_buttons,
    )
