"""Dead-zone and repeat-timer filter turning stick samples into navigation intents."""
from __future__ import annotations

from enum import Enum
from typing import Tuple

# Keeps the countdown from growing without bound during long idle periods.
_TIMER_FLOOR = -1


class NavIntent(Enum):
    NONE = 0
    NEXT = 1
    PREVIOUS = -1


def debounce(sample: float, timer: int, dead_zone: float, repeat_ticks: int) -> Tuple[NavIntent, int]:
    """Return the intent for one step and the updated timer.

    The gate is open while ``timer < 0``. Firing resets the timer to
    ``repeat_ticks``; the timer then drops by one on every step, so a held
    stick fires once every ``repeat_ticks + 1`` steps. NEXT is checked first.
    """
    intent = NavIntent.NONE
    if timer < 0:
        if sample > dead_zone:
            intent = NavIntent.NEXT
            timer = repeat_ticks
        elif sample < -dead_zone:
            intent = NavIntent.PREVIOUS
            timer = repeat_ticks
    timer = max(_TIMER_FLOOR, timer - 1)
    return intent, timer


class InputDebouncer:
    """Stateful wrapper around :func:`debounce` owning the navigation timer."""

    def __init__(self, dead_zone: float = 0.5, repeat_ticks: int = 20) -> None:
        dead_zone = float(dead_zone)
        if not 0.0 < dead_zone < 1.0:
            raise ValueError(f"dead_zone must be within (0, 1), got {dead_zone}")
        repeat_ticks = int(repeat_ticks)
        if repeat_ticks < 0:
            raise ValueError(f"repeat_ticks must be >= 0, got {repeat_ticks}")
        self._dead_zone = dead_zone
        self._repeat_ticks = repeat_ticks
        self._timer = 0

    @property
    def dead_zone(self) -> float:
        return self._dead_zone

    @property
    def repeat_ticks(self) -> int:
        return self._repeat_ticks

    @property
    def timer(self) -> int:
        return self._timer

    def step(self, sample: float) -> NavIntent:
        intent, self._timer = debounce(sample, self._timer, self._dead_zone, self._repeat_ticks)
        return intent

    def reset(self) -> None:
        self._timer = 0
