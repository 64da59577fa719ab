from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AppMode(Enum):
    """Top-level launcher mode. BROWSING and RUNNING are the only states."""

    BROWSING = "browsing"
    RUNNING = "running"


@dataclass(frozen=True)
class TickInput:
    """Controller input sampled once per tick.

    ``axis`` is the horizontal stick value in [-1, 1], ``confirm_pressed`` is
    the press edge of the confirm button and the two ``kill_hold`` values are
    how many ticks each kill button has been held (0 when released).
    """

    axis: float = 0.0
    confirm_pressed: bool = False
    kill_hold_a: int = 0
    kill_hold_b: int = 0


NEUTRAL_INPUT = TickInput()
