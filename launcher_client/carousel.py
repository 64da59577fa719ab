"""Easing state for the thumbnail carousel. Pure math, no Qt."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

EASE_FACTOR = 0.2
THUMBNAIL_FRACTION = 0.8
DIM_BRIGHTNESS = 0.5
UNFOCUSED_SCALE = 0.8


def lerp(a: float, b: float, t: float) -> float:
    return (b - a) * t + a


def remap(t: float, from_a: float, to_a: float, from_b: float, to_b: float) -> float:
    normalized = (t - from_a) / (to_a - from_a)
    return normalized * (to_b - from_b) + from_b


def crop_square(width: int, height: int) -> Tuple[int, int, int]:
    """Return ``(x, y, side)`` of the centered square inside a width x height image."""
    if width > height:
        return (width - height) // 2, 0, height
    return 0, (height - width) // 2, width


@dataclass(frozen=True)
class TilePlacement:
    index: int
    center_x: float
    center_y: float
    size: float
    brightness: float


class CarouselState:
    """Per-entry focus weights plus the horizontal slide offset.

    Weights start at 1.0 and ease toward 1 for the selected entry and 0 for
    the rest; the slide eases toward the selected index.
    """

    def __init__(self, size: int) -> None:
        self._weights: List[float] = [1.0] * max(0, size)
        self._slide = 0.0

    @property
    def weights(self) -> List[float]:
        return list(self._weights)

    @property
    def slide(self) -> float:
        return self._slide

    def update(self, selected_index: int) -> None:
        for i, weight in enumerate(self._weights):
            goal = 1.0 if i == selected_index else 0.0
            self._weights[i] = lerp(weight, goal, EASE_FACTOR)
        self._slide = lerp(self._slide, float(selected_index), EASE_FACTOR)

    def placements(self, width: int, height: int) -> List[TilePlacement]:
        """Lay out every tile in screen space for a width x height viewport."""
        thumbnail_size = min(width, height) * THUMBNAIL_FRACTION
        tiles: List[TilePlacement] = []
        for i, weight in enumerate(self._weights):
            scale = remap(weight, 0.0, 1.0, UNFOCUSED_SCALE, 1.0)
            tiles.append(
                TilePlacement(
                    index=i,
                    center_x=(i - self._slide) * thumbnail_size + width / 2,
                    center_y=height / 2,
                    size=scale * thumbnail_size,
                    brightness=remap(weight, 0.0, 1.0, DIM_BRIGHTNESS, 1.0),
                )
            )
        return tiles
