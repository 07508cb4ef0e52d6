from __future__ import annotations

import math
from typing import Callable, List, Optional, Tuple

from pixelbox.picture import Point

OnMove = Callable[[Point], None]
OnDown = Callable[[Point], Optional[OnMove]]


def interpolate(start: Point, end: Point) -> List[Point]:
    """Cells stepped from ``start`` (exclusive) to ``end`` (inclusive)."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    steps = max(abs(dx), abs(dy))
    points = []
    for idx in range(1, steps + 1):
        x = int(math.floor(start[0] + dx * idx / steps + 0.5))
        y = int(math.floor(start[1] + dy * idx / steps + 0.5))
        points.append((x, y))
    return points


class GestureController:
    """Turns device-space pointer samples into cell positions for a tool.

    ``press`` hands the starting cell to ``on_down``; if that returns a
    continuation, later ``move`` samples are fed to it, densified so that no
    cell between two samples is skipped. ``release`` ends the gesture.
    """

    def __init__(self, scale: int, origin: Tuple[int, int] = (0, 0)) -> None:
        self.scale = scale
        self.origin = origin
        self._on_move: Optional[OnMove] = None
        self._last: Optional[Point] = None

    @property
    def active(self) -> bool:
        return self._on_move is not None

    def cell_at(self, device_pos: Tuple[float, float]) -> Point:
        return (
            int(math.floor((device_pos[0] - self.origin[0]) / self.scale)),
            int(math.floor((device_pos[1] - self.origin[1]) / self.scale)),
        )

    def press(self, device_pos: Tuple[float, float], on_down: OnDown) -> bool:
        self.release()
        pos = self.cell_at(device_pos)
        on_move = on_down(pos)
        if on_move is None:
            return False
        self._on_move = on_move
        self._last = pos
        return True

    def move(self, device_pos: Tuple[float, float]) -> int:
        if self._on_move is None or self._last is None:
            return 0
        pos = self.cell_at(device_pos)
        if pos == self._last:
            return 0
        points = interpolate(self._last, pos)
        for point in points:
            self._on_move(point)
        self._last = pos
        return len(points)

    def release(self) -> None:
        self._on_move = None
        self._last = None
