from __future__ import annotations

import math
from collections import deque
from typing import Callable, Dict, List, Optional, Set

from pixelbox.history import Action, EditorState
from pixelbox.picture import Color, Edit, Picture, Point

Dispatch = Callable[[Action], None]
Continuation = Callable[[Point, EditorState], None]
Tool = Callable[[Point, EditorState, Dispatch], Optional[Continuation]]

# Left, right, up, down.
AROUND = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rectangle_edits(start: Point, end: Point, color: Color, picture: Picture) -> List[Edit]:
    x_start = max(0, min(start[0], end[0]))
    y_start = max(0, min(start[1], end[1]))
    x_end = min(picture.width - 1, max(start[0], end[0]))
    y_end = min(picture.height - 1, max(start[1], end[1]))
    return [
        Edit(x, y, color)
        for y in range(y_start, y_end + 1)
        for x in range(x_start, x_end + 1)
    ]


def circle_radius(center: Point, pos: Point) -> int:
    return _round_half_up(math.hypot(pos[0] - center[0], pos[1] - center[1]))


def circle_edits(center: Point, pos: Point, color: Color, picture: Picture) -> List[Edit]:
    radius = circle_radius(center, pos)
    cx, cy = center
    drawn = []
    for y in range(cy - radius, cy + radius + 1):
        for x in range(cx - radius, cx + radius + 1):
            if math.hypot(x - cx, y - cy) > radius:
                continue
            if picture.contains(x, y):
                drawn.append(Edit(x, y, color))
    return drawn


def flood_region(picture: Picture, start: Point) -> List[Point]:
    """Cells 4-connected to ``start`` that share its color, in BFS order."""
    if not picture.contains(*start):
        return []
    target = picture.pixel(*start)
    region = [start]
    seen: Set[Point] = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in AROUND:
            nx, ny = x + dx, y + dy
            if (nx, ny) in seen or not picture.contains(nx, ny):
                continue
            if picture.pixel(nx, ny) != target:
                continue
            seen.add((nx, ny))
            region.append((nx, ny))
            queue.append((nx, ny))
    return region


def fill_edits(start: Point, color: Color, picture: Picture) -> List[Edit]:
    return [Edit(x, y, color) for x, y in flood_region(picture, start)]


def draw(pos: Point, state: EditorState, dispatch: Dispatch) -> Continuation:
    def draw_pixel(pos: Point, state: EditorState) -> None:
        drawn = Edit(pos[0], pos[1], state.color)
        dispatch(Action(picture=state.picture.draw([drawn])))

    draw_pixel(pos, state)
    return draw_pixel


def rectangle(start: Point, state: EditorState, dispatch: Dispatch) -> Continuation:
    # Every sample redraws from the picture captured on press.
    def draw_rectangle(pos: Point, _state: Optional[EditorState] = None) -> None:
        edits = rectangle_edits(start, pos, state.color, state.picture)
        dispatch(Action(picture=state.picture.draw(edits)))

    draw_rectangle(start)
    return draw_rectangle


def circle(start: Point, state: EditorState, dispatch: Dispatch) -> Continuation:
    def draw_circle(pos: Point, _state: Optional[EditorState] = None) -> None:
        edits = circle_edits(start, pos, state.color, state.picture)
        dispatch(Action(picture=state.picture.draw(edits)))

    draw_circle(start)
    return draw_circle


def fill(start: Point, state: EditorState, dispatch: Dispatch) -> None:
    edits = fill_edits(start, state.color, state.picture)
    if edits:
        dispatch(Action(picture=state.picture.draw(edits)))
    return None


def pick(pos: Point, state: EditorState, dispatch: Dispatch) -> None:
    if state.picture.contains(*pos):
        dispatch(Action(color=state.picture.pixel(*pos)))
    return None


TOOLS: Dict[str, Tool] = {
    "draw": draw,
    "fill": fill,
    "rectangle": rectangle,
    "circle": circle,
    "pick": pick,
}
