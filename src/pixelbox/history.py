from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from pixelbox.config import _coerce_size_label, editor_config
from pixelbox.picture import Color, Picture, parse_color, parse_size

COALESCE_WINDOW_MS = 1000

_MERGE_FIELDS = ("size", "tool", "color", "picture", "history", "last_commit_time")


@dataclass(frozen=True)
class EditorState:
    size: str
    tool: str
    color: Color
    picture: Picture
    history: Tuple[Picture, ...] = ()
    last_commit_time: float = 0


@dataclass(frozen=True)
class Action:
    """Partial update of an :class:`EditorState`.

    Fields left as ``None`` are not touched by the merge.
    """

    size: Optional[str] = None
    tool: Optional[str] = None
    color: Optional[Color] = None
    picture: Optional[Picture] = None
    history: Optional[Tuple[Picture, ...]] = None
    last_commit_time: Optional[float] = None
    undo: bool = False


def _now_ms() -> float:
    return time.time() * 1000


def apply_action(state: EditorState, action: Action) -> EditorState:
    changes = {}
    for name in _MERGE_FIELDS:
        value = getattr(action, name)
        if value is not None:
            changes[name] = value
    if not changes:
        return state
    return replace(state, **changes)


def reduce(
    state: EditorState,
    action: Action,
    now: Optional[float] = None,
    *,
    window_ms: float = COALESCE_WINDOW_MS,
) -> EditorState:
    if action.undo:
        if not state.history:
            return state
        return replace(
            state,
            picture=state.history[0],
            history=state.history[1:],
            last_commit_time=0,
        )

    if action.picture is not None:
        now = _now_ms() if now is None else now
        if now - state.last_commit_time >= window_ms:
            # Checkpoint the pre-edit picture; this wins over any history in the action.
            merged = apply_action(state, action)
            return replace(
                merged,
                history=(state.picture,) + state.history,
                last_commit_time=now,
            )

    return apply_action(state, action)


def size_change_action(label: str, background: Color) -> Action:
    width, height = parse_size(label)
    return Action(
        size=label,
        picture=Picture.empty(width, height, background),
        history=(),
        last_commit_time=0,
    )


def initial_state(config: Dict[str, Any]) -> EditorState:
    editor = editor_config(config)
    sizes = [str(size) for size in editor.get("sizes", [])]
    default = editor_config({})["size"]
    size = _coerce_size_label(editor.get("size", default), sizes, default)
    width, height = parse_size(size)
    background = parse_color(editor["background"])
    return EditorState(
        size=size,
        tool=str(editor.get("tool", "draw")),
        color=parse_color(editor["color"]),
        picture=Picture.empty(width, height, background),
    )
