from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pygame

from pixelbox.codec import MAX_IMPORT_CELLS, export_path, list_exports, load_picture, save_picture
from pixelbox.config import _coerce_scale, editor_config, load_config
from pixelbox.gesture import GestureController, OnMove
from pixelbox.history import Action, initial_state, reduce, size_change_action
from pixelbox.paths import ensure_directories, get_data_root
from pixelbox.picture import Color, Point, parse_color, parse_size
from pixelbox.render import PictureCanvas, PygameSurface
from pixelbox.tools import TOOLS
from pixelbox.ui.common import (
    Button,
    create_window,
    is_pointer_motion,
    is_primary_pointer_event,
    pointer_event_pos,
)

logger = logging.getLogger(__name__)

TOOL_KEYS = {
    pygame.K_1: "draw",
    pygame.K_2: "fill",
    pygame.K_3: "rectangle",
    pygame.K_4: "circle",
    pygame.K_5: "pick",
}

MARGIN = 12
BUTTON_H = 32
BUTTON_GAP = 8
SWATCH = 24
BAR_BG: Color = (238, 234, 226)
WINDOW_BG: Color = (252, 248, 240)


def shortcut_action(event: pygame.event.Event) -> Optional[Action]:
    if event.type != pygame.KEYDOWN:
        return None
    mods = getattr(event, "mod", 0)
    if event.key == pygame.K_z and mods & (pygame.KMOD_CTRL | pygame.KMOD_META):
        return Action(undo=True)
    tool = TOOL_KEYS.get(event.key)
    if tool is not None:
        return Action(tool=tool)
    return None


def _coerce_tool(value: object, default: str = "draw") -> str:
    tool = str(value)
    return tool if tool in TOOLS else default


def _coerce_palette(values: Any) -> List[Color]:
    palette = []
    for value in values or []:
        try:
            palette.append(parse_color(value))
        except ValueError:
            logger.warning("Skipping invalid palette color %r", value)
    return palette


class PixelEditorApp:
    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.config = config if config is not None else load_config()
        self.data_root = get_data_root(self.config)
        dirs = ensure_directories(self.data_root)
        self.exports_dir = dirs["exports"]

        editor = editor_config(self.config)
        self.scale = _coerce_scale(editor.get("scale"), 10)
        self.sizes = [str(size) for size in editor.get("sizes", [])]
        self.background = parse_color(editor["background"])
        self.max_import_cells = _coerce_scale(editor.get("max_import_cells"), MAX_IMPORT_CELLS)
        self.palette = _coerce_palette(editor.get("palette"))

        state = initial_state(self.config)
        self.state = replace(state, tool=_coerce_tool(state.tool))

        self.screen, self.screen_rect = create_window(self._window_size(*self._max_cells()))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("sans", 16)

        self.tool_buttons: Dict[str, Button] = {}
        self.size_buttons: Dict[str, Button] = {}
        self.palette_buttons: List[Button] = []
        self.action_buttons: Dict[str, Button] = {}
        self._build_ui()

        self.canvas_origin = (MARGIN, self._bar_height() + MARGIN)
        self.canvas = PictureCanvas(PygameSurface(), self.scale, self.state.picture)
        self.gesture = GestureController(self.scale, self.canvas_origin)
        self.pointer_down = False
        self.sync_state()
        logger.info("Editor started with a %s picture at scale %d", self.state.size, self.scale)

    def _max_cells(self) -> Tuple[int, int]:
        # Imports can be larger than any preset size.
        labels = self.sizes or [self.state.size]
        max_w = max([parse_size(size)[0] for size in labels] + [self.max_import_cells])
        max_h = max([parse_size(size)[1] for size in labels] + [self.max_import_cells])
        return max_w, max_h

    def _bar_height(self) -> int:
        return 2 * BUTTON_H + BUTTON_GAP + 2 * MARGIN

    def _window_size(self, cells_w: int, cells_h: int) -> Tuple[int, int]:
        controls_w = (
            MARGIN * 2
            + len(TOOLS) * (96 + BUTTON_GAP)
            + 3 * (72 + BUTTON_GAP)
        )
        width = max(controls_w, cells_w * self.scale + 2 * MARGIN)
        height = self._bar_height() + cells_h * self.scale + 2 * MARGIN
        return width, height

    def _build_ui(self) -> None:
        self.tool_buttons.clear()
        self.size_buttons.clear()
        self.palette_buttons.clear()
        self.action_buttons.clear()

        left = MARGIN
        top = MARGIN
        for tool in TOOLS:
            rect = pygame.Rect(left, top, 96, BUTTON_H)
            self.tool_buttons[tool] = Button(rect=rect, label=tool.capitalize(), fill=(245, 245, 245))
            left += rect.width + BUTTON_GAP

        for name in ("save", "load", "undo"):
            rect = pygame.Rect(left, top, 72, BUTTON_H)
            self.action_buttons[name] = Button(rect=rect, label=name.upper(), fill=(245, 245, 245))
            left += rect.width + BUTTON_GAP

        left = MARGIN
        top += BUTTON_H + BUTTON_GAP
        for size in self.sizes:
            rect = pygame.Rect(left, top, 72, BUTTON_H)
            self.size_buttons[size] = Button(rect=rect, label=size, fill=(245, 245, 245))
            left += rect.width + BUTTON_GAP

        swatch_top = top + (BUTTON_H - SWATCH) // 2
        for color in self.palette:
            rect = pygame.Rect(left, swatch_top, SWATCH, SWATCH)
            self.palette_buttons.append(Button(rect=rect, fill=color, border_width=1))
            left += SWATCH + BUTTON_GAP // 2

    @property
    def canvas_rect(self) -> pygame.Rect:
        picture = self.state.picture
        return pygame.Rect(self.canvas_origin, (picture.width * self.scale, picture.height * self.scale))

    def dispatch(self, action: Action) -> None:
        self.state = reduce(self.state, action)
        self.sync_state()

    def sync_state(self) -> None:
        self.canvas.sync_state(self.state.picture)
        undo = self.action_buttons.get("undo")
        if undo is not None:
            undo.enabled = bool(self.state.history)

    def _start_tool(self, pos: Point) -> Optional[OnMove]:
        tool = TOOLS[self.state.tool]
        on_move = tool(pos, self.state, self.dispatch)
        if on_move is None:
            return None
        return lambda pos: on_move(pos, self.state)

    def _save(self) -> Optional[Path]:
        path = export_path(self.exports_dir)
        if path is None:
            return None
        if not save_picture(self.state.picture, path, self.background):
            return None
        return path

    def _load(self) -> None:
        exports = list_exports(self.exports_dir)
        if not exports:
            logger.info("No exports in %s to load", self.exports_dir)
            return
        picture = load_picture(exports[0], self.max_import_cells, self.background)
        if picture is None:
            return
        self.dispatch(Action(picture=picture, size=f"{picture.width}x{picture.height}"))

    def _handle_pointer_down(self, pos: Point) -> None:
        if self.canvas_rect.collidepoint(pos):
            self.gesture.press(pos, self._start_tool)
            return

        for tool, button in self.tool_buttons.items():
            if button.hit(pos):
                self.dispatch(Action(tool=tool))
                return

        for size, button in self.size_buttons.items():
            if button.hit(pos):
                self.dispatch(size_change_action(size, self.background))
                return

        for idx, button in enumerate(self.palette_buttons):
            if button.hit(pos):
                self.dispatch(Action(color=self.palette[idx]))
                return

        if self.action_buttons["undo"].hit(pos):
            self.dispatch(Action(undo=True))
        elif self.action_buttons["save"].hit(pos):
            self._save()
        elif self.action_buttons["load"].hit(pos):
            self._load()

    def _handle_pointer_move(self, pos: Point) -> None:
        self.gesture.move(pos)

    def _handle_pointer_up(self) -> None:
        self.gesture.release()

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        action = shortcut_action(event)
        if action is not None:
            self.dispatch(action)
        elif is_primary_pointer_event(event, is_down=True):
            if self.pointer_down:
                # Touch stacks emit an emulated mouse-down after the finger-down.
                return True
            pos = pointer_event_pos(event, self.screen_rect)
            if pos is not None:
                self.pointer_down = True
                self._handle_pointer_down(pos)
        elif is_pointer_motion(event):
            if (
                event.type == pygame.MOUSEMOTION
                and not event.buttons[0]
                and not getattr(event, "touch", False)
            ):
                # Button released outside the window.
                self.pointer_down = False
                self._handle_pointer_up()
                return True
            pos = pointer_event_pos(event, self.screen_rect)
            if pos is not None:
                self._handle_pointer_move(pos)
        elif is_primary_pointer_event(event, is_down=False):
            if not self.pointer_down:
                return True
            self.pointer_down = False
            self._handle_pointer_up()
        return True

    def draw(self) -> None:
        self.screen.fill(WINDOW_BG)
        pygame.draw.rect(self.screen, BAR_BG, pygame.Rect(0, 0, self.screen_rect.width, self._bar_height()))

        for tool, button in self.tool_buttons.items():
            button.draw(self.screen, self.font, selected=tool == self.state.tool)
        for size, button in self.size_buttons.items():
            button.draw(self.screen, self.font, selected=size == self.state.size)
        for idx, button in enumerate(self.palette_buttons):
            button.draw(self.screen, selected=self.palette[idx] == self.state.color)
        for button in self.action_buttons.values():
            button.draw(self.screen, self.font)

        self.screen.blit(self.canvas.surface.surface, self.canvas_origin)
        pygame.draw.rect(self.screen, (200, 200, 200), self.canvas_rect.inflate(4, 4), width=2)

    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
                    break
            self.draw()
            pygame.display.flip()
            self.clock.tick(60)
        pygame.quit()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        PixelEditorApp().run()
    except Exception:
        logger.exception("Editor crashed")
        pygame.quit()
        raise SystemExit(1)


if __name__ == "__main__":
    main()
