from __future__ import annotations

from typing import Optional, Protocol, Tuple

import pygame

from pixelbox.picture import Color, Picture


class RenderSurface(Protocol):
    @property
    def size(self) -> Tuple[int, int]: ...

    def resize(self, width: int, height: int) -> None: ...

    def fill_block(self, x: int, y: int, width: int, height: int, color: Color) -> None: ...


class PygameSurface:
    """Render surface backed by an off-screen ``pygame.Surface``."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.surface = pygame.Surface((width, height))

    @property
    def size(self) -> Tuple[int, int]:
        return self.surface.get_size()

    def resize(self, width: int, height: int) -> None:
        self.surface = pygame.Surface((width, height))

    def fill_block(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        self.surface.fill(color, pygame.Rect(x, y, width, height))


def draw_picture(
    picture: Picture,
    surface: RenderSurface,
    scale: int,
    previous: Optional[Picture] = None,
) -> int:
    """Paint ``picture`` onto ``surface``, skipping cells unchanged since ``previous``.

    Returns the number of ``scale`` sized blocks painted.
    """
    target = (picture.width * scale, picture.height * scale)
    if (
        previous is None
        or previous.width != picture.width
        or previous.height != picture.height
        or tuple(surface.size) != target
    ):
        surface.resize(*target)
        previous = None

    painted = 0
    for y in range(picture.height):
        for x in range(picture.width):
            color = picture.pixel(x, y)
            if previous is not None and previous.pixel(x, y) == color:
                continue
            surface.fill_block(x * scale, y * scale, scale, scale, color)
            painted += 1
    return painted


class PictureCanvas:
    def __init__(self, surface: RenderSurface, scale: int, picture: Optional[Picture] = None) -> None:
        self.surface = surface
        self.scale = scale
        self.picture: Optional[Picture] = None
        if picture is not None:
            self.sync_state(picture)

    def sync_state(self, picture: Picture) -> int:
        if self.picture is picture:
            return 0
        painted = draw_picture(picture, self.surface, self.scale, self.picture)
        self.picture = picture
        return painted
