from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pygame

from pixelbox.picture import Color, Picture

logger = logging.getLogger(__name__)

MAX_IMPORT_CELLS = 100


def picture_to_surface(picture: Picture, background: Optional[Color] = None) -> pygame.Surface:
    """One pixel per cell; cells matching ``background`` stay transparent."""
    surface = pygame.Surface((picture.width, picture.height), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    for y in range(picture.height):
        for x in range(picture.width):
            color = picture.pixel(x, y)
            if background is not None and color == background:
                continue
            surface.set_at((x, y), (*color, 255))
    return surface


def picture_from_surface(
    surface: pygame.Surface,
    max_cells: int = MAX_IMPORT_CELLS,
    background: Optional[Color] = None,
) -> Picture:
    """Read one cell per pixel, downscaling any side longer than ``max_cells``.

    Fully transparent pixels become ``background`` when one is given.
    """
    width, height = surface.get_size()
    target = (min(width, max_cells), min(height, max_cells))
    if target != (width, height):
        surface = pygame.transform.scale(surface, target)
    width, height = target
    pixels = []
    for y in range(height):
        for x in range(width):
            r, g, b, a = surface.get_at((x, y))
            if a == 0 and background is not None:
                pixels.append(background)
            else:
                pixels.append((r, g, b))
    return Picture(width, height, pixels)


def _save_surface_atomic(surface: pygame.Surface, path: Path) -> None:
    # Keep a .png suffix so pygame writes a PNG-encoded file.
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    pygame.image.save(surface, str(tmp_path))
    os.replace(tmp_path, path)


def save_picture(picture: Picture, path: Path, background: Optional[Color] = None) -> bool:
    try:
        _save_surface_atomic(picture_to_surface(picture, background), path)
    except (pygame.error, OSError):
        logger.exception("Could not export picture to %s", path)
        return False
    logger.info("Exported %r to %s", picture, path)
    return True


def load_picture(
    path: Path,
    max_cells: int = MAX_IMPORT_CELLS,
    background: Optional[Color] = None,
) -> Optional[Picture]:
    if not path.exists():
        logger.debug("Nothing to import at %s", path)
        return None
    try:
        image = pygame.image.load(str(path))
    except (pygame.error, OSError):
        logger.warning("Could not decode %s", path)
        return None
    return picture_from_surface(image, max_cells, background)


def export_path(export_dir: Path, name: Optional[str] = None, now: Optional[datetime] = None) -> Optional[Path]:
    """Pick a free ``.png`` path in ``export_dir``.

    An explicitly blank ``name`` means the export was cancelled.
    """
    if name is not None:
        stem = Path(name.strip()).stem
        if not stem:
            return None
    else:
        stem = (now or datetime.now()).strftime("%Y-%m-%d_%H%M%S")
    path = export_dir / f"{stem}.png"
    counter = 1
    while path.exists():
        path = export_dir / f"{stem}_{counter}.png"
        counter += 1
    return path


def list_exports(export_dir: Path) -> List[Path]:
    files = [path for path in export_dir.glob("*.png") if not path.name.startswith(".")]
    files.sort(key=lambda path: (path.stat().st_mtime, path.name), reverse=True)
    return files
