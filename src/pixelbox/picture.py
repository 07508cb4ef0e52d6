from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

Color = Tuple[int, int, int]
Point = Tuple[int, int]


@dataclass(frozen=True)
class Edit:
    x: int
    y: int
    color: Color


@dataclass(frozen=True, repr=False)
class Picture:
    """Immutable grid of flat RGB cells.

    Cell ``(x, y)`` is stored at ``x + y * width``. Every edit goes through
    :meth:`draw`, which copies the whole buffer and returns a new picture.
    """

    width: int
    height: int
    pixels: Tuple[Color, ...]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"picture dimensions must be positive, got {self.width}x{self.height}")
        pixels = tuple(self.pixels)
        if len(pixels) != self.width * self.height:
            raise ValueError(
                f"expected {self.width * self.height} pixels for {self.width}x{self.height}, got {len(pixels)}"
            )
        object.__setattr__(self, "pixels", pixels)

    def __repr__(self) -> str:
        return f"Picture({self.width}x{self.height})"

    @classmethod
    def empty(cls, width: int, height: int, color: Color) -> Picture:
        return cls(width, height, (color,) * (width * height))

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> Color:
        return self.pixels[x + y * self.width]

    def draw(self, edits: Iterable[Edit]) -> Picture:
        # Out-of-range edits are dropped; later edits win on the same cell.
        copy = list(self.pixels)
        for edit in edits:
            if self.contains(edit.x, edit.y):
                copy[edit.x + edit.y * self.width] = edit.color
        return Picture(self.width, self.height, copy)


def parse_color(value: Union[str, Sequence[int]]) -> Color:
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"invalid hex color: {value!r}")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            raise ValueError(f"invalid hex color: {value!r}") from None
    try:
        r, g, b = (int(part) for part in value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid color: {value!r}") from None
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"color channel out of range: {value!r}")
    return (r, g, b)


def color_to_hex(color: Color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


def parse_size(label: str) -> Tuple[int, int]:
    """Split a size label like ``"30x30"`` into ``(width, height)``."""
    parts = label.lower().split("x")
    if len(parts) != 2:
        raise ValueError(f"invalid size label: {label!r}")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"invalid size label: {label!r}") from None
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid size label: {label!r}")
    return width, height
