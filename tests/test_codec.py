import os
from datetime import datetime

import pygame

from pixelbox.codec import (
    export_path,
    list_exports,
    load_picture,
    picture_from_surface,
    picture_to_surface,
    save_picture,
)
from pixelbox.picture import Edit, Picture

GREY = (240, 240, 240)
RED = (255, 0, 0)


def test_picture_to_surface_skips_background_cells():
    picture = Picture.empty(2, 2, GREY).draw([Edit(1, 1, RED)])
    surface = picture_to_surface(picture, GREY)
    assert surface.get_size() == (2, 2)
    assert surface.get_at((0, 0)).a == 0
    assert tuple(surface.get_at((1, 1))) == (255, 0, 0, 255)


def test_picture_from_surface_downscales_large_images():
    surface = pygame.Surface((250, 40))
    surface.fill(RED)
    picture = picture_from_surface(surface)
    assert (picture.width, picture.height) == (100, 40)
    assert set(picture.pixels) == {RED}


def test_save_then_load_restores_background(tmp_path):
    picture = Picture.empty(3, 2, GREY).draw([Edit(0, 1, RED)])
    path = tmp_path / "art.png"
    assert save_picture(picture, path, GREY)
    assert not list(tmp_path.glob(".*"))

    loaded = load_picture(path, background=GREY)
    assert loaded == picture


def test_load_picture_returns_none_on_missing_file(tmp_path):
    assert load_picture(tmp_path / "missing.png") is None


def test_load_picture_returns_none_on_image_error(monkeypatch, tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not-an-image")

    def _raise(*_args, **_kwargs):
        raise pygame.error("bad image")

    monkeypatch.setattr(pygame.image, "load", _raise)
    assert load_picture(path) is None


def test_save_picture_reports_failure(tmp_path):
    picture = Picture.empty(1, 1, GREY)
    assert not save_picture(picture, tmp_path / "missing" / "art.png")


def test_export_path_adds_counter_on_collision(tmp_path):
    now = datetime(2026, 2, 6, 10, 11, 12)
    (tmp_path / "2026-02-06_101112.png").write_bytes(b"old")
    assert export_path(tmp_path, now=now) == tmp_path / "2026-02-06_101112_1.png"


def test_export_path_blank_name_cancels(tmp_path):
    assert export_path(tmp_path, name="   ") is None
    assert export_path(tmp_path, name="pixelArt") == tmp_path / "pixelArt.png"


def test_list_exports_orders_by_mtime(tmp_path):
    a = tmp_path / "a.png"
    b = tmp_path / "b.png"
    c = tmp_path / "c.png"
    for path in (a, b, c):
        path.write_bytes(b"")
    (tmp_path / ".tmp.png").write_bytes(b"")

    os.utime(a, (10, 10))
    os.utime(c, (20, 20))
    os.utime(b, (30, 30))

    assert [p.name for p in list_exports(tmp_path)] == ["b.png", "c.png", "a.png"]
