import pytest

from pixelbox.picture import Edit, Picture, color_to_hex, parse_color, parse_size

GREY = (240, 240, 240)
RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_empty_picture_is_uniform():
    picture = Picture.empty(4, 3, GREY)
    assert len(picture.pixels) == 12
    assert all(picture.pixel(x, y) == GREY for y in range(3) for x in range(4))


def test_pixel_uses_row_major_index():
    pixels = [(i, i, i) for i in range(6)]
    picture = Picture(3, 2, pixels)
    assert picture.pixel(2, 0) == (2, 2, 2)
    assert picture.pixel(0, 1) == (3, 3, 3)
    assert picture.pixel(2, 1) == (5, 5, 5)


def test_draw_last_write_wins():
    picture = Picture.empty(2, 2, GREY)
    drawn = picture.draw([Edit(0, 0, RED), Edit(0, 0, BLUE)])
    assert drawn.pixel(0, 0) == BLUE


def test_draw_leaves_receiver_untouched():
    picture = Picture.empty(2, 2, GREY)
    drawn = picture.draw([Edit(1, 1, RED)])
    assert picture.pixel(1, 1) == GREY
    assert drawn.pixel(1, 1) == RED
    assert drawn is not picture


def test_draw_is_idempotent_for_repeated_edit_list():
    edits = [Edit(0, 1, RED), Edit(1, 0, BLUE)]
    once = Picture.empty(2, 2, GREY).draw(edits)
    assert once.draw(edits) == once


def test_draw_drops_out_of_range_edits():
    picture = Picture.empty(2, 2, GREY)
    drawn = picture.draw([Edit(-1, 0, RED), Edit(2, 0, RED), Edit(0, 5, RED), Edit(1, 1, BLUE)])
    assert drawn.pixels == (GREY, GREY, GREY, BLUE)


def test_picture_is_immutable():
    picture = Picture.empty(1, 1, GREY)
    with pytest.raises(AttributeError):
        picture.width = 3


def test_picture_rejects_mismatched_pixel_count():
    with pytest.raises(ValueError):
        Picture(2, 2, [GREY] * 3)
    with pytest.raises(ValueError):
        Picture.empty(0, 4, GREY)


def test_parse_color_accepts_hex_and_triples():
    assert parse_color("#f0f0f0") == GREY
    assert parse_color("FF0000") == RED
    assert parse_color([0, 0, 255]) == BLUE
    assert color_to_hex(GREY) == "#f0f0f0"


@pytest.mark.parametrize("value", ["#f0f0", "#gggggg", [1, 2], [0, 0, 256], None])
def test_parse_color_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_parse_size():
    assert parse_size("30x30") == (30, 30)
    assert parse_size("60X40") == (60, 40)
    with pytest.raises(ValueError):
        parse_size("big")
    with pytest.raises(ValueError):
        parse_size("0x10")


def test_picture_stores_pixels_as_tuple_and_hashes_by_value():
    a = Picture(2, 1, [GREY, RED])
    b = Picture(2, 1, (GREY, RED))
    assert isinstance(a.pixels, tuple)
    assert a == b
    assert hash(a) == hash(b)
    assert repr(a) == "Picture(2x1)"
