import io

from PIL import Image, ImageDraw

import pytest

from utils.image_operations import (
    cover_fit,
    draw_border,
    flatten,
    normalize_orientation,
    rounded_mask,
)


def assert_color_close(actual, expected, tolerance=30):
    assert len(actual) == len(expected)
    for component_actual, component_expected in zip(actual, expected, strict=True):
        assert abs(component_actual - component_expected) <= tolerance


def test_cover_fit_crops_wide_image_without_padding():
    img = Image.new("RGB", (100, 20), color=(255, 0, 0))
    draw = ImageDraw.Draw(img)
    # blue bands on the far left and right fall outside a square crop
    draw.rectangle((0, 0, 19, 19), fill=(0, 0, 255))
    draw.rectangle((80, 0, 99, 19), fill=(0, 0, 255))

    fitted = cover_fit(img, (10, 10))

    assert fitted.size == (10, 10)
    for x in (0, 5, 9):
        assert_color_close(fitted.getpixel((x, 5)), (255, 0, 0))


def test_cover_fit_keeps_aspect_for_tall_image():
    img = Image.new("RGB", (10, 40), color=(0, 255, 0))
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, 9, 9), fill=(0, 0, 0))

    fitted = cover_fit(img, (20, 20))

    assert fitted.size == (20, 20)
    # the centred 10x10 crop (rows 15-24) is entirely green
    assert_color_close(fitted.getpixel((10, 0)), (0, 255, 0))
    assert_color_close(fitted.getpixel((10, 19)), (0, 255, 0))


def test_cover_fit_rejects_empty_target():
    with pytest.raises(ValueError):
        cover_fit(Image.new("RGB", (4, 4)), (0, 4))


def test_rounded_mask_clears_corners():
    mask = rounded_mask((40, 40), radius=10)
    assert mask.getpixel((0, 0)) == 0
    assert mask.getpixel((20, 20)) == 255
    assert mask.getpixel((20, 0)) == 255


def test_rounded_mask_square_when_radius_zero():
    mask = rounded_mask((10, 10), radius=0)
    assert mask.getpixel((0, 0)) == 255


def test_draw_border_strokes_edges_only():
    tile = Image.new("RGBA", (20, 20), (255, 255, 255, 255))
    bordered = draw_border(tile, radius=0, width=2, color=(0, 0, 0, 255))
    assert bordered.getpixel((0, 10)) == (0, 0, 0, 255)
    assert bordered.getpixel((10, 10)) == (255, 255, 255, 255)
    assert tile.getpixel((0, 10)) == (255, 255, 255, 255)


def test_draw_border_zero_width_is_copy():
    tile = Image.new("RGBA", (5, 5), (1, 2, 3, 255))
    result = draw_border(tile, radius=2, width=0, color=(0, 0, 0, 255))
    assert result is not tile
    assert result.getpixel((0, 0)) == (1, 2, 3, 255)


def test_flatten_uses_opaque_background():
    img = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    flat = flatten(img, (10, 20, 30, 0))
    assert flat.mode == "RGB"
    assert flat.getpixel((0, 0)) == (10, 20, 30)


def test_normalize_orientation_applies_exif_rotation():
    img = Image.new("RGB", (30, 10), "white")
    exif = Image.Exif()
    exif[0x0112] = 6  # rotated 90 degrees clockwise
    buffer = io.BytesIO()
    img.save(buffer, "JPEG", exif=exif)
    buffer.seek(0)

    with Image.open(buffer) as reopened:
        result = normalize_orientation(reopened)

    assert result.mode == "RGBA"
    assert result.size == (10, 30)
