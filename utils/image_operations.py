"""Reusable image manipulation operations.

This module centralizes the small Pillow helpers the exporter needs so they
can be shared and tested in isolation.  Functions are pure: they return new
images and never modify their input.
"""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageOps

from collage.layout import LayoutEngine

ColorValue = tuple[int, int, int, int]


def normalize_orientation(image: Image.Image) -> Image.Image:
    """Apply EXIF orientation and convert to RGBA."""
    transposed = ImageOps.exif_transpose(image)
    if transposed.mode != "RGBA":
        transposed = transposed.convert("RGBA")
    return transposed


def cover_fit(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Scale ``image`` uniformly so it covers ``size`` and crop the excess.

    Unlike a letterboxed fit no padding is ever added, and unlike a plain
    resize the aspect ratio is preserved.
    """
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError("Target size must be positive")
    box = LayoutEngine.cover_crop_box(image.size, (width, height))
    return image.resize((width, height), Image.Resampling.LANCZOS, box=box)


def rounded_mask(size: tuple[int, int], radius: float) -> Image.Image:
    """Return an ``L`` mask that is opaque inside a rounded rectangle."""
    mask = Image.new("L", size, 0)
    draw = ImageDraw.Draw(mask)
    radius = _clamp_radius(size, radius)
    draw.rounded_rectangle((0, 0, size[0] - 1, size[1] - 1), radius=radius, fill=255)
    return mask


def draw_border(
    image: Image.Image,
    *,
    radius: float,
    width: int,
    color: ColorValue,
) -> Image.Image:
    """Stroke a rounded border inside the edges of ``image``."""
    if width <= 0:
        return image.copy()
    base = image if image.mode == "RGBA" else image.convert("RGBA")
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    draw.rounded_rectangle(
        (0, 0, base.width - 1, base.height - 1),
        radius=_clamp_radius(base.size, radius),
        outline=tuple(color),
        width=width,
    )
    return Image.alpha_composite(base, overlay)


def flatten(image: Image.Image, background: ColorValue) -> Image.Image:
    """Composite ``image`` onto an opaque ``background`` and return RGB."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    opaque = (background[0], background[1], background[2], 255)
    canvas = Image.new("RGBA", image.size, opaque)
    canvas.alpha_composite(image)
    return canvas.convert("RGB")


def _clamp_radius(size: tuple[int, int], radius: float) -> int:
    return max(0, min(int(round(radius)), min(size) // 2))


__all__ = [
    "normalize_orientation",
    "cover_fit",
    "rounded_mask",
    "draw_border",
    "flatten",
]
