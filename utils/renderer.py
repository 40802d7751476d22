"""Raster export of a collage layout.

:class:`CollageRenderer` is the export sink: it paints the placements of a
:class:`~collage.layout.LayoutPlan` onto a canvas with Pillow and encodes the
result as PNG or JPEG.  Cells are filled with a cover-crop, clipped to a
rounded rectangle and stroked with an optional border.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from PIL import Image

from collage import config
from collage.layout import LayoutConfig, LayoutEngine, LayoutPlan
from .image_operations import cover_fit, draw_border, flatten, rounded_mask
from .validation import validate_output_path

logger = logging.getLogger("collage_grid.renderer")


class ExportError(RuntimeError):
    """Raised when a collage cannot be rendered or written."""


@dataclass(frozen=True, slots=True)
class ExportPreset:
    """Named export settings offered by the export menu."""

    name: str
    format: str
    base_cell_size: int
    scale: Optional[float] = None  # None keeps the layout's export scale
    quality: int = config.QUALITY_MAX

    @property
    def default_filename(self) -> str:
        return config.DEFAULT_JPEG_NAME if self.format == "JPEG" else config.DEFAULT_PNG_NAME

    def apply(self, layout: LayoutConfig) -> LayoutConfig:
        changes: Dict[str, Any] = {"base_cell_size": self.base_cell_size}
        if self.scale is not None:
            changes["export_scale"] = self.scale
        return layout.replace(**changes)


EXPORT_PRESETS: Dict[str, ExportPreset] = {
    **{
        f"png-{scale}x": ExportPreset(f"png-{scale}x", "PNG", config.PNG_BASE_CELL_SIZE, scale=scale)
        for scale in config.EXPORT_SCALES
    },
    "jpeg-high": ExportPreset(
        "jpeg-high", "JPEG", config.JPEG_BASE_CELL_SIZE, quality=config.JPEG_QUALITY_HIGH
    ),
    "jpeg-medium": ExportPreset(
        "jpeg-medium", "JPEG", config.JPEG_BASE_CELL_SIZE, quality=config.JPEG_QUALITY_MEDIUM
    ),
}


def format_for_path(path: Union[str, Path]) -> str:
    """Map a file suffix to a Pillow format name."""
    fmt = Path(path).suffix[1:].upper()
    if fmt == "JPG":
        fmt = "JPEG"
    if fmt not in {"PNG", "JPEG"}:
        raise ValueError(f"Unsupported export format: {Path(path).suffix}")
    return fmt


class CollageRenderer:
    """Paints layout plans and writes them to disk."""

    def render(self, plan: LayoutPlan, layout: LayoutConfig) -> Image.Image:
        """
        Paint ``plan`` at ``layout.export_scale``.

        Args:
            plan: Geometry from :meth:`LayoutEngine.plan_layout`
            layout: Colours, radius, border and scale to paint with

        Returns:
            Image.Image: RGBA canvas of ``plan.pixel_size(scale)``
        """
        scale = layout.export_scale
        canvas = Image.new("RGBA", plan.pixel_size(scale), tuple(layout.canvas_background))
        radius = layout.corner_radius * scale
        border = int(round(layout.border_width * scale))
        for placement in plan.placements:
            left, top, right, bottom = placement.rect.box(scale)
            size = (right - left, bottom - top)
            if size[0] <= 0 or size[1] <= 0:
                continue
            image = getattr(placement.entry, "image", placement.entry)
            tile = Image.new("RGBA", size, tuple(layout.item_background))
            tile.alpha_composite(cover_fit(_as_rgba(image), size))
            tile = draw_border(tile, radius=radius, width=border, color=layout.border_color)
            canvas.paste(tile, (left, top), rounded_mask(size, radius))
        logger.debug(
            "Rendered %d cell(s) on %dx%d canvas",
            len(plan.placements),
            canvas.width,
            canvas.height,
        )
        return canvas

    def render_entries(self, entries: Sequence[Any], layout: LayoutConfig) -> Image.Image:
        return self.render(LayoutEngine.plan_layout(entries, layout), layout)

    def save(
        self,
        image: Image.Image,
        output_path: Union[str, Path],
        *,
        quality: int = config.QUALITY_MAX,
        background: Sequence[int] = config.DEFAULT_CANVAS_BACKGROUND,
    ) -> Path:
        """
        Encode ``image`` to ``output_path``; the suffix selects PNG or JPEG.

        Raises:
            ValueError: If the path is invalid
            ExportError: If encoding or writing fails
        """
        path = validate_output_path(output_path, config.EXPORT_FORMATS)
        fmt = format_for_path(path)
        quality = max(config.QUALITY_MIN, min(config.QUALITY_MAX, int(quality)))

        save_params: Dict[str, Any] = {"format": fmt}
        if fmt == "JPEG":
            image = flatten(image, tuple(background))
            save_params.update({
                "quality": quality,
                "optimize": True,
                "progressive": True,
            })
        else:
            save_params.update({
                "optimize": True,
                "compress_level": 6,
            })
        try:
            image.save(str(path), **save_params)
        except (OSError, ValueError) as exc:
            logger.error("Export to %s failed: %s", path, exc)
            raise ExportError(f"Could not save the collage: {exc}") from exc
        logger.info("Saved collage to %s (%dx%d)", path, image.width, image.height)
        return path

    def export(
        self,
        entries: Sequence[Any],
        layout: LayoutConfig,
        output_path: Union[str, Path],
        *,
        preset: Optional[ExportPreset] = None,
        quality: Optional[int] = None,
    ) -> Path:
        """Plan, render and save ``entries`` in one step.

        Raises:
            ValueError: If ``output_path`` does not match the preset's format
        """
        if preset is not None:
            if format_for_path(output_path) != preset.format:
                raise ValueError(
                    f"Preset '{preset.name}' writes {preset.format}; "
                    f"{Path(output_path).name} has the wrong extension"
                )
            layout = preset.apply(layout)
            if quality is None:
                quality = preset.quality
        layout.validate()
        image = self.render_entries(entries, layout)
        return self.save(
            image,
            output_path,
            quality=config.QUALITY_MAX if quality is None else quality,
            background=layout.canvas_background,
        )


def _as_rgba(image: Any) -> Image.Image:
    if not isinstance(image, Image.Image):
        raise ExportError(f"Unsupported image handle: {type(image).__name__}")
    return image if image.mode == "RGBA" else image.convert("RGBA")
