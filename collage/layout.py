"""Grid layout and export sizing for collages.

All functions here are pure: they map a model size and a
:class:`LayoutConfig` to geometry and keep no memory of earlier calls.
Cells are square and laid out row-major in model order; an incomplete final
row leaves its trailing cells empty rather than stretching the filled ones.
"""

from __future__ import annotations

import math
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from . import config

Color = Tuple[int, int, int, int]
Size = Tuple[float, float]

# Hand-tuned column counts for small collages; larger counts fall back to a
# near-square grid.  Rows are inclusive (low, high, columns) ranges.
_AUTO_COLUMNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 1),
    (2, 2, 2),
    (3, 3, 3),
    (4, 4, 2),
    (5, 9, 3),
    (10, 16, 4),
    (17, 20, 5),
)


@dataclass(frozen=True)
class LayoutConfig:
    """Presentation parameters for one layout computation."""

    columns: int = config.DEFAULT_COLUMNS
    spacing: float = config.DEFAULT_SPACING
    corner_radius: float = config.DEFAULT_CORNER_RADIUS
    border_width: float = config.DEFAULT_BORDER_WIDTH
    base_cell_size: float = config.PNG_BASE_CELL_SIZE
    export_scale: float = config.DEFAULT_EXPORT_SCALE
    canvas_background: Color = config.DEFAULT_CANVAS_BACKGROUND
    item_background: Color = config.DEFAULT_ITEM_BACKGROUND
    border_color: Color = config.DEFAULT_BORDER_COLOR

    @property
    def is_auto(self) -> bool:
        return self.columns == 0

    def validate(self) -> "LayoutConfig":
        """
        Check value ranges.

        Returns:
            LayoutConfig: ``self`` so calls can be chained

        Raises:
            ValueError: If any parameter is out of range
        """
        if self.columns < 0:
            raise ValueError("columns must be 0 (auto) or positive")
        for name in ("spacing", "corner_radius", "border_width"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.base_cell_size <= 0:
            raise ValueError("base_cell_size must be positive")
        if self.export_scale <= 0:
            raise ValueError("export_scale must be positive")
        for name in ("canvas_background", "item_background", "border_color"):
            channels = getattr(self, name)
            if len(channels) != 4 or not all(0 <= int(c) <= 255 for c in channels):
                raise ValueError(f"{name} must be four channels in 0..255")
        return self

    def replace(self, **changes: Any) -> "LayoutConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "columns": self.columns,
            "spacing": self.spacing,
            "cornerRadius": self.corner_radius,
            "borderWidth": self.border_width,
            "baseCellSize": self.base_cell_size,
            "exportScale": self.export_scale,
            "canvasBackground": list(self.canvas_background),
            "itemBackground": list(self.item_background),
            "borderColor": list(self.border_color),
        }


@dataclass(frozen=True, slots=True)
class CellRect:
    """A cell rectangle in unscaled canvas units."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def box(self, scale: float = 1) -> Tuple[int, int, int, int]:
        """Return the integer pixel box ``(left, top, right, bottom)`` at ``scale``."""
        return (
            round(self.x * scale),
            round(self.y * scale),
            round(self.right * scale),
            round(self.bottom * scale),
        )


@dataclass(frozen=True, slots=True)
class CellPlacement:
    """An entry assigned to its grid slot."""

    index: int
    row: int
    column: int
    entry: Any
    rect: CellRect


@dataclass(frozen=True)
class LayoutPlan:
    """Complete geometry for rendering a collage."""

    columns: int
    rows: int
    width: float
    height: float
    cell_size: float
    placements: List[CellPlacement] = field(default_factory=list)
    empty_cells: List[CellRect] = field(default_factory=list)

    @property
    def size(self) -> Size:
        return self.width, self.height

    def pixel_size(self, scale: float = 1) -> Tuple[int, int]:
        return max(1, round(self.width * scale)), max(1, round(self.height * scale))


class LayoutEngine:
    """Stateless grid computations shared by the editor and the exporter."""

    @staticmethod
    def effective_columns(item_count: int, requested_columns: int = 0) -> int:
        """
        Resolve the column count actually used for layout.

        Args:
            item_count (int): Number of entries in the model
            requested_columns (int): Explicit column count, 0 for auto

        Returns:
            int: Column count, always at least 1
        """
        item_count = max(0, int(item_count))
        requested_columns = max(0, int(requested_columns))
        if requested_columns:
            return max(1, requested_columns)
        for low, high, columns in _AUTO_COLUMNS:
            if low <= item_count <= high:
                return columns
        # round half away from zero
        return max(4, math.floor(math.sqrt(item_count) + 0.5))

    @staticmethod
    def row_count(item_count: int, columns: int) -> int:
        item_count = max(0, int(item_count))
        if item_count == 0:
            return 0
        columns = max(1, int(columns))
        return (item_count + columns - 1) // columns

    @staticmethod
    def export_size(columns: int, rows: int, spacing: float, base_cell_size: float) -> Size:
        """
        Compute the unscaled export canvas size.

        The canvas holds ``columns`` x ``rows`` cells of ``base_cell_size``
        with ``spacing`` around and between them, floored at
        ``MIN_EXPORT_WIDTH`` x ``MIN_EXPORT_HEIGHT``.  With no rows (an empty
        model) the minimum canvas is returned as is.
        """
        columns = max(1, columns)
        rows = max(0, rows)
        if rows == 0:
            return config.MIN_EXPORT_WIDTH, config.MIN_EXPORT_HEIGHT
        width = base_cell_size * columns + spacing * (columns + 1)
        height = base_cell_size * rows + spacing * (rows + 1)
        return max(width, config.MIN_EXPORT_WIDTH), max(height, config.MIN_EXPORT_HEIGHT)

    @staticmethod
    def cell_edge(export_width: float, columns: int, spacing: float) -> float:
        columns = max(1, columns)
        return max(0.0, (export_width - spacing * (columns + 1)) / columns)

    @staticmethod
    def cell_rect(index: int, columns: int, rows: int, export_size: Size, spacing: float) -> CellRect:
        """
        Calculate the square rectangle of the cell at ``index``.

        Args:
            index (int): Position in model order
            columns (int): Effective column count
            rows (int): Row count (informational; the rect is computed for
                any index so empty trailing slots can be addressed too)
            export_size (Tuple[float, float]): Canvas size from :meth:`export_size`
            spacing (float): Gap around and between cells

        Returns:
            CellRect: The cell rectangle in canvas units
        """
        columns = max(1, columns)
        index = max(0, index)
        edge = LayoutEngine.cell_edge(export_size[0], columns, spacing)
        row, column = divmod(index, columns)
        return CellRect(
            x=spacing + column * (edge + spacing),
            y=spacing + row * (edge + spacing),
            width=edge,
            height=edge,
        )

    @staticmethod
    def cover_crop_box(image_size: Tuple[int, int], cell_size: Tuple[float, float]) -> Tuple[float, float, float, float]:
        """Return the centred source box that scales ``image_size`` to cover ``cell_size``.

        The box keeps the cell's aspect ratio, so resizing it to the cell is a
        uniform scale; whatever falls outside is cropped.
        """
        image_w, image_h = image_size
        cell_w, cell_h = cell_size
        if image_w <= 0 or image_h <= 0 or cell_w <= 0 or cell_h <= 0:
            return 0.0, 0.0, float(max(image_w, 0)), float(max(image_h, 0))
        scale = max(cell_w / image_w, cell_h / image_h)
        crop_w = cell_w / scale
        crop_h = cell_h / scale
        left = (image_w - crop_w) / 2
        top = (image_h - crop_h) / 2
        return left, top, left + crop_w, top + crop_h

    @classmethod
    def plan_layout(cls, entries: Sequence[Any], layout: LayoutConfig) -> LayoutPlan:
        """Build the full :class:`LayoutPlan` for ``entries`` in model order.

        The grid is centred vertically on the canvas: when the minimum canvas
        size adds height the grid sits in the middle, and when the cells are
        taller than the canvas the overflow is split between top and bottom.
        """
        count = len(entries)
        columns = cls.effective_columns(count, layout.columns)
        rows = cls.row_count(count, columns)
        size = cls.export_size(columns, rows, layout.spacing, layout.base_cell_size)
        edge = cls.cell_edge(size[0], columns, layout.spacing)
        grid_height = edge * rows + layout.spacing * (rows + 1)
        offset = (size[1] - grid_height) / 2 if rows else 0.0

        def rect_at(index: int) -> CellRect:
            rect = cls.cell_rect(index, columns, rows, size, layout.spacing)
            return dataclasses.replace(rect, y=rect.y + offset)

        placements = []
        for index, entry in enumerate(entries):
            row, column = divmod(index, columns)
            placements.append(CellPlacement(index, row, column, entry, rect_at(index)))
        empty_cells = [rect_at(index) for index in range(count, rows * columns)]
        return LayoutPlan(
            columns=columns,
            rows=rows,
            width=size[0],
            height=size[1],
            cell_size=edge,
            placements=placements,
            empty_cells=empty_cells,
        )


effective_columns = LayoutEngine.effective_columns
row_count = LayoutEngine.row_count
export_size = LayoutEngine.export_size
cell_rect = LayoutEngine.cell_rect
plan_layout = LayoutEngine.plan_layout

__all__ = [
    "CellPlacement",
    "CellRect",
    "LayoutConfig",
    "LayoutEngine",
    "LayoutPlan",
    "cell_rect",
    "effective_columns",
    "export_size",
    "plan_layout",
    "row_count",
]
