"""Command-line entry point: compose image files into a single collage file.

Example::

    collage-grid a.jpg b.png https://example.com/c.webp -o collage.png --preset png-2x
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Sequence

from collage import config
from collage.controllers import CollageEditor
from collage.layout import LayoutConfig
from utils.renderer import EXPORT_PRESETS, ExportError
from utils.validation import parse_color


def configure_logging(log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure and return the application logger.

    The handler setup is idempotent to avoid duplicate handlers when the module
    is imported multiple times (e.g., in tests). A rotating file handler limits
    on-disk log growth while mirroring output to stdout.
    """

    logger = logging.getLogger(config.LOGGER_NAME)
    if logger.handlers:
        return logger

    level_name = os.environ.get(config.LOG_LEVEL_ENV, "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    log_path = (log_dir or Path(__file__).resolve().parent) / config.LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    logger.propagate = False

    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collage-grid",
        description="Arrange images in a grid and export a single PNG or JPEG.",
    )
    parser.add_argument("images", nargs="+", help="image files or http(s) URLs, in display order")
    parser.add_argument("-o", "--output", default=None,
                        help="output file (.png, .jpg or .jpeg); defaults to the "
                             "preset's file name or collage.png")
    parser.add_argument("-c", "--columns", type=int, default=config.DEFAULT_COLUMNS,
                        help="column count, 0 for automatic")
    parser.add_argument("--spacing", type=float, default=config.DEFAULT_SPACING)
    parser.add_argument("--corner-radius", type=float, default=config.DEFAULT_CORNER_RADIUS)
    parser.add_argument("--border-width", type=float, default=config.DEFAULT_BORDER_WIDTH)
    parser.add_argument("--cell-size", type=float, default=None,
                        help="base cell size in points (defaults by output format)")
    parser.add_argument("--scale", type=float, default=config.DEFAULT_EXPORT_SCALE,
                        help="export scale multiplier")
    parser.add_argument("--preset", choices=sorted(EXPORT_PRESETS), default=None,
                        help="named export preset; overrides cell size and scale")
    parser.add_argument("--quality", type=int, default=None,
                        help=f"JPEG quality {config.QUALITY_MIN}-{config.QUALITY_MAX}")
    parser.add_argument("--canvas-bg", type=parse_color,
                        default=config.DEFAULT_CANVAS_BACKGROUND, help="#RRGGBB[AA]")
    parser.add_argument("--item-bg", type=parse_color,
                        default=config.DEFAULT_ITEM_BACKGROUND, help="#RRGGBB[AA]")
    parser.add_argument("--border-color", type=parse_color,
                        default=config.DEFAULT_BORDER_COLOR, help="#RRGGBB[AA]")
    return parser


def _output_path(args: argparse.Namespace) -> str:
    if args.output:
        return args.output
    if args.preset:
        return EXPORT_PRESETS[args.preset].default_filename
    return config.DEFAULT_PNG_NAME


def _layout_from_args(args: argparse.Namespace) -> LayoutConfig:
    cell_size = args.cell_size
    if cell_size is None:
        is_jpeg = Path(args.output).suffix.lower() in {".jpg", ".jpeg"}
        cell_size = config.JPEG_BASE_CELL_SIZE if is_jpeg else config.PNG_BASE_CELL_SIZE
    return LayoutConfig(
        columns=args.columns,
        spacing=args.spacing,
        corner_radius=args.corner_radius,
        border_width=args.border_width,
        base_cell_size=cell_size,
        export_scale=args.scale,
        canvas_background=args.canvas_bg,
        item_background=args.item_bg,
        border_color=args.border_color,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.output = _output_path(args)
    logger = configure_logging()

    try:
        layout = _layout_from_args(args).validate()
    except ValueError as exc:
        parser.error(str(exc))

    editor = CollageEditor(layout=layout)
    results = editor.add_images(args.images)
    if not any(results.values()):
        logger.error("None of the %d image(s) could be loaded", len(args.images))
        return 1

    logger.info(
        "Layout: %d image(s), %d column(s), %d row(s)",
        len(editor.model),
        editor.effective_columns,
        editor.row_count,
    )
    try:
        saved = editor.export(args.output, preset=args.preset, quality=args.quality)
    except (ValueError, ExportError) as exc:
        logger.error("Export failed: %s", exc)
        return 1
    logger.info("Collage written to %s", saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
