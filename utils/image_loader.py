"""Decoding of dropped, picked or pasted images into Pillow handles."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union
from urllib.request import Request, urlopen

from PIL import Image, UnidentifiedImageError

from collage import config
from .image_operations import normalize_orientation
from .validation import is_remote_url, validate_image_path, validate_image_url

ImageSource = Union[str, Path, bytes, bytearray]

logger = logging.getLogger("collage_grid.loader")


class ImageLoadError(RuntimeError):
    """Raised when an image source cannot be read or decoded."""


def describe_source(source: ImageSource) -> str:
    """Return a short printable label for ``source``."""
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return str(source)


def load_image(source: ImageSource, *, timeout: float = config.URL_TIMEOUT_SECS) -> Image.Image:
    """
    Decode ``source`` into a fully loaded RGBA image.

    Args:
        source: A file path, an http(s) URL or raw encoded bytes
        timeout: Network timeout in seconds for URL sources

    Returns:
        Image.Image: Decoded image with EXIF orientation applied

    Raises:
        ImageLoadError: If the source is invalid or cannot be decoded
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
        elif isinstance(source, str) and is_remote_url(source):
            data = _fetch(validate_image_url(source), timeout)
        else:
            path = validate_image_path(source, config.SUPPORTED_IMAGE_FORMATS)
            data = path.read_bytes()
        return _decode(data)
    except ImageLoadError:
        raise
    except (ValueError, OSError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(f"Failed to load image {describe_source(source)}: {exc}") from exc


def _fetch(url: str, timeout: float) -> bytes:
    logger.info("Fetching remote image %s", url)
    request = Request(url, headers={"User-Agent": "collage-grid"})
    with urlopen(request, timeout=timeout) as response:
        return response.read()


def _decode(data: bytes) -> Image.Image:
    if not data:
        raise ImageLoadError("Empty image data")
    with Image.open(io.BytesIO(data)) as img:
        if max(img.size) > config.MAX_IMAGE_DIMENSION:
            raise ImageLoadError(
                f"Image dimensions {img.size[0]}x{img.size[1]} exceed "
                f"{config.MAX_IMAGE_DIMENSION}px"
            )
        img.load()
        return normalize_orientation(img)
