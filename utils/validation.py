"""Input validation helpers for image sources, output paths and colours."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple, Union
from urllib.parse import urlparse

REMOTE_SCHEMES = {"http", "https"}


def _has_url_scheme(path_str: str) -> bool:
    """Return True if *path_str* looks like a URL with a scheme.

    Single-letter schemes such as ``"C"`` are treated as drive letters on
    Windows and therefore ignored.
    """
    parsed = urlparse(path_str)
    return bool(parsed.scheme and len(parsed.scheme) > 1)


def is_remote_url(value: str) -> bool:
    """Return True for ``http``/``https`` URLs with a host."""
    parsed = urlparse(value)
    return parsed.scheme.lower() in REMOTE_SCHEMES and bool(parsed.netloc)


def validate_image_url(url: str) -> str:
    """Validate a remote image *url*; only http(s) with a host is accepted."""
    if not is_remote_url(url):
        raise ValueError(f"Unsupported URL: {url}")
    return url


def validate_image_path(path: Union[str, Path], allowed_exts: Iterable[str]) -> Path:
    """Validate a user-supplied image *path*.

    The path must point to an existing file with an allowed extension and must
    not include a URL scheme.  Returns the resolved ``Path`` object.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise ValueError("URLs are not allowed")

    p = Path(path_str).expanduser()
    try:
        p = p.resolve(strict=True)
    except FileNotFoundError as exc:
        raise ValueError(f"File does not exist: {path_str}") from exc

    if not p.is_file():
        raise ValueError(f"Not a file: {path_str}")

    if p.suffix.lower() not in _normalise_exts(allowed_exts):
        raise ValueError(f"Unsupported file extension: {p.suffix}")

    return p


def validate_output_path(path: Union[str, Path], allowed_exts: Iterable[str]) -> Path:
    """Validate an export file *path*.

    Ensures the directory exists, the extension is allowed and the path does not
    contain a URL scheme.  Returns the resolved ``Path``.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise ValueError("URLs are not allowed")

    p = Path(path_str).expanduser().resolve()

    if not p.parent.exists():
        raise ValueError(f"Directory does not exist: {p.parent}")

    if p.suffix.lower() not in _normalise_exts(allowed_exts):
        raise ValueError(f"Unsupported file extension: {p.suffix}")

    return p


def parse_color(value: str) -> Tuple[int, int, int, int]:
    """Parse ``#RRGGBB`` or ``#RRGGBBAA`` (leading ``#`` optional) into RGBA."""
    text = value.strip().lstrip("#")
    if len(text) not in (6, 8):
        raise ValueError(f"Invalid colour: {value!r}")
    try:
        channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
    except ValueError as exc:
        raise ValueError(f"Invalid colour: {value!r}") from exc
    if len(channels) == 3:
        channels.append(255)
    return channels[0], channels[1], channels[2], channels[3]


def _normalise_exts(exts: Iterable[str]) -> set[str]:
    return {f".{ext.lower().lstrip('.')}" for ext in exts}
