"""Controller layer for decoupling UI state management from widgets."""

from .editor import CollageEditor, UnknownPresetError

__all__ = [
    "CollageEditor",
    "UnknownPresetError",
]
