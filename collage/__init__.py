"""Headless collage model, grid layout and export engine."""

from .layout import CellRect, LayoutConfig, LayoutEngine, LayoutPlan
from .model import CollageEntry, CollageModel, ModelChange

__all__ = [
    "CellRect",
    "CollageEntry",
    "CollageModel",
    "LayoutConfig",
    "LayoutEngine",
    "LayoutPlan",
    "ModelChange",
]
