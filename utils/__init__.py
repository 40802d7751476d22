"""Utility package for collage grid."""

from . import image_loader, image_operations, renderer, validation

__all__ = ["image_loader", "image_operations", "renderer", "validation"]
