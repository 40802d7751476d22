"""Editing controller for a collage session.

:class:`CollageEditor` is the service layer between a front end (a Qt
window, the CLI or tests) and the headless core.  It owns the
:class:`~collage.model.CollageModel` for the session together with the
current :class:`~collage.layout.LayoutConfig`, and exposes the actions the
canvas offers: context-menu reordering, drag-and-drop reordering by identity
token, deletion, ingestion and export.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from ..ingest import ImageIngestor
from ..layout import LayoutConfig, LayoutEngine, LayoutPlan
from ..model import CollageEntry, CollageModel
from utils.image_loader import ImageSource
from utils.renderer import EXPORT_PRESETS, CollageRenderer, ExportPreset


class UnknownPresetError(ValueError):
    """Raised when an export preset name is not registered."""


class CollageEditor:
    """Manage one collage session independently of UI widgets."""

    def __init__(
        self,
        model: Optional[CollageModel] = None,
        layout: Optional[LayoutConfig] = None,
        *,
        renderer: Optional[CollageRenderer] = None,
        ingestor: Optional[ImageIngestor] = None,
    ) -> None:
        self.model = model if model is not None else CollageModel()
        self._layout = (layout or LayoutConfig()).validate()
        self.renderer = renderer or CollageRenderer()
        self.ingestor = ingestor or ImageIngestor(self.model)
        self.logger = logging.getLogger("collage_grid.editor")

    # ------------------------------------------------------------------
    # Layout state
    # ------------------------------------------------------------------
    @property
    def layout(self) -> LayoutConfig:
        return self._layout

    def update_layout(self, **changes: Any) -> LayoutConfig:
        """Replace layout parameters; invalid values leave the layout untouched."""
        self._layout = self._layout.replace(**changes).validate()
        return self._layout

    def set_columns(self, columns: int) -> int:
        """Set an explicit column count, or 0 for auto; returns effective columns."""
        self.update_layout(columns=max(0, int(columns)))
        return self.effective_columns

    @property
    def effective_columns(self) -> int:
        return LayoutEngine.effective_columns(len(self.model), self._layout.columns)

    @property
    def row_count(self) -> int:
        return LayoutEngine.row_count(len(self.model), self.effective_columns)

    def plan(self) -> LayoutPlan:
        return LayoutEngine.plan_layout(self.model.entries(), self._layout)

    # ------------------------------------------------------------------
    # Canvas actions
    # ------------------------------------------------------------------
    def add_images(self, sources: Iterable[ImageSource]) -> Dict[str, bool]:
        return self.ingestor.ingest(sources)

    def remove(self, index: int) -> Optional[CollageEntry]:
        return self.model.remove(index)

    def remove_token(self, token: uuid.UUID) -> Optional[CollageEntry]:
        index = self.model.index_of(token)
        if index is None:
            return None
        return self.model.remove(index)

    def move_up(self, index: int) -> bool:
        return self.model.move(index, max(0, index - 1))

    def move_down(self, index: int) -> bool:
        return self.model.move(index, min(len(self.model), index + 1))

    def move_to_top(self, index: int) -> bool:
        return self.model.move(index, 0)

    def move_to_bottom(self, index: int) -> bool:
        return self.model.move(index, len(self.model))

    def drop_on(self, token: uuid.UUID, target_index: int) -> bool:
        """Handle a drag of the entry identified by ``token`` onto ``target_index``.

        Returns ``True`` when the drop was accepted, i.e. the token belongs
        to this collage, even if the entry was dropped onto itself.
        """
        if not isinstance(token, uuid.UUID):
            return False
        source = self.model.index_of(token)
        if source is None:
            self.logger.debug("Ignoring drop of unknown token %s", token)
            return False
        if source != target_index:
            self.model.move(source, target_index)
        return True

    def clear(self) -> None:
        self.model.clear()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    @staticmethod
    def preset(name: str) -> ExportPreset:
        try:
            return EXPORT_PRESETS[name]
        except KeyError:
            raise UnknownPresetError(f"Export preset '{name}' not found") from None

    def export(
        self,
        output_path: Union[str, Path],
        *,
        preset: Optional[str] = None,
        quality: Optional[int] = None,
    ) -> Path:
        """Render the collage and write it to ``output_path``."""
        chosen = self.preset(preset) if preset else None
        if self.model.is_empty:
            self.logger.warning("Exporting an empty collage")
        return self.renderer.export(
            self.model.entries(),
            self._layout,
            output_path,
            preset=chosen,
            quality=quality,
        )
