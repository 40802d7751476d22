"""Qt signal bridge for UI adapters observing a :class:`CollageModel`."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from .model import CollageModel, ModelChange

logger = logging.getLogger("collage_grid.bridge")


class CollageModelBridge(QObject):
    """Re-emit model change events as Qt signals.

    A view binds to these signals instead of polling the model.  Signals are
    emitted on the thread that mutated the model; Qt queues them to receivers
    living on other threads.
    """

    itemAdded = Signal(int)
    itemRemoved = Signal(int)
    itemMoved = Signal(int, int)
    cleared = Signal()
    countChanged = Signal(int)
    changed = Signal()

    def __init__(self, model: CollageModel, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.model = model
        self._unsubscribe: Optional[Callable[[], None]] = model.subscribe(self._on_change)

    def _on_change(self, change: ModelChange) -> None:
        if change.kind == "added":
            self.itemAdded.emit(change.index)
        elif change.kind == "removed":
            self.itemRemoved.emit(change.index)
        elif change.kind == "moved":
            self.itemMoved.emit(change.index, change.target)
        elif change.kind == "cleared":
            self.cleared.emit()
        else:
            logger.warning("Unknown model change kind: %s", change.kind)
            return
        if change.kind != "moved":
            self.countChanged.emit(len(self.model))
        self.changed.emit()

    def detach(self) -> None:
        """Stop listening to the model."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
