"""Ordered collage model.

:class:`CollageModel` holds the images placed on the canvas in display
order.  It is UI agnostic so it can be unit tested without a Qt
environment: a UI adapter observes it through :meth:`CollageModel.subscribe`
(see :mod:`collage.bridge` for the Qt flavour).

Out-of-range operations are silently ignored instead of raising; callers
that need to know whether anything happened inspect the return value.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, Iterator, List, Optional, Tuple

logger = logging.getLogger("collage_grid.model")


@dataclass(frozen=True, eq=False)
class CollageEntry:
    """One image held by the model plus its identity token.

    Entries compare by ``token`` only; the image handle is opaque and is
    never decoded or transformed by the model.
    """

    image: Any
    token: uuid.UUID = field(default_factory=uuid.uuid4)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CollageEntry):
            return NotImplemented
        return self.token == other.token

    def __hash__(self) -> int:
        return hash(self.token)


@dataclass(frozen=True)
class ModelChange:
    """Describes one effective mutation of a :class:`CollageModel`.

    ``kind`` is one of ``"added"``, ``"removed"``, ``"moved"`` or
    ``"cleared"``.  ``index`` is the affected position (the source position
    for moves) and ``target`` the final position of a moved entry.
    """

    kind: str
    index: int = -1
    target: int = -1
    entry: Optional[CollageEntry] = None


Listener = Callable[[ModelChange], None]


class CollageModel:
    """Ordered sequence of :class:`CollageEntry` objects.

    Every mutation holds an internal lock for its whole duration, so several
    ingestion threads may call :meth:`add` concurrently without corrupting
    ordering or length.  Listeners are notified after the lock is released.
    """

    def __init__(self) -> None:
        self._entries: List[CollageEntry] = []
        self._listeners: List[Listener] = []
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[CollageEntry]:
        return iter(self.entries())

    def __getitem__(self, index: int) -> CollageEntry:
        with self._lock:
            return self._entries[index]

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def entries(self) -> Tuple[CollageEntry, ...]:
        """Return an immutable snapshot of the entries in display order."""
        with self._lock:
            return tuple(self._entries)

    def tokens(self) -> List[uuid.UUID]:
        with self._lock:
            return [entry.token for entry in self._entries]

    def index_of(self, token: uuid.UUID) -> Optional[int]:
        """Return the position of the entry with ``token`` or ``None``."""
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.token == token:
                    return index
        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add(self, entry: CollageEntry) -> CollageEntry:
        """Append ``entry`` so it becomes the last item.

        Re-adding an entry whose token is already present is ignored to keep
        tokens unique.
        """
        with self._lock:
            if any(existing.token == entry.token for existing in self._entries):
                logger.debug("Ignoring duplicate entry %s", entry.token)
                return entry
            self._entries.append(entry)
            index = len(self._entries) - 1
        self._notify(ModelChange("added", index=index, target=index, entry=entry))
        return entry

    def add_image(self, image: Any) -> CollageEntry:
        """Wrap ``image`` in a fresh entry and append it."""
        return self.add(CollageEntry(image))

    def remove(self, index: int) -> Optional[CollageEntry]:
        """Delete the entry at ``index``; no-op outside ``[0, len)``."""
        with self._lock:
            if not 0 <= index < len(self._entries):
                return None
            entry = self._entries.pop(index)
        self._notify(ModelChange("removed", index=index, entry=entry))
        return entry

    def move(self, source: int, target: int) -> bool:
        """Move the entry at ``source`` so it lands at ``target``.

        ``target`` may equal ``len(self)`` to request the end.  The insert
        position is clamped against the length *after* the entry has been
        removed, so moving forwards places the entry one slot earlier than a
        pre-removal reading of ``target`` would suggest.  Returns ``True`` if
        the order changed.
        """
        with self._lock:
            count = len(self._entries)
            if source == target or not 0 <= source < count or not 0 <= target <= count:
                return False
            entry = self._entries.pop(source)
            position = min(max(0, target), len(self._entries))
            self._entries.insert(position, entry)
        if position == source:
            return False
        self._notify(ModelChange("moved", index=source, target=position, entry=entry))
        return True

    def clear(self) -> None:
        with self._lock:
            if not self._entries:
                return
            self._entries.clear()
        self._notify(ModelChange("cleared"))

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, change: ModelChange) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(change)
            except Exception:  # noqa: BLE001 - observers are isolated from each other
                logger.exception("Model listener failed for %s", change.kind)
