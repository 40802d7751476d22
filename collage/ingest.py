"""Parallel image ingestion feeding a :class:`~collage.model.CollageModel`.

Decoding runs on a thread pool; every successfully decoded image is funnelled
back through :meth:`CollageModel.add`, which serialises the appends.  Results
are added in submission order, so the collage order matches the order the
sources were dropped or picked regardless of which decode finishes first.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from PIL import Image

from . import config
from .model import CollageEntry, CollageModel
from utils.image_loader import ImageLoadError, ImageSource, describe_source, load_image

logger = logging.getLogger("collage_grid.ingest")

Loader = Callable[[ImageSource], Image.Image]


class ImageIngestor:
    """Loads images concurrently and appends them to a model."""

    def __init__(
        self,
        model: CollageModel,
        *,
        loader: Optional[Loader] = None,
        max_workers: int = config.INGEST_WORKERS,
    ) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than zero")
        self.model = model
        self._loader: Loader = loader or load_image
        self._max_workers = max_workers

    def ingest(self, sources: Iterable[ImageSource]) -> Dict[str, bool]:
        """
        Decode ``sources`` in parallel and add the successes to the model.

        Args:
            sources: File paths, http(s) URLs or raw encoded bytes

        Returns:
            Dict[str, bool]: Mapping of source label to success status.  Raw
            bytes are labelled with their position, e.g. ``"#2 <512 bytes>"``,
            so equal-length buffers keep separate results.
        """
        pending = list(sources)
        results: Dict[str, bool] = {}
        if not pending:
            return results

        added = 0
        futures: List[Tuple[ImageSource, Future]] = []
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            for source in pending:
                futures.append((source, pool.submit(self._loader, source)))

            for position, (source, future) in enumerate(futures):
                label = _result_label(position, source)
                try:
                    image = future.result()
                except ImageLoadError as exc:
                    logger.warning("Skipping image %s: %s", label, exc)
                    results[label] = False
                    continue
                except Exception as exc:  # noqa: BLE001 - loader plug-ins may raise anything
                    logger.error("Failed to load %s: %s", label, exc)
                    results[label] = False
                    continue
                self.model.add(CollageEntry(image))
                results[label] = True
                added += 1

        logger.info("Ingested %d of %d image(s)", added, len(pending))
        return results

    def ingest_one(self, source: ImageSource) -> Optional[CollageEntry]:
        """Decode a single source synchronously; ``None`` on failure."""
        try:
            image = self._loader(source)
        except ImageLoadError as exc:
            logger.warning("Skipping image %s: %s", describe_source(source), exc)
            return None
        return self.model.add(CollageEntry(image))


def _result_label(position: int, source: ImageSource) -> str:
    label = describe_source(source)
    if isinstance(source, (bytes, bytearray)):
        return f"#{position} {label}"
    return label
