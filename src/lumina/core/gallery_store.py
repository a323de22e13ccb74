"""In-memory gallery of completed generations.

The gallery is intentionally simple:

- entries live in memory for the lifetime of the process
- list order is reverse-chronological (newest first)
- entries are never mutated or removed by the controller

Growth is unbounded unless ``max_entries`` is given.  A capacity turns the
store into a ring buffer with a single, explicit eviction policy: when a new
entry would exceed the capacity, the oldest entry (the last one in display
order) is dropped.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable

from .models import GeneratedImage

logger = logging.getLogger(__name__)

GalleryListener = Callable[[tuple[GeneratedImage, ...]], None]


class GalleryStore:
    """Newest-first sequence of :class:`GeneratedImage`.

    The generation controller is the only writer.  Readers receive tuple
    snapshots so they cannot reorder or truncate the store.

    Args:
        max_entries: Optional capacity; None keeps every entry
    """

    def __init__(self, max_entries: int | None = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self._entries: deque[GeneratedImage] = deque(maxlen=max_entries)
        self._listeners: list[GalleryListener] = []

    def commit(self, image: GeneratedImage) -> None:
        """Prepend a completed image.

        Duplicate prompts each produce their own entry; nothing is deduplicated.
        """
        evicted = None
        if self.max_entries is not None and len(self._entries) == self.max_entries:
            evicted = self._entries[-1]

        self._entries.appendleft(image)

        if evicted is not None:
            logger.info(f"Gallery at capacity ({self.max_entries}), dropped oldest entry {evicted.id}")
        logger.debug(f"Committed image {image.id} (gallery size={len(self._entries)})")

        snapshot = self.list()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Gallery listener failed: {e}", exc_info=True)

    def list(self) -> tuple[GeneratedImage, ...]:
        """Return the current entries in display order (newest first)."""
        return tuple(self._entries)

    def get(self, image_id: str) -> GeneratedImage | None:
        """Return the newest entry with ``image_id``, or None."""
        return next((image for image in self._entries if image.id == image_id), None)

    @property
    def newest(self) -> GeneratedImage | None:
        return self._entries[0] if self._entries else None

    def subscribe(self, listener: GalleryListener) -> Callable[[], None]:
        """Register a listener called with the new snapshot after each commit.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"GalleryStore(entries={len(self._entries)}, max_entries={self.max_entries})"


def paginate_gallery_entries(entries, page: int, per_page: int) -> dict:
    """Paginate gallery entries and clamp the requested page to valid bounds.

    Args:
        entries: Gallery entries in display order.
        page: Requested one-based page number.
        per_page: Requested items per page.

    Returns:
        Dictionary containing ``total``, ``page``, ``per_page``, ``pages``, and
        ``images`` for the resolved page.
    """
    entries = list(entries)
    total = len(entries)
    pages = (total + per_page - 1) // per_page if total > 0 else 1
    resolved_page = min(max(page, 1), pages)

    start = (resolved_page - 1) * per_page
    end = start + per_page

    return {
        "total": total,
        "page": resolved_page,
        "per_page": per_page,
        "pages": pages,
        "images": entries[start:end],
    }
