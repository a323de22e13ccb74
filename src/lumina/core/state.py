"""State management for the single generation session.

The session holds one :class:`~lumina.core.models.GenerationState` snapshot:
the prompt being typed, the selected aspect ratio, the in-flight flag and the
last error.  The store owns it explicitly and notifies subscribers whenever it
changes, so a presentation layer can observe it instead of reaching into
module globals.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from .models import ASPECT_RATIOS, AspectRatio, GenerationState

logger = logging.getLogger(__name__)

StateListener = Callable[[GenerationState], None]


class GenerationStateStore:
    """Owner of the per-session :class:`GenerationState`.

    Writers are the generation controller and the user-input handlers.  All
    writes happen on the event loop thread, so no locking is needed.

    Args:
        aspect_ratio: Initial ratio selection
    """

    def __init__(self, aspect_ratio: AspectRatio | str = AspectRatio.SQUARE):
        self._state = GenerationState(aspect_ratio=AspectRatio.coerce(aspect_ratio))
        self._listeners: list[StateListener] = []

    @property
    def snapshot(self) -> GenerationState:
        return self._state

    def update(self, **changes) -> GenerationState:
        """Replace the snapshot with ``changes`` applied and notify subscribers.

        Args:
            **changes: Field values for :class:`GenerationState`

        Returns:
            The new snapshot
        """
        if "aspect_ratio" in changes:
            changes["aspect_ratio"] = AspectRatio.coerce(changes["aspect_ratio"])

        self._state = replace(self._state, **changes)
        self._notify()
        return self._state

    def set_prompt(self, prompt: str) -> GenerationState:
        """Record the prompt text as typed; allowed while a request is in flight."""
        return self.update(prompt=prompt)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every new snapshot.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)

    def __repr__(self) -> str:
        return (
            f"GenerationStateStore(generating={self._state.is_generating}, "
            f"aspect_ratio={self._state.aspect_ratio.value}, "
            f"error={self._state.error!r})"
        )


class AspectRatioSelector:
    """Holds the currently selected ratio on top of the state store.

    Selecting a ratio only affects the next submission; a request already in
    flight keeps the ratio it captured.
    """

    options = ASPECT_RATIOS

    def __init__(self, store: GenerationStateStore):
        self._store = store

    @property
    def selected(self) -> AspectRatio:
        return self._store.snapshot.aspect_ratio

    def select(self, ratio: AspectRatio | str) -> AspectRatio:
        """Select a ratio.

        Raises:
            ValueError: If ``ratio`` is not one of the supported ratios
        """
        selected = AspectRatio.coerce(ratio)
        self._store.update(aspect_ratio=selected)
        logger.debug(f"Aspect ratio selected: {selected.value}")
        return selected
