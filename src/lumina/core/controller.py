"""Generation request lifecycle.

:class:`GenerationController` turns a prompt into exactly one in-flight
provider request and routes the result:

- ``Idle --submit--> Generating``, unless the prompt is blank or a request is
  already in flight (the submission is then rejected without side effects)
- ``Generating --success--> Idle``: the image is prepended to the gallery, the
  prompt input is cleared and the error is reset
- ``Generating --failure--> Idle``: the error message is recorded, the prompt
  input and the gallery are left untouched so the user can retry

The provider call is the only suspension point.  The guard is checked and the
flag raised before it, so a second submission arriving while the first is
awaiting its response is always rejected.  There is no cancellation and no
retry.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import GENERIC_FAILURE_MESSAGE, GenerationError, ProviderError
from .gallery_store import GalleryStore
from .models import AspectRatio, GeneratedImage
from .provider import extract_inline_image
from .state import GenerationStateStore

logger = logging.getLogger(__name__)


class ImageProvider(Protocol):
    """Anything that turns a prompt and ratio into a raw generateContent response."""

    async def generate_content(self, prompt: str, aspect_ratio: AspectRatio) -> dict: ...


class OutcomeStatus(str, Enum):
    """How a submission resolved."""

    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"


class RejectReason(str, Enum):
    """Why a submission was turned away before reaching the provider."""

    EMPTY_PROMPT = "empty_prompt"
    IN_FLIGHT = "in_flight"


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one call to :meth:`GenerationController.submit`."""

    status: OutcomeStatus
    image: GeneratedImage | None = None
    error: GenerationError | None = None
    reason: RejectReason | None = None

    @classmethod
    def rejected(cls, reason: RejectReason) -> GenerationOutcome:
        return cls(status=OutcomeStatus.REJECTED, reason=reason)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "image": self.image.to_dict() if self.image else None,
            "error": self.error.message if self.error else None,
            "error_kind": self.error.kind if self.error else None,
            "reason": self.reason.value if self.reason else None,
        }


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def _new_image_id() -> str:
    return str(uuid.uuid4())


class GenerationController:
    """Owns the request lifecycle for one session.

    Args:
        provider: Object exposing ``async generate_content(prompt, aspect_ratio)``
        gallery: Store receiving committed images
        state: Store holding prompt, ratio, in-flight flag and error
        clock: Returns the current time in epoch milliseconds
        id_factory: Returns a new opaque image id
    """

    def __init__(
        self,
        provider: ImageProvider,
        gallery: GalleryStore,
        state: GenerationStateStore,
        clock: Callable[[], int] = _epoch_millis,
        id_factory: Callable[[], str] = _new_image_id,
    ):
        self.provider = provider
        self.gallery = gallery
        self.state = state
        self._clock = clock
        self._id_factory = id_factory

    @property
    def is_generating(self) -> bool:
        return self.state.snapshot.is_generating

    async def submit(
        self,
        prompt: str | None = None,
        aspect_ratio: AspectRatio | str | None = None,
    ) -> GenerationOutcome:
        """Submit one generation request.

        Args:
            prompt: Prompt text; defaults to the prompt held in the state store
            aspect_ratio: Ratio; defaults to the ratio held in the state store

        Returns:
            Outcome describing whether the request completed, failed or was rejected

        Raises:
            ValueError: If ``aspect_ratio`` is not a supported ratio
        """
        current = self.state.snapshot
        text = (current.prompt if prompt is None else prompt).strip()
        ratio = AspectRatio.coerce(current.aspect_ratio if aspect_ratio is None else aspect_ratio)

        if not text:
            logger.debug("Submission rejected: empty prompt")
            return GenerationOutcome.rejected(RejectReason.EMPTY_PROMPT)

        if current.is_generating:
            logger.debug("Submission rejected: generation already in flight")
            return GenerationOutcome.rejected(RejectReason.IN_FLIGHT)

        self.state.update(is_generating=True, error=None)
        logger.info(f"Generation started (aspect_ratio={ratio.value})")

        try:
            payload = await self.provider.generate_content(text, ratio)
            inline_image = extract_inline_image(payload)
            image = GeneratedImage(
                id=self._id_factory(),
                url=inline_image.to_data_url(),
                prompt=text,
                timestamp=self._next_timestamp(),
                aspect_ratio=ratio,
            )
            self.gallery.commit(image)
            self.state.update(prompt="", error=None)
            logger.info(f"Generation complete: image {image.id}")
            return GenerationOutcome(status=OutcomeStatus.COMPLETED, image=image)

        except GenerationError as e:
            logger.warning(f"Generation failed ({e.kind}): {e.message}")
            self.state.update(error=e.message)
            return GenerationOutcome(status=OutcomeStatus.FAILED, error=e)

        except Exception as e:
            logger.error(f"Unexpected error during generation: {e}", exc_info=True)
            error = ProviderError(str(e) or GENERIC_FAILURE_MESSAGE)
            self.state.update(error=error.message)
            return GenerationOutcome(status=OutcomeStatus.FAILED, error=error)

        finally:
            self.state.update(is_generating=False)

    def _next_timestamp(self) -> int:
        now = self._clock()
        newest = self.gallery.newest
        if newest is not None and newest.timestamp > now:
            return newest.timestamp
        return now
