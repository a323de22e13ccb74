"""Core generation lifecycle and gallery state for Lumina Canvas.

This module exposes the session components:
- GenerationController: Request lifecycle (validate, lock, call, commit)
- GalleryStore: Newest-first collection of completed images
- GenerationStateStore / AspectRatioSelector: Observable session state
- GeminiImageClient: Provider client for the Gemini image model

Usage Example
-------------
    from lumina.core import (
        GalleryStore, GeminiImageClient, GenerationController, GenerationStateStore, config,
    )

    state = GenerationStateStore(config.default_aspect_ratio)
    gallery = GalleryStore(config.gallery_max_entries)
    controller = GenerationController(GeminiImageClient(config), gallery, state)

    outcome = await controller.submit("a lighthouse at dusk", "16:9")
"""

from .config import LuminaConfig, config
from .controller import GenerationController, GenerationOutcome, OutcomeStatus, RejectReason
from .errors import EmptyResultError, GenerationError, ProviderError
from .export import ExportedFile, export_image
from .gallery_store import GalleryStore, paginate_gallery_entries
from .models import ASPECT_RATIOS, AspectRatio, GeneratedImage, GenerationState
from .provider import GeminiImageClient, InlineImage, build_request_body, extract_inline_image
from .state import AspectRatioSelector, GenerationStateStore

__all__ = [
    "ASPECT_RATIOS",
    "AspectRatio",
    "AspectRatioSelector",
    "EmptyResultError",
    "ExportedFile",
    "GalleryStore",
    "GeminiImageClient",
    "GeneratedImage",
    "GenerationController",
    "GenerationError",
    "GenerationOutcome",
    "GenerationState",
    "GenerationStateStore",
    "InlineImage",
    "LuminaConfig",
    "OutcomeStatus",
    "ProviderError",
    "RejectReason",
    "build_request_body",
    "config",
    "export_image",
    "extract_inline_image",
    "paginate_gallery_entries",
]
