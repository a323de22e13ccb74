"""Lumina Canvas - prompt-to-image generation with a session gallery."""

__version__ = "0.1.0"

from lumina.core.config import LuminaConfig, config
from lumina.core.controller import GenerationController
from lumina.core.gallery_store import GalleryStore
from lumina.core.state import GenerationStateStore

__all__ = [
    "GalleryStore",
    "GenerationController",
    "GenerationStateStore",
    "LuminaConfig",
    "config",
]
