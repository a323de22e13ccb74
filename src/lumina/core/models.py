"""Data models for generation state and gallery entries."""

from dataclasses import dataclass
from enum import Enum


class AspectRatio(str, Enum):
    """The fixed set of width:height shapes the provider accepts."""

    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    WIDESCREEN = "16:9"
    TALL = "9:16"

    @classmethod
    def coerce(cls, value: "AspectRatio | str") -> "AspectRatio":
        """Convert a raw ratio string into a member.

        Raises:
            ValueError: If the value is not one of the supported ratios
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported aspect ratio {value!r}, expected one of: {allowed}") from None


ASPECT_RATIOS = tuple(AspectRatio)


@dataclass(frozen=True)
class GeneratedImage:
    """A completed generation as shown in the gallery.

    Attributes
    ----------
    id : str
        Locally generated display identity
    url : str
        Self-contained ``data:`` URL holding the base64 image payload
    prompt : str
        The prompt text that was submitted
    timestamp : int
        Creation time in epoch milliseconds
    aspect_ratio : AspectRatio
        Ratio in force when the request was submitted
    """

    id: str
    url: str
    prompt: str
    timestamp: int
    aspect_ratio: AspectRatio

    def to_dict(self) -> dict:
        """Return the JSON-friendly representation used by the API."""
        return {
            "id": self.id,
            "url": self.url,
            "prompt": self.prompt,
            "timestamp": self.timestamp,
            "aspectRatio": self.aspect_ratio.value,
        }


@dataclass(frozen=True)
class GenerationState:
    """Snapshot of the single per-session request state.

    Snapshots are immutable; :class:`~lumina.core.state.GenerationStateStore`
    replaces the whole snapshot on every change.
    """

    prompt: str = ""
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    is_generating: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "prompt": self.prompt,
            "aspect_ratio": self.aspect_ratio.value,
            "is_generating": self.is_generating,
            "error": self.error,
        }
