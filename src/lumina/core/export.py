"""Turn a gallery image into a downloadable file."""

from __future__ import annotations

import base64
import binascii
import re
import time
from dataclasses import dataclass

from .models import GeneratedImage

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    media_type: str
    content: bytes


def export_image(image: GeneratedImage, prefix: str = "lumina", now: int | None = None) -> ExportedFile:
    """Decode an image's data URL into file bytes and a download filename.

    The filename is stamped with the export time, not the generation time,
    so repeated downloads of the same image do not collide.

    Args:
        image: Gallery image to export
        prefix: Filename prefix
        now: Export time in epoch milliseconds (defaults to the current time)

    Returns:
        The decoded file

    Raises:
        ValueError: If the image URL is not a base64 data URL
    """
    match = _DATA_URL_PATTERN.match(image.url)
    if match is None:
        raise ValueError(f"Image {image.id} does not hold a base64 data URL")

    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Image {image.id} holds an invalid base64 payload") from e

    media_type = match.group("mime")
    extension = _EXTENSIONS.get(media_type, "png")
    stamp = now if now is not None else int(time.time() * 1000)

    return ExportedFile(
        filename=f"{prefix}-{stamp}.{extension}",
        media_type=media_type,
        content=content,
    )
