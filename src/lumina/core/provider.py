"""Gemini image generation over the Generative Language REST API.

This module owns both halves of the provider contract:

- :func:`build_request_body` produces the outbound ``generateContent`` body:
  one content block holding one text part, plus an image configuration that
  carries the aspect ratio as an opaque string.
- :func:`extract_inline_image` consumes the response mapping.  Only the first
  candidate is considered and its parts are scanned in order; the first part
  carrying ``inlineData.data`` wins and any later image parts are ignored.

:class:`GeminiImageClient` performs the HTTP round trip with ``httpx`` and
maps every transport, status and payload problem onto
:class:`~lumina.core.errors.ProviderError`.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from .config import LuminaConfig
from .errors import EmptyResultError, ProviderError
from .models import AspectRatio

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class InlineImage:
    """Base64 image payload lifted out of a provider response."""

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def build_request_body(prompt: str, aspect_ratio: AspectRatio | str) -> dict:
    """Build the ``generateContent`` request body.

    Args:
        prompt: Prompt text, already trimmed by the caller
        aspect_ratio: Ratio passed through as the image configuration

    Returns:
        JSON-serialisable request body
    """
    ratio = aspect_ratio.value if isinstance(aspect_ratio, AspectRatio) else aspect_ratio
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"imageConfig": {"aspectRatio": ratio}},
    }


def _as_list(value: Any, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ProviderError(f"Malformed provider response: '{what}' is not a list")
    return value


def _as_mapping(value: Any, what: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ProviderError(f"Malformed provider response: '{what}' is not an object")
    return value


def extract_inline_image(payload: dict) -> InlineImage:
    """Return the first inline image of the first candidate.

    Absent ``candidates``, ``content`` or ``parts`` are treated as empty.

    Args:
        payload: Decoded ``generateContent`` response

    Returns:
        The first image-bearing part found

    Raises:
        EmptyResultError: If no part of the first candidate carries image data
        ProviderError: If the payload structure has the wrong types, or the
            winning part's data is not a base64 string
    """
    candidates = _as_list(_as_mapping(payload, "response").get("candidates"), "candidates")
    if not candidates:
        raise EmptyResultError()

    content = _as_mapping(_as_mapping(candidates[0], "candidate").get("content"), "content")
    parts = _as_list(content.get("parts"), "parts")

    for part in parts:
        if not isinstance(part, dict):
            continue
        inline_data = part.get("inlineData") or part.get("inline_data")
        if not isinstance(inline_data, dict) or not inline_data.get("data"):
            continue

        data = inline_data["data"]
        if not isinstance(data, str):
            raise ProviderError("Malformed provider response: inline image data is not a string")
        try:
            base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ProviderError(
                "Malformed provider response: inline image data is not valid base64"
            ) from e

        mime_type = inline_data.get("mimeType") or inline_data.get("mime_type") or DEFAULT_MIME_TYPE
        return InlineImage(data=data, mime_type=mime_type)

    raise EmptyResultError()


def _error_message(response: httpx.Response) -> str | None:
    """Pull the provider's own error message out of a failed JSON response.

    Non-JSON bodies (proxy HTML pages, plain-text dumps) yield ``None`` so the
    caller falls back to the generic user-facing message.
    """
    try:
        body = response.json()
    except ValueError:
        return None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return None


class GeminiImageClient:
    """Async client for one Gemini image model.

    A fresh ``httpx.AsyncClient`` is opened per request and the API key is
    read from the environment each time, so rotating the key does not need a
    restart.

    Args:
        config: Configuration holding model, endpoint, timeout and key name
        transport: Optional ``httpx`` transport (tests use ``httpx.MockTransport``)
    """

    def __init__(self, config: LuminaConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _api_key(self) -> str:
        return os.environ.get(self.config.api_key_env, "")

    async def generate_content(self, prompt: str, aspect_ratio: AspectRatio) -> dict:
        """Issue exactly one ``generateContent`` request.

        Args:
            prompt: Trimmed prompt text
            aspect_ratio: Ratio captured at submission time

        Returns:
            The decoded JSON response mapping

        Raises:
            ProviderError: On network failure, non-2xx status or malformed body
        """
        body = build_request_body(prompt, aspect_ratio)
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key(),
        }

        logger.info(
            f"Requesting image from {self.config.model_id} "
            f"(aspect_ratio={body['generationConfig']['imageConfig']['aspectRatio']}, "
            f"prompt_chars={len(prompt)})"
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.config.request_timeout, transport=self._transport
            ) as client:
                response = await client.post(self.config.generate_url, headers=headers, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"Provider request failed: {e!r}")
            raise ProviderError(str(e) or None) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"Provider returned HTTP {response.status_code}: {message}")
            raise ProviderError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError("Malformed provider response: body is not JSON") from e

        if not isinstance(payload, dict):
            raise ProviderError("Malformed provider response: body is not an object")

        return payload
