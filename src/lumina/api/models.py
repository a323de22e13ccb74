"""Pydantic request models for the Lumina Canvas API.

Models
------
GenerateRequest
    Payload for ``POST /api/generate``.  Both fields are optional; omitted
    values fall back to the session's current prompt and aspect ratio.
PromptUpdateRequest
    Payload for ``PUT /api/state/prompt``.
AspectRatioRequest
    Payload for ``PUT /api/state/aspect-ratio``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from lumina.core.models import AspectRatio


class GenerateRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    Attributes:
        prompt: Prompt text.  ``None`` submits the prompt held in session state.
        aspect_ratio: One of the five supported ratios.  ``None`` submits the
            currently selected ratio.
    """

    prompt: str | None = Field(
        default=None,
        description="Prompt text (defaults to the session prompt).",
    )
    aspect_ratio: AspectRatio | None = Field(
        default=None,
        description="Aspect ratio, e.g. '1:1' or '16:9' (defaults to the session ratio).",
    )


class PromptUpdateRequest(BaseModel):
    """Request body for the ``PUT /api/state/prompt`` endpoint."""

    prompt: str = Field(
        ...,
        description="Prompt text as typed by the user.",
    )


class AspectRatioRequest(BaseModel):
    """Request body for the ``PUT /api/state/aspect-ratio`` endpoint."""

    aspect_ratio: AspectRatio = Field(
        ...,
        description="Aspect ratio to use for the next submission.",
    )
