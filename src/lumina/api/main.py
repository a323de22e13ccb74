"""Lumina Canvas — FastAPI Application.

This module exposes the generation session over HTTP.  It defines
:func:`create_app`, the module-level ``app`` instance, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
One application instance holds one session:

- :class:`~lumina.core.state.GenerationStateStore`: prompt, ratio, in-flight
  flag and last error.
- :class:`~lumina.core.gallery_store.GalleryStore`: newest-first results.
- :class:`~lumina.core.controller.GenerationController`: request lifecycle.

The components are created in the lifespan handler and stored on
``app.state``.  All routes run on the same event loop, so a second
``POST /api/generate`` arriving while the first awaits the provider is
rejected by the controller's in-flight guard.

Endpoints
---------
========  ==============================  ==================================
Method    Path                            Purpose
========  ==============================  ==================================
GET       ``/api/config``                 Model id and aspect ratios
GET       ``/api/state``                  Current session state
PUT       ``/api/state/prompt``           Edit the prompt text
PUT       ``/api/state/aspect-ratio``     Select the aspect ratio
POST      ``/api/generate``               Submit a generation
GET       ``/api/gallery``                Paginated gallery listing
GET       ``/api/gallery/{id}``           Single gallery entry
GET       ``/api/gallery/{id}/download``  Image file as an attachment
========  ==============================  ==================================

Usage
-----
CLI (installed entry point)::

    lumina

Direct invocation::

    python -m lumina.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from lumina import __version__
from lumina.api.models import AspectRatioRequest, GenerateRequest, PromptUpdateRequest
from lumina.core.config import LuminaConfig, config
from lumina.core.controller import GenerationController, ImageProvider, OutcomeStatus
from lumina.core.export import export_image
from lumina.core.gallery_store import GalleryStore, paginate_gallery_entries
from lumina.core.models import ASPECT_RATIOS
from lumina.core.provider import GeminiImageClient
from lumina.core.state import AspectRatioSelector, GenerationStateStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_app(settings: LuminaConfig | None = None, provider: ImageProvider | None = None) -> FastAPI:
    """Build the FastAPI application for one generation session.

    Args:
        settings: Configuration (defaults to the global ``config``)
        provider: Image provider (defaults to :class:`GeminiImageClient`)

    Returns:
        Configured application; session components are created on startup
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the session components on startup.

        Nothing needs tearing down on shutdown: the gallery lives only in
        memory and provider connections are opened per request.
        """
        state = GenerationStateStore(settings.default_aspect_ratio)
        gallery = GalleryStore(settings.gallery_max_entries)
        client = provider if provider is not None else GeminiImageClient(settings)

        app.state.settings = settings
        app.state.session_state = state
        app.state.selector = AspectRatioSelector(state)
        app.state.gallery = gallery
        app.state.controller = GenerationController(client, gallery, state)
        logger.info(f"Session initialised (model={settings.model_id}, gallery={gallery!r})")

        yield

        logger.info(f"Session closed with {len(gallery)} image(s) in the gallery")

    app = FastAPI(
        title="Lumina Canvas",
        description="Prompt-to-image generation with a session gallery.",
        version=__version__,
        lifespan=lifespan,
    )

    # Allow cross-origin requests so the frontend can be served from a
    # different port during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Configuration and session state.
    # -----------------------------------------------------------------------

    @app.get("/api/config")
    async def get_config(request: Request) -> dict:
        """Return the model identifier and the selectable aspect ratios."""
        current: LuminaConfig = request.app.state.settings
        return {
            "version": __version__,
            "model_id": current.model_id,
            "aspect_ratios": [ratio.value for ratio in ASPECT_RATIOS],
            "default_aspect_ratio": current.default_aspect_ratio.value,
        }

    @app.get("/api/state")
    async def get_state(request: Request) -> dict:
        """Return the current prompt, ratio, in-flight flag and last error."""
        return request.app.state.session_state.snapshot.to_dict()

    @app.put("/api/state/prompt")
    async def update_prompt(req: PromptUpdateRequest, request: Request) -> dict:
        """Record the prompt text; allowed while a generation is in flight."""
        return request.app.state.session_state.set_prompt(req.prompt).to_dict()

    @app.put("/api/state/aspect-ratio")
    async def update_aspect_ratio(req: AspectRatioRequest, request: Request) -> dict:
        """Select the ratio for the next submission.

        Unsupported values never reach this handler: the request model
        restricts ``aspect_ratio`` to the five supported ratios (422).
        """
        request.app.state.selector.select(req.aspect_ratio)
        return request.app.state.session_state.snapshot.to_dict()

    # -----------------------------------------------------------------------
    # Generation.
    # -----------------------------------------------------------------------

    @app.post("/api/generate")
    async def generate(req: GenerateRequest, request: Request) -> dict:
        """Submit one generation and wait for it to resolve.

        Returns:
            The outcome.  Rejected submissions (blank prompt, or a generation
            already in flight) return 200 with ``status="rejected"``.

        Raises:
            HTTPException: 502 with the user-visible message when the
                generation fails.
        """
        controller: GenerationController = request.app.state.controller
        outcome = await controller.submit(req.prompt, req.aspect_ratio)

        if outcome.status is OutcomeStatus.FAILED:
            raise HTTPException(status_code=502, detail=outcome.error.message)

        return outcome.to_dict()

    # -----------------------------------------------------------------------
    # Gallery.
    # -----------------------------------------------------------------------

    @app.get("/api/gallery")
    async def get_gallery(request: Request, page: int = 1, per_page: int = 20) -> dict:
        """Return a page of gallery images, newest first."""
        if per_page < 1:
            raise HTTPException(status_code=400, detail="per_page must be at least 1")

        gallery: GalleryStore = request.app.state.gallery
        result = paginate_gallery_entries(gallery.list(), page, per_page)
        result["images"] = [image.to_dict() for image in result["images"]]
        return result

    @app.get("/api/gallery/{image_id}")
    async def get_image(image_id: str, request: Request) -> dict:
        """Return a single gallery entry.

        Raises:
            HTTPException: 404 if the image is not found.
        """
        image = request.app.state.gallery.get(image_id)
        if image is None:
            raise HTTPException(status_code=404, detail="Image not found")
        return image.to_dict()

    @app.get("/api/gallery/{image_id}/download")
    async def download_image(image_id: str, request: Request) -> Response:
        """Return the decoded image as a file attachment.

        Raises:
            HTTPException: 404 if the image is not found, 422 if its payload
                cannot be decoded.
        """
        image = request.app.state.gallery.get(image_id)
        if image is None:
            raise HTTPException(status_code=404, detail="Image not found")

        try:
            exported = export_image(image, prefix=request.app.state.settings.download_prefix)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

        return Response(
            content=exported.content,
            media_type=exported.media_type,
            headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
        )

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~lumina.core.config.config`
    (``LUMINA_SERVER_HOST``, ``LUMINA_SERVER_PORT``, ``LUMINA_LOG_LEVEL``).

    This function is registered as the ``lumina`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)

    uvicorn.run(
        "lumina.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
