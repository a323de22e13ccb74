"""Shared pytest fixtures for Lumina tests."""

import asyncio
import base64

import pytest

from lumina.core.config import LuminaConfig
from lumina.core.controller import GenerationController
from lumina.core.gallery_store import GalleryStore
from lumina.core.models import AspectRatio
from lumina.core.state import GenerationStateStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"lumina-test-image"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


def image_response(*parts: dict) -> dict:
    """Build a ``generateContent`` response with one candidate holding ``parts``."""
    return {"candidates": [{"content": {"parts": list(parts)}}]}


def image_part(data: str = PNG_B64, mime_type: str | None = "image/png") -> dict:
    inline = {"data": data}
    if mime_type:
        inline["mimeType"] = mime_type
    return {"inlineData": inline}


class FakeProvider:
    """Stand-in for GeminiImageClient.

    Each call pops the next queued result: a dict is returned, an exception is
    raised.  When ``gate`` is set, calls wait for it before resolving.
    """

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[tuple[str, AspectRatio]] = []
        self.gate: asyncio.Event | None = None

    async def generate_content(self, prompt: str, aspect_ratio: AspectRatio) -> dict:
        self.calls.append((prompt, aspect_ratio))
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if self.results else image_response(image_part())
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def test_config() -> LuminaConfig:
    """Create a configuration isolated from the environment and .env files."""
    return LuminaConfig(
        _env_file=None,
        model_id="gemini-test-image",
        api_base_url="https://example.test/v1beta",
        api_key_env="LUMINA_TEST_API_KEY",
        request_timeout=5.0,
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def state_store() -> GenerationStateStore:
    return GenerationStateStore()


@pytest.fixture
def gallery() -> GalleryStore:
    return GalleryStore()


@pytest.fixture
def clock():
    """Deterministic millisecond clock advancing by 1000 per call."""
    ticks = iter(range(1_700_000_000_000, 1_800_000_000_000, 1000))
    return lambda: next(ticks)


@pytest.fixture
def controller(fake_provider, gallery, state_store, clock) -> GenerationController:
    return GenerationController(fake_provider, gallery, state_store, clock=clock)
