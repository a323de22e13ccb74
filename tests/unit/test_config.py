"""Tests for lumina.core.config — configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the LUMINA_ prefix.
- Pydantic validation constraints (port range, timeout, gallery capacity).
"""

from __future__ import annotations

import pytest

from lumina.core.config import LuminaConfig
from lumina.core.models import AspectRatio


class TestConfigDefaults:
    """Verify that LuminaConfig provides sensible defaults."""

    def test_default_model_id(self, monkeypatch):
        """Default model should be the Gemini flash image model."""
        monkeypatch.delenv("LUMINA_MODEL_ID", raising=False)
        cfg = LuminaConfig(_env_file=None)
        assert cfg.model_id == "gemini-2.5-flash-image"

    def test_default_aspect_ratio_is_square(self, monkeypatch):
        monkeypatch.delenv("LUMINA_DEFAULT_ASPECT_RATIO", raising=False)
        cfg = LuminaConfig(_env_file=None)
        assert cfg.default_aspect_ratio is AspectRatio.SQUARE

    def test_gallery_unbounded_by_default(self, monkeypatch):
        """No capacity unless explicitly configured."""
        monkeypatch.delenv("LUMINA_GALLERY_MAX_ENTRIES", raising=False)
        cfg = LuminaConfig(_env_file=None)
        assert cfg.gallery_max_entries is None

    def test_default_server_port(self, monkeypatch):
        """Default server port should be 7860."""
        monkeypatch.delenv("LUMINA_SERVER_PORT", raising=False)
        cfg = LuminaConfig(_env_file=None)
        assert cfg.server_port == 7860

    def test_api_key_is_not_a_field(self, test_config: LuminaConfig):
        """Only the variable name is configured, never the key itself."""
        assert test_config.api_key_env == "LUMINA_TEST_API_KEY"
        assert not hasattr(test_config, "api_key")


class TestConfigEnvironment:
    """Verify LUMINA_* environment overrides."""

    def test_env_overrides_model(self, monkeypatch):
        monkeypatch.setenv("LUMINA_MODEL_ID", "gemini-other-image")
        cfg = LuminaConfig(_env_file=None)
        assert cfg.model_id == "gemini-other-image"

    def test_env_overrides_aspect_ratio(self, monkeypatch):
        monkeypatch.setenv("LUMINA_DEFAULT_ASPECT_RATIO", "9:16")
        cfg = LuminaConfig(_env_file=None)
        assert cfg.default_aspect_ratio is AspectRatio.TALL

    def test_env_sets_gallery_capacity(self, monkeypatch):
        monkeypatch.setenv("LUMINA_GALLERY_MAX_ENTRIES", "50")
        cfg = LuminaConfig(_env_file=None)
        assert cfg.gallery_max_entries == 50


class TestConfigValidation:
    """Verify Pydantic validation constraints on config fields."""

    def test_invalid_port_too_low(self):
        """Server port below 1024 should raise a validation error."""
        with pytest.raises(Exception):
            LuminaConfig(_env_file=None, server_port=80)

    def test_invalid_timeout(self):
        with pytest.raises(Exception):
            LuminaConfig(_env_file=None, request_timeout=0)

    def test_invalid_gallery_capacity(self):
        with pytest.raises(Exception):
            LuminaConfig(_env_file=None, gallery_max_entries=0)

    def test_invalid_aspect_ratio(self):
        with pytest.raises(Exception):
            LuminaConfig(_env_file=None, default_aspect_ratio="2:1")


class TestGenerateUrl:
    """Verify the generateContent endpoint composition."""

    def test_generate_url(self, test_config: LuminaConfig):
        assert (
            test_config.generate_url
            == "https://example.test/v1beta/models/gemini-test-image:generateContent"
        )

    def test_generate_url_strips_trailing_slash(self):
        cfg = LuminaConfig(_env_file=None, api_base_url="https://example.test/v1beta/")
        assert cfg.generate_url.startswith("https://example.test/v1beta/models/")
