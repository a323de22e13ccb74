"""Configuration management for Lumina Canvas.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the LUMINA_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (LUMINA_* prefix)
2. .env file in the project root
3. Default values defined in LuminaConfig

Example .env file:
    LUMINA_MODEL_ID=gemini-2.5-flash-image
    LUMINA_DEFAULT_ASPECT_RATIO=16:9
    LUMINA_GALLERY_MAX_ENTRIES=200
    LUMINA_SERVER_PORT=7860

API Credential
--------------
The provider API key is deliberately *not* a configuration field.  Only the
name of the environment variable holding it is configured (``api_key_env``);
the value itself is read from the process environment on every request by
:class:`~lumina.core.provider.GeminiImageClient`.  A missing key is not
validated locally, the request is attempted and fails upstream.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

Usage Example
-------------
    from lumina.core.config import config

    print(config.model_id)
    print(config.default_aspect_ratio)
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import AspectRatio


class LuminaConfig(BaseSettings):
    """Main configuration for Lumina Canvas.

    Attributes
    ----------
    Provider Settings:
        model_id : str
            Gemini image model identifier used for every request
        api_base_url : str
            Base URL of the Generative Language REST API
        api_key_env : str
            Name of the environment variable holding the API key
        request_timeout : float
            Timeout in seconds for a single generation round trip

    Generation Settings:
        default_aspect_ratio : AspectRatio
            Ratio selected when a session starts

    Gallery Settings:
        gallery_max_entries : int | None
            None keeps every result for the session lifetime.  A positive
            value turns the gallery into a ring buffer that drops the oldest
            entry once full.
        download_prefix : str
            Filename prefix for exported images

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level used by the CLI entry point

    Examples
    --------
        >>> custom = LuminaConfig(default_aspect_ratio="16:9", _env_file=None)
        >>> custom.default_aspect_ratio
        <AspectRatio.WIDESCREEN: '16:9'>
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LUMINA_",
        case_sensitive=False,
    )

    # Provider settings
    model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini image generation model identifier",
    )
    api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Generative Language REST API",
    )
    api_key_env: str = Field(
        default="GEMINI_API_KEY",
        description="Environment variable read for the API key on each request",
    )
    request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for one generation request",
        gt=0,
    )

    # Generation settings
    default_aspect_ratio: AspectRatio = Field(
        default=AspectRatio.SQUARE,
        description="Aspect ratio selected at session start",
    )

    # Gallery settings
    gallery_max_entries: int | None = Field(
        default=None,
        description="Optional gallery capacity (None = unbounded, drop-oldest when set)",
        ge=1,
    )
    download_prefix: str = Field(
        default="lumina",
        description="Filename prefix for downloaded images",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for the CLI entry point",
    )

    @property
    def generate_url(self) -> str:
        """Full ``generateContent`` endpoint for the configured model."""
        return f"{self.api_base_url.rstrip('/')}/models/{self.model_id}:generateContent"


# Global configuration instance
config = LuminaConfig()
