"""Configuration management for Sketchsynth.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the SKETCHSYNTH_ prefix,
allowing the two upstream model providers to be swapped without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (SKETCHSYNTH_* prefix)
2. .env file in the project root
3. Default values defined in SketchsynthConfig

Example .env file:
    SKETCHSYNTH_VISION_BASE_URL=https://chat.intern-ai.org.cn/api/v1
    SKETCHSYNTH_VISION_API_KEY=sk-...
    SKETCHSYNTH_VISION_MODEL=intern-s1
    SKETCHSYNTH_SYNTHESIS_BASE_URL=https://api.deepseek.com
    SKETCHSYNTH_SYNTHESIS_API_KEY=sk-...
    SKETCHSYNTH_SYNTHESIS_MODEL=deepseek-chat

Two Providers
-------------
The service talks to two OpenAI-compatible chat-completion endpoints:

- the **vision** provider, a multimodal model that turns an uploaded image
  into a textual description (long timeout, low temperature, large budget);
- the **synthesis** provider, a text-only model that turns descriptions into
  HTML, answers or Mermaid diagrams.

Clients never read this module directly.  They receive a frozen
:class:`ProviderSettings` built by :meth:`SketchsynthConfig.vision_provider`
or :meth:`SketchsynthConfig.synthesis_provider`, which keeps them testable
against fake endpoints.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

    from sketchsynth.core.config import config

    print(config.synthesis_model)
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseModel):
    """Connection and sampling settings for one chat-completion provider.

    Attributes:
        name: Short label used in log messages ("vision", "synthesis").
        base_url: API root; ``/chat/completions`` is appended to it.
        api_key: Bearer token sent in the ``Authorization`` header.
        model: Model identifier passed in the request body.
        timeout: Seconds before the round trip is abandoned.
        temperature: Sampling temperature.
        max_tokens: Default output budget for a single completion.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    api_key: str = ""
    model: str
    timeout: float = Field(gt=0)
    temperature: float = Field(ge=0.0, le=2.0)
    max_tokens: int = Field(ge=1)

    @property
    def completions_url(self) -> str:
        """Full URL of the chat-completions endpoint."""
        return f"{self.base_url.rstrip('/')}/chat/completions"


class SketchsynthConfig(BaseSettings):
    """Main configuration for Sketchsynth.

    Attributes
    ----------
    Vision Provider:
        vision_base_url, vision_api_key, vision_model : str
            Endpoint, credentials and model of the multimodal extractor
        vision_timeout : float
            Seconds allowed for one extraction call (default 120)
        vision_temperature : float
            Sampling temperature for extraction (default 0.3)
        vision_max_tokens : int
            Output budget for extraction (default 32000)

    Synthesis Provider:
        synthesis_base_url, synthesis_api_key, synthesis_model : str
            Endpoint, credentials and model of the text generator
        synthesis_timeout : float
            Seconds allowed for one synthesis call (default 60)
        synthesis_temperature : float
            Sampling temperature for synthesis (default 0.7)
        synthesis_max_tokens : int
            Output budget for HTML and answers (default 8000)
        diagram_max_tokens : int
            Output budget for Mermaid diagrams (default 1500)

    Server:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root log level applied by ``main()``
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SKETCHSYNTH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Vision (image extraction) provider
    vision_base_url: str = Field(
        default="https://chat.intern-ai.org.cn/api/v1",
        description="Base URL of the OpenAI-compatible vision provider",
    )
    vision_api_key: str = Field(default="", description="Bearer token for the vision provider")
    vision_model: str = Field(default="intern-s1", description="Multimodal model name")
    vision_timeout: float = Field(default=120.0, gt=0, description="Extraction timeout (seconds)")
    vision_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    vision_max_tokens: int = Field(default=32000, ge=1)

    # Synthesis (text generation) provider
    synthesis_base_url: str = Field(
        default="https://api.deepseek.com",
        description="Base URL of the OpenAI-compatible text provider",
    )
    synthesis_api_key: str = Field(default="", description="Bearer token for the text provider")
    synthesis_model: str = Field(default="deepseek-chat", description="Text model name")
    synthesis_timeout: float = Field(default=60.0, gt=0, description="Synthesis timeout (seconds)")
    synthesis_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    synthesis_max_tokens: int = Field(default=8000, ge=1)
    diagram_max_tokens: int = Field(default=1500, ge=1)

    # Server settings
    server_host: str = Field(default="0.0.0.0", description="Server bind address")
    server_port: int = Field(default=8000, description="Server port", ge=1024, le=65535)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level",
    )

    def vision_provider(self) -> ProviderSettings:
        """Build the immutable settings handed to the vision client."""
        return ProviderSettings(
            name="vision",
            base_url=self.vision_base_url,
            api_key=self.vision_api_key,
            model=self.vision_model,
            timeout=self.vision_timeout,
            temperature=self.vision_temperature,
            max_tokens=self.vision_max_tokens,
        )

    def synthesis_provider(self) -> ProviderSettings:
        """Build the immutable settings handed to the synthesis client."""
        return ProviderSettings(
            name="synthesis",
            base_url=self.synthesis_base_url,
            api_key=self.synthesis_api_key,
            model=self.synthesis_model,
            timeout=self.synthesis_timeout,
            temperature=self.synthesis_temperature,
            max_tokens=self.synthesis_max_tokens,
        )


# Global configuration instance
# Loaded once at import from SKETCHSYNTH_* environment variables and .env.
config = SketchsynthConfig()
