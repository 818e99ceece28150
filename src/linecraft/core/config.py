"""Configuration management for the Linecraft prompt refinement engine.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the LINECRAFT_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (LINECRAFT_* prefix)
2. .env file in the project root
3. Default values defined in LinecraftConfig

Example .env file:
    LINECRAFT_ENVIRONMENT=production
    LINECRAFT_OPENAI_API_KEY=sk-...
    LINECRAFT_COMPLETION_TIMEOUT=15
    LINECRAFT_LOG_LEVEL=INFO

Completion Service Modes
------------------------
The optional completion-enhanced refinement path is only used when a real
API key is configured *and* the environment is not ``development``.  In
development the service behaves as if it were running with a mock key:
every request takes the template path, so no API cost is incurred.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Services receive a config object explicitly; the global is the default
used by the API entry point.

Usage Example
-------------
    from linecraft.core.config import config

    print(config.environment)
    print(config.completion_enabled)
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MOCK_API_KEY = "sk-mock-key-for-testing"


class LinecraftConfig(BaseSettings):
    """Main configuration for the Linecraft prompt refinement engine.

    Attributes
    ----------
    Runtime:
        environment : Literal["development", "production", "test"]
            Deployment mode.  ``development`` disables the completion path.
        log_level : str
            Root log level used by the API entry point.

    Completion Service:
        openai_api_key : str | None
            API key for the OpenAI-compatible completion service.
        openai_base_url : str
            Base URL of the completion service (``/chat/completions`` and
            ``/models`` are appended).
        completion_model : str
            Model name sent with each completion request.
        completion_timeout : float
            Seconds to wait for the remote call before giving up.
        completion_max_tokens : int
            Token cap for the completion response.
        completion_temperature : float
            Sampling temperature for the completion request.

    Input Limits:
        max_input_length : int
            Maximum sanitized input length in characters.

    Server:
        server_host : str
            Bind address for the uvicorn server.
        server_port : int
            Port for the uvicorn server (1024-65535).

    Examples
    --------
        >>> custom = LinecraftConfig(environment="development", _env_file=None)
        >>> custom.completion_enabled
        False
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LINECRAFT_",
        case_sensitive=False,
    )

    environment: Literal["development", "production", "test"] = Field(
        default="production",
        description="Deployment mode (development disables the completion path)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for the application",
    )

    # Completion service settings
    openai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible completion service",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the completion service",
    )
    completion_model: str = Field(
        default="gpt-4o-mini",
        description="Model used for completion-enhanced refinement",
    )
    completion_timeout: float = Field(
        default=15.0,
        description="Timeout in seconds for a single completion call",
        ge=1.0,
        le=120.0,
    )
    completion_max_tokens: int = Field(default=250, ge=16, le=4096)
    completion_temperature: float = Field(default=0.3, ge=0.0, le=2.0)

    # Input limits
    max_input_length: int = Field(
        default=500,
        description="Maximum sanitized prompt length in characters",
        ge=1,
        le=10000,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=8000,
        description="Server port",
        ge=1024,
        le=65535,
    )

    @property
    def has_real_api_key(self) -> bool:
        """True when a usable, non-mock API key is configured."""
        key = self.openai_api_key
        return bool(key) and key != MOCK_API_KEY and key.startswith("sk-")

    @property
    def completion_enabled(self) -> bool:
        """True when requests may take the completion-enhanced path."""
        return self.has_real_api_key and self.environment != "development"


# Global configuration instance
# Loaded once at import time from LINECRAFT_* environment variables and .env.
config = LinecraftConfig()
