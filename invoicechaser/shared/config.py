"""Shared configuration management for InvoiceChaser.

Based on Pydantic Settings v2 best practices:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Example: APP_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Service configuration
    service_name: str = Field(
        default="invoicechaser",
        description="Service identifier for metrics and logs",
    )
    service_version: str = Field(
        default="0.1.0",
        description="Service version",
    )

    # HTTP server
    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="HTTP port (a plain PORT variable, as set by hosting platforms, wins)",
    )

    # MCP handshake
    server_name: str = Field(
        default="InvoiceChaser",
        description="serverInfo.name reported on initialize",
    )
    protocol_version: str = Field(
        default="2025-03-26",
        description="MCP protocol revision reported on initialize",
    )

    # Email composition
    default_currency: str = Field(
        default="USD",
        min_length=1,
        description="Currency used when neither the caller nor the invoice text names one",
    )

    # Streaming notification channel
    sse_heartbeat_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Seconds between SSE heartbeat comments",
    )
    sse_queue_size: int = Field(
        default=100,
        ge=1,
        description="Notifications buffered per SSE channel before new ones are dropped",
    )
    session_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Idle sessions without a live stream are pruned after this many seconds",
    )

    # Domain verification for the OpenAI apps directory
    openai_apps_challenge_token: str = Field(
        default="",
        description="Token served at /.well-known/openai-apps-challenge (empty disables route)",
    )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
