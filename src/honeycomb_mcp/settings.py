from typing import List, Optional

from pydantic_settings import BaseSettings
from pydantic import Field

DEFAULT_HONEYCOMB_API_ENDPOINT = "https://api.honeycomb.io"


class Settings(BaseSettings):
    MCP_HOST: str = Field(default="0.0.0.0")
    MCP_PORT: int = Field(default=8085)
    PYTHON_LOG_LEVEL: str = Field(default="INFO")

    # Transport and SSL
    MCP_TRANSPORT_PROTOCOL: str = Field(default="http")  # "http" | "sse" | "streamable-http"
    MCP_SSL_KEYFILE: Optional[str] = Field(default=None)
    MCP_SSL_CERTFILE: Optional[str] = Field(default=None)

    # CORS
    CORS_ENABLED: bool = Field(default=False)
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_CREDENTIALS: bool = Field(default=True)
    CORS_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Honeycomb environments
    HONEYCOMB_CONFIG_PATH: Optional[str] = Field(default=None)
    HONEYCOMB_API_KEY: Optional[str] = Field(default=None)
    HONEYCOMB_API_ENDPOINT: str = Field(default=DEFAULT_HONEYCOMB_API_ENDPOINT)
    HONEYCOMB_ENVIRONMENT: str = Field(default="default")

    # Query polling
    HONEYCOMB_QUERY_MAX_ATTEMPTS: int = Field(default=10)
    HONEYCOMB_QUERY_POLL_INTERVAL: float = Field(default=1.0)


def validate_config(settings: "Settings") -> None:
    # Port range
    if not (1024 <= settings.MCP_PORT <= 65535):
        raise ValueError(f"MCP_PORT must be between 1024 and 65535, got {settings.MCP_PORT}")

    # Log level
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if settings.PYTHON_LOG_LEVEL.upper() not in valid_log_levels:
        raise ValueError(
            f"PYTHON_LOG_LEVEL must be one of {valid_log_levels}, got {settings.PYTHON_LOG_LEVEL}"
        )

    # Transport protocol
    valid_transport_protocols = ["streamable-http", "sse", "http"]
    if settings.MCP_TRANSPORT_PROTOCOL not in valid_transport_protocols:
        raise ValueError(
            f"MCP_TRANSPORT_PROTOCOL must be one of {valid_transport_protocols}, got {settings.MCP_TRANSPORT_PROTOCOL}"
        )

    # Polling budget
    if settings.HONEYCOMB_QUERY_MAX_ATTEMPTS < 1:
        raise ValueError(
            f"HONEYCOMB_QUERY_MAX_ATTEMPTS must be at least 1, got {settings.HONEYCOMB_QUERY_MAX_ATTEMPTS}"
        )
    if settings.HONEYCOMB_QUERY_POLL_INTERVAL <= 0:
        raise ValueError(
            f"HONEYCOMB_QUERY_POLL_INTERVAL must be positive, got {settings.HONEYCOMB_QUERY_POLL_INTERVAL}"
        )


settings = Settings()
