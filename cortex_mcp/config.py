"""Process-wide configuration for the Cortex MCP server.

Read once from the environment at startup and passed explicitly to the
client. Instances are frozen; nothing mutates them after construction.
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_SUB_TENANT = "cortex-mcp"
DEFAULT_BASE_URL = "https://api.usecortex.ai"
DEFAULT_LOG_LEVEL = "ERROR"

REQUIRED_ENV = ("CORTEX_API_KEY", "CORTEX_TENANT_ID")

LOG_LEVELS = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARN": "WARNING",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
}


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


class CortexConfig(BaseModel):
    """Immutable settings shared by the client and the server."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra='forbid')

    api_key: str = Field(..., min_length=1)
    tenant_id: str = Field(..., min_length=1)
    sub_tenant_id: str = Field(default=DEFAULT_SUB_TENANT, min_length=1)
    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    log_level: str = DEFAULT_LOG_LEVEL
    transport: Literal["stdio", "sse", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Optional[str]) -> str:
        # Unknown levels fall back to the quiet default rather than failing startup
        return LOG_LEVELS.get(str(v or "").strip().upper(), DEFAULT_LOG_LEVEL)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CortexConfig":
        """Build the configuration from environment variables.

        Raises:
            ConfigError: a required variable is missing or a value is invalid.
        """
        env = os.environ if environ is None else environ

        for name in REQUIRED_ENV:
            if not env.get(name, "").strip():
                raise ConfigError(f"{name} environment variable is required")

        values = {
            "api_key": env["CORTEX_API_KEY"],
            "tenant_id": env["CORTEX_TENANT_ID"],
            "sub_tenant_id": env.get("CORTEX_SUB_TENANT_ID") or DEFAULT_SUB_TENANT,
            "base_url": env.get("CORTEX_BASE_URL") or DEFAULT_BASE_URL,
            "timeout_seconds": env.get("CORTEX_TIMEOUT_SECONDS") or 30.0,
            "log_level": env.get("CORTEX_LOG_LEVEL"),
            "transport": (env.get("CORTEX_MCP_TRANSPORT") or "stdio").lower(),
            "host": env.get("CORTEX_MCP_HOST") or "127.0.0.1",
            "port": env.get("CORTEX_MCP_PORT") or 8080,
        }

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid Cortex configuration: {e}") from e
