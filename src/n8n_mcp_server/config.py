"""Configuration management for the n8n MCP Server.

Settings come from an optional YAML file and are overridden by environment
variables. The resulting ``Config`` is built once at startup and handed to the
client and dispatcher; nothing reads the environment after that.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

# Environment variable -> config field
ENV_VARS = {
    "N8N_BASE_URL": "base_url",
    "N8N_API_KEY": "api_key",
    "REQUEST_TIMEOUT": "timeout_ms",
    "MAX_RETRY_ATTEMPTS": "max_retries",
    "N8N_EXAMPLES_DIR": "examples_dir",
    "LOG_LEVEL": "log_level",
}


class ConfigError(ValueError):
    """Raised when the configuration cannot be used to start the server."""


class Config(BaseModel):
    """Main configuration class."""

    config_path: Optional[str] = Field(
        default=None, description="Path to the loaded config file"
    )
    base_url: Optional[str] = Field(
        default=None, description="Base URL of the n8n instance"
    )
    api_key: Optional[str] = Field(
        default=None, description="n8n public API key", repr=False
    )
    timeout_ms: int = Field(default=30000, ge=1, description="Request timeout")
    max_retries: int = Field(
        default=3, ge=0, description="Retries for requests that got no response"
    )
    retry_backoff: float = Field(
        default=1.0, ge=0, description="Base delay in seconds between retries"
    )
    examples_dir: str = Field(
        default="examples/workflows",
        description="Directory holding example workflow JSON files",
    )
    log_level: str = Field(default="INFO")

    @property
    def api_url(self) -> str:
        return f"{(self.base_url or '').rstrip('/')}/api/v1"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def load(
        cls, config_path: Optional[str] = None, env: Optional[Dict[str, str]] = None
    ) -> "Config":
        """Load configuration from a YAML file and the environment.

        Environment variables take precedence over values from the file.
        """
        config_data: Dict[str, Any] = {}

        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")

            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}

            if not isinstance(config_data, dict):
                raise ConfigError(f"Invalid configuration in {config_path}")

        environ = os.environ if env is None else env
        for var, field_name in ENV_VARS.items():
            value = environ.get(var)
            if value:
                config_data[field_name] = value

        for field_name in ("timeout_ms", "max_retries"):
            value = config_data.get(field_name)
            if isinstance(value, str):
                try:
                    config_data[field_name] = int(value)
                except ValueError:
                    raise ConfigError(f"{field_name} must be an integer, got {value!r}")

        try:
            config = cls(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
        config.config_path = config_path
        return config

    def require_credentials(self) -> None:
        """Fail fast when the n8n base URL or API key is missing."""
        missing = []
        if not self.base_url:
            missing.append("N8N_BASE_URL")
        if not self.api_key:
            missing.append("N8N_API_KEY")
        if missing:
            raise ConfigError(
                f"Missing required configuration: {', '.join(missing)}"
            )
