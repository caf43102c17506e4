"""Gateway configuration with Pydantic validation.

This module provides the frozen configuration object shared by every
RequestGateway instance, with support for YAML files and environment
overrides.
"""

import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_ORIGIN = "VOICE_API_ORIGIN"
ENV_API_VERSION = "VOICE_API_VERSION"
ENV_SESSION_KEY = "VOICE_SESSION_KEY"


class GatewayConfig(BaseModel):
    """Where the backend lives and how the gateway talks to it.

    The configuration can be:
    - Instantiated with defaults: `GatewayConfig()`
    - Loaded from YAML: `GatewayConfig.from_yaml("voice.yaml")`
    - Built from the environment: `GatewayConfig.from_env()`
    """

    model_config = ConfigDict(frozen=True)

    origin: str = Field(
        "http://localhost:9000",
        min_length=1,
        description="Scheme, host and port of the web application",
    )
    api_prefix: str = Field(
        "/api",
        description="Path prefix of the REST API below the origin",
    )
    api_version: str = Field(
        "v1",
        min_length=1,
        description="Version segment appended to the API prefix",
    )
    session_key: str = Field(
        "userdata",
        min_length=1,
        description="Session store key cleared when the server answers 401",
    )
    client_id_header: str = Field(
        "client_id",
        min_length=1,
        description="Header carrying the anonymous client identifier",
    )

    @field_validator("origin")
    @classmethod
    def _strip_origin(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip("/")
        return f"/{value}" if value else ""

    @property
    def api_path(self) -> str:
        """Absolute URL of the versioned API root."""
        return f"{self.origin}{self.api_prefix}/{self.api_version}"

    @classmethod
    def from_yaml(cls, path: str) -> "GatewayConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            A validated GatewayConfig instance.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            ValidationError: If the configuration is invalid.
        """
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_env(cls, base: "GatewayConfig | None" = None) -> "GatewayConfig":
        """Apply environment overrides on top of ``base`` (or the defaults)."""
        config = base or cls()
        overrides: dict[str, str] = {}
        if origin := os.environ.get(ENV_ORIGIN):
            overrides["origin"] = origin
        if version := os.environ.get(ENV_API_VERSION):
            overrides["api_version"] = version
        if session_key := os.environ.get(ENV_SESSION_KEY):
            overrides["session_key"] = session_key
        if not overrides:
            return config
        return cls.model_validate({**config.model_dump(), **overrides})

    def to_yaml(self, path: str) -> None:
        """Save configuration to a YAML file.

        Args:
            path: Path where the YAML file will be saved.
        """
        with open(path, "w") as f:
            yaml.dump(
                self.model_dump(),
                f,
                default_flow_style=False,
                sort_keys=False,
            )
