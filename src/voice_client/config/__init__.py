"""Configuration module for the request gateway.

This module provides the Pydantic-based gateway configuration, with
support for YAML file loading and environment overrides.
"""

from voice_client.config.gateway_config import (
    ENV_API_VERSION,
    ENV_ORIGIN,
    ENV_SESSION_KEY,
    GatewayConfig,
)

__all__ = [
    "GatewayConfig",
    "ENV_ORIGIN",
    "ENV_API_VERSION",
    "ENV_SESSION_KEY",
]
