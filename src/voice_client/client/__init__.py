"""HTTP client module for the voice-collection web API.

This module provides the async request gateway, its per-call request
options, and the session stores it clears on expiry.

Usage:
    from voice_client.client import RequestGateway, GatewayRequestError

    async with RequestGateway("en", user) as api:
        clips = await api.fetch_random_clips(5)
"""

from voice_client.client.http_client import (
    SAVE_CLIP_ERROR,
    ClipSaveError,
    GatewayError,
    GatewayRequestError,
    MalformedResponseError,
    RequestGateway,
)
from voice_client.client.request import (
    BinaryBody,
    ContentMode,
    FailurePolicy,
    JsonBody,
    NoBody,
    RequestBody,
)
from voice_client.client.session import (
    FileSessionStore,
    MemorySessionStore,
    SessionStore,
)

__all__ = [
    "RequestGateway",
    "GatewayError",
    "GatewayRequestError",
    "ClipSaveError",
    "MalformedResponseError",
    "SAVE_CLIP_ERROR",
    "BinaryBody",
    "JsonBody",
    "NoBody",
    "RequestBody",
    "ContentMode",
    "FailurePolicy",
    "SessionStore",
    "MemorySessionStore",
    "FileSessionStore",
]
