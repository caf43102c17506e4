"""Per-call request options for the gateway's dispatch routine.

The request body is an explicit tagged variant: callers pick ``NoBody``,
``BinaryBody`` or ``JsonBody`` instead of relying on runtime type sniffing.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class ContentMode(str, Enum):
    """How a successful response body is decoded."""

    JSON = "json"
    TEXT = "text"


class FailurePolicy(str, Enum):
    """What dispatch does with a classified failure."""

    PROPAGATE = "propagate"
    RETURN = "return"


@dataclass(frozen=True)
class NoBody:
    """The request carries no body."""

    def encode(self) -> bytes | None:
        return None


@dataclass(frozen=True)
class BinaryBody:
    """Raw media (e.g. an audio clip) sent unmodified."""

    data: bytes
    content_type: str = "application/octet-stream"

    def encode(self) -> bytes | None:
        return self.data


@dataclass(frozen=True)
class JsonBody:
    """A structured value serialized to JSON text.

    Pydantic models are dumped by alias with ``None`` fields left out, so
    the wire keys match what the server expects.
    """

    value: Any

    def encode(self) -> bytes | None:
        value = self.value
        if isinstance(value, BaseModel):
            value = value.model_dump(by_alias=True, exclude_none=True)
        return json.dumps(value).encode("utf-8")


RequestBody = NoBody | BinaryBody | JsonBody
