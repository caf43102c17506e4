"""HTTP API request/response models.

This module contains Pydantic models for payloads exchanged with the voice
collection backend. Leaderboard, goal and language-stat payloads are left
as plain JSON values.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Sentences & Clips
# =============================================================================


class Sentence(BaseModel):
    """A prompt sentence to be read aloud by a contributor."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str


class Clip(BaseModel):
    """A recorded clip waiting for validation votes."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    glob: str
    text: str
    sound: str


class VoteRequest(BaseModel):
    """Request body for POST /clips/{id}/votes."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")


# =============================================================================
# Statistics
# =============================================================================


class ClipStat(BaseModel):
    """One data point from GET /clips/stats."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    total: int
    valid: int


class ActivityPoint(BaseModel):
    """One data point from GET /clips/voices or /contribution_activity."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    value: float


# =============================================================================
# Languages
# =============================================================================


class LanguageRequest(BaseModel):
    """Request body for POST /requested_languages."""

    model_config = ConfigDict(populate_by_name=True)

    language: str


ActivitySource = Literal["you", "everyone"]
DocumentName = Literal["privacy", "terms"]
LeaderboardKind = Literal["clip", "vote"]
AvatarKind = Literal["default", "file", "gravatar"]
AwardKind = Literal["award", "notification"]
