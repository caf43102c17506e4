"""Pydantic models for the voice client.

Usage:
    from voice_client.models import Clip, Sentence, UserIdentity
"""

from voice_client.models.api import (
    ActivityPoint,
    ActivitySource,
    AvatarKind,
    AwardKind,
    Clip,
    ClipStat,
    DocumentName,
    LanguageRequest,
    LeaderboardKind,
    Sentence,
    VoteRequest,
)
from voice_client.models.user import UserClient, UserIdentity

__all__ = [
    # API payloads
    "ActivityPoint",
    "Clip",
    "ClipStat",
    "LanguageRequest",
    "Sentence",
    "VoteRequest",
    # Literal aliases
    "ActivitySource",
    "AvatarKind",
    "AwardKind",
    "DocumentName",
    "LeaderboardKind",
    # Users
    "UserClient",
    "UserIdentity",
]
