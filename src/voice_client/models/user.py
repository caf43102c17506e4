"""User identity and account models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserClient(BaseModel):
    """Account profile returned by GET /user_client.

    Only the commonly used fields are declared; anything else the server
    sends is kept as extra data so that ``save_account`` can echo it back.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    client_id: str | None = None
    email: str | None = None
    username: str | None = None
    visible: bool | int | None = None
    age: str | None = None
    gender: str | None = None
    locales: list[dict[str, Any]] | None = None
    avatar_url: str | None = None
    avatar_clip_url: str | None = None
    clips_count: int | None = None
    votes_count: int | None = None
    basket_token: str | None = None
    skip_submission_feedback: bool | None = None
    awards: list[dict[str, Any]] | None = None
    custom_goals: list[dict[str, Any]] | None = None


class UserIdentity(BaseModel):
    """Who the gateway is talking on behalf of.

    ``user_id`` is the stable anonymous client identifier. ``account`` is
    set once the user has signed in; the session itself travels as a cookie
    on the transport. The caller owns this object and may replace
    ``account`` at any time; the gateway re-reads it on every request.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    account: UserClient | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None
