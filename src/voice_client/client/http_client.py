"""Async request gateway for the voice-collection REST API.

This module provides the single dispatch routine every endpoint call goes
through (header assembly, body encoding, session-expiry handling and error
classification), the locale-aware path helpers, and one method per backend
route.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar
from urllib.parse import quote

from httpx import AsyncClient, Headers, HTTPError, Response, URL
from pydantic import BaseModel, TypeAdapter, ValidationError

from voice_client.client.request import (
    JSON_CONTENT_TYPE,
    BinaryBody,
    ContentMode,
    FailurePolicy,
    HttpMethod,
    JsonBody,
    NoBody,
    RequestBody,
)
from voice_client.client.session import MemorySessionStore, SessionStore
from voice_client.config import GatewayConfig
from voice_client.models import (
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
    UserClient,
    UserIdentity,
    VoteRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

SAVE_CLIP_ERROR = "save_clip_error"

ReloadCallback = Callable[[], Awaitable[None] | None]


# =============================================================================
# Custom Exceptions
# =============================================================================


class GatewayError(Exception):
    """Base exception for request gateway errors."""

    pass


class GatewayRequestError(GatewayError):
    """Raised when the server answers with a status of 400 or above.

    The message is the raw response body, which may be empty.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ClipSaveError(GatewayRequestError):
    """Raised when the server rejects a clip with the save_clip_error status."""

    def __init__(self, status_code: int | None = None):
        super().__init__(SAVE_CLIP_ERROR, status_code=status_code)


class MalformedResponseError(GatewayError):
    """Raised when a successful response cannot be decoded or validated."""

    pass


# =============================================================================
# Request Gateway
# =============================================================================


class RequestGateway:
    """Locale-scoped async client for the voice-collection backend.

    The gateway reads ``user`` on every request and never caches anything
    derived from it. It either owns its httpx client (created by
    ``connect()``) or uses one handed in as ``transport``, which it then
    leaves open on ``close()``.

    Example:
        async with RequestGateway("fr", UserIdentity(user_id="abc")) as api:
            sentences = await api.fetch_random_sentences(3)
            await api.save_vote(clip.id, is_valid=True)
    """

    def __init__(
        self,
        locale: str | None,
        user: UserIdentity,
        *,
        config: GatewayConfig | None = None,
        transport: AsyncClient | None = None,
        session_store: SessionStore | None = None,
        on_session_expired: ReloadCallback | None = None,
    ):
        """Initialize the gateway.

        Args:
            locale: Language/region segment for locale-scoped routes, or None
                to use the global API root.
            user: Identity of the current user, owned by the caller.
            config: Origin and API layout (default: GatewayConfig()).
            transport: Shared httpx client. When omitted, ``connect()``
                creates one owned by this gateway.
            session_store: Store holding the persisted session identifier.
            on_session_expired: Called after a 401 has cleared the session;
                may be a coroutine function.
        """
        self.locale = locale
        self.user = user
        self.config = config or GatewayConfig()
        self.session_store: SessionStore = session_store or MemorySessionStore()
        self.on_session_expired = on_session_expired
        self.api_path = self.config.api_path
        self._origin = URL(self.config.origin)
        self._client = transport
        self._owns_client = transport is None
        self._parent: RequestGateway | None = None

    async def __aenter__(self) -> RequestGateway:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Create the owned httpx client if no transport was supplied.

        Re-scoped gateways connect the gateway they were derived from.
        """
        if self._parent is not None:
            await self._parent.connect()
        elif self._client is None:
            self._client = AsyncClient(base_url=self.config.origin)
            self._owns_client = True
            logger.debug("Gateway connected to %s", self.config.origin)

    async def close(self) -> None:
        """Close the httpx client if this gateway created it.

        A re-scoped gateway never closes the client it borrows.
        """
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("Gateway closed")

    def for_locale(self, locale: str | None) -> RequestGateway:
        """Return a new gateway for ``locale`` sharing this one's user and transport.

        The new gateway looks up this gateway's client on every request, so
        it may be created before ``connect()`` and stops working once this
        gateway is closed.
        """
        scoped = RequestGateway(
            locale,
            self.user,
            config=self.config,
            session_store=self.session_store,
            on_session_expired=self.on_session_expired,
        )
        scoped._owns_client = False
        scoped._parent = self
        return scoped

    def _active_client(self) -> AsyncClient | None:
        if self._parent is not None:
            return self._parent._active_client()
        return self._client

    # =========================================================================
    # Path Helpers
    # =========================================================================

    def get_locale_path(self) -> str:
        return f"{self.api_path}/{self.locale}" if self.locale else self.api_path

    def get_clip_path(self) -> str:
        return self.get_locale_path() + "/clips"

    def _global_path(self, locale: str | None, suffix: str) -> str:
        # Routes that take an explicit locale argument instead of self.locale
        return self.api_path + (f"/{locale}" if locale else "") + suffix

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def dispatch(
        self,
        path: str,
        *,
        method: HttpMethod = "GET",
        headers: Mapping[str, str] | None = None,
        body: RequestBody | None = None,
        content_mode: ContentMode = ContentMode.JSON,
        failure_policy: FailurePolicy = FailurePolicy.PROPAGATE,
    ) -> Any:
        """Issue one request and classify the response.

        Args:
            path: Absolute URL or origin-relative path.
            method: HTTP verb (default: GET).
            headers: Extra headers; they win over the defaults.
            body: NoBody, BinaryBody or JsonBody (default: NoBody).
            content_mode: Decode a successful body as JSON or return its text.
            failure_policy: Raise classified failures, or return them.

        Returns:
            The decoded body. None when the body is empty in JSON mode, or
            when the server reported the session as expired (401).

        Raises:
            ClipSaveError: Status >= 400 with the save_clip_error status text.
            GatewayRequestError: Any other status >= 400.
            MalformedResponseError: A JSON-mode body that is not valid JSON.
            httpx.HTTPError: Transport failures, uninterpreted.
        """
        client = self._active_client()
        if client is None:
            raise GatewayError("Gateway not connected. Call connect() first.")

        body = body if body is not None else NoBody()
        url = self._origin.join(path)
        final_headers = self._build_headers(path, headers, body, content_mode)

        logger.debug("Request %s %s", method, url)
        try:
            response = await client.request(
                method,
                url,
                headers=final_headers,
                content=body.encode(),
            )
        except HTTPError as e:
            logger.warning("Transport failure on %s %s: %s", method, url, e)
            if failure_policy is FailurePolicy.RETURN:
                return e
            raise

        return await self._handle_response(response, content_mode, failure_policy)

    def _build_headers(
        self,
        path: str,
        headers: Mapping[str, str] | None,
        body: RequestBody,
        content_mode: ContentMode,
    ) -> Headers:
        final_headers = Headers()
        if isinstance(body, BinaryBody):
            final_headers["Content-Type"] = body.content_type
        elif content_mode is ContentMode.JSON:
            final_headers["Content-Type"] = JSON_CONTENT_TYPE
        if headers:
            final_headers.update(headers)

        if self._targets_api_origin(path) and not self.user.is_authenticated:
            final_headers[self.config.client_id_header] = self.user.user_id
        return final_headers

    def _targets_api_origin(self, path: str) -> bool:
        # Only absolute URLs on the configured origin; origin-relative paths
        # (message catalogs, legal documents) go out without client_id.
        origin = self.config.origin
        return path == origin or path.startswith(origin + "/")

    async def _handle_response(
        self,
        response: Response,
        content_mode: ContentMode,
        failure_policy: FailurePolicy,
    ) -> Any:
        status = response.status_code

        if status == 401:
            await self._expire_session(response)
            return None

        if status >= 400:
            error: GatewayError
            if response.reason_phrase == SAVE_CLIP_ERROR:
                error = ClipSaveError(status_code=status)
            else:
                error = GatewayRequestError(response.text, status_code=status)
            logger.warning(
                "API error %d on %s: %s", status, response.request.url, error
            )
            return self._fail(error, failure_policy)

        if content_mode is ContentMode.TEXT:
            return response.text

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            error = MalformedResponseError(f"Invalid JSON in response: {e}")
            error.__cause__ = e
            return self._fail(error, failure_policy)

    async def _expire_session(self, response: Response) -> None:
        logger.warning(
            "Session rejected by %s; clearing stored session %r",
            response.request.url,
            self.config.session_key,
        )
        self.session_store.remove(self.config.session_key)
        if self.on_session_expired is not None:
            result = self.on_session_expired()
            if inspect.isawaitable(result):
                await result

    @staticmethod
    def _fail(error: GatewayError, failure_policy: FailurePolicy) -> GatewayError:
        if failure_policy is FailurePolicy.RETURN:
            return error
        raise error

    # =========================================================================
    # Response Validation
    # =========================================================================

    @staticmethod
    def _validate(model: type[T], data: Any) -> T | None:
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Response validation error: {e}") from e

    @staticmethod
    def _validate_list(model: type[T], data: Any) -> list[T] | None:
        if data is None:
            return None
        try:
            adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
            return adapter.validate_python(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Response validation error: {e}") from e

    # =========================================================================
    # Sentences & Clips
    # =========================================================================

    async def fetch_random_sentences(self, count: int = 1) -> list[Sentence] | None:
        """Fetch ``count`` random sentences to record for the current locale."""
        data = await self.dispatch(f"{self.get_locale_path()}/sentences?count={count}")
        return self._validate_list(Sentence, data)

    async def fetch_random_clips(self, count: int = 1) -> list[Clip] | None:
        """Fetch ``count`` random clips to validate for the current locale."""
        data = await self.dispatch(f"{self.get_clip_path()}?count={count}")
        return self._validate_list(Clip, data)

    async def upload_clip(
        self,
        audio: BinaryBody,
        sentence_id: str,
        sentence: str,
    ) -> Any:
        """Upload a recording of ``sentence``.

        The sentence metadata travels in headers; the sentence text is
        percent-encoded so that any script survives the header encoding.

        Raises:
            ClipSaveError: If the server refused to store the clip.
        """
        return await self.dispatch(
            self.get_clip_path(),
            method="POST",
            headers={
                "sentence": quote(sentence, safe="-_.!~*'()"),
                "sentence_id": sentence_id,
            },
            body=audio,
        )

    async def save_vote(self, clip_id: str, is_valid: bool) -> Any:
        """Record a validation vote for a clip."""
        return await self.dispatch(
            f"{self.get_clip_path()}/{clip_id}/votes",
            method="POST",
            body=JsonBody(VoteRequest(is_valid=is_valid)),
        )

    async def fetch_validated_hours(self) -> float | None:
        return await self.dispatch(self.get_clip_path() + "/validated_hours")

    async def fetch_daily_clips_count(self) -> int | None:
        return await self.dispatch(self.get_clip_path() + "/daily_count")

    async def fetch_daily_votes_count(self) -> int | None:
        return await self.dispatch(self.get_clip_path() + "/votes/daily_count")

    async def fetch_leaderboard(
        self,
        kind: LeaderboardKind,
        cursor: tuple[int, int] | None = None,
    ) -> Any:
        """Fetch the clip or vote leaderboard for the current locale.

        Args:
            kind: "clip" for recordings, "vote" for validations.
            cursor: Opaque pagination cursor returned by a previous page.
        """
        path = self.get_clip_path() + ("" if kind == "clip" else "/votes")
        path += "/leaderboard"
        if cursor:
            path += "?cursor=" + quote(json.dumps(list(cursor), separators=(",", ":")))
        return await self.dispatch(path)

    async def save_has_downloaded(self, email: str) -> Any:
        return await self.dispatch(
            f"{self.get_locale_path()}/downloaders/{quote(email, safe='@')}",
            method="POST",
        )

    # =========================================================================
    # Locale Documents
    # =========================================================================

    async def fetch_locale_messages(self, locale: str) -> str | None:
        """Fetch the Fluent message catalog for ``locale`` as raw text."""
        return await self.dispatch(
            f"/locales/{locale}/messages.ftl", content_mode=ContentMode.TEXT
        )

    async def fetch_cross_locale_messages(self) -> list[tuple[str, str]] | None:
        data = await self.dispatch("/cross-locale-messages.json")
        if data is None:
            return None
        return list(data.items())

    async def fetch_document(self, name: DocumentName) -> str | None:
        """Fetch the privacy notice or terms for the current locale as HTML."""
        if not self.locale:
            raise ValueError(f"Fetching the {name} document requires a locale")
        return await self.dispatch(
            f"/{name}/{self.locale}.html", content_mode=ContentMode.TEXT
        )

    # =========================================================================
    # Languages
    # =========================================================================

    async def fetch_requested_languages(self) -> list[str] | None:
        return await self.dispatch(f"{self.api_path}/requested_languages")

    async def request_language(self, language: str) -> Any:
        return await self.dispatch(
            f"{self.api_path}/requested_languages",
            method="POST",
            body=JsonBody(LanguageRequest(language=language)),
        )

    async def fetch_language_stats(self) -> Any:
        return await self.dispatch(f"{self.api_path}/language_stats")

    async def skip_sentence(self, sentence_id: str) -> Any:
        return await self.dispatch(
            f"{self.api_path}/skipped_sentences/{sentence_id}", method="POST"
        )

    # =========================================================================
    # Statistics
    # =========================================================================

    async def fetch_clips_stats(
        self, locale: str | None = None
    ) -> list[ClipStat] | None:
        data = await self.dispatch(self._global_path(locale, "/clips/stats"))
        return self._validate_list(ClipStat, data)

    async def fetch_clip_voices(
        self, locale: str | None = None
    ) -> list[ActivityPoint] | None:
        data = await self.dispatch(self._global_path(locale, "/clips/voices"))
        return self._validate_list(ActivityPoint, data)

    async def fetch_contribution_activity(
        self,
        source: ActivitySource,
        locale: str | None = None,
    ) -> list[ActivityPoint] | None:
        """Fetch contribution activity, either the user's own or everyone's."""
        data = await self.dispatch(
            self._global_path(locale, f"/contribution_activity?from={source}")
        )
        return self._validate_list(ActivityPoint, data)

    # =========================================================================
    # Account
    # =========================================================================

    async def fetch_user_clients(self) -> list[UserClient] | None:
        data = await self.dispatch(f"{self.api_path}/user_clients")
        return self._validate_list(UserClient, data)

    async def fetch_account(self) -> UserClient | None:
        data = await self.dispatch(f"{self.api_path}/user_client")
        return self._validate(UserClient, data)

    async def save_account(self, data: UserClient) -> UserClient | None:
        """Update the account profile; returns the profile as stored."""
        saved = await self.dispatch(
            f"{self.api_path}/user_client",
            method="PATCH",
            body=JsonBody(data),
        )
        return self._validate(UserClient, saved)

    async def subscribe_to_newsletter(self, email: str) -> Any:
        return await self.dispatch(
            f"{self.api_path}/newsletter/{quote(email, safe='@')}", method="POST"
        )

    async def save_avatar(
        self,
        kind: AvatarKind,
        file: BinaryBody | None = None,
    ) -> Any:
        """Set the avatar from the default, an uploaded file, or Gravatar.

        The server's reply is read as text and decoded here rather than in
        dispatch.
        """
        text = await self.dispatch(
            f"{self.api_path}/user_client/avatar/{kind}",
            method="POST",
            content_mode=ContentMode.TEXT,
            body=file,
        )
        if text is None:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON in avatar response: {e}") from e

    async def save_avatar_clip(self, audio: BinaryBody) -> Any:
        """Upload the voice clip shown on the profile.

        Failures are returned, not raised: the result is either the server's
        reply or the exception describing what went wrong.
        """
        return await self.dispatch(
            f"{self.api_path}/user_client/avatar_clip",
            method="POST",
            body=audio,
            failure_policy=FailurePolicy.RETURN,
        )

    async def fetch_avatar_clip(self) -> Any:
        return await self.dispatch(f"{self.api_path}/user_client/avatar_clip")

    async def create_goal(self, params: dict[str, Any]) -> Any:
        return await self.dispatch(
            f"{self.api_path}/user_client/goals",
            method="POST",
            body=JsonBody(params),
        )

    async def fetch_goals(self, locale: str | None = None) -> Any:
        return await self.dispatch(
            f"{self.api_path}/user_client" + (f"/{locale}" if locale else "") + "/goals"
        )

    async def claim_account(self) -> Any:
        """Attach the anonymous contributions of this client to the account."""
        return await self.dispatch(
            f"{self.api_path}/user_clients/{quote(self.user.user_id, safe='')}/claim",
            method="POST",
        )

    async def seen_awards(self, kind: AwardKind = "award") -> Any:
        return await self.dispatch(
            f"{self.api_path}/user_client/awards/seen"
            + ("?notification" if kind == "notification" else ""),
            method="POST",
        )

    async def report(self, body: dict[str, Any]) -> Any:
        """Report a problem with a sentence or clip."""
        return await self.dispatch(
            f"{self.api_path}/reports", method="POST", body=JsonBody(body)
        )
