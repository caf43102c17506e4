"""API subcommands that call a running backend."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Any

import typer
from httpx import HTTPError

from voice_client.cli.utils.output import (
    console,
    create_clip_table,
    create_leaderboard_table,
    create_sentence_table,
    create_stats_table,
    print_error,
    print_warning,
)
from voice_client.client import FileSessionStore, GatewayError, RequestGateway
from voice_client.config import GatewayConfig
from voice_client.models import LeaderboardKind, UserIdentity

app = typer.Typer(no_args_is_help=True)

DEFAULT_SESSION_FILE = "~/.voice_client/session.json"

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Gateway configuration file"),
]
SessionOption = Annotated[
    str,
    typer.Option("--session-file", help="File holding the stored session"),
]
UserOption = Annotated[
    str | None,
    typer.Option("--user-id", help="Anonymous client id (default: stored or new)"),
]
LocaleOption = Annotated[
    str | None,
    typer.Option("--locale", "-l", help="Locale to scope requests to"),
]


def load_identity(
    store: FileSessionStore,
    session_key: str,
    user_id: str | None,
) -> UserIdentity:
    """Return the identity to act as, creating and storing one if needed."""
    if user_id:
        return UserIdentity(user_id=user_id)
    stored = store.get(session_key)
    if isinstance(stored, dict) and stored.get("userId"):
        return UserIdentity.model_validate(stored)
    identity = UserIdentity(user_id=str(uuid.uuid4()))
    store.set(session_key, identity.model_dump(by_alias=True, exclude_none=True))
    return identity


def build_gateway(
    config_path: Path | None,
    session_file: str,
    user_id: str | None,
    locale: str | None,
) -> RequestGateway:
    base = GatewayConfig.from_yaml(str(config_path)) if config_path else None
    config = GatewayConfig.from_env(base)
    store = FileSessionStore(Path(session_file).expanduser())
    user = load_identity(store, config.session_key, user_id)
    return RequestGateway(locale, user, config=config, session_store=store)


def run_call(
    gateway: RequestGateway,
    call: Callable[[RequestGateway], Awaitable[Any]],
) -> Any:
    """Run one gateway call, turning failures into a non-zero exit.

    A call that ends the session also exits non-zero, after the stored
    session has been cleared.
    """
    expired = False

    def on_session_expired() -> None:
        nonlocal expired
        expired = True
        print_warning("Session expired; the stored session was cleared. Sign in again.")

    gateway.on_session_expired = on_session_expired

    async def _run() -> Any:
        async with gateway:
            return await call(gateway)

    try:
        result = asyncio.run(_run())
    except GatewayError as e:
        print_error(f"Request failed: {e}")
        raise typer.Exit(1)
    except HTTPError as e:
        print_error(f"Could not reach {gateway.config.origin}: {e}")
        raise typer.Exit(1)
    if expired:
        raise typer.Exit(1)
    return result


@app.command("sentences")
def sentences(
    count: Annotated[int, typer.Option("--count", "-n", min=1)] = 1,
    locale: LocaleOption = None,
    config_path: ConfigOption = None,
    session_file: SessionOption = DEFAULT_SESSION_FILE,
    user_id: UserOption = None,
) -> None:
    """Fetch random sentences to record.

    Examples:
        python -m voice_client.cli api sentences --locale fr --count 3
    """
    gateway = build_gateway(config_path, session_file, user_id, locale)
    result = run_call(gateway, lambda api: api.fetch_random_sentences(count))
    if result is not None:
        console.print(create_sentence_table(result))


@app.command("clips")
def clips(
    count: Annotated[int, typer.Option("--count", "-n", min=1)] = 1,
    locale: LocaleOption = None,
    config_path: ConfigOption = None,
    session_file: SessionOption = DEFAULT_SESSION_FILE,
    user_id: UserOption = None,
) -> None:
    """Fetch random clips to validate."""
    gateway = build_gateway(config_path, session_file, user_id, locale)
    result = run_call(gateway, lambda api: api.fetch_random_clips(count))
    if result is not None:
        console.print(create_clip_table(result))


@app.command("languages")
def languages(
    config_path: ConfigOption = None,
    session_file: SessionOption = DEFAULT_SESSION_FILE,
    user_id: UserOption = None,
) -> None:
    """List languages users have asked to be added."""
    gateway = build_gateway(config_path, session_file, user_id, None)
    result = run_call(gateway, lambda api: api.fetch_requested_languages())
    if not result:
        console.print("[yellow]No requested languages[/yellow]")
        return
    for language in result:
        console.print(f"  - {language}")


@app.command("stats")
def stats(
    locale: LocaleOption = None,
    config_path: ConfigOption = None,
    session_file: SessionOption = DEFAULT_SESSION_FILE,
    user_id: UserOption = None,
) -> None:
    """Show recorded and validated clip totals over time."""
    gateway = build_gateway(config_path, session_file, user_id, None)
    result = run_call(gateway, lambda api: api.fetch_clips_stats(locale))
    if result is not None:
        console.print(create_stats_table(result))


@app.command("leaderboard")
def leaderboard(
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="clip or vote"),
    ] = "clip",
    locale: LocaleOption = None,
    config_path: ConfigOption = None,
    session_file: SessionOption = DEFAULT_SESSION_FILE,
    user_id: UserOption = None,
) -> None:
    """Show the recording or validation leaderboard."""
    if kind not in ("clip", "vote"):
        print_error(f"Unknown leaderboard kind: {kind}")
        raise typer.Exit(1)
    board_kind: LeaderboardKind = "clip" if kind == "clip" else "vote"

    gateway = build_gateway(config_path, session_file, user_id, locale)
    result = run_call(gateway, lambda api: api.fetch_leaderboard(board_kind))
    if isinstance(result, list):
        console.print(create_leaderboard_table(result))
    elif result is not None:
        console.print(result)


@app.command("messages")
def messages(
    locale: Annotated[str, typer.Argument(help="Locale of the message catalog")],
    config_path: ConfigOption = None,
    session_file: SessionOption = DEFAULT_SESSION_FILE,
    user_id: UserOption = None,
) -> None:
    """Print the raw message catalog for a locale."""
    gateway = build_gateway(config_path, session_file, user_id, None)
    result = run_call(gateway, lambda api: api.fetch_locale_messages(locale))
    if result is not None:
        console.print(result, markup=False, highlight=False)
