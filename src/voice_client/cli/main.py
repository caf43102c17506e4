"""Main CLI application and entry point.

This module defines the main Typer application and aggregates the
command groups (api, config).
"""

import logging
from typing import Annotated

import typer

from voice_client.cli.commands import api as api_commands
from voice_client.cli.commands import config as config_commands

app = typer.Typer(
    name="voice-client",
    help="Command-line client for the voice-collection web API",
    no_args_is_help=True,
    pretty_exceptions_enable=True,
)

app.add_typer(api_commands.app, name="api", help="Call backend endpoints")
app.add_typer(config_commands.app, name="config", help="Configuration utilities")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every request"),
    ] = False,
) -> None:
    """Voice-collection API client.

    Use the subcommands to query a running backend and to check
    configuration files.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


if __name__ == "__main__":
    app()
