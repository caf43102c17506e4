"""Config subcommands for configuration management."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError

from voice_client.cli.utils.output import console, print_error, print_success
from voice_client.config import GatewayConfig

app = typer.Typer(no_args_is_help=True)


@app.command("validate")
def validate(
    config_path: Annotated[
        Path,
        typer.Argument(
            help="Path to configuration file to validate",
            exists=True,
            dir_okay=False,
        ),
    ],
) -> None:
    """Validate a gateway configuration file.

    Examples:
        python -m voice_client.cli config validate voice.yaml
    """
    try:
        with open(config_path) as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        print_error(f"Invalid YAML syntax: {e}")
        raise typer.Exit(1)

    if raw_data is not None and not isinstance(raw_data, dict):
        print_error("Configuration must be a YAML mapping (dictionary)")
        raise typer.Exit(1)

    try:
        config = GatewayConfig.model_validate(raw_data or {})
    except ValidationError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    print_success(f"Configuration is valid (API root: {config.api_path})")


@app.command("show")
def show(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file to load"),
    ] = None,
) -> None:
    """Show the effective configuration, including environment overrides."""
    base = GatewayConfig.from_yaml(str(config_path)) if config_path else None
    config = GatewayConfig.from_env(base)
    console.print(
        yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
    )
    console.print(f"[cyan]API root:[/cyan] {config.api_path}")
