"""Engine configuration CLI commands."""

import typer
from pydantic import ValidationError

from plantree.domain.shared import Err
from plantree.global_config import (
    CONFIG_FILE,
    EngineConfig,
    get_config_dir,
    get_engine_config,
    save_engine_config,
)
from plantree.interfaces.cli.common import print_error, print_header, print_success

app = typer.Typer(help="Engine configuration commands")


@app.command("show")
def show() -> None:
    """Show the current engine settings."""
    config = get_engine_config()
    print_header(f"Config: {get_config_dir() / CONFIG_FILE}")
    for key, value in config.model_dump().items():
        typer.echo(f"{key} = {value}")


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name (see 'config show')"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change one engine setting."""
    if key not in EngineConfig.model_fields:
        print_error(f"Unknown setting: {key}")
        raise typer.Exit(1)

    config = get_engine_config()
    try:
        setattr(config, key, value)
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    result = save_engine_config(config)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"{key} = {getattr(config, key)}")
