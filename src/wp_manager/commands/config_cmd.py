"""Config commands — inspect and change CLI settings."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from wp_manager.client.errors import error_handler
from wp_manager.config.manager import ConfigManager
from wp_manager.config.models import Settings
from wp_manager.output.formatter import output

app = typer.Typer(name="config", help="Show and change CLI settings.")
console = Console()

KeyArg = Annotated[str, typer.Argument(help="Setting name, e.g. timeout")]


def _get_manager() -> ConfigManager:
    return ConfigManager()


@app.command()
@error_handler
def show(
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show the effective settings."""
    mgr = _get_manager()
    data = mgr.settings.model_dump(mode="json")
    data["sites_file"] = str(mgr.resolve_sites_path())
    output(data, fmt, kv=True, title="Settings")


@app.command("set")
@error_handler
def set_value(
    key: KeyArg,
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change one setting."""
    mgr = _get_manager()
    settings = mgr.set_value(key, value)
    console.print(f"[green]{key} = {getattr(settings, key)}[/]")


@app.command()
@error_handler
def unset(key: KeyArg) -> None:
    """Restore one setting to its default."""
    mgr = _get_manager()
    settings = mgr.unset(key)
    console.print(f"[green]{key} reset to {getattr(settings, key)}[/]")


@app.command()
@error_handler
def keys() -> None:
    """List the settings that can be changed."""
    output(
        None,
        "table",
        columns=["Key", "Default", "Description"],
        rows=[
            [name, field.default, field.description or ""]
            for name, field in Settings.model_fields.items()
        ],
        title="Settings",
    )


@app.command()
@error_handler
def path() -> None:
    """Print where the config and sites files live."""
    mgr = _get_manager()
    console.print(f"Config: {mgr.config_path}", markup=False, soft_wrap=True)
    console.print(f"Sites:  {mgr.resolve_sites_path()}", markup=False, soft_wrap=True)
