"""Root Typer app — global options and command group registration."""

from __future__ import annotations

from typing import Optional

import typer

from wp_manager import __version__
from wp_manager.client.errors import error_handler
from wp_manager.commands import config_cmd, plugin, site, theme
from wp_manager.config.manager import ConfigManager
from wp_manager.log import configure_logging

app = typer.Typer(
    name="wp-manager",
    help="Manage a fleet of WordPress sites through the WP Manager Connector plugin.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"wp-manager {__version__}")
        raise typer.Exit()


@app.callback()
@error_handler
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and sync progress."),
) -> None:
    """WP Manager: keep many WordPress sites in check from one console."""
    configure_logging(ConfigManager().resolve_log_level(verbose))


# Register command groups
app.add_typer(config_cmd.app, name="config")
app.add_typer(site.app, name="site")
app.add_typer(plugin.app, name="plugin")
app.add_typer(theme.app, name="theme")


def main() -> None:
    app()
