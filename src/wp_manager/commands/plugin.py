"""Plugin commands — list, update, activate, and install plugins across sites."""

from __future__ import annotations

from typing import Annotated

import typer

from wp_manager.client.errors import error_handler
from wp_manager.commands import _items
from wp_manager.commands._common import (
    ConcurrencyOpt,
    FormatOpt,
    SiteIdArg,
    SitesOpt,
    run,
)

app = typer.Typer(name="plugin", help="Manage plugins on one or many sites.")

SlugArg = Annotated[str, typer.Argument(help="Plugin slug, e.g. akismet")]


@app.command("list")
@error_handler
def list_plugins(
    sites: SitesOpt = None,
    updates_only: Annotated[
        bool, typer.Option("--updates", "-u", help="Only plugins with an update available"),
    ] = False,
    fmt: FormatOpt = None,
) -> None:
    """List plugins installed on every online site."""
    run(_items.list_items("plugin", sites, updates_only, fmt))


@app.command()
@error_handler
def update(site_id: SiteIdArg, slug: SlugArg) -> None:
    """Update one plugin on one site."""
    run(_items.update_one("plugin", site_id, slug))


@app.command("update-all")
@error_handler
def update_all(sites: SitesOpt = None, fmt: FormatOpt = None) -> None:
    """Update every plugin that has an update available."""
    run(_items.update_all("plugin", sites, fmt))


@app.command()
@error_handler
def activate(site_id: SiteIdArg, slug: SlugArg) -> None:
    """Activate a plugin on a site."""
    run(_items.set_active("plugin", site_id, slug, True))


@app.command()
@error_handler
def deactivate(site_id: SiteIdArg, slug: SlugArg) -> None:
    """Deactivate a plugin on a site."""
    run(_items.set_active("plugin", site_id, slug, False))


@app.command()
@error_handler
def search(
    query: Annotated[str, typer.Argument(help="Search terms")],
    fmt: FormatOpt = None,
) -> None:
    """Search the wordpress.org plugin directory."""
    run(_items.search("plugin", query, fmt))


@app.command()
@error_handler
def install(
    slug: SlugArg,
    sites: SitesOpt = None,
    all_sites: Annotated[bool, typer.Option("--all", help="Install on every configured site")] = False,
    concurrency: ConcurrencyOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """Install a wordpress.org plugin on the selected sites."""
    run(_items.install("plugin", slug, sites, all_sites, concurrency, fmt))
