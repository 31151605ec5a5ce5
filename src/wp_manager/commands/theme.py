"""Theme commands."""

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

app = typer.Typer(name="theme", help="Manage themes on one or many sites.")

SlugArg = Annotated[str, typer.Argument(help="Theme slug, e.g. twentytwentyfour")]


@app.command("list")
@error_handler
def list_themes(
    sites: SitesOpt = None,
    updates_only: Annotated[
        bool, typer.Option("--updates", "-u", help="Only themes with an update available"),
    ] = False,
    fmt: FormatOpt = None,
) -> None:
    """List themes installed on every online site."""
    run(_items.list_items("theme", sites, updates_only, fmt))


@app.command()
@error_handler
def update(site_id: SiteIdArg, slug: SlugArg) -> None:
    """Update one theme on one site."""
    run(_items.update_one("theme", site_id, slug))


@app.command("update-all")
@error_handler
def update_all(sites: SitesOpt = None, fmt: FormatOpt = None) -> None:
    """Update every theme that has an update available."""
    run(_items.update_all("theme", sites, fmt))


@app.command()
@error_handler
def activate(site_id: SiteIdArg, slug: SlugArg) -> None:
    """Switch a site's active theme."""
    run(_items.set_active("theme", site_id, slug, True))


@app.command()
@error_handler
def search(
    query: Annotated[str, typer.Argument(help="Search terms")],
    fmt: FormatOpt = None,
) -> None:
    """Search the wordpress.org theme directory."""
    run(_items.search("theme", query, fmt))


@app.command()
@error_handler
def install(
    slug: SlugArg,
    sites: SitesOpt = None,
    all_sites: Annotated[bool, typer.Option("--all", help="Install on every configured site")] = False,
    concurrency: ConcurrencyOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """Install a wordpress.org theme on the selected sites."""
    run(_items.install("theme", slug, sites, all_sites, concurrency, fmt))
