"""Command bodies shared by the plugin and theme command groups."""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console

from wp_manager.client.errors import ValidationError
from wp_manager.commands._common import check_result, open_context, resolve_format
from wp_manager.models.remote import CatalogPlugin, CatalogTheme, PluginInfo, ThemeInfo
from wp_manager.models.results import ItemKind
from wp_manager.output.formatter import output

console = Console()

ITEM_COLUMNS = ["Site", "Name", "Slug", "Version", "Status", "Update"]


def _item_rows(items: list[PluginInfo | ThemeInfo]) -> list[list[Any]]:
    return [
        [
            item.site_name,
            item.name,
            item.slug,
            item.version,
            item.status,
            item.latest_version if item.update_available else "",
        ]
        for item in items
    ]


async def list_items(
    kind: ItemKind,
    site_ids: list[str] | None,
    updates_only: bool,
    fmt: str | None,
) -> None:
    async with open_context() as ctx:
        for site_id in site_ids or []:
            ctx.registry.require(site_id)
        aggregate = await ctx.bulk.collect(kind, site_ids or None)
        items = aggregate.with_updates if updates_only else aggregate.items
        fmt = resolve_format(ctx, fmt)
        for site_id in aggregate.failed_sites:
            site = ctx.registry.get(site_id)
            console.print(f"[yellow]Could not list {kind}s on {site.name if site else site_id}.[/]")
        if not ctx.registry.online_sites() and fmt == "table":
            console.print("[yellow]No online sites. Run 'wp-manager site refresh-all' first.[/]")
            return
        output(
            items,
            fmt,
            columns=ITEM_COLUMNS,
            rows=_item_rows(items),
            title=f"{kind.title()}s ({len(aggregate.with_updates)} update(s) available)",
        )


async def update_one(kind: ItemKind, site_id: str, slug: str) -> None:
    async with open_context() as ctx:
        site = ctx.registry.require(site_id)
        check_result(await ctx.api.update_item(site, kind, slug), f"Updating {kind} '{slug}' on {site.name}")
        console.print(f"[green]{kind.title()} '{slug}' updated on {site.name}.[/]")


async def update_all(kind: ItemKind, site_ids: list[str] | None, fmt: str | None) -> None:
    async with open_context() as ctx:
        for site_id in site_ids or []:
            ctx.registry.require(site_id)
        with console.status(f"Updating {kind}s..."):
            report = await ctx.bulk.update_all(kind, site_ids=site_ids or None)
        rows = [[r.site_name, r.name or r.slug, "ok", ""] for r in report.updated]
        rows += [[f.site_name, f.name or f.slug, "failed", f.message] for f in report.failed]
        fmt = resolve_format(ctx, fmt)
        if not rows and fmt == "table":
            console.print(f"All {kind}s are up to date.")
            return
        output(
            report,
            fmt,
            columns=["Site", kind.title(), "Result", "Message"],
            rows=rows,
            title=f"{kind.title()} updates: {len(report.updated)} updated, {len(report.failed)} failed",
        )
        remaining = [item for item in report.items if item.update_available]
        if remaining and fmt == "table":
            console.print(f"[yellow]{len(remaining)} {kind}(s) still have updates pending.[/]")
        if report.failed:
            raise typer.Exit(1)


async def set_active(kind: ItemKind, site_id: str, slug: str, active: bool) -> None:
    async with open_context() as ctx:
        site = ctx.registry.require(site_id)
        if active:
            result = await ctx.api.activate(site, kind, slug)
        else:
            result = await ctx.api.deactivate_plugin(site, slug)
        verb = "activated" if active else "deactivated"
        action = "Activating" if active else "Deactivating"
        check_result(result, f"{action} {kind} '{slug}' on {site.name}")
        console.print(f"[green]{kind.title()} '{slug}' {verb} on {site.name}.[/]")


async def search(kind: ItemKind, query: str, fmt: str | None) -> None:
    async with open_context() as ctx:
        results = await ctx.bulk.search(kind, query)
        fmt = resolve_format(ctx, fmt)
        if kind == "plugin":
            columns = ["Name", "Slug", "Version", "Rating", "Installs"]
            rows = [
                [p.name, p.slug, p.version, p.rating, p.active_installs]
                for p in results
                if isinstance(p, CatalogPlugin)
            ]
        else:
            columns = ["Name", "Slug", "Version", "Rating", "Author"]
            rows = [
                [t.name, t.slug, t.version, t.rating, t.author_name]
                for t in results
                if isinstance(t, CatalogTheme)
            ]
        if not results and fmt == "table":
            console.print(f"No {kind}s found for '{query}'.")
            return
        output(results, fmt, columns=columns, rows=rows, title=f"wordpress.org {kind}s: {query}")


async def install(
    kind: ItemKind,
    slug: str,
    site_ids: list[str] | None,
    all_sites: bool,
    concurrency: int | None,
    fmt: str | None,
) -> None:
    async with open_context() as ctx:
        targets = [s.id for s in ctx.registry.sites] if all_sites else list(site_ids or [])
        if not targets:
            raise ValidationError("Select at least one site with --site or use --all.")
        with console.status(f"Installing {slug} on {len(targets)} site(s)..."):
            outcomes = await ctx.bulk.install_on_many(kind, slug, targets, concurrency=concurrency)
        rows = [
            [o.site_name, "ok" if o.success else "failed", o.message]
            for o in outcomes
        ]
        output(
            outcomes,
            resolve_format(ctx, fmt),
            columns=["Site", "Result", "Message"],
            rows=rows,
            title=f"Install {kind} '{slug}'",
        )
        if not all(o.success for o in outcomes):
            raise typer.Exit(1)
