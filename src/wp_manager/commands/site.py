"""Site commands — add, list, refresh, and inspect managed sites."""

from __future__ import annotations

from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm

from wp_manager.client.auth import mask_secret
from wp_manager.client.errors import ValidationError, error_handler
from wp_manager.commands._common import (
    ConcurrencyOpt,
    FormatOpt,
    SiteIdArg,
    check_result,
    format_time,
    open_context,
    resolve_format,
    run,
)
from wp_manager.models.remote import SiteStats, SiteUser
from wp_manager.models.results import SiteUpdateAllResult
from wp_manager.models.site import ClientInfo, Site, SiteDraft, SiteStatus
from wp_manager.output.formatter import output

app = typer.Typer(name="site", help="Add, refresh, and inspect managed sites.")
client_app = typer.Typer(name="client", help="Edit the client contact attached to a site.")
app.add_typer(client_app, name="client")
console = Console()

SITE_COLUMNS = ["ID", "Name", "URL", "Status", "WordPress", "PHP", "Plugins", "Themes", "Last Sync"]


def _site_row(site: Site) -> list[Any]:
    return [
        site.id,
        site.name,
        site.url,
        site.status.value,
        site.wp_version,
        site.php_version,
        site.plugin_count,
        site.theme_count,
        format_time(site.last_sync),
    ]


def _site_detail(site: Site) -> dict[str, Any]:
    data = site.model_dump(mode="json", exclude_none=True, exclude={"client"})
    data["api_key"] = mask_secret(site.api_key)
    data["api_secret"] = mask_secret(site.api_secret)
    if site.client:
        data["client"] = f"{site.client.name} <{site.client.email}>"
        data["reports"] = (
            f"monthly on day {site.client.report_day}" if site.client.send_reports else "off"
        )
    return data


def _print_sites(sites: list[Site], fmt: str, title: str = "Sites") -> None:
    output(
        [_site_detail(s) for s in sites],
        fmt,
        columns=SITE_COLUMNS,
        rows=[_site_row(s) for s in sites],
        title=title,
    )


@app.command("list")
@error_handler
def list_sites(
    status: Annotated[
        Optional[SiteStatus],
        typer.Option("--status", help="Only show sites with this status"),
    ] = None,
    fmt: FormatOpt = None,
) -> None:
    """List configured sites with their last known status."""

    async def _run() -> None:
        async with open_context() as ctx:
            sites = [s for s in ctx.registry.sites if status is None or s.status == status]
            if not sites and resolve_format(ctx, fmt) == "table":
                console.print("[yellow]No sites configured. Run 'wp-manager site add' to get started.[/]")
                return
            _print_sites(sites, resolve_format(ctx, fmt))

    run(_run())


@app.command()
@error_handler
def add(
    name: Annotated[str, typer.Argument(help="Display name")],
    url: Annotated[str, typer.Option("--url", "-u", help="Site URL, e.g. https://example.com")],
    api_key: Annotated[str, typer.Option("--key", "-k", help="API key from the connector plugin")],
    api_secret: Annotated[str, typer.Option("--secret", help="API secret from the connector plugin")],
    no_check: Annotated[bool, typer.Option("--no-check", help="Skip the first status check")] = False,
) -> None:
    """Add a site and check its status."""
    try:
        draft = SiteDraft(name=name, url=url, api_key=api_key, api_secret=api_secret)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    async def _run() -> None:
        async with open_context() as ctx:
            site = await ctx.registry.add(draft, check_status=not no_check)
            console.print(f"[green]Site '{site.name}' added[/] (id {site.id}).")
            await ctx.registry.drain()
            if not no_check:
                checked = ctx.registry.require(site.id)
                console.print(f"Status: {checked.status.value}")

    run(_run())


@app.command()
@error_handler
def show(site_id: SiteIdArg, fmt: FormatOpt = None) -> None:
    """Show site details (credentials masked)."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            output(_site_detail(site), resolve_format(ctx, fmt), kv=True, title=f"Site: {site.name}")

    run(_run())


@app.command()
@error_handler
def edit(
    site_id: SiteIdArg,
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="New display name")] = None,
    url: Annotated[Optional[str], typer.Option("--url", "-u", help="New site URL")] = None,
    api_key: Annotated[Optional[str], typer.Option("--key", "-k", help="New API key")] = None,
    api_secret: Annotated[Optional[str], typer.Option("--secret", help="New API secret")] = None,
    no_check: Annotated[bool, typer.Option("--no-check", help="Skip re-checking the status")] = False,
) -> None:
    """Edit a site's name, URL, or credentials."""
    changes = {
        key: value
        for key, value in {"name": name, "url": url, "api_key": api_key, "api_secret": api_secret}.items()
        if value is not None
    }
    if not changes:
        console.print("Nothing to change.")
        return

    async def _run() -> None:
        async with open_context() as ctx:
            ctx.registry.require(site_id)
            try:
                site = ctx.registry.update(site_id, changes)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            console.print(f"[green]Site '{site.name}' updated.[/]")
            if not no_check and changes.keys() - {"name"}:
                site = await ctx.registry.refresh_site_status(site_id)
                console.print(f"Status: {site.status.value}")

    run(_run())


@app.command()
@error_handler
def remove(
    site_id: SiteIdArg,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a site from the console (nothing changes on the site itself)."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            if not force and not Confirm.ask(f"Remove site '{site.name}'?"):
                console.print("Cancelled.")
                return
            ctx.registry.delete(site_id)
            console.print(f"[green]Site '{site.name}' removed.[/]")

    run(_run())


@app.command()
@error_handler
def refresh(site_id: SiteIdArg, fmt: FormatOpt = None) -> None:
    """Re-check one site's status and metadata."""

    async def _run() -> None:
        async with open_context() as ctx:
            ctx.registry.require(site_id)
            site = await ctx.registry.refresh_site_status(site_id)
            if site is not None:
                _print_sites([site], resolve_format(ctx, fmt), title="Site Status")

    run(_run())


@app.command("refresh-all")
@error_handler
def refresh_all(concurrency: ConcurrencyOpt = None, fmt: FormatOpt = None) -> None:
    """Re-check every site's status."""

    async def _run() -> None:
        async with open_context() as ctx:
            with console.status(f"Refreshing {len(ctx.registry.sites)} site(s)..."):
                sites = await ctx.registry.refresh_all(concurrency)
            _print_sites(sites, resolve_format(ctx, fmt))

    run(_run())


@app.command()
@error_handler
def summary(fmt: FormatOpt = None) -> None:
    """Show site counts by status and totals of plugins and themes."""

    async def _run() -> None:
        async with open_context() as ctx:
            output(ctx.registry.summary(), resolve_format(ctx, fmt), kv=True, title="Dashboard")

    run(_run())


@app.command()
@error_handler
def watch(
    interval: Annotated[
        Optional[float],
        typer.Option("--interval", "-i", min=0, help="Seconds between refreshes (default: sync_interval setting)"),
    ] = None,
    rounds: Annotated[
        Optional[int],
        typer.Option("--rounds", "-n", min=1, help="Stop after this many refreshes"),
    ] = None,
) -> None:
    """Refresh all sites periodically until interrupted."""

    def _report(round_no: int, sites: list[Site]) -> None:
        _print_sites(sites, "table", title=f"Sites (refresh #{round_no})")

    async def _run() -> None:
        async with open_context() as ctx:
            if not ctx.settings.auto_sync and rounds is None:
                console.print("[yellow]auto_sync is disabled; refreshing once.[/]")
                await ctx.registry.watch(0, rounds=1, on_round=_report)
                return
            seconds = interval if interval is not None else ctx.settings.sync_interval * 60
            await ctx.registry.watch(seconds, rounds=rounds, on_round=_report)

    try:
        run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")


@app.command()
@error_handler
def users(site_id: SiteIdArg, fmt: FormatOpt = None) -> None:
    """List WordPress users and their roles."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            result = check_result(await ctx.api.users(site), f"Listing users on {site.name}")
            raw_users = result.data if isinstance(result.data, list) else []
            items = [SiteUser.model_validate(u) for u in raw_users]
            rows = [
                [u.id, u.username, u.display_name, u.email, ", ".join(u.roles), u.registered]
                for u in items
            ]
            output(
                items,
                resolve_format(ctx, fmt),
                columns=["ID", "Username", "Name", "Email", "Roles", "Registered"],
                rows=rows,
                title=f"Users on {site.name}",
            )

    run(_run())


@app.command()
@error_handler
def stats(site_id: SiteIdArg, fmt: FormatOpt = None) -> None:
    """Show file count, database size, and content totals."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            result = check_result(await ctx.api.stats(site), f"Reading stats of {site.name}")
            data = SiteStats.model_validate(result.data if isinstance(result.data, dict) else {})
            output(
                data.model_dump(exclude_none=True),
                resolve_format(ctx, fmt),
                kv=True,
                title=f"Stats for {site.name}",
            )

    run(_run())


@app.command()
@error_handler
def login(
    site_id: SiteIdArg,
    open_browser: Annotated[bool, typer.Option("--open", help="Open the URL in a browser")] = False,
) -> None:
    """Get a one-time wp-admin login URL (expires after about a minute)."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            url, one_time = await ctx.bulk.admin_login_url(site)
            if not one_time:
                console.print("[yellow]One-time login unavailable; using the regular admin URL.[/]")
            console.print(url, markup=False, soft_wrap=True)
            if open_browser:
                typer.launch(url)

    run(_run())


@app.command("update-all")
@error_handler
def update_all(
    site_id: SiteIdArg,
    themes: Annotated[bool, typer.Option("--themes", help="Update themes instead of plugins")] = False,
    fmt: FormatOpt = None,
) -> None:
    """Ask one site to update all of its plugins (or themes) itself."""
    kind = "theme" if themes else "plugin"

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            result = check_result(await ctx.api.update_all(site, kind), f"Updating {kind}s on {site.name}")
            report = SiteUpdateAllResult.model_validate(result.data if isinstance(result.data, dict) else {})
            rows = [[name, "ok"] for name in report.updated] + [[name, "failed"] for name in report.failed]
            if not rows and resolve_format(ctx, fmt) == "table":
                console.print(report.message or f"No {kind} updates available on {site.name}.")
                return
            output(
                report,
                resolve_format(ctx, fmt),
                columns=[kind.title(), "Result"],
                rows=rows,
                title=f"{kind.title()} updates on {site.name}",
            )
            if report.failed:
                raise typer.Exit(1)

    run(_run())


@client_app.command("set")
@error_handler
def client_set(
    site_id: SiteIdArg,
    name: Annotated[str, typer.Option("--name", help="Contact name")],
    email: Annotated[str, typer.Option("--email", help="Contact email")],
    company: Annotated[Optional[str], typer.Option("--company", help="Company")] = None,
    phone: Annotated[Optional[str], typer.Option("--phone", help="Phone")] = None,
    reports: Annotated[bool, typer.Option("--reports/--no-reports", help="Send monthly reports")] = False,
    report_day: Annotated[int, typer.Option("--report-day", min=1, max=28, help="Day of month for reports")] = 1,
) -> None:
    """Attach or replace the client contact of a site."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            previous = site.client.last_report_sent if site.client else None
            try:
                client = ClientInfo(
                    name=name,
                    email=email,
                    company=company,
                    phone=phone,
                    send_reports=reports,
                    report_day=report_day,
                    last_report_sent=previous,
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            ctx.registry.set_client(site_id, client)
            console.print(f"[green]Client for '{site.name}' saved.[/]")

    run(_run())


@client_app.command("clear")
@error_handler
def client_clear(site_id: SiteIdArg) -> None:
    """Remove the client contact of a site."""

    async def _run() -> None:
        async with open_context() as ctx:
            site = ctx.registry.require(site_id)
            ctx.registry.set_client(site_id, None)
            console.print(f"[green]Client for '{site.name}' removed.[/]")

    run(_run())
