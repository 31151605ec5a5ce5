"""Bulk operation coordinator: act on many items across many sites.

Partial failure is never an error here: every flow returns a structured
report listing what succeeded and what failed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import pydantic

from wp_manager.client.catalog import CatalogClient
from wp_manager.client.site_api import SiteAPI
from wp_manager.core.registry import SiteRegistry
from wp_manager.models.remote import PluginInfo, ThemeInfo
from wp_manager.models.results import (
    BulkUpdateReport,
    InstallOutcome,
    ItemAggregate,
    ItemFailure,
    ItemKind,
    ItemRef,
    OperationResult,
)
from wp_manager.models.site import Site

logger = logging.getLogger(__name__)

_ITEM_MODELS: dict[str, type[PluginInfo] | type[ThemeInfo]] = {
    "plugin": PluginInfo,
    "theme": ThemeInfo,
}


def failure_message(result: OperationResult, default: str) -> str:
    """Human-readable reason for a failed remote call."""
    if result.message:
        return result.message
    if not result.reached:
        return "Site unreachable"
    if result.ok:
        return default
    return f"{default} (HTTP {result.status})"


def parse_items(kind: ItemKind, data: Any, site: Site) -> list[PluginInfo | ThemeInfo]:
    """Build tagged plugin/theme records from a ``/plugins`` or ``/themes`` body."""
    model = _ITEM_MODELS[kind]
    items: list[PluginInfo | ThemeInfo] = []
    if not isinstance(data, list):
        return items
    for raw in data:
        if not isinstance(raw, dict):
            continue
        try:
            items.append(model.model_validate({**raw, "site_id": site.id, "site_name": site.name}))
        except pydantic.ValidationError as exc:
            logger.debug("Skipping malformed %s entry from %s: %s", kind, site.name, exc)
    return items


class BulkCoordinator:
    """Drives update-all and install-on-many flows over the registry's sites."""

    def __init__(
        self,
        registry: SiteRegistry,
        api: SiteAPI,
        catalog: CatalogClient,
        *,
        install_concurrency: int = 1,
    ) -> None:
        self.registry = registry
        self.api = api
        self.catalog = catalog
        self.install_concurrency = install_concurrency

    # Aggregation ---------------------------------------------------------

    async def collect(
        self, kind: ItemKind, site_ids: Iterable[str] | None = None,
    ) -> ItemAggregate:
        """Fetch plugins or themes from every online site, one site at a time."""
        wanted = set(site_ids) if site_ids is not None else None
        aggregate = ItemAggregate(kind=kind)
        for site in self.registry.online_sites():
            if wanted is not None and site.id not in wanted:
                continue
            result = await self.api.list_items(site, kind)
            if not result.ok or not isinstance(result.data, list):
                logger.warning("Could not list %ss on %s (HTTP %d)", kind, site.name, result.status)
                aggregate.failed_sites.append(site.id)
                continue
            aggregate.items.extend(parse_items(kind, result.data, site))
        return aggregate

    # Updates -------------------------------------------------------------

    async def update_items(
        self, kind: ItemKind, items: Iterable[PluginInfo | ThemeInfo],
    ) -> BulkUpdateReport:
        """Update each (site, slug) pair in order, collecting failures."""
        report = BulkUpdateReport(kind=kind)
        for item in items:
            site = self.registry.get(item.site_id) if item.site_id else None
            ref = ItemRef(
                site_id=item.site_id or "",
                site_name=site.name if site else (item.site_name or ""),
                slug=item.slug,
                name=item.name,
            )
            if site is None:
                report.failed.append(ItemFailure(**ref.model_dump(), status=0, message="Site not found"))
                continue
            result = await self.api.update_item(site, kind, item.slug)
            if result.succeeded:
                report.updated.append(ref)
            else:
                logger.warning("Updating %s %s on %s failed (HTTP %d)", kind, item.slug, site.name, result.status)
                report.failed.append(
                    ItemFailure(
                        **ref.model_dump(),
                        status=result.status,
                        message=failure_message(result, "Update failed"),
                    )
                )
        return report

    async def update_all(
        self,
        kind: ItemKind,
        items: Iterable[PluginInfo | ThemeInfo] | None = None,
        site_ids: Iterable[str] | None = None,
    ) -> BulkUpdateReport:
        """Update every item flagged ``update_available``.

        When the batch is done the aggregate list is fetched again rather
        than patched, so every update flag in ``report.items`` reflects what
        the sites now report.
        """
        site_ids = list(site_ids) if site_ids is not None else None
        if items is None:
            items = (await self.collect(kind, site_ids)).items
        pending = [item for item in items if item.update_available]
        logger.info("Updating %d %s(s)", len(pending), kind)
        report = await self.update_items(kind, pending)
        report.items = (await self.collect(kind, site_ids)).items
        return report

    # Installs ------------------------------------------------------------

    async def _install_one(self, kind: ItemKind, slug: str, site_id: str) -> InstallOutcome:
        site = self.registry.get(site_id)
        if site is None:
            return InstallOutcome(
                site_id=site_id, site_name=site_id, success=False, message="Site not found",
            )
        result = await self.api.install(site, kind, slug)
        if result.succeeded:
            message = result.message or "Installed successfully"
        else:
            logger.warning("Installing %s %s on %s failed (HTTP %d)", kind, slug, site.name, result.status)
            message = failure_message(result, "Installation failed")
        return InstallOutcome(
            site_id=site.id, site_name=site.name, success=result.succeeded, message=message,
        )

    async def install_on_many(
        self,
        kind: ItemKind,
        slug: str,
        site_ids: Iterable[str],
        *,
        concurrency: int | None = None,
    ) -> list[InstallOutcome]:
        """Install one catalog item on each target site independently.

        Returns exactly one outcome per distinct target, in selection order,
        even when every target fails.
        """
        targets = list(dict.fromkeys(site_ids))
        limit = concurrency or self.install_concurrency
        if limit <= 1:
            return [await self._install_one(kind, slug, site_id) for site_id in targets]

        semaphore = asyncio.Semaphore(limit)

        async def worker(site_id: str) -> InstallOutcome:
            async with semaphore:
                return await self._install_one(kind, slug, site_id)

        return list(await asyncio.gather(*(worker(site_id) for site_id in targets)))

    # Catalog and single-site helpers ------------------------------------

    async def search(self, kind: ItemKind, query: str) -> list[Any]:
        return await self.catalog.search(kind, query)

    async def admin_login_url(self, site: Site) -> tuple[str, bool]:
        """Return ``(url, one_time)``.

        Falls back to the regular ``/wp-admin`` URL when the site cannot
        issue a one-time login link.
        """
        result = await self.api.admin_login(site)
        if result.ok and isinstance(result.data, dict) and result.data.get("login_url"):
            return str(result.data["login_url"]), True
        logger.info("No one-time login for %s (HTTP %d), using wp-admin", site.name, result.status)
        return f"{site.url}/wp-admin", False
