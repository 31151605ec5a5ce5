"""Site registry and synchronizer.

The registry is the authoritative in-memory list of sites. Every mutation
is a whole-record replace by id, so concurrent refreshes of different sites
never write the same record. A refresh marks the site ``pending`` in memory
only; the persisted record always holds the last resolved status.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine
from datetime import datetime, timezone
from typing import Any

import pydantic

from wp_manager.client.errors import SiteNotFoundError
from wp_manager.core.resolver import StatusResolver
from wp_manager.models.remote import RemoteStatus
from wp_manager.models.results import FleetSummary, StatusProbe
from wp_manager.models.site import METADATA_FIELDS, ClientInfo, Site, SiteDraft, SiteStatus
from wp_manager.storage.store import SiteStore

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _metadata_from(data: Any) -> dict[str, Any]:
    try:
        status = RemoteStatus.model_validate(data if isinstance(data, dict) else {})
    except pydantic.ValidationError as exc:
        logger.warning("Ignoring malformed status body: %s", exc)
        status = RemoteStatus()
    return status.metadata()


def changes_for_probe(probe: StatusProbe) -> dict[str, Any]:
    """Site fields to write for a resolved probe.

    Metadata is refreshed from the status body when online, cleared when
    offline or rejected, and left untouched for ``no-plugin`` because the
    discovery body carries none of the metadata fields.
    """
    changes: dict[str, Any] = {"status": probe.status, "last_sync": _now()}
    if probe.status is SiteStatus.ONLINE:
        changes.update(_metadata_from(probe.data))
    elif probe.status in (SiteStatus.OFFLINE, SiteStatus.ERROR):
        changes.update(dict.fromkeys(METADATA_FIELDS))
    return changes


class SiteRegistry:
    """In-memory site list kept consistent with the store and the sites."""

    def __init__(
        self,
        store: SiteStore,
        resolver: StatusResolver,
        *,
        refresh_concurrency: int = 1,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.refresh_concurrency = refresh_concurrency
        self.selected_id: str | None = None
        self._sites: list[Site] = []
        self._inflight: dict[str, asyncio.Task[Site | None]] = {}
        self._background: set[asyncio.Task[Any]] = set()

    # Lookup --------------------------------------------------------------

    @property
    def sites(self) -> tuple[Site, ...]:
        return tuple(self._sites)

    def get(self, site_id: str) -> Site | None:
        return next((s for s in self._sites if s.id == site_id), None)

    def require(self, site_id: str) -> Site:
        site = self.get(site_id)
        if site is None:
            raise SiteNotFoundError(site_id)
        return site

    def online_sites(self) -> list[Site]:
        return [s for s in self._sites if s.is_online]

    def select(self, site_id: str | None) -> None:
        if site_id is not None:
            self.require(site_id)
        self.selected_id = site_id

    @property
    def selected(self) -> Site | None:
        return self.get(self.selected_id) if self.selected_id else None

    def summary(self) -> FleetSummary:
        counts = {status: 0 for status in SiteStatus}
        for site in self._sites:
            counts[site.status] += 1
        return FleetSummary(
            total=len(self._sites),
            online=counts[SiteStatus.ONLINE],
            offline=counts[SiteStatus.OFFLINE],
            pending=counts[SiteStatus.PENDING],
            error=counts[SiteStatus.ERROR],
            no_plugin=counts[SiteStatus.NO_PLUGIN],
            plugin_count=sum(s.plugin_count or 0 for s in self._sites),
            theme_count=sum(s.theme_count or 0 for s in self._sites),
        )

    # Persistence ---------------------------------------------------------

    def load(self) -> list[Site]:
        """Replace the in-memory list from the store; never raises."""
        try:
            sites = self.store.load_sites()
        except (OSError, ValueError):
            logger.exception("Failed to load sites from %s, starting empty", self.store.path)
            sites = []
        self._sites = list(sites)
        return list(self._sites)

    def _new_id(self) -> str:
        candidate = int(time.time() * 1000)
        taken = {s.id for s in self._sites}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    async def add(self, draft: SiteDraft, *, check_status: bool = True) -> Site:
        """Persist a new site and schedule its first status check.

        Returns as soon as the site is stored; the status check runs as an
        independent background task (see :meth:`drain`).
        """
        site = Site(
            id=self._new_id(),
            created_at=_now(),
            status=SiteStatus.PENDING,
            **draft.model_dump(),
        )
        self.store.save_site(site)
        self._sites = [*self._sites, site]
        logger.info("Added site %s (%s)", site.name, site.id)
        if check_status:
            self._spawn(self.refresh_site_status(site.id))
        return site

    def update(self, site_id: str, changes: dict[str, Any]) -> Site | None:
        """Merge *changes* into a site, persist, and replace it in memory."""
        if self.get(site_id) is None:
            logger.warning("Ignoring update for unknown site %s", site_id)
            return None
        updated = self.store.update_site(site_id, changes)
        if updated is None:
            logger.warning("Site %s is missing from the store, update skipped", site_id)
            return None
        self._replace(updated)
        return updated

    def set_client(self, site_id: str, client: ClientInfo | None) -> Site | None:
        self.require(site_id)
        return self.update(site_id, {"client": client})

    def delete(self, site_id: str) -> bool:
        """Remove a site; deleting an unknown id is a no-op returning False."""
        removed = self.store.delete_site(site_id)
        before = len(self._sites)
        self._sites = [s for s in self._sites if s.id != site_id]
        if self.selected_id == site_id:
            self.selected_id = None
        return removed or len(self._sites) != before

    def _replace(self, site: Site) -> None:
        self._sites = [site if s.id == site.id else s for s in self._sites]

    def _restore_status(self, site_id: str, status: SiteStatus) -> None:
        current = self.get(site_id)
        if current is not None:
            self._replace(current.model_copy(update={"status": status}))

    # Synchronization -----------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def drain(self) -> None:
        """Wait for background refreshes scheduled by :meth:`add`."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def refresh_site_status(self, site_id: str) -> Site | None:
        """Re-probe one site and store the resolved status.

        A second call for an id already being refreshed joins the first
        instead of racing it. If the first caller is cancelled, joined
        callers get the restored record instead of the cancellation.
        """
        running = self._inflight.get(site_id)
        if running is not None:
            # asyncio.wait neither cancels the shared task nor re-raises its cancellation
            await asyncio.wait({running})
            if running.cancelled():
                return self.get(site_id)
            return running.result()
        if self.get(site_id) is None:
            logger.warning("Cannot refresh unknown site %s", site_id)
            return None
        task = asyncio.get_running_loop().create_task(self._refresh(site_id))
        self._inflight[site_id] = task

        def _forget(done: asyncio.Task[Site | None]) -> None:
            if self._inflight.get(site_id) is done:
                del self._inflight[site_id]

        task.add_done_callback(_forget)
        return await task

    async def _refresh(self, site_id: str) -> Site | None:
        site = self.require(site_id)
        previous = site.status
        self._replace(site.model_copy(update={"status": SiteStatus.PENDING}))
        try:
            probe = await self.resolver.resolve(site)
            changes = changes_for_probe(probe)
        except asyncio.CancelledError:
            self._restore_status(site_id, previous)
            raise
        except Exception:
            logger.exception("Refreshing %s failed, marking offline", site.name)
            changes = changes_for_probe(StatusProbe(status=SiteStatus.OFFLINE))
        try:
            updated = self.update(site_id, changes)
        except Exception:
            self._restore_status(site_id, previous)
            raise
        if updated is None:
            self._restore_status(site_id, previous)
        else:
            logger.info("%s is %s", updated.name, updated.status)
        return updated

    async def _refresh_isolated(self, site_id: str) -> None:
        try:
            await self.refresh_site_status(site_id)
        except Exception:
            logger.exception("Refresh of site %s aborted", site_id)

    async def refresh_all(self, concurrency: int | None = None) -> list[Site]:
        """Refresh every site; one site's failure never affects another.

        With a concurrency of 1 sites are refreshed one after another in
        list order. A higher value runs a bounded pool of refreshes.
        """
        limit = concurrency or self.refresh_concurrency
        site_ids = [s.id for s in self._sites]
        logger.info("Refreshing %d site(s), concurrency %d", len(site_ids), limit)
        if limit <= 1:
            for site_id in site_ids:
                await self._refresh_isolated(site_id)
        else:
            semaphore = asyncio.Semaphore(limit)

            async def worker(site_id: str) -> None:
                async with semaphore:
                    await self._refresh_isolated(site_id)

            await asyncio.gather(*(worker(site_id) for site_id in site_ids))
        return list(self._sites)

    async def watch(
        self,
        interval: float,
        *,
        rounds: int | None = None,
        on_round: Callable[[int, list[Site]], None] | None = None,
    ) -> int:
        """Refresh all sites every *interval* seconds.

        Runs until cancelled, or for *rounds* rounds when given. Returns the
        number of completed rounds.
        """
        completed = 0
        while rounds is None or completed < rounds:
            sites = await self.refresh_all()
            completed += 1
            if on_round is not None:
                on_round(completed, sites)
            if rounds is not None and completed >= rounds:
                break
            await asyncio.sleep(interval)
        return completed
