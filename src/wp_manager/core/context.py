"""Application context: explicit owner of every core collaborator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from wp_manager.client.catalog import CatalogClient
from wp_manager.client.gateway import Gateway
from wp_manager.client.site_api import SiteAPI
from wp_manager.config.manager import ConfigManager
from wp_manager.config.models import Settings
from wp_manager.core.bulk import BulkCoordinator
from wp_manager.core.registry import SiteRegistry
from wp_manager.core.resolver import StatusResolver
from wp_manager.storage.store import SiteStore

logger = logging.getLogger(__name__)


class AppContext:
    """Wires the gateway, store, registry, and coordinator together.

    Use as an async context manager: the registry is loaded on entry;
    background refreshes are awaited and the gateway closed on exit.
    """

    def __init__(
        self,
        settings: Settings,
        sites_path: Path,
        *,
        gateway: Gateway | None = None,
    ) -> None:
        self.settings = settings
        self.gateway = gateway or Gateway(timeout=settings.timeout)
        self.api = SiteAPI(self.gateway)
        self.catalog = CatalogClient(self.gateway)
        self.store = SiteStore(sites_path)
        self.resolver = StatusResolver(self.api)
        self.registry = SiteRegistry(
            self.store,
            self.resolver,
            refresh_concurrency=settings.refresh_concurrency,
        )
        self.bulk = BulkCoordinator(
            self.registry,
            self.api,
            self.catalog,
            install_concurrency=settings.install_concurrency,
        )

    @classmethod
    def from_config(cls, manager: ConfigManager | None = None) -> AppContext:
        manager = manager or ConfigManager()
        return cls(manager.settings, manager.resolve_sites_path())

    async def __aenter__(self) -> AppContext:
        self.registry.load()
        logger.debug("Context ready with %d site(s)", len(self.registry.sites))
        return self

    async def __aexit__(self, *args: Any) -> None:
        try:
            await self.registry.drain()
        finally:
            await self.gateway.aclose()
