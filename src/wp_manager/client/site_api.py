"""REST contract of the WP Manager Connector plugin, per site."""

from __future__ import annotations

from typing import Any

from wp_manager.client.auth import credential_headers
from wp_manager.client.gateway import Gateway
from wp_manager.config.constants import API_NAMESPACE, DISCOVERY_PATH
from wp_manager.models.results import ItemKind, OperationResult
from wp_manager.models.site import Site


def api_url(site: Site, path: str) -> str:
    """Build a fully qualified URL inside the plugin's REST namespace."""
    return f"{site.url}{API_NAMESPACE}/{path.lstrip('/')}"


class SiteAPI:
    """Credentialed calls against one site's companion plugin.

    Every method returns the gateway's ``OperationResult`` unchanged, so
    callers decide how to interpret failures.
    """

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    async def _get(self, site: Site, path: str) -> OperationResult:
        return await self.gateway.get(api_url(site, path), headers=credential_headers(site))

    async def _post(self, site: Site, path: str, body: Any = None) -> OperationResult:
        return await self.gateway.post(
            api_url(site, path), headers=credential_headers(site), body=body,
        )

    async def discovery(self, site: Site) -> OperationResult:
        """Uncredentialed ``GET /wp-json/`` liveness probe."""
        return await self.gateway.get(f"{site.url}{DISCOVERY_PATH}")

    async def status(self, site: Site) -> OperationResult:
        return await self._get(site, "/status")

    async def list_items(self, site: Site, kind: ItemKind) -> OperationResult:
        return await self._get(site, f"/{kind}s")

    async def update_item(self, site: Site, kind: ItemKind, slug: str) -> OperationResult:
        return await self._post(site, f"/{kind}s/{slug}/update")

    async def activate(self, site: Site, kind: ItemKind, slug: str) -> OperationResult:
        return await self._post(site, f"/{kind}s/{slug}/activate")

    async def deactivate_plugin(self, site: Site, slug: str) -> OperationResult:
        return await self._post(site, f"/plugins/{slug}/deactivate")

    async def update_all(self, site: Site, kind: ItemKind) -> OperationResult:
        return await self._post(site, f"/{kind}s/update-all")

    async def install(self, site: Site, kind: ItemKind, slug: str) -> OperationResult:
        return await self._post(site, f"/{kind}s/install", body={"slug": slug})

    async def admin_login(self, site: Site) -> OperationResult:
        return await self._post(site, "/admin-login")

    async def users(self, site: Site) -> OperationResult:
        return await self._get(site, "/users")

    async def stats(self, site: Site) -> OperationResult:
        return await self._get(site, "/stats")
