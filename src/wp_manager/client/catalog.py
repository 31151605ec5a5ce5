"""wordpress.org plugin/theme directory search."""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from wp_manager.client.gateway import Gateway
from wp_manager.config.constants import (
    CATALOG_PAGE_SIZE,
    PLUGIN_CATALOG_URL,
    THEME_CATALOG_URL,
)
from wp_manager.models.remote import CatalogPlugin, CatalogTheme
from wp_manager.models.results import ItemKind

logger = logging.getLogger(__name__)

_ENDPOINTS: dict[str, tuple[str, str, type[pydantic.BaseModel]]] = {
    "plugin": (PLUGIN_CATALOG_URL, "query_plugins", CatalogPlugin),
    "theme": (THEME_CATALOG_URL, "query_themes", CatalogTheme),
}


class CatalogClient:
    """Read-through proxy to the public directory: no caching, one page."""

    def __init__(self, gateway: Gateway, page_size: int = CATALOG_PAGE_SIZE) -> None:
        self.gateway = gateway
        self.page_size = page_size

    async def search(self, kind: ItemKind, query: str) -> list[Any]:
        """Search plugins or themes by keyword.

        Returns an empty list when the directory is unreachable or answers
        with something other than a result page.
        """
        url, action, model = _ENDPOINTS[kind]
        params = {
            "action": action,
            "request[search]": query,
            "request[per_page]": self.page_size,
        }
        result = await self.gateway.get(url, params=params)
        if not result.ok or not isinstance(result.data, dict):
            logger.warning("Catalog search for %r failed (HTTP %d)", query, result.status)
            return []
        entries = result.data.get(f"{kind}s") or []
        items = []
        for raw in entries:
            try:
                items.append(model.model_validate(raw))
            except pydantic.ValidationError as exc:
                logger.debug("Skipping malformed catalog entry: %s", exc)
        return items
