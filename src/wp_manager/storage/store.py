"""Site store: durable TOML persistence for configured sites.

Every mutation rewrites the whole file atomically (temp file + rename) with
owner-only permissions. Credentials are stored as opaque strings.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import tomli_w

from wp_manager.models.site import Site

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

logger = logging.getLogger(__name__)


class SiteStore:
    """Persistence collaborator used by the site registry."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> list[Site]:
        if not self.path.exists():
            return []
        data = tomllib.loads(self.path.read_bytes().decode())
        return [Site.model_validate(raw) for raw in data.get("sites", [])]

    def _write(self, sites: list[Site]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        os.chmod(self.path.parent, 0o700)
        # TOML has no null, so unset fields are left out
        data: dict[str, Any] = {
            "sites": [s.model_dump(mode="json", exclude_none=True) for s in sites],
        }
        temp = self.path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.path)

    def load_sites(self) -> list[Site]:
        sites = self._read()
        logger.debug("Loaded %d site(s) from %s", len(sites), self.path)
        return sites

    def save_site(self, site: Site) -> Site:
        sites = self._read()
        sites.append(site)
        self._write(sites)
        logger.info("Site saved: %s (%d total)", site.name, len(sites))
        return site

    def update_site(self, site_id: str, changes: dict[str, Any]) -> Site | None:
        sites = self._read()
        for index, site in enumerate(sites):
            if site.id == site_id:
                sites[index] = site.merged(changes)
                self._write(sites)
                return sites[index]
        return None

    def delete_site(self, site_id: str) -> bool:
        sites = self._read()
        remaining = [s for s in sites if s.id != site_id]
        if len(remaining) == len(sites):
            return False
        self._write(remaining)
        logger.info("Site deleted: %s (%d remaining)", site_id, len(remaining))
        return True
