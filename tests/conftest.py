"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from wp_manager.config.constants import ENV_CONFIG_FILE, ENV_LOG_LEVEL, ENV_SITES_FILE
from wp_manager.models.site import Site, SiteDraft, SiteStatus
from wp_manager.storage.store import SiteStore


@pytest.fixture(autouse=True)
def isolated_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point config and site storage at a temp dir for every test."""
    monkeypatch.setenv(ENV_CONFIG_FILE, str(tmp_path / "config.toml"))
    monkeypatch.setenv(ENV_SITES_FILE, str(tmp_path / "sites.toml"))
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)


@pytest.fixture
def sites_path(tmp_path: Path) -> Path:
    return tmp_path / "sites.toml"


@pytest.fixture
def store(sites_path: Path) -> SiteStore:
    return SiteStore(sites_path)


@pytest.fixture
def make_site() -> Callable[..., Site]:
    """Return a factory for sites with predictable ids and URLs."""

    def _make(
        site_id: str = "1",
        name: str = "Alpha",
        url: str = "https://alpha.test",
        status: SiteStatus = SiteStatus.ONLINE,
        **extra: Any,
    ) -> Site:
        return Site(
            id=site_id,
            name=name,
            url=url,
            api_key="key-" + site_id,
            api_secret="secret-value-" + site_id,
            status=status,
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            **extra,
        )

    return _make


@pytest.fixture
def seed_sites(store: SiteStore) -> Callable[..., list[Site]]:
    """Write sites straight to the store, bypassing the registry."""

    def _seed(*sites: Site) -> list[Site]:
        for site in sites:
            store.save_site(site)
        return list(sites)

    return _seed


@pytest.fixture
def sample_draft() -> SiteDraft:
    return SiteDraft(
        name="Alpha",
        url="https://alpha.test/",
        api_key="ak_live_123",
        api_secret="as_live_456789",
    )


@pytest.fixture
def status_body() -> dict:
    """Sample body of the companion plugin's ``/status`` endpoint."""
    return {
        "wp_version": "6.5.2",
        "php_version": "8.2.18",
        "plugin_count": 5,
        "theme_count": 3,
        "active_theme": "Twenty Twenty-Four",
        "updates_available": {"plugins": 2, "themes": 0, "core": False},
        "site_url": "https://alpha.test",
        "timezone": "Europe/Brussels",
    }


@pytest.fixture
def discovery_body() -> dict:
    """Sample body of ``GET /wp-json/``."""
    return {
        "name": "Alpha",
        "description": "Just another WordPress site",
        "url": "https://alpha.test",
        "namespaces": ["oembed/1.0", "wp/v2"],
    }


@pytest.fixture
def plugins_body() -> list[dict]:
    return [
        {
            "name": "Akismet Anti-spam",
            "slug": "akismet",
            "version": "5.3",
            "status": "active",
            "updateAvailable": True,
            "latestVersion": "5.3.2",
            "author": "Automattic",
        },
        {
            "name": "Hello Dolly",
            "slug": "hello-dolly",
            "version": "1.7.2",
            "status": "inactive",
            "updateAvailable": False,
        },
    ]
