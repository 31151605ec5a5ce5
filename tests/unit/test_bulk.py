"""Tests for the bulk update/install coordinator."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio
import respx

from wp_manager.client.catalog import CatalogClient
from wp_manager.client.gateway import Gateway
from wp_manager.client.site_api import SiteAPI
from wp_manager.core.bulk import BulkCoordinator, failure_message, parse_items
from wp_manager.core.registry import SiteRegistry
from wp_manager.core.resolver import StatusResolver
from wp_manager.models.results import OperationResult
from wp_manager.models.site import SiteStatus

ALPHA = "https://alpha.test/wp-json/wp-manager/v1"
BETA = "https://beta.test/wp-json/wp-manager/v1"


@pytest.fixture
def fleet(store, make_site, seed_sites):
    seed_sites(
        make_site("1", name="Alpha", url="https://alpha.test"),
        make_site("2", name="Beta", url="https://beta.test"),
        make_site("3", name="Gamma", url="https://gamma.test", status=SiteStatus.OFFLINE),
    )


@pytest_asyncio.fixture
async def coordinator(store, fleet):
    async with Gateway() as gw:
        api = SiteAPI(gw)
        registry = SiteRegistry(store, StatusResolver(api))
        registry.load()
        yield BulkCoordinator(registry, api, CatalogClient(gw))


def _plugin(slug, update=False, **extra):
    return {
        "name": slug.title(),
        "slug": slug,
        "version": "1.0",
        "status": "active",
        "updateAvailable": update,
        "latestVersion": "1.1" if update else None,
        **extra,
    }


class TestHelpers:
    def test_failure_message_prefers_body(self):
        result = OperationResult(ok=False, status=500, data={"message": "Disk full"})
        assert failure_message(result, "Update failed") == "Disk full"

    def test_failure_message_unreachable(self):
        assert failure_message(OperationResult.transport_failure(), "x") == "Site unreachable"

    def test_failure_message_status(self):
        result = OperationResult(ok=False, status=502, data="Bad gateway")
        assert failure_message(result, "Update failed") == "Update failed (HTTP 502)"

    def test_parse_items_tags_site(self, make_site, plugins_body):
        site = make_site("7", name="Seven")
        items = parse_items("plugin", plugins_body + ["junk", {"slug": "no-name"}], site)
        assert [i.slug for i in items] == ["akismet", "hello-dolly"]
        assert items[0].site_id == "7"
        assert items[0].site_name == "Seven"
        assert items[0].update_available is True
        assert items[0].latest_version == "5.3.2"

    def test_parse_items_non_list(self, make_site):
        assert parse_items("theme", {"message": "nope"}, make_site()) == []


class TestCollect:
    @pytest.mark.asyncio
    @respx.mock
    async def test_collect_skips_offline_sites(self, coordinator):
        respx.get(f"{ALPHA}/plugins").mock(
            return_value=httpx.Response(200, json=[_plugin("akismet", True), _plugin("hello")])
        )
        respx.get(f"{BETA}/plugins").mock(return_value=httpx.Response(200, json=[_plugin("jetpack", True)]))
        aggregate = await coordinator.collect("plugin")
        assert [(i.site_id, i.slug) for i in aggregate.items] == [
            ("1", "akismet"), ("1", "hello"), ("2", "jetpack"),
        ]
        assert [i.slug for i in aggregate.with_updates] == ["akismet", "jetpack"]
        assert aggregate.failed_sites == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_collect_records_failed_sites(self, coordinator):
        respx.get(f"{ALPHA}/themes").mock(return_value=httpx.Response(403, json={"message": "Denied"}))
        respx.get(f"{BETA}/themes").mock(
            return_value=httpx.Response(200, json=[{"name": "Astra", "slug": "astra", "status": "active"}])
        )
        aggregate = await coordinator.collect("theme")
        assert aggregate.failed_sites == ["1"]
        assert [i.slug for i in aggregate.items] == ["astra"]
        assert aggregate.items[0].is_active

    @pytest.mark.asyncio
    @respx.mock
    async def test_collect_limited_to_sites(self, coordinator):
        beta = respx.get(f"{BETA}/plugins").mock(return_value=httpx.Response(200, json=[]))
        aggregate = await coordinator.collect("plugin", ["2"])
        assert aggregate.items == []
        assert beta.called


class TestUpdateAll:
    @pytest.mark.asyncio
    @respx.mock
    async def test_partial_failure_and_requery(self, coordinator):
        respx.get(f"{ALPHA}/plugins").mock(
            side_effect=[
                httpx.Response(200, json=[_plugin("akismet", True), _plugin("hello")]),
                httpx.Response(200, json=[_plugin("akismet"), _plugin("hello")]),
            ]
        )
        respx.get(f"{BETA}/plugins").mock(
            side_effect=[
                httpx.Response(200, json=[_plugin("jetpack", True), _plugin("woocommerce", True)]),
                httpx.Response(200, json=[_plugin("jetpack"), _plugin("woocommerce", True)]),
            ]
        )
        akismet = respx.post(f"{ALPHA}/plugins/akismet/update").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        respx.post(f"{BETA}/plugins/jetpack/update").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        respx.post(f"{BETA}/plugins/woocommerce/update").mock(
            return_value=httpx.Response(500, json={"message": "Could not copy files"})
        )

        report = await coordinator.update_all("plugin")

        assert report.total == 3
        assert [(r.site_id, r.slug) for r in report.updated] == [("1", "akismet"), ("2", "jetpack")]
        assert len(report.failed) == 1
        failure = report.failed[0]
        assert (failure.site_name, failure.slug, failure.status) == ("Beta", "woocommerce", 500)
        assert failure.message == "Could not copy files"
        assert akismet.call_count == 1
        still_pending = [(i.site_id, i.slug) for i in report.items if i.update_available]
        assert still_pending == [("2", "woocommerce")]

    @pytest.mark.asyncio
    @respx.mock
    async def test_success_false_body_is_failure(self, coordinator, make_site):
        respx.post(f"{ALPHA}/themes/astra/update").mock(
            return_value=httpx.Response(200, json={"success": False, "message": "Locked"})
        )
        respx.get(f"{ALPHA}/themes").mock(return_value=httpx.Response(200, json=[]))
        respx.get(f"{BETA}/themes").mock(return_value=httpx.Response(200, json=[]))
        items = parse_items("theme", [{"name": "Astra", "slug": "astra", "updateAvailable": True}], make_site("1"))

        report = await coordinator.update_all("theme", items)

        assert report.updated == []
        assert report.failed[0].message == "Locked"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unknown_site_is_failure(self, coordinator, make_site):
        respx.get(f"{ALPHA}/plugins").mock(return_value=httpx.Response(200, json=[]))
        respx.get(f"{BETA}/plugins").mock(return_value=httpx.Response(200, json=[]))
        items = parse_items("plugin", [_plugin("akismet", True)], make_site("99", name="Gone"))
        report = await coordinator.update_all("plugin", items)
        assert report.failed[0].message == "Site not found"
        assert report.failed[0].site_name == "Gone"

    @pytest.mark.asyncio
    @respx.mock
    async def test_nothing_to_update(self, coordinator):
        respx.get(f"{ALPHA}/plugins").mock(return_value=httpx.Response(200, json=[_plugin("hello")]))
        respx.get(f"{BETA}/plugins").mock(return_value=httpx.Response(200, json=[]))
        report = await coordinator.update_all("plugin")
        assert report.total == 0
        assert [i.slug for i in report.items] == ["hello"]


class TestInstall:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency", [1, 3])
    @respx.mock
    async def test_one_outcome_per_target(self, coordinator, concurrency):
        alpha = respx.post(f"{ALPHA}/plugins/install").mock(
            return_value=httpx.Response(200, json={"success": True, "message": "Plugin installed"})
        )
        respx.post(f"{BETA}/plugins/install").mock(
            return_value=httpx.Response(500, json={"message": "Destination folder already exists."})
        )
        respx.post("https://gamma.test/wp-json/wp-manager/v1/plugins/install").mock(
            side_effect=httpx.ConnectError("refused")
        )

        outcomes = await coordinator.install_on_many(
            "plugin", "akismet", ["2", "1", "missing", "3", "1"], concurrency=concurrency,
        )

        assert [o.site_id for o in outcomes] == ["2", "1", "missing", "3"]
        assert [o.success for o in outcomes] == [False, True, False, False]
        assert outcomes[0].message == "Destination folder already exists."
        assert outcomes[1].message == "Plugin installed"
        assert outcomes[2].message == "Site not found"
        assert outcomes[3].message == "Site unreachable"
        assert alpha.call_count == 1
        assert json.loads(alpha.calls.last.request.content) == {"slug": "akismet"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_default_success_message(self, coordinator):
        respx.post(f"{ALPHA}/themes/install").mock(return_value=httpx.Response(200, json={}))
        outcomes = await coordinator.install_on_many("theme", "astra", ["1"])
        assert outcomes[0].success
        assert outcomes[0].message == "Installed successfully"


class TestAdminLogin:
    @pytest.mark.asyncio
    @respx.mock
    async def test_one_time_url(self, coordinator):
        respx.post(f"{ALPHA}/admin-login").mock(
            return_value=httpx.Response(200, json={"login_url": "https://alpha.test/?wpm_token=abc"})
        )
        site = coordinator.registry.require("1")
        assert await coordinator.admin_login_url(site) == ("https://alpha.test/?wpm_token=abc", True)

    @pytest.mark.asyncio
    @respx.mock
    async def test_fallback_to_wp_admin(self, coordinator):
        respx.post(f"{ALPHA}/admin-login").mock(return_value=httpx.Response(404, json={}))
        site = coordinator.registry.require("1")
        assert await coordinator.admin_login_url(site) == ("https://alpha.test/wp-admin", False)
