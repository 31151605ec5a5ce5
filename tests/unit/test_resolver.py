"""Tests for the two-probe status resolver."""

from __future__ import annotations

import httpx
import pytest
import respx

from wp_manager.client.gateway import Gateway
from wp_manager.client.site_api import SiteAPI
from wp_manager.core.resolver import StatusResolver
from wp_manager.models.site import SiteStatus

DISCOVERY = "https://alpha.test/wp-json/"
STATUS = "https://alpha.test/wp-json/wp-manager/v1/status"


async def _resolve(site):
    async with Gateway() as gw:
        return await StatusResolver(SiteAPI(gw)).resolve(site)


class TestStatusResolver:
    @pytest.mark.asyncio
    @respx.mock
    async def test_online(self, make_site, discovery_body, status_body):
        respx.get(DISCOVERY).mock(return_value=httpx.Response(200, json=discovery_body))
        respx.get(STATUS).mock(return_value=httpx.Response(200, json=status_body))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.ONLINE
        assert probe.data == status_body

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_offline_skips_second_probe(self, make_site):
        respx.get(DISCOVERY).mock(side_effect=httpx.ConnectError("refused"))
        status = respx.get(STATUS).mock(return_value=httpx.Response(200, json={}))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.OFFLINE
        assert probe.data is None
        assert not status.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_discovery_http_error_is_offline(self, make_site):
        respx.get(DISCOVERY).mock(return_value=httpx.Response(503, text="Maintenance"))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.OFFLINE

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_plugin(self, make_site, discovery_body):
        respx.get(DISCOVERY).mock(return_value=httpx.Response(200, json=discovery_body))
        respx.get(STATUS).mock(return_value=httpx.Response(404, json={"code": "rest_no_route"}))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.NO_PLUGIN
        assert probe.data == discovery_body

    @pytest.mark.asyncio
    @respx.mock
    async def test_bad_credentials(self, make_site, discovery_body):
        respx.get(DISCOVERY).mock(return_value=httpx.Response(200, json=discovery_body))
        respx.get(STATUS).mock(return_value=httpx.Response(403, json={"message": "Invalid API key"}))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.ERROR
        assert probe.data is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_failure_is_no_plugin(self, make_site, discovery_body):
        respx.get(DISCOVERY).mock(return_value=httpx.Response(200, json=discovery_body))
        respx.get(STATUS).mock(return_value=httpx.Response(500, text="Internal error"))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.NO_PLUGIN

    @pytest.mark.asyncio
    @respx.mock
    async def test_status_transport_failure_is_no_plugin(self, make_site, discovery_body):
        respx.get(DISCOVERY).mock(return_value=httpx.Response(200, json=discovery_body))
        respx.get(STATUS).mock(side_effect=httpx.ReadTimeout("slow"))
        probe = await _resolve(make_site())
        assert probe.status is SiteStatus.NO_PLUGIN

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_offline(self, make_site):
        class BrokenAPI:
            async def discovery(self, site):
                raise RuntimeError("boom")

        probe = await StatusResolver(BrokenAPI()).resolve(make_site())
        assert probe.status is SiteStatus.OFFLINE
