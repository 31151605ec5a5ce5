"""Site status resolver: classify a site with a two-probe sequence.

Probe 1 asks the generic REST discovery endpoint whether the host answers
at all. Only then is Probe 2, the credentialed companion ``/status``
endpoint, meaningful: a 404 or 403 from it is ambiguous without first
knowing the host is reachable.

Probe 2 outcomes are checked in a fixed order::

    ok   -> online     (data: status body)
    404  -> no-plugin  (data: discovery body)
    403  -> error      (data: None)
    else -> no-plugin  (data: discovery body)
"""

from __future__ import annotations

import logging

from wp_manager.client.site_api import SiteAPI
from wp_manager.models.results import StatusProbe
from wp_manager.models.site import Site, SiteStatus

logger = logging.getLogger(__name__)


class StatusResolver:
    def __init__(self, api: SiteAPI) -> None:
        self.api = api

    async def resolve(self, site: Site) -> StatusProbe:
        try:
            return await self._probe(site)
        except Exception:
            logger.exception("Status check for %s failed unexpectedly", site.url)
            return StatusProbe(status=SiteStatus.OFFLINE)

    async def _probe(self, site: Site) -> StatusProbe:
        discovery = await self.api.discovery(site)
        if not discovery.ok:
            logger.info("%s unreachable (HTTP %d)", site.url, discovery.status)
            return StatusProbe(status=SiteStatus.OFFLINE)

        result = await self.api.status(site)
        if result.ok:
            return StatusProbe(status=SiteStatus.ONLINE, data=result.data)
        if result.status == 404:
            return StatusProbe(status=SiteStatus.NO_PLUGIN, data=discovery.data)
        if result.status == 403:
            logger.info("%s rejected the API credentials", site.url)
            return StatusProbe(status=SiteStatus.ERROR)
        # Any other failure means the endpoint is not usable
        logger.info("%s status endpoint returned HTTP %d", site.url, result.status)
        return StatusProbe(status=SiteStatus.NO_PLUGIN, data=discovery.data)
