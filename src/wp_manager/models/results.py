"""Normalized outcomes of remote calls and bulk flows."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from wp_manager.models.remote import PluginInfo, ThemeInfo
from wp_manager.models.site import SiteStatus

ItemKind = Literal["plugin", "theme"]


class OperationResult(BaseModel):
    """Outcome of one gateway call.

    ``status == 0`` means no HTTP response was received at all (DNS failure,
    refused connection, timeout), which is distinct from any HTTP error code.
    """

    ok: bool
    status: int
    data: Any = None

    @classmethod
    def transport_failure(cls) -> OperationResult:
        return cls(ok=False, status=0, data=None)

    @property
    def reached(self) -> bool:
        return self.status != 0

    @property
    def message(self) -> str | None:
        if isinstance(self.data, dict):
            msg = self.data.get("message")
            return str(msg) if msg else None
        return None

    @property
    def succeeded(self) -> bool:
        """``ok`` and the body does not report ``success: false``."""
        if not self.ok:
            return False
        if isinstance(self.data, dict) and self.data.get("success") is False:
            return False
        return True


class StatusProbe(BaseModel):
    """Classification of a site produced by the status resolver."""

    status: SiteStatus
    data: Any = None


class SiteUpdateAllResult(BaseModel):
    """Body of the server-side ``update-all`` endpoints."""

    updated: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    message: str | None = None


class ItemRef(BaseModel):
    """A plugin or theme on one specific site."""

    site_id: str
    site_name: str
    slug: str
    name: str | None = None


class ItemFailure(ItemRef):
    status: int
    message: str


class BulkUpdateReport(BaseModel):
    """Result of updating many items across many sites."""

    kind: ItemKind
    updated: list[ItemRef] = Field(default_factory=list)
    failed: list[ItemFailure] = Field(default_factory=list)
    items: list[PluginInfo | ThemeInfo] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.updated) + len(self.failed)


class InstallOutcome(BaseModel):
    """One row of the install-on-many audit trail."""

    site_id: str
    site_name: str
    success: bool
    message: str


class FleetSummary(BaseModel):
    """Dashboard counts across every configured site."""

    total: int = 0
    online: int = 0
    offline: int = 0
    pending: int = 0
    error: int = 0
    no_plugin: int = 0
    plugin_count: int = 0
    theme_count: int = 0


class ItemAggregate(BaseModel):
    """Plugins or themes gathered from many sites, tagged by site."""

    kind: ItemKind
    items: list[PluginInfo | ThemeInfo] = Field(default_factory=list)
    failed_sites: list[str] = Field(default_factory=list)

    @property
    def with_updates(self) -> list[PluginInfo | ThemeInfo]:
        return [item for item in self.items if item.update_available]
