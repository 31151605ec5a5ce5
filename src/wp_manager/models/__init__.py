"""Pydantic data models for sites, remote records, and results."""

from wp_manager.models.remote import (
    CatalogPlugin,
    CatalogTheme,
    PluginInfo,
    RemoteStatus,
    SiteStats,
    SiteUser,
    ThemeInfo,
)
from wp_manager.models.results import (
    BulkUpdateReport,
    FleetSummary,
    InstallOutcome,
    ItemAggregate,
    ItemFailure,
    ItemKind,
    ItemRef,
    OperationResult,
    SiteUpdateAllResult,
    StatusProbe,
)
from wp_manager.models.site import ClientInfo, Site, SiteDraft, SiteStatus

__all__ = [
    "BulkUpdateReport",
    "CatalogPlugin",
    "CatalogTheme",
    "ClientInfo",
    "FleetSummary",
    "InstallOutcome",
    "ItemAggregate",
    "ItemFailure",
    "ItemKind",
    "ItemRef",
    "OperationResult",
    "PluginInfo",
    "RemoteStatus",
    "Site",
    "SiteDraft",
    "SiteStats",
    "SiteStatus",
    "SiteUpdateAllResult",
    "SiteUser",
    "StatusProbe",
    "ThemeInfo",
]
