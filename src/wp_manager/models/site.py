"""Site data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

METADATA_FIELDS = (
    "wp_version",
    "php_version",
    "plugin_count",
    "theme_count",
    "active_theme",
)


class SiteStatus(str, Enum):
    """Connectivity/capability state of a managed site."""

    ONLINE = "online"
    OFFLINE = "offline"
    PENDING = "pending"
    ERROR = "error"
    NO_PLUGIN = "no-plugin"

    def __str__(self) -> str:
        return self.value


class ClientInfo(BaseModel):
    """Contact details of the site owner, used for monthly reports."""

    model_config = ConfigDict(extra="forbid")

    name: str
    email: str
    company: str | None = None
    phone: str | None = None
    send_reports: bool = False
    report_day: int = Field(default=1, ge=1, le=28)
    last_report_sent: datetime | None = None


def _normalize_url(v: str) -> str:
    v = v.strip()
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return v.rstrip("/")


class SiteDraft(BaseModel):
    """Fields supplied by the operator when adding a site."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    url: str = Field(description="Site base URL, e.g. https://example.com")
    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1)
    client: ClientInfo | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _normalize_url(v)


class Site(BaseModel):
    """A managed WordPress site as persisted locally."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    url: str
    api_key: str
    api_secret: str
    status: SiteStatus = SiteStatus.PENDING
    created_at: datetime
    last_sync: datetime | None = None

    # Remote metadata, only trustworthy while status is online
    wp_version: str | None = None
    php_version: str | None = None
    plugin_count: int | None = None
    theme_count: int | None = None
    active_theme: str | None = None

    client: ClientInfo | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _normalize_url(v)

    @property
    def is_online(self) -> bool:
        return self.status is SiteStatus.ONLINE

    def merged(self, changes: dict) -> Site:
        """Return a validated copy with *changes* applied."""
        return Site.model_validate({**self.model_dump(), **changes})
