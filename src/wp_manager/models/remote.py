"""Records fetched from a site or the public catalog (never persisted)."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RemoteStatus(BaseModel):
    """Body of ``GET /status`` on the companion plugin."""

    wp_version: str | None = Field(
        default=None, validation_alias=AliasChoices("wp_version", "platform_version"),
    )
    php_version: str | None = Field(
        default=None, validation_alias=AliasChoices("php_version", "runtime_version"),
    )
    plugin_count: int | None = None
    theme_count: int | None = None
    active_theme: str | None = None
    updates_available: dict[str, Any] | None = None
    site_url: str | None = None
    timezone: str | None = None

    def metadata(self) -> dict[str, Any]:
        """Site fields mirrored from this status body."""
        return {
            "wp_version": self.wp_version,
            "php_version": self.php_version,
            "plugin_count": self.plugin_count,
            "theme_count": self.theme_count,
            "active_theme": self.active_theme,
        }


class _Installable(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    slug: str
    version: str | None = None
    status: str = "inactive"
    update_available: bool = Field(default=False, alias="updateAvailable")
    latest_version: str | None = Field(default=None, alias="latestVersion")
    author: str | None = None

    # Set when aggregated across sites; slugs are only unique per site
    site_id: str | None = None
    site_name: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class PluginInfo(_Installable):
    """A plugin installed on a site."""


class ThemeInfo(_Installable):
    """A theme installed on a site."""

    screenshot: str | None = None


class SiteUser(BaseModel):
    """A WordPress user account on a site."""

    id: int
    username: str
    email: str | None = None
    display_name: str | None = None
    roles: list[str] = Field(default_factory=list)
    registered: str | None = None


class SiteStats(BaseModel):
    """Body of ``GET /stats``: file, database, and content counts."""

    file_count: int | None = None
    db_size: str | None = None
    db_size_bytes: int | None = None
    uploads_size: str | None = None
    uploads_size_bytes: int | None = None
    total_posts: int | None = None
    total_pages: int | None = None
    total_comments: int | None = None


class CatalogPlugin(BaseModel):
    """A plugin entry from the wordpress.org directory."""

    name: str
    slug: str
    version: str | None = None
    author: str | None = None
    rating: float | None = None
    active_installs: int | None = None
    short_description: str | None = None
    icons: dict[str, str] | list[Any] | None = None


class CatalogTheme(BaseModel):
    """A theme entry from the wordpress.org directory."""

    name: str
    slug: str
    version: str | None = None
    author: Any = None
    rating: float | None = None
    screenshot_url: str | None = None
    preview_url: str | None = None

    @property
    def author_name(self) -> str:
        if isinstance(self.author, dict):
            return str(self.author.get("display_name") or self.author.get("user_nicename", ""))
        return str(self.author or "")
