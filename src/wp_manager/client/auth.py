"""Credential headers for the WP Manager Connector plugin."""

from __future__ import annotations

from wp_manager.config.constants import HEADER_API_KEY, HEADER_API_SECRET
from wp_manager.models.site import Site


def credential_headers(site: Site) -> dict[str, str]:
    """Return the key/secret header pair every credentialed endpoint expects."""
    return {
        HEADER_API_KEY: site.api_key,
        HEADER_API_SECRET: site.api_secret,
    }


def mask_secret(value: str | None) -> str:
    """Mask a credential for display, keeping a short prefix."""
    if not value:
        return ""
    return value[:6] + "..." if len(value) > 8 else "***"
