"""Shared helpers for CLI commands — options, context factory, result checks."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import datetime
from typing import Annotated, Any, Optional, TypeVar

import typer

from wp_manager.client.errors import (
    AuthenticationError,
    NotFoundError,
    RemoteAPIError,
    SiteConnectionError,
)
from wp_manager.config.manager import ConfigManager
from wp_manager.core.context import AppContext
from wp_manager.models.results import OperationResult

T = TypeVar("T")

# Shared Typer option type aliases
FormatOpt = Annotated[
    Optional[str],
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]
SitesOpt = Annotated[
    Optional[list[str]],
    typer.Option("--site", "-s", help="Site id (repeatable)"),
]
SiteIdArg = Annotated[str, typer.Argument(help="Site id")]
ConcurrencyOpt = Annotated[
    Optional[int],
    typer.Option("--concurrency", "-c", min=1, help="Sites handled at once"),
]


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run one command coroutine on a fresh event loop."""
    return asyncio.run(coro)


def open_context() -> AppContext:
    """Create an AppContext from the config file and environment."""
    return AppContext.from_config(ConfigManager())


def resolve_format(ctx: AppContext, fmt: str | None) -> str:
    return fmt or ctx.settings.default_format


def format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def check_result(result: OperationResult, action: str) -> OperationResult:
    """Raise the matching WPManagerError for a failed single-site call."""
    if result.succeeded:
        return result
    if not result.reached:
        raise SiteConnectionError(f"{action}: no response from the site")
    if result.status in (401, 403):
        raise AuthenticationError(
            f"{action}: the site rejected the API key/secret. "
            "Check the credentials shown in Settings > WP Manager on the site."
        )
    if result.status == 404:
        raise NotFoundError(f"{action}: {result.message or 'not found'}")
    raise RemoteAPIError(result.status, result.message or f"{action} failed")
