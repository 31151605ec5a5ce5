"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class WPManagerError(Exception):
    """Base exception for wp-manager."""

    exit_code: int = 1


class SiteConnectionError(WPManagerError):
    """No HTTP response was received from the site."""

    exit_code = 2


class AuthenticationError(WPManagerError):
    """The site rejected the API key/secret pair (403)."""

    exit_code = 3


class NotFoundError(WPManagerError):
    """Remote resource not found (404)."""

    exit_code = 4


class SiteNotFoundError(WPManagerError):
    """No configured site has the requested id."""

    exit_code = 4

    def __init__(self, site_id: str) -> None:
        self.site_id = site_id
        super().__init__(f"No site with id '{site_id}'")


class RemoteAPIError(WPManagerError):
    """Generic API error returned by a site."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"Site returned {status_code}: {detail}")


class ConfigurationError(WPManagerError):
    """Invalid or missing configuration."""

    exit_code = 6


class ValidationError(WPManagerError):
    """Operator input failed validation."""

    exit_code = 7


def error_handler(func: F) -> F:
    """Decorator that catches WPManagerError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except WPManagerError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
