"""Remote site gateway — one HTTP call in, one OperationResult out."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from wp_manager import __version__
from wp_manager.config.constants import DEFAULT_TIMEOUT
from wp_manager.models.results import OperationResult

logger = logging.getLogger(__name__)

_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return ""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class Gateway:
    """Asynchronous HTTP client shared by every site call.

    The gateway knows URLs only, not sites. Transport failures never raise
    past it: they become ``OperationResult(ok=False, status=0)``. A single
    attempt is made per call with one fixed timeout.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=verify_ssl,
            transport=transport,
            follow_redirects=True,
            headers={
                "Accept": "application/json",
                "User-Agent": f"wp-manager/{__version__}",
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def request(
        self,
        url: str,
        method: str = "GET",
        *,
        headers: dict[str, str] | None = None,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> OperationResult:
        method = method.upper()
        merged: dict[str, str] = dict(headers or {})
        content: bytes | None = None
        if body is not None and method in _WRITE_METHODS:
            try:
                content = json.dumps(body).encode()
            except (TypeError, ValueError) as exc:
                logger.error("%s %s not sent, body is not JSON serializable: %s", method, url, exc)
                return OperationResult.transport_failure()
            merged["Content-Type"] = "application/json"
        try:
            response = await self._client.request(
                method, url, headers=merged, content=content, params=params,
            )
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out: %s", method, url, exc)
            return OperationResult.transport_failure()
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            return OperationResult.transport_failure()
        except httpx.InvalidURL as exc:
            logger.warning("Invalid URL %s: %s", url, exc)
            return OperationResult.transport_failure()
        status = response.status_code
        logger.debug("%s %s -> %d", method, url, status)
        return OperationResult(
            ok=200 <= status < 300,
            status=status,
            data=_decode_body(response),
        )

    async def get(self, url: str, **kwargs: Any) -> OperationResult:
        return await self.request(url, "GET", **kwargs)

    async def post(self, url: str, **kwargs: Any) -> OperationResult:
        return await self.request(url, "POST", **kwargs)
