"""Async JSON-over-HTTPS transport shared by weather providers."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .exceptions import MalformedUpstreamData, TransportError
from .redaction import sanitize_for_logging, sanitize_text


class JsonTransport:
    """Issue GET requests and decode JSON bodies.

    No retries are attempted; a failed call raises and the caller decides
    whether to issue a new request.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.logger = logger
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": "weather-glance/0.1",
            },
        )

    async def __aenter__(self) -> JsonTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close underlying HTTP client."""
        await self._client.aclose()

    async def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        context: str = "request",
    ) -> Any:
        """GET ``url`` and return the decoded JSON body."""
        self.logger.debug(
            "%s GET %s params=%s", context, url, sanitize_for_logging(params or {})
        )
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self.logger.warning("%s failed (HTTP %d)", context, status)
            raise TransportError(
                f"{context} failed with status {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            detail = sanitize_text(str(exc))
            self.logger.warning("%s request failed (%s)", context, type(exc).__name__)
            raise TransportError(
                f"{context} request failed: {detail}" if detail else ""
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedUpstreamData(
                f"{context} returned non-JSON response.", field_path="$"
            ) from exc
