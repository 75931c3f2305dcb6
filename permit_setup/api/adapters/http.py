"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

HTTP/JSON adapter over ``httpx.AsyncClient``.
"""

from __future__ import annotations

import time
from typing import Optional

import httpx

from permit_setup.api.adapters.base import ApiRequest, ApiResponse, BaseAdapter
from permit_setup.exceptions import RequestTimeoutError, TransportError
from permit_setup.logging_config import get_logger

logger = get_logger(__name__)


class HttpAdapter(BaseAdapter):
    """
    Sends JSON requests to one base URL.

    The underlying ``httpx.AsyncClient`` is created on first use and dropped
    by ``close``, so one adapter can serve several event loops in turn.

    Args:
        base_url: Root URL paths are resolved against
            (e.g. ``https://api.permit.io/v2``)
        api_key: Credential sent as ``Authorization: Bearer``; the PDP probe
            sends none
        timeout: Per-request timeout in seconds
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def send(self, request: ApiRequest) -> ApiResponse:
        started = time.monotonic()
        try:
            resp = await self._http().request(request.method, request.path, json=request.body)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"{request.target} timed out after {self._timeout:g}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{request.target} failed: {e}") from e

        elapsed_ms = round((time.monotonic() - started) * 1000, 2)
        logger.debug("http_response", target=request.target, status=resp.status_code, elapsed_ms=elapsed_ms)
        return ApiResponse.parse(resp.status_code, resp.text, elapsed_ms)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
