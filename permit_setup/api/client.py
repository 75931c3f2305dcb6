"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Client for the Permit.io administrative API and the Edge PDP health probe.

Every call is normalized into an ``ApiResult``; transport failures and
timeouts are converted at this boundary and never propagate.
"""

import asyncio
from typing import Any, Optional

from permit_setup.api.adapters.base import ApiRequest, BaseAdapter
from permit_setup.api.adapters.http import HttpAdapter
from permit_setup.api.result import ApiResult
from permit_setup.config.presets import HEALTH_KEYWORDS
from permit_setup.config.settings import PermitConfig
from permit_setup.exceptions import RequestTimeoutError, TransportError
from permit_setup.logging_config import get_logger, log_api_failure

logger = get_logger(__name__)


class PermitApiClient:
    """
    Async client issuing one authenticated request per call.

    Args:
        config: Connection settings (base URLs, credential, timeouts)
        adapter: Adapter for the administrative API; defaults to ``HttpAdapter``
        pdp_adapter: Adapter for the decision point; defaults to ``HttpAdapter``

    Example::

        async with PermitApiClient(config) as client:
            result = await client.call("GET", config.schema_path("resources"))
    """

    def __init__(
        self,
        config: PermitConfig,
        adapter: Optional[BaseAdapter] = None,
        pdp_adapter: Optional[BaseAdapter] = None,
    ) -> None:
        self.config = config
        self._adapter = adapter or HttpAdapter(
            base_url=config.api_url,
            api_key=config.api_key,
            timeout=config.timeout,
        )
        self._pdp_adapter = pdp_adapter or HttpAdapter(
            base_url=config.pdp_url,
            timeout=config.health_timeout,
        )

    async def __aenter__(self) -> "PermitApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._adapter.close()
        await self._pdp_adapter.close()

    async def call(self, method: str, endpoint: str, body: Any = None) -> ApiResult:
        """
        Issue one request against the administrative API.

        The whole call, including reading the body, is bounded by
        ``config.timeout``; on expiry the in-flight request is cancelled.

        Args:
            method: HTTP method
            endpoint: Path relative to the API base URL
            body: Optional JSON-serializable body

        Returns:
            ApiResult: OK for 2xx, EXISTS for 409, REJECTED for any other
            status, TRANSPORT_ERROR when no response was received
        """
        request = ApiRequest(method=method.upper(), path=endpoint, body=body)

        try:
            response = await asyncio.wait_for(
                self._adapter.send(request), timeout=self.config.timeout
            )
        except (asyncio.TimeoutError, RequestTimeoutError):
            result = ApiResult.timeout(self.config.timeout)
            log_api_failure(logger, request.method, endpoint, reason=result.error)
            return result
        except TransportError as e:
            log_api_failure(logger, request.method, endpoint, reason=str(e))
            return ApiResult.transport_error(str(e))

        result = ApiResult.from_status(response.status_code, response.body)
        if not result.success:
            log_api_failure(
                logger,
                request.method,
                endpoint,
                status=response.status_code,
                reason=response.text,
            )
        return result

    async def check_health(self) -> bool:
        """
        Probe the decision point's ``/health`` endpoint.

        Healthy means HTTP OK, or a body containing one of the recognized
        keywords. Never raises.
        """
        request = ApiRequest(method="GET", path="/health")
        try:
            response = await asyncio.wait_for(
                self._pdp_adapter.send(request), timeout=self.config.health_timeout
            )
        except (asyncio.TimeoutError, TransportError) as e:
            logger.debug("pdp_health_probe_failed", pdp_url=self.config.pdp_url, error=str(e))
            return False

        text = response.text.lower()
        return response.ok or any(keyword in text for keyword in HEALTH_KEYWORDS)
