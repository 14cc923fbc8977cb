"""
Shared plumbing for the real HTTP provider adapters.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from quotehub.integrations.contracts.interfaces import ProviderAdapter
from quotehub.integrations.errors import UpstreamError
from quotehub.integrations.policy.response_wrappers import decode_json_response, ensure_success_status

logger = logging.getLogger(__name__)


class HttpProviderAdapter(ProviderAdapter):
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        # tests pass an httpx.MockTransport here
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        action: str,
        *,
        check_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.info("%s %s: %s %s", self.display_name, action, method, path)
        try:
            response = await client.request(method, self._url(path), **kwargs)
        except httpx.RequestError as e:
            logger.error("%s %s request error: %s", self.display_name, action, e)
            raise UpstreamError(f"{self.display_name} {action} request failed: {e}") from e

        if check_status and not response.is_success:
            logger.error("%s %s HTTP error: %s - %s", self.display_name, action, response.status_code, response.text[:500])
            ensure_success_status(response, self.display_name, action)
        return response

    async def _send_json(self, client: httpx.AsyncClient, method: str, path: str, action: str, **kwargs: Any) -> Any:
        response = await self._send(client, method, path, action, **kwargs)
        return decode_json_response(response, self.display_name)
