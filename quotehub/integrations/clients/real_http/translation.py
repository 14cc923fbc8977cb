"""
Real translation HTTP clients.

LibreTranslate is the primary backend; MyMemory is used when LibreTranslate
fails. Both translate from Uzbek (Latin) into ru / en.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import httpx

from quotehub.integrations.errors import UpstreamError, UpstreamParseError

logger = logging.getLogger(__name__)


class LibreTranslateClient:
    name = "libretranslate"

    def __init__(
        self,
        url: str = "https://libretranslate.com/translate",
        timeout_seconds: float = 10.0,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.api_key = api_key
        self.transport = transport

    async def translate(self, text: str, source: str, target: str) -> str:
        payload = {"q": text, "source": source, "target": target, "format": "text"}
        if self.api_key:
            payload["api_key"] = self.api_key

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            raise UpstreamParseError("LibreTranslate response has no translatedText", body=data)
        return translated


class MyMemoryClient:
    name = "mymemory"

    def __init__(
        self,
        url: str = "https://api.mymemory.translated.net/get",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def translate(self, text: str, source: str, target: str) -> str:
        params = {"q": text, "langpair": f"{source}|{target}"}
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
            response = await client.get(self.url, params=params)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise UpstreamParseError("MyMemory returned a non-object response", body=data)
        if data.get("quotaFinished"):
            raise UpstreamError("MyMemory quota finished", upstream_status=response.status_code, body=data)
        status = data.get("responseStatus", 200)
        if str(status) != "200":
            raise UpstreamError(
                f"MyMemory reported status {status}", upstream_status=response.status_code, body=data
            )
        response_data = data.get("responseData")
        if not isinstance(response_data, dict):
            raise UpstreamParseError("MyMemory responseData is not an object", body=data)
        translated = response_data.get("translatedText")
        if not isinstance(translated, str) or not translated.strip():
            raise UpstreamParseError("MyMemory response has no translatedText", body=data)
        return translated


class FallbackTranslationBackend:
    """Tries each backend in order and returns the first translation."""

    def __init__(self, backends: Sequence[object]) -> None:
        if not backends:
            raise ValueError("At least one translation backend is required")
        self.backends = list(backends)

    async def translate(self, text: str, source: str, target: str) -> str:
        last_error: Optional[Exception] = None
        for backend in self.backends:
            try:
                return await backend.translate(text, source, target)
            except httpx.HTTPStatusError as e:
                logger.warning("%s HTTP error: %s", backend.name, e.response.status_code)
                last_error = e
            except httpx.RequestError as e:
                logger.warning("%s request error: %s", backend.name, e)
                last_error = e
            except Exception as e:
                logger.warning("%s translation failed: %s", backend.name, e)
                last_error = e
        raise UpstreamError(f"All translation backends failed: {last_error}") from last_error
