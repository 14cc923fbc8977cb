"""
Euroasia Insurance OSAGO adapter.

The frontend sends Euroasia's `external_id` as the unified vehicle group id;
before pricing we look up the provider-local group id from the
vehicle-groups reference endpoint. Authentication is a static API key in the
Authorization header.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from quotehub.integrations.clients.real_http.base import HttpProviderAdapter
from quotehub.integrations.contracts.interfaces import ProviderResult, VehicleGroup
from quotehub.integrations.contracts.quotes import ProviderQuoteInput
from quotehub.integrations.errors import (
    QuoteValidationError,
    ReferenceNotFoundError,
    UpstreamError,
    UpstreamParseError,
)
from quotehub.integrations.policy.response_wrappers import (
    decode_json_response,
    expect_object,
    extract_euroasia_premium,
)
from quotehub.utils.config_loader import EuroasiaSettings

logger = logging.getLogger(__name__)

VEHICLE_GROUPS_PATH = "/api/v1/insurance/lookups/vehicle-groups"
CALC_PATH = "/api/v1/insurance/osago/calculate"


class EuroasiaClient(HttpProviderAdapter):
    name = "euroasia"
    display_name = "Euroasia"
    supported_periods = (6, 12, 20)

    def __init__(
        self,
        settings: EuroasiaSettings,
        cache: Any = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(settings.base_url, settings.timeout_seconds, transport)
        self.settings = settings
        self.cache = cache

    def required_settings(self) -> Dict[str, str]:
        return {"EUROASIA_BASE_URL": self.base_url, "EUROASIA_API_KEY": self.settings.api_key}

    def _headers(self, lang: str) -> Dict[str, str]:
        return {"Accept-Language": lang or "ru", "Authorization": self.settings.api_key}

    async def calculate(self, quote: ProviderQuoteInput) -> ProviderResult:
        if not quote.payload:
            raise QuoteValidationError("euroasia_body is required")
        body = dict(quote.payload)

        async with self._client() as client:
            if quote.vehicle_group_external_id is not None:
                body["vehicle_group_id"] = await self.resolve_vehicle_group(
                    client, quote.vehicle_group_external_id, quote.accept_language
                )
            response = await self._send(
                client, "POST", CALC_PATH, "calculation", json=body, headers=self._headers(quote.accept_language)
            )

        raw = decode_json_response(response, self.display_name)
        if response.status_code != 200:
            raise UpstreamError(
                f"Euroasia calculation answered HTTP {response.status_code}",
                upstream_status=response.status_code,
                body=raw,
            )
        data = raw if isinstance(raw, dict) else {"result": raw}
        return ProviderResult.ok(self.name, data, raw=raw, premium=extract_euroasia_premium(data))

    async def resolve_vehicle_group(self, client: httpx.AsyncClient, external_id: int, lang: str) -> str:
        try:
            groups = await self.fetch_vehicle_groups(client, lang)
        except UpstreamError as e:
            raise UpstreamError(
                f"failed to fetch Euroasia vehicle groups: {e.message}",
                upstream_status=e.upstream_status,
                body=e.body,
            ) from e

        for group in groups:
            if group.external_id == external_id:
                return group.id
        raise ReferenceNotFoundError(f"vehicle_group_external_id {external_id} not found in Euroasia")

    async def fetch_vehicle_groups(self, client: httpx.AsyncClient, lang: str) -> List[VehicleGroup]:
        cached = self._cached_groups(lang)
        if cached is not None:
            return cached

        data = expect_object(
            await self._send_json(
                client, "GET", VEHICLE_GROUPS_PATH, "vehicle groups lookup", headers=self._headers(lang)
            ),
            self.display_name,
            "vehicle groups lookup",
        )
        if not data.get("success"):
            raise UpstreamError(f"vehicle-groups not success: {data.get('message') or ''}".strip(), body=data)

        try:
            groups = [VehicleGroup.from_dict(item) for item in data.get("data") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamParseError(f"Euroasia vehicle groups are malformed: {e}", body=data) from e

        logger.info("Fetched %d Euroasia vehicle groups (lang=%s)", len(groups), lang)
        self._store_groups(lang, groups)
        return groups

    # --- optional short-lived cache --------------------------------------

    def _cache_key(self, lang: str) -> str:
        return f"euroasia:vehicle_groups:{lang or 'ru'}"

    def _cached_groups(self, lang: str) -> Optional[List[VehicleGroup]]:
        if self.cache is None or self.settings.vehicle_group_cache_ttl <= 0:
            return None
        raw = self.cache.get(self._cache_key(lang))
        if not raw:
            return None
        try:
            return [VehicleGroup.from_dict(item) for item in json.loads(raw)]
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable cached Euroasia vehicle groups for lang=%s", lang)
            return None

    def _store_groups(self, lang: str, groups: List[VehicleGroup]) -> None:
        if self.cache is None or self.settings.vehicle_group_cache_ttl <= 0:
            return
        payload = json.dumps([g.to_dict() for g in groups], ensure_ascii=False)
        self.cache.set(self._cache_key(lang), payload, self.settings.vehicle_group_cache_ttl)
