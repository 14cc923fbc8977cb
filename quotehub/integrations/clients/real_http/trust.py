"""
Trust Insurance OSAGO adapter.

Trust issues short-lived bearer tokens from a login call. The token is kept
in memory until its expiry minus a safety margin and refreshed lazily by the
first calculation that finds it stale.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

from quotehub.integrations.clients.real_http.base import HttpProviderAdapter
from quotehub.integrations.contracts.interfaces import ProviderResult
from quotehub.integrations.contracts.quotes import ProviderQuoteInput, TrustPayload, validate_payload
from quotehub.integrations.errors import ReferenceNotFoundError, UpstreamError
from quotehub.integrations.policy.response_wrappers import (
    decode_json_response,
    ensure_success_status,
    expect_object,
    extract_trust_premium,
)
from quotehub.utils.config_loader import TrustSettings

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/products/auth/login"
CALC_PATH = "/api/osgo/v2/calc-prem"

# unified vehicle type external_id -> Trust vehicle id
TRUST_VEHICLE_TYPES = {2: 1, 6: 6, 1: 9}
SPECIAL_EQUIPMENT_GROUP = "66b3d262-2d6b-49a9-949e-6c87765fcbef"
SPECIAL_EQUIPMENT_TYPES = {8, 9, 13, 15}
SPECIAL_EQUIPMENT_VEHICLE = 15

# period months -> Trust period id (4 covers the 15/20 day policies)
TRUST_PERIODS = {6: 1, 12: 2, 3: 3, 20: 4}
TRUST_DRIVER_LIMITS = {0: 0, 5: 1}
DEFAULT_TERRITORY = 1  # Tashkent city


@dataclass
class _CachedToken:
    value: str
    refresh_after: float


class TrustClient(HttpProviderAdapter):
    name = "trust"
    display_name = "Trust"
    supported_periods = tuple(sorted(TRUST_PERIODS))

    def __init__(
        self,
        settings: TrustSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(settings.base_url, settings.timeout_seconds, transport)
        self.settings = settings
        self._clock = clock
        self._token: Optional[_CachedToken] = None
        self._token_lock = asyncio.Lock()

    def required_settings(self) -> Dict[str, str]:
        return {
            "TRUST_BASE_URL": self.base_url,
            "TRUST_LOGIN": self.settings.login,
            "TRUST_PASSWORD": self.settings.password,
        }

    async def calculate(self, quote: ProviderQuoteInput) -> ProviderResult:
        payload = validate_payload(TrustPayload, quote.payload, label="trust payload")
        body = build_trust_request(payload, quote)

        async with self._client() as client:
            token = await self.get_token(client)
            response = await self._send(
                client,
                "POST",
                CALC_PATH,
                "calculation",
                check_status=False,
                json=body,
                headers={"Accept": "application/json", "Authorization": f"Bearer {token}"},
            )

        if response.status_code == 401:
            # token revoked early; the next calculation logs in again
            self.invalidate_token()
        if not response.is_success:
            logger.error("Trust calculation HTTP error: %s - %s", response.status_code, response.text[:500])
            ensure_success_status(response, self.display_name, "calculation")

        raw = decode_json_response(response, self.display_name)
        data = raw if isinstance(raw, dict) else {"result": raw}
        return ProviderResult.ok(self.name, data, raw=raw, premium=extract_trust_premium(data))

    # --- token handling ----------------------------------------------------

    async def get_token(self, client: httpx.AsyncClient) -> str:
        cached = self._token
        if cached is not None and self._clock() < cached.refresh_after:
            return cached.value

        async with self._token_lock:
            cached = self._token
            if cached is not None and self._clock() < cached.refresh_after:
                return cached.value

            value = await self._login(client)
            lifetime = max(self.settings.token_ttl_seconds - self.settings.token_refresh_margin_seconds, 0)
            self._token = _CachedToken(value=value, refresh_after=self._clock() + lifetime)
            logger.info("Obtained Trust token, refresh in %ss", lifetime)
            return value

    def invalidate_token(self) -> None:
        self._token = None

    async def _login(self, client: httpx.AsyncClient) -> str:
        data = expect_object(
            await self._send_json(
                client,
                "POST",
                LOGIN_PATH,
                "login",
                json={"login": self.settings.login, "password": self.settings.password},
            ),
            self.display_name,
            "login",
        )
        token = str(data.get("result_message") or "")
        if data.get("result") != 0 or not token:
            raise UpstreamError("no token found in Trust auth response", body=data)
        if token.startswith("Bearer "):
            token = token[len("Bearer "):]
        return token


def map_vehicle_type(external_id: int, vehicle_group_id: Optional[str] = None) -> int:
    if external_id in TRUST_VEHICLE_TYPES:
        return TRUST_VEHICLE_TYPES[external_id]
    if vehicle_group_id == SPECIAL_EQUIPMENT_GROUP or external_id in SPECIAL_EQUIPMENT_TYPES:
        return SPECIAL_EQUIPMENT_VEHICLE
    raise ReferenceNotFoundError(f"vehicle type {external_id} is not supported by Trust")


def map_territory(external_id: int) -> int:
    return external_id if 1 <= external_id <= 14 else DEFAULT_TERRITORY


def build_trust_request(payload: TrustPayload, quote: ProviderQuoteInput) -> Dict[str, Any]:
    drivers: List[str] = payload.driver_pinfls or [payload.owner_pinfl]
    return {
        "vehicle": {
            "vehicle": map_vehicle_type(payload.vehicle_type_external_id, payload.vehicle_group_id),
            "renumber": quote.gos_number,
            "foreignVehicle": False,
        },
        "period": TRUST_PERIODS[quote.period_id],
        "use_territory": map_territory(payload.territory_external_id),
        "driver_limit": TRUST_DRIVER_LIMITS[quote.number_drivers_id],
        "discount": 1,
        "owner": {"owner_pinfl": payload.owner_pinfl},
        "drivers": [{"pinfl": pinfl, "coefficient": 1} for pinfl in drivers],
    }
