"""
NEO Insurance OSAGO adapter.

Pricing needs the vehicle type classifier, so every calculation first calls
the juridik (legal/physical owner) lookup by vehicle registration and only
then the calculator. Both calls use HTTP basic auth.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from quotehub.integrations.clients.real_http.base import HttpProviderAdapter
from quotehub.integrations.contracts.interfaces import ProviderResult
from quotehub.integrations.contracts.quotes import ProviderQuoteInput
from quotehub.integrations.errors import QuoteValidationError, UpstreamParseError
from quotehub.integrations.policy.response_wrappers import expect_object, extract_neo_premium
from quotehub.utils.config_loader import NeoSettings

logger = logging.getLogger(__name__)

JURIDIK_PATH = "/api/osago-neo/osago-juridik"
CALC_PATH = "/api/osago-neo/get-calc-osago"

# unified value -> NEO id
NEO_PERIODS = {12: 1, 6: 2}
NEO_DRIVERS = {0: 1, 5: 4}


class NeoClient(HttpProviderAdapter):
    name = "neo"
    display_name = "NEO"
    supported_periods = tuple(NEO_PERIODS)

    def __init__(self, settings: NeoSettings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        super().__init__(settings.base_url, settings.timeout_seconds, transport)
        self.settings = settings
        self._auth = httpx.BasicAuth(settings.login, settings.password)

    def required_settings(self) -> Dict[str, str]:
        return {
            "NEO_BASE_URL": self.base_url,
            "NEO_LOGIN": self.settings.login,
            "NEO_PASSWORD": self.settings.password,
        }

    async def calculate(self, quote: ProviderQuoteInput) -> ProviderResult:
        period_id = NEO_PERIODS.get(quote.period_id)
        if period_id is None:
            raise QuoteValidationError("invalid period_id: allowed 12 or 6")
        drivers_id = NEO_DRIVERS.get(quote.number_drivers_id)
        if drivers_id is None:
            raise QuoteValidationError("invalid number_drivers_id: allowed 0 (unlimited) or 5")

        async with self._client() as client:
            juridik = await self.fetch_juridik(client, quote)

            payload: Dict[str, Any] = {
                "gos_number": quote.gos_number,
                "tech_sery": quote.tech_sery,
                "tech_number": quote.tech_number,
                "period_id": period_id,
                "number_drivers_id": drivers_id,
                "car_type_id": juridik["vehicleTypeId"],
            }
            raw = expect_object(
                await self._send_json(client, "POST", CALC_PATH, "calculation", json=payload, auth=self._auth),
                self.display_name,
                "calculation",
            )

        # success needs both: error code 0 and result true
        if not (raw.get("error") == 0 and raw.get("result") is True):
            logger.warning("NEO rejected calculation: error=%s result=%s message=%s", raw.get("error"), raw.get("result"), raw.get("message"))
            return ProviderResult.failure(
                self.name,
                raw.get("message") or "NEO calculation was not successful",
                status_code=502,
                error_type="provider_rejected",
                details={"error": raw.get("error"), "result": raw.get("result")},
                raw=raw,
            )

        response = raw.get("response") if isinstance(raw.get("response"), dict) else {}
        data = {
            "amount_uzs": response.get("amount_uzs"),
            "inn": response.get("inn"),
            "message": raw.get("message") or "",
            "juridik": juridik,
        }
        return ProviderResult.ok(self.name, data, raw=raw, premium=extract_neo_premium(raw))

    async def fetch_juridik(self, client: httpx.AsyncClient, quote: ProviderQuoteInput) -> Dict[str, Any]:
        body = {
            "gos_number": quote.gos_number,
            "tech_sery": quote.tech_sery,
            "tech_number": quote.tech_number,
        }
        juridik = expect_object(
            await self._send_json(client, "POST", JURIDIK_PATH, "juridik lookup", json=body, auth=self._auth),
            self.display_name,
            "juridik lookup",
        )
        if juridik.get("vehicleTypeId") is None:
            raise UpstreamParseError("NEO juridik lookup returned no vehicleTypeId", body=juridik)
        return juridik
