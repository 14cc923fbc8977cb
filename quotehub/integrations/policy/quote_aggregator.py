"""
OSAGO quote aggregation.

Runs every configured provider adapter concurrently for one validated
QuoteRequest. Each adapter gets its own timeout; whatever happens inside an
adapter ends up as a ProviderResult, so the envelope can always be built and
one provider's failure never hides another provider's quote.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

import httpx

from quotehub.integrations.contracts.interfaces import AggregatedQuote, ProviderAdapter, ProviderResult
from quotehub.integrations.contracts.quotes import QuoteRequest
from quotehub.integrations.errors import (
    ProviderNotConfiguredError,
    ProviderTimeoutError,
    QuoteError,
    QuoteValidationError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class UnknownProviderError(KeyError):
    pass


class QuoteAggregator:
    def __init__(self, adapters: Sequence[ProviderAdapter], timeout_seconds: float = 15.0) -> None:
        names = [adapter.name for adapter in adapters]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate provider adapters: {names}")
        self._adapters: Dict[str, ProviderAdapter] = {adapter.name: adapter for adapter in adapters}
        self._order: List[str] = names
        self.timeout_seconds = timeout_seconds

    @property
    def providers(self) -> List[str]:
        return list(self._order)

    async def calculate_all(self, request: QuoteRequest) -> AggregatedQuote:
        logger.info("Calculating OSAGO for providers: %s", ", ".join(self._order))
        results = await asyncio.gather(
            *(self._run(self._adapters[name], request) for name in self._order)
        )
        # gather keeps argument order, so results already follow the configured order
        succeeded = [r.provider for r in results if r.success]
        logger.info("OSAGO calculation done: %d/%d providers succeeded %s", len(succeeded), len(results), succeeded)
        return AggregatedQuote(results=list(results))

    async def calculate_one(self, provider: str, request: QuoteRequest) -> ProviderResult:
        adapter = self._adapters.get(provider)
        if adapter is None:
            raise UnknownProviderError(provider)
        return await self._run(adapter, request)

    async def _run(self, adapter: ProviderAdapter, request: QuoteRequest) -> ProviderResult:
        try:
            missing = adapter.missing_settings()
            if missing:
                raise ProviderNotConfiguredError(
                    f"{adapter.display_name} config missing ({' or '.join(adapter.required_settings())})",
                    payload={"missing": missing},
                )
            if request.period_id not in adapter.supported_periods:
                allowed = ", ".join(str(p) for p in adapter.supported_periods)
                raise QuoteValidationError(f"invalid period_id for {adapter.display_name}: allowed {allowed}")

            quote = request.for_provider(adapter.name)
            try:
                return await asyncio.wait_for(adapter.calculate(quote), timeout=self.timeout_seconds)
            except asyncio.TimeoutError as e:
                raise ProviderTimeoutError(
                    f"{adapter.display_name} did not answer within {self.timeout_seconds:g}s"
                ) from e

        except QuoteError as e:
            log = logger.info if isinstance(e, (ProviderNotConfiguredError, QuoteValidationError)) else logger.error
            log("%s calculation failed (%s): %s", adapter.display_name, e.error_type, e.message)
            return ProviderResult.from_error(adapter.name, e)
        except httpx.HTTPError as e:
            logger.error("%s HTTP error: %s", adapter.display_name, e)
            return ProviderResult.from_error(adapter.name, UpstreamError(f"{adapter.display_name} request failed: {e}"))
        except Exception as e:
            logger.exception("Unexpected error in %s adapter", adapter.display_name)
            return ProviderResult.failure(
                adapter.name,
                f"{adapter.display_name} calculation failed: {e}",
                status_code=500,
                error_type="internal_error",
            )


def build_default_adapters(settings, cache=None, order: Optional[Sequence[str]] = None) -> List[ProviderAdapter]:
    """Real HTTP adapters for every provider named in the aggregator settings."""
    from quotehub.integrations.clients.real_http.euroasia import EuroasiaClient
    from quotehub.integrations.clients.real_http.gross import GrossClient
    from quotehub.integrations.clients.real_http.neo import NeoClient
    from quotehub.integrations.clients.real_http.trust import TrustClient

    factories = {
        "neo": lambda: NeoClient(settings.neo),
        "euroasia": lambda: EuroasiaClient(settings.euroasia, cache=cache),
        "gross": lambda: GrossClient(settings.gross),
        "trust": lambda: TrustClient(settings.trust),
    }
    adapters = []
    for name in order or settings.aggregator.providers:
        if name not in factories:
            raise ValueError(f"Unknown provider in configuration: {name}")
        adapters.append(factories[name]())
    return adapters
