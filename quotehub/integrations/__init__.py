"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- OSAGO insurance providers (NEO, Euroasia, Gross, Trust)
- Machine translation services (LibreTranslate, MyMemory)

Key rule:
- API endpoints and jobs MUST NOT call partner APIs directly.
- They go through the QuoteAggregator or the TranslationService, which own
  the adapters under quotehub/integrations/clients.

Switching implementations:
- Component wiring happens in ONE place (quotehub/services.py).
"""

from .contracts.interfaces import AggregatedQuote, ProviderAdapter, ProviderResult, VehicleGroup
from .contracts.offerings import CanonicalOffering, LocalizedFields, OfferingKind, RawOfferingRecord
from .contracts.quotes import ProviderQuoteInput, QuoteRequest, TrustPayload
from .errors import (
    ProviderNotConfiguredError,
    ProviderTimeoutError,
    QuoteError,
    QuoteValidationError,
    ReferenceNotFoundError,
    UpstreamError,
    UpstreamParseError,
)

__all__ = [
    # quotes
    "AggregatedQuote", "ProviderAdapter", "ProviderResult", "VehicleGroup",
    "ProviderQuoteInput", "QuoteRequest", "TrustPayload",
    # offerings
    "CanonicalOffering", "LocalizedFields", "OfferingKind", "RawOfferingRecord",
    # errors
    "QuoteError", "QuoteValidationError", "ReferenceNotFoundError",
    "UpstreamError", "UpstreamParseError",
    "ProviderNotConfiguredError", "ProviderTimeoutError",
]
