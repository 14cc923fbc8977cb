"""
Error taxonomy shared by the provider adapters and the aggregator.

Every error carries the HTTP status a single-provider endpoint should answer
with, so the aggregator can turn any of them into a ProviderResult failure
without knowing which adapter raised it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class QuoteError(ValueError):
    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload or {}


class QuoteValidationError(QuoteError):
    """Malformed or missing request fields. Raised before any network call."""

    status_code = 400
    error_type = "validation_error"


class ReferenceNotFoundError(QuoteError):
    """A reference lookup (vehicle group, vehicle type) found no match."""

    status_code = 404
    error_type = "not_found"


class UpstreamError(QuoteError):
    status_code = 502
    error_type = "upstream_error"

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        body: Any = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.upstream_status = upstream_status
        self.body = body

    def details(self) -> Dict[str, Any]:
        return {"status": self.upstream_status, "body": self.body}


class UpstreamParseError(UpstreamError):
    """Upstream answered with something that is not the JSON we expect."""

    error_type = "parse_error"


class ProviderNotConfiguredError(QuoteError):
    """Adapter is unconfigured or not wired up. No network call is made."""

    status_code = 501
    error_type = "not_implemented"


class ProviderTimeoutError(QuoteError):
    status_code = 504
    error_type = "timeout"
