from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from quotehub.integrations.contracts.quotes import ProviderQuoteInput
from quotehub.integrations.errors import QuoteError


# ---------------------------------------------------------------------------
# Provider results
# ---------------------------------------------------------------------------

@dataclass
class ProviderResult:
    """
    Outcome of one provider call.

    Exactly one of `data` (success) or `reason` (failure) is populated.
    """

    provider: str
    success: bool
    data: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    status_code: int = 200
    error_type: Optional[str] = None
    raw: Any = None
    premium: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.success and (self.data is None or self.reason is not None):
            raise ValueError("Successful ProviderResult needs data and no reason")
        if not self.success and (self.reason is None or self.data is not None):
            raise ValueError("Failed ProviderResult needs a reason and no data")

    @classmethod
    def ok(
        cls,
        provider: str,
        data: Dict[str, Any],
        *,
        raw: Any = None,
        premium: Optional[int] = None,
        status_code: int = 200,
    ) -> "ProviderResult":
        return cls(provider=provider, success=True, data=data, raw=raw, premium=premium, status_code=status_code)

    @classmethod
    def failure(
        cls,
        provider: str,
        reason: str,
        *,
        status_code: int = 502,
        error_type: str = "upstream_error",
        details: Optional[Dict[str, Any]] = None,
        raw: Any = None,
    ) -> "ProviderResult":
        return cls(
            provider=provider,
            success=False,
            reason=reason,
            status_code=status_code,
            error_type=error_type,
            details=details or {},
            raw=raw,
        )

    @classmethod
    def from_error(cls, provider: str, exc: QuoteError) -> "ProviderResult":
        details = dict(exc.payload)
        details_fn = getattr(exc, "details", None)
        if callable(details_fn):
            details.update(details_fn())
        return cls.failure(
            provider,
            exc.message,
            status_code=exc.status_code,
            error_type=exc.error_type,
            details=details,
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {
                "provider": self.provider,
                "success": True,
                "status_code": self.status_code,
                "data": self.data,
                "premium": self.premium,
                "raw": self.raw,
            }
        return {
            "provider": self.provider,
            "success": False,
            "status_code": self.status_code,
            "error_type": self.error_type,
            "message": self.reason,
            "details": self.details,
        }


@dataclass
class AggregatedQuote:
    """One entry per configured provider, in configured order."""

    results: List[ProviderResult]
    success: bool = True
    message: str = "OSAGO calculation for all providers"

    @property
    def premiums(self) -> Dict[str, Optional[int]]:
        return {r.provider: (r.premium if r.success else None) for r in self.results}

    def get(self, provider: str) -> Optional[ProviderResult]:
        for result in self.results:
            if result.provider == provider:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "data": {r.provider: r.to_dict() for r in self.results},
            "premiums": self.premiums,
        }


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@dataclass
class VehicleGroup:
    id: str
    external_id: int
    name: str = ""
    translations: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VehicleGroup":
        return cls(
            id=str(data["id"]),
            external_id=int(data["external_id"]),
            name=str(data.get("name") or ""),
            translations=list(data.get("translations") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "external_id": self.external_id, "name": self.name, "translations": self.translations}


# ---------------------------------------------------------------------------
# Adapter interface
# ---------------------------------------------------------------------------

class ProviderAdapter(ABC):
    """One insurance provider behind the aggregator."""

    name: str = ""
    display_name: str = ""
    supported_periods: Tuple[int, ...] = (6, 12)

    def required_settings(self) -> Dict[str, str]:
        """Env variable name -> configured value. Any empty value disables the adapter."""
        return {}

    def missing_settings(self) -> List[str]:
        return [key for key, value in self.required_settings().items() if not value]

    @abstractmethod
    async def calculate(self, quote: ProviderQuoteInput) -> ProviderResult:
        pass
