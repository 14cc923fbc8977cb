"""
OSAGO quote request contracts.

`QuoteRequest` holds the cross-provider fields that must validate before any
provider is called. Provider-specific fields travel in `provider_payloads`
keyed by provider name; each adapter validates its own payload against the
schema documented below and never sees another provider's payload.

Payload schemas:
- euroasia: the calculate body forwarded verbatim (non-empty object);
  `vehicle_group_id` is filled in by the adapter from the mapping lookup.
- trust: `TrustPayload`.
- neo, gross: no payload.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from quotehub.integrations.errors import QuoteValidationError

SUPPORTED_PERIODS = (3, 6, 12, 20)
DRIVER_POLICIES = (0, 5)  # 0 = unlimited, 5 = limited list of drivers
SUPPORTED_LANGUAGES = ("uz", "ru", "en")

ModelT = TypeVar("ModelT", bound=BaseModel)


class QuoteRequest(BaseModel):
    gos_number: str
    tech_sery: str
    tech_number: str
    period_id: int
    number_drivers_id: int
    accept_language: str = "ru"
    vehicle_group_external_id: Optional[int] = None
    provider_payloads: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _legacy_euroasia_body(cls, data: Any) -> Any:
        # older clients send the Euroasia calculate body as a top-level `euroasia_body`
        if isinstance(data, dict) and data.get("euroasia_body") is not None:
            data = dict(data)
            payloads = dict(data.get("provider_payloads") or {})
            payloads.setdefault("euroasia", data.pop("euroasia_body"))
            data["provider_payloads"] = payloads
        return data

    @field_validator("gos_number", "tech_sery", "tech_number")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("period_id")
    @classmethod
    def _known_period(cls, value: int) -> int:
        if value not in SUPPORTED_PERIODS:
            raise ValueError(f"period_id must be one of {SUPPORTED_PERIODS}")
        return value

    @field_validator("number_drivers_id")
    @classmethod
    def _known_driver_policy(cls, value: int) -> int:
        if value not in DRIVER_POLICIES:
            raise ValueError(f"number_drivers_id must be one of {DRIVER_POLICIES}")
        return value

    @field_validator("accept_language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        value = (value or "ru").strip().lower()
        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(f"accept_language must be one of {SUPPORTED_LANGUAGES}")
        return value

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> "QuoteRequest":
        return validate_payload(cls, data, label="quote request")

    def for_provider(self, provider: str) -> "ProviderQuoteInput":
        return ProviderQuoteInput(
            provider=provider,
            gos_number=self.gos_number,
            tech_sery=self.tech_sery,
            tech_number=self.tech_number,
            period_id=self.period_id,
            number_drivers_id=self.number_drivers_id,
            accept_language=self.accept_language,
            vehicle_group_external_id=self.vehicle_group_external_id,
            payload=copy.deepcopy(self.provider_payloads.get(provider) or {}),
        )


@dataclass(frozen=True)
class ProviderQuoteInput:
    """The slice of a QuoteRequest one adapter is allowed to see."""

    provider: str
    gos_number: str
    tech_sery: str
    tech_number: str
    period_id: int
    number_drivers_id: int
    accept_language: str = "ru"
    vehicle_group_external_id: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)


class TrustPayload(BaseModel):
    owner_pinfl: str = Field(pattern=r"^\d{14}$")
    driver_pinfls: List[str] = Field(default_factory=list)
    vehicle_type_external_id: int
    vehicle_group_id: Optional[str] = None
    territory_external_id: int = 1

    @field_validator("driver_pinfls")
    @classmethod
    def _valid_pinfls(cls, value: List[str]) -> List[str]:
        for pinfl in value:
            if not (len(pinfl) == 14 and pinfl.isdigit()):
                raise ValueError(f"driver pinfl must be 14 digits, got {pinfl!r}")
        return value


def validate_payload(model_type: Type[ModelT], data: Dict[str, Any], *, label: str) -> ModelT:
    try:
        return model_type(**(data or {}))
    except ValidationError as exc:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise QuoteValidationError(
            f"Invalid {label}: {'; '.join(errors)}",
            payload={"errors": errors},
        ) from exc
