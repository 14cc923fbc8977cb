"""
Bank offering contracts.

`RawOfferingRecord` is what the scraping collaborator hands over: free-text
fields exactly as they appeared on the bank's site. `CanonicalOffering` is
what the normalization pipeline produces and the storage layer persists.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

LOCALES = ("uz", "ru", "en", "oz")
OFFERING_FIELDS = ("description", "rate", "term", "amount", "channel")


class OfferingKind(str, Enum):
    MICROCREDIT = "microcredit"
    AUTOCREDIT = "autocredit"
    MORTGAGE = "mortgage"
    DEPOSIT = "deposit"
    CARD = "card"


@dataclass(frozen=True)
class RawOfferingRecord:
    kind: OfferingKind
    bank_name: str
    description: str = ""
    rate: str = ""
    term: str = ""
    amount: str = ""
    channel: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], kind: Optional[OfferingKind] = None) -> "RawOfferingRecord":
        raw_kind = kind or data.get("kind") or OfferingKind.MICROCREDIT
        return cls(
            kind=OfferingKind(raw_kind),
            bank_name=str(data.get("bank_name") or ""),
            # deposit scrapers emit `title` / `min_amount`
            description=str(data.get("description") or data.get("title") or ""),
            rate=str(data.get("rate") or ""),
            term=str(data.get("term") or ""),
            amount=str(data.get("amount") or data.get("min_amount") or ""),
            channel=str(data.get("channel") or ""),
            url=str(data.get("url") or ""),
        )


@dataclass
class LocalizedFields:
    description: str = ""
    rate: str = ""
    term: str = ""
    amount: str = ""
    channel: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class CanonicalOffering:
    kind: OfferingKind
    bank_name: str
    uz: LocalizedFields = field(default_factory=LocalizedFields)
    ru: LocalizedFields = field(default_factory=LocalizedFields)
    en: LocalizedFields = field(default_factory=LocalizedFields)
    oz: LocalizedFields = field(default_factory=LocalizedFields)
    url: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def locale(self, code: str) -> LocalizedFields:
        if code not in LOCALES:
            raise KeyError(code)
        return getattr(self, code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "bank_name": self.bank_name,
            "url": self.url,
            "created_at": self.created_at.isoformat(),
            **{code: self.locale(code).to_dict() for code in LOCALES},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanonicalOffering":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            kind=OfferingKind(data["kind"]),
            bank_name=data.get("bank_name") or "",
            url=data.get("url") or "",
            created_at=created_at or datetime.now(timezone.utc),
            **{code: LocalizedFields(**(data.get(code) or {})) for code in LOCALES},
        )
