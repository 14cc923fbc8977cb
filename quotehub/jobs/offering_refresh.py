"""
Offering refresh job: source -> normalization pipeline -> staged list -> swap.

A run fetches raw records from its source, drops entries that are not banks
(mobile payment apps, blank names), translates every record and only then
hands the complete list to the store, which replaces the serving rows for
the kind in one step. Runs of the same job never overlap: a second trigger
while one is in flight is skipped and reported.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Protocol

from quotehub.integrations.contracts.offerings import CanonicalOffering, OfferingKind, RawOfferingRecord
from quotehub.normalization.bank_normalizer import BankNameNormalizer
from quotehub.normalization.translator import OfferingTranslator

logger = logging.getLogger(__name__)


class OfferingSource(Protocol):
    def fetch(self) -> List[RawOfferingRecord]:
        ...


class JsonlOfferingSource:
    """Reads scraper output: one JSON object per line."""

    def __init__(self, path: Path, kind: OfferingKind) -> None:
        self.path = Path(path)
        self.kind = kind

    def fetch(self) -> List[RawOfferingRecord]:
        records: List[RawOfferingRecord] = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(f"{self.path}:{line_no}: invalid JSON: {e}") from e
                if not isinstance(data, dict):
                    raise ValueError(f"{self.path}:{line_no}: expected a JSON object")
                records.append(RawOfferingRecord.from_dict(data, kind=self.kind))
        logger.info("Read %d raw %s records from %s", len(records), self.kind.value, self.path)
        return records


@dataclass
class RefreshResult:
    kind: OfferingKind
    fetched: int = 0
    skipped_non_bank: int = 0
    stored: int = 0
    skipped: bool = False

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "fetched": self.fetched,
            "skipped_non_bank": self.skipped_non_bank,
            "stored": self.stored,
            "skipped": self.skipped,
        }


class OfferingRefreshJob:
    def __init__(
        self,
        kind: OfferingKind,
        source: OfferingSource,
        translator: OfferingTranslator,
        bank_normalizer: BankNameNormalizer,
        store: Any,
    ) -> None:
        self.kind = kind
        self.source = source
        self.translator = translator
        self.bank_normalizer = bank_normalizer
        self.store = store
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(self) -> RefreshResult:
        if not self._lock.acquire(blocking=False):
            logger.warning("Refresh for %s already running, skipping this trigger", self.kind.value)
            return RefreshResult(kind=self.kind, skipped=True)
        try:
            return await self._refresh()
        finally:
            self._lock.release()

    async def _refresh(self) -> RefreshResult:
        result = RefreshResult(kind=self.kind)
        records = self.source.fetch()
        result.fetched = len(records)

        staged: List[CanonicalOffering] = []
        for record in records:
            if not record.bank_name.strip() or not self.bank_normalizer.is_bank_name(record.bank_name):
                result.skipped_non_bank += 1
                continue
            staged.append(await self.translator.translate_record(record))

        result.stored = self.store.replace_offerings(self.kind, staged)
        logger.info(
            "Refreshed %s offerings: fetched=%d skipped_non_bank=%d stored=%d",
            self.kind.value,
            result.fetched,
            result.skipped_non_bank,
            result.stored,
        )
        return result
