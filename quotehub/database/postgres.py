"""
In-memory offering store for local development and tests.

Implements the same interface as quotehub.database.postgres_real. A refresh
builds the new list first and then swaps it in with a single assignment
under the lock, so readers see either the old or the new offerings.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Sequence

from quotehub.integrations.contracts.offerings import CanonicalOffering, OfferingKind


class PostgresDB:
    def __init__(self) -> None:
        self._offerings: Dict[OfferingKind, List[CanonicalOffering]] = {}
        self._lock = threading.Lock()

    def create_tables(self) -> None:
        return None

    def replace_offerings(self, kind: OfferingKind, offerings: Sequence[CanonicalOffering]) -> int:
        staged = list(offerings)
        with self._lock:
            self._offerings[kind] = staged
        return len(staged)

    def list_offerings(self, kind: OfferingKind) -> List[CanonicalOffering]:
        with self._lock:
            return list(self._offerings.get(kind, []))

    def ping(self) -> bool:
        return True
