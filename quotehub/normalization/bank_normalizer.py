"""
Bank name canonicalization.

Scraped pages spell the same bank many ways ("ASAKABANK", "Asaka bank",
"asakabank"). Known banks are resolved through the curated table in
config/bank_names.yml; anything else goes through a deterministic
capitalization fallback so unknown names still come out in one stable form.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import yaml

logger = logging.getLogger(__name__)

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʻ": "'", "ʼ": "'", "`": "'"})
_WHITESPACE = re.compile(r"\s+")
_BANK_TOKEN = re.compile(r"(banki?)", re.IGNORECASE)


def _fold(name: str) -> str:
    return _WHITESPACE.sub(" ", name.translate(_APOSTROPHES).strip().lower())


def _compact(folded: str) -> str:
    return folded.replace(" ", "").replace("-", "")


def capitalize_bank_name(name: str) -> str:
    """
    Rule-based display form for names missing from the table.

        >>> capitalize_bank_name("infinbank")
        'Infin Bank'
        >>> capitalize_bank_name("turon-banki")
        'Turon Banki'
    """
    name = _BANK_TOKEN.sub(r" \1", name.strip().replace("-", " "))
    words = []
    for word in name.split():
        lower = word.lower()
        if lower == "bank":
            words.append("Bank")
        elif lower == "banki":
            words.append("Banki")
        else:
            words.append(lower[:1].upper() + lower[1:])
    return " ".join(words)


class BankNameNormalizer:
    """
    Canonical bank names plus a bank / payment-app classifier.

    Tables are read once, on first use, from config/bank_names.yml unless
    passed in explicitly.
    """

    def __init__(
        self,
        banks: Optional[Dict[str, str]] = None,
        mobile_apps: Optional[Iterable[str]] = None,
        config_path: Optional[Path] = None,
    ) -> None:
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "bank_names.yml"
        self._config_path = config_path
        self._banks_override = dict(banks) if banks is not None else None
        self._apps_override = list(mobile_apps) if mobile_apps is not None else None

        self._lock = threading.Lock()
        self._index: Optional[Dict[str, str]] = None
        self._compact_index: Dict[str, str] = {}
        self._mobile_apps: Set[str] = set()
        self._canonical: List[str] = []

    def _ensure_loaded(self) -> None:
        if self._index is not None:
            return
        with self._lock:
            if self._index is not None:
                return

            banks = self._banks_override
            apps = self._apps_override
            if banks is None or apps is None:
                data = self._read_config()
                if banks is None:
                    banks = data.get("banks") or {}
                if apps is None:
                    apps = data.get("mobile_apps") or []

            index: Dict[str, str] = {}
            for raw, canonical in banks.items():
                index[_fold(raw)] = canonical
                # canonical forms map onto themselves so normalization is idempotent
                index.setdefault(_fold(canonical), canonical)
            self._compact_index = {_compact(key): value for key, value in index.items()}
            self._mobile_apps = {_compact(_fold(app)) for app in apps}
            self._canonical = sorted(set(banks.values()))
            self._index = index
            logger.info("Loaded %d bank names, %d mobile apps", len(banks), len(self._mobile_apps))

    def _read_config(self) -> Dict[str, object]:
        if not self._config_path.exists():
            logger.warning("Bank name config not found at %s, using empty mappings", self._config_path)
            return {}
        with open(self._config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def normalize(self, name: str) -> str:
        if not name or not name.strip():
            return ""
        self._ensure_loaded()

        folded = _fold(name)
        canonical = self._index.get(folded) or self._compact_index.get(_compact(folded))
        if canonical:
            return canonical
        return capitalize_bank_name(name)

    def is_bank_name(self, name: str) -> bool:
        """False for empty names and for known payment apps."""
        normalized = self.normalize(name)
        if not normalized:
            return False
        return _compact(_fold(normalized)) not in self._mobile_apps

    def standard_names(self) -> List[str]:
        self._ensure_loaded()
        return list(self._canonical)
