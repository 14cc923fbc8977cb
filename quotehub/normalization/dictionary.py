"""
Phrase and word tables for offering text translation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Tuple

import yaml

logger = logging.getLogger(__name__)

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʻ": "'", "ʼ": "'", "`": "'"})
_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = ".,!?;:\"'()[]{}«»"
_COMPOUND_SEPARATOR = re.compile(r"([—–-])")

# a phrase covering more than this share of the text counts as a match
PHRASE_COVERAGE = 0.7


def fold(text: str) -> str:
    return _WHITESPACE.sub(" ", text.translate(_APOSTROPHES).strip()).lower()


@dataclass
class PhraseMatch:
    key: str
    translations: Dict[str, str]
    exact: bool
    start: int
    end: int

    def render(self, text: str, locale: str) -> str:
        """Whitespace-collapsed `text` with the matched span replaced."""
        collapsed = _WHITESPACE.sub(" ", text.strip())
        return f"{collapsed[:self.start]}{self.translations[locale]}{collapsed[self.end:]}".strip()


class TranslationTables:
    """
    Curated phrase and word tables, loaded from config/translation_rules.yml
    unless passed in directly.
    """

    def __init__(
        self,
        phrases: Optional[Dict[str, Dict[str, str]]] = None,
        words: Optional[Dict[str, Dict[str, str]]] = None,
        config_path: Optional[Path] = None,
    ) -> None:
        if phrases is None or words is None:
            if config_path is None:
                config_path = Path(__file__).parent.parent.parent / "config" / "translation_rules.yml"
            data = self._load_config(config_path)
            phrases = data.get("phrases", {}) if phrases is None else phrases
            words = data.get("words", {}) if words is None else words

        self.phrases: Dict[str, Dict[str, str]] = {fold(k): v for k, v in phrases.items()}
        self.words: Dict[str, Dict[str, str]] = {fold(k): v for k, v in words.items()}
        # longest phrase wins when several are contained in the text
        self._phrase_order: List[str] = sorted(self.phrases, key=lambda k: (-len(k), k))
        # phrases only match whole words
        self._phrase_patterns: Dict[str, Pattern[str]] = {
            key: re.compile(rf"(?<!\w){re.escape(key)}(?!\w)") for key in self._phrase_order
        }

    @staticmethod
    def _load_config(config_path: Path) -> Dict[str, Dict[str, Dict[str, str]]]:
        if not config_path.exists():
            logger.warning("Translation tables not found at %s, using empty tables", config_path)
            return {}
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info(
            "Loaded %d phrase translations, %d word translations",
            len(data.get("phrases") or {}),
            len(data.get("words") or {}),
        )
        return data

    def match_phrase(self, text: str) -> Optional[PhraseMatch]:
        folded = fold(text)
        if not folded:
            return None
        for key in self._phrase_order:
            found = self._phrase_patterns[key].search(folded)
            if found is None:
                continue
            start, end = found.span()
            exact = folded == key
            if exact or start == 0 or end == len(folded) or len(key) / len(folded) > PHRASE_COVERAGE:
                return PhraseMatch(key=key, translations=self.phrases[key], exact=exact, start=start, end=end)
        return None

    def lookup_word(self, word: str) -> Optional[Dict[str, str]]:
        return self.words.get(fold(word))

    def translate_words(self, text: str, locale: str) -> Tuple[str, int]:
        """
        Word-by-word translation into `locale`.

        Returns the translated text and the number of dictionary hits. Unknown
        words pass through unchanged.
        """
        hits = 0
        out = []
        for token in text.split():
            core = token.strip(_PUNCTUATION)
            if not core:
                out.append(token)
                continue
            lead = token[: token.index(core)]
            trail = token[token.index(core) + len(core):]

            parts = []
            for part in _COMPOUND_SEPARATOR.split(core):
                entry = self.lookup_word(part) if part and not _COMPOUND_SEPARATOR.fullmatch(part) else None
                if entry and entry.get(locale):
                    hits += 1
                    parts.append(_match_capitalization(part, entry[locale]))
                else:
                    parts.append(part)
            out.append(f"{lead}{''.join(parts)}{trail}")
        return " ".join(out), hits


def _match_capitalization(source: str, translated: str) -> str:
    if source[:1].isupper():
        return translated[:1].upper() + translated[1:]
    return translated
