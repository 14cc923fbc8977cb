"""
Cached external translation.

Only used when no local rule matched a text. Results are cached for 30 days
under a key derived from the text and target locale. Any backend failure is
logged and the original text is returned, so a translation outage degrades
the localized text instead of failing the offering.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any

import httpx

from quotehub.integrations.errors import QuoteError

logger = logging.getLogger(__name__)

SUPPORTED_TARGETS = ("ru", "en")
DEFAULT_TTL_SECONDS = 30 * 24 * 3600


class TranslationService:
    def __init__(self, backend: Any, cache: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS, source_lang: str = "uz") -> None:
        self.backend = backend
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.source_lang = source_lang

    def cache_key(self, text: str, target: str) -> str:
        digest = hashlib.md5(f"{text}:{target}".encode("utf-8")).hexdigest()
        return f"translation:{self.source_lang}:{target}:{digest}"

    async def translate(self, text: str, target: str) -> str:
        if not text or not text.strip() or target not in SUPPORTED_TARGETS:
            return text

        key = self.cache_key(text, target)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug("Translation cache HIT: %s", key)
            return cached
        logger.debug("Translation cache MISS: %s", key)

        try:
            translated = await self.backend.translate(text, self.source_lang, target)
        except (httpx.HTTPError, QuoteError) as e:
            logger.warning("Translation to %s failed, keeping original text: %s", target, e)
            return text
        except Exception as e:
            logger.warning("Translation backend raised %s for %s, keeping original text: %s", type(e).__name__, target, e)
            return text

        if not isinstance(translated, str) or not translated.strip():
            logger.warning("Translation backend returned an unusable %s result, keeping original text", type(translated).__name__)
            return text
        self._cache_set(key, translated)
        return translated

    def _cache_get(self, key: str):
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.warning("Translation cache read failed for %s: %s", key, e)
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value, self.ttl_seconds)
        except Exception as e:
            logger.warning("Translation cache write failed for %s: %s", key, e)
