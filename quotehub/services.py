"""
Component wiring shared by the API and the scripts.

Real Postgres/Redis are used when DATABASE_URL / REDIS_URL are set, else the
in-memory stand-ins.
"""

import logging
from typing import Any, Optional

from quotehub.integrations.clients.real_http.translation import (
    FallbackTranslationBackend,
    LibreTranslateClient,
    MyMemoryClient,
)
from quotehub.integrations.policy.quote_aggregator import QuoteAggregator, build_default_adapters
from quotehub.normalization.bank_normalizer import BankNameNormalizer
from quotehub.normalization.dictionary import TranslationTables
from quotehub.normalization.translation_service import TranslationService
from quotehub.normalization.translator import OfferingTranslator
from quotehub.utils.config_loader import Settings

logger = logging.getLogger(__name__)


def build_cache(settings: Settings) -> Any:
    if settings.redis_url:
        from quotehub.database.redis_real import RedisCache

        logger.info("Using Redis cache")
        return RedisCache(url=settings.redis_url, default_ttl=settings.translation.cache_ttl_seconds)

    from quotehub.database.redis import RedisCache

    return RedisCache()


def build_store(settings: Settings) -> Any:
    if settings.database_url:
        from quotehub.database.postgres_real import PostgresDB

        logger.info("Using Postgres offering store")
        store = PostgresDB(connection_string=settings.database_url)
    else:
        from quotehub.database.postgres import PostgresDB

        store = PostgresDB()
    store.create_tables()
    return store


def build_translation_service(settings: Settings, cache: Any) -> Optional[TranslationService]:
    cfg = settings.translation
    if not cfg.enabled:
        logger.info("External translation disabled; local rules only")
        return None
    backend = FallbackTranslationBackend(
        [
            LibreTranslateClient(url=cfg.libretranslate_url, timeout_seconds=cfg.timeout_seconds),
            MyMemoryClient(url=cfg.mymemory_url, timeout_seconds=cfg.timeout_seconds),
        ]
    )
    return TranslationService(backend, cache, ttl_seconds=cfg.cache_ttl_seconds)


def build_translator(
    settings: Settings,
    cache: Any,
    bank_normalizer: Optional[BankNameNormalizer] = None,
) -> OfferingTranslator:
    return OfferingTranslator(
        TranslationTables(),
        bank_normalizer or BankNameNormalizer(),
        build_translation_service(settings, cache),
    )


def build_aggregator(settings: Settings, cache: Any) -> QuoteAggregator:
    return QuoteAggregator(
        build_default_adapters(settings, cache=cache),
        timeout_seconds=settings.aggregator.adapter_timeout_seconds,
    )
