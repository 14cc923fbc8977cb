"""
Offering translation pipeline.

Turns one raw scraped field into a four-locale record (uz / ru / en / oz):

1. "not specified" marker -> fixed record
2. Cyrillic or letterless text -> already localized, passed through
3. structural rules (ranges, terms, amounts)
4. known phrase table
5. word-by-word dictionary
6. cached external translation, only when nothing above applied
7. oz = transliteration of the Russian output, or of the source when no
   Russian output was produced
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional

from quotehub.integrations.contracts.offerings import (
    LOCALES,
    OFFERING_FIELDS,
    CanonicalOffering,
    LocalizedFields,
    RawOfferingRecord,
)
from quotehub.normalization.bank_normalizer import BankNameNormalizer
from quotehub.normalization.dictionary import TranslationTables
from quotehub.normalization.rules import (
    apply_russian_rules,
    apply_structural_rules,
    currency_display_name,
    is_currency_code,
)
from quotehub.normalization.translation_service import TranslationService
from quotehub.normalization.transliteration import transliterate_uz_to_oz

logger = logging.getLogger(__name__)

NOT_SPECIFIED = {"uz": "Ko'rsatilmagan", "ru": "Не указано", "en": "Not specified", "oz": "Кўрсатилмаган"}

_NOT_SPECIFIED_MARKER = re.compile(r"ko['’‘ʻʼ`]?rsatilmagan", re.IGNORECASE)
_CYRILLIC = re.compile(r"[\u0400-\u04FF]")
_LETTER = re.compile(r"[^\W\d_]")


def is_not_specified(text: str) -> bool:
    return bool(text) and _NOT_SPECIFIED_MARKER.search(text) is not None


@dataclass
class FieldTranslation:
    uz: str = ""
    ru: str = ""
    en: str = ""
    oz: str = ""
    # which step produced the result: empty, marker, passthrough, rules, phrase, words, external, none
    source: str = "empty"

    def get(self, locale: str) -> str:
        return getattr(self, locale)

    def to_dict(self) -> Dict[str, str]:
        return {locale: self.get(locale) for locale in LOCALES}


class OfferingTranslator:
    def __init__(
        self,
        tables: TranslationTables,
        bank_normalizer: BankNameNormalizer,
        translation_service: Optional[TranslationService] = None,
    ) -> None:
        self.tables = tables
        self.bank_normalizer = bank_normalizer
        self.translation_service = translation_service

    async def translate_record(self, record: RawOfferingRecord) -> CanonicalOffering:
        translations = {}
        for field_name in OFFERING_FIELDS:
            translations[field_name] = await self.translate_field(getattr(record, field_name), field_name)

        locales = {
            locale: LocalizedFields(**{name: t.get(locale) for name, t in translations.items()})
            for locale in LOCALES
        }
        return CanonicalOffering(
            kind=record.kind,
            bank_name=self.bank_normalizer.normalize(record.bank_name),
            url=record.url,
            **locales,
        )

    async def translate_field(self, text: Optional[str], field_name: str = "description") -> FieldTranslation:
        source = (text or "").strip()
        if is_not_specified(source):
            return FieldTranslation(**NOT_SPECIFIED, source="marker")
        if not source:
            return FieldTranslation(source="empty")

        if field_name == "amount" and is_currency_code(source):
            names = currency_display_name(source)
            return FieldTranslation(**names, source="rules")

        if _CYRILLIC.search(source) or not _LETTER.search(source):
            en = apply_russian_rules(source)[0] if _CYRILLIC.search(source) else source
            return FieldTranslation(uz=source, ru=source, en=en, oz=source, source="passthrough")

        rules = apply_structural_rules(source)
        ru, en = rules.ru, rules.en
        step = "rules" if rules.applied else None

        if step is None:
            phrase = self.tables.match_phrase(source)
            if phrase is not None and phrase.exact:
                return FieldTranslation(
                    uz=source,
                    ru=phrase.translations["ru"],
                    en=phrase.translations["en"],
                    oz=phrase.translations.get("oz") or transliterate_uz_to_oz(phrase.translations["ru"]),
                    source="phrase",
                )
            if phrase is not None:
                ru, en = phrase.render(source, "ru"), phrase.render(source, "en")
                step = "phrase"

        ru, ru_hits = self.tables.translate_words(ru, "ru")
        en, en_hits = self.tables.translate_words(en, "en")
        if step is None and (ru_hits or en_hits):
            step = "words"

        ru_produced = step is not None
        if step is None and self.translation_service is not None:
            ru = await self.translation_service.translate(source, "ru")
            en = await self.translation_service.translate(source, "en")
            ru_produced = ru != source
            if ru_produced or en != source:
                step = "external"

        if step is None:
            # nothing matched and no external backend: keep the source text
            ru, en = source, source

        oz = transliterate_uz_to_oz(ru if ru_produced else source)
        return FieldTranslation(uz=source, ru=ru, en=en, oz=oz, source=step or "none")
