"""
Normalization layer for scraped bank offerings.

- Bank names are canonicalized by BankNameNormalizer.
- Free-text fields go through OfferingTranslator, which produces the
  uz / ru / en / oz locales from local rules first and calls the external
  translation service only when no rule applied.

Components are constructed once at startup (see quotehub/api/main.py and
scripts/run_offering_refresh.py) and passed to whoever needs them.
"""

from .bank_normalizer import BankNameNormalizer, capitalize_bank_name
from .dictionary import TranslationTables
from .rules import currency_display_name, russian_plural
from .translation_service import TranslationService
from .translator import NOT_SPECIFIED, FieldTranslation, OfferingTranslator, is_not_specified
from .transliteration import transliterate_uz_to_oz

__all__ = [
    "BankNameNormalizer", "capitalize_bank_name",
    "TranslationTables",
    "currency_display_name", "russian_plural",
    "TranslationService",
    "NOT_SPECIFIED", "FieldTranslation", "OfferingTranslator", "is_not_specified",
    "transliterate_uz_to_oz",
]
