"""
Structural rewrite rules for scraped offering fields.

These run before any dictionary or external translation. They recognise the
Uzbek range markers (`dan` = from, `gacha` = up to) glued to numbers,
percentages, term units and currency suffixes, and rewrite them into Russian
and English with the right preposition and noun form. Every pattern only
matches Latin Uzbek markers, so running the rules over already translated
text changes nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern, Tuple

NUMBER = r"\d+(?:[.,]\d+)?"
_NOT_LETTER = r"(?![^\W\d_])"

RANGE_PREPOSITIONS = {
    "dan": {"ru": "от", "en": "from"},
    "gacha": {"ru": "до", "en": "up to"},
}

# ru: (one, few, many) nominative; ru_gen: (singular, plural) after от/до
TERM_UNITS = {
    "yil": {"ru": ("год", "года", "лет"), "ru_gen": ("года", "лет"), "en": ("year", "years")},
    "oy": {"ru": ("мес.", "мес.", "мес."), "ru_gen": ("мес.", "мес."), "en": ("month", "months")},
    "kun": {"ru": ("день", "дня", "дней"), "ru_gen": ("дня", "дней"), "en": ("day", "days")},
}

AMOUNT_MULTIPLIERS = {
    "ming": {"ru": "тыс.", "en": "thousand"},
    "mln": {"ru": "млн", "en": "mln"},
    "mlrd": {"ru": "млрд", "en": "bln"},
}

CURRENCY_NAMES = {
    "USD": {"uz": "AQSH dollari", "ru": "Доллар США", "en": "US Dollar", "oz": "АҚШ доллари"},
    "EUR": {"uz": "Yevro", "ru": "Евро", "en": "Euro", "oz": "Евро"},
    "RUB": {"uz": "Rubl", "ru": "Рубль", "en": "Ruble", "oz": "Рубль"},
    "GBP": {"uz": "Funt sterling", "ru": "Фунт стерлингов", "en": "Pound sterling", "oz": "Фунт стерлинг"},
    "KZT": {"uz": "Tenge", "ru": "Тенге", "en": "Tenge", "oz": "Тенге"},
    "UZS": {"uz": "So'm", "ru": "Сум", "en": "UZS", "oz": "Сўм"},
}
CURRENCY_ALIASES = {"SUM": "UZS", "SO'M": "UZS", "SOM": "UZS"}

# amount suffix currencies (inside running text)
_AMOUNT_CURRENCIES = {
    "uzs": {"ru": "сум", "en": "UZS"},
    "usd": {"ru": "долларов США", "en": "USD"},
}


@dataclass
class RuleResult:
    ru: str
    en: str
    applied: bool = False


def russian_plural(n: int, one: str, few: str, many: str) -> str:
    """
    Russian noun form for a count.

        >>> [russian_plural(n, "год", "года", "лет") for n in (1, 3, 5, 11, 21)]
        ['год', 'года', 'лет', 'лет', 'год']
    """
    n = abs(n)
    if n % 10 == 1 and n % 100 != 11:
        return one
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return few
    return many


def russian_genitive(n: int, singular: str, plural: str) -> str:
    """Noun form after от/до: "до 1 года", "до 21 года", "до 3 лет"."""
    n = abs(n)
    return singular if n % 10 == 1 and n % 100 != 11 else plural


def english_plural(n: int, singular: str, plural: str) -> str:
    return singular if n == 1 else plural


def currency_display_name(code: str) -> Dict[str, str]:
    up = (code or "").strip().upper()
    up = CURRENCY_ALIASES.get(up, up)
    if up in CURRENCY_NAMES:
        return dict(CURRENCY_NAMES[up])
    return {"uz": up, "ru": up, "en": up, "oz": up}


def is_currency_code(text: str) -> bool:
    up = (text or "").strip().upper()
    return up in CURRENCY_NAMES or up in CURRENCY_ALIASES


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_PERCENT_RANGE = re.compile(rf"(?P<num>{NUMBER})\s*%\s*(?P<marker>dan|gacha){_NOT_LETTER}", re.IGNORECASE)
_BARE_RANGE = re.compile(rf"(?P<num>{NUMBER})\s*(?P<marker>dan|gacha){_NOT_LETTER}", re.IGNORECASE)
_TERM = re.compile(
    rf"(?P<num>\d+)\s*(?P<unit>yil|oy|kun)(?:\s*(?P<marker>gacha|dan))?{_NOT_LETTER}",
    re.IGNORECASE,
)
_AMOUNT = re.compile(
    rf"(?P<num>\d+(?:[ \u00a0]\d{{3}})*(?:[.,]\d+)?)\s*"
    r"(?:(?P<mult>ming|mln|mlrd)\.?\s*)?"
    r"(?P<cur>so['’‘ʻ`]?m|sum|aqsh\s+dollar(?:i)?)"
    rf"(?:\s*(?P<marker>gacha|dan))?{_NOT_LETTER}",
    re.IGNORECASE,
)


def _marker(match: re.Match) -> Optional[str]:
    marker = match.group("marker")
    return marker.lower() if marker else None


def _with_preposition(marker: Optional[str], locale: str, text: str) -> str:
    if not marker:
        return text
    return f"{RANGE_PREPOSITIONS[marker][locale]} {text}"


def _percent_range(match: re.Match, locale: str) -> str:
    return _with_preposition(_marker(match), locale, f"{match.group('num')} %")


def _bare_range(match: re.Match, locale: str) -> str:
    return _with_preposition(_marker(match), locale, match.group("num"))


def _term(match: re.Match, locale: str) -> str:
    n = int(match.group("num"))
    unit = TERM_UNITS[match.group("unit").lower()]
    marker = _marker(match)
    if locale == "ru":
        noun = russian_genitive(n, *unit["ru_gen"]) if marker else russian_plural(n, *unit["ru"])
    else:
        noun = english_plural(n, *unit["en"])
    return _with_preposition(marker, locale, f"{n} {noun}")


def _amount(match: re.Match, locale: str) -> str:
    currency = "usd" if match.group("cur").lower().startswith("aqsh") else "uzs"
    parts = [match.group("num")]
    if match.group("mult"):
        parts.append(AMOUNT_MULTIPLIERS[match.group("mult").lower()][locale])
    parts.append(_AMOUNT_CURRENCIES[currency][locale])
    return _with_preposition(_marker(match), locale, " ".join(parts))


# order matters: specific patterns before the bare number range
STRUCTURAL_RULES: List[Tuple[Pattern[str], Callable[[re.Match, str], str]]] = [
    (_PERCENT_RANGE, _percent_range),
    (_TERM, _term),
    (_AMOUNT, _amount),
    (_BARE_RANGE, _bare_range),
]


def apply_structural_rules(text: str) -> RuleResult:
    ru, en = text, text
    applied = False
    for pattern, render in STRUCTURAL_RULES:
        ru, hits = pattern.subn(lambda m: render(m, "ru"), ru)
        en = pattern.sub(lambda m: render(m, "en"), en)
        applied = applied or hits > 0
    if not applied:
        return RuleResult(ru=text, en=text, applied=False)
    return RuleResult(ru=_tidy(ru), en=_tidy(en), applied=True)


# ---------------------------------------------------------------------------
# Russian -> English (text that was translated before it reached us)
# ---------------------------------------------------------------------------

def _ru_count(forms: Tuple[str, str]) -> Callable[[re.Match], str]:
    return lambda m: f"{m.group(1)} {english_plural(int(m.group(1)), *forms)}"


_RUSSIAN_RULES: List[Tuple[Pattern[str], object]] = [
    (re.compile(r"(\d+)\s*(?:года|год|лет)(?![^\W\d_])", re.IGNORECASE), _ru_count(("year", "years"))),
    (re.compile(r"(\d+)\s*(?:месяцев|месяца|месяц|мес\.?)(?![^\W\d_])", re.IGNORECASE), _ru_count(("month", "months"))),
    (re.compile(r"(\d+)\s*(?:дней|дня|день)(?![^\W\d_])", re.IGNORECASE), _ru_count(("day", "days"))),
    (re.compile(r"(?<![^\W\d_])от(?![^\W\d_])", re.IGNORECASE), "from"),
    (re.compile(r"(?<![^\W\d_])до(?![^\W\d_])", re.IGNORECASE), "up to"),
    (re.compile(r"(?<![^\W\d_])долларов США(?![^\W\d_])"), "USD"),
    (re.compile(r"(?<![^\W\d_])сум(?![^\W\d_])", re.IGNORECASE), "UZS"),
    (re.compile(r"(?<![^\W\d_])млрд(?![^\W\d_])"), "bln"),
    (re.compile(r"(?<![^\W\d_])млн(?![^\W\d_])"), "mln"),
    (re.compile(r"(?<![^\W\d_])не указано(?![^\W\d_])", re.IGNORECASE), "not specified"),
]


def apply_russian_rules(text: str) -> Tuple[str, bool]:
    """English rendering of Russian unit/range phrases; other words are left alone."""
    applied = False
    for pattern, replacement in _RUSSIAN_RULES:
        text, hits = pattern.subn(replacement, text)
        applied = applied or hits > 0
    return (_tidy(text) if applied else text), applied


_SPACES = re.compile(r"[ \t]+")


def _tidy(text: str) -> str:
    return _SPACES.sub(" ", text).strip()
