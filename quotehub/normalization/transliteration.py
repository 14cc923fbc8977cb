"""
Latin Uzbek -> Cyrillic Uzbek transliteration.

Used to derive the `oz` locale. Characters outside the Latin table (Cyrillic,
digits, punctuation) pass through, so transliterating Russian text leaves it
unchanged.
"""

from __future__ import annotations

_APOSTROPHES = {"’", "‘", "ʻ", "ʼ", "`", "'"}

# longest sequences first
_SEQUENCES = [
    ("yo'", "йў"),
    ("o'", "ў"),
    ("g'", "ғ"),
    ("sh", "ш"),
    ("ch", "ч"),
    ("yo", "ё"),
    ("yu", "ю"),
    ("ya", "я"),
    ("ye", "е"),
]

_LETTERS = {
    "a": "а", "b": "б", "d": "д", "e": "е", "f": "ф", "g": "г", "h": "ҳ",
    "i": "и", "j": "ж", "k": "к", "l": "л", "m": "м", "n": "н", "o": "о",
    "p": "п", "q": "қ", "r": "р", "s": "с", "t": "т", "u": "у", "v": "в",
    "x": "х", "y": "й", "z": "з", "c": "с", "w": "в",
    "'": "ъ",
}


def _match_case(source: str, target: str) -> str:
    if source.isupper():
        return target.upper()
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    return target


def _between_letters(text: str, i: int) -> bool:
    return 0 < i < len(text) - 1 and text[i - 1].isalpha() and text[i + 1].isalpha()


def transliterate_uz_to_oz(text: str) -> str:
    if not text:
        return ""
    normalized = "".join("'" if ch in _APOSTROPHES else ch for ch in text)
    out = []
    i = 0
    while i < len(normalized):
        for latin, cyrillic in _SEQUENCES:
            chunk = normalized[i:i + len(latin)]
            if chunk.lower() == latin:
                out.append(_match_case(chunk, cyrillic))
                i += len(latin)
                break
        else:
            ch = normalized[i]
            lower = ch.lower()
            if lower == "e" and (i == 0 or not normalized[i - 1].isalpha()):
                out.append(_match_case(ch, "э"))
            elif ch == "'" and not _between_letters(normalized, i):
                out.append(ch)
            elif lower in _LETTERS:
                out.append(_match_case(ch, _LETTERS[lower]))
            else:
                out.append(ch)
            i += 1
    return "".join(out)
