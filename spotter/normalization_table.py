# spotter/normalization_table.py

"""
Static codepoint substitution table used by the normalizer.

Maps accented Latin letters, ligatures, letterlike symbols and full-width
ASCII to plain sequences (e.g. "é" -> "e", "ﬁ" -> "fi", "Ａ" -> "A").
The table is built once per process and never mutated.
"""

from __future__ import annotations

import unicodedata
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

_SOURCE_RANGES = (
    (0x00C0, 0x024F),  # Latin-1 Supplement letters, Latin Extended-A/B
    (0x1E00, 0x1EFF),  # Latin Extended Additional
    (0x2100, 0x214F),  # Letterlike Symbols
    (0xFB00, 0xFB06),  # Latin ligatures
    (0xFF01, 0xFF5E),  # Full-width ASCII
)

# Letters with no canonical or compatibility decomposition.
_EXPLICIT = {
    "ß": "ss", "ẞ": "SS",
    "Æ": "AE", "æ": "ae",
    "Œ": "OE", "œ": "oe",
    "Ø": "O", "ø": "o",
    "Đ": "D", "đ": "d",
    "Ð": "D", "ð": "d",
    "Ħ": "H", "ħ": "h",
    "Ł": "L", "ł": "l",
    "Ŧ": "T", "ŧ": "t",
    "Þ": "TH", "þ": "th",
    "ı": "i",
}


def _strip_marks(ch: str) -> str:
    decomposed = unicodedata.normalize("NFKD", ch)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


@lru_cache(maxsize=None)
def get_normalization_table() -> Mapping[str, str]:
    table = {}
    for low, high in _SOURCE_RANGES:
        for codepoint in range(low, high + 1):
            ch = chr(codepoint)
            replacement = _strip_marks(ch)
            if replacement and replacement != ch:
                table[ch] = replacement
    table.update(_EXPLICIT)

    # Values must be fixed points so that normalizing twice is a no-op.
    for key, value in table.items():
        table[key] = "".join(table.get(c, c) for c in value)

    return MappingProxyType(table)
