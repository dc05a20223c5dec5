# spotter/unilib.py

"""
Per-codepoint case mapping used by the normalizer and boundary sets.
Accepts either an int codepoint or a one-character string.
"""

from __future__ import annotations

from typing import Union

Codepoint = Union[int, str]


def _char(codepoint: Codepoint) -> str:
    if isinstance(codepoint, int):
        return chr(codepoint)
    if len(codepoint) != 1:
        raise ValueError(f"Expected a single codepoint, got {codepoint!r}")
    return codepoint


def to_codepoint(value: Codepoint) -> int:
    return value if isinstance(value, int) else ord(_char(value))


def to_lower(codepoint: Codepoint) -> str:
    # May expand to more than one codepoint (e.g. U+0130).
    return _char(codepoint).lower()
