# spotter/utf8.py

"""
Conversions between the UTF-8 byte domain and the codepoint domain.

Spans handed around the engine are codepoint spans; byte offsets only show
up in normalizer index maps and in sorted-strings lookups.
"""

from __future__ import annotations

from typing import Union

from .models import CodepointSpan

# Indexed by the high nibble of a leading byte.
_CHAR_LENGTH_BY_NIBBLE = (1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 2, 2, 3, 4)


def is_trail_byte(byte: int) -> bool:
    return 0x80 <= byte <= 0xBF


def utf8_char_length(first_byte: int) -> int:
    """
    Number of bytes of the UTF-8 sequence introduced by first_byte.
    Trail bytes are invalid as a start; 1 is returned so callers advance.
    """
    if is_trail_byte(first_byte):
        return 1
    return _CHAR_LENGTH_BY_NIBBLE[first_byte >> 4]


def safe_utf8_end(data: bytes) -> int:
    """
    Length of the longest prefix of data that does not cut a sequence short.
    """
    pos = 0
    size = len(data)
    while pos < size:
        new_pos = pos + utf8_char_length(data[pos])
        if new_pos > size:
            return pos
        pos = new_pos
    return pos


def byte_to_codepoint_offset(text: Union[str, bytes], offset: int) -> int:
    data = text.encode("utf-8") if isinstance(text, str) else text
    if offset < 0 or offset > len(data):
        raise ValueError(f"Byte offset {offset} out of range")
    # A partial trailing sequence does not count as a codepoint.
    return len(data[:offset].decode("utf-8", errors="ignore"))


def substring_by_codepoints(text: str, span: CodepointSpan) -> str:
    if span.second > len(text):
        raise ValueError(f"Span {tuple(span)} exceeds text of length {len(text)}")
    return text[span.first:span.second]
