# tests/test_utf8.py

import pytest

from spotter.models import CodepointSpan
from spotter.utf8 import (
    byte_to_codepoint_offset,
    safe_utf8_end,
    substring_by_codepoints,
    utf8_char_length,
)


def test_char_length_from_leading_byte():
    assert utf8_char_length(ord("a")) == 1
    assert utf8_char_length(0xC3) == 2
    assert utf8_char_length(0xE2) == 3
    assert utf8_char_length(0xF0) == 4
    # Trail bytes are not valid starts.
    assert utf8_char_length(0x80) == 1


def test_safe_end_stops_before_cut_sequence():
    assert safe_utf8_end(b"ab\xe2\x82") == 2
    assert safe_utf8_end("aé".encode("utf-8")) == 3


def test_byte_to_codepoint_offset():
    text = "aé b"
    assert byte_to_codepoint_offset(text, 3) == 2
    # Half a codepoint does not count.
    assert byte_to_codepoint_offset("é", 1) == 0


def test_offsets_out_of_range():
    with pytest.raises(ValueError):
        byte_to_codepoint_offset("abc", -1)


def test_substring_by_codepoints():
    assert substring_by_codepoints("Zürich!", CodepointSpan(0, 6)) == "Zürich"
