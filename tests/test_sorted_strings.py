# tests/test_sorted_strings.py

import pytest

from spotter.errors import ConfigError
from spotter.sorted_strings import SortedStringsTable, serialize_pieces

SUFFIXES = ["%", "pc", "pct", "percent", "٪"]


def test_longest_prefix_match():
    table = SortedStringsTable.from_strings(SUFFIXES)
    assert table.longest_prefix_match("pct of") == 3
    assert table.longest_prefix_match("percentage") == 7
    assert table.longest_prefix_match("%") == 1
    assert table.longest_prefix_match("p") == -1
    assert table.longest_prefix_match("x%") == -1
    assert table.longest_prefix_match("") == -1


def test_match_length_is_in_bytes():
    table = SortedStringsTable.from_strings(SUFFIXES)
    assert table.longest_prefix_match("٪ rest") == 2


def test_gathers_every_prefix():
    table = SortedStringsTable.from_strings(SUFFIXES)
    assert list(table.gather_prefix_matches("pct")) == [2, 3]


def test_serialized_layout():
    pieces, offsets = serialize_pieces(["b", "a", "a", ""])
    assert pieces == b"a\0b\0"
    assert offsets == [0, 2]
    assert len(SortedStringsTable(pieces, offsets)) == 2


def test_rejects_unsorted_pieces():
    with pytest.raises(ConfigError):
        SortedStringsTable(b"b\0a\0", [0, 2])


def test_rejects_bad_offsets():
    with pytest.raises(ConfigError):
        SortedStringsTable(b"a\0", [5])
    with pytest.raises(ConfigError):
        SortedStringsTable(b"abc", [0])


def test_empty_table():
    table = SortedStringsTable(b"", [])
    assert table.longest_prefix_match("%") == -1
    assert table.max_piece_length == 0
