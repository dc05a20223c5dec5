# spotter/sorted_strings.py

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from .errors import ConfigError


def _byte_at(piece: bytes, index: int) -> int:
    # Shorter pieces sort before longer ones sharing the same prefix.
    return piece[index] if index < len(piece) else -1


class SortedStringsTable:
    """
    Prefix lookups over a sorted set of strings.

    The strings ("pieces") live in one flat blob, each terminated by a NUL
    byte, in ascending byte order; offsets[i] points at the start of piece i.
    Matching walks the text one byte at a time, narrowing the window of
    candidate pieces with two binary searches per byte.
    """

    def __init__(self, pieces: bytes, offsets: Sequence[int]):
        self._pieces: List[bytes] = []
        for offset in offsets:
            if offset < 0 or offset >= len(pieces):
                raise ConfigError(f"Piece offset {offset} out of range")
            end = pieces.find(b"\0", offset)
            if end < 0:
                raise ConfigError(f"Piece at offset {offset} is not terminated")
            self._pieces.append(bytes(pieces[offset:end]))

        for prev, cur in zip(self._pieces, self._pieces[1:]):
            if prev >= cur:
                raise ConfigError(f"Pieces not sorted: {prev!r} >= {cur!r}")

    @classmethod
    def from_strings(cls, strings: Iterable[str]) -> "SortedStringsTable":
        pieces, offsets = serialize_pieces(strings)
        return cls(pieces, offsets)

    def __len__(self) -> int:
        return len(self._pieces)

    @property
    def max_piece_length(self) -> int:
        return max((len(p) for p in self._pieces), default=0)

    def gather_prefix_matches(self, text: Union[str, bytes]) -> Iterator[int]:
        """
        Yield byte lengths of all pieces that prefix text, shortest first.
        """
        data = text.encode("utf-8") if isinstance(text, str) else text
        lo, hi = 0, len(self._pieces)
        length = 0
        while lo < hi and length < len(data):
            c = data[length]
            key = lambda piece, i=length: _byte_at(piece, i)  # noqa: E731
            lo = bisect_left(self._pieces, c, lo, hi, key=key)
            hi = bisect_right(self._pieces, c, lo, hi, key=key)
            if lo >= hi:
                return
            length += 1
            # Sorted order puts an exact match first in the window.
            if len(self._pieces[lo]) == length:
                yield length

    def longest_prefix_match(self, text: Union[str, bytes]) -> int:
        """
        Byte length of the longest piece that prefixes text, or -1.
        """
        longest = -1
        for length in self.gather_prefix_matches(text):
            longest = length
        return longest


def serialize_pieces(strings: Iterable[str]) -> Tuple[bytes, List[int]]:
    encoded = sorted({s.encode("utf-8") for s in strings if s})
    blob = bytearray()
    offsets: List[int] = []
    for piece in encoded:
        if b"\0" in piece:
            raise ConfigError(f"Piece {piece!r} contains a NUL byte")
        offsets.append(len(blob))
        blob += piece + b"\0"
    return bytes(blob), offsets
