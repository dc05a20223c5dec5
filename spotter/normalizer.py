# spotter/normalizer.py

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, NamedTuple, Optional, Tuple, Union

from . import unilib
from .normalization_table import get_normalization_table
from .utf8 import safe_utf8_end, utf8_char_length

logger = logging.getLogger(__name__)


class NormalizedText(NamedTuple):
    text: str
    # Byte offset in the input for every byte of `text`, plus one entry
    # for the input length.
    index_map: Optional[Tuple[int, ...]] = None

    def original_offset(self, normalized_byte_offset: int) -> int:
        if self.index_map is None:
            raise ValueError("Text was normalized without an index map")
        return self.index_map[normalized_byte_offset]


class Normalizer:
    """
    Codepoint-wise canonicalizer for Latin text.

    Each input codepoint is replaced by its entry in the substitution table
    (identity when absent) and optionally lower-cased. Decoding stops at the
    first truncated or invalid UTF-8 sequence; everything after it is
    dropped from the output.

    Instances hold no mutable state and can be shared across threads.
    """

    def __init__(
        self,
        table: Optional[Mapping[str, str]] = None,
        to_lower: Callable[[str], str] = unilib.to_lower,
    ):
        self._table = table if table is not None else get_normalization_table()
        self._to_lower = to_lower

    def normalize(
        self,
        text: Union[str, bytes],
        fold_case: bool = False,
        want_index_map: bool = False,
    ) -> NormalizedText:
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)

        output: List[str] = []
        index_map: Optional[List[int]] = [] if want_index_map else None

        pos = 0
        # A sequence cut short at the end is dropped.
        end = safe_utf8_end(data)
        while pos < end:
            char_length = utf8_char_length(data[pos])
            try:
                ch = data[pos:pos + char_length].decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Invalid UTF-8 at byte %d, truncating", pos)
                break

            # One codepoint may expand to several (ligatures, ß).
            replacement = self._table.get(ch, ch)
            if fold_case:
                replacement = "".join(self._to_lower(c) for c in replacement)

            output.append(replacement)
            if index_map is not None:
                index_map.extend([pos] * len(replacement.encode("utf-8")))
            pos += char_length

        if index_map is not None:
            index_map.append(len(data))
            return NormalizedText("".join(output), tuple(index_map))
        return NormalizedText("".join(output))


_DEFAULT_NORMALIZER: Optional[Normalizer] = None


def normalize(
    text: Union[str, bytes], fold_case: bool = False, want_index_map: bool = False
) -> NormalizedText:
    global _DEFAULT_NORMALIZER
    if _DEFAULT_NORMALIZER is None:
        _DEFAULT_NORMALIZER = Normalizer()
    return _DEFAULT_NORMALIZER.normalize(text, fold_case, want_index_map)
