# spotter/boundary.py

from __future__ import annotations

from typing import AbstractSet, Iterable, Union

from .models import CodepointSpan
from .unilib import to_codepoint


def codepoint_set(values: Iterable[Union[int, str]]) -> frozenset:
    return frozenset(to_codepoint(v) for v in values)


def strip_boundary_codepoints(
    text: str,
    span: CodepointSpan,
    prefix_codepoints: AbstractSet[int],
    suffix_codepoints: AbstractSet[int],
) -> CodepointSpan:
    """
    Shrink span by dropping leading codepoints found in prefix_codepoints
    and trailing codepoints found in suffix_codepoints.

    If every codepoint is a stripped prefix, the result is the empty span
    at span.first. The end never moves before the new start.
    """
    if span.is_empty() or span.second > len(text):
        return span

    start = span.first
    while start < span.second and ord(text[start]) in prefix_codepoints:
        start += 1
    if start == span.second:
        return CodepointSpan(span.first, span.first)

    end = span.second
    while end - 1 > start and ord(text[end - 1]) in suffix_codepoints:
        end -= 1
    return CodepointSpan(start, end)


class BoundaryStripper:
    def __init__(
        self,
        prefix_codepoints: Iterable[Union[int, str]] = (),
        suffix_codepoints: Iterable[Union[int, str]] = (),
    ):
        self.prefix_codepoints = codepoint_set(prefix_codepoints)
        self.suffix_codepoints = codepoint_set(suffix_codepoints)

    def strip(self, text: str, span: CodepointSpan) -> CodepointSpan:
        return strip_boundary_codepoints(
            text, span, self.prefix_codepoints, self.suffix_codepoints
        )
