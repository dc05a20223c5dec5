# spotter/number.py

from __future__ import annotations

import enum
import logging
from typing import List, NamedTuple, Optional, Tuple

from .boundary import strip_boundary_codepoints
from .config import NumberAnnotatorOptions
from .models import (
    AnnotatedSpan,
    AnnotationUsecase,
    ClassificationResult,
    CodepointSpan,
    Collections,
)
from .tokenizers import Tokenizer, get_tokenizer
from .utf8 import byte_to_codepoint_offset, substring_by_codepoints

logger = logging.getLogger(__name__)

INT64_MAX = 2 ** 63 - 1
# Accumulators stop before they could leave the signed 64-bit range.
_ACCUMULATOR_LIMIT = INT64_MAX // 10 - 10


class ParsedNumber(NamedTuple):
    int_value: int
    double_value: float
    has_decimal: bool
    num_prefix_codepoints: int
    num_suffix_codepoints: int


class _State(enum.Enum):
    WHOLE_PART = 1
    FLOATING_PART = 2
    DONE = 3


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _consume_and_parse_number(
    text: str, begin: int, end: int
) -> Optional[Tuple[int, int, float, bool]]:
    """
    Parse an optionally signed decimal number from text[begin:end].

    Returns (position after the number, int value, double value,
    has_decimal), or None if no digit was read or the whole part would
    overflow. "." and "," both separate the whole and fractional parts.
    """
    sign = 1
    pos = begin
    while pos < end and text[pos] in "-+":
        sign = -1 if text[pos] == "-" else 1
        pos += 1

    state = _State.WHOLE_PART
    int_value = 0
    decimal_value = 0
    denominator = 1
    has_decimal = False
    num_digits = 0

    while pos < end:
        ch = text[pos]
        if state is _State.WHOLE_PART:
            if _is_ascii_digit(ch):
                if int_value > _ACCUMULATOR_LIMIT:
                    return None
                int_value = int_value * 10 + ord(ch) - ord("0")
                num_digits += 1
            elif ch in ".,":
                state = _State.FLOATING_PART
            else:
                state = _State.DONE
        elif state is _State.FLOATING_PART:
            if _is_ascii_digit(ch) and decimal_value <= _ACCUMULATOR_LIMIT:
                has_decimal = True
                decimal_value = decimal_value * 10 + ord(ch) - ord("0")
                denominator *= 10
                num_digits += 1
            else:
                state = _State.DONE

        if state is _State.DONE:
            break
        pos += 1

    if num_digits == 0:
        return None

    double_value = sign * (int_value + decimal_value / denominator)
    return pos, sign * int_value, double_value, has_decimal


class NumberAnnotator:
    """
    Finds numbers and percentages in text.

    Every token is parsed on its own: boundary codepoints are stripped, an
    allowed prefix (e.g. a currency sign) is skipped, the number is parsed
    and whatever follows must be allowed suffix or ignored boundary
    codepoints. A second pass turns numbers followed by a known percent
    suffix into percentages.

    Instances hold only immutable configuration and are thread-safe.
    """

    def __init__(
        self,
        options: NumberAnnotatorOptions,
        tokenizer: Optional[Tokenizer] = None,
    ):
        self.options = options
        self._tokenizer = tokenizer or get_tokenizer(options.tokenizer)
        self._percentage_suffixes = options.percentage_suffixes()
        self._max_suffix_length = self._percentage_suffixes.max_piece_length

    def parse_number(self, text: str) -> Optional[ParsedNumber]:
        opts = self.options
        stripped = strip_boundary_codepoints(
            text,
            CodepointSpan(0, len(text)),
            opts.ignored_prefix_span_boundary_codepoints,
            opts.ignored_suffix_span_boundary_codepoints,
        )
        num_stripped_end = len(text) - stripped.second
        pos, end = stripped.first, stripped.second

        num_prefix_codepoints = stripped.first
        while pos < end and ord(text[pos]) in opts.allowed_prefix_codepoints:
            pos += 1
            num_prefix_codepoints += 1

        parsed = _consume_and_parse_number(text, pos, end)
        if parsed is None:
            return None
        pos, int_value, double_value, has_decimal = parsed

        # Trailing codepoints: allowed suffixes are cut from the span,
        # ignored boundary codepoints are tolerated ("13.", "34#"),
        # anything else rejects the token.
        num_suffix_codepoints = 0
        while pos < end:
            codepoint = ord(text[pos])
            if codepoint in opts.allowed_suffix_codepoints:
                num_suffix_codepoints += 1
            elif codepoint not in opts.ignored_suffix_span_boundary_codepoints:
                return None
            pos += 1
        num_suffix_codepoints += num_stripped_end

        return ParsedNumber(
            int_value=int_value,
            double_value=double_value,
            has_decimal=has_decimal,
            num_prefix_codepoints=num_prefix_codepoints,
            num_suffix_codepoints=num_suffix_codepoints,
        )

    def find_all(
        self, context: str, usecase: AnnotationUsecase = AnnotationUsecase.RAW
    ) -> List[AnnotatedSpan]:
        opts = self.options
        if not opts.enabled or not usecase.enabled_in(opts.enabled_annotation_usecases):
            return []

        result: List[AnnotatedSpan] = []
        for token in self._tokenizer.tokenize(context):
            parsed = self.parse_number(token.value)
            if parsed is None:
                continue

            classification = ClassificationResult(
                collection=Collections.NUMBER,
                score=opts.score,
                priority_score=(
                    opts.float_number_priority_score
                    if parsed.has_decimal
                    else opts.priority_score
                ),
                numeric_value=parsed.int_value,
                numeric_double_value=parsed.double_value,
            )
            span = CodepointSpan(
                token.start + parsed.num_prefix_codepoints,
                token.end - parsed.num_suffix_codepoints,
            )
            result.append(AnnotatedSpan(span, [classification]))

        if opts.enable_percentage:
            self.find_percentages(context, result)

        logger.debug("Found %d numeric spans", len(result))
        return result

    def percent_suffix_length(self, context: str, index: int) -> int:
        """
        Codepoint length of the longest percent suffix starting at index,
        or -1 if there is none.
        """
        if index >= len(context):
            return -1
        # A piece of n bytes never spans more than n codepoints.
        window = context[index:index + self._max_suffix_length]
        match_length = self._percentage_suffixes.longest_prefix_match(window)
        if match_length == -1:
            return -1
        return byte_to_codepoint_offset(window, match_length)

    def find_percentages(self, context: str, result: List[AnnotatedSpan]) -> None:
        for annotated in result:
            best = annotated.best()
            if best is None or best.collection != Collections.NUMBER:
                continue

            match_length = self.percent_suffix_length(context, annotated.span.second)
            if match_length > 0:
                best.collection = Collections.PERCENTAGE
                best.priority_score = self.options.percentage_priority_score
                annotated.span = CodepointSpan(
                    annotated.span.first, annotated.span.second + match_length
                )

    def classify_text(
        self,
        context: str,
        selection: CodepointSpan,
        usecase: AnnotationUsecase = AnnotationUsecase.RAW,
    ) -> Optional[ClassificationResult]:
        """
        Classify a user selection as a single number or percentage.

        The selection only qualifies when one annotation covers exactly the
        boundary-stripped selection, so "23 asdf 3.14" yields nothing.
        """
        results = self.find_all(substring_by_codepoints(context, selection), usecase)

        stripped = strip_boundary_codepoints(
            context,
            selection,
            self.options.ignored_prefix_span_boundary_codepoints,
            self.options.ignored_suffix_span_boundary_codepoints,
        )
        for annotated in results:
            if not annotated.classification:
                continue
            if annotated.span.shift(selection.first) == stripped:
                return annotated.classification[0]
        return None
