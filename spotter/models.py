# spotter/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional


class Collections:
    NUMBER = "Number"
    PERCENTAGE = "Percentage"


class AnnotationUsecase(IntEnum):
    SMART = 0
    RAW = 1

    def enabled_in(self, mask: int) -> bool:
        return bool((1 << int(self)) & mask)


@dataclass(frozen=True)
class CodepointSpan:
    """
    Half-open [first, second) range of codepoint offsets into a text.
    """

    first: int
    second: int

    def __post_init__(self):
        if self.first < 0 or self.first > self.second:
            raise ValueError(f"Invalid span [{self.first}, {self.second})")

    def __iter__(self) -> Iterator[int]:
        yield self.first
        yield self.second

    def length(self) -> int:
        return self.second - self.first

    def is_empty(self) -> bool:
        return self.first == self.second

    def overlaps(self, other: "CodepointSpan") -> bool:
        return not (self.second <= other.first or other.second <= self.first)

    def shift(self, offset: int) -> "CodepointSpan":
        return CodepointSpan(self.first + offset, self.second + offset)


@dataclass(frozen=True)
class Token:
    value: str
    start: int
    end: int
    is_padding: bool = False

    @property
    def span(self) -> CodepointSpan:
        return CodepointSpan(self.start, self.end)

    def __repr__(self) -> str:
        if self.is_padding:
            return "Token()"
        return f'Token("{self.value}", {self.start}, {self.end})'


_SCORE_TOLERANCE = 0.001


@dataclass(eq=False)
class ClassificationResult:
    collection: str
    score: float = 1.0
    priority_score: float = 0.0
    numeric_value: Optional[int] = None
    numeric_double_value: Optional[float] = None
    # Collection-specific fields (e.g. gazetteer payloads).
    entity_data: Dict[str, Any] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassificationResult):
            return NotImplemented
        return (
            self.collection == other.collection
            and self.numeric_value == other.numeric_value
            and _close(self.numeric_double_value, other.numeric_double_value)
            and self.entity_data == other.entity_data
            and abs(self.score - other.score) < _SCORE_TOLERANCE
            and abs(self.priority_score - other.priority_score) < _SCORE_TOLERANCE
        )

    def __str__(self) -> str:
        return (
            f"ClassificationResult({self.collection}, /*score=*/ {self.score}, "
            f"/*priority_score=*/ {self.priority_score})"
        )


def _close(a: Optional[float], b: Optional[float]) -> bool:
    if a is None or b is None:
        return a is b
    return abs(a - b) < _SCORE_TOLERANCE


@dataclass
class AnnotatedSpan:
    span: CodepointSpan
    classification: List[ClassificationResult] = field(default_factory=list)

    def best(self) -> Optional[ClassificationResult]:
        return self.classification[0] if self.classification else None

    def __str__(self) -> str:
        best = self.best()
        collection = best.collection if best else ""
        score = best.score if best else -1
        return f"Span({self.span.first}, {self.span.second}, {collection}, {score})"
