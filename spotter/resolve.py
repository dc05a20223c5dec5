# spotter/resolve.py

from __future__ import annotations

from typing import List, Tuple

from .models import AnnotatedSpan


def _rank(annotated: AnnotatedSpan) -> Tuple[float, float, int, int]:
    # Best classification first, then the longer span, then the earlier one.
    if annotated.classification:
        priority, score = max(
            (c.priority_score, c.score) for c in annotated.classification
        )
    else:
        priority = score = float("-inf")
    return priority, score, annotated.span.length(), -annotated.span.first


def merge_spans(
    primary: List[AnnotatedSpan], extra: List[AnnotatedSpan] | None = None
) -> List[AnnotatedSpan]:
    """
    Pick a non-overlapping subset of the candidate spans.

    Candidates are accepted strongest first, ranked by the highest
    (priority_score, score) among their classifications. A candidate is
    dropped only if it overlaps a span that was already accepted, so a
    weaker span survives when everything it collides with lost as well.
    The result is ordered by start.
    """
    candidates = list(primary)
    if extra:
        candidates.extend(extra)

    accepted: List[AnnotatedSpan] = []
    for candidate in sorted(candidates, key=_rank, reverse=True):
        if any(candidate.span.overlaps(kept.span) for kept in accepted):
            continue
        accepted.append(candidate)

    accepted.sort(key=lambda s: (s.span.first, s.span.second))
    return accepted
