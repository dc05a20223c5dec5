# spotter/lookup.py

from __future__ import annotations

import dataclasses
import logging
from types import MappingProxyType
from typing import (
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

from .boundary import BoundaryStripper
from .config import LookupOptions
from .models import AnnotatedSpan, ClassificationResult, CodepointSpan, Token
from .normalizer import Normalizer
from .utf8 import substring_by_codepoints

logger = logging.getLogger(__name__)

# (max_num_matches, text, span) -> (matches, span actually matched)
MatchFinder = Callable[
    [int, str, CodepointSpan], Tuple[List[ClassificationResult], CodepointSpan]
]


class LookupEngine:
    """
    Annotates text by looking up n-grams in an in-memory dictionary.

    The dictionary is filled with add_entry() and then frozen; after that
    the engine is read-only and safe to share between threads. Every
    returned classification carries the engine's collection.
    """

    def __init__(
        self,
        collection: str,
        ignored_span_boundary_codepoints: Iterable[Union[int, str]] = (),
        normalizer: Optional[Normalizer] = None,
    ):
        self.collection = collection
        boundary = tuple(ignored_span_boundary_codepoints)
        self._stripper = BoundaryStripper(boundary, boundary)
        self._normalizer = normalizer or Normalizer()

        self._entries: List[ClassificationResult] = []
        self._ngram_to_entry_index: Dict[str, List[int]] = {}
        self._frozen = False

    @classmethod
    def from_options(cls, options: LookupOptions) -> "LookupEngine":
        return cls(options.collection, options.ignored_span_boundary_codepoints)

    @classmethod
    def from_entries(
        cls,
        collection: str,
        entries: Iterable[Tuple[Sequence[Union[str, bytes]], ClassificationResult]],
        ignored_span_boundary_codepoints: Iterable[Union[int, str]] = (),
    ) -> "LookupEngine":
        engine = cls(collection, ignored_span_boundary_codepoints)
        for ngrams, entry in entries:
            engine.add_entry(ngrams, entry)
        engine.freeze()
        return engine

    def add_entry(
        self, ngrams: Sequence[Union[str, bytes]], entry: ClassificationResult
    ) -> int:
        """
        Register entry under every n-gram in ngrams and return its index.

        Empty n-grams, n-grams that are not valid UTF-8 and n-grams that
        strip down to nothing are skipped. An index is only suppressed when
        it is already the last one in the posting list.
        """
        if self._frozen:
            raise RuntimeError("Cannot add entries to a frozen LookupEngine")

        entry_index = len(self._entries)
        self._entries.append(entry)

        for ngram in ngrams:
            if not ngram:
                continue
            try:
                if isinstance(ngram, bytes):
                    ngram = ngram.decode("utf-8")
                else:
                    ngram.encode("utf-8")
            except UnicodeError:
                logger.warning("%r failed to convert to unicode.", ngram)
                continue

            key, _ = self.strip_and_normalize(ngram, CodepointSpan(0, len(ngram)))
            if not key:
                continue
            entry_indices = self._ngram_to_entry_index.setdefault(key, [])
            if not entry_indices or entry_indices[-1] != entry_index:
                entry_indices.append(entry_index)

        return entry_index

    def freeze(self) -> None:
        self._frozen = True
        logger.debug(
            "LookupEngine(%s) frozen with %d entries, %d n-grams",
            self.collection,
            len(self._entries),
            len(self._ngram_to_entry_index),
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> Tuple[ClassificationResult, ...]:
        return tuple(self._entries)

    @property
    def ngram_index(self) -> Mapping[str, Tuple[int, ...]]:
        return MappingProxyType(
            {k: tuple(v) for k, v in self._ngram_to_entry_index.items()}
        )

    def strip_and_normalize(
        self, text: str, span: CodepointSpan
    ) -> Tuple[str, CodepointSpan]:
        stripped = self._stripper.strip(text, span)
        if stripped.is_empty():
            return "", stripped
        normalized = self._normalizer.normalize(
            substring_by_codepoints(text, stripped), fold_case=True
        )
        return normalized.text, stripped

    def find_matches(
        self, max_num_matches: int, text: str, span: CodepointSpan
    ) -> Tuple[List[ClassificationResult], CodepointSpan]:
        key, stripped = self.strip_and_normalize(text, span)
        seen: Set[int] = set()
        results: List[ClassificationResult] = []
        self._find_token_matches(key, max_num_matches, seen, results)
        return results, stripped

    def _find_token_matches(
        self,
        key: str,
        max_num_matches: int,
        seen: Set[int],
        results: List[ClassificationResult],
    ) -> None:
        for entry_index in self._ngram_to_entry_index.get(key, ()):
            if len(results) >= max_num_matches:
                break
            # Posting lists may repeat an index.
            if entry_index in seen:
                continue
            entry = self._entries[entry_index]
            results.append(
                dataclasses.replace(
                    entry,
                    collection=self.collection,
                    entity_data=dict(entry.entity_data),
                )
            )
            seen.add(entry_index)

    def chunk(
        self,
        text: str,
        tokens: Sequence[Token],
        max_num_tokens: int,
        max_num_matches: int,
        match_finder: Optional[MatchFinder] = None,
    ) -> List[AnnotatedSpan]:
        """
        Find non-overlapping dictionary matches in tokenized text.

        Start tokens are tried left to right. For each start, windows of up
        to max_num_tokens tokens are tried longest first, and the first
        window with a match wins. Tokens covered by a match are not
        considered as later starts.
        """
        find = match_finder or self.find_matches
        result: List[AnnotatedSpan] = []
        minimum_start = 0

        for start in range(len(tokens)):
            if start < minimum_start:
                continue

            end_candidates = range(start + 1, min(start + max_num_tokens, len(tokens)) + 1)
            for end in reversed(end_candidates):
                span = CodepointSpan(tokens[start].start, tokens[end - 1].end)
                matches, matched_span = find(max_num_matches, text, span)
                if matches:
                    result.append(AnnotatedSpan(matched_span, matches))
                    minimum_start = end
                    break

        logger.debug("%s: %d spans over %d tokens", self.collection, len(result), len(tokens))
        return result

    def classify_text(
        self, context: str, selection: CodepointSpan
    ) -> Optional[ClassificationResult]:
        """
        Return the earliest-added entry whose n-gram equals the whole
        selection (after boundary stripping), or None.
        """
        if selection.second > len(context):
            raise ValueError(
                f"Selection {tuple(selection)} exceeds context of length {len(context)}"
            )
        matches, _ = self.find_matches(1, context, selection)
        return matches[0] if matches else None
