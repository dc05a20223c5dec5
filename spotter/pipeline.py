# spotter/pipeline.py

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, List, Optional

from .config import EngineConfig, load_config
from .gazetteer import GazetteerAnnotator
from .models import AnnotatedSpan, AnnotationUsecase, ClassificationResult, CodepointSpan
from .number import NumberAnnotator
from .resolve import merge_spans

logger = logging.getLogger(__name__)


class Annotator:
    """Runs every configured annotator over a text and merges the results."""

    def __init__(self, config: EngineConfig):
        self.config = config
        self.numbers = NumberAnnotator(config.number)
        self.gazetteer: Optional[GazetteerAnnotator] = None
        if config.lookup is not None and config.lookup.dictionary:
            self.gazetteer = GazetteerAnnotator.from_options(config.lookup)

    def _collect_spans(self, text: str, usecase: AnnotationUsecase) -> List[AnnotatedSpan]:
        numbers = self.numbers.find_all(text, usecase)
        terms = self.gazetteer.find_all(text) if self.gazetteer is not None else []
        return merge_spans(numbers, terms)

    def annotate(
        self,
        text: str,
        usecase: AnnotationUsecase = AnnotationUsecase.RAW,
        allowed_collections: Optional[Iterable[str]] = None,
    ) -> List[AnnotatedSpan]:
        """
        allowed_collections:
          - If None: keep spans from every annotator.
          - If iterable: only spans whose top collection is in this set.
        """
        spans = self._collect_spans(text, usecase)

        if allowed_collections is not None:
            allowed_set = set(allowed_collections)
            spans = [s for s in spans if s.best() and s.best().collection in allowed_set]

        logger.debug("Annotated %d spans in %d codepoints", len(spans), len(text))
        return spans

    def classify(
        self,
        text: str,
        selection: CodepointSpan,
        usecase: AnnotationUsecase = AnnotationUsecase.RAW,
    ) -> Optional[ClassificationResult]:
        result = self.numbers.classify_text(text, selection, usecase)
        if result is None and self.gazetteer is not None:
            result = self.gazetteer.classify_text(text, selection)
        return result


@lru_cache(maxsize=8)
def get_annotator(config_path: str = "configs/spotter.yaml") -> Annotator:
    logger.info("Building annotators from %s", config_path)
    return Annotator(load_config(config_path))


def annotate_text(
    text: str,
    config_path: str = "configs/spotter.yaml",
    usecase: AnnotationUsecase = AnnotationUsecase.RAW,
    allowed_collections: Optional[Iterable[str]] = None,
) -> List[AnnotatedSpan]:
    return get_annotator(config_path).annotate(text, usecase, allowed_collections)
