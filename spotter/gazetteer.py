# spotter/gazetteer.py

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import yaml

from .config import LookupOptions
from .errors import ConfigError
from .lookup import LookupEngine
from .models import AnnotatedSpan, ClassificationResult, CodepointSpan
from .tokenizers import Tokenizer, get_tokenizer

logger = logging.getLogger(__name__)


def _entry_from_props(props: Dict[str, Any], options: LookupOptions) -> ClassificationResult:
    return ClassificationResult(
        collection=options.collection,
        score=float(props.get("score", options.score)),
        priority_score=float(props.get("priority_score", options.priority_score)),
        entity_data=dict(props.get("data") or {}),
    )


def build_lookup_engine(
    entries_cfg: List[Dict[str, Any]], options: LookupOptions
) -> LookupEngine:
    engine = LookupEngine.from_options(options)
    for i, props in enumerate(entries_cfg):
        if not isinstance(props, dict):
            raise ConfigError(f"Gazetteer entry {i} must be a mapping")
        ngrams = props.get("ngrams")
        if isinstance(ngrams, str):
            ngrams = [ngrams]
        if not isinstance(ngrams, list):
            raise ConfigError(f"Gazetteer entry {i} has no 'ngrams' list")
        try:
            entry = _entry_from_props(props, options)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Gazetteer entry {i}: {e}") from e
        engine.add_entry([str(n) for n in ngrams], entry)
    engine.freeze()
    return engine


def load_gazetteer(path: str, options: LookupOptions) -> LookupEngine:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    entries_cfg = cfg.get("entries", []) if isinstance(cfg, dict) else None
    if not isinstance(entries_cfg, list):
        raise ConfigError(f"{path}: expected an 'entries' list")

    engine = build_lookup_engine(entries_cfg, options)
    logger.info("Loaded %d gazetteer entries from %s", len(engine.entries), path)
    return engine


class GazetteerAnnotator:
    def __init__(
        self,
        engine: LookupEngine,
        options: LookupOptions,
        tokenizer: Optional[Tokenizer] = None,
    ):
        self.engine = engine
        self.options = options
        self._tokenizer = tokenizer or get_tokenizer(options.tokenizer)

    @classmethod
    def from_options(cls, options: LookupOptions) -> "GazetteerAnnotator":
        if not options.dictionary:
            raise ConfigError(f"Lookup collection {options.collection!r} has no dictionary")
        return cls(load_gazetteer(options.dictionary, options), options)

    def find_all(self, text: str) -> List[AnnotatedSpan]:
        tokens = self._tokenizer.tokenize(text)
        return self.engine.chunk(
            text,
            tokens,
            max_num_tokens=self.options.max_num_tokens,
            max_num_matches=self.options.max_num_matches,
        )

    def classify_text(
        self, text: str, selection: CodepointSpan
    ) -> Optional[ClassificationResult]:
        return self.engine.classify_text(text, selection)
