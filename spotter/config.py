# spotter/config.py

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

import yaml

from .boundary import codepoint_set
from .errors import ConfigError
from .models import AnnotationUsecase
from .sorted_strings import SortedStringsTable, serialize_pieces

ALL_USECASES = sum(1 << u for u in AnnotationUsecase)


@dataclass(frozen=True)
class NumberAnnotatorOptions:
    enabled: bool = True
    enabled_annotation_usecases: int = ALL_USECASES
    score: float = 1.0
    priority_score: float = 0.0
    float_number_priority_score: float = 0.0
    percentage_priority_score: float = 1.0
    enable_percentage: bool = False
    allowed_prefix_codepoints: FrozenSet[int] = frozenset()
    allowed_suffix_codepoints: FrozenSet[int] = frozenset()
    ignored_prefix_span_boundary_codepoints: FrozenSet[int] = frozenset()
    ignored_suffix_span_boundary_codepoints: FrozenSet[int] = frozenset()
    # Serialized sorted-strings table of percentage suffixes.
    percentage_pieces_string: bytes = b""
    percentage_pieces_offsets: Tuple[int, ...] = ()
    tokenizer: str = "whitespace"

    def percentage_suffixes(self) -> SortedStringsTable:
        return SortedStringsTable(
            self.percentage_pieces_string, self.percentage_pieces_offsets
        )


@dataclass(frozen=True)
class LookupOptions:
    collection: str
    max_num_tokens: int = 5
    max_num_matches: int = 1
    score: float = 1.0
    priority_score: float = 0.0
    ignored_span_boundary_codepoints: FrozenSet[int] = frozenset()
    tokenizer: str = "whitespace"
    dictionary: Optional[str] = None

    def __post_init__(self):
        if not self.collection:
            raise ConfigError("Lookup collection must be a non-empty string")
        if self.max_num_tokens < 1 or self.max_num_matches < 1:
            raise ConfigError("max_num_tokens and max_num_matches must be >= 1")


@dataclass(frozen=True)
class EngineConfig:
    number: NumberAnnotatorOptions = field(default_factory=NumberAnnotatorOptions)
    lookup: Optional[LookupOptions] = None


def _codepoints(props: Dict[str, Any], key: str) -> FrozenSet[int]:
    values = props.get(key) or []
    if isinstance(values, str):
        values = list(values)
    try:
        return codepoint_set(values)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid codepoints in {key!r}: {e}") from e


def _usecases(value: Any) -> int:
    if value is None:
        return ALL_USECASES
    if isinstance(value, int):
        return value
    mask = 0
    for name in value:
        try:
            mask |= 1 << AnnotationUsecase[str(name).upper()]
        except KeyError as e:
            raise ConfigError(f"Unknown annotation usecase {name!r}") from e
    return mask


def parse_number_options(props: Dict[str, Any]) -> NumberAnnotatorOptions:
    suffixes: Iterable[str] = props.get("percentage_suffixes") or []
    pieces, offsets = serialize_pieces(suffixes)
    try:
        options = NumberAnnotatorOptions(
            enabled=bool(props.get("enabled", True)),
            enabled_annotation_usecases=_usecases(props.get("enabled_annotation_usecases")),
            score=float(props.get("score", 1.0)),
            priority_score=float(props.get("priority_score", 0.0)),
            float_number_priority_score=float(props.get("float_number_priority_score", 0.0)),
            percentage_priority_score=float(props.get("percentage_priority_score", 1.0)),
            enable_percentage=bool(props.get("enable_percentage", bool(pieces))),
            allowed_prefix_codepoints=_codepoints(props, "allowed_prefix_codepoints"),
            allowed_suffix_codepoints=_codepoints(props, "allowed_suffix_codepoints"),
            ignored_prefix_span_boundary_codepoints=_codepoints(
                props, "ignored_prefix_span_boundary_codepoints"
            ),
            ignored_suffix_span_boundary_codepoints=_codepoints(
                props, "ignored_suffix_span_boundary_codepoints"
            ),
            percentage_pieces_string=pieces,
            percentage_pieces_offsets=tuple(offsets),
            tokenizer=str(props.get("tokenizer", "whitespace")),
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid number annotator options: {e}") from e
    return options


def parse_lookup_options(props: Dict[str, Any], base_dir: str = ".") -> LookupOptions:
    dictionary = props.get("dictionary")
    if dictionary and not os.path.isabs(dictionary):
        dictionary = os.path.join(base_dir, dictionary)
    try:
        return LookupOptions(
            collection=str(props.get("collection", "")),
            max_num_tokens=int(props.get("max_num_tokens", 5)),
            max_num_matches=int(props.get("max_num_matches", 1)),
            score=float(props.get("score", 1.0)),
            priority_score=float(props.get("priority_score", 0.0)),
            ignored_span_boundary_codepoints=_codepoints(
                props, "ignored_span_boundary_codepoints"
            ),
            tokenizer=str(props.get("tokenizer", "whitespace")),
            dictionary=dictionary,
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid lookup options: {e}") from e


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return cfg


def load_number_options(path: str) -> NumberAnnotatorOptions:
    return parse_number_options(_load_yaml(path))


def load_lookup_options(path: str) -> LookupOptions:
    return parse_lookup_options(_load_yaml(path), os.path.dirname(path))


def load_config(path: str = "configs/spotter.yaml") -> EngineConfig:
    cfg = _load_yaml(path)
    base_dir = os.path.dirname(os.path.abspath(path))

    number_cfg = cfg.get("number", {}) or {}
    lookup_cfg = cfg.get("lookup")

    return EngineConfig(
        number=parse_number_options(number_cfg),
        lookup=parse_lookup_options(lookup_cfg, base_dir) if lookup_cfg else None,
    )
