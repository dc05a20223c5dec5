# spotter/tokenizers.py

from __future__ import annotations

from typing import List, Optional, Protocol

import regex as re

from .errors import ConfigError
from .models import Token

_NON_SPACE_RE = re.compile(r"\S+")


class Tokenizer(Protocol):
    def tokenize(self, text: str) -> List[Token]:
        ...


class WhitespaceTokenizer:
    """
    Splits on Unicode whitespace. Punctuation stays attached to its token
    ("13." or "(42)"), which is what the number parser expects.
    """

    def tokenize(self, text: str) -> List[Token]:
        return [
            Token(value=m.group(0), start=m.start(), end=m.end())
            for m in _NON_SPACE_RE.finditer(text)
        ]


class SpacyTokenizer:
    """
    Rule-based spaCy tokenizer. No trained pipeline is needed, only the
    language defaults from spacy.blank().
    """

    def __init__(self, lang: str = "en"):
        self.lang = lang
        # Lazy-loaded so importing this module doesn't pull spaCy in
        self._nlp = None

    def _get_nlp(self) -> "spacy.language.Language":
        if self._nlp is None:
            import spacy

            self._nlp = spacy.blank(self.lang)
        return self._nlp

    def tokenize(self, text: str) -> List[Token]:
        doc = self._get_nlp().make_doc(text)
        tokens: List[Token] = []
        for tok in doc:
            if tok.is_space:
                continue
            tokens.append(
                Token(value=tok.text, start=tok.idx, end=tok.idx + len(tok.text))
            )
        return tokens


def get_tokenizer(name: Optional[str]) -> Tokenizer:
    if name is None or name == "whitespace":
        return WhitespaceTokenizer()
    if name == "spacy" or name.startswith("spacy:"):
        _, _, lang = name.partition(":")
        return SpacyTokenizer(lang or "en")
    raise ConfigError(f"Unknown tokenizer {name!r}")
