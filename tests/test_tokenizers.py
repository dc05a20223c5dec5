# tests/test_tokenizers.py

import pytest

from spotter.tokenizers import SpacyTokenizer, WhitespaceTokenizer, get_tokenizer


def test_whitespace_tokenizer_offsets():
    text = "I live\tin  Zürich."
    tokens = WhitespaceTokenizer().tokenize(text)
    assert [t.value for t in tokens] == ["I", "live", "in", "Zürich."]
    for token in tokens:
        assert text[token.start:token.end] == token.value


def test_get_tokenizer_default():
    assert isinstance(get_tokenizer(None), WhitespaceTokenizer)
    assert isinstance(get_tokenizer("spacy:de"), SpacyTokenizer)


def test_spacy_tokenizer_offsets():
    pytest.importorskip("spacy")
    text = "I live in new york"
    tokens = SpacyTokenizer().tokenize(text)
    assert [t.value for t in tokens] == ["I", "live", "in", "new", "york"]
    for token in tokens:
        assert text[token.start:token.end] == token.value
