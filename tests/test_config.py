# tests/test_config.py

import os
from pathlib import Path

import pytest

from spotter.config import (
    ALL_USECASES,
    load_config,
    load_lookup_options,
    load_number_options,
    parse_lookup_options,
    parse_number_options,
)
from spotter.errors import ConfigError
from spotter.tokenizers import get_tokenizer

CONFIG_PATH = str(Path(__file__).resolve().parents[1] / "configs" / "spotter.yaml")


def test_load_default_config():
    config = load_config(CONFIG_PATH)

    number = config.number
    assert number.enabled
    assert number.enabled_annotation_usecases == ALL_USECASES
    assert ord("$") in number.allowed_prefix_codepoints
    assert ord("%") in number.allowed_suffix_codepoints
    assert number.percentage_suffixes().longest_prefix_match("% off") == 1

    lookup = config.lookup
    assert lookup.collection == "place"
    assert os.path.isabs(lookup.dictionary)
    assert os.path.exists(lookup.dictionary)


def test_codepoints_accept_ints_and_strings():
    options = parse_number_options({"allowed_prefix_codepoints": [36, "€"]})
    assert options.allowed_prefix_codepoints == frozenset({36, ord("€")})


def test_percentage_enabled_when_suffixes_given():
    assert parse_number_options({"percentage_suffixes": ["%"]}).enable_percentage
    assert not parse_number_options({}).enable_percentage


def test_malformed_number_options():
    with pytest.raises(ConfigError):
        parse_number_options({"allowed_prefix_codepoints": ["ab"]})
    with pytest.raises(ConfigError):
        parse_number_options({"score": "high"})
    with pytest.raises(ConfigError):
        parse_number_options({"enabled_annotation_usecases": ["BATCH"]})


def test_malformed_lookup_options():
    with pytest.raises(ConfigError):
        parse_lookup_options({"collection": ""})
    with pytest.raises(ConfigError):
        parse_lookup_options({"collection": "place", "max_num_tokens": 0})


def test_unknown_tokenizer():
    with pytest.raises(ConfigError):
        get_tokenizer("sentencepiece")


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)


def test_load_number_options_from_file(tmp_path):
    path = tmp_path / "number.yaml"
    path.write_text(
        "priority_score: -5\n"
        "enabled_annotation_usecases: [RAW]\n"
        "allowed_suffix_codepoints: ['%']\n"
        "percentage_suffixes: ['%', 'pct']\n",
        encoding="utf-8",
    )
    options = load_number_options(str(path))
    assert options.priority_score == -5.0
    assert options.enabled_annotation_usecases == 2
    assert options.allowed_suffix_codepoints == frozenset({ord("%")})
    assert options.enable_percentage
    assert len(options.percentage_suffixes()) == 2


def test_load_lookup_options_from_file(tmp_path):
    path = tmp_path / "lookup.yaml"
    path.write_text(
        "collection: drug\nmax_num_tokens: 3\ndictionary: drugs.yaml\n",
        encoding="utf-8",
    )
    options = load_lookup_options(str(path))
    assert options.collection == "drug"
    assert options.max_num_tokens == 3
    assert options.dictionary == str(tmp_path / "drugs.yaml")


def test_load_rejects_non_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_number_options(str(path))
