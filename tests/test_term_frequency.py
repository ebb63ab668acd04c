"""
Tests for term-frequency feature extraction.
"""

from __future__ import annotations

import math

import pytest

from vwlab.errors import InvalidInput
from vwlab.features.term_frequency import extract, extract_text_features
from vwlab.features.tokenizer import tokenize


def test_extract_example_sentence():
    features = extract(tokenize("the cat sat on the mat"))
    assert features == {"THE": 2, "CAT": 1, "SAT": 1, "ON": 1, "MAT": 1}


def test_extract_double_space():
    assert extract(tokenize("a  a")) == {"A": 2}


def test_extract_empty():
    assert extract([]) == {}
    assert extract_text_features("") == {}


@pytest.mark.parametrize(
    "text",
    [
        "the cat sat on the mat",
        "a a a b b c",
        "Senectus et netus et malesuada fames ac turpis.",
        "",
    ],
)
def test_extract_counts_sum_to_token_count(text):
    tokens = tokenize(text)
    features = extract(tokens)

    assert sum(features.values()) == len(tokens)
    assert set(features) == {str(t) for t in tokens}
    assert all(count >= 1 for count in features.values())


def test_extract_is_deterministic():
    text = "Nunc id cursus metus aliquam eleifend mi in nulla cursus"
    assert extract(tokenize(text)) == extract(tokenize(text))


def test_extract_hashed_tokens_use_string_keys():
    tokens = tokenize("b a b", token_identity="hash")
    features = extract(tokens)

    assert features[str(tokens[0])] == 2
    assert features[str(tokens[1])] == 1


def test_extract_log_weighting():
    features = extract(tokenize("the cat the"), weighting="log")

    assert features["CAT"] == pytest.approx(1.0)
    assert features["THE"] == pytest.approx(1.0 + math.log10(2))


def test_extract_text_features_composes_pipeline():
    assert extract_text_features("Dolor dolor SIT") == {"DOLOR": 2, "SIT": 1}


def test_extract_rejects_none():
    with pytest.raises(InvalidInput):
        extract(None)  # type: ignore[arg-type]


def test_extract_rejects_unknown_weighting():
    with pytest.raises(InvalidInput):
        extract(["A"], weighting="tfidf")
