"""
Tests for the whitespace tokenizer.

We validate that:

- text is uppercased and split on single spaces
- empty and whitespace-only fragments are dropped
- exact and hashed token identities behave as documented
- None / non-string input is rejected
"""

from __future__ import annotations

import pytest

from vwlab.errors import InvalidInput
from vwlab.features.tokenizer import tokenize


def test_tokenize_example_sentence():
    assert tokenize("the cat sat on the mat") == ["THE", "CAT", "SAT", "ON", "THE", "MAT"]


def test_tokenize_double_space_drops_empty_fragment():
    assert tokenize("a  a") == ["A", "A"]


@pytest.mark.parametrize("text", ["", " ", "    "])
def test_tokenize_empty_or_blank_text(text):
    assert tokenize(text) == []


def test_tokenize_is_case_insensitive():
    assert tokenize("Lorem ipsum") == tokenize("LOREM IPSUM")


def test_tokenize_splits_only_on_spaces():
    # Tabs are not separators; a tab-only fragment is still whitespace and dropped.
    assert tokenize("a\tb c") == ["A\tB", "C"]
    assert tokenize("\t a") == ["A"]


@pytest.mark.parametrize(
    "text",
    [
        "the cat sat on the mat",
        "  leading and trailing  ",
        "punctuation, stays. attached!",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit. 1999",
        "\n line \n breaks",
    ],
)
def test_tokenize_length_matches_non_empty_fragments(text):
    expected = [frag for frag in text.split(" ") if frag.strip()]
    assert len(tokenize(text)) == len(expected)


def test_tokenize_hash_identity_is_value_based():
    tokens = tokenize("lorem ipsum LOREM", token_identity="hash")

    assert len(tokens) == 3
    assert all(isinstance(t, int) for t in tokens)
    assert tokens[0] == tokens[2]
    assert tokenize("Lorem", token_identity="hash") == tokenize("LOREM", token_identity="hash")


def test_tokenize_rejects_none():
    with pytest.raises(InvalidInput):
        tokenize(None)  # type: ignore[arg-type]


def test_tokenize_rejects_non_string():
    with pytest.raises(InvalidInput):
        tokenize(1999)  # type: ignore[arg-type]


def test_tokenize_rejects_unknown_identity():
    with pytest.raises(InvalidInput):
        tokenize("a b", token_identity="md5")
