"""
Term-frequency feature extraction.

Turns a token sequence into a FeatureMap: one entry per distinct token,
keyed by the token's string form, valued by its occurrence count. The
counting is a single pass over the sequence.

An optional "log" weighting dampens repeated terms with 1 + log10(count),
which keeps every present term at a value >= 1.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Dict, Sequence, Union

from vwlab.errors import InvalidInput
from vwlab.features.tokenizer import Token, tokenize


FeatureMap = Dict[str, Union[int, float]]

WEIGHTINGS = ("raw", "log")


def extract(tokens: Sequence[Token], weighting: str = "raw") -> FeatureMap:
    """
    Count token occurrences and return them as a feature mapping.

    Parameters
    ----------
    tokens : Sequence[Token]
        Token sequence, possibly empty, possibly with repeats.
    weighting : str
        "raw" for integer counts, "log" for 1 + log10(count).

    Returns
    -------
    FeatureMap
        Mapping from str(token) to its (weighted) count. Empty input gives
        an empty mapping.

    Raises
    ------
    InvalidInput
        If tokens is None or weighting is unknown.
    """
    if tokens is None:
        raise InvalidInput("Cannot extract features from None; tokens are required.")
    if weighting not in WEIGHTINGS:
        raise InvalidInput(f"Unknown weighting '{weighting}'. Expected one of {WEIGHTINGS}.")

    counts = Counter(str(token) for token in tokens)

    if weighting == "log":
        return {name: 1.0 + math.log10(count) for name, count in counts.items()}
    return dict(counts)


def extract_text_features(
    text: str,
    token_identity: str = "exact",
    weighting: str = "raw",
) -> FeatureMap:
    """Tokenize text and return its term-frequency FeatureMap."""
    return extract(tokenize(text, token_identity=token_identity), weighting=weighting)
