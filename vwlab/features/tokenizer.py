"""
Naive whitespace tokenizer for short text fields.

The pipeline is deliberately minimal:

- uppercase normalization (case-insensitive matching)
- split on the single space character
- drop empty / whitespace-only fragments
- map each surviving fragment to a Token

Two token identities are supported. "exact" keeps the uppercased fragment
itself, so distinct words never collide. "hash" maps each fragment to a
32-bit murmurhash; equal fragments always produce equal tokens, distinct
fragments may collide.
"""

from __future__ import annotations

from typing import List, Union

from sklearn.utils import murmurhash3_32

from vwlab.errors import InvalidInput


Token = Union[str, int]

TOKEN_IDENTITIES = ("exact", "hash")


def _fragments(text: str) -> List[str]:
    """
    Uppercase the text and split it on single spaces, keeping only
    fragments with non-whitespace content.
    """
    return [frag for frag in text.upper().split(" ") if frag.strip()]


def tokenize(text: str, token_identity: str = "exact") -> List[Token]:
    """
    Split raw text into an ordered sequence of normalized tokens.

    Parameters
    ----------
    text : str
        Raw input text. May be empty.
    token_identity : str
        "exact" (uppercased fragment strings) or "hash" (murmurhash ints).

    Returns
    -------
    List[Token]
        Tokens in order of appearance; one per non-empty fragment.

    Raises
    ------
    InvalidInput
        If text is None or not a string, or token_identity is unknown.
    """
    if text is None:
        raise InvalidInput("Cannot tokenize None; text is required.")
    if not isinstance(text, str):
        raise InvalidInput(f"Expected text as str, got {type(text).__name__}.")

    fragments = _fragments(text)

    if token_identity == "exact":
        return list(fragments)
    if token_identity == "hash":
        return [murmurhash3_32(frag, positive=True) for frag in fragments]

    raise InvalidInput(
        f"Unknown token identity '{token_identity}'. Expected one of {TOKEN_IDENTITIES}."
    )
