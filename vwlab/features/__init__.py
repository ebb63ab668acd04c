"""
Text tokenization and feature extraction utilities.

This subpackage includes:
- a naive whitespace tokenizer with case normalization
- term-frequency FeatureMaps over token sequences
- the explicit field -> namespace feature schema used to build examples
"""
