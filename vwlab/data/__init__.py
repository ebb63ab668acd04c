"""
Data loading utilities.

This subpackage includes:
- the immutable Document record and its validation
- loaders for config/data.yaml, the labeled CSV dataset and the probe document
"""
