"""
Exception types shared across vwlab.

- InvalidInput: a required text or document field is missing or of the
  wrong type. Raised eagerly, never coerced.
- ResourceError: the learner cannot open its model file for reading or
  writing. Surfaced to the caller, never retried.
"""

from __future__ import annotations


class InvalidInput(ValueError):
    """A required input is None, missing, or of an unsupported type."""


class ResourceError(OSError):
    """A model file cannot be opened for reading or writing."""
