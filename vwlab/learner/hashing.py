"""
Feature-name hashing for the online learner.

Namespaces are hashed once into a seed; feature names are then hashed with
that seed, so identical names in different namespaces land on different
weights. Hashes are murmurhash3 (scikit-learn's implementation), stable
across processes and platforms.
"""

from __future__ import annotations

from sklearn.utils import murmurhash3_32


DEFAULT_BITS = 18


def hash_space(namespace: str) -> int:
    """Hash a namespace name into an unsigned 32-bit seed."""
    return int(murmurhash3_32(namespace, seed=0, positive=True))


def hash_feature(name: str, namespace_hash: int) -> int:
    """Hash a feature name within the namespace identified by namespace_hash."""
    return int(murmurhash3_32(name, seed=int(namespace_hash), positive=True))


def feature_index(feature_hash: int, bits: int = DEFAULT_BITS) -> int:
    """Fold a feature hash into the [0, 2**bits) weight table."""
    return int(feature_hash) & ((1 << bits) - 1)


class FeatureHasher:
    """Namespace/feature hashing bound to a weight-table size."""

    def __init__(self, bits: int = DEFAULT_BITS) -> None:
        if not 1 <= int(bits) <= 30:
            raise ValueError(f"bits must be between 1 and 30, got {bits}.")
        self.bits = int(bits)

    def hash_space(self, namespace: str) -> int:
        return hash_space(namespace)

    def hash_feature(self, name: str, namespace_hash: int) -> int:
        return feature_index(hash_feature(name, namespace_hash), self.bits)
