"""
Example construction for the online learner.

An Example is an immutable bag of hashed features, grouped by a
single-character feature group, plus an optional label. Examples are
assembled through scoped builders:

    with ExampleBuilder(hasher) as builder:
        with builder.add_namespace("n") as ns:
            ns.add_feature(index, value)
        builder.apply_label(1.0)
        example = builder.create_example()

Builders release their buffers on every exit path. A namespace commits its
features only when its block exits normally.

`build_example` assembles an Example from a typed record and an explicit
FeatureSchema.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from scipy import sparse

from vwlab.errors import InvalidInput
from vwlab.features.schema import FeatureSchema


Feature = Tuple[int, float]


@dataclass(frozen=True)
class Example:
    features: Dict[str, Tuple[Feature, ...]]
    label: Optional[float] = None

    @property
    def num_features(self) -> int:
        return sum(len(group) for group in self.features.values())

    def to_csr(self, bits: int) -> sparse.csr_matrix:
        """
        Lay the example out as a 1 x 2**bits sparse row.

        Features hashed to the same index are summed.
        """
        indices: List[int] = []
        values: List[float] = []
        for group in self.features.values():
            for index, value in group:
                indices.append(index)
                values.append(value)

        rows = np.zeros(len(indices), dtype=np.int64)
        matrix = sparse.coo_matrix(
            (np.asarray(values, dtype=np.float64), (rows, np.asarray(indices, dtype=np.int64))),
            shape=(1, 1 << bits),
        )
        return matrix.tocsr()


class NamespaceBuilder:
    """Collects the features of one feature group."""

    def __init__(self, owner: "ExampleBuilder", feature_group: str) -> None:
        self._owner = owner
        self.feature_group = feature_group
        self._features: List[Feature] = []

    def add_feature(self, index: int, value: float) -> None:
        self._owner._check_open()
        if value is None or isinstance(value, bool):
            raise InvalidInput(f"Feature value must be a number, got {value!r}.")
        value = float(value)
        if not math.isfinite(value):
            raise InvalidInput(f"Feature value must be finite, got {value!r}.")
        self._features.append((int(index), value))

    def __enter__(self) -> "NamespaceBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self._owner._commit(self.feature_group, self._features)
        self._features = []


class ExampleBuilder:
    """Scoped handle accumulating namespaces and a label into an Example."""

    def __init__(self, hasher: Any) -> None:
        self.hasher = hasher
        self._groups: Dict[str, List[Feature]] = {}
        self._label: Optional[float] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("ExampleBuilder has been released.")

    def _commit(self, feature_group: str, features: List[Feature]) -> None:
        self._check_open()
        self._groups.setdefault(feature_group, []).extend(features)

    def add_namespace(self, feature_group: str) -> NamespaceBuilder:
        self._check_open()
        if not isinstance(feature_group, str) or len(feature_group) != 1 or feature_group.isspace():
            raise InvalidInput(
                f"Feature group must be a single non-space character, got {feature_group!r}."
            )
        return NamespaceBuilder(self, feature_group)

    def apply_label(self, label: float) -> None:
        self._check_open()
        if label is None or isinstance(label, bool):
            raise InvalidInput(f"Label must be a number, got {label!r}.")
        label = float(label)
        if not math.isfinite(label):
            raise InvalidInput(f"Label must be finite, got {label!r}.")
        self._label = label

    def create_example(self) -> Example:
        self._check_open()
        features = {group: tuple(items) for group, items in self._groups.items()}
        return Example(features=features, label=self._label)

    def close(self) -> None:
        self._groups = {}
        self._label = None
        self._closed = True

    def __enter__(self) -> "ExampleBuilder":
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _field_value(record: Any, field: str) -> Any:
    if record is None:
        raise InvalidInput("Record is required.")

    if isinstance(record, Mapping):
        if field not in record:
            raise InvalidInput(f"Record is missing field '{field}'.")
        value = record[field]
    else:
        if not hasattr(record, field):
            raise InvalidInput(f"Record is missing field '{field}'.")
        value = getattr(record, field)

    if value is None:
        raise InvalidInput(f"Record field '{field}' is required.")
    return value


def populate_example(
    builder: ExampleBuilder,
    record: Any,
    schema: FeatureSchema,
    label: Optional[float] = None,
) -> None:
    """
    Write a record's features (and optional label) into an open builder.

    Each feature group becomes one namespace block; each field's features
    are hashed within the field's own namespace.
    """
    hasher = builder.hasher
    for feature_group, specs in schema.groups():
        with builder.add_namespace(feature_group) as ns:
            for spec in specs:
                namespace_hash = hasher.hash_space(spec.namespace)
                value = _field_value(record, spec.field)
                for name, feature_value in spec.extractor(spec.field, value).items():
                    ns.add_feature(hasher.hash_feature(name, namespace_hash), feature_value)

    if label is not None:
        builder.apply_label(label)


def build_example(
    hasher: Any,
    record: Any,
    schema: FeatureSchema,
    label: Optional[float] = None,
) -> Example:
    """
    Assemble an Example from a typed record.

    Parameters
    ----------
    hasher : Any
        Object exposing hash_space(namespace) and hash_feature(name, ns_hash),
        typically an OnlineLearner session or a FeatureHasher.
    record : Any
        Dataclass instance, object with attributes, or mapping.
    schema : FeatureSchema
        Field -> namespace/feature-group/extractor declarations.
    label : Optional[float]
        Training label; omit for prediction.

    Returns
    -------
    Example
        The assembled example.

    Raises
    ------
    InvalidInput
        If the record or a required field is missing or mistyped.
    """
    with ExampleBuilder(hasher) as builder:
        populate_example(builder, record, schema, label=label)
        return builder.create_example()
