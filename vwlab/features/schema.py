"""
Explicit feature schema for typed records.

A FeatureSchema maps each record field to:

- a namespace name (hashed by the learner to scope feature names)
- a feature group (single-character label grouping namespaces in an example)
- an extractor turning the field value into a FeatureMap

Schemas are declared once, either in code via the chained `register`
builder or from the "schema" section of config/data.yaml, and passed
explicitly to example assembly.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Tuple

from vwlab.errors import InvalidInput
from vwlab.features.term_frequency import FeatureMap, extract_text_features


Extractor = Callable[[str, Any], FeatureMap]


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def categorical_feature(field: str, value: Any) -> FeatureMap:
    """One indicator feature named "<field>=<value>"."""
    if not isinstance(value, str):
        raise InvalidInput(f"Field '{field}' expects a string, got {type(value).__name__}.")
    return {f"{field}={value}": 1.0}


def numeric_feature(field: str, value: Any) -> FeatureMap:
    """One feature named after the field, carrying the value itself."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInput(f"Field '{field}' expects a number, got {type(value).__name__}.")
    return {field: float(value)}


def make_text_extractor(token_identity: str = "exact", weighting: str = "raw") -> Extractor:
    """
    Build an extractor producing term-frequency features for a text field.

    Parameters
    ----------
    token_identity : str
        Passed to the tokenizer ("exact" or "hash").
    weighting : str
        Passed to the term-frequency extractor ("raw" or "log").

    Returns
    -------
    Extractor
        Callable (field, value) -> FeatureMap.
    """

    def text_feature(field: str, value: Any) -> FeatureMap:
        if not isinstance(value, str):
            raise InvalidInput(f"Field '{field}' expects text, got {type(value).__name__}.")
        return extract_text_features(value, token_identity=token_identity, weighting=weighting)

    return text_feature


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldSpec:
    field: str
    namespace: str
    feature_group: str
    extractor: Extractor


class FeatureSchema:
    """Ordered registry of FieldSpecs keyed by field name."""

    def __init__(self) -> None:
        self._fields: Dict[str, FieldSpec] = {}

    def register(
        self,
        field: str,
        namespace: str,
        feature_group: str,
        extractor: Extractor,
    ) -> "FeatureSchema":
        if field in self._fields:
            raise ValueError(f"Field '{field}' is already registered.")
        if not isinstance(feature_group, str) or len(feature_group) != 1 or feature_group.isspace():
            raise ValueError(
                f"Feature group for '{field}' must be a single non-space character, "
                f"got {feature_group!r}."
            )
        if not namespace:
            raise ValueError(f"Namespace for '{field}' must be a non-empty string.")

        self._fields[field] = FieldSpec(field, namespace, feature_group, extractor)
        return self

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __getitem__(self, field: str) -> FieldSpec:
        return self._fields[field]

    @property
    def fields(self) -> List[str]:
        return list(self._fields)

    def groups(self) -> List[Tuple[str, List[FieldSpec]]]:
        """FieldSpecs bucketed by feature group, in first-seen order."""
        grouped: Dict[str, List[FieldSpec]] = {}
        for spec in self._fields.values():
            grouped.setdefault(spec.feature_group, []).append(spec)
        return list(grouped.items())


# ---------------------------------------------------------------------------
# Schema factories
# ---------------------------------------------------------------------------


def default_document_schema(
    token_identity: str = "exact",
    weighting: str = "raw",
) -> FeatureSchema:
    """
    Schema for Document records.

    Text lives in its own namespace so that words matching the author or
    year feature names do not share weights with them.
    """
    return (
        FeatureSchema()
        .register("author", namespace="ns0", feature_group="n", extractor=categorical_feature)
        .register(
            "text",
            namespace="ns1",
            feature_group="n",
            extractor=make_text_extractor(token_identity, weighting),
        )
        .register("year", namespace="ns0", feature_group="n", extractor=numeric_feature)
    )


def schema_from_config(cfg: Dict[str, Any]) -> FeatureSchema:
    """
    Build a FeatureSchema from a data config dictionary.

    Expects a "schema" section mapping field names to
    {namespace, feature_group, kind}, where kind is one of "categorical",
    "numeric" or "text". Text fields use the tokenize/features options of
    the "preprocessing" section.

    Parameters
    ----------
    cfg : Dict[str, Any]
        Full data configuration (see config/data.yaml).

    Returns
    -------
    FeatureSchema
        Schema with fields registered in config order.

    Raises
    ------
    KeyError
        If the schema section or a field's namespace/feature_group is missing.
    ValueError
        If a field declares an unknown kind.
    """
    if "schema" not in cfg or not cfg["schema"]:
        raise KeyError('Missing "schema" section in data config.')

    prep_cfg = cfg.get("preprocessing", {}) or {}
    tokenize_cfg = prep_cfg.get("tokenize", {}) or {}
    features_cfg = prep_cfg.get("features", {}) or {}
    text_extractor = make_text_extractor(
        token_identity=str(tokenize_cfg.get("token_identity", "exact")),
        weighting=str(features_cfg.get("weighting", "raw")),
    )

    extractors: Dict[str, Extractor] = {
        "categorical": categorical_feature,
        "numeric": numeric_feature,
        "text": text_extractor,
    }

    schema = FeatureSchema()
    for field, field_cfg in cfg["schema"].items():
        kind = str(field_cfg.get("kind", "categorical")).lower()
        if kind not in extractors:
            raise ValueError(
                f"Unknown feature kind '{kind}' for field '{field}'. "
                f"Expected one of {sorted(extractors)}."
            )
        schema.register(
            field,
            namespace=str(field_cfg["namespace"]),
            feature_group=str(field_cfg["feature_group"]),
            extractor=extractors[kind],
        )
    return schema
