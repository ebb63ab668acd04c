"""
Tests for the explicit feature schema and its extractors.
"""

from __future__ import annotations

import copy

import pytest

from vwlab.data.documents import load_data_config
from vwlab.errors import InvalidInput
from vwlab.features.schema import (
    FeatureSchema,
    categorical_feature,
    default_document_schema,
    make_text_extractor,
    numeric_feature,
    schema_from_config,
)


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def test_categorical_feature():
    assert categorical_feature("author", "Broyden") == {"author=Broyden": 1.0}


def test_numeric_feature():
    assert numeric_feature("year", 1999) == {"year": 1999.0}
    assert numeric_feature("score", 0.5) == {"score": 0.5}


@pytest.mark.parametrize("value", [True, "1999", None])
def test_numeric_feature_rejects_non_numbers(value):
    with pytest.raises(InvalidInput):
        numeric_feature("year", value)


def test_categorical_feature_rejects_non_strings():
    with pytest.raises(InvalidInput):
        categorical_feature("author", 42)


def test_text_extractor():
    extractor = make_text_extractor()
    assert extractor("text", "the cat the") == {"THE": 2, "CAT": 1}

    with pytest.raises(InvalidInput):
        extractor("text", None)


# ---------------------------------------------------------------------------
# Schema builder
# ---------------------------------------------------------------------------


def test_default_document_schema_layout():
    schema = default_document_schema()

    assert schema.fields == ["author", "text", "year"]
    assert schema["author"].namespace == "ns0"
    assert schema["text"].namespace == "ns1"
    assert schema["year"].namespace == "ns0"

    groups = schema.groups()
    assert [group for group, _ in groups] == ["n"]
    assert [spec.field for spec in groups[0][1]] == ["author", "text", "year"]


def test_register_is_chainable_and_rejects_duplicates():
    schema = FeatureSchema().register("a", "ns0", "x", categorical_feature)
    assert "a" in schema
    assert len(schema) == 1

    with pytest.raises(ValueError):
        schema.register("a", "ns0", "x", categorical_feature)


@pytest.mark.parametrize("group", ["", "ab", " "])
def test_register_rejects_bad_feature_group(group):
    with pytest.raises(ValueError):
        FeatureSchema().register("a", "ns0", group, categorical_feature)


def test_groups_preserve_first_seen_order():
    schema = (
        FeatureSchema()
        .register("a", "ns0", "y", categorical_feature)
        .register("b", "ns0", "x", categorical_feature)
        .register("c", "ns1", "y", numeric_feature)
    )
    groups = schema.groups()

    assert [group for group, _ in groups] == ["y", "x"]
    assert [spec.field for spec in groups[0][1]] == ["a", "c"]


# ---------------------------------------------------------------------------
# Config-driven schema
# ---------------------------------------------------------------------------


def test_schema_from_config_matches_default():
    schema = schema_from_config(load_data_config())
    default = default_document_schema()

    assert schema.fields == default.fields
    for field in schema.fields:
        assert schema[field].namespace == default[field].namespace
        assert schema[field].feature_group == default[field].feature_group

    assert schema["text"].extractor("text", "a a") == {"A": 2}


def test_schema_from_config_uses_preprocessing_options():
    cfg = copy.deepcopy(load_data_config())
    cfg["preprocessing"]["features"]["weighting"] = "log"

    schema = schema_from_config(cfg)
    features = schema["text"].extractor("text", "a b")

    assert features == {"A": pytest.approx(1.0), "B": pytest.approx(1.0)}


def test_schema_from_config_rejects_unknown_kind():
    cfg = copy.deepcopy(load_data_config())
    cfg["schema"]["year"]["kind"] = "date"

    with pytest.raises(ValueError):
        schema_from_config(cfg)


def test_schema_from_config_requires_schema_section():
    cfg = copy.deepcopy(load_data_config())
    del cfg["schema"]

    with pytest.raises(KeyError):
        schema_from_config(cfg)
