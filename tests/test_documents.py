"""
Basic tests for document loading utilities.

These tests validate that:

- the data configuration can be loaded and contains its core sections
- the bundled CSV loads into labeled, immutable Document records
- missing values and missing columns are reported instead of dropped
"""

from __future__ import annotations

import dataclasses

import pytest

from vwlab.data.documents import (
    Document,
    load_data_config,
    load_documents,
    load_probe_document,
    validate_document,
)
from vwlab.errors import InvalidInput


def test_load_data_config_has_required_keys():
    cfg = load_data_config()

    for section in ("dataset", "probe", "preprocessing", "schema"):
        assert section in cfg

    assert "path" in cfg["dataset"]
    assert set(cfg["schema"]) == {"author", "text", "year"}


def test_load_data_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_data_config(str(tmp_path / "nope.yaml"))


def test_load_documents_returns_labeled_records():
    dataset = load_documents()

    assert [item.document.author for item in dataset] == ["Broyden", "Fletcher", "Goldfarb"]
    assert [item.label for item in dataset] == [0.0, 1.0, 1.0]

    first = dataset[0].document
    assert first.year == 1999
    assert isinstance(first.year, int)
    assert first.text.startswith("Lorem ipsum")


def test_documents_are_immutable():
    document = load_documents()[0].document
    with pytest.raises(dataclasses.FrozenInstanceError):
        document.author = "Someone"  # type: ignore[misc]


def test_load_probe_document():
    probe = load_probe_document()

    assert probe == Document(
        author="Shanno",
        text=probe.text,
        year=2019,
    )
    assert probe.text.startswith("Lorem ipsum")


def test_load_documents_rejects_missing_values(write_data_config):
    config_path = write_data_config(
        "author,text,year,label\n"
        "Broyden,some text,1999,0.0\n"
        ",other text,1989,1.0\n"
    )

    with pytest.raises(InvalidInput, match="Row 2"):
        load_documents(config_path)


def test_load_documents_rejects_non_integer_year(write_data_config):
    config_path = write_data_config(
        "author,text,year,label\n"
        "Broyden,some text,19.5,0.0\n"
    )

    with pytest.raises(InvalidInput):
        load_documents(config_path)


def test_load_documents_keeps_na_words(write_data_config):
    config_path = write_data_config(
        "author,text,year,label\n"
        "NA,None of this,1999,1.0\n"
    )

    (item,) = load_documents(config_path)
    assert item.document.author == "NA"
    assert item.document.text == "None of this"


def test_load_documents_keeps_numeric_looking_text(write_data_config):
    config_path = write_data_config(
        "author,text,year,label\n"
        "007,3.10,1999,0.0\n"
        "0042,1e3,1989,1.0\n"
    )

    items = load_documents(config_path)
    assert [(i.document.author, i.document.text) for i in items] == [
        ("007", "3.10"),
        ("0042", "1e3"),
    ]
    assert [i.document.year for i in items] == [1999, 1989]
    assert [i.label for i in items] == [0.0, 1.0]


def test_load_documents_rejects_non_numeric_label(write_data_config):
    config_path = write_data_config(
        "author,text,year,label\n"
        "Broyden,some text,1999,0.0\n"
        "Fletcher,other text,1989,spam\n"
    )

    with pytest.raises(InvalidInput, match="Row 2: label"):
        load_documents(config_path)


def test_load_documents_rejects_empty_dataset(write_data_config):
    config_path = write_data_config("author,text,year,label\n")

    with pytest.raises(InvalidInput, match="no rows"):
        load_documents(config_path)


def test_load_documents_missing_column(write_data_config):
    config_path = write_data_config("author,text,label\nBroyden,some text,0.0\n")

    with pytest.raises(ValueError, match="year"):
        load_documents(config_path)


def test_load_documents_missing_csv(write_data_config, tmp_path):
    config_path = write_data_config("author,text,year,label\n")
    (tmp_path / "documents.csv").unlink()

    with pytest.raises(FileNotFoundError):
        load_documents(config_path)


@pytest.mark.parametrize(
    "document",
    [
        Document(author=None, text="x", year=1999),  # type: ignore[arg-type]
        Document(author="a", text=None, year=1999),  # type: ignore[arg-type]
        Document(author="a", text="x", year=None),  # type: ignore[arg-type]
        Document(author="a", text="x", year=True),
        Document(author="a", text=3, year=1999),  # type: ignore[arg-type]
    ],
)
def test_validate_document_rejects_bad_fields(document):
    with pytest.raises(InvalidInput):
        validate_document(document)


def test_validate_document_accepts_empty_text():
    document = Document(author="a", text="", year=2000)
    assert validate_document(document) is document
