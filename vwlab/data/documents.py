"""
Document loading utilities for the toy author/text/year dataset.

This module is responsible for:
- reading the dataset configuration from config/data.yaml
- loading the raw CSV file into a pandas DataFrame
- validating that every row carries author, text, year and label
- converting rows into immutable Document records with float labels

Unlike a typical cleaning step, rows with missing fields are never dropped
or coerced: a missing required value is reported as InvalidInput so the
caller can fix the data.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, List

import pandas as pd

from vwlab.errors import InvalidInput
from vwlab.utils.training_utils import PROJECT_ROOT, load_yaml, resolve_path


DEFAULT_DATA_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "data.yaml")

REQUIRED_SECTIONS = ("dataset", "probe", "preprocessing", "schema")


@dataclass(frozen=True)
class Document:
    author: str
    text: str
    year: int


@dataclass(frozen=True)
class LabeledDocument:
    document: Document
    label: float


def validate_document(document: Document) -> Document:
    """
    Check that every Document field is present and correctly typed.

    Parameters
    ----------
    document : Document
        Record to validate.

    Returns
    -------
    Document
        The same record, for chaining.

    Raises
    ------
    InvalidInput
        If the document or any of its fields is None or mistyped.
    """
    if document is None:
        raise InvalidInput("Document is required.")

    for field in ("author", "text"):
        value = getattr(document, field, None)
        if value is None:
            raise InvalidInput(f"Document field '{field}' is required.")
        if not isinstance(value, str):
            raise InvalidInput(f"Document field '{field}' must be str, got {type(value).__name__}.")

    year = getattr(document, "year", None)
    if year is None:
        raise InvalidInput("Document field 'year' is required.")
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidInput(f"Document field 'year' must be int, got {type(year).__name__}.")

    return document


def load_data_config(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the full data configuration dictionary.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "dataset", "probe", "preprocessing" and
        "schema" sections.
    """
    cfg = load_yaml(config_path)

    for section in REQUIRED_SECTIONS:
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in data config: {config_path}')

    return cfg


def _row_to_document(row: pd.Series, columns: Dict[str, str], row_number: int) -> LabeledDocument:
    for name, column in columns.items():
        if pd.isna(row[column]):
            raise InvalidInput(f"Row {row_number}: missing value for '{name}' (column '{column}').")

    year_value = row[columns["year"]]
    try:
        is_integral = float(year_value) == int(float(year_value))
    except (TypeError, ValueError, OverflowError):
        is_integral = False
    if not is_integral:
        raise InvalidInput(f"Row {row_number}: year must be an integer, got {year_value!r}.")

    label_value = row[columns["label"]]
    try:
        label = float(label_value)
    except (TypeError, ValueError):
        label = math.nan
    if not math.isfinite(label):
        raise InvalidInput(f"Row {row_number}: label must be a finite number, got {label_value!r}.")

    document = Document(
        author=str(row[columns["author"]]),
        text=str(row[columns["text"]]),
        year=int(float(year_value)),
    )
    return LabeledDocument(document=document, label=label)


def load_documents(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> List[LabeledDocument]:
    """
    Load the labeled document dataset according to the configuration.

    This function:
    - reads the CSV specified in config/data.yaml
    - ensures the author, text, year and label columns exist
    - rejects rows with missing values
    - returns LabeledDocuments in file order

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    List[LabeledDocument]
        Documents paired with their numeric labels.

    Raises
    ------
    FileNotFoundError
        If the dataset CSV file cannot be found.
    ValueError
        If required columns are missing.
    InvalidInput
        If the CSV has no rows, or a row is missing a value or carries a
        non-integer year or non-numeric label.
    """
    cfg = load_data_config(config_path)
    dataset_cfg = cfg["dataset"]

    csv_path = resolve_path(dataset_cfg.get("path", "data/raw/documents.csv"))
    columns = {
        "author": dataset_cfg.get("author_column", "author"),
        "text": dataset_cfg.get("text_column", "text"),
        "year": dataset_cfg.get("year_column", "year"),
        "label": dataset_cfg.get("label_column", "label"),
    }

    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Dataset CSV not found at: {csv_path}")

    # Cells are read verbatim as strings ("007" stays "007"); only empty
    # cells count as missing, so words such as "NA" stay text.
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, na_values=[""])

    missing_cols = [col for col in columns.values() if col not in df.columns]
    if missing_cols:
        raise ValueError(
            f"Missing required column(s) in dataset CSV: {missing_cols}. "
            f"Available columns: {list(df.columns)}"
        )

    if df.empty:
        raise InvalidInput(f"Dataset CSV has no rows: {csv_path}")

    return [
        _row_to_document(row, columns, row_number)
        for row_number, (_, row) in enumerate(df.iterrows(), start=1)
    ]


def load_probe_document(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Document:
    """
    Return the unlabeled probe document declared in the "probe" section.

    Raises
    ------
    InvalidInput
        If a probe field is missing or mistyped.
    """
    probe_cfg = load_data_config(config_path)["probe"] or {}
    document = Document(
        author=probe_cfg.get("author"),
        text=probe_cfg.get("text"),
        year=probe_cfg.get("year"),
    )
    return validate_document(document)
