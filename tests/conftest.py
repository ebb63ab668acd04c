"""
Shared pytest fixtures.
"""

from __future__ import annotations

import os
from typing import Any, Dict

import pytest
import yaml

from vwlab.data.documents import DEFAULT_DATA_CONFIG_PATH, load_data_config


@pytest.fixture
def train_cfg(tmp_path) -> Dict[str, Any]:
    """Training config writing models/results under tmp_path, console-only logging."""
    return {
        "general": {"random_state": 42},
        "paths": {
            "models_dir": str(tmp_path / "models"),
            "results_dir": str(tmp_path / "results"),
            "logs_dir": str(tmp_path / "logs"),
        },
        "logging": {"level": "WARNING", "to_file": False},
    }


@pytest.fixture
def write_data_config(tmp_path):
    """
    Write a data.yaml pointing at a CSV with the given content and return
    the config path.
    """

    def _write(csv_text: str) -> str:
        csv_path = tmp_path / "documents.csv"
        csv_path.write_text(csv_text, encoding="utf-8")

        cfg = load_data_config(DEFAULT_DATA_CONFIG_PATH)
        cfg["dataset"]["path"] = str(csv_path)

        config_path = os.path.join(str(tmp_path), "data.yaml")
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(cfg, f)
        return config_path

    return _write
