"""
End-to-end online-learning demo on the toy document dataset.

This module exercises the learner two ways over the same data:

- "typed":   the session owns the FeatureSchema and learns directly from
             Document records (learn_record / predict_record)
- "builder": every example is assembled explicitly inside scoped
             ExampleBuilder blocks before being handed to the session

For each approach it:
- runs `epochs` online passes over the labeled documents
- predicts the first document (should reproduce its label) and, for the
  builder approach, the probe document (should land close to it)
- computes metrics over the training set
- writes metrics_<approach>.json and online_results.csv under results_dir
- leaves the trained model at <models_dir>/<model file>

This module is designed to be callable both as a library function and
as a standalone script (via `python -m vwlab.training.train_online`).
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from vwlab.data.documents import (
    DEFAULT_DATA_CONFIG_PATH,
    Document,
    LabeledDocument,
    load_data_config,
    load_documents,
    load_probe_document,
)
from vwlab.evaluation.metrics import compute_prediction_metrics
from vwlab.features.schema import FeatureSchema, schema_from_config
from vwlab.learner.example import ExampleBuilder, populate_example
from vwlab.learner.session import (
    DEFAULT_LEARNER_CONFIG_PATH,
    OnlineLearner,
    load_learner_config,
    options_from_config,
)
from vwlab.utils.training_utils import (
    DEFAULT_TRAIN_CONFIG_PATH,
    ensure_dir_exists,
    get_logger,
    load_train_config,
    resolve_path,
    seed_everything,
)


APPROACHES = ("typed", "builder")


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _predict_with_builder(session: OnlineLearner, document: Document, schema: FeatureSchema) -> float:
    with ExampleBuilder(session) as builder:
        populate_example(builder, document, schema)
        example = builder.create_example()
    return session.predict(example)


def _learn_with_builder(
    session: OnlineLearner,
    document: Document,
    label: float,
    schema: FeatureSchema,
) -> None:
    with ExampleBuilder(session) as builder:
        populate_example(builder, document, schema, label=label)
        example = builder.create_example()
    session.learn(example)


def run_typed_approach(
    session: OnlineLearner,
    dataset: List[LabeledDocument],
    epochs: int,
) -> List[float]:
    """
    Train through the typed-record interface and return training-set
    predictions in dataset order.
    """
    for _ in range(epochs):
        for item in dataset:
            session.learn_record(item.document, item.label)
    return [session.predict_record(item.document) for item in dataset]


def run_builder_approach(
    session: OnlineLearner,
    dataset: List[LabeledDocument],
    epochs: int,
    schema: FeatureSchema,
) -> List[float]:
    """
    Train through explicit ExampleBuilder scopes and return training-set
    predictions in dataset order.
    """
    for _ in range(epochs):
        for item in dataset:
            _learn_with_builder(session, item.document, item.label, schema)
    return [_predict_with_builder(session, item.document, schema) for item in dataset]


# ---------------------------------------------------------------------------
# Training + evaluation
# ---------------------------------------------------------------------------


def train_and_evaluate_online_learner(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    learner_config_path: str = DEFAULT_LEARNER_CONFIG_PATH,
    train_config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
    train_cfg: Optional[Dict[str, Any]] = None,
) -> pd.DataFrame:
    """
    Run both demo approaches and return one row of metrics per approach.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    learner_config_path : str
        Path to config/learner.yaml.
    train_config_path : str
        Path to config/train.yaml. Ignored when train_cfg is given.
    train_cfg : Optional[Dict[str, Any]]
        Already-loaded training configuration (useful for overriding paths).

    Returns
    -------
    pd.DataFrame
        Columns: ["approach", "model_path", "first_prediction",
        "probe_prediction", "mae", "rmse", "rounded_accuracy"].
    """
    if train_cfg is None:
        train_cfg = load_train_config(train_config_path)
    data_cfg = load_data_config(data_config_path)
    learner_cfg = load_learner_config(learner_config_path)

    seed_everything(int(train_cfg["general"].get("random_state", 42)))

    logger = get_logger(
        name="train_online",
        config=train_cfg,
        log_file_suffix="online",
    )

    dataset = load_documents(config_path=data_config_path)
    probe = load_probe_document(config_path=data_config_path)
    schema = schema_from_config(data_cfg)
    epochs = int(learner_cfg["general"].get("epochs", 100))

    logger.info("Loaded %d labeled documents.", len(dataset))
    logger.info("Schema fields: %s", schema.fields)
    logger.info("Running %d epochs per approach.", epochs)

    results_dir = resolve_path(train_cfg["paths"]["results_dir"])
    models_dir = resolve_path(train_cfg["paths"]["models_dir"])
    ensure_dir_exists(results_dir)
    ensure_dir_exists(models_dir)

    labels = [item.label for item in dataset]
    first = dataset[0]
    records = []

    for approach in APPROACHES:
        logger.info("=" * 80)
        logger.info("Approach: %s", approach)

        model_path = os.path.join(models_dir, learner_cfg["models"][approach])
        options = options_from_config(learner_cfg, final_regressor=model_path)

        with OnlineLearner(options, schema=schema) as session:
            if approach == "typed":
                predictions = run_typed_approach(session, dataset, epochs)
                probe_prediction = session.predict_record(probe)
            else:
                predictions = run_builder_approach(session, dataset, epochs, schema)
                probe_prediction = _predict_with_builder(session, probe, schema)
            examples_seen = session.examples_seen

        first_prediction = predictions[0]
        logger.info("Learned from %d examples; model saved to %s", examples_seen, model_path)
        logger.info(
            "First document (%s): label %.1f, prediction %.4f",
            first.document.author,
            first.label,
            first_prediction,
        )
        logger.info("Probe document (%s): prediction %.4f", probe.author, probe_prediction)

        if round(first_prediction, 1) != first.label:
            logger.warning(
                "First document prediction %.4f does not reproduce its label %.1f.",
                first_prediction,
                first.label,
            )
        if round(probe_prediction) != round(first.label):
            logger.warning(
                "Probe prediction %.4f is not classified like the first document (%.1f).",
                probe_prediction,
                first.label,
            )

        metrics = compute_prediction_metrics(labels, predictions)
        logger.info(
            "Metrics for %s - mae: %.4f, rmse: %.4f, rounded acc: %.4f",
            approach,
            metrics["mae"],
            metrics["rmse"],
            metrics["rounded_accuracy"],
        )

        record = {
            "approach": approach,
            "model_path": model_path,
            "first_prediction": first_prediction,
            "probe_prediction": probe_prediction,
            **metrics,
        }

        metrics_json_path = os.path.join(results_dir, f"metrics_{approach}.json")
        with open(metrics_json_path, "w", encoding="utf-8") as f:
            json.dump({**record, "predictions": predictions}, f, indent=2)
        logger.info("Saved metrics JSON for %s to %s", approach, metrics_json_path)

        records.append(record)

    results_df = pd.DataFrame(records).drop(columns=["abs_error"])
    csv_path = os.path.join(results_dir, "online_results.csv")
    results_df.to_csv(csv_path, index=False)
    logger.info("Saved aggregated results to %s", csv_path)

    return results_df


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """
    Main entry point when running this module as a script.
    """
    _ = train_and_evaluate_online_learner()


if __name__ == "__main__":
    main()
