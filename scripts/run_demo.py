"""
Run the online-learning demo on the toy document dataset.

This script is a convenience wrapper around
`vwlab.training.train_online.train_and_evaluate_online_learner`, which:

- loads the labeled documents and the probe document
- trains one session through typed records and one through explicit
  example builders
- predicts the first document and the probe
- writes metrics under experiments/results/
- saves trained models under experiments/models/

Usage (from project root):

    python -m scripts.run_demo
    # or
    python scripts/run_demo.py
"""

from __future__ import annotations

import argparse

from vwlab.data.documents import DEFAULT_DATA_CONFIG_PATH
from vwlab.learner.session import DEFAULT_LEARNER_CONFIG_PATH
from vwlab.training.train_online import train_and_evaluate_online_learner
from vwlab.utils.training_utils import DEFAULT_TRAIN_CONFIG_PATH, get_logger, load_train_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the online-learning demo on the toy document dataset."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default=DEFAULT_DATA_CONFIG_PATH,
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--learner-config",
        type=str,
        default=DEFAULT_LEARNER_CONFIG_PATH,
        help="Path to learner config YAML (default: config/learner.yaml).",
    )
    parser.add_argument(
        "--train-config",
        type=str,
        default=DEFAULT_TRAIN_CONFIG_PATH,
        help="Path to global train config YAML (default: config/train.yaml).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    train_cfg = load_train_config(args.train_config)
    logger = get_logger(
        name="run_demo",
        config=train_cfg,
        log_file_suffix="demo",
    )

    logger.info("=" * 80)
    logger.info("Starting online-learning demo.")
    logger.info(
        "Configs: data=%s, learner=%s, train=%s",
        args.data_config,
        args.learner_config,
        args.train_config,
    )

    results_df = train_and_evaluate_online_learner(
        data_config_path=args.data_config,
        learner_config_path=args.learner_config,
        train_cfg=train_cfg,
    )

    if not results_df.empty:
        logger.info("Completed demo. Results:\n%s", results_df.to_string(index=False))
    else:
        logger.warning("Demo finished, but the results DataFrame is empty.")


if __name__ == "__main__":
    main()
