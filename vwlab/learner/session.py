"""
Online learner session.

This module wraps scikit-learn's incremental estimators behind the narrow
interface the feature pipeline relies on:

- hash_space / hash_feature: deterministic namespace and feature hashing
- learn(example, label): one online update
- predict(example): scalar prediction
- model persistence to the "final regressor" path on close

The optimizer is SGDRegressor.partial_fit, optionally preceded by an online
MaxAbsScaler so that raw numeric features (e.g. a year) and term counts
share a learning rate. The model file is a joblib dump owned entirely by
this module.

Options can be given as a LearnerOptions instance, read from
config/learner.yaml, or parsed from a VW-style argument string:

    OnlineLearner(parse_learner_args("-f test1.model -b 18 -l 0.02"))
"""

from __future__ import annotations

import argparse
import logging
import os
import pickle
import shlex
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

import joblib
from sklearn.linear_model import SGDRegressor
from sklearn.preprocessing import MaxAbsScaler

from vwlab.errors import InvalidInput, ResourceError
from vwlab.features.schema import FeatureSchema
from vwlab.learner.example import Example, build_example
from vwlab.learner.hashing import DEFAULT_BITS, FeatureHasher
from vwlab.utils.training_utils import PROJECT_ROOT, load_yaml


logger = logging.getLogger(__name__)

DEFAULT_LEARNER_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "learner.yaml")

MODEL_FORMAT = "vwlab-sgd-v1"

LOSS_ALIASES = {
    "squared": "squared_error",
    "squared_error": "squared_error",
    "huber": "huber",
    "epsilon_insensitive": "epsilon_insensitive",
    "squared_epsilon_insensitive": "squared_epsilon_insensitive",
}

SCHEDULES = ("constant", "invscaling")


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LearnerOptions:
    bits: int = DEFAULT_BITS
    learning_rate: float = 0.02
    schedule: str = "constant"
    power_t: float = 0.25
    l2: float = 1e-6
    loss: str = "squared_error"
    normalize: bool = True
    random_state: int = 42
    final_regressor: Optional[str] = None
    initial_regressor: Optional[str] = None

    def __post_init__(self) -> None:
        if self.loss not in LOSS_ALIASES:
            raise InvalidInput(f"Unknown loss '{self.loss}'. Expected one of {sorted(LOSS_ALIASES)}.")
        if self.schedule not in SCHEDULES:
            raise InvalidInput(f"Unknown schedule '{self.schedule}'. Expected one of {SCHEDULES}.")
        if not 1 <= self.bits <= 30:
            raise InvalidInput(f"bits must be between 1 and 30, got {self.bits}.")
        if self.learning_rate <= 0:
            raise InvalidInput(f"learning_rate must be positive, got {self.learning_rate}.")
        if self.l2 < 0:
            raise InvalidInput(f"l2 must be non-negative, got {self.l2}.")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="learner", add_help=False, allow_abbrev=False, exit_on_error=False
    )
    parser.add_argument("-f", "--final_regressor", type=str, default=None)
    parser.add_argument("-i", "--initial_regressor", type=str, default=None)
    parser.add_argument("-b", "--bit_precision", type=int, default=None)
    parser.add_argument("-l", "--learning_rate", type=float, default=None)
    parser.add_argument("--power_t", type=float, default=None)
    parser.add_argument("--l2", type=float, default=None)
    parser.add_argument("--loss_function", type=str, default=None)
    parser.add_argument("--schedule", type=str, default=None)
    parser.add_argument("--random_seed", type=int, default=None)
    parser.add_argument("--no_normalize", action="store_true")
    return parser


def parse_learner_args(
    args: str,
    base: Optional[LearnerOptions] = None,
) -> LearnerOptions:
    """
    Parse a VW-style argument string into LearnerOptions.

    Parameters
    ----------
    args : str
        e.g. "-f test1.model -b 18 -l 0.02 --loss_function squared".
    base : Optional[LearnerOptions]
        Options that unspecified arguments fall back to.

    Returns
    -------
    LearnerOptions
        Parsed options.

    Raises
    ------
    InvalidInput
        On unknown arguments or values of the wrong type.
    """
    if args is None:
        raise InvalidInput("Learner arguments are required (use an empty string for defaults).")

    parser = _build_arg_parser()
    try:
        parsed, unknown = parser.parse_known_args(shlex.split(args))
    except argparse.ArgumentError as exc:
        raise InvalidInput(f"Invalid learner arguments '{args}': {exc}") from exc

    if unknown:
        raise InvalidInput(f"Unknown learner arguments: {unknown}")

    options = base or LearnerOptions()
    updates: Dict[str, Any] = {}
    if parsed.final_regressor is not None:
        updates["final_regressor"] = parsed.final_regressor
    if parsed.initial_regressor is not None:
        updates["initial_regressor"] = parsed.initial_regressor
    if parsed.bit_precision is not None:
        updates["bits"] = parsed.bit_precision
    if parsed.learning_rate is not None:
        updates["learning_rate"] = parsed.learning_rate
    if parsed.power_t is not None:
        updates["power_t"] = parsed.power_t
    if parsed.l2 is not None:
        updates["l2"] = parsed.l2
    if parsed.loss_function is not None:
        updates["loss"] = parsed.loss_function
    if parsed.schedule is not None:
        updates["schedule"] = parsed.schedule
    if parsed.random_seed is not None:
        updates["random_state"] = parsed.random_seed
    if parsed.no_normalize:
        updates["normalize"] = False

    return replace(options, **updates)


def load_learner_config(config_path: str = DEFAULT_LEARNER_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the learner configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the learner YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with "general", "learner" and "models" sections.

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    KeyError
        If required sections are missing.
    """
    cfg = load_yaml(config_path)

    for section in ("general", "learner", "models"):
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in learner config: {config_path}')

    return cfg


def options_from_config(cfg: Dict[str, Any], **overrides: Any) -> LearnerOptions:
    """Build LearnerOptions from the "learner" section of a learner config."""
    lcfg = cfg["learner"] or {}
    general_cfg = cfg.get("general", {}) or {}

    options = LearnerOptions(
        bits=int(lcfg.get("bits", DEFAULT_BITS)),
        learning_rate=float(lcfg.get("learning_rate", 0.02)),
        schedule=str(lcfg.get("schedule", "constant")),
        power_t=float(lcfg.get("power_t", 0.25)),
        l2=float(lcfg.get("l2", 1e-6)),
        loss=str(lcfg.get("loss", "squared_error")),
        normalize=bool(lcfg.get("normalize", True)),
        random_state=int(general_cfg.get("random_state", 42)),
    )
    return replace(options, **overrides)


# ---------------------------------------------------------------------------
# Model file helpers
# ---------------------------------------------------------------------------


def _check_writable(path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        raise ResourceError(f"Cannot open model file for writing, directory does not exist: {path}")
    if os.path.isdir(path):
        raise ResourceError(f"Cannot open model file for writing, path is a directory: {path}")
    if os.path.exists(path):
        if not os.access(path, os.W_OK):
            raise ResourceError(f"Cannot open model file for writing: {path}")
    elif not os.access(directory, os.W_OK):
        raise ResourceError(f"Cannot create model file in directory: {directory}")


def _load_model_state(path: str) -> Dict[str, Any]:
    if not os.path.isfile(path):
        raise ResourceError(f"Initial regressor not found: {path}")

    try:
        state = joblib.load(path)
    except (OSError, EOFError, pickle.UnpicklingError) as exc:
        raise ResourceError(f"Cannot read initial regressor: {path}") from exc

    if not isinstance(state, dict) or state.get("format") != MODEL_FORMAT:
        raise ResourceError(f"Not a {MODEL_FORMAT} model file: {path}")

    return state


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class OnlineLearner:
    """
    Online regression session with hashed, namespaced features.

    Use as a context manager so the model is written to the final regressor
    path on every exit path.
    """

    def __init__(
        self,
        options: Optional[LearnerOptions] = None,
        schema: Optional[FeatureSchema] = None,
    ) -> None:
        options = options or LearnerOptions()

        state: Optional[Dict[str, Any]] = None
        if options.initial_regressor:
            state = _load_model_state(options.initial_regressor)
            # Table size and normalization are fixed by the stored model.
            options = replace(
                options,
                bits=int(state["options"]["bits"]),
                normalize=bool(state["options"]["normalize"]),
            )

        if options.final_regressor:
            _check_writable(options.final_regressor)

        self.options = options
        self.schema = schema
        self.hasher = FeatureHasher(bits=options.bits)
        self.examples_seen = 0
        self._closed = False

        if state is not None:
            self._scaler = state["scaler"]
            self._estimator = state["estimator"]
            self.examples_seen = int(state.get("examples_seen", 0))
            logger.debug("Loaded initial regressor from %s", options.initial_regressor)
        else:
            self._scaler = MaxAbsScaler() if options.normalize else None
            self._estimator = SGDRegressor(
                loss=LOSS_ALIASES[options.loss],
                penalty="l2",
                alpha=options.l2,
                learning_rate=options.schedule,
                eta0=options.learning_rate,
                power_t=options.power_t,
                fit_intercept=True,
                random_state=options.random_state,
            )

    @classmethod
    def from_args(cls, args: str, schema: Optional[FeatureSchema] = None) -> "OnlineLearner":
        return cls(parse_learner_args(args), schema=schema)

    # -- hashing ------------------------------------------------------------

    def hash_space(self, namespace: str) -> int:
        return self.hasher.hash_space(namespace)

    def hash_feature(self, name: str, namespace_hash: int) -> int:
        return self.hasher.hash_feature(name, namespace_hash)

    # -- learning / prediction ----------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("OnlineLearner session has been closed.")

    @property
    def is_trained(self) -> bool:
        return hasattr(self._estimator, "coef_")

    def _vectorize(self, example: Example, update_scaler: bool = False):
        if example is None:
            raise InvalidInput("Example is required.")
        row = example.to_csr(self.options.bits)
        if self._scaler is None:
            return row
        if update_scaler:
            self._scaler.partial_fit(row)
        return self._scaler.transform(row)

    def learn(self, example: Example, label: Optional[float] = None) -> None:
        """
        Apply one online update.

        The explicit label wins over the example's own label; one of the
        two must be present.
        """
        self._check_open()
        if label is None:
            if example is None or example.label is None:
                raise InvalidInput("Cannot learn from an unlabeled example.")
            label = example.label

        row = self._vectorize(example, update_scaler=True)
        self._estimator.partial_fit(row, [float(label)])
        self.examples_seen += 1

    def predict(self, example: Example) -> float:
        """Return the scalar prediction; 0.0 before any update."""
        self._check_open()
        if not self.is_trained:
            if example is None:
                raise InvalidInput("Example is required.")
            return 0.0
        row = self._vectorize(example)
        return float(self._estimator.predict(row)[0])

    # -- typed records --------------------------------------------------------

    def _require_schema(self) -> FeatureSchema:
        if self.schema is None:
            raise ValueError("This session has no FeatureSchema; pass schema= to use records.")
        return self.schema

    def learn_record(self, record: Any, label: float) -> None:
        if label is None:
            raise InvalidInput("A label is required to learn from a record.")
        self.learn(build_example(self, record, self._require_schema(), label=label))

    def predict_record(self, record: Any) -> float:
        return self.predict(build_example(self, record, self._require_schema()))

    # -- persistence ----------------------------------------------------------

    def save(self, path: Optional[str] = None) -> str:
        """
        Write the model to path (default: the final regressor).

        Raises
        ------
        ValueError
            If no path is given and no final regressor is configured.
        ResourceError
            If the file cannot be opened for writing.
        """
        path = path or self.options.final_regressor
        if not path:
            raise ValueError("No model path given and no final regressor configured.")

        _check_writable(path)
        state = {
            "format": MODEL_FORMAT,
            "options": asdict(self.options),
            "scaler": self._scaler,
            "estimator": self._estimator,
            "examples_seen": self.examples_seen,
        }
        try:
            joblib.dump(state, path)
        except OSError as exc:
            raise ResourceError(f"Cannot write model file: {path}") from exc

        logger.debug("Saved model (%d examples seen) to %s", self.examples_seen, path)
        return path

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        try:
            if self.options.final_regressor:
                self.save()
        finally:
            self._closed = True

    def __enter__(self) -> "OnlineLearner":
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
