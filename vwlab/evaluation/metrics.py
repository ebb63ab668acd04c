"""
Evaluation metrics for scalar online-learner predictions.

The learner outputs a real-valued score per example; labels are class
values (0.0 / 1.0 in the demo dataset). We report:

- mean absolute error
- root mean squared error
- rounded accuracy: accuracy of predictions rounded to the nearest label
- per-example absolute errors

The helpers here are used by vwlab.training.train_online.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence, Union

import numpy as np
from sklearn.metrics import accuracy_score, mean_absolute_error, mean_squared_error


ArrayLike = Union[Sequence[float], np.ndarray]


def compute_prediction_metrics(
    y_true: ArrayLike,
    y_pred: ArrayLike,
) -> Dict[str, Any]:
    """
    Compute regression-style and rounded classification metrics.

    Parameters
    ----------
    y_true : ArrayLike
        Ground-truth labels.
    y_pred : ArrayLike
        Scalar predictions, same length as y_true.

    Returns
    -------
    Dict[str, Any]
        Dictionary with keys "mae", "rmse", "rounded_accuracy" and
        "abs_error" (list of per-example absolute errors).

    Raises
    ------
    ValueError
        If the inputs are empty or have different lengths.
    """
    y_true_arr = np.asarray(y_true, dtype=float)
    y_pred_arr = np.asarray(y_pred, dtype=float)

    if y_true_arr.size == 0:
        raise ValueError("Cannot compute metrics on empty inputs.")
    if y_true_arr.shape != y_pred_arr.shape:
        raise ValueError(
            f"y_true and y_pred must have the same shape, got {y_true_arr.shape} and {y_pred_arr.shape}."
        )

    mae = mean_absolute_error(y_true_arr, y_pred_arr)
    rmse = float(np.sqrt(mean_squared_error(y_true_arr, y_pred_arr)))

    acc = accuracy_score(
        np.round(y_true_arr).astype(int),
        np.round(y_pred_arr).astype(int),
    )

    return {
        "mae": float(mae),
        "rmse": rmse,
        "rounded_accuracy": float(acc),
        "abs_error": np.abs(y_true_arr - y_pred_arr).tolist(),
    }
