"""
Distance metrics and regression error measures.
"""

import numpy as np
from scipy.spatial import distance as scipy_distance
from sklearn.metrics import mean_absolute_error, mean_squared_error
from typing import Dict, Union, List


def compute_all_distances(point: np.ndarray, data: np.ndarray) -> np.ndarray:
    """
    Compute Euclidean distances from a point to all points in a dataset.

    Args:
        point: Query point as 1D numpy array
        data: Dataset as 2D numpy array (n_samples, n_features)

    Returns:
        Array of distances (n_samples,)
    """
    # scipy_distance.cdist is faster than a loop
    return scipy_distance.cdist([point], data, metric='euclidean')[0]


def compute_errors(
    y_true: Union[np.ndarray, List[float]],
    y_pred: Union[np.ndarray, List[float]]
) -> Dict[str, float]:
    """
    Summarize regression error between true and predicted outcomes.

    Returns:
        Dict with 'mae', 'rmse' and 'n' (number of predictions)
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if len(y_true) != len(y_pred):
        raise ValueError(f"y_true and y_pred must have same length "
                         f"(got {len(y_true)} and {len(y_pred)})")
    if len(y_true) == 0:
        return {"mae": float("nan"), "rmse": float("nan"), "n": 0}

    return {
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "rmse": float(np.sqrt(mean_squared_error(y_true, y_pred))),
        "n": len(y_true),
    }
