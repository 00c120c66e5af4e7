"""
Case and adaptation rule value objects.
"""

import numbers
import numpy as np
import pandas as pd
from typing import Optional, Sequence, Tuple, Any

from .exceptions import SchemaError, NoNumericTargetError, MissingOutcomeError


def default_feature_names(n_features: int) -> Tuple[str, ...]:
    """Names used when a case does not carry its own feature names."""
    return tuple(f"feature_{i}" for i in range(n_features))


def is_real_number(value: Any) -> bool:
    """True for ints and floats (numpy included), False for bools and everything else."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, numbers.Real)


class Case:
    """
    A single observation: numeric feature vector, real outcome and weight.

    The outcome may be ``None`` (or NaN) for queries and for observations whose
    outcome is not known yet. The schema of a case is the tuple of its feature
    names; two cases are compatible when their schemas are equal.
    """

    def __init__(
        self,
        features: Any,
        outcome: Optional[Any] = None,
        weight: float = 1.0,
        feature_names: Optional[Sequence[str]] = None
    ):
        features = np.asarray(features)
        if features.ndim != 1:
            raise SchemaError(f"Case features must be 1-D (got shape {features.shape})")
        if not (np.issubdtype(features.dtype, np.integer) or
                np.issubdtype(features.dtype, np.floating)):
            raise SchemaError(f"Only numeric features are supported (got dtype {features.dtype})")

        if feature_names is not None and len(feature_names) != len(features):
            raise SchemaError(f"Got {len(feature_names)} feature names for "
                              f"{len(features)} features")

        if weight < 0:
            raise ValueError(f"Case weight must be non-negative (got {weight})")

        self.features = features.astype(float)
        self.outcome = outcome
        self.weight = float(weight)
        self.feature_names = tuple(feature_names) if feature_names is not None else None

    @classmethod
    def from_series(cls, row: pd.Series, outcome: Optional[Any] = None, weight: float = 1.0) -> "Case":
        """Build a case from a pandas row, using its index as feature names."""
        return cls(row.values, outcome=outcome, weight=weight,
                   feature_names=[str(name) for name in row.index])

    @property
    def n_features(self) -> int:
        return len(self.features)

    @property
    def schema(self) -> Tuple[str, ...]:
        if self.feature_names is not None:
            return self.feature_names
        return default_feature_names(self.n_features)

    def has_outcome(self) -> bool:
        """False when the outcome is unknown (None or NaN)."""
        if self.outcome is None:
            return False
        if is_real_number(self.outcome) and np.isnan(self.outcome):
            return False
        return True

    def outcome_value(self) -> float:
        """
        The outcome as a float.

        Raises:
            MissingOutcomeError: the outcome is unknown
            NoNumericTargetError: the outcome is not a real number
        """
        if not self.has_outcome():
            raise MissingOutcomeError("Case has no known outcome")
        if not is_real_number(self.outcome):
            raise NoNumericTargetError(f"Case outcome must be a real number "
                                       f"(got {type(self.outcome).__name__})")
        return float(self.outcome)

    def __repr__(self) -> str:
        weight_str = f", weight={self.weight}" if self.weight != 1.0 else ""
        return f"Case(features={self.features.tolist()}, outcome={self.outcome}{weight_str})"


class AdaptationRule:
    """
    Transformation from a source case to a destination case.

    ``features`` holds ``source.features - destination.features`` and
    ``outcome_delta`` holds ``source.outcome - destination.outcome``. A query
    rule built from a query with no outcome has ``outcome_delta=None``.
    """

    def __init__(
        self,
        features: np.ndarray,
        outcome_delta: Optional[float],
        source_index: Optional[int] = None,
        destination_index: Optional[int] = None
    ):
        self.features = features
        self.outcome_delta = outcome_delta
        self.source_index = source_index
        self.destination_index = destination_index

    def __repr__(self) -> str:
        delta_str = "None" if self.outcome_delta is None else f"{self.outcome_delta:.4f}"
        return (f"AdaptationRule(source={self.source_index}, destination={self.destination_index}, "
                f"features={self.features.tolist()}, outcome_delta={delta_str})")
