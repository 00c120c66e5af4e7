"""
Mean-value fallback used when the case bank is empty.
"""

import logging
import numpy as np
from typing import Sequence
from sklearn.dummy import DummyRegressor

from .cases import Case

logger = logging.getLogger(__name__)


class MeanEstimator:
    """
    Predicts the weighted mean outcome of the cases it was fitted on.

    Fitted on no cases (or only zero-weight cases) it predicts 0.0.
    """

    def __init__(self):
        self.model = None
        self.n_cases = 0

    def fit(self, cases: Sequence[Case]) -> "MeanEstimator":
        known = [case for case in cases if case.has_outcome()]
        self.n_cases = len(known)
        weights = np.array([case.weight for case in known], dtype=float)
        if not known or weights.sum() == 0:
            self.model = None
            return self

        X = np.vstack([case.features for case in known])
        y = np.array([case.outcome_value() for case in known])
        self.model = DummyRegressor(strategy='mean')
        self.model.fit(X, y, sample_weight=weights)
        logger.debug("Mean fallback fitted on %d cases", self.n_cases)
        return self

    def predict(self, query: Case) -> float:
        if self.model is None:
            return 0.0
        return float(self.model.predict([query.features])[0])

    def __repr__(self) -> str:
        return f"MeanEstimator(n_cases={self.n_cases})"
