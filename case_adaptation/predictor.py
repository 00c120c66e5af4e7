"""
Main EARRegressor class: case-based regression with ensembles of adaptation rules.

Predictions start from the outcomes of the k nearest cases and adjust each one
with adaptation rules learned from the case bank itself. Rules are pairwise
differences between cases in an expanded neighborhood of the query and are
retrieved with a second nearest neighbor search over rule space.
"""

import logging
import threading
import numpy as np
import pandas as pd
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

from .case_bank import CaseBank
from .cases import Case
from .config import AdaptationConfig
from .exceptions import MissingOutcomeError
from .explanation import AdaptationExplanation, BaseCaseAdaptation
from .fallback import MeanEstimator
from .indexing import IndexStrategy, create_index
from .retrieval import CaseNeighborIndex, RuleNeighborIndex
from .rules import generate_rules, make_query_rule


class EARRegressor:
    """
    Ensembles of Adaptations for Regression.

    For a query:
    - Retrieves round(k * o) nearest cases and builds every pairwise
      adaptation rule between them
    - Keeps the k nearest as base cases
    - Adjusts each base case outcome by the mean outcome delta of the l rules
      closest to (query - base case)
    - Averages the adjusted outcomes

    With ``l=0`` this is plain k-NN regression. When the bank is empty the
    prediction comes from a mean-value fallback.

    All public methods hold one lock for their full duration, so a predictor
    can be shared between threads.

    Example:
        >>> from case_adaptation import EARRegressor
        >>> model = EARRegressor(k=3, l=2, o=2).fit(X_train, y_train)
        >>> y_pred = model.predict(X_test)
        >>> print(model.explain_instance(X_test[0]).summary())
    """

    def __init__(
        self,
        k: int = 1,
        l: int = 1,
        o: float = 1.0,
        window_size: int = 0,
        case_search: str = 'brute',
        rule_search: str = 'brute',
        leaf_size: int = 30,
        normalize: bool = False,
        config: Optional[AdaptationConfig] = None
    ):
        """
        Initialize the predictor. No cases are indexed until ``train``/``fit``.

        Args:
            k: Number of base cases (default: 1)
            l: Adaptation rules applied per base case, 0 disables adaptation (default: 1)
            o: Rule generation neighborhood scale factor (default: 1.0)
            window_size: Maximum number of cases kept, oldest dropped first (0 = no limit)
            case_search: Case index method - 'brute', 'kd_tree', 'ball_tree' (default: 'brute')
            rule_search: Rule index method - 'brute', 'kd_tree', 'ball_tree' (default: 'brute')
            leaf_size: Leaf size for tree indices
            normalize: Rescale features by their range over the bank before measuring distance
            config: Complete configuration; overrides the other arguments when given

        Raises:
            ConfigurationError: any setting is out of range
        """
        if config is None:
            config = AdaptationConfig(k=k, l=l, o=o, window_size=window_size,
                                      case_search=case_search, rule_search=rule_search,
                                      leaf_size=leaf_size, normalize=normalize)
        self.config = config
        self.bank = CaseBank(config.window_size)
        self.case_index = CaseNeighborIndex(self._make_strategy(config.case_search), config.normalize)
        self.fallback = MeanEstimator()
        self.is_trained = False
        self._lock = threading.RLock()

    def _make_strategy(self, method: str) -> IndexStrategy:
        return create_index(method, **self.config.index_kwargs(method))

    # --- training ---

    def train(self, cases: Iterable[Case]) -> "EARRegressor":
        """
        Replace the case bank with ``cases`` and index them.

        Raises:
            SchemaError: cases do not share one schema
            NoNumericTargetError: an outcome is not a real number
        """
        with self._lock:
            self.config.validate()
            cases = list(cases)
            self.bank.initialize(cases, self.config.window_size)

            logger.info("Building case index (k=%d, l=%d, o=%s, search=%s)...",
                        self.config.k, self.config.l, self.config.o, self.config.case_search)
            self.case_index = CaseNeighborIndex(self._make_strategy(self.config.case_search),
                                                self.config.normalize)
            self.case_index.rebuild(self.bank)

            # The fallback sees the whole batch, not only the windowed cases
            self.fallback = MeanEstimator().fit(cases)
            self.is_trained = True
            logger.info("Index built on %d training cases", self.bank.size())
        return self

    def fit(
        self,
        X: Union[np.ndarray, pd.DataFrame],
        y: Union[np.ndarray, pd.Series, List],
        sample_weight: Optional[Union[np.ndarray, List]] = None,
        feature_names: Optional[List[str]] = None
    ) -> "EARRegressor":
        """
        Train from a feature matrix and outcome vector.

        Args:
            X: Training features (n_samples, n_features)
            y: Training outcomes (n_samples,), NaN for unknown
            sample_weight: Per-case weights (default: all 1.0)
            feature_names: Names of features (taken from DataFrame columns if omitted)
        """
        if isinstance(X, pd.DataFrame):
            if feature_names is None:
                feature_names = [str(c) for c in X.columns]
            X = X.values
        else:
            X = np.asarray(X)

        if isinstance(y, (pd.Series, list)):
            y = np.asarray(y)

        if len(X) != len(y):
            raise ValueError(f"X and y must have same length "
                             f"(got {len(X)} and {len(y)})")

        if sample_weight is None:
            sample_weight = np.ones(len(X))
        elif len(sample_weight) != len(X):
            raise ValueError(f"sample_weight has {len(sample_weight)} items, "
                             f"expected {len(X)}")

        cases = [
            Case(features, outcome=outcome, weight=weight, feature_names=feature_names)
            for features, outcome, weight in zip(X, y, sample_weight)
        ]
        return self.train(cases)

    def update(self, case: Case) -> None:
        """
        Add one case to the bank.

        Cases with an unknown outcome are skipped. If the window forced an
        eviction the case index is rebuilt, otherwise the case is inserted.

        Raises:
            SchemaError: the case does not match the bank's schema
            NoNumericTargetError: the outcome is not a real number
        """
        with self._lock:
            case = self._as_case(case)
            index_current = not self.case_index.is_stale(self.bank)
            try:
                evicted = self.bank.append(case)
            except MissingOutcomeError:
                logger.debug("Skipping update: case has no known outcome")
                return

            if evicted or not index_current:
                self.case_index.rebuild(self.bank)
            else:
                self.case_index.insert(case, self.bank)

    # --- prediction ---

    def _as_case(self, query: Any) -> Case:
        """Accept a Case, a pandas row or a plain vector."""
        if isinstance(query, Case):
            return query
        if isinstance(query, pd.Series):
            return Case.from_series(query)
        features = np.asarray(query)
        schema = self.bank.schema
        # Plain vectors take the bank's feature names
        names = schema if schema is not None and features.ndim == 1 and len(schema) == len(features) else None
        return Case(features, feature_names=names)

    def _ensure_index(self) -> None:
        self.bank.window_size = self.config.window_size
        evicted = self.bank.enforce_window()
        if evicted or self.case_index.is_stale(self.bank):
            self.case_index.rebuild(self.bank)

    def neighborhood_size(self, n_cases: Optional[int] = None) -> int:
        """
        Number of cases retrieved for rule generation: round(k * o).

        ``o`` is reduced when k * o exceeds n * (n - 1), the number of ordered
        case pairs in the bank. That bound compares a case count with a rule
        count; it is kept as is. The reduced factor never drops below 1 and is
        not written back to the configuration.
        """
        if n_cases is None:
            n_cases = self.bank.size()
        k, o = self.config.k, self.config.o
        n_pairs = n_cases * (n_cases - 1)
        if k * o > n_pairs:
            # Floored at 1 so tiny banks still retrieve k cases; k * o may stay above n_pairs
            o = max(1, n_pairs // k)
        # round half up
        return int(np.floor(k * o + 0.5))

    def _adapt(self, query: Case, true_outcome: Optional[float] = None) -> AdaptationExplanation:
        self.bank.check_schema(query)
        self._ensure_index()

        if self.bank.size() == 0:
            return AdaptationExplanation(
                query=query,
                prediction=self.fallback.predict(query),
                base_cases=[],
                used_fallback=True,
                true_outcome=true_outcome,
            )

        k, l = self.config.k, self.config.l
        neighborhood = self.case_index.nearest(query, self.neighborhood_size())
        rules = generate_rules([case for case, _ in neighborhood])
        rule_index = RuleNeighborIndex(rules, self._make_strategy(self.config.rule_search),
                                       scale=self.case_index.feature_scale())

        base_cases = []
        for case, distance in neighborhood[:k]:
            applied = []
            adjustment = 0.0
            if l > 0:
                applied = rule_index.nearest(make_query_rule(query, case), l)
                if applied:
                    adjustment = float(np.mean([rule.outcome_delta for rule, _ in applied]))
            base_cases.append(BaseCaseAdaptation(case, distance, applied, adjustment))

        # Divides by k even when the bank holds fewer than k cases
        prediction = sum(b.adapted_outcome for b in base_cases) / k
        logger.debug("Predicted %.4f from %d base cases and %d rules",
                     prediction, len(base_cases), len(rules))

        return AdaptationExplanation(
            query=query,
            prediction=prediction,
            base_cases=base_cases,
            n_neighborhood=len(neighborhood),
            n_rules=len(rules),
            true_outcome=true_outcome,
            feature_names=list(self.bank.schema),
        )

    def predict_one(self, query: Union[Case, np.ndarray, pd.Series, List]) -> float:
        """
        Predict the outcome of a single query.

        Raises:
            SchemaError: the query does not match the bank's schema
        """
        with self._lock:
            return self._adapt(self._as_case(query)).prediction

    def predict(self, X: Union[np.ndarray, pd.DataFrame, List]) -> np.ndarray:
        """
        Predict outcomes for several queries.

        Args:
            X: Queries (n_samples, n_features), DataFrame or list of Case

        Returns:
            Array of predictions (n_samples,)
        """
        if isinstance(X, pd.DataFrame):
            names = [str(c) for c in X.columns]
            queries = [Case(row, feature_names=names) for row in X.values]
        elif isinstance(X, list) and X and all(isinstance(q, Case) for q in X):
            queries = X
        else:
            queries = list(np.asarray(X))

        with self._lock:
            return np.array([self._adapt(self._as_case(q)).prediction for q in queries], dtype=float)

    def explain_instance(
        self,
        query: Union[Case, np.ndarray, pd.Series, List],
        true_outcome: Optional[float] = None
    ) -> AdaptationExplanation:
        """
        Predict a single query and return the full adaptation trace.

        Args:
            query: Query to predict
            true_outcome: True outcome (optional, for validation)

        Returns:
            AdaptationExplanation with base cases, applied rules and prediction
        """
        with self._lock:
            return self._adapt(self._as_case(query), true_outcome=true_outcome)

    # --- reporting ---

    def get_measure(self, name: str) -> float:
        """Additional measures: 'measureKNN' (k) and 'measureBankSize'."""
        with self._lock:
            if name == 'measureKNN':
                return float(self.config.k)
            if name == 'measureBankSize':
                return float(self.bank.size())
        raise ValueError(f"Unknown measure: {name}")

    def get_training_info(self) -> Dict[str, Any]:
        """Get information about the case bank and configuration."""
        with self._lock:
            outcomes = self.bank.outcomes()
            return {
                "n_cases": self.bank.size(),
                "n_features": len(self.bank.schema) if self.bank.schema is not None else 0,
                "feature_names": list(self.bank.schema) if self.bank.schema is not None else [],
                "outcome_mean": float(outcomes.mean()) if len(outcomes) else None,
                "window_size": self.config.window_size,
                "k": self.config.k,
                "l": self.config.l,
                "o": self.config.o,
                "case_search": self.config.case_search,
                "rule_search": self.config.rule_search,
                "normalize": self.config.normalize,
                "is_trained": self.is_trained,
            }

    def summary(self) -> str:
        """Describe the model state in a few lines."""
        with self._lock:
            if not self.is_trained:
                return "EARRegressor: no model built yet."
            if self.bank.size() == 0:
                return "Warning: no training cases - mean fallback used."
            text = (f"EARRegressor using {self.config.k} nearest neighbour(s), "
                    f"{self.config.l} adaptations per base case and {self.config.o} as the "
                    f"rule generation neighborhood scale factor.\n")
            if self.config.normalize:
                text += "Features are normalized by their range over the case bank.\n"
            if self.config.window_size != 0:
                text += f"Using a maximum of {self.config.window_size} (windowed) training cases.\n"
            return text

    def __repr__(self) -> str:
        with self._lock:
            n_cases = self.bank.size()
        return (f"EARRegressor(n_cases={n_cases}, k={self.config.k}, "
                f"l={self.config.l}, o={self.config.o}, window_size={self.config.window_size})")
