"""
Nearest neighbor retrieval over cases and over adaptation rules.

Both wrappers delegate the search itself to an ``IndexStrategy`` and map the
returned row indices back to the objects that were indexed.
"""

import logging
import numpy as np
from typing import List, Optional, Sequence, Tuple
from sklearn.preprocessing import MinMaxScaler

from .case_bank import CaseBank
from .cases import Case, AdaptationRule
from .exceptions import EmptyBankError
from .indexing import IndexStrategy, create_index

logger = logging.getLogger(__name__)


class CaseNeighborIndex:
    """
    Neighbor index over the feature vectors of a case bank.

    Plain appends go through ``insert``. Evictions require ``rebuild`` since
    the index strategies do not support deletion.

    With ``normalize=True`` every feature is rescaled to [0, 1] by its range
    over the indexed cases before distances are measured. The ranges are
    refitted on each rebuild.
    """

    def __init__(self, strategy: Optional[IndexStrategy] = None, normalize: bool = False):
        self.strategy = strategy if strategy is not None else create_index('brute')
        self.normalize = normalize
        self.scaler: Optional[MinMaxScaler] = None
        self._cases: List[Case] = []
        self._bank_version: Optional[int] = None

    def rebuild(self, bank: CaseBank) -> None:
        """Discard the current structure and index the bank's cases."""
        self._cases = bank.as_sequence()
        X = bank.features_matrix()
        if self.normalize and len(X):
            self.scaler = MinMaxScaler()
            X = self.scaler.fit_transform(X)
        else:
            self.scaler = None
        self.strategy.build(X)
        self._bank_version = bank.version
        logger.debug("Case index rebuilt on %d cases", len(self._cases))

    def _transform(self, features: np.ndarray) -> np.ndarray:
        if self.scaler is None:
            return features
        return self.scaler.transform(features.reshape(1, -1))[0]

    def _in_range(self, features: np.ndarray) -> bool:
        return bool(np.all(features >= self.scaler.data_min_) and np.all(features <= self.scaler.data_max_))

    def insert(self, case: Case, bank: Optional[CaseBank] = None) -> None:
        """
        Index one more case, appended after the existing ones.

        When normalizing, a case outside the fitted ranges changes them, so
        the whole bank is reindexed instead (``bank`` must already hold it).
        """
        if self.normalize and bank is not None and (self.scaler is None or not self._in_range(case.features)):
            self.rebuild(bank)
            return
        self._cases.append(case)
        self.strategy.insert(self._transform(case.features))
        if bank is not None:
            self._bank_version = bank.version

    def is_stale(self, bank: CaseBank) -> bool:
        """True when ``bank`` changed since the index last tracked it."""
        return self._bank_version != bank.version

    def feature_scale(self) -> Optional[np.ndarray]:
        """Per-feature multipliers applied to feature differences, None when not normalizing."""
        return None if self.scaler is None else self.scaler.scale_

    def nearest(self, query: Case, count: int) -> List[Tuple[Case, float]]:
        """
        Up to ``count`` cases closest to ``query``, ascending distance.

        Raises:
            EmptyBankError: nothing has been indexed
        """
        if not self._cases:
            raise EmptyBankError("Cannot retrieve neighbors from an empty case bank")
        distances, indices = self.strategy.query(self._transform(query.features), count)
        return [(self._cases[int(i)], float(d)) for i, d in zip(indices, distances)]

    def __len__(self) -> int:
        return len(self._cases)


class RuleNeighborIndex:
    """
    Neighbor index over a rule corpus, built once per prediction.

    Only feature deltas take part in the distance; outcome deltas are read
    from the matched rules afterwards. ``scale`` multiplies every feature
    delta, so rules are compared in the same space as normalized cases.
    """

    def __init__(self, rules: Sequence[AdaptationRule], strategy: Optional[IndexStrategy] = None,
                 scale: Optional[np.ndarray] = None):
        self.strategy = strategy if strategy is not None else create_index('brute')
        self.rules = list(rules)
        self.scale = scale
        if self.rules:
            self.strategy.build(np.vstack([self._scaled(rule) for rule in self.rules]))

    def _scaled(self, rule: AdaptationRule) -> np.ndarray:
        return rule.features if self.scale is None else rule.features * self.scale

    def nearest(self, query_rule: AdaptationRule, count: int) -> List[Tuple[AdaptationRule, float]]:
        """Up to ``count`` rules closest to ``query_rule``. Empty corpus gives []."""
        if not self.rules:
            return []
        distances, indices = self.strategy.query(self._scaled(query_rule), count)
        return [(self.rules[int(i)], float(d)) for i, d in zip(indices, distances)]

    def __len__(self) -> int:
        return len(self.rules)
