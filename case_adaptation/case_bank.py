"""
Windowed case bank.

Cases are kept in arrival order. When a window size is set, the oldest cases
are evicted first once the bank grows past it.
"""

import logging
import numpy as np
from typing import Iterable, Iterator, List, Optional, Tuple

from .cases import Case
from .exceptions import SchemaError, ConfigurationError

logger = logging.getLogger(__name__)


class CaseBank:
    """
    Ordered, size-bounded collection of training cases (FIFO eviction).

    ``version`` is bumped on every mutation so that neighbor indices built over
    the bank can tell when they are stale.
    """

    def __init__(self, window_size: int = 0):
        if window_size < 0:
            raise ConfigurationError(f"window_size must be >= 0 (got {window_size})")
        self.window_size = window_size
        self._cases: List[Case] = []
        self._schema: Optional[Tuple[str, ...]] = None
        self.version = 0

    @property
    def schema(self) -> Optional[Tuple[str, ...]]:
        """Feature names shared by every case in the bank (None before any case is seen)."""
        return self._schema

    @property
    def is_bounded(self) -> bool:
        return self.window_size > 0

    def initialize(self, cases: Iterable[Case], window_size: Optional[int] = None) -> None:
        """
        Replace the bank contents with ``cases``.

        Cases with an unknown outcome are dropped. When the bank is bounded only
        the most recent ``window_size`` cases are kept.

        Raises:
            SchemaError: two cases have different schemas
            NoNumericTargetError: a case outcome is not a real number
        """
        if window_size is not None:
            if window_size < 0:
                raise ConfigurationError(f"window_size must be >= 0 (got {window_size})")
            self.window_size = window_size

        cases = list(cases)
        schema = cases[0].schema if cases else None
        known = []
        for i, case in enumerate(cases):
            if case.schema != schema:
                raise SchemaError(f"Case {i} has schema {case.schema}, expected {schema}")
            if not case.has_outcome():
                continue
            # Raises NoNumericTargetError for non-real outcomes
            case.outcome_value()
            known.append(case)

        if len(known) < len(cases):
            logger.info("Dropped %d cases with unknown outcome", len(cases) - len(known))

        if self.is_bounded and len(known) > self.window_size:
            known = known[-self.window_size:]

        self._cases = known
        self._schema = schema
        self.version += 1

    def check_schema(self, case: Case) -> None:
        """Raise SchemaError if ``case`` does not match the bank's schema."""
        if self._schema is not None and case.schema != self._schema:
            raise SchemaError(f"Incompatible case: schema {case.schema}, expected {self._schema}")

    def append(self, case: Case) -> bool:
        """
        Append a case, evicting the oldest cases if the window is exceeded.

        Returns:
            True if at least one case was evicted (index rebuild required)

        Raises:
            SchemaError: the case does not match the bank's schema
            MissingOutcomeError: the case outcome is unknown
            NoNumericTargetError: the case outcome is not a real number
        """
        self.check_schema(case)
        case.outcome_value()

        if self._schema is None:
            self._schema = case.schema
        self._cases.append(case)
        self.version += 1
        return self.enforce_window()

    def enforce_window(self) -> bool:
        """Evict from the front until within the window. Returns True if anything was evicted."""
        if not self.is_bounded or len(self._cases) <= self.window_size:
            return False
        n_evicted = len(self._cases) - self.window_size
        del self._cases[:n_evicted]
        self.version += 1
        logger.debug("Evicted %d cases (window_size=%d)", n_evicted, self.window_size)
        return True

    def size(self) -> int:
        return len(self._cases)

    def as_sequence(self) -> List[Case]:
        """Cases in arrival order (a copy of the internal list)."""
        return list(self._cases)

    def features_matrix(self) -> np.ndarray:
        """Feature vectors stacked as a (n_cases, n_features) array."""
        if not self._cases:
            n_features = len(self._schema) if self._schema is not None else 0
            return np.empty((0, n_features))
        return np.vstack([case.features for case in self._cases])

    def outcomes(self) -> np.ndarray:
        return np.array([case.outcome_value() for case in self._cases], dtype=float)

    def __len__(self) -> int:
        return len(self._cases)

    def __iter__(self) -> Iterator[Case]:
        return iter(self._cases)

    def __getitem__(self, index: int) -> Case:
        return self._cases[index]

    def __repr__(self) -> str:
        return f"CaseBank(size={len(self._cases)}, window_size={self.window_size})"
