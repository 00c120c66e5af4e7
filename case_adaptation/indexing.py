"""
Indexing strategies for nearest neighbor search.

Every strategy answers the same questions: index a set of vectors, take one
more vector, and return the closest vectors to a query in ascending Euclidean
distance order.
"""

import numpy as np
from typing import Tuple
from sklearn.neighbors import KDTree, BallTree
from abc import ABC, abstractmethod

from .exceptions import ConfigurationError


class IndexStrategy(ABC):
    """Abstract base class for indexing strategies."""

    def __init__(self):
        self.X = None

    @abstractmethod
    def build(self, X: np.ndarray) -> None:
        """Build the index from data, discarding any previous structure."""
        pass

    def insert(self, x: np.ndarray) -> None:
        """Add one vector to the index. Its position is the next row index."""
        if self.X is None or len(self.X) == 0:
            self.build(np.atleast_2d(np.asarray(x, dtype=float)))
        else:
            self.build(np.vstack([self.X, x]))

    @abstractmethod
    def query(self, point: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Query for up to k nearest neighbors.

        Returns:
            distances: Array of distances (<= k,), ascending
            indices: Array of row indices (<= k,)
        """
        pass

    def __len__(self) -> int:
        return 0 if self.X is None else len(self.X)


class BruteForceIndex(IndexStrategy):
    """Brute force search - computes all distances."""

    def build(self, X: np.ndarray) -> None:
        """Store the training data."""
        self.X = np.asarray(X, dtype=float)

    def insert(self, x: np.ndarray) -> None:
        """Append one row; no structure to rebuild."""
        x = np.asarray(x, dtype=float)
        if self.X is None or len(self.X) == 0:
            self.X = x.reshape(1, -1)
        else:
            self.X = np.vstack([self.X, x])

    def query(self, point: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """Find k nearest neighbors by computing all distances.

        Ties go to the most recently added row.
        """
        from .metrics import compute_all_distances

        if len(self) == 0 or k <= 0:
            return np.empty(0), np.empty(0, dtype=int)

        distances = compute_all_distances(point, self.X)
        # Primary key distance ascending, secondary key row index descending
        indices = np.lexsort((-np.arange(len(distances)), distances))[:k]
        return distances[indices], indices


class KDTreeIndex(IndexStrategy):
    """K-D Tree for fast nearest neighbor search (best for low dimensions)."""

    def __init__(self, leaf_size: int = 30):
        super().__init__()
        self.leaf_size = leaf_size
        self.tree = None

    def build(self, X: np.ndarray) -> None:
        """Build K-D tree."""
        self.X = np.asarray(X, dtype=float)
        # KDTree cannot be built over zero rows
        self.tree = KDTree(self.X, leaf_size=self.leaf_size, metric='euclidean') if len(self.X) else None

    def query(self, point: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """Query K-D tree for k nearest neighbors."""
        if self.tree is None or k <= 0:
            return np.empty(0), np.empty(0, dtype=int)
        distances, indices = self.tree.query([point], k=min(k, len(self.X)))
        return distances[0], indices[0]


class BallTreeIndex(IndexStrategy):
    """Ball Tree for nearest neighbor search (better for high dimensions)."""

    def __init__(self, leaf_size: int = 30):
        super().__init__()
        self.leaf_size = leaf_size
        self.tree = None

    def build(self, X: np.ndarray) -> None:
        """Build Ball tree."""
        self.X = np.asarray(X, dtype=float)
        self.tree = BallTree(self.X, leaf_size=self.leaf_size, metric='euclidean') if len(self.X) else None

    def query(self, point: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """Query Ball tree for k nearest neighbors."""
        if self.tree is None or k <= 0:
            return np.empty(0), np.empty(0, dtype=int)
        distances, indices = self.tree.query([point], k=min(k, len(self.X)))
        return distances[0], indices[0]


INDEX_METHODS = ('brute', 'kd_tree', 'ball_tree')


def create_index(method: str = 'brute', **kwargs) -> IndexStrategy:
    """
    Factory function to create an index.

    Args:
        method: One of 'brute', 'kd_tree', 'ball_tree'
        **kwargs: Additional arguments for the index

    Returns:
        IndexStrategy instance
    """
    if method == 'brute':
        return BruteForceIndex()
    elif method == 'kd_tree':
        return KDTreeIndex(**kwargs)
    elif method == 'ball_tree':
        return BallTreeIndex(**kwargs)
    else:
        raise ConfigurationError(f"Unknown index method: {method}")
