"""Shared fixtures for case-adaptation tests."""

import numpy as np
import pytest
from sklearn.datasets import load_diabetes
from sklearn.model_selection import train_test_split

from case_adaptation.cases import Case


@pytest.fixture
def diabetes_data():
    """Diabetes regression dataset split for testing."""
    X, y = load_diabetes(return_X_y=True)
    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=0.2, random_state=42
    )
    return X_train, X_test, y_train, y_test


@pytest.fixture
def linear_data():
    """Small noise-free linear regression dataset: y = 3*x0 - 2*x1 + 5."""
    rng = np.random.RandomState(42)
    X_train = rng.uniform(-5, 5, size=(60, 2))
    y_train = 3 * X_train[:, 0] - 2 * X_train[:, 1] + 5
    X_test = rng.uniform(-4, 4, size=(10, 2))
    y_test = 3 * X_test[:, 0] - 2 * X_test[:, 1] + 5
    return X_train, X_test, y_train, y_test


@pytest.fixture
def line_cases():
    """Three 1-D cases: (0, 10), (1, 20), (2, 40)."""
    return [
        Case([0.0], outcome=10.0),
        Case([1.0], outcome=20.0),
        Case([2.0], outcome=40.0),
    ]
