"""Tests for case_adaptation.metrics module."""

import numpy as np
import pytest
from case_adaptation.metrics import compute_all_distances, compute_errors


# --- compute_all_distances ---

class TestComputeAllDistances:
    def test_distances_shape(self):
        point = np.array([0.0, 0.0])
        data = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        dists = compute_all_distances(point, data)
        assert dists.shape == (3,)

    def test_distances_values(self):
        point = np.array([0.0, 0.0])
        data = np.array([[3.0, 4.0], [0.0, 0.0]])
        dists = compute_all_distances(point, data)
        assert dists[0] == pytest.approx(5.0)
        assert dists[1] == pytest.approx(0.0)

    def test_single_point(self):
        point = np.array([1.0, 2.0])
        data = np.array([[1.0, 2.0]])
        dists = compute_all_distances(point, data)
        assert dists[0] == pytest.approx(0.0)

    def test_matches_pairwise(self):
        point = np.array([0.5, -1.0])
        data = np.array([[1.0, 2.0], [-3.0, 0.5]])
        dists = compute_all_distances(point, data)
        for row, d in zip(data, dists):
            assert d == pytest.approx(np.linalg.norm(point - row))


# --- compute_errors ---

class TestComputeErrors:
    def test_perfect(self):
        errors = compute_errors([1.0, 2.0], [1.0, 2.0])
        assert errors["mae"] == 0.0
        assert errors["rmse"] == 0.0
        assert errors["n"] == 2

    def test_known_values(self):
        # errors 1 and 3: MAE = 2, RMSE = sqrt((1 + 9) / 2)
        errors = compute_errors([0.0, 0.0], [1.0, -3.0])
        assert errors["mae"] == pytest.approx(2.0)
        assert errors["rmse"] == pytest.approx(np.sqrt(5.0))

    def test_empty(self):
        errors = compute_errors([], [])
        assert errors["n"] == 0
        assert np.isnan(errors["mae"])

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="same length"):
            compute_errors([1.0], [1.0, 2.0])
