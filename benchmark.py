#!/usr/bin/env python3
"""
Benchmarking suite for case-adaptation.

Runs EARRegressor over several regression datasets:
- Diabetes: Small (442 samples, 10 features) - real data
- Friedman #1: Synthetic (1000 samples, 10 features) - nonlinear
- Linear: Synthetic (1000 samples, 3 features) - adaptation best case

Metrics collected:
- Fit time
- Batch prediction time
- MAE / RMSE, compared with plain k-NN (l=0)

Compares case and rule indexing methods: brute force, kd_tree, ball_tree
"""

import sys
import os
import time
from dataclasses import dataclass
from typing import List, Tuple, Optional
import numpy as np
import pandas as pd
from sklearn.datasets import load_diabetes, make_friedman1
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import StandardScaler

# Add case_adaptation to path
sys.path.insert(0, os.path.dirname(__file__))
from case_adaptation import EARRegressor, compute_errors


@dataclass
class BenchmarkResult:
    """Store benchmark results for a single configuration."""
    dataset_name: str
    n_samples: int
    n_features: int
    index_method: str
    k: int
    l: int
    o: float

    # Timing metrics (seconds)
    fit_time: float
    batch_predict_time: float
    time_per_prediction: float

    # Quality metrics
    mae: float
    rmse: float
    knn_mae: Optional[float] = None


class DatasetLoader:
    """Load and prepare datasets for benchmarking."""

    @staticmethod
    def _split(X, y) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        X_train, X_test, y_train, y_test = train_test_split(X, y, test_size=0.2, random_state=42)
        scaler = StandardScaler().fit(X_train)
        return scaler.transform(X_train), scaler.transform(X_test), y_train, y_test

    @staticmethod
    def load_diabetes():
        X, y = load_diabetes(return_X_y=True)
        return DatasetLoader._split(X, y) + ("Diabetes",)

    @staticmethod
    def load_friedman(n_samples: int = 1000):
        X, y = make_friedman1(n_samples=n_samples, noise=0.5, random_state=42)
        return DatasetLoader._split(X, y) + ("Friedman #1",)

    @staticmethod
    def load_linear(n_samples: int = 1000):
        rng = np.random.RandomState(42)
        X = rng.uniform(-5, 5, size=(n_samples, 3))
        y = X @ np.array([3.0, -2.0, 0.5]) + 5 + rng.normal(0, 0.1, n_samples)
        return DatasetLoader._split(X, y) + ("Linear",)


class Benchmarker:
    """Run benchmarks on case-adaptation."""

    def __init__(self, settings: List[Tuple[int, int, float]], n_batch_samples: int = 100):
        """
        Initialize benchmarker.

        Args:
            settings: (k, l, o) triples to evaluate
            n_batch_samples: Number of test samples to predict per configuration
        """
        self.settings = settings
        self.n_batch_samples = n_batch_samples
        self.results: List[BenchmarkResult] = []

    def benchmark_configuration(
        self,
        X_train: np.ndarray,
        X_test: np.ndarray,
        y_train: np.ndarray,
        y_test: np.ndarray,
        dataset_name: str,
        index_method: str,
        k: int,
        l: int,
        o: float
    ) -> Optional[BenchmarkResult]:
        """
        Benchmark a single dataset + index method + (k, l, o) configuration.

        Returns:
            BenchmarkResult or None if benchmark failed
        """
        print(f"\n  Testing {index_method} index, k={k}, l={l}, o={o}...")

        try:
            n_batch = min(self.n_batch_samples, len(X_test))

            start_time = time.perf_counter()
            model = EARRegressor(k=k, l=l, o=o, case_search=index_method,
                                 rule_search=index_method).fit(X_train, y_train)
            fit_time = time.perf_counter() - start_time

            start_time = time.perf_counter()
            y_pred = model.predict(X_test[:n_batch])
            batch_predict_time = time.perf_counter() - start_time

            errors = compute_errors(y_test[:n_batch], y_pred)

            knn = EARRegressor(k=k, l=0, case_search=index_method).fit(X_train, y_train)
            knn_errors = compute_errors(y_test[:n_batch], knn.predict(X_test[:n_batch]))

            result = BenchmarkResult(
                dataset_name=dataset_name,
                n_samples=len(X_train),
                n_features=X_train.shape[1],
                index_method=index_method,
                k=k,
                l=l,
                o=o,
                fit_time=fit_time,
                batch_predict_time=batch_predict_time,
                time_per_prediction=batch_predict_time / n_batch,
                mae=errors["mae"],
                rmse=errors["rmse"],
                knn_mae=knn_errors["mae"]
            )

            print(f"    Fit time: {fit_time:.3f}s | Predict time: {result.time_per_prediction*1000:.2f}ms/sample | "
                  f"MAE: {result.mae:.3f} (k-NN {result.knn_mae:.3f})")

            return result

        except Exception as e:
            print(f"    Error: {e}")
            return None

    def run_all_benchmarks(self, index_methods: Optional[List[str]] = None):
        """
        Run benchmarks on all datasets.

        Args:
            index_methods: List of index methods to test (default: all)
        """
        if index_methods is None:
            index_methods = ['brute', 'kd_tree', 'ball_tree']

        print("=" * 80)
        print("CASE-ADAPTATION BENCHMARK SUITE")
        print("=" * 80)

        for loader in (DatasetLoader.load_diabetes, DatasetLoader.load_friedman, DatasetLoader.load_linear):
            X_train, X_test, y_train, y_test, name = loader()
            print(f"\n{'=' * 80}")
            print(f"Dataset: {name}")
            print(f"{'=' * 80}")
            print(f"  Samples: {len(X_train):,} train, {len(X_test):,} test")
            print(f"  Features: {X_train.shape[1]}")

            for method in index_methods:
                for k, l, o in self.settings:
                    result = self.benchmark_configuration(
                        X_train, X_test, y_train, y_test, name, method, k, l, o
                    )
                    if result is not None:
                        self.results.append(result)

        print(f"\n{'=' * 80}")
        print("BENCHMARK COMPLETE")
        print(f"{'=' * 80}\n")

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([r.__dict__ for r in self.results])

    def print_summary(self):
        """Print a summary table and the best configuration per dataset."""
        if not self.results:
            print("No benchmark results to display.")
            return

        df = self.to_dataframe()
        print("=" * 100)
        print("BENCHMARK RESULTS SUMMARY")
        print("=" * 100)
        print(df[['dataset_name', 'index_method', 'k', 'l', 'o', 'mae', 'knn_mae', 'rmse',
                  'time_per_prediction']].to_string(index=False))
        print("=" * 100)

        print("\nBest configuration per dataset (lowest MAE):")
        print("-" * 80)
        best = df.loc[df.groupby('dataset_name')['mae'].idxmin()]
        for _, row in best.iterrows():
            gain = (row['knn_mae'] - row['mae']) / row['knn_mae'] if row['knn_mae'] else 0.0
            print(f"   {row['dataset_name']:15s}: k={row['k']}, l={row['l']}, o={row['o']} "
                  f"MAE {row['mae']:.3f} ({gain:+.1%} vs k-NN)")
        print("-" * 80)

    def save_results(self, filename: str = "benchmark_results.csv"):
        """Save results to CSV file."""
        if not self.results:
            print("No results to save.")
            return

        self.to_dataframe().to_csv(filename, index=False)
        print(f"\nResults saved to: {filename}")


def main():
    """Run the benchmark suite."""
    import argparse

    parser = argparse.ArgumentParser(description='Benchmark case-adaptation performance')
    parser.add_argument('--k', type=int, nargs='+', default=[3, 5], help='Base case counts (default: 3 5)')
    parser.add_argument('--l', type=int, nargs='+', default=[1, 3], help='Adaptations per base case (default: 1 3)')
    parser.add_argument('--o', type=float, nargs='+', default=[2.0], help='Neighborhood scale factors (default: 2)')
    parser.add_argument('--batch-size', type=int, default=100, help='Test samples per configuration (default: 100)')
    parser.add_argument('--index-methods', nargs='+', choices=['kd_tree', 'ball_tree', 'brute'],
                        help='Index methods to test (default: all)')
    parser.add_argument('--output', type=str, default='benchmark_results.csv',
                        help='Output CSV file (default: benchmark_results.csv)')

    args = parser.parse_args()

    settings = [(k, l, o) for k in args.k for l in args.l for o in args.o]
    benchmarker = Benchmarker(settings, n_batch_samples=args.batch_size)
    benchmarker.run_all_benchmarks(index_methods=args.index_methods)
    benchmarker.print_summary()
    benchmarker.save_results(args.output)


if __name__ == '__main__':
    main()
