"""
Quickstart example for case-adaptation module.

Demonstrates basic usage with the Diabetes dataset.
"""

import logging
import numpy as np
from sklearn.datasets import load_diabetes
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import StandardScaler
from case_adaptation import EARRegressor, Case, compute_errors


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("Case-Adaptation Quickstart Example")
    print("=" * 60)
    print()

    # Load Diabetes dataset
    print("Loading Diabetes dataset...")
    diabetes = load_diabetes()
    X, y = diabetes.data, diabetes.target
    feature_names = diabetes.feature_names

    # Split data
    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=0.2, random_state=42
    )
    scaler = StandardScaler().fit(X_train)
    X_train, X_test = scaler.transform(X_train), scaler.transform(X_test)

    print(f"Training samples: {len(X_train)}")
    print(f"Test samples: {len(X_test)}")
    print()

    # Plain k-NN baseline (no adaptation)
    knn = EARRegressor(k=5, l=0).fit(X_train, y_train, feature_names=feature_names)
    knn_errors = compute_errors(y_test, knn.predict(X_test))
    print(f"k-NN (k=5, l=0): MAE = {knn_errors['mae']:.2f}, RMSE = {knn_errors['rmse']:.2f}")

    # Create EARRegressor
    print("Creating EARRegressor...")
    model = EARRegressor(
        k=5,  # base cases per prediction
        l=3,  # adaptation rules per base case
        o=2,  # rules generated from the 10 nearest cases
        case_search='kd_tree'
    )
    model.fit(X_train, y_train, feature_names=feature_names)

    print(model)
    print(model.summary())

    ear_errors = compute_errors(y_test, model.predict(X_test))
    print(f"EAR (k=5, l=3, o=2): MAE = {ear_errors['mae']:.2f}, RMSE = {ear_errors['rmse']:.2f}")
    print()

    # Explain a single prediction
    print("Explaining first test sample...")
    explanation = model.explain_instance(X_test[0], true_outcome=y_test[0])
    print(explanation.summary())
    print()

    # Stream the remaining cases in with a window
    print("Streaming test cases into a windowed model...")
    streaming = EARRegressor(k=5, l=3, o=2, window_size=200).fit(X_train, y_train,
                                                                 feature_names=feature_names)
    streamed_errors = []
    for features, outcome in zip(X_test, y_test):
        case = Case(features, outcome=outcome, feature_names=feature_names)
        streamed_errors.append(abs(streaming.predict_one(case) - outcome))
        streaming.update(case)

    print(f"Prequential MAE: {np.mean(streamed_errors):.2f}")
    print(f"Cases kept: {streaming.bank.size()}")

    print()
    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == '__main__':
    main()
