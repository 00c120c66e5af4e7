"""
Explanation object describing how a prediction was adapted.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import List, Tuple, Optional, Dict, Any

from .cases import Case, AdaptationRule


class BaseCaseAdaptation:
    """One base case, the rules applied to it, and its adjusted outcome."""

    def __init__(
        self,
        case: Case,
        distance: float,
        applied_rules: List[Tuple[AdaptationRule, float]],
        adjustment: float
    ):
        self.case = case
        self.distance = distance
        self.applied_rules = applied_rules
        self.adjustment = adjustment

    @property
    def outcome(self) -> float:
        return self.case.outcome_value()

    @property
    def adapted_outcome(self) -> float:
        return self.outcome + self.adjustment

    def __repr__(self) -> str:
        return (f"BaseCaseAdaptation(distance={self.distance:.4f}, outcome={self.outcome:.4f}, "
                f"adjustment={self.adjustment:+.4f}, rules={len(self.applied_rules)})")


class AdaptationExplanation:
    """
    Trace of a single prediction: the base cases retrieved, the adaptation
    rules applied to each and the resulting value.
    """

    def __init__(
        self,
        query: Case,
        prediction: float,
        base_cases: List[BaseCaseAdaptation],
        n_neighborhood: int = 0,
        n_rules: int = 0,
        used_fallback: bool = False,
        true_outcome: Optional[float] = None,
        feature_names: Optional[List[str]] = None
    ):
        """
        Initialize explanation.

        Args:
            query: The case whose outcome was predicted
            prediction: Predicted outcome
            base_cases: Adapted base cases, nearest first
            n_neighborhood: Size of the expanded neighborhood used for rule generation
            n_rules: Size of the generated rule corpus
            used_fallback: True when the bank was empty and the mean fallback answered
            true_outcome: True outcome (if available)
            feature_names: Names of features (optional)
        """
        self.query = query
        self.prediction = prediction
        self.base_cases = base_cases
        self.n_neighborhood = n_neighborhood
        self.n_rules = n_rules
        self.used_fallback = used_fallback
        self.true_outcome = true_outcome
        self.feature_names = list(feature_names) if feature_names else list(query.schema)

    def error(self) -> Optional[float]:
        """Prediction minus true outcome (if available)."""
        if self.true_outcome is None:
            return None
        return self.prediction - self.true_outcome

    def summary(self) -> str:
        """Generate a text summary of the explanation."""
        lines = []
        lines.append("=" * 60)
        lines.append("ADAPTATION-BASED PREDICTION")
        lines.append("=" * 60)
        lines.append(f"Prediction: {self.prediction:.4f}")

        if self.true_outcome is not None:
            lines.append(f"True outcome: {self.true_outcome:.4f} (error {self.error():+.4f})")

        if self.used_fallback:
            lines.append("No training cases - mean fallback used.")
            lines.append("=" * 60)
            return "\n".join(lines)

        lines.append(f"Rules generated from {self.n_neighborhood} cases: {self.n_rules}")
        lines.append("")
        lines.append(f"Base cases ({len(self.base_cases)}):")
        lines.append("-" * 60)

        for i, base in enumerate(self.base_cases, 1):
            lines.append(f"{i}. outcome {base.outcome:.4f} {base.adjustment:+.4f} "
                         f"= {base.adapted_outcome:.4f}, distance {base.distance:.4f}")
            for rule, dist in base.applied_rules:
                lines.append(f"      rule {rule.source_index}->{rule.destination_index}: "
                             f"delta {rule.outcome_delta:+.4f}, distance {dist:.4f}")

        lines.append("=" * 60)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export explanation as dictionary (for JSON serialization)."""
        return {
            "query": self.query.features.tolist(),
            "prediction": float(self.prediction),
            "true_outcome": self.true_outcome,
            "error": self.error(),
            "used_fallback": self.used_fallback,
            "n_neighborhood": self.n_neighborhood,
            "n_rules": self.n_rules,
            "base_cases": [
                {
                    "features": b.case.features.tolist(),
                    "outcome": b.outcome,
                    "distance": float(b.distance),
                    "adjustment": float(b.adjustment),
                    "adapted_outcome": float(b.adapted_outcome),
                    "rules": [
                        {
                            "source_index": rule.source_index,
                            "destination_index": rule.destination_index,
                            "features": rule.features.tolist(),
                            "outcome_delta": float(rule.outcome_delta),
                            "distance": float(dist),
                        }
                        for rule, dist in b.applied_rules
                    ],
                }
                for b in self.base_cases
            ],
            "feature_names": self.feature_names,
        }

    def plot(
        self,
        save_path: Optional[str] = None,
        figsize: Tuple[int, int] = (10, 6)
    ) -> None:
        """
        Bar plot of each base case outcome before and after adaptation,
        with the final prediction (and true outcome, if known) as lines.

        Args:
            save_path: Path to save figure (if provided)
            figsize: Figure size
        """
        if not self.base_cases:
            raise ValueError("Nothing to plot: prediction used the mean fallback")

        n_base = len(self.base_cases)
        fig, ax = plt.subplots(figsize=figsize)

        x = np.arange(n_base)
        width = 0.35

        ax.bar(x - width / 2, [b.outcome for b in self.base_cases], width,
               label='Base outcome', color='steelblue', alpha=0.6)
        ax.bar(x + width / 2, [b.adapted_outcome for b in self.base_cases], width,
               label='Adapted outcome', color='darkorange', alpha=0.8)
        ax.axhline(self.prediction, color='red', linestyle='--', label='Prediction')
        if self.true_outcome is not None:
            ax.axhline(self.true_outcome, color='black', linestyle=':', label='True outcome')

        ax.set_xlabel('Base case')
        ax.set_ylabel('Outcome')
        ax.set_title(f'Adaptation-Based Prediction ({self.prediction:.4f})')
        ax.set_xticks(x)
        ax.set_xticklabels([f"#{i + 1}\nd={b.distance:.2f}" for i, b in enumerate(self.base_cases)])
        ax.legend()
        ax.grid(axis='y', alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
        else:
            plt.show()

    def __repr__(self) -> str:
        return (f"AdaptationExplanation(prediction={self.prediction:.4f}, "
                f"base_cases={len(self.base_cases)}, rules={self.n_rules}, "
                f"fallback={self.used_fallback})")
