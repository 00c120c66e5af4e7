"""
Adaptation rule generation.

A rule records how the outcome changed between two cases together with how
their features differ. Applying the rules whose feature differences look like
the difference between a query and a base case gives an estimate of how much
the base case outcome should move.
"""

from typing import List, Optional, Sequence

from .cases import Case, AdaptationRule


def generate_rule(source: Case, destination: Case,
                  source_index: Optional[int] = None,
                  destination_index: Optional[int] = None) -> AdaptationRule:
    """Rule that turns ``destination`` into ``source``."""
    return AdaptationRule(
        features=source.features - destination.features,
        outcome_delta=source.outcome_value() - destination.outcome_value(),
        source_index=source_index,
        destination_index=destination_index,
    )


def generate_rules(neighborhood: Sequence[Case]) -> List[AdaptationRule]:
    """
    Build the rule corpus for a neighborhood.

    Emits one rule per ordered pair of distinct positions, source-major:
    for i in range(N), for j in range(N), j != i. N cases yield N * (N - 1)
    rules.
    """
    rules = []
    for i, source in enumerate(neighborhood):
        for j, destination in enumerate(neighborhood):
            if i != j:
                rules.append(generate_rule(source, destination, i, j))
    return rules


def make_query_rule(query: Case, base: Case) -> AdaptationRule:
    """Query rule from ``base`` to ``query``. The outcome side is unknown."""
    return AdaptationRule(features=query.features - base.features, outcome_delta=None)
