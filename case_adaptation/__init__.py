"""
Case-Adaptation: Case-Based Regression with Ensembles of Adaptation Rules

Predicts numeric outcomes by retrieving similar cases and adjusting their
outcomes with adaptation rules generated from the case bank itself.
"""

from .predictor import EARRegressor
from .config import AdaptationConfig
from .cases import Case, AdaptationRule
from .case_bank import CaseBank
from .explanation import AdaptationExplanation
from .rules import generate_rules
from .metrics import compute_errors
from .exceptions import (
    CaseAdaptationError,
    SchemaError,
    NoNumericTargetError,
    EmptyBankError,
    ConfigurationError,
    MissingOutcomeError,
)

__version__ = "0.1.0"
__all__ = [
    "EARRegressor",
    "AdaptationConfig",
    "Case",
    "AdaptationRule",
    "CaseBank",
    "AdaptationExplanation",
    "generate_rules",
    "compute_errors",
    "CaseAdaptationError",
    "SchemaError",
    "NoNumericTargetError",
    "EmptyBankError",
    "ConfigurationError",
    "MissingOutcomeError",
]
