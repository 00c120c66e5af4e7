"""
Errors raised by case-adaptation.

All errors derive from ``CaseAdaptationError``, which is a ``ValueError`` so
callers that already guard input validation with ``except ValueError`` keep
working.
"""


class CaseAdaptationError(ValueError):
    """Base class for case-adaptation errors."""


class SchemaError(CaseAdaptationError):
    """A case's features do not match the schema of the case bank."""


class NoNumericTargetError(CaseAdaptationError):
    """A case outcome is not a real number."""


class EmptyBankError(CaseAdaptationError):
    """Neighbor retrieval was attempted against an empty case bank."""


class ConfigurationError(CaseAdaptationError):
    """Invalid predictor configuration (k, l, o, window size, search method)."""


class MissingOutcomeError(CaseAdaptationError):
    """A case with an unknown outcome cannot be learned from."""
