"""Tests for case_adaptation.case_bank module."""

import numpy as np
import pytest
from case_adaptation.case_bank import CaseBank
from case_adaptation.cases import Case
from case_adaptation.exceptions import (
    SchemaError,
    NoNumericTargetError,
    MissingOutcomeError,
    ConfigurationError,
)


def _cases(n, n_features=1):
    return [Case([float(i)] * n_features, outcome=float(i)) for i in range(n)]


class TestInitialize:
    def test_keeps_order(self):
        bank = CaseBank()
        bank.initialize(_cases(4))
        assert [c.outcome for c in bank.as_sequence()] == [0.0, 1.0, 2.0, 3.0]
        assert bank.size() == 4

    def test_pre_truncates_to_window(self):
        bank = CaseBank()
        bank.initialize(_cases(5), window_size=2)
        assert [c.outcome for c in bank] == [3.0, 4.0]

    def test_unbounded_window(self):
        bank = CaseBank(window_size=0)
        bank.initialize(_cases(10))
        assert len(bank) == 10

    def test_replaces_contents(self):
        bank = CaseBank()
        bank.initialize(_cases(3))
        bank.initialize(_cases(1))
        assert bank.size() == 1

    def test_mixed_schema_raises(self):
        bank = CaseBank()
        with pytest.raises(SchemaError):
            bank.initialize([Case([1.0], outcome=1.0), Case([1.0, 2.0], outcome=1.0)])

    def test_failed_initialize_keeps_state(self):
        bank = CaseBank()
        bank.initialize(_cases(2))
        with pytest.raises(NoNumericTargetError):
            bank.initialize([Case([1.0], outcome="a")])
        assert bank.size() == 2

    def test_drops_unknown_outcomes(self):
        bank = CaseBank()
        bank.initialize([Case([1.0], outcome=1.0), Case([2.0]), Case([3.0], outcome=np.nan)])
        assert bank.size() == 1

    def test_empty(self):
        bank = CaseBank()
        bank.initialize([])
        assert bank.size() == 0
        assert bank.schema is None
        assert bank.features_matrix().shape == (0, 0)

    def test_negative_window_raises(self):
        with pytest.raises(ConfigurationError):
            CaseBank(window_size=-1)


class TestAppend:
    def test_append_without_eviction(self):
        bank = CaseBank(window_size=3)
        bank.initialize(_cases(2))
        assert bank.append(Case([9.0], outcome=9.0)) is False
        assert bank.size() == 3

    def test_append_with_eviction(self):
        bank = CaseBank(window_size=2)
        bank.initialize(_cases(2))
        assert bank.append(Case([9.0], outcome=9.0)) is True
        assert [c.outcome for c in bank] == [1.0, 9.0]

    def test_window_invariant_over_many_appends(self):
        bank = CaseBank(window_size=3)
        bank.initialize([])
        appended = []
        for i in range(10):
            case = Case([float(i)], outcome=float(i))
            bank.append(case)
            appended.append(case)
            assert bank.size() <= 3
        assert bank.as_sequence() == appended[-3:]

    def test_schema_mismatch_raises(self):
        bank = CaseBank()
        bank.initialize(_cases(2))
        with pytest.raises(SchemaError):
            bank.append(Case([1.0, 2.0], outcome=1.0))
        assert bank.size() == 2

    def test_named_schema_mismatch_raises(self):
        bank = CaseBank()
        bank.initialize([Case([1.0], outcome=1.0, feature_names=["a"])])
        with pytest.raises(SchemaError):
            bank.append(Case([1.0], outcome=1.0, feature_names=["b"]))

    def test_missing_outcome_raises(self):
        bank = CaseBank()
        bank.initialize(_cases(1))
        with pytest.raises(MissingOutcomeError):
            bank.append(Case([1.0]))
        assert bank.size() == 1

    def test_first_append_sets_schema(self):
        bank = CaseBank()
        bank.append(Case([1.0, 2.0], outcome=1.0))
        assert bank.schema == ("feature_0", "feature_1")

    def test_version_bumps(self):
        bank = CaseBank()
        v0 = bank.version
        bank.initialize(_cases(1))
        bank.append(Case([1.0], outcome=1.0))
        assert bank.version >= v0 + 2


class TestEnforceWindow:
    def test_shrinking_window(self):
        bank = CaseBank()
        bank.initialize(_cases(5))
        bank.window_size = 2
        assert bank.enforce_window() is True
        assert [c.outcome for c in bank] == [3.0, 4.0]

    def test_no_eviction(self):
        bank = CaseBank(window_size=5)
        bank.initialize(_cases(3))
        assert bank.enforce_window() is False


class TestAccessors:
    def test_features_and_outcomes(self):
        bank = CaseBank()
        bank.initialize(_cases(3, n_features=2))
        assert bank.features_matrix().shape == (3, 2)
        np.testing.assert_array_equal(bank.outcomes(), [0.0, 1.0, 2.0])

    def test_as_sequence_is_copy(self):
        bank = CaseBank()
        bank.initialize(_cases(2))
        seq = bank.as_sequence()
        seq.clear()
        assert bank.size() == 2

    def test_repr(self):
        bank = CaseBank(window_size=4)
        assert "window_size=4" in repr(bank)
