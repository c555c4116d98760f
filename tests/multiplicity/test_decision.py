"""Tests for decide and apply_procedure."""

import pytest

from pyfactorial import DomainError
from pyfactorial.multiplicity import (
    OVERALL_A,
    SIMPLE_A,
    SIMPLE_AB,
    Correlations,
    Decision,
    apply_procedure,
    crit2x2,
    decide,
)


@pytest.fixture(scope="module")
def design_crit():
    return crit2x2(Correlations.design(), alpha=0.05, dig=2)


class TestDecide:

    def test_reject(self):
        d = decide(SIMPLE_AB, 0.001, 0.025)
        assert isinstance(d, Decision)
        assert d.reject
        assert d.label == "reject simple AB"

    def test_accept(self):
        d = decide(OVERALL_A, 0.06, 0.0333)
        assert not d.reject
        assert d.label == "accept overall A"

    def test_boundary_rejects(self):
        """p-value equal to the threshold rejects."""
        assert decide(SIMPLE_A, 0.025, 0.025).reject

    def test_p_value_out_of_range(self):
        with pytest.raises(DomainError, match="p-value"):
            decide(SIMPLE_A, 1.5, 0.025)

    def test_p_value_nan(self):
        with pytest.raises(DomainError, match="p-value"):
            decide(SIMPLE_A, float("nan"), 0.025)


class TestApplyProcedure:

    def test_only_tested_hypotheses(self, design_crit):
        p = {OVERALL_A: 0.2, SIMPLE_A: 0.0001, SIMPLE_AB: 0.2}
        decisions = apply_procedure(design_crit.p23_13, p)
        assert [d.hypothesis for d in decisions] == [OVERALL_A, SIMPLE_AB]

    def test_12_excludes_overall(self, design_crit):
        p = {SIMPLE_A: 0.001, SIMPLE_AB: 0.5}
        decisions = apply_procedure(design_crit.p12_12, p)
        assert [d.label for d in decisions] == ["reject simple A", "accept simple AB"]

    def test_uses_procedure_thresholds(self, design_crit):
        cv = design_crit.p23_13
        p = {OVERALL_A: cv.sig_for(OVERALL_A), SIMPLE_AB: cv.sig_for(SIMPLE_AB) * 1.01}
        decisions = apply_procedure(cv, p)
        assert decisions[0].reject
        assert not decisions[1].reject

    def test_missing_p_value(self, design_crit):
        with pytest.raises(DomainError, match="missing p-value"):
            apply_procedure(design_crit.p13_13_13, {OVERALL_A: 0.01, SIMPLE_AB: 0.01})
