"""Tests for fac2x2_design."""

import pytest

from pyfactorial import DomainError
from pyfactorial.design import DesignResult, event_prob, fac2x2_design
from pyfactorial.multiplicity import Correlations, MVNConfig


@pytest.fixture(scope="module")
def scenario5():
    """Scenario 5 of Table 2 in Leifer, Troendle et al."""
    return fac2x2_design(
        4600, 0.0445, 0.80, 0.80, 0.72, 4.0, 8.4,
        dig=2, alpha=0.05, config=MVNConfig(niter=10),
    )


class TestScenario5:
    """Published powers for 4600 subjects, rate 0.0445, HRs 0.8/0.8/0.72."""

    def test_returns_result(self, scenario5):
        assert isinstance(scenario5, DesignResult)

    def test_power_overall_a(self, scenario5):
        assert scenario5.power_a == pytest.approx(0.718, abs=0.01)

    def test_power_overall_b_symmetric(self, scenario5):
        assert scenario5.power_b == scenario5.power_a

    def test_power_23_13(self, scenario5):
        assert scenario5.power_23_13 == pytest.approx(0.929, abs=0.01)

    def test_power_13_13_13(self, scenario5):
        assert scenario5.power_13_13_13 == pytest.approx(0.930, abs=0.01)

    def test_power_12_12(self, scenario5):
        assert scenario5.power_12_12 == pytest.approx(0.941, abs=0.01)

    def test_procedures_beat_overall_test(self, scenario5):
        for p in (scenario5.power_23_13, scenario5.power_13_13_13, scenario5.power_12_12):
            assert p > scenario5.power_a

    def test_events(self, scenario5):
        probs = event_prob(0.0445, 0.80, 0.80, 0.72, 4.0, 8.4)
        assert scenario5.events == pytest.approx(4600 * probs.avgprob)
        assert scenario5.events == pytest.approx(955, abs=3)

    def test_evtprob(self, scenario5):
        assert len(scenario5.evtprob) == 4
        assert scenario5.evtprob == scenario5.event_probs.as_tuple()

    def test_critical_values_attached(self, scenario5):
        assert scenario5.critical_values.crit12 == pytest.approx(2.22, abs=0.02)

    def test_summary(self, scenario5):
        s = scenario5.summary()
        assert "2x2 Factorial Design" in s
        assert "1/2-1/2" in s
        assert "Expected events" in s


class TestDesignOptions:

    def test_asymmetric_hazard_ratios(self):
        r = fac2x2_design(
            4600, 0.0445, 0.80, 0.95, 0.72, 4.0, 8.4, config=MVNConfig(niter=2),
        )
        assert r.power_b != r.power_a

    def test_custom_correlations(self):
        cor = Correlations(0.7274961, 0.7164075, 0.4572905)
        r = fac2x2_design(
            4600, 0.0445, 0.80, 0.80, 0.72, 4.0, 8.4,
            correlations=cor, config=MVNConfig(niter=2),
        )
        assert r.critical_values.correlations == cor

    def test_more_subjects_more_power(self):
        cfg = MVNConfig(niter=2)
        small = fac2x2_design(2000, 0.0445, 0.80, 0.80, 0.72, 4.0, 8.4, config=cfg)
        large = fac2x2_design(6000, 0.0445, 0.80, 0.80, 0.72, 4.0, 8.4, config=cfg)
        assert large.power_12_12 > small.power_12_12
        assert large.power_a > small.power_a


class TestDesignErrors:

    def test_zero_n(self):
        with pytest.raises(DomainError, match="n must be"):
            fac2x2_design(0, 0.0445, 0.8, 0.8, 0.72, 4.0, 8.4)

    def test_fractional_n(self):
        with pytest.raises(DomainError, match="n must be"):
            fac2x2_design(2.5, 0.0445, 0.8, 0.8, 0.72, 4.0, 8.4)

    def test_bad_rate(self):
        with pytest.raises(DomainError, match="rate_c"):
            fac2x2_design(4600, 1.2, 0.8, 0.8, 0.72, 4.0, 8.4)

    def test_bad_window(self):
        with pytest.raises(DomainError, match="mincens"):
            fac2x2_design(4600, 0.0445, 0.8, 0.8, 0.72, 9.0, 8.4)
