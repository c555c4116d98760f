"""Tests for rejection_probability."""

import math

import numpy as np
import pytest
from scipy.stats import norm

from pyfactorial import ConvergenceError, DomainError
from pyfactorial.multiplicity import MVNConfig, rejection_probability


Z975 = norm.isf(0.025)
CORR3 = [[1.0, 0.6, 0.6], [0.6, 1.0, 0.4], [0.6, 0.4, 1.0]]


class TestRejectionProbabilityNull:
    """Global null: zero mean."""

    def test_univariate_is_alpha(self):
        p = rejection_probability([Z975], [[1.0]])
        assert p == pytest.approx(0.05, abs=1e-12)

    def test_scalar_inputs(self):
        p = rejection_probability(Z975, 1.0)
        assert p == pytest.approx(0.05, abs=1e-12)

    def test_independent_pair(self):
        """Zero correlation: 1 - (1 - p)^2."""
        p = rejection_probability([Z975, Z975], np.eye(2))
        assert p == pytest.approx(1.0 - 0.95 ** 2, abs=1e-4)

    def test_independent_triple(self):
        c = norm.isf(0.01)
        p = rejection_probability([c, c, c], np.eye(3))
        assert p == pytest.approx(1.0 - 0.98 ** 3, abs=1e-4)

    def test_correlation_lowers_probability(self):
        """Positive correlation gives less than the independent union."""
        p_ind = rejection_probability([Z975, Z975], np.eye(2))
        p_cor = rejection_probability([Z975, Z975], [[1.0, 0.7], [0.7, 1.0]])
        assert 0.05 < p_cor < p_ind

    def test_infinite_critical_value_never_rejects(self):
        p = rejection_probability([Z975, np.inf], [[1.0, 0.5], [0.5, 1.0]])
        assert p == pytest.approx(0.05, abs=1e-4)

    def test_bounded(self):
        p = rejection_probability([0.1, 0.1, 0.1], np.eye(3))
        assert 0.0 <= p <= 1.0


class TestRejectionProbabilityShifted:
    """Non-central statistics (power)."""

    def test_univariate_two_sided(self):
        mu = 2.5
        p = rejection_probability([Z975], [[1.0]], mean=[mu])
        expected = norm.sf(Z975 - mu) + norm.cdf(-Z975 - mu)
        assert p == pytest.approx(expected, abs=1e-12)

    def test_shift_increases_probability(self):
        corr = [[1.0, 0.5], [0.5, 1.0]]
        p0 = rejection_probability([2.2, 2.2], corr)
        p1 = rejection_probability([2.2, 2.2], corr, mean=[1.0, 2.0])
        assert p1 > p0

    def test_sign_symmetry(self):
        """Two-sided tests: flipping every mean leaves the probability unchanged."""
        corr = [[1.0, 0.5], [0.5, 1.0]]
        p_neg = rejection_probability([2.2, 2.2], corr, mean=[-1.0, -2.0])
        p_pos = rejection_probability([2.2, 2.2], corr, mean=[1.0, 2.0])
        assert p_neg == pytest.approx(p_pos, abs=1e-4)


class TestReproducibility:
    """Seeded integration is deterministic."""

    def test_identical_seed_identical_output(self):
        corr = [[1.0, 0.6, 0.6], [0.6, 1.0, 0.4], [0.6, 0.4, 1.0]]
        cfg = MVNConfig(niter=3, seed=2024)
        p1 = rejection_probability([2.3, 2.3, 2.3], corr, config=cfg)
        p2 = rejection_probability([2.3, 2.3, 2.3], corr, config=cfg)
        assert p1 == p2

    def test_different_seeds_agree_within_tolerance(self):
        corr = [[1.0, 0.6], [0.6, 1.0]]
        p1 = rejection_probability([2.3, 2.3], corr, config=MVNConfig(seed=1))
        p2 = rejection_probability([2.3, 2.3], corr, config=MVNConfig(seed=2))
        assert p1 == pytest.approx(p2, abs=1e-4)


class TestValidation:
    """Malformed inputs raise DomainError."""

    def test_non_unit_diagonal(self):
        with pytest.raises(DomainError, match="unit diagonal"):
            rejection_probability([2.0, 2.0], [[2.0, 0.5], [0.5, 1.0]])

    def test_entry_out_of_range(self):
        with pytest.raises(DomainError, match=r"\[-1, 1\]"):
            rejection_probability([2.0, 2.0], [[1.0, 1.2], [1.2, 1.0]])

    def test_asymmetric(self):
        with pytest.raises(DomainError, match="symmetric"):
            rejection_probability([2.0, 2.0], [[1.0, 0.2], [0.5, 1.0]])

    def test_shape_mismatch(self):
        with pytest.raises(DomainError, match="2x2"):
            rejection_probability([2.0, 2.0], np.eye(3))

    def test_negative_critical_value(self):
        with pytest.raises(DomainError, match="crit"):
            rejection_probability([-1.0, 2.0], np.eye(2))

    def test_mean_length(self):
        with pytest.raises(DomainError, match="mean"):
            rejection_probability([2.0, 2.0], np.eye(2), mean=[1.0])

    def test_domain_error_is_value_error(self):
        with pytest.raises(ValueError):
            rejection_probability([2.0, 2.0], [[2.0, 0.5], [0.5, 1.0]])


class TestConfig:
    """MVNConfig validation and integration budget."""

    def test_defaults(self):
        cfg = MVNConfig()
        assert cfg.niter == 5
        assert cfg.abseps == 1e-5

    @pytest.mark.parametrize("niter", [0, 1])
    def test_invalid_niter(self, niter):
        """One replicate leaves no error estimate to check against abseps."""
        with pytest.raises(DomainError, match="niter must be >= 2"):
            MVNConfig(niter=niter)

    def test_invalid_abseps(self):
        with pytest.raises(DomainError, match="abseps"):
            MVNConfig(abseps=0.0)

    def test_budget_exhausted(self):
        """Too few points for the requested tolerance is reported, not hidden.

        Three dimensions: recent scipy evaluates the bivariate case exactly,
        so only higher dimensions carry replicate noise.
        """
        cfg = MVNConfig(niter=5, abseps=1e-12, maxpts=100)
        with pytest.raises(ConvergenceError) as excinfo:
            rejection_probability([1.0, 1.0, 1.0], CORR3, config=cfg)
        assert 0.0 < excinfo.value.value < 1.0
        assert excinfo.value.error > 1e-12
        assert not math.isnan(excinfo.value.error)

    def test_budget_exhausted_with_two_replicates(self):
        cfg = MVNConfig(niter=2, abseps=1e-12, maxpts=100)
        with pytest.raises(ConvergenceError):
            rejection_probability([1.0, 1.0, 1.0], CORR3, config=cfg)
