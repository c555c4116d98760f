"""Tests for FactorialData."""

import numpy as np
import pytest

from pyfactorial import DomainError
from pyfactorial.analysis import FactorialData
from pyfactorial.multiplicity import cor2x2, event_count_covariance


def _trial():
    return FactorialData.from_arrays(
        time=[1.2, 3.4, 0.5, 2.2, 4.1, 0.9, 2.7, 3.3],
        event=[1, 0, 1, 1, 0, 1, 0, 1],
        ind_a=[0, 1, 0, 1, 0, 1, 0, 1],
        ind_b=[0, 0, 1, 1, 0, 0, 1, 1],
    )


class TestFactorialData:

    def test_counts(self):
        d = _trial()
        assert d.n == 8
        assert d.n_events == 5

    def test_arm_labels(self):
        d = _trial()
        assert list(d.arm) == ["C", "A", "B", "AB", "C", "A", "B", "AB"]

    def test_arm_events(self):
        assert _trial().arm_events() == {"C": 1, "A": 1, "B": 1, "AB": 2}

    def test_arm_events_feed_covariance(self):
        ev = _trial().arm_events()
        cov = event_count_covariance(ev["C"], ev["A"], ev["B"], ev["AB"])
        c = cor2x2(cov)
        assert 0.0 < c.cor_a_ab < c.cor_A_a < 1.0

    def test_covmat_vector_promoted(self):
        d = FactorialData.from_arrays([1.0, 2.0], [1, 0], [0, 1], [1, 0], covmat=[50, 61])
        assert d.covmat.shape == (2, 1)

    def test_no_covmat(self):
        assert _trial().covmat is None

    def test_equality_is_identity(self):
        d = _trial()
        assert d == d
        assert d != _trial()


class TestFactorialDataErrors:

    def test_empty(self):
        with pytest.raises(DomainError, match="at least one"):
            FactorialData.from_arrays([], [], [], [])

    def test_nonpositive_time(self):
        with pytest.raises(DomainError, match="time"):
            FactorialData.from_arrays([1.0, 0.0], [1, 1], [0, 1], [0, 1])

    def test_length_mismatch(self):
        with pytest.raises(DomainError, match="to match time"):
            FactorialData.from_arrays([1.0, 2.0], [1], [0, 1], [0, 1])

    def test_non_binary_indicator(self):
        with pytest.raises(DomainError, match="only 0 and 1"):
            FactorialData.from_arrays([1.0, 2.0], [1, 1], [0, 2], [0, 1])

    def test_covmat_rows(self):
        with pytest.raises(DomainError, match="rows"):
            FactorialData.from_arrays(
                [1.0, 2.0], [1, 1], [0, 1], [0, 1], covmat=np.ones((3, 2)),
            )

    def test_covmat_nan(self):
        with pytest.raises(DomainError, match="finite"):
            FactorialData.from_arrays(
                [1.0, 2.0], [1, 1], [0, 1], [0, 1], covmat=[[1.0], [np.nan]],
            )
