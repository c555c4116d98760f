"""Correlations among the overall A, simple A and simple AB Wald statistics.

Design mode uses the balanced-allocation constants of
:meth:`Correlations.design`.  Analysis mode converts the covariance of the
three fitted log hazard ratio estimators into correlations.

Under balanced allocation the stratified overall A estimator is the average
of the A-vs-C and AB-vs-B log hazard ratios, and the simple effects share
the control arm, which gives correlations 1/sqrt(2), 1/sqrt(2) and 1/2.

Validates against: R ``Factorial2x2::cor2x2()``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pyfactorial._errors import DomainError
from pyfactorial.multiplicity._common import Correlations


def cor2x2(cov: NDArray | list[list[float]]) -> Correlations:
    """Correlations implied by the covariance of the log hazard ratio estimators.

    Parameters
    ----------
    cov : array-like, shape (3, 3)
        Covariance of the overall A, simple A and simple AB log hazard ratio
        estimators, in that order.

    Returns
    -------
    Correlations

    Notes
    -----
    Positive semi-definiteness is not checked; an inconsistent covariance
    yields correlations the critical-value solver may reject.
    """
    cov = np.asarray(cov, dtype=np.float64)
    if cov.shape != (3, 3):
        raise DomainError(f"cov must have shape (3, 3), got {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise DomainError("cov must be finite")
    if not np.allclose(cov, cov.T, rtol=1e-8, atol=1e-14):
        raise DomainError("cov must be symmetric")
    var = np.diag(cov)
    if np.any(var <= 0.0):
        raise DomainError(f"cov must have positive variances, got {var}")

    sd = np.sqrt(var)
    r = cov / np.outer(sd, sd)
    return Correlations(
        cor_A_a=float(r[0, 1]),
        cor_A_ab=float(r[0, 2]),
        cor_a_ab=float(r[1, 2]),
    )


def event_count_covariance(
    events_c: float,
    events_a: float,
    events_b: float,
    events_ab: float,
) -> NDArray[np.floating]:
    """Asymptotic covariance of the three log hazard ratio estimators.

    Uses the log-rank approximation ``var(log HR g vs h) = 1/d_g + 1/d_h``
    with ``d`` the number of events per arm.  Simple A and simple AB share the
    control arm; overall A is the inverse-variance combination of the
    A-vs-C (B = 0 stratum) and AB-vs-B (B = 1 stratum) estimates.

    Parameters
    ----------
    events_c, events_a, events_b, events_ab : float
        Observed (or expected) events in arms C, A, B and AB.

    Returns
    -------
    ndarray, shape (3, 3)
        Covariance in (overall A, simple A, simple AB) order.
    """
    counts = np.array([events_c, events_a, events_b, events_ab], dtype=np.float64)
    if not np.all(np.isfinite(counts)) or np.any(counts <= 0.0):
        raise DomainError(f"event counts must be > 0, got {counts}")

    v_c, v_a, v_b, v_ab = 1.0 / counts
    var_a = v_c + v_a  # B = 0 stratum: A vs C
    var_strat1 = v_b + v_ab  # B = 1 stratum: AB vs B
    var_overall = 1.0 / (1.0 / var_a + 1.0 / var_strat1)
    w0 = var_overall / var_a
    w1 = var_overall / var_strat1

    cov_overall_ab = w0 * v_c + w1 * v_ab
    return np.array(
        [
            [var_overall, var_overall, cov_overall_ab],
            [var_overall, var_a, v_c],
            [cov_overall_ab, v_c, v_c + v_ab],
        ],
        dtype=np.float64,
    )
