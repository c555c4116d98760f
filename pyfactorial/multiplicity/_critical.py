"""Critical values for the 2/3-1/3, 1/3-1/3-1/3 and 1/2-1/2 procedures.

Each procedure allocates alpha across its hypotheses by fixed weights.
Hypotheses marked *fixed* are tested at exactly ``weight * alpha``; the
others are tested at ``weight * gamma`` where the common scale ``gamma`` is
the largest value keeping the family-wise error rate at alpha under the
global null, accounting for the correlation among the Wald statistics.

- 2/3-1/3: overall A at 2/3 alpha; simple AB solved from
  P(overall A or simple AB rejects) = alpha.
- 1/3-1/3-1/3: one common threshold from the joint 3-D constraint.
- 1/2-1/2: one common threshold from the joint 2-D constraint on simple A
  and simple AB.

Critical z values are rounded up to ``dig`` decimals so the realized
family-wise error never exceeds alpha after rounding.

References
----------
Leifer, E.S., Troendle, J.F., Kolecki, A., Follmann, D. (2020).  Joint
testing of overall and simple effects for the two-by-two factorial trial
design.  *Clinical Trials*, 17(4), 402-412.

Validates against: R ``Factorial2x2::crit2x2()``.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray
from scipy.stats import norm

from pyfactorial._errors import DomainError
from pyfactorial.multiplicity._common import (
    PROCEDURE_12_12,
    PROCEDURE_13_13_13,
    PROCEDURE_23_13,
    PROCEDURES,
    Correlations,
    CriticalValues2x2,
    CriticalValueSet,
    MVNConfig,
    Procedure,
    _check_alpha,
    _check_correlation_matrix,
    _check_dig,
    _solve_parameter,
    round_up,
)
from pyfactorial.multiplicity._mvn import rejection_probability

logger = logging.getLogger(__name__)


def _resolve_procedure(procedure: Procedure | str) -> Procedure:
    if isinstance(procedure, Procedure):
        return procedure
    try:
        return PROCEDURES[procedure]
    except KeyError:
        raise DomainError(
            f"procedure must be one of {tuple(PROCEDURES)}, got {procedure!r}"
        ) from None


def _allocate(procedure: Procedure, alpha: float, gamma: float) -> NDArray[np.floating]:
    """Two-sided p-value thresholds for a given common scale *gamma*."""
    weights = np.asarray(procedure.weights, dtype=np.float64)
    fixed = np.asarray(procedure.fixed, dtype=bool)
    return np.where(fixed, weights * alpha, np.minimum(weights * gamma, 1.0))


def _sig_to_crit(sig: NDArray[np.floating]) -> NDArray[np.floating]:
    return norm.isf(sig / 2.0)


def solve_critical_values(
    procedure: Procedure | str,
    correlations: Correlations,
    alpha: float = 0.05,
    dig: int | None = 2,
    config: MVNConfig | None = None,
) -> CriticalValueSet:
    """Solve the rejection thresholds of one procedure.

    Parameters
    ----------
    procedure : Procedure or str
        ``PROCEDURE_23_13``, ``PROCEDURE_13_13_13``, ``PROCEDURE_12_12`` or
        their names (``'2/3-1/3'``, ``'1/3-1/3-1/3'``, ``'1/2-1/2'``).
    correlations : Correlations
        Correlations among the overall A, simple A and simple AB statistics.
    alpha : float
        Two-sided family-wise significance level.
    dig : int or None
        Decimal places the z critical values are rounded up to. ``None``
        keeps the unrounded values.
    config : MVNConfig or None
        Integration budget, seed and root-finding tolerance.

    Returns
    -------
    CriticalValueSet

    Raises
    ------
    DomainError
        On invalid alpha, dig, procedure or correlation matrix.
    ConvergenceError
        If the root-finder or the integrator exhausts its budget.
    """
    _check_alpha(alpha)
    _check_dig(dig)
    if config is None:
        config = MVNConfig()
    procedure = _resolve_procedure(procedure)
    corr = _check_correlation_matrix(correlations.matrix(procedure.hypotheses))

    def fwer(gamma: float) -> float:
        crit = _sig_to_crit(_allocate(procedure, alpha, gamma))
        return rejection_probability(crit, corr, config=config)

    free_weights = [w for w, f in zip(procedure.weights, procedure.fixed) if not f]
    lo = alpha  # Bonferroni: fwer(lo) <= alpha
    hi = alpha / max(free_weights)  # a free test alone at alpha: fwer(hi) >= alpha

    if hi <= lo:
        # a single hypothesis carrying the whole alpha
        gamma, n_iter = alpha, 0
    else:
        gamma, n_iter = _solve_parameter(
            fwer, alpha, (lo, hi), xtol=config.xtol, maxiter=config.maxiter,
        )

    sig_exact = _allocate(procedure, alpha, gamma)
    crit_exact = _sig_to_crit(sig_exact)
    if dig is None:
        crit = crit_exact
        sig = sig_exact
    else:
        crit = np.array([round_up(float(c), dig) for c in crit_exact])
        sig = 2.0 * norm.sf(crit)
    achieved = fwer(gamma)

    logger.debug(
        "%s: scale %.8g after %d iterations, fwer %.8g, sig %s",
        procedure.name, gamma, n_iter, achieved, np.round(sig, 8),
    )

    return CriticalValueSet(
        procedure=procedure,
        crit=tuple(float(c) for c in crit),
        sig=tuple(float(s) for s in sig),
        sig_exact=tuple(float(s) for s in sig_exact),
        alpha=alpha,
        dig=dig,
        scale=float(gamma),
        fwer=float(achieved),
    )


def crit2x2(
    correlations: Correlations | None = None,
    alpha: float = 0.05,
    dig: int | None = 2,
    config: MVNConfig | None = None,
) -> CriticalValues2x2:
    """Critical values for all three procedures.

    Parameters
    ----------
    correlations : Correlations or None
        Correlations among the Wald statistics. ``None`` uses the design
        constants ``Correlations.design()``.
    alpha, dig, config
        As in :func:`solve_critical_values`.

    Returns
    -------
    CriticalValues2x2

    Examples
    --------
    >>> cv = crit2x2(alpha=0.05, dig=2)
    >>> cv.sig23A < 2 * 0.05 / 3
    True
    """
    if correlations is None:
        correlations = Correlations.design()
    return CriticalValues2x2(
        p23_13=solve_critical_values(PROCEDURE_23_13, correlations, alpha, dig, config),
        p13_13_13=solve_critical_values(PROCEDURE_13_13_13, correlations, alpha, dig, config),
        p12_12=solve_critical_values(PROCEDURE_12_12, correlations, alpha, dig, config),
        correlations=correlations,
    )
