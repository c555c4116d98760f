"""Power of the overall tests and of the three multiple-testing procedures.

Under the alternative each Wald statistic is normal with unit variance and
mean ``log(HR) * sqrt(d / 4)``, ``d`` being the expected number of events in
the two groups compared (Schoenfeld's approximation with 1:1 allocation):

- overall A (log-rank stratified on B): the average of the A-vs-C and
  AB-vs-B log hazard ratios, with ``d = n * avgprob``;
- simple A: ``log(hr_a)`` with ``d = (n / 2) * prob_a_c``;
- simple AB: ``log(hr_ab)`` with ``d = (n / 2) * prob_ab_c``.

The statistics keep their null correlations under the alternative, so the
power of a procedure is one evaluation of the rejection probability used to
solve its critical values, at the shifted mean.

References
----------
Slud, E.V. (1994).  Analysis of factorial survival experiments.
*Biometrics*, 50(1), 25-38.

Validates against: R ``Factorial2x2::strLgrkPower()``, ``power23_13()``,
``power13_13_13()``, ``power12_12()``.
"""

from __future__ import annotations

import logging
import math

from scipy.stats import norm

from pyfactorial.design._common import (
    EventProbabilities,
    HazardRatios,
    PowerResult,
    _check_hr,
    _check_n,
    _check_prob,
)
from pyfactorial.multiplicity._common import (
    OVERALL_A,
    SIMPLE_A,
    SIMPLE_AB,
    Correlations,
    CriticalValueSet,
    MVNConfig,
    _check_alpha,
    _check_dig,
    round_up,
)
from pyfactorial.multiplicity._mvn import rejection_probability

logger = logging.getLogger(__name__)


def _overall_log_hr(hr_a: float, hr_b: float, hr_ab: float) -> float:
    """Stratum-averaged log hazard ratio of the overall A effect."""
    return (math.log(hr_a) + math.log(hr_ab / hr_b)) / 2.0


def noncentrality(
    n: int,
    hazard_ratios: HazardRatios,
    event_probs: EventProbabilities,
) -> dict[str, float]:
    """Mean of each Wald statistic under the alternative.

    Parameters
    ----------
    n : int
        Total sample size over the four arms.
    hazard_ratios : HazardRatios
        Hazard ratios of A, B and AB relative to C.
    event_probs : EventProbabilities
        Arm event probabilities, e.g. from :func:`event_prob`.

    Returns
    -------
    dict
        Keyed by ``'overall A'``, ``'simple A'``, ``'simple AB'``.
    """
    _check_n(n)
    hr = hazard_ratios
    return {
        OVERALL_A: _overall_log_hr(hr.hr_a, hr.hr_b, hr.hr_ab)
        * math.sqrt(n * event_probs.avgprob / 4.0),
        SIMPLE_A: math.log(hr.hr_a) * math.sqrt(n / 2.0 * event_probs.prob_a_c / 4.0),
        SIMPLE_AB: math.log(hr.hr_ab) * math.sqrt(n / 2.0 * event_probs.prob_ab_c / 4.0),
    }


def strat_logrank_power(
    n: int,
    hr_a: float,
    hr_b: float,
    hr_ab: float,
    avgprob: float,
    dig: int | None = 2,
    alpha: float = 0.05,
) -> PowerResult:
    """Power of the B-stratified log-rank test for the overall A effect.

    The overall B power follows by swapping ``hr_a`` and ``hr_b``.

    Parameters
    ----------
    n : int
        Total sample size.
    hr_a, hr_b, hr_ab : float
        Hazard ratios of A, B and AB relative to C.
    avgprob : float
        Event probability averaged over the four arms.
    dig : int or None
        Decimal places the z critical value is rounded up to.
    alpha : float
        Two-sided significance level.

    Returns
    -------
    PowerResult

    Examples
    --------
    >>> r = strat_logrank_power(4600, 0.80, 0.80, 0.72, 0.2076)
    >>> round(r.power, 2)
    0.72
    """
    _check_n(n)
    for value, name in ((hr_a, "hr_a"), (hr_b, "hr_b"), (hr_ab, "hr_ab")):
        _check_hr(value, name)
    _check_prob(avgprob, "avgprob")
    _check_alpha(alpha)
    _check_dig(dig)

    crit = float(norm.isf(alpha / 2.0))
    if dig is not None:
        crit = round_up(crit, dig)
    ncp = _overall_log_hr(hr_a, hr_b, hr_ab) * math.sqrt(n * avgprob / 4.0)
    pwr = float(norm.sf(crit - ncp) + norm.cdf(-crit - ncp))

    return PowerResult(
        n=n,
        power=pwr,
        alpha=alpha,
        method="Stratified log-rank test power calculation",
        hypotheses=(OVERALL_A,),
        ncp=(ncp,),
        crit=(crit,),
        note="n is total sample size (all four arms combined)",
    )


def procedure_power(
    critical_values: CriticalValueSet,
    n: int,
    hazard_ratios: HazardRatios,
    event_probs: EventProbabilities,
    correlations: Correlations,
    config: MVNConfig | None = None,
) -> PowerResult:
    """Probability that a procedure rejects at least one of its hypotheses.

    Parameters
    ----------
    critical_values : CriticalValueSet
        Solved thresholds of the procedure (its ``procedure`` field selects
        the tested hypotheses).
    n : int
        Total sample size.
    hazard_ratios : HazardRatios
        Hazard ratios of A, B and AB relative to C.
    event_probs : EventProbabilities
        Arm event probabilities.
    correlations : Correlations
        Correlations among the Wald statistics.
    config : MVNConfig or None
        Integration budget and seed.

    Returns
    -------
    PowerResult
    """
    procedure = critical_values.procedure
    means = noncentrality(n, hazard_ratios, event_probs)
    ncp = tuple(means[h] for h in procedure.hypotheses)

    pwr = rejection_probability(
        critical_values.crit,
        correlations.matrix(procedure.hypotheses),
        mean=ncp,
        config=config,
    )
    logger.debug("%s power %.6f at ncp %s", procedure.name, pwr, ncp)

    return PowerResult(
        n=n,
        power=pwr,
        alpha=critical_values.alpha,
        method=f"{procedure.name} procedure power calculation",
        hypotheses=procedure.hypotheses,
        ncp=ncp,
        crit=critical_values.crit,
        note="power to reject at least one tested hypothesis",
    )
