"""Power of a 2x2 factorial time-to-event design.

Chains the event model, the critical-value solver and the power engine:

    design parameters -> event_prob -> avgprob, prob_a_c, prob_ab_c
    correlations      -> crit2x2    -> critical values
    both              -> strat_logrank_power / procedure_power -> powers

Validates against: R ``Factorial2x2::fac2x2design()``.
"""

from __future__ import annotations

import logging

from pyfactorial.design._common import DesignResult, HazardRatios, _check_n
from pyfactorial.design._events import event_prob
from pyfactorial.design._power import procedure_power, strat_logrank_power
from pyfactorial.multiplicity._common import Correlations, MVNConfig
from pyfactorial.multiplicity._critical import crit2x2

logger = logging.getLogger(__name__)


def fac2x2_design(
    n: int,
    rate_c: float,
    hr_a: float,
    hr_b: float,
    hr_ab: float,
    mincens: float,
    maxcens: float,
    dig: int | None = 2,
    alpha: float = 0.05,
    correlations: Correlations | None = None,
    config: MVNConfig | None = None,
) -> DesignResult:
    """Power for the overall A and B tests and the three procedures.

    Parameters
    ----------
    n : int
        Total sample size over the four arms (equal allocation).
    rate_c : float
        One-year event rate in control arm C.
    hr_a, hr_b, hr_ab : float
        Hazard ratios of A, B and AB relative to C.
    mincens, maxcens : float
        Minimum and maximum censoring times.
    dig : int or None
        Decimal places the z critical values are rounded up to.
    alpha : float
        Two-sided significance level.
    correlations : Correlations or None
        Correlations among the Wald statistics, used both to solve the
        critical values and to compute power. ``None`` uses
        ``Correlations.design()``.
    config : MVNConfig or None
        Integration budget and seed. ``None`` uses ``MVNConfig(niter=100)``.

    Returns
    -------
    DesignResult

    Examples
    --------
    Scenario 5 of Table 2 in Leifer, Troendle et al.:

    >>> r = fac2x2_design(4600, 0.0445, 0.80, 0.80, 0.72, 4.0, 8.4)
    >>> round(r.power_a, 2), round(r.power_12_12, 2)
    (0.72, 0.94)
    """
    _check_n(n)
    if correlations is None:
        correlations = Correlations.design()
    if config is None:
        config = MVNConfig(niter=100)

    hazard_ratios = HazardRatios(hr_a=hr_a, hr_b=hr_b, hr_ab=hr_ab)
    probs = event_prob(rate_c, hr_a, hr_b, hr_ab, mincens, maxcens)
    logger.debug("event probabilities %s, avgprob %.6f", probs.as_tuple(), probs.avgprob)

    crit = crit2x2(correlations, alpha=alpha, dig=dig, config=config)

    power_a = strat_logrank_power(n, hr_a, hr_b, hr_ab, probs.avgprob, dig, alpha).power
    power_b = strat_logrank_power(n, hr_b, hr_a, hr_ab, probs.avgprob, dig, alpha).power

    def _power(critical_values):
        return procedure_power(
            critical_values, n, hazard_ratios, probs, correlations, config,
        ).power

    return DesignResult(
        power_a=power_a,
        power_b=power_b,
        power_23_13=_power(crit.p23_13),
        power_13_13_13=_power(crit.p13_13_13),
        power_12_12=_power(crit.p12_12),
        events=n * probs.avgprob,
        event_probs=probs,
        critical_values=crit,
    )
