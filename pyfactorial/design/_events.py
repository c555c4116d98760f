"""Event probabilities under exponential survival and uniform censoring.

Event times in arm g are exponential with hazard
``lambda_g = -log(1 - rate_c) * hr_g``, where ``rate_c`` is the one-year
event rate of control arm C.  Staggered accrual with a common end date makes
the censoring time uniform on ``[mincens, maxcens]``, so

    P(event) = E[1 - exp(-lambda * C)]
             = 1 - (exp(-lambda * mincens) - exp(-lambda * maxcens))
                   / (lambda * (maxcens - mincens)).

Validates against: R ``Factorial2x2::eventProb()``.
"""

from __future__ import annotations

import math

from pyfactorial._errors import DomainError
from pyfactorial.design._common import EventProbabilities, HazardRatios, _check_hr


def _check_window(rate_c: float, mincens: float, maxcens: float) -> None:
    if not (0.0 < rate_c < 1.0):
        raise DomainError(f"rate_c must be in (0, 1), got {rate_c}")
    if not (math.isfinite(mincens) and math.isfinite(maxcens)):
        raise DomainError(f"censoring times must be finite, got {mincens}, {maxcens}")
    if mincens < 0.0:
        raise DomainError(f"mincens must be >= 0, got {mincens}")
    if mincens > maxcens:
        raise DomainError(f"mincens must be <= maxcens, got {mincens} > {maxcens}")


def event_prob_arm(rate_c: float, hr: float, mincens: float, maxcens: float) -> float:
    """Event probability of one arm.

    Parameters
    ----------
    rate_c : float
        One-year event rate in control arm C, in (0, 1).
    hr : float
        Hazard ratio of the arm relative to C (1.0 for C itself).
    mincens, maxcens : float
        Minimum and maximum censoring (follow-up) times, in years.

    Returns
    -------
    float
        Probability of an event before censoring.
    """
    _check_window(rate_c, mincens, maxcens)
    _check_hr(hr)

    lam = -math.log1p(-rate_c) * hr
    width = maxcens - mincens
    if width == 0.0:
        return -math.expm1(-lam * mincens)
    # survival integrated over the censoring window, divided by its width
    mean_surv = (math.exp(-lam * mincens) - math.exp(-lam * maxcens)) / (lam * width)
    return 1.0 - mean_surv


def event_prob(
    rate_c: float,
    hr_a: float,
    hr_b: float,
    hr_ab: float,
    mincens: float,
    maxcens: float,
) -> EventProbabilities:
    """Event probabilities of arms C, A, B and AB.

    Examples
    --------
    >>> ep = event_prob(0.0445, 0.80, 0.80, 0.72, 4.0, 8.4)
    >>> round(ep.avgprob, 3)
    0.208
    """
    hrs = HazardRatios(hr_a=hr_a, hr_b=hr_b, hr_ab=hr_ab)
    return EventProbabilities(
        prob_c=event_prob_arm(rate_c, 1.0, mincens, maxcens),
        prob_a=event_prob_arm(rate_c, hrs.hr_a, mincens, maxcens),
        prob_b=event_prob_arm(rate_c, hrs.hr_b, mincens, maxcens),
        prob_ab=event_prob_arm(rate_c, hrs.hr_ab, mincens, maxcens),
    )
