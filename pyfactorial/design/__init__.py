"""
Power calculations for 2x2 factorial time-to-event trials.

Event probabilities per arm under exponential survival with uniform
censoring, the power of the B-stratified log-rank test for the overall
effects, and the power of the 2/3-1/3, 1/3-1/3-1/3 and 1/2-1/2 procedures.

Validates against: R package Factorial2x2.
"""

from pyfactorial.design._common import (
    DesignResult,
    EventProbabilities,
    HazardRatios,
    PowerResult,
)
from pyfactorial.design._design import fac2x2_design
from pyfactorial.design._events import event_prob, event_prob_arm
from pyfactorial.design._power import noncentrality, procedure_power, strat_logrank_power

__all__ = [
    "DesignResult",
    "EventProbabilities",
    "HazardRatios",
    "PowerResult",
    "event_prob",
    "event_prob_arm",
    "noncentrality",
    "strat_logrank_power",
    "procedure_power",
    "fac2x2_design",
]
