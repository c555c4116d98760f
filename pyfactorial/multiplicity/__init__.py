"""
Multiplicity control for the overall A, simple A and simple AB tests.

Derives the correlations among the three Wald statistics, solves the
per-hypothesis rejection thresholds of the 2/3-1/3, 1/3-1/3-1/3 and 1/2-1/2
procedures by root-finding over multivariate-normal tail probabilities, and
turns observed p-values into accept/reject decisions.

Validates against: R packages Factorial2x2, mvtnorm.
"""

from pyfactorial.multiplicity._common import (
    HYPOTHESES,
    OVERALL_A,
    PROCEDURE_12_12,
    PROCEDURE_13_13_13,
    PROCEDURE_23_13,
    PROCEDURES,
    SIMPLE_A,
    SIMPLE_AB,
    Correlations,
    CriticalValues2x2,
    CriticalValueSet,
    Decision,
    MVNConfig,
    Procedure,
    round_down,
    round_up,
)
from pyfactorial.multiplicity._correlation import cor2x2, event_count_covariance
from pyfactorial.multiplicity._critical import crit2x2, solve_critical_values
from pyfactorial.multiplicity._decision import apply_procedure, decide
from pyfactorial.multiplicity._mvn import rejection_probability

__all__ = [
    "HYPOTHESES",
    "OVERALL_A",
    "SIMPLE_A",
    "SIMPLE_AB",
    "Procedure",
    "PROCEDURE_23_13",
    "PROCEDURE_13_13_13",
    "PROCEDURE_12_12",
    "PROCEDURES",
    "Correlations",
    "MVNConfig",
    "CriticalValueSet",
    "CriticalValues2x2",
    "Decision",
    "round_down",
    "round_up",
    "cor2x2",
    "event_count_covariance",
    "rejection_probability",
    "solve_critical_values",
    "crit2x2",
    "decide",
    "apply_procedure",
]
