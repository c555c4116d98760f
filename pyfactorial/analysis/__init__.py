"""
Analysis of a completed 2x2 factorial time-to-event trial.

The stratified Cox fits are done elsewhere; their hazard ratio estimates
enter through ``EffectEstimate`` / ``FittedEffects``, and
``fac2x2_analyze`` reports the accept/reject conclusions of the 2/3-1/3,
1/3-1/3-1/3 and 1/2-1/2 procedures.

Validates against: R package Factorial2x2.
"""

from pyfactorial.analysis._analyze import fac2x2_analyze
from pyfactorial.analysis._common import (
    AnalysisResult,
    EffectEstimate,
    FactorialData,
    FittedEffects,
)

__all__ = [
    "AnalysisResult",
    "EffectEstimate",
    "FactorialData",
    "FittedEffects",
    "fac2x2_analyze",
]
