"""
PyFactorial: design and analysis of 2x2 factorial time-to-event trials.

Subjects receive none, one or both of two treatments (A, B).  PyFactorial
computes the power of the overall and simple effect tests at the design
stage and the accept/reject conclusions at the analysis stage for three
multiplicity-controlled procedures (2/3-1/3, 1/3-1/3-1/3, 1/2-1/2) that
jointly test the overall A, simple A and simple AB effects.

Usage:
    from pyfactorial import design, multiplicity, analysis
"""

__version__ = "0.1.0"
__author__ = "Hai-Shuo"
__email__ = "contact@sgcx.org"

from pyfactorial._errors import ConvergenceError, DomainError
from pyfactorial import multiplicity
from pyfactorial import design
from pyfactorial import analysis

__all__ = [
    "__version__",
    "ConvergenceError",
    "DomainError",
    "multiplicity",
    "design",
    "analysis",
]
