"""Exception types shared by all pyfactorial subpackages."""

from __future__ import annotations


class DomainError(ValueError):
    """An input lies outside the domain of the calculation.

    Raised eagerly at component entry: rates outside (0, 1), non-positive
    hazard ratios, malformed correlation matrices, inverted censoring windows.
    """


class ConvergenceError(RuntimeError):
    """A numerical routine exhausted its iteration budget.

    Attributes
    ----------
    value : float
        Last value reached by the routine (root estimate or probability).
    error : float
        Error estimate attached to ``value`` (residual or standard error).
        ``nan`` when no estimate is available.
    """

    def __init__(self, message: str, value: float = float("nan"), error: float = float("nan")):
        super().__init__(f"{message} (last value {value:.6g}, error {error:.3g})")
        self.value = value
        self.error = error
