"""Accept/reject decisions from observed p-values and solved thresholds."""

from __future__ import annotations

import math
from collections.abc import Mapping

from pyfactorial._errors import DomainError
from pyfactorial.multiplicity._common import CriticalValueSet, Decision


def decide(hypothesis: str, p_value: float, sig: float) -> Decision:
    """Reject *hypothesis* iff ``p_value <= sig``."""
    if math.isnan(p_value) or not (0.0 <= p_value <= 1.0):
        raise DomainError(f"p-value for {hypothesis} must be in [0, 1], got {p_value}")
    if math.isnan(sig) or not (0.0 <= sig <= 1.0):
        raise DomainError(f"threshold for {hypothesis} must be in [0, 1], got {sig}")
    return Decision(hypothesis=hypothesis, p_value=p_value, sig=sig, reject=p_value <= sig)


def apply_procedure(
    critical_values: CriticalValueSet,
    p_values: Mapping[str, float],
) -> tuple[Decision, ...]:
    """Decisions for the hypotheses tested by one procedure.

    Parameters
    ----------
    critical_values : CriticalValueSet
        Solved thresholds of the procedure.
    p_values : mapping
        Two-sided p-values keyed by hypothesis label. Entries for hypotheses
        the procedure does not test are ignored.

    Returns
    -------
    tuple of Decision
        One per tested hypothesis, in the procedure's order.
    """
    decisions = []
    for h, sig in zip(critical_values.hypotheses, critical_values.sig):
        if h not in p_values:
            raise DomainError(
                f"missing p-value for {h!r} required by the "
                f"{critical_values.procedure.name} procedure"
            )
        decisions.append(decide(h, float(p_values[h]), sig))
    return tuple(decisions)
