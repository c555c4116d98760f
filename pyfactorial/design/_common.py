"""Shared result types and validation for trial design calculations."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyfactorial._errors import DomainError
from pyfactorial.multiplicity._common import CriticalValues2x2


@dataclass(frozen=True)
class HazardRatios:
    """Hazard ratios of arms A, B and AB relative to control arm C."""

    hr_a: float
    hr_b: float
    hr_ab: float

    def __post_init__(self) -> None:
        for name in ("hr_a", "hr_b", "hr_ab"):
            _check_hr(getattr(self, name), name)


@dataclass(frozen=True)
class EventProbabilities:
    """Probability of observing an event in each arm during follow-up."""

    prob_c: float
    prob_a: float
    prob_b: float
    prob_ab: float

    @property
    def avgprob(self) -> float:
        """Average over the four equally sized arms."""
        return (self.prob_c + self.prob_a + self.prob_b + self.prob_ab) / 4.0

    @property
    def prob_a_c(self) -> float:
        """Average over arms A and C (the simple A comparison)."""
        return (self.prob_a + self.prob_c) / 2.0

    @property
    def prob_ab_c(self) -> float:
        """Average over arms AB and C (the simple AB comparison)."""
        return (self.prob_ab + self.prob_c) / 2.0

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Arm probabilities in C, A, B, AB order."""
        return (self.prob_c, self.prob_a, self.prob_b, self.prob_ab)


@dataclass(frozen=True)
class PowerResult:
    """Power of a single test or of a multiple-testing procedure.

    ``ncp`` and ``crit`` are aligned with ``hypotheses``.
    """

    n: int
    power: float
    alpha: float
    method: str
    hypotheses: tuple[str, ...]
    ncp: tuple[float, ...]  # mean of each Wald statistic under the alternative
    crit: tuple[float, ...]  # two-sided z critical values
    note: str = ""

    def summary(self) -> str:
        """Human-readable summary, similar to R's print.power.htest."""
        lines = [self.method, ""]
        lines.append(f"              n = {self.n}")
        for h, mu, c in zip(self.hypotheses, self.ncp, self.crit):
            lines.append(f"  {h:>13s} : ncp = {mu:.4f}, crit = {c:.4f}")
        lines.append(f"          alpha = {self.alpha}")
        lines.append(f"          power = {self.power:.6f}")
        if self.note:
            lines.append("")
            lines.append(f"NOTE: {self.note}")
        return "\n".join(lines)


@dataclass(frozen=True)
class DesignResult:
    """Power of the overall tests and the three procedures for one design."""

    power_a: float
    power_b: float
    power_23_13: float
    power_13_13_13: float
    power_12_12: float
    events: float  # expected number of events
    event_probs: EventProbabilities
    critical_values: CriticalValues2x2

    @property
    def evtprob(self) -> tuple[float, float, float, float]:
        return self.event_probs.as_tuple()

    def summary(self) -> str:
        c, a, b, ab = self.evtprob
        lines = [
            "2x2 Factorial Design",
            "=" * 40,
            f"Power overall A      : {self.power_a:.4f}",
            f"Power overall B      : {self.power_b:.4f}",
            f"Power 2/3-1/3        : {self.power_23_13:.4f}",
            f"Power 1/3-1/3-1/3    : {self.power_13_13_13:.4f}",
            f"Power 1/2-1/2        : {self.power_12_12:.4f}",
            f"Expected events      : {self.events:.1f}",
            f"Event prob C/A/B/AB  : {c:.4f} / {a:.4f} / {b:.4f} / {ab:.4f}",
        ]
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Shared validation
# ---------------------------------------------------------------------------

def _check_hr(hr: float, name: str = "hr") -> None:
    if not math.isfinite(hr) or hr <= 0.0:
        raise DomainError(f"{name} must be > 0, got {hr}")


def _check_n(n: int) -> None:
    if isinstance(n, bool) or int(n) != n or n < 1:
        raise DomainError(f"n must be a positive integer, got {n}")


def _check_prob(p: float, name: str) -> None:
    if not (0.0 < p <= 1.0):
        raise DomainError(f"{name} must be in (0, 1], got {p}")
