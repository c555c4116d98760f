"""Shared types and helpers for multiplicity-controlled testing."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import brentq

from pyfactorial._errors import ConvergenceError, DomainError

OVERALL_A = "overall A"
SIMPLE_A = "simple A"
SIMPLE_AB = "simple AB"

HYPOTHESES = (OVERALL_A, SIMPLE_A, SIMPLE_AB)
_INDEX = {h: i for i, h in enumerate(HYPOTHESES)}


# ---------------------------------------------------------------------------
# Procedures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Procedure:
    """A weighted closed-testing procedure over a subset of the hypotheses.

    ``weights[i]`` is the share of alpha allocated to ``hypotheses[i]``.
    Hypotheses flagged in ``fixed`` are tested at exactly ``weight * alpha``;
    the remaining ones share a common scale that is inflated until the
    family-wise error rate reaches alpha.
    """

    name: str
    hypotheses: tuple[str, ...]
    weights: tuple[float, ...]
    fixed: tuple[bool, ...]

    def __post_init__(self) -> None:
        k = len(self.hypotheses)
        if k == 0:
            raise DomainError("a procedure must test at least one hypothesis")
        if len(self.weights) != k or len(self.fixed) != k:
            raise DomainError(
                f"hypotheses, weights and fixed must have equal length, "
                f"got {k}, {len(self.weights)}, {len(self.fixed)}"
            )
        for h in self.hypotheses:
            if h not in _INDEX:
                raise DomainError(f"unknown hypothesis {h!r}, expected one of {HYPOTHESES}")
        if len(set(self.hypotheses)) != k:
            raise DomainError(f"duplicate hypotheses in {self.hypotheses}")
        if any(not (0.0 < w <= 1.0) for w in self.weights):
            raise DomainError(f"weights must be in (0, 1], got {self.weights}")
        if not math.isclose(sum(self.weights), 1.0, abs_tol=1e-9):
            raise DomainError(f"weights must sum to 1, got {sum(self.weights)}")
        if all(self.fixed):
            raise DomainError("at least one hypothesis must be solved jointly")


PROCEDURE_23_13 = Procedure(
    name="2/3-1/3",
    hypotheses=(OVERALL_A, SIMPLE_AB),
    weights=(2.0 / 3.0, 1.0 / 3.0),
    fixed=(True, False),
)
PROCEDURE_13_13_13 = Procedure(
    name="1/3-1/3-1/3",
    hypotheses=(OVERALL_A, SIMPLE_A, SIMPLE_AB),
    weights=(1.0 / 3.0, 1.0 / 3.0, 1.0 / 3.0),
    fixed=(False, False, False),
)
PROCEDURE_12_12 = Procedure(
    name="1/2-1/2",
    hypotheses=(SIMPLE_A, SIMPLE_AB),
    weights=(0.5, 0.5),
    fixed=(False, False),
)

PROCEDURES = {
    p.name: p for p in (PROCEDURE_23_13, PROCEDURE_13_13_13, PROCEDURE_12_12)
}


# ---------------------------------------------------------------------------
# Correlations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Correlations:
    """Pairwise correlations among the overall A, simple A and simple AB statistics."""

    cor_A_a: float  # overall A vs simple A
    cor_A_ab: float  # overall A vs simple AB
    cor_a_ab: float  # simple A vs simple AB

    @classmethod
    def design(
        cls,
        cor_A_a: float = 1.0 / math.sqrt(2.0),
        cor_A_ab: float = 1.0 / math.sqrt(2.0),
        cor_a_ab: float = 0.5,
    ) -> Correlations:
        """Asymptotic correlations under balanced allocation and no interaction."""
        return cls(cor_A_a=cor_A_a, cor_A_ab=cor_A_ab, cor_a_ab=cor_a_ab)

    def full_matrix(self) -> NDArray[np.floating]:
        """3x3 matrix in (overall A, simple A, simple AB) order."""
        return np.array(
            [
                [1.0, self.cor_A_a, self.cor_A_ab],
                [self.cor_A_a, 1.0, self.cor_a_ab],
                [self.cor_A_ab, self.cor_a_ab, 1.0],
            ],
            dtype=np.float64,
        )

    def matrix(self, hypotheses: Sequence[str] = HYPOTHESES) -> NDArray[np.floating]:
        """Correlation sub-matrix for *hypotheses*, in the order given."""
        idx = [_INDEX[h] for h in hypotheses]
        return self.full_matrix()[np.ix_(idx, idx)]


# ---------------------------------------------------------------------------
# Integration configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MVNConfig:
    """Numerical budget for multivariate-normal integration and root-finding.

    Attributes
    ----------
    niter : int
        Number of replicate quasi-Monte-Carlo evaluations averaged per
        probability, at least 2.
    seed : int
        Seed of the generator driving the randomized lattice. A fresh
        generator is built from it on every evaluation.
    abseps : float
        Absolute error tolerance of each evaluation; also the bound on the
        replicate standard error.
    maxpts : int or None
        Maximum integrand evaluations per replicate (scipy default if None).
    xtol : float
        Absolute tolerance of the root-finder on the alpha scale.
    maxiter : int
        Iteration budget of the root-finder.
    """

    niter: int = 5
    seed: int = 47477
    abseps: float = 1e-5
    maxpts: int | None = None
    xtol: float = 1e-10
    maxiter: int = 200

    def __post_init__(self) -> None:
        # at least two replicates are needed to estimate the integration error
        if self.niter < 2:
            raise DomainError(f"niter must be >= 2, got {self.niter}")
        if not (self.abseps > 0.0):
            raise DomainError(f"abseps must be > 0, got {self.abseps}")
        if self.maxpts is not None and self.maxpts < 1:
            raise DomainError(f"maxpts must be >= 1, got {self.maxpts}")
        if not (self.xtol > 0.0):
            raise DomainError(f"xtol must be > 0, got {self.xtol}")
        if self.maxiter < 1:
            raise DomainError(f"maxiter must be >= 1, got {self.maxiter}")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CriticalValueSet:
    """Solved rejection thresholds of one procedure.

    ``crit`` holds two-sided z critical values rounded up to ``dig`` decimals,
    ``sig`` the p-value thresholds they imply and ``sig_exact`` the unrounded
    thresholds satisfying the family-wise constraint. ``sig <= sig_exact``.
    """

    procedure: Procedure
    crit: tuple[float, ...]
    sig: tuple[float, ...]
    sig_exact: tuple[float, ...]
    alpha: float
    dig: int | None
    scale: float  # solved common alpha scale of the jointly tested hypotheses
    fwer: float  # family-wise rejection probability at sig_exact

    @property
    def hypotheses(self) -> tuple[str, ...]:
        return self.procedure.hypotheses

    def sig_for(self, hypothesis: str) -> float:
        """p-value threshold for *hypothesis*."""
        return self.sig[self._position(hypothesis)]

    def crit_for(self, hypothesis: str) -> float:
        """z critical value for *hypothesis*."""
        return self.crit[self._position(hypothesis)]

    def _position(self, hypothesis: str) -> int:
        try:
            return self.hypotheses.index(hypothesis)
        except ValueError:
            raise KeyError(
                f"{hypothesis!r} is not tested by the {self.procedure.name} procedure"
            ) from None

    def summary(self) -> str:
        lines = [f"{self.procedure.name} procedure (alpha = {self.alpha})"]
        for h, c, s in zip(self.hypotheses, self.crit, self.sig):
            lines.append(f"  {h:<10s} z > {c:.6g}   p <= {s:.6g}")
        return "\n".join(lines)


@dataclass(frozen=True)
class CriticalValues2x2:
    """Critical values of the three procedures for one correlation structure."""

    p23_13: CriticalValueSet
    p13_13_13: CriticalValueSet
    p12_12: CriticalValueSet
    correlations: Correlations

    @property
    def crit23A(self) -> float:
        return self.p23_13.crit_for(OVERALL_A)

    @property
    def crit23ab(self) -> float:
        return self.p23_13.crit_for(SIMPLE_AB)

    @property
    def crit13(self) -> float:
        return self.p13_13_13.crit[0]

    @property
    def crit12(self) -> float:
        return self.p12_12.crit[0]

    @property
    def sig23A(self) -> float:
        return self.p23_13.sig_for(OVERALL_A)

    @property
    def sig23ab(self) -> float:
        return self.p23_13.sig_for(SIMPLE_AB)

    @property
    def sig13(self) -> float:
        return self.p13_13_13.sig[0]

    @property
    def sig12(self) -> float:
        return self.p12_12.sig[0]

    def summary(self) -> str:
        return "\n\n".join(
            s.summary() for s in (self.p23_13, self.p13_13_13, self.p12_12)
        )


@dataclass(frozen=True)
class Decision:
    """Accept/reject outcome for one hypothesis."""

    hypothesis: str
    p_value: float
    sig: float
    reject: bool

    @property
    def label(self) -> str:
        return f"{'reject' if self.reject else 'accept'} {self.hypothesis}"


# ---------------------------------------------------------------------------
# Shared validation
# ---------------------------------------------------------------------------

def _check_alpha(alpha: float) -> None:
    if not (0.0 < alpha < 1.0):
        raise DomainError(f"alpha must be in (0, 1), got {alpha}")


def _check_dig(dig: int | None) -> None:
    if dig is not None and (int(dig) != dig or dig < 0):
        raise DomainError(f"dig must be a non-negative integer or None, got {dig}")


def _check_correlation_matrix(corr: NDArray) -> NDArray[np.floating]:
    """Validate a correlation matrix; return it as a float array.

    Positive semi-definiteness is not checked here.
    """
    corr = np.asarray(corr, dtype=np.float64)
    if corr.ndim != 2 or corr.shape[0] != corr.shape[1]:
        raise DomainError(f"correlation matrix must be square, got shape {corr.shape}")
    if not np.all(np.isfinite(corr)):
        raise DomainError("correlation matrix must be finite")
    if not np.allclose(corr, corr.T, atol=1e-12):
        raise DomainError("correlation matrix must be symmetric")
    if not np.allclose(np.diag(corr), 1.0, atol=1e-12):
        raise DomainError(f"correlation matrix must have unit diagonal, got {np.diag(corr)}")
    if np.any(np.abs(corr) > 1.0):
        raise DomainError("correlation matrix entries must lie in [-1, 1]")
    return corr


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_down(x: float, dig: int) -> float:
    """Round *x* toward minus infinity at *dig* decimal places.

    >>> round_down(0.02665044, 3)
    0.026
    """
    if dig is None:
        raise DomainError("dig must be a non-negative integer, got None")
    _check_dig(dig)
    scale = 10.0 ** dig
    # round() absorbs representation error such as 2.13 * 100 = 212.99999999999997;
    # the result must still never exceed x
    k = math.floor(round(x * scale, 9))
    if k / scale > x:
        k -= 1
    return k / scale


def round_up(x: float, dig: int) -> float:
    """Round *x* toward plus infinity at *dig* decimal places; never below *x*."""
    return -round_down(-x, dig)


# ---------------------------------------------------------------------------
# Shared root-finding
# ---------------------------------------------------------------------------

def _solve_parameter(
    func: Callable[[float], float],
    target: float,
    bracket: tuple[float, float],
    *,
    xtol: float = 1e-10,
    maxiter: int = 200,
) -> tuple[float, int]:
    """Solve ``func(x) == target`` via Brent's method.

    Returns
    -------
    tuple
        ``(x, iterations)``.

    Raises
    ------
    ConvergenceError
        If the bracket does not straddle the target or the iteration budget
        runs out before *xtol* is reached.
    """
    lo, hi = bracket
    f_lo = func(lo) - target
    f_hi = func(hi) - target

    if f_lo * f_hi > 0:
        closest = lo if abs(f_lo) < abs(f_hi) else hi
        raise ConvergenceError(
            f"target {target:.6g} is outside [{f_lo + target:.6g}, {f_hi + target:.6g}] "
            f"on the bracket [{lo:.6g}, {hi:.6g}]",
            value=closest,
            error=min(abs(f_lo), abs(f_hi)),
        )

    root, info = brentq(
        lambda x: func(x) - target, lo, hi,
        xtol=xtol, maxiter=maxiter, full_output=True, disp=False,
    )
    if not info.converged:
        raise ConvergenceError(
            f"root-finding did not converge in {maxiter} iterations",
            value=root,
            error=abs(func(root) - target),
        )
    return root, info.iterations
