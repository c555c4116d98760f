"""Input and result types for analysing a completed 2x2 factorial trial."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from scipy.stats import norm

from pyfactorial._errors import DomainError
from pyfactorial.multiplicity._common import (
    HYPOTHESES,
    Correlations,
    CriticalValues2x2,
    Decision,
)


# ---------------------------------------------------------------------------
# Fitted effects (output of the external Cox regression)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EffectEstimate:
    """Wald summary of one log hazard ratio estimate."""

    hypothesis: str
    log_hr: float
    se: float
    hr: float
    ci: tuple[float, float]  # confidence interval for the hazard ratio
    p_value: float  # two-sided Wald p-value
    conf_level: float = 0.95

    @classmethod
    def from_wald(
        cls,
        hypothesis: str,
        log_hr: float,
        se: float,
        conf_level: float = 0.95,
    ) -> EffectEstimate:
        """Build from a log hazard ratio and its standard error."""
        if hypothesis not in HYPOTHESES:
            raise DomainError(f"hypothesis must be one of {HYPOTHESES}, got {hypothesis!r}")
        if not math.isfinite(log_hr):
            raise DomainError(f"log_hr must be finite, got {log_hr}")
        if not (math.isfinite(se) and se > 0.0):
            raise DomainError(f"se must be > 0, got {se}")
        if not (0.0 < conf_level < 1.0):
            raise DomainError(f"conf_level must be in (0, 1), got {conf_level}")

        z = float(norm.isf((1.0 - conf_level) / 2.0))
        return cls(
            hypothesis=hypothesis,
            log_hr=log_hr,
            se=se,
            hr=math.exp(log_hr),
            ci=(math.exp(log_hr - z * se), math.exp(log_hr + z * se)),
            p_value=float(2.0 * norm.sf(abs(log_hr) / se)),
            conf_level=conf_level,
        )

    @classmethod
    def from_hr_pvalue(
        cls,
        hypothesis: str,
        hr: float,
        p_value: float,
        conf_level: float = 0.95,
    ) -> EffectEstimate:
        """Build from a reported hazard ratio and two-sided p-value.

        The standard error is backed out as ``|log(hr)| / z(1 - p/2)``.
        """
        if not (math.isfinite(hr) and hr > 0.0 and hr != 1.0):
            raise DomainError(f"hr must be > 0 and != 1, got {hr}")
        if not (0.0 < p_value < 1.0):
            raise DomainError(f"p_value must be in (0, 1), got {p_value}")
        log_hr = math.log(hr)
        se = abs(log_hr) / float(norm.isf(p_value / 2.0))
        return cls.from_wald(hypothesis, log_hr, se, conf_level)


@dataclass(frozen=True)
class FittedEffects:
    """Overall A, simple A and simple AB estimates from the Cox fits.

    ``cov`` is the covariance of the three log hazard ratio estimators in
    (overall A, simple A, simple AB) order, or ``None`` when only the
    marginal summaries are available.
    """

    overall_a: EffectEstimate
    simple_a: EffectEstimate
    simple_ab: EffectEstimate
    cov: NDArray[np.floating] | None = field(default=None, compare=False)

    @classmethod
    def from_estimates(
        cls,
        log_hr: NDArray | list[float],
        cov: NDArray | list[list[float]],
        conf_level: float = 0.95,
    ) -> FittedEffects:
        """Build from the three log hazard ratios and their joint covariance."""
        log_hr = np.asarray(log_hr, dtype=np.float64)
        cov = np.asarray(cov, dtype=np.float64)
        if log_hr.shape != (3,):
            raise DomainError(f"log_hr must have length 3, got shape {log_hr.shape}")
        if cov.shape != (3, 3):
            raise DomainError(f"cov must have shape (3, 3), got {cov.shape}")
        var = np.diag(cov)
        if np.any(~np.isfinite(var)) or np.any(var <= 0.0):
            raise DomainError(f"cov must have positive variances, got {var}")

        estimates = [
            EffectEstimate.from_wald(h, float(b), float(math.sqrt(v)), conf_level)
            for h, b, v in zip(HYPOTHESES, log_hr, var)
        ]
        return cls(*estimates, cov=cov)

    def p_values(self) -> dict[str, float]:
        """Two-sided p-values keyed by hypothesis."""
        return {e.hypothesis: e.p_value for e in (self.overall_a, self.simple_a, self.simple_ab)}


# ---------------------------------------------------------------------------
# Trial data
# ---------------------------------------------------------------------------

_ARM_LABELS = ("C", "A", "B", "AB")


@dataclass(frozen=True, eq=False)
class FactorialData:
    """Validated subject-level data of a 2x2 factorial trial.

    Parameters
    ----------
    time : NDArray
        Follow-up time (> 0).
    event : NDArray
        Event indicator: 1 = event, 0 = censored.
    ind_a, ind_b : NDArray
        Treatment A and B indicators (0/1).
    covmat : NDArray or None
        Covariates, one row per subject; factors pre-expanded to 0/1 columns.
    """

    time: NDArray
    event: NDArray
    ind_a: NDArray
    ind_b: NDArray
    covmat: NDArray | None

    @classmethod
    def from_arrays(cls, time, event, ind_a, ind_b, covmat=None) -> FactorialData:
        """Create and validate trial data.

        Raises
        ------
        DomainError
            If inputs are invalid.
        """
        time = np.asarray(time, dtype=np.float64).ravel()
        n = len(time)
        if n == 0:
            raise DomainError("time must have at least one observation")
        if not np.all(np.isfinite(time)) or np.any(time <= 0.0):
            raise DomainError("time must be finite and > 0")

        arrays = {}
        for name, values in (("event", event), ("ind_a", ind_a), ("ind_b", ind_b)):
            arr = np.asarray(values, dtype=np.float64).ravel()
            if len(arr) != n:
                raise DomainError(
                    f"{name} must have {n} elements to match time, got {len(arr)}"
                )
            if not np.all(np.isin(arr, [0.0, 1.0])):
                raise DomainError(
                    f"{name} must contain only 0 and 1, got unique values: {np.unique(arr)}"
                )
            arrays[name] = arr.astype(np.intp)

        cov_arr = None
        if covmat is not None:
            cov_arr = np.asarray(covmat, dtype=np.float64)
            if cov_arr.ndim == 1:
                cov_arr = cov_arr.reshape(-1, 1)
            if cov_arr.ndim != 2:
                raise DomainError(f"covmat must be 1D or 2D, got {cov_arr.ndim}D")
            if cov_arr.shape[0] != n:
                raise DomainError(
                    f"covmat must have {n} rows to match time, got {cov_arr.shape[0]}"
                )
            if not np.all(np.isfinite(cov_arr)):
                raise DomainError("covmat must be finite")

        return cls(time=time, covmat=cov_arr, **arrays)

    @property
    def n(self) -> int:
        """Number of subjects."""
        return len(self.time)

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(self.event.sum())

    @property
    def arm(self) -> NDArray:
        """Arm label ('C', 'A', 'B' or 'AB') per subject."""
        return np.asarray(_ARM_LABELS)[self.ind_a + 2 * self.ind_b]

    def arm_events(self) -> dict[str, int]:
        """Observed events per arm."""
        code = self.ind_a + 2 * self.ind_b
        counts = np.bincount(code, weights=self.event, minlength=4)
        return {label: int(c) for label, c in zip(_ARM_LABELS, counts)}


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisResult:
    """Significance tests of the three procedures for one trial."""

    effects: FittedEffects
    correlations: Correlations
    critical_values: CriticalValues2x2
    decisions23: tuple[Decision, ...]
    decisions13: tuple[Decision, ...]
    decisions12: tuple[Decision, ...]

    @property
    def result23(self) -> tuple[str, ...]:
        return tuple(d.label for d in self.decisions23)

    @property
    def result13(self) -> tuple[str, ...]:
        return tuple(d.label for d in self.decisions13)

    @property
    def result12(self) -> tuple[str, ...]:
        return tuple(d.label for d in self.decisions12)

    def summary(self) -> str:
        """Human-readable summary."""
        cv = self.critical_values
        cor = self.correlations
        lines = ["2x2 Factorial Analysis", "=" * 40]
        for e in (self.effects.overall_a, self.effects.simple_a, self.effects.simple_ab):
            lines.append(
                f"{e.hypothesis:<10s}: HR = {e.hr:.4f} "
                f"({e.conf_level:.0%} CI: {e.ci[0]:.4f}-{e.ci[1]:.4f}), p = {e.p_value:.4g}"
            )
        lines.append("")
        lines.append(f"2/3-1/3     : sig A = {cv.sig23A:.6g}, sig AB = {cv.sig23ab:.6g}")
        lines.append(f"              {', '.join(self.result23)}")
        lines.append(f"1/3-1/3-1/3 : sig = {cv.sig13:.6g}")
        lines.append(f"              {', '.join(self.result13)}")
        lines.append(f"1/2-1/2     : sig = {cv.sig12:.6g}")
        lines.append(f"              {', '.join(self.result12)}")
        lines.append("")
        lines.append(
            f"Correlations: A/a = {cor.cor_A_a:.4f}, A/ab = {cor.cor_A_ab:.4f}, "
            f"a/ab = {cor.cor_a_ab:.4f}"
        )
        return "\n".join(lines)

