"""Significance testing for the 2/3-1/3, 1/3-1/3-1/3 and 1/2-1/2 procedures.

Takes the overall A, simple A and simple AB hazard ratio estimates from the
(external) Cox fits, derives the correlations among the Wald statistics,
solves each procedure's thresholds and compares them with the observed
p-values.

Validates against: R ``Factorial2x2::fac2x2analyze()``.
"""

from __future__ import annotations

import logging

from pyfactorial._errors import DomainError
from pyfactorial.analysis._common import AnalysisResult, FittedEffects
from pyfactorial.multiplicity._common import Correlations, MVNConfig
from pyfactorial.multiplicity._correlation import cor2x2
from pyfactorial.multiplicity._critical import crit2x2
from pyfactorial.multiplicity._decision import apply_procedure

logger = logging.getLogger(__name__)


def fac2x2_analyze(
    effects: FittedEffects,
    alpha: float = 0.05,
    dig: int | None = 5,
    correlations: Correlations | None = None,
    config: MVNConfig | None = None,
) -> AnalysisResult:
    """Accept/reject conclusions of the three procedures.

    Parameters
    ----------
    effects : FittedEffects
        Hazard ratios, standard errors, p-values and (optionally) the
        covariance of the log hazard ratio estimators.
    alpha : float
        Two-sided family-wise significance level.
    dig : int or None
        Decimal places the z critical values are rounded up to.
    correlations : Correlations or None
        Correlations among the Wald statistics. ``None`` derives them from
        ``effects.cov``.
    config : MVNConfig or None
        Integration budget and seed. ``None`` uses ``MVNConfig(niter=5)``.

    Returns
    -------
    AnalysisResult

    Raises
    ------
    DomainError
        If neither ``correlations`` nor ``effects.cov`` is available.
    ConvergenceError
        If a critical value cannot be solved; no decisions are returned.
    """
    if correlations is None:
        if effects.cov is None:
            raise DomainError(
                "correlations are required when the fitted effects carry no covariance"
            )
        correlations = cor2x2(effects.cov)
    if config is None:
        config = MVNConfig(niter=5)

    logger.debug("analysing with correlations %s", correlations)
    cv = crit2x2(correlations, alpha=alpha, dig=dig, config=config)
    p_values = effects.p_values()

    return AnalysisResult(
        effects=effects,
        correlations=correlations,
        critical_values=cv,
        decisions23=apply_procedure(cv.p23_13, p_values),
        decisions13=apply_procedure(cv.p13_13_13, p_values),
        decisions12=apply_procedure(cv.p12_12, p_values),
    )
