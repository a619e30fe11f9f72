"""
Sensitivity Matrix

Reruns the underwriting projection across a grid of purchase prices and
exit cap rates, holding every other assumption fixed.
"""

from dataclasses import dataclass, fields, replace
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from app.calculations.inputs import Assumptions, Baseline
from app.calculations.returns import ReturnSummary
from app.calculations.underwriting import (
    MISSING_BASELINE_DATA,
    EngineUnavailable,
    project,
)

PRICE_SPREAD = 0.10
EXIT_CAP_STEP_PCT = 0.25

SENSITIVITY_METRICS = tuple(
    f.name
    for f in fields(ReturnSummary)
    if f.name not in ("loan_amount", "equity", "annual_debt_service")
)


@dataclass(frozen=True)
class SensitivityMatrix:
    """Metric values with purchase prices as rows and exit caps as columns."""

    metric: str
    purchase_prices: List[float]
    exit_cap_rates_pct: List[float]
    values: List[List[Optional[float]]]


def default_sensitivity_axes(
    assumptions: Assumptions, steps: int = 5
) -> Tuple[List[float], List[float]]:
    """
    Build grid axes centered on the current assumptions.

    Prices span +/-10% of the purchase price; exit caps step 25 bp either
    side of the current exit cap.
    """
    steps = max(int(steps), 1)
    price = assumptions.purchase_price
    prices = np.linspace(price * (1 - PRICE_SPREAD), price * (1 + PRICE_SPREAD), steps)

    offsets = np.arange(steps) - (steps - 1) / 2
    exit_caps = assumptions.exit_cap_rate_pct + offsets * EXIT_CAP_STEP_PCT

    return (
        [round(float(p), 2) for p in prices],
        [round(float(c), 4) for c in exit_caps],
    )


def build_sensitivity_matrix(
    baseline: Baseline,
    assumptions: Assumptions,
    purchase_prices: Sequence[float],
    exit_cap_rates_pct: Sequence[float],
    metric: str = "levered_irr",
) -> Union[SensitivityMatrix, EngineUnavailable]:
    """
    Evaluate one summary metric for every price / exit cap combination.

    Args:
        baseline: Year-1 financials
        assumptions: Base assumptions; price and exit cap are overridden per cell
        purchase_prices: Row axis
        exit_cap_rates_pct: Column axis, in percent
        metric: Name of a ReturnSummary field

    Returns:
        SensitivityMatrix, or EngineUnavailable when the baseline is incomplete

    Raises:
        ValueError: If metric is not a ReturnSummary metric
    """
    if metric not in SENSITIVITY_METRICS:
        raise ValueError(f"Unknown sensitivity metric: {metric}")

    missing = baseline.missing_fields()
    if missing:
        return EngineUnavailable(reason=MISSING_BASELINE_DATA, missing_fields=missing)

    values = []
    for price in purchase_prices:
        row = []
        for exit_cap in exit_cap_rates_pct:
            result = project(
                baseline,
                replace(assumptions, purchase_price=price, exit_cap_rate_pct=exit_cap),
            )
            if isinstance(result, EngineUnavailable):
                row.append(None)
            else:
                row.append(getattr(result.summary, metric))
        values.append(row)

    return SensitivityMatrix(
        metric=metric,
        purchase_prices=list(purchase_prices),
        exit_cap_rates_pct=list(exit_cap_rates_pct),
        values=values,
    )
