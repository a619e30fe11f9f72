"""
Quick Underwriting

Single entry point that turns a property's baseline financials and an
assumption set into a projection schedule and return summary. Every call is
a full, deterministic recomputation with no retained state.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Union

from app.calculations.amortization import calculate_annual_debt_service
from app.calculations.cashflow import ProjectionRow, project_cash_flows
from app.calculations.inputs import Assumptions, Baseline, check_assumption_bounds
from app.calculations.returns import ReturnSummary, assemble_return_summary

logger = logging.getLogger(__name__)

MISSING_BASELINE_DATA = "missing_baseline_data"
INVALID_ASSUMPTIONS = "invalid_assumptions"
NUMERIC_OVERFLOW = "numeric_overflow"


@dataclass(frozen=True)
class EngineUnavailable:
    """Returned instead of a result when nothing can be computed."""

    reason: str
    missing_fields: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnderwritingResult:
    """Projection rows and return summary for one assumption set."""

    assumptions: Assumptions
    rows: List[ProjectionRow]
    summary: ReturnSummary
    warnings: List[str] = field(default_factory=list)


def project(
    baseline: Baseline, assumptions: Assumptions
) -> Union[UnderwritingResult, EngineUnavailable]:
    """
    Run the underwriting projection.

    Incomplete baseline data short-circuits the whole computation. Any other
    failure is confined to the affected metric, which is reported as None.

    Args:
        baseline: Year-1 revenue, expenses and NOI
        assumptions: Price, growth, exit, hold and financing assumptions

    Returns:
        UnderwritingResult, or EngineUnavailable describing why not
    """
    missing = baseline.missing_fields()
    if missing:
        logger.info(f"Underwriting unavailable, missing baseline data: {missing}")
        return EngineUnavailable(reason=MISSING_BASELINE_DATA, missing_fields=missing)

    invalid = assumptions.non_finite_fields()
    if invalid:
        logger.info(f"Underwriting unavailable, non-finite assumptions: {invalid}")
        return EngineUnavailable(reason=INVALID_ASSUMPTIONS, missing_fields=invalid)

    warnings = check_assumption_bounds(assumptions)
    for warning in warnings:
        logger.debug(warning)

    loan_amount = assumptions.purchase_price * assumptions.loan_to_value_pct / 100
    equity = assumptions.purchase_price - loan_amount

    try:
        annual_debt_service = calculate_annual_debt_service(
            loan_amount, assumptions.interest_rate_pct
        )
        rows = project_cash_flows(baseline, assumptions, annual_debt_service, equity)
        summary = assemble_return_summary(
            baseline, assumptions, rows, loan_amount, annual_debt_service
        )
    except OverflowError:
        logger.info("Underwriting unavailable, projection overflowed")
        return EngineUnavailable(reason=NUMERIC_OVERFLOW)

    return UnderwritingResult(
        assumptions=assumptions,
        rows=rows,
        summary=summary,
        warnings=warnings,
    )
