"""
Cash Flow Calculations

Generates annual cash flow projections from year-1 financials.
Revenue and expenses compound geometrically at their own growth rates with
no caps or smoothing.
"""

import math
from dataclasses import dataclass
from typing import List

from app.calculations.inputs import Assumptions, Baseline


@dataclass(frozen=True)
class ProjectionRow:
    """One projected operating year."""

    year: int
    revenue: float
    expenses: float
    noi: float
    debt_service: float
    cash_flow: float
    cash_on_cash_pct: float


def calculate_growth_factor(annual_growth_pct: float, year: int) -> float:
    """
    Calculate the compounding factor for a projection year.

    Year 1 is the baseline year and always has a factor of 1.0.

    Args:
        annual_growth_pct: Annual growth rate in percent (e.g., 3.0)
        year: Projection year (1-indexed)
    """
    return (1 + annual_growth_pct / 100) ** (year - 1)


def calculate_cash_on_cash(cash_flow: float, equity: float) -> float:
    """Cash-on-cash yield in percent; 0 when there is no equity invested."""
    if equity <= 0:
        return 0.0
    yield_pct = cash_flow / equity * 100
    # Vanishing equity can push the quotient past float range
    return yield_pct if math.isfinite(yield_pct) else 0.0


def project_cash_flows(
    baseline: Baseline,
    assumptions: Assumptions,
    annual_debt_service: float,
    equity: float,
) -> List[ProjectionRow]:
    """
    Project operating cash flows for each year of the hold.

    Args:
        baseline: Year-1 revenue and expenses (must be complete)
        assumptions: Growth rates and hold period
        annual_debt_service: Level debt service charged every year
        equity: Equity invested, the cash-on-cash denominator

    Returns:
        Rows for years 1..hold_period_years (empty for a hold below 1 year)
    """
    rows = []

    for year in range(1, int(assumptions.hold_period_years) + 1):
        revenue = baseline.gross_scheduled_revenue * calculate_growth_factor(
            assumptions.annual_rent_growth_pct, year
        )
        expenses = baseline.total_operating_expenses * calculate_growth_factor(
            assumptions.annual_expense_growth_pct, year
        )
        noi = revenue - expenses
        cash_flow = noi - annual_debt_service

        rows.append(
            ProjectionRow(
                year=year,
                revenue=revenue,
                expenses=expenses,
                noi=noi,
                debt_service=annual_debt_service,
                cash_flow=cash_flow,
                cash_on_cash_pct=calculate_cash_on_cash(cash_flow, equity),
            )
        )

    return rows


def sum_cash_flows(rows: List[ProjectionRow], field: str = "cash_flow") -> float:
    """Sum a specific field across projection rows."""
    return sum(getattr(row, field) for row in rows)
