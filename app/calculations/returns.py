"""
Return Metrics

Terminal value, sale proceeds and the return summary for a projection.
Metrics that cannot be computed (zero cap rate, zero price, IRR that does
not converge) are reported as None rather than NaN or infinity.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from app.calculations import irr
from app.calculations.cashflow import ProjectionRow, sum_cash_flows
from app.calculations.inputs import Assumptions, Baseline


@dataclass(frozen=True)
class ReturnSummary:
    """Deal-level metrics derived from a projection."""

    loan_amount: float
    equity: float
    annual_debt_service: float
    going_in_cap_pct: Optional[float]
    terminal_value: Optional[float]
    sale_proceeds: Optional[float]
    unlevered_irr: Optional[float]
    levered_irr: Optional[float]
    equity_multiple: Optional[float]
    avg_cash_on_cash_pct: Optional[float]
    year1_cash_on_cash_pct: Optional[float]


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def calculate_terminal_value(
    final_year_noi: float, rent_growth_pct: float, exit_cap_rate_pct: float
) -> Optional[float]:
    """
    Calculate sale value at the end of the hold.

    The buyer underwrites one more year of NOI growth, capitalized at the
    exit cap rate.

    Returns:
        Terminal value, or None for a zero exit cap rate
    """
    if exit_cap_rate_pct == 0:
        return None
    next_year_noi = final_year_noi * (1 + rent_growth_pct / 100)
    return next_year_noi / (exit_cap_rate_pct / 100)


def calculate_sale_proceeds(
    terminal_value: Optional[float], loan_amount: float
) -> Optional[float]:
    """
    Net sale proceeds to equity.

    The loan is repaid at its original balance; amortized principal paydown
    over the hold is not credited.
    """
    if terminal_value is None:
        return None
    return terminal_value - loan_amount


def calculate_equity_multiple(
    total_cash_flow: float, sale_proceeds: Optional[float], equity: float
) -> Optional[float]:
    """Total cash returned (operating + sale) divided by equity invested."""
    if sale_proceeds is None:
        return None
    if equity <= 0:
        return 0.0
    return (total_cash_flow + sale_proceeds) / equity


def average_cash_on_cash(rows: List[ProjectionRow]) -> Optional[float]:
    """Arithmetic mean of yearly cash-on-cash yields."""
    if not rows:
        return None
    return sum_cash_flows(rows, "cash_on_cash_pct") / len(rows)


def build_unlevered_series(
    purchase_price: float, rows: List[ProjectionRow], terminal_value: float
) -> List[float]:
    """[-price, noi1, ..., noiN + terminal value]"""
    series = [-purchase_price] + [row.noi for row in rows]
    series[-1] += terminal_value
    return series


def build_levered_series(
    equity: float, rows: List[ProjectionRow], sale_proceeds: float
) -> List[float]:
    """[-equity, cf1, ..., cfN + sale proceeds]"""
    series = [-equity] + [row.cash_flow for row in rows]
    series[-1] += sale_proceeds
    return series


def assemble_return_summary(
    baseline: Baseline,
    assumptions: Assumptions,
    rows: List[ProjectionRow],
    loan_amount: float,
    annual_debt_service: float,
) -> ReturnSummary:
    """Compose terminal value, IRRs and yield metrics for a projection."""
    purchase_price = assumptions.purchase_price
    equity = purchase_price - loan_amount

    going_in_cap_pct = None
    if purchase_price != 0:
        going_in_cap_pct = baseline.net_operating_income / purchase_price * 100

    terminal_value = None
    if rows:
        terminal_value = calculate_terminal_value(
            rows[-1].noi,
            assumptions.annual_rent_growth_pct,
            assumptions.exit_cap_rate_pct,
        )
    sale_proceeds = calculate_sale_proceeds(terminal_value, loan_amount)

    unlevered_irr = None
    levered_irr = None
    if terminal_value is not None:
        unlevered_irr = irr.calculate_irr(
            build_unlevered_series(purchase_price, rows, terminal_value)
        )
        levered_irr = irr.calculate_irr(
            build_levered_series(equity, rows, sale_proceeds)
        )

    equity_multiple = calculate_equity_multiple(
        sum_cash_flows(rows), sale_proceeds, equity
    )

    return ReturnSummary(
        loan_amount=loan_amount,
        equity=equity,
        annual_debt_service=annual_debt_service,
        going_in_cap_pct=_finite_or_none(going_in_cap_pct),
        terminal_value=_finite_or_none(terminal_value),
        sale_proceeds=_finite_or_none(sale_proceeds),
        unlevered_irr=_finite_or_none(unlevered_irr),
        levered_irr=_finite_or_none(levered_irr),
        equity_multiple=_finite_or_none(equity_multiple),
        avg_cash_on_cash_pct=_finite_or_none(average_cash_on_cash(rows)),
        year1_cash_on_cash_pct=(
            _finite_or_none(rows[0].cash_on_cash_pct) if rows else None
        ),
    )
