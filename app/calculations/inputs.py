"""
Underwriting Inputs

Baseline financial facts pulled from the subject property and the
user-adjustable assumption set that drives a projection.
All rate-like values are percentages (6.5 = 6.5%).
"""

import math
from dataclasses import dataclass, fields
from typing import Dict, List, Optional, Sequence, Tuple

DEFAULT_RENT_GROWTH_PCT = 3.0
DEFAULT_EXPENSE_GROWTH_PCT = 2.5
DEFAULT_EXIT_CAP_RATE_PCT = 5.5
DEFAULT_HOLD_PERIOD_YEARS = 5
DEFAULT_LOAN_TO_VALUE_PCT = 65.0
DEFAULT_INTEREST_RATE_PCT = 6.5
FALLBACK_PURCHASE_PRICE = 30_000_000.0

# Slider ranges shown to the user; the engine accepts anything finite
ASSUMPTION_BOUNDS: Dict[str, Tuple[float, float]] = {
    "annual_rent_growth_pct": (0.0, 8.0),
    "annual_expense_growth_pct": (0.0, 6.0),
    "exit_cap_rate_pct": (4.0, 8.0),
    "hold_period_years": (3, 10),
    "loan_to_value_pct": (0.0, 80.0),
    "interest_rate_pct": (4.0, 9.0),
}


@dataclass(frozen=True)
class Baseline:
    """Year-1 financials for the subject property."""

    gross_scheduled_revenue: Optional[float]
    total_operating_expenses: Optional[float]
    net_operating_income: Optional[float]

    def missing_fields(self) -> List[str]:
        """Names of fields that are absent or not a finite number."""
        return [
            f.name
            for f in fields(self)
            if getattr(self, f.name) is None
            or not math.isfinite(getattr(self, f.name))
        ]


@dataclass(frozen=True)
class Assumptions:
    """User-controlled underwriting assumptions."""

    purchase_price: float
    annual_rent_growth_pct: float = DEFAULT_RENT_GROWTH_PCT
    annual_expense_growth_pct: float = DEFAULT_EXPENSE_GROWTH_PCT
    exit_cap_rate_pct: float = DEFAULT_EXIT_CAP_RATE_PCT
    hold_period_years: int = DEFAULT_HOLD_PERIOD_YEARS
    loan_to_value_pct: float = DEFAULT_LOAN_TO_VALUE_PCT
    interest_rate_pct: float = DEFAULT_INTEREST_RATE_PCT

    def non_finite_fields(self) -> List[str]:
        return [
            f.name for f in fields(self) if not math.isfinite(getattr(self, f.name))
        ]


@dataclass(frozen=True)
class PricingGuidance:
    """Pricing scenario record (e.g. a broker BOV tier) for the property."""

    pricing: Optional[float] = None
    terminal_cap_rate: Optional[float] = None


def normalize_percent(value: float) -> float:
    """
    Convert a rate to percentage form.

    Sources report rates either as decimals (0.055) or percentages (5.5).
    Anything with magnitude <= 1 is treated as a decimal.
    """
    if abs(value) <= 1:
        return value * 100
    return value


def default_assumptions(
    baseline: Baseline,
    pricing_tiers: Optional[Sequence[PricingGuidance]] = None,
) -> Assumptions:
    """
    Initial assumption set for a property.

    Purchase price comes from the first pricing tier when it has one,
    otherwise year-1 NOI capped at 5.5%, otherwise a flat fallback.
    The exit cap follows the first tier's terminal cap rate when present.
    """
    first_tier = pricing_tiers[0] if pricing_tiers else None

    if first_tier is not None and first_tier.pricing:
        purchase_price = first_tier.pricing
    elif baseline.net_operating_income and math.isfinite(baseline.net_operating_income):
        purchase_price = baseline.net_operating_income / (
            DEFAULT_EXIT_CAP_RATE_PCT / 100
        )
    else:
        purchase_price = FALLBACK_PURCHASE_PRICE

    exit_cap_rate_pct = DEFAULT_EXIT_CAP_RATE_PCT
    if first_tier is not None and first_tier.terminal_cap_rate:
        exit_cap_rate_pct = normalize_percent(first_tier.terminal_cap_rate)

    return Assumptions(
        purchase_price=purchase_price,
        exit_cap_rate_pct=exit_cap_rate_pct,
    )


def check_assumption_bounds(assumptions: Assumptions) -> List[str]:
    """Warnings for assumptions outside their advisory ranges."""
    warnings = []

    if assumptions.purchase_price <= 0:
        warnings.append("purchase_price should be greater than 0")

    for name, (low, high) in ASSUMPTION_BOUNDS.items():
        value = getattr(assumptions, name)
        if not low <= value <= high:
            warnings.append(f"{name}={value} is outside the typical range [{low}, {high}]")

    return warnings
