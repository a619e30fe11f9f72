"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Used by the underwriting sliders for real-time updates.
"""

from dataclasses import asdict, replace
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, conlist

from app.calculations import amortization, irr, sensitivity, underwriting
from app.calculations.inputs import (
    Assumptions,
    Baseline,
    PricingGuidance,
    default_assumptions,
)
from app.config import get_settings

router = APIRouter()


class BaselineInput(BaseModel):
    """Year-1 financials for the subject property."""

    gross_scheduled_revenue: Optional[float] = None
    total_operating_expenses: Optional[float] = None
    net_operating_income: Optional[float] = None

    class Config:
        allow_inf_nan = False

    def to_baseline(self) -> Baseline:
        return Baseline(
            gross_scheduled_revenue=self.gross_scheduled_revenue,
            total_operating_expenses=self.total_operating_expenses,
            net_operating_income=self.net_operating_income,
        )


class PricingTierInput(BaseModel):
    """Pricing guidance used to seed default assumptions."""

    pricing: Optional[float] = None
    terminal_cap_rate: Optional[float] = None

    class Config:
        allow_inf_nan = False


class AssumptionInput(BaseModel):
    """Assumption overrides; omitted fields use property defaults."""

    purchase_price: Optional[float] = None
    annual_rent_growth_pct: Optional[float] = None
    annual_expense_growth_pct: Optional[float] = None
    exit_cap_rate_pct: Optional[float] = None
    hold_period_years: Optional[int] = None
    loan_to_value_pct: Optional[float] = None
    interest_rate_pct: Optional[float] = None

    class Config:
        allow_inf_nan = False


class UnderwritingInput(BaseModel):
    """Input for the underwriting projection."""

    baseline: BaselineInput
    assumptions: AssumptionInput = Field(default_factory=AssumptionInput)
    pricing_tiers: List[PricingTierInput] = []


class AssumptionsResponse(BaseModel):
    """Resolved assumption set the projection ran with."""

    purchase_price: float
    annual_rent_growth_pct: float
    annual_expense_growth_pct: float
    exit_cap_rate_pct: float
    hold_period_years: int
    loan_to_value_pct: float
    interest_rate_pct: float


class ProjectionRowResponse(BaseModel):
    """One projected year."""

    year: int
    revenue: float
    expenses: float
    noi: float
    debt_service: float
    cash_flow: float
    cash_on_cash_pct: float


class ReturnSummaryResponse(BaseModel):
    """Calculated return metrics. None means unavailable."""

    loan_amount: float
    equity: float
    annual_debt_service: float
    going_in_cap_pct: Optional[float] = None
    terminal_value: Optional[float] = None
    sale_proceeds: Optional[float] = None
    unlevered_irr: Optional[float] = None
    levered_irr: Optional[float] = None
    equity_multiple: Optional[float] = None
    avg_cash_on_cash_pct: Optional[float] = None
    year1_cash_on_cash_pct: Optional[float] = None


class UnderwritingResponse(BaseModel):
    """Response with projection rows and return summary."""

    available: bool
    reason: Optional[str] = None
    missing_fields: List[str] = []
    assumptions: Optional[AssumptionsResponse] = None
    rows: List[ProjectionRowResponse] = []
    summary: Optional[ReturnSummaryResponse] = None
    warnings: List[str] = []


def resolve_assumptions(
    baseline: Baseline,
    overrides: Optional[AssumptionInput],
    pricing_tiers: List[PricingGuidance],
) -> Assumptions:
    """Apply user overrides on top of the property's default assumptions."""
    assumptions = default_assumptions(baseline, pricing_tiers)
    if overrides is None:
        return assumptions
    return replace(assumptions, **overrides.model_dump(exclude_none=True))


def run_underwriting(
    baseline: Baseline,
    overrides: Optional[AssumptionInput] = None,
    pricing_tiers: Optional[List[PricingGuidance]] = None,
) -> UnderwritingResponse:
    """Resolve assumptions, run the projection and shape the response."""
    assumptions = resolve_assumptions(baseline, overrides, pricing_tiers or [])
    assumptions_response = AssumptionsResponse(**asdict(assumptions))

    result = underwriting.project(baseline, assumptions)

    if isinstance(result, underwriting.EngineUnavailable):
        return UnderwritingResponse(
            available=False,
            reason=result.reason,
            missing_fields=result.missing_fields,
            assumptions=assumptions_response,
        )

    return UnderwritingResponse(
        available=True,
        assumptions=assumptions_response,
        rows=[ProjectionRowResponse(**asdict(row)) for row in result.rows],
        summary=ReturnSummaryResponse(**asdict(result.summary)),
        warnings=result.warnings,
    )


def to_pricing_guidance(tiers: List[PricingTierInput]) -> List[PricingGuidance]:
    return [
        PricingGuidance(pricing=t.pricing, terminal_cap_rate=t.terminal_cap_rate)
        for t in tiers
    ]


@router.post("/underwriting", response_model=UnderwritingResponse)
async def calculate_underwriting(inputs: UnderwritingInput):
    """Project cash flows and return metrics for a set of assumptions."""
    return run_underwriting(
        inputs.baseline.to_baseline(),
        inputs.assumptions,
        to_pricing_guidance(inputs.pricing_tiers),
    )


class SensitivityInput(UnderwritingInput):
    """Input for a purchase price by exit cap sensitivity grid."""

    purchase_prices: Optional[conlist(float, max_length=25)] = None
    exit_cap_rates_pct: Optional[conlist(float, max_length=25)] = None
    metric: str = "levered_irr"

    class Config:
        allow_inf_nan = False


class SensitivityResponse(BaseModel):
    """Metric grid: rows follow purchase_prices, columns exit_cap_rates_pct."""

    available: bool
    reason: Optional[str] = None
    missing_fields: List[str] = []
    metric: str
    purchase_prices: List[float] = []
    exit_cap_rates_pct: List[float] = []
    values: List[List[Optional[float]]] = []


@router.post("/sensitivity", response_model=SensitivityResponse)
async def calculate_sensitivity(inputs: SensitivityInput):
    """Evaluate a return metric across purchase prices and exit cap rates."""
    baseline = inputs.baseline.to_baseline()
    assumptions = resolve_assumptions(
        baseline, inputs.assumptions, to_pricing_guidance(inputs.pricing_tiers)
    )

    prices, exit_caps = sensitivity.default_sensitivity_axes(
        assumptions, get_settings().sensitivity_steps
    )
    if inputs.purchase_prices:
        prices = inputs.purchase_prices
    if inputs.exit_cap_rates_pct:
        exit_caps = inputs.exit_cap_rates_pct

    try:
        matrix = sensitivity.build_sensitivity_matrix(
            baseline, assumptions, prices, exit_caps, metric=inputs.metric
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if isinstance(matrix, underwriting.EngineUnavailable):
        return SensitivityResponse(
            available=False,
            reason=matrix.reason,
            missing_fields=matrix.missing_fields,
            metric=inputs.metric,
        )

    return SensitivityResponse(available=True, **asdict(matrix))


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    guess: float = irr.DEFAULT_GUESS

    class Config:
        allow_inf_nan = False


class IRRResponse(BaseModel):
    """Response with IRR calculation. irr is a percentage."""

    irr: Optional[float] = None
    converged: bool
    npv_at_10_percent: Optional[float] = None


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for given periodic cash flows."""
    irr_val = irr.calculate_irr(inputs.cash_flows, inputs.guess)
    npv = irr.calculate_npv(inputs.cash_flows, 0.10) if inputs.cash_flows else None

    return IRRResponse(
        irr=irr_val,
        converged=irr_val is not None,
        npv_at_10_percent=npv,
    )


class DebtServiceInput(BaseModel):
    """Input for debt service calculation."""

    loan_amount: float
    interest_rate_pct: float
    amortization_years: int = Field(
        default=amortization.DEFAULT_AMORTIZATION_YEARS, gt=0, le=50
    )
    noi: Optional[float] = None

    class Config:
        allow_inf_nan = False


class DebtServiceResponse(BaseModel):
    """Level debt service on a fully amortizing loan."""

    monthly_payment: float
    annual_debt_service: float
    loan_constant: float
    dscr: Optional[float] = None


@router.post("/debt-service", response_model=DebtServiceResponse)
async def calculate_debt_service(inputs: DebtServiceInput):
    """Calculate annual debt service, loan constant and DSCR when NOI is given."""
    annual_debt_service = amortization.calculate_annual_debt_service(
        inputs.loan_amount, inputs.interest_rate_pct, inputs.amortization_years
    )

    return DebtServiceResponse(
        monthly_payment=annual_debt_service / 12,
        annual_debt_service=annual_debt_service,
        loan_constant=amortization.calculate_loan_constant(
            inputs.loan_amount, inputs.interest_rate_pct, inputs.amortization_years
        ),
        dscr=(
            amortization.calculate_dscr(inputs.noi, annual_debt_service)
            if inputs.noi is not None
            else None
        ),
    )
