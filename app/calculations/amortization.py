"""
Loan Amortization Calculations

Implements level-payment debt service for the acquisition loan,
matching Excel's PMT function aggregated to an annual figure.
"""

from typing import Optional

DEFAULT_AMORTIZATION_YEARS = 30


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.05 for 5%)
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12

    if monthly_rate == 0:
        return principal / amortization_months

    try:
        compound = (1 + monthly_rate) ** amortization_months
    except OverflowError:
        # Compound factor dominates; payment tends to interest on principal
        return principal * monthly_rate

    if compound == 1:
        return principal / amortization_months

    payment = principal * monthly_rate * compound / (compound - 1)

    return payment


def calculate_annual_debt_service(
    loan_amount: float,
    interest_rate_pct: float,
    amortization_years: int = DEFAULT_AMORTIZATION_YEARS,
) -> float:
    """
    Annual debt service (principal + interest) on a fully amortizing loan.

    Monthly payments are aggregated to a year. A zero interest rate
    amortizes straight-line, i.e. loan_amount / amortization_years.

    Args:
        loan_amount: Original loan balance
        interest_rate_pct: Annual interest rate in percent (e.g., 6.5)
        amortization_years: Amortization term in years
    """
    monthly_payment = calculate_payment(
        loan_amount, interest_rate_pct / 100, amortization_years * 12
    )
    return monthly_payment * 12


def calculate_loan_constant(
    loan_amount: float,
    interest_rate_pct: float,
    amortization_years: int = DEFAULT_AMORTIZATION_YEARS,
) -> float:
    """Calculate loan constant (annual debt service / loan amount)."""
    annual_debt_service = calculate_annual_debt_service(
        loan_amount, interest_rate_pct, amortization_years
    )
    return annual_debt_service / loan_amount if loan_amount > 0 else 0.0


def calculate_dscr(noi: float, debt_service: float) -> Optional[float]:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Returns None when there is no debt service to cover.
    """
    if debt_service == 0:
        return None
    return noi / debt_service
