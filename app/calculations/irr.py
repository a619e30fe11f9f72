"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson method on periodic (annual) cash flows.

The solver never raises on numeric input: a series that does not converge
within MAX_ITERATIONS, hits a flat derivative, or blows up numerically yields
None, which callers surface as "IRR unavailable". Series with more than one
sign change can have several real roots; Newton's method lands on whichever
root is nearest the seed, so results depend on `guess`.
"""

import logging
import math
from typing import List, Optional

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
DEFAULT_GUESS = 0.1


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf / ((1 + discount_rate) ** period)
    return npv


def _npv_derivative(cash_flows: List[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    dnpv = 0.0
    for period, cf in enumerate(cash_flows):
        dnpv -= (period * cf) / ((1 + rate) ** (period + 1))
    return dnpv


def calculate_irr(
    cash_flows: List[float], guess: float = DEFAULT_GUESS
) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson method.

    Args:
        cash_flows: Periodic cash flows, c0 being the initial outlay
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        IRR as a percentage (e.g., 15.0 for 15%), or None if the
        iteration does not converge
    """
    if len(cash_flows) < 2:
        return None

    rate = guess

    for iteration in range(MAX_ITERATIONS):
        try:
            npv = calculate_npv(cash_flows, rate)
            dnpv = _npv_derivative(cash_flows, rate)
            new_rate = rate - npv / dnpv
        except (ZeroDivisionError, OverflowError):
            logger.debug(f"IRR iteration {iteration} failed at rate {rate}")
            return None

        if not math.isfinite(new_rate):
            logger.debug(f"IRR iteration {iteration} diverged from rate {rate}")
            return None

        if abs(new_rate - rate) < TOLERANCE:
            return new_rate * 100

        rate = new_rate

    logger.debug(f"IRR did not converge after {MAX_ITERATIONS} iterations")
    return None
