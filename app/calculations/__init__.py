"""
Financial Calculation Engine

Quick underwriting calculations for commercial real estate acquisitions:
debt service, cash flow projection, IRR and return metrics.
"""

from app.calculations import (
    amortization,
    cashflow,
    inputs,
    irr,
    returns,
    sensitivity,
    underwriting,
)

__all__ = [
    "amortization",
    "cashflow",
    "inputs",
    "irr",
    "returns",
    "sensitivity",
    "underwriting",
]
