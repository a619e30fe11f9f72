"""
Tests for the underwriting projection, default assumptions and sensitivity grid.
"""

import math
from dataclasses import replace

import pytest
from app.calculations.amortization import calculate_annual_debt_service
from app.calculations.inputs import (
    Baseline,
    PricingGuidance,
    check_assumption_bounds,
    default_assumptions,
    normalize_percent,
)
from app.calculations.sensitivity import (
    SensitivityMatrix,
    build_sensitivity_matrix,
    default_sensitivity_axes,
)
from app.calculations.underwriting import (
    INVALID_ASSUMPTIONS,
    MISSING_BASELINE_DATA,
    NUMERIC_OVERFLOW,
    EngineUnavailable,
    UnderwritingResult,
    project,
)


class TestProjection:
    """Test the full underwriting projection."""

    def test_reference_scenario(self, baseline, assumptions):
        """$50M purchase of a $3M NOI property, 65% LTV, 5-year hold."""
        result = project(baseline, assumptions)
        assert isinstance(result, UnderwritingResult)

        summary = result.summary
        assert summary.going_in_cap_pct == pytest.approx(6.0)
        assert summary.loan_amount == pytest.approx(32_500_000)
        assert summary.equity == pytest.approx(17_500_000)
        assert summary.annual_debt_service == pytest.approx(2_465_065, abs=25)

        assert len(result.rows) == 5
        assert summary.terminal_value == pytest.approx(
            result.rows[-1].noi * 1.03 / 0.055
        )
        assert summary.terminal_value == pytest.approx(64_045_742, abs=5)
        assert summary.sale_proceeds == pytest.approx(
            summary.terminal_value - 32_500_000
        )

        assert summary.unlevered_irr == pytest.approx(10.906, abs=0.01)
        assert summary.levered_irr == pytest.approx(15.784, abs=0.01)
        assert summary.levered_irr > summary.unlevered_irr

        assert summary.equity_multiple == pytest.approx(2.0145, abs=0.001)
        assert summary.year1_cash_on_cash_pct == pytest.approx(3.057, abs=0.01)
        assert summary.avg_cash_on_cash_pct == pytest.approx(
            sum(r.cash_on_cash_pct for r in result.rows) / 5
        )
        assert result.warnings == []

    def test_projection_is_deterministic(self, baseline, assumptions):
        assert project(baseline, assumptions) == project(baseline, assumptions)

    def test_zero_leverage(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, loan_to_value_pct=0))
        summary = result.summary

        assert summary.loan_amount == 0
        assert summary.annual_debt_service == 0
        assert summary.equity == 50_000_000
        assert summary.sale_proceeds == summary.terminal_value
        assert summary.levered_irr == pytest.approx(summary.unlevered_irr, abs=1e-9)

    def test_exit_cap_sensitivity_is_monotonic(self, baseline, assumptions):
        values = [
            project(baseline, replace(assumptions, exit_cap_rate_pct=cap))
            .summary.terminal_value
            for cap in (4.0, 4.5, 5.0, 5.5, 6.0, 7.0, 8.0)
        ]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_zero_interest_rate(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, interest_rate_pct=0))
        assert result.summary.annual_debt_service == pytest.approx(32_500_000 / 30)

    def test_debt_service_charged_every_year(self, baseline, assumptions):
        result = project(baseline, assumptions)
        expected = calculate_annual_debt_service(32_500_000, 6.5)
        assert all(row.debt_service == expected for row in result.rows)


class TestUnavailable:
    """Test graceful degradation on missing or degenerate inputs."""

    @pytest.mark.parametrize(
        "field",
        ["gross_scheduled_revenue", "total_operating_expenses", "net_operating_income"],
    )
    def test_missing_baseline_field(self, baseline, assumptions, field):
        result = project(replace(baseline, **{field: None}), assumptions)
        assert isinstance(result, EngineUnavailable)
        assert result.reason == MISSING_BASELINE_DATA
        assert result.missing_fields == [field]

    def test_non_finite_baseline_is_missing(self, baseline, assumptions):
        result = project(replace(baseline, net_operating_income=math.nan), assumptions)
        assert result.reason == MISSING_BASELINE_DATA

    def test_zero_values_are_not_missing(self, assumptions):
        result = project(Baseline(0, 0, 0), assumptions)
        assert isinstance(result, UnderwritingResult)

    def test_non_finite_assumption(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, interest_rate_pct=math.inf))
        assert isinstance(result, EngineUnavailable)
        assert result.reason == INVALID_ASSUMPTIONS
        assert result.missing_fields == ["interest_rate_pct"]

    def test_zero_exit_cap(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, exit_cap_rate_pct=0))
        summary = result.summary

        assert len(result.rows) == 5
        assert summary.terminal_value is None
        assert summary.sale_proceeds is None
        assert summary.unlevered_irr is None
        assert summary.levered_irr is None
        assert summary.equity_multiple is None
        assert summary.going_in_cap_pct == pytest.approx(6.0)

    def test_zero_purchase_price(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, purchase_price=0))
        summary = result.summary

        assert summary.going_in_cap_pct is None
        assert summary.equity == 0
        assert summary.equity_multiple == 0.0
        assert all(row.cash_on_cash_pct == 0.0 for row in result.rows)
        assert any("purchase_price" in w for w in result.warnings)

    def test_zero_hold_period(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, hold_period_years=0))
        summary = result.summary

        assert result.rows == []
        assert summary.terminal_value is None
        assert summary.unlevered_irr is None
        assert summary.avg_cash_on_cash_pct is None
        assert summary.year1_cash_on_cash_pct is None

    def test_vanishing_equity(self, baseline, assumptions):
        result = project(
            baseline, replace(assumptions, purchase_price=1e-300, loan_to_value_pct=0)
        )
        summary = result.summary

        assert summary.going_in_cap_pct is None
        assert summary.year1_cash_on_cash_pct == 0.0
        assert all(row.cash_on_cash_pct == 0.0 for row in result.rows)

    def test_full_leverage(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, loan_to_value_pct=100))
        assert result.summary.equity == 0
        assert result.summary.equity_multiple == 0.0

    def test_growth_overflow(self, baseline, assumptions):
        result = project(baseline, replace(assumptions, annual_rent_growth_pct=1e300))
        assert isinstance(result, EngineUnavailable)
        assert result.reason == NUMERIC_OVERFLOW

    @pytest.mark.parametrize(
        "changes",
        [
            {"annual_rent_growth_pct": -50},
            {"annual_expense_growth_pct": 40},
            {"exit_cap_rate_pct": -5},
            {"hold_period_years": 30},
            {"loan_to_value_pct": 150},
            {"interest_rate_pct": -3},
            {"purchase_price": -1_000_000},
            {"purchase_price": 1e-300, "loan_to_value_pct": 0},
        ],
    )
    def test_out_of_range_inputs_never_raise(self, baseline, assumptions, changes):
        result = project(baseline, replace(assumptions, **changes))
        assert isinstance(result, UnderwritingResult)
        for value in vars(result.summary).values():
            assert value is None or math.isfinite(value)
        for row in result.rows:
            assert all(math.isfinite(value) for value in vars(row).values())


class TestAssumptionDefaults:
    """Test initial assumption set and advisory bounds."""

    def test_first_pricing_tier_wins(self, baseline):
        tiers = [
            PricingGuidance(pricing=45_000_000, terminal_cap_rate=0.06),
            PricingGuidance(pricing=40_000_000, terminal_cap_rate=0.07),
        ]
        defaults = default_assumptions(baseline, tiers)
        assert defaults.purchase_price == 45_000_000
        assert defaults.exit_cap_rate_pct == pytest.approx(6.0)

    def test_price_from_noi_without_tiers(self, baseline):
        defaults = default_assumptions(baseline)
        assert defaults.purchase_price == pytest.approx(3_000_000 / 0.055)
        assert defaults.exit_cap_rate_pct == 5.5

    def test_tier_without_pricing_falls_back_to_noi(self, baseline):
        defaults = default_assumptions(
            baseline, [PricingGuidance(pricing=None, terminal_cap_rate=5.75)]
        )
        assert defaults.purchase_price == pytest.approx(3_000_000 / 0.055)
        assert defaults.exit_cap_rate_pct == 5.75

    def test_fallback_price(self):
        defaults = default_assumptions(Baseline(None, None, None))
        assert defaults.purchase_price == 30_000_000

    def test_default_slider_values(self, baseline):
        defaults = default_assumptions(baseline)
        assert defaults.annual_rent_growth_pct == 3.0
        assert defaults.annual_expense_growth_pct == 2.5
        assert defaults.hold_period_years == 5
        assert defaults.loan_to_value_pct == 65.0
        assert defaults.interest_rate_pct == 6.5
        assert check_assumption_bounds(defaults) == []

    def test_normalize_percent(self):
        assert normalize_percent(0.055) == pytest.approx(5.5)
        assert normalize_percent(5.5) == 5.5
        assert normalize_percent(-0.02) == pytest.approx(-2.0)

    def test_bounds_are_advisory(self, assumptions):
        warnings = check_assumption_bounds(replace(assumptions, hold_period_years=12))
        assert len(warnings) == 1
        assert "hold_period_years" in warnings[0]


class TestSensitivity:
    """Test the purchase price by exit cap grid."""

    def test_default_axes(self, assumptions):
        prices, caps = default_sensitivity_axes(assumptions)
        assert prices == [45_000_000, 47_500_000, 50_000_000, 52_500_000, 55_000_000]
        assert caps == [5.0, 5.25, 5.5, 5.75, 6.0]

    def test_matrix_center_matches_projection(self, baseline, assumptions):
        prices, caps = default_sensitivity_axes(assumptions)
        matrix = build_sensitivity_matrix(baseline, assumptions, prices, caps)

        assert isinstance(matrix, SensitivityMatrix)
        assert len(matrix.values) == 5
        assert all(len(row) == 5 for row in matrix.values)
        assert matrix.values[2][2] == pytest.approx(
            project(baseline, assumptions).summary.levered_irr
        )

    def test_irr_falls_with_price_and_exit_cap(self, baseline, assumptions):
        prices, caps = default_sensitivity_axes(assumptions)
        matrix = build_sensitivity_matrix(baseline, assumptions, prices, caps)

        for row in matrix.values:
            assert all(a > b for a, b in zip(row, row[1:]))
        column = [row[2] for row in matrix.values]
        assert all(a > b for a, b in zip(column, column[1:]))

    def test_other_metric(self, baseline, assumptions):
        matrix = build_sensitivity_matrix(
            baseline, assumptions, [50_000_000], [5.0, 0.0], metric="terminal_value"
        )
        assert matrix.values[0][0] > 0
        assert matrix.values[0][1] is None

    def test_unknown_metric(self, baseline, assumptions):
        with pytest.raises(ValueError):
            build_sensitivity_matrix(baseline, assumptions, [1], [5.0], metric="npv")

    def test_missing_baseline(self, assumptions):
        matrix = build_sensitivity_matrix(
            Baseline(5_000_000, None, 3_000_000), assumptions, [1], [5.0]
        )
        assert isinstance(matrix, EngineUnavailable)
        assert matrix.missing_fields == ["total_operating_expenses"]
