"""Value-add bridge and brand-equity halo."""

import pytest
from pydantic import ValidationError

from feasibility.constants import PAYBACK_INFINITE_SENTINEL
from feasibility.schemas.value_add_schema import BrandEquityInputs, ValueAddInputs
from feasibility.services.value_add_engine import (
    INSUFFICIENT_COMPARABLES_MESSAGE,
    build_payback_range,
    build_range,
    compute_brand_equity_forecast,
    compute_value_add_bridge,
    derive_confidence,
    sale_impact_band,
)


def _upgrade(**overrides):
    fields = dict(
        current_fitout_per_sqm=1500.0,
        proposed_fitout_per_sqm=3000.0,
        gfa=100.0,
        sale_median_per_sqm=15000.0,
        tier="Luxury",
        transaction_count=20,
    )
    fields.update(overrides)
    return ValueAddInputs(**fields)


class TestHelpers:
    @pytest.mark.parametrize("count, label", [
        (15, "high"), (14, "medium"), (8, "medium"),
        (7, "low"), (3, "low"), (2, "insufficient"), (0, "insufficient"),
    ])
    def test_confidence_bands(self, count, label):
        assert derive_confidence(count) == label

    def test_build_range(self):
        r = build_range(2.0)
        assert (r.conservative, r.mid, r.aggressive) == (1.3, 2.0, 2.7)

    def test_payback_range_is_inverted(self):
        r = build_payback_range(120.0)
        assert r.conservative > r.mid > r.aggressive

    def test_payback_sentinel_kept(self):
        r = build_payback_range(PAYBACK_INFINITE_SENTINEL)
        assert r.conservative == r.mid == r.aggressive == 999.0

    @pytest.mark.parametrize("ratio, label", [
        (0.05, "UNDER_SPEC"), (0.10, "UNDER_SPEC"), (0.15, "IN_SPEC"),
        (0.20, "PREMIUM"), (0.28, "PREMIUM"), (0.40, "OVER_SPEC"),
    ])
    def test_sale_impact_band(self, ratio, label):
        assert sale_impact_band(ratio)[0] == label


class TestValueAddBridge:
    def test_worked_example(self):
        result = compute_value_add_bridge(_upgrade())
        assert result.incremental_fitout_cost == 150_000.0
        assert result.fitout_ratio == 0.2
        assert result.yield_delta.mid == pytest.approx(1.0)
        # UNDER_SPEC (-10%) to PREMIUM (+8.5%)
        assert result.sale_premium_pct.mid == pytest.approx(18.5)
        assert result.sale_premium_aed.mid == 277_500
        assert result.payback_months.mid == pytest.approx(120.0)
        assert result.payback_months.conservative == pytest.approx(184.6)
        assert result.payback_months.aggressive == pytest.approx(88.9)
        assert result.confidence == "high"
        assert result.risk_flag is None

    def test_no_upgrade(self):
        result = compute_value_add_bridge(_upgrade(current_fitout_per_sqm=3000.0))
        assert result.incremental_fitout_cost == 0.0
        assert result.yield_delta.mid == 0.0
        assert result.sale_premium_pct.mid == 0.0
        assert result.payback_months.mid == 0.0

    def test_handover_premium_lifts_yield(self):
        result = compute_value_add_bridge(_upgrade(handover_condition="Fully Furnished"))
        # .40 premium x .10 coefficient = 4pp, at the cap
        assert result.yield_delta.mid == pytest.approx(4.0)

    def test_yield_capped(self):
        result = compute_value_add_bridge(_upgrade(
            current_fitout_per_sqm=0.0, proposed_fitout_per_sqm=15000.0, tier="Ultra-luxury",
        ))
        assert result.yield_delta.mid == 4.0

    @pytest.mark.parametrize("field", ["gfa", "sale_median_per_sqm"])
    def test_degenerate_market_data(self, field):
        result = compute_value_add_bridge(_upgrade(**{field: 0.0}))
        assert result.confidence == "insufficient"
        assert result.incremental_fitout_cost == 0.0
        assert result.payback_months.mid == 0.0
        assert result.risk_message == INSUFFICIENT_COMPARABLES_MESSAGE

    def test_too_few_comparables(self):
        result = compute_value_add_bridge(_upgrade(transaction_count=2))
        assert result.confidence == "insufficient"
        assert result.yield_delta.mid == 0.0
        assert result.incremental_fitout_cost == 150_000.0
        assert result.fitout_ratio == 0.2
        assert result.risk_message == INSUFFICIENT_COMPARABLES_MESSAGE

    def test_over_spec_flag(self):
        result = compute_value_add_bridge(_upgrade(proposed_fitout_per_sqm=4950.0))
        assert result.fitout_ratio == 0.33
        assert result.risk_flag == "DIMINISHING_RETURNS"

    def test_under_spec_flag(self):
        result = compute_value_add_bridge(_upgrade(
            current_fitout_per_sqm=600.0, proposed_fitout_per_sqm=1050.0,
        ))
        assert result.fitout_ratio == 0.07
        assert result.risk_flag == "UNDER_SPEC"
        assert "Luxury" in result.risk_message


class TestBrandEquity:
    def test_trophy_project(self):
        result = compute_brand_equity_forecast(BrandEquityInputs(
            tier="Luxury", target_value_add="Brand Flagship / Trophy", sale_performance_pct=20.0,
        ))
        assert result.halo_applies is True
        assert result.halo_uplift_pct == pytest.approx(3.5)
        assert result.portfolio_impact_aed.conservative == 437_500
        assert result.portfolio_impact_aed.mid == 1_750_000
        assert result.portfolio_impact_aed.aggressive == 4_375_000

    def test_branded_ultra_luxury_capped(self):
        result = compute_brand_equity_forecast(BrandEquityInputs(
            tier="Ultra-luxury", sale_performance_pct=40.0, branded_status="Hospitality Branded",
        ))
        assert result.halo_applies is True
        assert result.halo_uplift_pct == 8.0
        assert "amplification" in result.reasoning

    def test_below_threshold(self):
        result = compute_brand_equity_forecast(BrandEquityInputs(
            tier="Luxury", target_value_add="Brand Flagship / Trophy", sale_performance_pct=10.0,
        ))
        assert result.halo_applies is True
        assert result.halo_uplift_pct == 0.0
        assert result.portfolio_impact_aed.mid == 0.0

    def test_not_applicable(self):
        result = compute_brand_equity_forecast(BrandEquityInputs(
            tier="Luxury", sale_performance_pct=30.0,
        ))
        assert result.halo_applies is False
        assert result.halo_uplift_pct == 0.0


class TestInputValidation:
    @pytest.mark.parametrize("field", [
        "current_fitout_per_sqm", "proposed_fitout_per_sqm", "gfa", "sale_median_per_sqm",
    ])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_upgrade_rejected(self, field, value):
        with pytest.raises(ValidationError):
            _upgrade(**{field: value})

    def test_non_finite_performance_rejected(self):
        with pytest.raises(ValidationError):
            BrandEquityInputs(tier="Luxury", sale_performance_pct=float("nan"))
