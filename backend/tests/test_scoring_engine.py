"""Dimension scorers: formulas, weight defaults, multipliers, ranges."""

import pytest

from feasibility.services.normalization_engine import normalize_inputs
from feasibility.services.scoring_engine import (
    compute_certification_risk,
    compute_differentiation_strength,
    compute_dimension_scores,
    compute_execution_risk,
    compute_financial_feasibility,
    compute_market_positioning,
    compute_strategic_alignment,
)


def _normalized(inputs, expected_cost=0.0):
    return normalize_inputs(inputs, expected_cost)


class TestMidmarketScores:
    """All features at 0.5: each score can be worked out by hand."""

    def test_strategic_alignment(self, midmarket):
        # .35*.5 + .25*.5 + .25*1.0 + .15*1.0
        assert compute_strategic_alignment(_normalized(midmarket)) == pytest.approx(70.0)

    def test_financial_feasibility(self, midmarket):
        assert compute_financial_feasibility(_normalized(midmarket)) == pytest.approx(50.0)

    def test_market_positioning(self, midmarket):
        # .35*1.0 + .25*.5 + .20*.5 + .20*.6
        assert compute_market_positioning(_normalized(midmarket)) == pytest.approx(69.5)

    def test_differentiation_strength(self, midmarket):
        assert compute_differentiation_strength(_normalized(midmarket)) == pytest.approx(50.0)

    def test_execution_risk(self, midmarket):
        assert compute_execution_risk(_normalized(midmarket)) == pytest.approx(50.0)


class TestWeights:
    def test_partial_weight_table_keeps_defaults(self, midmarket):
        n = _normalized(midmarket)
        # Only str01 overridden: .0*.5 + .25*.5 + .25 + .15
        assert compute_strategic_alignment(n, {"str01": 0.0}) == pytest.approx(52.5)

    def test_empty_table_equals_defaults(self, midmarket):
        n = _normalized(midmarket)
        assert compute_financial_feasibility(n, {}) == compute_financial_feasibility(n)

    def test_dimension_scores_route_weight_slices(self, midmarket):
        n = _normalized(midmarket)
        scores = compute_dimension_scores(n, {"sa": {"str01": 0.0}})
        assert scores.sa == pytest.approx(52.5)
        assert scores.ff == pytest.approx(50.0)


class TestMultipliers:
    def test_brand_standard_lifts_sa(self, midmarket):
        n = _normalized(midmarket.with_overrides({"developer_type": "Master Developer"}))
        assert compute_strategic_alignment(n) == pytest.approx(70.0 * 1.05)

    def test_branded_and_sales_velocity_stack_on_mp(self, midmarket):
        n = _normalized(midmarket.with_overrides({
            "branded_status": "Hospitality Branded",
            "sales_strategy": "Sell on Completion",
        }))
        assert compute_market_positioning(n) == pytest.approx(69.5 * 1.08 * 0.97)

    def test_handover_risk_is_reciprocal(self, midmarket):
        n = _normalized(midmarket.with_overrides({"handover_condition": "Fully Furnished"}))
        assert compute_execution_risk(n) == pytest.approx(50.0 / 1.10)

    def test_compressed_timeline_lowers_er(self, midmarket):
        n = _normalized(midmarket.with_overrides({"horizon": "0-12m"}))
        assert compute_execution_risk(n) == pytest.approx(50.0 / 1.10)

    def test_space_efficiency_modulates_ds(self, midmarket):
        high = _normalized(midmarket.with_overrides({"space_efficiency_score": 100.0}))
        low = _normalized(midmarket.with_overrides({"space_efficiency_score": 0.0}))
        assert compute_differentiation_strength(high) == pytest.approx(55.0)
        assert compute_differentiation_strength(low) == pytest.approx(45.0)


class TestCertificationRisk:
    def test_below_threshold_is_zero(self):
        assert compute_certification_risk(1.07) == 0.0
        assert compute_certification_risk(1.10) == 0.0

    def test_saturates_at_platinum(self):
        assert compute_certification_risk(1.22) == pytest.approx(1.0)

    def test_gold_reduces_er(self, midmarket):
        n = _normalized(midmarket.with_overrides({"sustain_cert_target": "gold"}))
        # (1.12 - 1.10) / .12 = 1/6 of the .10 weight
        assert compute_execution_risk(n) == pytest.approx(50.0 - 10.0 / 6)


class TestRanges:
    @pytest.mark.parametrize("level", [1, 5])
    def test_extremes_stay_in_range(self, midmarket, level):
        ordinals = {
            name: level for name, value in midmarket.model_dump().items()
            if isinstance(value, int) and not isinstance(value, bool)
        }
        n = _normalized(midmarket.with_overrides({
            **ordinals,
            "developer_type": "Master Developer",
            "branded_status": "Hospitality Branded",
            "sales_strategy": "Sell Off-Plan",
            "procurement_strategy": "Turnkey",
            "material_sourcing": "Local",
            "amenity_focus": "Minimal/Essential",
            "target_value_add": "Max Capital Appreciation",
            "space_efficiency_score": 100.0,
        }), expected_cost=400.0)
        scores = compute_dimension_scores(n)
        for value in scores.model_dump().values():
            assert 0.0 <= value <= 100.0
