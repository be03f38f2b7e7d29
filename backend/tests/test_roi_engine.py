"""ROI engine: value buckets and the driver-level narrative."""

import pytest

from feasibility.schemas.roi_schema import RoiCoefficients
from feasibility.services.aggregation_engine import evaluate
from feasibility.services.roi_engine import compute_roi, compute_roi_narrative

BUCKETS = (
    "rework_avoided", "procurement_savings", "time_value_gain",
    "spec_efficiency", "positioning_premium",
)


class TestComputeRoi:
    def test_bucket_composition(self, midmarket):
        result = compute_roi(midmarket, 50.0, 50_000.0)
        # 2000 sqm x 400 AED/sqm
        assert result.total_budget == 800_000.0
        assert result.rework_avoided == 92_000
        assert result.procurement_savings == 44_000
        assert result.time_value_gain == 28_000
        assert result.spec_efficiency == 16_000
        assert result.positioning_premium == 20_000
        assert result.total_value == 200_000
        assert result.roi_multiple == 4.0
        assert result.net_roi == 3.0

    def test_total_is_sum_of_rounded_buckets(self, premium):
        result = compute_roi(premium, 73.37, 120_000.0)
        assert result.total_value == sum(getattr(result, b) for b in BUCKETS)

    @pytest.mark.parametrize("fee", [0.0, -100.0])
    def test_no_fee_gives_zero_ratios(self, midmarket, fee):
        result = compute_roi(midmarket, 50.0, fee)
        assert result.net_roi == 0.0
        assert result.roi_multiple == 0.0
        assert result.total_value == 200_000

    def test_fitout_area_preferred(self, premium):
        result = compute_roi(premium, 0.0, 1.0)
        assert result.pricing_area == 9000.0
        assert result.total_budget == 9000.0 * 850.0
        assert result.positioning_premium == 0

    def test_missing_cap_uses_default(self, midmarket):
        result = compute_roi(midmarket.with_overrides({"fin01_budget_cap": None}), 50.0, 0.0)
        assert result.total_budget == 800_000.0

    def test_unknown_area_is_zero_value(self, midmarket):
        result = compute_roi(midmarket.with_overrides({"gfa": None}), 90.0, 1000.0)
        assert result.total_value == 0
        assert result.net_roi == -1.0


class TestRoiNarrative:
    def test_totals_are_driver_sums(self, midmarket):
        narrative = compute_roi_narrative(midmarket, evaluate(midmarket))
        assert len(narrative.drivers) == 5
        for attr, total in (
            ("hours_saved", narrative.total_hours_saved),
            ("cost_avoided", narrative.total_cost_avoided),
        ):
            for scenario in ("conservative", "mid", "aggressive"):
                assert getattr(total, scenario) == sum(
                    getattr(getattr(d, attr), scenario) for d in narrative.drivers
                )

    def test_driver_order(self, midmarket):
        names = [d.name for d in compute_roi_narrative(midmarket, evaluate(midmarket)).drivers]
        assert names == [
            "Design Cycles Avoided",
            "Tender Iterations Reduced",
            "Rework Probability Reduction",
            "Budget Variance Risk Reduction",
            "Time-to-Brief Acceleration",
        ]

    def test_ranges_are_ordered(self, premium, benchmarked_config):
        narrative = compute_roi_narrative(premium, evaluate(premium, benchmarked_config))
        for driver in narrative.drivers:
            for values in (driver.hours_saved, driver.cost_avoided):
                assert values.conservative <= values.mid <= values.aggressive

    def test_headline_fields(self, midmarket):
        score = evaluate(midmarket)
        narrative = compute_roi_narrative(midmarket, score)
        assert narrative.decision_confidence_index == round(
            score.confidence_score * score.composite_score / 100
        )
        assert narrative.budget_accuracy_gain.from_pct == pytest.approx(10.4)
        assert narrative.budget_accuracy_gain.to_pct < narrative.budget_accuracy_gain.from_pct
        assert narrative.time_to_brief_weeks.before == 52
        assert narrative.time_to_brief_weeks.after < 52

    def test_coefficients_drive_spread(self, midmarket):
        score = evaluate(midmarket)
        default = compute_roi_narrative(midmarket, score)
        wider = compute_roi_narrative(
            midmarket, score, RoiCoefficients(conservative_multiplier=0.5, aggressive_multiplier=2.0)
        )
        assert wider.total_cost_avoided.mid == default.total_cost_avoided.mid
        assert wider.total_cost_avoided.aggressive > default.total_cost_avoided.aggressive
        assert wider.total_cost_avoided.conservative < default.total_cost_avoided.conservative
