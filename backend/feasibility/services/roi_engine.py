"""ROI Engine.

Two views of the value a validated design direction creates:

``compute_roi``
    Five score-scaled value buckets as fractions of the fitout budget,
    compared against the advisory fee.

``compute_roi_narrative``
    Driver-level story (design cycles, tender rounds, rework, budget
    variance, time-to-brief) with conservative / mid / aggressive
    hours and AED, driven by admin-configurable coefficients.

Neither function needs the full pipeline: ``compute_roi`` takes only a
composite score, ``compute_roi_narrative`` reads headline scores off a
``ScoreResult``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..constants import (
    DEFAULT_BUDGET_CAP,
    DEFAULT_HORIZON_WEEKS,
    ROI_BUCKET_RATES,
    ROI_HORIZON_WEEKS,
    ROI_TIER_MULTIPLIER,
)
from ..schemas.project_schema import ProjectInputs
from ..schemas.roi_schema import (
    PercentShift,
    ROIResult,
    RoiCoefficients,
    RoiDriver,
    RoiNarrative,
    ScenarioValues,
    WeeksShift,
)
from ..schemas.score_schema import ScoreResult
from .normalization_engine import get_pricing_area

logger = logging.getLogger(__name__)

DESIGN_HOURS_PER_CYCLE = 120
TENDER_HOURS_PER_ROUND = 40
HOURS_PER_WEEK = 40
OPPORTUNITY_COST_SHARE = 0.3


def _budget_cap(inputs: ProjectInputs) -> float:
    return inputs.fin01_budget_cap if inputs.fin01_budget_cap is not None else DEFAULT_BUDGET_CAP


# ---------------------------------------------------------------------------
# Value buckets
# ---------------------------------------------------------------------------

def compute_roi(inputs: ProjectInputs, composite_score: float, fee: float) -> ROIResult:
    """Monetize a composite score against the fitout budget.

    Each bucket rate is ``floor + span * composite/100``.  Buckets are
    rounded to whole AED first and ``total_value`` is their exact sum;
    ratios use that rounded total.  ``fee <= 0`` yields zero ratios.
    """
    pricing_area = get_pricing_area(inputs)
    total_budget = pricing_area * _budget_cap(inputs)
    score_n = composite_score / 100

    buckets = {
        name: round(total_budget * (floor + span * score_n))
        for name, (floor, span) in ROI_BUCKET_RATES.items()
    }
    total_value = sum(buckets.values())

    net_roi = round((total_value - fee) / fee, 2) if fee > 0 else 0.0
    roi_multiple = round(total_value / fee, 2) if fee > 0 else 0.0

    logger.debug(
        "[ROI] area=%.1f budget=%.0f composite=%.2f total_value=%d fee=%.0f",
        pricing_area, total_budget, composite_score, total_value, fee,
    )

    return ROIResult(
        pricing_area=pricing_area,
        total_budget=total_budget,
        total_value=total_value,
        fee=fee,
        net_roi=net_roi,
        roi_multiple=roi_multiple,
        **buckets,
    )


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------

def _spread(mid: float, c: RoiCoefficients) -> ScenarioValues:
    return ScenarioValues(
        conservative=round(mid * c.conservative_multiplier),
        mid=round(mid),
        aggressive=round(mid * c.aggressive_multiplier),
    )


def _driver(name, description, hours, cost, assumptions, c) -> RoiDriver:
    return RoiDriver(
        name=name,
        description=description,
        hours_saved=_spread(hours, c),
        cost_avoided=_spread(cost, c),
        assumptions=assumptions,
    )


def _total(drivers: List[RoiDriver], attr: str) -> ScenarioValues:
    values = [getattr(d, attr) for d in drivers]
    return ScenarioValues(
        conservative=sum(v.conservative for v in values),
        mid=sum(v.mid for v in values),
        aggressive=sum(v.aggressive for v in values),
    )


def compute_roi_narrative(
    inputs: ProjectInputs,
    score: ScoreResult,
    coefficients: Optional[RoiCoefficients] = None,
) -> RoiNarrative:
    """Explain where the ROI comes from, driver by driver.

    Monetary drivers scale with the project's total fitout budget
    (pricing area x budget cap).
    """
    c = coefficients or RoiCoefficients()
    tier = inputs.mkt01_tier
    tm = ROI_TIER_MULTIPLIER.get(tier, 1.0)
    score_n = score.composite_score / 100
    risk_n = score.risk_score / 100
    conf_n = score.confidence_score / 100
    complexity_n = inputs.des03_complexity / 5
    budget = get_pricing_area(inputs) * _budget_cap(inputs)

    # 1. Design cycles avoided
    base_cycles = max(1, round(3 + complexity_n * 2 - score_n * 2))
    cycles_avoided = max(1, base_cycles - 1)
    design_hours = cycles_avoided * DESIGN_HOURS_PER_CYCLE * tm
    design_cost = cycles_avoided * c.design_cycle_cost * tm

    # 2. Tender iterations reduced
    base_tenders = max(1, round(2 + complexity_n * 2))
    tenders_reduced = max(1, round(base_tenders * score_n * 0.6))
    tender_hours = tenders_reduced * TENDER_HOURS_PER_ROUND
    tender_cost = tenders_reduced * c.tender_iteration_cost

    # 3. Rework probability
    base_rework = c.rework_cost_pct * (1 + risk_n)
    reduced_rework = base_rework * (1 - score_n * 0.5)
    rework_saving = budget * (base_rework - reduced_rework)
    rework_hours = rework_saving / c.hourly_rate

    # 4. Budget variance
    base_variance = c.budget_variance_multiplier * (1 + complexity_n * 0.5)
    reduced_variance = base_variance * (1 - conf_n * 0.4)
    variance_saving = budget * (base_variance - reduced_variance)
    variance_hours = variance_saving / c.hourly_rate

    # 5. Time-to-brief
    base_weeks = ROI_HORIZON_WEEKS.get(inputs.horizon, DEFAULT_HORIZON_WEEKS)
    acceleration_weeks = round(c.time_acceleration_weeks * score_n * tm * 0.5)
    time_hours = acceleration_weeks * HOURS_PER_WEEK
    time_cost = time_hours * c.hourly_rate * OPPORTUNITY_COST_SHARE

    drivers = [
        _driver(
            "Design Cycles Avoided",
            f"Reduced from {base_cycles} to {base_cycles - cycles_avoided} design iterations "
            "through validated direction",
            design_hours, design_cost,
            [
                f"{cycles_avoided} design cycle(s) eliminated",
                f"{round(DESIGN_HOURS_PER_CYCLE * tm)} hours per cycle at {tier} tier",
                f"AED {c.design_cycle_cost:,.0f} per cycle base cost",
            ],
            c,
        ),
        _driver(
            "Tender Iterations Reduced",
            f"Reduced from {base_tenders} to {base_tenders - tenders_reduced} tender rounds",
            tender_hours, tender_cost,
            [
                f"{tenders_reduced} tender iteration(s) eliminated",
                f"AED {c.tender_iteration_cost:,.0f} per iteration",
                f"{TENDER_HOURS_PER_ROUND} hours per tender round",
            ],
            c,
        ),
        _driver(
            "Rework Probability Reduction",
            f"Rework risk reduced from {base_rework * 100:.1f}% to {reduced_rework * 100:.1f}%",
            rework_hours, rework_saving,
            [
                f"Fitout budget: AED {budget:,.0f}",
                f"Base rework rate: {base_rework * 100:.1f}%",
                f"Validated rate: {reduced_rework * 100:.1f}%",
            ],
            c,
        ),
        _driver(
            "Budget Variance Risk Reduction",
            f"Budget variance band narrowed from ±{base_variance * 100:.1f}% "
            f"to ±{reduced_variance * 100:.1f}%",
            variance_hours, variance_saving,
            [
                f"Fitout budget: AED {budget:,.0f}",
                f"Variance reduced by {(base_variance - reduced_variance) * 100:.1f} percentage points",
            ],
            c,
        ),
        _driver(
            "Time-to-Brief Acceleration",
            f"Project timeline accelerated by {acceleration_weeks} weeks",
            time_hours, time_cost,
            [
                f"{acceleration_weeks} weeks saved from {base_weeks}-week baseline",
                f"Opportunity cost at {OPPORTUNITY_COST_SHARE:.0%} of hourly rate",
            ],
            c,
        ),
    ]

    logger.debug("[ROI] narrative drivers built for %s tier (x%.1f)", tier, tm)

    return RoiNarrative(
        total_hours_saved=_total(drivers, "hours_saved"),
        total_cost_avoided=_total(drivers, "cost_avoided"),
        budget_accuracy_gain=PercentShift(
            from_pct=round(base_variance * 100, 1),
            to_pct=round(reduced_variance * 100, 1),
        ),
        decision_confidence_index=round(conf_n * score_n * 100),
        drivers=drivers,
        assumptions=[
            f"Hourly rate: AED {c.hourly_rate:,.0f}",
            f"Market tier: {tier} (multiplier: {tm}x)",
            f"Project horizon: {inputs.horizon}",
            f"Composite score: {score.composite_score}/100",
            f"Risk score: {score.risk_score}/100",
            f"Conservative scenario: {c.conservative_multiplier:.0%} of mid estimate",
            f"Aggressive scenario: {c.aggressive_multiplier:.0%} of mid estimate",
        ],
        time_to_brief_weeks=WeeksShift(
            before=base_weeks,
            after=max(1, base_weeks - acceleration_weeks),
        ),
    )
