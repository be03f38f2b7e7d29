"""Value-Add Engine: sales premium, yield and brand-equity halo.

Computes the financial return of upgrading fitout quality against area
market comparables:

1. Yield delta (rental uplift from better finishes), percentage points
2. Sale price premium (% and AED vs the area median)
3. Payback period (months to recoup the incremental fitout cost)
4. Brand equity halo (trophy/flagship effect on the next project)

Independent of the scoring pipeline.  All monetary values in AED.
Every metric comes back as a conservative / mid / aggressive range.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..constants import (
    BRANDED_HALO_BONUS,
    CONFIDENCE_BANDS,
    DEFAULT_RENT_COEFF,
    HALO_CAP_PCT,
    HALO_SLOPE,
    HALO_THRESHOLD_PCT,
    MAX_YIELD_DELTA_PP,
    OVER_SPEC_RATIO,
    PAYBACK_INFINITE_SENTINEL,
    PORTFOLIO_BENCHMARK_AED_PER_SQM,
    PORTFOLIO_NEXT_PROJECT_GFA,
    RENTAL_PREMIUM_BY_CONDITION,
    SALE_IMPACT_BANDS,
    SCENARIO_AGGRESSIVE,
    SCENARIO_CONSERVATIVE,
    TIER_RENT_COEFF,
    TROPHY_VALUE_ADD,
    UNDER_SPEC_RATIO,
)
from ..schemas.value_add_schema import (
    BrandEquityInputs,
    BrandEquityResult,
    ScenarioRange,
    ValueAddConfidence,
    ValueAddInputs,
    ValueAddResult,
    ValueAddRiskFlag,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_COMPARABLES_MESSAGE = (
    "Insufficient comparable transactions (< 3). Results are indicative only."
)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def derive_confidence(transaction_count: int) -> ValueAddConfidence:
    """Step function of comparable-transaction count."""
    for minimum, label in CONFIDENCE_BANDS:
        if transaction_count >= minimum:
            return label
    return "insufficient"


def build_range(mid: float) -> ScenarioRange:
    return ScenarioRange(
        conservative=round(mid * SCENARIO_CONSERVATIVE, 2),
        mid=round(mid, 2),
        aggressive=round(mid * SCENARIO_AGGRESSIVE, 2),
    )


def build_payback_range(mid: float) -> ScenarioRange:
    """Inverted range: the conservative case pays back slowest.  999 stays 999."""
    if mid >= PAYBACK_INFINITE_SENTINEL:
        return ScenarioRange(
            conservative=PAYBACK_INFINITE_SENTINEL,
            mid=PAYBACK_INFINITE_SENTINEL,
            aggressive=PAYBACK_INFINITE_SENTINEL,
        )
    return ScenarioRange(
        conservative=round(mid / SCENARIO_CONSERVATIVE, 1),
        mid=round(mid, 1),
        aggressive=round(mid / SCENARIO_AGGRESSIVE, 1),
    )


def sale_impact_band(ratio: float) -> Tuple[str, float]:
    """(label, sale premium fraction) of the first band containing *ratio*."""
    for max_ratio, label, premium in SALE_IMPACT_BANDS:
        if ratio <= max_ratio:
            return label, premium
    _, label, premium = SALE_IMPACT_BANDS[-1]
    return label, premium


def _risk_flag(
    fitout_ratio: float, tier: str
) -> Tuple[Optional[ValueAddRiskFlag], Optional[str]]:
    if fitout_ratio > OVER_SPEC_RATIO:
        return "DIMINISHING_RETURNS", (
            f"Fitout at {fitout_ratio * 100:.0f}% of sale price exceeds the "
            f"{OVER_SPEC_RATIO * 100:.0f}% threshold. Payback extends significantly beyond 7 years."
        )
    if fitout_ratio < UNDER_SPEC_RATIO:
        return "UNDER_SPEC", (
            f"Fitout at {fitout_ratio * 100:.0f}% of sale price is below the "
            f"{UNDER_SPEC_RATIO * 100:.0f}% minimum for {tier}. May not meet buyer expectations."
        )
    return None, None


def _zero_result(confidence: ValueAddConfidence, message: Optional[str]) -> ValueAddResult:
    zero = ScenarioRange()
    return ValueAddResult(
        yield_delta=zero,
        sale_premium_pct=zero,
        sale_premium_aed=zero,
        payback_months=zero,
        incremental_fitout_cost=0.0,
        fitout_ratio=0.0,
        confidence=confidence,
        risk_flag=None,
        risk_message=message,
    )


def compute_value_add_bridge(inputs: ValueAddInputs) -> ValueAddResult:
    """Yield delta, sale premium and payback of a fitout upgrade.

    Guards
    ------
    - ``gfa <= 0`` or ``sale_median_per_sqm <= 0``: all-zero, ``insufficient``
    - fewer than 3 comparables: zero metrics, cost and ratio still reported
    - no incremental spend: yield delta and payback are 0
    - non-positive annual premium on a real spend: payback 999 (never)
    """
    if inputs.gfa <= 0 or inputs.sale_median_per_sqm <= 0:
        return _zero_result("insufficient", INSUFFICIENT_COMPARABLES_MESSAGE)

    confidence = derive_confidence(inputs.transaction_count)

    fitout_delta = max(0.0, inputs.proposed_fitout_per_sqm - inputs.current_fitout_per_sqm)
    incremental_fitout_cost = float(round(fitout_delta * inputs.gfa))
    fitout_ratio = round(inputs.proposed_fitout_per_sqm / inputs.sale_median_per_sqm, 2)
    risk_flag, risk_message = _risk_flag(fitout_ratio, inputs.tier)

    if confidence == "insufficient":
        zero = build_range(0)
        return ValueAddResult(
            yield_delta=zero,
            sale_premium_pct=zero,
            sale_premium_aed=zero,
            payback_months=zero,
            incremental_fitout_cost=incremental_fitout_cost,
            fitout_ratio=fitout_ratio,
            confidence=confidence,
            risk_flag=risk_flag,
            risk_message=INSUFFICIENT_COMPARABLES_MESSAGE,
        )

    # 1. Yield delta: tier coefficient vs handover premium, the stronger signal wins
    rent_coeff = TIER_RENT_COEFF.get(inputs.tier, DEFAULT_RENT_COEFF)
    yield_delta_mid = fitout_delta / inputs.sale_median_per_sqm * rent_coeff * 100
    if inputs.handover_condition is not None and fitout_delta > 0:
        condition_premium = RENTAL_PREMIUM_BY_CONDITION.get(inputs.handover_condition, 0.0)
        yield_delta_mid = max(yield_delta_mid, condition_premium * rent_coeff * 100)
    yield_delta_mid = _clamp(yield_delta_mid, 0.0, MAX_YIELD_DELTA_PP)

    # 2. Sale premium: band of proposed ratio minus band of current ratio
    _, proposed_premium = sale_impact_band(fitout_ratio)
    _, current_premium = sale_impact_band(
        inputs.current_fitout_per_sqm / inputs.sale_median_per_sqm
    )
    sale_premium_mid = round((proposed_premium - current_premium) * 100, 1)
    total_sale_value = inputs.sale_median_per_sqm * inputs.gfa
    sale_premium_aed_mid = round(total_sale_value * sale_premium_mid / 100)

    # 3. Payback
    if incremental_fitout_cost <= 0:
        payback_mid = 0.0
    else:
        annual_rental_premium = total_sale_value * yield_delta_mid / 100
        if annual_rental_premium <= 0:
            payback_mid = PAYBACK_INFINITE_SENTINEL
        else:
            payback_mid = round(incremental_fitout_cost / (annual_rental_premium / 12), 1)

    logger.debug(
        "[VALUE_ADD] ratio=%.2f yield=%.2fpp premium=%.1f%% payback=%.1fm (%s)",
        fitout_ratio, yield_delta_mid, sale_premium_mid, payback_mid, confidence,
    )

    return ValueAddResult(
        yield_delta=build_range(yield_delta_mid),
        sale_premium_pct=build_range(sale_premium_mid),
        sale_premium_aed=build_range(sale_premium_aed_mid),
        payback_months=build_payback_range(payback_mid),
        incremental_fitout_cost=incremental_fitout_cost,
        fitout_ratio=fitout_ratio,
        confidence=confidence,
        risk_flag=risk_flag,
        risk_message=risk_message,
    )


def compute_brand_equity_forecast(inputs: BrandEquityInputs) -> BrandEquityResult:
    """Halo uplift a flagship project gives the developer's next project.

    ``halo = clamp((performance - 10) * 0.35, 0, 8)``, then x1.15 when
    branded (re-clamped to 8).  Applies to trophy projects, or to
    Ultra-luxury projects that carry a brand.
    """
    is_trophy = inputs.target_value_add == TROPHY_VALUE_ADD
    is_branded = inputs.branded_status != "Unbranded"
    halo_applies = is_trophy or (inputs.tier == "Ultra-luxury" and is_branded)
    no_impact = ScenarioRange()

    if not halo_applies:
        return BrandEquityResult(
            halo_uplift_pct=0.0,
            halo_applies=False,
            reasoning=(
                f"Halo effect is not applicable for {inputs.tier} {inputs.target_value_add} "
                "projects. Trophy or Ultra-luxury branded projects qualify."
            ),
            portfolio_impact_aed=no_impact,
        )

    performance = round(inputs.sale_performance_pct, 1)
    if inputs.sale_performance_pct <= HALO_THRESHOLD_PCT:
        return BrandEquityResult(
            halo_uplift_pct=0.0,
            halo_applies=True,
            reasoning=(
                f"Project is performing at {performance:+}% vs area median. Halo effect "
                f"activates at >{HALO_THRESHOLD_PCT:.0f}% outperformance."
            ),
            portfolio_impact_aed=no_impact,
        )

    raw_halo = (inputs.sale_performance_pct - HALO_THRESHOLD_PCT) * HALO_SLOPE
    halo = round(_clamp(raw_halo, 0.0, HALO_CAP_PCT), 1)
    if is_branded:
        halo = round(_clamp(halo * BRANDED_HALO_BONUS, 0.0, HALO_CAP_PCT), 1)

    impact = ScenarioRange(**{
        scenario: round(gfa * PORTFOLIO_BENCHMARK_AED_PER_SQM * halo / 100)
        for scenario, gfa in PORTFOLIO_NEXT_PROJECT_GFA.items()
    })

    reasoning = [
        f"Project performs at {performance:+}% vs area median.",
        f"Halo formula: ({performance} - {HALO_THRESHOLD_PCT:.0f}) x {HALO_SLOPE} = "
        f"{round(raw_halo, 1)}%, capped at {HALO_CAP_PCT:.0f}%.",
    ]
    if is_branded:
        reasoning.append(
            f"Branded status ({inputs.branded_status}) applies a 15% brand amplification bonus."
        )
    reasoning.append(f"Expected uplift on next project: +{halo}%.")

    logger.debug("[BRAND_EQUITY] halo=%.1f%% branded=%s", halo, is_branded)

    return BrandEquityResult(
        halo_uplift_pct=halo,
        halo_applies=True,
        reasoning=" ".join(reasoning),
        portfolio_impact_aed=impact,
    )
