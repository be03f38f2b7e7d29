"""Input Normalization Engine.

Converts raw project answers (1-5 ordinals, enums, areas, budget caps)
into [0,1] features plus derived fit / compatibility scores.

Rules
-----
- NO API calls
- NO DB writes
- NO scoring or weighting
- Pure math + lookup tables + clamping
- Missing optional inputs degrade to neutral 0.5, never raise
- Fully deterministic
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..constants import (
    BUDGET_CLASS_HIGH_MAX,
    BUDGET_CLASS_LOW_BELOW,
    BUDGET_CLASS_MID_MAX,
    BRAND_STANDARD_MULTIPLIER,
    BRANDED_PREMIUM_MULTIPLIER,
    CERT_MULTIPLIERS,
    CITY_MANDATORY_TIER,
    DEFAULT_CERT_TIER,
    DEFAULT_EXPECTED_LEVEL,
    DEFAULT_STYLE_AMBITION,
    DEFAULT_TREND_ALIGNMENT,
    HANDOVER_RISK_MULTIPLIER,
    LIFECYCLE_OPEX_MULTIPLIER,
    LOCATION_MARKET_BONUS,
    MATERIAL_SOURCING_RISK_MULTIPLIER,
    NEUTRAL_FEATURE,
    PROCUREMENT_RISK_MULTIPLIER,
    SALES_VELOCITY_MULTIPLIER,
    SCALE_BAND_MEDIUM_MAX,
    SCALE_BAND_SMALL_BELOW,
    STYLE_AMBITION,
    STYLE_TREND_ALIGNMENT,
    TARGET_VALUE_MULTIPLIER,
    TIER_EXPECTED_LEVEL,
    TIMELINE_RISK_MULTIPLIER,
)
from ..schemas.normalized_schema import BudgetClass, NormalizedInputs, ScaleBand
from ..schemas.project_schema import ProjectInputs

logger = logging.getLogger(__name__)


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


# ---------------------------------------------------------------------------
# Primitive normalizers
# ---------------------------------------------------------------------------

def normalize_ordinal(value: Optional[float]) -> float:
    """Map a 1-5 answer to [0,1] via (v - 1) / 4.  Missing → 0.5."""
    if value is None:
        return NEUTRAL_FEATURE
    return _clamp((value - 1) / 4)


def normalize_bounded(value: Optional[float], lo: float, hi: float) -> float:
    """Map *value* from [lo, hi] to [0,1].  Missing or empty range → 0.5."""
    if value is None or hi <= lo:
        return NEUTRAL_FEATURE
    return _clamp((value - lo) / (hi - lo))


# ---------------------------------------------------------------------------
# Area helpers
# ---------------------------------------------------------------------------

def get_pricing_area(inputs: ProjectInputs) -> float:
    """Area used for pricing: fitout area when verified, otherwise GFA, else 0."""
    if inputs.total_fitout_area is not None:
        return inputs.total_fitout_area
    if inputs.gfa is not None:
        return inputs.gfa
    return 0.0


def get_structural_area(inputs: ProjectInputs) -> float:
    """Gross floor area, 0 when unknown."""
    return inputs.gfa if inputs.gfa is not None else 0.0


def compute_fitout_ratio(fitout_area: Optional[float], gfa: Optional[float]) -> float:
    """Fitout area / GFA; 1.0 when either side is unknown."""
    if not fitout_area or not gfa or gfa <= 0:
        return 1.0
    return fitout_area / gfa


# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------

def derive_scale_band(gfa: Optional[float], total_fitout_area: Optional[float] = None) -> ScaleBand:
    """Scale band over the pricing area (fitout area preferred over GFA)."""
    area = total_fitout_area if total_fitout_area is not None else gfa
    if not area or area < SCALE_BAND_SMALL_BELOW:
        return "Small"
    if area <= SCALE_BAND_MEDIUM_MAX:
        return "Medium"
    return "Large"


def derive_budget_class(budget_cap: Optional[float]) -> BudgetClass:
    """Budget class over the AED/sqm cap."""
    if not budget_cap or budget_cap < BUDGET_CLASS_LOW_BELOW:
        return "Low"
    if budget_cap <= BUDGET_CLASS_MID_MAX:
        return "Mid"
    if budget_cap <= BUDGET_CLASS_HIGH_MAX:
        return "High"
    return "Premium"


# ---------------------------------------------------------------------------
# Derived features
# ---------------------------------------------------------------------------

def compute_budget_fit(budget_cap: Optional[float], expected_cost: float) -> float:
    """1 - |cap - expected| / expected, clamped.  No cap or cost data → 0.5."""
    if not budget_cap or expected_cost <= 0:
        return NEUTRAL_FEATURE
    return _clamp(1 - abs(budget_cap - expected_cost) / expected_cost)


def compute_compat_vision_market(str01: int, tier: str) -> float:
    """Brand clarity vs the clarity the market tier expects."""
    expected = TIER_EXPECTED_LEVEL.get(tier, DEFAULT_EXPECTED_LEVEL)
    diff = abs(str01 - expected)
    if diff == 0:
        return 1.0
    if diff == 1:
        return 0.6
    return 0.2


def compute_compat_vision_design(str02: int, style: str) -> float:
    """Differentiation ambition vs how distinctive the chosen style is."""
    style_level = STYLE_AMBITION.get(style, DEFAULT_STYLE_AMBITION)
    diff = abs(str02 - style_level)
    if diff <= 1:
        return 1.0
    if diff <= 2:
        return 0.5
    return 0.1


def compute_market_fit(location: str, tier: str, material_level: int) -> float:
    """Material level vs the tier benchmark, shifted by location quality."""
    expected = TIER_EXPECTED_LEVEL.get(tier, DEFAULT_EXPECTED_LEVEL)
    diff = abs(material_level - expected)
    bonus = LOCATION_MARKET_BONUS.get(location, 0.0)
    return _clamp(1 - diff * 0.2 + bonus)


def compute_trend_fit(style: str, mkt03_trend: Optional[int]) -> float:
    """Style trend alignment, scaled by how trend-sensitive the buyers are."""
    alignment = STYLE_TREND_ALIGNMENT.get(style, DEFAULT_TREND_ALIGNMENT)
    sensitivity = normalize_ordinal(mkt03_trend)
    return _clamp(alignment * (0.5 + 0.5 * sensitivity))


def get_cert_multiplier(city: str, tier: str) -> float:
    """Certification cost premium; empty target → the city's mandatory tier."""
    key = tier.strip().lower() if tier else ""
    if not key:
        key = CITY_MANDATORY_TIER.get(city, DEFAULT_CERT_TIER)
    return CERT_MULTIPLIERS.get(key, 1.0)


def _lookup(table: Mapping[str, float], key: Optional[str]) -> Optional[float]:
    if key is None:
        return None
    return table.get(key)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def normalize_inputs(inputs: ProjectInputs, expected_cost: float) -> NormalizedInputs:
    """Normalize one project against a benchmark expected cost.

    Parameters
    ----------
    inputs : ProjectInputs
        The project as answered by the client.  Not modified.
    expected_cost : float
        Benchmark cost per sqm for (typology, location, tier).  Zero or
        negative means "no benchmark" and yields a neutral budget fit.

    Returns
    -------
    NormalizedInputs
        Every feature clamped to [0,1]; multipliers ``None`` when the
        driving input is absent.
    """
    str01_n = normalize_ordinal(inputs.str01_brand_clarity)
    str02_n = normalize_ordinal(inputs.str02_differentiation)
    str03_n = normalize_ordinal(inputs.str03_buyer_maturity)
    mkt02_n = normalize_ordinal(inputs.mkt02_competitor)
    mkt03_n = normalize_ordinal(inputs.mkt03_trend)
    fin02_n = normalize_ordinal(inputs.fin02_flexibility)
    fin03_n = normalize_ordinal(inputs.fin03_shock_tolerance)
    fin04_n = normalize_ordinal(inputs.fin04_sales_premium)
    des02_n = normalize_ordinal(inputs.des02_material_level)
    des03_n = normalize_ordinal(inputs.des03_complexity)
    des04_n = normalize_ordinal(inputs.des04_experience)
    des05_n = normalize_ordinal(inputs.des05_sustainability)
    exe01_n = normalize_ordinal(inputs.exe01_supply_chain)
    exe02_n = normalize_ordinal(inputs.exe02_contractor)
    exe03_n = normalize_ordinal(inputs.exe03_approvals)
    exe04_n = normalize_ordinal(inputs.exe04_qa_maturity)

    sustain_cert_multiplier = get_cert_multiplier(inputs.city, inputs.sustain_cert_target)

    # Certification premium raises the cost the budget has to meet
    adjusted_expected_cost = expected_cost * sustain_cert_multiplier
    budget_fit = compute_budget_fit(inputs.fin01_budget_cap, adjusted_expected_cost)

    cost_volatility = _clamp(0.5 * (1 - exe01_n) + 0.5 * (1 - fin03_n))
    execution_resilience = (exe02_n + exe04_n) / 2
    differentiation_pressure = (mkt02_n + str02_n) / 2

    logger.debug(
        "[NORMALIZATION] budget_fit=%.4f (cap=%s, expected=%.2f x%.2f) cost_volatility=%.4f",
        budget_fit, inputs.fin01_budget_cap, expected_cost, sustain_cert_multiplier, cost_volatility,
    )

    return NormalizedInputs(
        str01_n=str01_n,
        str02_n=str02_n,
        str03_n=str03_n,
        mkt02_n=mkt02_n,
        mkt03_n=mkt03_n,
        fin02_n=fin02_n,
        fin03_n=fin03_n,
        fin04_n=fin04_n,
        des02_n=des02_n,
        des03_n=des03_n,
        des04_n=des04_n,
        des05_n=des05_n,
        exe01_n=exe01_n,
        exe02_n=exe02_n,
        exe03_n=exe03_n,
        exe04_n=exe04_n,
        scale_band=derive_scale_band(inputs.gfa, inputs.total_fitout_area),
        budget_class=derive_budget_class(inputs.fin01_budget_cap),
        budget_fit=budget_fit,
        market_fit=compute_market_fit(inputs.location, inputs.mkt01_tier, inputs.des02_material_level),
        trend_fit=compute_trend_fit(inputs.des01_style, inputs.mkt03_trend),
        compat_vision_market=compute_compat_vision_market(inputs.str01_brand_clarity, inputs.mkt01_tier),
        compat_vision_design=compute_compat_vision_design(inputs.str02_differentiation, inputs.des01_style),
        cost_volatility=cost_volatility,
        execution_resilience=execution_resilience,
        differentiation_pressure=differentiation_pressure,
        space_efficiency_n=normalize_bounded(inputs.space_efficiency_score, 0.0, 100.0),
        sustain_cert_multiplier=sustain_cert_multiplier,
        fitout_ratio=compute_fitout_ratio(inputs.total_fitout_area, inputs.gfa),
        brand_standard_multiplier=_lookup(BRAND_STANDARD_MULTIPLIER, inputs.developer_type),
        lifecycle_opex_multiplier=_lookup(LIFECYCLE_OPEX_MULTIPLIER, inputs.amenity_focus),
        target_value_multiplier=_lookup(TARGET_VALUE_MULTIPLIER, inputs.target_value_add),
        branded_premium_multiplier=_lookup(BRANDED_PREMIUM_MULTIPLIER, inputs.branded_status),
        sales_velocity_multiplier=_lookup(SALES_VELOCITY_MULTIPLIER, inputs.sales_strategy),
        procurement_risk_multiplier=_lookup(PROCUREMENT_RISK_MULTIPLIER, inputs.procurement_strategy),
        material_sourcing_risk_multiplier=_lookup(
            MATERIAL_SOURCING_RISK_MULTIPLIER, inputs.material_sourcing
        ),
        handover_risk_multiplier=_lookup(HANDOVER_RISK_MULTIPLIER, inputs.handover_condition),
        timeline_risk_multiplier=_lookup(TIMELINE_RISK_MULTIPLIER, inputs.horizon),
    )
