"""Deterministic Dimension Scoring Engine.

Converts normalized [0,1] features into five dimension scores (0-100)
using fixed weighted-sum formulas.

Rules
-----
- NO API calls
- NO DB writes
- NO dimension may read another dimension's output
- Every weight has a hard default; callers may pass partial tables
- Optional multipliers apply only when present
- Pure deterministic math
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..constants import CERT_RISK_SPAN, CERT_RISK_THRESHOLD, DEFAULT_VARIABLE_WEIGHTS
from ..schemas.normalized_schema import NormalizedInputs
from ..schemas.score_schema import DimensionScores


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def resolve_weight(weights: Optional[Mapping[str, float]], dimension: str, term: str) -> float:
    if weights and term in weights:
        return weights[term]
    return DEFAULT_VARIABLE_WEIGHTS[dimension][term]


def compute_certification_risk(sustain_cert_multiplier: float) -> float:
    """0 up to a 1.10 premium, rising linearly to 1 at 1.22."""
    return max(0.0, min(1.0, (sustain_cert_multiplier - CERT_RISK_THRESHOLD) / CERT_RISK_SPAN))


def compute_strategic_alignment(
    n: NormalizedInputs, weights: Optional[Mapping[str, float]] = None
) -> float:
    raw = (
        resolve_weight(weights, "sa", "str01") * n.str01_n
        + resolve_weight(weights, "sa", "str03") * n.str03_n
        + resolve_weight(weights, "sa", "compatVisionMarket") * n.compat_vision_market
        + resolve_weight(weights, "sa", "compatVisionDesign") * n.compat_vision_design
    )
    if n.brand_standard_multiplier is not None:
        raw *= n.brand_standard_multiplier
    return _clamp(raw * 100)


def compute_financial_feasibility(
    n: NormalizedInputs, weights: Optional[Mapping[str, float]] = None
) -> float:
    raw = (
        resolve_weight(weights, "ff", "budgetFit") * n.budget_fit
        + resolve_weight(weights, "ff", "fin02") * n.fin02_n
        + resolve_weight(weights, "ff", "executionResilience") * n.execution_resilience
        + resolve_weight(weights, "ff", "costStability") * (1 - n.cost_volatility)
    )
    if n.lifecycle_opex_multiplier is not None:
        raw *= n.lifecycle_opex_multiplier
    if n.target_value_multiplier is not None:
        raw *= n.target_value_multiplier
    return _clamp(raw * 100)


def compute_market_positioning(
    n: NormalizedInputs, weights: Optional[Mapping[str, float]] = None
) -> float:
    raw = (
        resolve_weight(weights, "mp", "marketFit") * n.market_fit
        + resolve_weight(weights, "mp", "differentiationPressure") * n.differentiation_pressure
        + resolve_weight(weights, "mp", "des04") * n.des04_n
        + resolve_weight(weights, "mp", "trendFit") * n.trend_fit
    )
    if n.branded_premium_multiplier is not None:
        raw *= n.branded_premium_multiplier
    if n.sales_velocity_multiplier is not None:
        raw *= n.sales_velocity_multiplier
    return _clamp(raw * 100)


def compute_differentiation_strength(
    n: NormalizedInputs, weights: Optional[Mapping[str, float]] = None
) -> float:
    raw = (
        resolve_weight(weights, "ds", "str02") * n.str02_n
        + resolve_weight(weights, "ds", "competitorInverse") * (1 - n.mkt02_n)
        + resolve_weight(weights, "ds", "des04") * n.des04_n
        + resolve_weight(weights, "ds", "des02") * n.des02_n
    )
    # Floor-plan efficiency: neutral at 0.5
    raw *= 0.9 + 0.2 * n.space_efficiency_n
    return _clamp(raw * 100)


def compute_execution_risk(
    n: NormalizedInputs, weights: Optional[Mapping[str, float]] = None
) -> float:
    """Execution score: higher means more resilient delivery.

    Risk multipliers above 1.0 (fully furnished handover, a compressed
    timeline) are applied as reciprocals, so they lower the score.
    """
    raw = (
        resolve_weight(weights, "er", "executionResilience") * n.execution_resilience
        + resolve_weight(weights, "er", "supplyChainReadiness") * n.exe01_n
        + resolve_weight(weights, "er", "complexityInverse") * (1 - n.des03_n)
        + resolve_weight(weights, "er", "approvalsInverse") * (1 - n.exe03_n)
        - resolve_weight(weights, "er", "certificationRisk")
        * compute_certification_risk(n.sustain_cert_multiplier)
    )
    if n.procurement_risk_multiplier is not None:
        raw *= n.procurement_risk_multiplier
    if n.material_sourcing_risk_multiplier is not None:
        raw *= n.material_sourcing_risk_multiplier
    if n.handover_risk_multiplier is not None:
        raw /= n.handover_risk_multiplier
    if n.timeline_risk_multiplier is not None:
        raw /= n.timeline_risk_multiplier
    return _clamp(raw * 100)


def compute_dimension_scores(
    n: NormalizedInputs,
    variable_weights: Optional[Mapping[str, Mapping[str, float]]] = None,
) -> DimensionScores:
    """Run all five scorers, each with its own slice of *variable_weights*."""
    vw = variable_weights or {}
    return DimensionScores(
        sa=compute_strategic_alignment(n, vw.get("sa")),
        ff=compute_financial_feasibility(n, vw.get("ff")),
        mp=compute_market_positioning(n, vw.get("mp")),
        ds=compute_differentiation_strength(n, vw.get("ds")),
        er=compute_execution_risk(n, vw.get("er")),
    )
