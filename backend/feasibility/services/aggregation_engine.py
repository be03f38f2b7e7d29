"""Aggregation Engine & full evaluation pipeline.

Combines dimension scores and penalties into the composite, risk,
risk-adjusted (RAS) and confidence scores, classifies the decision,
and attaches advisory conditional actions.

Pipeline
--------
normalize -> dimension scores -> penalties -> composite -> risk -> RAS
-> confidence -> decision -> conditional actions -> variable contributions

Every step is a pure function of its arguments; ``evaluate`` never
reads the environment, the clock or any module-level mutable state.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..constants import (
    LOW_DIMENSION_THRESHOLD,
    MIN_BENCHMARKS_FOR_FULL_DENSITY,
    MODEL_STABILITY,
    NOT_VALIDATED_BELOW_COMPOSITE,
    NOT_VALIDATED_MIN_RISK,
    RAS_RISK_FACTOR,
    VALIDATED_MAX_RISK,
    VALIDATED_MIN_COMPOSITE,
)
from ..schemas.normalized_schema import NormalizedInputs
from ..schemas.project_schema import ProjectInputs
from ..schemas.score_schema import (
    ConditionalAction,
    DecisionStatus,
    DimensionScores,
    DimensionWeights,
    EvaluationConfig,
    Penalty,
    ScoreResult,
)
from .normalization_engine import normalize_inputs
from .penalty_engine import compute_penalties
from .scoring_engine import resolve_weight, compute_certification_risk, compute_dimension_scores

logger = logging.getLogger(__name__)


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

def compute_composite(
    dimensions: DimensionScores,
    weights: DimensionWeights,
    penalties: Iterable[Penalty],
) -> float:
    """Weighted dimension sum plus all penalty effects, clamped 0-100."""
    raw = (
        weights.sa * dimensions.sa
        + weights.ff * dimensions.ff
        + weights.mp * dimensions.mp
        + weights.ds * dimensions.ds
        + weights.er * dimensions.er
    )
    total_penalty = sum(p.effect for p in penalties)
    return _clamp(raw + total_penalty)


def compute_risk_score(dimensions: DimensionScores, n: NormalizedInputs) -> float:
    """Higher is riskier.  Driven by ER, FF, budget fit and execution resilience."""
    risk = 100 - (
        0.35 * dimensions.er
        + 0.25 * dimensions.ff
        + 0.20 * n.budget_fit * 100
        + 0.20 * n.execution_resilience * 100
    )
    return _clamp(risk)


def compute_ras(composite_score: float, risk_score: float) -> float:
    """Risk-adjusted score: composite - 0.35 * risk, floored at 0."""
    return max(0.0, composite_score - RAS_RISK_FACTOR * risk_score)


def compute_input_completeness(inputs: ProjectInputs) -> float:
    values = list(inputs.model_dump().values())
    provided = sum(1 for v in values if v is not None)
    return provided / len(values)


def compute_confidence(
    inputs: ProjectInputs,
    benchmark_count: int,
    override_rate: float,
) -> float:
    """Confidence in the evaluation, 0-100.

    30% input completeness, 25% benchmark density (saturating at three
    benchmarks), 25% model stability (constant), 20% absence of manual
    overrides.
    """
    input_completeness = compute_input_completeness(inputs)
    benchmark_density = min(1.0, benchmark_count / MIN_BENCHMARKS_FOR_FULL_DENSITY)
    override_factor = max(0.0, 1 - override_rate)

    confidence = (
        0.30 * input_completeness
        + 0.25 * benchmark_density
        + 0.25 * MODEL_STABILITY
        + 0.20 * override_factor
    )
    return _clamp(confidence * 100)


def classify_decision(composite_score: float, risk_score: float) -> DecisionStatus:
    """Threshold lattice; the validated rule wins over the not-validated one."""
    if composite_score >= VALIDATED_MIN_COMPOSITE and risk_score <= VALIDATED_MAX_RISK:
        return "validated"
    if composite_score < NOT_VALIDATED_BELOW_COMPOSITE or risk_score >= NOT_VALIDATED_MIN_RISK:
        return "not_validated"
    return "conditional"


# ---------------------------------------------------------------------------
# Conditional actions
# ---------------------------------------------------------------------------

# Flag-driven rules first, then dimension thresholds.  Order is part of the output.
FLAG_ACTIONS: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    (
        "FIN_SEVERE",
        "Adjust specification level or budget range. Consider 2 alternative material tiers.",
        ("fin01_budget_cap", "des02_material_level"),
    ),
    (
        "EXE_FRAGILE",
        "Simplify design complexity or upgrade contractor plan.",
        ("des03_complexity", "exe02_contractor"),
    ),
    (
        "COMPLEXITY_MISMATCH",
        "Reduce custom joinery; modularize; phase high-complexity elements.",
        ("des03_complexity", "exe02_contractor"),
    ),
    (
        "SUSTAIN_UNDERFUNDED",
        "Ring-fence budget for the certification target or step down one certification tier.",
        ("sustain_cert_target", "fin01_budget_cap"),
    ),
    (
        "BOARD_BUDGET_BREACH",
        "Rebalance the materials board: swap hero finishes for value-engineered alternates.",
        ("board_material_cost", "fin01_budget_cap", "des02_material_level"),
    ),
    (
        "SPACE_CRITICAL",
        "Revisit the space program; resolve critical room-ratio deviations before design freeze.",
        ("space_efficiency_score", "space_critical_count"),
    ),
)

DIMENSION_ACTIONS: Tuple[Tuple[str, str, str, Tuple[str, ...]], ...] = (
    (
        "sa", "LOW_SA",
        "Clarify target user profile and brand narrative.",
        ("str01_brand_clarity", "str03_buyer_maturity"),
    ),
    (
        "ff", "LOW_FF",
        "Revalidate the budget cap against benchmarks and add contingency for cost shocks.",
        ("fin01_budget_cap", "fin02_flexibility", "fin03_shock_tolerance"),
    ),
    (
        "mp", "LOW_MP",
        "Reposition experience intensity; adjust differentiation strategy.",
        ("mkt02_competitor", "des04_experience"),
    ),
    (
        "ds", "LOW_DS",
        "Strengthen the signature design moves that set the project apart from competitors.",
        ("str02_differentiation", "des02_material_level", "des04_experience"),
    ),
    (
        "er", "LOW_ER",
        "De-risk delivery: secure long-lead items early and tighten QA and approvals planning.",
        ("exe01_supply_chain", "exe03_approvals", "exe04_qa_maturity"),
    ),
)


def generate_conditional_actions(
    dimensions: DimensionScores,
    risk_flags: Sequence[str],
) -> List[ConditionalAction]:
    actions: List[ConditionalAction] = []
    active = set(risk_flags)

    for flag, recommendation, variables in FLAG_ACTIONS:
        if flag in active:
            actions.append(ConditionalAction(
                trigger=flag, recommendation=recommendation, variables=list(variables),
            ))

    for dim, trigger, recommendation, variables in DIMENSION_ACTIONS:
        if getattr(dimensions, dim) < LOW_DIMENSION_THRESHOLD:
            actions.append(ConditionalAction(
                trigger=trigger, recommendation=recommendation, variables=list(variables),
            ))

    return actions


# ---------------------------------------------------------------------------
# Variable contributions
# ---------------------------------------------------------------------------

def compute_variable_contributions(
    n: NormalizedInputs,
    variable_weights: Optional[Mapping[str, Mapping[str, float]]] = None,
) -> Dict[str, Dict[str, float]]:
    """dimension -> term -> feature * weight, before any multiplier."""
    vw = variable_weights or {}
    sa, ff, mp, ds, er = (vw.get(d) for d in ("sa", "ff", "mp", "ds", "er"))

    return {
        "sa": {
            "str01_n": n.str01_n * resolve_weight(sa, "sa", "str01"),
            "str03_n": n.str03_n * resolve_weight(sa, "sa", "str03"),
            "compatVisionMarket": n.compat_vision_market * resolve_weight(sa, "sa", "compatVisionMarket"),
            "compatVisionDesign": n.compat_vision_design * resolve_weight(sa, "sa", "compatVisionDesign"),
        },
        "ff": {
            "budgetFit": n.budget_fit * resolve_weight(ff, "ff", "budgetFit"),
            "fin02_n": n.fin02_n * resolve_weight(ff, "ff", "fin02"),
            "executionResilience": n.execution_resilience * resolve_weight(ff, "ff", "executionResilience"),
            "costStability": (1 - n.cost_volatility) * resolve_weight(ff, "ff", "costStability"),
        },
        "mp": {
            "marketFit": n.market_fit * resolve_weight(mp, "mp", "marketFit"),
            "differentiationPressure": (
                n.differentiation_pressure * resolve_weight(mp, "mp", "differentiationPressure")
            ),
            "des04_n": n.des04_n * resolve_weight(mp, "mp", "des04"),
            "trendFit": n.trend_fit * resolve_weight(mp, "mp", "trendFit"),
        },
        "ds": {
            "str02_n": n.str02_n * resolve_weight(ds, "ds", "str02"),
            "competitorInverse": (1 - n.mkt02_n) * resolve_weight(ds, "ds", "competitorInverse"),
            "des04_n": n.des04_n * resolve_weight(ds, "ds", "des04"),
            "des02_n": n.des02_n * resolve_weight(ds, "ds", "des02"),
        },
        "er": {
            "executionResilience": n.execution_resilience * resolve_weight(er, "er", "executionResilience"),
            "supplyChainReadiness": n.exe01_n * resolve_weight(er, "er", "supplyChainReadiness"),
            "complexityInverse": (1 - n.des03_n) * resolve_weight(er, "er", "complexityInverse"),
            "approvalsInverse": (1 - n.exe03_n) * resolve_weight(er, "er", "approvalsInverse"),
            "certificationRisk": (
                -compute_certification_risk(n.sustain_cert_multiplier)
                * resolve_weight(er, "er", "certificationRisk")
            ),
        },
    }


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------

def evaluate(inputs: ProjectInputs, config: Optional[EvaluationConfig] = None) -> ScoreResult:
    """Evaluate one project.

    Parameters
    ----------
    inputs : ProjectInputs
        Immutable project description; stored as ``input_snapshot``.
    config : EvaluationConfig, optional
        Weights, penalty overrides and benchmark context.  Defaults to
        ``EvaluationConfig()``.

    Returns
    -------
    ScoreResult
        Headline scores are rounded to two decimals; the decision is
        classified on the unrounded values.
    """
    config = config or EvaluationConfig()

    n = normalize_inputs(inputs, config.expected_cost)
    dimensions = compute_dimension_scores(n, config.variable_weights)
    penalties, risk_flags = compute_penalties(inputs, n, config.penalty_config)

    composite_score = compute_composite(dimensions, config.dimension_weights, penalties)
    risk_score = compute_risk_score(dimensions, n)
    ras_score = compute_ras(composite_score, risk_score)
    confidence_score = compute_confidence(inputs, config.benchmark_count, config.override_rate)
    decision_status = classify_decision(composite_score, risk_score)

    logger.info(
        "[SCORING] %s/%s/%s composite=%.2f risk=%.2f ras=%.2f -> %s",
        inputs.typology, inputs.location, inputs.mkt01_tier,
        composite_score, risk_score, ras_score, decision_status,
    )

    return ScoreResult(
        dimensions=dimensions,
        dimension_weights=config.dimension_weights,
        composite_score=round(composite_score, 2),
        risk_score=round(risk_score, 2),
        ras_score=round(ras_score, 2),
        confidence_score=round(confidence_score, 2),
        decision_status=decision_status,
        penalties=penalties,
        risk_flags=risk_flags,
        conditional_actions=generate_conditional_actions(dimensions, risk_flags),
        variable_contributions=compute_variable_contributions(n, config.variable_weights),
        input_snapshot=inputs,
    )
