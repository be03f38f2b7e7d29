"""Scenario Simulation Engine.

Runs what-if scenarios (named override bundles) through the full
pipeline, picks the dominant scenario by RAS and scores every other
scenario's stability relative to it.  Also holds the built-in scenario
templates and a small deterministic constraint solver over them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..schemas.analysis_schema import (
    Constraint,
    ConstraintSolverResult,
    ScenarioInput,
    ScenarioResult,
    ScenarioTemplate,
)
from ..schemas.project_schema import ProjectInputs
from ..schemas.score_schema import EvaluationConfig
from ..timing import sync_timer
from .aggregation_engine import evaluate

logger = logging.getLogger(__name__)

SOLVER_TOP_N = 3
DEFAULT_ORDINAL_GUESS = 3


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

def run_scenario(
    base_inputs: ProjectInputs,
    scenario: ScenarioInput,
    config: Optional[EvaluationConfig] = None,
) -> ScenarioResult:
    """Shallow-merge the overrides onto *base_inputs* and evaluate once.

    Raises ``pydantic.ValidationError`` for unknown keys or invalid values.
    """
    scenario_inputs = base_inputs.with_overrides(scenario.variable_overrides)
    score_result = evaluate(scenario_inputs, config)
    return ScenarioResult(
        name=scenario.name,
        description=scenario.description,
        score_result=score_result,
        ras_score=score_result.ras_score,
    )


def compute_stability(ras_score: float, max_ras: float) -> float:
    """100 at the dominant RAS, one point lost per RAS point of distance."""
    diff = abs(ras_score - max_ras)
    return max(0.0, min(100.0, round((1 - diff / 100) * 100, 2)))


def run_scenario_comparison(
    base_inputs: ProjectInputs,
    scenarios: Sequence[ScenarioInput],
    config: Optional[EvaluationConfig] = None,
) -> List[ScenarioResult]:
    """Evaluate every scenario and mark the dominant one.

    The first scenario with the maximum RAS wins ties.  Results keep the
    input order.
    """
    with sync_timer("SCENARIO", f"compare {len(scenarios)} scenarios"):
        results = [run_scenario(base_inputs, s, config) for s in scenarios]

    if not results:
        return []

    dominant_idx = 0
    for i, result in enumerate(results):
        if result.ras_score > results[dominant_idx].ras_score:
            dominant_idx = i
    max_ras = results[dominant_idx].ras_score

    annotated: List[ScenarioResult] = []
    for i, result in enumerate(results):
        if i == dominant_idx:
            annotated.append(result.model_copy(update={"is_dominant": True, "stability_score": 100.0}))
        else:
            annotated.append(result.model_copy(
                update={"stability_score": compute_stability(result.ras_score, max_ras)}
            ))

    logger.info(
        "[SCENARIO] dominant=%r ras=%.2f across %d scenarios",
        results[dominant_idx].name, max_ras, len(results),
    )
    return annotated


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

SCENARIO_TEMPLATES: tuple[ScenarioTemplate, ...] = (
    ScenarioTemplate(
        key="cost_discipline",
        name="Cost Discipline",
        description=(
            "Optimize for budget efficiency while maintaining acceptable quality. "
            "Reduces material level and complexity to lower cost bands."
        ),
        overrides={
            "des02_material_level": 2,
            "des03_complexity": 2,
            "fin02_flexibility": 4,
            "fin03_shock_tolerance": 4,
            "exe01_supply_chain": 4,
        },
        tradeoffs=[
            "Lower material specification may reduce perceived luxury",
            "Simplified design reduces differentiation potential",
            "Improved budget headroom and shock absorption",
            "Faster procurement with simpler supply chain",
        ],
    ),
    ScenarioTemplate(
        key="market_differentiation",
        name="Market Differentiation",
        description=(
            "Maximize competitive differentiation through bold design choices and premium "
            "positioning. Increases brand clarity and design ambition."
        ),
        overrides={
            "str01_brand_clarity": 5,
            "str02_differentiation": 5,
            "des03_complexity": 4,
            "des04_experience": 5,
            "mkt03_trend": 4,
        },
        tradeoffs=[
            "Higher design complexity increases execution risk",
            "Premium positioning narrows buyer pool",
            "Stronger brand identity commands premium pricing",
            "Trend-forward design may require specialized contractors",
        ],
    ),
    ScenarioTemplate(
        key="luxury_upgrade",
        name="Luxury Upgrade",
        description=(
            "Elevate project to luxury tier with premium materials, high experience quality, "
            "and international-grade specifications."
        ),
        overrides={
            "des02_material_level": 5,
            "des03_complexity": 4,
            "des04_experience": 5,
            "des05_sustainability": 3,
            "str01_brand_clarity": 4,
        },
        tradeoffs=[
            "Significant budget increase required",
            "Extended procurement timelines for premium materials",
            "Higher risk of supply chain disruption",
            "Premium pricing potential with luxury positioning",
        ],
    ),
    ScenarioTemplate(
        key="fast_delivery",
        name="Fast Delivery / Procurement Simplicity",
        description=(
            "Optimize for speed and procurement simplicity. Uses locally available materials "
            "and proven contractors."
        ),
        overrides={
            "exe01_supply_chain": 5,
            "exe02_contractor": 4,
            "exe03_approvals": 4,
            "des02_material_level": 2,
            "des03_complexity": 2,
        },
        tradeoffs=[
            "Limited material palette reduces design options",
            "Simplified execution accelerates timeline",
            "Lower procurement risk with local sourcing",
            "May sacrifice uniqueness for speed",
        ],
    ),
    ScenarioTemplate(
        key="brand_alignment",
        name="Brand/Story Alignment",
        description=(
            "Align all design and execution decisions with a strong brand narrative. "
            "Prioritizes coherence between vision, materials, and market positioning."
        ),
        overrides={
            "str01_brand_clarity": 5,
            "str02_differentiation": 4,
            "des04_experience": 5,
            "des05_sustainability": 4,
            "mkt03_trend": 4,
        },
        tradeoffs=[
            "Brand-driven decisions may conflict with cost optimization",
            "Sustainability focus adds procurement complexity",
            "Strong narrative supports marketing and sales",
            "Experience-focused design requires careful execution",
        ],
    ),
)


def get_scenario_template(key: str) -> Optional[ScenarioTemplate]:
    for template in SCENARIO_TEMPLATES:
        if template.key == key:
            return template
    return None


# ---------------------------------------------------------------------------
# Constraint solver
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_number(value: Any) -> Optional[float]:
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def check_constraint(value: Any, constraint: Constraint) -> bool:
    """True when *value* satisfies *constraint*; a missing value never does."""
    if value is None:
        return False

    target = constraint.value
    if constraint.operator == "eq":
        return value == target or (
            _as_number(value) is not None and _is_number(target) and _as_number(value) == target
        )
    if constraint.operator in ("gte", "lte"):
        number = _as_number(value)
        if number is None or not _is_number(target):
            return False
        return number >= target if constraint.operator == "gte" else number <= target
    if constraint.operator == "in":
        return isinstance(target, list) and value in target
    return False


def _impact_label(satisfied: int, total: int) -> str:
    pct = (satisfied / total) * 100 if total > 0 else 100
    if pct >= 80:
        return "positive: meets most constraints"
    if pct >= 50:
        return "mixed: partial constraint satisfaction"
    return "negative: significant constraint violations"


def _custom_overrides(
    base: Mapping[str, Any], constraints: Sequence[Constraint]
) -> Dict[str, Union[int, float, str]]:
    overrides: Dict[str, Union[int, float, str]] = {}
    for c in constraints:
        if c.operator == "eq" and not isinstance(c.value, list):
            overrides[c.variable] = c.value
        elif c.operator in ("gte", "lte") and _is_number(c.value):
            current = base.get(c.variable)
            current = current if _is_number(current) else DEFAULT_ORDINAL_GUESS
            overrides[c.variable] = (
                max(current, c.value) if c.operator == "gte" else min(current, c.value)
            )
    return overrides


def solve_constraints(
    base_project: Union[ProjectInputs, Mapping[str, Any]],
    constraints: Sequence[Constraint],
) -> List[ConstraintSolverResult]:
    """Rank the templates (plus a custom variant) by constraints satisfied.

    Returns at most three candidates, best first; equal counts keep
    template order with the custom variant last.
    """
    base = base_project.model_dump() if isinstance(base_project, ProjectInputs) else dict(base_project)
    total = len(constraints)
    results: List[ConstraintSolverResult] = []

    for template in SCENARIO_TEMPLATES:
        variant = {**base, **template.overrides}
        satisfied = sum(1 for c in constraints if check_constraint(variant.get(c.variable), c))
        results.append(ConstraintSolverResult(
            name=template.name,
            description=template.description,
            overrides=dict(template.overrides),
            estimated_score_impact=_impact_label(satisfied, total),
            constraints_satisfied=satisfied,
            constraints_total=total,
        ))

    custom = _custom_overrides(base, constraints)
    if custom:
        results.append(ConstraintSolverResult(
            name="Custom Optimized",
            description="Auto-generated variant that directly satisfies all specified constraints",
            overrides=custom,
            estimated_score_impact="targeted: directly addresses constraints",
            constraints_satisfied=total,
            constraints_total=total,
        ))

    ranked = sorted(results, key=lambda r: r.constraints_satisfied, reverse=True)
    return ranked[:SOLVER_TOP_N]
