"""One-at-a-time sensitivity analysis.

Each perturbable field is moved one step up and one step down (clamped
to its valid range) and the composite score is recomputed through the
full pipeline.  The base record is never modified; every perturbation
is a fresh ``with_overrides`` copy.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Tuple

from ..schemas.analysis_schema import SensitivityEntry
from ..schemas.project_schema import ProjectInputs
from ..schemas.score_schema import EvaluationConfig
from ..timing import StepTimer
from .aggregation_engine import evaluate

logger = logging.getLogger(__name__)


class PerturbableField(NamedTuple):
    name: str
    step: float
    lo: float
    hi: Optional[float]


def _ordinal(name: str) -> PerturbableField:
    return PerturbableField(name, 1, 1, 5)


PERTURBABLE_FIELDS: Tuple[PerturbableField, ...] = (
    _ordinal("str01_brand_clarity"),
    _ordinal("str02_differentiation"),
    _ordinal("str03_buyer_maturity"),
    _ordinal("mkt02_competitor"),
    _ordinal("mkt03_trend"),
    _ordinal("fin02_flexibility"),
    _ordinal("fin03_shock_tolerance"),
    _ordinal("fin04_sales_premium"),
    _ordinal("des02_material_level"),
    _ordinal("des03_complexity"),
    _ordinal("des04_experience"),
    _ordinal("des05_sustainability"),
    _ordinal("exe01_supply_chain"),
    _ordinal("exe02_contractor"),
    _ordinal("exe03_approvals"),
    _ordinal("exe04_qa_maturity"),
    PerturbableField("fin01_budget_cap", 50.0, 0.0, None),
    PerturbableField("space_efficiency_score", 10.0, 0.0, 100.0),
)


def _shift(field: PerturbableField, value: float, direction: int) -> float:
    shifted = value + direction * field.step
    shifted = max(field.lo, shifted)
    if field.hi is not None:
        shifted = min(field.hi, shifted)
    return shifted


def run_sensitivity_analysis(
    base_inputs: ProjectInputs,
    config: Optional[EvaluationConfig] = None,
) -> List[SensitivityEntry]:
    """Rank fields by how much a one-step move swings the composite.

    Fields whose current value is ``None`` are skipped.  The result is
    sorted by sensitivity descending; ties keep table order.
    """
    config = config or EvaluationConfig()
    timer = StepTimer("SENSITIVITY")
    entries: List[SensitivityEntry] = []

    with timer.step("sweep"):
        for field in PERTURBABLE_FIELDS:
            current = getattr(base_inputs, field.name)
            if current is None:
                continue

            up = evaluate(
                base_inputs.with_overrides({field.name: _shift(field, current, +1)}), config
            )
            down = evaluate(
                base_inputs.with_overrides({field.name: _shift(field, current, -1)}), config
            )

            entries.append(SensitivityEntry(
                variable=field.name,
                sensitivity=round(abs(up.composite_score - down.composite_score), 2),
                score_up=round(up.composite_score, 2),
                score_down=round(down.composite_score, 2),
            ))

    # sorted() is stable: equal sensitivities keep table order
    ranked = sorted(entries, key=lambda e: e.sensitivity, reverse=True)
    timer.summary()

    if ranked:
        logger.info(
            "[SENSITIVITY] %d fields perturbed, most sensitive: %s (%.2f)",
            len(ranked), ranked[0].variable, ranked[0].sensitivity,
        )
    return ranked
