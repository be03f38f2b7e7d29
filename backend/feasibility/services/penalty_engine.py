"""Penalty & Risk-Flag Engine.

A fixed, ordered list of rule checks over raw inputs and normalized
features.  Every check runs on every evaluation; the returned penalty
list preserves check order (P1 .. P8).

Penalties are return values, never exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..constants import CATCH_ALL_ENUM_VALUE, CRITICAL_ENUM_FIELDS, DEFAULT_PENALTY_EFFECTS
from ..schemas.normalized_schema import NormalizedInputs
from ..schemas.project_schema import ProjectInputs
from ..schemas.score_schema import Penalty
from .normalization_engine import get_pricing_area

logger = logging.getLogger(__name__)

OPTIONAL_ORDINAL_FIELDS: Tuple[str, ...] = (
    "mkt03_trend",
    "fin03_shock_tolerance",
    "fin04_sales_premium",
    "des04_experience",
    "des05_sustainability",
    "exe01_supply_chain",
    "exe03_approvals",
    "exe04_qa_maturity",
)

MISSING_OPTIONAL_RATIO = 0.30
BUDGET_FIT_SEVERE_BELOW = 0.4
EXECUTION_FRAGILE_BELOW = 0.35
COMPLEXITY_HIGH_ABOVE = 0.8
CONTRACTOR_WEAK_BELOW = 0.5
SUSTAIN_PREMIUM_ABOVE = 1.05
SUSTAIN_BUDGET_FIT_BELOW = 0.5
BOARD_BREACH_TOLERANCE = 1.10
SPACE_CRITICAL_MIN = 2

PenaltyConfig = Mapping[str, Mapping[str, float]]


def _effect(config: Optional[PenaltyConfig], penalty_id: str, key: str = "effect") -> float:
    entry = (config or {}).get(penalty_id) or {}
    if key in entry:
        return float(entry[key])
    return DEFAULT_PENALTY_EFFECTS[penalty_id]


# ---------------------------------------------------------------------------
# Individual checks.  Each returns a Penalty or None.
# ---------------------------------------------------------------------------

def check_missing_optional(inputs, n, config) -> Optional[Penalty]:
    missing = sum(1 for name in OPTIONAL_ORDINAL_FIELDS if getattr(inputs, name) is None)
    if missing / len(OPTIONAL_ORDINAL_FIELDS) <= MISSING_OPTIONAL_RATIO:
        return None
    return Penalty(
        id="P1",
        trigger="missing_non_required_gt_30pct",
        effect=_effect(config, "P1"),
        description=f"{missing} of {len(OPTIONAL_ORDINAL_FIELDS)} optional inputs missing (> 30%)",
    )


def check_critical_enum_other(inputs, n, config) -> Optional[Penalty]:
    others = [f for f in CRITICAL_ENUM_FIELDS if getattr(inputs, f) == CATCH_ALL_ENUM_VALUE]
    if not others:
        return None
    return Penalty(
        id="P2",
        trigger="critical_enum_other",
        effect=_effect(config, "P2", "effect_each") * len(others),
        description=f"Critical field(s) set to 'Other': {', '.join(others)}",
    )


def check_budget_fit(inputs, n, config) -> Optional[Penalty]:
    if n.budget_fit >= BUDGET_FIT_SEVERE_BELOW:
        return None
    return Penalty(
        id="P3",
        trigger="budget_fit_lt_0.4",
        effect=_effect(config, "P3"),
        flag="FIN_SEVERE",
        description="Budget fit below 0.4",
    )


def check_execution_resilience(inputs, n, config) -> Optional[Penalty]:
    if n.execution_resilience >= EXECUTION_FRAGILE_BELOW:
        return None
    return Penalty(
        id="P4",
        trigger="execution_resilience_lt_0.35",
        effect=_effect(config, "P4"),
        flag="EXE_FRAGILE",
        description="Execution resilience below 0.35",
    )


def check_complexity_mismatch(inputs, n, config) -> Optional[Penalty]:
    if not (n.des03_n > COMPLEXITY_HIGH_ABOVE and n.exe02_n < CONTRACTOR_WEAK_BELOW):
        return None
    return Penalty(
        id="P5",
        trigger="complexity_contractor_mismatch",
        effect=_effect(config, "P5"),
        flag="COMPLEXITY_MISMATCH",
        description="High design complexity with low contractor capability",
    )


def check_sustainability_funding(inputs, n, config) -> Optional[Penalty]:
    if not (n.sustain_cert_multiplier > SUSTAIN_PREMIUM_ABOVE
            and n.budget_fit < SUSTAIN_BUDGET_FIT_BELOW):
        return None
    return Penalty(
        id="P6",
        trigger="sustain_premium_with_low_budget_fit",
        effect=_effect(config, "P6"),
        flag="SUSTAIN_UNDERFUNDED",
        description=(
            f"Certification premium x{n.sustain_cert_multiplier:.2f} "
            f"with budget fit {n.budget_fit:.2f}"
        ),
    )


def check_board_budget(inputs, n, config) -> Optional[Penalty]:
    area = get_pricing_area(inputs)
    if inputs.board_material_cost is None or not inputs.fin01_budget_cap or area <= 0:
        return None
    allowance = inputs.fin01_budget_cap * area
    if inputs.board_material_cost <= allowance * BOARD_BREACH_TOLERANCE:
        return None
    overrun_pct = (inputs.board_material_cost / allowance - 1) * 100
    return Penalty(
        id="P7",
        trigger="board_cost_gt_budget_110pct",
        effect=_effect(config, "P7"),
        flag="BOARD_BUDGET_BREACH",
        description=f"Materials board exceeds budget allowance by {overrun_pct:.1f}%",
    )


def check_space_deviations(inputs, n, config) -> Optional[Penalty]:
    count = inputs.space_critical_count
    if count is None or count < SPACE_CRITICAL_MIN:
        return None
    return Penalty(
        id="P8",
        trigger="space_critical_gte_2",
        effect=_effect(config, "P8"),
        flag="SPACE_CRITICAL",
        description=f"{count} critical space-ratio deviations",
    )


PENALTY_CHECKS: Tuple[Callable[[ProjectInputs, NormalizedInputs, Any], Optional[Penalty]], ...] = (
    check_missing_optional,
    check_critical_enum_other,
    check_budget_fit,
    check_execution_resilience,
    check_complexity_mismatch,
    check_sustainability_funding,
    check_board_budget,
    check_space_deviations,
)


def compute_penalties(
    inputs: ProjectInputs,
    n: NormalizedInputs,
    penalty_config: Optional[PenaltyConfig] = None,
) -> Tuple[List[Penalty], List[str]]:
    """Run every check in order.

    Returns
    -------
    (penalties, risk_flags)
        Penalties in check order and the flags they raised, in the same order.
    """
    penalties: List[Penalty] = []
    risk_flags: List[str] = []

    for check in PENALTY_CHECKS:
        penalty = check(inputs, n, penalty_config)
        if penalty is None:
            continue
        penalties.append(penalty)
        if penalty.flag:
            risk_flags.append(penalty.flag)

    logger.debug(
        "[PENALTIES] %d fired (%s), total effect %.1f",
        len(penalties),
        ",".join(p.id for p in penalties) or "none",
        sum(p.effect for p in penalties),
    )
    return penalties, risk_flags
