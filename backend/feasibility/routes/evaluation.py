"""Feasibility Evaluation Routes.

Thin HTTP layer over the deterministic engines.  Routes validate the
request, delegate to service functions and return their records; all
business logic lives in the services.  No persistence, no outbound
calls.
"""

from __future__ import annotations

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..schemas.analysis_schema import (
    ConstraintSolverResult,
    ScenarioInput,
    ScenarioResult,
    ScenarioTemplate,
    SensitivityEntry,
)
from ..schemas.request_schema import (
    ConstraintSolveRequest,
    EvaluateRequest,
    RoiNarrativeRequest,
    RoiRequest,
    ScenarioComparisonRequest,
)
from ..schemas.roi_schema import ROIResult, RoiNarrative
from ..schemas.score_schema import ScoreResult
from ..schemas.value_add_schema import (
    BrandEquityInputs,
    BrandEquityResult,
    ValueAddInputs,
    ValueAddResult,
)
from ..services.aggregation_engine import evaluate
from ..services.roi_engine import compute_roi, compute_roi_narrative
from ..services.scenario_engine import (
    SCENARIO_TEMPLATES,
    get_scenario_template,
    run_scenario_comparison,
    solve_constraints,
)
from ..services.sensitivity_engine import run_sensitivity_analysis
from ..services.value_add_engine import compute_brand_equity_forecast, compute_value_add_bridge

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/feasibility",
    tags=["Feasibility"],
    responses={422: {"description": "Invalid project inputs or overrides"}},
)


def _validation_detail(exc: ValidationError) -> list[dict]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


# ===================================================================== #
#  Scoring                                                               #
# ===================================================================== #

@router.post(
    "/evaluate",
    response_model=ScoreResult,
    summary="Evaluate a project",
    response_description="Dimension scores, composite, risk, RAS, confidence and decision",
)
def evaluate_project(request: EvaluateRequest) -> ScoreResult:
    start = time.perf_counter()
    result = evaluate(request.inputs, request.config)
    logger.info(
        "[EVALUATE] %s in %.1fms", result.decision_status, (time.perf_counter() - start) * 1000
    )
    return result


@router.post(
    "/sensitivity",
    response_model=List[SensitivityEntry],
    summary="Rank inputs by composite-score sensitivity",
)
def sensitivity(request: EvaluateRequest) -> List[SensitivityEntry]:
    return run_sensitivity_analysis(request.inputs, request.config)


# ===================================================================== #
#  Scenarios                                                             #
# ===================================================================== #

@router.get(
    "/scenario-templates",
    response_model=List[ScenarioTemplate],
    summary="List built-in scenario templates",
)
def list_scenario_templates() -> List[ScenarioTemplate]:
    return list(SCENARIO_TEMPLATES)


@router.post(
    "/scenarios",
    response_model=List[ScenarioResult],
    summary="Compare what-if scenarios",
    response_description="Scenario results in request order, dominant one flagged",
)
def compare_scenarios(request: ScenarioComparisonRequest) -> List[ScenarioResult]:
    scenarios: List[ScenarioInput] = list(request.scenarios)
    for key in request.template_keys:
        template = get_scenario_template(key)
        if template is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Scenario template '{key}' not found",
            )
        scenarios.append(template.to_scenario())

    if not scenarios:
        raise HTTPException(
            status_code=422,
            detail="Provide at least one scenario or template key",
        )

    try:
        return run_scenario_comparison(request.inputs, scenarios, request.config)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=_validation_detail(exc),
        ) from exc


@router.post(
    "/scenario-templates/solve",
    response_model=List[ConstraintSolverResult],
    summary="Propose scenario variants that satisfy constraints",
)
def solve_scenario_constraints(request: ConstraintSolveRequest) -> List[ConstraintSolverResult]:
    return solve_constraints(request.inputs, request.constraints)


# ===================================================================== #
#  ROI                                                                   #
# ===================================================================== #

@router.post(
    "/roi",
    response_model=ROIResult,
    summary="Monetize the composite score",
)
def roi(request: RoiRequest, settings: Settings = Depends(get_settings)) -> ROIResult:
    composite = request.composite_score
    if composite is None:
        composite = evaluate(request.inputs, request.config).composite_score
    fee = request.fee if request.fee is not None else settings.default_advisory_fee
    return compute_roi(request.inputs, composite, fee)


@router.post(
    "/roi/narrative",
    response_model=RoiNarrative,
    summary="Driver-level ROI narrative",
)
def roi_narrative(request: RoiNarrativeRequest) -> RoiNarrative:
    score = evaluate(request.inputs, request.config)
    return compute_roi_narrative(request.inputs, score, request.coefficients)


# ===================================================================== #
#  Value-add                                                             #
# ===================================================================== #

@router.post(
    "/value-add",
    response_model=ValueAddResult,
    summary="Yield delta, sale premium and payback of a fitout upgrade",
)
def value_add(request: ValueAddInputs) -> ValueAddResult:
    return compute_value_add_bridge(request)


@router.post(
    "/brand-equity",
    response_model=BrandEquityResult,
    summary="Portfolio halo effect of a flagship project",
)
def brand_equity(request: BrandEquityInputs) -> BrandEquityResult:
    return compute_brand_equity_forecast(request)
