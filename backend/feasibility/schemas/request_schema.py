"""Request bodies for the /feasibility endpoints."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .analysis_schema import Constraint, ScenarioInput
from .project_schema import ProjectInputs
from .roi_schema import RoiCoefficients
from .score_schema import EvaluationConfig


class EvaluateRequest(BaseModel):
    """A project plus its evaluation context."""

    model_config = ConfigDict(allow_inf_nan=False)

    inputs: ProjectInputs
    config: EvaluationConfig = Field(default_factory=EvaluationConfig)


class ScenarioComparisonRequest(EvaluateRequest):
    """Scenarios to compare: explicit bundles, template keys, or both.

    Explicit scenarios come first, then templates in the order given.
    """

    scenarios: List[ScenarioInput] = Field(default_factory=list)
    template_keys: List[str] = Field(default_factory=list)


class ConstraintSolveRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    inputs: ProjectInputs
    constraints: List[Constraint] = Field(..., min_length=1)


class RoiRequest(EvaluateRequest):
    """``composite_score`` is computed from ``inputs`` when omitted.

    ``fee`` falls back to the DEFAULT_ADVISORY_FEE setting.
    """

    composite_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    fee: Optional[float] = None


class RoiNarrativeRequest(EvaluateRequest):
    coefficients: RoiCoefficients = Field(default_factory=RoiCoefficients)
