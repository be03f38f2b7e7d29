# Schemas package
from .project_schema import ProjectInputs
from .normalized_schema import NormalizedInputs
from .score_schema import (
    ConditionalAction,
    DimensionScores,
    DimensionWeights,
    EvaluationConfig,
    Penalty,
    ScoreResult,
)
from .analysis_schema import (
    Constraint,
    ConstraintSolverResult,
    ScenarioInput,
    ScenarioResult,
    ScenarioTemplate,
    SensitivityEntry,
)
from .roi_schema import ROIResult, RoiCoefficients, RoiNarrative
from .request_schema import (
    ConstraintSolveRequest,
    EvaluateRequest,
    RoiNarrativeRequest,
    RoiRequest,
    ScenarioComparisonRequest,
)
from .value_add_schema import (
    BrandEquityInputs,
    BrandEquityResult,
    ScenarioRange,
    ValueAddInputs,
    ValueAddResult,
)

__all__ = [
    "ProjectInputs",
    "NormalizedInputs",
    "DimensionScores",
    "DimensionWeights",
    "Penalty",
    "ConditionalAction",
    "EvaluationConfig",
    "ScoreResult",
    "SensitivityEntry",
    "ScenarioInput",
    "ScenarioResult",
    "ScenarioTemplate",
    "Constraint",
    "ConstraintSolverResult",
    "ROIResult",
    "RoiCoefficients",
    "RoiNarrative",
    "ScenarioRange",
    "ValueAddInputs",
    "ValueAddResult",
    "BrandEquityInputs",
    "BrandEquityResult",
    "EvaluateRequest",
    "ScenarioComparisonRequest",
    "ConstraintSolveRequest",
    "RoiRequest",
    "RoiNarrativeRequest",
]
