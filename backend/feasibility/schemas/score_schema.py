from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import DEFAULT_DIMENSION_WEIGHTS
from .project_schema import ProjectInputs

DecisionStatus = Literal["validated", "conditional", "not_validated"]

# Penalty overrides are deductions: zero or negative points
PenaltyEffect = Annotated[float, Field(le=0.0, allow_inf_nan=False)]
FiniteWeight = Annotated[float, Field(allow_inf_nan=False)]


class DimensionScores(BaseModel):
    """Five dimension scores produced by the scoring engine, each 0-100."""

    model_config = ConfigDict(frozen=True)

    sa: float = Field(..., ge=0.0, le=100.0, description="Strategic Alignment")
    ff: float = Field(..., ge=0.0, le=100.0, description="Financial Feasibility")
    mp: float = Field(..., ge=0.0, le=100.0, description="Market Positioning")
    ds: float = Field(..., ge=0.0, le=100.0, description="Differentiation Strength")
    er: float = Field(..., ge=0.0, le=100.0, description="Execution Risk (higher = more resilient)")


class DimensionWeights(BaseModel):
    """Weights of each dimension in the composite.

    Need not sum to exactly 1.0; the composite is clamped afterwards.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    sa: float = Field(default=DEFAULT_DIMENSION_WEIGHTS["sa"], ge=0.0)
    ff: float = Field(default=DEFAULT_DIMENSION_WEIGHTS["ff"], ge=0.0)
    mp: float = Field(default=DEFAULT_DIMENSION_WEIGHTS["mp"], ge=0.0)
    ds: float = Field(default=DEFAULT_DIMENSION_WEIGHTS["ds"], ge=0.0)
    er: float = Field(default=DEFAULT_DIMENSION_WEIGHTS["er"], ge=0.0)


class Penalty(BaseModel):
    """A fixed deduction triggered by one rule check."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Rule id, P1-P8")
    trigger: str = Field(..., description="Machine-readable trigger condition")
    effect: float = Field(..., le=0.0, description="Points added to the composite (negative)")
    flag: Optional[str] = Field(default=None, description="Risk flag raised by this rule, if any")
    description: str


class ConditionalAction(BaseModel):
    """An advisory recommendation tied to a flag or a low dimension."""

    model_config = ConfigDict(frozen=True)

    trigger: str
    recommendation: str
    variables: List[str] = Field(default_factory=list)


class EvaluationConfig(BaseModel):
    """Everything an evaluation needs besides the project itself.

    ``expected_cost`` and ``benchmark_count`` come from the benchmark
    lookup, ``override_rate`` from the audit log.  Every field has a
    default so ``EvaluationConfig()`` is a complete configuration.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    dimension_weights: DimensionWeights = Field(default_factory=DimensionWeights)
    variable_weights: Dict[str, Dict[str, FiniteWeight]] = Field(
        default_factory=dict,
        description="dimension -> term -> weight; omitted terms use the documented defaults",
    )
    penalty_config: Dict[str, Dict[str, PenaltyEffect]] = Field(
        default_factory=dict,
        description="penalty id -> {'effect': x} (or {'effect_each': x} for P2)",
    )
    expected_cost: float = Field(default=0.0, ge=0.0, description="Benchmark cost (AED/sqm)")
    benchmark_count: int = Field(default=0, ge=0)
    override_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class ScoreResult(BaseModel):
    """The full output bundle of one ``evaluate`` call.  Never mutated."""

    model_config = ConfigDict(frozen=True)

    dimensions: DimensionScores
    dimension_weights: DimensionWeights
    composite_score: float = Field(..., ge=0.0, le=100.0)
    risk_score: float = Field(..., ge=0.0, le=100.0)
    ras_score: float = Field(..., ge=0.0, le=100.0, description="composite - 0.35 * risk, floored at 0")
    confidence_score: float = Field(..., ge=0.0, le=100.0)
    decision_status: DecisionStatus
    penalties: List[Penalty] = Field(default_factory=list)
    risk_flags: List[str] = Field(default_factory=list)
    conditional_actions: List[ConditionalAction] = Field(default_factory=list)
    variable_contributions: Dict[str, Dict[str, float]] = Field(
        default_factory=dict,
        description="dimension -> variable -> weighted contribution",
    )
    input_snapshot: ProjectInputs
