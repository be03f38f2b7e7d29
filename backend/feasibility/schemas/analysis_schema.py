"""Schemas for the repeated-evaluation engines: sensitivity and scenarios."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .score_schema import ScoreResult


class SensitivityEntry(BaseModel):
    """Composite swing when one field moves one step up and one step down."""

    model_config = ConfigDict(frozen=True)

    variable: str
    sensitivity: float = Field(..., ge=0.0, description="|score_up - score_down|")
    score_up: float
    score_down: float


class ScenarioInput(BaseModel):
    """A named bundle of project-field overrides."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    variable_overrides: Dict[str, Any] = Field(default_factory=dict)


class ScenarioResult(BaseModel):
    """Outcome of one scenario, annotated after a comparison run."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    score_result: ScoreResult
    ras_score: float = Field(..., ge=0.0, le=100.0)
    is_dominant: bool = False
    stability_score: float = Field(default=0.0, ge=0.0, le=100.0)


class ScenarioTemplate(BaseModel):
    """A built-in override bundle with its known trade-offs."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str
    overrides: Dict[str, Union[int, float, str]]
    tradeoffs: List[str]

    def to_scenario(self) -> ScenarioInput:
        return ScenarioInput(
            name=self.name,
            description=self.description,
            variable_overrides=dict(self.overrides),
        )


class Constraint(BaseModel):
    """A requirement a scenario variant should satisfy."""

    model_config = ConfigDict(frozen=True)

    variable: str
    operator: Literal["eq", "gte", "lte", "in"]
    value: Union[float, int, str, List[Union[float, int, str]]]


class ConstraintSolverResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    overrides: Dict[str, Union[int, float, str]]
    estimated_score_impact: str
    constraints_satisfied: int = Field(..., ge=0)
    constraints_total: int = Field(..., ge=0)
