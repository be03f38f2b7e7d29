from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ROIResult(BaseModel):
    """Monetized value of a validated design direction.

    Value buckets are whole AED; ratios have two decimals.
    ``total_value`` is the exact sum of the five rounded buckets.
    """

    model_config = ConfigDict(frozen=True)

    pricing_area: float = Field(..., ge=0.0, description="Fitout area, falling back to GFA (sqm)")
    total_budget: float = Field(..., ge=0.0, description="pricing_area * budget cap (AED)")
    rework_avoided: int = Field(..., ge=0, description="8-15% of total budget")
    procurement_savings: int = Field(..., ge=0, description="3-8% of total budget")
    time_value_gain: int = Field(..., ge=0, description="2-5% of total budget")
    spec_efficiency: int = Field(..., ge=0, description="1-3% of total budget")
    positioning_premium: int = Field(..., ge=0, description="0-5% of total budget")
    total_value: int = Field(..., ge=0)
    fee: float = Field(..., description="Advisory fee (AED)")
    net_roi: float = Field(..., description="(total_value - fee) / fee, 0 when fee <= 0")
    roi_multiple: float = Field(..., description="total_value / fee, 0 when fee <= 0")


class RoiCoefficients(BaseModel):
    """Admin-configurable coefficients of the ROI narrative."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    hourly_rate: float = Field(default=350.0, gt=0.0, description="AED per consultant hour")
    rework_cost_pct: float = 0.12
    tender_iteration_cost: float = 25_000.0
    design_cycle_cost: float = 45_000.0
    budget_variance_multiplier: float = 0.08
    time_acceleration_weeks: float = 6.0
    conservative_multiplier: float = 0.60
    aggressive_multiplier: float = 1.40


class ScenarioValues(BaseModel):
    model_config = ConfigDict(frozen=True)

    conservative: float
    mid: float
    aggressive: float


class RoiDriver(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    hours_saved: ScenarioValues
    cost_avoided: ScenarioValues
    assumptions: List[str]


class PercentShift(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_pct: float
    to_pct: float


class WeeksShift(BaseModel):
    model_config = ConfigDict(frozen=True)

    before: int
    after: int


class RoiNarrative(BaseModel):
    """Driver-level ROI story used by investor summaries."""

    model_config = ConfigDict(frozen=True)

    total_hours_saved: ScenarioValues
    total_cost_avoided: ScenarioValues
    budget_accuracy_gain: PercentShift
    decision_confidence_index: int = Field(..., ge=0, le=100)
    drivers: List[RoiDriver]
    assumptions: List[str]
    time_to_brief_weeks: WeeksShift
