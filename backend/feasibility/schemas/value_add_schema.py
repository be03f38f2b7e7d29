from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .project_schema import BrandedStatus, HandoverCondition, MarketTier, TargetValueAdd

ValueAddConfidence = Literal["high", "medium", "low", "insufficient"]
ValueAddRiskFlag = Literal["DIMINISHING_RETURNS", "UNDER_SPEC"]


class ScenarioRange(BaseModel):
    """Conservative / mid / aggressive estimates of one metric."""

    model_config = ConfigDict(frozen=True)

    conservative: float = 0.0
    mid: float = 0.0
    aggressive: float = 0.0


class ValueAddInputs(BaseModel):
    """Fitout upgrade to appraise against area market comparables.

    ``sale_median_per_sqm``, ``rent_median_per_sqm`` and
    ``transaction_count`` come from the market-data collaborator.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    current_fitout_per_sqm: float = Field(..., ge=0.0)
    proposed_fitout_per_sqm: float = Field(..., ge=0.0)
    gfa: float = Field(..., description="Area the fitout applies to (sqm)")
    sale_median_per_sqm: float = Field(..., description="Area sale median (AED/sqm)")
    rent_median_per_sqm: Optional[float] = Field(default=None, ge=0.0)
    tier: MarketTier
    handover_condition: Optional[HandoverCondition] = None
    transaction_count: int = Field(default=0, ge=0)


class ValueAddResult(BaseModel):
    """Yield delta (pp), sale premium (% and AED) and payback (months)."""

    model_config = ConfigDict(frozen=True)

    yield_delta: ScenarioRange
    sale_premium_pct: ScenarioRange
    sale_premium_aed: ScenarioRange
    payback_months: ScenarioRange = Field(
        ..., description="Inverted range: conservative is the longest payback; 999 = never"
    )
    incremental_fitout_cost: float = Field(..., ge=0.0)
    fitout_ratio: float = Field(..., ge=0.0, description="Proposed fitout / sale median")
    confidence: ValueAddConfidence
    risk_flag: Optional[ValueAddRiskFlag] = None
    risk_message: Optional[str] = None


class BrandEquityInputs(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    tier: MarketTier
    target_value_add: TargetValueAdd = "Balanced Return"
    sale_performance_pct: float = Field(
        ..., description="Sale price performance above area median (%)"
    )
    branded_status: BrandedStatus = "Unbranded"


class BrandEquityResult(BaseModel):
    """Halo uplift expected on the developer's next project."""

    model_config = ConfigDict(frozen=True)

    halo_uplift_pct: float = Field(..., ge=0.0, le=8.0)
    halo_applies: bool
    reasoning: str
    portfolio_impact_aed: ScenarioRange
