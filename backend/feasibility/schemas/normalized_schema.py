from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ScaleBand = Literal["Small", "Medium", "Large"]
BudgetClass = Literal["Low", "Mid", "High", "Premium"]


def _unit(description: str):
    return Field(..., ge=0.0, le=1.0, description=description)


class NormalizedInputs(BaseModel):
    """Project inputs mapped onto [0,1] features plus derived fit scores.

    Produced by the Normalization Engine, computed fresh per evaluation
    and consumed by the dimension scorers and the penalty engine.
    Multiplier fields are ``None`` when the input driving them is
    absent; a scorer applies a multiplier only when it is present.
    """

    model_config = ConfigDict(frozen=True)

    # Ordinals, (v - 1) / 4
    str01_n: float = _unit("Brand clarity")
    str02_n: float = _unit("Differentiation ambition")
    str03_n: float = _unit("Buyer maturity")
    mkt02_n: float = _unit("Competitor intensity")
    mkt03_n: float = _unit("Trend sensitivity")
    fin02_n: float = _unit("Budget flexibility")
    fin03_n: float = _unit("Cost-shock tolerance")
    fin04_n: float = _unit("Expected sales premium")
    des02_n: float = _unit("Material level")
    des03_n: float = _unit("Design complexity")
    des04_n: float = _unit("Experience intensity")
    des05_n: float = _unit("Sustainability ambition")
    exe01_n: float = _unit("Supply-chain readiness")
    exe02_n: float = _unit("Contractor capability")
    exe03_n: float = _unit("Approvals complexity")
    exe04_n: float = _unit("QA maturity")

    # Derived bands
    scale_band: ScaleBand
    budget_class: BudgetClass

    # Derived composite features
    budget_fit: float = _unit("1 - |cap - expected| / expected, 0.5 without cost data")
    market_fit: float = _unit("Material level vs tier expectation, adjusted by location")
    trend_fit: float = _unit("Style trend alignment scaled by trend sensitivity")
    compat_vision_market: float = _unit("Brand clarity vs tier expectation")
    compat_vision_design: float = _unit("Differentiation ambition vs style ambition")
    cost_volatility: float = _unit("0.5*(1-exe01_n) + 0.5*(1-fin03_n)")
    execution_resilience: float = _unit("(exe02_n + exe04_n) / 2")
    differentiation_pressure: float = _unit("(mkt02_n + str02_n) / 2")
    space_efficiency_n: float = _unit("Space efficiency score / 100, 0.5 when unknown")

    sustain_cert_multiplier: float = Field(
        ..., ge=1.0, le=1.25, description="Certification cost premium (1.0 - 1.22)"
    )
    fitout_ratio: float = Field(
        ..., ge=0.0, description="Fitout area / GFA, 1.0 when either is unknown"
    )

    # Optional multipliers (neutral = absent)
    brand_standard_multiplier: Optional[float] = None
    lifecycle_opex_multiplier: Optional[float] = None
    target_value_multiplier: Optional[float] = None
    branded_premium_multiplier: Optional[float] = None
    sales_velocity_multiplier: Optional[float] = None
    procurement_risk_multiplier: Optional[float] = None
    material_sourcing_risk_multiplier: Optional[float] = None
    handover_risk_multiplier: Optional[float] = None
    timeline_risk_multiplier: Optional[float] = None
