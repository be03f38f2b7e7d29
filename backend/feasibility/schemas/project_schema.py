"""Project description schema, the canonical engine input.

``ProjectInputs`` is immutable once constructed.  Engines derive new
records from it (scenario overrides, sensitivity perturbations) through
``with_overrides``; they never mutate it in place.
"""

from __future__ import annotations

import hashlib
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

Typology = Literal["Residential", "Mixed-use", "Hospitality", "Office"]
ProjectScale = Literal["Small", "Medium", "Large"]
LocationCategory = Literal["Prime", "Secondary", "Emerging"]
DeliveryHorizon = Literal["0-12m", "12-24m", "24-36m", "36m+"]
ProjectCity = Literal["Dubai", "Abu Dhabi"]
MarketTier = Literal["Mid", "Upper-mid", "Luxury", "Ultra-luxury"]
DesignStyle = Literal["Modern", "Contemporary", "Minimal", "Classic", "Fusion", "Other"]

DeveloperType = Literal["Master Developer", "Private/Boutique", "Institutional Investor"]
TargetDemographic = Literal["HNWI", "Families", "Young Professionals", "Investors"]
SalesStrategy = Literal["Sell Off-Plan", "Sell on Completion", "Build-to-Rent"]
CompetitiveDensity = Literal["Low", "Moderate", "Saturated"]
ProjectUsp = Literal["Location/Views", "Amenities/Facilities", "Price/Value", "Design/Architecture"]
TargetYield = Literal["< 5%", "5-7%", "7-9%", "> 9%"]
ProcurementStrategy = Literal["Turnkey", "Traditional", "Construction Management"]
AmenityFocus = Literal["Wellness/Spa", "F&B/Social", "Minimal/Essential", "Business/Co-working"]
TechIntegration = Literal["Basic", "Smart Home Ready", "Fully Integrated"]
MaterialSourcing = Literal["Local", "European", "Asian", "Global Mix"]
HandoverCondition = Literal["Shell & Core", "Category A", "Category B", "Fully Furnished"]
BrandedStatus = Literal["Unbranded", "Hospitality Branded", "Fashion/Automotive Branded"]
TargetValueAdd = Literal[
    "Max Capital Appreciation", "Max Rental Yield", "Balanced Return", "Brand Flagship / Trophy",
]


def _ordinal(description: str, required: bool = True):
    if required:
        return Field(..., ge=1, le=5, description=description)
    return Field(default=None, ge=1, le=5, description=description)


class ProjectInputs(BaseModel):
    """A project described by ~25 categorical and ordinal answers.

    Ordinal fields are on a 1-5 scale.  Optional ordinals may be left
    out; they normalize to a neutral 0.5 and count against input
    completeness.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    # SECTION 1: Context
    typology: Typology
    scale: ProjectScale
    gfa: Optional[float] = Field(default=None, ge=0, description="Gross floor area (sqm)")
    total_fitout_area: Optional[float] = Field(
        default=None, ge=0, description="Verified interior finish area (sqm); preferred for pricing"
    )
    location: LocationCategory
    horizon: DeliveryHorizon
    city: ProjectCity = "Dubai"
    sustain_cert_target: str = Field(
        default="",
        description="Al Sa'fat / Estidama tier key; empty means the city's mandatory tier",
    )

    # SECTION 2: Strategy
    str01_brand_clarity: int = _ordinal("Brand clarity")
    str02_differentiation: int = _ordinal("Differentiation ambition")
    str03_buyer_maturity: int = _ordinal("Buyer maturity")

    # SECTION 3: Market
    mkt01_tier: MarketTier
    mkt02_competitor: int = _ordinal("Competitor intensity")
    mkt03_trend: Optional[int] = _ordinal("Trend sensitivity", required=False)

    # SECTION 4: Financial
    fin01_budget_cap: Optional[float] = Field(default=None, ge=0, description="Budget cap (AED/sqm)")
    fin02_flexibility: int = _ordinal("Budget flexibility")
    fin03_shock_tolerance: Optional[int] = _ordinal("Cost-shock tolerance", required=False)
    fin04_sales_premium: Optional[int] = _ordinal("Expected sales premium", required=False)

    # SECTION 5: Design
    des01_style: DesignStyle
    des02_material_level: int = _ordinal("Material level")
    des03_complexity: int = _ordinal("Design complexity")
    des04_experience: Optional[int] = _ordinal("Experience intensity", required=False)
    des05_sustainability: Optional[int] = _ordinal("Sustainability ambition", required=False)

    # SECTION 6: Execution
    exe01_supply_chain: Optional[int] = _ordinal("Supply-chain readiness", required=False)
    exe02_contractor: int = _ordinal("Contractor capability")
    exe03_approvals: Optional[int] = _ordinal("Approvals complexity", required=False)
    exe04_qa_maturity: Optional[int] = _ordinal("QA maturity", required=False)

    # SECTION 7: Add-ons
    add01_sample_kit: bool = False
    add02_portfolio_mode: bool = False
    add03_dashboard_export: bool = False

    # SECTION 8: Concrete analytics profile
    developer_type: Optional[DeveloperType] = None
    target_demographic: Optional[TargetDemographic] = None
    sales_strategy: Optional[SalesStrategy] = None
    competitive_density: Optional[CompetitiveDensity] = None
    project_usp: Optional[ProjectUsp] = None
    target_yield: Optional[TargetYield] = None
    procurement_strategy: Optional[ProcurementStrategy] = None
    amenity_focus: Optional[AmenityFocus] = None
    tech_integration: Optional[TechIntegration] = None
    material_sourcing: Optional[MaterialSourcing] = None
    handover_condition: Optional[HandoverCondition] = None
    branded_status: Optional[BrandedStatus] = None
    target_value_add: Optional[TargetValueAdd] = None

    # SECTION 9: Externally supplied measurements
    space_efficiency_score: Optional[float] = Field(
        default=None, ge=0, le=100, description="Floor-plan efficiency score from the space benchmark"
    )
    space_critical_count: Optional[int] = Field(
        default=None, ge=0, description="Critical space-ratio deviations from the space benchmark"
    )
    board_material_cost: Optional[float] = Field(
        default=None, ge=0, description="Live materials-board total cost (AED)"
    )

    def with_overrides(self, overrides: Mapping[str, Any]) -> "ProjectInputs":
        """Return a new, re-validated record with *overrides* shallow-merged in.

        Overridden keys fully replace the base value.  Unknown keys and
        out-of-range values raise ``pydantic.ValidationError``.
        """
        merged = self.model_dump()
        merged.update(overrides)
        return ProjectInputs.model_validate(merged)

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form; a safe cache key for results."""
        return hashlib.sha256(self.model_dump_json().encode("utf-8")).hexdigest()
