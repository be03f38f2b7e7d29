"""Centralized lookup tables shared across all engines.

This module is the SINGLE SOURCE OF TRUTH for the enum vocabularies and
enum → coefficient tables used by normalization, scoring, ROI and the
value-add engine.  Every table is an immutable mapping: engines read
them, nothing writes them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ── Project vocabulary ──────────────────────────────────────────────────
# LOCKED: the Literal types in schemas/project_schema.py mirror these.

TYPOLOGIES: tuple[str, ...] = ("Residential", "Mixed-use", "Hospitality", "Office")
SCALES: tuple[str, ...] = ("Small", "Medium", "Large")
LOCATIONS: tuple[str, ...] = ("Prime", "Secondary", "Emerging")
HORIZONS: tuple[str, ...] = ("0-12m", "12-24m", "24-36m", "36m+")
CITIES: tuple[str, ...] = ("Dubai", "Abu Dhabi")
MARKET_TIERS: tuple[str, ...] = ("Mid", "Upper-mid", "Luxury", "Ultra-luxury")
DESIGN_STYLES: tuple[str, ...] = (
    "Modern", "Contemporary", "Minimal", "Classic", "Fusion", "Other",
)
BUDGET_CLASSES: tuple[str, ...] = ("Low", "Mid", "High", "Premium")

# Enum fields whose catch-all "Other" value costs a penalty per occurrence
CRITICAL_ENUM_FIELDS: tuple[str, ...] = ("des01_style",)
CATCH_ALL_ENUM_VALUE = "Other"


def _frozen(table: dict) -> Mapping:
    return MappingProxyType(table)


# ── Normalization tables ────────────────────────────────────────────────

# Market tier → expected brand / material level on the 1-5 scale
TIER_EXPECTED_LEVEL: Mapping[str, int] = _frozen({
    "Mid": 2,
    "Upper-mid": 3,
    "Luxury": 4,
    "Ultra-luxury": 5,
})
DEFAULT_EXPECTED_LEVEL = 3

# Design style → differentiation ambition (1-5)
STYLE_AMBITION: Mapping[str, int] = _frozen({
    "Modern": 3,
    "Contemporary": 3,
    "Minimal": 2,
    "Classic": 2,
    "Fusion": 5,
    "Other": 1,
})
DEFAULT_STYLE_AMBITION = 3

# Design style → trend-alignment coefficient
STYLE_TREND_ALIGNMENT: Mapping[str, float] = _frozen({
    "Modern": 0.8,
    "Contemporary": 0.9,
    "Minimal": 0.7,
    "Classic": 0.4,
    "Fusion": 0.85,
    "Other": 0.3,
})
DEFAULT_TREND_ALIGNMENT = 0.5

LOCATION_MARKET_BONUS: Mapping[str, float] = _frozen({
    "Prime": 0.10,
    "Secondary": 0.0,
    "Emerging": -0.05,
})

# Scale band thresholds over the pricing area (sqm): below 500 Small, up to 5000 Medium, else Large
SCALE_BAND_SMALL_BELOW = 500.0
SCALE_BAND_MEDIUM_MAX = 5000.0

BUDGET_CLASS_LOW_BELOW = 200.0
BUDGET_CLASS_MID_MAX = 450.0
BUDGET_CLASS_HIGH_MAX = 800.0

NEUTRAL_FEATURE = 0.5

# ── Sustainability certification ────────────────────────────────────────
# Dubai → Al Sa'fat (bronze..platinum), Abu Dhabi → Estidama Pearl (1-5)

CERT_MULTIPLIERS: Mapping[str, float] = _frozen({
    "bronze": 1.03,
    "silver": 1.07,
    "gold": 1.12,
    "platinum": 1.22,
    "pearl_1": 1.03,
    "pearl_2": 1.07,
    "pearl_3": 1.12,
    "pearl_4": 1.16,
    "pearl_5": 1.22,
})

CITY_MANDATORY_TIER: Mapping[str, str] = _frozen({
    "Dubai": "silver",
    "Abu Dhabi": "pearl_1",
})
DEFAULT_CERT_TIER = "silver"

# Execution Risk: certification premium above this adds delivery risk
CERT_RISK_THRESHOLD = 1.10
CERT_RISK_SPAN = 0.12

# ── Concrete-analytics profile enums ────────────────────────────────────

DEVELOPER_TYPES: tuple[str, ...] = ("Master Developer", "Private/Boutique", "Institutional Investor")
TARGET_DEMOGRAPHICS: tuple[str, ...] = ("HNWI", "Families", "Young Professionals", "Investors")
SALES_STRATEGIES: tuple[str, ...] = ("Sell Off-Plan", "Sell on Completion", "Build-to-Rent")
COMPETITIVE_DENSITIES: tuple[str, ...] = ("Low", "Moderate", "Saturated")
PROJECT_USPS: tuple[str, ...] = (
    "Location/Views", "Amenities/Facilities", "Price/Value", "Design/Architecture",
)
TARGET_YIELDS: tuple[str, ...] = ("< 5%", "5-7%", "7-9%", "> 9%")
PROCUREMENT_STRATEGIES: tuple[str, ...] = ("Turnkey", "Traditional", "Construction Management")
AMENITY_FOCUSES: tuple[str, ...] = (
    "Wellness/Spa", "F&B/Social", "Minimal/Essential", "Business/Co-working",
)
TECH_INTEGRATIONS: tuple[str, ...] = ("Basic", "Smart Home Ready", "Fully Integrated")
MATERIAL_SOURCINGS: tuple[str, ...] = ("Local", "European", "Asian", "Global Mix")
HANDOVER_CONDITIONS: tuple[str, ...] = (
    "Shell & Core", "Category A", "Category B", "Fully Furnished",
)
BRANDED_STATUSES: tuple[str, ...] = (
    "Unbranded", "Hospitality Branded", "Fashion/Automotive Branded",
)
TARGET_VALUE_ADDS: tuple[str, ...] = (
    "Max Capital Appreciation", "Max Rental Yield", "Balanced Return", "Brand Flagship / Trophy",
)

# ── Dimension multipliers (absent input → no multiplier) ────────────────

BRAND_STANDARD_MULTIPLIER: Mapping[str, float] = _frozen({
    "Master Developer": 1.05,
    "Institutional Investor": 1.02,
    "Private/Boutique": 1.00,
})

LIFECYCLE_OPEX_MULTIPLIER: Mapping[str, float] = _frozen({
    "Wellness/Spa": 0.96,
    "F&B/Social": 0.97,
    "Business/Co-working": 0.99,
    "Minimal/Essential": 1.03,
})

TARGET_VALUE_MULTIPLIER: Mapping[str, float] = _frozen({
    "Max Capital Appreciation": 1.03,
    "Max Rental Yield": 1.02,
    "Balanced Return": 1.00,
    "Brand Flagship / Trophy": 0.97,
})

# "Unbranded" is intentionally absent: no premium, no multiplier
BRANDED_PREMIUM_MULTIPLIER: Mapping[str, float] = _frozen({
    "Hospitality Branded": 1.08,
    "Fashion/Automotive Branded": 1.06,
})

SALES_VELOCITY_MULTIPLIER: Mapping[str, float] = _frozen({
    "Sell Off-Plan": 1.05,
    "Build-to-Rent": 1.00,
    "Sell on Completion": 0.97,
})

PROCUREMENT_RISK_MULTIPLIER: Mapping[str, float] = _frozen({
    "Turnkey": 1.05,
    "Traditional": 1.00,
    "Construction Management": 0.95,
})

MATERIAL_SOURCING_RISK_MULTIPLIER: Mapping[str, float] = _frozen({
    "Local": 1.05,
    "European": 0.98,
    "Asian": 0.95,
    "Global Mix": 0.95,
})

# Applied as reciprocals in Execution Risk
HANDOVER_RISK_MULTIPLIER: Mapping[str, float] = _frozen({
    "Shell & Core": 1.00,
    "Category A": 1.00,
    "Category B": 1.05,
    "Fully Furnished": 1.10,
})

TIMELINE_RISK_MULTIPLIER: Mapping[str, float] = _frozen({
    "0-12m": 1.10,
    "12-24m": 1.00,
    "24-36m": 1.00,
    "36m+": 1.05,
})

# ── Default weights ─────────────────────────────────────────────────────

DEFAULT_DIMENSION_WEIGHTS: Mapping[str, float] = _frozen({
    "sa": 0.25,
    "ff": 0.20,
    "mp": 0.20,
    "ds": 0.15,
    "er": 0.20,
})

DEFAULT_VARIABLE_WEIGHTS: Mapping[str, Mapping[str, float]] = _frozen({
    "sa": _frozen({"str01": 0.35, "str03": 0.25, "compatVisionMarket": 0.25, "compatVisionDesign": 0.15}),
    "ff": _frozen({"budgetFit": 0.45, "fin02": 0.20, "executionResilience": 0.20, "costStability": 0.15}),
    "mp": _frozen({"marketFit": 0.35, "differentiationPressure": 0.25, "des04": 0.20, "trendFit": 0.20}),
    "ds": _frozen({"str02": 0.30, "competitorInverse": 0.25, "des04": 0.25, "des02": 0.20}),
    "er": _frozen({
        "executionResilience": 0.35,
        "supplyChainReadiness": 0.25,
        "complexityInverse": 0.20,
        "approvalsInverse": 0.20,
        "certificationRisk": 0.10,
    }),
})

# ── Penalty defaults (points deducted from the composite) ───────────────

DEFAULT_PENALTY_EFFECTS: Mapping[str, float] = _frozen({
    "P1": -5.0,    # missing optional inputs > 30%
    "P2": -3.0,    # per critical enum set to "Other"
    "P3": -10.0,   # budget fit < 0.4
    "P4": -8.0,    # execution resilience < 0.35
    "P5": -12.0,   # complexity / contractor mismatch
    "P6": -6.0,    # sustainability target underfunded
    "P7": -15.0,   # live materials board breaches budget
    "P8": -5.0,    # >= 2 critical space deviations
})

# ── Aggregation constants ───────────────────────────────────────────────

RAS_RISK_FACTOR = 0.35
MODEL_STABILITY = 0.95
MIN_BENCHMARKS_FOR_FULL_DENSITY = 3
LOW_DIMENSION_THRESHOLD = 60.0

VALIDATED_MIN_COMPOSITE = 75.0
VALIDATED_MAX_RISK = 45.0
NOT_VALIDATED_BELOW_COMPOSITE = 60.0
NOT_VALIDATED_MIN_RISK = 60.0

# ── ROI ─────────────────────────────────────────────────────────────────

DEFAULT_BUDGET_CAP = 400.0   # AED/sqm when the project has no cap

# bucket → (floor rate, additional rate at composite 100)
ROI_BUCKET_RATES: Mapping[str, tuple[float, float]] = _frozen({
    "rework_avoided": (0.08, 0.07),
    "procurement_savings": (0.03, 0.05),
    "time_value_gain": (0.02, 0.03),
    "spec_efficiency": (0.01, 0.02),
    "positioning_premium": (0.0, 0.05),
})

ROI_TIER_MULTIPLIER: Mapping[str, float] = _frozen({
    "Ultra-luxury": 2.0,
    "Luxury": 1.5,
    "Upper-mid": 1.2,
    "Mid": 1.0,
})

ROI_HORIZON_WEEKS: Mapping[str, int] = _frozen({
    "0-12m": 26,
    "12-24m": 52,
    "24-36m": 78,
    "36m+": 104,
})
DEFAULT_HORIZON_WEEKS = 52

# ── Value-add (UAE market) ──────────────────────────────────────────────

# Rental premium vs Shell & Core baseline (midpoints of market ranges)
RENTAL_PREMIUM_BY_CONDITION: Mapping[str, float] = _frozen({
    "Shell & Core": 0.0,
    "Category A": 0.075,
    "Category B": 0.20,
    "Fully Furnished": 0.40,
})

# Fitout-to-rent coefficient by tier
TIER_RENT_COEFF: Mapping[str, float] = _frozen({
    "Mid": 0.06,
    "Upper-mid": 0.08,
    "Luxury": 0.10,
    "Ultra-luxury": 0.14,
})
DEFAULT_RENT_COEFF = 0.08

# (max fitout ratio inclusive, band label, sale premium fraction), checked in order
SALE_IMPACT_BANDS: tuple[tuple[float, str, float], ...] = (
    (0.10, "UNDER_SPEC", -0.10),
    (0.18, "IN_SPEC", 0.0),
    (0.28, "PREMIUM", 0.085),
    (float("inf"), "OVER_SPEC", 0.05),
)
UNDER_SPEC_RATIO = 0.10
OVER_SPEC_RATIO = 0.28

SCENARIO_CONSERVATIVE = 0.65
SCENARIO_AGGRESSIVE = 1.35

MAX_YIELD_DELTA_PP = 4.0
PAYBACK_INFINITE_SENTINEL = 999.0

# Comparable-transaction count → confidence (checked in order)
CONFIDENCE_BANDS: tuple[tuple[int, str], ...] = (
    (15, "high"),
    (8, "medium"),
    (3, "low"),
)

# ── Brand equity halo ───────────────────────────────────────────────────

TROPHY_VALUE_ADD = "Brand Flagship / Trophy"
HALO_THRESHOLD_PCT = 10.0
HALO_SLOPE = 0.35
HALO_CAP_PCT = 8.0
BRANDED_HALO_BONUS = 1.15
PORTFOLIO_BENCHMARK_AED_PER_SQM = 25_000.0
PORTFOLIO_NEXT_PROJECT_GFA: Mapping[str, float] = _frozen({
    "conservative": 500.0,
    "mid": 2000.0,
    "aggressive": 5000.0,
})
