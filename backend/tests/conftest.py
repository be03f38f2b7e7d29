"""Shared fixtures: reference projects and the default evaluation config."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from feasibility.schemas.project_schema import ProjectInputs
from feasibility.schemas.score_schema import EvaluationConfig


MIDMARKET_FIELDS = dict(
    typology="Residential",
    scale="Medium",
    gfa=2000.0,
    location="Secondary",
    horizon="12-24m",
    city="Dubai",
    str01_brand_clarity=3,
    str02_differentiation=3,
    str03_buyer_maturity=3,
    mkt01_tier="Upper-mid",
    mkt02_competitor=3,
    mkt03_trend=3,
    fin01_budget_cap=400.0,
    fin02_flexibility=3,
    fin03_shock_tolerance=3,
    fin04_sales_premium=3,
    des01_style="Modern",
    des02_material_level=3,
    des03_complexity=3,
    des04_experience=3,
    des05_sustainability=3,
    exe01_supply_chain=3,
    exe02_contractor=3,
    exe03_approvals=3,
    exe04_qa_maturity=3,
)


@pytest.fixture
def midmarket() -> ProjectInputs:
    """Every ordinal at 3: all features sit at their 0.5 midpoint."""
    return ProjectInputs(**MIDMARKET_FIELDS)


@pytest.fixture
def premium() -> ProjectInputs:
    """A well-prepared luxury project on a prime plot."""
    return ProjectInputs(
        typology="Residential",
        scale="Large",
        gfa=12000.0,
        total_fitout_area=9000.0,
        location="Prime",
        horizon="24-36m",
        city="Dubai",
        sustain_cert_target="silver",
        str01_brand_clarity=4,
        str02_differentiation=4,
        str03_buyer_maturity=4,
        mkt01_tier="Luxury",
        mkt02_competitor=3,
        mkt03_trend=4,
        fin01_budget_cap=850.0,
        fin02_flexibility=4,
        fin03_shock_tolerance=4,
        fin04_sales_premium=4,
        des01_style="Contemporary",
        des02_material_level=4,
        des03_complexity=3,
        des04_experience=4,
        des05_sustainability=4,
        exe01_supply_chain=4,
        exe02_contractor=5,
        exe03_approvals=2,
        exe04_qa_maturity=5,
        developer_type="Master Developer",
        sales_strategy="Sell Off-Plan",
        procurement_strategy="Turnkey",
        material_sourcing="European",
        handover_condition="Category A",
    )


@pytest.fixture
def default_config() -> EvaluationConfig:
    return EvaluationConfig()


@pytest.fixture
def benchmarked_config() -> EvaluationConfig:
    """Config with a benchmark cost and a full set of comparables."""
    return EvaluationConfig(expected_cost=800.0, benchmark_count=5, override_rate=0.0)
