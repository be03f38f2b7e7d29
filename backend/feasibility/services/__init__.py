from .normalization_engine import normalize_inputs
from .scoring_engine import compute_dimension_scores
from .penalty_engine import compute_penalties
from .aggregation_engine import evaluate
from .sensitivity_engine import run_sensitivity_analysis
from .scenario_engine import (
    SCENARIO_TEMPLATES,
    get_scenario_template,
    run_scenario,
    run_scenario_comparison,
    solve_constraints,
)
from .roi_engine import compute_roi, compute_roi_narrative
from .value_add_engine import compute_brand_equity_forecast, compute_value_add_bridge

__all__ = [
    "normalize_inputs",
    "compute_dimension_scores",
    "compute_penalties",
    "evaluate",
    "run_sensitivity_analysis",
    "run_scenario",
    "run_scenario_comparison",
    "SCENARIO_TEMPLATES",
    "get_scenario_template",
    "solve_constraints",
    "compute_roi",
    "compute_roi_narrative",
    "compute_value_add_bridge",
    "compute_brand_equity_forecast",
]
