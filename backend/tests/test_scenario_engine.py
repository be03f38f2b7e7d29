"""Scenario comparison, templates and the constraint solver."""

import pytest
from pydantic import ValidationError

from feasibility.schemas.analysis_schema import Constraint, ScenarioInput
from feasibility.services.aggregation_engine import evaluate
from feasibility.services.scenario_engine import (
    SCENARIO_TEMPLATES,
    check_constraint,
    compute_stability,
    get_scenario_template,
    run_scenario,
    run_scenario_comparison,
    solve_constraints,
)


class TestRunScenario:
    def test_overrides_are_applied(self, midmarket):
        scenario = ScenarioInput(name="Stronger contractor", variable_overrides={"exe02_contractor": 5})
        result = run_scenario(midmarket, scenario)
        assert result.score_result.input_snapshot.exe02_contractor == 5
        assert result.ras_score == result.score_result.ras_score

    def test_empty_overrides_match_baseline(self, midmarket):
        result = run_scenario(midmarket, ScenarioInput(name="Baseline"))
        assert result.score_result == evaluate(midmarket)

    def test_unknown_key_rejected(self, midmarket):
        scenario = ScenarioInput(name="Typo", variable_overrides={"exe99_unknown": 3})
        with pytest.raises(ValidationError):
            run_scenario(midmarket, scenario)

    def test_out_of_range_value_rejected(self, midmarket):
        scenario = ScenarioInput(name="Bad", variable_overrides={"str01_brand_clarity": 9})
        with pytest.raises(ValidationError):
            run_scenario(midmarket, scenario)


class TestStability:
    def test_distance_from_dominant(self):
        assert compute_stability(41.4, 61.4) == pytest.approx(80.0)

    def test_bounds(self):
        assert compute_stability(50.0, 50.0) == 100.0
        assert compute_stability(0.0, 100.0) == 0.0


class TestComparison:
    def test_exactly_one_dominant(self, midmarket):
        scenarios = [ScenarioInput(name="Baseline")] + [t.to_scenario() for t in SCENARIO_TEMPLATES]
        results = run_scenario_comparison(midmarket, scenarios)

        assert [r.name for r in results] == [s.name for s in scenarios]
        dominant = [r for r in results if r.is_dominant]
        assert len(dominant) == 1
        assert dominant[0].stability_score == 100.0
        assert dominant[0].ras_score == max(r.ras_score for r in results)
        for r in results:
            if not r.is_dominant:
                assert r.stability_score == compute_stability(r.ras_score, dominant[0].ras_score)

    def test_first_max_wins_ties(self, midmarket):
        scenarios = [
            ScenarioInput(name="A", variable_overrides={"exe02_contractor": 4}),
            ScenarioInput(name="B", variable_overrides={"exe02_contractor": 4}),
        ]
        results = run_scenario_comparison(midmarket, scenarios)
        assert results[0].is_dominant is True
        assert results[1].is_dominant is False
        assert results[1].stability_score == 100.0

    def test_empty_list(self, midmarket):
        assert run_scenario_comparison(midmarket, []) == []

    def test_base_not_mutated(self, premium):
        snapshot = premium.model_dump()
        run_scenario_comparison(premium, [t.to_scenario() for t in SCENARIO_TEMPLATES])
        assert premium.model_dump() == snapshot


class TestTemplates:
    def test_five_templates(self):
        assert [t.key for t in SCENARIO_TEMPLATES] == [
            "cost_discipline", "market_differentiation", "luxury_upgrade",
            "fast_delivery", "brand_alignment",
        ]

    def test_lookup(self):
        assert get_scenario_template("luxury_upgrade").name == "Luxury Upgrade"
        assert get_scenario_template("nope") is None

    @pytest.mark.parametrize("template", SCENARIO_TEMPLATES, ids=lambda t: t.key)
    def test_overrides_are_valid_project_fields(self, midmarket, template):
        assert midmarket.with_overrides(template.overrides) is not None
        assert template.tradeoffs


class TestConstraintSolver:
    def test_check_constraint(self):
        assert check_constraint(None, Constraint(variable="x", operator="eq", value=1)) is False
        assert check_constraint("Modern", Constraint(variable="x", operator="eq", value="Modern"))
        assert check_constraint("4", Constraint(variable="x", operator="gte", value=4))
        assert not check_constraint("Modern", Constraint(variable="x", operator="lte", value=4))
        assert check_constraint(2, Constraint(variable="x", operator="in", value=[1, 2]))

    def test_ranks_satisfying_templates_first(self, midmarket):
        constraints = [Constraint(variable="des03_complexity", operator="lte", value=2)]
        results = solve_constraints(midmarket, constraints)
        assert [r.name for r in results] == [
            "Cost Discipline", "Fast Delivery / Procurement Simplicity", "Custom Optimized",
        ]
        assert results[0].estimated_score_impact.startswith("positive")
        assert results[2].overrides == {"des03_complexity": 2}

    def test_custom_variant_keeps_stricter_base(self, midmarket):
        base = midmarket.with_overrides({"exe02_contractor": 5})
        constraints = [
            Constraint(variable="exe02_contractor", operator="gte", value=4),
            Constraint(variable="des02_material_level", operator="gte", value=5),
        ]
        results = solve_constraints(base, constraints)
        assert [r.name for r in results[:2]] == ["Luxury Upgrade", "Custom Optimized"]
        assert results[1].overrides == {"exe02_contractor": 5, "des02_material_level": 5}

    def test_membership_constraint_adds_no_custom_variant(self, midmarket):
        constraints = [Constraint(variable="des01_style", operator="in", value=["Modern", "Minimal"])]
        results = solve_constraints(midmarket, constraints)
        assert [r.name for r in results] == [t.name for t in SCENARIO_TEMPLATES[:3]]
        assert all(r.constraints_satisfied == 1 for r in results)

    def test_accepts_plain_mapping(self, midmarket):
        constraints = [Constraint(variable="str01_brand_clarity", operator="gte", value=5)]
        results = solve_constraints(midmarket.model_dump(), constraints)
        assert results[0].name == "Market Differentiation"
        assert results[0].constraints_total == 1

    def test_impact_labels(self, midmarket):
        constraints = [
            Constraint(variable="des02_material_level", operator="gte", value=5),
            Constraint(variable="des04_experience", operator="gte", value=5),
            Constraint(variable="exe01_supply_chain", operator="eq", value=5),
        ]
        by_name = {r.name: r for r in solve_constraints(midmarket, constraints)}
        # Luxury Upgrade: material 5, experience 5, supply chain stays 3
        assert by_name["Luxury Upgrade"].estimated_score_impact.startswith("mixed")
