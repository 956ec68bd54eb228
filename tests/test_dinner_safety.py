"""Tests for dinner carbohydrate safety."""

from diet_planner.domain.plans import MealNutrient
from diet_planner.services.dinner_safety import (
    DinnerCarbSafetyContext,
    apply_dinner_carb_safety,
    relax_dinner_carb,
)
from diet_planner.services.planner import build_plan
from diet_planner.services.preferences import apply_preferences


def test_no_risk_leaves_plan_unchanged() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_dinner_carb_safety(plan, DinnerCarbSafetyContext(bmi=22))

    assert result.plan == plan
    assert result.notes == []


def test_combined_risk_raises_dinner_carb() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_dinner_carb_safety(
        plan, DinnerCarbSafetyContext(bmi=17.0, low_appetite_risk=True)
    )

    assert result.plan.dinner.nutrient == MealNutrient(carb=36, protein=34, fat=30)
    assert len(result.notes) == 1


def test_floor_already_met_adds_no_note() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_dinner_carb_safety(plan, DinnerCarbSafetyContext(bmi=17.0))

    assert result.plan == plan
    assert result.notes == []


def test_weight_loss_preference_uses_lower_floor() -> None:
    base = build_plan("2024-03-15", "other", 70)
    plan = apply_preferences(base, ["weight_loss"]).plan
    result = apply_dinner_carb_safety(
        plan,
        DinnerCarbSafetyContext(
            bmi=17.0, low_appetite_risk=True, weight_loss_preference=True
        ),
    )

    assert result.plan.dinner.nutrient == MealNutrient(carb=32, protein=40, fat=28)


def test_relax_keeps_protein_floor() -> None:
    relaxed = relax_dinner_carb(MealNutrient(carb=30, protein=25, fat=45), 36)

    assert relaxed == MealNutrient(carb=35, protein=20, fat=45)
    assert relaxed.total == 100
