"""Tests for preference rules."""

from diet_planner.domain.plans import MealNutrient
from diet_planner.services.planner import build_plan
from diet_planner.services.preferences import (
    PREFERENCE_OPTIONS,
    PREFERENCE_RULES,
    PREFERENCE_TYPES,
    apply_preferences,
    preference_label,
)


def _plan():
    return build_plan("2024-05-10", "other", 70)


def test_no_preferences_returns_plan_without_notes() -> None:
    plan = _plan()
    result = apply_preferences(plan, [])

    assert result.plan == plan
    assert result.notes == []


def test_later_preference_wins_on_collision() -> None:
    plan = _plan()
    combined = apply_preferences(plan, ["high_protein", "soft_food"])
    alone = apply_preferences(plan, ["high_protein"])

    assert combined.plan == alone.plan
    assert combined.plan.breakfast.main == "steamed egg and tofu"


def test_order_of_input_does_not_matter() -> None:
    plan = _plan()
    first = apply_preferences(plan, ["fish", "meat"])
    second = apply_preferences(plan, ["meat", "fish"])

    assert first.plan == second.plan
    assert first.plan.dinner.main == "steamed white fish"


def test_each_active_preference_adds_one_note() -> None:
    result = apply_preferences(_plan(), ["low_salt", "vegetable", "sweet"])

    assert len(result.notes) == 3


def test_weight_loss_sets_lower_carb_split() -> None:
    result = apply_preferences(_plan(), ["weight_loss"])

    assert result.plan.dinner.nutrient == MealNutrient(carb=24, protein=48, fat=28)
    assert result.plan.snack.main == "greek yogurt"
    assert result.plan.breakfast.rice_type.endswith("(small)")
    for _slot, meal in result.plan.meals():
        assert meal.nutrient.total == 100


def test_input_plan_is_not_modified() -> None:
    plan = _plan()
    apply_preferences(plan, ["pizza", "noodle"])

    assert plan == _plan()


def test_catalogue_covers_every_preference() -> None:
    assert {option.key for option in PREFERENCE_OPTIONS} == set(PREFERENCE_TYPES)
    assert len(PREFERENCE_RULES) == len(PREFERENCE_TYPES) == 20
    assert preference_label("low_salt") == "Low salt"
    assert preference_label("unknown") == "unknown"
