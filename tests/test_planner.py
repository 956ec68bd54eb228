"""Tests for the deterministic plan builder."""

import pytest

from diet_planner.domain.plans import MealNutrient
from diet_planner.services.planner import (
    EASY_FLOUR_GUIDE,
    STRICT_FLOUR_GUIDE,
    base_nutrient,
    build_month_plans,
    build_plan,
    month_date_keys,
)


def test_build_plan_is_deterministic() -> None:
    first = build_plan("2024-03-15", "chemo", 70, [])
    second = build_plan("2024-03-15", "chemo", 70, [])

    assert first == second


def test_build_plan_uses_seeded_pools() -> None:
    plan = build_plan("2024-03-15", "chemo", 70)

    assert plan.date == "2024-03-15"
    assert plan.breakfast.rice_type == "multigrain rice"
    assert plan.lunch.rice_type == plan.dinner.rice_type == "multigrain rice"
    assert plan.breakfast.main == "steamed white fish"
    assert plan.breakfast.soup == "seaweed soup (low-sodium)"
    assert plan.breakfast.sides == (
        "steamed broccoli with wild chive",
        "sauteed mushrooms",
        "seasoned spinach",
    )
    assert plan.breakfast.nutrient == MealNutrient(carb=42, protein=31, fat=27)
    assert plan.breakfast.caution_flour == STRICT_FLOUR_GUIDE


def test_snack_has_no_rice_and_hydration_soup() -> None:
    snack = build_plan("2024-03-15", "chemo", 70).snack

    assert snack.rice_type == ""
    assert snack.main == "unsweetened yogurt"
    assert snack.sides == ("half a banana",)
    assert snack.soup == "warm water"
    assert snack.summary == "unsweetened yogurt + half a banana + warm water"


def test_low_history_score_uses_easy_flour_guide() -> None:
    plan = build_plan("2024-03-15", "other", 40)

    assert plan.lunch.caution_flour == EASY_FLOUR_GUIDE


def test_main_summary_joins_rice_main_soup() -> None:
    meal = build_plan("2024-03-15", "chemo", 70).breakfast

    assert meal.summary == (
        "multigrain rice + steamed white fish + seaweed soup (low-sodium)"
    )


@pytest.mark.parametrize(
    "stage_type",
    [
        "diagnosis",
        "chemo",
        "chemo_2nd",
        "radiation",
        "targeted",
        "immunotherapy",
        "hormone_therapy",
        "surgery",
        "medication",
        "other",
    ],
)
def test_every_stage_nutrient_sums_to_100(stage_type: str) -> None:
    plan = build_plan("2024-07-02", stage_type, 70)

    for _slot, meal in plan.meals():
        assert meal.nutrient.total == 100


def test_carb_steps_down_through_the_day() -> None:
    carbs = [
        base_nutrient("other", slot).carb for slot in ("breakfast", "lunch", "dinner")
    ]

    assert carbs == sorted(carbs, reverse=True)
    assert base_nutrient("radiation", "snack") == base_nutrient("other", "snack")


def test_preferences_are_applied_once() -> None:
    plan = build_plan("2024-03-15", "other", 70, ["fish"])

    assert plan.lunch.main == "grilled mackerel"
    assert plan.dinner.main == "steamed white fish"


def test_month_date_keys_cover_leap_february() -> None:
    keys = month_date_keys(2024, 2)

    assert len(keys) == 29
    assert keys[0] == "2024-02-01"
    assert keys[-1] == "2024-02-29"


def test_build_month_plans_returns_one_plan_per_day() -> None:
    plans = build_month_plans(2023, 4, "surgery", 70)

    assert [plan.date for plan in plans] == month_date_keys(2023, 4)
