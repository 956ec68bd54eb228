"""Tests for macro rebalancing."""

import pytest

from diet_planner.domain.plans import MealNutrient
from diet_planner.services.nutrients import rebalance_nutrient, round_half_up


def test_rebalance_shifts_carb_to_protein() -> None:
    result = rebalance_nutrient(MealNutrient(carb=40, protein=32, fat=28), -6, 4)

    assert result == MealNutrient(carb=34, protein=36, fat=30)


def test_rebalance_restores_fat_floor_from_protein() -> None:
    result = rebalance_nutrient(MealNutrient(carb=40, protein=40, fat=20), 10, 10)

    assert result == MealNutrient(carb=50, protein=30, fat=20)


def test_rebalance_moves_excess_fat_into_carb() -> None:
    result = rebalance_nutrient(MealNutrient(carb=20, protein=20, fat=60), 0, 0)

    assert result == MealNutrient(carb=45, protein=20, fat=35)


def test_rebalance_clamps_shares() -> None:
    result = rebalance_nutrient(MealNutrient(carb=55, protein=25, fat=20), 30, -30)

    assert result.carb == 60
    assert result.protein == 20
    assert result.fat == 20


@pytest.mark.parametrize(
    "nutrient",
    [
        MealNutrient(carb=40, protein=32, fat=28),
        MealNutrient(carb=22, protein=43, fat=35),
        MealNutrient(carb=60, protein=20, fat=20),
        MealNutrient(carb=20, protein=20, fat=60),
    ],
)
def test_rebalance_keeps_total_and_bounds(nutrient: MealNutrient) -> None:
    for carb_delta in range(-30, 31, 5):
        for protein_delta in range(-30, 31, 5):
            result = rebalance_nutrient(nutrient, carb_delta, protein_delta)
            assert result.total == 100
            assert 20 <= result.carb <= 60
            assert 20 <= result.protein <= 60


def test_round_half_up_matches_ties_towards_positive() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(-6.9) == -7
