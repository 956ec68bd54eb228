"""Macro ratio rebalancing."""

import math

from diet_planner.domain.plans import MealNutrient

MIN_SHARE = 20
MAX_SHARE = 60
FAT_FLOOR = 20
FAT_CEILING = 35


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a value to the inclusive range [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going towards +infinity."""
    return math.floor(value + 0.5)


def rebalance_nutrient(
    nutrient: MealNutrient, carb_delta: float, protein_delta: float
) -> MealNutrient:
    """Shift carb and protein shares while keeping the split at 100.

    Carb and protein are clamped to [20, 60] and fat takes the remainder.
    A fat share under 20 is restored by trimming protein first and then
    carb; a fat share over 35 is moved into carb, whose own clamp can leave
    fat slightly above the band when carb is already near 60.
    """
    carb = int(clamp(round_half_up(nutrient.carb + carb_delta), MIN_SHARE, MAX_SHARE))
    protein = int(
        clamp(round_half_up(nutrient.protein + protein_delta), MIN_SHARE, MAX_SHARE)
    )
    fat = 100 - carb - protein

    if fat < FAT_FLOOR:
        need = FAT_FLOOR - fat
        protein_cut = min(need, max(0, protein - MIN_SHARE))
        protein -= protein_cut
        remain = need - protein_cut
        if remain > 0:
            carb = max(MIN_SHARE, carb - remain)
        fat = 100 - carb - protein

    if fat > FAT_CEILING:
        carb = int(clamp(carb + (fat - FAT_CEILING), MIN_SHARE, MAX_SHARE))
        fat = 100 - carb - protein

    return MealNutrient(carb=carb, protein=protein, fat=fat)
