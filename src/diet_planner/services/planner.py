"""Deterministic daily plan builder."""

import calendar
from collections.abc import Iterable
from functools import lru_cache
from typing import TYPE_CHECKING

from diet_planner.domain.plans import DayPlan, MealNutrient, MealSlot, MealSuggestion
from diet_planner.services.menus import (
    PROTEIN_MAINS,
    RICE_TYPES,
    SEASONAL_FOOD,
    SEASONAL_SEPARATOR,
    SIDES,
    SNACK_FRUITS,
    SNACKS,
    SOUPS,
    build_recipe,
    build_snack_recipe,
)
from diet_planner.services.preferences import apply_preferences

if TYPE_CHECKING:
    from diet_planner.domain.plans import StageType

EASY_FLOUR_GUIDE = "Try to keep flour-based foods to twice a week or less."
STRICT_FLOUR_GUIDE = "Keep flour-based foods as rare as you can."
EASY_MENU_SCORE = 60

_SOFT_STAGES = frozenset({"chemo", "chemo_2nd", "radiation"})
_LOWER_CARB_STAGES = frozenset(
    {"hormone_therapy", "medication", "targeted", "immunotherapy"}
)

# Carbohydrate steps down from breakfast to dinner within each stage group.
_NUTRIENT_BASELINES: dict[str, dict[str, tuple[int, int, int]]] = {
    "lower_carb": {
        "breakfast": (36, 34, 30),
        "lunch": (34, 36, 30),
        "dinner": (30, 40, 30),
    },
    "soft": {
        "breakfast": (42, 31, 27),
        "lunch": (40, 33, 27),
        "dinner": (36, 35, 29),
    },
    "default": {
        "breakfast": (40, 32, 28),
        "lunch": (38, 34, 28),
        "dinner": (34, 36, 30),
    },
}
_SNACK_BASELINE = (35, 30, 35)


def parse_date_key(date_key: str) -> tuple[int, int, int]:
    """Split a YYYY-MM-DD key into integer year, month and day."""
    year, month, day = (int(part) for part in date_key.split("-"))
    return year, month, day


def base_nutrient(stage_type: str, slot: MealSlot) -> MealNutrient:
    """Return the starting macro split for a stage and meal slot."""
    if slot == "snack":
        carb, protein, fat = _SNACK_BASELINE
        return MealNutrient(carb=carb, protein=protein, fat=fat)
    if stage_type in _LOWER_CARB_STAGES:
        group = "lower_carb"
    elif stage_type in _SOFT_STAGES:
        group = "soft"
    else:
        group = "default"
    carb, protein, fat = _NUTRIENT_BASELINES[group][slot]
    return MealNutrient(carb=carb, protein=protein, fat=fat)


def _create_meal(
    seed: int,
    stage_type: str,
    slot: MealSlot,
    history_score: float,
    month: int,
    rice_type: str,
) -> MealSuggestion:
    seasonal_set = SEASONAL_FOOD.get(month, ("vegetables",))
    seasonal = seasonal_set[seed % len(seasonal_set)]
    caution = (
        EASY_FLOUR_GUIDE if history_score < EASY_MENU_SCORE else STRICT_FLOUR_GUIDE
    )
    nutrient = base_nutrient(stage_type, slot)

    if slot == "snack":
        main = SNACKS[seed % len(SNACKS)]
        hydration = "warm water"
        fruit = SNACK_FRUITS[(seed + 2) % len(SNACK_FRUITS)]
        recipe_name, steps = build_snack_recipe(main, fruit, hydration)
        return MealSuggestion(
            slot=slot,
            rice_type="",
            main=main,
            soup=hydration,
            sides=(fruit,),
            caution_flour=caution,
            nutrient=nutrient,
            recipe_name=recipe_name,
            recipe_steps=steps,
        )

    main = PROTEIN_MAINS[(seed + 1) % len(PROTEIN_MAINS)]
    soup = SOUPS[(seed + 2) % len(SOUPS)]
    seasonal_side = f"{SIDES[(seed + 3) % len(SIDES)]}{SEASONAL_SEPARATOR}{seasonal}"
    sides = (
        seasonal_side,
        SIDES[(seed + 4) % len(SIDES)],
        SIDES[(seed + 5) % len(SIDES)],
    )
    recipe_name, steps = build_recipe(main, soup, seasonal_side, seasonal)
    return MealSuggestion(
        slot=slot,
        rice_type=rice_type,
        main=main,
        soup=soup,
        sides=sides,
        caution_flour=caution,
        nutrient=nutrient,
        recipe_name=recipe_name,
        recipe_steps=steps,
    )


@lru_cache(maxsize=512)
def _build_base_plan(date_key: str, stage_type: str, history_score: float) -> DayPlan:
    year, month, day = parse_date_key(date_key)
    seed = day + month * 37 + year
    rice_type = RICE_TYPES[(seed + 11) % len(RICE_TYPES)]
    return DayPlan(
        date=date_key,
        breakfast=_create_meal(
            seed + 1, stage_type, "breakfast", history_score, month, rice_type
        ),
        lunch=_create_meal(
            seed + 2, stage_type, "lunch", history_score, month, rice_type
        ),
        dinner=_create_meal(
            seed + 3, stage_type, "dinner", history_score, month, rice_type
        ),
        snack=_create_meal(seed + 4, stage_type, "snack", history_score, month, ""),
    )


def build_plan(
    date_key: str,
    stage_type: "StageType | str",
    history_score: float,
    preferences: Iterable[str] | None = None,
) -> DayPlan:
    """Build the base plan for a date.

    The result depends only on the arguments; base plans are cached since
    they are immutable. Preferences, when given, are applied once on top.
    """
    plan = _build_base_plan(date_key, stage_type, history_score)
    active = list(preferences or [])
    if not active:
        return plan
    return apply_preferences(plan, active).plan


def month_date_keys(year: int, month: int) -> list[str]:
    """Return date keys for every day of a month (month is 1-based)."""
    last_day = calendar.monthrange(year, month)[1]
    return [f"{year:04d}-{month:02d}-{day:02d}" for day in range(1, last_day + 1)]


def build_month_plans(
    year: int, month: int, stage_type: "StageType | str", history_score: float
) -> list[DayPlan]:
    """Build base plans for every day of a month."""
    return [
        build_plan(date_key, stage_type, history_score)
        for date_key in month_date_keys(year, month)
    ]
