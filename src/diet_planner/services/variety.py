"""Anti-repetition: pool rotation plus a Jaccard similarity gate."""

import logging
import re
from collections.abc import Callable, Collection, Sequence
from dataclasses import replace
from typing import Literal

from diet_planner.domain.plans import (
    SLOT_LABELS,
    SLOT_ORDER,
    DayPlan,
    MealSlot,
    MealSuggestion,
    PlanAdjustment,
)
from diet_planner.services.menus import (
    MAIN_POOLS,
    SIDES,
    SNACK_FRUITS,
    SNACK_HYDRATION_VARIANTS,
    SNACK_SIDE_VARIANTS,
    SOUPS,
    build_recipe,
    build_snack_recipe,
    seasonal_from_side,
)
from diet_planner.services.nutrients import clamp, round_half_up

SIMILARITY_THRESHOLD = 0.72
MAX_REGENERATION_ATTEMPTS = 5
MIN_WINDOW_DAYS = 1
MAX_WINDOW_DAYS = 14

Outcome = Literal["clear", "regenerated", "unresolved"]

_logger = logging.getLogger(__name__)

_MODIFIERS = re.compile(
    r"\b(?:low-sodium|low-fat|unsweetened|plain|warm|chilled|soft|a few)\b"
)
_PARENTHETICAL = re.compile(r"\([^)]*\)")

# Substring keywords per token; names are matched after whitespace removal.
_TOKEN_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("protein:chicken", ("chicken",)),
    ("protein:fish", ("fish", "salmon", "mackerel")),
    ("protein:tofu_bean", ("tofu", "bean")),
    ("protein:egg", ("egg",)),
    ("protein:dairy_soy", ("yogurt", "soymilk")),
    ("carb:grain", ("rice", "porridge", "bowl", "noodle")),
    (
        "carb:fruit_starch",
        ("sweetpotato", "banana", "apple", "pear", "kiwi", "berr"),
    ),
    ("method:grill", ("grill", "roast")),
    ("method:steam", ("steam",)),
    ("method:stir_fry", ("stir-fr", "saute")),
    ("method:season", ("seasoned",)),
    ("dish:soup", ("soup", "broth")),
    ("dish:salad", ("salad",)),
)


def normalize_dish_name(name: str) -> str:
    """Strip parentheticals, soft modifiers and whitespace from a dish name."""
    text = _PARENTHETICAL.sub("", name.lower())
    text = _MODIFIERS.sub("", text)
    return re.sub(r"\s+", "", text)


def tokenize(name: str) -> set[str]:
    """Return the semantic tokens of one dish name."""
    normalized = normalize_dish_name(name)
    if not normalized:
        return set()
    tokens = {f"menu:{normalized}"}
    for token, keywords in _TOKEN_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            tokens.add(token)
    return tokens


def meal_tokens(meal: MealSuggestion) -> set[str]:
    """Return the union of tokens over the dishes that define a meal."""
    if meal.slot == "snack":
        names = [meal.main, *meal.sides[:2], meal.soup]
    else:
        names = [meal.rice_type, meal.main, meal.soup, *meal.sides[:2]]
    tokens: set[str] = set()
    for name in names:
        tokens |= tokenize(name)
    return tokens


def jaccard(left: Collection[str], right: Collection[str]) -> float:
    """Jaccard similarity of two token sets; 0 when both are empty."""
    left_set, right_set = set(left), set(right)
    union = left_set | right_set
    if not union:
        return 0.0
    return len(left_set & right_set) / len(union)


def max_similarity(meal: MealSuggestion, recent: Sequence[DayPlan]) -> float:
    """Highest similarity between a meal and the same slot in recent plans."""
    tokens = meal_tokens(meal)
    return max(
        (jaccard(tokens, meal_tokens(plan.meal(meal.slot))) for plan in recent),
        default=0.0,
    )


def pick_next_non_repeating(
    current: str,
    pool: Sequence[str],
    recent_values: Collection[str],
    offset: int = 0,
) -> str:
    """Scan the pool cyclically from the current value for an unused entry.

    The current value is prepended when it is not part of the pool. A
    non-zero ``offset`` shifts the scan start; when every candidate was used
    recently the value at the shifted start is returned.
    """
    normalized = current.strip()
    base = [item for item in pool if item.strip()]
    working = [normalized, *base] if normalized and normalized not in base else base
    if not working:
        return current
    start = working.index(normalized) if normalized in working else 0
    shift = offset % len(working)
    for step in range(len(working)):
        candidate = working[(start + shift + step) % len(working)]
        if candidate not in recent_values:
            return candidate
    return working[(start + shift) % len(working)]


def _with_main_recipe(meal: MealSuggestion) -> MealSuggestion:
    first_side = meal.sides[0] if meal.sides else SIDES[0]
    recipe_name, steps = build_recipe(
        meal.main, meal.soup, first_side, seasonal_from_side(first_side)
    )
    return replace(meal, recipe_name=recipe_name, recipe_steps=steps)


def _with_snack_recipe(meal: MealSuggestion) -> MealSuggestion:
    side = meal.sides[0] if meal.sides else SNACK_FRUITS[0]
    recipe_name, steps = build_snack_recipe(meal.main, side, meal.soup)
    return replace(meal, recipe_name=recipe_name, recipe_steps=steps)


def _regenerate(
    meal: MealSuggestion,
    recent: Sequence[DayPlan],
    rotate: Callable[[MealSuggestion, int], MealSuggestion],
) -> tuple[MealSuggestion, Outcome]:
    """Re-rotate with growing offsets until similarity drops below the gate."""
    score = max_similarity(meal, recent)
    if score < SIMILARITY_THRESHOLD:
        return meal, "clear"
    for attempt in range(1, MAX_REGENERATION_ATTEMPTS + 1):
        meal = rotate(meal, attempt)
        score = max_similarity(meal, recent)
        if score < SIMILARITY_THRESHOLD:
            _logger.debug(
                "Regenerated %s after %d attempt(s), similarity %.2f",
                meal.slot,
                attempt,
                score,
            )
            return meal, "regenerated"
    _logger.debug("Similarity for %s unresolved at %.2f", meal.slot, score)
    return meal, "unresolved"


def _vary_main_meal(
    meal: MealSuggestion, recent: Sequence[DayPlan]
) -> tuple[MealSuggestion, Outcome]:
    slot = meal.slot
    recent_mains = {plan.meal(slot).main for plan in recent}
    recent_soups = {plan.meal(slot).soup for plan in recent}

    def rotate(current: MealSuggestion, offset: int) -> MealSuggestion:
        rotated = replace(
            current,
            main=pick_next_non_repeating(
                current.main, MAIN_POOLS[slot], recent_mains, offset
            ),
            soup=pick_next_non_repeating(current.soup, SOUPS, recent_soups, offset),
        )
        return _with_main_recipe(rotated)

    return _regenerate(rotate(meal, 0), recent, rotate)


def _vary_snack(
    meal: MealSuggestion, recent: Sequence[DayPlan]
) -> tuple[MealSuggestion, Outcome]:
    recent_mains = {plan.snack.main for plan in recent}
    recent_sides = {
        plan.snack.sides[0].strip()
        for plan in recent
        if plan.snack.sides and plan.snack.sides[0].strip()
    }
    recent_hydration = {plan.snack.soup for plan in recent}
    fallback_side = meal.sides[0] if meal.sides else SNACK_FRUITS[0]

    def rotate(current: MealSuggestion, offset: int) -> MealSuggestion:
        side = current.sides[0] if current.sides else fallback_side
        rotated = replace(
            current,
            main=pick_next_non_repeating(
                current.main, MAIN_POOLS["snack"], recent_mains, offset
            ),
            sides=(
                pick_next_non_repeating(
                    side, SNACK_SIDE_VARIANTS, recent_sides, offset
                ),
            ),
            soup=pick_next_non_repeating(
                current.soup, SNACK_HYDRATION_VARIANTS, recent_hydration, offset
            ),
        )
        return _with_snack_recipe(rotated)

    return _regenerate(rotate(meal, 0), recent, rotate)


def _first_side(meal: MealSuggestion) -> str:
    return meal.sides[0] if meal.sides else ""


def _label_list(slots: Sequence[MealSlot]) -> str:
    return ", ".join(SLOT_LABELS[slot] for slot in slots)


def apply_anti_repetition(
    plan: DayPlan, recent_plans: Sequence[DayPlan], window_days: float = 7
) -> PlanAdjustment:
    """Rotate each slot away from values used in the recent window.

    ``recent_plans`` is ordered oldest first; only the last ``window_days``
    entries (clamped to 1..14) are considered.
    """
    window = int(clamp(round_half_up(window_days), MIN_WINDOW_DAYS, MAX_WINDOW_DAYS))
    recent = list(recent_plans)[-window:]
    if not recent:
        return PlanAdjustment(plan=plan, notes=[])

    changed: list[MealSlot] = []
    regenerated: list[MealSlot] = []
    unresolved: list[MealSlot] = []

    for slot in SLOT_ORDER:
        original = plan.meal(slot)
        if slot == "snack":
            meal, outcome = _vary_snack(original, recent)
            moved = (
                meal.main != original.main
                or meal.soup != original.soup
                or _first_side(meal) != _first_side(original)
            )
        else:
            meal, outcome = _vary_main_meal(original, recent)
            moved = meal.main != original.main or meal.soup != original.soup
        plan = plan.revise(
            slot,
            main=meal.main,
            soup=meal.soup,
            sides=meal.sides,
            recipe_name=meal.recipe_name,
            recipe_steps=meal.recipe_steps,
        )
        if moved:
            changed.append(slot)
        if outcome == "regenerated":
            regenerated.append(slot)
        elif outcome == "unresolved":
            unresolved.append(slot)

    notes: list[str] = []
    if changed:
        notes.append(
            f"Spread out the {_label_list(changed)} menu to avoid repeats from "
            f"the last {window} days."
        )
    if regenerated:
        notes.append(
            f"Regenerated the {_label_list(regenerated)} menu with the similarity "
            f"filter (72% or higher) to cut repetition further."
        )
    if unresolved:
        notes.append(
            f"The menu pool is limited, so some similar patterns remain for "
            f"{_label_list(unresolved)}. Upcoming suggestions will widen the "
            f"candidates."
        )
    return PlanAdjustment(plan=plan, notes=notes)
