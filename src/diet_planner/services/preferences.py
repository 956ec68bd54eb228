"""Taste and goal preference rules."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal, get_args

from diet_planner.domain.plans import DayPlan, MealNutrient, PlanAdjustment, with_side
from diet_planner.services.menus import MEAT_MAINS
from diet_planner.services.rules import (
    PlanRule,
    replace_snack,
    revise_main_meals,
    run_rules,
    static_notes,
)

PreferenceType = Literal[
    "spicy",
    "sweet",
    "meat",
    "pizza",
    "healthy",
    "fish",
    "sashimi",
    "sushi",
    "cool_food",
    "warm_food",
    "soft_food",
    "soupy",
    "high_protein",
    "vegetable",
    "bland",
    "appetite_boost",
    "digestive",
    "low_salt",
    "noodle",
    "weight_loss",
]

PREFERENCE_TYPES: tuple[str, ...] = get_args(PreferenceType)


@dataclass(frozen=True)
class PreferenceOption:
    """User-facing description of a preference tag."""

    key: str
    label: str
    guide: str


PREFERENCE_OPTIONS: tuple[PreferenceOption, ...] = (
    PreferenceOption(
        "spicy",
        "Spicy",
        "Keeps a gentle kick while lowering irritation.",
    ),
    PreferenceOption("sweet", "Sweet", "Suggests snacks that are easy on blood sugar."),
    PreferenceOption("meat", "Meat", "Favours lean cuts of meat."),
    PreferenceOption("pizza", "Pizza", "Adds a light, vegetable-forward pizza."),
    PreferenceOption(
        "healthy",
        "Healthy",
        "Whole grains, vegetables and low-salt sides.",
    ),
    PreferenceOption("fish", "Fish", "More grilled or steamed cooked fish."),
    PreferenceOption(
        "sashimi",
        "Sashimi-style",
        "Swaps raw fish for safe cooked versions.",
    ),
    PreferenceOption(
        "sushi",
        "Sushi-style",
        "Sushi built from low-salt cooked toppings.",
    ),
    PreferenceOption("cool_food", "Cool food", "Adds cool dishes that stay gentle."),
    PreferenceOption("warm_food", "Warm food", "Warm, comforting meals."),
    PreferenceOption("soft_food", "Soft food", "Dishes that are easy to chew."),
    PreferenceOption("soupy", "Soups", "Low-sodium soups more often."),
    PreferenceOption(
        "high_protein",
        "High protein",
        "More chicken, fish, tofu and eggs.",
    ),
    PreferenceOption("vegetable", "Vegetables", "A wider range of vegetable sides."),
    PreferenceOption("bland", "Mild", "Lighter seasoning and plain cooking."),
    PreferenceOption("appetite_boost", "Appetite boost", "A little tangy side dish."),
    PreferenceOption("digestive", "Easy to digest", "Meals that sit lightly."),
    PreferenceOption("low_salt", "Low salt", "Lower-sodium soups and sides."),
    PreferenceOption("noodle", "Noodles", "Occasional mild noodle dishes."),
    PreferenceOption(
        "weight_loss",
        "Weight loss",
        "Keeps protein up and cuts refined carbohydrates.",
    ),
)


def _pizza(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = plan.revise(
        "lunch",
        main="whole-wheat tortilla veggie pizza",
        soup="clear vegetable soup",
        sides=("green salad", "low-sugar pickles", "roasted vegetables"),
        recipe_name="whole-wheat tortilla veggie pizza",
        recipe_steps=(
            "Spread a thin layer of tomato sauce over a whole-wheat tortilla.",
            "Top with vegetables and a lean protein.",
            "Use only a little cheese and bake briefly.",
            "Serve with the clear vegetable soup to keep it gentle.",
        ),
    )
    return plan.revise("dinner", main="tofu steak", soup="mushroom soup")


def _spicy(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = plan.revise(
        "lunch", sides=with_side(plan.lunch.sides, 0, "mildly spicy seasoned tofu")
    )
    return plan.revise(
        "dinner",
        sides=with_side(plan.dinner.sides, 0, "vegetables with a pinch of chili"),
    )


def _meat(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return plan.revise("dinner", main=MEAT_MAINS[0])


def _sweet(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return replace_snack(
        plan,
        main="unsweetened yogurt",
        sides=("seasonal fruit", "a few nuts"),
        soup=plan.snack.soup,
        recipe_name="Low-sugar snack",
        recipe_steps=(
            "Spoon unsweetened yogurt into a small bowl.",
            "Add seasonal fruit cut into small pieces.",
            "Finish with no more than a handful of nuts.",
        ),
    )


def _healthy(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        rice_type=("multigrain rice", "multigrain rice", "multigrain rice"),
        sides=(
            with_side(plan.breakfast.sides, 1, "blanched broccoli"),
            with_side(plan.lunch.sides, 1, "low-sodium mixed greens"),
            with_side(plan.dinner.sides, 1, "roasted vegetables"),
        ),
    )


def _fish(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = plan.revise("lunch", main="grilled mackerel")
    return plan.revise("dinner", main="steamed white fish")


def _sashimi(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return plan.revise(
        "lunch",
        main="blanched fish salad",
        sides=with_side(plan.lunch.sides, 0, "low-sodium seaweed salad"),
    )


def _sushi(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return plan.revise(
        "lunch",
        main="cooked fish sushi (low-sodium)",
        sides=with_side(plan.lunch.sides, 2, "warm miso soup"),
    )


def _cool_food(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = plan.revise("lunch", soup="chilled cucumber soup (low-sodium)")
    return replace_snack(
        plan,
        main="chilled soy milk",
        sides=("seasonal fruit",),
        soup="water",
        recipe_name="Cool snack",
        recipe_steps=(
            "Pour one small glass of chilled soy milk.",
            "Add no more than a handful of seasonal fruit.",
            "Drink a little extra water after a cold snack.",
        ),
    )


def _warm_food(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        soup=("perilla mushroom soup", "clear tofu soup", "sweet pumpkin soup"),
    )


def _soft_food(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        main=("steamed tofu and egg", "soft tofu rice bowl", "steamed white fish"),
    )


def _soupy(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        soup=("seaweed soup (low-sodium)", "clear vegetable soup", "clear tofu soup"),
    )


def _high_protein(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = revise_main_meals(
        plan,
        main=("steamed egg and tofu", "grilled chicken breast", "grilled salmon"),
    )
    return replace_snack(
        plan,
        main="greek yogurt",
        sides=("soy milk",),
        soup="water",
        recipe_name="Protein boost snack",
        recipe_steps=(
            "Spoon a single serving of greek yogurt.",
            "Serve a small glass of unsweetened soy milk alongside.",
            "Skip sugary toppings and keep it plain.",
        ),
    )


def _vegetable(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        sides=(
            ("steamed broccoli", "seasoned spinach", "stir-fried carrots"),
            ("stir-fried cabbage", "sauteed mushrooms", "seasoned cucumber"),
            ("sauteed zucchini", "seasoned spinach", "roasted vegetables"),
        ),
    )


def _bland(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        sides=(
            with_side(plan.breakfast.sides, 0, "low-sodium seasoned greens"),
            with_side(plan.lunch.sides, 0, "plain seasoned tofu"),
            with_side(plan.dinner.sides, 0, "plain seasoned vegetables"),
        ),
    )


def _appetite_boost(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = plan.revise(
        "lunch",
        sides=with_side(plan.lunch.sides, 2, "tangy radish pickle (low-sodium)"),
    )
    return plan.revise(
        "dinner", sides=with_side(plan.dinner.sides, 2, "lemon dressed vegetables")
    )


def _digestive(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = revise_main_meals(
        plan,
        main=("soft porridge", "tofu rice bowl", "steamed chicken tenderloin"),
    )
    plan = plan.revise("breakfast", soup="sweet pumpkin soup")
    return plan.revise("dinner", soup="perilla mushroom soup")


def _low_salt(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        soup=("clear tofu soup", "clear vegetable soup", "seaweed soup (low-sodium)"),
        sides=(
            with_side(plan.breakfast.sides, 2, "low-sodium stir-fried vegetables"),
            with_side(plan.lunch.sides, 2, "low-sodium seasoned greens"),
            with_side(plan.dinner.sides, 2, "low-sodium sauteed mushrooms"),
        ),
    )


def _noodle(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    return plan.revise(
        "lunch",
        main="banquet noodles (low-sodium)",
        soup="anchovy broth (low-sodium)",
        sides=("blanched vegetables", "egg ribbons", "seasoned tofu"),
    )


def _weight_loss(plan: DayPlan, _active: frozenset[str]) -> DayPlan:
    plan = revise_main_meals(
        plan,
        rice_type=(
            "brown rice (small)",
            "multigrain rice (small)",
            "brown rice (small)",
        ),
        main=("steamed egg and tofu", "grilled chicken breast", "steamed white fish"),
        sides=(
            ("steamed broccoli", "sauteed mushrooms", "stir-fried carrots"),
            ("stir-fried cabbage", "low-sodium seasoned greens", "roasted vegetables"),
            ("sauteed zucchini", "sauteed mushrooms", "seasoned cucumber"),
        ),
        nutrient=(
            MealNutrient(carb=30, protein=45, fat=25),
            MealNutrient(carb=28, protein=47, fat=25),
            MealNutrient(carb=24, protein=48, fat=28),
        ),
    )
    plan = replace_snack(
        plan,
        main="greek yogurt",
        sides=("mixed berries", "a few almonds"),
        soup="water",
        recipe_name="Weight-loss snack",
        recipe_steps=(
            "Spoon a single serving of greek yogurt.",
            "Add no more than a handful of berries.",
            "Top with five or six almonds at most.",
        ),
    )
    return plan.revise("snack", nutrient=MealNutrient(carb=22, protein=43, fat=35))


def _rule(
    key: str,
    transform: Callable[[DayPlan, frozenset[str]], DayPlan],
    note: str,
) -> PlanRule[frozenset[str]]:
    return PlanRule(
        name=f"preference:{key}",
        applies=lambda active: key in active,
        transform=transform,
        notes=static_notes(note),
    )


# Declaration order is the application order: on a field collision the
# later rule wins.
PREFERENCE_RULES: tuple[PlanRule[frozenset[str]], ...] = (
    _rule(
        "pizza",
        _pizza,
        "Added a pizza-style lunch and kept the same day's dinner light.",
    ),
    _rule(
        "spicy",
        _spicy,
        "Kept a spicy touch while toning down irritating seasoning.",
    ),
    _rule("meat", _meat, "Used a lean cut for the meat dish."),
    _rule(
        "sweet",
        _sweet,
        "Swapped the snack for one that is easier on blood sugar.",
    ),
    _rule(
        "healthy",
        _healthy,
        "Leaned towards multigrain rice and more vegetable sides.",
    ),
    _rule("fish", _fish, "Added more fish to boost protein."),
    _rule(
        "sashimi",
        _sashimi,
        "Replaced raw fish with a safe cooked alternative.",
    ),
    _rule("sushi", _sushi, "Built the sushi-style dish from cooked ingredients."),
    _rule(
        "cool_food",
        _cool_food,
        "Added cool dishes while keeping them gentle on the stomach.",
    ),
    _rule("warm_food", _warm_food, "Built meals around warm soups."),
    _rule("soft_food", _soft_food, "Centred meals on soft, easy-to-chew dishes."),
    _rule("soupy", _soupy, "Added soups prepared low in sodium."),
    _rule(
        "high_protein",
        _high_protein,
        "Raised the share of chicken, fish and tofu for protein.",
    ),
    _rule("vegetable", _vegetable, "Added a wider range of vegetable sides."),
    _rule("bland", _bland, "Reduced strong seasoning for a milder taste."),
    _rule(
        "appetite_boost",
        _appetite_boost,
        "Added a small tangy side to help appetite.",
    ),
    _rule("digestive", _digestive, "Switched to meals that are easy to digest."),
    _rule("low_salt", _low_salt, "Lowered the salt in soups and sides."),
    _rule("noodle", _noodle, "Added a mild, low-sodium noodle dish."),
    _rule(
        "weight_loss",
        _weight_loss,
        "Lowered carbohydrates towards dinner and centred meals on protein "
        "for weight loss.",
    ),
)


def apply_preferences(plan: DayPlan, preferences: Iterable[str]) -> PlanAdjustment:
    """Apply active preference tags in their fixed declaration order."""
    active = frozenset(preferences)
    if not active:
        return PlanAdjustment(plan=plan, notes=[])
    return run_rules(plan, PREFERENCE_RULES, active)


def preference_label(key: str) -> str:
    """Return the display label for a preference tag."""
    for option in PREFERENCE_OPTIONS:
        if option.key == key:
            return option.label
    return key
