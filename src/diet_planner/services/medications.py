"""Medication-aware plan rules."""

import re
from collections.abc import Iterable, Sequence

from diet_planner.domain.plans import DayPlan, PlanAdjustment, with_side
from diet_planner.services.rules import (
    PlanRule,
    replace_snack,
    revise_main_meals,
    run_rules,
    static_notes,
)

HORMONE_TARGETED_KEYWORDS = (
    "tamoxifen",
    "letrozole",
    "anastrozole",
    "exemestane",
    "palbociclib",
    "ribociclib",
    "타목시펜",
    "레트로졸",
    "아나스트로졸",
    "엑세메스탄",
    "팔보시클립",
    "리보시클립",
)
STEROID_KEYWORDS = (
    "dexamethasone",
    "prednisolone",
    "prednisone",
    "steroid",
    "덱사메타손",
    "프레드니솔론",
    "프레드니손",
    "스테로이드",
)
ANTICOAGULANT_KEYWORDS = ("warfarin", "coumadin", "와파린", "쿠마딘")

HIGH_VITAMIN_K_INGREDIENTS = ("spinach", "kale")
NEUTRAL_SIDE = "sauteed mushrooms"


def normalize_medication_name(name: str) -> str:
    """Lowercase a medication name and drop all whitespace."""
    return re.sub(r"\s+", "", name.lower())


def _matches(medications: Sequence[str], keywords: Sequence[str]) -> bool:
    return any(keyword in name for name in medications for keyword in keywords)


def _hormone_snack(plan: DayPlan, _medications: Sequence[str]) -> DayPlan:
    return replace_snack(
        plan,
        main="unsweetened yogurt",
        sides=("mixed berries", "a few walnuts"),
        soup="warm water",
        recipe_name="Medication-friendly snack",
        recipe_steps=(
            "Spoon unsweetened yogurt into a small bowl.",
            "Add about a handful of berries.",
            "Top with only four or five walnuts.",
            "Avoid grapefruit and grapefruit juice; drink water instead.",
        ),
    )


def _steroid_low_sodium(plan: DayPlan, _medications: Sequence[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        soup=("clear tofu soup", "clear vegetable soup", "seaweed soup (low-sodium)"),
        sides=(
            with_side(plan.breakfast.sides, 2, "low-sodium stir-fried vegetables"),
            with_side(plan.lunch.sides, 2, "low-sodium seasoned greens"),
            with_side(plan.dinner.sides, 2, "low-sodium sauteed mushrooms"),
        ),
    )


def _steady_vitamin_k(sides: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(
        NEUTRAL_SIDE
        if any(item in side.lower() for item in HIGH_VITAMIN_K_INGREDIENTS)
        else side
        for side in sides
    )


def _anticoagulant_sides(plan: DayPlan, _medications: Sequence[str]) -> DayPlan:
    return revise_main_meals(
        plan,
        sides=(
            _steady_vitamin_k(plan.breakfast.sides),
            _steady_vitamin_k(plan.lunch.sides),
            _steady_vitamin_k(plan.dinner.sides),
        ),
    )


MEDICATION_RULES: tuple[PlanRule[Sequence[str]], ...] = (
    PlanRule(
        name="medication:hormone_targeted",
        applies=lambda meds: _matches(meds, HORMONE_TARGETED_KEYWORDS),
        transform=_hormone_snack,
        notes=static_notes(
            "Adjusted the snack to a low-sugar, gentle option for your medication."
        ),
    ),
    PlanRule(
        name="medication:steroid",
        applies=lambda meds: _matches(meds, STEROID_KEYWORDS),
        transform=_steroid_low_sodium,
        notes=static_notes(
            "Lowered salt and sugar load in soups and sides for your medication."
        ),
    ),
    PlanRule(
        name="medication:anticoagulant",
        applies=lambda meds: _matches(meds, ANTICOAGULANT_KEYWORDS),
        transform=_anticoagulant_sides,
        notes=static_notes(
            "Kept leafy-green sides steady so vitamin K intake does not swing "
            "with your medication."
        ),
    ),
)


def apply_medications(plan: DayPlan, medication_names: Iterable[str]) -> PlanAdjustment:
    """Apply keyword-matched medication rules; unknown names are ignored."""
    normalized = [
        name
        for name in (normalize_medication_name(raw) for raw in medication_names)
        if name
    ]
    if not normalized:
        return PlanAdjustment(plan=plan, notes=[])
    return run_rules(plan, MEDICATION_RULES, normalized)
