"""Domain models for daily meal plans."""

from dataclasses import dataclass, field, replace
from typing import Literal

MealSlot = Literal["breakfast", "lunch", "dinner", "snack"]

StageType = Literal[
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
]

MAIN_SLOTS: tuple[MealSlot, ...] = ("breakfast", "lunch", "dinner")
SLOT_ORDER: tuple[MealSlot, ...] = (*MAIN_SLOTS, "snack")

STAGE_TYPE_LABELS: dict[str, str] = {
    "diagnosis": "Diagnosis",
    "chemo": "Chemotherapy",
    "chemo_2nd": "Chemotherapy (2nd line)",
    "radiation": "Radiation therapy",
    "targeted": "Targeted therapy",
    "immunotherapy": "Immunotherapy",
    "hormone_therapy": "Hormone therapy",
    "surgery": "Surgery",
    "medication": "Medication",
    "other": "Other",
}

SLOT_LABELS: dict[str, str] = {
    "breakfast": "breakfast",
    "lunch": "lunch",
    "dinner": "dinner",
    "snack": "snack/coffee",
}


@dataclass(frozen=True)
class MealNutrient:
    """Macro split of a meal in integer percentages."""

    carb: int
    protein: int
    fat: int

    @property
    def total(self) -> int:
        return self.carb + self.protein + self.fat


@dataclass(frozen=True)
class MealSuggestion:
    """A single suggested meal for one slot of the day."""

    slot: MealSlot
    rice_type: str
    main: str
    soup: str
    sides: tuple[str, ...]
    caution_flour: str
    nutrient: MealNutrient
    recipe_name: str
    recipe_steps: tuple[str, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> str:
        """One-line description derived from the quoted fields."""
        if self.slot == "snack":
            parts = [self.main, self.sides[0] if self.sides else "", self.soup]
        else:
            parts = [self.rice_type, self.main, self.soup]
        return " + ".join(part for part in parts if part.strip())


@dataclass(frozen=True)
class DayPlan:
    """Meals suggested for a single calendar date."""

    date: str
    breakfast: MealSuggestion
    lunch: MealSuggestion
    dinner: MealSuggestion
    snack: MealSuggestion

    def meal(self, slot: MealSlot) -> MealSuggestion:
        """Return the meal for a slot."""
        return getattr(self, slot)

    def meals(self) -> list[tuple[MealSlot, MealSuggestion]]:
        """Return meals in breakfast, lunch, dinner, snack order."""
        return [(slot, self.meal(slot)) for slot in SLOT_ORDER]

    def revise(self, slot: MealSlot, **changes: object) -> "DayPlan":
        """Return a copy of the plan with fields of one meal replaced."""
        return replace(self, **{slot: replace(self.meal(slot), **changes)})


@dataclass(frozen=True)
class PlanAdjustment:
    """Result of an optimization stage."""

    plan: DayPlan
    notes: list[str] = field(default_factory=list)


def with_side(sides: tuple[str, ...], index: int, value: str) -> tuple[str, ...]:
    """Return sides with one position replaced, appending when short."""
    updated = list(sides)
    if index < len(updated):
        updated[index] = value
    else:
        updated.append(value)
    return tuple(updated)
