"""Soften the evening carbohydrate cut for underweight or low-appetite users."""

from dataclasses import dataclass

from diet_planner.domain.plans import DayPlan, MealNutrient, PlanAdjustment
from diet_planner.services.nutrients import MAX_SHARE, MIN_SHARE, clamp

UNDERWEIGHT_BMI = 18.5
LUNCH_CARB_MARGIN = 4


@dataclass(frozen=True)
class DinnerCarbSafetyContext:
    bmi: float | None = None
    low_appetite_risk: bool = False
    weight_loss_preference: bool = False


def dinner_carb_floor(*, combined_risk: bool, weight_loss_preference: bool) -> int:
    """Minimum dinner carb share for the given risk combination."""
    if weight_loss_preference:
        return 32 if combined_risk else 30
    return 36 if combined_risk else 34


def relax_dinner_carb(nutrient: MealNutrient, carb_floor: int) -> MealNutrient:
    """Raise carb to the floor out of protein, keeping protein at 20 or more."""
    carb = max(nutrient.carb, carb_floor)
    protein = 100 - carb - nutrient.fat
    if protein < MIN_SHARE:
        carb = max(nutrient.carb, carb - (MIN_SHARE - protein))
        protein = 100 - carb - nutrient.fat
    return MealNutrient(
        carb=carb, protein=int(clamp(protein, MIN_SHARE, MAX_SHARE)), fat=nutrient.fat
    )


def apply_dinner_carb_safety(
    plan: DayPlan, context: DinnerCarbSafetyContext
) -> PlanAdjustment:
    """Lift dinner carbohydrates when weight or appetite is at risk."""
    underweight = context.bmi is not None and context.bmi < UNDERWEIGHT_BMI
    if not underweight and not context.low_appetite_risk:
        return PlanAdjustment(plan=plan, notes=[])

    floor = dinner_carb_floor(
        combined_risk=underweight and context.low_appetite_risk,
        weight_loss_preference=context.weight_loss_preference,
    )
    floor = max(floor, plan.lunch.nutrient.carb - LUNCH_CARB_MARGIN)
    relaxed = relax_dinner_carb(plan.dinner.nutrient, floor)
    unchanged = relaxed.carb <= plan.dinner.nutrient.carb
    if unchanged or relaxed.total != 100:  # noqa: PLR2004
        return PlanAdjustment(plan=plan, notes=[])
    return PlanAdjustment(
        plan=plan.revise("dinner", nutrient=relaxed),
        notes=[
            "Eased the evening carbohydrate cut to reflect weight-loss or "
            "low-appetite risk."
        ],
    )
