"""Pydantic models for the plan API."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from diet_planner.domain.context import (
    MedicationSchedule,
    MedicationTiming,
    Sex,
    StageStatus,
    UserDietContext,
)
from diet_planner.domain.logs import MAX_SERVINGS, DayLog, TrackItem
from diet_planner.domain.plans import DayPlan, MealSlot, MealSuggestion, StageType
from diet_planner.services.planning import EARLIEST_PLAN_DATE
from diet_planner.services.preferences import PreferenceType


DATE_KEY_ERROR = "date_key must be a valid YYYY-MM-DD date"
EARLY_DATE_ERROR = f"date_key must be on or after {EARLIEST_PLAN_DATE.isoformat()}"


def is_date_key(value: str) -> bool:
    """Return True for a real calendar date written as YYYY-MM-DD."""
    try:
        return date.fromisoformat(value).isoformat() == value
    except ValueError:
        return False


def _check_date_key(value: str) -> str:
    if not is_date_key(value):
        raise ValueError(DATE_KEY_ERROR)
    return value


class MedicationScheduleModel(BaseModel):
    """Medication taken with a meal."""

    name: str
    timing: MedicationTiming
    category: str | None = None


class UserContextModel(BaseModel):
    """Personal and treatment attributes."""

    age: int | None = None
    sex: Sex = "unknown"
    height_cm: float | None = Field(default=None, allow_inf_nan=False)
    weight_kg: float | None = Field(default=None, allow_inf_nan=False)
    ethnicity: str | None = None
    cancer_type: str | None = None
    cancer_stage: str | None = None
    active_stage_type: StageType | None = None
    active_stage_label: str | None = None
    active_stage_order: int | None = None
    active_stage_status: StageStatus | None = None
    medication_schedules: list[MedicationScheduleModel] = Field(default_factory=list)

    def to_domain(self) -> UserDietContext:
        return UserDietContext(
            **self.model_dump(exclude={"medication_schedules"}),
            medication_schedules=tuple(
                MedicationSchedule(
                    name=schedule.name,
                    timing=schedule.timing,
                    category=schedule.category,
                )
                for schedule in self.medication_schedules
            ),
        )


class TrackItemModel(BaseModel):
    """A tracked food item."""

    name: str
    eaten: bool = False
    not_eaten: bool = False
    servings: float = Field(default=1, gt=0, le=MAX_SERVINGS, allow_inf_nan=False)
    id: str | None = None
    is_manual: bool = False


class DayLogModel(BaseModel):
    """Tracked items for one day."""

    breakfast: list[TrackItemModel] = Field(default_factory=list)
    lunch: list[TrackItemModel] = Field(default_factory=list)
    dinner: list[TrackItemModel] = Field(default_factory=list)
    snack: list[TrackItemModel] = Field(default_factory=list)
    memo: str = ""
    medication_taken_ids: list[str] = Field(default_factory=list)

    def to_domain(self) -> DayLog:
        def items(models: list[TrackItemModel]) -> tuple[TrackItem, ...]:
            return tuple(TrackItem(**model.model_dump()) for model in models)

        return DayLog(
            breakfast=items(self.breakfast),
            lunch=items(self.lunch),
            dinner=items(self.dinner),
            snack=items(self.snack),
            memo=self.memo,
            medication_taken_ids=tuple(self.medication_taken_ids),
        )

    @classmethod
    def from_domain(cls, log: DayLog) -> "DayLogModel":
        def items(values: tuple[TrackItem, ...]) -> list[TrackItemModel]:
            return [
                TrackItemModel(
                    name=item.name,
                    eaten=item.eaten,
                    not_eaten=item.not_eaten,
                    servings=item.servings,
                    id=item.id,
                    is_manual=item.is_manual,
                )
                for item in values
            ]

        return cls(
            breakfast=items(log.breakfast),
            lunch=items(log.lunch),
            dinner=items(log.dinner),
            snack=items(log.snack),
            memo=log.memo,
            medication_taken_ids=list(log.medication_taken_ids),
        )


class PlanRequestModel(BaseModel):
    """Request body for planning one day."""

    date_key: str
    stage_type: StageType = "other"
    history_score: float | None = Field(
        default=None, ge=0, le=100, allow_inf_nan=False
    )
    context: UserContextModel | None = None
    medications: list[str] = Field(default_factory=list)
    preferences: list[PreferenceType] = Field(default_factory=list)
    user_id: UUID | None = None
    logs: dict[str, DayLogModel] = Field(default_factory=dict)

    @field_validator("date_key")
    @classmethod
    def validate_date_key(cls, value: str) -> str:
        _check_date_key(value)
        if date.fromisoformat(value) < EARLIEST_PLAN_DATE:
            raise ValueError(EARLY_DATE_ERROR)
        return value

    @field_validator("logs")
    @classmethod
    def validate_log_keys(cls, value: dict[str, DayLogModel]) -> dict[str, DayLogModel]:
        for key in value:
            _check_date_key(key)
        return value


class NutrientModel(BaseModel):
    carb: int
    protein: int
    fat: int


class MealModel(BaseModel):
    """A suggested meal."""

    slot: MealSlot
    rice_type: str
    main: str
    soup: str
    sides: list[str]
    summary: str
    caution_flour: str
    nutrient: NutrientModel
    recipe_name: str
    recipe_steps: list[str]

    @classmethod
    def from_domain(cls, meal: MealSuggestion) -> "MealModel":
        return cls(
            slot=meal.slot,
            rice_type=meal.rice_type,
            main=meal.main,
            soup=meal.soup,
            sides=list(meal.sides),
            summary=meal.summary,
            caution_flour=meal.caution_flour,
            nutrient=NutrientModel(
                carb=meal.nutrient.carb,
                protein=meal.nutrient.protein,
                fat=meal.nutrient.fat,
            ),
            recipe_name=meal.recipe_name,
            recipe_steps=list(meal.recipe_steps),
        )


class DayPlanModel(BaseModel):
    """Meals for one date."""

    date: str
    breakfast: MealModel
    lunch: MealModel
    dinner: MealModel
    snack: MealModel

    @classmethod
    def from_domain(cls, plan: DayPlan) -> "DayPlanModel":
        return cls(
            date=plan.date,
            breakfast=MealModel.from_domain(plan.breakfast),
            lunch=MealModel.from_domain(plan.lunch),
            dinner=MealModel.from_domain(plan.dinner),
            snack=MealModel.from_domain(plan.snack),
        )


class PlanResponse(BaseModel):
    plan: DayPlanModel
    notes: list[str]


class MonthPlansResponse(BaseModel):
    year: int
    month: int
    plans: list[DayPlanModel]


class StageGuideResponse(BaseModel):
    """Food and timing guidance for a treatment stage."""

    stage_type: StageType
    label: str
    help: list[str]
    caution: list[str]
    snack_timing: str
    coffee_timing: str


class PreferenceOptionModel(BaseModel):
    key: str
    label: str
    guide: str
