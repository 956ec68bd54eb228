"""Personal and treatment context used to tailor plans."""

from dataclasses import dataclass, field
from typing import Literal

MedicationTiming = Literal["breakfast", "lunch", "dinner"]
Sex = Literal["unknown", "female", "male", "other"]
StageStatus = Literal["planned", "active", "completed"]


@dataclass(frozen=True)
class MedicationSchedule:
    """A medication and the meal it is taken with."""

    name: str
    timing: MedicationTiming
    category: str | None = None


@dataclass(frozen=True)
class UserDietContext:
    """Optional personal attributes and the active treatment stage."""

    age: int | None = None
    sex: Sex = "unknown"
    height_cm: float | None = None
    weight_kg: float | None = None
    ethnicity: str | None = None
    cancer_type: str | None = None
    cancer_stage: str | None = None
    active_stage_type: str | None = None
    active_stage_label: str | None = None
    active_stage_order: int | None = None
    active_stage_status: StageStatus | None = None
    medication_schedules: tuple[MedicationSchedule, ...] = field(
        default_factory=tuple
    )

    @property
    def bmi(self) -> float | None:
        return compute_bmi(self.height_cm, self.weight_kg)


def compute_bmi(height_cm: float | None, weight_kg: float | None) -> float | None:
    """Return BMI rounded to one decimal, or None when inputs are unusable."""
    if not height_cm or not weight_kg or height_cm <= 0 or weight_kg <= 0:
        return None
    return round(weight_kg / (height_cm / 100) ** 2, 1)
