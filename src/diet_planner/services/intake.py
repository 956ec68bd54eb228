"""Correct today's plan from yesterday's tracked intake."""

import logging
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from diet_planner.domain.logs import DayLog, TrackItem
from diet_planner.domain.plans import (
    MAIN_SLOTS,
    SLOT_ORDER,
    STAGE_TYPE_LABELS,
    DayPlan,
    PlanAdjustment,
)
from diet_planner.services.nutrients import clamp, rebalance_nutrient, round_half_up

FLOUR_KEYWORDS = ("bread", "ramen", "noodle", "pasta", "pizza", "donut")
SUGAR_KEYWORDS = (
    "cake",
    "cookie",
    "chips",
    "chocolate",
    "soda",
    "ice cream",
    "syrup",
    "juice",
)
HEAVY_KEYWORDS = (
    "fried",
    "late-night",
    "pork hock",
    "bossam",
    "alcohol",
    "beer",
    "soju",
    "wine",
    "tripe",
)
PROTEIN_KEYWORDS = (
    "chicken",
    "fish",
    "salmon",
    "tofu",
    "egg",
    "bean",
    "yogurt",
    "soy milk",
)

RELIABLE_RECORD = 0.7
RELIABLE_THRESHOLD = 3
UNRELIABLE_THRESHOLD = 4
SKIPPED_MEALS_TRIGGER = 2
RICE_WORDS = ("rice", "porridge", "bowl")
SMALL_PORTION = "(small)"
PORTION_SEPARATOR = " · "

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntakeContext:
    """Stage and body measures that scale correction strength."""

    stage_type: str = "other"
    bmi: float | None = None


@dataclass(frozen=True)
class IntakeSignals:
    """Keyword counts and record quality derived from one day's log."""

    reliability: float
    threshold: int
    flour_sugar_count: int
    heavy_count: int
    protein_count: int
    skipped_meals: int
    eaten_count: int

    @property
    def overeat(self) -> bool:
        return self.flour_sugar_count + self.heavy_count >= self.threshold

    @property
    def undereat(self) -> bool:
        return not self.overeat and (
            self.skipped_meals >= SKIPPED_MEALS_TRIGGER or self.protein_count == 0
        )


def offset_date_key(date_key: str, days: int) -> str:
    """Shift a YYYY-MM-DD key by days, clamped to the calendar's range."""
    start = date.fromisoformat(date_key)
    try:
        return (start + timedelta(days=days)).isoformat()
    except OverflowError:
        return (date.min if days < 0 else date.max).isoformat()


def _normalize(text: str) -> str:
    return re.sub(r"\s+", "", text.lower())


def _item_name(raw_name: str) -> str:
    return raw_name.split(PORTION_SEPARATOR, 1)[0].strip()


def eaten_items(log: DayLog) -> list[TrackItem]:
    """Return every item marked eaten, in slot order."""
    return [item for slot in SLOT_ORDER for item in log.items(slot) if item.eaten]


def record_reliability(log: DayLog) -> float:
    """Share of logged items explicitly marked eaten or not eaten."""
    items = [item for slot in SLOT_ORDER for item in log.items(slot)]
    if not items:
        return 0.0
    return sum(1 for item in items if item.checked) / len(items)


def serving_count(item: TrackItem) -> int:
    """Whole servings an item counts for; missing or unusable values count as one."""
    servings = item.servings
    if not servings or not math.isfinite(servings):
        return 1
    return max(1, round_half_up(servings))


def count_keyword_servings(items: Iterable[TrackItem], keywords: Sequence[str]) -> int:
    """Count servings of items whose name contains any of the keywords."""
    normalized_keywords = [_normalize(keyword) for keyword in keywords]
    count = 0
    for item in items:
        name = _normalize(_item_name(item.name))
        if any(keyword in name for keyword in normalized_keywords):
            count += serving_count(item)
    return count


def assess_intake(log: DayLog) -> IntakeSignals:
    """Summarize a day's log into the signals that drive corrections."""
    eaten = eaten_items(log)
    reliability = record_reliability(log)
    skipped = sum(
        1 for slot in MAIN_SLOTS if not any(item.eaten for item in log.items(slot))
    )
    return IntakeSignals(
        reliability=reliability,
        threshold=(
            RELIABLE_THRESHOLD
            if reliability >= RELIABLE_RECORD
            else UNRELIABLE_THRESHOLD
        ),
        flour_sugar_count=count_keyword_servings(eaten, FLOUR_KEYWORDS)
        + count_keyword_servings(eaten, SUGAR_KEYWORDS),
        heavy_count=count_keyword_servings(eaten, HEAVY_KEYWORDS),
        protein_count=count_keyword_servings(eaten, PROTEIN_KEYWORDS),
        skipped_meals=skipped,
        eaten_count=len(eaten),
    )


def stage_risk_weight(stage_type: str) -> float:
    if stage_type in ("chemo", "chemo_2nd", "radiation"):
        return 1.15
    if stage_type == "surgery":
        return 1.1
    if stage_type in ("hormone_therapy", "medication", "targeted", "immunotherapy"):
        return 1.05
    return 1.0


def overeat_strength(context: IntakeContext, reliability: float) -> float:
    """Scale for the overeat correction, clamped to [0.65, 1.5]."""
    bmi_weight = 1.0
    if context.bmi is not None:
        if context.bmi >= 30:  # noqa: PLR2004
            bmi_weight = 1.3
        elif context.bmi >= 25:  # noqa: PLR2004
            bmi_weight = 1.18
        elif context.bmi < 18.5:  # noqa: PLR2004
            bmi_weight = 0.85
    reliability_weight = clamp(0.65 + reliability * 0.45, 0.65, 1.1)
    return clamp(
        stage_risk_weight(context.stage_type) * bmi_weight * reliability_weight,
        0.65,
        1.5,
    )


def undereat_strength(context: IntakeContext, reliability: float) -> float:
    """Scale for the undereat correction, clamped to [0.7, 1.6]."""
    bmi_weight = 1.0
    if context.bmi is not None:
        if context.bmi < 18.5:  # noqa: PLR2004
            bmi_weight = 1.25
        elif context.bmi >= 25:  # noqa: PLR2004
            bmi_weight = 0.9
    stage_weight = 1.0
    if context.stage_type == "surgery":
        stage_weight = 1.15
    elif context.stage_type in ("chemo", "chemo_2nd", "radiation"):
        stage_weight = 1.1
    reliability_weight = clamp(0.6 + reliability * 0.5, 0.6, 1.1)
    return clamp(stage_weight * bmi_weight * reliability_weight, 0.7, 1.6)


def _strength_note(strength: float, context: IntakeContext, reliability: float) -> str:
    stage_label = STAGE_TYPE_LABELS.get(context.stage_type, context.stage_type)
    bmi = f"{context.bmi:.1f}" if context.bmi else "not entered"
    return (
        f"Correction strength: {strength:.2f}x (treatment stage {stage_label}, "
        f"BMI {bmi}, record reliability {round_half_up(reliability * 100)}%)"
    )


def _smaller_rice(rice_type: str) -> str:
    if SMALL_PORTION in rice_type or not any(word in rice_type for word in RICE_WORDS):
        return rice_type
    return f"{rice_type} {SMALL_PORTION}"


def _rebalance_day(
    plan: DayPlan,
    meal_deltas: tuple[int, int],
    snack_deltas: tuple[int, int],
) -> DayPlan:
    for slot in MAIN_SLOTS:
        plan = plan.revise(
            slot, nutrient=rebalance_nutrient(plan.meal(slot).nutrient, *meal_deltas)
        )
    return plan.revise(
        "snack", nutrient=rebalance_nutrient(plan.snack.nutrient, *snack_deltas)
    )


def _correct_overeating(
    plan: DayPlan, context: IntakeContext, signals: IntakeSignals
) -> PlanAdjustment:
    strength = overeat_strength(context, signals.reliability)
    plan = _rebalance_day(
        plan,
        (round_half_up(-6 * strength), round_half_up(4 * strength)),
        (round_half_up(-8 * strength), round_half_up(5 * strength)),
    )
    for slot in MAIN_SLOTS:
        plan = plan.revise(slot, rice_type=_smaller_rice(plan.meal(slot).rice_type))
    plan = plan.revise(
        "snack",
        main="greek yogurt",
        sides=("mixed berries", "a few almonds"),
        soup="water",
        recipe_name="Overeating recovery snack",
        recipe_steps=(
            "Prepare one serving (90 g) of greek yogurt.",
            "Add only a handful (50-60 g) of berries.",
            "Limit almonds to five or six.",
            "Skip sugary drinks and have water instead.",
        ),
    )
    return PlanAdjustment(
        plan=plan,
        notes=[
            "Based on yesterday's log, today's plan lowers carbohydrates and "
            "sugar and centres on protein.",
            _strength_note(strength, context, signals.reliability),
        ],
    )


def _correct_undereating(
    plan: DayPlan, context: IntakeContext, signals: IntakeSignals
) -> PlanAdjustment:
    strength = undereat_strength(context, signals.reliability)
    plan = _rebalance_day(
        plan,
        (round_half_up(2 * strength), round_half_up(3 * strength)),
        (round_half_up(2 * strength), round_half_up(4 * strength)),
    )
    plan = plan.revise(
        "snack",
        main="unsweetened yogurt",
        sides=("half a banana",),
        soup="warm water",
        recipe_name="Missed-meal recovery snack",
        recipe_steps=(
            "Prepare one serving of unsweetened yogurt.",
            "Add half a banana to make up for missing energy.",
            "Eat slowly with warm water.",
        ),
    )
    return PlanAdjustment(
        plan=plan,
        notes=[
            "Yesterday's log showed missed meals or little protein, so today's "
            "plan adds recovery-focused choices.",
            _strength_note(strength, context, signals.reliability),
        ],
    )


def apply_intake_correction(
    date_key: str,
    plan: DayPlan,
    logs_by_date: Mapping[str, DayLog],
    context: IntakeContext,
) -> PlanAdjustment:
    """Adjust today's plan for over- or under-eating recorded yesterday."""
    log = logs_by_date.get(offset_date_key(date_key, -1))
    if log is None:
        return PlanAdjustment(plan=plan, notes=[])
    signals = assess_intake(log)
    if signals.eaten_count == 0:
        return PlanAdjustment(plan=plan, notes=[])
    if signals.overeat:
        _logger.debug("Overeat correction for %s: %s", date_key, signals)
        return _correct_overeating(plan, context, signals)
    if signals.undereat:
        _logger.debug("Undereat correction for %s: %s", date_key, signals)
        return _correct_undereating(plan, context, signals)
    return PlanAdjustment(plan=plan, notes=[])
