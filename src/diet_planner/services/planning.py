"""Daily plan orchestration across all optimization stages."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from diet_planner.domain.context import UserDietContext
from diet_planner.domain.logs import DayLog
from diet_planner.domain.plans import DayPlan, PlanAdjustment
from diet_planner.services.adaptive import (
    LOOKBACK_DAYS,
    merge_preferences,
    recommend_adaptive_preferences,
)
from diet_planner.services.adherence import analyze_day, has_meaningful_log
from diet_planner.services.dinner_safety import (
    DinnerCarbSafetyContext,
    apply_dinner_carb_safety,
)
from diet_planner.services.intake import (
    IntakeContext,
    apply_intake_correction,
    eaten_items,
    offset_date_key,
)
from diet_planner.services.medications import apply_medications
from diet_planner.services.nutrients import round_half_up
from diet_planner.services.personalization import apply_context
from diet_planner.services.planner import (
    build_month_plans,
    build_plan,
    month_date_keys,
)
from diet_planner.services.preferences import apply_preferences, preference_label
from diet_planner.services.variety import apply_anti_repetition

LOW_APPETITE_EATEN_ITEMS = 2
BASELINE_HISTORY_SCORE = 70
EARLIEST_PLAN_DATE = date(1, 3, 1)

_logger = logging.getLogger(__name__)


class DayLogRepository(Protocol):
    """Persistence interface for tracked daily logs."""

    def list_day_logs(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, DayLog]:
        """Return logs keyed by date within the inclusive range."""

    def get_day_log(self, user_id: UUID, date_key: str) -> DayLog | None:
        """Return the log for a single day."""

    def save_day_log(self, user_id: UUID, date_key: str, log: DayLog) -> None:
        """Insert or replace the log for a day."""


@dataclass(frozen=True)
class PlanRequest:
    """Everything needed to plan one day for one user."""

    date_key: str
    stage_type: str = "other"
    history_score: float | None = None
    context: UserDietContext | None = None
    medications: tuple[str, ...] = field(default_factory=tuple)
    preferences: tuple[str, ...] = field(default_factory=tuple)


def is_low_appetite_risk(
    date_key: str, logs_by_date: Mapping[str, DayLog], preferences: tuple[str, ...]
) -> bool:
    """Appetite-boost preference, or two or fewer items eaten yesterday."""
    if "appetite_boost" in preferences:
        return True
    yesterday = logs_by_date.get(offset_date_key(date_key, -1))
    if yesterday is None:
        return False
    return len(eaten_items(yesterday)) <= LOW_APPETITE_EATEN_ITEMS


def previous_month_keys(date_key: str) -> list[str]:
    """Date keys of the calendar month before the one containing a date."""
    current = date.fromisoformat(date_key)
    if current.month == 1:
        if current.year == 1:
            return []
        return month_date_keys(current.year - 1, 12)
    return month_date_keys(current.year, current.month - 1)


@dataclass
class DietPlanService:
    """Runs the plan builder and every optimizer for a date."""

    repository: DayLogRepository
    no_repeat_days: int = 7
    default_history_score: float = BASELINE_HISTORY_SCORE

    def optimize(
        self, request: PlanRequest, logs_by_date: Mapping[str, DayLog]
    ) -> PlanAdjustment:
        """Return the adjusted plan for a date before anti-repetition."""
        date_key = request.date_key
        context = request.context
        bmi = context.bmi if context else None
        history_score = (
            self.default_history_score
            if request.history_score is None
            else request.history_score
        )
        plan = build_plan(date_key, request.stage_type, history_score)

        notes: list[str] = []
        adaptive = [
            tag
            for tag in recommend_adaptive_preferences(logs_by_date, date_key)
            if tag not in request.preferences
        ]
        if adaptive:
            labels = ", ".join(preference_label(tag) for tag in adaptive)
            notes.append(f"Added {labels} based on your last two weeks of logs.")
        preferences = merge_preferences(adaptive, request.preferences)

        for stage in (
            lambda current: apply_context(current, context),
            lambda current: apply_medications(current, request.medications),
            lambda current: apply_preferences(current, preferences),
            lambda current: apply_dinner_carb_safety(
                current,
                DinnerCarbSafetyContext(
                    bmi=bmi,
                    low_appetite_risk=is_low_appetite_risk(
                        date_key, logs_by_date, request.preferences
                    ),
                    weight_loss_preference="weight_loss" in request.preferences,
                ),
            ),
            lambda current: apply_intake_correction(
                date_key,
                current,
                logs_by_date,
                IntakeContext(stage_type=request.stage_type, bmi=bmi),
            ),
        ):
            adjustment = stage(plan)
            plan = adjustment.plan
            notes.extend(adjustment.notes)
        return PlanAdjustment(plan=plan, notes=notes)

    def previous_month_score(
        self, request: PlanRequest, logs_by_date: Mapping[str, DayLog]
    ) -> float:
        """Average daily score of the previous month's tracked days.

        Each recorded day is scored against its own plan, built from the
        baseline score. Without any recorded day the default score is used.
        """
        scores = []
        for date_key in previous_month_keys(request.date_key):
            log = logs_by_date.get(date_key)
            if log is None or not has_meaningful_log(log):
                continue
            day_request = replace(
                request,
                date_key=date_key,
                history_score=BASELINE_HISTORY_SCORE,
                preferences=(),
            )
            plan = self.optimize(day_request, logs_by_date).plan
            scores.append(analyze_day(plan, log, request.stage_type).daily_score)
        if not scores:
            return self.default_history_score
        return round_half_up(sum(scores) / len(scores))

    def recent_window(
        self, request: PlanRequest, logs_by_date: Mapping[str, DayLog]
    ) -> list[DayPlan]:
        """Adjusted plans of the preceding days, oldest first."""
        return [
            self.optimize(
                replace(request, date_key=offset_date_key(request.date_key, -days)),
                logs_by_date,
            ).plan
            for days in range(self.no_repeat_days, 0, -1)
        ]

    def plan_for_date(
        self, request: PlanRequest, logs_by_date: Mapping[str, DayLog] | None = None
    ) -> PlanAdjustment:
        """Return the fully optimized plan for a date with its notes.

        A request without a history score is scored from the previous month's
        logs.
        """
        logs = logs_by_date or {}
        if request.history_score is None:
            request = replace(
                request, history_score=self.previous_month_score(request, logs)
            )
        optimized = self.optimize(request, logs)
        varied = apply_anti_repetition(
            optimized.plan, self.recent_window(request, logs), self.no_repeat_days
        )
        _logger.info(
            "Planned %s for stage %s (history score %s) with %s notes",
            request.date_key,
            request.stage_type,
            request.history_score,
            len(optimized.notes) + len(varied.notes),
        )
        return PlanAdjustment(plan=varied.plan, notes=optimized.notes + varied.notes)

    def plan_for_user(self, user_id: UUID, request: PlanRequest) -> PlanAdjustment:
        """Load the user's logs and plan the requested date.

        The range covers the previous month plus every day the anti-repetition
        window and log-driven preferences look back on.
        """
        month_keys = previous_month_keys(request.date_key)
        earliest = month_keys[0] if month_keys else request.date_key
        start_key = min(
            offset_date_key(request.date_key, -(self.no_repeat_days + LOOKBACK_DAYS)),
            offset_date_key(earliest, -LOOKBACK_DAYS),
        )
        logs = self.repository.list_day_logs(user_id, start_key, request.date_key)
        return self.plan_for_date(request, logs)

    def month_plans(
        self, year: int, month: int, stage_type: str, history_score: float
    ) -> list[DayPlan]:
        """Return base plans for every day of a month."""
        return build_month_plans(year, month, stage_type, history_score)

    def get_day_log(self, user_id: UUID, date_key: str) -> DayLog | None:
        return self.repository.get_day_log(user_id, date_key)

    def record_day_log(self, user_id: UUID, date_key: str, log: DayLog) -> None:
        """Persist a tracked day log."""
        self.repository.save_day_log(user_id, date_key, log)
        _logger.info("Saved day log %s for %s", date_key, user_id)
