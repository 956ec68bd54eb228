"""Tests for the plan orchestration service."""

from uuid import uuid4

from diet_planner.domain.context import UserDietContext
from diet_planner.domain.logs import DayLog
from diet_planner.services.adherence import planned_items
from diet_planner.services.planner import EASY_FLOUR_GUIDE, STRICT_FLOUR_GUIDE
from diet_planner.services.planning import (
    DietPlanService,
    PlanRequest,
    is_low_appetite_risk,
    previous_month_keys,
)
from tests.conftest import (
    InMemoryDayLogRepository,
    eaten,
    missed_meals_log,
    overeat_log,
    unchecked,
)


def test_optimize_runs_stages_in_order(plan_service: DietPlanService) -> None:
    request = PlanRequest(
        date_key="2024-03-15",
        context=UserDietContext(height_cm=170, weight_kg=80),
        preferences=("weight_loss",),
    )
    result = plan_service.optimize(request, {})

    assert result.plan.breakfast.rice_type == "brown rice (small)"
    assert result.notes[0].startswith("Used your height and weight")
    assert result.notes[-1].startswith("Lowered carbohydrates")


def test_recent_window_is_oldest_first(plan_service: DietPlanService) -> None:
    window = plan_service.recent_window(PlanRequest(date_key="2024-03-03"), {})

    assert [plan.date for plan in window] == [
        "2024-02-25",
        "2024-02-26",
        "2024-02-27",
        "2024-02-28",
        "2024-02-29",
        "2024-03-01",
        "2024-03-02",
    ]


def test_plan_for_date_is_deterministic(plan_service: DietPlanService) -> None:
    request = PlanRequest(date_key="2024-03-15", stage_type="chemo")

    first = plan_service.plan_for_date(request)
    second = plan_service.plan_for_date(request, {})

    assert first == second
    assert first.plan.date == "2024-03-15"


def test_plan_for_date_applies_intake_correction(
    plan_service: DietPlanService,
) -> None:
    result = plan_service.plan_for_date(
        PlanRequest(date_key="2024-03-15", stage_type="chemo"),
        {"2024-03-14": overeat_log()},
    )

    assert any(note.startswith("Correction strength") for note in result.notes)
    assert result.plan.breakfast.rice_type.endswith("(small)")


def test_plan_for_user_loads_recent_logs(
    plan_service: DietPlanService, day_log_repository: InMemoryDayLogRepository
) -> None:
    user_id = uuid4()
    day_log_repository.logs[(user_id, "2024-03-14")] = overeat_log()
    day_log_repository.logs[(uuid4(), "2024-03-14")] = missed_meals_log()

    result = plan_service.plan_for_user(
        user_id, PlanRequest(date_key="2024-03-15", stage_type="chemo")
    )
    expected = plan_service.plan_for_date(
        PlanRequest(date_key="2024-03-15", stage_type="chemo"),
        {"2024-03-14": overeat_log()},
    )

    assert result == expected


def test_low_appetite_risk() -> None:
    logs = {"2024-03-14": missed_meals_log()}

    assert is_low_appetite_risk("2024-03-15", logs, ())
    assert is_low_appetite_risk("2024-03-20", {}, ("appetite_boost",))
    assert not is_low_appetite_risk("2024-03-15", {}, ())
    assert not is_low_appetite_risk("2024-03-15", {"2024-03-14": overeat_log()}, ())


def test_month_plans_cover_every_day(plan_service: DietPlanService) -> None:
    plans = plan_service.month_plans(2024, 2, "other", 70)

    assert len(plans) == 29
    assert plans[-1].date == "2024-02-29"


def test_record_and_get_day_log(
    plan_service: DietPlanService, day_log_repository: InMemoryDayLogRepository
) -> None:
    user_id = uuid4()
    plan_service.record_day_log(user_id, "2024-03-14", overeat_log())

    assert day_log_repository.saved == [(user_id, "2024-03-14")]
    assert plan_service.get_day_log(user_id, "2024-03-14") == overeat_log()
    assert plan_service.get_day_log(user_id, "2024-03-13") is None


def _followed_breakfast(plan_service: DietPlanService, date_key: str) -> DayLog:
    """A log that ate exactly the planned breakfast and nothing else."""
    plan = plan_service.optimize(PlanRequest(date_key=date_key, history_score=70), {})
    names = planned_items(plan.breakfast, "breakfast")
    return DayLog(breakfast=tuple(eaten(name) for name in names))


def test_optimize_adds_preferences_from_recent_logs(
    plan_service: DietPlanService,
) -> None:
    logs = {
        "2024-03-10": DayLog(
            lunch=(
                eaten("ramen", 8),
                eaten("grilled chicken", 6),
                eaten("steamed broccoli", 6),
            )
        )
    }

    result = plan_service.optimize(PlanRequest(date_key="2024-03-15"), logs)

    assert result.notes[0] == (
        "Added Healthy, Easy to digest based on your last two weeks of logs."
    )
    assert result.plan.breakfast.main == "soft porridge"
    assert result.plan.breakfast.rice_type == "multigrain rice"

    chosen = plan_service.optimize(
        PlanRequest(date_key="2024-03-15", preferences=("healthy",)), logs
    )
    assert chosen.notes[0] == (
        "Added Easy to digest based on your last two weeks of logs."
    )


def test_previous_month_keys() -> None:
    assert previous_month_keys("2024-03-15")[0] == "2024-02-01"
    assert len(previous_month_keys("2024-03-15")) == 29
    assert previous_month_keys("2024-01-31")[-1] == "2023-12-31"
    assert previous_month_keys("0001-01-15") == []


def test_history_score_falls_back_without_logs(plan_service: DietPlanService) -> None:
    request = PlanRequest(date_key="2024-03-15")

    assert plan_service.previous_month_score(request, {}) == 70
    untouched = {"2024-02-10": DayLog(breakfast=(unchecked("rice"),))}
    assert plan_service.previous_month_score(request, untouched) == 70
    result = plan_service.plan_for_date(request)
    assert result.plan.breakfast.caution_flour == STRICT_FLOUR_GUIDE


def test_history_score_comes_from_previous_month_logs(
    plan_service: DietPlanService,
) -> None:
    request = PlanRequest(date_key="2024-03-15")
    logs = {
        "2024-02-10": _followed_breakfast(plan_service, "2024-02-10"),
        "2024-03-01": DayLog(memo="outside the previous month"),
    }

    assert plan_service.previous_month_score(request, logs) == 36
    logs["2024-02-20"] = DayLog(memo="tired")
    assert plan_service.previous_month_score(request, logs) == 18

    result = plan_service.plan_for_date(request, logs)
    assert result.plan.breakfast.caution_flour == EASY_FLOUR_GUIDE
    explicit = plan_service.plan_for_date(
        PlanRequest(date_key="2024-03-15", history_score=90), logs
    )
    assert explicit.plan.breakfast.caution_flour == STRICT_FLOUR_GUIDE


def test_plan_for_user_scores_previous_month(
    plan_service: DietPlanService, day_log_repository: InMemoryDayLogRepository
) -> None:
    user_id = uuid4()
    log = _followed_breakfast(plan_service, "2024-02-10")
    day_log_repository.logs[(user_id, "2024-02-10")] = log

    result = plan_service.plan_for_user(user_id, PlanRequest(date_key="2024-03-15"))

    assert result.plan.breakfast.caution_flour == EASY_FLOUR_GUIDE
    assert result == plan_service.plan_for_date(
        PlanRequest(date_key="2024-03-15"), {"2024-02-10": log}
    )


def test_dates_at_the_start_of_the_calendar_are_planned(
    plan_service: DietPlanService,
) -> None:
    result = plan_service.plan_for_date(PlanRequest(date_key="0001-01-03"))

    assert result.plan.date == "0001-01-03"
    window = plan_service.recent_window(PlanRequest(date_key="0001-01-03"), {})
    assert [plan.date for plan in window][-2:] == ["0001-01-01", "0001-01-02"]
