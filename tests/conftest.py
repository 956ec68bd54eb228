"""Shared test fixtures."""

from dataclasses import dataclass, field
from uuid import UUID

import pytest

from diet_planner.config import Settings
from diet_planner.containers import AppContainer
from diet_planner.domain.logs import DayLog, TrackItem
from diet_planner.services.planning import DayLogRepository, DietPlanService


@dataclass
class InMemoryDayLogRepository(DayLogRepository):
    """In-memory day log repository for tests."""

    logs: dict[tuple[UUID, str], DayLog] = field(default_factory=dict)
    saved: list[tuple[UUID, str]] = field(default_factory=list)
    fail_saves: bool = False

    def list_day_logs(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, DayLog]:
        return {
            date_key: log
            for (owner, date_key), log in self.logs.items()
            if owner == user_id and start_key <= date_key <= end_key
        }

    def get_day_log(self, user_id: UUID, date_key: str) -> DayLog | None:
        return self.logs.get((user_id, date_key))

    def save_day_log(self, user_id: UUID, date_key: str, log: DayLog) -> None:
        if self.fail_saves:
            raise RuntimeError("Failed to save day log")
        self.logs[(user_id, date_key)] = log
        self.saved.append((user_id, date_key))


def eaten(name: str, servings: float = 1) -> TrackItem:
    return TrackItem(name=name, eaten=True, servings=servings)


def skipped(name: str) -> TrackItem:
    return TrackItem(name=name, not_eaten=True)


def unchecked(name: str) -> TrackItem:
    return TrackItem(name=name)


def overeat_log() -> DayLog:
    """Four of five items checked, three flour/sugar hits."""
    return DayLog(
        breakfast=(eaten("toast bread"),),
        lunch=(eaten("ramen"),),
        dinner=(skipped("grilled fish"), unchecked("green salad")),
        snack=(eaten("chocolate cake"),),
    )


def missed_meals_log() -> DayLog:
    return DayLog(breakfast=(eaten("rice porridge"),))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def day_log_repository() -> InMemoryDayLogRepository:
    return InMemoryDayLogRepository()


@pytest.fixture
def plan_service(day_log_repository: InMemoryDayLogRepository) -> DietPlanService:
    return DietPlanService(repository=day_log_repository, no_repeat_days=7)


@pytest.fixture
def container(settings: Settings, plan_service: DietPlanService) -> AppContainer:
    return AppContainer(settings=settings, plan_service=plan_service)
