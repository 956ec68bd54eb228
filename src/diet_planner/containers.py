"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from diet_planner.adapters.supabase_day_log_repository import (
    SupabaseDayLogRepository,
)
from diet_planner.config import Settings
from diet_planner.services.planning import DietPlanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    plan_service: DietPlanService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    plan_service = DietPlanService(
        repository=SupabaseDayLogRepository(supabase_client),
        no_repeat_days=resolved_settings.no_repeat_days,
        default_history_score=resolved_settings.default_history_score,
    )
    return AppContainer(settings=resolved_settings, plan_service=plan_service)
