"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import FastAPI, HTTPException, Path, Query, Request, status

from diet_planner.api.schemas import (
    DATE_KEY_ERROR,
    DayLogModel,
    DayPlanModel,
    MonthPlansResponse,
    PlanRequestModel,
    PlanResponse,
    PreferenceOptionModel,
    StageGuideResponse,
    is_date_key,
)
from diet_planner.app_logging import configure_logging
from diet_planner.containers import AppContainer
from diet_planner.domain.plans import STAGE_TYPE_LABELS, StageType
from diet_planner.services.guides import snack_coffee_timing, stage_food_guide
from diet_planner.services.planning import PlanRequest
from diet_planner.services.preferences import PREFERENCE_OPTIONS


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/plans")
    async def create_plan(body: PlanRequestModel, request: Request) -> PlanResponse:
        """Plan one day using inline logs or the user's stored logs.

        Without an explicit history score the previous month's logs decide it.
        """
        state_container: AppContainer = request.app.state.container
        plan_request = PlanRequest(
            date_key=body.date_key,
            stage_type=body.stage_type,
            history_score=body.history_score,
            context=body.context.to_domain() if body.context else None,
            medications=tuple(body.medications),
            preferences=tuple(body.preferences),
        )
        service = state_container.plan_service
        if body.user_id is not None:
            adjustment = service.plan_for_user(body.user_id, plan_request)
        else:
            logs = {key: log.to_domain() for key, log in body.logs.items()}
            adjustment = service.plan_for_date(plan_request, logs)
        return PlanResponse(
            plan=DayPlanModel.from_domain(adjustment.plan), notes=adjustment.notes
        )

    @app.get("/plans/month/{year}/{month}")
    async def month_plans(
        request: Request,
        year: int = Path(ge=1, le=9999),
        month: int = Path(ge=1, le=12),
        stage_type: StageType = "other",
        history_score: float | None = Query(default=None, ge=0, le=100),
    ) -> MonthPlansResponse:
        """Return base plans for every day of a month."""
        state_container: AppContainer = request.app.state.container
        score = (
            history_score
            if history_score is not None
            else state_container.settings.default_history_score
        )
        plans = state_container.plan_service.month_plans(year, month, stage_type, score)
        return MonthPlansResponse(
            year=year,
            month=month,
            plans=[DayPlanModel.from_domain(plan) for plan in plans],
        )

    @app.get("/guides/{stage_type}")
    async def stage_guide(stage_type: StageType) -> StageGuideResponse:
        """Return food and snack/coffee guidance for a stage."""
        guide = stage_food_guide(stage_type)
        timing = snack_coffee_timing(stage_type)
        return StageGuideResponse(
            stage_type=stage_type,
            label=STAGE_TYPE_LABELS[stage_type],
            help=list(guide.help),
            caution=list(guide.caution),
            snack_timing=timing.snack,
            coffee_timing=timing.coffee,
        )

    @app.get("/preferences")
    async def preference_options() -> list[PreferenceOptionModel]:
        """Return the preference catalogue."""
        return [
            PreferenceOptionModel(
                key=option.key, label=option.label, guide=option.guide
            )
            for option in PREFERENCE_OPTIONS
        ]

    @app.get("/users/{user_id}/logs/{date_key}")
    async def get_day_log(
        user_id: UUID, date_key: str, request: Request
    ) -> DayLogModel:
        """Return a stored day log."""
        state_container: AppContainer = request.app.state.container
        _require_date_key(date_key)
        log = state_container.plan_service.get_day_log(user_id, date_key)
        if log is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return DayLogModel.from_domain(log)

    @app.put("/users/{user_id}/logs/{date_key}")
    async def put_day_log(
        user_id: UUID, date_key: str, body: DayLogModel, request: Request
    ) -> dict[str, str]:
        """Store a day log."""
        state_container: AppContainer = request.app.state.container
        _require_date_key(date_key)
        try:
            state_container.plan_service.record_day_log(
                user_id, date_key, body.to_domain()
            )
        except RuntimeError as exc:
            logger.exception("Failed to save day log", extra={"user_id": str(user_id)})
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY) from exc
        return {"status": "ok"}

    return app


def _require_date_key(date_key: str) -> None:
    if not is_date_key(date_key):
        raise HTTPException(status_code=422, detail=DATE_KEY_ERROR)
