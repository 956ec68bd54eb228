"""Supabase repository for tracked daily logs."""

import math
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from diet_planner.domain.logs import MAX_SERVINGS, DayLog, TrackItem
from diet_planner.domain.plans import SLOT_ORDER
from diet_planner.services.planning import DayLogRepository

DAY_LOGS_TABLE = "diet_daily_logs"
DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class SupabaseDayLogRepository(DayLogRepository):
    """Supabase implementation for daily logs."""

    client: Client

    def list_day_logs(
        self, user_id: UUID, start_key: str, end_key: str
    ) -> dict[str, DayLog]:
        """Return parsed logs in the inclusive date range."""
        response = (
            self.client.table(DAY_LOGS_TABLE)
            .select("date_key, log_payload")
            .eq("user_id", str(user_id))
            .gte("date_key", start_key)
            .lte("date_key", end_key)
            .order("date_key", desc=False)
            .execute()
        )
        logs: dict[str, DayLog] = {}
        for row in response.data or []:
            date_key = str(row.get("date_key") or "").strip()
            if not DATE_KEY_PATTERN.match(date_key):
                continue
            log = parse_day_log(row.get("log_payload"))
            if log is not None:
                logs[date_key] = log
        return logs

    def get_day_log(self, user_id: UUID, date_key: str) -> DayLog | None:
        """Return the log stored for one day."""
        response = (
            self.client.table(DAY_LOGS_TABLE)
            .select("log_payload")
            .eq("user_id", str(user_id))
            .eq("date_key", date_key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_day_log(response.data[0].get("log_payload"))

    def save_day_log(self, user_id: UUID, date_key: str, log: DayLog) -> None:
        """Insert or replace the log for one day."""
        response = (
            self.client.table(DAY_LOGS_TABLE)
            .upsert(
                {
                    "user_id": str(user_id),
                    "date_key": date_key,
                    "log_payload": day_log_payload(log),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,date_key",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save day log")


def day_log_payload(log: DayLog) -> dict[str, object]:
    """Serialize a log to the stored JSON shape."""
    return {
        "meals": {
            slot: [
                {
                    "id": item.id,
                    "name": item.name,
                    "eaten": item.eaten,
                    "notEaten": item.not_eaten,
                    "isManual": item.is_manual,
                    "servings": item.servings,
                }
                for item in log.items(slot)
            ]
            for slot in SLOT_ORDER
        },
        "memo": log.memo,
        "medicationTakenIds": list(log.medication_taken_ids),
    }


def parse_day_log(payload: object) -> DayLog | None:
    """Parse a stored payload; malformed items are skipped."""
    if not isinstance(payload, dict):
        return None
    meals = payload.get("meals")
    if not isinstance(meals, dict):
        return None
    memo = payload.get("memo")
    return DayLog(
        **{slot: _parse_items(meals.get(slot)) for slot in SLOT_ORDER},
        memo=memo if isinstance(memo, str) else "",
        medication_taken_ids=_parse_ids(payload.get("medicationTakenIds")),
    )


def _parse_ids(raw: object) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(value for value in raw if isinstance(value, str) and value)


def _parse_items(raw: object) -> tuple[TrackItem, ...]:
    if not isinstance(raw, list):
        return ()
    items = []
    for entry in raw:
        item = _parse_item(entry)
        if item is not None:
            items.append(item)
    return tuple(items)


def _parse_item(entry: object) -> TrackItem | None:
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    servings = entry.get("servings")
    item_id = entry.get("id")
    return TrackItem(
        name=name.strip(),
        eaten=entry.get("eaten") is True,
        not_eaten=entry.get("notEaten") is True,
        servings=float(servings) if _is_serving_count(servings) else 1,
        id=str(item_id) if item_id else None,
        is_manual=entry.get("isManual") is True,
    )


def _is_serving_count(value: object) -> bool:
    if not isinstance(value, int | float) or isinstance(value, bool):
        return False
    return math.isfinite(value) and 0 < value <= MAX_SERVINGS
