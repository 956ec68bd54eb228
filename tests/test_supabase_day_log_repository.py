"""Tests for the Supabase day log repository."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from diet_planner.adapters.supabase_day_log_repository import (
    SupabaseDayLogRepository,
    day_log_payload,
    parse_day_log,
)
from diet_planner.domain.logs import DayLog, TrackItem
from tests.conftest import overeat_log


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_save_day_log_upserts_payload() -> None:
    client = FakeSupabaseClient()
    table = client.table("diet_daily_logs")
    table.queue("upsert", [{"date_key": "2024-03-14"}])
    user_id = uuid4()

    SupabaseDayLogRepository(client).save_day_log(user_id, "2024-03-14", overeat_log())

    assert table.last_on_conflict == "user_id,date_key"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["user_id"] == str(user_id)
    assert table.last_payload["log_payload"] == day_log_payload(overeat_log())


def test_save_day_log_raises_without_data() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(RuntimeError):
        SupabaseDayLogRepository(client).save_day_log(uuid4(), "2024-03-14", DayLog())


def test_list_day_logs_skips_bad_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("diet_daily_logs")
    table.queue(
        "select",
        [
            {"date_key": "2024-03-13", "log_payload": day_log_payload(overeat_log())},
            {"date_key": "bad", "log_payload": day_log_payload(overeat_log())},
            {"date_key": "2024-03-14", "log_payload": "not a dict"},
        ],
    )
    user_id = uuid4()

    logs = SupabaseDayLogRepository(client).list_day_logs(
        user_id, "2024-03-07", "2024-03-15"
    )

    assert logs == {"2024-03-13": overeat_log()}
    assert ("gte", "date_key", "2024-03-07") in table.last_filters
    assert ("lte", "date_key", "2024-03-15") in table.last_filters
    assert ("eq", "user_id", str(user_id)) in table.last_filters


def test_get_day_log() -> None:
    client = FakeSupabaseClient()
    table = client.table("diet_daily_logs")
    table.queue("select", [{"log_payload": day_log_payload(overeat_log())}])
    repository = SupabaseDayLogRepository(client)

    assert repository.get_day_log(uuid4(), "2024-03-14") == overeat_log()
    assert repository.get_day_log(uuid4(), "2024-03-15") is None


def test_day_log_payload_shape() -> None:
    log = DayLog(
        lunch=(TrackItem(name="ramen", eaten=True, servings=2, id="a1"),),
        memo="tired",
        medication_taken_ids=("med-1",),
    )
    payload = day_log_payload(log)

    assert payload["meals"]["lunch"] == [
        {
            "id": "a1",
            "name": "ramen",
            "eaten": True,
            "notEaten": False,
            "isManual": False,
            "servings": 2,
        }
    ]
    assert payload["meals"]["breakfast"] == []
    assert payload["memo"] == "tired"
    assert payload["medicationTakenIds"] == ["med-1"]


def test_parse_day_log_is_lenient() -> None:
    payload = {
        "meals": {
            "breakfast": [
                {"name": "  rice porridge ", "eaten": True, "servings": -1},
                {"name": ""},
                "oops",
            ],
            "lunch": "not a list",
        },
        "memo": 5,
        "medicationTakenIds": ["med-1", 3, ""],
    }

    log = parse_day_log(payload)

    assert log == DayLog(
        breakfast=(TrackItem(name="rice porridge", eaten=True, servings=1),),
        medication_taken_ids=("med-1",),
    )
    assert parse_day_log(None) is None
    assert parse_day_log({"memo": "no meals"}) is None


def test_parse_day_log_resets_unusable_servings() -> None:
    payload = {
        "meals": {
            "lunch": [
                {"name": "ramen", "eaten": True, "servings": float("inf")},
                {"name": "rice", "eaten": True, "servings": 500},
                {"name": "tofu", "eaten": True, "servings": True},
                {"name": "egg", "eaten": True, "servings": 1.5},
            ]
        }
    }

    log = parse_day_log(payload)

    assert [item.servings for item in log.lunch] == [1, 1, 1, 1.5]
