"""Tests for anti-repetition."""

import pytest

from diet_planner.services.intake import offset_date_key
from diet_planner.services.planner import build_plan
from diet_planner.services.variety import (
    apply_anti_repetition,
    jaccard,
    max_similarity,
    normalize_dish_name,
    pick_next_non_repeating,
    tokenize,
)


def _window(date_key: str, days: int = 7):
    return [
        build_plan(offset_date_key(date_key, -offset), "other", 70)
        for offset in range(days, 0, -1)
    ]


def test_normalize_dish_name_strips_modifiers() -> None:
    assert normalize_dish_name("Seaweed soup (low-sodium)") == "seaweedsoup"
    assert normalize_dish_name("unsweetened yogurt") == "yogurt"
    assert normalize_dish_name("a few almonds") == "almonds"


def test_tokenize_adds_semantic_tokens() -> None:
    assert tokenize("grilled chicken breast") == {
        "menu:grilledchickenbreast",
        "protein:chicken",
        "method:grill",
    }
    assert tokenize("seaweed soup (low-sodium)") == {"menu:seaweedsoup", "dish:soup"}
    assert tokenize("  ") == set()


def test_jaccard() -> None:
    assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
    assert jaccard(set(), set()) == 0.0
    assert jaccard({"a"}, {"a"}) == 1.0


def test_max_similarity() -> None:
    plan = build_plan("2024-03-15", "other", 70)

    assert max_similarity(plan.lunch, [plan]) == 1.0
    assert max_similarity(plan.lunch, []) == 0.0


@pytest.mark.parametrize(
    ("current", "pool", "recent", "offset", "expected"),
    [
        ("b", ("a", "b", "c"), {"b"}, 0, "c"),
        ("z", ("a", "b"), {"z"}, 0, "a"),
        ("a", ("a", "b", "c"), set(), 1, "b"),
        ("a", ("a", "b", "c"), {"a", "b", "c"}, 2, "c"),
        ("", (), set(), 0, ""),
    ],
)
def test_pick_next_non_repeating(current, pool, recent, offset, expected) -> None:
    assert pick_next_non_repeating(current, pool, recent, offset) == expected


def test_empty_window_leaves_plan() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_anti_repetition(plan, [])

    assert result.plan == plan
    assert result.notes == []


def test_mains_avoid_recent_window() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    window = _window("2024-03-15")
    result = apply_anti_repetition(plan, window, 7)

    for slot in ("breakfast", "lunch", "dinner", "snack"):
        recent_mains = {day.meal(slot).main for day in window}
        assert result.plan.meal(slot).main not in recent_mains
    assert result.notes[0].startswith("Spread out the breakfast")
    assert "last 7 days" in result.notes[0]
    assert len(result.notes) == len(set(result.notes))


def test_rotation_keeps_nutrients_and_rice() -> None:
    plan = build_plan("2024-03-15", "chemo", 70)
    result = apply_anti_repetition(plan, _window("2024-03-15"))

    for slot in ("breakfast", "lunch", "dinner", "snack"):
        assert result.plan.meal(slot).nutrient == plan.meal(slot).nutrient
        assert result.plan.meal(slot).rice_type == plan.meal(slot).rice_type


def test_recipe_follows_rotated_main() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_anti_repetition(plan, _window("2024-03-15"))

    lunch = result.plan.lunch
    assert lunch.recipe_name == f"{lunch.main} set meal"


def test_window_is_clamped_to_at_least_one_day() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_anti_repetition(plan, [plan], 0)

    assert result.plan.breakfast.main != plan.breakfast.main
    assert "last 1 days" in result.notes[0]


def test_anti_repetition_is_deterministic() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    window = _window("2024-03-15")

    assert apply_anti_repetition(plan, window) == apply_anti_repetition(plan, window)


def test_duplicate_plan_clears_similarity_gate_or_reports() -> None:
    plan = build_plan("2024-03-15", "other", 70)
    result = apply_anti_repetition(plan, [plan])

    unresolved = any("menu pool is limited" in note for note in result.notes)
    for slot in ("breakfast", "lunch", "dinner", "snack"):
        assert unresolved or max_similarity(result.plan.meal(slot), [plan]) < 0.72
