"""Tests for stage guides."""

from diet_planner.services.guides import (
    score_to_percentile,
    snack_coffee_timing,
    stage_food_guide,
)


def test_stage_food_guide_shares_chemo_lines() -> None:
    assert stage_food_guide("chemo_2nd") == stage_food_guide("chemo")
    assert "alcohol" in stage_food_guide("surgery").caution
    assert stage_food_guide("diagnosis") == stage_food_guide("other")


def test_snack_coffee_timing_by_stage() -> None:
    assert "15:00" in snack_coffee_timing("radiation").snack
    assert "one cup" in snack_coffee_timing("chemo").coffee
    assert "evening" in snack_coffee_timing("targeted").coffee


def test_score_to_percentile_is_clamped() -> None:
    assert score_to_percentile(0) == 35
    assert score_to_percentile(50) == 65
    assert score_to_percentile(100) == 95
    assert score_to_percentile(-20) == 35
    assert score_to_percentile(250) == 95
