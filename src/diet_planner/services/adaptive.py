"""Suggest preference tags from the last two weeks of tracked intake."""

import logging
from collections.abc import Iterable, Mapping, Sequence

from diet_planner.domain.logs import DayLog, TrackItem
from diet_planner.services.intake import (
    FLOUR_KEYWORDS,
    PROTEIN_KEYWORDS,
    count_keyword_servings,
    eaten_items,
    offset_date_key,
)
from diet_planner.services.preferences import PreferenceType

LOOKBACK_DAYS = 14
MAX_SUGGESTIONS = 4
HIGH_FLOUR_SUGAR_SERVINGS = 8
LOW_PROTEIN_SERVINGS = 6
LOW_VEGETABLE_SERVINGS = 6
HIGH_SPICY_SERVINGS = 4
HEAVY_YESTERDAY_SERVINGS = 3

ADAPTIVE_FLOUR_KEYWORDS = (
    *FLOUR_KEYWORDS,
    "빵",
    "라면",
    "면",
    "파스타",
    "피자",
    "도넛",
)
ADAPTIVE_SUGAR_KEYWORDS = (
    "cake",
    "cookie",
    "chips",
    "chocolate",
    "soda",
    "ice cream",
    "케이크",
    "쿠키",
    "과자",
    "초콜릿",
    "탄산",
    "아이스크림",
)
ADAPTIVE_PROTEIN_KEYWORDS = (
    *PROTEIN_KEYWORDS,
    "닭",
    "생선",
    "연어",
    "두부",
    "달걀",
    "콩",
    "요거트",
    "두유",
)
VEGETABLE_KEYWORDS = (
    "broccoli",
    "cabbage",
    "spinach",
    "cucumber",
    "carrot",
    "mushroom",
    "salad",
    "vegetable",
    "브로콜리",
    "양배추",
    "시금치",
    "오이",
    "당근",
    "버섯",
    "샐러드",
    "채소",
)
SPICY_KEYWORDS = (
    "spicy",
    "buldak",
    "jjamppong",
    "tteokbokki",
    "매운",
    "불닭",
    "짬뽕",
    "떡볶이",
)
HEAVY_MEAL_KEYWORDS = (
    "deep-fried",
    "fried chicken",
    "late-night",
    "alcohol",
    "beer",
    "soju",
    "pork hock",
    "bossam",
    "튀김",
    "치킨",
    "야식",
    "술",
    "맥주",
    "소주",
    "족발",
    "보쌈",
)

_logger = logging.getLogger(__name__)


def _flour_sugar_servings(items: Sequence[TrackItem]) -> int:
    flour = count_keyword_servings(items, ADAPTIVE_FLOUR_KEYWORDS)
    return flour + count_keyword_servings(items, ADAPTIVE_SUGAR_KEYWORDS)


def recommend_adaptive_preferences(
    logs_by_date: Mapping[str, DayLog], date_key: str
) -> list[PreferenceType]:
    """Preference tags suggested by the fourteen days of logs before a date.

    Nothing is suggested when no item was eaten in that window. At most four
    tags are returned, in the order their triggers are checked.
    """
    lookback: list[TrackItem] = []
    for days in range(1, LOOKBACK_DAYS + 1):
        log = logs_by_date.get(offset_date_key(date_key, -days))
        if log is not None:
            lookback.extend(eaten_items(log))
    if not lookback:
        return []

    suggestions: list[PreferenceType] = []

    def add(*tags: PreferenceType) -> None:
        for tag in tags:
            if tag not in suggestions:
                suggestions.append(tag)

    if _flour_sugar_servings(lookback) >= HIGH_FLOUR_SUGAR_SERVINGS:
        add("healthy", "digestive")
    protein = count_keyword_servings(lookback, ADAPTIVE_PROTEIN_KEYWORDS)
    if protein < LOW_PROTEIN_SERVINGS:
        add("high_protein")
    if count_keyword_servings(lookback, VEGETABLE_KEYWORDS) < LOW_VEGETABLE_SERVINGS:
        add("vegetable")
    if count_keyword_servings(lookback, SPICY_KEYWORDS) >= HIGH_SPICY_SERVINGS:
        add("bland")

    yesterday = logs_by_date.get(offset_date_key(date_key, -1))
    if yesterday is not None:
        eaten = eaten_items(yesterday)
        heavy = _flour_sugar_servings(eaten) + count_keyword_servings(
            eaten, HEAVY_MEAL_KEYWORDS
        )
        if heavy >= HEAVY_YESTERDAY_SERVINGS:
            add("healthy", "digestive", "low_salt")

    _logger.debug("Adaptive preferences for %s: %s", date_key, suggestions)
    return suggestions[:MAX_SUGGESTIONS]


def merge_preferences(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate preference groups, keeping the first occurrence of each tag."""
    merged: list[str] = []
    for group in groups:
        for tag in group:
            if tag not in merged:
                merged.append(tag)
    return tuple(merged)
