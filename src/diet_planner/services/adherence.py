"""Score how closely a tracked day followed its plan."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from diet_planner.domain.logs import DayLog, TrackItem
from diet_planner.domain.plans import SLOT_ORDER, DayPlan, MealSlot, MealSuggestion
from diet_planner.services.intake import (
    PORTION_SEPARATOR,
    PROTEIN_KEYWORDS,
    count_keyword_servings,
    eaten_items,
)
from diet_planner.services.nutrients import clamp, round_half_up

MATCH_THRESHOLD = 0.68
CONTAINS_SCORE = 0.8
SUBSTITUTE_SCORE = 0.74
SLOT_EATEN_BONUS = 4
CONCERN_PENALTY = 10
EXCESS_PENALTY = 8
EXCESS_SERVINGS = 2
CHEMO_STAGES = frozenset({"chemo", "chemo_2nd"})

DAY_FLOUR_KEYWORDS = (
    "bread",
    "ramen",
    "noodle",
    "pasta",
    "pizza",
    "cake",
    "donut",
    "빵",
    "라면",
    "면",
    "파스타",
    "피자",
    "케이크",
    "도넛",
)
DAY_SUGAR_KEYWORDS = (
    "cake",
    "cookie",
    "chocolate",
    "ice cream",
    "chips",
    "soda",
    "케이크",
    "쿠키",
    "과자",
    "초콜릿",
    "탄산",
    "아이스크림",
)
CONCERN_KEYWORDS = (
    "sashimi",
    "raw beef",
    "raw egg",
    "alcohol",
    "soju",
    "beer",
    "deep-fried",
    "spicy",
    "생회",
    "육회",
    "날달걀",
    "술",
    "소주",
    "맥주",
    "튀김",
    "매운",
)
CHEMO_CONCERN_KEYWORDS = ("deep-fried", "spicy", "튀김", "매운")

_PORTION_PATTERN = re.compile(
    r"\b\d+(?:\.\d+)?\s*"
    r"(?:cups?|bowls?|pieces?|servings?|kg|mg|ml|g|l"
    r"|인분|개|컵|그릇|조각|잔|스푼|숟갈)\b",
    re.IGNORECASE,
)
_ITEM_SPLIT_PATTERN = re.compile(r"[,+/|]")
_NON_WORD_PATTERN = re.compile(r"[^0-9a-z가-힣]")


@dataclass(frozen=True)
class SubstituteGroup:
    """Foods that can stand in for one another when matching a plan."""

    key: str
    keywords: tuple[str, ...]


SUBSTITUTE_GROUPS: tuple[SubstituteGroup, ...] = (
    SubstituteGroup(
        "grain",
        (
            "rice",
            "porridge",
            "oat",
            "noodle",
            "sweet potato",
            "potato",
            "밥",
            "죽",
            "오트밀",
            "국수",
            "고구마",
            "감자",
        ),
    ),
    SubstituteGroup(
        "protein",
        (
            "chicken",
            "fish",
            "salmon",
            "mackerel",
            "tofu",
            "egg",
            "beef",
            "pork",
            "닭",
            "생선",
            "연어",
            "고등어",
            "두부",
            "달걀",
            "계란",
            "소고기",
            "돼지",
        ),
    ),
    SubstituteGroup(
        "vegetable",
        (
            "broccoli",
            "carrot",
            "cabbage",
            "mushroom",
            "spinach",
            "cucumber",
            "zucchini",
            "greens",
            "salad",
            "vegetable",
            "브로콜리",
            "당근",
            "양배추",
            "버섯",
            "시금치",
            "오이",
            "애호박",
            "나물",
            "샐러드",
            "채소",
        ),
    ),
    SubstituteGroup(
        "soup",
        (
            "soup",
            "stew",
            "broth",
            "seaweed",
            "soybean paste",
            "bean sprout",
            "국",
            "수프",
            "탕",
            "미역",
            "된장",
            "콩나물",
        ),
    ),
    SubstituteGroup(
        "snack",
        (
            "banana",
            "apple",
            "pear",
            "kiwi",
            "orange",
            "berries",
            "fruit",
            "yogurt",
            "soy milk",
            "nut",
            "바나나",
            "사과",
            "배",
            "키위",
            "오렌지",
            "과일",
            "요거트",
            "두유",
            "견과",
        ),
    ),
)
_SNACK_GROUP = SUBSTITUTE_GROUPS[-1]


@dataclass(frozen=True)
class DayAnalysis:
    """How a tracked day compared with its plan."""

    match_score: int
    daily_score: int
    concerns: tuple[str, ...] = field(default_factory=tuple)
    shortfalls: tuple[str, ...] = field(default_factory=tuple)
    excesses: tuple[str, ...] = field(default_factory=tuple)


def planned_items(meal: MealSuggestion, slot: MealSlot) -> list[str]:
    """Dish names a tracked log is expected to contain for a meal."""
    if slot == "snack":
        return [meal.summary]
    items: list[str] = []
    for name in (meal.rice_type, meal.main, meal.soup, *meal.sides):
        name = name.strip()
        if name and name not in items:
            items.append(name)
    return items


def strip_portion(name: str) -> str:
    return name.split(PORTION_SEPARATOR, 1)[0].strip()


def normalize_meal_name(name: str) -> str:
    """First dish of a free-text entry with quantities and extra spaces removed."""
    collapsed = " ".join(name.split())
    parts = (part.strip() for part in _ITEM_SPLIT_PATTERN.split(collapsed))
    first = next((part for part in parts if part), collapsed)
    return " ".join(_PORTION_PATTERN.sub(" ", first).split())


def compact_food_text(name: str) -> str:
    return _NON_WORD_PATTERN.sub("", name.lower())


def levenshtein(left: str, right: str) -> int:
    """Edit distance between two strings."""
    if not left:
        return len(right)
    if not right:
        return len(left)
    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            )
        previous = current
    return previous[-1]


def food_name_similarity(query: str, candidate: str) -> float:
    """Similarity in [0, 1] between two dish names."""
    left = compact_food_text(query)
    right = compact_food_text(candidate)
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0
    longest = max(len(left), len(right))
    scores = [1 - levenshtein(left, right) / longest]
    if left in right:
        scores.append(0.9 + min(len(left) / len(right), 0.08))
    if right in left:
        scores.append(0.84 + min(len(right) / len(left), 0.08))
    query_chars = set(left)
    overlap = sum(1 for char in right if char in query_chars)
    scores.append(overlap / longest * 0.85)
    return clamp(max(scores), 0, 1)


def find_substitute_group(name: str, slot: MealSlot) -> SubstituteGroup | None:
    if slot == "snack":
        return _SNACK_GROUP
    compact = compact_food_text(name)
    for group in SUBSTITUTE_GROUPS:
        if any(compact_food_text(keyword) in compact for keyword in group.keywords):
            return group
    return None


def replacement_match_score(expected: str, eaten: str, slot: MealSlot) -> float:
    """How well an eaten dish stands in for a planned one."""
    left = normalize_meal_name(expected)
    right = normalize_meal_name(eaten)
    if not left or not right:
        return 0.0
    score = food_name_similarity(left, right)
    compact_left = compact_food_text(left)
    compact_right = compact_food_text(right)
    if compact_left and compact_right and (
        compact_left in compact_right or compact_right in compact_left
    ):
        score = max(score, CONTAINS_SCORE)
    expected_group = find_substitute_group(left, slot)
    eaten_group = find_substitute_group(right, slot)
    if expected_group is not None and expected_group == eaten_group:
        score = max(score, SUBSTITUTE_SCORE)
    return clamp(score, 0, 1)


def covered_items(
    expected: Sequence[str], eaten: Sequence[TrackItem], slot: MealSlot
) -> int:
    """Planned dishes matched one-to-one by the best unused eaten item."""
    candidates = [strip_portion(item.name) for item in eaten]
    used: set[int] = set()
    covered = 0
    for name in expected:
        best_index = None
        best_score = 0.0
        for index, candidate in enumerate(candidates):
            if index in used:
                continue
            score = replacement_match_score(name, candidate, slot)
            if score > best_score:
                best_index, best_score = index, score
        if best_index is not None and best_score >= MATCH_THRESHOLD:
            used.add(best_index)
            covered += 1
    return covered


def match_score(plan: DayPlan, log: DayLog) -> int:
    """Percentage of planned dishes covered by what was eaten."""
    if not eaten_items(log):
        return 0
    total = 0
    covered = 0
    for slot in SLOT_ORDER:
        expected = planned_items(plan.meal(slot), slot)
        eaten = [item for item in log.items(slot) if item.eaten]
        total += len(expected)
        covered += covered_items(expected, eaten, slot)
    if total == 0:
        return 0
    return int(clamp(round_half_up(covered / total * 100), 0, 100))


def analyze_day(plan: DayPlan, log: DayLog, stage_type: str = "other") -> DayAnalysis:
    """Score a tracked day against its plan.

    The daily score starts from the plan match, earns a bonus for each slot
    with something eaten and loses points for risky or excessive foods. A day
    with nothing eaten scores zero.
    """
    eaten = eaten_items(log)
    if not eaten:
        return DayAnalysis(
            match_score=0,
            daily_score=0,
            shortfalls=("Nothing has been checked as eaten yet.",),
        )

    concerns: list[str] = []
    if count_keyword_servings(eaten, CONCERN_KEYWORDS):
        concerns.append("Raw, fried, spicy food or alcohol was logged.")
    if stage_type in CHEMO_STAGES and count_keyword_servings(
        eaten, CHEMO_CONCERN_KEYWORDS
    ):
        concerns.append("Fried or spicy food during chemotherapy can upset digestion.")

    shortfalls: list[str] = []
    if not count_keyword_servings(eaten, PROTEIN_KEYWORDS):
        shortfalls.append("Protein sides look short; add tofu, fish or eggs.")

    excesses: list[str] = []
    if count_keyword_servings(eaten, DAY_FLOUR_KEYWORDS) >= EXCESS_SERVINGS:
        excesses.append("Flour-based food was eaten more than once.")
    if count_keyword_servings(eaten, DAY_SUGAR_KEYWORDS) >= EXCESS_SERVINGS:
        excesses.append("Sugary food was eaten more than once.")

    matched = match_score(plan, log)
    eaten_slots = sum(
        1 for slot in SLOT_ORDER if any(item.eaten for item in log.items(slot))
    )
    daily = (
        matched
        + eaten_slots * SLOT_EATEN_BONUS
        - len(concerns) * CONCERN_PENALTY
        - len(excesses) * EXCESS_PENALTY
    )
    return DayAnalysis(
        match_score=matched,
        daily_score=int(clamp(daily, 0, 100)),
        concerns=tuple(concerns),
        shortfalls=tuple(shortfalls),
        excesses=tuple(excesses),
    )


def has_meaningful_log(log: DayLog) -> bool:
    """True when a log carries anything the user actually recorded."""
    if log.memo.strip() or log.medication_taken_ids:
        return True
    return any(
        item.eaten or item.not_eaten or item.is_manual or item.servings != 1
        for slot in SLOT_ORDER
        for item in log.items(slot)
    )
