"""Stage-specific food and timing guidance."""

from dataclasses import dataclass

from diet_planner.services.nutrients import clamp, round_half_up


@dataclass(frozen=True)
class StageFoodGuide:
    help: tuple[str, ...]
    caution: tuple[str, ...]


@dataclass(frozen=True)
class SnackCoffeeTiming:
    snack: str
    coffee: str


_STAGE_GUIDES: dict[str, StageFoodGuide] = {
    "chemo": StageFoodGuide(
        help=("soft protein dishes", "warm fluids", "mild side dishes"),
        caution=(
            "raw foods (sashimi, tartare, raw egg)",
            "very spicy food",
            "greasy fried food",
        ),
    ),
    "radiation": StageFoodGuide(
        help=("water-rich foods", "soft porridge and soups", "lightly seasoned sides"),
        caution=("hot or coarse food", "irritating seasoning", "too much caffeine"),
    ),
    "hormone_therapy": StageFoodGuide(
        help=("vegetable sides", "beans and tofu", "multigrain rice"),
        caution=("high-sugar snacks", "late-night eating", "heavily processed food"),
    ),
    "surgery": StageFoodGuide(
        help=("protein sides", "staying hydrated", "easy-to-digest meals"),
        caution=("salty or irritating food", "overeating", "alcohol"),
    ),
}
_STAGE_GUIDES["chemo_2nd"] = _STAGE_GUIDES["chemo"]

_DEFAULT_GUIDE = StageFoodGuide(
    help=("a variety of vegetables", "multigrain rice", "moderate protein sides"),
    caution=(
        "too much flour or sugar",
        "overly salty food",
        "late-night eating habits",
    ),
)


def stage_food_guide(stage_type: str) -> StageFoodGuide:
    """Foods that help and foods to be careful with during a stage."""
    return _STAGE_GUIDES.get(stage_type, _DEFAULT_GUIDE)


def snack_coffee_timing(stage_type: str) -> SnackCoffeeTiming:
    if stage_type in ("chemo", "chemo_2nd"):
        return SnackCoffeeTiming(
            snack="Have a small snack 2-3 hours after lunch (14:00-16:00).",
            coffee="Drink coffee an hour after a meal, at most one cup a day.",
        )
    if stage_type == "radiation":
        return SnackCoffeeTiming(
            snack="Have a water-rich snack around 15:00.",
            coffee="Drink water alongside caffeine to avoid dehydration.",
        )
    return SnackCoffeeTiming(
        snack="Have a low-sugar snack around 15:00.",
        coffee="Drink coffee after breakfast or lunch and skip it in the evening.",
    )


def score_to_percentile(score: float) -> int:
    """Map an adherence score (0-100) to a display percentile (1-99)."""
    normalized = clamp(score, 0, 100)
    return int(clamp(round_half_up(35 + normalized * 0.6), 1, 99))
