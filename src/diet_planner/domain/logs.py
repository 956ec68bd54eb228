"""Domain models for tracked daily intake."""

from dataclasses import dataclass, field

from diet_planner.domain.plans import MealSlot

MAX_SERVINGS = 100


@dataclass(frozen=True)
class TrackItem:
    """A food item the user checked off (or not) for a meal."""

    name: str
    eaten: bool = False
    not_eaten: bool = False
    servings: float = 1
    id: str | None = None
    is_manual: bool = False

    @property
    def checked(self) -> bool:
        return self.eaten or self.not_eaten


@dataclass(frozen=True)
class DayLog:
    """Tracked items for each slot of a single day."""

    breakfast: tuple[TrackItem, ...] = field(default_factory=tuple)
    lunch: tuple[TrackItem, ...] = field(default_factory=tuple)
    dinner: tuple[TrackItem, ...] = field(default_factory=tuple)
    snack: tuple[TrackItem, ...] = field(default_factory=tuple)
    memo: str = ""
    medication_taken_ids: tuple[str, ...] = field(default_factory=tuple)

    def items(self, slot: MealSlot) -> tuple[TrackItem, ...]:
        """Return tracked items for a slot."""
        return getattr(self, slot)
