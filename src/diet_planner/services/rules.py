"""Ordered rule tables applied to immutable plans."""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from diet_planner.domain.plans import MAIN_SLOTS, DayPlan, PlanAdjustment

ContextT = TypeVar("ContextT")

_logger = logging.getLogger(__name__)


@dataclass
class NoteLog:
    """Collects explanation notes, ignoring exact duplicates."""

    items: list[str] = field(default_factory=list)

    def add(self, text: str) -> None:
        if text and text not in self.items:
            self.items.append(text)

    def extend(self, texts: Iterable[str]) -> None:
        for text in texts:
            self.add(text)


@dataclass(frozen=True)
class PlanRule(Generic[ContextT]):
    """A predicate, a plan transform and the notes it explains itself with."""

    name: str
    applies: Callable[[ContextT], bool]
    transform: Callable[[DayPlan, ContextT], DayPlan]
    notes: Callable[[ContextT], Sequence[str]]


def static_notes(*texts: str) -> Callable[[object], Sequence[str]]:
    """Return a notes callback that always yields the given texts."""
    return lambda _context: texts


def unchanged(plan: DayPlan, _context: object) -> DayPlan:
    """Transform that leaves the plan as it is."""
    return plan


def run_rules(
    plan: DayPlan, rules: Sequence[PlanRule[ContextT]], context: ContextT
) -> PlanAdjustment:
    """Apply every matching rule in order; later rules overwrite earlier ones."""
    notes = NoteLog()
    for rule in rules:
        if not rule.applies(context):
            continue
        plan = rule.transform(plan, context)
        notes.extend(rule.notes(context))
        _logger.debug("Applied plan rule %s to %s", rule.name, plan.date)
    return PlanAdjustment(plan=plan, notes=notes.items)


def revise_main_meals(plan: DayPlan, **fields: Sequence[object]) -> DayPlan:
    """Set fields on breakfast, lunch and dinner from per-meal triples.

    ``revise_main_meals(plan, main=("a", "b", "c"))`` sets breakfast main to
    "a", lunch main to "b" and dinner main to "c".
    """
    for index, slot in enumerate(MAIN_SLOTS):
        plan = plan.revise(
            slot, **{name: values[index] for name, values in fields.items()}
        )
    return plan


def replace_snack(  # noqa: PLR0913
    plan: DayPlan,
    *,
    main: str,
    sides: tuple[str, ...],
    soup: str,
    recipe_name: str | None = None,
    recipe_steps: tuple[str, ...] | None = None,
) -> DayPlan:
    """Swap the snack for a template, keeping its recipe unless one is given."""
    snack = plan.snack
    return plan.revise(
        "snack",
        main=main,
        sides=sides,
        soup=soup,
        recipe_name=recipe_name if recipe_name is not None else snack.recipe_name,
        recipe_steps=recipe_steps if recipe_steps is not None else snack.recipe_steps,
    )
