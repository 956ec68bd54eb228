"""Personal and treatment-context plan rules."""

import re
from collections.abc import Callable
from dataclasses import dataclass

from diet_planner.domain.context import UserDietContext
from diet_planner.domain.plans import DayPlan, PlanAdjustment, with_side
from diet_planner.services.rules import (
    PlanRule,
    replace_snack,
    revise_main_meals,
    run_rules,
    static_notes,
    unchanged,
)

SENIOR_AGE = 65
UNDERWEIGHT_BMI = 18.5
OVERWEIGHT_BMI = 25
ADVANCED_STAGE_LEVEL = 3
SOFT_TREATMENT_STAGES = frozenset({"chemo", "chemo_2nd", "radiation"})
CHEMO_STAGES = frozenset({"chemo", "chemo_2nd"})
CHEMO_STAGE_LABELS = ("chemo", "항암")


def normalize_for_match(text: str | None) -> str:
    """Lowercase text and drop all whitespace for keyword matching."""
    return re.sub(r"\s+", "", (text or "").lower())


def parse_cancer_stage_level(stage: str | None) -> int | None:
    """Return the first stage numeral 1-4 found in free text."""
    if not stage:
        return None
    match = re.search(r"[1-4]", stage)
    if match is None:
        return None
    return int(match.group(0))


@dataclass(frozen=True)
class CancerProfile:
    """Menu overrides for a family of cancer types."""

    label: str
    keywords: tuple[str, ...]
    transform: Callable[[DayPlan], DayPlan]
    notes: tuple[str, ...]


@dataclass(frozen=True)
class CancerProfileMatch:
    """A matched profile and the keyword that selected it."""

    profile: CancerProfile
    matched_keyword: str


def _breast_menu(plan: DayPlan) -> DayPlan:
    plan = revise_main_meals(
        plan,
        rice_type=("brown rice", "multigrain rice", "brown rice"),
        main=("steamed egg and tofu", "grilled salmon", "grilled chicken breast"),
        sides=(
            ("steamed broccoli", "sauteed mushrooms", "stir-fried carrots"),
            ("stir-fried cabbage", "seasoned spinach", "seasoned cucumber"),
            ("roasted vegetables", "sauteed mushrooms", "low-sodium seasoned greens"),
        ),
    )
    return replace_snack(
        plan,
        main="unsweetened yogurt",
        sides=("mixed berries", "a few walnuts"),
        soup="water",
        recipe_name="Breast cancer friendly snack",
        recipe_steps=(
            "Spoon a single serving of unsweetened yogurt.",
            "Add a small portion of berries and walnuts.",
            "Avoid sugary sauces and syrups.",
        ),
    )


def _digestive_menu(plan: DayPlan) -> DayPlan:
    plan = revise_main_meals(
        plan,
        main=("soft porridge", "soft tofu rice bowl", "steamed white fish"),
        soup=("sweet pumpkin soup", "clear tofu soup", "clear vegetable soup"),
        sides=(
            (
                "blanched broccoli",
                "sauteed zucchini",
                "low-sodium stir-fried vegetables",
            ),
            ("plain seasoned tofu", "sauteed mushrooms", "low-sodium seasoned greens"),
            ("low-sodium dressed vegetables", "seasoned spinach", "roasted vegetables"),
        ),
    )
    return replace_snack(
        plan,
        main="unsweetened soy milk",
        sides=("half a banana",),
        soup="warm water",
        recipe_name="Digestive cancer friendly snack",
        recipe_steps=(
            "Pour a small cup of unsweetened soy milk.",
            "Add half a banana on the side.",
            "If your stomach is unsettled, eat it slowly in small portions.",
        ),
    )


def _lung_menu(plan: DayPlan) -> DayPlan:
    return revise_main_meals(
        plan,
        main=("steamed egg and tofu", "steamed chicken tenderloin", "grilled mackerel"),
        soup=(
            "perilla mushroom soup",
            "clear vegetable soup",
            "seaweed soup (low-sodium)",
        ),
        sides=(
            ("steamed broccoli", "sauteed mushrooms", "stir-fried carrots"),
            ("stir-fried cabbage", "seasoned cucumber", "low-sodium seasoned greens"),
            ("roasted vegetables", "seasoned spinach", "low-sodium sauteed mushrooms"),
        ),
    )


def _hepatobiliary_menu(plan: DayPlan) -> DayPlan:
    return revise_main_meals(
        plan,
        rice_type=("oat rice", "barley rice", "brown rice"),
        main=("steamed chicken tenderloin", "braised tofu", "steamed white fish"),
        soup=("clear tofu soup", "clear vegetable soup", "seaweed soup (low-sodium)"),
        sides=(
            (
                "blanched broccoli",
                "sauteed zucchini",
                "low-sodium stir-fried vegetables",
            ),
            ("plain seasoned tofu", "sauteed mushrooms", "low-sodium seasoned greens"),
            ("roasted vegetables", "seasoned spinach", "low-sodium sauteed mushrooms"),
        ),
    )


def _hematologic_menu(plan: DayPlan) -> DayPlan:
    plan = revise_main_meals(
        plan,
        main=(
            "steamed egg and tofu",
            "steamed chicken tenderloin",
            "steamed white fish",
        ),
        soup=("clear tofu soup", "clear vegetable soup", "seaweed soup (low-sodium)"),
        sides=(
            (
                "blanched broccoli",
                "sauteed mushrooms",
                "low-sodium stir-fried vegetables",
            ),
            ("low-sodium seasoned greens", "roasted vegetables", "seasoned cucumber"),
            ("sauteed zucchini", "seasoned spinach", "low-sodium sauteed mushrooms"),
        ),
    )
    return replace_snack(
        plan,
        main="unsweetened yogurt",
        sides=("apple slices",),
        soup="warm water",
        recipe_name="Blood cancer friendly snack",
        recipe_steps=(
            "Spoon a single serving of unsweetened yogurt.",
            "Add only a little well-washed fruit.",
            "Keep the rest of the day's meals fully cooked.",
        ),
    )


def _thyroid_menu(plan: DayPlan) -> DayPlan:
    return revise_main_meals(
        plan,
        main=("steamed egg and tofu", "grilled chicken breast", "braised tofu"),
        soup=("clear tofu soup", "clear vegetable soup", "sweet pumpkin soup"),
        sides=(
            ("steamed broccoli", "stir-fried carrots", "sauteed mushrooms"),
            ("stir-fried cabbage", "low-sodium seasoned greens", "roasted vegetables"),
            ("sauteed zucchini", "sauteed mushrooms", "seasoned cucumber"),
        ),
    )


def _kidney_menu(plan: DayPlan) -> DayPlan:
    plan = revise_main_meals(
        plan,
        rice_type=("oat rice", "barley rice", "brown rice"),
        main=("steamed chicken tenderloin", "braised tofu", "steamed white fish"),
        soup=("clear tofu soup", "clear vegetable soup", "seaweed soup (low-sodium)"),
        sides=(
            (
                "low-sodium stir-fried vegetables",
                "sauteed mushrooms",
                "seasoned cucumber",
            ),
            ("plain seasoned tofu", "stir-fried cabbage", "low-sodium seasoned greens"),
            (
                "roasted vegetables",
                "stir-fried carrots",
                "low-sodium sauteed mushrooms",
            ),
        ),
    )
    return replace_snack(
        plan, main="unsweetened yogurt", sides=("apple slices",), soup="water"
    )


def _cervical_menu(plan: DayPlan) -> DayPlan:
    return revise_main_meals(
        plan,
        main=("steamed egg and tofu", "steamed chicken tenderloin", "grilled salmon"),
        soup=("perilla mushroom soup", "clear vegetable soup", "clear tofu soup"),
        sides=(
            ("steamed broccoli", "seasoned spinach", "stir-fried carrots"),
            ("stir-fried cabbage", "sauteed mushrooms", "low-sodium seasoned greens"),
            (
                "roasted vegetables",
                "seasoned cucumber",
                "low-sodium stir-fried vegetables",
            ),
        ),
    )


# Checked in order; the first profile with a matching keyword wins.
CANCER_PROFILES: tuple[CancerProfile, ...] = (
    CancerProfile(
        label="breast cancer",
        keywords=("breast", "유방"),
        transform=_breast_menu,
        notes=(
            "Tailored meals to breast cancer: low sugar, more vegetables, "
            "fish and tofu.",
        ),
    ),
    CancerProfile(
        label="digestive cancer",
        keywords=(
            "gastric",
            "stomach",
            "colon",
            "colorectal",
            "rectal",
            "bowel",
            "intestin",
            "pancrea",
            "esophag",
            "oesophag",
            "위암",
            "위장",
            "위식도",
            "대장",
            "결장",
            "직장",
            "소장",
            "췌장",
            "식도",
        ),
        transform=_digestive_menu,
        notes=(
            "Tailored meals to digestive cancers: soft, easy-to-digest, "
            "low-irritation dishes.",
        ),
    ),
    CancerProfile(
        label="lung cancer",
        keywords=("lung", "폐"),
        transform=_lung_menu,
        notes=(
            "Tailored meals to lung cancer: extra fluids and protein with "
            "gentle dishes.",
        ),
    ),
    CancerProfile(
        label="hepatobiliary cancer",
        keywords=(
            "liver",
            "hepat",
            "biliary",
            "bileduct",
            "gallbladder",
            "cholangio",
            "간암",
            "간세포",
            "담도",
            "담낭",
        ),
        transform=_hepatobiliary_menu,
        notes=(
            "Tailored meals to liver and biliary cancers: low-sodium, "
            "low-fat cooking.",
        ),
    ),
    CancerProfile(
        label="blood cancer",
        keywords=(
            "leukemia",
            "leukaemia",
            "lymphoma",
            "myeloma",
            "hematologic",
            "haematologic",
            "백혈병",
            "림프종",
            "골수종",
            "혈액",
        ),
        transform=_hematologic_menu,
        notes=(
            "Tailored meals to blood cancers: fully cooked, low-irritation dishes.",
        ),
    ),
    CancerProfile(
        label="thyroid cancer",
        keywords=("thyroid", "papillary", "follicular", "갑상선"),
        transform=_thyroid_menu,
        notes=(
            "Tailored meals to thyroid cancer with plain, lightly seasoned cooking.",
            "Whether iodine needs limiting depends on your treatment, so follow "
            "your care team on seaweed.",
        ),
    ),
    CancerProfile(
        label="kidney cancer",
        keywords=("kidney", "renal", "신장", "신세포", "신우"),
        transform=_kidney_menu,
        notes=(
            "Tailored meals to kidney cancer: low-sodium, low-irritation dishes.",
            "Kidney function results (eGFR, potassium, phosphorus) change what "
            "to limit, so confirm adjustments with your care team.",
        ),
    ),
    CancerProfile(
        label="cervical cancer",
        keywords=("cervical", "cervix", "자궁경부", "경부암"),
        transform=_cervical_menu,
        notes=(
            "Tailored meals to cervical cancer: balanced protein and vegetables "
            "with gentle dishes.",
        ),
    ),
)


def detect_cancer_profile(cancer_type: str | None) -> CancerProfileMatch | None:
    """Return the first cancer profile whose keyword appears in the text."""
    normalized = normalize_for_match(cancer_type)
    if not normalized:
        return None
    for profile in CANCER_PROFILES:
        for keyword in profile.keywords:
            if keyword in normalized:
                return CancerProfileMatch(profile=profile, matched_keyword=keyword)
    return None


@dataclass(frozen=True)
class _Facts:
    """Derived values the context rules test against."""

    context: UserDietContext
    age: int | None
    bmi: float | None
    cancer_type: str
    stage_level: int | None
    profile_match: CancerProfileMatch | None
    stage_type: str
    stage_label: str
    medication_timings: frozenset[str]

    @classmethod
    def from_context(cls, context: UserDietContext) -> "_Facts":
        age = context.age if context.age and context.age > 0 else None
        return cls(
            context=context,
            age=age,
            bmi=context.bmi,
            cancer_type=normalize_for_match(context.cancer_type),
            stage_level=parse_cancer_stage_level(context.cancer_stage),
            profile_match=detect_cancer_profile(context.cancer_type),
            stage_type=context.active_stage_type or "other",
            stage_label=normalize_for_match(context.active_stage_label),
            medication_timings=frozenset(
                schedule.timing
                for schedule in context.medication_schedules
                if schedule.name.strip()
            ),
        )


def _senior_menu(plan: DayPlan, _facts: _Facts) -> DayPlan:
    return revise_main_meals(
        plan,
        main=(
            "steamed egg and tofu",
            "steamed chicken tenderloin",
            "steamed white fish",
        ),
        soup=("perilla mushroom soup", "clear tofu soup", "sweet pumpkin soup"),
    )


def _underweight_menu(plan: DayPlan, _facts: _Facts) -> DayPlan:
    plan = revise_main_meals(
        plan,
        main=("steamed egg and tofu", "grilled chicken breast", "grilled salmon"),
    )
    return replace_snack(
        plan,
        main="greek yogurt",
        sides=("soy milk", "half a banana"),
        soup="water",
        recipe_name="Weight-support snack",
        recipe_steps=(
            "Spoon greek yogurt into a small bowl.",
            "Serve a small glass of unsweetened soy milk alongside.",
            "Add half a banana for extra energy.",
        ),
    )


def _overweight_menu(plan: DayPlan, _facts: _Facts) -> DayPlan:
    plan = revise_main_meals(plan, rice_type=("oat rice", "barley rice", "brown rice"))
    return replace_snack(
        plan,
        main="unsweetened yogurt",
        sides=("mixed berries", "a few nuts"),
        soup="water",
    )


def _female_sides(plan: DayPlan, _facts: _Facts) -> DayPlan:
    plan = plan.revise(
        "lunch", sides=with_side(plan.lunch.sides, 0, "steamed broccoli")
    )
    return plan.revise(
        "dinner", sides=with_side(plan.dinner.sides, 0, "sauteed mushrooms")
    )


def _male_sides(plan: DayPlan, _facts: _Facts) -> DayPlan:
    plan = plan.revise(
        "lunch", sides=with_side(plan.lunch.sides, 0, "steamed broccoli")
    )
    return plan.revise(
        "dinner", sides=with_side(plan.dinner.sides, 1, "seasoned spinach")
    )


def _cancer_profile_menu(plan: DayPlan, facts: _Facts) -> DayPlan:
    if facts.profile_match is None:
        return plan
    return facts.profile_match.profile.transform(plan)


def _advanced_stage_menu(plan: DayPlan, _facts: _Facts) -> DayPlan:
    return revise_main_meals(
        plan,
        main=("soft porridge", "tofu rice bowl", "steamed chicken tenderloin"),
        soup=("sweet pumpkin soup", "clear tofu soup", "perilla mushroom soup"),
    )


def _active_treatment_soups(plan: DayPlan, _facts: _Facts) -> DayPlan:
    return revise_main_meals(
        plan, soup=("clear tofu soup", "clear vegetable soup", "sweet pumpkin soup")
    )


def _later_chemo_snack(plan: DayPlan, _facts: _Facts) -> DayPlan:
    return replace_snack(
        plan,
        main="unsweetened yogurt",
        sides=("half a banana",),
        soup="warm water",
        recipe_name="Treatment-stage snack",
        recipe_steps=(
            "Prepare a small portion of unsweetened yogurt.",
            "Add half a banana to keep it light.",
            "Eat slowly with warm water.",
        ),
    )


_MEDICATION_SOUPS = {
    "breakfast": "clear tofu soup",
    "lunch": "clear vegetable soup",
    "dinner": "seaweed soup (low-sodium)",
}


def _medication_timing_soups(plan: DayPlan, facts: _Facts) -> DayPlan:
    for slot, soup in _MEDICATION_SOUPS.items():
        if slot in facts.medication_timings:
            plan = plan.revise(slot, soup=soup)
    return plan


def _is_later_chemo_stage(facts: _Facts) -> bool:
    order = facts.context.active_stage_order
    if not order or order < 2:  # noqa: PLR2004
        return False
    return (
        any(label in facts.stage_label for label in CHEMO_STAGE_LABELS)
        or facts.stage_type in CHEMO_STAGES
    )


CONTEXT_RULES: tuple[PlanRule[_Facts], ...] = (
    PlanRule(
        name="context:senior",
        applies=lambda f: f.age is not None and f.age >= SENIOR_AGE,
        transform=_senior_menu,
        notes=static_notes(
            "Reflected your age with softer dishes that are easy to chew and digest."
        ),
    ),
    PlanRule(
        name="context:underweight",
        applies=lambda f: f.bmi is not None and f.bmi < UNDERWEIGHT_BMI,
        transform=_underweight_menu,
        notes=static_notes(
            "Used your height and weight to add protein and snacks that help "
            "maintain weight."
        ),
    ),
    PlanRule(
        name="context:overweight",
        applies=lambda f: f.bmi is not None and f.bmi >= OVERWEIGHT_BMI,
        transform=_overweight_menu,
        notes=static_notes(
            "Used your height and weight to switch to higher-fiber grains and a "
            "lower-sugar snack."
        ),
    ),
    PlanRule(
        name="context:female",
        applies=lambda f: f.context.sex == "female",
        transform=_female_sides,
        notes=static_notes(
            "Put vegetable and protein balanced sides first for your profile."
        ),
    ),
    PlanRule(
        name="context:male",
        applies=lambda f: f.context.sex == "male",
        transform=_male_sides,
        notes=static_notes("Added more variety to vegetable sides for your profile."),
    ),
    PlanRule(
        name="context:background",
        applies=lambda f: bool((f.context.ethnicity or "").strip()),
        transform=unchanged,
        notes=lambda f: (
            f"Kept familiar rice-and-sides meals for your dietary background "
            f"({(f.context.ethnicity or '').strip()}).",
        ),
    ),
    PlanRule(
        name="context:cancer_profile",
        applies=lambda f: f.profile_match is not None,
        transform=_cancer_profile_menu,
        notes=lambda f: f.profile_match.profile.notes if f.profile_match else (),
    ),
    PlanRule(
        name="context:cancer_profile_missing",
        applies=lambda f: bool(f.cancer_type) and f.profile_match is None,
        transform=unchanged,
        notes=lambda f: (
            f"There is no dedicated profile for "
            f"{(f.context.cancer_type or '').strip()} yet, so the plan follows "
            f"the general safe diet and your treatment stage.",
        ),
    ),
    PlanRule(
        name="context:advanced_stage",
        applies=lambda f: f.stage_level is not None
        and f.stage_level >= ADVANCED_STAGE_LEVEL,
        transform=_advanced_stage_menu,
        notes=static_notes(
            "Reflected your cancer stage with gentler, recovery-focused dishes."
        ),
    ),
    PlanRule(
        name="context:active_treatment",
        applies=lambda f: f.context.active_stage_status == "active"
        and f.stage_type in SOFT_TREATMENT_STAGES,
        transform=_active_treatment_soups,
        notes=static_notes(
            "Your treatment is in progress, so soups were switched to gentle, "
            "low-irritation options."
        ),
    ),
    PlanRule(
        name="context:later_chemo_stage",
        applies=_is_later_chemo_stage,
        transform=_later_chemo_snack,
        notes=static_notes(
            "Made the snack gentler to match your treatment stage sequence."
        ),
    ),
    PlanRule(
        name="context:medication_timing",
        applies=lambda f: bool(f.medication_timings),
        transform=_medication_timing_soups,
        notes=static_notes(
            "Matched meals around your medication times with low-irritation soups."
        ),
    ),
)


def apply_context(plan: DayPlan, context: UserDietContext | None) -> PlanAdjustment:
    """Apply personal and treatment-context rules in their fixed order."""
    if context is None:
        return PlanAdjustment(plan=plan, notes=[])
    return run_rules(plan, CONTEXT_RULES, _Facts.from_context(context))
