"""Curated menu pools and recipe templates shared by the planning stages."""

RICE_TYPES = (
    "brown rice",
    "multigrain rice",
    "oat rice",
    "barley rice",
    "black rice",
    "millet rice",
)
PROTEIN_MAINS = (
    "grilled chicken breast",
    "grilled salmon",
    "braised tofu",
    "steamed egg",
    "steamed white fish",
    "soybean bulgogi",
)
MEAT_MAINS = (
    "grilled chicken tenderloin",
    "low-fat beef stir-fry",
    "boiled pork tenderloin",
)
SOUPS = (
    "clear vegetable soup",
    "low-sodium soybean paste soup",
    "sweet pumpkin soup",
    "perilla mushroom soup",
    "clear tofu soup",
    "seaweed soup (low-sodium)",
)
SIDES = (
    "steamed broccoli",
    "sauteed mushrooms",
    "seasoned spinach",
    "seasoned cucumber",
    "stir-fried carrots",
    "sauteed zucchini",
)
SNACKS = (
    "unsweetened yogurt",
    "half a banana",
    "steamed sweet potato",
    "soy milk",
    "apple slices",
    "a few almonds",
)
SNACK_FRUITS = ("apple slices", "half a banana", "pear slices", "kiwi", "strawberries")

BREAKFAST_MAIN_VARIANTS = (
    "steamed egg and tofu",
    "steamed egg",
    "braised tofu",
    "steamed chicken tenderloin",
    "grilled chicken breast",
    "soft tofu rice bowl",
    "steamed white fish",
    "soft porridge",
)
LUNCH_MAIN_VARIANTS = (
    "grilled salmon",
    "grilled chicken breast",
    "braised tofu",
    "steamed chicken tenderloin",
    "steamed white fish",
    "soft tofu rice bowl",
    "grilled mackerel",
    "tofu steak",
)
DINNER_MAIN_VARIANTS = (
    "grilled chicken breast",
    "steamed white fish",
    "braised tofu",
    "grilled salmon",
    "steamed chicken tenderloin",
    "soft porridge",
    "steamed egg and tofu",
    "grilled mackerel",
)
SNACK_MAIN_VARIANTS = (
    "unsweetened yogurt",
    "greek yogurt",
    "unsweetened soy milk",
    "steamed sweet potato",
    "apple slices",
    "half a banana",
    "a few almonds",
    "mixed berries",
)
SNACK_SIDE_VARIANTS = (
    "apple slices",
    "half a banana",
    "mixed berries",
    "kiwi",
    "strawberries",
    "pear slices",
    "a few almonds",
    "a few walnuts",
)
SNACK_HYDRATION_VARIANTS = ("water", "warm water")

MAIN_POOLS: dict[str, tuple[str, ...]] = {
    "breakfast": BREAKFAST_MAIN_VARIANTS,
    "lunch": LUNCH_MAIN_VARIANTS,
    "dinner": DINNER_MAIN_VARIANTS,
    "snack": SNACK_MAIN_VARIANTS,
}

SEASONAL_FOOD: dict[int, tuple[str, ...]] = {
    1: ("napa cabbage", "radish", "spinach"),
    2: ("broccoli", "carrot", "cabbage"),
    3: ("wild chive", "shepherd's purse", "fatsia shoots"),
    4: ("asparagus", "water parsley", "mugwort"),
    5: ("cucumber", "lettuce", "green peas"),
    6: ("zucchini", "aubergine", "tomato"),
    7: ("corn", "cucumber", "peach"),
    8: ("aubergine", "tomato", "plum"),
    9: ("mushroom", "pear", "sweet potato"),
    10: ("kabocha", "radish", "apple"),
    11: ("broccoli", "napa cabbage", "persimmon"),
    12: ("radish", "cabbage", "tangerine"),
}

SEASONAL_SEPARATOR = " with "


def build_recipe(
    main: str, soup: str, side: str, seasonal: str
) -> tuple[str, tuple[str, ...]]:
    """Return a short recipe for a main meal."""
    return (
        f"{main} set meal",
        (
            f"Prep: wash {seasonal} and {side} and cut into bite-sized pieces.",
            f"Cook the {main} by grilling or steaming with very little oil.",
            f"Simmer the {soup} with little salt and mild seasoning.",
            "Eat slowly in the order rice, protein, then vegetable sides.",
        ),
    )


def build_snack_recipe(
    main: str, side: str, hydration: str, recipe_name: str | None = None
) -> tuple[str, tuple[str, ...]]:
    """Return a short recipe for a snack."""
    return (
        recipe_name or f"{main} snack",
        (
            f"Prepare a single serving of {main}.",
            f"Add a small portion of {side}.",
            f"Drink {hydration} alongside to stay hydrated.",
            "Skip added syrup or sugar and keep it plain.",
        ),
    )


def seasonal_from_side(side: str) -> str:
    """Recover the seasonal ingredient quoted in a side dish name."""
    if SEASONAL_SEPARATOR in side:
        seasonal = side.split(SEASONAL_SEPARATOR, 1)[1].strip()
        if seasonal:
            return seasonal
    return "vegetables"

