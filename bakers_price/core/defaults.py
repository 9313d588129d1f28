"""Default records and category helpers.

New ingredients and packaging start with placeholder values so a half-filled
form still prices to something sensible (usually 0).
"""

import uuid

from bakers_price.core.quantity import Quantity
from bakers_price.db.models import Ingredient, Packaging, RecipeState

CATEGORIES = ("dry", "wet", "additive")
DEFAULT_CATEGORY = "dry"

DEFAULT_RECIPE_NAMES = (
    "Cinnamon Rolls",
    "Cupcakes",
    "Breads",
    "Pastries",
    "Banana Bread",
)


def new_id() -> str:
    return uuid.uuid4().hex


def normalize_category(value) -> str:
    """Return a valid category, falling back to 'dry' for anything unknown."""
    key = str(value).lower().strip() if value is not None else ""
    return key if key in CATEGORIES else DEFAULT_CATEGORY


def new_ingredient(category: str = DEFAULT_CATEGORY) -> Ingredient:
    return Ingredient(
        id=new_id(),
        name="",
        category=normalize_category(category),
        purchase_price=0.0,
        purchase_quantity=Quantity("1"),
        purchase_unit="kg",
        recipe_quantity=Quantity("0"),
        recipe_unit="g",
    )


def new_packaging(batch_yield: int = 12) -> Packaging:
    """Packaging defaults to one item used per baked item."""
    return Packaging(
        id=new_id(),
        name="",
        purchase_price=0.0,
        purchase_quantity=Quantity("1"),
        quantity_used=Quantity(str(batch_yield)),
    )


def new_recipe_state(name: str) -> RecipeState:
    return RecipeState(name=name)
