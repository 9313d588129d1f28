"""Whole-state export and import as a single JSON-compatible document.

The document maps recipe names to their state:

    {"version": 1, "recipes": {"Cupcakes": {"batch_yield": 12, "ingredients": [...], ...}}}

Import also accepts a bare {name: state} mapping with camelCase keys
(purchasePrice, batchYield, ...), the shape saved by the browser version of
the calculator.  On import, ingredients without a category become 'dry'.
"""

import logging
import math

from bakers_price.core import recipes as recipes_core
from bakers_price.core.defaults import DEFAULT_CATEGORY, new_id, normalize_category
from bakers_price.core.quantity import Quantity
from bakers_price.db.models import Ingredient, Packaging, RecipeState

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _pick(data: dict, key: str, alt: str, default=None):
    """Read key from data, falling back to its camelCase spelling."""
    if key in data:
        return data[key]
    return data.get(alt, default)


def _number(value, field: str, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"{field} must be a finite number, got {value!r}")
    return number


def ingredient_to_dict(ing: Ingredient) -> dict:
    return {
        "id": ing.id,
        "name": ing.name,
        "category": ing.category,
        "purchase_price": ing.purchase_price,
        "purchase_quantity": str(ing.purchase_quantity),
        "purchase_unit": ing.purchase_unit,
        "recipe_quantity": str(ing.recipe_quantity),
        "recipe_unit": ing.recipe_unit,
    }


def packaging_to_dict(item: Packaging) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "purchase_price": item.purchase_price,
        "purchase_quantity": str(item.purchase_quantity),
        "quantity_used": str(item.quantity_used),
    }


def state_to_dict(state: RecipeState) -> dict:
    return {
        "batch_yield": state.batch_yield,
        "profit_margin": state.profit_margin,
        "hourly_rate": state.hourly_rate,
        "hours_spent": state.hours_spent,
        "ingredients": [ingredient_to_dict(i) for i in state.ingredients],
        "packaging": [packaging_to_dict(p) for p in state.packaging],
    }


def ingredient_from_dict(data: dict) -> Ingredient:
    if not isinstance(data, dict):
        raise ValueError("Each ingredient must be an object")
    category = data.get("category")
    return Ingredient(
        id=str(data.get("id") or new_id()),
        name=str(data.get("name") or ""),
        category=normalize_category(category) if category else DEFAULT_CATEGORY,
        purchase_price=_number(_pick(data, "purchase_price", "purchasePrice"), "purchase_price"),
        purchase_quantity=Quantity.coerce(_pick(data, "purchase_quantity", "purchaseQuantity", "1")),
        purchase_unit=_pick(data, "purchase_unit", "purchaseUnit") or "kg",
        recipe_quantity=Quantity.coerce(_pick(data, "recipe_quantity", "recipeQuantity", "0")),
        recipe_unit=_pick(data, "recipe_unit", "recipeUnit") or "g",
    )


def packaging_from_dict(data: dict) -> Packaging:
    if not isinstance(data, dict):
        raise ValueError("Each packaging item must be an object")
    return Packaging(
        id=str(data.get("id") or new_id()),
        name=str(data.get("name") or ""),
        purchase_price=_number(_pick(data, "purchase_price", "purchasePrice"), "purchase_price"),
        purchase_quantity=Quantity.coerce(_pick(data, "purchase_quantity", "purchaseQuantity", "1")),
        quantity_used=Quantity.coerce(_pick(data, "quantity_used", "quantityUsed", "0")),
    )


def state_from_dict(name: str, data: dict) -> RecipeState:
    if not isinstance(data, dict):
        raise ValueError(f"Recipe {name!r} must be an object")
    ingredients = data.get("ingredients") or []
    packaging = data.get("packaging") or []
    if not isinstance(ingredients, list) or not isinstance(packaging, list):
        raise ValueError(f"Recipe {name!r}: ingredients and packaging must be lists")
    defaults = RecipeState(name=name)
    return RecipeState(
        name=name,
        ingredients=[ingredient_from_dict(i) for i in ingredients],
        packaging=[packaging_from_dict(p) for p in packaging],
        batch_yield=max(1, int(_number(_pick(data, "batch_yield", "batchYield"), "batch_yield", defaults.batch_yield))),
        profit_margin=_number(_pick(data, "profit_margin", "profitMargin"), "profit_margin", defaults.profit_margin),
        hourly_rate=_number(_pick(data, "hourly_rate", "hourlyRate"), "hourly_rate", defaults.hourly_rate),
        hours_spent=_number(_pick(data, "hours_spent", "hoursSpent"), "hours_spent", defaults.hours_spent),
    )


def states_from_document(document: dict) -> list[RecipeState]:
    """Parse an exported document (or a bare name -> state mapping) into RecipeStates."""
    if not isinstance(document, dict):
        raise ValueError("State document must be an object")
    recipes = document["recipes"] if "recipes" in document else document
    if not isinstance(recipes, dict):
        raise ValueError("'recipes' must map recipe names to recipe state")
    states = [state_from_dict(name, data) for name, data in recipes.items()]

    # Line ids are unique across all recipes; copies made by hand keep the original's ids
    seen_ingredients, seen_packaging = set(), set()
    for state in states:
        _reassign_duplicate_ids(state.ingredients, seen_ingredients)
        _reassign_duplicate_ids(state.packaging, seen_packaging)
    return states


def _reassign_duplicate_ids(lines: list, seen: set) -> None:
    for line in lines:
        if line.id in seen:
            old_id, line.id = line.id, new_id()
            logger.info("Gave duplicate line id %r the new id %r", old_id, line.id)
        seen.add(line.id)


def export_state() -> dict:
    """Return every stored recipe as one document, in tab order."""
    return {
        "version": FORMAT_VERSION,
        "recipes": {state.name: state_to_dict(state) for state in recipes_core.get_all()},
    }


def import_state(document: dict) -> list[RecipeState]:
    """Replace all stored recipes with the contents of a document."""
    states = states_from_document(document)
    recipes_core.replace_all(states)
    logger.info("Imported %d recipe(s)", len(states))
    return states
