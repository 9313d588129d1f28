"""Recipe state storage: load, create, edit, and delete named recipes and their lines.

Each recipe owns its own ordered ingredient and packaging lists; nothing is
shared between recipes.  Quantities are written back exactly as entered.
"""

import logging
from typing import Optional

from bakers_price.core.defaults import new_ingredient, new_packaging, normalize_category
from bakers_price.core.quantity import Quantity
from bakers_price.db.database import get_connection
from bakers_price.db.models import Ingredient, Packaging, RecipeState

logger = logging.getLogger(__name__)

INGREDIENT_FIELDS = {
    "name", "category", "purchase_price", "purchase_quantity",
    "purchase_unit", "recipe_quantity", "recipe_unit",
}
PACKAGING_FIELDS = {"name", "purchase_price", "purchase_quantity", "quantity_used"}
SETTINGS_FIELDS = {"batch_yield", "profit_margin", "hourly_rate", "hours_spent"}


class RecipeNotFoundError(LookupError):
    pass


class EntryNotFoundError(LookupError):
    pass


def _row_to_ingredient(row) -> Ingredient:
    return Ingredient(
        id=row["id"],
        name=row["name"],
        category=normalize_category(row["category"]),
        purchase_price=row["purchase_price"],
        purchase_quantity=Quantity(row["purchase_quantity"]),
        purchase_unit=row["purchase_unit"],
        recipe_quantity=Quantity(row["recipe_quantity"]),
        recipe_unit=row["recipe_unit"],
    )


def _row_to_packaging(row) -> Packaging:
    return Packaging(
        id=row["id"],
        name=row["name"],
        purchase_price=row["purchase_price"],
        purchase_quantity=Quantity(row["purchase_quantity"]),
        quantity_used=Quantity(row["quantity_used"]),
    )


def _row_to_state(row, conn) -> RecipeState:
    """Convert a recipes row into a RecipeState, loading its lines in order."""
    state = RecipeState(
        name=row["name"],
        batch_yield=row["batch_yield"],
        profit_margin=row["profit_margin"],
        hourly_rate=row["hourly_rate"],
        hours_spent=row["hours_spent"],
    )
    state.ingredients = [
        _row_to_ingredient(r)
        for r in conn.execute(
            "SELECT * FROM ingredients WHERE recipe_name = ? ORDER BY position, rowid",
            (state.name,),
        ).fetchall()
    ]
    state.packaging = [
        _row_to_packaging(r)
        for r in conn.execute(
            "SELECT * FROM packaging WHERE recipe_name = ? ORDER BY position, rowid",
            (state.name,),
        ).fetchall()
    ]
    return state


def _insert_ingredient(conn, recipe_name: str, ing: Ingredient, position: int = None) -> None:
    if position is None:
        position = _next_position(conn, "ingredients", recipe_name)
    conn.execute(
        """INSERT INTO ingredients
           (id, recipe_name, position, name, category, purchase_price,
            purchase_quantity, purchase_unit, recipe_quantity, recipe_unit)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (ing.id, recipe_name, position, ing.name, normalize_category(ing.category),
         ing.purchase_price, str(ing.purchase_quantity), ing.purchase_unit,
         str(ing.recipe_quantity), ing.recipe_unit),
    )


def _insert_packaging(conn, recipe_name: str, item: Packaging, position: int = None) -> None:
    if position is None:
        position = _next_position(conn, "packaging", recipe_name)
    conn.execute(
        """INSERT INTO packaging
           (id, recipe_name, position, name, purchase_price, purchase_quantity, quantity_used)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (item.id, recipe_name, position, item.name, item.purchase_price,
         str(item.purchase_quantity), str(item.quantity_used)),
    )


def _next_position(conn, table: str, recipe_name: str) -> int:
    row = conn.execute(
        f"SELECT COALESCE(MAX(position), -1) + 1 AS pos FROM {table} WHERE recipe_name = ?",
        (recipe_name,),
    ).fetchone()
    return row["pos"]


def _require_recipe(conn, name: str) -> None:
    if not conn.execute("SELECT 1 FROM recipes WHERE name = ?", (name,)).fetchone():
        raise RecipeNotFoundError(f"Recipe not found: {name}")


# ── Recipes ───────────────────────────────────────────────────────────────────

def get_all() -> list[RecipeState]:
    """Return all recipes in tab order."""
    conn = get_connection()
    try:
        rows = conn.execute("SELECT * FROM recipes ORDER BY position, name").fetchall()
        return [_row_to_state(r, conn) for r in rows]
    finally:
        conn.close()


def get_states() -> dict[str, RecipeState]:
    """Return every recipe keyed by name."""
    return {state.name: state for state in get_all()}


def get(name: str) -> Optional[RecipeState]:
    """Return a single recipe with its lines, or None if not found."""
    conn = get_connection()
    try:
        row = conn.execute("SELECT * FROM recipes WHERE name = ?", (name,)).fetchone()
        return _row_to_state(row, conn) if row else None
    finally:
        conn.close()


def require(name: str) -> RecipeState:
    """Like get(), but raises RecipeNotFoundError instead of returning None."""
    state = get(name)
    if state is None:
        raise RecipeNotFoundError(f"Recipe not found: {name}")
    return state


def add_recipe(name: str) -> RecipeState:
    """Create an empty recipe with default batch settings.  Names must be unique."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Recipe name is required")
    state = RecipeState(name=name)
    conn = get_connection()
    try:
        if conn.execute("SELECT 1 FROM recipes WHERE name = ?", (name,)).fetchone():
            raise ValueError(f"Recipe already exists: {name}")
        position = conn.execute("SELECT COALESCE(MAX(position), -1) + 1 FROM recipes").fetchone()[0]
        conn.execute(
            """INSERT INTO recipes (name, position, batch_yield, profit_margin, hourly_rate, hours_spent)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (name, position, state.batch_yield, state.profit_margin,
             state.hourly_rate, state.hours_spent),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Created recipe %s", name)
    return state


def delete_recipe(name: str) -> None:
    """Delete a recipe. Its ingredients and packaging are cascade-deleted by the DB."""
    conn = get_connection()
    try:
        _require_recipe(conn, name)
        conn.execute("DELETE FROM recipes WHERE name = ?", (name,))
        conn.commit()
    finally:
        conn.close()


def update_settings(name: str, **changes) -> RecipeState:
    """Update batch yield, profit margin, hourly rate, and/or hours spent.

    batch_yield is clamped to at least 1 item per batch.
    """
    unknown = set(changes) - SETTINGS_FIELDS
    if unknown:
        raise ValueError(f"Unknown recipe settings: {', '.join(sorted(unknown))}")
    if changes.get("batch_yield") is not None:
        changes["batch_yield"] = max(1, int(changes["batch_yield"]))
    changes = {k: v for k, v in changes.items() if v is not None}

    conn = get_connection()
    try:
        _require_recipe(conn, name)
        if changes:
            assignments = ", ".join(f"{col}=?" for col in changes)
            conn.execute(
                f"UPDATE recipes SET {assignments} WHERE name=?",
                (*changes.values(), name),
            )
            conn.commit()
    finally:
        conn.close()
    return require(name)


def replace_all(states: list[RecipeState]) -> None:
    """Replace every stored recipe with the given states, in the given order."""
    conn = get_connection()
    try:
        conn.execute("DELETE FROM recipes")
        for position, state in enumerate(states):
            conn.execute(
                """INSERT INTO recipes (name, position, batch_yield, profit_margin, hourly_rate, hours_spent)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (state.name, position, max(1, int(state.batch_yield)), state.profit_margin,
                 state.hourly_rate, state.hours_spent),
            )
            for i, ing in enumerate(state.ingredients):
                _insert_ingredient(conn, state.name, ing, position=i)
            for i, item in enumerate(state.packaging):
                _insert_packaging(conn, state.name, item, position=i)
        conn.commit()
    finally:
        conn.close()


# ── Ingredients ───────────────────────────────────────────────────────────────

def get_ingredient(recipe_name: str, ingredient_id: str) -> Ingredient:
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM ingredients WHERE recipe_name = ? AND id = ?",
            (recipe_name, ingredient_id),
        ).fetchone()
    finally:
        conn.close()
    if row is None:
        raise EntryNotFoundError(f"Ingredient not found: {ingredient_id}")
    return _row_to_ingredient(row)


def add_ingredient(recipe_name: str, category: str = "dry") -> Ingredient:
    """Append a blank ingredient in the given category and return it."""
    ing = new_ingredient(category)
    append_ingredients(recipe_name, [ing])
    return ing


def append_ingredients(recipe_name: str, ingredients: list[Ingredient]) -> list[Ingredient]:
    """Append fully-formed ingredients to the end of a recipe, keeping their order."""
    conn = get_connection()
    try:
        _require_recipe(conn, recipe_name)
        for ing in ingredients:
            _insert_ingredient(conn, recipe_name, ing)
        conn.commit()
    finally:
        conn.close()
    return ingredients


def update_ingredient(recipe_name: str, ingredient_id: str, **changes) -> Ingredient:
    """Change one or more fields of an ingredient and return the updated record."""
    unknown = set(changes) - INGREDIENT_FIELDS
    if unknown:
        raise ValueError(f"Unknown ingredient fields: {', '.join(sorted(unknown))}")
    if "category" in changes:
        changes["category"] = normalize_category(changes["category"])
    for key in ("purchase_quantity", "recipe_quantity"):
        if key in changes:
            changes[key] = str(Quantity.coerce(changes[key]))

    conn = get_connection()
    try:
        _require_recipe(conn, recipe_name)
        if changes:
            assignments = ", ".join(f"{col}=?" for col in changes)
            cursor = conn.execute(
                f"UPDATE ingredients SET {assignments} WHERE recipe_name=? AND id=?",
                (*changes.values(), recipe_name, ingredient_id),
            )
            if cursor.rowcount == 0:
                raise EntryNotFoundError(f"Ingredient not found: {ingredient_id}")
            conn.commit()
    finally:
        conn.close()
    return get_ingredient(recipe_name, ingredient_id)


def remove_ingredient(recipe_name: str, ingredient_id: str) -> None:
    conn = get_connection()
    try:
        _require_recipe(conn, recipe_name)
        cursor = conn.execute(
            "DELETE FROM ingredients WHERE recipe_name = ? AND id = ?",
            (recipe_name, ingredient_id),
        )
        if cursor.rowcount == 0:
            raise EntryNotFoundError(f"Ingredient not found: {ingredient_id}")
        conn.commit()
    finally:
        conn.close()


# ── Packaging ─────────────────────────────────────────────────────────────────

def get_packaging(recipe_name: str, packaging_id: str) -> Packaging:
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM packaging WHERE recipe_name = ? AND id = ?",
            (recipe_name, packaging_id),
        ).fetchone()
    finally:
        conn.close()
    if row is None:
        raise EntryNotFoundError(f"Packaging not found: {packaging_id}")
    return _row_to_packaging(row)


def add_packaging(recipe_name: str) -> Packaging:
    """Append a blank packaging item; quantity used defaults to the batch yield."""
    state = require(recipe_name)
    item = new_packaging(state.batch_yield)
    conn = get_connection()
    try:
        _insert_packaging(conn, recipe_name, item)
        conn.commit()
    finally:
        conn.close()
    return item


def update_packaging(recipe_name: str, packaging_id: str, **changes) -> Packaging:
    unknown = set(changes) - PACKAGING_FIELDS
    if unknown:
        raise ValueError(f"Unknown packaging fields: {', '.join(sorted(unknown))}")
    for key in ("purchase_quantity", "quantity_used"):
        if key in changes:
            changes[key] = str(Quantity.coerce(changes[key]))

    conn = get_connection()
    try:
        _require_recipe(conn, recipe_name)
        if changes:
            assignments = ", ".join(f"{col}=?" for col in changes)
            cursor = conn.execute(
                f"UPDATE packaging SET {assignments} WHERE recipe_name=? AND id=?",
                (*changes.values(), recipe_name, packaging_id),
            )
            if cursor.rowcount == 0:
                raise EntryNotFoundError(f"Packaging not found: {packaging_id}")
            conn.commit()
    finally:
        conn.close()
    return get_packaging(recipe_name, packaging_id)


def remove_packaging(recipe_name: str, packaging_id: str) -> None:
    conn = get_connection()
    try:
        _require_recipe(conn, recipe_name)
        cursor = conn.execute(
            "DELETE FROM packaging WHERE recipe_name = ? AND id = ?",
            (recipe_name, packaging_id),
        )
        if cursor.rowcount == 0:
            raise EntryNotFoundError(f"Packaging not found: {packaging_id}")
        conn.commit()
    finally:
        conn.close()
