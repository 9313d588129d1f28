"""Cost engine: ingredient, packaging, labor, and batch pricing.

Every function here is pure and total: malformed quantities, mismatched units,
and zero purchase quantities degrade to a cost of 0 instead of raising, so a
half-filled recipe still produces a summary.  The reason for a zero is kept on
LineCost.status for callers that want to flag suspicious lines.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Optional

from bakers_price.core.quantity import Quantity
from bakers_price.core.units import COUNT_UNIT, conversion_factor
from bakers_price.db.models import Ingredient, Packaging, RecipeState

logger = logging.getLogger(__name__)

OK = "ok"
ZERO_PURCHASE_QUANTITY = "zero_purchase_quantity"
INCOMPATIBLE_UNITS = "incompatible_units"
MISSING_FACTOR = "missing_factor"
INVALID_PRICE = "invalid_price"


@dataclass(frozen=True)
class LineCost:
    """Cost of a single ingredient or packaging line.

    amount is always a number; status is OK or the reason amount fell back to 0.
    """

    id: Optional[str]
    amount: float
    status: str = OK

    @property
    def ok(self) -> bool:
        return self.status == OK


def _quantity(value) -> float:
    return Quantity.coerce(value).to_number()


def _price(value) -> Optional[float]:
    """Return the purchase price as a finite float, or None if it isn't one."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def cost_ingredient(ingredient: Ingredient) -> LineCost:
    """Price the amount of an ingredient used in one batch.

    Both quantities are normalized to grams or millilitres before the ratio is
    taken.  Pieces are only priced against pieces.  Mass and volume units are
    not cross-checked, so kg bought / cup used yields a number even though the
    ratio has no physical meaning.
    """
    price = _price(ingredient.purchase_price)
    if price is None:
        return LineCost(ingredient.id, 0, INVALID_PRICE)

    p_qty = _quantity(ingredient.purchase_quantity)
    r_qty = _quantity(ingredient.recipe_quantity)
    if p_qty == 0:
        return LineCost(ingredient.id, 0, ZERO_PURCHASE_QUANTITY)

    p_unit, r_unit = ingredient.purchase_unit, ingredient.recipe_unit
    if p_unit == COUNT_UNIT or r_unit == COUNT_UNIT:
        if p_unit != r_unit:
            return LineCost(ingredient.id, 0, INCOMPATIBLE_UNITS)
        return LineCost(ingredient.id, (price / p_qty) * r_qty)

    p_factor = conversion_factor(p_unit)
    r_factor = conversion_factor(r_unit)
    if not p_factor or not r_factor:
        return LineCost(ingredient.id, 0, MISSING_FACTOR)

    price_per_base = price / (p_qty * p_factor)
    usage_in_base = r_qty * r_factor
    return LineCost(ingredient.id, price_per_base * usage_in_base)


def ingredient_cost(ingredient: Ingredient) -> float:
    return cost_ingredient(ingredient).amount


def cost_packaging(item: Packaging) -> LineCost:
    """Price packaging as price per purchased unit times units used.  No conversion."""
    price = _price(item.purchase_price)
    if price is None:
        return LineCost(item.id, 0, INVALID_PRICE)
    p_qty = _quantity(item.purchase_quantity)
    u_qty = _quantity(item.quantity_used)
    if p_qty > 0:
        return LineCost(item.id, (price / p_qty) * u_qty)
    return LineCost(item.id, 0, ZERO_PURCHASE_QUANTITY)


def packaging_cost(item: Packaging) -> float:
    return cost_packaging(item).amount


def labor_cost(state: RecipeState) -> float:
    return state.hourly_rate * state.hours_spent


def _safe_total(entries, cost_fn, kind: str) -> float:
    """Sum per-entry costs; an entry that blows up counts as 0 and is logged."""
    total = 0
    for entry in entries:
        try:
            total += cost_fn(entry)
        except Exception:
            logger.warning("Skipping %s %r in batch total", kind, getattr(entry, "id", None), exc_info=True)
    return total


@dataclass(frozen=True)
class BatchSummary:
    """Totals for one batch.  Values are unrounded; rounding is a display concern."""

    ingredient_cost: float
    packaging_cost: float
    labor_cost: float
    total_batch_cost: float
    cost_per_item: float
    profit_amount: float
    total_batch_price: float
    price_per_item: float

    def breakdown(self) -> list[tuple[str, float]]:
        """Non-empty slices of the total batch price, e.g. for a pie chart."""
        slices = [
            ("Ingredients", self.ingredient_cost),
            ("Packaging", self.packaging_cost),
            ("Labor", self.labor_cost),
            ("Profit", self.profit_amount),
        ]
        return [(name, value) for name, value in slices if value > 0]

    def as_dict(self) -> dict:
        return asdict(self)


def summarize_batch(state: RecipeState) -> BatchSummary:
    """Aggregate ingredient, packaging, and labor costs into batch and per-item pricing."""
    ingredients_total = _safe_total(state.ingredients, ingredient_cost, "ingredient")
    packaging_total = _safe_total(state.packaging, packaging_cost, "packaging")
    labor = labor_cost(state)

    total_cost = ingredients_total + packaging_total + labor
    batch_yield = state.batch_yield
    cost_per_item = total_cost / batch_yield if batch_yield > 0 else 0
    profit = total_cost * (state.profit_margin / 100)
    total_price = total_cost + profit
    price_per_item = total_price / batch_yield if batch_yield > 0 else 0

    return BatchSummary(
        ingredient_cost=ingredients_total,
        packaging_cost=packaging_total,
        labor_cost=labor,
        total_batch_cost=total_cost,
        cost_per_item=cost_per_item,
        profit_amount=profit,
        total_batch_price=total_price,
        price_per_item=price_per_item,
    )
