from bakers_price.config import get_currency_symbol
from bakers_price.core.costing import cost_ingredient, cost_packaging, summarize_batch
from bakers_price.core.defaults import CATEGORIES
from bakers_price.core.state_io import ingredient_to_dict, packaging_to_dict
from bakers_price.db.models import Ingredient, Packaging, RecipeState


def set_fields(model) -> dict:
    """Fields the client actually sent, minus explicit nulls."""
    return {k: v for k, v in model.model_dump(exclude_unset=True).items() if v is not None}


def ingredient_payload(ing: Ingredient) -> dict:
    line = cost_ingredient(ing)
    return {**ingredient_to_dict(ing), "cost": line.amount, "cost_status": line.status}


def packaging_payload(item: Packaging) -> dict:
    line = cost_packaging(item)
    return {**packaging_to_dict(item), "cost": line.amount, "cost_status": line.status}


def summary_payload(state: RecipeState) -> dict:
    summary = summarize_batch(state)
    return {
        **summary.as_dict(),
        "profit_margin": state.profit_margin,
        "batch_yield": state.batch_yield,
        "breakdown": [{"name": n, "value": v} for n, v in summary.breakdown()],
        "currency_symbol": get_currency_symbol(),
    }


def recipe_payload(state: RecipeState) -> dict:
    """Full recipe view: settings, priced lines, ids grouped by category, and the summary."""
    return {
        "name": state.name,
        "batch_yield": state.batch_yield,
        "profit_margin": state.profit_margin,
        "hourly_rate": state.hourly_rate,
        "hours_spent": state.hours_spent,
        "ingredients": [ingredient_payload(i) for i in state.ingredients],
        "groups": {
            cat: [i.id for i in state.ingredients if i.category == cat] for cat in CATEGORIES
        },
        "packaging": [packaging_payload(p) for p in state.packaging],
        "summary": summary_payload(state),
    }
