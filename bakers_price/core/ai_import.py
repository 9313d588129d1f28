"""Claude AI integration: extract ingredient lines from free-text recipes.

The model is asked for a JSON array of partial ingredient records
(INGREDIENT_SCHEMA).  Each record is normalized (units and categories mapped
to the canonical values) and completed with defaults by admit_ingredient()
before it can join a recipe.  Any provider failure is raised as
IngredientImportError so callers can show a retry message; stored recipe
state is never touched here.
"""

import json
import logging
import os
import re
from typing import Optional

import httpx

from bakers_price.config import get_setting
from bakers_price.core.defaults import new_id, normalize_category
from bakers_price.core.quantity import Quantity
from bakers_price.core.units import UNITS, normalize_unit
from bakers_price.db.models import Ingredient

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-opus-4-5-20251101"
RETRY_MESSAGE = "Could not parse recipe. Please try again or enter manually."


class IngredientImportError(Exception):
    """The AI provider failed or returned something that isn't an ingredient list."""


def _get_api_key() -> Optional[str]:
    """Retrieve the Claude API key from the settings table, then the environment."""
    return get_setting("claude_api_key") or os.environ.get("ANTHROPIC_API_KEY")


def _get_model() -> str:
    return os.environ.get("BAKERS_PRICE_AI_MODEL", DEFAULT_MODEL)


def _get_client():
    """Create and return an Anthropic client. Raises IngredientImportError if no API key is set."""
    import anthropic
    api_key = _get_api_key()
    if not api_key:
        raise IngredientImportError("Claude API key not set. Add it under Settings.")
    return anthropic.Anthropic(api_key=api_key)


# JSON template included in the prompt so Claude returns structured data.
INGREDIENT_SCHEMA = """
[
  {"name": "all-purpose flour", "category": "dry", "recipe_quantity": "2 1/4", "recipe_unit": "cup",
   "purchase_quantity": "2", "purchase_unit": "kg"},
  {"name": "eggs", "category": "wet", "recipe_quantity": "2", "recipe_unit": "pcs",
   "purchase_quantity": "12", "purchase_unit": "pcs"},
  {"name": "chocolate chips", "category": "additive", "recipe_quantity": "1", "recipe_unit": "cup"}
]
"""


def _build_prompt(text: str) -> str:
    return f"""Extract the ingredients from the following recipe text.
For each ingredient, identify:
1. name
2. category: "dry", "wet", or "additive".
   - dry: flour, sugar, salt, baking powder, spices.
   - wet: eggs, milk, water, oil, butter, extracts.
   - additive: optional mix-ins or toppings like chocolate chips, nuts, dried fruit, sprinkles, frosting.
3. recipe_quantity: the amount used, as a string (keep fractions like "1/2")
4. recipe_unit: one of {", ".join(UNITS)}

If you can estimate how the item is usually bought at a grocery store (e.g. 1 kg bags, 5 lb bags,
dozen eggs), include purchase_quantity (string) and purchase_unit. Never guess prices.

Return a JSON array matching this schema:
{INGREDIENT_SCHEMA}

Recipe text:
{text}

Return only the JSON array, wrapped in ```json``` code fences."""


def _extract_json(text: str):
    """Pull the JSON payload out of a model reply (fenced or raw)."""
    match = re.search(r"```(?:json)?\s*([\s\S]+?)\s*```", text)
    json_str = match.group(1) if match else text.strip()
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise IngredientImportError(f"AI response was not valid JSON: {e}") from e


def admit_ingredient(partial: dict) -> Ingredient:
    """Complete a partial ingredient record with defaults and canonical units/category.

    Omitted purchase fields default to 1 kg at price 0; the purchase unit falls
    back to the recipe unit when only that is known.  Unknown units become
    'pcs' and unknown categories become 'dry'.
    """
    def pick(key: str, alt: str):
        value = partial.get(key)
        return value if value not in (None, "") else partial.get(alt)

    recipe_unit_raw = pick("recipe_unit", "recipeUnit")
    purchase_unit_raw = pick("purchase_unit", "purchaseUnit") or recipe_unit_raw
    recipe_qty = pick("recipe_quantity", "recipeQuantity")
    purchase_qty = pick("purchase_quantity", "purchaseQuantity")

    return Ingredient(
        id=new_id(),
        name=str(partial.get("name") or "Unknown").strip(),
        category=normalize_category(partial.get("category")),
        purchase_price=0.0,
        purchase_quantity=Quantity.coerce(purchase_qty if purchase_qty not in (None, "") else "1"),
        purchase_unit=normalize_unit(purchase_unit_raw) if purchase_unit_raw else "kg",
        recipe_quantity=Quantity.coerce(recipe_qty if recipe_qty not in (None, "") else "0"),
        recipe_unit=normalize_unit(recipe_unit_raw) if recipe_unit_raw else "g",
    )


def parse_recipe_text(text: str) -> list[Ingredient]:
    """Send raw recipe text to Claude and get back admitted Ingredient records, in order."""
    if not text or not text.strip():
        return []
    client = _get_client()
    try:
        message = client.messages.create(
            model=_get_model(),
            max_tokens=2048,
            messages=[{"role": "user", "content": _build_prompt(text)}],
        )
        reply = message.content[0].text
    except Exception as e:
        logger.exception("Ingredient extraction request failed")
        raise IngredientImportError(str(e)) from e

    data = _extract_json(reply)
    if isinstance(data, dict):
        data = data.get("ingredients", [data])
    if not isinstance(data, list):
        raise IngredientImportError("AI response was not a list of ingredients")

    try:
        ingredients = [admit_ingredient(item) for item in data if isinstance(item, dict)]
    except (TypeError, ValueError, AttributeError) as e:
        raise IngredientImportError(f"AI response had unusable ingredient fields: {e}") from e
    logger.info("AI import extracted %d ingredient(s)", len(ingredients))
    return ingredients


def _page_text(html: str) -> str:
    """Strip a web page down to its visible text to keep the prompt small."""
    clean = re.sub(r"<(script|style)[^>]*>[\s\S]*?</\1>", "", html, flags=re.IGNORECASE)
    clean = re.sub(r"<[^>]+>", " ", clean)
    clean = re.sub(r"\s+", " ", clean).strip()
    if len(clean) > 12000:
        clean = clean[:12000] + "..."
    return clean


def parse_recipe_url(url: str) -> list[Ingredient]:
    """Fetch a recipe page and extract its ingredients."""
    try:
        response = httpx.get(url, follow_redirects=True, timeout=15)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise IngredientImportError(f"Failed to fetch URL: {e}") from e
    return parse_recipe_text(_page_text(response.text))
