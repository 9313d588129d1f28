from fastapi import APIRouter, Form

from app.dependencies import ingredient_payload, recipe_payload
from bakers_price.core import recipes as recipes_core
from bakers_price.core.ai_import import parse_recipe_text, parse_recipe_url

router = APIRouter(prefix="/recipes/{name}/ai", tags=["ai"])


def _admit(name: str, ingredients) -> dict:
    recipes_core.append_ingredients(name, ingredients)
    return {
        "added": [ingredient_payload(i) for i in ingredients],
        "recipe": recipe_payload(recipes_core.require(name)),
    }


# ── AI: paste text ────────────────────────────────────────────────────────────

@router.post("/parse-text")
def ai_parse_text(name: str, text: str = Form(...)):
    recipes_core.require(name)
    return _admit(name, parse_recipe_text(text))


# ── AI: from URL ──────────────────────────────────────────────────────────────

@router.post("/parse-url")
def ai_parse_url(name: str, url: str = Form(...)):
    recipes_core.require(name)
    return _admit(name, parse_recipe_url(url))
