from fastapi import APIRouter, HTTPException

from app.dependencies import recipe_payload, set_fields, summary_payload
from app.schemas import RecipeCreate, RecipeSettingsUpdate
from bakers_price.core import recipes as recipes_core

router = APIRouter(prefix="/recipes", tags=["recipes"])


# ── List & create ─────────────────────────────────────────────────────────────

@router.get("")
def recipes_list():
    return [
        {"name": state.name, "summary": summary_payload(state)}
        for state in recipes_core.get_all()
    ]


@router.post("", status_code=201)
def recipes_add(body: RecipeCreate):
    try:
        state = recipes_core.add_recipe(body.name)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return recipe_payload(state)


# ── Detail, settings, delete ──────────────────────────────────────────────────

@router.get("/{name}")
def recipe_detail(name: str):
    return recipe_payload(recipes_core.require(name))


@router.get("/{name}/summary")
def recipe_summary(name: str):
    return summary_payload(recipes_core.require(name))


@router.patch("/{name}")
def recipe_update(name: str, body: RecipeSettingsUpdate):
    state = recipes_core.update_settings(name, **set_fields(body))
    return recipe_payload(state)


@router.delete("/{name}", status_code=204)
def recipe_delete(name: str):
    recipes_core.delete_recipe(name)
