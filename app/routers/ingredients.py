from typing import Optional

from fastapi import APIRouter

from app.dependencies import ingredient_payload, recipe_payload, set_fields
from app.schemas import IngredientCreate, IngredientUpdate
from bakers_price.core import recipes as recipes_core

router = APIRouter(prefix="/recipes/{name}/ingredients", tags=["ingredients"])


@router.post("", status_code=201)
def ingredient_add(name: str, body: Optional[IngredientCreate] = None):
    category = body.category if body else "dry"
    ing = recipes_core.add_ingredient(name, category)
    return ingredient_payload(ing)


@router.patch("/{ingredient_id}")
def ingredient_update(name: str, ingredient_id: str, body: IngredientUpdate):
    ing = recipes_core.update_ingredient(name, ingredient_id, **set_fields(body))
    return ingredient_payload(ing)


@router.delete("/{ingredient_id}")
def ingredient_delete(name: str, ingredient_id: str):
    recipes_core.remove_ingredient(name, ingredient_id)
    return recipe_payload(recipes_core.require(name))
