from fastapi import APIRouter

from app.dependencies import packaging_payload, recipe_payload, set_fields
from app.schemas import PackagingUpdate
from bakers_price.core import recipes as recipes_core

router = APIRouter(prefix="/recipes/{name}/packaging", tags=["packaging"])


@router.post("", status_code=201)
def packaging_add(name: str):
    return packaging_payload(recipes_core.add_packaging(name))


@router.patch("/{packaging_id}")
def packaging_update(name: str, packaging_id: str, body: PackagingUpdate):
    item = recipes_core.update_packaging(name, packaging_id, **set_fields(body))
    return packaging_payload(item)


@router.delete("/{packaging_id}")
def packaging_delete(name: str, packaging_id: str):
    recipes_core.remove_packaging(name, packaging_id)
    return recipe_payload(recipes_core.require(name))
