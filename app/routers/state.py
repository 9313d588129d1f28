from fastapi import APIRouter, Body, HTTPException

from bakers_price.core import state_io

router = APIRouter(prefix="/state", tags=["state"])


@router.get("")
def state_export():
    return state_io.export_state()


@router.put("")
def state_import(document: dict = Body(...)):
    try:
        states = state_io.import_state(document)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"imported": [s.name for s in states]}
