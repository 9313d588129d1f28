from fastapi import APIRouter

from bakers_price.core.defaults import CATEGORIES
from bakers_price.core.units import UNIT_LABELS, UNITS, conversion_factor, is_mass, is_volume

router = APIRouter(tags=["units"])


def _family(unit: str) -> str:
    if is_mass(unit):
        return "mass"
    if is_volume(unit):
        return "volume"
    return "count"


@router.get("/units")
def units_list():
    """Units for the unit dropdowns, in display order."""
    return [
        {"unit": u, "label": UNIT_LABELS[u], "family": _family(u), "factor": conversion_factor(u)}
        for u in UNITS
    ]


@router.get("/categories")
def categories_list():
    return list(CATEGORIES)
