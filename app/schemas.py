from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, FiniteFloat

Unit = Literal["g", "kg", "oz", "lb", "ml", "l", "cup", "tbsp", "tsp", "pcs"]
Category = Literal["dry", "wet", "additive"]
QuantityText = Union[str, FiniteFloat]


class RecipeCreate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Croissants"])


class RecipeSettingsUpdate(BaseModel):
    # batch_yield below 1 is clamped to 1 by the core
    batch_yield: Optional[int] = Field(default=None, ge=0)
    profit_margin: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    hourly_rate: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    hours_spent: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class IngredientCreate(BaseModel):
    category: Category = "dry"


class IngredientUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[Category] = None
    purchase_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    purchase_quantity: Optional[QuantityText] = Field(default=None, examples=["1 1/2"])
    purchase_unit: Optional[Unit] = None
    recipe_quantity: Optional[QuantityText] = Field(default=None, examples=["1/4"])
    recipe_unit: Optional[Unit] = None


class PackagingUpdate(BaseModel):
    name: Optional[str] = None
    purchase_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    purchase_quantity: Optional[QuantityText] = None
    quantity_used: Optional[QuantityText] = None
