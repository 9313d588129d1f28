"""Dataclass models for all stored entities.

Each class maps 1:1 to a database table.  Quantities are kept as Quantity
values wrapping the user's text; they are parsed only when costs are computed.
These are plain data containers with no business logic.
"""

from dataclasses import dataclass, field

from bakers_price.core.quantity import Quantity


@dataclass
class Ingredient:
    """One ingredient line: what was bought and how much one batch uses.

    Category is one of 'dry', 'wet', or 'additive' and only affects grouping.
    """

    id: str
    name: str = ""
    category: str = "dry"
    purchase_price: float = 0.0
    purchase_quantity: Quantity = field(default_factory=lambda: Quantity("1"))
    purchase_unit: str = "kg"
    recipe_quantity: Quantity = field(default_factory=lambda: Quantity("0"))
    recipe_unit: str = "g"


@dataclass
class Packaging:
    """A packaging item (boxes, bags, labels).  Bought and used in the same unit."""

    id: str
    name: str = ""
    purchase_price: float = 0.0
    purchase_quantity: Quantity = field(default_factory=lambda: Quantity("1"))
    quantity_used: Quantity = field(default_factory=lambda: Quantity("0"))


@dataclass
class RecipeState:
    """Everything needed to price one named recipe (e.g. 'Cupcakes').

    ingredients and packaging keep insertion order.  profit_margin is a
    percentage applied to the total batch cost.
    """

    name: str
    ingredients: list[Ingredient] = field(default_factory=list)
    packaging: list[Packaging] = field(default_factory=list)
    batch_yield: int = 12
    profit_margin: float = 50.0
    hourly_rate: float = 15.0
    hours_spent: float = 1.0
