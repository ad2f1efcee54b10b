"""Domain models for shopping lists."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ShoppingListItem:
    """Total usage of one ingredient across a menu."""

    ingredient_id: UUID
    ingredient: str
    total_quantity: float
    unit: str
    estimated_cost: float | None
    used_in: list[str]


@dataclass(frozen=True)
class ShoppingListGroup:
    """Items sharing a shopping category."""

    category: str
    items: list[ShoppingListItem]


@dataclass(frozen=True)
class ShoppingList:
    """Aggregated ingredients for a menu."""

    menu_id: UUID
    menu_name: str
    expected_covers: int
    generated_at: datetime
    groups: list[ShoppingListGroup]
    total_estimated_cost: float


@dataclass(frozen=True)
class ScaledShoppingList(ShoppingList):
    """Shopping list scaled to a target number of covers."""

    covers: int
    base_covers: float
    base_covers_source: str
    scale_factor: float
