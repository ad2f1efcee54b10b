"""Domain models for ingredients, dishes and menus."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class Ingredient:
    """An ingredient with its cost per base unit."""

    id: UUID
    name: str
    unit_cost: float | None
    base_unit: str
    category: str = ""


@dataclass(frozen=True)
class DishIngredientLine:
    """One ingredient as used by a dish, in the unit the chef entered."""

    ingredient: Ingredient
    quantity: float
    unit: str
    prep_note: str = ""
    sort_order: int = 0


@dataclass(frozen=True)
class ManualCost:
    """Extra cost line on a dish that is not an ingredient."""

    label: str
    amount: float


@dataclass(frozen=True)
class Dish:
    """A dish and its ordered ingredient lines."""

    id: UUID
    name: str
    category: str = ""
    batch_yield: float = 1
    chefs_notes: str = ""
    suggested_price: float | None = None
    lines: list[DishIngredientLine] = field(default_factory=list)
    directions: list[str] = field(default_factory=list)
    manual_costs: list[ManualCost] = field(default_factory=list)


@dataclass(frozen=True)
class MenuDish:
    """A dish on a menu; servings counts batches, not portions."""

    dish: Dish
    servings: float = 1
    sort_order: int = 0
    active_days: list[int] | None = None


@dataclass(frozen=True)
class Menu:
    """A menu with its dishes in display order."""

    id: UUID
    name: str
    sell_price: float | None = None
    expected_covers: int | None = None
    schedule_days: list[int] = field(default_factory=list)
    dishes: list[MenuDish] = field(default_factory=list)
