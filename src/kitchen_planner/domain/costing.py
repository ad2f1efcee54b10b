"""Domain models for dish and menu costing."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class LineCost:
    """Cost of a single ingredient line."""

    ingredient: str
    quantity: float
    unit: str
    cost: float | None
    warning: str | None = None


@dataclass(frozen=True)
class DishCostBreakdown:
    """Per-line costs and their rounded total."""

    line_items: list[LineCost]
    total_cost: float


@dataclass(frozen=True)
class DishCostSummary:
    """Batch and per-portion costing for a dish."""

    dish_id: UUID
    dish_name: str
    line_items: list[LineCost]
    ingredient_total: float
    manual_total: float
    combined_total: float
    batch_yield: float
    cost_per_portion: float
    food_cost_percent: float | None
    suggested_price: float | None


@dataclass(frozen=True)
class MenuDishCost:
    """Cost of one dish as scheduled on a menu."""

    dish_id: UUID
    dish_name: str
    servings: float
    batch_yield: float
    total_portions: float
    cost_per_batch: float
    cost_per_portion: float
    cost_total: float
    percent_of_menu_price: float | None


@dataclass(frozen=True)
class MenuCostSummary:
    """Food cost rolled up across a menu."""

    menu_id: UUID
    menu_name: str
    sell_price: float | None
    dishes: list[MenuDishCost]
    total_food_cost: float
    menu_food_cost_percent: float | None
