"""Dish and menu costing."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol
from uuid import UUID

from kitchen_planner.domain.costing import (
    DishCostBreakdown,
    DishCostSummary,
    LineCost,
    MenuCostSummary,
    MenuDishCost,
)
from kitchen_planner.domain.menus import Dish, DishIngredientLine, Menu
from kitchen_planner.domain.units import convert_units

DEFAULT_TARGET_FOOD_COST_PERCENT = 30.0
NO_COST_WARNING = "No cost data"

_CENTS = Decimal("0.01")

_logger = logging.getLogger(__name__)


class DishRepository(Protocol):
    """Read access to dishes."""

    def get_dish(self, dish_id: UUID) -> Dish | None:
        """Return a dish with its ingredient lines, if present."""

    def find_dish_id_by_name(self, name: str) -> UUID | None:
        """Return the id of a non-deleted dish with exactly this name."""


class MenuRepository(Protocol):
    """Read access to menus."""

    def get_menu(self, menu_id: UUID) -> Menu | None:
        """Return a menu with its dishes and ingredient lines, if present."""


def round2(value: float) -> float:
    """Round half away from zero to two decimals."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def calculate_dish_cost(lines: Iterable[DishIngredientLine]) -> DishCostBreakdown:
    """Cost each ingredient line and total the dish.

    Lines without cost data or with units that cannot be converted to the
    ingredient's base unit get a warning and contribute nothing. The total is
    rounded once from the raw sum.
    """
    total = 0.0
    line_items: list[LineCost] = []
    for line in lines:
        ingredient = line.ingredient
        if not ingredient.unit_cost:
            line_items.append(
                LineCost(
                    ingredient=ingredient.name,
                    quantity=line.quantity,
                    unit=line.unit,
                    cost=None,
                    warning=NO_COST_WARNING,
                )
            )
            continue

        converted = convert_units(line.quantity, line.unit, ingredient.base_unit)
        if converted is None:
            line_items.append(
                LineCost(
                    ingredient=ingredient.name,
                    quantity=line.quantity,
                    unit=line.unit,
                    cost=None,
                    warning=f"Cannot convert {line.unit} to {ingredient.base_unit}",
                )
            )
            continue

        line_cost = converted * ingredient.unit_cost
        total += line_cost
        line_items.append(
            LineCost(
                ingredient=ingredient.name,
                quantity=line.quantity,
                unit=line.unit,
                cost=round2(line_cost),
            )
        )
    return DishCostBreakdown(line_items=line_items, total_cost=round2(total))


def calculate_food_cost_percent(
    cost: float, selling_price: float | None
) -> float | None:
    """Return cost as a percentage of the selling price."""
    if not selling_price or selling_price <= 0:
        return None
    return round2(cost / selling_price * 100)


def suggest_price(
    cost: float | None, target_percent: float = DEFAULT_TARGET_FOOD_COST_PERCENT
) -> float | None:
    """Return the price that hits the target food-cost percentage."""
    if not cost or cost <= 0:
        return None
    return round2(cost / (target_percent / 100))


def effective_batch_yield(dish: Dish) -> float:
    """Return the dish's batch yield, treating missing values as one."""
    if not dish.batch_yield or dish.batch_yield <= 0:
        return 1
    return dish.batch_yield


@dataclass
class CostingService:
    """Service for costing dishes and rolling costs up across menus."""

    dish_repository: DishRepository
    menu_repository: MenuRepository
    target_food_cost_percent: float = DEFAULT_TARGET_FOOD_COST_PERCENT

    def get_dish_cost(self, dish_id: UUID) -> DishCostSummary | None:
        """Return batch and per-portion costing for a dish."""
        dish = self.dish_repository.get_dish(dish_id)
        if dish is None:
            return None
        return self.summarize_dish(dish)

    def summarize_dish(self, dish: Dish) -> DishCostSummary:
        """Cost a dish that has already been loaded."""
        breakdown = calculate_dish_cost(dish.lines)
        manual_total = round2(sum(item.amount for item in dish.manual_costs))
        combined_total = round2(breakdown.total_cost + manual_total)
        batch_yield = effective_batch_yield(dish)
        cost_per_portion = round2(combined_total / batch_yield)
        missing = sum(1 for item in breakdown.line_items if item.cost is None)
        if missing:
            _logger.debug(
                "Dish %s has %s uncosted ingredient lines", dish.id, missing
            )
        return DishCostSummary(
            dish_id=dish.id,
            dish_name=dish.name,
            line_items=breakdown.line_items,
            ingredient_total=breakdown.total_cost,
            manual_total=manual_total,
            combined_total=combined_total,
            batch_yield=batch_yield,
            cost_per_portion=cost_per_portion,
            food_cost_percent=calculate_food_cost_percent(
                cost_per_portion, dish.suggested_price
            ),
            suggested_price=suggest_price(
                cost_per_portion, self.target_food_cost_percent
            ),
        )

    def get_menu_cost(self, menu_id: UUID) -> MenuCostSummary | None:
        """Return food cost for every dish on a menu and the menu total."""
        menu = self.menu_repository.get_menu(menu_id)
        if menu is None:
            return None

        sell_price = menu.sell_price
        if not sell_price or sell_price <= 0:
            sell_price = None
        rows: list[MenuDishCost] = []
        total_food_cost = 0.0
        for entry in menu.dishes:
            batch_cost = calculate_dish_cost(entry.dish.lines).total_cost
            batch_yield = effective_batch_yield(entry.dish)
            cost_total = round2(batch_cost * entry.servings)
            total_food_cost += cost_total
            rows.append(
                MenuDishCost(
                    dish_id=entry.dish.id,
                    dish_name=entry.dish.name,
                    servings=entry.servings,
                    batch_yield=batch_yield,
                    total_portions=entry.servings * batch_yield,
                    cost_per_batch=batch_cost,
                    cost_per_portion=round2(batch_cost / batch_yield),
                    cost_total=cost_total,
                    percent_of_menu_price=(
                        round2(cost_total / sell_price * 100) if sell_price else None
                    ),
                )
            )

        return MenuCostSummary(
            menu_id=menu.id,
            menu_name=menu.name,
            sell_price=menu.sell_price,
            dishes=rows,
            total_food_cost=round2(total_food_cost),
            menu_food_cost_percent=(
                round2(total_food_cost / sell_price * 100) if sell_price else None
            ),
        )
