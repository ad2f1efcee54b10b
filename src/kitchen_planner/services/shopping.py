"""Shopping list aggregation across the dishes of a menu."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from kitchen_planner.domain.menus import Ingredient, Menu
from kitchen_planner.domain.shopping import (
    ScaledShoppingList,
    ShoppingList,
    ShoppingListGroup,
    ShoppingListItem,
)
from kitchen_planner.domain.units import convert_units, upscale_quantity
from kitchen_planner.services.costing import (
    MenuRepository,
    effective_batch_yield,
    round2,
)

DEFAULT_CATEGORY = "other"

_logger = logging.getLogger(__name__)


class InvalidCoversError(ValueError):
    """Raised when a scaling target is not a positive integer."""


@dataclass
class _Aggregate:
    ingredient: Ingredient
    unit: str
    total_quantity: float = 0.0
    used_in: list[str] = field(default_factory=list)


@dataclass
class ShoppingListService:
    """Service that builds shopping lists for menus."""

    menu_repository: MenuRepository

    def generate_shopping_list(self, menu_id: UUID) -> ShoppingList | None:
        """Aggregate ingredient usage for every dish on a menu."""
        menu = self.menu_repository.get_menu(menu_id)
        if menu is None:
            return None
        return build_shopping_list(menu)

    def generate_scaled_shopping_list(
        self, menu_id: UUID, covers: int
    ) -> ScaledShoppingList | None:
        """Return the menu's shopping list scaled to a number of covers."""
        if isinstance(covers, bool) or not isinstance(covers, int) or covers < 1:
            raise InvalidCoversError("covers must be a positive integer")
        menu = self.menu_repository.get_menu(menu_id)
        if menu is None:
            return None
        shopping_list = build_shopping_list(menu)
        base_covers, source = base_covers_for(menu)
        return scale_shopping_list(shopping_list, covers, base_covers, source)


def build_shopping_list(menu: Menu) -> ShoppingList:
    """Build a shopping list from a loaded menu."""
    aggregates: dict[UUID, _Aggregate] = {}
    for entry in menu.dishes:
        for line in sorted(entry.dish.lines, key=lambda item: item.sort_order):
            adjusted = line.quantity * entry.servings
            aggregate = aggregates.get(line.ingredient.id)
            if aggregate is None:
                aggregate = _Aggregate(ingredient=line.ingredient, unit=line.unit)
                aggregates[line.ingredient.id] = aggregate

            converted = convert_units(adjusted, line.unit, aggregate.unit)
            if converted is None:
                # Incompatible units are added raw; dish costing treats the
                # same case as unknown cost instead.
                _logger.debug(
                    "Adding %s %s of %s raw to a total kept in %s",
                    adjusted,
                    line.unit,
                    line.ingredient.name,
                    aggregate.unit,
                )
                aggregate.total_quantity += adjusted
            else:
                aggregate.total_quantity += converted
            aggregate.used_in.append(
                f"{entry.dish.name} ({_format_quantity(adjusted)}{line.unit})"
            )

    grouped: dict[str, list[ShoppingListItem]] = {}
    total_cost = 0.0
    for aggregate in aggregates.values():
        quantity, unit = upscale_quantity(aggregate.total_quantity, aggregate.unit)
        quantity = round2(quantity)
        estimated_cost = _estimate_cost(aggregate.ingredient, quantity, unit)
        if estimated_cost is not None:
            total_cost += estimated_cost
        category = aggregate.ingredient.category or DEFAULT_CATEGORY
        grouped.setdefault(category, []).append(
            ShoppingListItem(
                ingredient_id=aggregate.ingredient.id,
                ingredient=aggregate.ingredient.name,
                total_quantity=quantity,
                unit=unit,
                estimated_cost=estimated_cost,
                used_in=aggregate.used_in,
            )
        )

    return ShoppingList(
        menu_id=menu.id,
        menu_name=menu.name,
        expected_covers=menu.expected_covers or 0,
        generated_at=datetime.now(tz=UTC),
        groups=_sorted_groups(grouped),
        total_estimated_cost=round2(total_cost),
    )


def base_covers_for(menu: Menu) -> tuple[float, str]:
    """Return the covers a menu is written for and where that number came from."""
    if menu.expected_covers and menu.expected_covers > 0:
        return menu.expected_covers, "expected"
    computed = sum(
        entry.servings * effective_batch_yield(entry.dish) for entry in menu.dishes
    )
    return computed or 1, "computed"


def scale_shopping_list(
    shopping_list: ShoppingList, covers: int, base_covers: float, source: str
) -> ScaledShoppingList:
    """Multiply every quantity and cost by covers / base_covers."""
    scale_factor = covers / base_covers
    groups: list[ShoppingListGroup] = []
    for group in shopping_list.groups:
        items: list[ShoppingListItem] = []
        for item in group.items:
            quantity = round2(item.total_quantity * scale_factor)
            quantity, unit = upscale_quantity(quantity, item.unit)
            items.append(
                ShoppingListItem(
                    ingredient_id=item.ingredient_id,
                    ingredient=item.ingredient,
                    total_quantity=round2(quantity),
                    unit=unit,
                    estimated_cost=(
                        round2(item.estimated_cost * scale_factor)
                        if item.estimated_cost is not None
                        else None
                    ),
                    used_in=item.used_in,
                )
            )
        groups.append(ShoppingListGroup(category=group.category, items=items))

    return ScaledShoppingList(
        menu_id=shopping_list.menu_id,
        menu_name=shopping_list.menu_name,
        expected_covers=shopping_list.expected_covers,
        generated_at=shopping_list.generated_at,
        groups=groups,
        total_estimated_cost=round2(shopping_list.total_estimated_cost * scale_factor),
        covers=covers,
        base_covers=base_covers,
        base_covers_source=source,
        scale_factor=round2(scale_factor),
    )


def _estimate_cost(ingredient: Ingredient, quantity: float, unit: str) -> float | None:
    if not ingredient.unit_cost or ingredient.unit_cost <= 0:
        return None
    in_base_unit = convert_units(quantity, unit, ingredient.base_unit)
    if in_base_unit is None:
        return None
    return round2(in_base_unit * ingredient.unit_cost)


def _sorted_groups(
    grouped: dict[str, list[ShoppingListItem]],
) -> list[ShoppingListGroup]:
    return [
        ShoppingListGroup(
            category=category,
            items=sorted(grouped[category], key=lambda item: item.ingredient),
        )
        for category in sorted(grouped)
    ]


def _format_quantity(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
