"""Supabase repository for dishes."""

import json
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from kitchen_planner.domain.menus import (
    Dish,
    DishIngredientLine,
    Ingredient,
    ManualCost,
)
from kitchen_planner.services.costing import DishRepository

DISH_COLUMNS = (
    "id, name, category, batch_yield, chefs_notes, suggested_price, manual_costs, "
    "dish_ingredients(quantity, unit, prep_note, sort_order, row_type, "
    "ingredients(id, name, unit_cost, base_unit, category)), "
    "dish_directions(type, text, sort_order)"
)


@dataclass
class SupabaseDishRepository(DishRepository):
    """Supabase implementation for dish lookups."""

    client: Client

    def get_dish(self, dish_id: UUID) -> Dish | None:
        """Return a non-deleted dish with ingredients and directions."""
        response = (
            self.client.table("dishes")
            .select(DISH_COLUMNS)
            .eq("id", str(dish_id))
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_dish(response.data[0])

    def find_dish_id_by_name(self, name: str) -> UUID | None:
        """Return the id of a non-deleted dish with exactly this name."""
        response = (
            self.client.table("dishes")
            .select("id")
            .eq("name", name)
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UUID(response.data[0]["id"])


def parse_dish(row: dict[str, object]) -> Dish:
    """Parse a dish row with embedded ingredient lines into a domain model."""
    lines = [
        _parse_line(line)
        for line in row.get("dish_ingredients") or []
        if line.get("ingredients")
        and (line.get("row_type") or "ingredient") == "ingredient"
    ]
    directions = sorted(
        (
            step
            for step in row.get("dish_directions") or []
            if (step.get("type") or "step") == "step" and step.get("text")
        ),
        key=lambda step: int(step.get("sort_order") or 0),
    )
    return Dish(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        category=str(row.get("category") or ""),
        batch_yield=float(row.get("batch_yield") or 1),
        chefs_notes=str(row.get("chefs_notes") or ""),
        suggested_price=(
            float(row["suggested_price"])
            if isinstance(row.get("suggested_price"), int | float)
            else None
        ),
        lines=sorted(lines, key=lambda line: line.sort_order),
        directions=[str(step["text"]) for step in directions],
        manual_costs=_parse_manual_costs(row.get("manual_costs")),
    )


def _parse_line(row: dict[str, object]) -> DishIngredientLine:
    ingredient = row["ingredients"]
    unit_cost = ingredient.get("unit_cost")
    return DishIngredientLine(
        ingredient=Ingredient(
            id=UUID(ingredient["id"]),
            name=str(ingredient.get("name", "")),
            unit_cost=float(unit_cost) if unit_cost is not None else None,
            base_unit=str(ingredient.get("base_unit") or "g"),
            category=str(ingredient.get("category") or ""),
        ),
        quantity=float(row.get("quantity") or 0.0),
        unit=str(row.get("unit") or ""),
        prep_note=str(row.get("prep_note") or ""),
        sort_order=int(row.get("sort_order") or 0),
    )


def _parse_manual_costs(raw: object) -> list[ManualCost]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw or "[]")
        except ValueError:
            return []
    if not isinstance(raw, list):
        return []
    costs: list[ManualCost] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            amount = float(item.get("amount") or 0.0)
        except (TypeError, ValueError):
            amount = 0.0
        label = str(item.get("label") or item.get("name") or "")
        costs.append(ManualCost(label=label, amount=amount))
    return costs
