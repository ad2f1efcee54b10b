"""Supabase repository for menus."""

import json
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from kitchen_planner.adapters.supabase_dish_repository import DISH_COLUMNS, parse_dish
from kitchen_planner.domain.menus import Menu, MenuDish
from kitchen_planner.services.costing import MenuRepository

MENU_COLUMNS = (
    "id, name, sell_price, expected_covers, schedule_days, "
    f"menu_dishes(servings, sort_order, active_days, dishes({DISH_COLUMNS}))"
)


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Supabase implementation for menu lookups."""

    client: Client

    def get_menu(self, menu_id: UUID) -> Menu | None:
        """Return a non-deleted menu with dishes and ingredient lines."""
        response = (
            self.client.table("menus")
            .select(MENU_COLUMNS)
            .eq("id", str(menu_id))
            .is_("deleted_at", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_menu(response.data[0])


def _parse_menu(row: dict[str, object]) -> Menu:
    entries = [
        _parse_menu_dish(entry)
        for entry in row.get("menu_dishes") or []
        if entry.get("dishes")
    ]
    sell_price = row.get("sell_price")
    expected_covers = row.get("expected_covers")
    return Menu(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        sell_price=float(sell_price) if sell_price is not None else None,
        expected_covers=int(expected_covers) if expected_covers is not None else None,
        schedule_days=_parse_days(row.get("schedule_days")) or [],
        dishes=sorted(entries, key=lambda entry: entry.sort_order),
    )


def _parse_menu_dish(row: dict[str, object]) -> MenuDish:
    return MenuDish(
        dish=parse_dish(row["dishes"]),
        servings=float(row.get("servings") or 1),
        sort_order=int(row.get("sort_order") or 0),
        active_days=_parse_days(row.get("active_days")),
    )


def _parse_days(raw: object) -> list[int] | None:
    """Parse a day-of-week list stored as JSON or as an array column."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw else None
        except ValueError:
            return None
    if not isinstance(raw, list):
        return None
    return [
        int(day)
        for day in raw
        if isinstance(day, int | str) and str(day).isdigit()
    ]
