"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from kitchen_planner.adapters.supabase_dish_repository import SupabaseDishRepository
from kitchen_planner.adapters.supabase_menu_repository import SupabaseMenuRepository
from kitchen_planner.adapters.supabase_task_repository import SupabaseTaskRepository
from kitchen_planner.config import Settings
from kitchen_planner.services.costing import CostingService
from kitchen_planner.services.prep import PrepTaskService
from kitchen_planner.services.shopping import ShoppingListService
from kitchen_planner.services.tasks import TaskService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    costing_service: CostingService
    shopping_list_service: ShoppingListService
    prep_task_service: PrepTaskService
    task_service: TaskService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    dish_repository = SupabaseDishRepository(supabase_client)
    menu_repository = SupabaseMenuRepository(supabase_client)
    task_repository = SupabaseTaskRepository(supabase_client)

    return AppContainer(
        settings=resolved_settings,
        costing_service=CostingService(
            dish_repository=dish_repository,
            menu_repository=menu_repository,
            target_food_cost_percent=resolved_settings.target_food_cost_percent,
        ),
        shopping_list_service=ShoppingListService(menu_repository),
        prep_task_service=PrepTaskService(menu_repository),
        task_service=TaskService(
            menu_repository=menu_repository,
            dish_repository=dish_repository,
            repository=task_repository,
        ),
    )
