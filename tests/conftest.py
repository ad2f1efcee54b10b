"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from kitchen_planner.config import Settings
from kitchen_planner.containers import AppContainer
from kitchen_planner.domain.menus import (
    Dish,
    DishIngredientLine,
    Ingredient,
    ManualCost,
    Menu,
    MenuDish,
)
from kitchen_planner.domain.tasks import NewTask, TaskFilters, TaskRecord, TaskSource
from kitchen_planner.services.costing import (
    CostingService,
    DishRepository,
    MenuRepository,
)
from kitchen_planner.services.prep import PrepTaskService
from kitchen_planner.services.shopping import ShoppingListService
from kitchen_planner.services.tasks import TaskRepository, TaskService


@dataclass
class InMemoryDishRepository(DishRepository):
    """In-memory dish repository for tests."""

    dishes: dict[UUID, Dish] = field(default_factory=dict)

    def add(self, dish: Dish) -> Dish:
        self.dishes[dish.id] = dish
        return dish

    def get_dish(self, dish_id: UUID) -> Dish | None:
        return self.dishes.get(dish_id)

    def find_dish_id_by_name(self, name: str) -> UUID | None:
        for dish in self.dishes.values():
            if dish.name == name:
                return dish.id
        return None


@dataclass
class InMemoryMenuRepository(MenuRepository):
    """In-memory menu repository for tests."""

    menus: dict[UUID, Menu] = field(default_factory=dict)

    def add(self, menu: Menu) -> Menu:
        self.menus[menu.id] = menu
        return menu

    def get_menu(self, menu_id: UUID) -> Menu | None:
        return self.menus.get(menu_id)


@dataclass
class InMemoryTaskRepository(TaskRepository):
    """In-memory task repository; replace_auto_tasks rolls back on failure."""

    rows: dict[UUID, TaskRecord] = field(default_factory=dict)
    fail_next_insert: bool = False
    replace_calls: int = 0

    def delete_auto_tasks_for_menu(self, menu_id: UUID) -> None:
        self.rows = {
            task_id: task
            for task_id, task in self.rows.items()
            if not (task.menu_id == menu_id and task.source == TaskSource.AUTO)
        }

    def insert_tasks(self, rows: list[NewTask]) -> None:
        if self.fail_next_insert:
            self.fail_next_insert = False
            raise RuntimeError("Failed to insert tasks")
        for row in rows:
            record = _record_from_new(row)
            self.rows[record.id] = record

    def replace_auto_tasks(self, menu_id: UUID, rows: list[NewTask]) -> None:
        self.replace_calls += 1
        snapshot = dict(self.rows)
        try:
            self.delete_auto_tasks_for_menu(menu_id)
            self.insert_tasks(rows)
        except RuntimeError:
            self.rows = snapshot
            raise

    def get_task(self, task_id: UUID) -> TaskRecord | None:
        return self.rows.get(task_id)

    def update_task(
        self, task_id: UUID, changes: dict[str, object]
    ) -> TaskRecord | None:
        task = self.rows.get(task_id)
        if task is None:
            return None
        updated = replace(task, **changes)
        self.rows[task_id] = updated
        return updated

    def list_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        today = datetime.now(tz=UTC).date()
        result = []
        for task in self.rows.values():
            if filters.without_menu and task.menu_id is not None:
                continue
            if filters.menu_id is not None and task.menu_id != filters.menu_id:
                continue
            if filters.type is not None and task.type != filters.type:
                continue
            if filters.completed is not None and task.completed != filters.completed:
                continue
            if filters.priority is not None and task.priority != filters.priority:
                continue
            if filters.due_date_from is not None and (
                task.due_date is None or task.due_date < filters.due_date_from
            ):
                continue
            if filters.due_date_to is not None and (
                task.due_date is None or task.due_date > filters.due_date_to
            ):
                continue
            if filters.overdue and (
                task.completed or task.due_date is None or task.due_date >= today
            ):
                continue
            if filters.search and filters.search.lower() not in task.title.lower():
                continue
            result.append(task)
        return result

    def for_menu(self, menu_id: UUID) -> list[TaskRecord]:
        return [task for task in self.rows.values() if task.menu_id == menu_id]


def _record_from_new(row: NewTask) -> TaskRecord:
    return TaskRecord(
        id=uuid4(),
        menu_id=row.menu_id,
        source_dish_id=row.source_dish_id,
        type=row.type,
        title=row.title,
        description=row.description,
        category=row.category,
        quantity=row.quantity,
        unit=row.unit,
        timing_bucket=row.timing_bucket,
        priority=row.priority,
        source=row.source,
        sort_order=row.sort_order,
        due_date=row.due_date,
    )


def make_ingredient(
    name: str,
    unit_cost: float | None,
    base_unit: str,
    category: str = "",
) -> Ingredient:
    return Ingredient(
        id=uuid4(),
        name=name,
        unit_cost=unit_cost,
        base_unit=base_unit,
        category=category,
    )


@pytest.fixture
def ingredients() -> dict[str, Ingredient]:
    return {
        "spaghetti": make_ingredient("Spaghetti", 0.004, "g", "dry goods"),
        "guanciale": make_ingredient("Guanciale", 0.03, "g", "meat"),
        "pecorino": make_ingredient("Pecorino", 25.0, "kg", "dairy"),
        "eggs": make_ingredient("Eggs", 0.5, "each", "dairy"),
        "romaine": make_ingredient("Romaine", None, "each", "produce"),
        "olive_oil": make_ingredient("Olive Oil", 0.01, "ml", "pantry"),
    }


@pytest.fixture
def carbonara(ingredients: dict[str, Ingredient]) -> Dish:
    return Dish(
        id=uuid4(),
        name="Pasta Carbonara",
        category="main",
        batch_yield=4,
        chefs_notes=(
            "Cure the yolks overnight. "
            "Toss pasta with sauce right before plating. Ok"
        ),
        suggested_price=12.0,
        lines=[
            DishIngredientLine(ingredients["spaghetti"], 500, "g", sort_order=0),
            DishIngredientLine(
                ingredients["guanciale"],
                150,
                "g",
                prep_note="cut into lardons the day before",
                sort_order=1,
            ),
            DishIngredientLine(ingredients["pecorino"], 100, "g", sort_order=2),
            DishIngredientLine(ingredients["eggs"], 4, "each", sort_order=3),
        ],
        manual_costs=[ManualCost(label="Packaging", amount=0.5)],
    )


@pytest.fixture
def caesar(ingredients: dict[str, Ingredient]) -> Dish:
    return Dish(
        id=uuid4(),
        name="Caesar Salad",
        category="starter",
        batch_yield=2,
        lines=[
            DishIngredientLine(
                ingredients["romaine"],
                2,
                "each",
                prep_note="wash and dry 2 hours before service",
                sort_order=0,
            ),
            DishIngredientLine(ingredients["pecorino"], 0.25, "kg", sort_order=1),
            DishIngredientLine(ingredients["olive_oil"], 60, "ml", sort_order=2),
        ],
        directions=["Make the dressing in the morning", "Dress leaves to order"],
    )


@pytest.fixture
def menu(carbonara: Dish, caesar: Dish) -> Menu:
    return Menu(
        id=uuid4(),
        name="Friday Trattoria",
        sell_price=100.0,
        expected_covers=10,
        schedule_days=[5, 6],
        dishes=[
            MenuDish(dish=carbonara, servings=2, sort_order=0, active_days=[6]),
            MenuDish(dish=caesar, servings=3, sort_order=1),
        ],
    )


@pytest.fixture
def dish_repository(carbonara: Dish, caesar: Dish) -> InMemoryDishRepository:
    repository = InMemoryDishRepository()
    repository.add(carbonara)
    repository.add(caesar)
    return repository


@pytest.fixture
def menu_repository(menu: Menu) -> InMemoryMenuRepository:
    repository = InMemoryMenuRepository()
    repository.add(menu)
    return repository


@pytest.fixture
def task_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def costing_service(
    dish_repository: InMemoryDishRepository,
    menu_repository: InMemoryMenuRepository,
) -> CostingService:
    return CostingService(
        dish_repository=dish_repository, menu_repository=menu_repository
    )


@pytest.fixture
def task_service(
    dish_repository: InMemoryDishRepository,
    menu_repository: InMemoryMenuRepository,
    task_repository: InMemoryTaskRepository,
) -> TaskService:
    return TaskService(
        menu_repository=menu_repository,
        dish_repository=dish_repository,
        repository=task_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    costing_service: CostingService,
    menu_repository: InMemoryMenuRepository,
    task_service: TaskService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        costing_service=costing_service,
        shopping_list_service=ShoppingListService(menu_repository),
        prep_task_service=PrepTaskService(menu_repository),
        task_service=task_service,
    )
