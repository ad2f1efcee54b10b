"""Task generation from menus and task persistence rules."""

import logging
import threading
import weakref
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from kitchen_planner.domain.menus import Menu
from kitchen_planner.domain.prep import PrepTaskList, TimingBucket
from kitchen_planner.domain.shopping import ShoppingList
from kitchen_planner.domain.tasks import (
    NewTask,
    TaskFilters,
    TaskGenerationSummary,
    TaskPriority,
    TaskRecord,
    TaskSource,
    TaskType,
)
from kitchen_planner.services.costing import DishRepository, MenuRepository
from kitchen_planner.services.prep import build_prep_task_list
from kitchen_planner.services.shopping import build_shopping_list

CONTENT_FIELDS = frozenset(
    {"title", "description", "priority", "due_date", "due_time", "day_phase"}
)
UPDATABLE_FIELDS = CONTENT_FIELDS | {"completed"}
NON_NULLABLE_FIELDS = frozenset({"title", "description", "priority", "completed"})

# Days relative to the dish's first service day.
TIMING_DAY_OFFSET: dict[TimingBucket, int] = {
    TimingBucket.DAY_BEFORE: -1,
    TimingBucket.MORNING_OF: 0,
    TimingBucket.ONE_TWO_HOURS_BEFORE: 0,
    TimingBucket.DURING_SERVICE: 0,
    TimingBucket.LAST_MINUTE: 0,
}

_PRIORITY_RANK = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}

_logger = logging.getLogger(__name__)


class InvalidTaskUpdateError(ValueError):
    """Raised when a task update is empty or carries invalid values."""


class TaskRepository(Protocol):
    """Persistence interface for task rows."""

    def delete_auto_tasks_for_menu(self, menu_id: UUID) -> None:
        """Delete the auto-generated rows for a menu."""

    def insert_tasks(self, rows: list[NewTask]) -> None:
        """Insert task rows in one batch."""

    def replace_auto_tasks(self, menu_id: UUID, rows: list[NewTask]) -> None:
        """Delete a menu's auto rows and insert new ones as one atomic unit."""

    def get_task(self, task_id: UUID) -> TaskRecord | None:
        """Return a task by id."""

    def update_task(
        self, task_id: UUID, changes: dict[str, object]
    ) -> TaskRecord | None:
        """Apply column changes to a task and return the updated row."""

    def list_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """Return tasks matching the filters, in any order."""


@dataclass
class TaskService:
    """Service that regenerates menu tasks and applies task edits."""

    menu_repository: MenuRepository
    dish_repository: DishRepository
    repository: TaskRepository
    # Entries disappear once no regeneration holds the lock.
    _locks: weakref.WeakValueDictionary[UUID, threading.Lock] = field(
        default_factory=weakref.WeakValueDictionary, init=False, repr=False
    )
    _locks_guard: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def generate_and_persist_tasks(
        self, menu_id: UUID, week_start: date | None = None
    ) -> TaskGenerationSummary | None:
        """Replace a menu's auto tasks with freshly generated ones.

        Manual rows are left alone. Regenerations of the same menu are
        serialized; different menus proceed in parallel.
        """
        with self._menu_lock(menu_id):
            menu = self.menu_repository.get_menu(menu_id)
            if menu is None:
                return None

            shopping_rows = build_shopping_task_rows(build_shopping_list(menu))
            prep_list = build_prep_task_list(menu)
            if week_start is not None and menu.schedule_days:
                prep_rows = self._build_weekly_prep_rows(prep_list, menu, week_start)
            else:
                prep_rows = self._build_prep_rows(prep_list)

            rows = [
                replace(row, sort_order=index)
                for index, row in enumerate(shopping_rows + prep_rows)
            ]
            try:
                self.repository.replace_auto_tasks(menu_id, rows)
            except Exception:
                _logger.exception("Task regeneration failed for menu %s", menu_id)
                raise
            _logger.info(
                "Regenerated tasks for menu %s: shopping=%s prep=%s",
                menu_id,
                len(shopping_rows),
                len(prep_rows),
            )
            return TaskGenerationSummary(
                menu_id=menu_id,
                total=len(rows),
                shopping_count=len(shopping_rows),
                prep_count=len(prep_rows),
                week_start=week_start,
            )

    def update_task(
        self, task_id: UUID, changes: dict[str, object]
    ) -> TaskRecord | None:
        """Apply an edit to a task.

        Editing the content of an auto row turns it into a manual row so the
        next regeneration keeps it.
        """
        if not changes:
            raise InvalidTaskUpdateError("Nothing to update")
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidTaskUpdateError(
                f"Unknown task fields: {', '.join(sorted(unknown))}"
            )
        nulled = {
            name
            for name in NON_NULLABLE_FIELDS
            if name in changes and changes[name] is None
        }
        if nulled:
            raise InvalidTaskUpdateError(
                f"Fields cannot be null: {', '.join(sorted(nulled))}"
            )
        task = self.repository.get_task(task_id)
        if task is None:
            return None

        updates = dict(changes)
        if "priority" in updates:
            try:
                updates["priority"] = TaskPriority(str(updates["priority"]))
            except ValueError as exc:
                raise InvalidTaskUpdateError(
                    f"Invalid priority: {updates['priority']}"
                ) from exc
        if "completed" in updates:
            completed = bool(updates["completed"])
            updates["completed"] = completed
            updates["completed_at"] = datetime.now(tz=UTC) if completed else None
        if task.source == TaskSource.AUTO and CONTENT_FIELDS & set(updates):
            updates["source"] = TaskSource.MANUAL
        return self.repository.update_task(task_id, updates)

    def list_tasks(self, filters: TaskFilters | None = None) -> list[TaskRecord]:
        """Return tasks, open first, then by priority, due date and order."""
        tasks = self.repository.list_tasks(filters or TaskFilters())
        return sorted(tasks, key=_task_sort_key)

    def _build_prep_rows(self, prep_list: PrepTaskList) -> list[NewTask]:
        rows: list[NewTask] = []
        dish_ids: dict[str, UUID | None] = {}
        for group in prep_list.task_groups:
            for task in group.tasks:
                rows.append(
                    NewTask(
                        menu_id=prep_list.menu_id,
                        source_dish_id=self._dish_id(task.dish, dish_ids),
                        type=TaskType.PREP,
                        title=task.task,
                        description=task.dish,
                        timing_bucket=task.timing or group.timing,
                    )
                )
        return rows

    def _build_weekly_prep_rows(
        self, prep_list: PrepTaskList, menu: Menu, week_start: date
    ) -> list[NewTask]:
        active_days = {entry.dish.id: entry.active_days for entry in menu.dishes}
        rows: list[NewTask] = []
        for row in self._build_prep_rows(prep_list):
            days = active_days.get(row.source_dish_id) if row.source_dish_id else None
            first_day = min(days or menu.schedule_days, key=_week_offset)
            service_date = week_start + timedelta(days=_week_offset(first_day))
            offset = TIMING_DAY_OFFSET.get(TimingBucket(row.timing_bucket), 0)
            due_date = service_date + timedelta(days=offset)
            rows.append(replace(row, due_date=due_date))
        return rows

    def _dish_id(self, name: str, cache: dict[str, UUID | None]) -> UUID | None:
        if not name:
            return None
        if name not in cache:
            cache[name] = self.dish_repository.find_dish_id_by_name(name)
        return cache[name]

    def _menu_lock(self, menu_id: UUID) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(menu_id, threading.Lock())


def build_shopping_task_rows(shopping_list: ShoppingList) -> list[NewTask]:
    """Turn shopping list items into task rows."""
    return [
        NewTask(
            menu_id=shopping_list.menu_id,
            type=TaskType.SHOPPING,
            title=item.ingredient,
            description=", ".join(item.used_in),
            category=group.category,
            quantity=item.total_quantity,
            unit=item.unit,
        )
        for group in shopping_list.groups
        for item in group.items
    ]


def _week_offset(day: int) -> int:
    """Days from Monday for a 0=Sunday..6=Saturday day number."""
    return (day - 1) % 7


def _task_sort_key(task: TaskRecord) -> tuple[object, ...]:
    return (
        task.completed,
        _PRIORITY_RANK.get(task.priority, len(_PRIORITY_RANK)),
        task.due_date is None,
        task.due_date or date.min,
        task.sort_order,
    )
