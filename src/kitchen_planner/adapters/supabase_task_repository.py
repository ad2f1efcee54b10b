"""Supabase repository for kitchen tasks."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum
from pathlib import Path
from uuid import UUID

from supabase import Client

from kitchen_planner.domain.tasks import (
    NewTask,
    TaskFilters,
    TaskPriority,
    TaskRecord,
    TaskSource,
    TaskType,
)
from kitchen_planner.services.tasks import TaskRepository

REPLACE_AUTO_TASKS_FUNCTION = "replace_auto_tasks"
REPLACE_AUTO_TASKS_SQL = Path(__file__).with_name("sql") / "replace_auto_tasks.sql"


@dataclass
class SupabaseTaskRepository(TaskRepository):
    """Supabase implementation for task rows."""

    client: Client

    def delete_auto_tasks_for_menu(self, menu_id: UUID) -> None:
        """Delete auto-generated rows for a menu."""
        self.client.table("tasks").delete().eq("menu_id", str(menu_id)).eq(
            "source", TaskSource.AUTO.value
        ).execute()

    def insert_tasks(self, rows: list[NewTask]) -> None:
        """Insert task rows in one request."""
        payload = [_task_payload(row) for row in rows]
        if not payload:
            return
        response = self.client.table("tasks").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to insert tasks")

    def replace_auto_tasks(self, menu_id: UUID, rows: list[NewTask]) -> None:
        """Swap a menu's auto rows inside one database transaction.

        The delete and insert run in a Postgres function so a failed insert
        rolls the delete back. The function definition ships in
        ``REPLACE_AUTO_TASKS_SQL``.
        """
        self.client.rpc(
            REPLACE_AUTO_TASKS_FUNCTION,
            {
                "p_menu_id": str(menu_id),
                "p_rows": [_task_payload(row) for row in rows],
            },
        ).execute()

    def get_task(self, task_id: UUID) -> TaskRecord | None:
        """Return a task by id."""
        response = (
            self.client.table("tasks")
            .select("*")
            .eq("id", str(task_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_task(response.data[0])

    def update_task(
        self, task_id: UUID, changes: dict[str, object]
    ) -> TaskRecord | None:
        """Update a task row and return it."""
        payload = {key: _serialize(value) for key, value in changes.items()}
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("tasks").update(payload).eq("id", str(task_id)).execute()
        )
        if not response.data:
            return None
        return _parse_task(response.data[0])

    def list_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """Return tasks matching the filters."""
        query = self.client.table("tasks").select("*")
        if filters.without_menu:
            query = query.is_("menu_id", "null")
        elif filters.menu_id is not None:
            query = query.eq("menu_id", str(filters.menu_id))
        if filters.type is not None:
            query = query.eq("type", filters.type.value)
        if filters.completed is not None:
            query = query.eq("completed", filters.completed)
        if filters.priority is not None:
            query = query.eq("priority", filters.priority.value)
        if filters.due_date_from is not None:
            query = query.gte("due_date", filters.due_date_from.isoformat())
        if filters.due_date_to is not None:
            query = query.lte("due_date", filters.due_date_to.isoformat())
        if filters.overdue:
            today = datetime.now(tz=UTC).date().isoformat()
            query = query.lt("due_date", today).eq("completed", False)
        if filters.search:
            query = query.ilike("title", f"%{filters.search}%")
        response = query.execute()
        return [_parse_task(row) for row in response.data or []]


def _task_payload(row: NewTask) -> dict[str, object]:
    return {
        "menu_id": str(row.menu_id) if row.menu_id else None,
        "source_dish_id": str(row.source_dish_id) if row.source_dish_id else None,
        "type": row.type.value,
        "title": row.title,
        "description": row.description,
        "category": row.category,
        "quantity": row.quantity,
        "unit": row.unit,
        "timing_bucket": row.timing_bucket,
        "priority": row.priority.value,
        "source": row.source.value,
        "sort_order": row.sort_order,
        "due_date": row.due_date.isoformat() if row.due_date else None,
    }


def _serialize(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date | datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def _parse_task(row: dict[str, object]) -> TaskRecord:
    """Parse a task row into a domain model."""
    due_date_raw = row.get("due_date")
    completed_at_raw = row.get("completed_at")
    quantity = row.get("quantity")
    return TaskRecord(
        id=UUID(row["id"]),
        menu_id=UUID(row["menu_id"]) if row.get("menu_id") else None,
        source_dish_id=(
            UUID(row["source_dish_id"]) if row.get("source_dish_id") else None
        ),
        type=TaskType(row.get("type") or TaskType.CUSTOM),
        title=str(row.get("title", "")),
        description=str(row.get("description") or ""),
        category=str(row.get("category") or ""),
        quantity=float(quantity) if quantity is not None else None,
        unit=str(row.get("unit") or ""),
        timing_bucket=str(row.get("timing_bucket") or ""),
        priority=TaskPriority(row.get("priority") or TaskPriority.MEDIUM),
        source=TaskSource(row.get("source") or TaskSource.MANUAL),
        sort_order=int(row.get("sort_order") or 0),
        due_date=(
            date.fromisoformat(due_date_raw[:10])
            if isinstance(due_date_raw, str) and due_date_raw
            else None
        ),
        due_time=row.get("due_time"),
        day_phase=row.get("day_phase"),
        completed=bool(row.get("completed")),
        completed_at=(
            datetime.fromisoformat(completed_at_raw)
            if isinstance(completed_at_raw, str) and completed_at_raw
            else None
        ),
    )
