"""Domain models for kitchen tasks."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class TaskType(StrEnum):
    """Kinds of task rows."""

    SHOPPING = "shopping"
    PREP = "prep"
    CUSTOM = "custom"


class TaskSource(StrEnum):
    """Auto rows are replaced on regeneration, manual rows are kept."""

    AUTO = "auto"
    MANUAL = "manual"


class TaskPriority(StrEnum):
    """Task priorities, highest first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class NewTask:
    """Task row ready to be inserted."""

    menu_id: UUID | None
    type: TaskType
    title: str
    description: str = ""
    category: str = ""
    quantity: float | None = None
    unit: str = ""
    timing_bucket: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    source: TaskSource = TaskSource.AUTO
    source_dish_id: UUID | None = None
    sort_order: int = 0
    due_date: date | None = None


@dataclass(frozen=True)
class TaskRecord:
    """Persisted task row."""

    id: UUID
    menu_id: UUID | None
    source_dish_id: UUID | None
    type: TaskType
    title: str
    description: str
    category: str
    quantity: float | None
    unit: str
    timing_bucket: str
    priority: TaskPriority
    source: TaskSource
    sort_order: int
    due_date: date | None = None
    due_time: str | None = None
    day_phase: str | None = None
    completed: bool = False
    completed_at: datetime | None = None


@dataclass(frozen=True)
class TaskFilters:
    """Optional filters for listing tasks."""

    menu_id: UUID | None = None
    without_menu: bool = False
    type: TaskType | None = None
    completed: bool | None = None
    priority: TaskPriority | None = None
    due_date_from: date | None = None
    due_date_to: date | None = None
    overdue: bool = False
    search: str | None = None


@dataclass(frozen=True)
class TaskGenerationSummary:
    """Counts of rows written by a regeneration."""

    menu_id: UUID
    total: int
    shopping_count: int
    prep_count: int
    week_start: date | None = None
