"""Domain models for prep tasks."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class TimingBucket(StrEnum):
    """When a prep task should happen relative to service."""

    DAY_BEFORE = "day_before"
    MORNING_OF = "morning_of"
    ONE_TWO_HOURS_BEFORE = "1_2_hours_before"
    DURING_SERVICE = "during_service"
    LAST_MINUTE = "last_minute"


TIMING_ORDER: tuple[TimingBucket, ...] = (
    TimingBucket.DAY_BEFORE,
    TimingBucket.MORNING_OF,
    TimingBucket.ONE_TWO_HOURS_BEFORE,
    TimingBucket.DURING_SERVICE,
    TimingBucket.LAST_MINUTE,
)

TIMING_LABELS: dict[TimingBucket, str] = {
    TimingBucket.DAY_BEFORE: "Day Before Service",
    TimingBucket.MORNING_OF: "Morning of Service",
    TimingBucket.ONE_TWO_HOURS_BEFORE: "1-2 Hours Before Service",
    TimingBucket.DURING_SERVICE: "During Service",
    TimingBucket.LAST_MINUTE: "Last Minute / À La Minute",
}


class PrepSource(StrEnum):
    """Where a prep task was extracted from."""

    CHEFS_NOTES = "chefs_notes"
    DIRECTIONS = "directions"
    INGREDIENT_PREP = "ingredient_prep"


@dataclass(frozen=True)
class PrepTask:
    """A single prep step for a dish."""

    task: str
    dish: str
    timing: TimingBucket
    source: PrepSource


@dataclass(frozen=True)
class PrepTaskGroup:
    """Prep tasks sharing a timing bucket."""

    timing: TimingBucket
    label: str
    tasks: list[PrepTask]


@dataclass(frozen=True)
class PrepTaskList:
    """Prep tasks for a menu, grouped on the service timeline."""

    menu_id: UUID
    menu_name: str
    generated_at: datetime
    task_groups: list[PrepTaskGroup]
    total_tasks: int
