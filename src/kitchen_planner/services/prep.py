"""Prep task extraction from chef notes and ingredient prep notes."""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from kitchen_planner.domain.menus import Dish, Menu
from kitchen_planner.domain.prep import (
    TIMING_LABELS,
    TIMING_ORDER,
    PrepSource,
    PrepTask,
    PrepTaskGroup,
    PrepTaskList,
    TimingBucket,
)
from kitchen_planner.services.costing import MenuRepository

MIN_FRAGMENT_LENGTH = 8

# Checked in order; the first match wins.
_TIMING_RULES: tuple[tuple[TimingBucket, re.Pattern[str]], ...] = (
    (
        TimingBucket.DAY_BEFORE,
        re.compile(r"overnight|day before|24\s*h|the night before", re.IGNORECASE),
    ),
    (
        TimingBucket.MORNING_OF,
        re.compile(
            r"morning|same day|4[-\s]?6\s*h|half day|hours ahead", re.IGNORECASE
        ),
    ),
    (
        TimingBucket.ONE_TWO_HOURS_BEFORE,
        re.compile(r"[12]\d?\s*h.*before|hour before|2 hours", re.IGNORECASE),
    ),
    (
        TimingBucket.LAST_MINUTE,
        re.compile(
            r"30\s*min|just before|right before|last minute|à la minute",
            re.IGNORECASE,
        ),
    ),
)

_SENTENCE_SPLIT = re.compile(r"[.\n;]+")


def extract_timing(text: str) -> TimingBucket:
    """Bucket a task by the timing phrases it contains."""
    lowered = (text or "").lower()
    for bucket, pattern in _TIMING_RULES:
        if pattern.search(lowered):
            return bucket
    return TimingBucket.DURING_SERVICE


def extract_prep_tasks(notes: str | None, dish_name: str) -> list[PrepTask]:
    """Turn every non-trivial sentence of a chef's notes into a task."""
    if not notes or not notes.strip():
        return []
    fragments = (fragment.strip() for fragment in _SENTENCE_SPLIT.split(notes))
    return [
        PrepTask(
            task=fragment,
            dish=dish_name,
            timing=extract_timing(fragment),
            source=PrepSource.CHEFS_NOTES,
        )
        for fragment in fragments
        if len(fragment) >= MIN_FRAGMENT_LENGTH
    ]


def dish_prep_tasks(dish: Dish) -> list[PrepTask]:
    """Return the prep tasks for one dish.

    Structured directions take precedence over free-text notes. Ingredient
    prep notes are always included.
    """
    if dish.directions:
        tasks = [
            PrepTask(
                task=step,
                dish=dish.name,
                timing=extract_timing(step),
                source=PrepSource.DIRECTIONS,
            )
            for step in dish.directions
        ]
    else:
        tasks = extract_prep_tasks(dish.chefs_notes, dish.name)

    for line in sorted(dish.lines, key=lambda item: item.sort_order):
        if not line.prep_note or not line.prep_note.strip():
            continue
        tasks.append(
            PrepTask(
                task=f"{line.ingredient.name}: {line.prep_note}",
                dish=dish.name,
                timing=extract_timing(line.prep_note),
                source=PrepSource.INGREDIENT_PREP,
            )
        )
    return tasks


def group_prep_tasks(tasks: list[PrepTask]) -> list[PrepTaskGroup]:
    """Group tasks on the service timeline, skipping empty buckets."""
    grouped: dict[TimingBucket, list[PrepTask]] = {}
    for task in tasks:
        grouped.setdefault(task.timing, []).append(task)
    return [
        PrepTaskGroup(timing=bucket, label=TIMING_LABELS[bucket], tasks=grouped[bucket])
        for bucket in TIMING_ORDER
        if grouped.get(bucket)
    ]


def build_prep_task_list(menu: Menu) -> PrepTaskList:
    """Build grouped prep tasks from a loaded menu."""
    tasks: list[PrepTask] = []
    for entry in sorted(menu.dishes, key=lambda item: item.sort_order):
        tasks.extend(dish_prep_tasks(entry.dish))
    return PrepTaskList(
        menu_id=menu.id,
        menu_name=menu.name,
        generated_at=datetime.now(tz=UTC),
        task_groups=group_prep_tasks(tasks),
        total_tasks=len(tasks),
    )


@dataclass
class PrepTaskService:
    """Service that derives prep tasks for menus."""

    menu_repository: MenuRepository

    def generate_prep_tasks(self, menu_id: UUID) -> PrepTaskList | None:
        """Return prep tasks for a menu grouped by timing bucket."""
        menu = self.menu_repository.get_menu(menu_id)
        if menu is None:
            return None
        return build_prep_task_list(menu)
