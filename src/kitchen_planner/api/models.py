"""Pydantic models for API request bodies."""

from datetime import date

from pydantic import BaseModel


class TaskUpdateRequest(BaseModel):
    """Partial task update; only fields that are sent are applied."""

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    due_date: date | None = None
    due_time: str | None = None
    day_phase: str | None = None
    completed: bool | None = None
