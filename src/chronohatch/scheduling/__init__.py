"""Scheduling utilities (incubation timeline arithmetic and care-task generation)."""

from .models import (
    TASK_TYPE_ORDER,
    BatchTimeline,
    Day,
    IncubatorType,
    Task,
    TaskType,
    normalise_candling_days,
)
from .tasks import generate_tasks, sort_tasks, tasks_for_day
from .timeline import (
    current_incubation_day,
    date_for_incubation_day,
    days_until_lockdown,
    estimated_hatch_date,
    format_calendar_date,
    parse_calendar_date,
    progress_percentage,
)

__all__ = [
    "Day",
    "IncubatorType",
    "TaskType",
    "TASK_TYPE_ORDER",
    "Task",
    "BatchTimeline",
    "normalise_candling_days",
    "generate_tasks",
    "sort_tasks",
    "tasks_for_day",
    "current_incubation_day",
    "date_for_incubation_day",
    "days_until_lockdown",
    "estimated_hatch_date",
    "format_calendar_date",
    "parse_calendar_date",
    "progress_percentage",
]
