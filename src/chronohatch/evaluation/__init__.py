"""Batch outcome statistics (fertility, hatch rates) and DataFrame exports."""

from .hatch_stats import (
    HISTORY_COLUMNS,
    TASK_COLUMNS,
    HatchSummary,
    fertile_count,
    fertility_rate,
    hatch_rate_of_fertile,
    hatch_rate_of_total,
    history_dataframe,
    percentage,
    summarize_batch,
    tasks_dataframe,
)

__all__ = [
    "HISTORY_COLUMNS",
    "TASK_COLUMNS",
    "HatchSummary",
    "fertile_count",
    "fertility_rate",
    "hatch_rate_of_fertile",
    "hatch_rate_of_total",
    "history_dataframe",
    "percentage",
    "summarize_batch",
    "tasks_dataframe",
]
