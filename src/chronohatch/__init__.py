"""ChronoHatch: egg-incubation batch tracking with generated care schedules."""

from chronohatch.batches.manager import BatchManager
from chronohatch.batches.lifecycle import should_regenerate
from chronohatch.scheduling import current_incubation_day, generate_tasks, progress_percentage
from chronohatch.status import classify_status

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BatchManager",
    "classify_status",
    "current_incubation_day",
    "generate_tasks",
    "progress_percentage",
    "should_regenerate",
]
