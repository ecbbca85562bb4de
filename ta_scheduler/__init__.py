"""
TA lab scheduler.

Assigns lab sections to teaching assistants over a small (day, time) grid
with a seeded, difficulty-ordered greedy pass.
"""
from .algorithms.greedy import schedule_assignments
from .algorithms.validation import validate_schedule
from .models.entities import Lab, TA, Assignment, ScoreMeta, UnassignedLab, ScheduleResult

__version__ = "0.1.0"

__all__ = [
    'schedule_assignments',
    'validate_schedule',
    'Lab',
    'TA',
    'Assignment',
    'ScoreMeta',
    'UnassignedLab',
    'ScheduleResult',
]
