"""
Entity models for the TA lab scheduler.
These classes represent the core domain objects used in the scheduling process.
"""
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional, Any


@dataclass(frozen=True)
class Slot:
    """A (day, time) cell of the weekly grid."""
    day: str
    time: int

    def __str__(self) -> str:
        return f"{self.day} {self.time}:00"


@dataclass
class Lab:
    """Represents a lab section that needs a TA."""
    id: str
    code: str
    title: str
    section: str
    instructor_name: Optional[str] = None
    feasible_days: List[str] = field(default_factory=list)  # empty = all default weekdays
    feasible_times: List[int] = field(default_factory=list)  # empty = all slot times
    locked_day: Optional[str] = None
    locked_time: Optional[int] = None

    @property
    def is_slot_locked(self) -> bool:
        """Check if the lab is pinned to a single (day, time) slot."""
        return self.locked_day is not None and self.locked_time is not None

    @property
    def display_name(self) -> str:
        return f"{self.code} {self.section}"


@dataclass
class TA:
    """Represents a teaching assistant with preferences and capacity."""
    id: str
    name: str
    preferred_days: List[str] = field(default_factory=list)
    preferred_times: List[int] = field(default_factory=list)
    max_labs: int = 1
    seed: Optional[int] = None

    def prefers_day(self, day: str) -> bool:
        return day in self.preferred_days

    def prefers_time(self, time: int) -> bool:
        return time in self.preferred_times


@dataclass
class ScoreMeta:
    """Decomposed score of the (TA, slot) pair that produced an assignment."""
    base: float = 0.0
    load_penalty: float = 0.0
    tie_break: float = 0.0

    @property
    def total(self) -> float:
        return self.base - self.load_penalty + self.tie_break


@dataclass
class Assignment:
    """Represents the placement of one lab with one TA at one slot."""
    lab_id: str
    ta_id: str
    day: str
    time: int
    locked: bool = False
    score_meta: ScoreMeta = field(default_factory=ScoreMeta)

    @property
    def slot(self) -> Slot:
        return Slot(self.day, self.time)


@dataclass
class UnassignedLab:
    """A lab the scheduler could not place, with a human-readable reason."""
    lab: Lab
    reason: str


@dataclass
class ScheduleResult:
    """Represents a complete scheduling run."""
    assignments: List[Assignment] = field(default_factory=list)
    unassigned_labs: List[UnassignedLab] = field(default_factory=list)

    def get_ta_assignments(self, ta_id: str) -> List[Assignment]:
        """Get all assignments held by a TA, in result order."""
        return [a for a in self.assignments if a.ta_id == ta_id]

    def get_assignment(self, lab_id: str) -> Optional[Assignment]:
        """Get the assignment of a lab, or None if the lab is not placed."""
        for assignment in self.assignments:
            if assignment.lab_id == lab_id:
                return assignment
        return None

    def assignment_counts(self) -> Dict[str, int]:
        """Count assignments per TA."""
        counts: Dict[str, int] = {}
        for assignment in self.assignments:
            counts[assignment.ta_id] = counts.get(assignment.ta_id, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assignments': [asdict(a) for a in self.assignments],
            'unassigned_labs': [asdict(u) for u in self.unassigned_labs],
        }
