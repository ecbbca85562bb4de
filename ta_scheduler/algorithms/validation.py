"""
Schedule validation.

Re-checks a finished assignment list against the rules the greedy pass is
meant to guarantee. Useful after manual edits, and as the oracle in tests.
Violations are reported, never repaired.
"""
import logging
from collections import Counter, defaultdict
from typing import Dict, List, Sequence, Tuple

from ..models.entities import Lab, TA, Assignment
from .greedy import get_feasible_slots

logger = logging.getLogger(__name__)


def _check_double_booking(assignments: Sequence[Assignment], ta_map: Dict[str, TA]) -> List[str]:
    slot_map: Dict[Tuple[str, str, int], List[Assignment]] = defaultdict(list)
    for assignment in assignments:
        slot_map[(assignment.ta_id, assignment.day, assignment.time)].append(assignment)

    errors = []
    for (ta_id, day, slot_time), booked in slot_map.items():
        if len(booked) > 1:
            ta = ta_map.get(ta_id)
            name = ta.name if ta else ta_id
            errors.append(f"TA {name} has multiple labs at {day} {slot_time}")
    return errors


def _check_capacity(assignments: Sequence[Assignment], ta_map: Dict[str, TA]) -> List[str]:
    counts = Counter(a.ta_id for a in assignments)

    errors = []
    for ta_id, count in counts.items():
        ta = ta_map.get(ta_id)
        if ta and count > ta.max_labs:
            errors.append(f"TA {ta.name} is assigned {count} labs but max is {ta.max_labs}")
    return errors


def _check_duplicate_labs(assignments: Sequence[Assignment], lab_map: Dict[str, Lab]) -> List[str]:
    counts = Counter(a.lab_id for a in assignments)

    errors = []
    for lab_id, count in counts.items():
        if count > 1:
            lab = lab_map.get(lab_id)
            name = lab.display_name if lab else lab_id
            errors.append(f"Lab {name} is assigned {count} times")
    return errors


def _check_feasibility(assignments: Sequence[Assignment], lab_map: Dict[str, Lab]) -> List[str]:
    errors = []
    for assignment in assignments:
        # Locked placements are taken as given
        if assignment.locked:
            continue
        lab = lab_map.get(assignment.lab_id)
        if lab is None:
            continue
        if assignment.slot not in get_feasible_slots(lab):
            errors.append(
                f"Lab {lab.display_name} is scheduled at {assignment.day} {assignment.time} "
                f"outside its feasible slots"
            )
    return errors


def validate_schedule(assignments: Sequence[Assignment],
                      labs: Sequence[Lab],
                      tas: Sequence[TA]) -> List[str]:
    """
    Validate a schedule for conflicts.

    Checks double-booked TA slots, TA capacity overruns, labs assigned more
    than once and unlocked placements outside a lab's feasible slots.

    Args:
        assignments: Assignments to check
        labs: Labs referenced by the assignments
        tas: TAs referenced by the assignments

    Returns:
        List of violation messages, empty when the schedule is legal
    """
    ta_map = {ta.id: ta for ta in tas}
    lab_map = {lab.id: lab for lab in labs}

    errors = []
    errors.extend(_check_double_booking(assignments, ta_map))
    errors.extend(_check_capacity(assignments, ta_map))
    errors.extend(_check_duplicate_labs(assignments, lab_map))
    errors.extend(_check_feasibility(assignments, lab_map))

    if errors:
        logger.warning(f"Schedule validation found {len(errors)} violations")
    return errors
