"""
Greedy algorithm implementation for TA lab assignment.

Labs are placed one at a time, hardest first, each with the best scoring
(TA, slot) pair still available. There is no backtracking: a lab that finds
no pair is reported as unassigned and the run moves on.
"""
import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..config import (
    DEFAULT_DAYS, SLOT_TIMES, PREFERRED_DAY_BONUS, PREFERRED_TIME_BONUS,
    LOAD_PENALTY_WEIGHT, ZERO_CAPACITY_PENALTY, TIE_BREAK_SCALE,
    FALLBACK_SEED_RANGE, NO_FEASIBLE_SLOTS_REASON, NO_AVAILABLE_TA_REASON,
)
from ..models.entities import (
    Lab, TA, Slot, Assignment, ScoreMeta, UnassignedLab, ScheduleResult
)
from .prng import SeededRandom

# Configure logger
logger = logging.getLogger(__name__)

# (day, time, ta_id)
OccupancyKey = Tuple[str, int, str]


@dataclass
class Match:
    """Best (TA, slot) candidate found for a lab."""
    ta: TA
    slot: Slot
    base: float
    load_penalty: float
    tie_break: float

    @property
    def total(self) -> float:
        return self.base - self.load_penalty + self.tie_break


def get_feasible_slots(lab: Lab,
                       default_days: Sequence[str] = DEFAULT_DAYS,
                       default_times: Sequence[int] = SLOT_TIMES) -> List[Slot]:
    """
    Expand a lab's constraints into the slots it may occupy.

    A lab locked to a day and time has exactly that slot. Otherwise empty
    day/time constraints fall back to the defaults and the result is the
    day-major cross product.

    Args:
        lab: Lab to expand
        default_days: Days used when the lab lists none
        default_times: Times used when the lab lists none

    Returns:
        Ordered list of candidate slots
    """
    if lab.is_slot_locked:
        return [Slot(lab.locked_day, lab.locked_time)]

    days = lab.feasible_days if lab.feasible_days else default_days
    times = lab.feasible_times if lab.feasible_times else default_times

    return [Slot(day, slot_time) for day in days for slot_time in times]


def sort_labs_by_difficulty(labs: Iterable[Lab],
                            rng: SeededRandom,
                            default_days: Sequence[str] = DEFAULT_DAYS,
                            default_times: Sequence[int] = SLOT_TIMES) -> List[Lab]:
    """
    Order labs so the ones with the fewest feasible slots come first.

    One tie-break value is drawn per lab, in input order, before sorting.
    """
    keyed = []
    for lab in labs:
        slot_count = len(get_feasible_slots(lab, default_days, default_times))
        keyed.append((slot_count, rng.next(), lab))

    keyed.sort(key=lambda item: (item[0], item[1]))
    return [lab for _, _, lab in keyed]


def calculate_base_score(ta: TA, slot: Slot) -> float:
    """Preference score of a slot for a TA, from 0 to 4."""
    score = 0
    if ta.prefers_day(slot.day):
        score += PREFERRED_DAY_BONUS
    if ta.prefers_time(slot.time):
        score += PREFERRED_TIME_BONUS
    return score


def calculate_load_penalty(assigned_count: int, max_labs: int) -> float:
    """Penalty growing with the share of capacity a TA already uses."""
    if max_labs == 0:
        return ZERO_CAPACITY_PENALTY
    return LOAD_PENALTY_WEIGHT * (assigned_count / max_labs)


def build_ta_streams(tas: Sequence[TA], rng: SeededRandom) -> Dict[str, SeededRandom]:
    """
    Create the private tie-break stream of every TA.

    A TA's own seed is used when present; otherwise a pseudo-seed is drawn
    from the shared generator. Draws happen in TA list order.
    """
    streams = {}
    for ta in tas:
        if ta.seed is not None:
            streams[ta.id] = SeededRandom(ta.seed)
        else:
            streams[ta.id] = SeededRandom(rng.next_int(*FALLBACK_SEED_RANGE))
    return streams


def find_best_match(feasible_slots: Sequence[Slot],
                    tas: Sequence[TA],
                    ta_assignments: Dict[str, List[Assignment]],
                    slot_occupancy: Dict[OccupancyKey, str],
                    ta_streams: Dict[str, SeededRandom]) -> Optional[Match]:
    """
    Score every free (TA, slot) pair for a lab and return the best.

    TAs are scanned in list order and slots in feasible order; a candidate
    replaces the current best only with a strictly greater total.

    Args:
        feasible_slots: Slots the lab may occupy
        tas: All TAs
        ta_assignments: Running assignments per TA ID
        slot_occupancy: Occupied (day, time, ta_id) keys
        ta_streams: Private tie-break stream per TA ID

    Returns:
        The winning Match, or None if no TA has a free feasible slot
    """
    best: Optional[Match] = None

    for ta in tas:
        assigned_count = len(ta_assignments.get(ta.id, []))

        # TA at capacity
        if assigned_count >= ta.max_labs:
            continue

        stream = ta_streams[ta.id]
        for slot in feasible_slots:
            if (slot.day, slot.time, ta.id) in slot_occupancy:
                continue

            candidate = Match(
                ta=ta,
                slot=slot,
                base=calculate_base_score(ta, slot),
                load_penalty=calculate_load_penalty(assigned_count, ta.max_labs),
                tie_break=stream.next() * TIE_BREAK_SCALE,
            )

            if best is None or candidate.total > best.total:
                best = candidate

    return best


class GreedyScheduler:
    """
    Drives one scheduling run.

    The run works in three phases:
    1. Seed working state from locked assignments
    2. Order the remaining labs by difficulty
    3. Place each lab with its best (TA, slot) pair or report it unassigned

    Working state lives on the instance and is rebuilt by every call to
    ``schedule``; inputs are never modified.
    """

    def __init__(self,
                 labs: Sequence[Lab],
                 tas: Sequence[TA],
                 seed: int,
                 locked_assignments: Optional[Sequence[Assignment]] = None,
                 default_days: Sequence[str] = DEFAULT_DAYS,
                 default_times: Sequence[int] = SLOT_TIMES):
        """
        Initialize the scheduler with the necessary data.

        Args:
            labs: Labs to place
            tas: Available TAs, in scan order
            seed: Global seed for the shared generator
            locked_assignments: Assignments from a previous run or manual edit;
                only those flagged ``locked`` are kept
            default_days: Days used for labs without day constraints
            default_times: Times used for labs without time constraints
        """
        self.labs = list(labs)
        self.tas = list(tas)
        self.seed = seed
        self.locked_assignments = [a for a in (locked_assignments or []) if a.locked]
        self.default_days = tuple(default_days)
        self.default_times = tuple(default_times)

        # Schedule tracking
        self.rng = SeededRandom(seed)
        self.ta_assignments: Dict[str, List[Assignment]] = defaultdict(list)
        self.slot_occupancy: Dict[OccupancyKey, str] = {}
        self.assignments: List[Assignment] = []
        self.unassigned_labs: List[UnassignedLab] = []

    def _reset(self) -> None:
        self.rng = SeededRandom(self.seed)
        self.ta_assignments = defaultdict(list)
        self.slot_occupancy = {}
        self.assignments = []
        self.unassigned_labs = []

    def _record(self, assignment: Assignment) -> None:
        self.assignments.append(assignment)
        self.ta_assignments[assignment.ta_id].append(assignment)
        self.slot_occupancy[(assignment.day, assignment.time, assignment.ta_id)] = assignment.lab_id

    def _seed_locked(self) -> Set[str]:
        """
        Record locked assignments in the working state.

        Returns:
            IDs of labs covered by a locked assignment
        """
        for assignment in self.locked_assignments:
            self._record(assignment)
        return {a.lab_id for a in self.locked_assignments}

    def _mark_unassigned(self, lab: Lab, reason: str) -> None:
        self.unassigned_labs.append(UnassignedLab(lab=lab, reason=reason))
        logger.warning(f"Could not assign lab {lab.id} ({lab.display_name}): {reason}")

    def _assign_lab(self, lab: Lab, ta_streams: Dict[str, SeededRandom]) -> None:
        feasible_slots = get_feasible_slots(lab, self.default_days, self.default_times)

        if not feasible_slots:
            self._mark_unassigned(lab, NO_FEASIBLE_SLOTS_REASON)
            return

        match = find_best_match(
            feasible_slots,
            self.tas,
            self.ta_assignments,
            self.slot_occupancy,
            ta_streams
        )

        if match is None:
            self._mark_unassigned(lab, NO_AVAILABLE_TA_REASON)
            return

        assignment = Assignment(
            lab_id=lab.id,
            ta_id=match.ta.id,
            day=match.slot.day,
            time=match.slot.time,
            locked=False,
            score_meta=ScoreMeta(
                base=match.base,
                load_penalty=match.load_penalty,
                tie_break=match.tie_break
            )
        )
        self._record(assignment)
        logger.debug(f"Assigned lab {lab.id} to TA {match.ta.id} at {match.slot} "
                     f"(score {match.total:.4f})")

    def schedule(self) -> ScheduleResult:
        """
        Run the greedy scheduling pass.

        Returns:
            ScheduleResult with the assignments (locked ones first) and the
            labs that could not be placed
        """
        start_time = time.time()
        self._reset()
        logger.info(f"Starting greedy scheduling: {len(self.labs)} labs, {len(self.tas)} TAs, "
                    f"{len(self.locked_assignments)} locked assignments, seed {self.seed}")

        locked_lab_ids = self._seed_locked()
        open_labs = [lab for lab in self.labs if lab.id not in locked_lab_ids]

        sorted_labs = sort_labs_by_difficulty(
            open_labs, self.rng, self.default_days, self.default_times
        )
        ta_streams = build_ta_streams(self.tas, self.rng)

        for lab in sorted_labs:
            self._assign_lab(lab, ta_streams)

        placed = len(self.assignments) - len(self.locked_assignments)
        logger.info(f"Assigned {placed}/{len(open_labs)} open labs, "
                    f"{len(self.unassigned_labs)} unassigned")
        logger.info(f"Greedy scheduling completed in {time.time() - start_time:.2f} seconds")

        return ScheduleResult(
            assignments=list(self.assignments),
            unassigned_labs=list(self.unassigned_labs)
        )


def schedule_assignments(labs: Sequence[Lab],
                         tas: Sequence[TA],
                         global_seed: int,
                         existing_locked_assignments: Optional[Sequence[Assignment]] = None
                         ) -> ScheduleResult:
    """
    Assign labs to TAs.

    Args:
        labs: Labs to place
        tas: Available TAs
        global_seed: Seed for reproducible tie-breaking
        existing_locked_assignments: Previously locked assignments to keep

    Returns:
        ScheduleResult with assignments and unassigned labs
    """
    scheduler = GreedyScheduler(labs, tas, global_seed, existing_locked_assignments)
    return scheduler.schedule()
