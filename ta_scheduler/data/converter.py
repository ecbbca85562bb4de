"""
Data converter module.

Handles conversions between different data formats:
- DataFrame rows and JSON records to domain objects
- Scheduling results to DataFrames and reports
"""
import re
import logging
from typing import Dict, List, Any, Optional, Iterable, Mapping

import numpy as np
import pandas as pd

from ..config import ALL_DAYS, SLOT_TIMES
from ..algorithms.prng import hash_string
from ..models.entities import Lab, TA, Assignment, ScoreMeta, ScheduleResult

logger = logging.getLogger(__name__)

_DAY_LOOKUP = {day.lower(): day for day in ALL_DAYS}
_DAY_LOOKUP.update({
    'sunday': 'Sun', 'monday': 'Mon', 'tuesday': 'Tue', 'wednesday': 'Wed',
    'thursday': 'Thu', 'friday': 'Fri', 'saturday': 'Sat',
})
_TIME_PATTERN = re.compile(r'^(\d{1,2})(?::(\d{2}))?\s*(am|pm)?$', re.IGNORECASE)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and np.isnan(value):
        return True
    return str(value).strip() == ''


def parse_day(value: Any) -> str:
    """Normalize a day name ('mon', 'Monday', 'MON') to its canonical form."""
    day = _DAY_LOOKUP.get(str(value).strip().lower())
    if day is None:
        raise ValueError(f"Invalid day: {value!r} (expected one of {', '.join(ALL_DAYS)})")
    return day


def parse_time(value: Any) -> int:
    """Normalize a slot time (8, '8', '08:00', '2 PM') to a 24-hour hour value."""
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        hour = int(value)
    elif isinstance(value, float) and value.is_integer():
        hour = int(value)
    else:
        match = _TIME_PATTERN.match(str(value).strip())
        if not match or (match.group(2) not in (None, '00')):
            raise ValueError(f"Invalid time: {value!r}")
        hour = int(match.group(1))
        meridiem = (match.group(3) or '').lower()
        if meridiem == 'pm' and hour < 12:
            hour += 12
        elif meridiem == 'am' and hour == 12:
            hour = 0

    if hour not in SLOT_TIMES:
        raise ValueError(f"Invalid time: {value!r} (expected one of {SLOT_TIMES})")
    return hour


def parse_days(value: Any) -> List[str]:
    return [parse_day(part) for part in _split_list(value)]


def parse_times(value: Any) -> List[int]:
    return [parse_time(part) for part in _split_list(value)]


def _split_list(value: Any) -> List[str]:
    """Split a ';' (or ',') separated cell, or pass a list through."""
    if isinstance(value, (list, tuple, set)):
        return [v for v in value if not _is_blank(v)]
    if _is_blank(value):
        return []
    return [part.strip() for part in re.split(r'[;,]', str(value)) if part.strip()]


def _optional_str(value: Any) -> Optional[str]:
    return None if _is_blank(value) else str(value).strip()


def _parse_int(value: Any, label: str) -> int:
    """Parse a whole number from an int, an integral float or a numeric string."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid {label}: {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    text = str(value).strip()
    if re.fullmatch(r'[+-]?\d+', text):
        return int(text)
    number = float(text)
    if not number.is_integer():
        raise ValueError(f"Invalid {label}: {value!r} is not a whole number")
    return int(number)


def _optional_int(value: Any, label: str) -> Optional[int]:
    return None if _is_blank(value) else _parse_int(value, label)


def format_time(slot_time: int) -> str:
    """Format a slot time for display."""
    return f"{slot_time}:00"


def make_lab_id(code: str, section: str) -> str:
    """Mint a stable lab ID from course code and section."""
    return f"{code}_{section}_{hash_string(code + section)}"


class DataConverter:
    """
    Converts between different data representations used in the system.

    Responsibilities:
    - Convert CSV/DataFrame data and JSON records to domain model objects
    - Convert scheduling results back to DataFrames for output
    - Generate reports from results
    """

    @staticmethod
    def lab_from_record(record: Mapping[str, Any]) -> Lab:
        """
        Build a Lab from a JSON-style record (snake_case keys).

        Args:
            record: Mapping with at least code, title and section

        Returns:
            Lab object
        """
        code = str(record['code']).strip()
        section = str(record['section']).strip()
        lab_id = _optional_str(record.get('id')) or make_lab_id(code, section)

        locked_day = record.get('locked_day')
        locked_time = record.get('locked_time')

        return Lab(
            id=lab_id,
            code=code,
            title=_optional_str(record.get('title')) or '',
            section=section,
            instructor_name=_optional_str(record.get('instructor_name')),
            feasible_days=parse_days(record.get('feasible_days')),
            feasible_times=parse_times(record.get('feasible_times')),
            locked_day=None if _is_blank(locked_day) else parse_day(locked_day),
            locked_time=None if _is_blank(locked_time) else parse_time(locked_time),
        )

    @staticmethod
    def ta_from_record(record: Mapping[str, Any]) -> TA:
        """Build a TA from a JSON-style record (snake_case keys)."""
        max_labs = record.get('max_labs', 1)
        if _is_blank(max_labs):
            max_labs = 1
        max_labs = _parse_int(max_labs, 'max_labs')
        if max_labs < 0:
            raise ValueError(f"TA {record.get('id')}: max_labs must be non-negative, got {max_labs}")

        return TA(
            id=str(record['id']).strip(),
            name=_optional_str(record.get('name')) or str(record['id']).strip(),
            preferred_days=parse_days(record.get('preferred_days')),
            preferred_times=parse_times(record.get('preferred_times')),
            max_labs=max_labs,
            seed=_optional_int(record.get('seed'), 'seed'),
        )

    @staticmethod
    def assignment_from_record(record: Mapping[str, Any]) -> Assignment:
        """Build an Assignment from a JSON-style record (snake_case keys)."""
        meta = record.get('score_meta') or {}
        if not isinstance(meta, Mapping):
            raise ValueError(f"score_meta must be an object, got {meta!r}")
        return Assignment(
            lab_id=str(record['lab_id']),
            ta_id=str(record['ta_id']),
            day=parse_day(record['day']),
            time=parse_time(record['time']),
            locked=bool(record.get('locked', False)),
            score_meta=ScoreMeta(
                base=float(meta.get('base', 0.0)),
                load_penalty=float(meta.get('load_penalty', 0.0)),
                tie_break=float(meta.get('tie_break', 0.0)),
            )
        )

    @staticmethod
    def locked_assignment_from_record(record: Mapping[str, Any]) -> Assignment:
        """Build a locked Assignment; the ``locked`` key of the record is ignored."""
        assignment = DataConverter.assignment_from_record(record)
        assignment.locked = True
        return assignment

    @staticmethod
    def convert_labs(labs_df: pd.DataFrame) -> List[Lab]:
        """
        Convert labs DataFrame to Lab objects.

        Args:
            labs_df: DataFrame containing lab data

        Returns:
            List of Lab objects in file order
        """
        labs = []

        for _, row in labs_df.iterrows():
            labs.append(DataConverter.lab_from_record({
                'id': row.get('Lab ID'),
                'code': row['Code'],
                'title': row.get('Title', ''),
                'section': row['Section'],
                'instructor_name': row.get('Instructor'),
                'feasible_days': row.get('Feasible Days'),
                'feasible_times': row.get('Feasible Times'),
                'locked_day': row.get('Locked Day'),
                'locked_time': row.get('Locked Time'),
            }))

        logger.info(f"Converted {len(labs)} labs")
        return labs

    @staticmethod
    def convert_tas(tas_df: pd.DataFrame) -> List[TA]:
        """
        Convert TAs DataFrame to TA objects.

        Args:
            tas_df: DataFrame containing TA data

        Returns:
            List of TA objects in file order
        """
        tas = []

        for _, row in tas_df.iterrows():
            tas.append(DataConverter.ta_from_record({
                'id': row['TA ID'],
                'name': row.get('Name', row['TA ID']),
                'preferred_days': row.get('Preferred Days'),
                'preferred_times': row.get('Preferred Times'),
                'max_labs': row.get('Max Labs', 1),
                'seed': row.get('Seed'),
            }))

        logger.info(f"Converted {len(tas)} TAs")
        return tas

    @staticmethod
    def convert_locked_assignments(locked_df: Optional[pd.DataFrame]) -> List[Assignment]:
        """Convert a locked assignments DataFrame to locked Assignment objects."""
        if locked_df is None:
            return []

        assignments = []
        for _, row in locked_df.iterrows():
            assignments.append(Assignment(
                lab_id=str(row['Lab ID']).strip(),
                ta_id=str(row['TA ID']).strip(),
                day=parse_day(row['Day']),
                time=parse_time(row['Time']),
                locked=True
            ))

        return assignments

    @staticmethod
    def convert_to_assignments_df(result: ScheduleResult,
                                  labs: Iterable[Lab],
                                  tas: Iterable[TA]) -> pd.DataFrame:
        """
        Convert a result to an assignments DataFrame.

        Returns:
            DataFrame with one row per assignment, including score breakdown
        """
        lab_map = {lab.id: lab for lab in labs}
        ta_map = {ta.id: ta for ta in tas}
        rows = []

        for assignment in result.assignments:
            lab = lab_map.get(assignment.lab_id)
            ta = ta_map.get(assignment.ta_id)
            rows.append({
                'Lab ID': assignment.lab_id,
                'Code': lab.code if lab else '',
                'Section': lab.section if lab else '',
                'Title': lab.title if lab else '',
                'TA ID': assignment.ta_id,
                'TA Name': ta.name if ta else '',
                'Day': assignment.day,
                'Time': format_time(assignment.time),
                'Locked': assignment.locked,
                'Base Score': assignment.score_meta.base,
                'Load Penalty': assignment.score_meta.load_penalty,
                'Tie Break': assignment.score_meta.tie_break,
            })

        columns = ['Lab ID', 'Code', 'Section', 'Title', 'TA ID', 'TA Name', 'Day', 'Time',
                   'Locked', 'Base Score', 'Load Penalty', 'Tie Break']
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def convert_to_unassigned_df(result: ScheduleResult) -> pd.DataFrame:
        rows = [{
            'Lab ID': item.lab.id,
            'Code': item.lab.code,
            'Section': item.lab.section,
            'Title': item.lab.title,
            'Reason': item.reason,
        } for item in result.unassigned_labs]

        return pd.DataFrame(rows, columns=['Lab ID', 'Code', 'Section', 'Title', 'Reason'])

    @staticmethod
    def convert_to_ta_schedule_df(result: ScheduleResult,
                                  labs: Iterable[Lab],
                                  tas: Iterable[TA]) -> pd.DataFrame:
        """
        Build the weekly grid of every TA.

        Returns:
            DataFrame with columns TA ID, TA Name, Time and one column per day;
            each cell lists the labs held at that slot
        """
        lab_map = {lab.id: lab for lab in labs}
        cells: Dict[tuple, List[str]] = {}
        for assignment in result.assignments:
            lab = lab_map.get(assignment.lab_id)
            label = lab.display_name if lab else assignment.lab_id
            cells.setdefault((assignment.ta_id, assignment.time, assignment.day), []).append(label)

        rows = []
        for ta in tas:
            for slot_time in SLOT_TIMES:
                row = {'TA ID': ta.id, 'TA Name': ta.name, 'Time': format_time(slot_time)}
                for day in ALL_DAYS:
                    row[day] = ', '.join(cells.get((ta.id, slot_time, day), []))
                rows.append(row)

        return pd.DataFrame(rows, columns=['TA ID', 'TA Name', 'Time'] + list(ALL_DAYS))

    @staticmethod
    def generate_load_report(result: ScheduleResult, tas: Iterable[TA]) -> pd.DataFrame:
        """
        Generate a report on TA load.

        Returns:
            DataFrame with assigned count, capacity, utilization and status per TA
        """
        tas = list(tas)
        counts = result.assignment_counts()

        assigned = np.array([counts.get(ta.id, 0) for ta in tas], dtype=float)
        capacity = np.array([ta.max_labs for ta in tas], dtype=float)
        utilization = np.divide(assigned, capacity, out=np.zeros_like(assigned), where=capacity > 0)

        statuses = []
        for count, limit in zip(assigned, capacity):
            if count > limit:
                statuses.append('Over')
            elif count == 0:
                statuses.append('Idle')
            elif count == limit:
                statuses.append('Full')
            else:
                statuses.append('Under')

        return pd.DataFrame({
            'TA ID': [ta.id for ta in tas],
            'TA Name': [ta.name for ta in tas],
            'Assigned Labs': assigned.astype(int),
            'Max Labs': capacity.astype(int),
            'Utilization': utilization,
            'Status': statuses,
        }, columns=['TA ID', 'TA Name', 'Assigned Labs', 'Max Labs', 'Utilization', 'Status'])
