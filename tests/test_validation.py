"""
Tests for schedule validation.
"""
import pytest

from ta_scheduler.models.entities import Lab, TA, Assignment
from ta_scheduler.algorithms.validation import validate_schedule


@pytest.fixture
def labs():
    return [
        Lab(id='lab1', code='ENCS_10', title='Programming 1', section='L1',
            feasible_days=['Mon'], feasible_times=[8]),
    ]


@pytest.fixture
def tas():
    return [
        TA(id='ta1', name='TA One', preferred_days=['Mon'], preferred_times=[8], max_labs=1),
    ]


class TestValidateSchedule:
    """Test validate_schedule."""

    def test_valid_schedule(self, labs, tas):
        assignments = [Assignment(lab_id='lab1', ta_id='ta1', day='Mon', time=8)]
        assert validate_schedule(assignments, labs, tas) == []

    def test_empty_schedule(self, labs, tas):
        assert validate_schedule([], labs, tas) == []

    def test_detects_double_booking(self, labs, tas):
        assignments = [
            Assignment(lab_id='lab1', ta_id='ta1', day='Mon', time=8),
            Assignment(lab_id='lab2', ta_id='ta1', day='Mon', time=8),
        ]

        errors = validate_schedule(assignments, labs, tas)

        assert 'TA TA One has multiple labs at Mon 8' in errors

    def test_one_message_per_double_booked_slot(self, labs):
        tas = [TA(id='ta1', name='TA One', max_labs=10)]
        assignments = [
            Assignment(lab_id=f'lab{i}', ta_id='ta1', day='Tue', time=11, locked=True)
            for i in range(3)
        ]

        errors = validate_schedule(assignments, labs, tas)

        assert [e for e in errors if 'multiple labs' in e] == [
            'TA TA One has multiple labs at Tue 11'
        ]

    def test_double_booking_of_unknown_ta_uses_id(self, labs, tas):
        assignments = [
            Assignment(lab_id='a', ta_id='ghost', day='Sun', time=14, locked=True),
            Assignment(lab_id='b', ta_id='ghost', day='Sun', time=14, locked=True),
        ]

        errors = validate_schedule(assignments, labs, tas)

        assert errors == ['TA ghost has multiple labs at Sun 14']

    def test_detects_capacity_violation(self, labs, tas):
        assignments = [
            Assignment(lab_id='lab1', ta_id='ta1', day='Mon', time=8),
            Assignment(lab_id='lab2', ta_id='ta1', day='Tue', time=11),
        ]

        errors = validate_schedule(assignments, labs, tas)

        assert errors == ['TA TA One is assigned 2 labs but max is 1']

    def test_detects_duplicate_lab(self, labs):
        tas = [TA(id='ta1', name='TA One', max_labs=5), TA(id='ta2', name='TA Two', max_labs=5)]
        assignments = [
            Assignment(lab_id='lab1', ta_id='ta1', day='Mon', time=8),
            Assignment(lab_id='lab1', ta_id='ta2', day='Mon', time=8),
        ]

        errors = validate_schedule(assignments, labs, tas)

        assert errors == ['Lab ENCS_10 L1 is assigned 2 times']

    def test_detects_placement_outside_feasible_slots(self, labs, tas):
        assignments = [Assignment(lab_id='lab1', ta_id='ta1', day='Thu', time=14)]

        errors = validate_schedule(assignments, labs, tas)

        assert errors == ['Lab ENCS_10 L1 is scheduled at Thu 14 outside its feasible slots']

    def test_locked_placement_is_not_checked_for_feasibility(self, labs, tas):
        assignments = [Assignment(lab_id='lab1', ta_id='ta1', day='Thu', time=14, locked=True)]
        assert validate_schedule(assignments, labs, tas) == []

    def test_does_not_modify_assignments(self, labs, tas):
        assignments = [
            Assignment(lab_id='lab1', ta_id='ta1', day='Mon', time=8),
            Assignment(lab_id='lab2', ta_id='ta1', day='Mon', time=8),
        ]
        snapshot = list(assignments)

        validate_schedule(assignments, labs, tas)

        assert assignments == snapshot
