"""
Shared fixtures for the test suite.
"""
import pytest
import pandas as pd

from ta_scheduler.models.entities import Lab, TA


@pytest.fixture
def mock_labs():
    """Two labs on disjoint day/time sets."""
    return [
        Lab(id='lab1', code='ENCS_10', title='Programming 1', section='L1',
            feasible_days=['Mon', 'Wed'], feasible_times=[8, 11]),
        Lab(id='lab2', code='ENCS_11', title='Programming 2', section='L1',
            feasible_days=['Tue', 'Thu'], feasible_times=[11, 14]),
    ]


@pytest.fixture
def mock_tas():
    """Two TAs, each preferring the slots of one of the mock labs."""
    return [
        TA(id='ta1', name='TA One', preferred_days=['Mon', 'Wed'],
           preferred_times=[8, 11], max_labs=2),
        TA(id='ta2', name='TA Two', preferred_days=['Tue', 'Thu'],
           preferred_times=[11, 14], max_labs=2),
    ]


def write_input_files(directory, locked=True):
    """Write a small but complete set of input CSV files."""
    labs_df = pd.DataFrame({
        'Lab ID': ['lab1', 'lab2', 'lab3', 'lab4'],
        'Code': ['ENCS_10', 'ENCS_11', 'ENCS_12', 'ENCS_13'],
        'Title': ['Programming 1', 'Programming 2', 'Circuits', 'Networks'],
        'Section': ['L1', 'L1', 'L2', 'L1'],
        'Instructor': ['Dr. Adams', '', 'Dr. Baker', ''],
        'Feasible Days': ['Mon;Wed', 'Tue;Thu', '', 'Sun'],
        'Feasible Times': ['8;11', '11;14', '', '8'],
        'Locked Day': ['', '', '', ''],
        'Locked Time': ['', '', '', ''],
    })

    tas_df = pd.DataFrame({
        'TA ID': ['ta1', 'ta2', 'ta3'],
        'Name': ['TA One', 'TA Two', 'TA Three'],
        'Preferred Days': ['Mon;Wed', 'Tue;Thu', 'Sun'],
        'Preferred Times': ['8;11', '11;14', '8'],
        'Max Labs': ['2', '2', '1'],
        'Seed': ['', '', '77'],
    })

    labs_df.to_csv(directory / 'Labs.csv', index=False)
    tas_df.to_csv(directory / 'TAs.csv', index=False)

    if locked:
        locked_df = pd.DataFrame({
            'Lab ID': ['lab3'],
            'TA ID': ['ta1'],
            'Day': ['Sun'],
            'Time': ['14'],
        })
        locked_df.to_csv(directory / 'Locked_Assignments.csv', index=False)
