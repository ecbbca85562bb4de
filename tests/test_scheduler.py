"""
Tests for the file-based scheduling service and the CLI.
"""
import json

import pytest
import pandas as pd

from ta_scheduler.scheduler import ScheduleService
from ta_scheduler.cli import main as cli_main
from tests.conftest import write_input_files


@pytest.fixture
def input_dir(tmp_path):
    directory = tmp_path / 'input'
    directory.mkdir()
    write_input_files(directory)
    return directory


class TestScheduleService:
    """Test the ScheduleService class."""

    def test_run(self, input_dir, tmp_path):
        service = ScheduleService(str(input_dir), str(tmp_path / 'output'), seed=42)
        results = service.run()

        assert results['success'] is True
        assert results['seed'] == 42
        assert results['schedule_summary'] == {
            'total_labs': 4,
            'total_tas': 3,
            'assigned_labs': 4,
            'locked_assignments': 1,
            'unassigned_labs': 0
        }
        assert results['violations'] == []
        assert results['data_issues'] == []
        assert set(results['metrics']) == {'load_time', 'conversion_time', 'scheduling_time', 'total_time'}

    def test_output_files(self, input_dir, tmp_path):
        service = ScheduleService(str(input_dir), str(tmp_path / 'output'), seed=42)
        results = service.run()

        for path in results['output_files'].values():
            assert (tmp_path / 'output').joinpath(path.split('/')[-1]).exists()

        assignments = pd.read_csv(results['output_files']['assignments'])
        by_lab = dict(zip(assignments['Lab ID'], assignments['TA ID']))
        assert by_lab == {'lab1': 'ta1', 'lab2': 'ta2', 'lab3': 'ta1', 'lab4': 'ta3'}

        locked = assignments[assignments['Lab ID'] == 'lab3'].iloc[0]
        assert bool(locked['Locked']) is True
        assert locked['Day'] == 'Sun'

        schedule = pd.read_csv(results['output_files']['ta_schedule'])
        assert len(schedule) == 9

    def test_same_seed_same_output(self, input_dir, tmp_path):
        first = ScheduleService(str(input_dir), str(tmp_path / 'a'), seed=7).run()
        second = ScheduleService(str(input_dir), str(tmp_path / 'b'), seed=7).run()

        with open(first['output_files']['assignments']) as f1, \
                open(second['output_files']['assignments']) as f2:
            assert f1.read() == f2.read()

    def test_generates_seed_when_omitted(self, input_dir, tmp_path):
        service = ScheduleService(str(input_dir), str(tmp_path / 'output'))
        assert isinstance(service.seed, int)
        assert service.run()['seed'] == service.seed

    def test_default_seed_from_environment(self, input_dir, tmp_path, monkeypatch):
        monkeypatch.setenv('DEFAULT_SEED', '321')

        service = ScheduleService(str(input_dir), str(tmp_path / 'output'))

        assert service.seed == 321

    def test_explicit_seed_overrides_environment(self, input_dir, tmp_path, monkeypatch):
        monkeypatch.setenv('DEFAULT_SEED', '321')

        service = ScheduleService(str(input_dir), str(tmp_path / 'output'), seed=0)

        assert service.seed == 0

    def test_failure_is_reported(self, input_dir, tmp_path):
        (input_dir / 'TAs.csv').unlink()

        results = ScheduleService(str(input_dir), str(tmp_path / 'output'), seed=1).run()

        assert results['success'] is False
        assert 'error' in results

    def test_data_issues_are_reported(self, input_dir, tmp_path):
        pd.DataFrame({
            'Lab ID': ['lab9'], 'TA ID': ['ta1'], 'Day': ['Mon'], 'Time': ['8'],
        }).to_csv(input_dir / 'Locked_Assignments.csv', index=False)

        results = ScheduleService(str(input_dir), str(tmp_path / 'output'), seed=1).run()

        assert results['success'] is True
        assert results['data_issues'] == ["Locked assignments reference unknown labs: ['lab9']"]


class TestCLI:
    """Test the command-line interface."""

    def test_json_output(self, input_dir, tmp_path, capsys):
        cli_main(['--input-dir', str(input_dir), '--output-dir', str(tmp_path / 'out'),
                  '--seed', '3', '--json-output'])

        results = json.loads(capsys.readouterr().out)

        assert results['success'] is True
        assert results['seed'] == 3
        assert results['schedule_summary']['assigned_labs'] == 4

    def test_summary_output(self, input_dir, tmp_path, capsys):
        cli_main(['--input-dir', str(input_dir), '--output-dir', str(tmp_path / 'out'), '--seed', '3'])

        out = capsys.readouterr().out

        assert 'Scheduling Results:' in out
        assert 'Labs assigned: 4/4' in out

    def test_missing_input_dir(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli_main(['--input-dir', str(tmp_path / 'missing'), '--output-dir', str(tmp_path / 'out')])

        assert exc_info.value.code == 1

    def test_failed_run_exits_nonzero(self, input_dir, tmp_path):
        (input_dir / 'Labs.csv').unlink()

        with pytest.raises(SystemExit) as exc_info:
            cli_main(['--input-dir', str(input_dir), '--output-dir', str(tmp_path / 'out'), '--seed', '1'])

        assert exc_info.value.code == 1
