"""
Main scheduling service module.

This module provides the file-based scheduling service.
It orchestrates the loading of data, running the assignment engine,
validating and saving the results.
"""
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Any

import pandas as pd

from .data.loader import ScheduleDataLoader
from .data.converter import DataConverter
from .models.entities import ScheduleResult
from .algorithms.greedy import schedule_assignments
from .algorithms.validation import validate_schedule
from .algorithms.prng import generate_seed
from .config import AppSettings

logger = logging.getLogger(__name__)


class ScheduleService:
    """
    File-based TA lab scheduling service.

    This class is responsible for:
    - Loading input data
    - Running the greedy assignment engine
    - Validating, saving and summarizing results
    """

    def __init__(self, input_dir: str, output_dir: str, seed: Optional[int] = None):
        """
        Initialize the scheduling service.

        Args:
            input_dir: Directory containing input CSV files
            output_dir: Directory where output CSV files will be saved
            seed: Global seed; falls back to DEFAULT_SEED, then to a fresh one
        """
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        if seed is None:
            seed = AppSettings.from_env().default_seed
        self.seed = seed if seed is not None else generate_seed()

        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)

        self.loader = ScheduleDataLoader(str(input_dir))
        self.converter = DataConverter()

        self.metrics = {
            'load_time': 0,
            'conversion_time': 0,
            'scheduling_time': 0,
            'total_time': 0
        }

    def load_data(self) -> Dict[str, pd.DataFrame]:
        """
        Load input data files.

        Returns:
            Dictionary of DataFrames containing the loaded data
        """
        start_time = time.time()
        logger.info(f"Loading data from {self.input_dir}")

        try:
            data = self.loader.load_all()

            self.metrics['load_time'] = time.time() - start_time
            logger.info(f"Data loaded successfully in {self.metrics['load_time']:.2f} seconds")

            return data
        except Exception as e:
            logger.error(f"Error loading data: {str(e)}")
            raise

    def convert_data(self, data: Dict[str, pd.DataFrame]) -> Dict[str, Any]:
        """
        Convert CSV data to domain model objects.

        Args:
            data: Dictionary of DataFrames

        Returns:
            Dictionary with 'labs', 'tas' and 'locked_assignments' lists
        """
        start_time = time.time()
        logger.info("Converting data to domain model")

        try:
            domain_data = {
                'labs': self.converter.convert_labs(data['labs']),
                'tas': self.converter.convert_tas(data['tas']),
                'locked_assignments': self.converter.convert_locked_assignments(
                    data.get('locked_assignments')
                ),
            }

            self.metrics['conversion_time'] = time.time() - start_time
            logger.info(f"Data converted successfully in {self.metrics['conversion_time']:.2f} seconds")

            return domain_data
        except Exception as e:
            logger.error(f"Error converting data: {str(e)}")
            raise

    def run_scheduling(self, domain_data: Dict[str, Any]) -> ScheduleResult:
        """
        Run the assignment engine.

        Args:
            domain_data: Dictionary containing domain objects

        Returns:
            ScheduleResult
        """
        start_time = time.time()
        logger.info(f"Starting scheduling with seed {self.seed}")

        result = schedule_assignments(
            domain_data['labs'],
            domain_data['tas'],
            self.seed,
            domain_data['locked_assignments']
        )

        self.metrics['scheduling_time'] = time.time() - start_time
        logger.info(f"Scheduling completed in {self.metrics['scheduling_time']:.2f} seconds")

        return result

    def save_results(self, result: ScheduleResult, domain_data: Dict[str, Any]) -> Dict[str, str]:
        """
        Save scheduling results to CSV files.

        Args:
            result: ScheduleResult to save
            domain_data: Domain objects the result was computed from

        Returns:
            Dictionary of output file paths
        """
        logger.info(f"Saving results to {self.output_dir}")

        labs = domain_data['labs']
        tas = domain_data['tas']

        assignments_df = self.converter.convert_to_assignments_df(result, labs, tas)
        unassigned_df = self.converter.convert_to_unassigned_df(result)
        ta_schedule_df = self.converter.convert_to_ta_schedule_df(result, labs, tas)
        load_report_df = self.converter.generate_load_report(result, tas)

        output_files = {
            'assignments': str(self.output_dir / 'Assignments.csv'),
            'unassigned_labs': str(self.output_dir / 'Unassigned_Labs.csv'),
            'ta_schedule': str(self.output_dir / 'TA_Schedule.csv'),
            'ta_load_report': str(self.output_dir / 'TA_Load_Report.csv')
        }

        assignments_df.to_csv(output_files['assignments'], index=False)
        unassigned_df.to_csv(output_files['unassigned_labs'], index=False)
        ta_schedule_df.to_csv(output_files['ta_schedule'], index=False)
        load_report_df.to_csv(output_files['ta_load_report'], index=False)

        logger.info("Results saved successfully")

        return output_files

    def run(self) -> Dict[str, Any]:
        """
        Run the complete scheduling process.

        Returns:
            Dictionary containing results summary, violations, output files
            and metrics
        """
        total_start_time = time.time()
        logger.info("Starting complete scheduling process")

        try:
            data = self.load_data()
            domain_data = self.convert_data(data)
            result = self.run_scheduling(domain_data)

            violations: List[str] = validate_schedule(
                result.assignments, domain_data['labs'], domain_data['tas']
            )
            output_files = self.save_results(result, domain_data)

            self.metrics['total_time'] = time.time() - total_start_time

            results = {
                'seed': self.seed,
                'schedule_summary': {
                    'total_labs': len(domain_data['labs']),
                    'total_tas': len(domain_data['tas']),
                    'assigned_labs': len(result.assignments),
                    'locked_assignments': len([a for a in result.assignments if a.locked]),
                    'unassigned_labs': len(result.unassigned_labs)
                },
                'data_issues': list(self.loader.validation_issues),
                'violations': violations,
                'output_files': output_files,
                'metrics': self.metrics,
                'success': True
            }

            logger.info(f"Scheduling completed successfully in {self.metrics['total_time']:.2f} seconds")

            return results

        except Exception as e:
            logger.error(f"Scheduling failed: {str(e)}")

            self.metrics['total_time'] = time.time() - total_start_time

            return {
                'seed': self.seed,
                'error': str(e),
                'metrics': self.metrics,
                'success': False
            }
