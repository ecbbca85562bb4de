import datetime
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .converter import make_lab_id

logger = logging.getLogger(__name__)

LABS_FILE = 'Labs.csv'
TAS_FILE = 'TAs.csv'
LOCKED_FILE = 'Locked_Assignments.csv'

LAB_COLUMNS = ['Lab ID', 'Code', 'Title', 'Section', 'Instructor',
               'Feasible Days', 'Feasible Times', 'Locked Day', 'Locked Time']
TA_COLUMNS = ['TA ID', 'Name', 'Preferred Days', 'Preferred Times', 'Max Labs', 'Seed']
LOCKED_COLUMNS = ['Lab ID', 'TA ID', 'Day', 'Time']

REQUIRED_LAB_COLUMNS = ['Code', 'Section']
REQUIRED_TA_COLUMNS = ['TA ID', 'Max Labs']


class ScheduleDataLoader:
    """
    Handles loading and validating scheduling data from CSV files.
    Provides validation and relationship checking between labs, TAs and
    locked assignments.
    """

    def __init__(self, input_dir: Optional[str] = None, debug_dir: Optional[str] = None):
        """
        Initialize the data loader.

        Args:
            input_dir: Directory containing input CSV files
            debug_dir: Optional directory for a timestamped loader log file
        """
        self.input_dir = Path(input_dir) if input_dir else Path.cwd()
        self.debug_dir = Path(debug_dir) if debug_dir else None
        self.log_file = None

        if self.debug_dir is not None:
            self.debug_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            self.log_file = self.debug_dir / f"data_loader_{timestamp}.log"

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
            logger.addHandler(file_handler)

        # Initialize data dictionary
        self.data: Dict[str, pd.DataFrame] = {}
        self.validation_issues: List[str] = []

        if not self.input_dir.exists():
            logger.error(f"Input directory not found at {self.input_dir}")
            raise FileNotFoundError(f"Input directory not found at {self.input_dir}")

        logger.info("Data loader initialized successfully")

    def _read_csv(self, file_name: str, required_columns: List[str],
                  optional_columns: Optional[List[str]] = None) -> pd.DataFrame:
        df = pd.read_csv(self.input_dir / file_name, dtype=str, skipinitialspace=True)
        df.columns = [c.strip() for c in df.columns]

        missing = [c for c in required_columns if c not in df.columns]
        if missing:
            raise ValueError(f"{file_name} is missing required columns: {', '.join(missing)}")
        for column in optional_columns or []:
            if column not in df.columns:
                df[column] = None
        return df

    def load_base_data(self):
        """
        Load the primary data files required for scheduling:
        - Labs
        - TAs
        """
        try:
            logger.info("Loading base data files...")

            self.data['labs'] = self._read_csv(LABS_FILE, REQUIRED_LAB_COLUMNS, LAB_COLUMNS)
            logger.info(f"Labs loaded: {len(self.data['labs'])} records")

            self.data['tas'] = self._read_csv(TAS_FILE, REQUIRED_TA_COLUMNS, TA_COLUMNS)
            logger.info(f"TAs loaded: {len(self.data['tas'])} records")

        except FileNotFoundError as e:
            logger.error(f"Missing input file: {e.filename}")
            raise

    def load_locked_assignments(self):
        """
        Load locked assignments carried over from a previous run.
        The file is optional; a missing or empty file yields no locks.
        """
        try:
            self.data['locked_assignments'] = self._read_csv(LOCKED_FILE, LOCKED_COLUMNS)
            logger.info(f"Locked assignments: {len(self.data['locked_assignments'])} records")
        except (pd.errors.EmptyDataError, FileNotFoundError):
            self.data['locked_assignments'] = pd.DataFrame(columns=LOCKED_COLUMNS)
            logger.warning("Locked assignments not found or empty, using empty dataset")

    def effective_lab_ids(self) -> pd.Series:
        """IDs the labs will carry once converted (minted where the file has none)."""
        labs = self.data['labs']
        ids = []
        for _, row in labs.iterrows():
            lab_id = row.get('Lab ID')
            if pd.isna(lab_id) or not str(lab_id).strip():
                lab_id = make_lab_id(str(row['Code']).strip(), str(row['Section']).strip())
            ids.append(str(lab_id).strip())
        return pd.Series(ids, dtype=object)

    def validate_relationships(self) -> List[str]:
        """
        Validate relationships and data consistency across loaded datasets.
        Checks for:
        - Duplicate lab IDs
        - Labs without code, section or title
        - Locked assignments referencing unknown labs or TAs
        - TAs with zero capacity
        """
        logger.info("Validating data relationships...")
        validation_issues = []

        labs = self.data['labs']
        tas = self.data['tas']
        locked = self.data.get('locked_assignments', pd.DataFrame(columns=LOCKED_COLUMNS))

        lab_ids = self.effective_lab_ids()
        duplicates = sorted(set(lab_ids[lab_ids.duplicated()]))
        if duplicates:
            issue = f"Duplicate lab IDs: {duplicates}"
            validation_issues.append(issue)
            logger.warning(issue)

        for idx, row in labs.iterrows():
            for column in ('Code', 'Section', 'Title'):
                if pd.isna(row.get(column)) or not str(row.get(column)).strip():
                    issue = f"Lab row {idx + 1} is missing {column}"
                    validation_issues.append(issue)
                    logger.warning(issue)

        known_labs = set(lab_ids)
        known_tas = set(tas['TA ID'].dropna())

        unknown_labs = set(locked['Lab ID'].dropna()) - known_labs
        if unknown_labs:
            issue = f"Locked assignments reference unknown labs: {sorted(unknown_labs)}"
            validation_issues.append(issue)
            logger.warning(issue)

        unknown_tas = set(locked['TA ID'].dropna()) - known_tas
        if unknown_tas:
            issue = f"Locked assignments reference unknown TAs: {sorted(unknown_tas)}"
            validation_issues.append(issue)
            logger.warning(issue)

        for _, row in tas.iterrows():
            if str(row.get('Max Labs', '')).strip() in ('0', '0.0'):
                issue = f"TA {row['TA ID']} has zero capacity and will not receive labs"
                validation_issues.append(issue)
                logger.warning(issue)

        if not validation_issues:
            logger.info("All relationships are valid")
        else:
            logger.warning(f"Found {len(validation_issues)} validation issues")

        return validation_issues

    def load_all(self) -> Dict[str, pd.DataFrame]:
        """
        Load and validate all data required for scheduling.

        Returns:
            Dict: Dictionary containing all loaded dataframes
        """
        try:
            logger.info("Starting data load process...")
            self.load_base_data()
            self.load_locked_assignments()
            issues = self.validate_relationships()
            self.validation_issues = issues

            if issues:
                logger.warning(f"Data loaded with {len(issues)} validation issues")
            else:
                logger.info("Data loaded and validated successfully")

            return self.data

        except Exception as e:
            logger.error(f"Error during data loading: {str(e)}")
            raise
