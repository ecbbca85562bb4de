"""
Configuration for the TA lab scheduler.

Holds the closed day/time enumerations, the scoring constants used by the
greedy matcher, and the environment-driven settings of the service layer.
"""
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv


# Canonical enumerations. These are part of the data contract.
ALL_DAYS: Tuple[str, ...] = ('Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat')
DEFAULT_DAYS: Tuple[str, ...] = ('Sun', 'Mon', 'Tue', 'Wed', 'Thu')
SLOT_TIMES: Tuple[int, ...] = (8, 11, 14)

# Scoring
PREFERRED_DAY_BONUS = 2
PREFERRED_TIME_BONUS = 2
LOAD_PENALTY_WEIGHT = 0.5
ZERO_CAPACITY_PENALTY = 999.0
TIE_BREAK_SCALE = 0.01

# Range used to draw a private seed for TAs without one: [min, max)
FALLBACK_SEED_RANGE: Tuple[int, int] = (1, 1000000)

NO_FEASIBLE_SLOTS_REASON = 'No feasible time slots available'
NO_AVAILABLE_TA_REASON = 'No available TA found (all TAs are at capacity or have conflicts)'


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == '':
        return None
    return int(value)


@dataclass
class AppSettings:
    """Runtime settings for the CLI and REST API."""
    upload_folder: str = '/tmp/ta_scheduler/uploads'
    results_folder: str = '/tmp/ta_scheduler/results'
    max_content_length: int = 16 * 1024 * 1024  # 16 MB
    host: str = '0.0.0.0'
    port: int = 5000
    log_level: str = 'INFO'
    default_seed: Optional[int] = None

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "AppSettings":
        """
        Build settings from environment variables.

        A ``.env`` file is loaded first when present; variables already set in
        the process environment take precedence.

        Args:
            dotenv_path: Optional explicit path to a ``.env`` file

        Returns:
            AppSettings instance
        """
        load_dotenv(dotenv_path)
        defaults = cls()
        return cls(
            upload_folder=os.environ.get('UPLOAD_FOLDER', defaults.upload_folder),
            results_folder=os.environ.get('RESULTS_FOLDER', defaults.results_folder),
            max_content_length=int(os.environ.get('MAX_CONTENT_LENGTH', defaults.max_content_length)),
            host=os.environ.get('HOST', defaults.host),
            port=int(os.environ.get('PORT', defaults.port)),
            log_level=os.environ.get('LOG_LEVEL', defaults.log_level).upper(),
            default_seed=_optional_int(os.environ.get('DEFAULT_SEED')),
        )
