"""Configuration constants for taskr."""

import os
from pathlib import Path

# Directories and files
DEFAULT_TASKR_DIR = Path.home() / ".taskr"
HOME_ENV_VAR = "TASKR_HOME"  # Overrides DEFAULT_TASKR_DIR when set
DATA_FILENAME = "data.json"
LOG_FILENAME = "taskr.log"

# Dates
DISPLAY_DATE_FORMAT = "%d/%m/%Y"    # What the user types and reads
CANONICAL_DATE_FORMAT = "%Y-%m-%d"  # What the data file stores in `schedule`
DISPLAY_TIME_FORMAT = "%H:%M"
WEEK_DAYS = 7                        # Sunday .. Saturday

# `edit -s` values that clear a schedule
CLEAR_SCHEDULE_VALUES = ("", '""', "''")

# Durations
MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60

# Status decoration used by the task list
STATUS_ICONS = {
    "todo": "⬜",
    "blocked": "⛔",
    "in_progress": "⏳",
    "done": "✅",
}


def taskr_dir() -> Path:
    """Return the data directory, honouring the TASKR_HOME override."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_TASKR_DIR


def data_file() -> Path:
    """Return the path of the JSON task collection."""
    return taskr_dir() / DATA_FILENAME


def log_file() -> Path:
    """Return the path of the debug log."""
    return taskr_dir() / LOG_FILENAME
