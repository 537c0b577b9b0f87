# app_utils.py
# Version: 0.2.0
# Shared utility functions for Disaster Drive: log timestamp formatting, picker path display,
# and directory creation used by the logging layer.

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)

# Matches the "Sat Oct 17 14:03:21 2026" style shown in the log panes
LOG_TIME_FORMAT = "%a %b %d %H:%M:%S %Y"

def safe_makedirs(path: Path) -> bool:
    """Safely create directories, handling permissions and existing dirs."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except Exception as e:
        logger.warning(f"Could not create directory {path}: {e}")
        return False

def format_log_time(value: Union[datetime, str, None]) -> str:
    """Format a timestamp for a log pane line.

    Args:
        value: datetime to format, or an already formatted string which is passed through

    Returns:
        Formatted string, or empty string for None
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(LOG_TIME_FORMAT)
    return str(value)

def display_name(path: Optional[Union[str, Path]]) -> str:
    """Return the final component of a picked file or folder path.

    Trailing separators are ignored so a picked folder still shows its own name.
    Returns an empty string for None or a blank path.
    """
    if path is None:
        return ""
    text = str(path).strip()
    if not text:
        return ""
    stripped = text.rstrip("/\\")
    if not stripped:
        # Filesystem root
        return text
    return os.path.basename(stripped.replace("\\", "/")) or stripped
