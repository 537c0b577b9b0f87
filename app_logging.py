# app_logging.py
# Version: 1.1.0
# Logging system for Disaster Drive: rotating human-readable application log, NDJSON stream of
# user actions, SYSTEM event lines for lifecycle milestones, and an optional debug log.

import json
import logging
import logging.handlers
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional, List

from app_utils import safe_makedirs

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "DisasterDrive.log"
NDJSON_FILE_NAME = "events.ndjson"
DEBUG_LOG_NAME = "debug.log"

class EventLogger:
    """Handles structured action logging with NDJSON output."""

    def __init__(self, log_dir: Path, config):
        self.log_dir = log_dir
        self.config = config
        self.ndjson_enabled = config.log_ndjson

        self.ndjson_file: Optional[Path] = None
        self.ndjson_lock = threading.Lock()

        if self.ndjson_enabled:
            self.ndjson_file = self.log_dir / NDJSON_FILE_NAME

    def log_action(self, action: str, details: Optional[Dict[str, Any]] = None):
        """Record one dispatcher action."""
        if not self.ndjson_enabled:
            return

        event = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": "action",
            "action": action,
        }
        if details:
            event.update(details)

        self._write_ndjson_event(event)

    def log_backup_transition(self, phase: str, progress_percent: int):
        """Record a backup clock phase change."""
        if not self.ndjson_enabled:
            return

        event = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": "backup_transition",
            "phase": phase,
            "progress_percent": progress_percent,
        }
        self._write_ndjson_event(event)

    def _write_ndjson_event(self, event: Dict[str, Any]):
        if not self.ndjson_file:
            return

        try:
            with self.ndjson_lock:
                with open(self.ndjson_file, 'a', encoding='utf-8') as f:
                    f.write(json.dumps(event, ensure_ascii=False) + '\n')
        except Exception as e:
            logger.error(f"Failed to write NDJSON event: {e}")

class HumanLogger:
    """Handles human-readable log rotation and formatting."""

    def __init__(self, log_dir: Path, config):
        self.log_dir = log_dir
        self.config = config
        self.max_size_kb = config.log_max_kb
        self.history_count = config.log_history_count

        safe_makedirs(self.log_dir)

        self.current_log = self.log_dir / LOG_FILE_NAME
        self.log_lock = threading.Lock()
        self._handlers: List[logging.Handler] = []

        self._setup_logging()

    def _setup_logging(self):
        """Attach file and console handlers to the root logger."""
        self.formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        file_handler = logging.handlers.RotatingFileHandler(
            self.current_log,
            maxBytes=self.max_size_kb * 1024,
            backupCount=self.history_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(self.formatter)
        file_handler.setLevel(logging.INFO)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(self.formatter)
        console_handler.setLevel(logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)
        self._handlers = [file_handler, console_handler]

    def log_system_event(self, event_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Write a SYSTEM line straight to the current log file."""
        try:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

            if details:
                details_str = " ".join(f"{k}={v}" for k, v in details.items())
                log_line = f"{timestamp} SYSTEM {event_type} {message} {details_str}"
            else:
                log_line = f"{timestamp} SYSTEM {event_type} {message}"

            with self.log_lock:
                for handler in self._handlers:
                    handler.flush()
                with open(self.current_log, 'a', encoding='utf-8') as f:
                    f.write(log_line + '\n')

        except Exception as e:
            logger.error(f"Failed to write system event log: {e}")

    def get_log_files(self) -> List[Path]:
        """Current log first, then rotated backups that exist."""
        files = []
        if self.current_log.exists():
            files.append(self.current_log)
        for i in range(1, self.history_count + 1):
            p = self.log_dir / f"{LOG_FILE_NAME}.{i}"
            if p.exists():
                files.append(p)
        return files

    def close(self):
        """Detach and close the handlers this logger installed."""
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

class LoggingManager:
    """Manages both human and NDJSON logging."""

    def __init__(self, log_dir: Path, config):
        self.log_dir = log_dir
        self.config = config

        safe_makedirs(self.log_dir)

        self.human_logger = HumanLogger(log_dir, config)
        self.event_logger = EventLogger(log_dir, config)

        self.human_logger.log_system_event("STARTUP", "Disaster Drive started")

        if config.debug_logging:
            self._init_debug_logger()

    def _init_debug_logger(self):
        """Initialize a separate debug log that does not propagate to the root logger."""
        self.debug_logger = logging.getLogger('disaster_drive.debug')
        self.debug_logger.setLevel(logging.DEBUG)
        self.debug_logger.handlers.clear()

        debug_handler = logging.FileHandler(self.log_dir / DEBUG_LOG_NAME, encoding='utf-8')
        debug_handler.setLevel(logging.DEBUG)
        debug_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

        self.debug_logger.addHandler(debug_handler)
        self.debug_logger.propagate = False
        self.debug_logger.info("Debug logging initialized")

    def log_debug(self, message: str):
        if hasattr(self, 'debug_logger'):
            self.debug_logger.debug(message)

    def log_action(self, action: str, details: Optional[Dict[str, Any]] = None):
        """Log a user action to the NDJSON stream and the debug log."""
        self.event_logger.log_action(action, details)
        self.log_debug(f"Action {action} {details or ''}".rstrip())

    def log_backup_transition(self, phase: str, progress_percent: int):
        self.event_logger.log_backup_transition(phase, progress_percent)

    def log_system_event(self, event_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.human_logger.log_system_event(event_type, message, details)

    def get_log_files(self) -> List[Path]:
        return self.human_logger.get_log_files()

    def get_ndjson_file(self) -> Optional[Path]:
        return self.event_logger.ndjson_file

    def shutdown(self):
        """Shutdown logging system."""
        self.human_logger.log_system_event("SHUTDOWN", "Disaster Drive shutting down")
        self.human_logger.close()
        if hasattr(self, 'debug_logger'):
            for handler in list(self.debug_logger.handlers):
                self.debug_logger.removeHandler(handler)
                handler.close()
