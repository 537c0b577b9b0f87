# app_core.py
# Version: 1.2.0
# Core event dispatcher for Disaster Drive. Maps each user action to a transition on the single
# AppState, owns the simulated backup clock, and notifies view listeners per changed state group.
# Features: injectable random source and wall clock for deterministic tests, NDJSON action mirroring.

import random
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

from app_clock import SimulatedClock, ManualTickSource
from app_config import AppConfig
from app_types import AppState, ClockPhase, Role, UserProfile, METRIC_NAMES
from app_utils import format_log_time, display_name

logger = logging.getLogger(__name__)

BACKUP_STARTED_LINE = "Backup started..."
RECOVERY_LINES = (
    "Recovery simulation started...",
    "Step 1: Verifying files...",
    "Step 2: Restoring data...",
    "Step 3: Finalizing...",
    "Recovery completed successfully.",
)
PROFILE_SAVED_LINE = "Profile saved."
PROFILE_LOADED_LINE = "Profile loaded."

# State groups passed to listeners
SECTION_BACKUP = "backup"
SECTION_RECOVERY = "recovery"
SECTION_MONITORING = "monitoring"
SECTION_PROFILE = "profile"

class Clock:
    """Wall clock abstraction for testing and consistent timestamps."""

    def now(self) -> datetime:
        return datetime.now()

class FakeClock:
    """Fake clock for testing."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 12, 0, 0)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float):
        """Advance fake time."""
        self._now += timedelta(seconds=seconds)

class EventDispatcher:
    """Applies user actions to AppState.

    Every operation is total over valid inputs. Listeners registered with
    add_listener() receive the name of the state group that changed.
    """

    def __init__(self, config: Optional[AppConfig] = None, state: Optional[AppState] = None,
                 tick_source=None, rng: Optional[random.Random] = None, clock=None,
                 logging_manager=None):
        self.config = config or AppConfig()
        self.state = state or AppState(profile=self.config.default_profile())
        self.rng = rng or random.Random()
        self.clock = clock or Clock()
        self.logging_manager = logging_manager

        self.backup_clock = SimulatedClock(
            self.state,
            tick_source or ManualTickSource(),
            interval_ms=self.config.tick_interval_ms,
            step=self.config.progress_step,
            now=self._timestamp,
        )
        self.backup_clock.transition_callback = self._on_backup_transition

        self._listeners: List[Callable[[str], None]] = []

    def add_listener(self, callback: Callable[[str], None]):
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, section: str):
        for callback in list(self._listeners):
            callback(section)

    def _timestamp(self) -> str:
        return format_log_time(self.clock.now())

    def _record(self, action: str, details: Optional[dict] = None):
        if self.logging_manager:
            self.logging_manager.log_action(action, details)

    # --- Backup ---

    def start_backup(self) -> bool:
        """Start a simulated backup run. Returns False (and changes nothing) if one is running."""
        if self.state.backup_running:
            logger.info("Backup already in progress, request ignored")
            return False

        self.state.backup.progress_percent = 0
        self.state.backup.append(BACKUP_STARTED_LINE)
        logger.info(BACKUP_STARTED_LINE)
        self._record("start_backup")
        return self.backup_clock.start()

    def tick(self):
        """Advance the backup clock by one tick."""
        self.backup_clock.tick()

    def select_file(self, path) -> bool:
        """Log a picker selection by name only. A cancelled picker (empty path) logs nothing."""
        name = display_name(path)
        if not name:
            logger.debug("File selection cancelled")
            return False

        self.state.backup.append(f"Selected: {name}")
        logger.info(f"Selected for backup: {name}")
        self._record("select_file", {"name": name})
        self._emit(SECTION_BACKUP)
        return True

    def _on_backup_transition(self, phase: ClockPhase, progress: int):
        if phase != ClockPhase.RUNNING or progress == 0:
            if self.logging_manager:
                self.logging_manager.log_backup_transition(phase.value, progress)
        logger.debug(f"Backup clock {phase.value} at {progress}%")
        self._emit(SECTION_BACKUP)

    # --- Recovery ---

    def simulate_recovery(self):
        for line in RECOVERY_LINES:
            self.state.recovery.append(line)
        logger.info("Recovery simulation completed")
        self._record("simulate_recovery")
        self._emit(SECTION_RECOVERY)

    # --- Monitoring ---

    def refresh_monitoring(self):
        """Replace all health metrics with fresh random readings in [0, 100)."""
        self.state.monitoring.metrics = {
            name: float(self.rng.randrange(100)) for name in METRIC_NAMES
        }
        self.state.monitoring.append(f"Metrics updated at {self._timestamp()}")
        logger.info(f"Metrics refreshed: {self.state.monitoring.metrics}")
        self._record("refresh_monitoring", dict(self.state.monitoring.metrics))
        self._emit(SECTION_MONITORING)

    def on_tab_changed(self, tab_name: str, timestamp: Union[datetime, str, None] = None):
        when = format_log_time(timestamp) if timestamp is not None else self._timestamp()
        self.state.monitoring.append(f"Switched to tab: {tab_name} at {when}")
        self._record("tab_changed", {"tab": tab_name})
        self._emit(SECTION_MONITORING)

    # --- Profile ---

    def save_profile(self, username: str, email: str, role: Union[Role, str],
                     password: Optional[str] = None) -> UserProfile:
        """Overwrite the profile. The password is accepted for form parity and discarded."""
        new_role = Role(role)
        profile = self.state.profile
        profile.username = username
        profile.email = email
        profile.role = new_role

        self.state.monitoring.append(PROFILE_SAVED_LINE)
        logger.info(f"Profile saved for {username!r} ({profile.role.value})")
        self._record("save_profile", {"username": username, "role": profile.role.value})
        self._emit(SECTION_PROFILE)
        self._emit(SECTION_MONITORING)
        return replace(profile)

    def load_profile(self) -> UserProfile:
        """Return a copy of the current profile for the form."""
        self.state.monitoring.append(PROFILE_LOADED_LINE)
        logger.info("Profile loaded")
        self._record("load_profile")
        self._emit(SECTION_MONITORING)
        return replace(self.state.profile)
