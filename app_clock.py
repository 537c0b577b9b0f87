# app_clock.py
# Version: 1.0.1
# Simulated backup clock for Disaster Drive: an explicit Idle -> Running -> Completed state machine
# advanced one tick at a time by a pluggable tick source (Qt timer in the GUI, manual in tests).

import logging
from typing import Callable, Optional

from app_types import AppState, ClockPhase

logger = logging.getLogger(__name__)

BACKUP_COMPLETED_LINE = "Backup completed successfully!"

class ManualTickSource:
    """Tick source driven by explicit tick() calls."""

    def __init__(self):
        self.callback: Optional[Callable[[], None]] = None
        self.interval_ms: Optional[int] = None
        self.active = False

    def start(self, interval_ms: int, callback: Callable[[], None]):
        self.interval_ms = interval_ms
        self.callback = callback
        self.active = True

    def stop(self):
        self.active = False

    def tick(self) -> bool:
        """Fire one tick if started. Returns False when stopped."""
        if not self.active or self.callback is None:
            return False
        self.callback()
        return True

class SimulatedClock:
    """Drives BackupState.progress_percent from 0 to 100 in fixed steps.

    The clock owns the phase stored on AppState.clock_phase. Ticks that arrive
    outside the Running phase are ignored, so a late timer event after
    completion cannot push progress past 100 or log completion twice.
    """

    def __init__(self, state: AppState, tick_source, interval_ms: int = 300, step: int = 10,
                 now: Optional[Callable[[], str]] = None):
        self.state = state
        self.tick_source = tick_source
        self.interval_ms = interval_ms
        self.step = step
        self._now = now

        # Called with (phase, progress) on every transition, including in-run progress
        self.transition_callback: Optional[Callable[[ClockPhase, int], None]] = None

    @property
    def phase(self) -> ClockPhase:
        return self.state.clock_phase

    @property
    def progress(self) -> int:
        return self.state.backup.progress_percent

    def start(self) -> bool:
        """Idle/Completed -> Running(0). No-op while already running."""
        if self.phase == ClockPhase.RUNNING:
            logger.debug("Backup clock already running, start ignored")
            return False

        self.state.backup.progress_percent = 0
        self.state.clock_phase = ClockPhase.RUNNING
        self.tick_source.start(self.interval_ms, self.tick)
        logger.info(f"Backup clock started (tick={self.interval_ms}ms, step={self.step}%)")
        self._notify()
        return True

    def tick(self):
        """Advance one step, completing the run once progress reaches 100."""
        if self.phase != ClockPhase.RUNNING:
            logger.debug(f"Tick ignored in phase {self.phase.value}")
            return

        backup = self.state.backup
        next_progress = backup.progress_percent + self.step

        if next_progress < 100:
            backup.progress_percent = next_progress
            self._notify()
            return

        backup.progress_percent = 100
        self.state.clock_phase = ClockPhase.COMPLETED
        self.tick_source.stop()
        backup.append(BACKUP_COMPLETED_LINE)
        if self._now is not None:
            backup.last_completed_at = self._now()
        logger.info(BACKUP_COMPLETED_LINE)
        self._notify()

    def _notify(self):
        if self.transition_callback:
            self.transition_callback(self.phase, self.progress)
