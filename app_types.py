# app_types.py
# Version: 1.0.2
# Shared type definitions for Disaster Drive: per-tab state groups, the owning AppState record,
# and the enums used by the dispatcher and the simulated backup clock.
#
# Version History:
# 1.0.2 - Added last_completed_at to BackupState for the footer status line
# 1.0.1 - Moved profile defaults out to AppConfig
# 1.0.0 - Initial state model

from typing import List, Optional, Dict, Tuple
from dataclasses import dataclass, field
from enum import Enum

METRIC_NAMES = ("CPU", "Disk", "Memory")

class Role(Enum):
    ADMIN = "Admin"
    USER = "User"
    MANAGER = "Manager"

class ClockPhase(Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    COMPLETED = "Completed"

@dataclass
class BackupState:
    """Backup tab state: log lines and progress of the current run."""
    log: List[str] = field(default_factory=list)
    progress_percent: int = 0
    last_completed_at: Optional[str] = None  # Formatted wall time of last finished run

    def append(self, line: str):
        self.log.append(line)

@dataclass
class RecoveryState:
    """Recovery tab state."""
    log: List[str] = field(default_factory=list)

    def append(self, line: str):
        self.log.append(line)

def _default_metrics() -> Dict[str, float]:
    return {"CPU": 45.0, "Disk": 70.0, "Memory": 55.0}

@dataclass
class MonitoringState:
    """Health tab state. Metrics are replaced wholesale on every refresh."""
    log: List[str] = field(default_factory=list)
    metrics: Dict[str, float] = field(default_factory=_default_metrics)

    def append(self, line: str):
        self.log.append(line)

@dataclass
class UserProfile:
    """In-memory user profile. Passwords are never part of it."""
    username: str = "demoUser"
    email: str = "demo@example.com"
    role: Role = Role.USER

    def as_tuple(self) -> Tuple[str, str, str]:
        return (self.username, self.email, self.role.value)

@dataclass
class AppState:
    """Single owner of all mutable application state."""
    backup: BackupState = field(default_factory=BackupState)
    recovery: RecoveryState = field(default_factory=RecoveryState)
    monitoring: MonitoringState = field(default_factory=MonitoringState)
    profile: UserProfile = field(default_factory=UserProfile)
    clock_phase: ClockPhase = ClockPhase.IDLE

    @property
    def backup_running(self) -> bool:
        return self.clock_phase == ClockPhase.RUNNING
