import random
from dataclasses import replace
from datetime import datetime

import pytest

from app_clock import BACKUP_COMPLETED_LINE
from app_config import AppConfig
from app_core import (
    EventDispatcher, RECOVERY_LINES, BACKUP_STARTED_LINE,
    SECTION_BACKUP, SECTION_RECOVERY, SECTION_MONITORING, SECTION_PROFILE,
)
from app_types import ClockPhase, Role


def test_fresh_profile_defaults(dispatcher):
    profile = dispatcher.load_profile()

    assert profile.as_tuple() == ("demoUser", "demo@example.com", "User")
    assert dispatcher.state.monitoring.log == ["Profile loaded."]


def test_save_then_load_round_trips_profile(dispatcher):
    dispatcher.save_profile("alice", "a@x.com", "Manager")
    profile = dispatcher.load_profile()

    assert profile.as_tuple() == ("alice", "a@x.com", "Manager")
    assert profile.role is Role.MANAGER
    assert dispatcher.state.monitoring.log == ["Profile saved.", "Profile loaded."]


def test_save_profile_accepts_empty_strings_and_enum_role(dispatcher):
    dispatcher.save_profile("", "", Role.ADMIN)

    assert dispatcher.load_profile().as_tuple() == ("", "", "Admin")


def test_password_is_never_stored_or_logged(dispatcher, caplog):
    with caplog.at_level("DEBUG"):
        dispatcher.save_profile("bob", "b@x.com", "User", password="hunter2")

    assert "hunter2" not in caplog.text
    assert "hunter2" not in repr(dispatcher.state)
    assert not hasattr(dispatcher.state.profile, "password")


def test_load_profile_returns_a_copy(dispatcher):
    profile = dispatcher.load_profile()
    profile.username = "mallory"

    assert dispatcher.state.profile.username == "demoUser"


def test_config_controls_default_profile(tick_source):
    config = AppConfig(default_username="ops", default_email="ops@corp", default_role="Admin")
    dispatcher = EventDispatcher(config=config, tick_source=tick_source)

    assert dispatcher.load_profile().as_tuple() == ("ops", "ops@corp", "Admin")


def test_start_backup_runs_to_completion(dispatcher, tick_source):
    assert dispatcher.start_backup() is True
    assert dispatcher.state.backup.log == [BACKUP_STARTED_LINE]
    assert dispatcher.state.backup.progress_percent == 0

    for _ in range(10):
        assert tick_source.tick()

    backup = dispatcher.state.backup
    assert backup.progress_percent == 100
    assert backup.log[-1] == BACKUP_COMPLETED_LINE
    assert dispatcher.state.clock_phase == ClockPhase.COMPLETED
    assert backup.last_completed_at == "Mon Jan 01 12:00:00 2024"
    assert tick_source.tick() is False


def test_start_backup_while_running_leaves_state_unchanged(dispatcher, tick_source):
    dispatcher.start_backup()
    tick_source.tick()
    tick_source.tick()
    before = replace(dispatcher.state.backup, log=list(dispatcher.state.backup.log))

    assert dispatcher.start_backup() is False

    assert dispatcher.state.backup == before
    assert dispatcher.state.clock_phase == ClockPhase.RUNNING


def test_second_run_after_completion_resets_progress(dispatcher, tick_source):
    dispatcher.start_backup()
    for _ in range(10):
        tick_source.tick()

    assert dispatcher.start_backup() is True
    assert dispatcher.state.backup.progress_percent == 0
    assert dispatcher.state.backup.log.count(BACKUP_STARTED_LINE) == 2


def test_dispatcher_tick_drives_clock(dispatcher):
    dispatcher.start_backup()
    dispatcher.tick()

    assert dispatcher.state.backup.progress_percent == 10


def test_simulate_recovery_appends_fixed_lines(dispatcher):
    dispatcher.state.recovery.append("earlier run")
    dispatcher.simulate_recovery()
    dispatcher.simulate_recovery()

    log = dispatcher.state.recovery.log
    assert log[0] == "earlier run"
    assert log[1:6] == list(RECOVERY_LINES)
    assert log[6:] == list(RECOVERY_LINES)
    assert len(RECOVERY_LINES) == 5


def test_refresh_monitoring_overwrites_metrics(dispatcher):
    for _ in range(50):
        before = len(dispatcher.state.monitoring.log)
        dispatcher.refresh_monitoring()

        metrics = dispatcher.state.monitoring.metrics
        assert set(metrics) == {"CPU", "Disk", "Memory"}
        assert all(0 <= value < 100 for value in metrics.values())
        assert all(value == int(value) for value in metrics.values())
        assert len(dispatcher.state.monitoring.log) == before + 1


def test_refresh_monitoring_uses_injected_random_source(tick_source, fake_clock):
    first = EventDispatcher(tick_source=tick_source, rng=random.Random(7), clock=fake_clock)
    second = EventDispatcher(rng=random.Random(7), clock=fake_clock)

    first.refresh_monitoring()
    second.refresh_monitoring()

    assert first.state.monitoring.metrics == second.state.monitoring.metrics
    assert first.state.monitoring.log == ["Metrics updated at Mon Jan 01 12:00:00 2024"]


def test_refresh_monitoring_line_uses_clock(dispatcher, fake_clock):
    fake_clock.advance(90)
    dispatcher.refresh_monitoring()

    assert dispatcher.state.monitoring.log[-1] == "Metrics updated at Mon Jan 01 12:01:30 2024"


def test_tab_change_logs_name_and_timestamp(dispatcher):
    dispatcher.on_tab_changed("📊 System Health", datetime(2024, 3, 5, 9, 30, 0))
    dispatcher.on_tab_changed("👤 User Profile", "yesterday")
    dispatcher.on_tab_changed("🔄 Data Backup")

    assert dispatcher.state.monitoring.log == [
        "Switched to tab: 📊 System Health at Tue Mar 05 09:30:00 2024",
        "Switched to tab: 👤 User Profile at yesterday",
        "Switched to tab: 🔄 Data Backup at Mon Jan 01 12:00:00 2024",
    ]


@pytest.mark.parametrize("path, expected", [
    ("/home/user/report.pdf", "Selected: report.pdf"),
    ("/home/user/photos/", "Selected: photos"),
    ("C:\\Users\\demo\\notes.txt", "Selected: notes.txt"),
])
def test_select_file_logs_name_only(dispatcher, path, expected):
    assert dispatcher.select_file(path) is True
    assert dispatcher.state.backup.log == [expected]


@pytest.mark.parametrize("path", [None, "", "   "])
def test_cancelled_selection_logs_nothing(dispatcher, path):
    assert dispatcher.select_file(path) is False
    assert dispatcher.state.backup.log == []


def test_listeners_receive_changed_section(dispatcher, tick_source):
    sections = []
    dispatcher.add_listener(sections.append)

    dispatcher.simulate_recovery()
    dispatcher.refresh_monitoring()
    dispatcher.save_profile("a", "b", "User")
    dispatcher.start_backup()
    tick_source.tick()

    assert sections == [
        SECTION_RECOVERY,
        SECTION_MONITORING,
        SECTION_PROFILE,
        SECTION_MONITORING,
        SECTION_BACKUP,
        SECTION_BACKUP,
    ]

    dispatcher.remove_listener(sections.append)
    dispatcher.simulate_recovery()
    assert len(sections) == 6


class _RecordingLoggingManager:
    def __init__(self):
        self.actions = []
        self.transitions = []

    def log_action(self, action, details=None):
        self.actions.append((action, details))

    def log_backup_transition(self, phase, progress_percent):
        self.transitions.append((phase, progress_percent))


def test_actions_are_mirrored_to_logging_manager(tick_source, fake_clock):
    recorder = _RecordingLoggingManager()
    dispatcher = EventDispatcher(tick_source=tick_source, clock=fake_clock,
                                 rng=random.Random(0), logging_manager=recorder)

    dispatcher.start_backup()
    for _ in range(10):
        tick_source.tick()
    dispatcher.save_profile("carol", "c@x.com", "Admin", password="secret")
    dispatcher.select_file("")

    names = [name for name, _ in recorder.actions]
    assert names == ["start_backup", "save_profile"]
    assert recorder.actions[1][1] == {"username": "carol", "role": "Admin"}
    assert recorder.transitions == [("Running", 0), ("Completed", 100)]


def test_rejected_role_leaves_profile_untouched(dispatcher):
    with pytest.raises(ValueError):
        dispatcher.save_profile("mallory", "m@x.com", "Root")

    assert dispatcher.state.profile.as_tuple() == ("demoUser", "demo@example.com", "User")
    assert dispatcher.state.monitoring.log == []
