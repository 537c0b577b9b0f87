import pytest

from app_clock import SimulatedClock, ManualTickSource, BACKUP_COMPLETED_LINE
from app_types import AppState, ClockPhase


@pytest.fixture()
def state():
    return AppState()


@pytest.fixture()
def clock(state):
    return SimulatedClock(state, ManualTickSource(), interval_ms=300, step=10, now=lambda: "T")


def test_start_moves_idle_to_running_at_zero(clock, state):
    state.backup.progress_percent = 40

    assert clock.start() is True
    assert clock.phase == ClockPhase.RUNNING
    assert state.backup.progress_percent == 0
    assert clock.tick_source.active
    assert clock.tick_source.interval_ms == 300


def test_progress_is_non_decreasing_and_completes_after_ten_ticks(clock, state):
    clock.start()
    seen = []
    ticks = 0
    while clock.tick_source.tick():
        ticks += 1
        seen.append(state.backup.progress_percent)

    assert ticks == 10
    assert seen == sorted(seen)
    assert seen[-1] == 100
    assert seen[:9] == [10, 20, 30, 40, 50, 60, 70, 80, 90]
    assert clock.phase == ClockPhase.COMPLETED
    assert not clock.tick_source.active


def test_completion_line_logged_exactly_once(clock, state):
    clock.start()
    for _ in range(10):
        clock.tick()
    # Stray ticks after completion are ignored
    clock.tick()
    clock.tick()

    assert state.backup.log.count(BACKUP_COMPLETED_LINE) == 1
    assert state.backup.log[-1] == BACKUP_COMPLETED_LINE
    assert state.backup.progress_percent == 100
    assert state.backup.last_completed_at == "T"


def test_tick_while_idle_is_ignored(clock, state):
    clock.tick()

    assert clock.phase == ClockPhase.IDLE
    assert state.backup.progress_percent == 0
    assert state.backup.log == []


def test_start_while_running_is_rejected(clock, state):
    clock.start()
    clock.tick()
    clock.tick()

    assert clock.start() is False
    assert state.backup.progress_percent == 20


def test_restart_after_completion(clock, state):
    clock.start()
    for _ in range(10):
        clock.tick()

    assert clock.start() is True
    assert clock.phase == ClockPhase.RUNNING
    assert state.backup.progress_percent == 0


def test_step_that_does_not_divide_100_clamps_to_100(state):
    clock = SimulatedClock(state, ManualTickSource(), step=30)
    clock.start()
    for _ in range(4):
        clock.tick()

    assert state.backup.progress_percent == 100
    assert clock.phase == ClockPhase.COMPLETED


def test_transition_callback_sees_every_step(clock):
    calls = []
    clock.transition_callback = lambda phase, progress: calls.append((phase, progress))

    clock.start()
    for _ in range(10):
        clock.tick()

    assert calls[0] == (ClockPhase.RUNNING, 0)
    assert calls[-1] == (ClockPhase.COMPLETED, 100)
    assert len(calls) == 11
