"""
Unit tests for progress computation and the sync run tracker.
"""

from __future__ import annotations

import pytest

from bank_sync.services.notices import build_notice
from bank_sync.services.outcomes import NoLinkedAccounts
from bank_sync.services.progress import SyncRunState, SyncRunTracker, compute_progress


@pytest.mark.unit
@pytest.mark.parametrize(
    "completed,total,expected",
    [
        (0, 3, 0),
        (1, 3, 34),
        (2, 3, 67),
        (3, 3, 100),
        (1, 2, 50),
        (1, 200, 1),
        (199, 200, 99),
        (0, 0, 0),
        (5, 3, 100),
    ],
)
def test_compute_progress(completed: int, total: int, expected: int) -> None:
    assert compute_progress(completed, total) == expected


@pytest.mark.unit
def test_compute_progress_only_reaches_100_when_done() -> None:
    total = 7
    percents = [compute_progress(i, total) for i in range(total + 1)]

    assert percents == sorted(percents)
    assert percents.count(100) == 1


@pytest.mark.unit
def test_run_state_defaults_to_idle() -> None:
    assert SyncRunState().to_dict() == {
        "is_running": False,
        "progress_percent": 0,
        "completed_count": 0,
        "failed_count": 0,
        "total": 0,
    }


@pytest.mark.unit
def test_tracker_claim_is_exclusive() -> None:
    tracker = SyncRunTracker()

    assert tracker.claim() is True
    assert tracker.claim() is False
    assert tracker.is_claimed

    tracker.release()

    assert not tracker.is_claimed
    assert tracker.claim() is True


@pytest.mark.unit
def test_tracker_snapshot_reflects_updates() -> None:
    tracker = SyncRunTracker()
    state = SyncRunState(is_running=True, progress_percent=50, completed_count=1, total=2)
    outcome = NoLinkedAccounts()
    notice = build_notice(outcome)

    assert tracker.snapshot() == (SyncRunState(), None, None)

    tracker.update(state)
    tracker.publish(outcome, notice)

    assert tracker.snapshot() == (state, outcome, notice)


@pytest.mark.unit
def test_claim_starts_a_fresh_running_state() -> None:
    tracker = SyncRunTracker()
    finished = SyncRunState(is_running=False, progress_percent=100, completed_count=1, total=1)
    tracker.update(finished)
    tracker.publish(NoLinkedAccounts(), build_notice(NoLinkedAccounts()))

    assert tracker.claim(total=3)

    assert tracker.snapshot() == (SyncRunState(is_running=True, total=3), None, None)


@pytest.mark.unit
def test_rejected_claim_keeps_current_state() -> None:
    tracker = SyncRunTracker()
    assert tracker.claim(total=2)
    running = SyncRunState(is_running=True, progress_percent=50, completed_count=1, total=2)
    tracker.update(running)

    assert tracker.claim(total=5) is False
    assert tracker.snapshot()[0] == running


@pytest.mark.unit
def test_publish_if_idle_skips_while_claimed() -> None:
    tracker = SyncRunTracker()
    notice = build_notice(NoLinkedAccounts())
    tracker.claim()

    assert tracker.publish_if_idle(NoLinkedAccounts(), notice) is False
    assert tracker.snapshot()[1:] == (None, None)

    tracker.release()

    assert tracker.publish_if_idle(NoLinkedAccounts(), notice) is True
    assert tracker.snapshot()[1:] == (NoLinkedAccounts(), notice)


@pytest.mark.unit
def test_release_marks_interrupted_run_not_running() -> None:
    tracker = SyncRunTracker()
    tracker.claim(total=4)
    tracker.update(SyncRunState(is_running=True, progress_percent=25, completed_count=1, total=4))

    tracker.release()

    state = tracker.snapshot()[0]
    assert state.is_running is False
    assert state.completed_count == 1
