"""
Run state of the bulk sync and a thread-safe tracker for observers.

The orchestrator streams immutable SyncRunState snapshots to a progress
callback. SyncRunTracker is the callback used by the HTTP layer: it keeps the
latest snapshot, the last outcome and notice, and guards against two bulk runs
being in flight in the same process.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Optional

from bank_sync.services.notices import Notice
from bank_sync.services.outcomes import SyncOutcome


def compute_progress(completed: int, total: int) -> int:
    """
    Percentage of settled accounts, rounded up to the next whole percent.

    1 of 3 reports 34, 2 of 3 reports 67 and 3 of 3 reports 100. Only a
    finished batch reports 100.

    Args:
        completed: Accounts settled so far
        total: Batch size

    Returns:
        int: Progress in [0, 100]
    """
    if total <= 0:
        return 0
    completed = min(max(completed, 0), total)
    percent = (100 * completed + total - 1) // total
    if completed < total:
        return min(percent, 99)
    return percent


@dataclass(frozen=True)
class SyncRunState:
    is_running: bool = False
    progress_percent: int = 0
    completed_count: int = 0
    failed_count: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "is_running": self.is_running,
            "progress_percent": self.progress_percent,
            "completed_count": self.completed_count,
            "failed_count": self.failed_count,
            "total": self.total,
        }


class SyncRunTracker:
    """
    Holds the live state of the current (or last) bulk run.

    Example:
        >>> tracker = SyncRunTracker()
        >>> if tracker.claim():
        ...     try:
        ...         outcome = sync_all_accounts(accounts, ..., on_progress=tracker.update)
        ...         tracker.publish(outcome, build_notice(outcome))
        ...     finally:
        ...         tracker.release()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = SyncRunState()
        self._claimed = False
        self._outcome: Optional[SyncOutcome] = None
        self._notice: Optional[Notice] = None

    def claim(self, total: int = 0) -> bool:
        """
        Reserve the tracker for a new run.

        On success the live state becomes a running snapshot at 0% of total
        and the previous run's outcome and notice are cleared.

        Args:
            total: Number of syncable accounts in the new run

        Returns:
            bool: False if another run already holds the claim
        """
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            self._state = SyncRunState(is_running=True, total=total)
            self._outcome = None
            self._notice = None
            return True

    def release(self) -> None:
        """End the claim. A run that stopped without a final snapshot is marked not running."""
        with self._lock:
            self._claimed = False
            if self._state.is_running:
                self._state = replace(self._state, is_running=False)

    @property
    def is_claimed(self) -> bool:
        with self._lock:
            return self._claimed

    def update(self, state: SyncRunState) -> None:
        """Progress callback for the orchestrator."""
        with self._lock:
            self._state = state

    def publish(self, outcome: SyncOutcome, notice: Notice) -> None:
        with self._lock:
            self._outcome = outcome
            self._notice = notice

    def publish_if_idle(self, outcome: SyncOutcome, notice: Notice) -> bool:
        """
        Publish an outcome that did not go through a claimed run.

        Returns:
            bool: False, publishing nothing, while a run holds the claim
        """
        with self._lock:
            if self._claimed:
                return False
            self._outcome = outcome
            self._notice = notice
            return True

    def snapshot(self) -> tuple[SyncRunState, Optional[SyncOutcome], Optional[Notice]]:
        with self._lock:
            return self._state, self._outcome, self._notice


# Process-wide tracker used by the API
sync_tracker = SyncRunTracker()
