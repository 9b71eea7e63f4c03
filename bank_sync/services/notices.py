"""User notices derived from the outcome of a bulk sync run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from bank_sync.services.outcomes import NoLinkedAccounts, SyncOutcome

logger = structlog.get_logger(__name__)


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    title: str
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "title": self.title, "message": self.message}


def build_notice(outcome: SyncOutcome) -> Notice:
    """
    Map a run outcome to the single notice shown to the user.

    Failures never turn the run into a hard error: a run with failed accounts,
    even all of them, still reports as completed with the failure count.

    Args:
        outcome: NoLinkedAccounts or SyncSummary

    Returns:
        Notice: The notice to show
    """
    if isinstance(outcome, NoLinkedAccounts):
        return Notice(NoticeKind.ERROR, "No linked accounts", "Link a bank account first.")

    if outcome.failed_count > 0:
        return Notice(
            NoticeKind.ERROR,
            "Sync Complete",
            f"Synced {outcome.total_attempted} accounts. {outcome.failed_count} failed.",
        )

    return Notice(
        NoticeKind.SUCCESS,
        "Sync Complete",
        f"Synced {outcome.total_attempted} accounts. All successful.",
    )


def log_notice(notice: Notice) -> None:
    """Notice sink for non-interactive callers (cron job, CLI)."""
    log = logger.info if notice.kind is NoticeKind.SUCCESS else logger.warning
    log("sync_notice", kind=notice.kind.value, title=notice.title, message=notice.message)
