"""Value objects exchanged between the sync orchestrator and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class AccountRef:
    """Read-only view of an account as seen by the sync orchestrator."""

    account_id: int
    name: str
    linked_id: Optional[str] = None

    @property
    def is_syncable(self) -> bool:
        return isinstance(self.linked_id, str) and self.linked_id != ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> AccountRef:
        return cls(account_id=row["id"], name=row["name"], linked_id=row.get("linked_id"))


@dataclass(frozen=True)
class SyncOk:
    account_id: int
    transactions_fetched: int = 0
    transactions_imported: int = 0


@dataclass(frozen=True)
class SyncErr:
    """
    A failed account sync.

    status_code carries the provider's HTTP status when the failure was an
    HTTP error response, so callers can tell rate limiting (429) apart.
    """

    account_id: int
    reason: str
    status_code: Optional[int] = None


SyncResult = Union[SyncOk, SyncErr]


@dataclass(frozen=True)
class FailedAccount:
    account_id: int
    name: str
    reason: str


@dataclass(frozen=True)
class NoLinkedAccounts:
    """Outcome of a run whose input held no syncable account. Nothing was started."""


@dataclass(frozen=True)
class SyncSummary:
    """
    Outcome of a completed bulk run.

    Attributes:
        total_attempted: Number of syncable accounts processed (the batch size)
        failed_count: Number of accounts whose sync failed
        failed_accounts: Failed accounts in processing order
    """

    total_attempted: int
    failed_count: int
    failed_accounts: tuple[FailedAccount, ...] = field(default_factory=tuple)

    @property
    def all_succeeded(self) -> bool:
        return self.failed_count == 0

    def to_dict(self) -> dict:
        return {
            "total_attempted": self.total_attempted,
            "failed_count": self.failed_count,
            "failed_accounts": [
                {"account_id": f.account_id, "name": f.name, "reason": f.reason}
                for f in self.failed_accounts
            ],
        }


SyncOutcome = Union[NoLinkedAccounts, SyncSummary]
