from typing import Optional

from pydantic import BaseModel, Field

from bank_sync.services.notices import Notice
from bank_sync.services.outcomes import SyncOutcome, SyncSummary
from bank_sync.services.progress import SyncRunState


class NoticeResponse(BaseModel):
    kind: str = Field(..., description="success or error")
    title: str
    message: str

    @classmethod
    def from_notice(cls, notice: Notice) -> "NoticeResponse":
        return cls(**notice.to_dict())


class FailedAccountResponse(BaseModel):
    account_id: int
    name: str
    reason: str


class SyncSummaryResponse(BaseModel):
    total_attempted: int
    failed_count: int
    failed_accounts: list[FailedAccountResponse] = []

    @classmethod
    def from_outcome(cls, outcome: Optional[SyncOutcome]) -> Optional["SyncSummaryResponse"]:
        if not isinstance(outcome, SyncSummary):
            return None
        return cls(**outcome.to_dict())


class SyncRunStateResponse(BaseModel):
    is_running: bool
    progress_percent: int = Field(..., ge=0, le=100)
    completed_count: int
    failed_count: int
    total: int

    @classmethod
    def from_state(cls, state: SyncRunState) -> "SyncRunStateResponse":
        return cls(**state.to_dict())


class SyncStartResponse(BaseModel):
    """
    Response of POST /sync/accounts.

    started is False when nothing was syncable; the notice then tells the user why.
    """

    started: bool
    message: str
    notice: Optional[NoticeResponse] = None
    summary: Optional[SyncSummaryResponse] = None


class SyncStatusResponse(BaseModel):
    state: SyncRunStateResponse
    summary: Optional[SyncSummaryResponse] = None
    notice: Optional[NoticeResponse] = None
