"""Bulk sync endpoints: start a run over every linked account and poll its progress."""

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from sqlalchemy.engine import Engine

from bank_sync.db.readers.accounts import list_account_refs
from bank_sync.dependencies import get_db_engine, get_sync_tracker
from bank_sync.schemas.sync import (
    NoticeResponse,
    SyncRunStateResponse,
    SyncStartResponse,
    SyncStatusResponse,
    SyncSummaryResponse,
)
from bank_sync.services.notices import build_notice
from bank_sync.services.outcomes import NoLinkedAccounts
from bank_sync.services.progress import SyncRunTracker
from bank_sync.services.sync import run_tracked_sync, select_syncable_accounts

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/sync/accounts", status_code=status.HTTP_202_ACCEPTED)
def sync_all_accounts_endpoint(
    response: Response,
    background_tasks: BackgroundTasks,
    wait: bool = Query(False, description="Run inline and return the summary"),
    engine: Engine = Depends(get_db_engine),
    tracker: SyncRunTracker = Depends(get_sync_tracker),
) -> SyncStartResponse:
    """
    Sync every linked account, one after the other.

    With no linked account nothing is started and the notice explains why.
    Otherwise the run proceeds in the background (poll GET /sync/status), or
    inline when wait=true.

    Returns:
        SyncStartResponse: 202 when scheduled, 200 when nothing to do or wait=true

    Raises:
        HTTPException: 409 if a bulk sync is already running
    """
    with engine.connect() as conn:
        accounts = list_account_refs(conn)

    batch = select_syncable_accounts(accounts)
    if not batch:
        notice = build_notice(NoLinkedAccounts())
        # Leave a run in flight untouched
        tracker.publish_if_idle(NoLinkedAccounts(), notice)
        logger.info("bulk_sync_not_started", reason="no_linked_accounts")
        response.status_code = status.HTTP_200_OK
        return SyncStartResponse(
            started=False,
            message="No linked accounts",
            notice=NoticeResponse.from_notice(notice),
        )

    if not tracker.claim(total=len(batch)):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A bulk sync is already running",
        )

    if wait:
        outcome = run_tracked_sync(accounts, tracker)
        _, _, notice = tracker.snapshot()
        response.status_code = status.HTTP_200_OK
        return SyncStartResponse(
            started=True,
            message="Sync complete",
            notice=NoticeResponse.from_notice(notice or build_notice(outcome)),
            summary=SyncSummaryResponse.from_outcome(outcome),
        )

    background_tasks.add_task(run_tracked_sync, accounts, tracker)
    logger.info("bulk_sync_scheduled", total_accounts=len(batch))
    return SyncStartResponse(started=True, message="Sync scheduled")


@router.get("/sync/status")
def sync_status(tracker: SyncRunTracker = Depends(get_sync_tracker)) -> SyncStatusResponse:
    """
    Live state of the current bulk run, with the summary and notice of the last finished one.
    """
    state, outcome, notice = tracker.snapshot()
    return SyncStatusResponse(
        state=SyncRunStateResponse.from_state(state),
        summary=SyncSummaryResponse.from_outcome(outcome),
        notice=NoticeResponse.from_notice(notice) if notice else None,
    )
