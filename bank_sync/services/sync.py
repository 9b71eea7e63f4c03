"""Account-level sync orchestrator for linked bank accounts."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Iterable, Optional

import requests
import structlog
from sqlalchemy.engine import Engine

from bank_sync.config import TRANSACTIONS_LOOKBACK_DAYS
from bank_sync.db.engine import engine
from bank_sync.db.writers.transactions import insert_transactions
from bank_sync.metrics import account_sync_duration, account_syncs, batch_sync_runs, sync_progress
from bank_sync.network.client import fetch_transactions
from bank_sync.services.notices import Notice, build_notice
from bank_sync.services.outcomes import (
    AccountRef,
    FailedAccount,
    NoLinkedAccounts,
    SyncErr,
    SyncOk,
    SyncOutcome,
    SyncResult,
    SyncSummary,
)
from bank_sync.services.progress import SyncRunState, SyncRunTracker, compute_progress
from bank_sync.services.transactions_cache import invalidate_transactions_cache

logger = structlog.get_logger(__name__)

TriggerSync = Callable[[AccountRef], SyncResult]
InvalidateCache = Callable[[], None]
ProgressCallback = Callable[[SyncRunState], None]
NotifyUser = Callable[[Notice], None]


def sync_account(
    account: AccountRef,
    lookback_days: int = TRANSACTIONS_LOOKBACK_DAYS,
    db_engine: Optional[Engine] = None,
) -> SyncResult:
    """
    Trigger a provider sync for a single linked account.

    Fetches the account's transactions for the lookback window and imports the
    booked ones, skipping transactions already stored for the account. Every
    failure is returned as SyncErr; this function does not raise.

    Args:
        account (AccountRef): Account to sync.
        lookback_days (int): Size of the transaction window in days.
        db_engine (Optional[Engine]): Engine to import into; the process engine by default.

    Returns:
        SyncResult: SyncOk with fetched and imported counts, or SyncErr.
    """
    if not account.is_syncable:
        return SyncErr(account.account_id, "Account is not linked to a bank")

    date_from = date.today() - timedelta(days=lookback_days)
    logger.info("account_sync_started", account_id=account.account_id, date_from=str(date_from))

    reason: Optional[str] = None
    status_code: Optional[int] = None
    booked_count = 0
    imported = 0
    with account_sync_duration.time():
        try:
            booked = fetch_transactions(str(account.linked_id), date_from=date_from)["booked"]
            booked_count = len(booked)
            with (db_engine or engine).begin() as conn:
                imported = insert_transactions(conn, account.account_id, booked)
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            reason = f"Provider returned HTTP {status_code if status_code is not None else 'N/A'}"
        except Exception as e:
            reason = str(e) or type(e).__name__

    if reason is not None:
        account_syncs.labels(status="failure").inc()
        logger.warning("account_sync_failed", account_id=account.account_id, reason=reason)
        return SyncErr(account.account_id, reason, status_code=status_code)

    account_syncs.labels(status="success").inc()
    logger.info(
        "account_sync_completed",
        account_id=account.account_id,
        transactions_fetched=booked_count,
        transactions_imported=imported,
    )
    return SyncOk(
        account.account_id,
        transactions_fetched=booked_count,
        transactions_imported=imported,
    )


def select_syncable_accounts(accounts: Iterable[AccountRef]) -> list[AccountRef]:
    """Keep linked accounts, preserving input order."""
    return [account for account in accounts if account.is_syncable]


def sync_all_accounts(
    accounts: Iterable[AccountRef],
    trigger_sync: TriggerSync = sync_account,
    invalidate_cache: InvalidateCache = invalidate_transactions_cache,
    on_progress: Optional[ProgressCallback] = None,
) -> SyncOutcome:
    """
    Sync every linked account, one at a time, in input order.

    A failed account (returned SyncErr or raised) is counted as processed and
    recorded; it never stops the remaining accounts from being attempted.
    Progress is published after each account settles. Once the batch is
    exhausted the transactions cache is invalidated exactly once.

    Args:
        accounts: Full, unfiltered account collection.
        trigger_sync: Per-account remote sync capability.
        invalidate_cache: Called once after the last account settles.
        on_progress: Receives a SyncRunState at start, after each account and at the end.

    Returns:
        SyncOutcome: NoLinkedAccounts if nothing was syncable, else a SyncSummary.
    """
    batch = select_syncable_accounts(accounts)
    if not batch:
        logger.info("sync_all_accounts_skipped", reason="no_linked_accounts")
        batch_sync_runs.labels(outcome="no_linked_accounts").inc()
        return NoLinkedAccounts()

    total = len(batch)
    completed = 0
    failures: list[FailedAccount] = []

    logger.info("sync_all_accounts_started", total_accounts=total)
    sync_progress.set(0)
    _publish(on_progress, SyncRunState(is_running=True, total=total))

    for account in batch:
        result = _settle(account, trigger_sync)
        completed += 1
        if isinstance(result, SyncErr):
            failures.append(FailedAccount(account.account_id, account.name, result.reason))

        percent = compute_progress(completed, total)
        sync_progress.set(percent)
        _publish(
            on_progress,
            SyncRunState(
                is_running=True,
                progress_percent=percent,
                completed_count=completed,
                failed_count=len(failures),
                total=total,
            ),
        )

    _publish(
        on_progress,
        SyncRunState(
            is_running=False,
            progress_percent=compute_progress(completed, total),
            completed_count=completed,
            failed_count=len(failures),
            total=total,
        ),
    )
    # Back to idle
    sync_progress.set(0)

    try:
        invalidate_cache()
    except Exception as e:
        logger.exception("cache_invalidation_failed", error=str(e))

    summary = SyncSummary(
        total_attempted=total,
        failed_count=len(failures),
        failed_accounts=tuple(failures),
    )
    batch_sync_runs.labels(outcome="success" if summary.all_succeeded else "degraded").inc()
    logger.info(
        "sync_all_accounts_completed",
        total_accounts=total,
        failed_accounts=summary.failed_count,
    )
    return summary


def run_tracked_sync(
    accounts: Iterable[AccountRef],
    tracker: SyncRunTracker,
    trigger_sync: TriggerSync = sync_account,
    invalidate_cache: InvalidateCache = invalidate_transactions_cache,
    notify: Optional[NotifyUser] = None,
) -> SyncOutcome:
    """
    Run sync_all_accounts with a tracker as progress observer and notice sink.

    The caller must have claimed the tracker; the claim is released here
    whatever happens.
    """
    try:
        outcome = sync_all_accounts(
            accounts,
            trigger_sync=trigger_sync,
            invalidate_cache=invalidate_cache,
            on_progress=tracker.update,
        )
        notice = build_notice(outcome)
        tracker.publish(outcome, notice)
        if notify is not None:
            notify(notice)
        return outcome
    finally:
        tracker.release()


def _settle(account: AccountRef, trigger_sync: TriggerSync) -> SyncResult:
    try:
        return trigger_sync(account)
    except Exception as e:
        logger.exception("account_sync_raised", account_id=account.account_id, error=str(e))
        return SyncErr(account.account_id, str(e) or type(e).__name__)


def _publish(on_progress: Optional[ProgressCallback], state: SyncRunState) -> None:
    if on_progress is None:
        return
    try:
        on_progress(state)
    except Exception as e:
        logger.exception("progress_callback_failed", error=str(e))
