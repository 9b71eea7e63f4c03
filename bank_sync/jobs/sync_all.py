"""Command-line entry point: sync every linked account stored in the database."""

import argparse
from functools import partial

import structlog

from bank_sync.db.engine import engine
from bank_sync.db.readers.accounts import list_account_refs
from bank_sync.logging_config import setup_logging
from bank_sync.services.notices import build_notice, log_notice
from bank_sync.services.progress import SyncRunState
from bank_sync.services.sync import sync_account, sync_all_accounts

logger = structlog.get_logger(__name__)


def log_progress(state: SyncRunState) -> None:
    logger.info(
        "sync_progress",
        is_running=state.is_running,
        progress_percent=state.progress_percent,
        completed=state.completed_count,
        failed=state.failed_count,
        total=state.total,
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Sync all linked bank accounts")
    parser.add_argument(
        "--lookback-days",
        type=int,
        default=None,
        help="Override TRANSACTIONS_LOOKBACK_DAYS for this run",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    with engine.connect() as conn:
        accounts = list_account_refs(conn)

    logger.info("accounts_loaded", count=len(accounts))

    trigger = sync_account
    if args.lookback_days is not None:
        trigger = partial(sync_account, lookback_days=args.lookback_days)

    outcome = sync_all_accounts(accounts, trigger_sync=trigger, on_progress=log_progress)
    log_notice(build_notice(outcome))


if __name__ == "__main__":
    main()
