import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from bank_sync.db.readers.accounts import get_account, list_accounts
from bank_sync.db.readers.transactions import list_transactions
from bank_sync.db.writers.accounts import delete_account, insert_account, set_linked_id
from bank_sync.dependencies import get_db_engine
from bank_sync.routes._account_helpers import get_account_or_404, validate_account_linked_or_400
from bank_sync.schemas.accounts import (
    AccountCreatePayload,
    AccountLinkPayload,
    AccountResponse,
    AccountSyncResponse,
    TransactionResponse,
    TransactionsResponse,
)
from bank_sync.services.outcomes import AccountRef, SyncErr
from bank_sync.services.sync import sync_account
from bank_sync.services.transactions_cache import (
    get_or_load_transactions,
    invalidate_account_transactions,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreatePayload,
    engine: Engine = Depends(get_db_engine),
) -> AccountResponse:
    """
    Create an account.

    Args:
        payload: Account fields; linked_id is optional

    Returns:
        AccountResponse: The stored account
    """
    try:
        with engine.begin() as conn:
            account_id = insert_account(conn, payload.model_dump())
            row = get_account(conn, account_id)

        logger.info("account_created", account_id=account_id)
        return AccountResponse.from_row(row or {})

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("account_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/accounts")
def list_accounts_endpoint(engine: Engine = Depends(get_db_engine)) -> list[AccountResponse]:
    """List every account ordered by ID."""
    with engine.connect() as conn:
        rows = list_accounts(conn)
    return [AccountResponse.from_row(row) for row in rows]


@router.delete("/accounts/{account_id}", status_code=status.HTTP_200_OK)
def delete_account_endpoint(
    account_id: int,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    """
    Permanently delete an account.

    Args:
        account_id: Account ID to delete

    Returns:
        dict: Message confirming deletion
    """
    try:
        with engine.begin() as conn:
            get_account_or_404(conn, account_id)
            delete_account(conn, account_id)

        invalidate_account_transactions(account_id)
        logger.info("account_deleted", account_id=account_id)
        return {"message": f"Account {account_id} deleted"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("account_deletion_failed", account_id=account_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/accounts/{account_id}/link", status_code=status.HTTP_200_OK)
def link_account(
    account_id: int,
    payload: AccountLinkPayload,
    engine: Engine = Depends(get_db_engine),
) -> AccountResponse:
    """
    Link an account to an aggregation provider account.

    The first sync is left to the caller so it can show progress.

    Args:
        account_id: Account ID to link
        payload: Provider account ID

    Returns:
        AccountResponse: The updated account
    """
    try:
        with engine.begin() as conn:
            get_account_or_404(conn, account_id)
            set_linked_id(conn, account_id, payload.linked_id)
            row = get_account(conn, account_id)

        invalidate_account_transactions(account_id)
        logger.info("account_linked", account_id=account_id)
        return AccountResponse.from_row(row or {})

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("account_link_failed", account_id=account_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/accounts/{account_id}/link", status_code=status.HTTP_200_OK)
def unlink_account(
    account_id: int,
    engine: Engine = Depends(get_db_engine),
) -> AccountResponse:
    """Remove the provider link from an account."""
    try:
        with engine.begin() as conn:
            get_account_or_404(conn, account_id)
            set_linked_id(conn, account_id, None)
            row = get_account(conn, account_id)

        invalidate_account_transactions(account_id)
        logger.info("account_unlinked", account_id=account_id)
        return AccountResponse.from_row(row or {})

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("account_unlink_failed", account_id=account_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/accounts/{account_id}/sync", status_code=status.HTTP_200_OK)
def sync_account_endpoint(
    account_id: int,
    engine: Engine = Depends(get_db_engine),
) -> AccountSyncResponse:
    """
    Sync a single linked account with the provider and import new transactions.

    Returns:
        AccountSyncResponse: Booked transactions fetched and newly imported

    Raises:
        HTTPException: 404 unknown account, 400 not linked, 429 provider rate
            limit, 502 any other provider failure
    """
    with engine.connect() as conn:
        account = get_account_or_404(conn, account_id)
    validate_account_linked_or_400(account)

    result = sync_account(AccountRef.from_mapping(account), db_engine=engine)
    if isinstance(result, SyncErr):
        if result.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Provider rate limit reached, try again later",
            )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.reason)

    invalidate_account_transactions(account_id)
    return AccountSyncResponse(
        account_id=account_id,
        transactions_fetched=result.transactions_fetched,
        transactions_imported=result.transactions_imported,
    )


@router.get("/accounts/{account_id}/transactions")
def get_account_transactions(
    account_id: int,
    engine: Engine = Depends(get_db_engine),
) -> TransactionsResponse:
    """
    Imported transactions of an account, newest first, served through the transactions cache.

    Raises:
        HTTPException: 404 unknown account
    """
    with engine.connect() as conn:
        get_account_or_404(conn, account_id)
        rows = get_or_load_transactions(account_id, lambda: list_transactions(conn, account_id))

    return TransactionsResponse(
        account_id=account_id,
        transactions=[TransactionResponse(**row) for row in rows],
    )
