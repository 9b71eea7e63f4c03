from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_DESCRIPTION = "Bank Transaction"


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def normalize_transaction(tx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Map one provider booked transaction to a transactions row.

    Args:
        tx: Booked transaction as returned by the provider.

    Returns:
        Row dict (without account_id), or None if the transaction has no
        transactionId or no parseable amount.
    """
    provider_id = tx.get("transactionId")
    if not provider_id:
        return None

    amount_info = tx.get("transactionAmount") or {}
    try:
        amount = Decimal(str(amount_info.get("amount")))
    except (InvalidOperation, ValueError):
        logger.warning("transaction_amount_invalid", transaction_id=provider_id)
        return None
    if not amount.is_finite():
        return None

    return {
        "provider_transaction_id": str(provider_id),
        "booking_date": _parse_date(tx.get("bookingDate") or tx.get("valueDate")),
        "amount": amount,
        "currency": amount_info.get("currency"),
        "description": tx.get("remittanceInformationUnstructured") or DEFAULT_DESCRIPTION,
        "raw": tx,
    }


def normalize_transactions(booked: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Normalize a booked listing, dropping unusable entries and repeated transactionIds.

    The first occurrence of a transactionId wins; input order is preserved.
    """
    rows: List[Dict[str, Any]] = []
    seen: set[str] = set()
    for tx in booked:
        row = normalize_transaction(tx)
        if row is None or row["provider_transaction_id"] in seen:
            continue
        seen.add(row["provider_transaction_id"])
        rows.append(row)
    return rows
