"""
Transaction ids minted by the relay: ORDER_{order_id}_{epoch_millis}.

The order id rides along as the second underscore-delimited segment so the
redirect callbacks can route the browser without a lookup.
"""
import time
from typing import Optional

from app.errors import InvalidTransactionIdError

TRAN_ID_PREFIX = "ORDER"


def make_tran_id(order_id, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{TRAN_ID_PREFIX}_{order_id}_{now_ms}"


def extract_order_id(tran_id: Optional[str]) -> int:
    """
    Return the order id embedded in a transaction id.

    Raises:
        InvalidTransactionIdError: tran_id is missing, has fewer than two
            segments, or the order id segment is not an integer
    """
    if not tran_id:
        raise InvalidTransactionIdError(tran_id)
    parts = tran_id.split("_")
    if len(parts) < 2:
        raise InvalidTransactionIdError(tran_id)
    try:
        return int(parts[1])
    except ValueError:
        raise InvalidTransactionIdError(tran_id) from None
