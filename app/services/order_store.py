"""
Order store adapter.

The reconciler only needs one operation: apply a partial update to an order
by id and get back what the order looks like afterwards. The SQLAlchemy
implementation below is the one wired into the app; tests swap it through
the get_order_store dependency or use it directly on an in-memory database.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.database import get_db
from app.errors import OrderNotFoundError, StoreError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "status",
    "payment_status",
    "payment_data",
    "sslcommerz_tran_id",
    "validation_id",
    "updated_at",
}


@dataclass(frozen=True)
class UpdatedOrder:
    """Snapshot of an order right after an update was committed."""

    order_id: int
    status: str
    payment_status: str
    previous_status: Optional[str] = None
    previous_validation_id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    total: float = 0.0
    items: List[Dict[str, Any]] = field(default_factory=list)


class OrderStore(ABC):
    @abstractmethod
    def update_by_id(self, order_id: int, changes: Dict[str, Any]) -> UpdatedOrder:
        """
        Apply `changes` to the order and return the committed state.

        Raises:
            OrderNotFoundError: no order with that id
            StoreError: the write failed
        """


class SqlOrderStore(OrderStore):
    def __init__(self, db: Session):
        self.db = db

    def update_by_id(self, order_id: int, changes: Dict[str, Any]) -> UpdatedOrder:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise StoreError(f"Cannot update order fields: {', '.join(sorted(unknown))}")
        if changes.get("status", "pending") not in models.ORDER_STATUSES:
            raise StoreError(f"Invalid order status: {changes['status']}")
        if changes.get("payment_status", "pending") not in models.PAYMENT_STATUSES:
            raise StoreError(f"Invalid payment status: {changes['payment_status']}")

        try:
            order = self.db.query(models.Order).filter(models.Order.id == order_id).first()
            if order is None:
                raise OrderNotFoundError(order_id)

            previous_status = order.status
            previous_validation_id = order.validation_id
            for name, value in changes.items():
                setattr(order, name, value)
            self.db.commit()
            self.db.refresh(order)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Order update failed", extra={"order_id": order_id})
            raise StoreError(f"Failed to update order {order_id}: {e}") from e

        return UpdatedOrder(
            order_id=order.id,
            status=order.status,
            payment_status=order.payment_status,
            previous_status=previous_status,
            previous_validation_id=previous_validation_id,
            customer_email=order.customer_email,
            customer_name=order.customer_name,
            total=order.total,
            items=list(order.items or []),
        )


def get_order_store(db: Session = Depends(get_db)) -> OrderStore:
    return SqlOrderStore(db)
