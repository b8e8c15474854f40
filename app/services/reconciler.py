"""
Payment notification (IPN) reconciliation.

Orchestrates:
1. Validate the notification with the gateway
2. Map gateway status → (order status, payment status)
3. Persist the update on the order
4. Decide whether post-payment side effects are due

Side effects themselves run after the response through run_post_payment_effects().
Redelivered notifications re-run steps 1-3. Effects are due whenever the
resulting status is paid/processing, except for a redelivery: a notification
whose val_id was already applied to the order.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from app.errors import DownstreamEffectError
from app.processors.base import BaseGatewayClient
from app.schemas.requests import GatewayNotification
from app.services.fulfillment import FulfillmentHooks
from app.services.order_store import OrderStore, UpdatedOrder

logger = logging.getLogger(__name__)


VALIDATED_STATUSES = ("VALID", "VALIDATED")
COD_PARTIAL_MARKER = "cod_partial"

STATUS_MAP = {
    "FAILED": ("failed", "failed"),
    "CANCELLED": ("cancelled", "cancelled"),
}
DEFAULT_STATUS = ("pending", "pending")

# Order statuses that trigger confirmation + inventory update
FULFILLABLE_STATUSES = ("paid", "processing")


def map_gateway_status(status: str, validation: Dict[str, Any]) -> Tuple[str, str]:
    """Return (order status, payment status) for a gateway status code."""
    if status in VALIDATED_STATUSES:
        if validation.get("value_b") == COD_PARTIAL_MARKER:
            return "processing", "delivery_paid"
        return "paid", "paid"
    return STATUS_MAP.get(status, DEFAULT_STATUS)


def build_order_update(
    notification: GatewayNotification,
    validation: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    status, payment_status = map_gateway_status(notification.status, validation)
    return {
        "status": status,
        "payment_status": payment_status,
        "payment_data": validation,
        "sslcommerz_tran_id": notification.tran_id,
        "validation_id": notification.val_id,
        "updated_at": now or datetime.now(timezone.utc),
    }


class ReconcileResult:
    def __init__(self, order: UpdatedOrder, update: Dict[str, Any], effects_due: bool):
        self.order = order
        self.update = update
        self.effects_due = effects_due


async def reconcile_notification(
    notification: GatewayNotification,
    gateway: BaseGatewayClient,
    store: OrderStore,
) -> ReconcileResult:
    """
    Apply one gateway notification to its order.

    Raises:
        GatewayValidationError: validation round-trip failed
        StoreError / OrderNotFoundError: the order update failed
    """
    validation = await gateway.validate(notification.val_id)
    update = build_order_update(notification, validation)

    order = store.update_by_id(notification.value_a, update)

    effects_due = (
        order.status in FULFILLABLE_STATUSES
        and order.previous_validation_id != notification.val_id
    )

    logger.info(
        "Order reconciled",
        extra={
            "order_id": order.order_id,
            "tran_id": notification.tran_id,
            "val_id": notification.val_id,
            "status": order.status,
            "payment_status": order.payment_status,
        },
    )
    if order.status in FULFILLABLE_STATUSES and not effects_due:
        logger.info("Redelivered notification, skipping side effects",
                    extra={"order_id": order.order_id, "val_id": notification.val_id})

    return ReconcileResult(order=order, update=update, effects_due=effects_due)


async def run_post_payment_effects(order: UpdatedOrder, hooks: FulfillmentHooks) -> None:
    """
    Confirmation first, then inventory. Best-effort: failures are logged, never raised.
    The order update is already committed when this runs.
    """
    steps = (
        ("confirmation", hooks.send_order_confirmation),
        ("inventory", hooks.update_inventory),
    )
    for effect, step in steps:
        try:
            await step(order)
        except Exception as e:
            if not isinstance(e, DownstreamEffectError):
                e = DownstreamEffectError(f"{effect} failed: {e}")
            logger.warning(
                "Post-payment side effect failed",
                extra={"order_id": order.order_id, "effect": effect, "error": str(e)},
            )
