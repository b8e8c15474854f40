"""
Post-payment side effects: order confirmation and inventory update.

Both are owned by other services. When a target URL is configured the hook
POSTs the order to it; otherwise it only logs. Callers treat every failure
here as non-fatal.
"""
import logging
from typing import Optional

import httpx
from fastapi import Depends

from app.config import Settings, get_settings
from app.errors import DownstreamEffectError
from app.services.order_store import UpdatedOrder

logger = logging.getLogger(__name__)


class FulfillmentHooks:
    def __init__(
        self,
        confirmation_url: str = "",
        inventory_url: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.confirmation_url = confirmation_url
        self.inventory_url = inventory_url
        self.timeout = timeout
        self.transport = transport

    async def _post(self, url: str, payload: dict, effect: str) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise DownstreamEffectError(f"{effect} call failed: {e}") from e

    async def send_order_confirmation(self, order: UpdatedOrder) -> None:
        payload = {
            "order_id": order.order_id,
            "status": order.status,
            "payment_status": order.payment_status,
            "customer_email": order.customer_email,
            "customer_name": order.customer_name,
            "total": order.total,
            "items": order.items,
        }
        if not self.confirmation_url:
            logger.info("Order confirmation skipped, no webhook configured",
                        extra={"order_id": order.order_id, "effect": "confirmation"})
            return
        await self._post(self.confirmation_url, payload, "confirmation")
        logger.info("Order confirmation sent", extra={"order_id": order.order_id, "effect": "confirmation"})

    async def update_inventory(self, order: UpdatedOrder) -> None:
        payload = {"order_id": order.order_id, "items": order.items}
        if not self.inventory_url:
            logger.info("Inventory update skipped, no service configured",
                        extra={"order_id": order.order_id, "effect": "inventory"})
            return
        await self._post(self.inventory_url, payload, "inventory")
        logger.info("Inventory updated", extra={"order_id": order.order_id, "effect": "inventory"})


def get_fulfillment_hooks(settings: Settings = Depends(get_settings)) -> FulfillmentHooks:
    return FulfillmentHooks(
        confirmation_url=settings.confirmation_webhook_url,
        inventory_url=settings.inventory_service_url,
    )
