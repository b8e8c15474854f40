import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.processors.base import BaseGatewayClient
from app.processors.sslcommerz import get_gateway_client
from app.schemas.requests import GatewayNotification, InitiatePaymentRequest
from app.schemas.responses import InitiatePaymentError, InitiatePaymentResponse, NotificationAck
from app.services.fulfillment import FulfillmentHooks, get_fulfillment_hooks
from app.services.order_store import OrderStore, get_order_store
from app.services.reconciler import reconcile_notification, run_post_payment_effects
from app.services.session import initiate_payment

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/initiate",
    response_model=InitiatePaymentResponse,
    responses={500: {"model": InitiatePaymentError}},
)
async def initiate(
    request: Request,
    gateway: BaseGatewayClient = Depends(get_gateway_client),
    settings: Settings = Depends(get_settings),
):
    """
    Open an SSLCommerz session for a checkout and hand back the hosted payment page URL.

    Body: {orderData, customer, cartItems}. Malformed bodies get the same 500 failure body
    as gateway errors.

    - Charges only shipping for discounted (cash-on-delivery) orders
    - Truncates customer fields to gateway limits
    - Refuses sandbox URLs while running live
    """
    order_id = None
    try:
        checkout = InitiatePaymentRequest.model_validate(await request.json())
        order_id = checkout.order_data.id
        result = await initiate_payment(checkout, gateway, settings)
    except Exception as e:
        logger.exception("Payment initiation failed", extra={"order_id": order_id, "error": str(e)})
        return JSONResponse(
            status_code=500,
            content=InitiatePaymentError(error=str(e)).model_dump(),
        )

    return InitiatePaymentResponse(gateway_url=result.gateway_url, tran_id=result.tran_id)


async def _read_notification(request: Request) -> GatewayNotification:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
    else:
        body = dict(await request.form())
    return GatewayNotification.model_validate(body)


@router.post(
    "/ipn",
    response_model=NotificationAck,
    response_model_exclude_none=True,
    responses={500: {"model": NotificationAck}},
)
async def ipn(
    request: Request,
    background_tasks: BackgroundTasks,
    gateway: BaseGatewayClient = Depends(get_gateway_client),
    store: OrderStore = Depends(get_order_store),
    hooks: FulfillmentHooks = Depends(get_fulfillment_hooks),
):
    """
    Gateway notification endpoint.

    Validates with the gateway, updates the order, and, when the order just became
    paid/processing, schedules confirmation + inventory update after the response.
    The caller is the gateway, so failures only show up in the logs.
    """
    try:
        notification = await _read_notification(request)
        result = await reconcile_notification(notification, gateway, store)
    except Exception as e:
        logger.exception("IPN processing failed", extra={"error": str(e)})
        return JSONResponse(
            status_code=500,
            content=NotificationAck(success=False, error=str(e)).model_dump(),
        )

    if result.effects_due:
        background_tasks.add_task(run_post_payment_effects, result.order, hooks)

    return NotificationAck(success=True)
