"""
Payment session initiation.

1. Mint a transaction id for the order
2. Pick the amount to charge online
3. Build the gateway session request (truncated to gateway field limits)
4. Call the gateway
5. Refuse responses without a redirect URL, or with a sandbox URL in live mode
"""
import logging
from typing import Any, Dict, List

from app.config import Settings
from app.errors import GatewayResponseError
from app.processors.base import BaseGatewayClient
from app.schemas.requests import CartItem, Customer, InitiatePaymentRequest, OrderData
from app.services.transaction_ids import make_tran_id

logger = logging.getLogger(__name__)


# Gateway field limits
CUSTOMER_FIELD_MAX = 50
PHONE_MAX = 20
PRODUCT_NAME_MAX = 255


def truncate(value, limit: int) -> str:
    return str(value)[:limit]


def compute_charge_amount(order: OrderData) -> float:
    """
    Discounted orders are cash-on-delivery with only shipping collected online.
    Everything else is charged in full.
    """
    if order.has_discounted_price:
        return order.shipping_cost
    return order.total


def product_listing(cart_items: List[CartItem]) -> str:
    return truncate(", ".join(item.name for item in cart_items), PRODUCT_NAME_MAX)


def build_session_request(
    order: OrderData,
    customer: Customer,
    cart_items: List[CartItem],
    tran_id: str,
    settings: Settings,
) -> Dict[str, Any]:
    backend = settings.backend_url.rstrip("/")
    name = truncate(customer.name, CUSTOMER_FIELD_MAX)
    address = truncate(customer.address, CUSTOMER_FIELD_MAX)
    city = truncate(customer.city, CUSTOMER_FIELD_MAX)
    postcode = truncate(customer.postal_code, CUSTOMER_FIELD_MAX)

    return {
        "total_amount": compute_charge_amount(order),
        "currency": settings.currency,
        "tran_id": tran_id,
        "success_url": f"{backend}/payment/success",
        "fail_url": f"{backend}/payment/fail",
        "cancel_url": f"{backend}/payment/cancel",
        "ipn_url": f"{backend}/api/payment/ipn",
        "shipping_method": settings.shipping_method,
        "product_name": product_listing(cart_items),
        "product_category": settings.product_category,
        "product_profile": settings.product_profile,
        "cus_name": name,
        "cus_email": truncate(customer.email, CUSTOMER_FIELD_MAX),
        "cus_add1": address,
        "cus_city": city,
        "cus_postcode": postcode,
        "cus_country": settings.country,
        "cus_phone": truncate(customer.phone, PHONE_MAX),
        "ship_name": name,
        "ship_add1": address,
        "ship_city": city,
        "ship_postcode": postcode,
        "ship_country": settings.country,
        "value_a": str(order.id),
        "emi_option": 0,
        "emi_max_inst_option": 0,
        "emi_allow_only": 0,
    }


class InitiationResult:
    def __init__(self, gateway_url: str, tran_id: str):
        self.gateway_url = gateway_url
        self.tran_id = tran_id


async def initiate_payment(
    request: InitiatePaymentRequest,
    gateway: BaseGatewayClient,
    settings: Settings,
) -> InitiationResult:
    """
    Open a gateway session for one checkout.

    Raises:
        GatewayResponseError: no redirect URL, a sandbox URL while live, or a transport failure
    """
    tran_id = make_tran_id(request.order_data.id)
    session_request = build_session_request(
        request.order_data, request.customer, request.cart_items, tran_id, settings
    )

    api_response = await gateway.initiate(session_request)
    gateway_url = api_response.get("GatewayPageURL")

    logger.info(
        "Gateway session response",
        extra={
            "tran_id": tran_id,
            "order_id": request.order_data.id,
            "gateway_url": gateway_url,
            "status": api_response.get("status"),
            "session_key": api_response.get("sessionkey"),
        },
    )

    if not gateway_url:
        reason = api_response.get("failedreason")
        message = "No Gateway URL received from SSLCommerz"
        raise GatewayResponseError(f"{message}: {reason}" if reason else message)

    if settings.is_live and "sandbox" in gateway_url:
        raise GatewayResponseError("SSLCommerz returned sandbox URL in live mode!")

    return InitiationResult(gateway_url=gateway_url, tran_id=tran_id)
