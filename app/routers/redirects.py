import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import RedirectResponse

from app.config import Settings, get_settings
from app.errors import InvalidTransactionIdError
from app.services.transaction_ids import extract_order_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _forward(tran_id: Optional[str], outcome: str, settings: Settings) -> RedirectResponse:
    try:
        order_id = extract_order_id(tran_id)
    except InvalidTransactionIdError as e:
        logger.warning("Rejected gateway redirect", extra={"tran_id": tran_id, "status": outcome})
        raise HTTPException(status_code=400, detail=str(e))

    frontend = settings.frontend_url.rstrip("/")
    return RedirectResponse(
        url=f"{frontend}/payment-{outcome}?{urlencode({'order_id': order_id})}",
        status_code=302,
    )


@router.post("/success")
def payment_success(tran_id: Optional[str] = Form(None), settings: Settings = Depends(get_settings)):
    """Browser lands here after a completed payment. Order state is only changed by the IPN."""
    return _forward(tran_id, "success", settings)


@router.post("/fail")
def payment_fail(tran_id: Optional[str] = Form(None), settings: Settings = Depends(get_settings)):
    return _forward(tran_id, "failed", settings)


@router.post("/cancel")
def payment_cancel(tran_id: Optional[str] = Form(None), settings: Settings = Depends(get_settings)):
    return _forward(tran_id, "cancelled", settings)
