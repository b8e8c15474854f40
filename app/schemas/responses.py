from pydantic import BaseModel
from typing import Optional


class InitiatePaymentResponse(BaseModel):
    success: bool = True
    gateway_url: str
    tran_id: str


class InitiatePaymentError(BaseModel):
    success: bool = False
    message: str = "Payment initiation failed"
    error: str


class NotificationAck(BaseModel):
    success: bool
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    mode: str
