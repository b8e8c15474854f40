from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class OrderData(BaseModel):
    id: int
    total: float
    has_discounted_price: bool = False
    shipping_cost: float = 0.0
    shipping_location: Optional[str] = None


class Customer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    address: str
    city: str
    postal_code: str = Field(alias="postalCode")
    phone: str


class CartItem(BaseModel):
    name: str


class InitiatePaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_data: OrderData = Field(alias="orderData")
    customer: Customer
    cart_items: List[CartItem] = Field(alias="cartItems")

    @field_validator("cart_items")
    @classmethod
    def validate_cart_items(cls, v):
        if not v:
            raise ValueError("cartItems cannot be empty")
        return v


class GatewayNotification(BaseModel):
    """IPN body. The gateway posts more fields than these; the rest are ignored."""

    model_config = ConfigDict(extra="ignore")

    val_id: str
    tran_id: str
    status: str
    value_a: int  # order id pass-through
