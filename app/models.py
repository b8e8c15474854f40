from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String

from app.database import Base


def utcnow():
    return datetime.now(timezone.utc)


ORDER_STATUSES = ("pending", "processing", "paid", "failed", "cancelled")
PAYMENT_STATUSES = ("pending", "delivery_paid", "paid", "failed", "cancelled")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    status = Column(String, nullable=False, default="pending")
    payment_status = Column(String, nullable=False, default="pending")
    total = Column(Float, nullable=False, default=0.0)
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True, index=True)
    items = Column(JSON, nullable=False, default=list)
    payment_data = Column(JSON, nullable=True)  # raw gateway validation payload
    sslcommerz_tran_id = Column(String, nullable=True, index=True)
    validation_id = Column(String, nullable=True)  # val_id of the last applied notification
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
