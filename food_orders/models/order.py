import uuid

import sqlalchemy as sa
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from food_orders.core.database import Base

ORDER_STATUS_PENDING = "Pending"
ORDER_STATUS_CONFIRMED = "Confirmed"
ORDER_STATUS_DELIVERED = "Delivered"
ORDER_STATUS_CANCELLED = "Cancelled"
ORDER_STATUSES = (
    ORDER_STATUS_PENDING,
    ORDER_STATUS_CONFIRMED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_CANCELLED,
)

PAYMENT_STATUS_COMPLETED = "Completed"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Customer-facing code, MD + 9 digits
    order_id = Column(String(11), unique=True, index=True, nullable=False)

    food_id = Column(String(36), ForeignKey("foods.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)
    # additional_options names, in the order the customer sent them
    addons = Column(JSONB().with_variant(sa.JSON(), "sqlite"), default=list, nullable=False)
    drink = Column(String(120), nullable=True)

    delivery_location = Column(Text, nullable=False)
    phone_number = Column(String(20), index=True, nullable=False)
    delivery_time = Column(DateTime(timezone=True), nullable=False)
    payment_mode = Column(String(80), nullable=False)
    additional_notes = Column(Text, nullable=True)

    # Free text: no enum at the database level
    order_status = Column(String(40), default=ORDER_STATUS_PENDING, nullable=False, index=True)
    payment_reference = Column(String(120), nullable=True, index=True)
    payment_status = Column(String(40), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    food = relationship("Food")
