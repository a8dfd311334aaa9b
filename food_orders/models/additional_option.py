import uuid

from sqlalchemy import Column, DateTime, Numeric, String, func

from food_orders.core.database import Base


class AdditionalOption(Base):
    __tablename__ = "additional_options"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Orders reference options by this name, not by id.
    name = Column(String(120), unique=True, nullable=False)
    type = Column(String(60), default="addon", nullable=False)
    price = Column(Numeric(10, 2), default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
