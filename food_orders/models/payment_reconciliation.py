from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text, func

from food_orders.core.database import Base


class PaymentReconciliationLog(Base):
    __tablename__ = "payment_reconciliation_log"

    id = Column(Integer, primary_key=True)
    payment_reference = Column(String(120), index=True, nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=True)
    reason = Column(Text, nullable=False)
    order_payload_json = Column(Text, nullable=True)
    resolved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
