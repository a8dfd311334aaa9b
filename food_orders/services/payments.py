from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from food_orders.integrations.paystack import PaymentGateway, VerifiedTransaction
from food_orders.models.order import ORDER_STATUS_CONFIRMED, PAYMENT_STATUS_COMPLETED
from food_orders.models.payment_reconciliation import PaymentReconciliationLog
from food_orders.schemas.orders import OrderCreate
from food_orders.services.errors import OrderPersistenceError, OrderWorkflowError, PaymentVerificationError
from food_orders.services.orders import PricedOrder, get_food, insert_order
from food_orders.services.pricing import price_order

logger = logging.getLogger(__name__)

ORDER_DATA_METADATA_KEY = "orderData"


@dataclass
class PaidOrder:
    priced: PricedOrder
    amount_paid: Decimal
    reference: str

    @property
    def catalog_total(self) -> Decimal:
        return self.priced.pricing.total


def _raw_order_data(transaction: VerifiedTransaction) -> Any:
    return transaction.metadata.get(ORDER_DATA_METADATA_KEY)


def parse_order_data(transaction: VerifiedTransaction) -> OrderCreate:
    raw = _raw_order_data(transaction)
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PaymentVerificationError("Invalid order data in payment metadata") from exc
    if not isinstance(raw, dict):
        raise PaymentVerificationError("Invalid order data in payment metadata")
    try:
        return OrderCreate.model_validate(raw)
    except ValidationError as exc:
        raise PaymentVerificationError("Invalid order data in payment metadata") from exc


def record_unreconciled_payment(
    db: Session,
    *,
    transaction: VerifiedTransaction,
    reason: str,
) -> None:
    """Leave a trace of a captured payment that has no order row.

    The log line is always written; the table insert is best-effort since the
    failure being recorded may be the datastore itself.
    """
    raw = _raw_order_data(transaction)
    payload = raw if isinstance(raw, str) else json.dumps(raw, default=str)
    logger.critical(
        "[PAYMENT_RECONCILIATION] payment captured without order reference=%s amount=%s reason=%s",
        transaction.reference,
        transaction.amount,
        reason,
        extra={"reference": transaction.reference},
    )
    try:
        db.add(
            PaymentReconciliationLog(
                payment_reference=transaction.reference,
                amount_paid=transaction.amount,
                reason=reason,
                order_payload_json=payload,
            )
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to store reconciliation record reference=%s error=%s", transaction.reference, exc)


def verify_and_create_paid_order(
    db: Session,
    *,
    reference: str | None,
    gateway: PaymentGateway,
    client_order_id: str | None = None,
    rng: random.Random | None = None,
) -> PaidOrder:
    if not reference:
        raise PaymentVerificationError("Payment reference is required")

    transaction = gateway.verify_transaction(reference)
    if not transaction.success:
        logger.warning(
            "Payment verification failed reference=%s gateway_status=%s",
            reference,
            transaction.gateway_status,
            extra={"reference": reference},
        )
        raise PaymentVerificationError()

    # From here on the money is captured; any failure leaves a reconciliation trace.
    try:
        draft = parse_order_data(transaction)
        food = get_food(db, draft.food_id)
        pricing = price_order(
            db,
            food_price=food.price,
            quantity=draft.quantity,
            addon_names=draft.addons,
            strict=True,
        )
        order = insert_order(
            db,
            draft=draft,
            order_status=ORDER_STATUS_CONFIRMED,
            payment_reference=reference,
            payment_status=PAYMENT_STATUS_COMPLETED,
            rng=rng,
        )
    except OrderWorkflowError as exc:
        record_unreconciled_payment(db, transaction=transaction, reason=exc.message)
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        record_unreconciled_payment(db, transaction=transaction, reason=f"Datastore error: {exc}")
        raise OrderPersistenceError("Failed to create order") from exc

    amount_paid = transaction.amount
    if amount_paid != pricing.total:
        logger.warning(
            "Paid amount differs from catalog total order_id=%s amount_paid=%s catalog_total=%s",
            order.order_id,
            amount_paid,
            pricing.total,
            extra={"order_id": order.order_id, "reference": reference},
        )
    logger.info(
        "Paid order %s created reference=%s client_order_id=%s amount_paid=%s",
        order.order_id,
        reference,
        client_order_id,
        amount_paid,
        extra={"order_id": order.order_id, "reference": reference},
    )
    return PaidOrder(
        priced=PricedOrder(order=order, food=food, pricing=pricing),
        amount_paid=amount_paid,
        reference=reference,
    )
