from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from food_orders.core.database import get_db
from food_orders.integrations.paystack import PaymentGateway, get_payment_gateway
from food_orders.schemas.orders import PaymentVerifyRequest
from food_orders.services.errors import OrderWorkflowError
from food_orders.services.order_events import build_order_payload, emit_order_paid
from food_orders.services.orders import priced_order_to_dict
from food_orders.services.payments import verify_and_create_paid_order

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/payment/verify-payment")
def verify_payment(
    payload: PaymentVerifyRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    try:
        paid = verify_and_create_paid_order(
            db,
            reference=payload.reference,
            gateway=gateway,
            client_order_id=payload.order_id,
        )
    except OrderWorkflowError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    # The customer is told what was actually charged, not the catalog total.
    event_payload = build_order_payload(
        paid.priced.order,
        food_name=paid.priced.food_name,
        total=paid.amount_paid,
    )
    background_tasks.add_task(emit_order_paid, event_payload)

    return {
        **priced_order_to_dict(paid.priced),
        "totalPrice": float(paid.amount_paid),
        "amountPaid": float(paid.amount_paid),
        "catalogTotal": float(paid.catalog_total),
        "paymentStatus": paid.priced.order.payment_status,
        "paymentReference": paid.reference,
    }
