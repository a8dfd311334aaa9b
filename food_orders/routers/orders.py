from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from food_orders.core.database import get_db
from food_orders.deps import require_admin
from food_orders.schemas.orders import OrderCreate, OrderStatusUpdate
from food_orders.services.errors import OrderWorkflowError
from food_orders.services.order_events import (
    build_order_payload,
    emit_order_created,
    emit_order_status_changed,
)
from food_orders.services.orders import (
    MAX_PAGE_SIZE,
    create_cash_order,
    delete_order,
    is_active_payment_mode,
    list_orders,
    priced_order_to_dict,
    track_order,
    update_order_status,
)

router = APIRouter(prefix="/api", tags=["orders"])


def _http_error(exc: OrderWorkflowError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("/orders", status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    try:
        if not is_active_payment_mode(db, payload.payment_mode):
            raise HTTPException(status_code=400, detail="Invalid payment mode")
        created = create_cash_order(db, payload)
    except OrderWorkflowError as exc:
        raise _http_error(exc) from exc

    event_payload = build_order_payload(
        created.order,
        food_name=created.food_name,
        total=created.pricing.total,
    )
    background_tasks.add_task(emit_order_created, event_payload)

    return priced_order_to_dict(created)


@router.get("/orders")
def get_orders(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    order_id: Optional[str] = Query(default=None, alias="orderId"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    _admin: dict = Depends(require_admin),
):
    try:
        return list_orders(
            db,
            status=status_filter,
            order_id=order_id,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
    except OrderWorkflowError as exc:
        raise _http_error(exc) from exc


@router.get("/orders/track/{order_id}")
def track(order_id: str, db: Session = Depends(get_db)):
    try:
        priced = track_order(db, order_id)
    except OrderWorkflowError as exc:
        raise _http_error(exc) from exc
    return priced_order_to_dict(priced)


@router.put("/orders/{id}")
def update_status(
    id: str,
    payload: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    _admin: dict = Depends(require_admin),
):
    try:
        updated = update_order_status(db, id, payload.order_status)
    except OrderWorkflowError as exc:
        raise _http_error(exc) from exc

    event_payload = build_order_payload(
        updated.order,
        food_name=updated.food_name,
        total=updated.pricing.total,
        previous_status=updated.previous_status,
    )
    background_tasks.add_task(emit_order_status_changed, event_payload)

    return priced_order_to_dict(updated)


@router.delete("/orders/{id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_order(
    id: str,
    db: Session = Depends(get_db),
    _admin: dict = Depends(require_admin),
):
    # Unknown ids are not an error.
    try:
        delete_order(db, id)
    except OrderWorkflowError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
