from __future__ import annotations

from decimal import Decimal
from typing import Any

from food_orders.models.order import Order
from food_orders.services.event_bus import ORDER_CREATED, ORDER_PAID, ORDER_STATUS_CHANGED, event_bus


def build_order_payload(
    order: Order,
    *,
    food_name: str | None,
    total: Decimal | float,
    previous_status: str | None = None,
) -> dict[str, Any]:
    return {
        "id": order.id,
        "order_id": order.order_id,
        "status": order.order_status,
        "previous_status": previous_status,
        "phone_number": order.phone_number,
        "food_name": food_name or "",
        "quantity": order.quantity,
        "addons": list(order.addons or []),
        "total": total,
        "payment_mode": order.payment_mode,
        "delivery_location": order.delivery_location,
        "delivery_time": order.delivery_time,
        "reference": order.payment_reference or "",
    }


def emit_order_created(payload: dict[str, Any]) -> None:
    event_bus.emit(ORDER_CREATED, payload)


def emit_order_paid(payload: dict[str, Any]) -> None:
    event_bus.emit(ORDER_PAID, payload)


def emit_order_status_changed(payload: dict[str, Any]) -> None:
    event_bus.emit(ORDER_STATUS_CHANGED, payload)
