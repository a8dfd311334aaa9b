from __future__ import annotations

import logging

from food_orders.services.event_bus import event_bus
from food_orders.services.order_events import ORDER_CREATED, ORDER_PAID, ORDER_STATUS_CHANGED
from food_orders.services.sms_outbound import notify_admins, notify_customer
from food_orders.services.sms_templates import template_for_status

logger = logging.getLogger(__name__)

CASH_PAYMENT_MODE = "Cash"


def handle_order_created(payload: dict) -> None:
    # Non-cash orders are announced by the payment confirmation instead.
    if payload.get("payment_mode") == CASH_PAYMENT_MODE:
        notify_customer(payload["phone_number"], "order_received", payload)
    else:
        logger.info(
            "Customer SMS skipped order_id=%s payment_mode=%s",
            payload.get("order_id"),
            payload.get("payment_mode"),
        )
    notify_admins("admin_new_order", payload)


def handle_order_paid(payload: dict) -> None:
    notify_customer(payload["phone_number"], "payment_confirmed", payload)
    notify_admins("admin_paid_order", payload)


def handle_order_status_changed(payload: dict) -> None:
    template = template_for_status(payload.get("status"))
    notify_customer(payload["phone_number"], template, payload)


event_bus.subscribe(ORDER_CREATED, handle_order_created)
event_bus.subscribe(ORDER_PAID, handle_order_paid)
event_bus.subscribe(ORDER_STATUS_CHANGED, handle_order_status_changed)
