from __future__ import annotations

TEMPLATES: dict[str, str] = {
    "order_received": (
        "Order Received!\n\n"
        "Order ID: {order_id}\n"
        "Food: {food_name}\n"
        "Quantity: {quantity}\n"
        "{addons_line}"
        "Total Price: {currency} {total}\n"
        "Payment: {payment_mode}\n"
        "Delivery Location: {delivery_location}\n"
        "Delivery Time: {delivery_time}\n"
        "Status: Pending\n\n"
        "Track your order with the Order ID above."
    ),
    "payment_confirmed": (
        "Payment Successful! Order Confirmed!\n\n"
        "Order ID: {order_id}\n"
        "Your payment of {currency} {total} has been confirmed.\n\n"
        "Order Details:\n"
        "Food: {food_name}\n"
        "Quantity: {quantity}\n"
        "{addons_line}"
        "Total Price: {currency} {total}\n"
        "Payment: {payment_mode}\n"
        "Delivery Location: {delivery_location}\n"
        "Delivery Time: {delivery_time}\n"
        "Status: Confirmed"
    ),
    "order_confirmed": (
        "Your order {order_id} has been confirmed and is being prepared. "
        "We will deliver to {delivery_location}."
    ),
    "order_delivered": (
        "Your order {order_id} has been delivered. Enjoy your meal and thank you for ordering!"
    ),
    "order_cancelled": (
        "Your order {order_id} has been cancelled. Please contact us if this was a mistake."
    ),
    "order_status_generic": (
        "Your order {order_id} has been updated.\nStatus: {status}"
    ),
    "admin_new_order": (
        "New Order Received!\n\n"
        "Order ID: {order_id}\n"
        "Customer Phone: {phone_number}\n"
        "Food: {food_name}\n"
        "Quantity: {quantity}\n"
        "{addons_line}"
        "Total Price: {currency} {total}\n"
        "Payment: {payment_mode}\n"
        "Delivery Location: {delivery_location}\n"
        "Delivery Time: {delivery_time}\n"
        "Status: {status}"
    ),
    "admin_paid_order": (
        "New Paid Order Received!\n\n"
        "Order ID: {order_id}\n"
        "Payment Reference: {reference}\n"
        "Customer Phone: {phone_number}\n"
        "Food: {food_name}\n"
        "Quantity: {quantity}\n"
        "{addons_line}"
        "Total Price: {currency} {total}\n"
        "Payment: {payment_mode} (PAID)\n"
        "Delivery Location: {delivery_location}\n"
        "Delivery Time: {delivery_time}\n"
        "Status: Confirmed"
    ),
}

STATUS_TEMPLATES: dict[str, str] = {
    "Confirmed": "order_confirmed",
    "Delivered": "order_delivered",
    "Cancelled": "order_cancelled",
}


def template_for_status(status: str | None) -> str:
    return STATUS_TEMPLATES.get((status or "").strip(), "order_status_generic")
