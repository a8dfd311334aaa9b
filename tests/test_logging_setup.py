import json
import logging

from food_orders.core.logging_setup import JsonFormatter
from food_orders.core.request_context import clear_request_context, set_request_context


def _record(message, *args, **extra):
    record = logging.LogRecord("food_orders.test", logging.INFO, __file__, 1, message, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_context_and_extras():
    set_request_context(request_id="req-1", user_id="admin")
    try:
        line = JsonFormatter("%(message)s").format(_record("Order %s created", "MD123456789", order_id="MD123456789"))
    finally:
        clear_request_context()

    payload = json.loads(line)
    assert payload["request_id"] == "req-1"
    assert payload["user_id"] == "admin"
    assert payload["level"] == "INFO"
    assert payload["message"] == "Order MD123456789 created"
    assert payload["order_id"] == "MD123456789"


def test_json_formatter_masks_secrets():
    line = JsonFormatter("%(message)s").format(
        _record("calling with Authorization: Bearer sk_live_abcdef123 token=xyz")
    )

    message = json.loads(line)["message"]
    assert "abcdef123" not in message
    assert "xyz" not in message
