import json
from datetime import datetime

import httpx
import pytest

from food_orders.services import sms_outbound
from food_orders.services.sms_outbound import notify_admins, render_template, set_sms_service
from food_orders.sms.base import SMS_STATUS_FAILED, SMS_STATUS_LOGGED, SMS_STATUS_SENT, SmsSendResult
from food_orders.sms.hubtel_provider import HubtelSmsProvider
from food_orders.sms.mock_provider import LogOnlySmsProvider
from food_orders.sms.service import InvalidPhoneNumber, SmsService, normalize_ghana_phone


class RecordingProvider:
    name = "recording"

    def __init__(self):
        self.sent = []

    def send_text(self, *, to_phone, text, sender=None):
        self.sent.append((to_phone, text))
        return SmsSendResult(status=SMS_STATUS_SENT, to_phone=to_phone)


class ExplodingProvider:
    name = "exploding"

    def send_text(self, *, to_phone, text, sender=None):
        raise RuntimeError("socket closed")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+233241234567", "+233241234567"),
        ("0241234567", "+233241234567"),
        ("024 123 4567", "+233241234567"),
        ("(024)-123-4567", "+233241234567"),
        ("233241234567", "+233241234567"),
        ("241234567", "+233241234567"),
    ],
)
def test_normalize_ghana_phone(raw, expected):
    assert normalize_ghana_phone(raw) == expected


@pytest.mark.parametrize("raw", ["", "12345", "+2332412345678", "+44 20 7946 0958"])
def test_normalize_ghana_phone_rejects_invalid_numbers(raw):
    with pytest.raises(InvalidPhoneNumber):
        normalize_ghana_phone(raw)


def test_sms_service_invalid_phone_returns_failed_result_without_sending():
    provider = RecordingProvider()

    result = SmsService(provider=provider).send("12345", "hello")

    assert result.status == SMS_STATUS_FAILED
    assert result.ok is False
    assert provider.sent == []


def test_sms_service_never_raises_on_provider_crash():
    result = SmsService(provider=ExplodingProvider()).send("0241234567", "hello")

    assert result.status == SMS_STATUS_FAILED
    assert "socket closed" in result.error


def test_log_only_provider_reports_logged():
    result = SmsService(provider=LogOnlySmsProvider()).send("0241234567", "hello")

    assert result.status == SMS_STATUS_LOGGED
    assert result.ok is True
    assert result.to_phone == "+233241234567"


def test_hubtel_provider_posts_basic_auth_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"messageId": "abc-123", "status": 0})

    provider = HubtelSmsProvider(
        client_id="client",
        client_secret="secret",
        sender_id="FoodHub",
        base_url="https://sms.hubtel.test/v1/messages",
        transport=httpx.MockTransport(handler),
    )

    result = provider.send_text(to_phone="+233241234567", text="Order Received!")

    assert result.status == SMS_STATUS_SENT
    assert result.provider_message_id == "abc-123"
    assert seen["url"] == "https://sms.hubtel.test/v1/messages/send"
    assert seen["auth"].startswith("Basic ")
    assert seen["body"] == {"from": "FoodHub", "to": "+233241234567", "content": "Order Received!"}


def test_hubtel_provider_error_response_is_failed_result():
    provider = HubtelSmsProvider(
        client_id="client",
        client_secret="secret",
        sender_id="FoodHub",
        transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"message": "Unauthorized"})),
    )

    result = provider.send_text(to_phone="+233241234567", text="hi")

    assert result.status == SMS_STATUS_FAILED
    assert "401" in result.error


def test_hubtel_provider_without_credentials_does_not_call_out():
    def handler(request):
        raise AssertionError("no request expected")

    provider = HubtelSmsProvider(client_id="", client_secret="", transport=httpx.MockTransport(handler))

    assert provider.send_text(to_phone="+233241234567", text="hi").status == SMS_STATUS_FAILED


def test_render_order_received_formats_money_and_delivery_time():
    text = render_template(
        "order_received",
        {
            "order_id": "MD123456789",
            "food_name": "Jollof Rice",
            "quantity": 2,
            "addons": ["Chicken", "Coleslaw"],
            "total": "110.5",
            "payment_mode": "Cash",
            "delivery_location": "East Legon",
            "delivery_time": datetime(2026, 10, 18, 18, 30, 5),
        },
    )

    assert "Order ID: MD123456789" in text
    assert "Addons: Chicken, Coleslaw\n" in text
    assert "Total Price: GHS 110.50" in text
    assert "Delivery Time: 18/10/2026, 18:30:05" in text


def test_render_generic_status_template():
    text = render_template("order_status_generic", {"order_id": "MD123456789", "status": "Out for delivery"})

    assert text.endswith("Status: Out for delivery")


def test_notify_admins_sends_to_each_configured_number(monkeypatch):
    provider = RecordingProvider()
    set_sms_service(SmsService(provider=provider))
    monkeypatch.setattr(sms_outbound, "ADMIN_PHONE_NUMBERS", ["0201111111", "+233202222222"])

    try:
        results = notify_admins(
            "admin_new_order",
            {
                "order_id": "MD123456789",
                "phone_number": "+233241234567",
                "food_name": "Waakye",
                "quantity": 1,
                "total": 30,
                "payment_mode": "Cash",
                "delivery_location": "Osu",
                "status": "Pending",
            },
        )
    finally:
        set_sms_service(None)

    assert [result.status for result in results] == [SMS_STATUS_SENT, SMS_STATUS_SENT]
    assert [to for to, _ in provider.sent] == ["+233201111111", "+233202222222"]
    assert "Customer Phone: +233241234567" in provider.sent[0][1]


def test_notify_admins_without_numbers_is_a_no_op(monkeypatch):
    monkeypatch.setattr(sms_outbound, "ADMIN_PHONE_NUMBERS", [])

    assert notify_admins("admin_new_order", {"order_id": "MD1"}) == []
