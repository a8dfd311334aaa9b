import json
from decimal import Decimal

import httpx
import pytest

from food_orders.integrations.paystack import PaystackClient, parse_verify_response
from food_orders.services.errors import PaymentGatewayError
from tests.fixtures_data import PAID_ORDER_DATA, PAYSTACK_FAILED_BODY, PAYSTACK_SUCCESS_BODY


def _client(handler, secret_key="sk_test_abc123"):
    return PaystackClient(
        secret_key=secret_key,
        base_url="https://paystack.test",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def test_verify_transaction_success_parses_amount_and_metadata():
    seen = {}
    body = json.loads(json.dumps(PAYSTACK_SUCCESS_BODY))
    body["data"]["metadata"] = {"orderData": json.dumps(PAID_ORDER_DATA)}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=body)

    transaction = _client(handler).verify_transaction("T123456789")

    assert seen["url"] == "https://paystack.test/transaction/verify/T123456789"
    assert seen["auth"] == "Bearer sk_test_abc123"
    assert transaction.success is True
    assert transaction.amount_minor == 11050
    assert transaction.amount == Decimal("110.5")
    assert json.loads(transaction.metadata["orderData"])["foodId"] == "food-jollof"


def test_verify_transaction_non_success_status():
    transaction = _client(lambda request: httpx.Response(200, json=PAYSTACK_FAILED_BODY)).verify_transaction(
        "T000000000"
    )

    assert transaction.success is False
    assert transaction.gateway_status == "abandoned"


def test_verify_transaction_unknown_reference_is_not_success():
    body = {"status": False, "message": "Transaction reference not found"}

    transaction = _client(lambda request: httpx.Response(400, json=body)).verify_transaction("nope")

    assert transaction.success is False


def test_verify_transaction_server_error_raises_gateway_error():
    with pytest.raises(PaymentGatewayError):
        _client(lambda request: httpx.Response(502, text="bad gateway")).verify_transaction("T1")


def test_verify_transaction_network_error_raises_gateway_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentGatewayError):
        _client(handler).verify_transaction("T1")


def test_verify_transaction_without_secret_key_raises_gateway_error():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(PaymentGatewayError):
        _client(handler, secret_key="").verify_transaction("T1")


def test_parse_verify_response_accepts_metadata_as_json_string():
    body = {
        "status": True,
        "data": {"status": "success", "amount": "2500", "metadata": json.dumps({"orderData": {"foodId": "x"}})},
    }

    transaction = parse_verify_response("T9", body)

    assert transaction.success is True
    assert transaction.amount == Decimal("25")
    assert transaction.metadata == {"orderData": {"foodId": "x"}}


def test_parse_verify_response_requires_top_level_status():
    body = {"status": False, "data": {"status": "success", "amount": 100}}

    assert parse_verify_response("T9", body).success is False
