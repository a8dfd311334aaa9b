from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol

import httpx

from food_orders.core.config import PAYSTACK_BASE_URL, PAYSTACK_SECRET_KEY, PAYSTACK_TIMEOUT_SECONDS
from food_orders.services.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass
class VerifiedTransaction:
    reference: str
    success: bool
    amount_minor: int = 0
    currency: str | None = None
    gateway_status: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def amount(self) -> Decimal:
        return Decimal(int(self.amount_minor or 0)) / Decimal(100)


class PaymentGateway(Protocol):
    def verify_transaction(self, reference: str) -> VerifiedTransaction:
        ...


def _parse_metadata(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def parse_verify_response(reference: str, body: dict[str, Any]) -> VerifiedTransaction:
    data = body.get("data") or {}
    if not isinstance(data, dict):
        data = {}
    gateway_status = data.get("status")
    try:
        amount_minor = int(data.get("amount") or 0)
    except (TypeError, ValueError):
        amount_minor = 0
    return VerifiedTransaction(
        reference=reference,
        success=bool(body.get("status")) and gateway_status == "success",
        amount_minor=amount_minor,
        currency=data.get("currency"),
        gateway_status=gateway_status,
        metadata=_parse_metadata(data.get("metadata")),
    )


class PaystackClient:
    def __init__(
        self,
        *,
        secret_key: str = PAYSTACK_SECRET_KEY,
        base_url: str = PAYSTACK_BASE_URL,
        timeout: float = PAYSTACK_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def verify_transaction(self, reference: str) -> VerifiedTransaction:
        if not self._secret_key:
            logger.error("Paystack verification attempted without PAYSTACK_SECRET_KEY")
            raise PaymentGatewayError()

        url = f"{self._base_url}/transaction/verify/{reference}"
        headers = {
            "Authorization": f"Bearer {self._secret_key}",
            "Content-Type": "application/json",
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Paystack request failed reference=%s error=%s", reference, exc)
            raise PaymentGatewayError() from exc

        if response.status_code >= 500:
            logger.error("Paystack upstream error reference=%s status=%s", reference, response.status_code)
            raise PaymentGatewayError()

        try:
            body = response.json()
        except json.JSONDecodeError as exc:
            logger.error("Paystack returned non-JSON body reference=%s status=%s", reference, response.status_code)
            raise PaymentGatewayError() from exc
        if not isinstance(body, dict):
            raise PaymentGatewayError()

        transaction = parse_verify_response(reference, body)
        logger.info(
            "Paystack verify reference=%s http_status=%s gateway_status=%s amount_minor=%s",
            reference,
            response.status_code,
            transaction.gateway_status,
            transaction.amount_minor,
        )
        return transaction


def get_payment_gateway() -> PaymentGateway:
    return PaystackClient()
