from __future__ import annotations

import json
import logging

import httpx

from food_orders.core.config import (
    HUBTEL_BASE_URL,
    HUBTEL_CLIENT_ID,
    HUBTEL_CLIENT_SECRET,
    HUBTEL_SENDER_ID,
    HUBTEL_TIMEOUT_SECONDS,
)
from food_orders.sms.base import SMS_STATUS_FAILED, SMS_STATUS_SENT, SmsSendResult, sanitize_payload

logger = logging.getLogger(__name__)


class HubtelSmsProvider:
    name = "hubtel"

    def __init__(
        self,
        *,
        client_id: str = HUBTEL_CLIENT_ID,
        client_secret: str = HUBTEL_CLIENT_SECRET,
        sender_id: str = HUBTEL_SENDER_ID,
        base_url: str = HUBTEL_BASE_URL,
        timeout: float = HUBTEL_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._sender_id = sender_id
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def send_text(self, *, to_phone: str, text: str, sender: str | None = None) -> SmsSendResult:
        if not self._client_id or not self._client_secret:
            return SmsSendResult(status=SMS_STATUS_FAILED, to_phone=to_phone, error="Hubtel credentials missing")

        url = f"{self._base_url}/send"
        payload = {"from": sender or self._sender_id, "to": to_phone, "content": text}
        logger.info("Hubtel API Request: POST %s to=%s", url, to_phone)

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    url,
                    json=payload,
                    auth=(self._client_id, self._client_secret),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.error("Hubtel API Request Error: %s", exc)
            return SmsSendResult(status=SMS_STATUS_FAILED, to_phone=to_phone, error=str(exc))

        logger.info("Hubtel API Response: %s", response.status_code)
        try:
            data = response.json()
        except json.JSONDecodeError:
            data = {"raw": response.text}
        if not isinstance(data, dict):
            data = {"raw": data}

        if 200 <= response.status_code < 300:
            return SmsSendResult(
                status=SMS_STATUS_SENT,
                to_phone=to_phone,
                provider_message_id=data.get("messageId") or data.get("MessageId"),
                response_payload=sanitize_payload(data),
            )

        error = f"Hubtel error {response.status_code}: {response.text}"
        logger.error("Hubtel API Response Error: %s", error)
        return SmsSendResult(
            status=SMS_STATUS_FAILED,
            to_phone=to_phone,
            error=error,
            response_payload=sanitize_payload(data),
        )
