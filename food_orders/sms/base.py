from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


SMS_STATUS_SENT = "sent"
SMS_STATUS_FAILED = "failed"
SMS_STATUS_LOGGED = "logged"


@dataclass
class SmsSendResult:
    status: str
    to_phone: str | None = None
    provider_message_id: str | None = None
    error: str | None = None
    response_payload: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status in {SMS_STATUS_SENT, SMS_STATUS_LOGGED}


class SmsProvider(Protocol):
    name: str

    def send_text(self, *, to_phone: str, text: str, sender: str | None = None) -> SmsSendResult:
        ...


SENSITIVE_KEYS = {"authorization", "client_secret", "clientsecret", "password", "token"}


def _mask_value(value: Any) -> Any:
    if value is None:
        return None
    text = str(value)
    if len(text) <= 4:
        return "****"
    return f"****{text[-4:]}"


def sanitize_payload(payload: dict[str, Any]) -> dict[str, Any]:
    def _sanitize(value: Any) -> Any:
        if isinstance(value, dict):
            return {key: _sanitize_value(key, inner) for key, inner in value.items()}
        if isinstance(value, list):
            return [_sanitize(item) for item in value]
        return value

    def _sanitize_value(key: str, value: Any) -> Any:
        if key.lower() in SENSITIVE_KEYS:
            return _mask_value(value)
        return _sanitize(value)

    return _sanitize(payload)
