from __future__ import annotations

import logging
import re

from food_orders.core.config import HUBTEL_CLIENT_ID, HUBTEL_CLIENT_SECRET
from food_orders.sms.base import SMS_STATUS_FAILED, SmsProvider, SmsSendResult
from food_orders.sms.hubtel_provider import HubtelSmsProvider
from food_orders.sms.mock_provider import LogOnlySmsProvider

logger = logging.getLogger(__name__)

GHANA_PHONE_PATTERN = re.compile(r"^\+233\d{9}$")
_PHONE_NOISE = re.compile(r"[\s\-()]")


class InvalidPhoneNumber(ValueError):
    pass


def normalize_ghana_phone(phone: str) -> str:
    formatted = _PHONE_NOISE.sub("", phone or "")
    if formatted.startswith("0"):
        formatted = "+233" + formatted[1:]
    elif formatted.startswith("233"):
        formatted = "+" + formatted
    elif not formatted.startswith("+233"):
        formatted = "+233" + formatted

    if not GHANA_PHONE_PATTERN.match(formatted):
        raise InvalidPhoneNumber("Invalid phone number format. Expected format: +233XXXXXXXXX")
    return formatted


class SmsService:
    def __init__(self, provider: SmsProvider | None = None) -> None:
        self._provider = provider or self._select_provider()

    @property
    def provider_name(self) -> str:
        return getattr(self._provider, "name", type(self._provider).__name__)

    def _select_provider(self) -> SmsProvider:
        if HUBTEL_CLIENT_ID and HUBTEL_CLIENT_SECRET:
            return HubtelSmsProvider()
        return LogOnlySmsProvider()

    def send(self, to_phone: str, text: str) -> SmsSendResult:
        """Send one SMS. Never raises: failures come back as a failed result."""
        try:
            formatted = normalize_ghana_phone(to_phone)
        except InvalidPhoneNumber as exc:
            logger.warning("SMS skipped invalid phone=%s error=%s", to_phone, exc)
            return SmsSendResult(status=SMS_STATUS_FAILED, to_phone=to_phone, error=str(exc))

        try:
            return self._provider.send_text(to_phone=formatted, text=text)
        except Exception as exc:
            logger.exception("SMS provider %s crashed to=%s", self.provider_name, formatted)
            return SmsSendResult(status=SMS_STATUS_FAILED, to_phone=formatted, error=str(exc))
