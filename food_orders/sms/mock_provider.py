from __future__ import annotations

import logging
import uuid

from food_orders.sms.base import SMS_STATUS_LOGGED, SmsSendResult

logger = logging.getLogger(__name__)


class LogOnlySmsProvider:
    """Used when no SMS credentials are configured: the message only reaches the log."""

    name = "log_only"

    def send_text(self, *, to_phone: str, text: str, sender: str | None = None) -> SmsSendResult:
        logger.info("SMS (log only) to=%s sender=%s body=%s", to_phone, sender, text)
        return SmsSendResult(
            status=SMS_STATUS_LOGGED,
            to_phone=to_phone,
            provider_message_id=f"log-{uuid.uuid4().hex[:10]}",
        )
