from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

from food_orders.core.config import ADMIN_PHONE_NUMBERS, CURRENCY_LABEL
from food_orders.services.sms_templates import TEMPLATES
from food_orders.sms.base import SmsSendResult
from food_orders.sms.service import SmsService

logger = logging.getLogger(__name__)

_sms_service: SmsService | None = None


def get_sms_service() -> SmsService:
    global _sms_service
    if _sms_service is None:
        _sms_service = SmsService()
        logger.info("SMS service ready provider=%s", _sms_service.provider_name)
    return _sms_service


def set_sms_service(service: SmsService | None) -> None:
    global _sms_service
    _sms_service = service


def format_money(value: Any) -> str:
    amount = value if isinstance(value, Decimal) else Decimal(str(value or 0))
    return f"{amount:,.2f}"


def format_delivery_time(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y, %H:%M:%S")
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d/%m/%Y, %H:%M:%S")
        except ValueError:
            return value
    return ""


def _addons_line(addons: Any) -> str:
    if not addons:
        return ""
    return f"Addons: {', '.join(str(name) for name in addons)}\n"


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    if template not in TEMPLATES:
        raise KeyError(f"Unknown SMS template: {template}")
    payload = dict(variables)
    payload.setdefault("currency", CURRENCY_LABEL)
    payload["total"] = format_money(payload.get("total", 0))
    payload["delivery_time"] = format_delivery_time(payload.get("delivery_time"))
    payload["addons_line"] = _addons_line(payload.get("addons"))
    payload.setdefault("status", "")
    payload.setdefault("reference", "")
    return TEMPLATES[template].format(**payload)


def notify_customer(phone: str, template: str, variables: Mapping[str, Any]) -> SmsSendResult:
    message_text = render_template(template, variables)
    result = get_sms_service().send(phone, message_text)
    if result.ok:
        logger.info(
            "Customer SMS %s template=%s order_id=%s to=%s",
            result.status,
            template,
            variables.get("order_id"),
            result.to_phone,
        )
    else:
        logger.error(
            "Customer SMS failed template=%s order_id=%s to=%s error=%s",
            template,
            variables.get("order_id"),
            phone,
            result.error,
        )
    return result


def notify_admins(template: str, variables: Mapping[str, Any]) -> list[SmsSendResult]:
    if not ADMIN_PHONE_NUMBERS:
        logger.debug("Admin SMS skipped: ADMIN_PHONE_NUMBERS not configured")
        return []

    message_text = render_template(template, variables)
    results: list[SmsSendResult] = []
    for admin_phone in ADMIN_PHONE_NUMBERS:
        result = get_sms_service().send(admin_phone, message_text)
        if not result.ok:
            logger.warning(
                "Admin SMS failed template=%s order_id=%s to=%s error=%s",
                template,
                variables.get("order_id"),
                admin_phone,
                result.error,
            )
        results.append(result)
    return results
