from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from food_orders.core.config import ORDER_ID_MAX_ATTEMPTS
from food_orders.models.additional_option import AdditionalOption
from food_orders.models.order import Order
from food_orders.services.errors import AddonLookupError, OrderPersistenceError

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "MD"
ORDER_ID_MIN = 100_000_000
ORDER_ID_MAX = 999_999_999


@dataclass
class OrderPricing:
    food_total: Decimal
    addons_total: Decimal
    total: Decimal
    addon_details: list[dict[str, Any]] = field(default_factory=list)


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def generate_order_id(rng: random.Random | None = None) -> str:
    source = rng or random
    return f"{ORDER_ID_PREFIX}{source.randint(ORDER_ID_MIN, ORDER_ID_MAX)}"


def allocate_order_id(
    db: Session,
    *,
    rng: random.Random | None = None,
    max_attempts: int = ORDER_ID_MAX_ATTEMPTS,
) -> str:
    """Draw identifiers until one is free in ``orders.order_id``.

    The check and the later insert are separate round trips; the unique
    constraint on the column catches the remaining race.
    """
    for attempt in range(1, max(1, max_attempts) + 1):
        candidate = generate_order_id(rng)
        try:
            taken = db.query(Order.id).filter(Order.order_id == candidate).first()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Order id lookup error order_id=%s error=%s", candidate, exc)
            raise OrderPersistenceError("Failed to create order") from exc
        if not taken:
            return candidate
        logger.warning("Order id collision attempt=%s order_id=%s", attempt, candidate)
    raise OrderPersistenceError("Failed to create order: could not allocate a unique order id")


def resolve_addons(db: Session, names: Iterable[str] | None) -> list[AdditionalOption]:
    """Look up additional options by display name.

    Every addon reference in the system goes through this function; names
    with no matching row are simply absent from the result.
    """
    unique_names = list(dict.fromkeys(name for name in (names or []) if name))
    if not unique_names:
        return []
    return db.query(AdditionalOption).filter(AdditionalOption.name.in_(unique_names)).all()


def compute_addons_total(addon_names: Iterable[str] | None, price_by_name: dict[str, Decimal]) -> Decimal:
    total = Decimal("0")
    for name in addon_names or []:
        # Unknown names contribute nothing; repeated names are charged again.
        if name in price_by_name:
            total += price_by_name[name]
    return total


def compute_food_total(food_price: Any, quantity: int) -> Decimal:
    return to_decimal(food_price) * int(quantity)


def compute_total(
    food_price: Any,
    quantity: int,
    addon_names: Iterable[str] | None,
    price_by_name: dict[str, Decimal],
) -> Decimal:
    return compute_food_total(food_price, quantity) + compute_addons_total(addon_names, price_by_name)


def price_order(
    db: Session,
    *,
    food_price: Any,
    quantity: int,
    addon_names: list[str] | None,
    strict: bool = True,
) -> OrderPricing:
    """Price an order against the current catalog.

    ``strict`` turns a failed addon query into ``AddonLookupError``; read
    paths pass ``strict=False`` and price the order without addons instead.
    """
    try:
        addons = resolve_addons(db, addon_names)
    except SQLAlchemyError as exc:
        if strict:
            logger.error("Addon fetch error names=%s error=%s", addon_names, exc)
            db.rollback()
            raise AddonLookupError() from exc
        logger.error("Addon fetch error (ignored) names=%s error=%s", addon_names, exc)
        db.rollback()
        addons = []

    price_by_name = {addon.name: to_decimal(addon.price) for addon in addons}
    food_total = compute_food_total(food_price, quantity)
    total = compute_total(food_price, quantity, addon_names, price_by_name)
    return OrderPricing(
        food_total=food_total,
        addons_total=total - food_total,
        total=total,
        addon_details=[{"name": addon.name, "price": float(price_by_name[addon.name])} for addon in addons],
    )
