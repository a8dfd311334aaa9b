from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from food_orders.models.food import Food
from food_orders.models.order import ORDER_STATUS_PENDING, ORDER_STATUSES, Order
from food_orders.models.payment_method import PaymentMethod
from food_orders.schemas.orders import OrderCreate
from food_orders.services.errors import (
    FoodNotFoundError,
    OrderNotFoundError,
    OrderPersistenceError,
)
from food_orders.services.pricing import OrderPricing, allocate_order_id, price_order

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class PricedOrder:
    order: Order
    food: Food | None
    pricing: OrderPricing
    previous_status: str | None = None

    @property
    def food_name(self) -> str | None:
        return self.food.name if self.food else None


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value else None


def food_to_dict(food: Food | None) -> Optional[Dict[str, Any]]:
    if food is None:
        return None
    return {
        "id": food.id,
        "name": food.name,
        "price": float(food.price) if food.price is not None else None,
        "category_id": food.category_id,
        "category": food.category.name if food.category else None,
    }


def order_to_dict(o: Order) -> Dict[str, Any]:
    return {
        "id": o.id,
        "order_id": o.order_id,
        "food_id": o.food_id,
        "quantity": o.quantity,
        "addons": list(o.addons or []),
        "drink": o.drink,
        "delivery_location": o.delivery_location,
        "phone_number": o.phone_number,
        "delivery_time": _iso(o.delivery_time),
        "payment_mode": o.payment_mode,
        "additional_notes": o.additional_notes,
        "order_status": o.order_status,
        "payment_reference": o.payment_reference,
        "payment_status": o.payment_status,
        "created_at": _iso(o.created_at),
        "updated_at": _iso(o.updated_at),
    }


def priced_order_to_dict(priced: PricedOrder) -> Dict[str, Any]:
    return {
        **order_to_dict(priced.order),
        "food": food_to_dict(priced.food),
        "addonDetails": priced.pricing.addon_details,
        "totalPrice": float(priced.pricing.total),
        "foodName": priced.food_name,
    }


def get_food(db: Session, food_id: str) -> Food:
    try:
        food = (
            db.query(Food)
            .options(joinedload(Food.category))
            .filter(Food.id == str(food_id))
            .first()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Food fetch error food_id=%s error=%s", food_id, exc)
        raise OrderPersistenceError("Failed to fetch food item") from exc
    if not food:
        logger.error("Food fetch error: food_id=%s not found", food_id)
        raise FoodNotFoundError()
    return food


def insert_order(
    db: Session,
    *,
    draft: OrderCreate,
    order_status: str,
    payment_reference: str | None = None,
    payment_status: str | None = None,
    rng: random.Random | None = None,
) -> Order:
    order = Order(
        order_id=allocate_order_id(db, rng=rng),
        food_id=draft.food_id,
        quantity=draft.quantity,
        addons=list(draft.addons or []),
        drink=draft.drink,
        delivery_location=draft.delivery_location,
        phone_number=draft.phone_number,
        delivery_time=draft.delivery_time,
        payment_mode=draft.payment_mode,
        additional_notes=draft.additional_notes,
        order_status=order_status,
        payment_reference=payment_reference,
        payment_status=payment_status,
    )
    try:
        db.add(order)
        db.commit()
        db.refresh(order)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Order insert error order_id=%s error=%s", order.order_id, exc)
        raise OrderPersistenceError("Failed to create order") from exc
    return order


def create_cash_order(db: Session, draft: OrderCreate, *, rng: random.Random | None = None) -> PricedOrder:
    # Food lookup, addon lookup and insert are three separate round trips
    # with no transaction around them: a catalog price change in between
    # is not detected.
    food = get_food(db, draft.food_id)
    pricing = price_order(
        db,
        food_price=food.price,
        quantity=draft.quantity,
        addon_names=draft.addons,
        strict=True,
    )
    order = insert_order(db, draft=draft, order_status=ORDER_STATUS_PENDING, rng=rng)
    logger.info(
        "Order %s created successfully payment_mode=%s total=%s",
        order.order_id,
        order.payment_mode,
        pricing.total,
        extra={"order_id": order.order_id},
    )
    return PricedOrder(order=order, food=food, pricing=pricing)


def _load_order(db: Session, *filters) -> Order | None:
    return (
        db.query(Order)
        .options(joinedload(Order.food).joinedload(Food.category))
        .filter(*filters)
        .first()
    )


def update_order_status(db: Session, order_pk: str, new_status: str) -> PricedOrder:
    try:
        order = db.query(Order).filter(Order.id == order_pk).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Order fetch error id=%s error=%s", order_pk, exc)
        raise OrderPersistenceError("Failed to update order") from exc
    if not order:
        logger.error("Order fetch error: id=%s not found", order_pk)
        raise OrderNotFoundError()

    if new_status not in ORDER_STATUSES:
        logger.warning("Non-standard order status stored order_id=%s status=%s", order.order_id, new_status)

    previous_status = order.order_status
    order.order_status = new_status
    order.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Order update error id=%s error=%s", order_pk, exc)
        raise OrderPersistenceError("Failed to update order") from exc

    db.expire_all()
    refreshed = _load_order(db, Order.id == order_pk)
    if refreshed is None:
        raise OrderPersistenceError("Failed to update order")

    food = refreshed.food
    pricing = price_order(
        db,
        food_price=food.price if food else 0,
        quantity=refreshed.quantity if food else 0,
        addon_names=refreshed.addons,
        strict=True,
    )
    logger.info(
        "Order %s status %s -> %s",
        refreshed.order_id,
        previous_status,
        new_status,
        extra={"order_id": refreshed.order_id},
    )
    return PricedOrder(order=refreshed, food=food, pricing=pricing, previous_status=previous_status)


def _price_for_read(db: Session, order: Order) -> PricedOrder:
    # Totals are derived from current catalog prices on every read.
    food = order.food
    if food is None:
        pricing = OrderPricing(food_total=Decimal("0"), addons_total=Decimal("0"), total=Decimal("0"))
        return PricedOrder(order=order, food=None, pricing=pricing)
    pricing = price_order(
        db,
        food_price=food.price,
        quantity=order.quantity,
        addon_names=order.addons,
        strict=False,
    )
    return PricedOrder(order=order, food=food, pricing=pricing)


def list_orders(
    db: Session,
    *,
    status: str | None = None,
    order_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    page = max(1, int(page))
    limit = min(max(1, int(limit)), MAX_PAGE_SIZE)

    filters = []
    if status:
        filters.append(Order.order_status == status)
    if order_id:
        filters.append(Order.order_id == order_id)
    # Both bounds or neither; the end day is included up to 23:59:59.999999 UTC.
    if start_date and end_date:
        filters.append(Order.created_at >= datetime.combine(start_date, time.min, tzinfo=timezone.utc))
        filters.append(Order.created_at <= datetime.combine(end_date, time.max, tzinfo=timezone.utc))

    try:
        total = db.query(Order).filter(*filters).count()
        rows = (
            db.query(Order)
            .options(joinedload(Order.food).joinedload(Food.category))
            .filter(*filters)
            .order_by(Order.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Order fetch error: %s", exc)
        raise OrderPersistenceError("Failed to fetch orders") from exc

    orders = [priced_order_to_dict(_price_for_read(db, row)) for row in rows]
    return {
        "orders": orders,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
    }


def track_order(db: Session, public_order_id: str) -> PricedOrder:
    try:
        order = _load_order(db, Order.order_id == public_order_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Order fetch error order_id=%s error=%s", public_order_id, exc)
        raise OrderPersistenceError("Failed to fetch orders") from exc
    if not order:
        logger.info("Track miss order_id=%s", public_order_id)
        raise OrderNotFoundError()
    return _price_for_read(db, order)


def delete_order(db: Session, order_pk: str) -> int:
    try:
        deleted = db.query(Order).filter(Order.id == order_pk).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Order delete error id=%s error=%s", order_pk, exc)
        raise OrderPersistenceError("Failed to delete order") from exc
    logger.info("Order row deleted id=%s rows=%s", order_pk, deleted)
    return deleted


def is_active_payment_mode(db: Session, name: str) -> bool:
    try:
        method = (
            db.query(PaymentMethod.id)
            .filter(PaymentMethod.name == name, PaymentMethod.is_active.is_(True))
            .first()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Payment method lookup error name=%s error=%s", name, exc)
        raise OrderPersistenceError("Failed to fetch payment methods") from exc
    return method is not None
