import random
import re
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from food_orders.models.order import Order
from food_orders.services.errors import AddonLookupError, OrderPersistenceError
from food_orders.services.pricing import (
    allocate_order_id,
    compute_addons_total,
    compute_total,
    generate_order_id,
    price_order,
    resolve_addons,
)

ORDER_ID_RE = re.compile(r"^MD\d{9}$")


class SequenceRng:
    def __init__(self, values):
        self._values = list(values)

    def randint(self, _low, _high):
        return self._values.pop(0)


def _existing_order(order_id: str) -> Order:
    return Order(
        order_id=order_id,
        food_id="food-jollof",
        quantity=1,
        addons=[],
        delivery_location="Osu",
        phone_number="+233241234567",
        delivery_time=datetime(2026, 10, 18, 12, 0),
        payment_mode="Cash",
    )


def test_compute_total_ignores_unknown_addon_names():
    prices = {"Chicken": Decimal("15.00"), "Coleslaw": Decimal("5.50")}

    total = compute_total(Decimal("45.00"), 2, ["Chicken", "Nope", "Coleslaw"], prices)

    assert total == Decimal("110.50")


def test_compute_total_without_addons_is_price_times_quantity():
    assert compute_total("12.25", 4, None, {}) == Decimal("49.00")


def test_repeated_addon_names_are_charged_each_time():
    prices = {"Chicken": Decimal("15.00")}

    assert compute_addons_total(["Chicken", "Chicken"], prices) == Decimal("30.00")


def test_generate_order_id_matches_format_for_many_samples():
    rng = random.Random(1234)

    for _ in range(500):
        order_id = generate_order_id(rng)
        assert ORDER_ID_RE.match(order_id)
        assert 100_000_000 <= int(order_id[2:]) <= 999_999_999


def test_generate_order_id_bounds():
    assert generate_order_id(SequenceRng([100_000_000])) == "MD100000000"
    assert generate_order_id(SequenceRng([999_999_999])) == "MD999999999"


def test_allocate_order_id_skips_identifiers_already_taken(db):
    db.add(_existing_order("MD111111111"))
    db.commit()

    order_id = allocate_order_id(db, rng=SequenceRng([111_111_111, 222_222_222]))

    assert order_id == "MD222222222"


def test_allocate_order_id_gives_up_after_max_attempts(db):
    db.add(_existing_order("MD111111111"))
    db.commit()

    with pytest.raises(OrderPersistenceError) as exc_info:
        allocate_order_id(db, rng=SequenceRng([111_111_111] * 3), max_attempts=3)

    assert "Failed to create order" in exc_info.value.message


def test_resolve_addons_returns_only_known_names(db):
    addons = resolve_addons(db, ["Chicken", "Ghost", "Chicken"])

    assert [addon.name for addon in addons] == ["Chicken"]


def test_price_order_against_catalog(db):
    pricing = price_order(
        db,
        food_price=Decimal("45.00"),
        quantity=2,
        addon_names=["Chicken", "Coleslaw", "Extra Shito"],
    )

    assert pricing.food_total == Decimal("90.00")
    assert pricing.addons_total == Decimal("20.50")
    assert pricing.total == Decimal("110.50")
    assert sorted(detail["name"] for detail in pricing.addon_details) == ["Chicken", "Coleslaw"]


def test_price_order_strict_raises_addon_lookup_error():
    db = MagicMock()

    with patch("food_orders.services.pricing.resolve_addons", side_effect=SQLAlchemyError("down")):
        with pytest.raises(AddonLookupError) as exc_info:
            price_order(db, food_price="10", quantity=1, addon_names=["Chicken"], strict=True)

    assert exc_info.value.message == "Failed to fetch addon details"
    assert exc_info.value.status_code == 500


def test_price_order_lenient_prices_without_addons():
    db = MagicMock()

    with patch("food_orders.services.pricing.resolve_addons", side_effect=SQLAlchemyError("down")):
        pricing = price_order(db, food_price="10", quantity=3, addon_names=["Chicken"], strict=False)

    assert pricing.total == Decimal("30")
    assert pricing.addon_details == []
    db.rollback.assert_called_once()


def test_price_order_totals_come_from_compute_total(db):
    with patch("food_orders.services.pricing.compute_total", wraps=compute_total) as computed:
        pricing = price_order(
            db,
            food_price=Decimal("45.00"),
            quantity=1,
            addon_names=["Chicken", "Chicken", "Ghost"],
        )

    computed.assert_called_once()
    assert pricing.total == Decimal("75.00")
    assert pricing.addons_total == Decimal("30.00")
    assert pricing.food_total == Decimal("45.00")
