import os
from decimal import Decimal

# Must be set before food_orders.core.config is imported.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from food_orders.core.database import Base, get_db
from food_orders.deps import require_admin
from food_orders.models.additional_option import AdditionalOption
from food_orders.models.food import Category, Food
from food_orders.models.payment_method import PaymentMethod
from food_orders.services.sms_outbound import set_sms_service
from tests.fixtures_data import ADDITIONAL_OPTIONS, CATEGORIES, FOODS, PAYMENT_METHODS


def seed_catalog(db) -> None:
    for category in CATEGORIES:
        db.add(Category(**category))
    for food in FOODS:
        db.add(Food(**{**food, "price": Decimal(food["price"])}))
    for option in ADDITIONAL_OPTIONS:
        db.add(AdditionalOption(name=option["name"], price=Decimal(option["price"])))
    for method in PAYMENT_METHODS:
        db.add(PaymentMethod(**method))
    db.commit()


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    seed_catalog(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(db):
    from food_orders import main

    main.app.dependency_overrides[get_db] = lambda: db
    main.app.dependency_overrides[require_admin] = lambda: {"sub": "admin"}
    try:
        # No context manager: the lifespan startup checks stay out of API tests.
        yield TestClient(main.app)
    finally:
        main.app.dependency_overrides.clear()
        set_sms_service(None)
