"""
Wspólne fixtures: baza SQLite w pamięci, klient HTTP z podmienionymi
zależnościami (sesja, lock, powiadomienia) oraz fabryki danych.
"""
import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ORDER_WEBHOOK_URL"] = ""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api.deps import get_lock_service, get_notification_service
from storefront.data.database import Base, get_db
from storefront.data.models import (
    CartItemModel,
    CategoryModel,
    CouponModel,
    ProductModel,
    UserModel,
)
from storefront.main import create_app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

ADDRESS = {
    "street": "123 Market Street",
    "city": "Springfield",
    "state": "IL",
    "zip_code": "62701",
    "country": "USA",
}


class FakeLockService:
    """Lock w pamięci o tym samym interfejsie co LockService."""

    def __init__(self):
        self.locks = {}
        self.history = []

    def acquire_checkout_lock(self, user_id, token, ttl):
        self.history.append(("acquire", user_id, ttl))
        if user_id in self.locks:
            return False
        self.locks[user_id] = token
        return True

    def release_checkout_lock(self, user_id, token):
        self.history.append(("release", user_id))
        if self.locks.get(user_id) == token:
            del self.locks[user_id]
            return True
        return False


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def notify_order_event(self, user_id, order_id, event, status=None):
        self.events.append((user_id, order_id, event, status))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, lock_service, notifier):
    app = create_app()

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_notification_service] = lambda: notifier

    return TestClient(app)


# =====================================================
# FACTORIES
# =====================================================
@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role="user", status="active", first_name="Jan", last_name="Kowalski", email=None):
        n = next(counter)
        user = UserModel(
            email=email or f"user{n}@example.com",
            first_name=first_name,
            last_name=last_name,
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", first_name="Ada", last_name="Admin")


@pytest.fixture
def make_category(db):
    counter = itertools.count(1)

    def _make(name=None, slug=None):
        n = next(counter)
        category = CategoryModel(
            name=name or f"Category {n}",
            slug=slug or f"category-{n}",
            description="Test category",
        )
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def category(make_category):
    return make_category()


@pytest.fixture
def make_product(db, category):
    counter = itertools.count(1)

    def _make(
        price="10.00",
        stock=10,
        name=None,
        status="active",
        featured=False,
        category_id=None,
        description="A perfectly ordinary test product.",
    ):
        n = next(counter)
        product = ProductModel(
            name=name or f"Product {n}",
            slug=f"product-{n}",
            description=description,
            price=Decimal(price),
            category_id=category_id or category.id,
            stock=stock,
            images=[f"https://images.example.com/product-{n}.jpg"],
            featured=featured,
            status=status,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_coupon(db):
    def _make(
        code="SAVE10",
        type="percentage",
        discount="10",
        min_order_amount=None,
        max_usages=None,
        usage_count=0,
        is_active=True,
        expires_at=None,
    ):
        coupon = CouponModel(
            code=code,
            type=type,
            discount=Decimal(discount),
            min_order_amount=Decimal(min_order_amount) if min_order_amount is not None else None,
            max_usages=max_usages,
            usage_count=usage_count,
            is_active=is_active,
            expires_at=expires_at,
        )
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon

    return _make


@pytest.fixture
def add_to_cart(db):
    def _add(user, product, quantity=1):
        item = CartItemModel(user_id=user.id, product_id=product.id, quantity=quantity)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _add


@pytest.fixture
def address():
    return dict(ADDRESS)
