import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["RAZORPAY_KEY_SECRET"] = ""
os.environ["PAYPAL_CLIENT_ID"] = ""
os.environ["PAYPAL_CLIENT_SECRET"] = ""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.api.security import get_token_store
from storefront.data.database import Base, get_db
from storefront.data.models import CouponModel, ProductModel, UserModel
from storefront.services.auth_service import AuthService


class InMemoryTokenStore:
    def __init__(self):
        self.revoked = {}

    def revoke(self, jti, ttl):
        self.revoked[jti] = ttl

    def is_revoked(self, jti):
        return jti in self.revoked


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest.fixture
def client(session_factory, token_store):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_store] = lambda: token_store

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    def _make(role="customer", email=None, first_name="Jan", last_name="Kowalski", business_name=None):
        counter["n"] += 1
        session = session_factory()
        try:
            user = UserModel(
                email=email or f"{role}{counter['n']}@example.com",
                password_hash="not-a-real-hash",
                role=role,
                first_name=first_name,
                last_name=last_name,
                business_name=business_name,
            )
            session.add(user)
            session.commit()
            return user.id
        finally:
            session.close()

    return _make


@pytest.fixture
def make_product(session_factory):
    def _make(merchant_id, price="10.00", discount="0", quantity=10, status="approved", name="Product"):
        session = session_factory()
        try:
            product = ProductModel(
                merchant_id=merchant_id,
                name=name,
                price=Decimal(price),
                discount=Decimal(discount),
                quantity=quantity,
                status=status,
            )
            session.add(product)
            session.commit()
            return product.id
        finally:
            session.close()

    return _make


@pytest.fixture
def make_coupon(session_factory):
    def _make(merchant_id, percentage="10", code="SAVE10", expiry=None, is_used=False, is_active=True):
        session = session_factory()
        try:
            coupon = CouponModel(
                code=code,
                merchant_id=merchant_id,
                discount_percentage=Decimal(percentage),
                expiry_date=expiry or datetime.now(timezone.utc) + timedelta(days=7),
                is_used=is_used,
                is_active=is_active,
            )
            session.add(coupon)
            session.commit()
            return coupon.id
        finally:
            session.close()

    return _make


def login(client, email, password):
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@pytest.fixture
def merchant_auth(client):
    """Rejestruje merchanta przez API, zwraca (id, naglowki)."""

    def _make(email="shop@example.com", business_name="Shop"):
        resp = client.post(
            "/api/merchant/register",
            json={"businessName": business_name, "email": email, "password": "secret123"},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["id"], login(client, email, "secret123")

    return _make


@pytest.fixture
def customer_auth(client):
    def _make(email="buyer@example.com"):
        resp = client.post(
            "/api/signup",
            json={"firstName": "Anna", "lastName": "Nowak", "email": email, "password": "secret123"},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["id"], login(client, email, "secret123")

    return _make


@pytest.fixture
def admin_auth(client, session_factory):
    session = session_factory()
    try:
        admin = AuthService(session).create_admin("admin@example.com", "adminpass")
        admin_id = admin.id
    finally:
        session.close()
    return admin_id, login(client, "admin@example.com", "adminpass")
