import pytest

from storefront.data import seed as seed_module
from storefront.data.models import UserModel
from storefront.services.auth_service import decode_access_token
from storefront.domain.errors import UnauthorizedError

CUSTOMER = {"firstName": "Anna", "lastName": "Nowak", "email": "Anna@Example.com", "password": "secret123"}


def test_signup_and_login(client):
    resp = client.post("/api/signup", json=CUSTOMER)
    assert resp.status_code == 201
    assert resp.json()["role"] == "customer"
    assert resp.json()["email"] == "anna@example.com"

    login = client.post("/api/login", json={"email": "anna@example.com", "password": "secret123"})
    assert login.status_code == 200
    body = login.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["firstName"] == "Anna"

    claims = decode_access_token(body["accessToken"])
    assert claims["role"] == "customer"
    assert claims["sub"] == str(body["user"]["id"])


def test_duplicate_email_conflicts(client):
    assert client.post("/api/signup", json=CUSTOMER).status_code == 201
    assert client.post("/api/signup", json=CUSTOMER).status_code == 409


def test_wrong_password_is_401(client):
    client.post("/api/signup", json=CUSTOMER)
    resp = client.post("/api/login", json={"email": "anna@example.com", "password": "nope-nope"})
    assert resp.status_code == 401


def test_merchant_registration(client):
    resp = client.post(
        "/api/merchant/register",
        json={"businessName": "Shop", "email": "shop@example.com", "password": "secret123", "businessType": "retail"},
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "merchant"
    assert resp.json()["businessName"] == "Shop"


def test_me_and_logout_revokes_token(client, customer_auth, token_store):
    user_id, headers = customer_auth()

    assert client.get("/api/me", headers=headers).json()["id"] == user_id

    assert client.post("/api/logout", headers=headers).status_code == 200
    assert len(token_store.revoked) == 1
    assert all(ttl > 0 for ttl in token_store.revoked.values())

    resp = client.get("/api/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has been revoked"


def test_garbage_token_is_401(client):
    resp = client.get("/api/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_decode_rejects_garbage():
    with pytest.raises(UnauthorizedError):
        decode_access_token("abc.def.ghi")


def test_seed_creates_single_admin(session_factory, monkeypatch):
    monkeypatch.setattr(seed_module, "ADMIN_EMAIL", "root@example.com")
    monkeypatch.setattr(seed_module, "ADMIN_PASSWORD", "rootpass")

    assert seed_module.seed(session_factory) is not None
    assert seed_module.seed(session_factory) is None

    session = session_factory()
    try:
        admins = session.query(UserModel).filter(UserModel.role == "admin").all()
        assert [a.email for a in admins] == ["root@example.com"]
    finally:
        session.close()


def test_seed_without_credentials_does_nothing(session_factory, monkeypatch):
    monkeypatch.setattr(seed_module, "ADMIN_EMAIL", "")
    assert seed_module.seed(session_factory) is None
