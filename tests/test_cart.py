from decimal import Decimal
from unittest import mock

import pytest

from storefront.domain.errors import ConflictError
from storefront.services.cart_service import CartService


@pytest.fixture
def product(make_user, make_product):
    merchant_id = make_user(role="merchant")
    return make_product(merchant_id, price="29.99", discount="10", name="Headphones")


def test_get_cart_without_cart_is_empty(client):
    resp = client.get("/api/cart/42")
    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert Decimal(resp.json()["subtotal"]) == Decimal("0")


def test_add_same_product_twice_merges_quantity(client, product):
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 2})
    resp = client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 3})

    assert resp.status_code == 200
    items = client.get("/api/cart/1").json()["items"]
    assert len(items) == 1
    assert items[0]["productId"] == product
    assert items[0]["cartQuantity"] == 5


def test_cart_items_carry_current_product_data(client, product):
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 2})
    item = client.get("/api/cart/1").json()["items"][0]

    assert item["name"] == "Headphones"
    assert Decimal(item["price"]) == Decimal("29.99")
    assert Decimal(item["discount"]) == Decimal("10")
    assert Decimal(item["unitPrice"]) == Decimal("26.99")
    assert Decimal(item["lineTotal"]) == Decimal("53.98")


def test_add_unknown_product_is_404(client):
    resp = client.post("/api/cart", json={"customerId": 1, "productId": 999, "quantity": 1})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_add_zero_quantity_is_rejected(client, product):
    resp = client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 0})
    assert resp.status_code == 400
    assert client.get("/api/cart/1").json()["items"] == []


@pytest.mark.parametrize("qty", [0, -1])
def test_set_quantity_below_one_fails_and_keeps_quantity(client, product, qty):
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 2})

    resp = client.put(f"/api/cart/1/{product}", json={"quantity": qty})

    assert resp.status_code == 400
    assert client.get("/api/cart/1").json()["items"][0]["cartQuantity"] == 2


def test_set_quantity_overwrites(client, product):
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 2})
    resp = client.put(f"/api/cart/1/{product}", json={"quantity": 7})

    assert resp.status_code == 200
    assert resp.json()["items"][0]["cartQuantity"] == 7


def test_set_quantity_for_missing_line_is_404(client, product):
    resp = client.put(f"/api/cart/1/{product}", json={"quantity": 3})
    assert resp.status_code == 404


def test_remove_missing_line_is_noop(client, product):
    assert client.delete(f"/api/cart/1/{product}").status_code == 200

    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 1})
    resp = client.delete("/api/cart/1/12345")
    assert resp.status_code == 200
    assert len(resp.json()["items"]) == 1


def test_remove_line(client, product, make_product, make_user):
    other = make_product(make_user(role="merchant"), price="5.00")
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 1})
    client.post("/api/cart", json={"customerId": 1, "productId": other, "quantity": 1})

    resp = client.delete(f"/api/cart/1/{product}")

    assert [i["productId"] for i in resp.json()["items"]] == [other]


def test_clear_is_idempotent(client, product):
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 1})

    assert client.delete("/api/cart/1").status_code == 200
    assert client.delete("/api/cart/1").status_code == 200
    assert client.get("/api/cart/1").json()["items"] == []


def test_carts_are_per_customer(client, product):
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 1})
    client.post("/api/cart", json={"customerId": 2, "productId": product, "quantity": 4})

    assert client.get("/api/cart/1").json()["items"][0]["cartQuantity"] == 1
    assert client.get("/api/cart/2").json()["items"][0]["cartQuantity"] == 4


def test_stale_cart_version_raises_conflict(session_factory, product):
    first = session_factory()
    second = session_factory()
    try:
        CartService(first).add_item(1, product, 1)

        stale = CartService(first)
        cart = stale.repo.get_cart_by_user(1)

        CartService(second).add_item(1, product, 1)

        with pytest.raises(ConflictError):
            stale._bump_version(cart)
    finally:
        first.close()
        second.close()


def test_cart_created_concurrently_raises_conflict(session_factory, product):
    first = session_factory()
    second = session_factory()
    try:
        CartService(first).add_item(7, product, 1)

        late = CartService(second)
        #drugi request przeczytal "brak koszyka" zanim pierwszy zdazyl go zapisac
        with mock.patch.object(late.repo, "get_cart_by_user", return_value=None):
            with pytest.raises(ConflictError):
                late.add_item(7, product, 2)

        assert CartService(second).get_cart(7)["items"][0]["cart_quantity"] == 1
    finally:
        first.close()
        second.close()
