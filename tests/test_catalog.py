from decimal import Decimal


PRODUCT = {
    "name": "Desk lamp",
    "description": "LED",
    "price": 29.99,
    "discount": 10,
    "quantity": 5,
}


def test_new_product_waits_for_approval(client, merchant_auth, admin_auth):
    merchant_id, headers = merchant_auth()
    _, admin_headers = admin_auth

    resp = client.post("/api/products", json=PRODUCT, headers=headers)
    assert resp.status_code == 201
    product = resp.json()
    assert product["status"] == "pending"
    assert product["merchantId"] == merchant_id
    assert Decimal(product["effectivePrice"]) == Decimal("26.99")
    assert client.get("/api/products").json() == []

    approved = client.put(
        f"/api/admin/products/{product['id']}/status",
        json={"status": "approved"},
        headers=admin_headers,
    )
    assert approved.status_code == 200
    assert [p["id"] for p in client.get("/api/products").json()] == [product["id"]]

    declined = client.put(
        f"/api/admin/products/{product['id']}/status",
        json={"status": "declined"},
        headers=admin_headers,
    )
    assert declined.json()["status"] == "declined"
    assert client.get("/api/products").json() == []


def test_listing_only_contains_approved(client, make_user, make_product):
    merchant = make_user(role="merchant")
    approved = make_product(merchant, status="approved")
    make_product(merchant, status="pending")
    make_product(merchant, status="declined")

    assert [p["id"] for p in client.get("/api/products").json()] == [approved]
    assert len(client.get(f"/api/products/merchant/{merchant}").json()) == 3


def test_admin_filters_by_status(client, admin_auth, make_user, make_product):
    _, headers = admin_auth
    merchant = make_user(role="merchant")
    pending = make_product(merchant, status="pending")
    make_product(merchant, status="approved")

    resp = client.get("/api/admin/products", params={"status": "pending"}, headers=headers)
    assert [p["id"] for p in resp.json()] == [pending]

    assert client.get("/api/admin/products", params={"status": "bogus"}, headers=headers).status_code == 400


def test_get_product(client, make_user, make_product):
    product = make_product(make_user(role="merchant"), price="12.50", name="Mug")

    resp = client.get(f"/api/products/{product}")

    assert resp.status_code == 200
    assert resp.json()["name"] == "Mug"
    assert Decimal(resp.json()["price"]) == Decimal("12.50")


def test_get_missing_product_is_404(client):
    assert client.get("/api/products/999").status_code == 404


def test_invalid_product_id_is_rejected(client):
    assert client.get("/api/products/not-an-id").status_code == 422


def test_product_validation(client, merchant_auth):
    _, headers = merchant_auth()

    assert client.post("/api/products", json={**PRODUCT, "price": -1}, headers=headers).status_code == 422
    assert client.post("/api/products", json={**PRODUCT, "discount": 101}, headers=headers).status_code == 422


def test_customers_cannot_manage_catalog(client, customer_auth, merchant_auth, make_product):
    merchant_id, merchant_headers = merchant_auth()
    _, headers = customer_auth()
    product = make_product(merchant_id)

    assert client.post("/api/products", json=PRODUCT).status_code == 401
    assert client.post("/api/products", json=PRODUCT, headers=headers).status_code == 403
    assert client.put(
        f"/api/admin/products/{product}/status", json={"status": "approved"}, headers=merchant_headers
    ).status_code == 403


def test_status_must_be_known(client, admin_auth, make_user, make_product):
    _, headers = admin_auth
    product = make_product(make_user(role="merchant"))

    resp = client.put(f"/api/admin/products/{product}/status", json={"status": "archived"}, headers=headers)
    assert resp.status_code == 422


def test_merchant_deletes_only_own_products(client, merchant_auth, make_product):
    owner_id, owner_headers = merchant_auth("owner@example.com")
    _, other_headers = merchant_auth("other@example.com")
    product = make_product(owner_id)
    client.post("/api/cart", json={"customerId": 1, "productId": product, "quantity": 1})

    assert client.delete(f"/api/products/{product}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/products/{product}", headers=owner_headers).status_code == 200
    assert client.get(f"/api/products/{product}").status_code == 404
    assert client.get("/api/cart/1").json()["items"] == []
