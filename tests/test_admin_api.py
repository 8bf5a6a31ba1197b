import io
import os
from coffeehub.stores import get_stores
from coffeehub.version import API_PREFIX
from conftest import create_product

CUSTOMER = {"customer_name": "Ana", "customer_phone": "0812345678"}


def place_order(client, headers):
    pid = create_product("Latte", price=30000.0)
    client.post(f"{API_PREFIX}/cart/add", json={"product_id": pid}, headers=headers)
    return client.post(f"{API_PREFIX}/orders", json=CUSTOMER, headers=headers).get_json()["data"]["id"]


def test_customers_are_forbidden(client, app, customer_headers):
    resp = client.get(f"{API_PREFIX}/admin/products", headers=customer_headers)
    assert resp.status_code == 403
    assert client.get(f"{API_PREFIX}/admin/orders").status_code == 401


def test_product_crud(client, app, admin_headers):
    resp = client.post(f"{API_PREFIX}/admin/products", json={
        "name": " Cortado ", "price": 32000, "category": "Coffee", "stock": 4,
    }, headers=admin_headers)
    assert resp.status_code == 201
    pid = resp.get_json()["data"]["id"]

    resp = client.get(f"{API_PREFIX}/admin/products?q=cort", headers=admin_headers)
    assert [p["name"] for p in resp.get_json()["data"]["products"]] == ["Cortado"]

    resp = client.put(f"{API_PREFIX}/admin/products/{pid}", json={"stock": 0}, headers=admin_headers)
    data = resp.get_json()["data"]
    assert data["stock"] == 0
    assert data["is_available"] is False

    assert client.put(f"{API_PREFIX}/admin/products/missing", json={"stock": 1}, headers=admin_headers).status_code == 404

    resp = client.delete(f"{API_PREFIX}/admin/products/{pid}", headers=admin_headers)
    assert resp.status_code == 200
    assert client.delete(f"{API_PREFIX}/admin/products/{pid}", headers=admin_headers).status_code == 404


def test_create_product_validation(client, app, admin_headers):
    resp = client.post(f"{API_PREFIX}/admin/products", json={"name": "  ", "price": -1}, headers=admin_headers)
    assert resp.status_code == 400
    assert {e["loc"][0] for e in resp.get_json()["errors"]} == {"name", "price"}


def test_image_upload_and_cleanup_on_delete(client, app, admin_headers):
    pid = create_product("Latte")
    resp = client.post(
        f"{API_PREFIX}/admin/products/{pid}/image",
        data={"file": (io.BytesIO(b"\xff\xd8jpeg"), "latte.jpg")},
        content_type="multipart/form-data",
        headers=admin_headers,
    )
    assert resp.status_code == 200
    path = resp.get_json()["data"]["image_url"]
    assert path.startswith(get_stores().images.base_dir)
    assert os.path.exists(path)

    client.delete(f"{API_PREFIX}/admin/products/{pid}", headers=admin_headers)
    assert not os.path.exists(path)


def test_image_upload_requires_file(client, app, admin_headers):
    pid = create_product("Latte")
    resp = client.post(f"{API_PREFIX}/admin/products/{pid}/image", headers=admin_headers)
    assert resp.status_code == 400


def test_bulk_upload_csv(client, app, admin_headers):
    csv = b"name,price,category,stock\nLatte,35000,Coffee,5\n,100,Broken,1\nMocha,45000,Coffee,2\n"
    resp = client.post(
        f"{API_PREFIX}/admin/products/bulk-upload",
        data={"file": (io.BytesIO(csv), "menu.csv")},
        content_type="multipart/form-data",
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"imported": 2, "failed": 1}

    resp = client.post(
        f"{API_PREFIX}/admin/products/bulk-upload",
        data={"file": (io.BytesIO(b"x"), "menu.pdf")},
        content_type="multipart/form-data",
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_order_lifecycle(client, app, customer_headers, admin_headers):
    order_id = place_order(client, customer_headers)

    pending = client.get(f"{API_PREFIX}/admin/orders/pending", headers=admin_headers).get_json()["data"]["orders"]
    assert [o["id"] for o in pending] == [order_id]

    for expected in ("PREPARING", "READY", "COMPLETED"):
        resp = client.post(f"{API_PREFIX}/admin/orders/{order_id}/advance", headers=admin_headers)
        assert resp.get_json()["data"]["status"] == expected

    resp = client.post(f"{API_PREFIX}/admin/orders/{order_id}/advance", headers=admin_headers)
    assert resp.status_code == 409
    resp = client.post(f"{API_PREFIX}/admin/orders/{order_id}/cancel", headers=admin_headers)
    assert resp.status_code == 409

    completed = client.get(f"{API_PREFIX}/admin/orders?status=completed", headers=admin_headers)
    assert [o["id"] for o in completed.get_json()["data"]["orders"]] == [order_id]
    assert completed.get_json()["data"]["orders"][0]["next_status"] is None


def test_cancel_and_set_status(client, app, customer_headers, admin_headers):
    first = place_order(client, customer_headers)
    resp = client.post(f"{API_PREFIX}/admin/orders/{first}/cancel", headers=admin_headers)
    assert resp.get_json()["data"]["status"] == "CANCELLED"

    second = place_order(client, customer_headers)
    resp = client.post(f"{API_PREFIX}/admin/orders/{second}/status", json={"status": "READY"}, headers=admin_headers)
    assert resp.status_code == 409
    resp = client.post(f"{API_PREFIX}/admin/orders/{second}/status", json={"status": "PREPARING"}, headers=admin_headers)
    assert resp.get_json()["data"]["status"] == "PREPARING"
    resp = client.post(f"{API_PREFIX}/admin/orders/{second}/status", json={"status": "SHIPPED"}, headers=admin_headers)
    assert resp.status_code == 400

    assert client.post(f"{API_PREFIX}/admin/orders/missing/advance", headers=admin_headers).status_code == 404
    assert client.get(f"{API_PREFIX}/admin/orders?status=bogus", headers=admin_headers).status_code == 400
