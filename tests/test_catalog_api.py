from coffeehub.version import API_PREFIX
from conftest import create_product, obtain_token


def test_list_with_filters(client, app, customer_headers):
    create_product("Latte", price=35000.0)
    create_product("Mocha", price=45000.0, is_available=False)
    create_product("Croissant", price=25000.0, category="Bakery")

    resp = client.get(f"{API_PREFIX}/products", headers=customer_headers)
    data = resp.get_json()["data"]
    assert data["count"] == 3
    assert data["filters"]["max_price"] == 150000.0

    resp = client.get(
        f"{API_PREFIX}/products?category=coffee&available_only=true&sort_by=PRICE_DESC",
        headers=customer_headers,
    )
    assert [p["name"] for p in resp.get_json()["data"]["products"]] == ["Latte"]

    resp = client.get(f"{API_PREFIX}/products?sort_by=PRICE_ASC", headers=customer_headers)
    assert [p["name"] for p in resp.get_json()["data"]["products"]] == ["Croissant", "Latte", "Mocha"]

    resp = client.get(f"{API_PREFIX}/products?q=croiss", headers=customer_headers)
    assert resp.get_json()["data"]["count"] == 1


def test_bad_price_range_is_400(client, app, customer_headers):
    resp = client.get(f"{API_PREFIX}/products?min_price=10&max_price=5", headers=customer_headers)
    assert resp.status_code == 400


def test_search_and_detail(client, app, customer_headers):
    pid = create_product("Latte")
    create_product("Lungo")
    resp = client.get(f"{API_PREFIX}/products/search?q=La", headers=customer_headers)
    assert [p["name"] for p in resp.get_json()["data"]["products"]] == ["Latte"]

    assert client.get(f"{API_PREFIX}/products/search", headers=customer_headers).status_code == 400

    resp = client.get(f"{API_PREFIX}/products/{pid}", headers=customer_headers)
    assert resp.get_json()["data"]["name"] == "Latte"
    assert client.get(f"{API_PREFIX}/products/missing", headers=customer_headers).status_code == 404


def test_role_without_browse_scope_is_forbidden(client, app):
    headers = {"Authorization": f"Bearer {obtain_token(client, 'staff-1', role='barista')}"}
    resp = client.get(f"{API_PREFIX}/products", headers=headers)
    assert resp.status_code == 403
    assert resp.get_json() == {"status": "error", "message": "Forbidden", "code": 403}
