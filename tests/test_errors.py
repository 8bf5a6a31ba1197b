from coffeehub.errors import StoreError
from coffeehub.services.catalog import CatalogStore
from coffeehub.version import API_PREFIX
from models import db
from models.kv import KeyValueEntry
from models.order import Order, OrderItem, OrderStatusLog
from models.product import Product


def test_404_json_envelope(client):
    resp = client.get('/no/such/route')
    assert resp.status_code == 404
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 404
    assert isinstance(data.get('message'), str)


def test_unexpected_500_json_envelope(client):
    resp = client.get('/__boom')
    assert resp.status_code == 500
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 500
    assert 'RuntimeError' not in data['message']


def test_ok_helper_endpoint(client):
    resp = client.get('/__ok')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data == {
        'status': 'success',
        'message': 'success',
        'data': {'ping': 'pong'}
    }


def test_store_error_maps_to_503(client, customer_headers, monkeypatch):
    def catalog_down(self, text):
        raise StoreError("Catalog unavailable", store="catalog")

    monkeypatch.setattr(CatalogStore, "search", catalog_down)
    resp = client.get(f"{API_PREFIX}/products/search?q=La", headers=customer_headers)
    assert resp.status_code == 503
    assert resp.get_json() == {"status": "error", "message": "Catalog unavailable", "code": 503}


def test_menu_read_failure_is_503(client, app, customer_headers):
    Product.__table__.drop(db.engine)
    resp = client.get(f"{API_PREFIX}/products", headers=customer_headers)
    assert resp.status_code == 503
    assert resp.get_json() == {"status": "error", "message": "Could not load the menu", "code": 503}


def test_order_history_read_failure_is_503(client, app, customer_headers):
    for model in (OrderStatusLog, OrderItem, Order):
        model.__table__.drop(db.engine)
    resp = client.get(f"{API_PREFIX}/orders", headers=customer_headers)
    assert resp.status_code == 503
    assert resp.get_json()["message"] == "Could not load your orders"


def test_cart_read_failure_is_503(client, app, customer_headers):
    KeyValueEntry.__table__.drop(db.engine)
    resp = client.get(f"{API_PREFIX}/cart", headers=customer_headers)
    assert resp.status_code == 503
    assert resp.get_json()["message"] == "Could not read cart:cust-1"
