import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')

from models import db
from models.product import Product


@pytest.fixture(scope='session')
def app_instance(tmp_path_factory):
    from coffeehub import create_app
    from coffeehub.config import TestingConfig

    class Config(TestingConfig):
        PRODUCT_IMAGE_DIR = str(tmp_path_factory.mktemp('product_images'))

    return create_app(Config)


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


def obtain_token(client, user_id, role="customer", name="", email=""):
    resp = client.post("/__auth/login_stub", json={
        "user_id": user_id, "role": role, "name": name, "email": email,
    })
    return resp.get_json()["data"]["access"]


@pytest.fixture
def customer_headers(client):
    token = obtain_token(client, "cust-1", name="Ana", email="ana@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    token = obtain_token(client, "admin-1", role="admin", name="Boss", email="boss@example.com")
    return {"Authorization": f"Bearer {token}"}


def create_product(name="Latte", price=35000.0, category="Coffee", is_available=True, **extra):
    product = Product(
        name=name,
        price=price,
        category=category,
        description=extra.pop("description", f"{name} description"),
        is_available=is_available,
        stock=extra.pop("stock", 10),
        **extra,
    )
    db.session.add(product)
    db.session.commit()
    return product.id
