"""
Pytest fixtures for the inventory application.

Every test gets a fresh application bound to an in-memory SQLite
database. Fixtures do not keep an application context pushed while the
test client runs requests, so each request sees its own ``g``.
"""
import pytest

from app import create_app
from config import TestConfig
from models import db
from models.user import User

TEST_EMAIL = 'staff@example.com'
TEST_PASSWORD = 'secret123'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def data_client(app):
    """The data client with an application context pushed."""
    with app.app_context():
        yield app.extensions['data_client']


@pytest.fixture
def user(app):
    with app.app_context():
        account = User(email=TEST_EMAIL)
        account.set_password(TEST_PASSWORD)
        db.session.add(account)
        db.session.commit()
    return {'email': TEST_EMAIL, 'password': TEST_PASSWORD}


@pytest.fixture
def logged_in(client, user):
    response = client.post('/auth/login', data={'email': user['email'], 'password': user['password']})
    assert response.status_code == 302
    return client


@pytest.fixture
def seed(app):
    """Insert a row through the data client in its own application context."""
    def _seed(table, record):
        with app.app_context():
            return app.extensions['data_client'].insert(table, record)
    return _seed


@pytest.fixture
def fetch(app):
    def _fetch(table, filters=None, **kwargs):
        with app.app_context():
            return app.extensions['data_client'].select(table, filters=filters, **kwargs)
    return _fetch


@pytest.fixture
def stocked_product(seed):
    """A product with 10 units on hand and a low-stock threshold of 5."""
    product = seed('products', {'name': 'Widget', 'sku': 'W-1', 'purchase_price': 1.0, 'selling_price': 2.0})
    seed('inventory', {'product_id': product['id'], 'quantity': 10, 'min_stock_level': 5, 'location': 'A-1'})
    return product
