"""
Pytest fixtures for storefront backend tests.

Provides a per-test SQLite database, a test client, and helpers to register
users, log in and build Authorization headers.
"""

import pytest
from storefront import create_app
from storefront.extensions import db


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application backed by a fresh database file."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'storefront-test.sqlite3'}",
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def register(client, email: str, password: str = "pw", role: str = "buyer"):
    return client.post('/register', json={'email': email, 'password': password, 'role': role})


def get_auth_token(client, email: str, password: str = "pw") -> str:
    """Helper to get auth token for a user."""
    response = client.post('/login', json={'email': email, 'password': password})
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Authorization header carrying the raw token."""
    return {'Authorization': token}


def upload_product(client, headers, name="Widget", price=9.99, stock=5):
    return client.post('/upload-product', json={'name': name, 'price': price, 'stock': stock}, headers=headers)


@pytest.fixture(scope='function')
def seller_headers(client):
    register(client, "s@x.com", role="seller")
    return auth_headers(get_auth_token(client, "s@x.com"))


@pytest.fixture(scope='function')
def other_seller_headers(client):
    register(client, "s2@x.com", role="seller")
    return auth_headers(get_auth_token(client, "s2@x.com"))


@pytest.fixture(scope='function')
def buyer_headers(client):
    register(client, "b@x.com", role="buyer")
    return auth_headers(get_auth_token(client, "b@x.com"))


@pytest.fixture(scope='function')
def widget(client, seller_headers):
    """A product listed by s@x.com: Widget, 9.99, stock 5."""
    response = upload_product(client, seller_headers)
    assert response.status_code == 201
    return response.json['product']
