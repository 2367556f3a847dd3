"""
Pytest fixtures for the inventory API tests.

Provides a per-test SQLite database, the FastAPI test client wired to it,
two registered tenants and small factories for products and customers.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.config.database import get_db
from app.main import app
from app.shared.database.models import Base


@pytest.fixture(scope='function')
def engine(tmp_path):
    """File-backed SQLite so separate sessions see each other's commits."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope='function')
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope='function')
def db_session(session_factory):
    """Session for direct assertions against the database."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def client(session_factory):
    """Test client with get_db pointed at the test database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_user(client, name: str, email: str, password: str = "secret123") -> dict:
    """Helper to register a user; returns the created profile."""
    response = client.post('/api/v1/auth/register', json={
        'name': name,
        'email': email,
        'password': password
    })
    assert response.status_code == 201, response.text
    return response.json()['user']


def get_auth_token(client, email: str, password: str = "secret123") -> str:
    """Helper to get an access token; cookies are dropped so only the header authenticates."""
    response = client.post('/api/v1/auth/login', json={
        'email': email,
        'password': password
    })
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return response.json()['access_token']


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def user_a(client):
    """First tenant."""
    user = register_user(client, "Alice", "alice@example.com")
    user['headers'] = auth_headers(get_auth_token(client, "alice@example.com"))
    return user


@pytest.fixture(scope='function')
def user_b(client):
    """Second tenant."""
    user = register_user(client, "Bob", "bob@example.com")
    user['headers'] = auth_headers(get_auth_token(client, "bob@example.com"))
    return user


@pytest.fixture(scope='function')
def headers_a(user_a):
    return user_a['headers']


@pytest.fixture(scope='function')
def headers_b(user_b):
    return user_b['headers']


@pytest.fixture(scope='function')
def make_product(client):
    """Factory: create a product through the API and return its JSON."""
    counter = {'n': 0}

    def _make(headers, quantity=10, price="10.00", name=None, description="Test product"):
        counter['n'] += 1
        response = client.post('/api/v1/products', headers=headers, json={
            'name': name or f"Product {counter['n']}",
            'description': description,
            'quantity': quantity,
            'price': price
        })
        assert response.status_code == 201, response.text
        return response.json()['product']

    return _make


@pytest.fixture(scope='function')
def make_customer(client):
    """Factory: create a customer through the API and return its JSON."""
    counter = {'n': 0}

    def _make(headers, name=None, email=None, mobile_number=None):
        counter['n'] += 1
        n = counter['n']
        response = client.post('/api/v1/customers', headers=headers, json={
            'name': name or f"Customer {n}",
            'email': email or f"customer{n}@example.com",
            'mobile_number': mobile_number or f"55500000{n:02d}",
            'address': {
                'street': "1 Main St",
                'city': "Springfield",
                'state': "IL",
                'zip_code': "62701",
                'country': "USA"
            }
        })
        assert response.status_code == 201, response.text
        return response.json()['customer']

    return _make


@pytest.fixture(scope='function')
def quantity_of(client):
    """Current stock of a product as seen through the API."""
    def _quantity(headers, product_id: int) -> int:
        response = client.get(f'/api/v1/products/{product_id}', headers=headers)
        assert response.status_code == 200, response.text
        return response.json()['product']['quantity']

    return _quantity
