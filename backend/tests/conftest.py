"""
Pytest fixtures for salesboard tests.

Every test gets a fresh app with its own in-memory store, seeded with the
demo users and records unless stated otherwise. The Gemini key is cleared
so no test reaches the network.
"""

import time

import pytest

from salesboard import create_app
from salesboard.extensions import db


TEST_CONFIG = {
    'TESTING': True,
    'GEMINI_API_KEY': None,
    'SEED_DEMO_DATA': True,
}


def _make_app(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return create_app(config)


@pytest.fixture(scope='function')
def app():
    """Application with the demo data."""
    app = _make_app()
    yield app
    app.extensions["analysis_runner"].shutdown()


@pytest.fixture(scope='function')
def empty_app():
    """Application with an empty store (no users, no records)."""
    app = _make_app(SEED_DEMO_DATA=False)
    yield app
    app.extensions["analysis_runner"].shutdown()


@pytest.fixture(scope='function')
def ai_app():
    """Application with a (fake) Gemini key configured."""
    app = _make_app(GEMINI_API_KEY="test-key")
    yield app
    app.extensions["analysis_runner"].shutdown()


@pytest.fixture(scope='function')
def app_ctx(app):
    """Push an app context for service-level tests."""
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client):
    return auth_headers(get_auth_token(client, 'admin', 'password'))


@pytest.fixture(scope='function')
def stark_headers(client):
    return auth_headers(get_auth_token(client, 'STARKINDUSTRIES', 'CISTARK001'))


@pytest.fixture(scope='function')
def wayne_headers(client):
    return auth_headers(get_auth_token(client, 'WAYNEENTERPRISES', 'CIWAYNE001'))


def wait_until(predicate, timeout: float = 5.0, interval: float = 0.01):
    """Poll predicate() until it returns a truthy value or the timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        value = predicate()
        if value:
            return value
        time.sleep(interval)
    raise AssertionError("condition not met before timeout")
