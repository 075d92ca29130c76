"""Shared fixtures: a fresh app and in-memory database per test."""
import pytest

from medshare import create_app
from medshare.extensions import db
from medshare.services import get_services

OWNER_PASSWORD = 'Secret123'
PUBLIC_PASSWORD = 'letmein42'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return get_services()


@pytest.fixture
def register(client):
    """Registers an account and returns (account dict, auth headers)."""
    def _register(email='jane@example.com', password=OWNER_PASSWORD, **extra):
        payload = {
            'email': email,
            'password': password,
            'first_name': 'Jane',
            'last_name': 'Doe',
            'consent': True,
        }
        payload.update(extra)
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body['account'], {'Authorization': f"Bearer {body['access_token']}"}
    return _register


@pytest.fixture
def owner(register):
    return register()


@pytest.fixture
def public_link(client, owner):
    """Owner with a public link and public-access password set."""
    account, headers = owner
    response = client.post('/api/users/generate-public-link', json={'public_password': PUBLIC_PASSWORD},
                           headers=headers)
    assert response.status_code == 200
    return account, headers, response.get_json()['public_link_id']
