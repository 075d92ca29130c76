"""End-to-end public profile flow."""
import uuid

from medshare.models.system_models import AuditLog
from tests.conftest import PUBLIC_PASSWORD


def test_owner_shares_allergies_through_public_link(client, public_link):
    _, headers, link_id = public_link
    client.put('/api/medical/info', headers=headers,
               json={'blood_type': 'B+', 'allergies': ['peanuts', 'penicillin']})
    client.post('/api/emergency-contacts', headers=headers,
                json={'name': 'John Doe', 'relationship': 'spouse', 'phone': '+1 555 123 4567'})

    check = client.get(f'/api/public/check/{link_id}')
    assert check.status_code == 200
    assert check.get_json() == {'exists': True, 'requires_password': True}

    response = client.post(f'/api/public/profile/{link_id}', json={'password': PUBLIC_PASSWORD})
    assert response.status_code == 200
    profile = response.get_json()['profile']
    assert profile['full_name'] == 'Jane Doe'
    assert profile['medical_info']['allergies'] == ['peanuts', 'penicillin']
    assert profile['medical_info']['blood_type'] == 'B+'
    assert profile['emergency_contacts'][0]['name'] == 'John Doe'
    assert 'email' not in profile


def test_wrong_password_is_401(client, public_link):
    _, _, link_id = public_link
    response = client.post(f'/api/public/profile/{link_id}', json={'password': 'not-it'})
    assert response.status_code == 401
    assert 'profile' not in response.get_json()


def test_password_is_required(client, public_link):
    _, _, link_id = public_link
    assert client.post(f'/api/public/profile/{link_id}', json={}).status_code == 400


def test_public_access_leaves_no_session_behind(client, public_link):
    _, _, link_id = public_link
    response = client.post(f'/api/public/profile/{link_id}', json={'password': PUBLIC_PASSWORD})
    assert 'Set-Cookie' not in response.headers
    assert client.get('/api/medical/info').status_code == 401


def test_unknown_link(client):
    response = client.post(f'/api/public/profile/{uuid.uuid4()}', json={'password': 'x'})
    assert response.status_code == 404
    assert AuditLog.query.filter_by(action='PUBLIC_ACCESS_NOT_FOUND').count() == 1


def test_wrong_secret_gone_link_and_missing_link(client, public_link, register):
    _, _, active_link = public_link

    _, other_headers = register(email='gone@example.com')
    gone_link = client.post('/api/users/generate-public-link', headers=other_headers,
                            json={'public_password': PUBLIC_PASSWORD}).get_json()['public_link_id']
    client.delete('/api/users/account', headers=other_headers, json={'password': 'Secret123'})

    wrong_secret = client.post(f'/api/public/profile/{active_link}', json={'password': 'not-it'})
    gone = client.post(f'/api/public/profile/{gone_link}', json={'password': PUBLIC_PASSWORD})
    missing = client.post(f'/api/public/profile/{uuid.uuid4()}', json={'password': PUBLIC_PASSWORD})

    assert wrong_secret.status_code == 401
    assert gone.status_code == missing.status_code == 404
    assert gone.get_data() == missing.get_data()
    assert [entry.action for entry in AuditLog.query.filter(AuditLog.action.like('PUBLIC_ACCESS_%'))
            .order_by(AuditLog.id)] == ['PUBLIC_ACCESS_UNAUTHORIZED', 'PUBLIC_ACCESS_GONE', 'PUBLIC_ACCESS_NOT_FOUND']
