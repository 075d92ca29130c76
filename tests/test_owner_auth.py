"""Owner authentication guard and its HTTP mapping."""
from datetime import timedelta

from flask_jwt_extended import create_access_token, create_refresh_token

from medshare.extensions import db
from medshare.models.account_models import Account
from medshare.utils.errors import ErrorKind


def _bearer(token):
    return f'Bearer {token}'


def test_missing_header(services):
    result = services.owner_auth.authenticate(None)
    assert result.kind == ErrorKind.AUTH_MISSING


def test_wrong_scheme_or_garbage_token(services):
    assert services.owner_auth.authenticate('Token abc').kind == ErrorKind.AUTH_INVALID
    assert services.owner_auth.authenticate('Bearer ').kind == ErrorKind.AUTH_INVALID
    assert services.owner_auth.authenticate(_bearer('not.a.jwt')).kind == ErrorKind.AUTH_INVALID


def test_expired_token_is_distinct_from_invalid(services, owner):
    account, _ = owner
    token = create_access_token(identity=str(account['id']), expires_delta=timedelta(seconds=-1))
    assert services.owner_auth.authenticate(_bearer(token)).kind == ErrorKind.AUTH_EXPIRED


def test_refresh_token_is_not_accepted(services, owner):
    account, _ = owner
    token = create_refresh_token(identity=str(account['id']))
    assert services.owner_auth.authenticate(_bearer(token)).kind == ErrorKind.AUTH_INVALID


def test_unknown_account(services):
    token = create_access_token(identity='9999')
    assert services.owner_auth.authenticate(_bearer(token)).kind == ErrorKind.ACCOUNT_NOT_FOUND


def test_valid_token_yields_session(services, owner):
    account, headers = owner
    result = services.owner_auth.authenticate(headers['Authorization'])
    assert result.ok
    assert result.value.account_id == account['id']
    assert result.value.email == 'jane@example.com'


def test_deactivation_takes_effect_immediately(client, owner):
    account, headers = owner
    assert client.get('/api/users/profile', headers=headers).status_code == 200

    db.session.get(Account, account['id']).is_active = False
    db.session.commit()

    response = client.get('/api/users/profile', headers=headers)
    assert response.status_code == 403
    assert response.get_json() == {'error': 'Account is inactive'}


def test_http_status_for_auth_failures(client, owner):
    account, _ = owner
    expired = create_access_token(identity=str(account['id']), expires_delta=timedelta(seconds=-1))

    missing = client.get('/api/medical/info')
    invalid = client.get('/api/medical/info', headers={'Authorization': 'Bearer junk'})
    late = client.get('/api/medical/info', headers={'Authorization': _bearer(expired)})

    assert missing.status_code == invalid.status_code == late.status_code == 401
    assert late.get_json()['error'] != invalid.get_json()['error']
