"""Public access guard: both factors, audit kinds, indistinguishable 404s."""
import uuid

from medshare.extensions import db
from medshare.models.account_models import Account
from medshare.models.system_models import AuditLog
from medshare.utils.errors import ErrorKind
from tests.conftest import PUBLIC_PASSWORD


def _actions():
    return [entry.action for entry in AuditLog.query.order_by(AuditLog.id).all()]


def _deactivate(account_id):
    db.session.get(Account, account_id).is_active = False
    db.session.commit()


def test_grants_with_both_factors(services, public_link):
    account, _, link_id = public_link
    result = services.public_access.authorize(link_id, PUBLIC_PASSWORD)
    assert result.ok
    assert result.value.account_id == account['id']
    assert _actions()[-1] == 'PUBLIC_ACCESS_GRANTED'


def test_unknown_identifier(services):
    assert services.public_access.authorize(str(uuid.uuid4()), 'whatever').kind == ErrorKind.NOT_FOUND
    assert services.public_access.authorize('not-a-uuid', 'whatever').kind == ErrorKind.NOT_FOUND
    assert _actions()[-2:] == ['PUBLIC_ACCESS_NOT_FOUND', 'PUBLIC_ACCESS_NOT_FOUND']


def test_inactive_account_is_gone(services, public_link):
    account, _, link_id = public_link
    _deactivate(account['id'])
    assert services.public_access.authorize(link_id, PUBLIC_PASSWORD).kind == ErrorKind.GONE
    assert _actions()[-1] == 'PUBLIC_ACCESS_GONE'


def test_link_without_secret_is_not_configured(services, owner):
    account, _ = owner
    record = db.session.get(Account, account['id'])
    record.public_link_id = str(uuid.uuid4())
    db.session.commit()

    assert services.public_access.authorize(record.public_link_id, 'anything').kind == ErrorKind.NOT_CONFIGURED
    assert _actions()[-1] == 'PUBLIC_ACCESS_NOT_CONFIGURED'


def test_wrong_secret(services, public_link):
    _, _, link_id = public_link
    assert services.public_access.authorize(link_id, 'wrong-password').kind == ErrorKind.UNAUTHORIZED
    assert _actions()[-1] == 'PUBLIC_ACCESS_UNAUTHORIZED'


def test_login_password_does_not_open_public_link(services, public_link):
    _, _, link_id = public_link
    assert services.public_access.authorize(link_id, 'Secret123').kind == ErrorKind.UNAUTHORIZED


def test_dummy_verification_runs_on_unresolved_links(services, mocker):
    verify = mocker.patch('medshare.services.public_access.verify_secret', return_value=False)
    services.public_access.authorize(str(uuid.uuid4()), 'guess')
    verify.assert_called_once_with('guess', services.public_access._dummy_hash)


def test_gone_and_missing_links_look_the_same(client, public_link):
    account, _, link_id = public_link
    _deactivate(account['id'])

    gone = client.post(f'/api/public/profile/{link_id}', json={'password': PUBLIC_PASSWORD})
    missing = client.post(f'/api/public/profile/{uuid.uuid4()}', json={'password': PUBLIC_PASSWORD})

    assert gone.status_code == missing.status_code == 404
    assert gone.get_data() == missing.get_data()

    gone_check = client.get(f'/api/public/check/{link_id}')
    missing_check = client.get(f'/api/public/check/{uuid.uuid4()}')
    assert gone_check.status_code == missing_check.status_code == 404
    assert gone_check.get_data() == missing_check.get_data()

    gone_entry = AuditLog.query.filter_by(action='PUBLIC_ACCESS_GONE').one()
    assert gone_entry.account_id == account['id']
    assert not gone_entry.success
    assert AuditLog.query.filter_by(action='PUBLIC_ACCESS_NOT_FOUND').count() == 1
