# /medshare/services/public_access.py
import uuid
from dataclasses import dataclass

from medshare.models.account_models import Account
from medshare.utils.audit_util import record_event
from medshare.utils.errors import ErrorKind
from medshare.utils.password_util import verify_secret
from medshare.utils.result import Err, Ok, Result


@dataclass(frozen=True)
class PublicViewerContext:
    """Read-only access to one account's shareable data, for one request.

    Carries nothing but the account id and is never turned into a token.
    """
    account_id: int


def _normalize_identifier(public_id):
    try:
        return str(uuid.UUID(str(public_id)))
    except (TypeError, ValueError):
        return None


class PublicAccessGuard:
    """Two-stage check for anonymous access through a public link.

    1. Resolve the opaque identifier to an account (NOT_FOUND, or GONE for a
       deactivated account).
    2. Verify the public-access password against its own hash
       (NOT_CONFIGURED when none was ever set, UNAUTHORIZED on mismatch).

    Both factors are required. Every outcome is audited under its own action
    name; on the two resolution failures a bcrypt check against
    ``dummy_hash`` still runs so timing matches the wrong-password path.
    """

    def __init__(self, dummy_hash: str):
        self._dummy_hash = dummy_hash

    def resolve(self, public_id):
        """Active, configured account for a link, or None."""
        identifier = _normalize_identifier(public_id)
        if identifier is None:
            return None
        account = Account.query.filter_by(public_link_id=identifier).first()
        if account is None or not account.is_active or not account.public_password_hash:
            return None
        return account

    def authorize(self, public_id, secret) -> Result[PublicViewerContext]:
        identifier = _normalize_identifier(public_id)
        account = None
        if identifier is not None:
            account = Account.query.filter_by(public_link_id=identifier).first()

        if account is None:
            verify_secret(secret or '', self._dummy_hash)
            self._audit('PUBLIC_ACCESS_NOT_FOUND', None, public_id, False)
            return Err(ErrorKind.NOT_FOUND)

        if not account.is_active:
            verify_secret(secret or '', self._dummy_hash)
            self._audit('PUBLIC_ACCESS_GONE', account.id, identifier, False)
            return Err(ErrorKind.GONE)

        if not account.public_password_hash:
            self._audit('PUBLIC_ACCESS_NOT_CONFIGURED', account.id, identifier, False)
            return Err(ErrorKind.NOT_CONFIGURED)

        if not verify_secret(secret or '', account.public_password_hash):
            self._audit('PUBLIC_ACCESS_UNAUTHORIZED', account.id, identifier, False)
            return Err(ErrorKind.UNAUTHORIZED)

        self._audit('PUBLIC_ACCESS_GRANTED', account.id, identifier, True)
        return Ok(PublicViewerContext(account_id=account.id))

    @staticmethod
    def _audit(action, account_id, identifier, success):
        record_event(
            action,
            'public_profile',
            account_id=account_id,
            resource_id=str(identifier)[:100] if identifier else None,
            success=success
        )
