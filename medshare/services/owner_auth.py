# /medshare/services/owner_auth.py
from dataclasses import dataclass

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidTokenError

from medshare.extensions import db
from medshare.models.account_models import Account
from medshare.utils.errors import ErrorKind
from medshare.utils.result import Err, Ok, Result


@dataclass(frozen=True)
class OwnerSession:
    """The caller proved control of this account's login credential."""
    account_id: int
    email: str


def issue_access_token(account: Account) -> str:
    # Only the account id goes into the token; everything else is re-read per request
    return create_access_token(identity=str(account.id))


class OwnerAuthGuard:
    """Resolves a bearer credential to an active account.

    No header -> AUTH_MISSING. Anything that is not a well-formed, correctly
    signed access token -> AUTH_INVALID. A valid but expired token ->
    AUTH_EXPIRED, so clients can tell "log in again" from "tampered". The
    account is looked up on every call, so deactivation takes effect at once.
    """

    def authenticate(self, authorization_header) -> Result[OwnerSession]:
        if not authorization_header:
            return Err(ErrorKind.AUTH_MISSING)

        scheme, _, token = authorization_header.partition(' ')
        token = token.strip()
        if scheme.lower() != 'bearer' or not token:
            return Err(ErrorKind.AUTH_INVALID, 'Authorization header must be "Bearer <token>"')

        try:
            claims = decode_token(token)
        except ExpiredSignatureError:
            return Err(ErrorKind.AUTH_EXPIRED)
        except (InvalidTokenError, JWTExtendedException) as e:
            return Err(ErrorKind.AUTH_INVALID, str(e))

        if claims.get('type') != 'access':
            return Err(ErrorKind.AUTH_INVALID, 'Not an access token')

        identity = claims.get(current_app.config['JWT_IDENTITY_CLAIM'])
        try:
            account_id = int(identity)
        except (TypeError, ValueError):
            return Err(ErrorKind.AUTH_INVALID, 'Token identity is not an account id')

        account = db.session.get(Account, account_id)
        if account is None:
            return Err(ErrorKind.ACCOUNT_NOT_FOUND)
        if not account.is_active:
            return Err(ErrorKind.ACCOUNT_INACTIVE)

        return Ok(OwnerSession(account_id=account.id, email=account.email))
