# /medshare/services/reset_tokens.py
import secrets
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from medshare.extensions import db
from medshare.models.account_models import Account, PasswordResetToken
from medshare.utils.clock import utcnow
from medshare.utils.errors import ErrorKind
from medshare.utils.password_util import hash_secret
from medshare.utils.result import Err, Ok, Result


class PasswordResetTokenManager:
    """Issues and redeems single-use password recovery tokens.

    Lifecycle: issued -> redeemed | expired | superseded. Superseded tokens are
    marked used, so redeeming one reports ALREADY_USED.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=1)):
        self.ttl = ttl

    def issue(self, account_id: int) -> PasswordResetToken:
        now = utcnow()
        try:
            PasswordResetToken.query.filter_by(account_id=account_id, used=False).update(
                {'used': True, 'used_at': now}, synchronize_session=False
            )
            reset_token = PasswordResetToken(
                account_id=account_id,
                token=secrets.token_hex(32),
                expires_at=now + self.ttl
            )
            db.session.add(reset_token)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return reset_token

    def check(self, token_value) -> Result[PasswordResetToken]:
        if not isinstance(token_value, str) or not token_value:
            return Err(ErrorKind.INVALID_TOKEN)
        reset_token = PasswordResetToken.query.filter_by(token=token_value).first()
        if reset_token is None:
            return Err(ErrorKind.INVALID_TOKEN)
        if reset_token.used:
            return Err(ErrorKind.ALREADY_USED)
        if utcnow() > reset_token.expires_at:
            return Err(ErrorKind.EXPIRED)
        if not reset_token.account.is_active:
            return Err(ErrorKind.ACCOUNT_INACTIVE)
        return Ok(reset_token)

    def redeem(self, token_value, new_secret: str) -> Result[None]:
        """Sets a new login password and spends the token in one transaction."""
        checked = self.check(token_value)
        if not checked.ok:
            return checked
        reset_token = checked.value
        token_id, account_id = reset_token.id, reset_token.account_id

        new_hash = hash_secret(new_secret)
        now = utcnow()
        try:
            # Conditional claim: a concurrent redemption that got here first wins
            claimed = PasswordResetToken.query.filter_by(id=token_id, used=False).update(
                {'used': True, 'used_at': now}, synchronize_session=False
            )
            if claimed != 1:
                db.session.rollback()
                return Err(ErrorKind.ALREADY_USED)

            Account.query.filter_by(id=account_id).update(
                {'password_hash': new_hash, 'password_changed_at': now}, synchronize_session=False
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return Ok(None)
