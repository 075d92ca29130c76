# /medshare/utils/password_util.py
from medshare.extensions import bcrypt


def hash_secret(secret: str) -> str:
    """Hashes a login or public-access password with bcrypt.

    Cost comes from BCRYPT_LOG_ROUNDS (12 outside the test suite).
    """
    return bcrypt.generate_password_hash(secret).decode('utf-8')


def verify_secret(secret: str, digest) -> bool:
    """Constant-time check of a secret against a stored bcrypt digest.

    A missing or malformed digest is a mismatch, never an exception.
    """
    if not digest or secret is None:
        return False
    try:
        return bcrypt.check_password_hash(digest, secret)
    except (ValueError, TypeError):
        return False


def is_strong_password(password: str) -> bool:
    """Login passwords: 8-100 chars with a lowercase, an uppercase and a digit."""
    return (isinstance(password, str) and
            8 <= len(password) <= 100 and
            any(c.islower() for c in password) and
            any(c.isupper() for c in password) and
            any(c.isdigit() for c in password))
