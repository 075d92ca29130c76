# /medshare/utils/errors.py
"""Error taxonomy shared by the encryption layer, the guards and the API.

Infrastructure failures are exceptions. Expected business outcomes (wrong
password, unknown link, spent reset token) are ``ErrorKind`` values carried in
an ``Err`` result, see ``medshare.utils.result``.
"""
import enum


class MedShareError(Exception):
    """Base class for all MedShare exceptions."""


class ConfigurationError(MedShareError):
    """Bad or missing master key. Only raised while the app is being built."""


class InputError(MedShareError):
    """The cipher engine was handed something that is not text."""


class DecryptionError(MedShareError):
    """Stored ciphertext exists but cannot be decrypted."""


class CodecError(MedShareError):
    """A value could not be serialized, or decrypted bytes are not valid JSON."""


class ErrorKind(enum.Enum):
    # Owner authentication
    AUTH_MISSING = 'auth_missing'
    AUTH_INVALID = 'auth_invalid'
    AUTH_EXPIRED = 'auth_expired'
    ACCOUNT_NOT_FOUND = 'account_not_found'
    ACCOUNT_INACTIVE = 'account_inactive'

    # Public access
    UNAUTHORIZED = 'unauthorized'
    NOT_CONFIGURED = 'not_configured'
    GONE = 'gone'
    NOT_FOUND = 'not_found'

    # Password reset tokens
    INVALID_TOKEN = 'invalid_token'
    ALREADY_USED = 'already_used'
    EXPIRED = 'expired'
