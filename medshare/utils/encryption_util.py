# /medshare/utils/encryption_util.py
import os
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from medshare.utils.errors import ConfigurationError, DecryptionError, InputError

KEY_LENGTH = 32
IV_LENGTH = 16


def load_master_key(raw_key: Optional[str]) -> bytes:
    """Parses the ENCRYPTION_KEY setting into 32 raw key bytes.

    Two encodings are accepted: 64 hexadecimal characters, or a 32 character
    string whose UTF-8 encoding is exactly 32 bytes. Anything else raises
    ConfigurationError. The key itself never appears in the error message.
    """
    if not raw_key:
        raise ConfigurationError("ENCRYPTION_KEY is not set in the application config.")

    if len(raw_key) == 64:
        try:
            return bytes.fromhex(raw_key)
        except ValueError:
            raise ConfigurationError("A 64 character ENCRYPTION_KEY must be hexadecimal.") from None

    if len(raw_key) == 32:
        key = raw_key.encode('utf-8')
        if len(key) != KEY_LENGTH:
            raise ConfigurationError("A 32 character ENCRYPTION_KEY must encode to 32 bytes.")
        return key

    raise ConfigurationError("ENCRYPTION_KEY must be 64 hexadecimal characters or 32 characters.")


@dataclass(frozen=True)
class EncryptedField:
    """Ciphertext and IV of one encrypted value, both hex encoded.

    Both None is the only valid empty state.
    """
    ciphertext: Optional[str] = None
    iv: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.ciphertext is None and self.iv is None


class CipherEngine:
    """AES-256-GCM encryption of opaque byte strings under the master key.

    The engine is built once by the app factory and shared read-only by every
    request. Each call to ``encrypt`` draws a fresh 128-bit IV; the GCM tag is
    appended to the ciphertext, so corrupted or tampered data fails to decrypt
    instead of producing garbage.
    """

    __slots__ = ('_aead',)

    def __init__(self, key: bytes):
        if not isinstance(key, bytes) or len(key) != KEY_LENGTH:
            raise ConfigurationError("The master encryption key must be exactly 32 bytes.")
        self._aead = AESGCM(key)

    @classmethod
    def from_config_value(cls, raw_key: Optional[str]) -> 'CipherEngine':
        return cls(load_master_key(raw_key))

    def __repr__(self):
        return '<CipherEngine AES-256-GCM>'

    def encrypt(self, plaintext: Union[str, bytes, None]) -> EncryptedField:
        """Encrypts text or bytes. Empty input yields an empty field."""
        if plaintext is None:
            return EncryptedField()
        if isinstance(plaintext, str):
            data = plaintext.encode('utf-8')
        elif isinstance(plaintext, (bytes, bytearray)):
            data = bytes(plaintext)
        else:
            raise InputError(f"Cannot encrypt a value of type {type(plaintext).__name__}.")

        if not data:
            return EncryptedField()

        iv = os.urandom(IV_LENGTH)
        ciphertext = self._aead.encrypt(iv, data, None)
        return EncryptedField(ciphertext=ciphertext.hex(), iv=iv.hex())

    def decrypt(self, ciphertext: Optional[str], iv: Optional[str]) -> Optional[bytes]:
        """Decrypts a stored pair.

        Returns None when nothing was ever stored. Any other failure, including
        a pair with only one half present, raises DecryptionError.
        """
        if not ciphertext and not iv:
            return None
        if not ciphertext or not iv:
            raise DecryptionError("Encrypted field is missing its ciphertext or its IV.")

        try:
            iv_bytes = bytes.fromhex(iv)
        except (TypeError, ValueError):
            raise DecryptionError("Malformed IV.") from None
        if len(iv_bytes) != IV_LENGTH:
            raise DecryptionError("Malformed IV.")

        try:
            data = bytes.fromhex(ciphertext)
        except (TypeError, ValueError):
            raise DecryptionError("Malformed ciphertext.") from None

        try:
            return self._aead.decrypt(iv_bytes, data, None)
        except InvalidTag:
            raise DecryptionError("Ciphertext failed authentication.") from None
