# /medshare/utils/structured_codec.py
import json

from medshare.utils.encryption_util import CipherEngine, EncryptedField
from medshare.utils.errors import CodecError


class StructuredCodec:
    """Encrypted JSON fields on top of the cipher engine.

    Used for the list-valued medical fields. Blood type and emergency contacts
    are stored in clear and never go through here.
    """

    def __init__(self, cipher: CipherEngine):
        self.cipher = cipher

    def encrypt(self, value) -> EncryptedField:
        if value is None:
            return EncryptedField()
        try:
            text = json.dumps(value, ensure_ascii=False, separators=(',', ':'))
        except (TypeError, ValueError) as e:
            raise CodecError(f"Value is not JSON serializable: {type(value).__name__}") from e
        return self.cipher.encrypt(text)

    def decrypt(self, ciphertext, iv):
        """Returns the stored value, or None when nothing was stored.

        DecryptionError from the cipher propagates unchanged; CodecError means
        the bytes decrypted but are not a JSON document.
        """
        raw = self.cipher.decrypt(ciphertext, iv)
        if raw is None:
            return None
        try:
            return json.loads(raw.decode('utf-8'))
        except ValueError:
            raise CodecError("Decrypted payload is not valid JSON.") from None
