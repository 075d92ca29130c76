# /medshare/services/__init__.py
"""Core services, built once per application.

``build_services`` is called by the app factory. The resulting ``Services``
registry is frozen and stored on ``app.extensions``; request handlers reach it
through ``get_services()`` instead of module-level singletons.
"""
import secrets
from dataclasses import dataclass

from flask import current_app

from medshare.services.medical_service import MedicalRecordService
from medshare.services.owner_auth import OwnerAuthGuard
from medshare.services.public_access import PublicAccessGuard
from medshare.services.public_profile_service import PublicProfileService
from medshare.services.reset_tokens import PasswordResetTokenManager
from medshare.utils.encryption_util import CipherEngine
from medshare.utils.password_util import hash_secret
from medshare.utils.structured_codec import StructuredCodec

EXTENSION_KEY = 'medshare.services'


@dataclass(frozen=True)
class Services:
    cipher: CipherEngine
    codec: StructuredCodec
    medical: MedicalRecordService
    public_profiles: PublicProfileService
    owner_auth: OwnerAuthGuard
    public_access: PublicAccessGuard
    reset_tokens: PasswordResetTokenManager


def build_services(app) -> Services:
    """Loads the master key and wires every service. Raises ConfigurationError."""
    cipher = CipherEngine.from_config_value(app.config.get('ENCRYPTION_KEY'))
    codec = StructuredCodec(cipher)
    medical = MedicalRecordService(codec)

    with app.app_context():
        # Digest of a throwaway secret, checked when a public link does not resolve
        dummy_hash = hash_secret(secrets.token_hex(16))

    public_access = PublicAccessGuard(dummy_hash)

    return Services(
        cipher=cipher,
        codec=codec,
        medical=medical,
        public_profiles=PublicProfileService(medical, public_access),
        owner_auth=OwnerAuthGuard(),
        public_access=public_access,
        reset_tokens=PasswordResetTokenManager(app.config['RESET_TOKEN_TTL'])
    )


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
