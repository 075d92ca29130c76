from medshare.utils.password_util import hash_secret, is_strong_password, verify_secret


def test_hash_and_verify(app):
    digest = hash_secret('Secret123')
    assert digest != 'Secret123'
    assert verify_secret('Secret123', digest)
    assert not verify_secret('secret123', digest)


def test_hashes_are_salted(app):
    assert hash_secret('Secret123') != hash_secret('Secret123')


def test_missing_or_malformed_digest_is_mismatch(app):
    assert not verify_secret('Secret123', None)
    assert not verify_secret('Secret123', '')
    assert not verify_secret('Secret123', 'not-a-bcrypt-digest')


def test_password_strength():
    assert is_strong_password('Secret123')
    assert not is_strong_password('short1A')
    assert not is_strong_password('alllowercase1')
    assert not is_strong_password('NoDigitsHere')
    assert not is_strong_password(None)
