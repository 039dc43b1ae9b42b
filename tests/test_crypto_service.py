"""
Tests for CryptoService

Tests cover:
- Key handling (generated, supplied, invalid)
- Fernet encryption/decryption
- Failures with tampered data or the wrong key
"""

import pytest
from cryptography.fernet import Fernet

from secretstore.services.crypto import (
    CryptoService,
    CryptoError,
    DecryptionError,
)


class TestKeys:
    """Test master key handling"""

    def test_generates_key_when_missing(self):
        crypto = CryptoService()
        # Must be usable as a Fernet key
        Fernet(crypto.master_key)

    def test_uses_supplied_key(self):
        key = CryptoService.generate_fernet_key()
        crypto = CryptoService(key)
        assert crypto.master_key == key

    def test_invalid_key_rejected(self):
        with pytest.raises(CryptoError, match="Invalid master key"):
            CryptoService(b"not-a-fernet-key")

    def test_generated_keys_differ(self):
        assert CryptoService.generate_fernet_key() != CryptoService.generate_fernet_key()


class TestEncryption:
    """Test symmetric encryption"""

    def test_encrypt_decrypt(self):
        crypto = CryptoService()
        token = crypto.encrypt(b"hunter2")

        assert token != b"hunter2"
        assert b"hunter2" not in token
        assert crypto.decrypt(token) == b"hunter2"

    def test_encryption_is_randomized(self):
        crypto = CryptoService()
        assert crypto.encrypt(b"same") != crypto.encrypt(b"same")

    def test_decrypt_with_other_key_fails(self):
        token = CryptoService().encrypt(b"data")

        with pytest.raises(DecryptionError):
            CryptoService().decrypt(token)

    def test_decrypt_tampered_token_fails(self):
        crypto = CryptoService()
        token = bytearray(crypto.encrypt(b"data"))
        token[-5] = ord("A") if token[-5] != ord("A") else ord("B")

        with pytest.raises(DecryptionError):
            crypto.decrypt(bytes(token))

    def test_decrypt_garbage_fails(self):
        with pytest.raises(DecryptionError):
            CryptoService().decrypt(b"garbage")

    def test_same_key_shared_between_instances(self):
        key = CryptoService.generate_fernet_key()
        token = CryptoService(key).encrypt(b"data")
        assert CryptoService(key).decrypt(token) == b"data"
