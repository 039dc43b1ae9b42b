"""
Symmetric encryption for secret payloads.

Wraps Fernet (AES-128 in CBC mode with HMAC-SHA256) behind a small service
that owns the process encryption key. The key is passed in explicitly so each
service context, and each test, can hold its own.
"""

from typing import Optional

from cryptography.fernet import Fernet, InvalidToken


class CryptoError(Exception):
    """Base exception for cryptographic operations"""
    pass


class EncryptionError(CryptoError):
    """Raised when encryption fails"""
    pass


class DecryptionError(CryptoError):
    """Raised when decryption fails"""
    pass


class CryptoService:
    """
    Cryptographic service for encrypting secret payloads at rest.

    Features:
    - Fernet symmetric encryption with a process-held key
    - Key generation for configuration bootstrapping
    """

    def __init__(self, master_key: Optional[bytes] = None):
        """
        Initialize CryptoService.

        Args:
            master_key: Optional Fernet key (32 url-safe base64 bytes).
                        If not provided, a new key will be generated.

        Raises:
            CryptoError: If the supplied key is not a valid Fernet key
        """
        if master_key:
            try:
                self._fernet = Fernet(master_key)
            except (ValueError, TypeError) as e:
                raise CryptoError(f"Invalid master key: {e}")
            self._master_key = master_key
        else:
            self._master_key = Fernet.generate_key()
            self._fernet = Fernet(self._master_key)

    @property
    def master_key(self) -> bytes:
        """Get the current master encryption key"""
        return self._master_key

    def encrypt(self, plaintext: bytes) -> bytes:
        """
        Encrypt data using Fernet symmetric encryption.

        Args:
            plaintext: Data to encrypt

        Returns:
            Encrypted token (includes timestamp and HMAC)

        Raises:
            EncryptionError: If encryption fails
        """
        try:
            return self._fernet.encrypt(plaintext)
        except TypeError as e:
            raise EncryptionError(f"Encryption failed: {e}")

    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Decrypt a Fernet token.

        Args:
            ciphertext: Encrypted token to decrypt

        Returns:
            Decrypted plaintext

        Raises:
            DecryptionError: If the token is invalid or was made with another key
        """
        try:
            return self._fernet.decrypt(ciphertext)
        except InvalidToken:
            raise DecryptionError("Invalid token or wrong key")
        except (TypeError, ValueError) as e:
            raise DecryptionError(f"Decryption failed: {e}")

    @staticmethod
    def generate_fernet_key() -> bytes:
        """
        Generate a new Fernet encryption key.

        Returns:
            32-byte URL-safe base64-encoded key suitable for Fernet
        """
        return Fernet.generate_key()
