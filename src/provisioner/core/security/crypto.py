"""Cryptographic utilities - credential vault and password generation.

Connection strings and provider credential bundles are sealed with
AES-256-GCM before they are persisted. Each ciphertext carries its own random
salt (for key derivation) and IV, serialized as ``salt:iv:tag:ciphertext``
in hex.
"""

import secrets
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from src.provisioner.core.config import get_settings
from src.provisioner.core.errors import DecryptionError

IV_LENGTH = 16
TAG_LENGTH = 16
SALT_LENGTH = 32
KEY_LENGTH = 32

PASSWORD_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789!@#$%^&*"


class CredentialVault:
    """Authenticated symmetric encryption keyed by a single process-wide secret."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("Encryption secret must not be empty")
        self._secret = secret.encode()

    def _derive_key(self, salt: bytes) -> bytes:
        return Scrypt(salt=salt, length=KEY_LENGTH, n=2**14, r=8, p=1).derive(self._secret)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext with a fresh salt and IV."""
        salt = secrets.token_bytes(SALT_LENGTH)
        iv = secrets.token_bytes(IV_LENGTH)
        sealed = AESGCM(self._derive_key(salt)).encrypt(iv, plaintext.encode(), None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return ":".join([salt.hex(), iv.hex(), tag.hex(), ciphertext.hex()])

    def decrypt(self, encrypted: str) -> str:
        """Decrypt a value produced by :meth:`encrypt`.

        Raises:
            DecryptionError: If the format is invalid or the tag does not verify.
                No partial plaintext is ever returned.
        """
        parts = encrypted.split(":")
        if len(parts) != 4:
            raise DecryptionError("Invalid encrypted data format")
        salt_hex, iv_hex, tag_hex, ciphertext_hex = parts
        try:
            salt = bytes.fromhex(salt_hex)
            iv = bytes.fromhex(iv_hex)
            tag = bytes.fromhex(tag_hex)
            ciphertext = bytes.fromhex(ciphertext_hex)
        except ValueError as e:
            raise DecryptionError("Invalid encrypted data format") from e

        if len(salt) != SALT_LENGTH or len(iv) != IV_LENGTH or len(tag) != TAG_LENGTH:
            raise DecryptionError("Invalid encrypted data format")

        try:
            plaintext = AESGCM(self._derive_key(salt)).decrypt(iv, ciphertext + tag, None)
        except InvalidTag as e:
            raise DecryptionError("Authentication tag mismatch") from e
        return plaintext.decode()


@lru_cache
def get_vault() -> CredentialVault:
    """Process-wide vault built from ENCRYPTION_KEY."""
    return CredentialVault(get_settings().encryption_key)


def encrypt(plaintext: str) -> str:
    return get_vault().encrypt(plaintext)


def decrypt(encrypted: str) -> str:
    return get_vault().decrypt(encrypted)


def generate_secure_password(length: int = 24) -> str:
    """Generate a random password for provider-side database users."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))
