"""Reversible encryption of original messages for the audit trail.

AES-256-CBC with PKCS7 padding.  The 32-byte key is the SHA-256 digest of
the configured secret; each call draws a fresh 16-byte IV.  Output is
``<iv hex>:<ciphertext hex>`` so a single string column can hold it.
"""

from __future__ import annotations
import hashlib
import os
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

IV_LENGTH = 16


class EncryptionKeyError(RuntimeError):
    """No encryption key configured."""


class AuditCipher:
    """Symmetric cipher keyed from process configuration."""

    __slots__ = ("_key",)

    def __init__(self, key: str | None) -> None:
        self._key = hashlib.sha256(key.encode("utf-8")).digest() if key else None

    @property
    def configured(self) -> bool:
        return self._key is not None

    def _require_key(self) -> bytes:
        if self._key is None:
            raise EncryptionKeyError("ENCRYPTION_KEY environment variable is not set")
        return self._key

    def encrypt(self, text: Any) -> str:
        """Encrypt ``text``.  Non-string and empty input give ``""``."""
        if not isinstance(text, str) or not text:
            return ""

        key = self._require_key()
        iv = os.urandom(IV_LENGTH)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        data = padder.update(text.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(data) + encryptor.finalize()
        return f"{iv.hex()}:{ciphertext.hex()}"

    def decrypt(self, token: Any) -> str:
        """Reverse :meth:`encrypt`."""
        if not isinstance(token, str) or not token:
            return ""

        parts = token.split(":")
        if len(parts) != 2:
            raise ValueError("Invalid encrypted text format")
        iv, ciphertext = bytes.fromhex(parts[0]), bytes.fromhex(parts[1])
        if len(iv) != IV_LENGTH:
            raise ValueError("Invalid encrypted text format")

        key = self._require_key()
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        data = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        return (unpadder.update(data) + unpadder.finalize()).decode("utf-8")
