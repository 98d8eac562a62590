"""Password-based encryption algorithms compatible with Jasypt output.

Each algorithm knows how to derive a key from a password and salt, and
how to lay out its output after the salt::

    PBEWithMD5AndDES              salt(8)  || ciphertext
    PBEWITHHMACSHA512ANDAES_256   salt(16) || iv(16) || ciphertext

Built on the ``cryptography`` package. Single DES is provided by the
decrepit ``TripleDES`` with three identical subkeys.
"""

from __future__ import annotations

import hashlib
import os
import unicodedata
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from jasypt_resolver.errors import EncryptionInitializationError


class PBEAlgorithm(ABC):
    """A password-based symmetric cipher."""

    name: str = ""
    salt_size: int = 8
    block_size: int = 8

    def password_bytes(self, password: str) -> bytes:
        """Encode *password* the way the algorithm's key derivation expects."""
        return unicodedata.normalize("NFC", password).encode("utf-8")

    @abstractmethod
    def encrypt(self, password: bytes, salt: bytes, iterations: int, message: bytes) -> bytes:
        """Encrypt *message*; returns everything that follows the salt."""

    @abstractmethod
    def decrypt(self, password: bytes, salt: bytes, iterations: int, payload: bytes) -> bytes:
        """Decrypt *payload* (the bytes after the salt).

        Raises ``ValueError`` on bad padding or truncated input.
        """

    def _pad(self, message: bytes) -> bytes:
        padder = padding.PKCS7(self.block_size * 8).padder()
        return padder.update(message) + padder.finalize()

    def _unpad(self, data: bytes) -> bytes:
        unpadder = padding.PKCS7(self.block_size * 8).unpadder()
        return unpadder.update(data) + unpadder.finalize()


class PBEWithMD5AndDES(PBEAlgorithm):
    """PKCS#5 v1.5 scheme: PBKDF1 (MD5) key and IV, DES-CBC."""

    name = "PBEWithMD5AndDES"
    salt_size = 8
    block_size = 8

    def password_bytes(self, password: str) -> bytes:
        normalized = unicodedata.normalize("NFC", password)
        # PBKDF1 keys are only defined for printable ASCII passwords
        if any(not ("\x20" <= ch <= "\x7e") for ch in normalized):
            raise EncryptionInitializationError(
                f"{self.name} requires a password of printable ASCII characters."
            )
        return normalized.encode("ascii")

    def _derive(self, password: bytes, salt: bytes, iterations: int) -> Tuple[bytes, bytes]:
        digest = hashlib.md5(password + salt).digest()
        for _ in range(iterations - 1):
            digest = hashlib.md5(digest).digest()
        return digest[:8], digest[8:16]

    def _cipher(self, password: bytes, salt: bytes, iterations: int) -> Cipher:
        key, iv = self._derive(password, salt, iterations)
        return Cipher(TripleDES(key * 3), modes.CBC(iv))

    def encrypt(self, password: bytes, salt: bytes, iterations: int, message: bytes) -> bytes:
        encryptor = self._cipher(password, salt, iterations).encryptor()
        return encryptor.update(self._pad(message)) + encryptor.finalize()

    def decrypt(self, password: bytes, salt: bytes, iterations: int, payload: bytes) -> bytes:
        if not payload or len(payload) % self.block_size:
            raise ValueError("Ciphertext is not a whole number of blocks")
        decryptor = self._cipher(password, salt, iterations).decryptor()
        return self._unpad(decryptor.update(payload) + decryptor.finalize())


class PBEWithHmacSHA512AndAES256(PBEAlgorithm):
    """PBES2 scheme: PBKDF2-HMAC-SHA512 key, AES-256-CBC, random IV."""

    name = "PBEWITHHMACSHA512ANDAES_256"
    salt_size = 16
    block_size = 16
    key_length = 32

    def _key(self, password: bytes, salt: bytes, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA512(),
            length=self.key_length,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password)

    def encrypt(self, password: bytes, salt: bytes, iterations: int, message: bytes) -> bytes:
        iv = os.urandom(self.block_size)
        cipher = Cipher(algorithms.AES(self._key(password, salt, iterations)), modes.CBC(iv))
        encryptor = cipher.encryptor()
        return iv + encryptor.update(self._pad(message)) + encryptor.finalize()

    def decrypt(self, password: bytes, salt: bytes, iterations: int, payload: bytes) -> bytes:
        iv, data = payload[: self.block_size], payload[self.block_size :]
        if len(iv) < self.block_size or not data or len(data) % self.block_size:
            raise ValueError("Ciphertext is truncated")
        cipher = Cipher(algorithms.AES(self._key(password, salt, iterations)), modes.CBC(iv))
        decryptor = cipher.decryptor()
        return self._unpad(decryptor.update(data) + decryptor.finalize())


_ALGORITHMS: Dict[str, PBEAlgorithm] = {
    algo.name: algo for algo in (PBEWithMD5AndDES(), PBEWithHmacSHA512AndAES256())
}


def get_algorithm(name: str) -> PBEAlgorithm:
    """Return the algorithm registered under *name* (case-insensitive)."""
    for key, algo in _ALGORITHMS.items():
        if key.upper() == name.upper():
            return algo
    raise EncryptionInitializationError(f"Unknown PBE algorithm: {name!r}")


def available_algorithms() -> List[str]:
    return sorted(_ALGORITHMS)
