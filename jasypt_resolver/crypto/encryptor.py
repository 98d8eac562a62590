"""Standard PBE string encryptor.

A stateful password-based string encryptor whose output is byte-compatible
with Jasypt's ``StandardPBEStringEncryptor``::

    encryptor = StandardPBEStringEncryptor()
    encryptor.set_password("test-password")
    token = encryptor.encrypt("some-text")
    encryptor.decrypt(token)   # "some-text"

The encryptor starts uninitialized. Configuration (password, salt
generator) may change until the first ``encrypt``/``decrypt`` call, or an
explicit :meth:`initialize`, which freezes it for the object's lifetime.
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from typing import Optional

from jasypt_resolver.config.schema import EncryptorConfig
from jasypt_resolver.crypto.algorithms import PBEAlgorithm, get_algorithm
from jasypt_resolver.crypto.salt import RandomSaltGenerator, SaltGenerator
from jasypt_resolver.errors import (
    AlreadyInitializedError,
    EncryptionInitializationError,
    EncryptionOperationNotPossibleError,
)

logger = logging.getLogger(__name__)


class StandardPBEStringEncryptor:
    """Password-based string encryptor.

    Parameters
    ----------
    config:
        Algorithm, key obtention iterations and output encoding.
    salt_generator:
        Source of per-message salt. Defaults to :class:`RandomSaltGenerator`.
    """

    def __init__(
        self,
        config: Optional[EncryptorConfig] = None,
        salt_generator: Optional[SaltGenerator] = None,
    ) -> None:
        self._config = config or EncryptorConfig()
        self._salt_generator: SaltGenerator = salt_generator or RandomSaltGenerator()
        self._algorithm: PBEAlgorithm = get_algorithm(self._config.algorithm)
        self._password: Optional[str] = None
        self._password_bytes: bytes = b""
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def config(self) -> EncryptorConfig:
        return self._config

    def is_initialized(self) -> bool:
        return self._initialized

    def set_password(self, password: str) -> None:
        """Set the encryption password. Not allowed after initialization."""
        with self._lock:
            if self._initialized:
                raise AlreadyInitializedError()
            if password is None:
                raise EncryptionInitializationError("Password cannot be set to None.")
            if password == "":
                raise EncryptionInitializationError("Password cannot be empty.")
            self._password = password

    def set_salt_generator(self, salt_generator: SaltGenerator) -> None:
        with self._lock:
            if self._initialized:
                raise AlreadyInitializedError()
            self._salt_generator = salt_generator

    def initialize(self) -> None:
        """Freeze the configuration and prepare the key material.

        Safe to call repeatedly; only the first successful call has effect.
        """
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            if self._password is None:
                raise EncryptionInitializationError(
                    "Password not set for Password Based Encryptor."
                )
            self._password_bytes = self._algorithm.password_bytes(self._password)
            self._initialized = True
        logger.debug(
            "PBE encryptor initialized (algorithm=%s, iterations=%d).",
            self._algorithm.name,
            self._config.key_obtention_iterations,
        )

    # ── Encoding ─────────────────────────────────────────────────────────

    def _encode(self, data: bytes) -> str:
        if self._config.string_output_type == "hexadecimal":
            return data.hex().upper()
        return base64.b64encode(data).decode("ascii")

    def _decode(self, text: str) -> bytes:
        if self._config.string_output_type == "hexadecimal":
            return bytes.fromhex(text)
        return base64.b64decode(text.encode("ascii"))

    # ── Operations ───────────────────────────────────────────────────────

    def encrypt(self, message: Optional[str]) -> Optional[str]:
        """Encrypt *message*, returning the encoded ``salt || payload``."""
        if message is None:
            return None
        self.initialize()
        try:
            salt = self._salt_generator.generate_salt(self._algorithm.salt_size)
            payload = self._algorithm.encrypt(
                self._password_bytes,
                salt,
                self._config.key_obtention_iterations,
                message.encode("utf-8"),
            )
        except Exception as exc:
            raise EncryptionOperationNotPossibleError() from exc
        return self._encode(salt + payload)

    def decrypt(self, encrypted_message: Optional[str]) -> Optional[str]:
        """Decrypt a message produced by :meth:`encrypt` (or by Jasypt).

        Raises :class:`EncryptionOperationNotPossibleError` for malformed
        input or a wrong password, and
        :class:`EncryptionInitializationError` if no password was set.
        """
        if encrypted_message is None:
            return None
        self.initialize()
        try:
            data = self._decode(encrypted_message.strip())
        except (binascii.Error, ValueError, UnicodeEncodeError) as exc:
            raise EncryptionOperationNotPossibleError() from exc

        salt_size = self._algorithm.salt_size
        if len(data) <= salt_size:
            raise EncryptionOperationNotPossibleError()

        salt, payload = data[:salt_size], data[salt_size:]
        try:
            plain = self._algorithm.decrypt(
                self._password_bytes,
                salt,
                self._config.key_obtention_iterations,
                payload,
            )
            return plain.decode("utf-8")
        except Exception as exc:
            raise EncryptionOperationNotPossibleError() from exc

    def __repr__(self) -> str:
        return (
            f"StandardPBEStringEncryptor(algorithm={self._algorithm.name!r}, "
            f"initialized={self._initialized})"
        )
