"""Salt generators for the PBE encryptor."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Union


class SaltGenerator(ABC):
    """Produces the salt prepended to every encrypted message."""

    @abstractmethod
    def generate_salt(self, length: int) -> bytes:
        """Return *length* bytes of salt."""


class RandomSaltGenerator(SaltGenerator):
    """Cryptographically random salt (the default)."""

    def generate_salt(self, length: int) -> bytes:
        return os.urandom(length)


class FixedSaltGenerator(SaltGenerator):
    """Always returns the same salt, truncated to the requested length.

    Makes encryption deterministic. Only meant for fixtures and tests.
    """

    def __init__(self, salt: Union[str, bytes]) -> None:
        self._salt = salt.encode("utf-8") if isinstance(salt, str) else bytes(salt)

    def generate_salt(self, length: int) -> bytes:
        if len(self._salt) < length:
            raise ValueError(
                f"Fixed salt is {len(self._salt)} bytes but {length} bytes were requested"
            )
        return self._salt[:length]
