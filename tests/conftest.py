"""Shared fixtures for the resolver test suite."""

from __future__ import annotations

import pytest

from jasypt_resolver.config.schema import EncryptorConfig
from jasypt_resolver.crypto.encryptor import StandardPBEStringEncryptor
from jasypt_resolver.display.logging_config import secret_redaction_filter

TEST_PASSWORD = "test-password"


@pytest.fixture(autouse=True)
def _clear_redaction_filter():
    secret_redaction_filter.clear()
    yield
    secret_redaction_filter.clear()


@pytest.fixture
def encrypt():
    """Return a helper that encrypts text the way the tooling would."""

    def _encrypt(
        plaintext: str,
        password: str = TEST_PASSWORD,
        config: EncryptorConfig | None = None,
    ) -> str:
        enc = StandardPBEStringEncryptor(config)
        enc.set_password(password)
        return enc.encrypt(plaintext)

    return _encrypt
