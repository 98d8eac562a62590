"""Jasypt property expression resolver.

Decrypts configuration values written as ``ENC(<ciphertext>)`` with a
Jasypt-compatible password-based encryptor. The password is looked up
lazily, once, from the same property source under
``jasypt.encryption.password``::

    jasypt:
      encryption:
        password: your-encryption-password
    my:
      secret:
        property: ${ENC(GO9jHf7yVuP4E7oGzQmYkQ==)}

Expressions without the ``ENC(`` marker are declined (``None``) so the
next resolver in an :class:`~jasypt_resolver.chain.ExpressionResolverChain`
can handle them.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Type, TypeVar

from jasypt_resolver.chain import ExpressionResolver
from jasypt_resolver.config.schema import EncryptorConfig
from jasypt_resolver.constants import ENC_PREFIX, PASSWORD_PROPERTY_NAME
from jasypt_resolver.conversion import ConversionService
from jasypt_resolver.crypto.encryptor import StandardPBEStringEncryptor
from jasypt_resolver.crypto.salt import SaltGenerator
from jasypt_resolver.display.logging_config import secret_redaction_filter
from jasypt_resolver.sources import PropertySource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JasyptPropertyExpressionResolver(ExpressionResolver):
    """Resolves ``ENC(...)`` expressions by decrypting them.

    Each instance owns its encryptor; the key is set on first use and
    never changes afterwards.

    Parameters
    ----------
    config:
        Encryptor options (algorithm, iterations, output encoding).
    salt_generator:
        Optional salt source, forwarded to the encryptor.
    """

    def __init__(
        self,
        config: Optional[EncryptorConfig] = None,
        salt_generator: Optional[SaltGenerator] = None,
    ) -> None:
        self._encryptor = StandardPBEStringEncryptor(config, salt_generator)
        self._init_lock = threading.Lock()

    @property
    def encryptor(self) -> StandardPBEStringEncryptor:
        return self._encryptor

    def resolve(
        self,
        property_source: PropertySource,
        conversion_service: ConversionService,
        expression: str,
        required_type: Type[T],
    ) -> Optional[T]:
        if not self.is_encrypted_expression(expression):
            return None
        self._ensure_initialized(property_source)
        plaintext = self.decrypt(expression)
        secret_redaction_filter.register(plaintext)
        value = conversion_service.convert(plaintext, required_type)
        logger.debug("Resolved encrypted expression (%d chars).", len(expression))
        return value

    def _ensure_initialized(self, property_source: PropertySource) -> None:
        if self._encryptor.is_initialized():
            return
        with self._init_lock:
            if self._encryptor.is_initialized():
                return
            password = property_source.get_property(PASSWORD_PROPERTY_NAME, str)
            if password is None:
                # Left uninitialized: decrypt() reports the missing password.
                logger.warning(
                    "Property '%s' not found; encrypted values cannot be decrypted.",
                    PASSWORD_PROPERTY_NAME,
                )
                return
            self._encryptor.set_password(password)
            self._encryptor.initialize()
            logger.debug("Encryptor password loaded from '%s'.", PASSWORD_PROPERTY_NAME)

    def is_encrypted_expression(self, expression: str) -> bool:
        return expression.startswith(ENC_PREFIX)

    def decrypt(self, expression: str) -> str:
        """Decrypt the ciphertext inside *expression*.

        Raises :class:`~jasypt_resolver.errors.CryptoError` if the
        ciphertext is malformed, the password is wrong, or no password has
        been set.
        """
        return self._encryptor.decrypt(self.extract_ciphertext(expression))

    def extract_ciphertext(self, expression: str) -> str:
        # Drops the prefix and the last character; the closing ")" is not checked.
        return expression[len(ENC_PREFIX) : -1]
