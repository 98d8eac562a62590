"""Jasypt property resolver.

Decrypts ``ENC(...)`` configuration values with a Jasypt-compatible
password-based encryptor before they reach the application.
"""

from jasypt_resolver.chain import (
    ExpressionResolver,
    ExpressionResolverChain,
    PropertyReferenceResolver,
)
from jasypt_resolver.config import EncryptorConfig, load_property_source
from jasypt_resolver.constants import ENC_PREFIX, PACKAGE_VERSION, PASSWORD_PROPERTY_NAME
from jasypt_resolver.conversion import ConversionService
from jasypt_resolver.crypto import StandardPBEStringEncryptor
from jasypt_resolver.errors import (
    AlreadyInitializedError,
    ConfigurationError,
    ConversionError,
    CryptoError,
    EncryptionInitializationError,
    EncryptionOperationNotPossibleError,
    ResolverBaseError,
)
from jasypt_resolver.resolver import JasyptPropertyExpressionResolver
from jasypt_resolver.sources import (
    CompositePropertySource,
    EnvPropertySource,
    MapPropertySource,
    PropertySource,
)

__version__ = PACKAGE_VERSION

__all__ = [
    "AlreadyInitializedError",
    "CompositePropertySource",
    "ConfigurationError",
    "ConversionError",
    "ConversionService",
    "CryptoError",
    "ENC_PREFIX",
    "EncryptionInitializationError",
    "EncryptionOperationNotPossibleError",
    "EncryptorConfig",
    "EnvPropertySource",
    "ExpressionResolver",
    "ExpressionResolverChain",
    "JasyptPropertyExpressionResolver",
    "MapPropertySource",
    "PASSWORD_PROPERTY_NAME",
    "PropertyReferenceResolver",
    "PropertySource",
    "ResolverBaseError",
    "StandardPBEStringEncryptor",
    "__version__",
]
