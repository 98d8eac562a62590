"""Configuration loading and encryptor options."""

from jasypt_resolver.config.loader import expand_env_vars, load_property_source
from jasypt_resolver.config.schema import EncryptorConfig

__all__ = [
    "EncryptorConfig",
    "expand_env_vars",
    "load_property_source",
]
