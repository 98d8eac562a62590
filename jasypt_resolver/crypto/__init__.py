"""Password-based encryption primitives (Jasypt-compatible)."""

from jasypt_resolver.crypto.algorithms import available_algorithms, get_algorithm
from jasypt_resolver.crypto.encryptor import StandardPBEStringEncryptor
from jasypt_resolver.crypto.salt import FixedSaltGenerator, RandomSaltGenerator, SaltGenerator

__all__ = [
    "FixedSaltGenerator",
    "RandomSaltGenerator",
    "SaltGenerator",
    "StandardPBEStringEncryptor",
    "available_algorithms",
    "get_algorithm",
]
