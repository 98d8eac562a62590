"""Custom exception classes for the Jasypt property resolver."""

from typing import Any, Optional


class ResolverBaseError(Exception):
    """Base class for all custom exceptions in the resolver."""

    pass


class ConfigurationError(ResolverBaseError):
    """Raised when loading or validating a configuration file fails."""

    pass


class ConversionError(ResolverBaseError):
    """
    Raised when a resolved value cannot be converted to the type
    requested by the caller.
    """

    def __init__(
        self,
        target_type: Any,
        orig_exc: Optional[Exception] = None,
    ):
        self.target_type = target_type
        self.orig_exc = orig_exc

        type_name = getattr(target_type, "__name__", None) or repr(target_type)
        full_msg = f"Cannot convert value to required type '{type_name}'"
        if orig_exc:
            full_msg += f" (original error: {type(orig_exc).__name__})"
        super().__init__(full_msg)


class CryptoError(ResolverBaseError):
    """Base class for encryption and decryption failures."""

    pass


class EncryptionInitializationError(CryptoError):
    """Raised when the encryptor cannot be initialized (e.g. no password)."""

    pass


class EncryptionOperationNotPossibleError(CryptoError):
    """
    Raised when encryption or decryption fails. The message is
    intentionally generic so no key material or plaintext leaks.
    """

    def __init__(self, message: str = "Encryption/decryption operation not possible"):
        super().__init__(message)


class AlreadyInitializedError(CryptoError):
    """Raised when configuring an encryptor after it has been initialized."""

    def __init__(self) -> None:
        super().__init__(
            "Encryptor is already initialized; its configuration can no longer be changed."
        )
