"""Logging setup and log redaction."""

from jasypt_resolver.display.logging_config import (
    SecretRedactionFilter,
    secret_redaction_filter,
    setup_logging,
)

__all__ = [
    "SecretRedactionFilter",
    "secret_redaction_filter",
    "setup_logging",
]
