"""Pydantic configuration models for the PBE string encryptor."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from jasypt_resolver.constants import (
    DEFAULT_ALGORITHM,
    DEFAULT_KEY_OBTENTION_ITERATIONS,
    DEFAULT_STRING_OUTPUT_TYPE,
)

AlgorithmName = Literal["PBEWithMD5AndDES", "PBEWITHHMACSHA512ANDAES_256"]
StringOutputType = Literal["base64", "hexadecimal"]


class EncryptorConfig(BaseModel):
    """Options for :class:`StandardPBEStringEncryptor`.

    These are fixed when the resolver is constructed. The password is not
    part of this model; it is looked up lazily from the property source.
    """

    model_config = ConfigDict(frozen=True)

    algorithm: AlgorithmName = Field(
        default=DEFAULT_ALGORITHM,  # type: ignore[assignment]
        description="Password-based encryption algorithm.",
    )
    key_obtention_iterations: int = Field(
        default=DEFAULT_KEY_OBTENTION_ITERATIONS,
        ge=1,
        description="Hash iterations applied when deriving the key from the password.",
    )
    string_output_type: StringOutputType = Field(
        default=DEFAULT_STRING_OUTPUT_TYPE,  # type: ignore[assignment]
        description="Text encoding of encrypted output.",
    )
