"""Tests for the PBE string encryptor, algorithms and salt generators."""

from __future__ import annotations

import base64

import pytest
from pydantic import ValidationError

from jasypt_resolver.config.schema import EncryptorConfig
from jasypt_resolver.crypto import (
    FixedSaltGenerator,
    RandomSaltGenerator,
    StandardPBEStringEncryptor,
    available_algorithms,
    get_algorithm,
)
from jasypt_resolver.errors import (
    AlreadyInitializedError,
    CryptoError,
    EncryptionInitializationError,
    EncryptionOperationNotPossibleError,
)

AES = "PBEWITHHMACSHA512ANDAES_256"


def _encryptor(password="test-password", **config_kwargs) -> StandardPBEStringEncryptor:
    enc = StandardPBEStringEncryptor(EncryptorConfig(**config_kwargs))
    enc.set_password(password)
    return enc


# ── Config ───────────────────────────────────────────────────────────────


class TestEncryptorConfig:
    def test_defaults(self):
        cfg = EncryptorConfig()
        assert cfg.algorithm == "PBEWithMD5AndDES"
        assert cfg.key_obtention_iterations == 1000
        assert cfg.string_output_type == "base64"

    def test_unknown_algorithm(self):
        with pytest.raises(ValidationError):
            EncryptorConfig(algorithm="ROT13")

    def test_iterations_must_be_positive(self):
        with pytest.raises(ValidationError):
            EncryptorConfig(key_obtention_iterations=0)

    def test_frozen(self):
        cfg = EncryptorConfig()
        with pytest.raises(ValidationError):
            cfg.algorithm = AES  # type: ignore[misc]


# ── Algorithms ───────────────────────────────────────────────────────────


class TestAlgorithms:
    def test_available(self):
        assert available_algorithms() == [AES, "PBEWithMD5AndDES"]

    def test_lookup_case_insensitive(self):
        assert get_algorithm("pbewithmd5anddes").name == "PBEWithMD5AndDES"

    def test_unknown(self):
        with pytest.raises(EncryptionInitializationError, match="Unknown"):
            get_algorithm("ROT13")

    def test_des_rejects_non_ascii_password(self):
        enc = _encryptor(password="pässwörd")
        with pytest.raises(EncryptionInitializationError, match="ASCII"):
            enc.encrypt("x")

    def test_aes_accepts_non_ascii_password(self):
        enc = _encryptor(password="pässwörd", algorithm=AES)
        assert enc.decrypt(enc.encrypt("some-text")) == "some-text"


# ── Lifecycle ────────────────────────────────────────────────────────────


class TestLifecycle:
    def test_config_defaults(self):
        assert StandardPBEStringEncryptor().config == EncryptorConfig()

    def test_config_kept(self):
        cfg = EncryptorConfig(algorithm=AES, key_obtention_iterations=5)
        assert StandardPBEStringEncryptor(cfg).config is cfg

    def test_starts_uninitialized(self):
        assert not StandardPBEStringEncryptor().is_initialized()

    def test_set_password_does_not_initialize(self):
        assert not _encryptor().is_initialized()

    def test_first_operation_initializes(self):
        enc = _encryptor()
        enc.encrypt("x")
        assert enc.is_initialized()

    def test_initialize_without_password(self):
        with pytest.raises(EncryptionInitializationError, match="Password not set"):
            StandardPBEStringEncryptor().initialize()

    def test_decrypt_without_password(self):
        with pytest.raises(CryptoError):
            StandardPBEStringEncryptor().decrypt("GO9jHf7yVuP4E7oGzQmYkQ==")

    def test_initialize_idempotent(self):
        enc = _encryptor()
        enc.initialize()
        enc.initialize()
        assert enc.is_initialized()

    def test_password_frozen_after_init(self):
        enc = _encryptor()
        enc.initialize()
        with pytest.raises(AlreadyInitializedError):
            enc.set_password("other")

    def test_salt_generator_frozen_after_init(self):
        enc = _encryptor()
        enc.initialize()
        with pytest.raises(AlreadyInitializedError):
            enc.set_salt_generator(RandomSaltGenerator())

    def test_empty_password_rejected(self):
        with pytest.raises(EncryptionInitializationError):
            StandardPBEStringEncryptor().set_password("")

    def test_password_can_change_before_init(self):
        enc = _encryptor(password="first")
        enc.set_password("second")
        token = enc.encrypt("x")
        assert _encryptor(password="second").decrypt(token) == "x"


# ── Encrypt / decrypt ────────────────────────────────────────────────────


class TestRoundtrip:
    @pytest.mark.parametrize("algorithm", ["PBEWithMD5AndDES", AES])
    @pytest.mark.parametrize("text", ["some-text", "", "ünïcødé ✓", "x" * 100])
    def test_roundtrip(self, algorithm, text):
        enc = _encryptor(algorithm=algorithm)
        assert enc.decrypt(enc.encrypt(text)) == text

    def test_separate_instances_interoperate(self):
        token = _encryptor().encrypt("some-text")
        assert _encryptor().decrypt(token) == "some-text"

    def test_none_passthrough(self):
        enc = _encryptor()
        assert enc.encrypt(None) is None
        assert enc.decrypt(None) is None

    def test_random_salt_varies_output(self):
        enc = _encryptor()
        assert enc.encrypt("some-text") != enc.encrypt("some-text")

    def test_hexadecimal_output(self):
        enc = _encryptor(string_output_type="hexadecimal")
        token = enc.encrypt("some-text")
        assert all(c in "0123456789ABCDEF" for c in token)
        assert enc.decrypt(token) == "some-text"

    def test_iterations_change_key(self):
        token = _encryptor(key_obtention_iterations=10).encrypt("some-text")
        assert _encryptor(key_obtention_iterations=10).decrypt(token) == "some-text"


class TestWireFormat:
    # Jasypt PBEWithMD5AndDES, 1000 iterations, salt b"12345678"
    KNOWN_TOKEN = "MTIzNDU2NzgfWN0S9qC3yyi1LsYAGd0F"

    def _fixed_des(self) -> StandardPBEStringEncryptor:
        enc = StandardPBEStringEncryptor(salt_generator=FixedSaltGenerator(b"12345678"))
        enc.set_password("test-password")
        return enc

    def test_known_answer_encrypt(self):
        assert self._fixed_des().encrypt("some-text") == self.KNOWN_TOKEN

    def test_known_answer_decrypt(self):
        assert _encryptor().decrypt(self.KNOWN_TOKEN) == "some-text"

    def test_des_layout(self):
        # 8-byte salt + one 16-byte padded block for a 9-byte message
        raw = base64.b64decode(_encryptor().encrypt("some-text"))
        assert len(raw) == 8 + 16

    def test_des_short_message_single_block(self):
        raw = base64.b64decode(_encryptor().encrypt("abc"))
        assert len(raw) == 8 + 8

    def test_aes_layout(self):
        raw = base64.b64decode(_encryptor(algorithm=AES).encrypt("some-text"))
        assert len(raw) == 16 + 16 + 16

    def test_salt_is_prefix(self):
        enc = _encryptor()
        enc.set_salt_generator(FixedSaltGenerator(b"12345678"))
        raw = base64.b64decode(enc.encrypt("some-text"))
        assert raw[:8] == b"12345678"


class TestMalformedInput:
    @pytest.mark.parametrize("token", ["", "!!!!", "AAAA", "GO9jHf7y", "not base64 at all?"])
    def test_rejected(self, token):
        with pytest.raises(EncryptionOperationNotPossibleError):
            _encryptor().decrypt(token)

    def test_truncated_ciphertext(self):
        enc = _encryptor()
        raw = base64.b64decode(enc.encrypt("some-text"))
        truncated = base64.b64encode(raw[:-3]).decode()
        with pytest.raises(EncryptionOperationNotPossibleError):
            enc.decrypt(truncated)

    def test_bad_hex(self):
        with pytest.raises(EncryptionOperationNotPossibleError):
            _encryptor(string_output_type="hexadecimal").decrypt("XYZ")

    def test_error_message_is_generic(self):
        with pytest.raises(EncryptionOperationNotPossibleError) as exc_info:
            _encryptor().decrypt("!!!!")
        assert "test-password" not in str(exc_info.value)


# ── Salt generators ──────────────────────────────────────────────────────


class TestSaltGenerators:
    def test_random_length(self):
        assert len(RandomSaltGenerator().generate_salt(16)) == 16

    def test_fixed_truncates(self):
        assert FixedSaltGenerator("abcdefghijk").generate_salt(8) == b"abcdefgh"

    def test_fixed_too_short(self):
        with pytest.raises(ValueError):
            FixedSaltGenerator(b"abc").generate_salt(8)

    def test_fixed_salt_is_deterministic_for_des(self):
        salt = FixedSaltGenerator(b"saltsalt")
        first = StandardPBEStringEncryptor(salt_generator=salt)
        second = StandardPBEStringEncryptor(salt_generator=salt)
        first.set_password("test-password")
        second.set_password("test-password")
        assert first.encrypt("some-text") == second.encrypt("some-text")

    def test_fixed_salt_aes_still_uses_random_iv(self):
        salt = FixedSaltGenerator(b"0123456789abcdef")
        enc = StandardPBEStringEncryptor(EncryptorConfig(algorithm=AES), salt_generator=salt)
        enc.set_password("test-password")
        first, second = enc.encrypt("some-text"), enc.encrypt("some-text")
        assert first != second
        assert enc.decrypt(first) == enc.decrypt(second) == "some-text"

    def test_fixed_salt_too_short_for_aes(self):
        enc = StandardPBEStringEncryptor(
            EncryptorConfig(algorithm=AES), salt_generator=FixedSaltGenerator(b"short")
        )
        enc.set_password("test-password")
        with pytest.raises(EncryptionOperationNotPossibleError):
            enc.encrypt("x")
