"""Shared constants for the Jasypt property resolver."""

PACKAGE_VERSION = "0.1.0"

# Expression marker
ENC_PREFIX = "ENC("

# Well-known property holding the decryption password
PASSWORD_PROPERTY_NAME = "jasypt.encryption.password"

# Encryptor defaults (match Jasypt's StandardPBEStringEncryptor)
DEFAULT_ALGORITHM = "PBEWithMD5AndDES"
DEFAULT_KEY_OBTENTION_ITERATIONS = 1000
DEFAULT_STRING_OUTPUT_TYPE = "base64"

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)25s:%(lineno)-4d - %(levelname)-7s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
