"""Security helpers: key generation, derivation and AES-CBC codecs for KeyMaster.

This package provides:
- random master key generation
- key/IV derivation from a master key (SHA-256) or a password (PBKDF2-HMAC-SHA1)
- text encryption to/from Base64 under a master key
- streaming file encryption under a password

The cipher configuration is fixed: AES-256, CBC, ISO 10126 padding.
"""

from .keygen import create_key
from .kdf import (
    SALT,
    string_to_bytes,
    bytes_to_string,
    derive_key,
    derive_iv,
    derive_key_and_iv,
)
from .encryption import encrypt, decrypt, encrypt_to_base64, decrypt_from_base64
from .crypto import encrypt_stream, decrypt_stream, encrypt_file_stream, decrypt_file_stream

__all__ = [
    "create_key",
    "SALT",
    "string_to_bytes",
    "bytes_to_string",
    "derive_key",
    "derive_iv",
    "derive_key_and_iv",
    "encrypt",
    "decrypt",
    "encrypt_to_base64",
    "decrypt_from_base64",
    "encrypt_stream",
    "decrypt_stream",
    "encrypt_file_stream",
    "decrypt_file_stream",
]
