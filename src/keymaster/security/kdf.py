"""Key and IV derivation for KeyMaster.

Two independent paths exist and must not be mixed:

- master key: SHA-256 of the whole key is the working key, SHA-256 of its
  first 16 bytes (truncated to 16 bytes) is the IV. Used for text values.
- password: PBKDF2-HMAC-SHA1 over the password and the fixed ``SALT``; the
  first 32 bytes of the stream are the key, the next 16 the IV. Used for files.

``SALT`` and ``PBKDF2_ITERATIONS`` are fixed so that files encrypted by older
releases keep decrypting. Both are weak by modern standards: the salt is shared
by every installation and 1000 iterations is the historical library default.
Changing either breaks every existing file.
"""

from __future__ import annotations

import hashlib
import re
from typing import Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from keymaster.core.exceptions import InvalidKeyFormat, KeyRangeError


KEY_SIZE = 32  # AES-256
BLOCK_SIZE = 16  # AES block, also the IV size
PBKDF2_ITERATIONS = 1000

SALT = bytes(
    [
        0xC4, 0x57, 0xF6, 0xAC, 0x53, 0x77, 0xB5, 0xCF,
        0xE6, 0xC1, 0x4A, 0x56, 0x69, 0x11, 0xB7, 0xA1,
        0x61, 0x39, 0x4E, 0xEA, 0xF0, 0x2B, 0x64, 0x8D,
        0x47, 0x83, 0x53, 0xB7, 0x63, 0xDA, 0x6B, 0x59,
    ]
)

_HEX_RE = re.compile(r"\A[0-9a-fA-F]*\Z")


def string_to_bytes(hexadecimal: str, strict: bool = False) -> bytes:
    """
    Convert a hexadecimal key string (dashes allowed) to bytes.

    By default the historical KeyMaster layout is reproduced: the result is
    ``len(digits) / 2`` bytes long but only its first half is filled from the
    leading digits, the rest stays zero. Keys printed by ``/c`` and every
    ciphertext produced with them depend on this layout. Pass ``strict=True``
    for a plain two-digits-per-byte parse.
    """
    digits = hexadecimal.replace("-", "")
    if not _HEX_RE.match(digits) or len(digits) % 2:
        raise InvalidKeyFormat("key is not a valid hexadecimal string")

    if strict:
        return bytes.fromhex(digits)

    count = len(digits) // 2
    out = bytearray(count)
    for i in range(0, count, 2):
        out[i // 2] = int(digits[i:i + 2], 16)
    return bytes(out)


def bytes_to_string(data: bytes) -> str:
    """Uppercase hexadecimal without separators."""
    return data.hex().upper()


def derive_key(master_key: bytes) -> bytes:
    """SHA-256 of the full master key."""
    return hashlib.sha256(master_key).digest()


def derive_iv(master_key: bytes) -> bytes:
    """
    SHA-256 of the first ``BLOCK_SIZE`` bytes of the master key, truncated to
    ``BLOCK_SIZE`` bytes.

    Raises KeyRangeError if the master key is shorter than ``BLOCK_SIZE``.
    """
    if len(master_key) < BLOCK_SIZE:
        raise KeyRangeError(
            f"master key must be at least {BLOCK_SIZE} bytes to derive an IV (got {len(master_key)})"
        )
    return hashlib.sha256(master_key[:BLOCK_SIZE]).digest()[:BLOCK_SIZE]


def derive_key_and_iv(
    password: bytes | str,
    salt: bytes = SALT,
    iterations: int = PBKDF2_ITERATIONS,
) -> Tuple[bytes, bytes]:
    """
    Derive ``(key, iv)`` from a password using PBKDF2-HMAC-SHA1.

    Key and IV are consecutive draws from a single derivation stream, so the
    IV is bytes 32..48 of the stream and not a separate derivation.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA1(),
        length=KEY_SIZE + BLOCK_SIZE,
        salt=salt,
        iterations=iterations,
    )
    stream = kdf.derive(password)
    return stream[:KEY_SIZE], stream[KEY_SIZE:KEY_SIZE + BLOCK_SIZE]
