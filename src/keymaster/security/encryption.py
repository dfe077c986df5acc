"""
Text encryption for KeyMaster.

Short text values are encrypted with a key and IV derived from a master key
(see :func:`keymaster.security.kdf.derive_key` and
:func:`keymaster.security.kdf.derive_iv`) and returned as Base64 so they can be
stored in text files or configuration.

Encryption details:
- AES-256-CBC via :class:`cryptography.hazmat.primitives.ciphers.Cipher`
- ISO 10126 padding (:mod:`keymaster.security.padding`)
- no IV, version tag or MAC in the output: the IV is re-derived from the key

The IV depends only on the master key, so equal plaintexts under the same key
share their ciphertext up to the last (randomly padded) block.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from keymaster.core.exceptions import InvalidDataError

from .kdf import derive_iv, derive_key
from .material import KeyMaterial
from .padding import ISO10126


logger = logging.getLogger(__name__)


def encrypt_to_base64(value: str, key: bytes, iv: bytes) -> str:
    """
    Encrypt ``value`` with an already derived key and IV.

    The text is UTF-8 encoded, padded, encrypted and returned as Base64.
    """
    data = value.encode("utf-8")

    padder = ISO10126(algorithms.AES.block_size).padder()
    padded = padder.update(data) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ct = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(ct).decode("ascii")


def decrypt_from_base64(value: str, key: bytes, iv: bytes) -> str:
    """
    Decrypt a Base64 value produced by :func:`encrypt_to_base64`.

    Raises ValueError (or a subclass) on malformed Base64, ciphertext that is
    not block aligned, bad padding or non UTF-8 plaintext.
    """
    ct = base64.b64decode(value, validate=True)

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ct) + decryptor.finalize()

    unpadder = ISO10126(algorithms.AES.block_size).unpadder()
    data = unpadder.update(padded) + unpadder.finalize()
    return data.decode("utf-8")


def encrypt(plain_text: Optional[str], master_key: bytes) -> Optional[str]:
    """
    Encrypt ``plain_text`` under ``master_key``.

    Empty or ``None`` input is returned as is. Any other failure is raised as
    :class:`InvalidDataError` with the original exception chained.
    """
    if not plain_text:
        return plain_text

    try:
        with KeyMaterial(derive_key(master_key), derive_iv(master_key)) as km:
            result = encrypt_to_base64(plain_text, km.key, km.iv)
    except Exception as exc:
        logger.debug("text encryption failed: %s", type(exc).__name__)
        raise InvalidDataError("Unable to encrypt data") from exc

    logger.debug("encrypted %d characters", len(plain_text))
    return result


def decrypt(cipher_text: Optional[str], master_key: bytes) -> Optional[str]:
    """
    Decrypt a Base64 ``cipher_text`` under ``master_key``.

    Empty or ``None`` input is returned as is. Any other failure, including a
    wrong key, is raised as :class:`InvalidDataError`.
    """
    if not cipher_text:
        return cipher_text

    try:
        with KeyMaterial(derive_key(master_key), derive_iv(master_key)) as km:
            result = decrypt_from_base64(cipher_text, km.key, km.iv)
    except Exception as exc:
        logger.debug("text decryption failed: %s", type(exc).__name__)
        raise InvalidDataError("Unable to decrypt data") from exc

    return result
