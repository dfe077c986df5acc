"""Streaming password-based file encryption.

File layout: raw AES-256-CBC ciphertext with ISO 10126 padding. There is no
header, magic, salt or IV prefix; key and IV are re-derived from the password
and the fixed salt (:func:`keymaster.security.kdf.derive_key_and_iv`), so the
same password is the only thing needed to decrypt.

Input is copied through the cipher one block (16 bytes) at a time and is never
loaded into memory as a whole.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from keymaster.core.exceptions import InvalidPasswordError

from .kdf import BLOCK_SIZE, SALT, derive_key_and_iv
from .material import KeyMaterial
from .padding import ISO10126


logger = logging.getLogger(__name__)

BUFFER_SIZE = BLOCK_SIZE


class _StreamTransform:
    """Chain of update/finalize contexts applied in order.

    When ``error`` is given, a ValueError raised by one of the stages (bad
    padding, ciphertext not block aligned) is re-raised as ``error``. Reads
    and writes happen outside the transform and are never mapped.
    """

    def __init__(self, *stages, error: Optional[Callable[[], Exception]] = None):
        self._stages = stages
        self._error = error

    def _apply(self, data: bytes, final: bool) -> bytes:
        try:
            for stage in self._stages:
                data = stage.update(data)
                if final:
                    data += stage.finalize()
        except ValueError as exc:
            if self._error is None:
                raise
            logger.debug("transform failed: %s", exc)
            raise self._error() from exc
        return data

    def update(self, data: bytes) -> bytes:
        return self._apply(data, final=False)

    def finalize(self) -> bytes:
        return self._apply(b"", final=True)


def _copy_stream(inf: BinaryIO, outf: BinaryIO, transform: _StreamTransform) -> int:
    total = 0
    while True:
        chunk = inf.read(BUFFER_SIZE)
        if not chunk:
            break
        total += len(chunk)
        outf.write(transform.update(chunk))
    outf.write(transform.finalize())
    return total


def encrypt_stream(inf: BinaryIO, outf: BinaryIO, password: str, salt: bytes = SALT) -> None:
    """Encrypt everything readable from ``inf`` into ``outf`` and close both."""
    # both streams are closed whatever happens, derivation failures included
    with outf, inf, KeyMaterial(*derive_key_and_iv(password, salt)) as km:
        cipher = Cipher(algorithms.AES(km.key), modes.CBC(km.iv))
        transform = _StreamTransform(
            ISO10126(algorithms.AES.block_size).padder(),
            cipher.encryptor(),
        )
        total = _copy_stream(inf, outf, transform)
    logger.debug("encrypted %d bytes", total)


def decrypt_stream(inf: BinaryIO, outf: BinaryIO, password: str, salt: bytes = SALT) -> None:
    """
    Decrypt everything readable from ``inf`` into ``outf`` and close both.

    A wrong password or corrupted ciphertext shows up as invalid padding or a
    ciphertext length that is not block aligned; both are raised as
    :class:`InvalidPasswordError`. I/O errors propagate unchanged.
    """
    with outf, inf, KeyMaterial(*derive_key_and_iv(password, salt)) as km:
        cipher = Cipher(algorithms.AES(km.key), modes.CBC(km.iv))
        transform = _StreamTransform(
            cipher.decryptor(),
            ISO10126(algorithms.AES.block_size).unpadder(),
            error=lambda: InvalidPasswordError("Please supply a valid password"),
        )
        total = _copy_stream(inf, outf, transform)
    logger.debug("decrypted %d bytes", total)


def encrypt_file_stream(in_path: str | Path, out_path: str | Path, password: str) -> None:
    """Encrypt ``in_path`` into ``out_path`` (created or truncated)."""
    if not Path(in_path).is_file():
        raise FileNotFoundError("file not found.")

    with open(in_path, "rb") as inf, open(out_path, "wb") as outf:
        encrypt_stream(inf, outf, password)


def decrypt_file_stream(in_path: str | Path, out_path: str | Path, password: str) -> None:
    """Decrypt ``in_path`` into ``out_path`` (created or truncated)."""
    if not Path(in_path).is_file():
        raise FileNotFoundError("file not found.")

    with open(in_path, "rb") as inf, open(out_path, "wb") as outf:
        decrypt_stream(inf, outf, password)
