"""ISO 10126 block padding.

``cryptography`` only ships PKCS7 and ANSI X9.23 padders, while KeyMaster
ciphertext uses ISO 10126: the pad is 1..block bytes long, its last byte holds
the pad length and the bytes before it are random. A full block of padding is
added when the input is already block aligned.

The contexts mirror ``cryptography.hazmat.primitives.padding``: call
``update()`` any number of times and ``finalize()`` once.
"""

import os

from keymaster.core.exceptions import PaddingError


class ISO10126:
    def __init__(self, block_size: int):
        # block_size is in bits, like cryptography's padders
        if not (0 < block_size <= 2040) or block_size % 8:
            raise ValueError("block_size must be a multiple of 8 between 8 and 2040")
        self.block_size = block_size

    def padder(self) -> "_ISO10126PaddingContext":
        return _ISO10126PaddingContext(self.block_size // 8)

    def unpadder(self) -> "_ISO10126UnpaddingContext":
        return _ISO10126UnpaddingContext(self.block_size // 8)


class _ISO10126PaddingContext:
    def __init__(self, block_bytes: int):
        self._block = block_bytes
        self._buffer = b""
        self._finalized = False

    def update(self, data: bytes) -> bytes:
        if self._finalized:
            raise RuntimeError("Context was already finalized.")
        self._buffer += data
        cut = len(self._buffer) - len(self._buffer) % self._block
        out, self._buffer = self._buffer[:cut], self._buffer[cut:]
        return out

    def finalize(self) -> bytes:
        if self._finalized:
            raise RuntimeError("Context was already finalized.")
        self._finalized = True
        pad_len = self._block - len(self._buffer)
        out = self._buffer + os.urandom(pad_len - 1) + bytes([pad_len])
        self._buffer = b""
        return out


class _ISO10126UnpaddingContext:
    def __init__(self, block_bytes: int):
        self._block = block_bytes
        self._buffer = b""
        self._finalized = False

    def update(self, data: bytes) -> bytes:
        if self._finalized:
            raise RuntimeError("Context was already finalized.")
        self._buffer += data
        # the last full block may be padding, hold it back until finalize()
        full = len(self._buffer) // self._block
        cut = max(full - 1, 0) * self._block
        out, self._buffer = self._buffer[:cut], self._buffer[cut:]
        return out

    def finalize(self) -> bytes:
        if self._finalized:
            raise RuntimeError("Context was already finalized.")
        self._finalized = True
        block, self._buffer = self._buffer, b""
        if len(block) != self._block:
            raise PaddingError("Invalid padding bytes.")
        pad_len = block[-1]
        if pad_len < 1 or pad_len > self._block:
            raise PaddingError("Invalid padding bytes.")
        return block[:-pad_len]
