"""Scoped holder for derived key material.

Derived key and IV bytes are copied into mutable buffers that are zeroed when
the ``with`` block exits, including on exceptions. This is best effort: the
immutable ``bytes`` returned by the derivation functions cannot be wiped and
live until garbage collected.
"""
from __future__ import annotations

from typing import Optional


class KeyMaterial:
    def __init__(self, key: bytes, iv: bytes):
        self._key: Optional[bytearray] = bytearray(key)
        self._iv: Optional[bytearray] = bytearray(iv)

    @property
    def key(self) -> bytearray:
        if self._key is None:
            raise RuntimeError("Key material was wiped")
        return self._key

    @property
    def iv(self) -> bytearray:
        if self._iv is None:
            raise RuntimeError("Key material was wiped")
        return self._iv

    @property
    def wiped(self) -> bool:
        return self._key is None

    def wipe(self) -> None:
        """Overwrite key and IV with zeros and drop the buffers."""
        try:
            for buf in (self._key, self._iv):
                if buf is not None:
                    for i in range(len(buf)):
                        buf[i] = 0
        finally:
            self._key = None
            self._iv = None

    def __enter__(self) -> "KeyMaterial":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()
