import os

from .kdf import KEY_SIZE


def create_key(size: int = KEY_SIZE) -> bytes:
    """Return ``size`` bytes from the OS CSPRNG (32 by default)."""
    return os.urandom(size)
