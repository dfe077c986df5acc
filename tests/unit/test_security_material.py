"""Unit tests for scoped key material."""

import pytest

from keymaster.security.material import KeyMaterial


def test_exposes_key_and_iv():
    with KeyMaterial(b"k" * 32, b"i" * 16) as km:
        assert bytes(km.key) == b"k" * 32
        assert bytes(km.iv) == b"i" * 16


def test_wiped_on_exit():
    km = KeyMaterial(b"k" * 32, b"i" * 16)
    with km:
        key_buf, iv_buf = km.key, km.iv
    assert km.wiped
    assert key_buf == bytearray(32)
    assert iv_buf == bytearray(16)


def test_wiped_on_exception():
    km = KeyMaterial(b"k" * 32, b"i" * 16)
    with pytest.raises(ZeroDivisionError):
        with km:
            key_buf = km.key
            1 / 0
    assert km.wiped
    assert key_buf == bytearray(32)


def test_access_after_wipe_raises():
    km = KeyMaterial(b"k", b"i")
    km.wipe()
    with pytest.raises(RuntimeError, match="wiped"):
        km.key
    with pytest.raises(RuntimeError, match="wiped"):
        km.iv


def test_wipe_is_idempotent():
    km = KeyMaterial(b"k", b"i")
    km.wipe()
    km.wipe()
    assert km.wiped
