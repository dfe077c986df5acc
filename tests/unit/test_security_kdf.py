"""Unit tests for the key derivation module."""

import pytest
from keymaster.core.exceptions import InvalidKeyFormat, KeyRangeError
from keymaster.security.kdf import (
    BLOCK_SIZE,
    KEY_SIZE,
    PBKDF2_ITERATIONS,
    SALT,
    bytes_to_string,
    derive_iv,
    derive_key,
    derive_key_and_iv,
    string_to_bytes,
)


REFERENCE_HEX = "AE6D75E17DB657D0851BCDFC9065BABF8205AC59CF50E174D6B5B8E468ADB2E8"
# the historical layout keeps the leading 16 parsed bytes and zero-fills the rest
REFERENCE_MASTER = bytes.fromhex("AE6D75E17DB657D0851BCDFC9065BABF") + bytes(16)


# ==============================================================================
# Tests: Hex key parsing
# ==============================================================================

def test_string_to_bytes_reference_layout():
    assert string_to_bytes(REFERENCE_HEX) == REFERENCE_MASTER


def test_string_to_bytes_strict():
    assert string_to_bytes(REFERENCE_HEX, strict=True) == bytes.fromhex(REFERENCE_HEX)


def test_string_to_bytes_strips_dashes():
    dashed = "-".join(REFERENCE_HEX[i:i + 2] for i in range(0, len(REFERENCE_HEX), 2))
    assert string_to_bytes(dashed) == string_to_bytes(REFERENCE_HEX)
    assert string_to_bytes(dashed, strict=True) == bytes.fromhex(REFERENCE_HEX)


def test_string_to_bytes_lowercase():
    assert string_to_bytes(REFERENCE_HEX.lower()) == REFERENCE_MASTER


def test_string_to_bytes_length():
    """Output length is always half the digit count."""
    assert len(string_to_bytes("00" * 32)) == 32
    assert string_to_bytes("ABCD") == b"\xab\x00"
    assert string_to_bytes("") == b""


@pytest.mark.parametrize("bad", ["XYZ0", "ABC", "12 34", "0x1234", "zz" * 16])
def test_string_to_bytes_malformed(bad):
    with pytest.raises(InvalidKeyFormat):
        string_to_bytes(bad)


def test_invalid_key_format_is_value_error():
    with pytest.raises(ValueError):
        string_to_bytes("not hex")


def test_bytes_to_string_uppercase():
    assert bytes_to_string(b"\xae\x6d\x00\x0f") == "AE6D000F"


# ==============================================================================
# Tests: Master key derivation
# ==============================================================================

def test_derive_key_known_answer():
    expected = bytes.fromhex(
        "15b3bfa265feb6d1fcc894d5d5ced4a390272a9e9ac3b67e729180312916e164"
    )
    assert derive_key(REFERENCE_MASTER) == expected


def test_derive_iv_known_answer():
    assert derive_iv(REFERENCE_MASTER) == bytes.fromhex("3a73a5f058b6e89f540ceb562ff351a5")


def test_derive_iv_uses_only_first_block():
    other = REFERENCE_MASTER[:BLOCK_SIZE] + b"\xff" * 16
    assert derive_iv(other) == derive_iv(REFERENCE_MASTER)
    assert derive_key(other) != derive_key(REFERENCE_MASTER)


def test_derive_sizes():
    master = bytes(range(40))
    assert len(derive_key(master)) == KEY_SIZE
    assert len(derive_iv(master)) == BLOCK_SIZE


def test_derive_is_deterministic():
    master = bytes(range(32))
    assert derive_key(master) == derive_key(master)
    assert derive_iv(master) == derive_iv(master)


def test_derive_key_accepts_short_master():
    assert len(derive_key(b"short")) == KEY_SIZE


def test_derive_iv_short_master_key():
    with pytest.raises(KeyRangeError):
        derive_iv(b"\x01" * (BLOCK_SIZE - 1))


def test_derive_iv_exact_block():
    assert len(derive_iv(b"\x01" * BLOCK_SIZE)) == BLOCK_SIZE


# ==============================================================================
# Tests: Password derivation
# ==============================================================================

def test_salt_is_fixed():
    assert len(SALT) == 32
    assert SALT.hex().upper() == (
        "C457F6AC5377B5CFE6C14A566911B7A161394EEAF02B648D478353B763DA6B59"
    )
    assert PBKDF2_ITERATIONS == 1000


def test_derive_key_and_iv_known_answer():
    key, iv = derive_key_and_iv("password123")
    assert key == bytes.fromhex(
        "479C1FF1E40A1CBB0CD23FDAB390ADB64BE93A5A0732C5EFF027531173BB83B5"
    )
    assert iv == bytes.fromhex("AC8EE495690742133AAD7B4DBFD5FFEA")


def test_derive_key_and_iv_str_and_bytes_match():
    assert derive_key_and_iv("pässwörd") == derive_key_and_iv("pässwörd".encode("utf-8"))


def test_derive_key_and_iv_is_deterministic():
    assert derive_key_and_iv("hunter2") == derive_key_and_iv("hunter2")


def test_derive_key_and_iv_salt_matters():
    assert derive_key_and_iv("hunter2") != derive_key_and_iv("hunter2", salt=b"\x00" * 32)


def test_password_and_master_paths_differ():
    """The two derivation paths never agree on the same secret."""
    secret = b"password123password123"
    key, iv = derive_key_and_iv(secret)
    assert key != derive_key(secret)
    assert iv != derive_iv(secret)
