"""Tests for audit encryption."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from guardian_gateway import AuditCipher, EncryptionKeyError


def test_roundtrip_unicode():
    cipher = AuditCipher("secret")
    text = "Héllo john@example.com 🚀 4111111111111111"
    assert cipher.decrypt(cipher.encrypt(text)) == text


def test_format_is_iv_colon_ciphertext():
    token = AuditCipher("secret").encrypt("hello")
    iv, ct = token.split(":")
    assert len(iv) == 32
    assert len(ct) % 32 == 0
    int(iv, 16), int(ct, 16)


def test_fresh_iv_per_call():
    cipher = AuditCipher("secret")
    assert cipher.encrypt("same") != cipher.encrypt("same")


@pytest.mark.parametrize("value", ["", None, 42, ["x"]])
def test_degenerate_input(value):
    cipher = AuditCipher("secret")
    assert cipher.encrypt(value) == ""
    assert cipher.decrypt(value) == ""


def test_missing_key():
    cipher = AuditCipher(None)
    assert not cipher.configured
    assert cipher.encrypt("") == ""
    with pytest.raises(EncryptionKeyError):
        cipher.encrypt("hello")


def test_invalid_format():
    with pytest.raises(ValueError, match="Invalid encrypted text format"):
        AuditCipher("secret").decrypt("no-separator")


def test_wrong_key_does_not_roundtrip():
    token = AuditCipher("one").encrypt("hello world")
    try:
        assert AuditCipher("two").decrypt(token) != "hello world"
    except (ValueError, UnicodeDecodeError):
        pass
