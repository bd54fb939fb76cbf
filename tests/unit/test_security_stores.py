"""
Unit tests for HashStore and CipherStore operations.
"""

import hashlib
from unittest.mock import patch

import pytest

from saltbox.core.exceptions import (
    IntegrityCheckFailedError,
    UnsupportedAlgorithmError,
    UnsupportedFormatError,
)
from saltbox.core.models import (
    CiphAlgoID,
    CipherStore,
    HashAlgoID,
    HashStore,
    create_cipher_store_from_dict,
)
from saltbox.security import stores
from saltbox.security.crypto import aes_cbc_decrypt
from saltbox.security.kdf import pbkdf2


STATIC_SALT = b"app-static-salt"


# ==============================================================================
# HashStore
# ==============================================================================

@pytest.mark.parametrize("algo", [HashAlgoID.SHA1, HashAlgoID.PBKDF2])
def test_hash_store_roundtrip(algo):
    store = stores.create_hash_store(b"correct horse", STATIC_SALT, algo)
    assert store.algo is algo
    assert len(store.salt) == 16
    assert stores.verify_hash_store(store, b"correct horse", STATIC_SALT)


@pytest.mark.parametrize("algo", [HashAlgoID.SHA1, HashAlgoID.PBKDF2])
def test_hash_store_rejects_other_text(algo):
    store = stores.create_hash_store(b"correct horse", STATIC_SALT, algo)
    assert not stores.verify_hash_store(store, b"correct horsf", STATIC_SALT)
    assert not stores.verify_hash_store(store, b"", STATIC_SALT)


def test_hash_store_rejects_other_static_salt():
    store = stores.create_hash_store(b"pw", STATIC_SALT)
    assert not stores.verify_hash_store(store, b"pw", b"other-salt")


def test_hash_store_default_algo_is_sha1():
    assert stores.create_hash_store(b"pw", STATIC_SALT).algo is HashAlgoID.SHA1


def test_hash_store_sha1_construction():
    store = stores.create_hash_store(b"text", b"static", HashAlgoID.SHA1)
    assert store.hash == hashlib.sha1(b"text" + store.salt + b"static").digest()


def test_hash_store_pbkdf2_construction():
    store = stores.create_hash_store(b"text", b"static", HashAlgoID.PBKDF2)
    assert len(store.hash) == 32
    assert store.hash == pbkdf2(b"text", store.salt + b"static", 2112, 32)


def test_hash_store_fresh_salt_each_time():
    a = stores.create_hash_store(b"same", STATIC_SALT)
    b = stores.create_hash_store(b"same", STATIC_SALT)
    assert a.salt != b.salt
    assert a.hash != b.hash


def test_hash_store_str_inputs_are_utf8():
    store = stores.create_hash_store("pässword", "static")
    assert stores.verify_hash_store(store, "pässword".encode("utf-8"), b"static")


def test_hash_store_none_algo_unsupported():
    with pytest.raises(UnsupportedAlgorithmError):
        stores.create_hash_store(b"text", STATIC_SALT, HashAlgoID.NONE)


def test_verify_on_default_constructed_store_unsupported():
    with pytest.raises(UnsupportedAlgorithmError):
        stores.verify_hash_store(HashStore(), b"text", STATIC_SALT)


def test_verify_does_not_mutate_store():
    store = stores.create_hash_store(b"pw", STATIC_SALT)
    before = (store.hash, store.salt, store.algo)
    stores.verify_hash_store(store, b"nope", STATIC_SALT)
    stores.verify_hash_store(store, b"pw", STATIC_SALT)
    assert (store.hash, store.salt, store.algo) == before


# ==============================================================================
# CipherStore
# ==============================================================================

def test_cipher_store_constants():
    assert stores.CIPHER_STORE_SALT == hashlib.sha1(b"CIPHER_STORE_SALT").digest()
    assert stores.CIPHER_STORE_KPAD == hashlib.sha1(b"CIPHER_STORE_KPAD").digest()
    assert stores.CIPHER_STORE_COUNT == 11717


@pytest.mark.parametrize("text", [b"", b"x", b"sixteen byte msg", b"hello world" * 40])
def test_cipher_store_roundtrip(text):
    store = stores.create_cipher_store(text, b"my key")
    assert store.version == 1
    assert store.algo is CiphAlgoID.AES128_CBC
    assert len(store.iv) == 16
    assert len(store.cipher_text) % 16 == 0
    assert len(store.cipher_text) > len(text)
    assert stores.decrypt_cipher_store(store, b"my key") == text


def test_cipher_store_decrypts_repeatedly():
    store = stores.create_cipher_store(b"again and again", b"k")
    assert stores.decrypt_cipher_store(store, b"k") == b"again and again"
    assert stores.decrypt_cipher_store(store, b"k") == b"again and again"


def test_cipher_store_string_helpers():
    store = stores.create_cipher_store("grüße", "schlüssel")
    assert stores.decrypt_string(store, "schlüssel") == "grüße"


def test_cipher_store_plaintext_hash_is_sha1_with_fixed_salt():
    store = stores.create_cipher_store(b"payload", b"key")
    assert store.plaintext_hash.algo is HashAlgoID.SHA1
    assert stores.verify_hash_store(store.plaintext_hash, b"payload", stores.CIPHER_STORE_SALT)


def test_cipher_store_key_derivation():
    expected = pbkdf2(b"key" + stores.CIPHER_STORE_KPAD, stores.CIPHER_STORE_SALT, 11717, 16)
    assert stores.derive_cipher_key(b"key") == expected
    store = stores.create_cipher_store(b"payload", b"key")
    assert aes_cbc_decrypt(expected, store.iv, store.cipher_text) == b"payload"


def test_cipher_store_fresh_iv():
    a = stores.create_cipher_store(b"same", b"key")
    b = stores.create_cipher_store(b"same", b"key")
    assert a.iv != b.iv
    assert a.cipher_text != b.cipher_text


def test_cipher_store_wrong_key_raises_integrity_error():
    store = stores.create_cipher_store(b"top secret", b"right key")
    with pytest.raises(IntegrityCheckFailedError):
        stores.decrypt_cipher_store(store, b"wrong key")


def test_cipher_store_wrong_key_with_valid_padding_still_fails():
    """Garbage plaintext that happens to unpad cleanly is caught by the hash."""
    store = stores.create_cipher_store(b"top secret", b"right key")
    with patch("saltbox.security.stores.aes_cbc_decrypt", return_value=b"garbage"):
        with pytest.raises(IntegrityCheckFailedError):
            stores.decrypt_cipher_store(store, b"wrong key")


def test_cipher_store_tampered_ciphertext_raises_integrity_error():
    store = stores.create_cipher_store(b"a" * 40, b"key")
    tampered = bytearray(store.cipher_text)
    tampered[0] ^= 0x01
    store.cipher_text = bytes(tampered)
    with pytest.raises(IntegrityCheckFailedError):
        stores.decrypt_cipher_store(store, b"key")


def test_cipher_store_tampered_hash_raises_integrity_error():
    store = stores.create_cipher_store(b"payload", b"key")
    store.plaintext_hash = stores.create_hash_store(b"other", stores.CIPHER_STORE_SALT)
    with pytest.raises(IntegrityCheckFailedError):
        stores.decrypt_cipher_store(store, b"key")


def test_cipher_store_survives_serialization():
    store = stores.create_cipher_store(b"persist me", b"key")
    loaded = create_cipher_store_from_dict(store.to_dict())
    assert loaded == store
    assert stores.decrypt_cipher_store(loaded, b"key") == b"persist me"


@pytest.mark.parametrize(
    "changes",
    [
        {"version": 2},
        {"algo": CiphAlgoID.NONE},
        {"plaintext_hash": None},
        {"iv": b"short"},
        {"cipher_text": b"\x00" * 15},
        {"cipher_text": b""},
    ],
)
def test_unsupported_format_checked_before_crypto(changes):
    store = stores.create_cipher_store(b"payload", b"key")
    for name, value in changes.items():
        setattr(store, name, value)
    with patch("saltbox.security.stores.derive_cipher_key") as mock_derive:
        with pytest.raises(UnsupportedFormatError):
            stores.decrypt_cipher_store(store, b"key")
    mock_derive.assert_not_called()


def test_default_constructed_cipher_store_is_unsupported():
    with pytest.raises(UnsupportedFormatError):
        stores.decrypt_cipher_store(CipherStore(), b"key")
