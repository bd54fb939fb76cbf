"""
Unit tests for core data models.
"""

import json

import pytest

from saltbox.core.exceptions import UnsupportedFormatError
from saltbox.core.models import (
    CIPHER_STORE_VERSION,
    CiphAlgoID,
    CipherStore,
    HashAlgoID,
    HashStore,
    create_cipher_store_from_dict,
    create_hash_store_from_dict,
    load_cipher_store_json,
    load_hash_store_json,
)


def _hash_store():
    return HashStore(hash=b"\xde\xad" * 10, salt=b"\x01" * 16, algo=HashAlgoID.SHA1)


def _cipher_store():
    return CipherStore(
        plaintext_hash=_hash_store(),
        iv=b"\x10" * 16,
        cipher_text=b"\x20" * 32,
    )


# ==============================================================================
# Enums
# ==============================================================================

def test_enum_values_are_stable():
    assert [a.value for a in HashAlgoID] == [0, 1, 2]
    assert [a.value for a in CiphAlgoID] == [0, 1]
    assert CIPHER_STORE_VERSION == 1


# ==============================================================================
# HashStore Tests
# ==============================================================================

class TestHashStore:
    def test_defaults(self):
        store = HashStore()
        assert store.hash == b""
        assert store.salt == b""
        assert store.algo is HashAlgoID.NONE

    def test_repr_hides_hash(self):
        store = _hash_store()
        assert repr(store) == f"HashStore(algo=SHA1, salt={'01' * 16!r})"
        assert "dead" not in repr(store)

    def test_equality_and_unhashable(self):
        a = _hash_store()
        b = _hash_store()
        c = HashStore(hash=a.hash, salt=a.salt, algo=HashAlgoID.PBKDF2)

        assert a == b
        assert a != c
        assert a != "not-a-store"
        with pytest.raises(TypeError):
            hash(a)
        with pytest.raises(TypeError):
            {a}

    def test_to_dict(self):
        assert _hash_store().to_dict() == {
            "hash": "dead" * 10,
            "salt": "01" * 16,
            "algo": 1,
        }

    def test_dict_roundtrip(self):
        store = _hash_store()
        assert create_hash_store_from_dict(store.to_dict()) == store

    def test_json_roundtrip(self):
        store = _hash_store()
        assert load_hash_store_json(store.to_json()) == store

    def test_create_from_dict_defaults(self):
        store = create_hash_store_from_dict({})
        assert store == HashStore()

    def test_unknown_algo_rejected(self):
        with pytest.raises(UnsupportedFormatError, match="HashAlgoID"):
            create_hash_store_from_dict({"hash": "", "salt": "", "algo": 9})

    def test_bad_hex_rejected(self):
        with pytest.raises(UnsupportedFormatError, match="salt"):
            create_hash_store_from_dict({"hash": "00", "salt": "zz", "algo": 1})

    @pytest.mark.parametrize("salt", ["01 02", " 0102", "0x0102"])
    def test_hex_with_separators_rejected(self, salt):
        with pytest.raises(UnsupportedFormatError, match="salt"):
            create_hash_store_from_dict({"hash": "00", "salt": salt, "algo": 1})

    @pytest.mark.parametrize("text", ["{oops", "[1, 2]", "null"])
    def test_load_json_rejects_non_objects(self, text):
        with pytest.raises(UnsupportedFormatError):
            load_hash_store_json(text)


# ==============================================================================
# CipherStore Tests
# ==============================================================================

class TestCipherStore:
    def test_defaults(self):
        store = CipherStore()
        assert store.version == CIPHER_STORE_VERSION
        assert store.algo is CiphAlgoID.AES128_CBC
        assert store.plaintext_hash is None
        assert store.iv == b""
        assert store.cipher_text == b""

    def test_repr(self):
        assert repr(_cipher_store()) == "CipherStore(version=1, algo=AES128_CBC, cipher_text_len=32)"

    def test_to_dict_nests_plaintext_hash(self):
        data = _cipher_store().to_dict()
        assert data["version"] == 1
        assert data["algo"] == 1
        assert data["plaintext_hash"] == _hash_store().to_dict()
        assert data["iv"] == "10" * 16
        assert data["cipher_text"] == "20" * 32

    def test_to_dict_without_hash(self):
        assert CipherStore().to_dict()["plaintext_hash"] is None

    def test_json_is_plain_json(self):
        data = json.loads(_cipher_store().to_json())
        assert isinstance(data["plaintext_hash"], dict)

    def test_roundtrip(self):
        store = _cipher_store()
        assert create_cipher_store_from_dict(store.to_dict()) == store
        assert load_cipher_store_json(store.to_json()) == store

    def test_equality_and_unhashable(self):
        a = _cipher_store()
        b = _cipher_store()
        c = _cipher_store()
        c.iv = b"\x11" * 16

        assert a == b
        assert a != c
        assert a != _hash_store()
        with pytest.raises(TypeError):
            hash(a)
        with pytest.raises(TypeError):
            {a}

    def test_future_version_loads(self):
        """Loading keeps an unknown version; decryption is what refuses it."""
        data = _cipher_store().to_dict()
        data["version"] = 7
        assert create_cipher_store_from_dict(data).version == 7

    @pytest.mark.parametrize("version", ["1", 1.0, True, None])
    def test_non_integer_version_rejected(self, version):
        data = _cipher_store().to_dict()
        data["version"] = version
        with pytest.raises(UnsupportedFormatError, match="version"):
            create_cipher_store_from_dict(data)

    def test_unknown_algo_rejected(self):
        data = _cipher_store().to_dict()
        data["algo"] = 42
        with pytest.raises(UnsupportedFormatError, match="CiphAlgoID"):
            create_cipher_store_from_dict(data)

    def test_bad_iv_hex_rejected(self):
        data = _cipher_store().to_dict()
        data["iv"] = "abc"
        with pytest.raises(UnsupportedFormatError, match="iv"):
            create_cipher_store_from_dict(data)
