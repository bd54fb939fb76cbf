"""
Record types persisted by SaltBox: HashStore and CipherStore
"""

import json
from enum import Enum

from .byteops import compare, hex_to_bytes
from .exceptions import InvalidParameterError, UnsupportedFormatError


class HashAlgoID(Enum):
    # Which salted hash construction a HashStore uses
    NONE = 0
    SHA1 = 1
    PBKDF2 = 2


class CiphAlgoID(Enum):
    # Which cipher a CipherStore uses
    NONE = 0
    AES128_CBC = 1


CIPHER_STORE_VERSION = 1


def _enum_from_value(enum_cls, value):
    # Loaded records carry the integer value; reject anything we do not know.
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as e:
        raise UnsupportedFormatError(f"unknown {enum_cls.__name__} value {value!r}") from e


def _bytes_from_hex(value, field):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return hex_to_bytes(value or "")
    except InvalidParameterError as e:
        raise UnsupportedFormatError(f"field {field!r} is not valid hex") from e


class HashStore:
    """
        A salted hash of some text (typically a password)

        Build with saltbox.security.stores.create_hash_store and check
        candidates with verify_hash_store. The parameterless form exists for
        deserializers.
    """

    __slots__ = ('hash', 'salt', 'algo')

    def __init__(self, hash=b"", salt=b"", algo=HashAlgoID.NONE):
        self.hash = bytes(hash)
        self.salt = bytes(salt)
        self.algo = algo

    def to_dict(self):
        """
            Convert to a flat dict (bytes as hex, enum as int)
        """
        return {
            'hash': self.hash.hex(),
            'salt': self.salt.hex(),
            'algo': self.algo.value,
        }

    def to_json(self):
        return json.dumps(self.to_dict())

    def __repr__(self):
        return f"HashStore(algo={self.algo.name}, salt={self.salt.hex()!r})"

    def __eq__(self, other):
        if not isinstance(other, HashStore):
            return NotImplemented
        return (
            self.algo == other.algo
            and compare(self.hash, other.hash)
            and compare(self.salt, other.salt)
        )

    # mutable record; equality only
    __hash__ = None


def create_hash_store_from_dict(data):
    """
        Create HashStore from dict
    """
    return HashStore(
        hash=_bytes_from_hex(data.get('hash'), 'hash'),
        salt=_bytes_from_hex(data.get('salt'), 'salt'),
        algo=_enum_from_value(HashAlgoID, data.get('algo', HashAlgoID.NONE.value)),
    )


class CipherStore:
    """
        Ciphertext plus everything needed to decrypt and verify it, except the key

        Build with saltbox.security.stores.create_cipher_store and open with
        decrypt_cipher_store.
    """

    __slots__ = ('version', 'algo', 'plaintext_hash', 'iv', 'cipher_text')

    def __init__(
        self,
        version=CIPHER_STORE_VERSION,
        algo=CiphAlgoID.AES128_CBC,
        plaintext_hash=None,
        iv=b"",
        cipher_text=b"",
    ):
        self.version = version
        self.algo = algo
        self.plaintext_hash = plaintext_hash
        self.iv = bytes(iv)
        self.cipher_text = bytes(cipher_text)

    def to_dict(self):
        """
            Convert to dict; the plaintext hash nests as its own dict
        """
        return {
            'version': self.version,
            'algo': self.algo.value,
            'plaintext_hash': self.plaintext_hash.to_dict() if self.plaintext_hash is not None else None,
            'iv': self.iv.hex(),
            'cipher_text': self.cipher_text.hex(),
        }

    def to_json(self):
        return json.dumps(self.to_dict())

    def __repr__(self):
        return (
            f"CipherStore(version={self.version!r}, algo={self.algo.name}, "
            f"cipher_text_len={len(self.cipher_text)})"
        )

    def __eq__(self, other):
        if not isinstance(other, CipherStore):
            return NotImplemented
        return (
            self.version == other.version
            and self.algo == other.algo
            and self.plaintext_hash == other.plaintext_hash
            and compare(self.iv, other.iv)
            and compare(self.cipher_text, other.cipher_text)
        )

    __hash__ = None


def create_cipher_store_from_dict(data):
    """
        Create CipherStore from dict
    """
    version = data.get('version', CIPHER_STORE_VERSION)
    if not isinstance(version, int) or isinstance(version, bool):
        raise UnsupportedFormatError(f"version must be an integer, got {version!r}")

    hash_data = data.get('plaintext_hash')
    plaintext_hash = create_hash_store_from_dict(hash_data) if hash_data is not None else None

    return CipherStore(
        version=version,
        algo=_enum_from_value(CiphAlgoID, data.get('algo', CiphAlgoID.AES128_CBC.value)),
        plaintext_hash=plaintext_hash,
        iv=_bytes_from_hex(data.get('iv'), 'iv'),
        cipher_text=_bytes_from_hex(data.get('cipher_text'), 'cipher_text'),
    )


def load_hash_store_json(text):
    try:
        data = json.loads(text)
    except ValueError as e:
        raise UnsupportedFormatError("HashStore JSON is malformed") from e
    if not isinstance(data, dict):
        raise UnsupportedFormatError("HashStore JSON must be an object")
    return create_hash_store_from_dict(data)


def load_cipher_store_json(text):
    try:
        data = json.loads(text)
    except ValueError as e:
        raise UnsupportedFormatError("CipherStore JSON is malformed") from e
    if not isinstance(data, dict):
        raise UnsupportedFormatError("CipherStore JSON must be an object")
    return create_cipher_store_from_dict(data)
