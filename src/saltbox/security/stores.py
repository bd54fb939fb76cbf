"""
HashStore and CipherStore operations.

HashStore hash construction, selected by HashAlgoID:

- SHA1:   sha1(text || random_salt || static_salt)
- PBKDF2: pbkdf2(text, random_salt || static_salt, 2112, 32)

CipherStore encrypts with AES-128-CBC/PKCS#7 under a key derived from the
caller's key bytes (never the raw key):

    key = pbkdf2(caller_key || CIPHER_STORE_KPAD, CIPHER_STORE_SALT, 11717, 16)

and carries a SHA-1 HashStore of the plaintext, checked after every decryption.
A wrong key and a corrupted store both surface as IntegrityCheckFailedError.
"""

from __future__ import annotations

import logging
from typing import Union

from saltbox.core.byteops import compare, concat
from saltbox.core.exceptions import (
    IntegrityCheckFailedError,
    UnsupportedAlgorithmError,
    UnsupportedFormatError,
)
from saltbox.core.hashing import sha1
from saltbox.core.models import (
    CIPHER_STORE_VERSION,
    CiphAlgoID,
    CipherStore,
    HashAlgoID,
    HashStore,
)

from .crypto import AES_BLOCK_LEN, AES128_KEYLEN, aes_cbc_decrypt, aes_cbc_encrypt
from .kdf import generate_salt, pbkdf2
from .nonce import random_bytes

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, str]

HASH_STORE_SALT_LEN = 16
HASH_STORE_PBKDF2_COUNT = 2112
HASH_STORE_PBKDF2_LEN = 32

# Baked into every CipherStore ever written; must not change.
CIPHER_STORE_SALT = sha1("CIPHER_STORE_SALT")
CIPHER_STORE_KPAD = sha1("CIPHER_STORE_KPAD")
CIPHER_STORE_COUNT = 11717


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


# ----------------------------------------------------------------------
# HashStore
# ----------------------------------------------------------------------

def _hash3(text: bytes, salt_random: bytes, salt_static: bytes, algo: HashAlgoID) -> bytes:
    if algo is HashAlgoID.SHA1:
        return sha1(concat(text, salt_random, salt_static))
    if algo is HashAlgoID.PBKDF2:
        return pbkdf2(
            text,
            concat(salt_random, salt_static),
            HASH_STORE_PBKDF2_COUNT,
            HASH_STORE_PBKDF2_LEN,
        )
    raise UnsupportedAlgorithmError(f"no hash construction for {algo!r}")


def create_hash_store(
    text: BytesLike,
    static_salt: BytesLike,
    algo: HashAlgoID = HashAlgoID.SHA1,
) -> HashStore:
    """Hash ``text`` with a fresh random salt plus the caller's static salt."""
    salt = generate_salt(HASH_STORE_SALT_LEN)
    digest = _hash3(_to_bytes(text), salt, _to_bytes(static_salt), algo)
    return HashStore(hash=digest, salt=salt, algo=algo)


def verify_hash_store(store: HashStore, text: BytesLike, static_salt: BytesLike) -> bool:
    """Return True when ``text`` hashes to the value held in ``store``."""
    digest = _hash3(_to_bytes(text), store.salt, _to_bytes(static_salt), store.algo)
    return compare(store.hash, digest)


# ----------------------------------------------------------------------
# CipherStore
# ----------------------------------------------------------------------

def derive_cipher_key(key: BytesLike) -> bytes:
    """Turn caller key bytes into the AES-128 key a CipherStore is sealed with."""
    return pbkdf2(
        concat(_to_bytes(key), CIPHER_STORE_KPAD),
        CIPHER_STORE_SALT,
        CIPHER_STORE_COUNT,
        AES128_KEYLEN,
    )


def create_cipher_store(text: BytesLike, key: BytesLike) -> CipherStore:
    """Encrypt ``text`` under ``key`` and return the sealed record."""
    text = _to_bytes(text)
    aes_key = derive_cipher_key(key)
    iv = random_bytes(AES_BLOCK_LEN)

    # Integrity record is always SHA-1, whatever HashStore defaults to.
    plaintext_hash = create_hash_store(text, CIPHER_STORE_SALT, HashAlgoID.SHA1)
    cipher_text = aes_cbc_encrypt(aes_key, iv, text)

    logger.debug("sealed CipherStore: %d plaintext bytes -> %d ciphertext bytes", len(text), len(cipher_text))
    return CipherStore(
        version=CIPHER_STORE_VERSION,
        algo=CiphAlgoID.AES128_CBC,
        plaintext_hash=plaintext_hash,
        iv=iv,
        cipher_text=cipher_text,
    )


def _check_format(store: CipherStore) -> None:
    if store.version != CIPHER_STORE_VERSION:
        raise UnsupportedFormatError(f"unsupported CipherStore version {store.version!r}")
    if store.algo is not CiphAlgoID.AES128_CBC:
        raise UnsupportedFormatError(f"unsupported CipherStore algorithm {store.algo!r}")
    if store.plaintext_hash is None:
        raise UnsupportedFormatError("CipherStore has no plaintext hash")
    if len(store.iv) != AES_BLOCK_LEN:
        raise UnsupportedFormatError(f"CipherStore IV must be {AES_BLOCK_LEN} bytes")
    if not store.cipher_text or len(store.cipher_text) % AES_BLOCK_LEN:
        raise UnsupportedFormatError("CipherStore ciphertext is not a whole number of blocks")


def decrypt_cipher_store(store: CipherStore, key: BytesLike) -> bytes:
    """
    Decrypt ``store`` with ``key`` and return the verified plaintext.

    Raises UnsupportedFormatError before touching any crypto when the record is
    not something this version can open, and IntegrityCheckFailedError when
    the recovered plaintext does not match the stored hash.
    """
    _check_format(store)
    aes_key = derive_cipher_key(key)

    try:
        text = aes_cbc_decrypt(aes_key, store.iv, store.cipher_text)
    except ValueError as e:
        # Bad padding is what a wrong key usually looks like.
        logger.warning("CipherStore integrity check failed (padding)")
        raise IntegrityCheckFailedError("Error decrypting CipherStore") from e

    if not verify_hash_store(store.plaintext_hash, text, CIPHER_STORE_SALT):
        logger.warning("CipherStore integrity check failed (hash mismatch)")
        raise IntegrityCheckFailedError("Error decrypting CipherStore")

    logger.debug("opened CipherStore: %d plaintext bytes", len(text))
    return text


def decrypt_string(store: CipherStore, key: BytesLike) -> str:
    return decrypt_cipher_store(store, key).decode("utf-8")
