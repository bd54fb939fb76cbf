"""Message authentication codes: HMAC (RFC 2104) and AES-CMAC (RFC 4493).

HMAC is written once against the HashFunction capability, so any fixed-block
hash works without touching the algorithm:

    H(K xor opad, H(K xor ipad, text))

where K is the key zero-extended to the hash block size B (keys longer than B
are hashed first), ipad is 0x36 repeated B times and opad is 0x5C repeated B
times.
"""
from typing import Tuple, Union

from saltbox.core.byteops import concat, xor
from saltbox.core.exceptions import InvalidParameterError
from saltbox.core.hashing import MD5, SHA1, HashFunction

from .crypto import AES_BLOCK_LEN, AES128_KEYLEN, aes_encrypt_block


HMAC_IPAD_BYTE = 0x36
HMAC_OPAD_BYTE = 0x5C

BytesLike = Union[bytes, bytearray, str]


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def hmac_key_pads(key: BytesLike, hash_function: HashFunction = SHA1) -> Tuple[bytes, bytes]:
    """Return ``(K xor ipad, K xor opad)`` for ``key``.

    Callers that MAC many messages under one key (PBKDF2) compute these once
    and hand them to :func:`hmac_with_pads`.
    """
    key = _to_bytes(key)
    block_size = hash_function.block_size

    # Working key: a hash of the caller's key when it is longer than a block.
    if len(key) > block_size:
        key = hash_function(key)
    padded = key + b"\x00" * (block_size - len(key))

    inner_key = xor(bytearray(padded), bytes([HMAC_IPAD_BYTE]) * block_size)
    outer_key = xor(bytearray(padded), bytes([HMAC_OPAD_BYTE]) * block_size)
    return bytes(inner_key), bytes(outer_key)


def hmac_with_pads(pads: Tuple[bytes, bytes], message: bytes, hash_function: HashFunction = SHA1) -> bytes:
    inner_key, outer_key = pads
    inner_hash = hash_function(concat(inner_key, message))
    return hash_function(concat(outer_key, inner_hash))


def hmac(key: BytesLike, message: BytesLike, hash_function: HashFunction = SHA1) -> bytes:
    """Return the HMAC of ``message`` under ``key`` using ``hash_function``."""
    pads = hmac_key_pads(key, hash_function)
    return hmac_with_pads(pads, _to_bytes(message), hash_function)


def hmac_sha1(key: BytesLike, message: BytesLike) -> bytes:
    return hmac(key, message, SHA1)


def hmac_md5(key: BytesLike, message: BytesLike) -> bytes:
    return hmac(key, message, MD5)


# --- AES-CMAC ---------------------------------------------------------------

_CONST_RB = 0x87
_ZERO_BLOCK = bytes(AES_BLOCK_LEN)


def _shift_left(block: bytes) -> bytearray:
    # One-bit left shift of a 128-bit big-endian value; the carried-out bit is dropped.
    value = (int.from_bytes(block, "big") << 1) & ((1 << (8 * AES_BLOCK_LEN)) - 1)
    return bytearray(value.to_bytes(AES_BLOCK_LEN, "big"))


def generate_subkeys(key: bytes) -> Tuple[bytes, bytes]:
    """Derive the CMAC subkeys (K1, K2) from an AES-128 key."""
    L = aes_encrypt_block(key, _ZERO_BLOCK)

    k1 = _shift_left(L)
    if L[0] & 0x80:
        k1[-1] ^= _CONST_RB

    k2 = _shift_left(k1)
    if k1[0] & 0x80:
        k2[-1] ^= _CONST_RB

    return bytes(k1), bytes(k2)


def cmac_aes128(key: BytesLike, message: BytesLike) -> bytes:
    """Return the 16-byte AES-CMAC tag of ``message`` under a 16-byte key."""
    key = _to_bytes(key)
    message = _to_bytes(message)
    if len(key) != AES128_KEYLEN:
        raise InvalidParameterError(f"CMAC-AES128 key must be {AES128_KEYLEN} bytes, got {len(key)}")

    k1, k2 = generate_subkeys(key)

    blocks = max(1, (len(message) + AES_BLOCK_LEN - 1) // AES_BLOCK_LEN)
    last = message[AES_BLOCK_LEN * (blocks - 1):]
    if len(last) == AES_BLOCK_LEN:
        m_last = xor(bytearray(last), k1)
    else:
        # 10* padding up to a full block
        padded = last + b"\x80" + b"\x00" * (AES_BLOCK_LEN - len(last) - 1)
        m_last = xor(bytearray(padded), k2)

    x = bytearray(_ZERO_BLOCK)
    for i in range(blocks - 1):
        xor(x, message[AES_BLOCK_LEN * i:AES_BLOCK_LEN * (i + 1)])
        x = bytearray(aes_encrypt_block(key, bytes(x)))

    xor(x, m_last)
    return aes_encrypt_block(key, bytes(x))
