"""Key derivation for SaltBox: PBKDF2 (RFC 2898) and its fixed profiles."""
import logging
import os
import struct
import uuid
from typing import Dict, Optional, Union

from saltbox.config import get_settings
from saltbox.core.byteops import concat, xor
from saltbox.core.exceptions import InvalidParameterError
from saltbox.core.hashing import SHA1, HashFunction

from .mac import hmac_key_pads, hmac_with_pads

logger = logging.getLogger(__name__)

MAX_BLOCK_INDEX = 0xFFFFFFFF

# Fixed forever: changing any of these breaks every key derived so far.
# New use cases get a new function with new constants instead.
KEY_BYTES_SALT = uuid.UUID("7331c367-5645-4baa-8705-3d6912e9bc07").bytes_le
KEY_BYTES_COUNT = 4077
FAST_BYTES_SALT = b"\x01\x02\x03\x04"
FAST_BYTES_COUNT = 5

WPAPSK_COUNT = 4096
WPAPSK_LEN = 32
WPA_PASSPHRASE_LEN_MIN = 8
WPA_PASSPHRASE_LEN_MAX = 63

BytesLike = Union[bytes, bytearray, str]


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def generate_salt(length: int = 16) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def pbkdf2(
    password: BytesLike,
    salt: BytesLike,
    iterations: int,
    length: int,
    hash_function: HashFunction = SHA1,
    max_iterations: Optional[int] = None,
) -> bytes:
    """
    Derive ``length`` bytes from ``password`` and ``salt`` with PBKDF2.

    The PRF is HMAC over ``hash_function`` (HMAC-SHA1 by default). Iteration
    counts above ``max_iterations`` (default: the configured ceiling) are
    refused rather than honoured, since they usually come from untrusted input.
    """
    if iterations < 1:
        raise InvalidParameterError(f"iterations must be at least 1, got {iterations}")
    if length < 0:
        raise InvalidParameterError(f"length must not be negative, got {length}")

    ceiling = get_settings().max_iterations if max_iterations is None else max_iterations
    if iterations > ceiling:
        logger.warning("refusing PBKDF2 with %d iterations (ceiling %d)", iterations, ceiling)
        raise InvalidParameterError(f"iterations {iterations} exceeds the configured ceiling {ceiling}")

    h_len = hash_function.digest_size
    if (length + h_len - 1) // h_len > MAX_BLOCK_INDEX:
        raise InvalidParameterError("derived key too long")

    password = _to_bytes(password)
    salt = _to_bytes(salt)
    pads = hmac_key_pads(password, hash_function)

    key = bytearray()
    index = 1
    while len(key) < length:
        key += _block(pads, salt, iterations, index, hash_function)[: length - len(key)]
        index += 1
    return bytes(key)


def _block(pads, salt: bytes, iterations: int, index: int, hash_function: HashFunction) -> bytes:
    # F(P, S, c, i) = U_1 xor U_2 xor ... xor U_c
    u = hmac_with_pads(pads, concat(salt, struct.pack(">I", index)), hash_function)
    block = bytearray(u)
    for _ in range(2, iterations + 1):
        u = hmac_with_pads(pads, u, hash_function)
        xor(block, u)
    return bytes(block)


def derive_key_bytes(text: BytesLike, length: int) -> bytes:
    """
    Produce a repeatable key from a password or phrase.

    Intended for symmetric key material. Uses a fixed salt and count.
    """
    return pbkdf2(text, KEY_BYTES_SALT, KEY_BYTES_COUNT, length)


def derive_bytes(text: BytesLike, length: int) -> bytes:
    """Fast repeatable byte stream for non-secret uses such as nonces."""
    return pbkdf2(text, FAST_BYTES_SALT, FAST_BYTES_COUNT, length)


def wpa_psk(passphrase: BytesLike, ssid: BytesLike) -> bytes:
    """Convert a WPA passphrase and SSID into the 256-bit pre-shared key."""
    passphrase = _to_bytes(passphrase)
    if not WPA_PASSPHRASE_LEN_MIN <= len(passphrase) <= WPA_PASSPHRASE_LEN_MAX:
        raise InvalidParameterError(
            f"WPA passphrase must be {WPA_PASSPHRASE_LEN_MIN}..{WPA_PASSPHRASE_LEN_MAX} bytes"
        )
    return pbkdf2(passphrase, ssid, WPAPSK_COUNT, WPAPSK_LEN)


def kdf_params_to_dict(salt: bytes, iterations: int, length: int, hash_function: HashFunction = SHA1) -> Dict:
    return {
        "algo": f"pbkdf2-hmac-{hash_function.name}",
        "salt": salt.hex(),
        "iterations": iterations,
        "length": length,
    }
