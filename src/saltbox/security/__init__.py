"""Security helpers: MACs, key derivation and sealed records for SaltBox.

This package provides:
- HMAC over any HashFunction, and AES-CMAC
- PBKDF2 plus its fixed-salt profiles (key bytes, fast bytes, WPA-PSK)
- HashStore creation/verification and CipherStore sealing/opening
- random bytes and process-unique nonces
"""

from .mac import hmac, hmac_sha1, hmac_md5, cmac_aes128
from .kdf import pbkdf2, derive_key_bytes, derive_bytes, wpa_psk, generate_salt
from .nonce import random_bytes, random_int, nonce_bytes, nonce_string
from .stores import (
    create_hash_store,
    verify_hash_store,
    create_cipher_store,
    decrypt_cipher_store,
    decrypt_string,
)
from .selftest import run_self_tests

__all__ = [
    "hmac",
    "hmac_sha1",
    "hmac_md5",
    "cmac_aes128",
    "pbkdf2",
    "derive_key_bytes",
    "derive_bytes",
    "wpa_psk",
    "generate_salt",
    "random_bytes",
    "random_int",
    "nonce_bytes",
    "nonce_string",
    "create_hash_store",
    "verify_hash_store",
    "create_cipher_store",
    "decrypt_cipher_store",
    "decrypt_string",
    "run_self_tests",
]
