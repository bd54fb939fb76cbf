"""AES block cipher provider for SaltBox.

CipherStore uses AES-128 in CBC mode with PKCS#7 padding (pad length is always
1..16 bytes, never 0). Padding can be switched off so the raw RFC 3602 vectors
can be checked. CMAC needs single-block AES with no chaining, exposed as
``aes_encrypt_block``.
"""
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from saltbox.core.exceptions import InvalidParameterError


AES_BLOCK_LEN = 16  # bytes
AES128_KEYLEN = 16


def pkcs7_pad(data: bytes, block_len: int = AES_BLOCK_LEN) -> bytes:
    padder = padding.PKCS7(block_len * 8).padder()
    return padder.update(data) + padder.finalize()


def pkcs7_unpad(data: bytes, block_len: int = AES_BLOCK_LEN) -> bytes:
    """Strip PKCS#7 padding; raises ValueError when the padding is malformed."""
    unpadder = padding.PKCS7(block_len * 8).unpadder()
    return unpadder.update(data) + unpadder.finalize()


def _check_key_iv(key: bytes, iv: bytes) -> None:
    if len(key) != AES128_KEYLEN:
        raise InvalidParameterError(f"AES-128 key must be {AES128_KEYLEN} bytes, got {len(key)}")
    if len(iv) != AES_BLOCK_LEN:
        raise InvalidParameterError(f"IV must be {AES_BLOCK_LEN} bytes, got {len(iv)}")


def aes_cbc_encrypt(key: bytes, iv: bytes, data: bytes, pad: bool = True) -> bytes:
    _check_key_iv(key, iv)
    if pad:
        data = pkcs7_pad(data)
    elif len(data) % AES_BLOCK_LEN:
        raise InvalidParameterError("unpadded CBC input must be a multiple of the block length")
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(data) + encryptor.finalize()


def aes_cbc_decrypt(key: bytes, iv: bytes, data: bytes, pad: bool = True) -> bytes:
    _check_key_iv(key, iv)
    if len(data) % AES_BLOCK_LEN:
        raise InvalidParameterError("CBC ciphertext must be a multiple of the block length")
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    out = decryptor.update(data) + decryptor.finalize()
    if pad:
        out = pkcs7_unpad(out)
    return out


def aes_encrypt_block(key: bytes, block: bytes) -> bytes:
    """Encrypt exactly one 16-byte block with no chaining."""
    if len(block) != AES_BLOCK_LEN:
        raise InvalidParameterError(f"AES block must be {AES_BLOCK_LEN} bytes")
    encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
    return encryptor.update(block) + encryptor.finalize()
