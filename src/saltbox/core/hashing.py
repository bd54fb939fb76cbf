""" Hash function capability consumed by HMAC and PBKDF2. """

import hashlib
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class HashFunction:
    """
    A fixed-block-size hash: bytes in, digest out.

    HMAC needs the compression block size B and PBKDF2 needs the digest
    length, so both travel with the callable. Any hash can be plugged in by
    building one of these; the MAC and KDF code never switch on ``name``.
    """

    name: str
    block_size: int
    digest_size: int
    func: Callable[[bytes], bytes]

    def __call__(self, data: bytes) -> bytes:
        return self.func(bytes(data))


def _hashlib_function(name: str) -> HashFunction:
    # Pull block/digest sizes from hashlib so they never drift from the real thing.
    probe = hashlib.new(name)
    return HashFunction(
        name=name,
        block_size=probe.block_size,
        digest_size=probe.digest_size,
        func=lambda data: hashlib.new(name, data).digest(),
    )


SHA1 = _hashlib_function("sha1")
MD5 = _hashlib_function("md5")
SHA256 = _hashlib_function("sha256")


def sha1(data) -> bytes:
    # str is hashed as its UTF-8 encoding
    if isinstance(data, str):
        data = data.encode("utf-8")
    return SHA1(data)
