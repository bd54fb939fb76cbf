"""Random bytes and nonces.

Nonces are built from (UTC time + monotonic ticks + a process-wide counter)
which is enough on its own to never repeat within one process. A few random
bytes are mixed in so values are less predictable and differ across restarts.
The seed is run through the fast PBKDF2 profile, so nonces are unique, not
secret.
"""
from __future__ import annotations

import base64
import os
import struct
import threading
import time
from datetime import datetime, timezone

from .kdf import derive_bytes

NONCE_STRING_BYTES = 15


def random_bytes(count: int) -> bytes:
    """Return ``count`` cryptographically secure random bytes."""
    return os.urandom(count)


def random_int() -> int:
    """Return a random signed 32-bit integer."""
    return struct.unpack("<i", random_bytes(4))[0]


class NonceCounter:
    """Monotonically increasing call counter, safe to share between threads.

    Starts at 0; each ``next()`` returns the current value and bumps it.
    """

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._value
            self._value += 1
        return value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


# module-level counter; lives as long as the process
_default_counter = NonceCounter()


def get_counter() -> NonceCounter:
    return _default_counter


def _nonce_seed() -> str:
    return "|".join((
        datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S"),
        str(time.monotonic_ns()),
        str(get_counter().next()),
        random_bytes(8).hex(),
    ))


def nonce_bytes(count: int) -> bytes:
    return derive_bytes(_nonce_seed(), count)


def nonce_string() -> str:
    return base64.b64encode(derive_bytes(_nonce_seed(), NONCE_STRING_BYTES)).decode("ascii")
