"""
Exceptions for SaltBox
Everything derives from SaltBoxError so callers have a single catch-all
"""


class SaltBoxError(Exception):
    # general container for errors
    pass


class LengthMismatchError(SaltBoxError, ValueError):
    # raised when two buffers that must line up byte for byte do not
    pass


class InvalidParameterError(SaltBoxError, ValueError):
    # raised on zero iterations, negative lengths, malformed hex, bad settings
    pass


class UnsupportedAlgorithmError(SaltBoxError):
    # raised when a HashAlgoID / CiphAlgoID has no implementation
    pass


class UnsupportedFormatError(SaltBoxError):
    # raised when a loaded record carries an unknown version or algorithm
    pass


class IntegrityCheckFailedError(SaltBoxError):
    # raised on a hash mismatch after decryption (wrong key or corrupted store)
    pass


class KeystoreError(SaltBoxError):
    # raised when the OS keystore is missing a record or holds garbage
    pass
