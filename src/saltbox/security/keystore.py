"""OS keystore persistence for SaltBox records using keyring.

HashStore and CipherStore records are stored as their JSON text under a
service/account pair. Use this only for opt-in convenience storage; do not
assume keyring provides hardware-backed security on all platforms.
"""
import keyring
from keyring.errors import PasswordDeleteError

from saltbox.core.exceptions import KeystoreError
from saltbox.core.models import (
    CipherStore,
    HashStore,
    load_cipher_store_json,
    load_hash_store_json,
)


def delete_record(service: str, account: str) -> bool:
    """Remove a stored record from the OS keystore. Returns False if nothing was stored."""
    try:
        keyring.delete_password(service, account)
    except PasswordDeleteError:
        return False
    return True


def save_hash_store(service: str, account: str, store: HashStore) -> None:
    keyring.set_password(service, account, store.to_json())


def load_hash_store(service: str, account: str) -> HashStore:
    """Load a HashStore saved with save_hash_store; KeystoreError if absent."""
    raw = keyring.get_password(service, account)
    if raw is None:
        raise KeystoreError(f"no HashStore stored for {service}/{account}")
    return load_hash_store_json(raw)


def save_cipher_store(service: str, account: str, store: CipherStore) -> None:
    keyring.set_password(service, account, store.to_json())


def load_cipher_store(service: str, account: str) -> CipherStore:
    """Load a CipherStore saved with save_cipher_store; KeystoreError if absent."""
    raw = keyring.get_password(service, account)
    if raw is None:
        raise KeystoreError(f"no CipherStore stored for {service}/{account}")
    return load_cipher_store_json(raw)


def assess_keyring_backend() -> tuple[bool, str]:
    """Return (is_secure, message) describing the current keyring backend.

    Heuristics are used because the `keyring` package exposes different backends
    across platforms.
    """
    backend = keyring.get_keyring()
    name = backend.__class__.__name__
    priority = getattr(backend, "priority", None)

    insecure_indicators = ("Plaintext", "Uncrypted", "Simple", "File")
    if any(tok in name for tok in insecure_indicators):
        return False, f"insecure backend detected: {name}"

    if priority is not None and priority <= 0:
        return False, f"no suitable secure keyring backend available (priority={priority}, backend={name})"

    # treat known platform backends as acceptable
    if "Win" in name or "Keychain" in name or "SecretService" in name or "KWallet" in name:
        return True, f"backend looks acceptable: {name} (priority={priority})"

    return True, f"unknown backend '{name}', treat with caution (priority={priority})"
