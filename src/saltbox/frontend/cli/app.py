"""Command line front end for SaltBox.

Start here with `python -m saltbox.frontend.cli.app` or the `saltbox` script.

Examples::

    saltbox sha1 "hello"
    saltbox hmac "what do ya want for nothing?" Jefe
    saltbox pbkdf2 password salt -c 4096 -l 20
    saltbox encrypt "secret text" "my key" --out store.json
    saltbox decrypt "my key" --store store.json
    saltbox hash "hunter2" --static-salt app --keyring alice
    saltbox verify "hunter2" --static-salt app --keyring alice
    saltbox forget alice
    saltbox selftest
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from saltbox.config import get_settings
from saltbox.core.byteops import hex_to_bytes
from saltbox.core.exceptions import InvalidParameterError, SaltBoxError
from saltbox.core.hashing import MD5, SHA1, SHA256, sha1
from saltbox.core.models import HashAlgoID, load_cipher_store_json, load_hash_store_json
from saltbox.frontend.cli.clipboard import copy_to_clipboard
from saltbox.frontend.cli.logging_config import configure_logging
from saltbox.security import keystore
from saltbox.security.kdf import derive_bytes, derive_key_bytes, kdf_params_to_dict, pbkdf2, wpa_psk
from saltbox.security.mac import cmac_aes128, hmac
from saltbox.security.nonce import nonce_bytes, nonce_string
from saltbox.security.selftest import run_self_tests
from saltbox.security.stores import (
    create_cipher_store,
    create_hash_store,
    decrypt_string,
    verify_hash_store,
)

logger = logging.getLogger(__name__)

HASH_FUNCTIONS = {"sha1": SHA1, "md5": MD5, "sha256": SHA256}
HASH_ALGOS = {"sha1": HashAlgoID.SHA1, "pbkdf2": HashAlgoID.PBKDF2}


class CommandResult:
    def __init__(self, output: str, ok: bool = True):
        self.output = output
        self.ok = ok


# === Commands ===


def cmd_selftest(args) -> CommandResult:
    results = run_self_tests()
    lines = [f"{name:<8} : {'PASS' if passed else 'FAIL'}" for name, passed in results.items()]
    return CommandResult("\n".join(lines), ok=all(results.values()))


def cmd_sha1(args) -> CommandResult:
    return CommandResult(sha1(args.text).hex())


def cmd_hmac(args) -> CommandResult:
    return CommandResult(hmac(args.key, args.text, HASH_FUNCTIONS[args.hash]).hex())


def cmd_cmac(args) -> CommandResult:
    return CommandResult(cmac_aes128(hex_to_bytes(args.key_hex), hex_to_bytes(args.message_hex)).hex())


def cmd_pbkdf2(args) -> CommandResult:
    dk = pbkdf2(args.password, args.salt, args.iterations, args.length)
    if args.json:
        params = kdf_params_to_dict(args.salt.encode("utf-8"), args.iterations, args.length)
        params["key"] = dk.hex()
        return CommandResult(json.dumps(params))
    return CommandResult(dk.hex())


def cmd_derive(args) -> CommandResult:
    derive = derive_bytes if args.fast else derive_key_bytes
    return CommandResult(derive(args.text, args.length).hex())


def cmd_wpa_psk(args) -> CommandResult:
    return CommandResult(wpa_psk(args.passphrase, args.ssid).hex())


def cmd_nonce(args) -> CommandResult:
    if args.bytes is not None:
        return CommandResult(nonce_bytes(args.bytes).hex())
    return CommandResult(nonce_string())


def _write_or_return(json_text: str, out: Optional[str]) -> CommandResult:
    if out:
        Path(out).write_text(json_text, encoding="utf-8")
        return CommandResult(f"wrote {out}")
    return CommandResult(json_text)


def cmd_hash(args) -> CommandResult:
    store = create_hash_store(args.text, args.static_salt, HASH_ALGOS[args.algo])
    if args.keyring:
        keystore.save_hash_store(get_settings().keyring_service, args.keyring, store)
        return CommandResult(f"saved HashStore for {args.keyring}")
    return _write_or_return(store.to_json(), args.out)


def cmd_verify(args) -> CommandResult:
    if args.keyring:
        store = keystore.load_hash_store(get_settings().keyring_service, args.keyring)
    else:
        store = load_hash_store_json(_read_store(args.store))
    ok = verify_hash_store(store, args.text, args.static_salt)
    return CommandResult("OK" if ok else "MISMATCH", ok=ok)


def cmd_encrypt(args) -> CommandResult:
    store = create_cipher_store(args.text, args.key)
    if args.keyring:
        keystore.save_cipher_store(get_settings().keyring_service, args.keyring, store)
        return CommandResult(f"saved CipherStore for {args.keyring}")
    return _write_or_return(store.to_json(), args.out)


def cmd_decrypt(args) -> CommandResult:
    if args.keyring:
        store = keystore.load_cipher_store(get_settings().keyring_service, args.keyring)
    else:
        store = load_cipher_store_json(_read_store(args.store))
    try:
        text = decrypt_string(store, args.key)
    except UnicodeDecodeError as e:
        raise InvalidParameterError("decrypted plaintext is not UTF-8 text") from e
    return CommandResult(text)


def cmd_forget(args) -> CommandResult:
    removed = keystore.delete_record(get_settings().keyring_service, args.account)
    return CommandResult(f"removed {args.account}" if removed else f"nothing stored for {args.account}", ok=removed)


def cmd_keyring_status(args) -> CommandResult:
    is_secure, message = keystore.assess_keyring_backend()
    return CommandResult(message, ok=is_secure)


def _read_store(path: Optional[str]) -> str:
    if not path:
        raise InvalidParameterError("either --store or --keyring is required")
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


# === Parser ===


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="saltbox", description="SaltBox key derivation and sealed records")
    parser.add_argument("--log-level", default=None, help="override SALTBOX_LOG_LEVEL (e.g. DEBUG)")
    parser.add_argument("--copy", action="store_true", help="also copy the result to the clipboard")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("selftest", help="run known-answer tests")
    p.set_defaults(func=cmd_selftest)

    p = sub.add_parser("sha1", help="SHA-1 of a string")
    p.add_argument("text")
    p.set_defaults(func=cmd_sha1)

    p = sub.add_parser("hmac", help="HMAC of a string under a key")
    p.add_argument("text")
    p.add_argument("key")
    p.add_argument("--hash", choices=sorted(HASH_FUNCTIONS), default="sha1")
    p.set_defaults(func=cmd_hmac)

    p = sub.add_parser("cmac", help="AES-CMAC of hex message under a hex key")
    p.add_argument("message_hex")
    p.add_argument("key_hex")
    p.set_defaults(func=cmd_cmac)

    p = sub.add_parser("pbkdf2", help="PBKDF2-HMAC-SHA1")
    p.add_argument("password")
    p.add_argument("salt")
    p.add_argument("-c", "--iterations", type=int, default=4096)
    p.add_argument("-l", "--length", type=int, default=20)
    p.add_argument("--json", action="store_true", help="print parameters and key as JSON")
    p.set_defaults(func=cmd_pbkdf2)

    p = sub.add_parser("derive", help="repeatable key bytes from a phrase")
    p.add_argument("text")
    p.add_argument("-l", "--length", type=int, default=16)
    p.add_argument("--fast", action="store_true", help="non-cryptographic fast profile")
    p.set_defaults(func=cmd_derive)

    p = sub.add_parser("wpa-psk", help="WPA passphrase + SSID to PSK")
    p.add_argument("passphrase")
    p.add_argument("ssid")
    p.set_defaults(func=cmd_wpa_psk)

    p = sub.add_parser("nonce", help="process-unique nonce")
    p.add_argument("--bytes", type=int, default=None, help="emit N nonce bytes as hex instead of a base64 string")
    p.set_defaults(func=cmd_nonce)

    p = sub.add_parser("hash", help="create a HashStore")
    p.add_argument("text")
    p.add_argument("--static-salt", default="")
    p.add_argument("--algo", choices=sorted(HASH_ALGOS), default="sha1")
    p.add_argument("--out", default=None, help="write JSON to this file")
    p.add_argument("--keyring", metavar="ACCOUNT", default=None, help="save in the OS keystore")
    p.set_defaults(func=cmd_hash)

    p = sub.add_parser("verify", help="check text against a HashStore")
    p.add_argument("text")
    p.add_argument("--static-salt", default="")
    p.add_argument("--store", default=None, help="HashStore JSON file ('-' for stdin)")
    p.add_argument("--keyring", metavar="ACCOUNT", default=None)
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("encrypt", help="seal text in a CipherStore")
    p.add_argument("text")
    p.add_argument("key")
    p.add_argument("--out", default=None, help="write JSON to this file")
    p.add_argument("--keyring", metavar="ACCOUNT", default=None, help="save in the OS keystore")
    p.set_defaults(func=cmd_encrypt)

    p = sub.add_parser("decrypt", help="open a CipherStore")
    p.add_argument("key")
    p.add_argument("--store", default=None, help="CipherStore JSON file ('-' for stdin)")
    p.add_argument("--keyring", metavar="ACCOUNT", default=None)
    p.set_defaults(func=cmd_decrypt)

    p = sub.add_parser("forget", help="remove a record from the OS keystore")
    p.add_argument("account")
    p.set_defaults(func=cmd_forget)

    p = sub.add_parser("keyring-status", help="report whether the keyring backend looks secure")
    p.set_defaults(func=cmd_keyring_status)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = get_settings().log_level
        if args.log_level:
            level = logging.getLevelName(args.log_level.upper())
            if not isinstance(level, int):
                raise InvalidParameterError(f"unknown log level {args.log_level!r}")
        configure_logging(level)

        logger.debug("running %s", args.command)
        result = args.func(args)
    except (SaltBoxError, OSError) as e:
        print(f"saltbox: error: {e}", file=sys.stderr)
        return 1

    print(result.output)
    if args.copy:
        copy_to_clipboard(result.output)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
