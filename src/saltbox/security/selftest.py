"""Known-answer self tests for the primitives.

Vectors:
- HMAC-SHA1: RFC 2202 section 3, plus the empty key/message case
- PBKDF2-HMAC-SHA1: RFC 6070 (the 16777216-iteration case is skipped; it takes minutes)
- AES-128-CBC: RFC 3602 cases 1-4, padding disabled
- AES-CMAC: RFC 4493 subkeys and examples 1-4
- WPA-PSK: IEEE 802.11i H.4.3
"""
import logging
from typing import Callable, Dict

from saltbox.core.byteops import compare, hex_to_bytes

from .crypto import aes_cbc_encrypt
from .kdf import pbkdf2, wpa_psk
from .mac import cmac_aes128, generate_subkeys, hmac_sha1

logger = logging.getLogger(__name__)


HMAC_SHA1_VECTORS = [
    # (key, data, digest)
    (b"", b"", "fbdb1d1b18aa6c08324b7d64b71fb76370690e1d"),
    (hex_to_bytes("0b" * 20), b"Hi There", "b617318655057264e28bc0b6fb378c8ef146be00"),
    (b"Jefe", b"what do ya want for nothing?", "effcdf6ae5eb2fa2d27416d5f184df9c259a7c79"),
    (hex_to_bytes("aa" * 20), hex_to_bytes("dd" * 50), "125d7342b9ac11cd91a39af48aa17b4f63f175d3"),
    (
        hex_to_bytes("0102030405060708090a0b0c0d0e0f10111213141516171819"),
        hex_to_bytes("cd" * 50),
        "4c9007f4026250c6bc8414f9bf50c86c2d7235da",
    ),
    (hex_to_bytes("0c" * 20), b"Test With Truncation", "4c1a03424b55e07fe7f27be1d58bb9324a9a5a04"),
    (
        hex_to_bytes("aa" * 80),
        b"Test Using Larger Than Block-Size Key - Hash Key First",
        "aa4ae5e15272d00e95705637ce8a3b55ed402112",
    ),
    (
        hex_to_bytes("aa" * 80),
        b"Test Using Larger Than Block-Size Key and Larger Than One Block-Size Data",
        "e8e99d0f45237d786d6bbaa7965c7808bbff1a91",
    ),
]

PBKDF2_VECTORS = [
    # (password, salt, iterations, length, derived key)
    (b"password", b"salt", 1, 20, "0c 60 c8 0f 96 1f 0e 71 f3 a9 b5 24 af 60 12 06 2f e0 37 a6"),
    (b"password", b"salt", 2, 20, "ea 6c 01 4d c7 2d 6f 8c cd 1e d9 2a ce 1d 41 f0 d8 de 89 57"),
    (b"password", b"salt", 4096, 20, "4b 00 79 01 b7 65 48 9a be ad 49 d9 26 f7 21 d0 65 a4 29 c1"),
    (
        b"passwordPASSWORDpassword",
        b"saltSALTsaltSALTsaltSALTsaltSALTsalt",
        4096,
        25,
        "3d 2e ec 4f e4 1c 84 9b 80 c8 d8 36 62 c0 e4 4a 8b 29 1a 96 4c f2 f0 70 38",
    ),
    (b"pass\0word", b"sa\0lt", 4096, 16, "56 fa 6a a7 55 48 09 9d cc 37 d7 f0 34 25 e0 c3"),
]

AES_CBC_VECTORS = [
    # (key, iv, plaintext, ciphertext)
    (
        "06a9214036b8a15b512e03d534120006",
        "3dafba429d9eb430b422da802c9fac41",
        b"Single block msg",
        "e353779c1079aeb82708942dbe77181a",
    ),
    (
        "c286696d887c9aa0611bbb3e2025a45a",
        "562e17996d093d28ddb3ba695a2e6f58",
        hex_to_bytes("000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"),
        "d296cd94c2cccf8a3a863028b5e1dc0a7586602d253cfff91b8266bea6d61ab1",
    ),
    (
        "6c3ea0477630ce21a2ce334aa746c2cd",
        "c782dc4c098c66cbd9cd27d825682c81",
        b"This is a 48-byte message (exactly 3 AES blocks)",
        "d0a02b3836451753d493665d33f0e8862dea54cdb293abc7506939276772f8d5021c19216bad525c8579695d83ba2684",
    ),
    (
        "56e47a38c5598974bc46903dba290349",
        "8ce82eefbea0da3c44699ed7db51b7d9",
        hex_to_bytes(
            "a0a1a2a3a4a5a6a7a8a9aaabacadaeafb0b1b2b3b4b5b6b7b8b9babbbcbdbebf"
            "c0c1c2c3c4c5c6c7c8c9cacbcccdcecfd0d1d2d3d4d5d6d7d8d9dadbdcdddedf"
        ),
        "c30e32ffedc0774e6aff6af0869f71aa0f3af07a9a31a9c684db207eb0ef8e4e"
        "35907aa632c3ffdf868bb7b29d3d46ad83ce9f9a102ee99d49a53e87f4c3da55",
    ),
]

CMAC_KEY = "2b7e151628aed2a6abf7158809cf4f3c"
CMAC_SUBKEYS = ("fbeed618357133667c85e08f7236a8de", "f7ddac306ae266ccf90bc11ee46d513b")
CMAC_VECTORS = [
    # (message, tag)
    ("", "bb1d6929e95937287fa37d129b756746"),
    ("6bc1bee22e409f96e93d7e117393172a", "070a16b46b4d4144f79bdd9dd04a287c"),
    (
        "6bc1bee22e409f96e93d7e117393172aae2d8a571e03ac9c9eb76fac45af8e5130c81c46a35ce411",
        "dfa66747de9ae63030ca32611497c827",
    ),
    (
        "6bc1bee22e409f96e93d7e117393172aae2d8a571e03ac9c9eb76fac45af8e51"
        "30c81c46a35ce411e5fbc1191a0a52eff69f2445df4f9b17ad2b417be66c3710",
        "51f0bebf7e3b9d92fc49741779363cfe",
    ),
]

WPA_PSK_VECTORS = [
    # (passphrase, ssid, psk)
    ("password", "IEEE", "f42c6fc52df0ebef9ebb4b90b38a5f902e83fe1b135a70e23aed762e9710a12e"),
    ("ThisIsAPassword", "ThisIsASSID", "0dc0d6eb90555ed6419756b9a15ec3e3209b63df707dd508d14581f8982721af"),
    ("a" * 32, "Z" * 32, "becb93866bb8c3832cb777c2f559807c8c59afcb6eae734885001300a981cc62"),
]


def check_hmac() -> bool:
    return all(
        compare(hmac_sha1(key, data), hex_to_bytes(digest))
        for key, data, digest in HMAC_SHA1_VECTORS
    )


def check_pbkdf2() -> bool:
    return all(
        compare(pbkdf2(password, salt, count, length), hex_to_bytes(dk, " "))
        for password, salt, count, length, dk in PBKDF2_VECTORS
    )


def check_aes_cbc() -> bool:
    return all(
        compare(aes_cbc_encrypt(hex_to_bytes(key), hex_to_bytes(iv), pt, pad=False), hex_to_bytes(ct))
        for key, iv, pt, ct in AES_CBC_VECTORS
    )


def check_cmac() -> bool:
    key = hex_to_bytes(CMAC_KEY)
    k1, k2 = generate_subkeys(key)
    if not (compare(k1, hex_to_bytes(CMAC_SUBKEYS[0])) and compare(k2, hex_to_bytes(CMAC_SUBKEYS[1]))):
        return False
    return all(
        compare(cmac_aes128(key, hex_to_bytes(msg)), hex_to_bytes(tag))
        for msg, tag in CMAC_VECTORS
    )


def check_wpa_psk() -> bool:
    return all(
        compare(wpa_psk(passphrase, ssid), hex_to_bytes(psk))
        for passphrase, ssid, psk in WPA_PSK_VECTORS
    )


SELF_TESTS: Dict[str, Callable[[], bool]] = {
    "hmac": check_hmac,
    "pbkdf2": check_pbkdf2,
    "aes_cbc": check_aes_cbc,
    "cmac": check_cmac,
    "wpa_psk": check_wpa_psk,
}


def run_self_tests() -> Dict[str, bool]:
    """Run every known-answer test; returns name -> passed."""
    results = {}
    for name, check in SELF_TESTS.items():
        results[name] = check()
        logger.info("self test %s: %s", name, "PASS" if results[name] else "FAIL")
    return results
