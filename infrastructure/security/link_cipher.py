"""
AES-256-CBC cipher for stored download locations.

Envelope format is ``<hex iv>:<hex ciphertext>`` with PKCS7 padding, which is
what existing product rows already hold.
"""
from __future__ import annotations

import binascii
import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from domain.common.exceptions import ConfigurationException, DecryptionException


KEY_SIZE = 32
IV_SIZE = 16


def derive_key(secret: str) -> bytes:
    """UTF-8 encode, then truncate or right-pad with NUL bytes to 32 bytes.

    Lossy: two secrets sharing their first 32 bytes yield the same key.
    """
    raw = secret.encode("utf-8")
    return raw[:KEY_SIZE].ljust(KEY_SIZE, b"\x00")


class AesCbcLinkCipher:
    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationException("Link encryption key not configured")
        self._key = derive_key(secret)

    def encrypt(self, plaintext: str) -> str:
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return f"{iv.hex()}:{ciphertext.hex()}"

    def decrypt(self, envelope: str) -> str:
        iv_hex, sep, ct_hex = (envelope or "").partition(":")
        if not sep or not iv_hex or not ct_hex:
            raise DecryptionException("Malformed encrypted link")
        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(ct_hex)
        except (ValueError, binascii.Error) as exc:
            raise DecryptionException("Encrypted link is not valid hex") from exc
        if len(iv) != IV_SIZE or not ciphertext or len(ciphertext) % IV_SIZE:
            raise DecryptionException("Malformed encrypted link")

        decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise DecryptionException("Unable to decrypt link") from exc
