"""Hashing, AES-256-CBC, encodings and Diffie-Hellman key agreement."""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
import secrets
import string
from dataclasses import dataclass
from typing import Tuple, Union

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

BytesLike = Union[bytes, bytearray, memoryview]
Data = Union[BytesLike, str]

AES_KEY_SIZE = 32
AES_IV_SIZE = 16
AES_BLOCK_SIZE = 16

HKDF_SALT = b"FileTrasferSalt"
HKDF_INFO = b"AES-256-CBC-Key-IV"

_CHARSET = string.digits + string.ascii_uppercase + string.ascii_lowercase
_HEX_RE = re.compile(r"[0-9a-fA-F]*")

# RFC 7919 ffdhe2048 group.
_FFDHE2048_P = int(
    "FFFFFFFFFFFFFFFFADF85458A2BB4A9AAFDC5620273D3CF1"
    "D8B9C583CE2D3695A9E13641146433FBCC939DCE249B3EF9"
    "7D2FE363630C75D8F681B202AEC4617AD3DF1ED5D5FD6561"
    "2433F51F5F066ED0856365553DED1AF3B557135E7F57C935"
    "984F0C70E0E68B77E2A689DAF3EFE8721DF158A136ADE735"
    "30ACCA4F483A797ABC0AB182B324FB61D108A94BB2C8E3FB"
    "B96ADAB760D7F4681D4F42A3DE394DF4AE56EDE76372BB19"
    "0B07A7C8EE0A6D709E02FCE1CDF7E2ECC03404CD28342F61"
    "9172FE9CE98583FF8E4F1232EEF28183C3FE3B1B4C6FAD73"
    "3BB5FCBC2EC22005C58EF1837D1683B2C6F34A26C1B2EFFA"
    "886B423861285C97FFFFFFFFFFFFFFFF",
    16,
)
_FFDHE2048_G = 2
_PRIVATE_KEY_BITS = 256


@dataclass(frozen=True)
class DHParams:
    """Diffie-Hellman group (``p``, ``g``) and a public key, all big-endian."""

    p: bytes
    g: bytes
    public_key: bytes


def _as_bytes(data: Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _int_to_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def _digest(name: str, data: Data) -> str:
    raw = _as_bytes(data)
    if not raw:
        return ""
    return hashlib.new(name, raw).hexdigest()


def md5(data: Data) -> str:
    """Hex MD5 digest of ``data``; empty input gives an empty string."""
    return _digest("md5", data)


def sha1(data: Data) -> str:
    """Hex SHA-1 digest of ``data``; empty input gives an empty string."""
    return _digest("sha1", data)


def sha256(data: Data) -> str:
    """Hex SHA-256 digest of ``data``; empty input gives an empty string."""
    return _digest("sha256", data)


def _check_key_iv(key: BytesLike, iv: BytesLike) -> None:
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"AES-256 key must be {AES_KEY_SIZE} bytes, got {len(key)}")
    if len(iv) != AES_IV_SIZE:
        raise ValueError(f"AES IV must be {AES_IV_SIZE} bytes, got {len(iv)}")


def aes_encrypt(data: BytesLike, key: BytesLike, iv: BytesLike) -> bytes:
    """Encrypt with AES-256-CBC and PKCS#7 padding; empty input gives b""."""
    _check_key_iv(key, iv)
    plain = bytes(data)
    if not plain:
        return b""
    padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
    padded = padder.update(plain) + padder.finalize()
    encryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv))).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_decrypt(data: BytesLike, key: BytesLike, iv: BytesLike) -> bytes:
    """Decrypt AES-256-CBC data; raises ValueError on malformed ciphertext."""
    _check_key_iv(key, iv)
    cipher_text = bytes(data)
    if not cipher_text:
        return b""
    if len(cipher_text) % AES_BLOCK_SIZE:
        raise ValueError("ciphertext length is not a multiple of the block size")
    decryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv))).decryptor()
    padded = decryptor.update(cipher_text) + decryptor.finalize()
    unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise ValueError("bad padding in decrypted data") from exc


def base64_encode(data: Data) -> str:
    """Standard padded Base64 of ``data``."""
    return base64.b64encode(_as_bytes(data)).decode("ascii")


def base64_decode(text: str) -> bytes:
    """Decode standard Base64; raises ValueError on invalid input."""
    if not text:
        return b""
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 data: {exc}") from exc


def random_bytes(length: int) -> bytes:
    """``length`` cryptographically secure random bytes."""
    if length < 0:
        raise ValueError("length must not be negative")
    return secrets.token_bytes(length)


def random_string(length: int) -> str:
    """Random string of ``length`` characters drawn from digits and ASCII letters."""
    return "".join(_CHARSET[byte % len(_CHARSET)] for byte in random_bytes(length))


def hex_encode(data: Data) -> str:
    """Lower-case hexadecimal form of ``data``."""
    return _as_bytes(data).hex()


def hex_decode(text: str) -> bytes:
    """Decode a hexadecimal string; raises ValueError on odd length or bad digits."""
    if len(text) % 2:
        raise ValueError("hex string must have an even length")
    if not _HEX_RE.fullmatch(text):
        raise ValueError("hex string holds non-hex characters")
    return bytes.fromhex(text)


def generate_dh_params() -> Tuple[DHParams, bytes]:
    """Generate a key pair in the ffdhe2048 group.

    Returns the group with the new public key, and the private key.
    """
    p = _FFDHE2048_P
    while True:
        private = secrets.randbits(_PRIVATE_KEY_BITS)
        if 2 <= private < p - 1:
            break
    public = pow(_FFDHE2048_G, private, p)
    params = DHParams(
        p=_int_to_bytes(p),
        g=_int_to_bytes(_FFDHE2048_G),
        public_key=_int_to_bytes(public),
    )
    return params, _int_to_bytes(private)


def compute_dh_shared_key(params: DHParams, private_key: BytesLike) -> bytes:
    """Shared secret from the peer's group and public key and our private key."""
    p = int.from_bytes(params.p, "big")
    g = int.from_bytes(params.g, "big")
    peer = int.from_bytes(params.public_key, "big")
    private = int.from_bytes(bytes(private_key), "big")
    if p < 3 or not 1 < g < p - 1:
        raise ValueError("invalid DH group parameters")
    if not 1 < peer < p - 1:
        raise ValueError("invalid DH peer public key")
    if not 0 < private < p:
        raise ValueError("invalid DH private key")
    shared = pow(peer, private, p)
    return _int_to_bytes(shared)


def derive_key_and_iv(shared_key: BytesLike) -> Tuple[bytes, bytes]:
    """Derive an AES-256 key and CBC IV from a shared secret with HKDF-SHA256."""
    secret = bytes(shared_key)
    if not secret:
        raise ValueError("shared key must not be empty")
    derived = HKDF(
        algorithm=hashes.SHA256(),
        length=AES_KEY_SIZE + AES_IV_SIZE,
        salt=HKDF_SALT,
        info=HKDF_INFO,
    ).derive(secret)
    return derived[:AES_KEY_SIZE], derived[AES_KEY_SIZE:]