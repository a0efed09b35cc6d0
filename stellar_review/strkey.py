"""StrKey and base64 encoding of keys and accounts."""

from __future__ import annotations

import base64

from .types import (
    ED25519_KEY_SIZE,
    SIGNED_PAYLOAD_MAX_SIZE,
    KeyType,
    MuxedAccount,
    SignedPayload,
)

VERSION_BYTE_ED25519_PUBLIC_KEY = 6 << 3
VERSION_BYTE_MUXED_ACCOUNT = 12 << 3
VERSION_BYTE_ED25519_SIGNED_PAYLOAD = 15 << 3
VERSION_BYTE_PRE_AUTH_TX_KEY = 19 << 3
VERSION_BYTE_HASH_X = 23 << 3

ENCODED_KEY_LENGTH = 56
ENCODED_MUXED_ACCOUNT_LENGTH = 69


class StrKeyError(ValueError):
    """Raised when a key cannot be encoded."""


def crc16(data: bytes) -> int:
    """CRC-16/XMODEM checksum (polynomial 0x1021, initial value 0)."""
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) if crc & 0x8000 else crc << 1
            crc &= 0xFFFF
    return crc


def base64_encode(data: bytes) -> str:
    """Standard padded base64."""
    return base64.b64encode(data).decode("ascii")


def _strkey(body: bytes) -> str:
    checksum = crc16(body).to_bytes(2, "little")
    return base64.b32encode(body + checksum).decode("ascii").rstrip("=")


def encode_key(raw: bytes, version_byte: int) -> str:
    """Encode a 32-byte key with the given version byte."""
    if len(raw) != ED25519_KEY_SIZE:
        raise StrKeyError(f"key must be {ED25519_KEY_SIZE} bytes, got {len(raw)}")
    if not 0 <= version_byte <= 0xFF:
        raise StrKeyError("version byte out of range")
    return _strkey(bytes([version_byte]) + bytes(raw))


def encode_ed25519_public_key(raw: bytes) -> str:
    return encode_key(raw, VERSION_BYTE_ED25519_PUBLIC_KEY)


def encode_hash_x_key(raw: bytes) -> str:
    return encode_key(raw, VERSION_BYTE_HASH_X)


def encode_pre_auth_tx_key(raw: bytes) -> str:
    return encode_key(raw, VERSION_BYTE_PRE_AUTH_TX_KEY)


def encode_ed25519_signed_payload(signed_payload: SignedPayload) -> str:
    """Encode an ed25519 signed payload signer."""
    payload = bytes(signed_payload.payload)
    if not 0 < len(payload) <= SIGNED_PAYLOAD_MAX_SIZE:
        raise StrKeyError(f"payload must be 1 to {SIGNED_PAYLOAD_MAX_SIZE} bytes")
    if len(signed_payload.ed25519) != ED25519_KEY_SIZE:
        raise StrKeyError(f"key must be {ED25519_KEY_SIZE} bytes")
    padding = (4 - len(payload) % 4) % 4
    body = (
        bytes([VERSION_BYTE_ED25519_SIGNED_PAYLOAD])
        + bytes(signed_payload.ed25519)
        + len(payload).to_bytes(4, "big")
        + payload
        + bytes(padding)
    )
    return _strkey(body)


def encode_muxed_account(account: MuxedAccount) -> str:
    """Encode an account as a G... key or, when multiplexed, an M... address."""
    if account.type == KeyType.ED25519:
        return encode_ed25519_public_key(account.ed25519)
    if len(account.ed25519) != ED25519_KEY_SIZE:
        raise StrKeyError(f"key must be {ED25519_KEY_SIZE} bytes")
    body = (
        bytes([VERSION_BYTE_MUXED_ACCOUNT])
        + bytes(account.ed25519)
        + account.id.to_bytes(8, "big")
    )
    return _strkey(body)