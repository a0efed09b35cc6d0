"""Human-readable rendering of transaction fields for review screens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Union

from .strkey import (
    StrKeyError,
    encode_ed25519_public_key,
    encode_ed25519_signed_payload,
    encode_hash_x_key,
    encode_muxed_account,
    encode_pre_auth_tx_key,
)
from .types import (
    AssetType,
    ChangeTrustAsset,
    ClaimableBalanceId,
    MuxedAccount,
    NetworkType,
    SignedPayload,
    TrustLineAsset,
    Asset,
)

BINARY_MAX_SIZE = 36
MAX_TIME = 253402300799  # 9999-12-31 23:59:59
UINT64_MAX = (1 << 64) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
STROOPS_PER_UNIT = 10_000_000
# The integer part of an amount may hold at most 12 digits (922,337,203,685).
AMOUNT_LIMIT = 10**19

AUTHORIZED_FLAG = 0x01
AUTHORIZED_TO_MAINTAIN_LIABILITIES_FLAG = 0x02
TRUSTLINE_CLAWBACK_ENABLED_FLAG = 0x04

_ACCOUNT_FLAGS = (
    (0x01, "AUTH_REQUIRED"),
    (0x02, "AUTH_REVOCABLE"),
    (0x04, "AUTH_IMMUTABLE"),
    (0x08, "AUTH_CLAWBACK_ENABLED"),
)

_TRUST_LINE_FLAGS = (
    (AUTHORIZED_FLAG, "AUTHORIZED"),
    (AUTHORIZED_TO_MAINTAIN_LIABILITIES_FLAG, "AUTHORIZED_TO_MAINTAIN_LIABILITIES"),
    (TRUSTLINE_CLAWBACK_ENABLED_FLAG, "TRUSTLINE_CLAWBACK_ENABLED"),
)

AnyAsset = Union[Asset, TrustLineAsset, ChangeTrustAsset]


class FormatError(ValueError):
    """Raised when a value cannot be rendered."""


def _encode(encoder: Callable[..., str], *args: object) -> str:
    try:
        return encoder(*args)
    except StrKeyError as exc:
        raise FormatError(str(exc)) from exc


def _summarize_or_full(encoded: str, num_chars_l: int, num_chars_r: int) -> str:
    if num_chars_l > 0:
        return print_summary(encoded, num_chars_l, num_chars_r)
    return encoded


def print_summary(text: str, num_chars_l: int, num_chars_r: int) -> str:
    """Shorten ``text`` to its first and last characters joined by '..'."""
    if num_chars_l < 0 or num_chars_r < 0:
        raise FormatError("character counts must not be negative")
    result_len = num_chars_l + num_chars_r + 2
    if len(text) > result_len:
        return text[:num_chars_l] + ".." + text[len(text) - num_chars_r:]
    return text


def print_binary(data: bytes, num_chars_l: int, num_chars_r: int) -> str:
    """Hex-encode ``data``, summarized when ``num_chars_l`` is positive."""
    data = bytes(data)
    if num_chars_l > 0:
        if len(data) > BINARY_MAX_SIZE:
            raise FormatError(f"binary value longer than {BINARY_MAX_SIZE} bytes")
        return print_summary(data.hex(), num_chars_l, num_chars_r)
    return data.hex()


def print_account_id(account_id: bytes, num_chars_l: int, num_chars_r: int) -> str:
    encoded = _encode(encode_ed25519_public_key, account_id)
    return _summarize_or_full(encoded, num_chars_l, num_chars_r)


def print_hash_x_key(raw: bytes, num_chars_l: int, num_chars_r: int) -> str:
    encoded = _encode(encode_hash_x_key, raw)
    return _summarize_or_full(encoded, num_chars_l, num_chars_r)


def print_pre_auth_tx_key(raw: bytes, num_chars_l: int, num_chars_r: int) -> str:
    encoded = _encode(encode_pre_auth_tx_key, raw)
    return _summarize_or_full(encoded, num_chars_l, num_chars_r)


def print_ed25519_signed_payload(
    signed_payload: SignedPayload, num_chars_l: int, num_chars_r: int
) -> str:
    """Signed payload keys are always summarized."""
    encoded = _encode(encode_ed25519_signed_payload, signed_payload)
    return print_summary(encoded, num_chars_l, num_chars_r)


def print_muxed_account(account: MuxedAccount, num_chars_l: int, num_chars_r: int) -> str:
    encoded = _encode(encode_muxed_account, account)
    return _summarize_or_full(encoded, num_chars_l, num_chars_r)


def print_claimable_balance_id(
    balance_id: ClaimableBalanceId, num_chars_l: int, num_chars_r: int
) -> str:
    """Hex of the XDR form: a 4-byte type followed by the 32-byte id."""
    data = bytes([0, 0, 0, balance_id.type & 0xFF]) + bytes(balance_id.v0)
    return print_binary(data, num_chars_l, num_chars_r)


def print_uint(num: int) -> str:
    if not 0 <= num <= UINT64_MAX:
        raise FormatError("value is not an unsigned 64-bit integer")
    return str(num)


def print_int(num: int) -> str:
    if not INT64_MIN <= num <= INT64_MAX:
        raise FormatError("value is not a signed 64-bit integer")
    return str(num)


def print_time(seconds: int) -> str:
    """UTC time as 'YYYY-MM-DD hh:mm:ss'."""
    if not 0 <= seconds <= MAX_TIME:
        raise FormatError("time out of the range 1970-01-01 to 9999-12-31")
    moment = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds)
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def print_asset_name(asset: AnyAsset, network: NetworkType) -> str:
    if asset.type == AssetType.NATIVE:
        return "native" if network == NetworkType.UNKNOWN else "XLM"
    if asset.type in (AssetType.CREDIT_ALPHANUM4, AssetType.CREDIT_ALPHANUM12):
        code = bytes(asset.code or b"")
        return code.split(b"\0", 1)[0].decode("latin-1")
    raise FormatError(f"asset type {asset.type!r} has no name")


def print_asset(asset: AnyAsset, network: NetworkType) -> str:
    """Asset code, qualified with a shortened issuer for credit assets."""
    name = print_asset_name(asset, network)
    if asset.type == AssetType.NATIVE:
        return name
    return f"{name}@{print_account_id(asset.issuer, 3, 4)}"


def _join_flags(flags: int, table: tuple[tuple[int, str], ...]) -> str:
    return ", ".join(name for bit, name in table if flags & bit)


def print_account_flags(flags: int) -> str:
    return _join_flags(flags, _ACCOUNT_FLAGS)


def print_trust_line_flags(flags: int) -> str:
    return _join_flags(flags, _TRUST_LINE_FLAGS)


def print_allow_trust_flags(flag: int) -> str:
    if flag & AUTHORIZED_FLAG:
        return "AUTHORIZED"
    if flag & AUTHORIZED_TO_MAINTAIN_LIABILITIES_FLAG:
        return "AUTHORIZED_TO_MAINTAIN_LIABILITIES"
    return "UNAUTHORIZED"


def print_amount(
    amount: int,
    asset: AnyAsset | None = None,
    network: NetworkType = NetworkType.PUBLIC,
) -> str:
    """Render a stroop amount in units with thousands separators, optionally with its asset."""
    if not 0 <= amount < AMOUNT_LIMIT:
        raise FormatError("amount too large to display")
    whole, fraction = divmod(amount, STROOPS_PER_UNIT)
    fraction_text = f"{fraction:07d}".rstrip("0")
    text = f"{whole:,}"
    if fraction_text:
        text += "." + fraction_text
    if asset is not None:
        text += " " + print_asset(asset, network)
    return text


def is_printable_binary(data: bytes) -> bool:
    """True when every byte is printable ASCII."""
    return all(0x20 <= byte <= 0x7E for byte in bytes(data))